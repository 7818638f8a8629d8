"""File-system operations resolution and creation utilities."""

from typing import Any, Mapping, Optional, Union
from urllib.parse import urlparse

from ..adapters.base import FileSystemOperations
from ..adapters.s3 import S3FileSystemOperations, S3Options, s3_uri_to_options

CLOUDFLARE_R2_ENDPOINT = "https://{account_id}.r2.cloudflarestorage.com"


def create_s3_file_system(
    service_url: str,
    access_key: str,
    secret_key: str,
    bucket_name: str,
    session: Any = None,
) -> S3FileSystemOperations:
    """
    Create S3 file-system operations for one bucket.

    Args:
        service_url: Endpoint URL of the S3 (or S3-compatible) service
        access_key: Access key id
        secret_key: Secret access key
        bucket_name: Bucket to operate on
        session: Optional aioboto3-compatible session

    Returns:
        An S3FileSystemOperations instance, not yet connected

    Raises:
        ValueError: If bucket_name is empty
    """
    options = S3Options(
        bucket=bucket_name,
        endpoint_url=service_url,
        access_key=access_key,
        secret_key=secret_key,
    )
    return S3FileSystemOperations(options, session=session)


def create_cloudflare_r2_file_system(
    account_id: str,
    access_key: str,
    secret_key: str,
    bucket_name: str,
    session: Any = None,
) -> S3FileSystemOperations:
    """Create S3 file-system operations for a Cloudflare R2 bucket."""
    return create_s3_file_system(
        CLOUDFLARE_R2_ENDPOINT.format(account_id=account_id),
        access_key,
        secret_key,
        bucket_name,
        session=session,
    )


def create_file_system_operations(
    uri_or_operations: Optional[Union[str, FileSystemOperations]] = None,
    env: Optional[Mapping[str, str]] = None,
    session: Any = None,
) -> FileSystemOperations:
    """
    Create or return file-system operations from a URI string or instance.

    Args:
        uri_or_operations: Either:
            - An S3 URI string (e.g., "s3://bucket")
            - An existing FileSystemOperations instance
            - None (bucket taken from the S3DIRFS_BUCKET environment variable)
        env: Environment mapping used for credentials, defaults to os.environ
        session: Optional aioboto3-compatible session

    Returns:
        A FileSystemOperations instance

    Raises:
        ValueError: If the URI scheme is not supported or no bucket is configured
    """
    # If already an operations object, return it
    if uri_or_operations is not None and hasattr(uri_or_operations, "get_link_info"):
        return uri_or_operations

    if uri_or_operations is None:
        return S3FileSystemOperations(S3Options.from_env(env), session=session)

    uri = str(uri_or_operations)
    parsed = urlparse(uri)

    if parsed.scheme == "s3":
        return S3FileSystemOperations(s3_uri_to_options(uri, env=env), session=session)
    raise ValueError(f"Unsupported file system URI scheme: {parsed.scheme}")
