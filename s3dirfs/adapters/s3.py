"""AWS S3 file-system adapter for s3dirfs."""

import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Any, AsyncIterator, BinaryIO, Dict, List, Mapping, Optional
from urllib.parse import urlparse

from .base import (
    BaseFileSystemOperations,
    DirectoryLink,
    FileContent,
    FileHash,
    FileHashAlgorithm,
    FileLink,
    FileSystemFlags,
    LinkMetadata,
    ListingOptions,
    StructureLink,
)
from ..errors import DirectoryNotEmptyError, is_not_found_error
from ..observability import log_event
from ..paths import (
    DIRECTORY_SEPARATOR,
    has_extension,
    is_directory_key,
    normalize_directory_key,
)

logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 1024 * 1024

ENV_PREFIX = "S3DIRFS_"

_TRUE_VALUES = {"1", "true", "yes", "y"}
_FALSE_VALUES = {"0", "false", "no", "n"}


def _env_value(env: Mapping[str, str], name: str) -> Optional[str]:
    value = env.get(ENV_PREFIX + name)
    if value is None or not value.strip():
        return None
    return value.strip()


def _env_bool(env: Mapping[str, str], name: str, default: bool = False) -> bool:
    value = _env_value(env, name)
    if value is None:
        return default
    text = value.lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ValueError(f"{ENV_PREFIX}{name} must be a boolean, got {value!r}")


@dataclass
class S3Options:
    """Configuration options for the S3 file-system adapter."""

    bucket: str
    endpoint_url: Optional[str] = None  # For S3-compatible services
    access_key: Optional[str] = None
    secret_key: Optional[str] = None
    region: Optional[str] = None
    session_token: Optional[str] = None
    addressing_style: Optional[str] = None  # "path", "virtual" or "auto"
    verify_bucket: bool = False
    strict_resolve: bool = False
    """Let non-404 store errors escape get_link_info instead of reporting None."""

    def __post_init__(self) -> None:
        if not self.bucket:
            raise ValueError("bucket is required")

    @classmethod
    def from_env(
        cls, env: Optional[Mapping[str, str]] = None, **overrides: Any
    ) -> "S3Options":
        """
        Build options from ``S3DIRFS_*`` environment variables.

        Args:
            env: Mapping to read from, defaults to ``os.environ``
            **overrides: Field values that take precedence over the environment

        Returns:
            S3Options populated from the environment
        """
        if env is None:
            env = os.environ
        values: Dict[str, Any] = {
            "bucket": _env_value(env, "BUCKET"),
            "endpoint_url": _env_value(env, "ENDPOINT_URL"),
            "access_key": _env_value(env, "ACCESS_KEY"),
            "secret_key": _env_value(env, "SECRET_KEY"),
            "region": _env_value(env, "REGION"),
            "session_token": _env_value(env, "SESSION_TOKEN"),
            "addressing_style": _env_value(env, "ADDRESSING_STYLE"),
            "verify_bucket": _env_bool(env, "VERIFY_BUCKET"),
            "strict_resolve": _env_bool(env, "STRICT_RESOLVE"),
        }
        values.update(overrides)
        return cls(**values)


def _build_link(
    key: str, last_modified: Any, length: Optional[int], etag: Optional[str]
) -> StructureLink:
    if is_directory_key(key):
        return DirectoryLink(
            full_name=key, creation_time=last_modified, last_write_time=last_modified
        )
    return FileLink(
        full_name=key,
        creation_time=last_modified,
        last_write_time=last_modified,
        length=length or 0,
        hash=FileHash(FileHashAlgorithm.MD5, etag or ""),
    )


def link_from_metadata(key: str, response: Mapping[str, Any]) -> StructureLink:
    """
    Build a link from a HEAD (or GET) object response.

    Args:
        key: The key that was looked up
        response: The store response

    Returns:
        A DirectoryLink for keys ending in '/', otherwise a FileLink
    """
    return _build_link(
        key,
        response.get("LastModified"),
        response.get("ContentLength"),
        response.get("ETag"),
    )


def link_from_list_entry(entry: Mapping[str, Any]) -> StructureLink:
    """Build a link from one ``Contents`` entry of a listing page."""
    return _build_link(
        entry["Key"], entry.get("LastModified"), entry.get("Size"), entry.get("ETag")
    )


class S3FileSystemOperations(BaseFileSystemOperations):
    """
    File-system operations on top of a single S3 bucket.

    Directories are zero-byte marker objects whose key ends in '/'. The
    adapter owns one async S3 client, opened on first use (or with
    ``open()`` / ``async with``) and released by ``close()``.
    """

    kind = "s3"
    directory_separator = DIRECTORY_SEPARATOR
    flags = FileSystemFlags.IS_DIRECTORY_AS_PREFIX

    def __init__(self, options: S3Options, session: Any = None):
        """
        Initialize the S3 adapter.

        Args:
            options: S3 configuration options
            session: Object with an aioboto3-style ``client("s3", ...)``
                method; a new ``aioboto3.Session`` when omitted
        """
        if session is None:
            try:
                import aioboto3
            except ImportError:
                raise ImportError(
                    "aioboto3 is required for S3 storage. Install with: pip install s3dirfs"
                )
            session = aioboto3.Session()

        self.options = options
        self.bucket = options.bucket
        self._session = session
        self._client_context = None
        self._client = None
        self._closed = False
        self._open_lock = asyncio.Lock()

    @property
    def name(self) -> str:
        return self.bucket

    def _client_kwargs(self) -> Dict[str, Any]:
        from botocore.config import Config

        options = self.options
        client_kwargs: Dict[str, Any] = {"service_name": "s3"}
        if options.region:
            client_kwargs["region_name"] = options.region
        if options.endpoint_url:
            client_kwargs["endpoint_url"] = options.endpoint_url
        if options.access_key and options.secret_key:
            client_kwargs["aws_access_key_id"] = options.access_key
            client_kwargs["aws_secret_access_key"] = options.secret_key
            if options.session_token:
                client_kwargs["aws_session_token"] = options.session_token
        if options.addressing_style:
            client_kwargs["config"] = Config(
                s3={"addressing_style": options.addressing_style}
            )
        return client_kwargs

    async def open(self) -> None:
        """
        Open the S3 client.

        Raises:
            RuntimeError: If the adapter was already closed
            ValueError: If ``verify_bucket`` is set and the bucket is not accessible
        """
        async with self._open_lock:
            if self._closed:
                raise RuntimeError(f"{self} is closed")
            if self._client is not None:
                return

            context = self._session.client(**self._client_kwargs())
            client = await context.__aenter__()
            if self.options.verify_bucket:
                try:
                    await client.head_bucket(Bucket=self.bucket)
                except Exception as e:
                    await context.__aexit__(None, None, None)
                    raise ValueError(f"Cannot access S3 bucket '{self.bucket}': {e}") from e

            self._client_context = context
            self._client = client
            log_event(
                logger,
                "S3 client opened",
                bucket=self.bucket,
                endpoint=self.options.endpoint_url,
            )

    async def close(self) -> None:
        """
        Release the S3 client. Calling it again is a no-op.

        Waits for an ``open()`` in progress, so a client entered
        concurrently is still exited here.
        """
        async with self._open_lock:
            if self._closed:
                return
            self._closed = True
            context = self._client_context
            self._client_context = None
            self._client = None
            if context is not None:
                await context.__aexit__(None, None, None)
                log_event(logger, "S3 client closed", bucket=self.bucket)

    async def __aenter__(self) -> "S3FileSystemOperations":
        await self.open()
        return self

    async def _ensure_client(self):
        if self._client is None or self._closed:
            await self.open()
        return self._client

    # Link resolution

    async def _get_link_info_core(self, client, key: str) -> StructureLink:
        log_event(logger, "head_object", logging.DEBUG, bucket=self.bucket, key=key)
        response = await client.head_object(Bucket=self.bucket, Key=key)
        return link_from_metadata(key, response)

    def _absorb_lookup_error(self, key: str, exc: Exception) -> None:
        if is_not_found_error(exc):
            return
        if self.options.strict_resolve:
            raise exc
        logger.warning("Lookup of %r in bucket %r failed: %s", key, self.bucket, exc)

    async def get_link_info(self, full_name: str) -> Optional[StructureLink]:
        """
        Resolve a path to a file or directory link.

        The path is looked up as-is first. When that fails and the name
        has no file extension, the lookup is retried as a directory marker
        (``name/``), since callers often omit the trailing separator.

        Args:
            full_name: Key of a file or directory

        Returns:
            The link, or None when neither lookup succeeds
        """
        client = await self._ensure_client()
        try:
            return await self._get_link_info_core(client, full_name)
        except Exception as exc:
            self._absorb_lookup_error(full_name, exc)

        if has_extension(full_name):
            return None

        directory_key = normalize_directory_key(full_name)
        try:
            return await self._get_link_info_core(client, directory_key)
        except Exception as exc:
            self._absorb_lookup_error(directory_key, exc)
        return None

    # Content

    async def read_file(self, full_name: str, stream: BinaryIO) -> None:
        """
        Stream object content into ``stream``.

        The stream is rewound to its start when the copy completes.

        Args:
            full_name: Key of the file
            stream: Writable, seekable binary stream
        """
        client = await self._ensure_client()
        response = await client.get_object(Bucket=self.bucket, Key=full_name)
        async with response["Body"] as body:
            while True:
                chunk = await body.read(READ_CHUNK_SIZE)
                if not chunk:
                    break
                stream.write(chunk)
        stream.seek(0)

    async def write_file(
        self, full_name: str, content: FileContent, overwrite: bool = True
    ) -> FileLink:
        """
        Upload content to the object at ``full_name``.

        S3 replaces existing objects unconditionally, so ``overwrite`` is
        accepted for interface compatibility only.

        Args:
            full_name: Key of the file
            content: Text (encoded as UTF-8), bytes or a readable binary stream
            overwrite: Ignored by this backend

        Returns:
            The link read back from the store after the upload
        """
        if is_directory_key(full_name):
            raise ValueError(f"File key must not end with '{DIRECTORY_SEPARATOR}': {full_name}")

        # Convert body to bytes if it's a string
        if isinstance(content, str):
            body = content.encode("utf-8")
        else:
            body = content

        client = await self._ensure_client()
        await client.put_object(Bucket=self.bucket, Key=full_name, Body=body)
        response = await client.head_object(Bucket=self.bucket, Key=full_name)
        link = link_from_metadata(full_name, response)
        log_event(
            logger,
            "Wrote file",
            bucket=self.bucket,
            key=full_name,
            size=link.length,
            overwrite=overwrite,
        )
        return link

    async def delete_file(self, full_name: str) -> None:
        client = await self._ensure_client()
        await client.delete_object(Bucket=self.bucket, Key=full_name)
        log_event(logger, "Deleted file", bucket=self.bucket, key=full_name)

    # Directories

    async def create_directory(self, full_name: str) -> StructureLink:
        """
        Create (or overwrite) the directory marker object.

        Args:
            full_name: Directory path, with or without a trailing '/'

        Returns:
            The directory link read back from the store
        """
        key = normalize_directory_key(full_name)
        client = await self._ensure_client()
        await client.put_object(Bucket=self.bucket, Key=key, Body=b"")
        response = await client.head_object(Bucket=self.bucket, Key=key)
        log_event(logger, "Created directory", bucket=self.bucket, key=key)
        return link_from_metadata(key, response)

    async def _iter_pages(
        self, client, prefix: str, delimiter: Optional[str] = None
    ) -> AsyncIterator[Dict[str, Any]]:
        """Yield ``list_objects_v2`` pages until the listing is exhausted."""
        request: Dict[str, Any] = {"Bucket": self.bucket, "Prefix": prefix}
        if delimiter:
            request["Delimiter"] = delimiter

        paginator = client.get_paginator("list_objects_v2")
        async for page in paginator.paginate(**request):
            log_event(
                logger,
                "list_objects_v2",
                logging.DEBUG,
                bucket=self.bucket,
                prefix=prefix,
                delimiter=delimiter,
                keys=page.get("KeyCount"),
            )
            yield page

    async def get_links(
        self, full_name: str, options: Optional[ListingOptions] = None
    ) -> List[StructureLink]:
        """
        List the entries under a directory.

        Non-recursive listings use '/' as delimiter, so only the immediate
        children are returned; child directories come back as common
        prefixes and are resolved one by one when ``include_directories``
        is set. Recursive listings return every object under the prefix.
        The directory's own marker is never part of the result.

        Args:
            full_name: Directory path
            options: Listing options; ``recursive_handled`` is set to True

        Returns:
            Links in the order the store lists them
        """
        if options is None:
            options = ListingOptions()
        options.recursive_handled = True

        prefix = normalize_directory_key(full_name)
        delimiter = None if options.recursive else DIRECTORY_SEPARATOR
        client = await self._ensure_client()

        result: List[StructureLink] = []
        async for page in self._iter_pages(client, prefix, delimiter):
            for entry in page.get("Contents", []) or []:
                if entry["Key"] == prefix:
                    continue
                result.append(link_from_list_entry(entry))

            if options.recursive or not options.include_directories:
                continue
            for common_prefix in page.get("CommonPrefixes", []) or []:
                link = await self.get_link_info(common_prefix["Prefix"])
                if link is not None:
                    result.append(link)

        return result

    async def delete_directory(self, full_name: str, recursive: bool) -> None:
        """
        Delete a directory.

        Args:
            full_name: Directory path
            recursive: Delete everything under the prefix, page by page. When
                False only the marker is deleted, and only if nothing else
                lives under the prefix.

        Raises:
            DirectoryNotEmptyError: If not recursive and the directory has content
        """
        prefix = normalize_directory_key(full_name)
        client = await self._ensure_client()

        if recursive:
            deleted = 0
            async for page in self._iter_pages(client, prefix):
                keys = [entry["Key"] for entry in page.get("Contents", []) or []]
                if not keys:
                    continue
                await client.delete_objects(
                    Bucket=self.bucket,
                    Delete={"Objects": [{"Key": key} for key in keys], "Quiet": True},
                )
                deleted += len(keys)
            log_event(
                logger,
                "Deleted directory",
                bucket=self.bucket,
                key=prefix,
                recursive=True,
                objects=deleted,
            )
            return

        page = await client.list_objects_v2(
            Bucket=self.bucket, Prefix=prefix, Delimiter=DIRECTORY_SEPARATOR
        )
        contents = page.get("Contents", []) or []
        if any(entry["Key"] != prefix for entry in contents) or page.get("CommonPrefixes"):
            raise DirectoryNotEmptyError(prefix)

        await client.delete_object(Bucket=self.bucket, Key=prefix)
        log_event(logger, "Deleted directory", bucket=self.bucket, key=prefix, recursive=False)

    # Metadata

    async def update_metadata(
        self, link: StructureLink, metadata: LinkMetadata
    ) -> Optional[StructureLink]:
        """
        Re-read the link's metadata.

        S3 sets timestamps itself and has no hidden/read-only flags, so the
        requested changes are not applied; the fresh snapshot is returned.
        """
        key = link.full_name
        if link.is_directory:
            key = normalize_directory_key(key)
        if metadata != LinkMetadata():
            log_event(
                logger,
                "Ignoring unsupported metadata update",
                logging.DEBUG,
                bucket=self.bucket,
                key=key,
            )
        client = await self._ensure_client()
        response = await client.head_object(Bucket=self.bucket, Key=key)
        return link_from_metadata(key, response)

    def __str__(self) -> str:
        """Return a human-readable identifier for this adapter."""
        return f"s3://{self.bucket}"


def s3_uri_to_options(uri: str, env: Optional[Mapping[str, str]] = None) -> S3Options:
    """
    Parse an S3 URI into adapter options.

    Credentials and endpoint come from ``S3DIRFS_*`` environment variables.
    Keys map to file-system paths verbatim, so the URI may only name a bucket.

    Args:
        uri: S3 URI in the format s3://bucket
        env: Environment mapping, defaults to ``os.environ``

    Returns:
        S3Options for the bucket

    Examples:
        >>> s3_uri_to_options("s3://my-bucket", env={}).bucket
        'my-bucket'
    """
    parsed = urlparse(uri)

    if parsed.scheme != "s3":
        raise ValueError(f"Invalid S3 URI scheme: {uri}")

    bucket = parsed.netloc
    if not bucket:
        raise ValueError(f"No bucket specified in S3 URI: {uri}")

    if parsed.path.strip("/"):
        raise ValueError(f"S3 URI must not contain a key prefix: {uri}")

    return S3Options.from_env(env, bucket=bucket)
