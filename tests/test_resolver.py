"""Tests for file-system operations factories."""

import pytest

from s3dirfs import (
    S3FileSystemOperations,
    create_cloudflare_r2_file_system,
    create_file_system_operations,
    create_s3_file_system,
)
from s3dirfs.testing import InMemoryS3Session


class TestFactories:
    """Test the S3 and R2 factories."""

    def test_create_s3_file_system(self):
        fs = create_s3_file_system(
            "http://localhost:9000", "minio", "minio123", "bucket", session=InMemoryS3Session()
        )

        assert isinstance(fs, S3FileSystemOperations)
        assert fs.bucket == "bucket"
        assert fs.options.endpoint_url == "http://localhost:9000"
        assert fs.options.access_key == "minio"
        assert fs.options.secret_key == "minio123"

    def test_create_s3_file_system_requires_bucket(self):
        with pytest.raises(ValueError):
            create_s3_file_system("http://localhost:9000", "a", "b", None, session=InMemoryS3Session())

    def test_create_cloudflare_r2_file_system(self):
        fs = create_cloudflare_r2_file_system(
            "abc123", "key", "secret", "assets", session=InMemoryS3Session()
        )
        assert fs.options.endpoint_url == "https://abc123.r2.cloudflarestorage.com"
        assert fs.name == "assets"

    @pytest.mark.asyncio
    async def test_factory_client_receives_credentials(self):
        session = InMemoryS3Session()
        fs = create_s3_file_system("http://localhost:9000", "minio", "minio123", "test-bucket", session=session)

        await fs.open()

        assert session.client_kwargs == [
            {
                "service_name": "s3",
                "endpoint_url": "http://localhost:9000",
                "aws_access_key_id": "minio",
                "aws_secret_access_key": "minio123",
            }
        ]


class TestCreateFileSystemOperations:
    """Test URI based resolution."""

    def test_returns_existing_operations(self):
        fs = create_s3_file_system("http://h", "a", "b", "bucket", session=InMemoryS3Session())
        assert create_file_system_operations(fs) is fs

    def test_from_s3_uri(self):
        fs = create_file_system_operations(
            "s3://data", env={"S3DIRFS_ENDPOINT_URL": "http://minio:9000"}, session=InMemoryS3Session()
        )
        assert isinstance(fs, S3FileSystemOperations)
        assert fs.bucket == "data"
        assert fs.options.endpoint_url == "http://minio:9000"

    def test_from_env_when_none(self):
        fs = create_file_system_operations(
            None, env={"S3DIRFS_BUCKET": "from-env"}, session=InMemoryS3Session()
        )
        assert fs.bucket == "from-env"

    def test_none_without_bucket(self):
        with pytest.raises(ValueError, match="bucket is required"):
            create_file_system_operations(None, env={}, session=InMemoryS3Session())

    def test_unsupported_scheme(self):
        with pytest.raises(ValueError, match="Unsupported file system URI scheme"):
            create_file_system_operations("file:///tmp/data", env={}, session=InMemoryS3Session())
