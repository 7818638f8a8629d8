"""Shared fixtures for s3dirfs tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from s3dirfs import S3FileSystemOperations, S3Options
from s3dirfs.testing import InMemoryS3Client, InMemoryS3Session


@pytest.fixture
def memory_client():
    return InMemoryS3Client(buckets=["test-bucket"])


@pytest.fixture
def memory_fs(memory_client):
    """Adapter backed by the in-memory store."""
    return S3FileSystemOperations(
        S3Options(bucket="test-bucket"), session=InMemoryS3Session(memory_client)
    )


@pytest.fixture
def mock_client():
    return AsyncMock()


@pytest.fixture
def mock_session(mock_client):
    """MagicMock session whose client() returns an async context manager."""
    context = MagicMock()
    context.__aenter__ = AsyncMock(return_value=mock_client)
    context.__aexit__ = AsyncMock(return_value=None)
    session = MagicMock()
    session.client.return_value = context
    return session
