"""Test doubles for s3dirfs."""

from .memory_client import (
    InMemoryPaginator,
    InMemoryS3Client,
    InMemoryS3Session,
    InMemoryStreamingBody,
    StoreOp,
)

__all__ = [
    "InMemoryPaginator",
    "InMemoryS3Client",
    "InMemoryS3Session",
    "InMemoryStreamingBody",
    "StoreOp",
]
