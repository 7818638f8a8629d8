"""File-system adapters for s3dirfs."""

from .base import (
    BaseFileSystemOperations,
    DirectoryLink,
    FileHash,
    FileHashAlgorithm,
    FileLink,
    FileSystemFlags,
    FileSystemOperations,
    LinkMetadata,
    ListingOptions,
    StructureLink,
)
from .s3 import S3FileSystemOperations, S3Options, s3_uri_to_options

__all__ = [
    "BaseFileSystemOperations",
    "DirectoryLink",
    "FileHash",
    "FileHashAlgorithm",
    "FileLink",
    "FileSystemFlags",
    "FileSystemOperations",
    "LinkMetadata",
    "ListingOptions",
    "StructureLink",
    "S3FileSystemOperations",
    "S3Options",
    "s3_uri_to_options",
]
