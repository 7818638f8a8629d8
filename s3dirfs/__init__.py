"""
s3dirfs: directory semantics for flat S3 object stores.

Directories are represented by zero-byte marker objects whose key ends in '/',
listings are driven by prefix/delimiter queries, and object metadata is mapped
to immutable link snapshots.
"""

from .adapters.base import (
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
from .adapters.s3 import S3FileSystemOperations, S3Options, s3_uri_to_options
from .errors import DirectoryNotEmptyError, S3DirFSError, UnsupportedOperationError
from .paths import normalize_directory_key
from .storage.resolver import (
    create_cloudflare_r2_file_system,
    create_file_system_operations,
    create_s3_file_system,
)

__version__ = "0.1.0"

__all__ = [
    "DirectoryLink",
    "DirectoryNotEmptyError",
    "FileHash",
    "FileHashAlgorithm",
    "FileLink",
    "FileSystemFlags",
    "FileSystemOperations",
    "LinkMetadata",
    "ListingOptions",
    "S3DirFSError",
    "S3FileSystemOperations",
    "S3Options",
    "StructureLink",
    "UnsupportedOperationError",
    "create_cloudflare_r2_file_system",
    "create_file_system_operations",
    "create_s3_file_system",
    "normalize_directory_key",
    "s3_uri_to_options",
]
