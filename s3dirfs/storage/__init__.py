"""Storage utilities for s3dirfs."""

from .resolver import (
    create_cloudflare_r2_file_system,
    create_file_system_operations,
    create_s3_file_system,
)

__all__ = [
    "create_cloudflare_r2_file_system",
    "create_file_system_operations",
    "create_s3_file_system",
]
