#!/usr/bin/env python3
"""
Example of using s3dirfs against S3 or an S3-compatible service.

Requirements:
    pip install s3dirfs

    Configure the target via environment variables:
    - S3DIRFS_BUCKET (required)
    - S3DIRFS_ENDPOINT_URL, S3DIRFS_ACCESS_KEY, S3DIRFS_SECRET_KEY (optional,
      boto's credential chain is used when they are missing)
"""

import asyncio
import io
import logging

from s3dirfs import (
    DirectoryNotEmptyError,
    ListingOptions,
    S3FileSystemOperations,
    S3Options,
    create_s3_file_system,
)


async def example_with_env_options():
    """Walk through directory operations on the configured bucket."""

    async with S3FileSystemOperations(S3Options.from_env()) as fs:
        print(f"📦 Using bucket: {fs.name}")

        directory = await fs.create_directory("s3dirfs-example")
        print(f"📁 Created {directory.full_name} at {directory.last_write_time}")

        link = await fs.write_file("s3dirfs-example/hello.txt", "Hello from s3dirfs!")
        print(f"📝 Wrote {link.full_name} ({link.length} bytes, etag {link.hash.value})")

        for entry in await fs.get_links("s3dirfs-example", ListingOptions(include_directories=True)):
            kind = "dir " if entry.is_directory else "file"
            print(f"   {kind} {entry.full_name}")

        buffer = io.BytesIO()
        await fs.read_file("s3dirfs-example/hello.txt", buffer)
        print(f"📖 Read back: {buffer.read().decode('utf-8')}")

        try:
            await fs.delete_directory("s3dirfs-example", recursive=False)
        except DirectoryNotEmptyError as e:
            print(f"⚠️  {e}")

        await fs.delete_directory("s3dirfs-example", recursive=True)
        print(f"🧹 Removed, still exists: {await fs.exists('s3dirfs-example')}")


async def example_with_s3_compatible():
    """Example using S3-compatible service like MinIO."""

    fs = create_s3_file_system(
        "http://localhost:9000",  # MinIO endpoint
        "minioadmin",
        "minioadmin",
        "s3dirfs",
    )
    try:
        await fs.create_directory("reports/2025")
        links = await fs.get_links("reports", ListingOptions(recursive=True))
        print(f"\n🚀 MinIO has {len(links)} entries under reports/")
    finally:
        await fs.close()


async def main():
    """Run S3 examples."""

    print("=" * 60)
    print("s3dirfs Examples")
    print("=" * 60)

    try:
        await example_with_env_options()
    except Exception as e:
        print(f"⚠️  S3 example failed: {e}")
        print("   Make sure S3DIRFS_BUCKET is set and the bucket exists")

    try:
        await example_with_s3_compatible()
    except Exception as e:
        print(f"⚠️  S3-compatible example failed: {e}")
        print("   This example requires a local MinIO instance")

    print("\n" + "=" * 60)
    print("✨ Examples complete!")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
