"""Base file-system operations protocol and link types."""

import enum
import io
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import BinaryIO, List, Optional, Protocol, Union

from ..errors import UnsupportedOperationError

FileContent = Union[str, bytes, BinaryIO]


class FileHashAlgorithm(enum.Enum):
    """Hash algorithms a link can report."""

    MD5 = "md5"


class FileSystemFlags(enum.Flag):
    """Capabilities a backend advertises to the file-system facade."""

    NONE = 0
    IS_DIRECTORY_AS_PREFIX = enum.auto()


@dataclass(frozen=True)
class FileHash:
    """
    Content hash reported for a file.

    For S3 the value is the entity tag as returned by the store. It equals
    the MD5 of the content only for single-part uploads; multipart uploads
    produce tags shaped like ``"<digest>-<parts>"``.
    """

    algorithm: FileHashAlgorithm
    value: str

    @property
    def is_multipart(self) -> bool:
        return "-" in self.value.strip('"')


@dataclass(frozen=True)
class StructureLink:
    """Snapshot of one entry in the namespace."""

    full_name: str
    is_directory: Optional[bool] = None
    creation_time: Optional[datetime] = None
    last_write_time: Optional[datetime] = None
    exists: bool = field(default=True, init=False)
    is_hidden: bool = field(default=False, init=False)
    is_read_only: bool = field(default=False, init=False)


@dataclass(frozen=True)
class DirectoryLink(StructureLink):
    """A directory marker or common prefix."""

    is_directory: Optional[bool] = True


@dataclass(frozen=True)
class FileLink(StructureLink):
    """A regular object."""

    is_directory: Optional[bool] = False
    length: int = 0
    hash: Optional[FileHash] = None

    @property
    def content_path(self) -> str:
        return self.full_name


@dataclass
class ListingOptions:
    """Options for listing a directory."""

    recursive: bool = False
    include_directories: bool = True

    recursive_handled: bool = False
    """Set by the backend once it has applied recursion itself."""


@dataclass(frozen=True)
class LinkMetadata:
    """Metadata changes requested for a link. None means unchanged."""

    is_hidden: Optional[bool] = None
    is_read_only: Optional[bool] = None
    last_write_time: Optional[datetime] = None


class FileSystemOperations(Protocol):
    """
    Protocol for backends that expose a hierarchical file system.

    Every operation is a coroutine. Absent entries are reported as None,
    never as an exception.
    """

    directory_separator: str
    kind: str
    name: str
    flags: FileSystemFlags

    async def get_link_info(self, full_name: str) -> Optional[StructureLink]:
        """
        Resolve a path to a link.

        Args:
            full_name: Path of a file or directory

        Returns:
            The link, or None when nothing exists at the path
        """
        ...

    async def read_file(self, full_name: str, stream: BinaryIO) -> None:
        """
        Copy file content into ``stream`` and rewind it to the start.
        """
        ...

    async def write_file(
        self, full_name: str, content: FileContent, overwrite: bool = True
    ) -> FileLink:
        """
        Write file content.

        Args:
            full_name: Path of the file
            content: Text, bytes or a readable binary stream
            overwrite: Whether an existing file may be replaced

        Returns:
            The link describing the written file
        """
        ...

    async def delete_file(self, full_name: str) -> None:
        ...

    async def create_directory(self, full_name: str) -> StructureLink:
        ...

    async def delete_directory(self, full_name: str, recursive: bool) -> None:
        ...

    async def get_links(
        self, full_name: str, options: Optional[ListingOptions] = None
    ) -> List[StructureLink]:
        """
        List the entries of a directory.

        Args:
            full_name: Path of the directory
            options: Recursion and directory inclusion

        Returns:
            Links in backend order
        """
        ...

    async def update_metadata(
        self, link: StructureLink, metadata: LinkMetadata
    ) -> Optional[StructureLink]:
        ...

    async def move_file(
        self, source: str, destination: str, overwrite: bool = False
    ) -> FileLink:
        ...

    async def move_directory(self, source: str, destination: str) -> StructureLink:
        ...

    async def close(self) -> None:
        ...


class BaseFileSystemOperations(ABC):
    """Abstract base class for file-system backends with common functionality."""

    directory_separator = "/"
    flags = FileSystemFlags.NONE

    supports_is_hidden_metadata = False
    supports_is_read_only_metadata = False
    supports_last_write_time_metadata = False

    @abstractmethod
    async def get_link_info(self, full_name: str) -> Optional[StructureLink]:
        """Resolve a path to a link."""
        pass

    @abstractmethod
    async def read_file(self, full_name: str, stream: BinaryIO) -> None:
        """Copy file content into a stream."""
        pass

    @abstractmethod
    async def write_file(
        self, full_name: str, content: FileContent, overwrite: bool = True
    ) -> FileLink:
        """Write file content."""
        pass

    @abstractmethod
    async def delete_file(self, full_name: str) -> None:
        """Delete a file."""
        pass

    @abstractmethod
    async def create_directory(self, full_name: str) -> StructureLink:
        """Create a directory."""
        pass

    @abstractmethod
    async def delete_directory(self, full_name: str, recursive: bool) -> None:
        """Delete a directory."""
        pass

    @abstractmethod
    async def get_links(
        self, full_name: str, options: Optional[ListingOptions] = None
    ) -> List[StructureLink]:
        """List a directory."""
        pass

    @abstractmethod
    async def update_metadata(
        self, link: StructureLink, metadata: LinkMetadata
    ) -> Optional[StructureLink]:
        """Apply metadata changes and return the refreshed link."""
        pass

    async def exists(self, full_name: str) -> bool:
        return await self.get_link_info(full_name) is not None

    async def read_bytes(self, full_name: str) -> bytes:
        """
        Default implementation that reads into a BytesIO buffer.
        """
        buffer = io.BytesIO()
        await self.read_file(full_name, buffer)
        return buffer.getvalue()

    async def move_file(
        self, source: str, destination: str, overwrite: bool = False
    ) -> FileLink:
        raise UnsupportedOperationError(
            f"{type(self).__name__} does not support moving files"
        )

    async def move_directory(self, source: str, destination: str) -> StructureLink:
        raise UnsupportedOperationError(
            f"{type(self).__name__} does not support moving directories"
        )

    async def close(self) -> None:
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
