"""Errors raised by s3dirfs."""

NOT_FOUND_CODES = frozenset({"404", "NoSuchKey", "NotFound"})


class S3DirFSError(Exception):
    """Base error for s3dirfs."""


class DirectoryNotEmptyError(S3DirFSError, IOError):
    """Raised when a non-recursive delete targets a directory that has content."""

    def __init__(self, directory: str):
        super().__init__(f"Folder is not empty: {directory}")
        self.directory = directory


class UnsupportedOperationError(S3DirFSError, NotImplementedError):
    """Raised for operations the object store cannot provide (move/rename)."""


def is_not_found_error(exc: BaseException) -> bool:
    """
    Return True when a store error means the object does not exist.

    botocore reports a missing object as a ClientError whose code is
    "404" for HEAD requests and "NoSuchKey" for GET requests.
    """
    response = getattr(exc, "response", None) or {}
    error = response.get("Error") or {}
    code = str(error.get("Code") or "")
    return code in NOT_FOUND_CODES
