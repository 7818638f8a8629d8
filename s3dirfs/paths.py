"""Translation between file-system paths and object store keys."""

DIRECTORY_SEPARATOR = "/"


def normalize_directory_key(path: str) -> str:
    """
    Convert a directory path into its marker/prefix key.

    Strips every trailing separator and appends exactly one, so the
    result is stable no matter how many times it is applied.

    Args:
        path: Directory path as seen by the file system

    Returns:
        The key used as listing prefix and marker object key

    Examples:
        >>> normalize_directory_key("logs")
        'logs/'
        >>> normalize_directory_key("logs//")
        'logs/'
    """
    return (path or "").rstrip(DIRECTORY_SEPARATOR) + DIRECTORY_SEPARATOR


def is_directory_key(key: str) -> bool:
    """Return True when the key denotes a directory marker or prefix."""
    return key.endswith(DIRECTORY_SEPARATOR)


def has_extension(path: str) -> bool:
    """
    Check whether the last path segment carries a file extension.

    A trailing dot does not count ("name." has no extension).

    Args:
        path: File-system path or store key

    Returns:
        True if the final segment has a non-empty suffix after a '.'
    """
    name = path.rsplit(DIRECTORY_SEPARATOR, 1)[-1]
    dot = name.rfind(".")
    return dot != -1 and dot < len(name) - 1
