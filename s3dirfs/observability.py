"""Log helpers shared by the adapters."""

import logging
from typing import Mapping


def _kv_pairs(fields: Mapping[str, object]) -> str:
    parts = []
    for key, value in fields.items():
        if value is None:
            continue
        text = str(value).strip()
        if not text:
            continue
        parts.append(f"{key}={text}")
    return " ".join(parts)


def log_event(
    logger: logging.Logger, message: str, level: int = logging.INFO, **fields: object
) -> None:
    """
    Emit a single log line with ``key=value`` tokens appended.

    Fields that are None or blank are left out.

    Args:
        logger: Logger to write to
        message: Event description
        level: Logging level, INFO by default
        **fields: Context rendered as ``key=value``
    """
    if not logger.isEnabledFor(level):
        return
    suffix = _kv_pairs(fields)
    if suffix:
        logger.log(level, "%s %s", message, suffix)
    else:
        logger.log(level, "%s", message)
