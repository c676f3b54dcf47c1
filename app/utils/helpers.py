"""
Helper utilities for fwatch.

Path and time functions shared across the routing domain.
"""

from datetime import datetime
from typing import Tuple


def normalise_extension(extension: str) -> str:
    """Lowercase an extension for index lookups."""
    return extension.lower()


def split_extension(filename: str) -> Tuple[str, str]:
    """
    Split a filename into base name and extension.

    The extension is everything from the last dot of the name, keeping its
    case. A dotfile such as ``.env`` is all extension with an empty base.

    Args:
        filename: Bare file name (no directory part)

    Returns:
        Tuple of (base name, extension)
    """
    dot = filename.rfind(".")
    if dot == -1:
        return filename, ""
    return filename[:dot], filename[dot:]


def format_timestamp(moment: datetime, fmt: str = "%Y%m%d-%H%M%S") -> str:
    """Format ``moment`` as a sortable timestamp string."""
    return moment.strftime(fmt)
