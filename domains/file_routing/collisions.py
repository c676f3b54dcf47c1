"""Destination naming for the File Routing domain."""

import os
from datetime import datetime
from pathlib import Path
from typing import Callable

from loguru import logger

from app.utils.helpers import format_timestamp, split_extension

DEFAULT_TIMESTAMP_FORMAT = "%Y%m%d-%H%M%S"


class CollisionResolver:
    """Pick a destination path that does not clash with an existing entry."""

    def __init__(
        self,
        clock: Callable[[], datetime] = datetime.now,
        timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT,
    ):
        """
        Initialize collision resolver.

        Args:
            clock: Returns the moment used for timestamped names
            timestamp_format: strftime format inserted before the extension
        """
        self.clock = clock
        self.timestamp_format = timestamp_format

    def resolve(self, candidate: Path) -> Path:
        """
        Return ``candidate`` if free, else a timestamped sibling.

        ``report.pdf`` becomes ``report-20240115-153045.pdf``. Only one
        attempt is made; the timestamped name is not checked again.

        Args:
            candidate: Intended destination file path

        Returns:
            Destination file path to move to
        """
        if not os.path.lexists(candidate):
            return candidate

        stem, extension = split_extension(candidate.name)
        stamp = format_timestamp(self.clock(), self.timestamp_format)
        resolved = candidate.parent / f"{stem}-{stamp}{extension}"

        logger.info(f"Destination file exists, using: {resolved.name}")
        return resolved
