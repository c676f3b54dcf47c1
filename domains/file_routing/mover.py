"""
Move engine for the File Routing domain.

Relocates a single file. A same-device move is one atomic rename. When the
rename is refused because source and destination live on different devices,
the file is copied, synced to disk and only then removed from the source.
The copy fallback is not atomic and leaves a partial destination behind if
it fails midway.
"""

import errno
import os
import shutil
import stat
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from loguru import logger


class MoveFailureKind(str, Enum):
    """Step at which a move failed."""

    RENAME_FAILED = "rename-failed"
    OPEN_SOURCE_FAILED = "open-source-failed"
    CREATE_DEST_FAILED = "create-dest-failed"
    COPY_FAILED = "copy-failed"
    SYNC_FAILED = "sync-failed"
    REMOVE_SOURCE_FAILED = "remove-source-failed"


class CrossDeviceError(OSError):
    """Rename refused because source and destination are on different devices."""


class MoveError(Exception):
    """A move could not be completed."""

    def __init__(self, kind: MoveFailureKind, source: Path, destination: Path, reason: str):
        self.kind = kind
        self.source = source
        self.destination = destination
        super().__init__(f"{kind.value}: {source} -> {destination}: {reason}")


@dataclass(frozen=True)
class MoveOperation:
    """Completed relocation."""

    source: Path
    destination: Path
    mode: Optional[int] = None
    copied: bool = False


class MoveEngine:
    """Rename files into place, copying across devices when needed."""

    def __init__(
        self,
        rename: Callable[[Path, Path], None] = os.rename,
        fsync: Callable[[int], None] = os.fsync,
    ):
        """
        Initialize move engine.

        Args:
            rename: Rename primitive
            fsync: Flushes a file descriptor to durable storage
        """
        self._rename = rename
        self._fsync = fsync

    def rename(self, source: Path, destination: Path) -> None:
        """
        Atomically rename ``source`` to ``destination``.

        Raises:
            CrossDeviceError: If the paths are on different devices
            OSError: For any other rename failure
        """
        try:
            self._rename(source, destination)
        except OSError as e:
            if e.errno == errno.EXDEV:
                raise CrossDeviceError(e.errno, e.strerror, str(source)) from e
            raise

    def move(self, source: Path, destination: Path) -> MoveOperation:
        """
        Move ``source`` to ``destination``.

        Args:
            source: Existing file
            destination: Target file path (parent must exist)

        Returns:
            MoveOperation describing what was done

        Raises:
            MoveError: With the kind of the failing step
        """
        try:
            self.rename(source, destination)
        except CrossDeviceError:
            logger.debug(f"Cross-device move, copying: {source} -> {destination}")
            return self.copy_and_delete(source, destination)
        except OSError as e:
            raise MoveError(MoveFailureKind.RENAME_FAILED, source, destination, str(e)) from e

        return MoveOperation(source=source, destination=destination)

    def copy_and_delete(self, source: Path, destination: Path) -> MoveOperation:
        """
        Copy ``source`` to ``destination`` durably, then remove ``source``.

        The destination gets the source's permission bits. A partially
        written destination is left in place on failure.

        Raises:
            MoveError: With the kind of the failing step
        """
        try:
            src_file = open(source, "rb")
        except OSError as e:
            raise MoveError(MoveFailureKind.OPEN_SOURCE_FAILED, source, destination, str(e)) from e

        with src_file:
            try:
                mode = stat.S_IMODE(os.fstat(src_file.fileno()).st_mode)
            except OSError as e:
                raise MoveError(MoveFailureKind.OPEN_SOURCE_FAILED, source, destination, str(e)) from e

            try:
                dst_file = open(destination, "wb", opener=lambda path, flags: os.open(path, flags, mode))
            except OSError as e:
                raise MoveError(MoveFailureKind.CREATE_DEST_FAILED, source, destination, str(e)) from e

            with dst_file:
                try:
                    # os.open honours the umask; force the exact source bits
                    os.chmod(dst_file.fileno(), mode)
                except OSError as e:
                    raise MoveError(MoveFailureKind.CREATE_DEST_FAILED, source, destination, str(e)) from e

                try:
                    shutil.copyfileobj(src_file, dst_file)
                    dst_file.flush()
                except OSError as e:
                    raise MoveError(MoveFailureKind.COPY_FAILED, source, destination, str(e)) from e

                try:
                    self._fsync(dst_file.fileno())
                except OSError as e:
                    raise MoveError(MoveFailureKind.SYNC_FAILED, source, destination, str(e)) from e

        try:
            os.remove(source)
        except OSError as e:
            raise MoveError(MoveFailureKind.REMOVE_SOURCE_FAILED, source, destination, str(e)) from e

        return MoveOperation(source=source, destination=destination, mode=mode, copied=True)
