"""
Event pipeline for the File Routing domain.

Consumes a Subscription one event at a time: filters create/write events,
waits out the debounce interval, then routes the file by extension through
the collision resolver and the move engine. Per-file problems are logged and
never stop the loop. Only a closed channel does.
"""

import os
import queue
import stat
import threading
import time
from pathlib import Path
from typing import Callable, Optional

from loguru import logger

from app.models.schemas import RoutingConfig
from app.utils.config import Settings
from app.utils.helpers import normalise_extension, split_extension
from domains.file_routing.collisions import CollisionResolver
from domains.file_routing.events import CLOSED, FileEvent, Subscription, WatchChannelClosed
from domains.file_routing.mover import MoveEngine, MoveError
from domains.file_routing.rules import ExtensionIndex


class EventPipeline:
    """Single-consumer loop that routes new files to their destinations."""

    def __init__(
        self,
        index: ExtensionIndex,
        mover: Optional[MoveEngine] = None,
        resolver: Optional[CollisionResolver] = None,
        debounce_seconds: float = 0.1,
        poll_interval: float = 0.5,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize event pipeline.

        Args:
            index: Extension to destination lookup
            mover: Move engine (default MoveEngine())
            resolver: Collision resolver (default CollisionResolver())
            debounce_seconds: Wait before inspecting a changed file
            poll_interval: How often the loop wakes to check for stop/errors
            sleep: Sleep function used for the debounce
        """
        self.index = index
        self.mover = mover or MoveEngine()
        self.resolver = resolver or CollisionResolver()
        self.debounce_seconds = debounce_seconds
        self.poll_interval = poll_interval
        self._sleep = sleep
        self._stop = threading.Event()

    @classmethod
    def from_config(cls, config: RoutingConfig, settings: Settings) -> "EventPipeline":
        """Build a pipeline from routing rules and process settings."""
        return cls(
            index=ExtensionIndex.build(config.rules),
            resolver=CollisionResolver(timestamp_format=settings.timestamp_format),
            debounce_seconds=settings.debounce_seconds,
            poll_interval=settings.poll_interval,
        )

    def stop(self) -> None:
        """Ask the loop to return after the event in progress."""
        self._stop.set()

    @property
    def stopping(self) -> bool:
        return self._stop.is_set()

    def run(self, subscription: Subscription) -> None:
        """
        Process events until stopped.

        Args:
            subscription: Event and error channels to consume

        Raises:
            WatchChannelClosed: If a channel closes before stop() is called
        """
        logger.info(f"Event pipeline started with {len(self.index)} extension(s)")

        while not self.stopping:
            self._drain_errors(subscription)

            try:
                item = subscription.events.get(timeout=self.poll_interval)
            except queue.Empty:
                continue

            if item is CLOSED:
                if self.stopping:
                    break
                raise WatchChannelClosed("watcher events channel closed")

            self.handle_event(item)

        logger.info("Event pipeline stopped")

    def _drain_errors(self, subscription: Subscription) -> None:
        while True:
            try:
                item = subscription.errors.get_nowait()
            except queue.Empty:
                return

            if item is CLOSED:
                if self.stopping:
                    return
                raise WatchChannelClosed("watcher errors channel closed")

            logger.error(f"Watcher error: {item}")

    def handle_event(self, event: FileEvent) -> Optional[Path]:
        """
        Route the file behind one event.

        Args:
            event: Filesystem event

        Returns:
            Final destination path if the file was moved, else None
        """
        if not event.actionable:
            return None

        self._sleep(self.debounce_seconds)

        try:
            return self.process_file(Path(event.path))
        except Exception as e:
            logger.exception(f"Failed to process {event.path}: {e}")
            return None

    def process_file(self, path: Path) -> Optional[Path]:
        """
        Move ``path`` to its rule destination if one matches.

        Missing files, directories, files without an extension and unknown
        extensions are skipped silently.

        Returns:
            Final destination path if the file was moved, else None
        """
        try:
            info = os.stat(path)
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning(f"Error stating file {path}: {e}")
            return None

        if stat.S_ISDIR(info.st_mode):
            return None

        extension = normalise_extension(split_extension(path.name)[1])
        if not extension:
            return None

        destination_dir = self.index.lookup(extension)
        if destination_dir is None:
            return None

        destination = self.resolver.resolve(Path(destination_dir) / path.name)

        try:
            self.mover.move(path, destination)
        except MoveError as e:
            logger.warning(f"Error moving file {path} to {destination}: {e}")
            return None

        logger.info(f"Moved: {path} -> {destination}")
        return destination
