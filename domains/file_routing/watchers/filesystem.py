#!/usr/bin/env python3
"""
File system watcher for the File Routing domain.

Feeds watchdog notifications for a single directory into a Subscription.
Uses watchdog library for cross-platform file system event monitoring.
Only the top level of the directory is watched.
"""

import os
import threading
from pathlib import Path
from typing import Callable

from loguru import logger
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from domains.file_routing.events import (
    EventKind,
    EventSource,
    FileEvent,
    Subscription,
    WatcherError,
    WatchSubscriptionError,
)


class RoutingEventHandler(FileSystemEventHandler):
    """Translate watchdog events into FileEvents on a subscription."""

    def __init__(self, subscription: Subscription):
        """
        Initialize event handler.

        Args:
            subscription: Channels to publish into
        """
        super().__init__()
        self.subscription = subscription

    def _publish(self, kind: EventKind, raw_path) -> None:
        path = Path(os.fsdecode(raw_path))
        logger.debug(f"{kind.value}: {path}")
        self.subscription.publish(FileEvent(path=path, kind=kind))

    def on_created(self, event: FileSystemEvent):
        """Handle file/directory creation."""
        self._publish(EventKind.CREATE, event.src_path)

    def on_modified(self, event: FileSystemEvent):
        """Handle file modification."""
        # Skip directory modifications (too noisy)
        if event.is_directory:
            return

        self._publish(EventKind.WRITE, event.src_path)

    def on_deleted(self, event: FileSystemEvent):
        """Handle file/directory deletion."""
        self._publish(EventKind.REMOVE, event.src_path)

    def on_moved(self, event: FileSystemEvent):
        """Handle rename: the old name goes away, the new name appears."""
        self._publish(EventKind.RENAME, event.src_path)
        if event.dest_path:
            self._publish(EventKind.CREATE, event.dest_path)

    def on_closed(self, event: FileSystemEvent):
        """Handle close-after-write."""
        self._publish(EventKind.OTHER, event.src_path)


class WatchdogEventSource(EventSource):
    """Event source backed by a watchdog Observer."""

    def __init__(
        self,
        monitor_interval: float = 1.0,
        observer_factory: Callable[[], Observer] = Observer,
    ):
        """
        Initialize watchdog source.

        Args:
            monitor_interval: Seconds between observer health checks
            observer_factory: Builds the watchdog observer
        """
        self.monitor_interval = monitor_interval
        self.observer_factory = observer_factory

    def subscribe(self, path: Path) -> Subscription:
        """
        Start watching ``path`` (non-recursive).

        Args:
            path: Directory to watch

        Returns:
            Live subscription; close() stops the observer

        Raises:
            WatchSubscriptionError: If the observer cannot be started
        """
        subscription = Subscription()
        handler = RoutingEventHandler(subscription)
        observer = self.observer_factory()

        try:
            observer.schedule(handler, str(path), recursive=False)
            observer.start()
        except OSError as e:
            raise WatchSubscriptionError(f"adding watch directory {path}: {e}") from e

        stopped = threading.Event()

        def _stop_observer():
            stopped.set()
            observer.stop()
            if observer is not threading.current_thread():
                observer.join()
            logger.info(f"Stopped watching: {path}")

        subscription.on_close = _stop_observer

        monitor = threading.Thread(
            target=self._monitor,
            args=(observer, subscription, path, stopped),
            name="fwatch-monitor",
            daemon=True,
        )
        monitor.start()

        logger.success(f"Started watching: {path}")
        return subscription

    def _monitor(self, observer, subscription: Subscription, path: Path, stopped: threading.Event):
        """Report a vanished watch directory and close on observer death."""
        missing = False

        while not stopped.wait(self.monitor_interval):
            if not observer.is_alive():
                subscription.report(WatcherError(f"observer for {path} stopped unexpectedly"))
                subscription.close()
                return

            if not path.is_dir():
                if not missing:
                    subscription.report(WatcherError(f"watch directory vanished: {path}"))
                missing = True
            else:
                missing = False
