"""
Filesystem event model for the File Routing domain.

A notification source hands the pipeline a Subscription: two queues, one for
events and one for watcher errors. Closing a subscription puts a CLOSED
marker on both queues.
"""

import queue
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Optional


class EventKind(str, Enum):
    """Filesystem operation reported by a notification source."""

    CREATE = "create"
    WRITE = "write"
    RENAME = "rename"
    REMOVE = "remove"
    OTHER = "other"


ACTIONABLE_KINDS = frozenset({EventKind.CREATE, EventKind.WRITE})


@dataclass(frozen=True)
class FileEvent:
    """A single filesystem change notification."""

    path: Path
    kind: EventKind

    @property
    def actionable(self) -> bool:
        return self.kind in ACTIONABLE_KINDS


class WatchSubscriptionError(Exception):
    """The notification source could not start watching."""


class WatchChannelClosed(Exception):
    """An event or error channel closed while the pipeline was reading it."""


CLOSED = object()


@dataclass
class Subscription:
    """Live event and error channels for one watched directory."""

    events: "queue.Queue" = field(default_factory=queue.Queue)
    errors: "queue.Queue" = field(default_factory=queue.Queue)
    on_close: Optional[Callable[[], None]] = None
    closed: bool = False
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def publish(self, event: FileEvent) -> None:
        with self._lock:
            if not self.closed:
                self.events.put(event)

    def report(self, error: Exception) -> None:
        with self._lock:
            if not self.closed:
                self.errors.put(error)

    def close(self) -> None:
        """
        Mark both channels closed and release the source.

        Safe to call from several threads; only the first call has effect.
        """
        with self._lock:
            if self.closed:
                return
            self.closed = True
            self.events.put(CLOSED)
            self.errors.put(CLOSED)

        # on_close may join a thread that publishes; keep it outside the lock
        if self.on_close is not None:
            self.on_close()


class EventSource(ABC):
    """Something that can watch a directory for changes."""

    @abstractmethod
    def subscribe(self, path: Path) -> Subscription:
        """
        Start watching ``path``.

        Raises:
            WatchSubscriptionError: If watching cannot be established
        """


class WatcherError(Exception):
    """Non-fatal problem reported by a notification source."""
