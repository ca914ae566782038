"""Debounced filesystem watching for ticket directories.

A watchdog observer thread reports raw events. Each ``.md`` path gets its
own timer that is restarted by every new event for that path; when a timer
runs out, one ``FileEvent`` is put on a bounded queue for the UI loop.
"""

import logging
import queue
import threading
from contextlib import suppress
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from mdkanban.constants import DEBOUNCE_SECONDS, ERROR_QUEUE_SIZE, EVENT_QUEUE_SIZE, TICKET_EXT
from mdkanban.errors import WatcherRuntimeError, WatcherSetupError

logger = logging.getLogger(__name__)

# "opened" and "closed_no_write" are reads, including our own reloads
CHANGE_KINDS = frozenset({"created", "modified", "deleted", "moved", "closed"})


class WatcherState(Enum):
    CREATED = "created"
    RUNNING = "running"
    CLOSED = "closed"


@dataclass(frozen=True)
class FileEvent:
    """A debounced change to one ticket file.

    ``kind`` is the last raw event type seen for the path: "created",
    "modified", "deleted", "moved" or "closed".
    """

    path: str
    kind: str


def _normalize(path: str | Path) -> str:
    return str(Path(path).absolute())


def _decode(path: str | bytes) -> str:
    return path.decode() if isinstance(path, bytes) else path


class ChangeWatcher(FileSystemEventHandler):
    """Watch directories for ticket changes and coalesce bursts per path.

    Consumers read ``next_event()`` and ``next_error()``; both return None
    once the watcher is closed. Full queues drop new items rather than
    stalling the observer thread.
    """

    def __init__(
        self,
        debounce: float = DEBOUNCE_SECONDS,
        max_events: int = EVENT_QUEUE_SIZE,
        max_errors: int = ERROR_QUEUE_SIZE,
    ):
        super().__init__()
        self.state = WatcherState.CREATED
        self.debounce = debounce
        self.events: queue.Queue[FileEvent | None] = queue.Queue(maxsize=max_events)
        self.errors: queue.Queue[WatcherRuntimeError | None] = queue.Queue(maxsize=max_errors)

        self._pending: dict[str, threading.Timer] = {}
        self._lock = threading.Lock()
        self._closed = False
        self._watches = {}

        try:
            self._observer = Observer()
            self._observer.daemon = True
            self._observer.start()
        except Exception as e:
            raise WatcherSetupError(f"cannot start file watcher: {e}") from e

        self.state = WatcherState.RUNNING
        logger.debug("watcher started (debounce %.3fs)", debounce)

    # -- Subscription --

    def watch(self, path: str | Path) -> None:
        """Start watching a directory (not recursive)."""
        key = _normalize(path)
        if key in self._watches:
            return
        if not Path(key).is_dir():
            raise WatcherSetupError(f"cannot watch {key}: not a directory")
        try:
            self._watches[key] = self._observer.schedule(self, key, recursive=False)
        except OSError as e:
            raise WatcherSetupError(f"cannot watch {key}: {e}") from e
        logger.debug("watching %s", key)

    def unwatch(self, path: str | Path) -> None:
        """Stop watching a directory. Unknown paths are ignored."""
        watch = self._watches.pop(_normalize(path), None)
        if watch is None:
            return
        with suppress(KeyError):
            self._observer.unschedule(watch)

    @property
    def watched(self) -> list[str]:
        return list(self._watches)

    # -- Raw events (observer thread) --

    def on_any_event(self, event: FileSystemEvent) -> None:
        try:
            self._handle(event)
        except Exception as e:
            logger.exception("error handling %s", event)
            self._report(WatcherRuntimeError(f"error handling {event.src_path}: {e}"))

    def _handle(self, event: FileSystemEvent) -> None:
        src_path = _decode(event.src_path)
        if event.is_directory:
            if event.event_type == "deleted" and _normalize(src_path) in self._watches:
                self._report(WatcherRuntimeError(f"watched directory removed: {src_path}"))
            return
        if event.event_type not in CHANGE_KINDS:
            return

        paths = [src_path]
        if event.event_type == "moved":
            paths.append(_decode(event.dest_path))

        for path in paths:
            if path.endswith(TICKET_EXT):
                self._schedule(path, event.event_type)

    # -- Debounce --

    def _schedule(self, path: str, kind: str) -> None:
        """(Re)start the delivery timer for a path."""
        with self._lock:
            if self._closed:
                return
            previous = self._pending.get(path)
            if previous is not None:
                previous.cancel()
            timer = threading.Timer(self.debounce, self._fire, args=(path, kind))
            timer.daemon = True
            self._pending[path] = timer
            timer.start()

    def _fire(self, path: str, kind: str) -> None:
        """Timer callback: deliver one event unless superseded or closed."""
        with self._lock:
            # A cancelled timer can still fire if it was already running
            if self._pending.get(path) is not threading.current_thread():
                return
            del self._pending[path]
            if self._closed:
                return
            try:
                self.events.put_nowait(FileEvent(path=path, kind=kind))
            except queue.Full:
                logger.debug("event queue full, dropping %s %s", kind, path)

    def _report(self, error: WatcherRuntimeError) -> None:
        with self._lock:
            if self._closed:
                return
            try:
                self.errors.put_nowait(error)
            except queue.Full:
                logger.debug("error queue full, dropping: %s", error)

    # -- Consumer side --

    @staticmethod
    def _get(q: queue.Queue, timeout: float | None):
        try:
            return q.get(timeout=timeout)
        except queue.Empty:
            return None

    def next_event(self, timeout: float | None = None) -> FileEvent | None:
        """Block for the next event. None on timeout or after close."""
        if self._closed and self.events.empty():
            return None
        return self._get(self.events, timeout)

    def next_error(self, timeout: float | None = None) -> WatcherRuntimeError | None:
        """Block for the next runtime error. None on timeout or after close."""
        if self._closed and self.errors.empty():
            return None
        return self._get(self.errors, timeout)

    @property
    def closed(self) -> bool:
        return self._closed

    # -- Shutdown --

    @staticmethod
    def _wake(q: queue.Queue) -> None:
        """Put a None sentinel, evicting the oldest item if the queue is full."""
        while True:
            try:
                q.put_nowait(None)
                return
            except queue.Full:
                with suppress(queue.Empty):
                    q.get_nowait()

    def close(self) -> None:
        """Stop watching. No event is delivered after this returns."""
        with self._lock:
            if self._closed:
                raise RuntimeError("watcher already closed")
            self._closed = True
            timers = list(self._pending.values())
            self._pending.clear()

        for timer in timers:
            timer.cancel()

        self._observer.stop()
        if self._observer.is_alive():
            self._observer.join()
        self._watches.clear()
        self.state = WatcherState.CLOSED

        self._wake(self.events)
        self._wake(self.errors)
        logger.debug("watcher closed")

    def __enter__(self) -> "ChangeWatcher":
        return self

    def __exit__(self, *exc_info) -> None:
        if not self._closed:
            self.close()
