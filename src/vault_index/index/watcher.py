import os
import threading
from collections.abc import Callable, Iterable
from pathlib import Path

from watchdog.events import (
    DirCreatedEvent,
    DirDeletedEvent,
    DirMovedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileMovedEvent,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers.api import BaseObserver, ObservedWatch

if os.environ.get("VAULT_INDEX_POLLING", "").lower() in ("1", "true"):
    from watchdog.observers.polling import PollingObserver as Observer
else:
    from watchdog.observers import Observer

from vault_index.logger import logging

logger = logging.getLogger(__name__)

# Entries appearing, disappearing or being renamed; content edits are ignored.
DIRECTORY_CHANGE_EVENTS = [
    FileCreatedEvent,
    FileDeletedEvent,
    FileMovedEvent,
    DirCreatedEvent,
    DirDeletedEvent,
    DirMovedEvent,
]


class DirectoryWatchManager:
    """
    Keeps one non-recursive watch per directory and replaces them wholesale.

    Watches only report changes to a directory's direct entries, so callers
    pass every level of a tree to get recursive coverage. ``on_change`` is
    called from the observer thread with the directory that changed.
    """

    on_change: Callable[[Path], None]
    observer: BaseObserver

    def __init__(self, on_change: Callable[[Path], None], observer: BaseObserver | None = None):
        self.on_change = on_change
        self.observer = observer if observer is not None else Observer()
        self._handler = _DirectoryChangeHandler(on_change)
        self._watches: dict[Path, ObservedWatch] = {}
        self._lock = threading.Lock()

    @property
    def watched_directories(self) -> set[Path]:
        with self._lock:
            return set(self._watches)

    def replace(self, directories: Iterable[Path]):
        """Drop every current watch, then watch each of ``directories`` once."""
        with self._lock:
            for directory, watch in self._watches.items():
                try:
                    self.observer.unschedule(watch)
                except (KeyError, OSError) as e:
                    logger.warning("Failed to unwatch %s: %s", directory, e)
            self._watches = {}

            for directory in dict.fromkeys(directories):
                try:
                    self._watches[directory] = self.observer.schedule(
                        self._handler,
                        str(directory),
                        recursive=False,
                        event_filter=DIRECTORY_CHANGE_EVENTS,
                    )
                except OSError as e:
                    logger.warning("Failed to watch %s: %s", directory, e)

        logger.debug("Watching %d directories", len(self._watches))

    def start(self):
        logger.info("Starting directory watch manager")
        self.observer.start()

    def stop(self):
        logger.info("Stopping directory watch manager")
        self.replace([])
        self.observer.stop()
        self.observer.join()

    def __enter__(self) -> "DirectoryWatchManager":
        self.start()
        return self

    def __exit__(self, *exc_info):
        self.stop()


class ConfigWatcher:
    """
    Watches the directory holding Obsidian's config and reports changes to the file itself.
    """

    config_path: Path
    on_change: Callable[[], None]

    def __init__(
        self,
        config_path: Path,
        on_change: Callable[[], None],
        observer: BaseObserver | None = None,
    ):
        self.config_path = config_path
        self.on_change = on_change
        self.observer = observer if observer is not None else Observer()

    def start(self):
        event_handler = _ConfigFileHandler(self.config_path, self.on_change)
        self.observer.schedule(
            event_handler,
            str(self.config_path.parent),
            recursive=False,
        )
        logger.info("Starting config watcher for %s", self.config_path)
        self.observer.start()

    def stop(self):
        logger.info("Stopping config watcher for %s", self.config_path)
        self.observer.stop()
        self.observer.join()


class _DirectoryChangeHandler(FileSystemEventHandler):
    on_change: Callable[[Path], None]

    def __init__(self, on_change: Callable[[Path], None]):
        self.on_change = on_change
        super().__init__()

    def on_any_event(self, event: FileSystemEvent):
        if event.event_type not in ("created", "deleted", "moved"):
            return
        directory = Path(os.fsdecode(event.src_path)).parent
        logger.debug("Directory changed: %s (%s)", directory, event.event_type)
        self.on_change(directory)


class _ConfigFileHandler(FileSystemEventHandler):
    config_path: Path
    on_change: Callable[[], None]

    def __init__(self, config_path: Path, on_change: Callable[[], None]):
        self.config_path = config_path
        self.on_change = on_change
        super().__init__()

    def on_any_event(self, event: FileSystemEvent):
        if event.event_type not in ("created", "modified", "moved", "deleted"):
            return
        paths = [event.src_path, getattr(event, "dest_path", "")]
        if any(path and Path(os.fsdecode(path)) == self.config_path for path in paths):
            logger.info("Obsidian config changed: %s", self.config_path)
            self.on_change()
