import time
from pathlib import Path

from vault_index.background_worker import BaseWorker
from vault_index.index.augmenter import QueryContext, augment_query
from vault_index.index.builder import Index, build_index_entries
from vault_index.index.config import read_vaults
from vault_index.index.items import NoteItem, VaultItem
from vault_index.index.messages import (
    ActionRequestMessage,
    ActionResponseMessage,
    CreateNoteRequestMessage,
    SearchRequestMessage,
    SearchResponseMessage,
    WorkerRequest,
    WorkerResponse,
)
from vault_index.index.scanner import scan_vault
from vault_index.index.searcher import Searcher
from vault_index.index.watcher import ConfigWatcher, DirectoryWatchManager
from vault_index.logger import logging

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE = 0.2  # seconds
MAX_DEBOUNCE_FACTOR = 10  # a pending rebuild waits at most this many debounce periods


class Worker(BaseWorker[WorkerRequest, WorkerResponse]):
    """
    Owns the vault list, the watch set and the index.

    Every rebuild re-reads the config, rescans every vault and swaps both the
    watch set and the index. Filesystem events only raise a pending flag, so a
    burst of events costs one rebuild and an event during a rebuild costs
    exactly one more.
    """

    config_path: Path
    watch_directories: bool
    debounce: float

    index: Index
    searcher: Searcher
    vaults: list[VaultItem]
    watch_manager: DirectoryWatchManager | None
    config_watcher: ConfigWatcher | None

    def __init__(
        self,
        config_path: Path,
        watch_directories: bool = True,
        debounce: float = DEFAULT_DEBOUNCE,
        watch_manager: DirectoryWatchManager | None = None,
        config_watcher: ConfigWatcher | None = None,
    ):
        super().__init__()
        self.config_path = config_path
        self.watch_directories = watch_directories
        self.debounce = debounce
        self.index = Index()
        self.searcher = Searcher(self.index)
        self.vaults = []
        self.watch_manager = watch_manager
        self.config_watcher = config_watcher
        self._rebuild_pending = False
        self._last_change = 0.0
        self._pending_since = 0.0

    def initialize(self):
        if self.watch_directories:
            if self.watch_manager is None:
                self.watch_manager = DirectoryWatchManager(self.on_directory_changed)
            if self.config_watcher is None:
                self.config_watcher = ConfigWatcher(self.config_path, self.notify_changed)
            self.watch_manager.start()
            self.config_watcher.start()

        self.rebuild()

    def finalize(self):
        if self.config_watcher is not None:
            self.config_watcher.stop()
        if self.watch_manager is not None:
            self.watch_manager.stop()

    def rebuild(self):
        vaults = read_vaults(self.config_path)

        directories: list[Path] = []
        notes: list[NoteItem] = []
        for vault in vaults:
            logger.info("Indexing Obsidian notes in %s (%s)", vault.path, vault.identifier)
            scan = scan_vault(vault)
            directories += scan.directories
            notes += scan.notes

        if self.watch_manager is not None:
            self.watch_manager.replace(directories)
        self.index.replace(build_index_entries(vaults, notes))
        self.vaults = vaults

    def notify_changed(self):
        """Flag a rebuild. Safe to call from any thread."""
        with self._control.work_available:
            now = time.monotonic()
            if not self._rebuild_pending:
                self._pending_since = now
            self._rebuild_pending = True
            self._last_change = now
            self._control.work_available.notify_all()

    def on_directory_changed(self, directory: Path):
        logger.debug("Change in %s, scheduling rebuild", directory)
        self.notify_changed()

    def default_work_available(self) -> bool:
        return self._rebuild_pending

    def default_work_delay(self) -> float:
        due = min(
            self._last_change + self.debounce,
            self._pending_since + self.debounce * MAX_DEBOUNCE_FACTOR,
        )
        return due - time.monotonic()

    def default_work(self):
        with self._control.work_available:
            self._rebuild_pending = False
        self.rebuild()

    def process_message(self, message: WorkerRequest) -> WorkerResponse:
        if isinstance(message, SearchRequestMessage):
            query = QueryContext(message.query, triggered=message.triggered)
            return SearchResponseMessage(self.searcher.search(query, self.vaults, message.limit))

        if isinstance(message, ActionRequestMessage):
            item = self.index.get(message.item_id)
            for action in item.actions():
                if action.id == message.action_id:
                    action()
                    return ActionResponseMessage(message.item_id, message.action_id)
            raise KeyError(f"Item {message.item_id!r} has no action {message.action_id!r}")

        if isinstance(message, CreateNoteRequestMessage):
            vaults = [vault for vault in self.vaults if vault.identifier == message.vault_id]
            if not vaults:
                raise KeyError(f"Unknown vault: {message.vault_id}")
            suggestions = augment_query(QueryContext(message.name), vaults)
            if not suggestions:
                raise ValueError("Note name must not be empty")
            (action,) = suggestions[0].actions()
            action()
            return ActionResponseMessage(suggestions[0].id, action.id)

        raise ValueError(f"Unknown message: {message!r}")
