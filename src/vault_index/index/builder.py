import threading
from collections.abc import Sequence

from vault_index.index.items import IndexEntry, Item, NoteItem, VaultItem
from vault_index.logger import logging

logger = logging.getLogger(__name__)


def build_index_entries(
    vaults: Sequence[VaultItem], notes: Sequence[NoteItem]
) -> list[IndexEntry]:
    """
    Flatten vaults and notes into (item, key) pairs.

    A vault is found by its name, a note by its title and by its path
    relative to the vault root.
    """
    entries = [IndexEntry(vault, vault.name) for vault in vaults]
    for note in notes:
        entries.append(IndexEntry(note, note.title))
        entries.append(IndexEntry(note, note.relative_path))
    return entries


class Index:
    """
    The published snapshot of index entries.

    Readers always see either the previous or the next complete snapshot;
    ``replace`` swaps the whole tuple at once.
    """

    def __init__(self):
        self._entries: tuple[IndexEntry, ...] = ()
        self._items: dict[str, Item] = {}
        self._lock = threading.Lock()

    @property
    def entries(self) -> tuple[IndexEntry, ...]:
        with self._lock:
            return self._entries

    def replace(self, entries: Sequence[IndexEntry]):
        snapshot = tuple(entries)
        items = {entry.item.id: entry.item for entry in snapshot}
        with self._lock:
            self._entries = snapshot
            self._items = items
        logger.info("Published %d index entries (%d items)", len(snapshot), len(items))

    def items(self) -> list[Item]:
        with self._lock:
            return list(self._items.values())

    def get(self, item_id: str) -> Item:
        """
        Raises:
            KeyError: If no published item has this id.
        """
        with self._lock:
            return self._items[item_id]
