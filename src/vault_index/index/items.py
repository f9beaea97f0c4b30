"""Searchable items: vaults, notes and ephemeral suggestions."""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import PurePosixPath, PurePath
from typing import Protocol, runtime_checkable

from vault_index import desktop

VAULT_ICON = "obsidian-vault"
NOTE_ICON = "obsidian-note"
NOTE_ADD_ICON = "obsidian-note-add"


@dataclass(frozen=True)
class Action:
    id: str
    label: str
    function: Callable[[], None] = field(compare=False, repr=False)

    def __call__(self):
        self.function()


@runtime_checkable
class Item(Protocol):
    """Capabilities shared by everything the index or a query can return."""

    @property
    def id(self) -> str: ...

    @property
    def text(self) -> str: ...

    @property
    def subtext(self) -> str: ...

    @property
    def icon(self) -> str: ...

    def actions(self) -> Sequence[Action]: ...


@dataclass(frozen=True)
class VaultItem:
    """
    One vault as listed in Obsidian's configuration.

    The identifier comes from the configuration file and is never derived
    from the path; the path may not exist.
    """

    identifier: str
    path: str

    @property
    def name(self) -> str:
        return PurePath(self.path).name if self.path else ""

    @property
    def id(self) -> str:
        return self.identifier

    @property
    def text(self) -> str:
        return self.name

    @property
    def subtext(self) -> str:
        return self.path

    @property
    def icon(self) -> str:
        return VAULT_ICON

    def actions(self) -> Sequence[Action]:
        return [
            Action(
                "open",
                "Open",
                lambda: desktop.open_url(desktop.obsidian_url("open", self.identifier)),
            ),
            Action(
                "search",
                "Search",
                lambda: desktop.open_url(desktop.obsidian_url("search", self.identifier)),
            ),
            Action("openfm", "Open in file manager", lambda: desktop.reveal(self.path)),
        ]


@dataclass(frozen=True)
class NoteItem:
    """A markdown file inside a vault, addressed relative to the vault root."""

    vault: VaultItem
    relative_path: str  # posix separators, suffix included

    @property
    def title(self) -> str:
        name = PurePosixPath(self.relative_path).name
        dot = name.rfind(".")
        return name[:dot] if dot >= 0 else name

    @property
    def id(self) -> str:
        return self.vault.path + self.relative_path

    @property
    def text(self) -> str:
        return self.title

    @property
    def subtext(self) -> str:
        return f"{self.vault.name} · {self.relative_path}"

    @property
    def icon(self) -> str:
        return NOTE_ICON

    def actions(self) -> Sequence[Action]:
        return [
            Action(
                "open",
                "Open",
                lambda: desktop.open_url(
                    desktop.obsidian_url("open", self.vault.identifier, self.relative_path)
                ),
            )
        ]


@dataclass(frozen=True)
class StandardItem:
    """A fixed item built on the fly, e.g. a query suggestion."""

    id: str
    text: str
    subtext: str
    icon: str
    action_list: tuple[Action, ...] = ()

    def actions(self) -> Sequence[Action]:
        return list(self.action_list)


@dataclass(frozen=True)
class IndexEntry:
    item: Item
    key: str
