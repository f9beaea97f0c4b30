from collections.abc import Sequence
from dataclasses import dataclass

from vault_index import desktop
from vault_index.index.items import NOTE_ADD_ICON, Action, StandardItem, VaultItem

CREATE_NOTE_ID = "new"
CREATE_NOTE_SCORE = 0.0  # suggestions rank below every real match


@dataclass
class QueryContext:
    string: str
    triggered: bool = True  # False for passive, global matching


def create_note_action(vault: VaultItem, name: str) -> Action:
    return Action(
        "create",
        "Create",
        lambda: desktop.open_url(desktop.obsidian_url("new", vault.identifier, name)),
    )


def augment_query(query: QueryContext, vaults: Sequence[VaultItem]) -> list[StandardItem]:
    """
    Suggest creating a note named after the query, once per vault.

    Only explicitly triggered queries with non-blank text get suggestions.
    They never enter the index.
    """
    name = query.string.strip()
    if not query.triggered or not name:
        return []

    return [
        StandardItem(
            id=CREATE_NOTE_ID,
            text=f"Create new note in '{vault.name}'",
            subtext=f"{vault.name} · {name}.md",
            icon=NOTE_ADD_ICON,
            action_list=(create_note_action(vault, name),),
        )
        for vault in vaults
    ]
