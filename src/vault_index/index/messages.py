from collections.abc import Sequence
from dataclasses import dataclass

from vault_index.index.items import Item


@dataclass
class SearchRequestMessage:
    query: str
    limit: int = 8
    triggered: bool = True


@dataclass
class SearchResult:
    item: Item
    score: float  # 0..1, higher = better


@dataclass
class SearchResponseMessage:
    results: Sequence[SearchResult]


@dataclass
class ActionRequestMessage:
    item_id: str
    action_id: str


@dataclass
class CreateNoteRequestMessage:
    vault_id: str
    name: str


@dataclass
class ActionResponseMessage:
    item_id: str
    action_id: str


WorkerRequest = SearchRequestMessage | ActionRequestMessage | CreateNoteRequestMessage
WorkerResponse = SearchResponseMessage | ActionResponseMessage
