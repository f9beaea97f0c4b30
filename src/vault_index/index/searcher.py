"""Minimal ranking over the published index for the CLI and MCP surfaces."""

import re
from collections.abc import Sequence

from vault_index.index.augmenter import CREATE_NOTE_SCORE, QueryContext, augment_query
from vault_index.index.builder import Index
from vault_index.index.items import VaultItem
from vault_index.index.messages import SearchResult
from vault_index.logger import logging

logger = logging.getLogger(__name__)

WORD_SEPARATORS = re.compile(r"[\s/_.\-]+")


def match_score(query: str, key: str) -> float:
    """
    Score ``key`` against a lowercased query.

    The key matches when it, or one of its words, starts with the query. The
    score is the fraction of the key the query covers; 0 means no match.
    """
    key = key.lower()
    if not query or not key:
        return 0.0
    if key.startswith(query) or any(word.startswith(query) for word in WORD_SEPARATORS.split(key)):
        return len(query) / len(key)
    return 0.0


class Searcher:
    index: Index

    def __init__(self, index: Index):
        self.index = index

    def search(
        self, query: QueryContext, vaults: Sequence[VaultItem], limit: int = 8
    ) -> Sequence[SearchResult]:
        """
        Rank index items for a query, best first, then append create-note suggestions.
        """
        needle = query.string.strip().lower()

        best: dict[str, SearchResult] = {}
        for entry in self.index.entries:
            score = match_score(needle, entry.key)
            if score <= 0:
                continue
            current = best.get(entry.item.id)
            if current is None or score > current.score:
                best[entry.item.id] = SearchResult(entry.item, score)

        results = sorted(best.values(), key=lambda r: r.score, reverse=True)[:limit]
        logger.debug("Query %r matched %d items", needle, len(best))

        results += [SearchResult(item, CREATE_NOTE_SCORE) for item in augment_query(query, vaults)]
        return results
