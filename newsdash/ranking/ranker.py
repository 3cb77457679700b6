"""Recency and query-relevance ranking of deduplicated items."""

from typing import List, Optional

from ..config.settings import settings
from ..errors import InvalidInput
from ..ingestion.interfaces import Item, ScoredItem
from ..recency import recency_key


def tokenize(query: str) -> List[str]:
    """Lower-case the query and split it on whitespace."""
    return [token for token in (query or "").lower().split() if token]


def search_text(item: Item) -> str:
    """Lower-cased text an item is matched against."""
    return f"{item.title or ''} {item.description or ''} {item.body or ''}".lower()


def count_occurrences(haystack: str, token: str) -> int:
    """Non-overlapping literal occurrences of token in haystack."""
    if not token:
        return 0
    return haystack.count(token)


def score_item(item: Item, tokens: List[str]) -> int:
    """Sum of literal occurrences of every token in the item's text."""
    haystack = search_text(item)
    return sum(count_occurrences(haystack, token) for token in tokens)


def resolve_limit(limit: Optional[int], default: int, ceiling: int) -> int:
    """Apply the default for a missing limit and reject out-of-range values."""
    if limit is None:
        return default
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise InvalidInput(f"limit must be an integer, got {limit!r}")
    if limit < 1 or limit > ceiling:
        raise InvalidInput(f"limit must be between 1 and {ceiling}, got {limit}")
    return limit


class Ranker:
    """Orders items newest-first, or by query relevance."""

    def __init__(
        self,
        default_limit: int = None,
        max_limit: int = None,
        default_search_limit: int = None,
        max_search_limit: int = None,
    ):
        self.default_limit = default_limit or settings.default_item_limit
        self.max_limit = max_limit or settings.max_item_limit
        self.default_search_limit = default_search_limit or settings.default_search_limit
        self.max_search_limit = max_search_limit or settings.max_search_limit

    def by_recency(self, items: List[Item], limit: int = None) -> List[Item]:
        """Newest first; items without a publish time go last, ties keep input order."""
        limit = resolve_limit(limit, self.default_limit, self.max_limit)
        ordered = sorted(items, key=lambda item: recency_key(item.publish_time), reverse=True)
        return ordered[:limit]

    def by_relevance(self, items: List[Item], query: str, limit: int = None) -> List[ScoredItem]:
        """Items matching at least one query token, best score first.

        Ties are broken by recency and then by input order.
        """
        limit = resolve_limit(limit, self.default_search_limit, self.max_search_limit)
        tokens = tokenize(query)
        if not tokens:
            raise InvalidInput("query must contain at least one non-blank term")

        scored = [ScoredItem(item, score_item(item, tokens)) for item in items]
        matched = [s for s in scored if s.relevance_score > 0]
        # sorted() is stable, so reverse=True on the tuple key keeps input order for full ties
        matched = sorted(
            matched,
            key=lambda s: (s.relevance_score, recency_key(s.item.publish_time)),
            reverse=True,
        )
        return matched[:limit]
