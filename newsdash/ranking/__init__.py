"""Deduplication and ranking of aggregated items."""

from .dedupe import dedupe
from .ranker import Ranker, count_occurrences, resolve_limit, score_item, tokenize

__all__ = ["dedupe", "Ranker", "resolve_limit", "count_occurrences", "score_item", "tokenize"]
