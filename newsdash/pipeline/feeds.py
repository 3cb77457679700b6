"""Request-level orchestration: aggregate -> dedupe -> rank."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

import structlog

from ..digest.extractor import DigestEntry, annotate_ages, extract_digest
from ..errors import InvalidInput, SourceUnavailable
from ..ingestion.aggregator import Aggregator, FeedFailure
from ..ingestion.interfaces import FeedDescriptor, FeedSourceInterface, Item, ScoredItem
from ..ranking.dedupe import dedupe
from ..ranking.ranker import Ranker, resolve_limit, tokenize

logger = structlog.get_logger()


class ResultStatus(Enum):
    """Outcome of a request, so empty results are never ambiguous."""
    OK = "ok"
    NO_ITEMS = "no_items"                      # Nothing fetched for the requested feeds
    NO_MATCHES = "no_matches"                  # Items fetched, none matched the query
    LAYOUT_UNAVAILABLE = "layout_unavailable"  # Backend has not computed a layout yet


@dataclass
class FeedQueryResult:
    """Ranked items for a get/search request."""
    status: ResultStatus
    items: List[Item] = field(default_factory=list)
    scores: Optional[List[int]] = None
    query: Optional[str] = None
    failures: List[FeedFailure] = field(default_factory=list)

    def to_payload(self) -> List[dict]:
        if self.scores is None:
            return [item.to_dict() for item in self.items]
        return [ScoredItem(item, score).to_dict() for item, score in zip(self.items, self.scores)]


@dataclass
class DigestResult:
    """Digest entries extracted from the current layout."""
    status: ResultStatus
    entries: List[DigestEntry] = field(default_factory=list)


class FeedPipeline:
    """Composes the aggregator, deduplicator and ranker for one backend."""

    def __init__(
        self,
        source: FeedSourceInterface,
        aggregator: Aggregator = None,
        ranker: Ranker = None,
    ):
        self.source = source
        self.aggregator = aggregator or Aggregator(source)
        self.ranker = ranker or Ranker()

    async def get_items(self, feed_id: str = None, limit: int = None) -> FeedQueryResult:
        """Newest items from one feed, or from every configured feed."""
        limit = resolve_limit(limit, self.ranker.default_limit, self.ranker.max_limit)
        feeds = await self.source.list_feeds()
        if feed_id:
            feeds = self._select(feeds, [feed_id])

        items, failures = await self._collect(feeds, named=bool(feed_id))
        if not items:
            return FeedQueryResult(ResultStatus.NO_ITEMS, failures=failures)

        ranked = self.ranker.by_recency(items, limit)
        logger.info("items_ranked", feed=feed_id or "all", returned=len(ranked))
        return FeedQueryResult(ResultStatus.OK, ranked, failures=failures)

    async def search_items(
        self,
        query: str,
        feed_ids: List[str] = None,
        limit: int = None,
    ) -> FeedQueryResult:
        """Items matching the query across all feeds or a subset, best first."""
        if not tokenize(query):
            raise InvalidInput("query must contain at least one non-blank term")
        limit = resolve_limit(limit, self.ranker.default_search_limit, self.ranker.max_search_limit)

        feeds = await self.source.list_feeds()
        if feed_ids:
            feeds = self._select(feeds, feed_ids)

        named = bool(feed_ids) and len(feed_ids) == 1
        items, failures = await self._collect(feeds, named=named)
        if not items:
            return FeedQueryResult(ResultStatus.NO_ITEMS, query=query, failures=failures)

        scored = self.ranker.by_relevance(items, query, limit)
        logger.info("search_ranked", query=query, candidates=len(items), matched=len(scored))
        if not scored:
            return FeedQueryResult(ResultStatus.NO_MATCHES, query=query, failures=failures)

        return FeedQueryResult(
            ResultStatus.OK,
            [s.item for s in scored],
            scores=[s.relevance_score for s in scored],
            query=query,
            failures=failures,
        )

    async def get_digest(self, now: datetime = None) -> DigestResult:
        """Deduplicated top stories from the current layout."""
        layout = await self.source.get_current_layout()
        if layout is None:
            return DigestResult(ResultStatus.LAYOUT_UNAVAILABLE)
        entries = annotate_ages(extract_digest(layout), now)
        if not entries:
            return DigestResult(ResultStatus.NO_ITEMS)
        return DigestResult(ResultStatus.OK, entries)

    async def get_feed(self, feed_id: str) -> List[Item]:
        """All current items of one feed, unranked."""
        feeds = self._select(await self.source.list_feeds(), [feed_id])
        items, _ = await self._collect(feeds, named=True)
        return items

    async def _collect(self, feeds: List[FeedDescriptor], named: bool = False):
        """Aggregate and dedupe.

        When the caller asked for exactly one feed by id (`named`) and its
        fetch fails, that is reported as SourceUnavailable rather than as an
        empty result.
        """
        result = await self.aggregator.aggregate_outcomes(feeds)
        if named and len(feeds) == 1 and result.all_failed:
            failure = result.failures[0]
            raise SourceUnavailable(failure.feed_id, failure.error)
        return dedupe(result.items), result.failures

    @staticmethod
    def _select(feeds: List[FeedDescriptor], feed_ids: List[str]) -> List[FeedDescriptor]:
        """Feeds matching the requested ids, in configuration order."""
        known = {feed.feed_id for feed in feeds}
        missing = [fid for fid in feed_ids if fid not in known]
        if missing:
            raise InvalidInput(f"No feed found with id {', '.join(repr(m) for m in missing)}")
        wanted = set(feed_ids)
        return [feed for feed in feeds if feed.feed_id in wanted]
