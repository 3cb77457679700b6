"""Concurrent fan-out over feed sources with partial-failure tolerance."""

import asyncio
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

import structlog

from ..config.settings import settings
from ..errors import SourceUnavailable
from .interfaces import FeedDescriptor, FeedSourceInterface, Item

logger = structlog.get_logger()


def _failure_reason(exc: BaseException) -> str:
    if isinstance(exc, SourceUnavailable) and exc.reason:
        return exc.reason
    return str(exc) or type(exc).__name__


@dataclass
class FeedFailure:
    """A feed whose fetch did not succeed during one aggregation."""
    feed_id: str
    display_name: str
    error: str


@dataclass
class AggregationResult:
    """Items from every feed that succeeded, plus the feeds that failed."""
    items: List[Item] = field(default_factory=list)
    failures: List[FeedFailure] = field(default_factory=list)
    feeds_requested: int = 0

    @property
    def all_failed(self) -> bool:
        return self.feeds_requested > 0 and len(self.failures) == self.feeds_requested


class Aggregator:
    """Fetches a snapshot of feeds concurrently and merges their items.

    Every fetch runs to completion (success, error or timeout) before the
    merge; one feed failing never cancels or affects the others. Items are
    merged in the order of the input feed list and stamped with the feed
    they came from.
    """

    def __init__(
        self,
        source: FeedSourceInterface,
        timeout: float = None,
        on_fetch_complete: Callable = None,
    ):
        self.source = source
        self.timeout = timeout or settings.fetch_deadline_seconds
        self.on_fetch_complete = on_fetch_complete  # Callback for stats

    async def aggregate(self, feeds: List[FeedDescriptor]) -> List[Item]:
        """Flat list of stamped items from every feed that succeeded."""
        result = await self.aggregate_outcomes(feeds)
        return result.items

    async def aggregate_outcomes(self, feeds: List[FeedDescriptor]) -> AggregationResult:
        """Fetch all feeds and report both the merged items and the failures."""
        snapshot = list(feeds)
        if not snapshot:
            return AggregationResult()

        tasks = [self._fetch_one(feed) for feed in snapshot]
        results = await asyncio.gather(*tasks, return_exceptions=True)

        aggregated = AggregationResult(feeds_requested=len(snapshot))
        for feed, result in zip(snapshot, results):
            if isinstance(result, BaseException):
                error = _failure_reason(result)
                logger.warning("feed_fetch_exception", feed=feed.feed_id, error=error)
                aggregated.failures.append(FeedFailure(feed.feed_id, feed.display_name, error))
                continue
            aggregated.items.extend(item.stamped(feed) for item in result)

        logger.info(
            "aggregation_complete",
            feeds=len(snapshot),
            failed=len(aggregated.failures),
            items=len(aggregated.items),
        )
        return aggregated

    async def _fetch_one(self, feed: FeedDescriptor) -> List[Item]:
        """Fetch one feed, bounded by the overall deadline including source retries."""
        start_time = time.time()
        error: Optional[str] = None
        items: List[Item] = []
        try:
            items = await asyncio.wait_for(self.source.fetch_feed_items(feed), timeout=self.timeout)
            return items
        except asyncio.TimeoutError as e:
            error = f"timed out after {self.timeout}s"
            raise SourceUnavailable(feed.feed_id, error) from e
        except Exception as e:
            error = _failure_reason(e)
            raise
        finally:
            elapsed_ms = int((time.time() - start_time) * 1000)
            if error is None:
                logger.debug("feed_fetched", feed=feed.feed_id, items=len(items), time_ms=elapsed_ms)
            if self.on_fetch_complete:
                self.on_fetch_complete(
                    feed_id=feed.feed_id,
                    items=len(items),
                    error=error,
                    fetch_time_ms=elapsed_ms,
                )
