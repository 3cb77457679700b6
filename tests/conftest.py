"""Pytest configuration and shared fixtures."""

from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import pytest

# Add project root to path
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from newsdash.errors import SourceUnavailable
from newsdash.ingestion.interfaces import (
    FeedDescriptor,
    FeedSourceInterface,
    Item,
    LayoutSlots,
    SourceKind,
)

BASE_TIME = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_item(
    title: str = "Untitled",
    link: Optional[str] = None,
    description: str = "",
    body: Optional[str] = None,
    minutes: Optional[int] = None,
) -> Item:
    """Item published `minutes` after BASE_TIME (None for no publish time)."""
    publish_time = BASE_TIME + timedelta(minutes=minutes) if minutes is not None else None
    return Item(
        title=title,
        link=link,
        description=description,
        body=body,
        publish_time=publish_time,
    )


def make_feed(feed_id: str, display_name: str = None, **kwargs) -> FeedDescriptor:
    return FeedDescriptor(
        feed_id=feed_id,
        display_name=display_name or feed_id.title(),
        source_kind=kwargs.pop("source_kind", SourceKind.RSS),
        is_built_in=kwargs.pop("is_built_in", True),
        **kwargs,
    )


class FakeFeedSource(FeedSourceInterface):
    """In-memory feed source; feeds listed in `failing` raise SourceUnavailable."""

    def __init__(
        self,
        feeds: List[FeedDescriptor],
        items: Dict[str, List[Item]] = None,
        failing: set = None,
        layout: Optional[LayoutSlots] = None,
    ):
        self.feeds = feeds
        self.items = items or {}
        self.failing = failing or set()
        self.layout = layout
        self.fetched: List[str] = []

    async def list_feeds(self) -> List[FeedDescriptor]:
        return list(self.feeds)

    async def fetch_feed_items(self, feed: FeedDescriptor) -> List[Item]:
        self.fetched.append(feed.feed_id)
        if feed.feed_id in self.failing:
            raise SourceUnavailable(feed.feed_id, "connection refused")
        return list(self.items.get(feed.feed_id, []))

    async def get_current_layout(self) -> Optional[LayoutSlots]:
        return self.layout


@pytest.fixture
def feeds():
    """Three built-in feeds."""
    return [make_feed("techcrunch", "TechCrunch"), make_feed("nature", "Nature"), make_feed("statnews", "STAT")]


@pytest.fixture
def feed_items():
    """A: 3 items, B: 2 items (one sharing a link with A), C: 2 items."""
    return {
        "techcrunch": [
            make_item("AI startup raises $50M", "https://tc.com/a1", "funding round", minutes=30),
            make_item("New drug trial results", "https://tc.com/a2", "biotech drug news", minutes=10),
            make_item("Chip shortage eases", "https://tc.com/a3", "semiconductors", minutes=50),
        ],
        "nature": [
            make_item("Protein folding advance", "https://nature.com/n1", "structural biology", minutes=40),
            make_item("New drug trial results", "https://tc.com/a2", "syndicated copy", minutes=10),
        ],
        "statnews": [
            make_item("Drug pricing hearing", "https://stat.com/s1", "drug costs", minutes=20),
            make_item("Hospital mergers", "https://stat.com/s2", "healthcare", minutes=None),
        ],
    }


@pytest.fixture
def fake_source(feeds, feed_items):
    return FakeFeedSource(feeds, feed_items)


@pytest.fixture
def sample_article_payload():
    """Backend article payload as returned by /news/{route}."""
    return {
        "id": "abc123",
        "title": "FDA approves new GLP-1 drug",
        "link": "https://www.statnews.com/2026/03/01/glp1-approval/",
        "description": "The agency cleared the drug after a phase 3 trial.",
        "pubDate": "Sun, 01 Mar 2026 11:30:00 GMT",
        "author": {"name": "Jane Doe", "avatar": "https://example.com/a.png"},
        "content": "<p>Full text of the article</p>",
        "source": "STAT",
        "images": [{"url": "https://example.com/img.jpg", "alt": "pill bottles"}],
    }
