"""Interface definitions for feed ingestion."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from ..recency import parse_timestamp


class SourceKind(Enum):
    """How the backend retrieves a feed."""
    RSS = "rss"                    # Built-in or custom RSS/Atom endpoint
    API = "api"                    # Built-in backend API route
    BSKY_PROFILE = "bsky_profile"  # Social profile stream


@dataclass(frozen=True)
class FeedDescriptor:
    """Identity and fetch strategy for one configured feed."""
    feed_id: str
    display_name: str
    source_kind: SourceKind
    is_built_in: bool
    rss_url: Optional[str] = None
    bsky_handle: Optional[str] = None
    category: Optional[str] = None
    categories: tuple = ()
    description: Optional[str] = None
    update_interval: Optional[Dict[str, Any]] = field(default=None, hash=False, compare=False)

    @classmethod
    def from_dict(cls, data: dict) -> "FeedDescriptor":
        """Build a descriptor from a backend feed payload."""
        try:
            kind = SourceKind(data.get("type", "rss"))
        except ValueError:
            kind = SourceKind.RSS
        return cls(
            feed_id=data["feedId"],
            display_name=data.get("displayName") or data["feedId"],
            source_kind=kind,
            is_built_in=bool(data.get("isBuiltIn", False)),
            rss_url=data.get("rssUrl") or None,
            bsky_handle=data.get("bskyHandle") or None,
            category=data.get("category") or None,
            categories=tuple(data.get("categories") or ()),
            description=data.get("description") or None,
            update_interval=data.get("defaultUpdateInterval"),
        )

    def to_dict(self) -> dict:
        """Convert to the backend's JSON shape."""
        data = {
            "feedId": self.feed_id,
            "displayName": self.display_name,
            "type": self.source_kind.value,
            "isBuiltIn": self.is_built_in,
            "category": self.category,
            "categories": list(self.categories),
            "description": self.description,
        }
        if self.rss_url is not None:
            data["rssUrl"] = self.rss_url
        if self.bsky_handle is not None:
            data["bskyHandle"] = self.bsky_handle
        if self.update_interval is not None:
            data["defaultUpdateInterval"] = self.update_interval
        return data


@dataclass
class Item:
    """One article or post returned by a feed."""
    title: str = ""
    link: Optional[str] = None      # Canonical identity for deduplication
    description: str = ""
    publish_time: Optional[datetime] = None
    pub_date: Optional[str] = None  # Raw upstream timestamp
    body: Optional[str] = None
    author: Optional[str] = None
    source: Optional[str] = None
    id: Optional[str] = None
    images: List[dict] = field(default_factory=list)
    external_link: Optional[str] = None
    metadata: Optional[str] = None
    source_name: Optional[str] = None  # Stamped by the aggregator
    source_id: Optional[str] = None    # Stamped by the aggregator

    @classmethod
    def from_dict(cls, data: dict) -> "Item":
        """Build an item from a loosely-typed backend article payload."""
        author = data.get("author")
        if isinstance(author, dict):
            author = author.get("name")
        author = author or data.get("creator") or None

        body = data.get("content") or data.get("content:encoded") or None
        pub_date = data.get("pubDate") or None

        return cls(
            title=data.get("title") or "",
            link=data.get("link") or None,
            description=data.get("description") or "",
            publish_time=parse_timestamp(pub_date),
            pub_date=pub_date,
            body=body,
            author=author,
            source=data.get("source") or None,
            id=data.get("id") or None,
            images=list(data.get("images") or []),
            external_link=data.get("externalLink") or None,
            metadata=data.get("metadata") or None,
            source_name=data.get("sourceName") or None,
            source_id=data.get("sourceId") or None,
        )

    def stamped(self, feed: FeedDescriptor) -> "Item":
        """Copy of this item attributed to the feed it was fetched from."""
        return replace(self, source_name=feed.display_name, source_id=feed.feed_id)

    def to_dict(self) -> dict:
        """Convert to dictionary, omitting absent optional fields."""
        data = {
            "title": self.title,
            "link": self.link,
            "description": self.description,
        }
        optional = {
            "id": self.id,
            "pubDate": self.pub_date,
            "publishTime": self.publish_time.isoformat() if self.publish_time else None,
            "content": self.body,
            "author": self.author,
            "source": self.source,
            "externalLink": self.external_link,
            "metadata": self.metadata,
            "sourceName": self.source_name,
            "sourceId": self.source_id,
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        if self.images:
            data["images"] = self.images
        return data


@dataclass
class ScoredItem:
    """An item with its query relevance score."""
    item: Item
    relevance_score: int

    def to_dict(self) -> dict:
        data = self.item.to_dict()
        data["relevanceScore"] = self.relevance_score
        return data


@dataclass
class LayoutSlots:
    """Precomputed newspaper layout produced by the backend."""
    lead: Optional[Item] = None
    related: List[Item] = field(default_factory=list)
    featured: Optional[Item] = None
    picks: List[Item] = field(default_factory=list)
    top_stories: List[Item] = field(default_factory=list)
    latest: List[Item] = field(default_factory=list)
    all_article_ids: List[str] = field(default_factory=list)
    locked_at: Optional[datetime] = None
    expiry: Optional[datetime] = None

    @classmethod
    def from_lock(cls, lock: dict) -> "LayoutSlots":
        """Build slots from the backend's newspaper lock payload."""
        layout = lock.get("layout") or {}

        def one(key: str) -> Optional[Item]:
            value = layout.get(key)
            return Item.from_dict(value) if isinstance(value, dict) else None

        def many(key: str) -> List[Item]:
            return [Item.from_dict(v) for v in layout.get(key) or [] if isinstance(v, dict)]

        return cls(
            lead=one("lead"),
            related=many("related"),
            featured=one("featured"),
            picks=many("picks"),
            top_stories=many("topStories"),
            latest=many("latest"),
            all_article_ids=list(layout.get("allArticleIds") or []),
            locked_at=parse_timestamp(lock.get("lockedAt")),
            expiry=parse_timestamp(lock.get("expiry")),
        )


class FeedSourceInterface:
    """Interface for the backend that owns feed configuration and retrieval."""

    async def list_feeds(self) -> List[FeedDescriptor]:
        """Current feed configuration snapshot."""
        raise NotImplementedError

    async def fetch_feed_items(self, feed: FeedDescriptor) -> List[Item]:
        """Fetch current items for one feed. Raises SourceUnavailable."""
        raise NotImplementedError

    async def get_current_layout(self) -> Optional[LayoutSlots]:
        """Current newspaper layout, or None when none has been computed."""
        raise NotImplementedError
