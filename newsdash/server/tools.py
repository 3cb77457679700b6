"""Tool and resource handlers exposed over MCP.

Handlers return text for the agent. Caller mistakes and unreachable feeds
are raised as ToolError so the client sees an error result; empty outcomes
are returned as explanatory text instead.
"""

import json
from typing import Any, Dict, List, Optional

import structlog
from mcp.server.fastmcp.exceptions import ToolError

from ..digest.extractor import render_digest
from ..errors import InvalidInput, NewsDashError, SourceUnavailable
from ..ingestion.api_client import DashboardClient
from ..pipeline.feeds import FeedPipeline, ResultStatus

logger = structlog.get_logger()

LAYOUT_UNAVAILABLE_TEXT = (
    "No newspaper layout is currently locked. "
    "The layout refreshes automatically every ~20 minutes."
)


def _dumps(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


class NewsTools:
    """Handlers for every tool and resource of the news dashboard server."""

    def __init__(self, client: DashboardClient, pipeline: FeedPipeline = None):
        self.client = client
        self.pipeline = pipeline or FeedPipeline(client)

    async def _guard(self, name: str, coro):
        """Await a handler body, mapping newsdash errors to ToolError."""
        try:
            return await coro
        except InvalidInput as e:
            logger.info("tool_rejected", tool=name, error=str(e))
            raise ToolError(str(e)) from e
        except SourceUnavailable as e:
            logger.warning("tool_source_unavailable", tool=name, feed=e.feed_id, error=e.reason)
            raise ToolError(f"Feed '{e.feed_id}' could not be reached: {e.reason}") from e
        except NewsDashError as e:
            raise ToolError(str(e)) from e

    # Feeds

    async def list_feeds(self) -> str:
        feeds = await self._guard("list_feeds", self.client.list_feeds())
        return _dumps([feed.to_dict() for feed in feeds])

    async def get_articles(self, feed_id: Optional[str] = None, limit: Optional[int] = None) -> str:
        result = await self._guard("get_articles", self.pipeline.get_items(feed_id, limit))
        if result.status == ResultStatus.NO_ITEMS:
            return "No articles are currently available from the requested feeds."
        return _dumps(result.to_payload())

    async def find_articles_by_topic(
        self,
        query: str,
        feed_ids: Optional[List[str]] = None,
        limit: Optional[int] = None,
    ) -> str:
        result = await self._guard(
            "find_articles_by_topic",
            self.pipeline.search_items(query, feed_ids, limit),
        )
        if result.status == ResultStatus.NO_MATCHES:
            return f'No articles found matching "{query}".'
        if result.status == ResultStatus.NO_ITEMS:
            return "No articles are currently available from the requested feeds."
        return _dumps(result.to_payload())

    async def get_top_stories(self) -> str:
        lock = await self._guard("get_top_stories", self.client.get_newspaper_lock())
        if not lock:
            return LAYOUT_UNAVAILABLE_TEXT
        return _dumps(lock)

    async def get_digest(self, as_json: bool = False) -> str:
        result = await self._guard("get_digest", self.pipeline.get_digest())
        if result.status == ResultStatus.LAYOUT_UNAVAILABLE:
            return LAYOUT_UNAVAILABLE_TEXT
        if result.status == ResultStatus.NO_ITEMS:
            return "The current layout has no stories."
        if as_json:
            return _dumps([entry.to_dict() for entry in result.entries])
        return render_digest(result.entries)

    async def add_feed(
        self,
        display_name: str,
        rss_url: Optional[str] = None,
        bsky_handle: Optional[str] = None,
        categories: Optional[List[str]] = None,
    ) -> str:
        if not rss_url and not bsky_handle:
            raise ToolError("Provide either rss_url or bsky_handle.")
        if rss_url and bsky_handle:
            raise ToolError("Provide either rss_url or bsky_handle, not both.")
        feed = await self._guard(
            "add_feed",
            self.client.add_feed(display_name, rss_url, bsky_handle, categories),
        )
        return _dumps(feed.to_dict())

    async def remove_feed(self, feed_id: str) -> str:
        await self._guard("remove_feed", self.client.remove_feed(feed_id))
        return f'Feed "{feed_id}" removed.'

    # Articles

    async def clip_article(self, url: str) -> str:
        result = await self._guard("clip_article", self.client.clip_article(url))
        return _dumps(result)

    async def summarize_article(self, url: str) -> str:
        clip = await self._guard("summarize_article", self.client.clip_article(url))
        markdown = (clip or {}).get("markdown") or ""
        if not markdown.strip():
            raise ToolError(f"No article text could be extracted from {url}.")
        result = await self._guard("summarize_article", self.client.summarize_text(markdown))
        return (result or {}).get("summary") or "No summary was produced."

    async def get_article_ogimage(self, url: str) -> str:
        result = await self._guard("get_article_ogimage", self.client.get_og_image(url))
        return _dumps(result)

    async def post_to_bluesky(
        self,
        text: str,
        identifier: str,
        password: str,
        article_url: Optional[str] = None,
        article_title: Optional[str] = None,
        article_description: Optional[str] = None,
        image_url: Optional[str] = None,
    ) -> str:
        result = await self._guard(
            "post_to_bluesky",
            self.client.post_to_bluesky(
                text,
                identifier,
                password,
                article_url=article_url,
                article_title=article_title,
                article_description=article_description,
                image_url=image_url,
            ),
        )
        return _dumps(result)

    # Settings

    async def get_settings(self) -> str:
        stored = await self._guard("get_settings", self.client.get_settings())
        return _dumps(stored) if stored else "No settings stored yet."

    async def update_settings(
        self,
        app_settings: Optional[Dict[str, Any]] = None,
        feed_order: Optional[List[str]] = None,
    ) -> str:
        patch: Dict[str, Any] = {}
        if app_settings:
            patch["appSettings"] = app_settings
        if feed_order:
            patch["feedOrder"] = feed_order
        if not patch:
            return "Nothing to update. Provide app_settings or feed_order."
        await self._guard("update_settings", self.client.patch_settings(patch))
        return "Settings updated successfully."

    # Resources

    async def feeds_resource(self) -> str:
        return await self.list_feeds()

    async def feed_resource(self, feed_id: str) -> str:
        try:
            items = await self.pipeline.get_feed(feed_id)
        except InvalidInput:
            return json.dumps({"error": f'Feed "{feed_id}" not found.'})
        except SourceUnavailable as e:
            return json.dumps({"error": f'Feed "{feed_id}" is unreachable: {e.reason}'})
        return _dumps([item.to_dict() for item in items])

    async def top_stories_resource(self) -> str:
        lock = await self.client.get_newspaper_lock()
        return _dumps(lock or {"message": "No layout locked yet."})

    async def settings_resource(self) -> str:
        stored = await self.client.get_settings()
        return _dumps(stored or {})
