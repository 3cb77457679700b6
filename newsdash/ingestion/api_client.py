"""Async client for the news dashboard backend."""

import asyncio
import json
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import aiohttp
import structlog
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..config.settings import settings
from ..errors import BackendError, SourceUnavailable
from .interfaces import FeedDescriptor, FeedSourceInterface, Item, LayoutSlots, SourceKind

logger = structlog.get_logger()

# Built-in feed ids that are served from a differently named backend route
BUILTIN_ROUTES = {
    "techcrunch": "techcrunch",
    "theverge": "theverge",
    "nature": "nature",
    "statnews": "statnews",
    "bluesky": "bluesky",
    "substack": "substack",
    "endpoints": "endpoints",
    "inthepipeline": "inthepipeline",
    "fiercebiotech": "fiercebiotech",
}

_TRANSIENT_ERRORS = (aiohttp.ClientConnectionError, asyncio.TimeoutError)


def articles_path(feed: FeedDescriptor) -> str:
    """Backend route that serves the current articles of a feed."""
    if feed.source_kind == SourceKind.BSKY_PROFILE and feed.bsky_handle:
        return f"/news/bsky-profile?handle={quote(feed.bsky_handle, safe='')}"
    if not feed.is_built_in and feed.rss_url:
        return (
            f"/news/generic?url={quote(feed.rss_url, safe='')}"
            f"&source={quote(feed.display_name, safe='')}"
        )
    return f"/news/{BUILTIN_ROUTES.get(feed.feed_id, feed.feed_id)}"


class DashboardClient(FeedSourceInterface):
    """Async client for the dashboard API with retries on transient errors."""

    def __init__(self, base_url: str = None, timeout: float = None):
        self.base_url = (base_url or settings.api_url).rstrip("/")
        self.timeout = timeout or settings.request_timeout_seconds
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        self.session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.timeout),
            headers={"User-Agent": settings.user_agent},
        )
        return self

    async def __aexit__(self, *args):
        if self.session:
            await self.session.close()
            self.session = None

    async def _request(
        self,
        method: str,
        path: str,
        payload: Any = None,
        timeout: float = None,
    ) -> Any:
        """Send a request and decode the JSON body (None for empty bodies)."""
        if self.session is None:
            raise RuntimeError("DashboardClient must be used as an async context manager")

        kwargs: Dict[str, Any] = {}
        if payload is not None:
            kwargs["json"] = payload
        if timeout is not None:
            kwargs["timeout"] = aiohttp.ClientTimeout(total=timeout)

        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(settings.fetch_max_attempts),
            wait=wait_exponential(multiplier=0.5, min=0.5, max=settings.retry_backoff_max_seconds),
            retry=retry_if_exception_type(_TRANSIENT_ERRORS),
            reraise=True,
        ):
            with attempt:
                async with self.session.request(method, self.base_url + path, **kwargs) as response:
                    response.raise_for_status()
                    text = await response.text()
        if not text.strip():
            return None
        try:
            return json.loads(text)
        except ValueError as e:
            raise BackendError(f"{method} {path}", f"invalid JSON: {e}") from e

    async def _call(self, operation: str, method: str, path: str, **kwargs) -> Any:
        """Request wrapper translating transport failures into BackendError."""
        try:
            return await self._request(method, path, **kwargs)
        except aiohttp.ClientResponseError as e:
            logger.error("backend_call_failed", operation=operation, status=e.status, error=e.message)
            raise BackendError(operation, e.message, status=e.status) from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error("backend_call_failed", operation=operation, error=str(e) or type(e).__name__)
            raise BackendError(operation, str(e) or type(e).__name__) from e

    # Feeds

    async def list_feeds(self) -> List[FeedDescriptor]:
        data = await self._call("list_feeds", "GET", "/feeds")
        return [FeedDescriptor.from_dict(f) for f in data or []]

    async def add_feed(
        self,
        display_name: str,
        rss_url: str = None,
        bsky_handle: str = None,
        categories: List[str] = None,
    ) -> FeedDescriptor:
        payload = {
            "displayName": display_name,
            "rssUrl": rss_url,
            "bskyHandle": bsky_handle,
            "categories": categories,
        }
        payload = {k: v for k, v in payload.items() if v is not None}
        data = await self._call("add_feed", "POST", "/feeds/custom", payload=payload)
        logger.info("feed_added", display_name=display_name)
        return FeedDescriptor.from_dict(data)

    async def remove_feed(self, feed_id: str) -> None:
        await self._call("remove_feed", "DELETE", f"/feeds/custom/{quote(feed_id, safe='')}")
        logger.info("feed_removed", feed_id=feed_id)

    async def fetch_feed_items(self, feed: FeedDescriptor) -> List[Item]:
        """Fetch one feed's current articles. Raises SourceUnavailable."""
        try:
            data = await self._request("GET", articles_path(feed))
        except (aiohttp.ClientError, asyncio.TimeoutError, BackendError) as e:
            raise SourceUnavailable(feed.feed_id, str(e) or type(e).__name__) from e

        if data is None:
            return []
        if not isinstance(data, list):
            raise SourceUnavailable(feed.feed_id, "expected a list of articles")
        return [Item.from_dict(a) for a in data if isinstance(a, dict)]

    # Layout

    async def get_newspaper_lock(self) -> Optional[dict]:
        """Raw newspaper lock payload, or None when nothing is locked."""
        return await self._call("get_newspaper_lock", "GET", "/newspaper/lock")

    async def get_current_layout(self) -> Optional[LayoutSlots]:
        lock = await self.get_newspaper_lock()
        if not lock:
            return None
        return LayoutSlots.from_lock(lock)

    # Articles

    async def clip_article(self, url: str) -> dict:
        return await self._call(
            "clip_article", "POST", "/article/clip",
            payload={"url": url}, timeout=settings.clip_timeout_seconds,
        )

    async def summarize_text(self, text: str) -> dict:
        return await self._call(
            "summarize", "POST", "/summarize",
            payload={"text": text}, timeout=settings.clip_timeout_seconds,
        )

    async def get_og_image(self, url: str) -> dict:
        return await self._call(
            "get_og_image", "GET", f"/article/ogimage?url={quote(url, safe='')}",
        )

    async def post_to_bluesky(
        self,
        text: str,
        identifier: str,
        password: str,
        article_url: str = None,
        article_title: str = None,
        article_description: str = None,
        image_url: str = None,
    ) -> dict:
        payload = {
            "text": text,
            "identifier": identifier,
            "password": password,
            "articleUrl": article_url,
            "articleTitle": article_title,
            "articleDescription": article_description,
            "imageUrl": image_url,
        }
        payload = {k: v for k, v in payload.items() if v is not None}
        result = await self._call(
            "post_to_bluesky", "POST", "/article/bluesky",
            payload=payload, timeout=settings.post_timeout_seconds,
        )
        logger.info("bluesky_posted", success=bool(result and result.get("success")))
        return result or {}

    # Settings

    async def get_settings(self) -> Optional[dict]:
        return await self._call("get_settings", "GET", "/settings")

    async def patch_settings(self, patch: dict) -> None:
        await self._call("patch_settings", "PATCH", "/settings", payload=patch)

