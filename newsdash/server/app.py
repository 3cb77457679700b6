"""MCP server exposing the news dashboard to agents.

Nothing is registered at import time: ``create_server`` wires a set of
handlers into a fresh FastMCP instance, and ``main`` runs it over stdio.
"""

import asyncio
from typing import Annotated, Any, Dict, List, Optional

import structlog
from mcp.server.fastmcp import FastMCP
from pydantic import Field

from ..config.logging import configure_logging
from ..config.settings import settings
from ..ingestion.api_client import DashboardClient
from . import prompts
from .tools import NewsTools

logger = structlog.get_logger()

SERVER_NAME = "news-dashboard"


def create_server(tools: NewsTools) -> FastMCP:
    """Build a FastMCP server whose tools, resources and prompts call ``tools``."""
    mcp = FastMCP(SERVER_NAME)

    # Tools

    @mcp.tool(description="List all configured feeds (built-in and custom) with their IDs, "
                          "display names, types, and categories.")
    async def list_feeds() -> str:
        return await tools.list_feeds()

    @mcp.tool(description="Fetch articles from a specific feed or from all feeds. "
                          "Returns articles sorted newest-first.")
    async def get_articles(
        feed_id: Annotated[Optional[str], Field(
            description='Feed ID to fetch (e.g. "techcrunch", "nature"). Omit to fetch all feeds.')] = None,
        limit: Annotated[Optional[int], Field(
            ge=1, le=settings.max_item_limit,
            description=f"Maximum number of articles to return (default: {settings.default_item_limit}).")] = None,
    ) -> str:
        return await tools.get_articles(feed_id, limit)

    @mcp.tool(description="Search for articles matching a topic or keyword across all feeds "
                          "(or a specific set of feeds). Returns matches sorted by relevance then recency.")
    async def find_articles_by_topic(
        query: Annotated[str, Field(min_length=1, description="Search query: keywords or topic phrase.")],
        feed_ids: Annotated[Optional[List[str]], Field(
            description="Restrict search to these feed IDs. Omit to search all feeds.")] = None,
        limit: Annotated[Optional[int], Field(
            ge=1, le=settings.max_search_limit,
            description=f"Max results (default: {settings.default_search_limit}).")] = None,
    ) -> str:
        return await tools.find_articles_by_topic(query, feed_ids, limit)

    @mcp.tool(description="Get the current newspaper layout: hero article, related stories, featured, "
                          "editor's picks, top stories grid, and latest articles.")
    async def get_top_stories() -> str:
        return await tools.get_top_stories()

    @mcp.tool(description="Get today's top stories as one deduplicated list (lead, related, featured, "
                          "picks, top stories) with source and time since publish. Use this for briefings.")
    async def get_digest(
        as_json: Annotated[bool, Field(description="Return JSON instead of a numbered list.")] = False,
    ) -> str:
        return await tools.get_digest(as_json)

    @mcp.tool(description="Fetch the full content of an article URL and return it as clean Markdown "
                          "with YAML frontmatter (title, source, url, date, tags).")
    async def clip_article(url: Annotated[str, Field(description="The article URL to clip.")]) -> str:
        return await tools.clip_article(url)

    @mcp.tool(description="Get a concise AI-generated summary of an article URL using the backend "
                          "summarisation service.")
    async def summarize_article(url: Annotated[str, Field(description="The article URL to summarise.")]) -> str:
        return await tools.summarize_article(url)

    @mcp.tool(description="Extract the Open Graph (og:image) thumbnail URL and alt text from any article URL.")
    async def get_article_ogimage(url: Annotated[str, Field(description="The article URL.")]) -> str:
        return await tools.get_article_ogimage(url)

    @mcp.tool(description="Share an article to BlueSky. Provide the post text (max 300 chars), your BlueSky "
                          "credentials, and optionally the article URL/title/description for a link card.")
    async def post_to_bluesky(
        text: Annotated[str, Field(max_length=300, description="The post text (max 300 characters).")],
        identifier: Annotated[str, Field(description="BlueSky handle or email (e.g. user.bsky.social).")],
        password: Annotated[str, Field(description="BlueSky app password (not the account password).")],
        article_url: Annotated[Optional[str], Field(description="URL to attach as a link card.")] = None,
        article_title: Annotated[Optional[str], Field(description="Title for the link card.")] = None,
        article_description: Annotated[Optional[str], Field(
            description="Description for the link card.")] = None,
        image_url: Annotated[Optional[str], Field(description="Thumbnail image URL for the link card.")] = None,
    ) -> str:
        return await tools.post_to_bluesky(
            text, identifier, password, article_url, article_title, article_description, image_url,
        )

    @mcp.tool(description="Get the current app settings: font size, max articles, enabled feeds, "
                          "update intervals, feed categories, and feed order.")
    async def get_settings() -> str:
        return await tools.get_settings()

    @mcp.tool(description="Update app settings. Pass only the keys you want to change; they are merged "
                          'with existing settings, e.g. app_settings={"fontSize": "large"}.')
    async def update_settings(
        app_settings: Annotated[Optional[Dict[str, Any]], Field(description="App settings to merge.")] = None,
        feed_order: Annotated[Optional[List[str]], Field(
            description="New feed display order as a list of feed IDs.")] = None,
    ) -> str:
        return await tools.update_settings(app_settings, feed_order)

    @mcp.tool(description="Add a new custom feed. Provide either an RSS URL or a BlueSky handle (not both).")
    async def add_feed(
        display_name: Annotated[str, Field(min_length=1, description="Name shown in the sidebar.")],
        rss_url: Annotated[Optional[str], Field(description="RSS/Atom feed URL.")] = None,
        bsky_handle: Annotated[Optional[str], Field(
            description='BlueSky handle for a profile feed, e.g. "economist.com".')] = None,
        categories: Annotated[Optional[List[str]], Field(
            description='Category IDs to assign, e.g. ["biotech", "science"].')] = None,
    ) -> str:
        return await tools.add_feed(display_name, rss_url, bsky_handle, categories)

    @mcp.tool(description="Remove a custom feed by its feed ID. Built-in feeds cannot be removed.")
    async def remove_feed(
        feed_id: Annotated[str, Field(min_length=1, description="The feed ID of the custom feed to remove.")],
    ) -> str:
        return await tools.remove_feed(feed_id)

    # Resources

    @mcp.resource("newsdash://feeds", name="feeds", mime_type="application/json",
                  description="All configured feeds (built-in and custom).")
    async def feeds_resource() -> str:
        return await tools.feeds_resource()

    @mcp.resource("newsdash://feed/{feed_id}", name="feed-articles", mime_type="application/json",
                  description='Articles from a specific feed, e.g. newsdash://feed/techcrunch.')
    async def feed_resource(feed_id: str) -> str:
        return await tools.feed_resource(feed_id)

    @mcp.resource("newsdash://top-stories", name="top-stories", mime_type="application/json",
                  description="Current newspaper layout: hero, related, featured, picks, top stories, latest.")
    async def top_stories_resource() -> str:
        return await tools.top_stories_resource()

    @mcp.resource("newsdash://settings", name="settings", mime_type="application/json",
                  description="Current user settings (font size, enabled feeds, feed order, etc.).")
    async def settings_resource() -> str:
        return await tools.settings_resource()

    # Prompts

    @mcp.prompt(name="daily-briefing", description="Generate a structured daily news briefing from top stories.")
    def daily_briefing(date: Optional[str] = None, topic: Optional[str] = None) -> str:
        return prompts.daily_briefing(date, topic)

    @mcp.prompt(name="topic-research", description="Research a topic across all feeds.")
    def topic_research(topic: str) -> str:
        return prompts.topic_research(topic)

    @mcp.prompt(name="bluesky-post-draft", description="Draft a compelling BlueSky post for sharing an article.")
    def bluesky_post_draft(article_title: str, article_url: str, context: Optional[str] = None) -> str:
        return prompts.bluesky_post_draft(article_title, article_url, context)

    return mcp


async def run_server(base_url: str = None) -> None:
    """Serve over stdio until the client disconnects."""
    async with DashboardClient(base_url) as client:
        server = create_server(NewsTools(client))
        logger.info("server_starting", name=SERVER_NAME, api_url=client.base_url)
        await server.run_stdio_async()


def main() -> None:
    """Console entry point."""
    configure_logging()
    try:
        asyncio.run(run_server())
    except KeyboardInterrupt:
        pass
