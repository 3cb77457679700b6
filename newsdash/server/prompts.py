"""Reusable agent prompt templates."""

from datetime import date as date_type
from typing import Optional


def daily_briefing(date: Optional[str] = None, topic: Optional[str] = None) -> str:
    """Structured daily briefing built from the current top stories."""
    date_str = date or date_type.today().strftime("%d %b %Y").lstrip("0")
    topic_clause = f" focusing on {topic}" if topic else ""
    return (
        f"Using the top stories from the news dashboard for {date_str}{topic_clause}, "
        "write a structured daily briefing.\n\n"
        "Format:\n"
        "1. **Headline**: one sentence summary\n"
        "   Source · time ago\n"
        "   Key implication or context sentence.\n\n"
        "Start by calling get_digest to retrieve today's stories, then write the briefing. "
        "Highlight any cross-cutting themes at the end."
    )


def topic_research(topic: str) -> str:
    """Research a topic across all feeds."""
    return (
        f'Research the topic "{topic}" using the news dashboard feeds.\n\n'
        "Steps:\n"
        f'1. Call find_articles_by_topic with query="{topic}" to find relevant articles.\n'
        "2. For the 3 most relevant articles, call clip_article to get full content.\n"
        "3. Synthesise:\n"
        "   - A 3-5 sentence overview of the topic\n"
        "   - Key findings and data points as bullets\n"
        "   - Notable companies, drugs, or people mentioned\n"
        "   - Open questions or controversies"
    )


def bluesky_post_draft(article_title: str, article_url: str, context: Optional[str] = None) -> str:
    """Draft a BlueSky post sharing an article."""
    context_clause = f"\n\nAngle to emphasise: {context}" if context else ""
    return (
        "Write a compelling BlueSky post sharing this article:\n\n"
        f'Title: "{article_title}"\n'
        f"URL: {article_url}{context_clause}\n\n"
        "Requirements:\n"
        "- Maximum 300 characters (BlueSky limit)\n"
        "- Informative and engaging, not clickbait\n"
        "- Include the URL at the end\n"
        "- Use plain language, no excessive hashtags\n\n"
        "Draft 2-3 options and indicate character counts. "
        "Then call post_to_bluesky with the best option if credentials are available."
    )
