"""Publish-time parsing, recency sort keys and relative-age formatting."""

from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Optional

# Sort value used for items without a usable publish time: they go last.
EPOCH_MIN = datetime.min.replace(tzinfo=timezone.utc)


def parse_timestamp(value) -> Optional[datetime]:
    """Parse an RFC 2822 or ISO 8601 timestamp into an aware UTC datetime.

    Returns None for missing or unparseable values.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)):
        # Backend lock timestamps are epoch milliseconds
        try:
            parsed = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    else:
        text = str(value).strip()
        if not text:
            return None
        parsed = None
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            pass
        if parsed is None:
            try:
                parsed = parsedate_to_datetime(text)
            except (TypeError, ValueError, IndexError):
                return None
        if parsed is None:
            return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def recency_key(publish_time: Optional[datetime]) -> datetime:
    """Sort key for descending recency; missing times compare as the minimum."""
    if publish_time is None:
        return EPOCH_MIN
    if publish_time.tzinfo is None:
        return publish_time.replace(tzinfo=timezone.utc)
    return publish_time


def format_age(publish_time: Optional[datetime], now: Optional[datetime] = None) -> str:
    """Human-relative age of a publish time, e.g. "45 minutes ago".

    Returns an empty string when there is no publish time.
    """
    if publish_time is None:
        return ""
    now = now or datetime.now(timezone.utc)
    if publish_time.tzinfo is None:
        publish_time = publish_time.replace(tzinfo=timezone.utc)

    minutes = int((now - publish_time).total_seconds() // 60)
    if minutes < 2:
        return "just now"
    if minutes < 60:
        return f"{minutes} minutes ago"

    hours = int(minutes / 60 + 0.5)
    if hours == 1:
        return "an hour ago"
    return f"{hours} hours ago"
