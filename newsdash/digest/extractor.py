"""Flattens the backend's newspaper layout into a digest list."""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

import structlog

from ..ingestion.interfaces import Item, LayoutSlots
from ..ranking.dedupe import dedupe
from ..recency import format_age

logger = structlog.get_logger()


@dataclass
class DigestEntry:
    """A digest item with its relative age for display."""
    item: Item
    age: str  # Empty when the item has no publish time

    def to_dict(self) -> dict:
        data = self.item.to_dict()
        if self.age:
            data["age"] = self.age
        return data


def extract_digest(layout: Optional[LayoutSlots]) -> List[Item]:
    """Lead, related, featured, picks and top stories, deduplicated in that order.

    The "latest" slot is not part of the digest. Returns an empty list when
    no layout is available.
    """
    if layout is None:
        return []

    candidates: List[Item] = []
    if layout.lead is not None:
        candidates.append(layout.lead)
    candidates.extend(layout.related)
    if layout.featured is not None:
        candidates.append(layout.featured)
    candidates.extend(layout.picks)
    candidates.extend(layout.top_stories)

    digest = dedupe(candidates)
    logger.debug("digest_extracted", candidates=len(candidates), items=len(digest))
    return digest


def annotate_ages(items: List[Item], now: datetime = None) -> List[DigestEntry]:
    """Pair each item with a "time since publish" string."""
    return [DigestEntry(item, format_age(item.publish_time, now)) for item in items]


def render_digest(entries: List[DigestEntry]) -> str:
    """Numbered plain-text digest: title, then source and age, then link."""
    lines = []
    for position, entry in enumerate(entries, start=1):
        item = entry.item
        lines.append(f"{position}. {item.title or 'Untitled'}")
        meta = [m for m in (item.source_name or item.source, entry.age) if m]
        if meta:
            lines.append(f"   {' · '.join(meta)}")
        if item.link:
            lines.append(f"   {item.link}")
    return "\n".join(lines)
