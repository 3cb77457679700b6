"""Link-based deduplication of aggregated items."""

from typing import Iterable, List

from ..ingestion.interfaces import Item


def dedupe(items: Iterable[Item]) -> List[Item]:
    """Keep the first item seen for each link, preserving input order.

    Items without a link cannot be identified, so each of them is kept.
    """
    seen_links = set()
    unique = []
    for item in items:
        if item.link:
            if item.link in seen_links:
                continue
            seen_links.add(item.link)
        unique.append(item)
    return unique
