"""Feed ingestion - backend client and concurrent aggregation."""

from .interfaces import FeedDescriptor, FeedSourceInterface, Item, LayoutSlots, ScoredItem, SourceKind
from .api_client import DashboardClient
from .aggregator import Aggregator, AggregationResult, FeedFailure

__all__ = [
    "FeedDescriptor", "FeedSourceInterface", "Item", "LayoutSlots", "ScoredItem", "SourceKind",
    "DashboardClient", "Aggregator", "AggregationResult", "FeedFailure",
]
