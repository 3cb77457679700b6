"""Pipeline orchestration - get, search and digest requests."""

from .feeds import DigestResult, FeedPipeline, FeedQueryResult, ResultStatus

__all__ = ["DigestResult", "FeedPipeline", "FeedQueryResult", "ResultStatus"]
