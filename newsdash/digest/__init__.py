"""Digest extraction from the precomputed newspaper layout."""

from .extractor import DigestEntry, annotate_ages, extract_digest, render_digest

__all__ = ["DigestEntry", "annotate_ages", "extract_digest", "render_digest"]
