"""Combine per-source results into one ranked, deduplicated trend set."""

from .base import TopicCandidate


def dedupe(topics: list[TopicCandidate]) -> list[TopicCandidate]:
    """Drop repeated titles (case-insensitive), keeping the first seen."""
    seen = set()
    unique = []
    for t in topics:
        if t.key not in seen:
            seen.add(t.key)
            unique.append(t)
    return unique


def merge(lists, allowed_categories, limit: int = 15) -> list[TopicCandidate]:
    """Concatenate, filter by category, dedupe, rank by engagement, truncate."""
    allowed = set(allowed_categories)
    combined = [t for topics in lists for t in topics if t.category in allowed]
    unique = dedupe(combined)
    # list.sort is stable, so equal scores keep source order
    unique.sort(key=lambda t: t.score, reverse=True)
    return unique[:limit]
