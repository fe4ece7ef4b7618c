"""Google Trends daily RSS topic source via feedparser."""

import re

import feedparser

from ..errors import ParseError
from .base import TopicCandidate, TopicSource, make_candidate

TRENDS_RSS_URL = "https://trends.google.com/trending/rss"

# Served by /trending when the feed is unreachable
FALLBACK_TRENDS = [
    "Celebrity gossip",
    "Political news",
    "Technology news",
    "White House",
    "Elon Musk",
    "Hollywood",
    "Election polls",
    "Netflix releases",
    "Putin",
    "Middle East",
]


def clean_topic(topic: str) -> str:
    """Strip leading/trailing punctuation and cap at 100 chars."""
    topic = re.sub(r"^[^a-zA-Z0-9]+", "", (topic or "").strip())
    topic = re.sub(r"[^a-zA-Z0-9\s]+$", "", topic)
    return topic.strip()[:100]


def parse_traffic(value) -> float | None:
    """'200K+' -> 200000.0, '1M+' -> 1000000.0; None when unparseable."""
    if not value:
        return None
    m = re.match(r"\s*([\d.,]+)\s*([KkMm]?)", str(value))
    if not m:
        return None
    try:
        number = float(m.group(1).replace(",", ""))
    except ValueError:
        return None
    multiplier = {"k": 1_000, "m": 1_000_000}.get(m.group(2).lower(), 1)
    return number * multiplier


class GoogleTrendsSource(TopicSource):
    name = "google_trends"

    def __init__(self, config: dict = None, **kwargs):
        super().__init__(**kwargs)
        config = config or {}
        self.geo = config.get("geo", "US")
        self.limit = config.get("limit", 15)

    def fetch_topics(self) -> list[TopicCandidate]:
        r = self._get(TRENDS_RSS_URL, params={"geo": self.geo})
        feed = feedparser.parse(r.text)
        if feed.bozo and not feed.entries:
            raise ParseError(self.name, f"unreadable feed: {feed.get('bozo_exception')}")

        topics = []
        for entry in feed.entries[:self.limit]:
            traffic = entry.get("ht_approx_traffic")
            topic = make_candidate(
                clean_topic(entry.get("title", "")),
                self.name,
                url=entry.get("ht_news_item_url") or "",
                description=entry.get("ht_news_item_title") or "",
                engagement=parse_traffic(traffic),
                metadata={"traffic": traffic} if traffic else {},
            )
            if topic:
                topics.append(topic)
        return topics


def quick_trends(source: GoogleTrendsSource | None = None, limit: int = 10) -> list[str]:
    """Titles for the /trending command, never empty."""
    source = source or GoogleTrendsSource()
    titles = [t.title for t in source.fetch()]
    return titles[:limit] or list(FALLBACK_TRENDS)
