"""TopicEngine — concurrent multi-source fetch, merge, dedupe, rank."""

import concurrent.futures

from ..config import Settings, load_config
from ..log import get_logger
from .aggregator import AggregatorSource
from .base import TopicCandidate, TopicSource
from .categorize import Categorizer
from .fallback import FallbackSource
from .google_trends import GoogleTrendsSource
from .merge import merge
from .news import NewsSource
from .social import SocialSource

SOURCE_MAP = {
    "social": SocialSource,
    "news": NewsSource,
    "aggregator": AggregatorSource,
    "google_trends": GoogleTrendsSource,
}

# Sources that substitute the aggregator's output when they fail
FALLBACKS = {
    "social": "aggregator",
    "news": "aggregator",
}


class TopicEngine:
    """Fetches from all configured sources in parallel, deduplicates, ranks."""

    # Slack on top of a source's own worst case before it is abandoned
    FETCH_GRACE = 5.0

    def __init__(self, sources: list[TopicSource], settings: Settings | None = None):
        self.sources = list(sources)
        self.settings = settings or Settings()

    @classmethod
    def from_settings(cls, settings: Settings, config: dict | None = None) -> "TopicEngine":
        """Build the configured sources, in fetch order, with fallbacks wired."""
        if config is None:
            config = load_config()
        source_config = config.get("topic_sources", {})
        categorizer = Categorizer(settings.categories)

        def build(name):
            return SOURCE_MAP[name](
                source_config.get(name, {}),
                timeout=settings.fetch_timeout,
                categorizer=categorizer,
            )

        sources = []
        for name in settings.sources:
            if name not in SOURCE_MAP:
                get_logger("topics.engine").warning("Unknown topic source %r — skipping", name)
                continue
            src = build(name)
            backup = FALLBACKS.get(name)
            if backup:
                src = FallbackSource(src, build(backup))
            sources.append(src)
        return cls(sources, settings)

    def fetch_all(self) -> list[list[TopicCandidate]]:
        """Fetch every available source concurrently; results in source order."""
        active = [src for src in self.sources if src.is_available]
        if not active:
            return []

        logger = get_logger("topics.engine")
        pool = concurrent.futures.ThreadPoolExecutor(max_workers=len(active))
        try:
            futures = [pool.submit(src.fetch) for src in active]
            results = []
            for src, future in zip(active, futures):
                wait = src.max_duration + self.FETCH_GRACE
                try:
                    topics = future.result(timeout=wait)
                except concurrent.futures.TimeoutError:
                    logger.warning("%s: no answer after %.1fs — skipped", src.name, wait)
                    topics = []
                except Exception:
                    logger.exception("%s: fetch crashed — skipped", src.name)
                    topics = []
                logger.info("%s: found %d topics", src.name, len(topics))
                results.append(topics)
            return results
        finally:
            pool.shutdown(wait=False, cancel_futures=True)

    def get_all_trends(self) -> list[TopicCandidate]:
        """Merged, allow-listed, ranked trend set for one run."""
        return merge(
            self.fetch_all(),
            self.settings.allowed_categories,
            limit=self.settings.max_trends,
        )
