"""Composite source: use a backup source when the primary fails."""

from .base import TopicCandidate, TopicSource


class FallbackSource(TopicSource):
    """Wraps `primary`; on its failure returns `fallback`'s topics instead.

    Any exception from the primary counts as a failure, the same set that
    `TopicSource.fetch()` contains. If the fallback also raises, the error
    reaches this source's own `fetch()` boundary and the result is [].
    """

    def __init__(self, primary: TopicSource, fallback: TopicSource):
        super().__init__(timeout=primary.timeout, categorizer=primary.categorizer)
        self.primary = primary
        self.fallback = fallback
        self.name = primary.name

    @property
    def is_available(self) -> bool:
        return self.primary.is_available or self.fallback.is_available

    @property
    def max_duration(self) -> float:
        # Primary and fallback run one after the other
        return self.primary.max_duration + self.fallback.max_duration

    def fetch_topics(self) -> list[TopicCandidate]:
        if self.primary.is_available:
            try:
                return self.primary.fetch_topics()
            except Exception as e:
                self.logger.warning(
                    "%s: failed (%s: %s), falling back to %s",
                    self.primary.name, type(e).__name__, e, self.fallback.name,
                )
        return self.fallback.fetch_topics()
