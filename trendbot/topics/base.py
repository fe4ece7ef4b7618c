"""TopicCandidate dataclass + TopicSource ABC."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

import requests

from ..config import DEFAULT_CATEGORIES, USER_AGENT
from ..errors import FetchError
from ..log import get_logger
from .categorize import Categorizer


@dataclass
class TopicCandidate:
    """A discovered trending topic."""
    title: str
    source: str  # "social", "news", "aggregator", "google_trends"
    url: str = ""
    description: str = ""
    engagement: float | None = None
    category: str = "other"
    metadata: dict = field(default_factory=dict)

    def __post_init__(self):
        self.title = (self.title or "").strip()
        if not self.title:
            raise ValueError("TopicCandidate.title must not be empty")

    @property
    def key(self) -> str:
        """Identity key used for dedup and history."""
        return self.title.casefold()

    @property
    def score(self) -> float:
        return self.engagement or 0.0


def make_candidate(title, source: str, **kwargs) -> TopicCandidate | None:
    """Build a candidate, or None when the upstream title is blank."""
    if not isinstance(title, str) or not title.strip():
        return None
    return TopicCandidate(title=title, source=source, **kwargs)


class TopicSource(ABC):
    """Abstract base class for topic sources.

    Subclasses implement `fetch_topics()`, which may raise. Callers use
    `fetch()`, which never does.
    """

    name: str = "unknown"

    def __init__(self, timeout: float = 10.0, categorizer: Categorizer | None = None):
        self.timeout = timeout
        self.categorizer = categorizer or Categorizer(DEFAULT_CATEGORIES)

    @abstractmethod
    def fetch_topics(self) -> list[TopicCandidate]:
        """Fetch trending topics from this source, raising on failure."""
        ...

    @property
    def is_available(self) -> bool:
        """Check if this source is configured and available."""
        return True

    @property
    def max_duration(self) -> float:
        """Longest a single `fetch_topics()` call should take, in seconds."""
        return self.timeout

    @property
    def logger(self):
        return get_logger(f"topics.{self.name}")

    def fetch(self) -> list[TopicCandidate]:
        """Fetch and categorize; any source failure degrades to []."""
        try:
            topics = self.fetch_topics()
        except (FetchError, requests.RequestException) as e:
            self.logger.warning("%s: fetch failed — %s", self.name, e)
            return []
        except Exception as e:
            # Upstream payloads we could not make sense of
            self.logger.warning("%s: fetch failed — %s: %s", self.name, type(e).__name__, e)
            return []

        for topic in topics:
            topic.category = self.categorizer(topic.title)
        return topics

    def _get(self, url: str, **kwargs) -> requests.Response:
        headers = {"User-Agent": USER_AGENT}
        headers.update(kwargs.pop("headers", {}))
        r = requests.get(url, headers=headers, timeout=self.timeout, **kwargs)
        r.raise_for_status()
        return r
