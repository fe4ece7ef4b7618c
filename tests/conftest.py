"""Shared test fixtures."""

import time
from unittest.mock import MagicMock

import pytest

from trendbot.config import Settings
from trendbot.errors import FetchError
from trendbot.topics.base import TopicCandidate, TopicSource


class StubSource(TopicSource):
    """Source returning canned topics, or raising `error` if given.

    `delay` seconds pass before it answers.
    """

    def __init__(self, name, topics=(), error=None, available=True, timeout=10.0, delay=0):
        super().__init__(timeout=timeout)
        self.delay = delay
        self.name = name
        self.topics = list(topics)
        self.error = error
        self.available = available
        self.calls = 0

    @property
    def is_available(self):
        return self.available

    def fetch_topics(self):
        self.calls += 1
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return [TopicCandidate(title=t.title, source=t.source, url=t.url,
                               description=t.description, engagement=t.engagement)
                for t in self.topics]


@pytest.fixture
def stub_source():
    return StubSource


@pytest.fixture
def failing_source():
    def make(name):
        return StubSource(name, error=FetchError(name, "boom"))
    return make


@pytest.fixture
def settings():
    """Default settings with no pacing delay."""
    return Settings(pacing_delay=0)


@pytest.fixture
def sample_topics():
    return [
        TopicCandidate(title="Taylor Swift tour", source="social", engagement=500,
                       category="entertainment"),
        TopicCandidate(title="Senate passes budget", source="news", url="https://news.example/budget",
                       description="The Senate voted late on Tuesday.", category="politics"),
        TopicCandidate(title="Celebrity breakup rumor", source="aggregator", engagement=1200,
                       url="https://reddit.com/r/popular/comments/x", category="entertainment"),
    ]


@pytest.fixture
def mock_generator():
    gen = MagicMock()
    gen.suggest.side_effect = lambda topic, context: f"Tweet about {topic}"
    return gen


@pytest.fixture
def mock_notifier():
    return MagicMock()
