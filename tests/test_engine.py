"""Tests for trendbot/topics/engine.py — concurrent fetch + merge."""

from unittest.mock import MagicMock, patch

import requests

from trendbot.config import Settings
from trendbot.topics.aggregator import AggregatorSource
from trendbot.topics.base import TopicCandidate
from trendbot.topics.engine import TopicEngine
from trendbot.topics.fallback import FallbackSource
from trendbot.topics.google_trends import GoogleTrendsSource
from trendbot.topics.news import NewsSource
from trendbot.topics.social import SocialSource


class TestGetAllTrends:
    def test_cross_source_duplicate_keeps_social(self, stub_source):
        engine = TopicEngine([
            stub_source("social", [TopicCandidate(title="Taylor Swift tour", source="social", engagement=500)]),
            stub_source("news", [TopicCandidate(title="taylor swift TOUR", source="news", engagement=10)]),
            stub_source("aggregator", []),
        ])

        trends = engine.get_all_trends()

        assert len(trends) == 1
        assert trends[0].title == "Taylor Swift tour"
        assert trends[0].source == "social"
        assert trends[0].engagement == 500
        assert trends[0].category == "entertainment"

    def test_all_sources_failing_gives_empty(self, failing_source):
        engine = TopicEngine([failing_source("social"), failing_source("news"), failing_source("aggregator")])
        assert engine.get_all_trends() == []

    def test_one_failing_source_does_not_block_others(self, stub_source, failing_source):
        engine = TopicEngine([
            failing_source("social"),
            stub_source("news", [TopicCandidate(title="Election results", source="news")]),
        ])
        assert [t.title for t in engine.get_all_trends()] == ["Election results"]

    @patch("trendbot.topics.base.requests.get")
    def test_malformed_payload_does_not_sink_healthy_sources(self, mock_get):
        def respond(url, **kwargs):
            r = MagicMock()
            if "reddit" in url:
                r.json.return_value = {"data": {"children": [{"data": {"title": "Trump rally", "score": "12"}}]}}
            else:
                r.json.return_value = {"status": "ok", "articles": [{"title": "Senate vote", "source": "CNN"}]}
            return r

        mock_get.side_effect = respond
        engine = TopicEngine([AggregatorSource(), NewsSource({"api_key": "k"})])

        assert sorted(t.title for t in engine.get_all_trends()) == ["Senate vote", "Trump rally"]

    def test_crashing_fetch_is_skipped(self, stub_source):
        broken = stub_source("social", [TopicCandidate(title="Trump", source="social")])
        broken.categorizer = MagicMock(side_effect=RuntimeError("bad taxonomy"))
        engine = TopicEngine([broken, stub_source("news", [TopicCandidate(title="Senate vote", source="news")])])
        assert [t.title for t in engine.get_all_trends()] == ["Senate vote"]

    def test_slow_primary_still_reaches_fallback(self, stub_source):
        primary = stub_source("news", error=requests.Timeout("read timed out"), timeout=0.5, delay=0.4)
        backup = stub_source("aggregator", [TopicCandidate(title="Senate vote", source="aggregator")],
                             timeout=0.5, delay=0.4)
        engine = TopicEngine([FallbackSource(primary, backup)])
        engine.FETCH_GRACE = 0.2

        # 0.8s chain: past one source's budget plus grace, inside the combined one
        assert [t.title for t in engine.get_all_trends()] == ["Senate vote"]

    def test_results_in_source_order(self, stub_source):
        engine = TopicEngine([
            stub_source("a", [TopicCandidate(title="Senate one", source="a")]),
            stub_source("b", [TopicCandidate(title="Senate two", source="b")]),
        ])
        assert [[t.title for t in r] for r in engine.fetch_all()] == [["Senate one"], ["Senate two"]]

    def test_unavailable_sources_skipped(self, stub_source):
        src = stub_source("social", [TopicCandidate(title="Trump", source="social")], available=False)
        assert TopicEngine([src]).fetch_all() == []
        assert src.calls == 0

    def test_respects_allow_list_and_limit(self, stub_source):
        topics = [TopicCandidate(title=f"vote {i}", source="news", engagement=i) for i in range(10)]
        topics.append(TopicCandidate(title="cooking tips", source="news", engagement=999))
        settings = Settings(max_trends=4)
        trends = TopicEngine([stub_source("news", topics)], settings).get_all_trends()
        assert [t.title for t in trends] == ["vote 9", "vote 8", "vote 7", "vote 6"]


class TestFromSettings:
    def test_default_wiring(self):
        engine = TopicEngine.from_settings(Settings(), config={})
        assert [s.name for s in engine.sources] == ["social", "news", "aggregator"]
        social, news, aggregator = engine.sources
        assert isinstance(social, FallbackSource) and isinstance(social.primary, SocialSource)
        assert isinstance(social.fallback, AggregatorSource)
        assert isinstance(news, FallbackSource) and isinstance(news.primary, NewsSource)
        assert isinstance(aggregator, AggregatorSource)

    def test_custom_order_timeout_and_unknown(self):
        settings = Settings(sources=["google_trends", "bogus", "aggregator"], fetch_timeout=4)
        engine = TopicEngine.from_settings(settings, config={"topic_sources": {"google_trends": {"geo": "GB"}}})
        assert [s.name for s in engine.sources] == ["google_trends", "aggregator"]
        assert isinstance(engine.sources[0], GoogleTrendsSource)
        assert engine.sources[0].geo == "GB"
        assert all(s.timeout == 4 for s in engine.sources)

    def test_categorizer_from_settings(self):
        settings = Settings(categories=[("sports", ["nba"])], sources=["aggregator"])
        engine = TopicEngine.from_settings(settings, config={})
        assert engine.sources[0].categorizer("NBA draft") == "sports"
