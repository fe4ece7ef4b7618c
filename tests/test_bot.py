"""Tests for trendbot/bot.py — command parsing and dispatch."""

from unittest.mock import MagicMock

import pytest
import requests

from trendbot.bot import TrendBot
from trendbot.deliver import SubscriberRegistry
from trendbot.topics.base import TopicCandidate


@pytest.fixture
def bot(mock_generator):
    client = MagicMock()
    engine = MagicMock()
    trends_source = MagicMock()
    trends_source.fetch.return_value = [TopicCandidate(title="Grammy night", source="google_trends")]
    return TrendBot(client, engine, mock_generator, SubscriberRegistry(),
                    scheduler=MagicMock(), trends_source=trends_source)


def update(text, chat_id=5, update_id=1):
    return {"update_id": update_id, "message": {"chat": {"id": chat_id}, "text": text}}


class TestParseCommand:
    def test_variants(self):
        assert TrendBot.parse_command("/tweet") == "tweet"
        assert TrendBot.parse_command("/Tweet@MyTrendBot now") == "tweet"
        assert TrendBot.parse_command("hello") is None
        assert TrendBot.parse_command("") is None
        assert TrendBot.parse_command("/") is None


class TestCommands:
    def test_subscribe_and_unsubscribe(self, bot):
        bot.handle_update(update("/subscribe"))
        assert 5 in bot.subscribers
        bot.handle_update(update("/unsubscribe"))
        assert 5 not in bot.subscribers
        assert bot.client.send_safe.call_count == 2

    def test_trending_lists_titles(self, bot):
        bot.handle_update(update("/trending"))
        chat_id, markdown, plain = bot.client.send_safe.call_args[0]
        assert chat_id == 5
        assert "1. Grammy night" in plain

    def test_tweet_uses_top_trend(self, bot):
        bot.engine.get_all_trends.return_value = [
            TopicCandidate(title="Senate vote", source="news", url="https://n.example/v"),
        ]
        bot.handle_update(update("/tweet"))
        plain = bot.client.send_safe.call_args[0][2]
        assert "Tweet about Senate vote" in plain
        assert "https://n.example/v" in plain

    def test_tweet_without_trends(self, bot):
        bot.engine.get_all_trends.return_value = []
        bot.handle_update(update("/tweet"))
        assert "Unable to fetch trends" in bot.client.send_safe.call_args[0][2]
        bot.generator.suggest.assert_not_called()

    def test_run_triggers_scheduler(self, bot):
        bot.scheduler.trigger_async.return_value = False
        bot.handle_update(update("/run"))
        bot.scheduler.trigger_async.assert_called_once()
        assert "already in progress" in bot.client.send_safe.call_args[0][2]

    def test_handler_error_replies_generic(self, bot):
        bot.engine.get_all_trends.side_effect = RuntimeError("x")
        bot.handle_update(update("/tweet"))
        assert "An error occurred" in bot.client.send_safe.call_args[0][2]

    def test_unknown_command_ignored(self, bot):
        bot.handle_update(update("/nope"))
        bot.handle_update({"update_id": 3, "edited_message": {}})
        bot.client.send_safe.assert_not_called()


class TestPolling:
    def test_offset_advances(self, bot):
        bot.client.get_updates.return_value = [update("/help", update_id=10), update("/help", update_id=11)]
        bot.poll_once()
        assert bot.offset == 12
        assert bot.client.send_safe.call_count == 2

    def test_poll_failure_is_logged(self, bot):
        bot.client.get_updates.side_effect = requests.ConnectionError("down")
        bot.poll_once()
        assert bot.offset is None
