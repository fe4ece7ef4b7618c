"""Telegram command surface: long-polls getUpdates and answers commands."""

import requests

from .deliver import SubscriberRegistry, TelegramClient, escape_markdown
from .errors import DeliveryError
from .job import resolve_link
from .log import get_logger, log
from .topics.google_trends import GoogleTrendsSource, quick_trends

WELCOME = """Trend Tweet Bot

Suggests tweets about what's trending right now.

Available Commands:
/trending - Get current trending topics
/tweet - Generate a tweet for the top trend
/subscribe - Get scheduled suggestions
/unsubscribe - Stop scheduled suggestions
/run - Run the pipeline now
/help - Show this message"""


class TrendBot:
    def __init__(self, client: TelegramClient, engine, generator,
                 subscribers: SubscriberRegistry, scheduler=None, trends_source=None):
        self.client = client
        self.engine = engine
        self.generator = generator
        self.subscribers = subscribers
        self.scheduler = scheduler
        self.trends_source = trends_source or GoogleTrendsSource()
        self.offset = None
        self.commands = {
            "start": self.cmd_help,
            "help": self.cmd_help,
            "trending": self.cmd_trending,
            "tweet": self.cmd_tweet,
            "subscribe": self.cmd_subscribe,
            "unsubscribe": self.cmd_unsubscribe,
            "run": self.cmd_run,
        }

    # ── commands: each returns (markdown, plain) ──

    def cmd_help(self, chat_id):
        return escape_markdown(WELCOME), WELCOME

    def cmd_trending(self, chat_id):
        titles = quick_trends(self.trends_source)
        plain = "📈 Current Trending Topics:\n\n" + "\n".join(
            f"{i}. {t}" for i, t in enumerate(titles, 1)
        ) + "\n\nUse /tweet to generate a tweet!"
        markdown = "📈 *Current Trending Topics:*\n\n" + "\n".join(
            f"{i}\\. {escape_markdown(t)}" for i, t in enumerate(titles, 1)
        ) + "\n\nUse /tweet to generate a tweet\\!"
        return markdown, plain

    def cmd_tweet(self, chat_id):
        trends = self.engine.get_all_trends()
        if not trends:
            text = "❌ Unable to fetch trends at the moment."
            return escape_markdown(text), text
        top = trends[0]
        suggestion = self.generator.suggest(top.title, top.description or top.title)
        link = resolve_link(top)
        plain = f"💡 {top.title}\n\n{suggestion}\n\n🔗 {link}"
        markdown = (f"💡 *{escape_markdown(top.title)}*\n\n{escape_markdown(suggestion)}"
                    f"\n\n🔗 {escape_markdown(link)}")
        return markdown, plain

    def cmd_subscribe(self, chat_id):
        self.subscribers.add(chat_id)
        text = "✅ Subscribed! You'll receive scheduled trend suggestions."
        return escape_markdown(text), text

    def cmd_unsubscribe(self, chat_id):
        self.subscribers.remove(chat_id)
        text = "❌ Unsubscribed from scheduled suggestions."
        return escape_markdown(text), text

    def cmd_run(self, chat_id):
        if self.scheduler is None:
            text = "Manual runs are not available."
        elif self.scheduler.trigger_async():
            text = "🔍 Run started — suggestions will follow."
        else:
            text = "⏳ A run is already in progress."
        return escape_markdown(text), text

    # ── dispatch ──

    @staticmethod
    def parse_command(text: str) -> str | None:
        """'/tweet@MyBot now' -> 'tweet'; None for non-commands."""
        if not text or not text.startswith("/"):
            return None
        word = text.split()[0][1:]
        return word.split("@")[0].lower() or None

    def handle_update(self, update: dict):
        message = update.get("message") or {}
        chat_id = (message.get("chat") or {}).get("id")
        command = self.parse_command(message.get("text", ""))
        handler = self.commands.get(command)
        if chat_id is None or handler is None:
            return

        try:
            markdown, plain = handler(chat_id)
        except Exception:
            get_logger().exception("/%s failed", command)
            text = "❌ An error occurred. Please try again later."
            markdown, plain = escape_markdown(text), text
        self.reply(chat_id, markdown, plain)

    def reply(self, chat_id, markdown: str, plain: str):
        try:
            self.client.send_safe(chat_id, markdown, plain)
        except (DeliveryError, requests.RequestException) as e:
            get_logger().error("Reply to %s failed: %s", chat_id, e)

    def poll_once(self, timeout: int = 10):
        try:
            updates = self.client.get_updates(self.offset, timeout=timeout)
        except (DeliveryError, requests.RequestException) as e:
            get_logger().warning("getUpdates failed: %s", e)
            return
        for update in updates:
            self.offset = update.get("update_id", 0) + 1
            self.handle_update(update)
        if updates:
            log(f"Handled {len(updates)} update(s)")
