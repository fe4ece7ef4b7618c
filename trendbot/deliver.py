"""Telegram Bot API delivery: suggestions, errors, subscriber broadcast."""

import re
from datetime import datetime

import requests

from .config import get_telegram_chat_id, get_telegram_token
from .errors import DeliveryError
from .log import get_logger, log
from .retry import with_retry

API_BASE = "https://api.telegram.org"

_MARKDOWN_SPECIAL = re.compile(r"([_*\[\]()~`>#+\-=|{}.!\\])")


def escape_markdown(text: str) -> str:
    """Escape Telegram MarkdownV2 special characters."""
    return _MARKDOWN_SPECIAL.sub(r"\\\1", text)


class TelegramClient:
    """Minimal Bot API client over requests."""

    def __init__(self, token: str | None = None, timeout: float = 30.0):
        self.token = token if token is not None else get_telegram_token()
        self.timeout = timeout

    @property
    def enabled(self) -> bool:
        return bool(self.token)

    @with_retry(max_retries=2, base_delay=1.0, exceptions=(requests.ConnectionError, requests.Timeout))
    def call(self, method: str, payload: dict, timeout: float | None = None) -> dict:
        url = f"{API_BASE}/bot{self.token}/{method}"
        r = requests.post(url, json=payload, timeout=timeout or self.timeout)
        try:
            data = r.json()
        except ValueError:
            r.raise_for_status()
            raise DeliveryError(r.status_code, "non-JSON response")
        if not data.get("ok"):
            raise DeliveryError(data.get("error_code", r.status_code), data.get("description", ""))
        return data.get("result")

    def send_message(self, chat_id, text: str, parse_mode: str | None = None):
        payload = {"chat_id": chat_id, "text": text, "disable_web_page_preview": False}
        if parse_mode:
            payload["parse_mode"] = parse_mode
        return self.call("sendMessage", payload)

    def send_safe(self, chat_id, markdown: str, plain: str):
        """Send MarkdownV2; on a formatting rejection resend as plain text."""
        try:
            return self.send_message(chat_id, markdown, parse_mode="MarkdownV2")
        except DeliveryError as e:
            if e.blocked:
                raise
            get_logger().debug("Markdown rejected (%s), sending as plain text", e)
            return self.send_message(chat_id, plain)

    def get_updates(self, offset: int | None = None, timeout: int = 20) -> list:
        payload = {"timeout": timeout, "allowed_updates": ["message"]}
        if offset is not None:
            payload["offset"] = offset
        return self.call("getUpdates", payload, timeout=timeout + 10) or []


class SubscriberRegistry:
    """In-memory set of chat ids receiving scheduled suggestions."""

    def __init__(self, chat_ids=()):
        self._ids = set(chat_ids)

    def add(self, chat_id) -> bool:
        """Returns False if already subscribed."""
        if chat_id in self._ids:
            return False
        self._ids.add(chat_id)
        return True

    def remove(self, chat_id) -> bool:
        if chat_id not in self._ids:
            return False
        self._ids.discard(chat_id)
        return True

    def __contains__(self, chat_id) -> bool:
        return chat_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self):
        return iter(sorted(self._ids, key=str))


def format_suggestion(suggestion: str, link: str, topic: str, source: str, now=None) -> tuple[str, str]:
    """Return (markdown, plain) renderings of one suggestion message."""
    stamp = f"{now or datetime.now():%Y-%m-%d %H:%M}"
    markdown = (
        "🚀 *TRENDING SUGGESTION* 🚀\n\n"
        f"📊 *Topic:* {escape_markdown(topic)}\n"
        f"📡 *Source:* {escape_markdown(source)}\n\n"
        f"💡 *Tweet Suggestion:*\n{escape_markdown(suggestion)}\n\n"
        f"🔗 *Engage Here:*\n{escape_markdown(link)}\n\n"
        f"⏰ _Generated: {escape_markdown(stamp)}_"
    )
    plain = (
        "🚀 TRENDING SUGGESTION 🚀\n\n"
        f"📊 Topic: {topic}\n"
        f"📡 Source: {source}\n\n"
        f"💡 Tweet Suggestion:\n{suggestion}\n\n"
        f"🔗 Engage Here:\n{link}\n\n"
        f"⏰ Generated: {stamp}"
    )
    return markdown, plain


class TelegramNotifier:
    """Delivery collaborator. Best effort: transport errors are logged, never raised."""

    def __init__(self, client: TelegramClient | None = None, chat_id=None,
                 subscribers: SubscriberRegistry | None = None):
        self.client = client or TelegramClient()
        self.chat_id = chat_id if chat_id is not None else (get_telegram_chat_id() or None)
        self.subscribers = subscribers if subscribers is not None else SubscriberRegistry()

    def recipients(self) -> list:
        ids = [self.chat_id] if self.chat_id else []
        ids.extend(c for c in self.subscribers if str(c) != str(self.chat_id))
        return ids

    def _broadcast(self, markdown: str, plain: str, recipients: list) -> int:
        if not self.client.enabled:
            get_logger().warning("TELEGRAM_BOT_TOKEN not configured — message dropped")
            return 0

        sent = 0
        for chat_id in recipients:
            try:
                self.client.send_safe(chat_id, markdown, plain)
                sent += 1
            except DeliveryError as e:
                if e.blocked and self.subscribers.remove(chat_id):
                    log(f"Chat {chat_id} blocked the bot — unsubscribed")
                else:
                    get_logger().error("Telegram send to %s failed: %s", chat_id, e)
            except requests.RequestException as e:
                get_logger().error("Telegram send to %s failed: %s", chat_id, e)
        return sent

    def send_suggestion(self, suggestion: str, link: str, topic_title: str, source_name: str):
        markdown, plain = format_suggestion(suggestion, link, topic_title, source_name)
        sent = self._broadcast(markdown, plain, self.recipients())
        log(f"Suggestion for {topic_title!r} sent to {sent} chat(s)")

    def send_error(self, message: str):
        """Errors go to the operator chat only, not to subscribers."""
        text = f"❌ Bot Error: {message}"
        if not self.chat_id:
            get_logger().error("No TELEGRAM_CHAT_ID for error report: %s", message)
            return
        self._broadcast(escape_markdown(text), text, [self.chat_id])
