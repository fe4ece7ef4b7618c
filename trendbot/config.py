"""Key resolution, paths, and runtime settings."""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path

# ─────────────────────────────────────────────────────
# Bot home directory — all data lives here
# ─────────────────────────────────────────────────────
SKILL_DIR = Path.home() / ".trendbot"
LOGS_DIR = SKILL_DIR / "logs"
CONFIG_FILE = SKILL_DIR / "config.json"

USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"

# ─────────────────────────────────────────────────────
# Category taxonomy — ordered, first match wins
# ─────────────────────────────────────────────────────
DEFAULT_CATEGORIES = [
    ("entertainment", [
        "movie", "celebrity", "hollywood", "music", "film", "actor", "actress",
        "oscar", "grammy", "netflix", "disney", "marvel", "star wars",
        "beyonce", "taylor swift", "kardashian",
    ]),
    ("gossip", [
        "rumor", "scandal", "affair", "breakup", "dating", "relationship",
        "cheating", "divorce", "feud", "beef", "drama", "leak", "secret",
    ]),
    ("politics", [
        "biden", "trump", "congress", "senate", "election", "democrat",
        "republican", "policy", "white house", "government", "bill", "law",
        "vote", "campaign",
    ]),
]

DEFAULT_ALLOWED = ["entertainment", "gossip", "politics"]
DEFAULT_SOURCES = ["social", "news", "aggregator"]


# ─────────────────────────────────────────────────────
# API key resolution — env → config.json
# ─────────────────────────────────────────────────────
def _get_key(name: str) -> str:
    """Resolve an API key: environment variable first, then config.json."""
    val = os.environ.get(name)
    if val:
        return val
    val = load_config().get(name)
    if val:
        return str(val)
    return ""


def get_anthropic_key() -> str:
    return _get_key("ANTHROPIC_API_KEY")


def get_news_api_key() -> str:
    return _get_key("NEWS_API_KEY")


def get_telegram_token() -> str:
    return _get_key("TELEGRAM_BOT_TOKEN")


def get_telegram_chat_id() -> str:
    return _get_key("TELEGRAM_CHAT_ID")


def load_config() -> dict:
    """Load the full config.json, including the trendbot section."""
    if CONFIG_FILE.exists():
        try:
            cfg = json.loads(CONFIG_FILE.read_text())
        except ValueError:
            return {}
        if isinstance(cfg, dict):
            return cfg
    return {}


@dataclass
class Settings:
    """Tunables for one bot process. Everything core logic reads lives here."""
    categories: list = field(default_factory=lambda: [(n, list(k)) for n, k in DEFAULT_CATEGORIES])
    allowed_categories: list = field(default_factory=lambda: list(DEFAULT_ALLOWED))
    sources: list = field(default_factory=lambda: list(DEFAULT_SOURCES))
    max_trends: int = 15
    max_topics_per_run: int = 3
    pacing_delay: float = 3.0
    history_cap: int = 100
    fetch_timeout: float = 10.0
    schedule_at: str = "09:00"
    interval_minutes: int | None = None
    model: str = "claude-sonnet-4-6"

    @classmethod
    def from_config(cls, config: dict | None = None) -> "Settings":
        """Build settings from the `trendbot` section of config.json."""
        if config is None:
            config = load_config()
        section = config.get("trendbot", {}) or {}
        settings = cls()

        if "categories" in section:
            settings.categories = [(str(name), [str(k).lower() for k in keywords])
                                   for name, keywords in section["categories"]]
        for key in ("allowed_categories", "sources"):
            if key in section:
                setattr(settings, key, [str(v) for v in section[key]])
        for key in ("max_trends", "max_topics_per_run", "history_cap"):
            if key in section:
                setattr(settings, key, int(section[key]))
        for key in ("pacing_delay", "fetch_timeout"):
            if key in section:
                setattr(settings, key, float(section[key]))
        if "schedule_at" in section:
            settings.schedule_at = str(section["schedule_at"])
        if section.get("interval_minutes"):
            settings.interval_minutes = int(section["interval_minutes"])
        if "model" in section:
            settings.model = str(section["model"])
        return settings
