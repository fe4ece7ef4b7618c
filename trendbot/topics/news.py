"""NewsAPI top-headlines topic source."""

from ..config import get_news_api_key
from ..errors import ParseError
from .base import TopicCandidate, TopicSource, make_candidate

HEADLINES_URL = "https://newsapi.org/v2/top-headlines"


def _outlet(source) -> str:
    """Outlet name from an article's `source` field (object or bare string)."""
    if isinstance(source, dict):
        return str(source.get("name") or "")
    return source if isinstance(source, str) else ""


class NewsSource(TopicSource):
    name = "news"

    def __init__(self, config: dict = None, **kwargs):
        super().__init__(**kwargs)
        config = config or {}
        self.country = config.get("country", "us")
        self.page_size = config.get("page_size", 20)
        self.api_key = config.get("api_key") or get_news_api_key() or "demo"

    def fetch_topics(self) -> list[TopicCandidate]:
        r = self._get(HEADLINES_URL, params={
            "country": self.country,
            "pageSize": self.page_size,
            "apiKey": self.api_key,
        })
        try:
            data = r.json()
        except ValueError as e:
            raise ParseError(self.name, f"invalid JSON: {e}") from e

        if not isinstance(data, dict) or data.get("status") != "ok":
            message = data.get("message", "no status") if isinstance(data, dict) else "not an object"
            raise ParseError(self.name, f"API error: {message}")
        articles = data.get("articles")
        if not isinstance(articles, list):
            raise ParseError(self.name, "missing articles list")

        topics = []
        for article in articles:
            if not isinstance(article, dict):
                continue
            try:
                topic = self._to_candidate(article)
            except (TypeError, ValueError, AttributeError) as e:
                self.logger.debug("%s: skipping malformed article: %s", self.name, e)
                continue
            if topic:
                topics.append(topic)

        return topics

    def _to_candidate(self, article: dict) -> TopicCandidate | None:
        url = article.get("url")
        description = article.get("description")
        return make_candidate(
            article.get("title"),
            self.name,
            url=url if isinstance(url, str) else "",
            description=description if isinstance(description, str) else "",
            metadata={"outlet": _outlet(article.get("source"))},
        )
