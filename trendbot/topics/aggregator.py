"""Reddit r/popular .json topic source (link aggregator)."""

from ..errors import ParseError
from .base import TopicCandidate, TopicSource, make_candidate

POPULAR_URL = "https://www.reddit.com/r/popular.json"


def _count(value) -> int:
    """Non-negative integer from a listing counter; junk counts as 0."""
    try:
        return max(0, int(value or 0))
    except (TypeError, ValueError):
        return 0


class AggregatorSource(TopicSource):
    name = "aggregator"

    def __init__(self, config: dict = None, **kwargs):
        super().__init__(**kwargs)
        config = config or {}
        self.url = config.get("url", POPULAR_URL)
        self.limit = config.get("limit", 20)

    def fetch_topics(self) -> list[TopicCandidate]:
        r = self._get(self.url)
        try:
            children = r.json()["data"]["children"]
        except (ValueError, KeyError, TypeError) as e:
            raise ParseError(self.name, f"unexpected listing shape: {e}") from e
        if not isinstance(children, list):
            raise ParseError(self.name, "listing children is not a list")

        topics = []
        for post in children[:self.limit]:
            d = post.get("data") if isinstance(post, dict) else None
            if not isinstance(d, dict) or d.get("stickied"):
                continue
            try:
                topic = self._to_candidate(d)
            except (TypeError, ValueError, AttributeError) as e:
                self.logger.debug("%s: skipping malformed post: %s", self.name, e)
                continue
            if topic:
                topics.append(topic)

        return topics

    def _to_candidate(self, d: dict) -> TopicCandidate | None:
        score = _count(d.get("score"))
        comments = _count(d.get("num_comments"))
        permalink = d.get("permalink") or ""
        selftext = d.get("selftext")
        return make_candidate(
            d.get("title"),
            self.name,
            url=f"https://reddit.com{permalink}" if isinstance(permalink, str) and permalink else "",
            description=selftext[:200] if isinstance(selftext, str) else "",
            engagement=score + comments,
            metadata={"score": score, "num_comments": comments},
        )
