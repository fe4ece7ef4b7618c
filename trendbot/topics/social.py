"""Nitter (X/Twitter front-end) trends source — HTML scrape."""

from html.parser import HTMLParser

from ..errors import ParseError
from .base import TopicCandidate, TopicSource, make_candidate

NITTER_URL = "https://nitter.net/"

VOID_TAGS = {"area", "br", "col", "embed", "hr", "img", "input", "link", "meta", "source", "wbr"}


class TrendParser(HTMLParser):
    """Collects the text of `.trend-name` elements nested in `.trend-item`."""

    def __init__(self):
        super().__init__()
        self.names = []
        self._item_depth = 0
        self._name_depth = 0
        self._text = []

    def handle_starttag(self, tag, attrs):
        if tag in VOID_TAGS:
            return
        classes = (dict(attrs).get("class") or "").split()

        if self._name_depth:
            self._name_depth += 1
        elif self._item_depth and "trend-name" in classes:
            self._name_depth = 1
            self._text = []

        if self._item_depth:
            self._item_depth += 1
        elif "trend-item" in classes:
            self._item_depth = 1

    def handle_endtag(self, tag):
        if tag in VOID_TAGS:
            return
        if self._name_depth:
            self._name_depth -= 1
            if not self._name_depth:
                self.names.append("".join(self._text).strip())
        if self._item_depth:
            self._item_depth -= 1

    def handle_data(self, data):
        if self._name_depth:
            self._text.append(data)


class SocialSource(TopicSource):
    name = "social"

    def __init__(self, config: dict = None, **kwargs):
        super().__init__(**kwargs)
        config = config or {}
        self.url = config.get("url", NITTER_URL)
        self.limit = config.get("limit", 10)

    def fetch_topics(self) -> list[TopicCandidate]:
        r = self._get(self.url)
        parser = TrendParser()
        parser.feed(r.text)
        parser.close()

        if not parser.names:
            raise ParseError(self.name, "no trend items found in page")

        topics = []
        for name in parser.names[:self.limit]:
            topic = make_candidate(name, self.name)
            if topic:
                topics.append(topic)
        return topics
