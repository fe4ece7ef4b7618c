"""Seen-topics history and novelty filtering across runs."""


class SeenHistory:
    """Bounded, insertion-ordered set of case-folded titles.

    Once more than `cap` titles are held, the oldest-inserted ones are
    evicted. Re-adding a title already present does not refresh it.
    """

    def __init__(self, cap: int = 100):
        self.cap = cap
        self._titles = {}

    def __contains__(self, title: str) -> bool:
        return title.casefold() in self._titles

    def __len__(self) -> int:
        return len(self._titles)

    def __iter__(self):
        return iter(self._titles)

    def add(self, title: str):
        self._titles.setdefault(title.casefold(), None)
        while len(self._titles) > self.cap:
            del self._titles[next(iter(self._titles))]

    def clear(self):
        self._titles.clear()


def filter_novel(topics, history: SeenHistory) -> list:
    """Topics whose titles are not in history. Does not mutate history."""
    return [t for t in topics if t.title not in history]


def mark_seen(title: str, history: SeenHistory):
    history.add(title)
