"""Keyword-driven topic categorization."""

from ..config import DEFAULT_CATEGORIES

OTHER = "other"


def categorize(text: str, categories=DEFAULT_CATEGORIES) -> str:
    """Return the first category whose keywords appear in `text`.

    `categories` is an ordered sequence of (name, keywords) pairs; order is
    the tie-break when several categories match.
    """
    lowered = (text or "").lower()
    for name, keywords in categories:
        if any(keyword in lowered for keyword in keywords):
            return name
    return OTHER


class Categorizer:
    """A categorize() bound to one taxonomy, for injection into sources."""

    def __init__(self, categories):
        self.categories = [(name, [k.lower() for k in keywords]) for name, keywords in categories]

    def __call__(self, text: str) -> str:
        return categorize(text, self.categories)
