"""Multi-source trend discovery engine."""

from .base import TopicCandidate, TopicSource
from .categorize import Categorizer, categorize
from .engine import TopicEngine
from .merge import merge

__all__ = ["TopicCandidate", "TopicSource", "TopicEngine", "Categorizer", "categorize", "merge"]
