"""Trending job — one pipeline run: fetch, filter novel, suggest, deliver."""

import time
from dataclasses import dataclass
from urllib.parse import quote_plus

from .config import Settings
from .errors import RunError
from .history import SeenHistory, filter_novel, mark_seen
from .log import get_logger, run_context
from .topics.base import TopicCandidate


def resolve_link(topic: TopicCandidate) -> str:
    """Where subscribers should go to engage with a topic."""
    if topic.url:
        return topic.url
    q = quote_plus(topic.title)
    if topic.source == "social":
        return f"https://twitter.com/search?q={q}&src=trend_click"
    return f"https://www.google.com/search?q={q}&tbm=nws"


@dataclass
class RunSummary:
    trends: int = 0
    novel: int = 0
    processed: int = 0
    failed: int = 0


class TrendingJob:
    """Owns the seen-topics history; invoked by the scheduler or manually.

    Runs must not overlap; Scheduler.trigger() guards that.
    """

    def __init__(self, engine, generator, notifier, settings: Settings | None = None,
                 history: SeenHistory | None = None, sleep=time.sleep):
        self.engine = engine
        self.generator = generator
        self.notifier = notifier
        self.settings = settings or Settings()
        self.history = history if history is not None else SeenHistory(self.settings.history_cap)
        self.sleep = sleep
        self.execution_count = 0

    def execute(self) -> RunSummary:
        self.execution_count += 1
        with run_context(f"run-{self.execution_count}"):
            return self._execute()

    def _execute(self) -> RunSummary:
        logger = get_logger("job")
        summary = RunSummary()
        logger.info("Starting trending job execution #%d...", self.execution_count)

        try:
            trends = self.engine.get_all_trends()
            summary.trends = len(trends)
            if not trends:
                raise RunError("No trends found from any source. Check if services are accessible.")
            logger.info("Found %d total trends", len(trends))

            novel = filter_novel(trends, self.history)
            summary.novel = len(novel)
            if not novel:
                logger.info("No new trends found since last check")
                return summary

            batch = novel[:self.settings.max_topics_per_run]
            logger.info("Processing %d of %d new trends", len(batch), len(novel))
            for trend in batch:
                if self.process_trend(trend):
                    mark_seen(trend.title, self.history)
                    summary.processed += 1
                else:
                    summary.failed += 1
                self.sleep(self.settings.pacing_delay)

        except RunError as e:
            logger.info("%s", e)
            self.notifier.send_error(str(e))
            return summary
        except Exception as e:
            logger.exception("Trending job failed")
            self.notifier.send_error(f"Trending job failed: {e}")
            return summary

        logger.info("Trending job completed: %d sent, %d failed", summary.processed, summary.failed)
        return summary

    def process_trend(self, trend: TopicCandidate) -> bool:
        """Link, suggest, deliver one topic. Returns False if it failed."""
        try:
            get_logger("job").info("Processing trend: %s", trend.title)
            link = resolve_link(trend)
            context = trend.description or trend.title
            suggestion = self.generator.suggest(trend.title, context)
            self.notifier.send_suggestion(suggestion, link, trend.title, trend.source)
        except Exception:
            get_logger("job").exception("Error processing trend %r", trend.title)
            return False
        return True
