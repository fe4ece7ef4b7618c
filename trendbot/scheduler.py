"""Recurring + on-demand job triggering via the `schedule` library."""

import threading
import time

import schedule

from .config import Settings
from .log import get_logger, log


class Scheduler:
    """Runs `job.execute` daily (and optionally on an interval), never overlapping."""

    def __init__(self, job, settings: Settings | None = None):
        self.job = job
        self.settings = settings or Settings()
        self._schedule = schedule.Scheduler()
        self._running = threading.Lock()

        self._schedule.every().day.at(self.settings.schedule_at).do(self.trigger)
        if self.settings.interval_minutes:
            self._schedule.every(self.settings.interval_minutes).minutes.do(self.trigger)

    @property
    def jobs(self) -> list:
        return self._schedule.get_jobs()

    @property
    def busy(self) -> bool:
        return self._running.locked()

    def trigger(self):
        """Run the job now unless a run is already in progress."""
        if not self._running.acquire(blocking=False):
            get_logger().warning("Run already in progress — trigger skipped")
            return None
        try:
            return self.job.execute()
        finally:
            self._running.release()

    def trigger_async(self) -> bool:
        """Manual trigger from the bot; runs off the polling thread."""
        if self.busy:
            return False
        threading.Thread(target=self.trigger, name="trendbot-run", daemon=True).start()
        return True

    def run_pending(self):
        self._schedule.run_pending()

    def run_forever(self, bot=None, idle: float = 1.0):
        """Main loop: fire due jobs, then poll the bot (or sleep)."""
        log(f"Scheduler started — daily at {self.settings.schedule_at}"
            + (f", every {self.settings.interval_minutes} min" if self.settings.interval_minutes else ""))
        while True:
            self.run_pending()
            if bot is not None:
                bot.poll_once()
            else:
                time.sleep(idle)
