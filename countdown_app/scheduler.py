"""
Polling ticker for scheduled pauses.

The countdown core never runs timers of its own. This ticker lives outside
it and calls ``CountdownService.tick`` at a fixed interval until stopped.
"""

import threading
from typing import Optional

from .errors import StoreUnavailableError
from .logging.config import get_scheduler_logger
from .engine import CountdownService

logger = get_scheduler_logger(__name__)


class PauseScheduler:
    """Periodically applies due scheduled pauses and auto-resumes."""

    def __init__(self, service: CountdownService, interval_seconds: Optional[float] = None):
        self.service = service
        self.interval_seconds = (
            interval_seconds if interval_seconds is not None
            else service.config.scheduler.poll_interval_seconds
        )
        self.logger = logger
        self.ticks = 0
        self.transitions = 0
        self.failures = 0

    def poll_once(self) -> bool:
        """
        Run a single tick.

        Store outages and unexpected failures are logged and retried on the
        next tick; the loop itself never stops on a failed tick.

        Returns:
            True if a transition was applied
        """
        self.ticks += 1
        try:
            result = self.service.tick()
        except StoreUnavailableError as e:
            self.failures += 1
            self.logger.warning("Tick skipped, store unavailable", error=str(e))
            return False
        except Exception as e:
            self.failures += 1
            self.logger.error(
                "Tick failed",
                error=str(e),
                error_type=type(e).__name__
            )
            return False

        if result is not None:
            self.transitions += 1
            return True
        return False

    def run(self, stop_event: threading.Event, max_ticks: Optional[int] = None) -> None:
        """
        Poll until ``stop_event`` is set (or ``max_ticks`` ticks have run).

        Args:
            stop_event: Set from another thread to stop the loop
            max_ticks: Optional upper bound, mainly for scripts and tests
        """
        self.logger.info("Scheduler started", interval_seconds=self.interval_seconds)

        while not stop_event.is_set():
            self.poll_once()
            if max_ticks is not None and self.ticks >= max_ticks:
                break
            stop_event.wait(self.interval_seconds)

        self.logger.info("Scheduler stopped", ticks=self.ticks,
                         transitions=self.transitions, failures=self.failures)
