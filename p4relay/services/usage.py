"""Per-session usage counting with age-based refresh."""

import logging
import time
from collections.abc import Callable

logger = logging.getLogger(__name__)


class UsageTracker:
    """Counts commands run on the current session and refreshes it when old.

    Long-lived sessions degrade, so once `threshold` commands have completed
    the session is re-established even if nothing went wrong.
    """

    def __init__(
        self,
        threshold: int,
        retries: int,
        delay: float = 5.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the tracker.

        Args:
            threshold: Commands allowed on one session before refreshing (must be > 0)
            retries: Reinitialize attempts per refresh cycle (at least one is made)
            delay: Seconds to wait after a failed refresh attempt
            sleep: Blocking sleep function

        Raises:
            ValueError: If threshold is not positive
        """
        if threshold <= 0:
            raise ValueError(f"threshold must be > 0, got {threshold}")

        self.threshold = threshold
        self.retries = retries
        self.delay = delay
        self._sleep = sleep
        self.count = 0

    def reset(self) -> None:
        """Start counting for a freshly established session."""
        self.count = 0

    @property
    def refresh_due(self) -> bool:
        return self.count >= self.threshold

    def after_command(self, reinitialize: Callable[[], bool]) -> bool:
        """Record a completed command and refresh the session if it is due.

        Args:
            reinitialize: Re-establishes the session, returning success

        Returns:
            False if the session was due for refresh and could not be refreshed
        """
        self.count += 1
        if not self.refresh_due:
            return True

        attempts = max(self.retries, 1)
        for attempt in range(1, attempts + 1):
            logger.warning(
                "Refreshing connection due to age (usage=%d/%d, attempt %d/%d)",
                self.count,
                self.threshold,
                attempt,
                attempts,
            )
            if reinitialize():
                logger.info("Connection was refreshed")
                return True

            if attempt < attempts:
                logger.error(
                    "Could not refresh connection, retrying in %.0fs", self.delay
                )
                self._sleep(self.delay)

        logger.error("Could not refresh the connection after %d attempt(s)", attempts)
        return False
