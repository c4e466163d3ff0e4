"""Performance Logging.

Timing of external calls (mention fetches, searches, deliveries)
with slow-call warnings.
"""

import logging
import time
from typing import Optional

from social_arb.logging_config.config import DEFAULT_LOGGING_CONFIG

logger = logging.getLogger(__name__)


class PerformanceTimer:
    """Context manager for timing code blocks.

    Example:
        with PerformanceTimer("x_counts:celsius") as timer:
            response = client.get_recent_tweets_count(query)
        print(f"Fetch took {timer.duration_ms:.1f}ms")
    """

    def __init__(self, operation_name: str, threshold_ms: Optional[float] = None):
        self.operation_name = operation_name
        self.threshold_ms = threshold_ms or DEFAULT_LOGGING_CONFIG.slow_threshold_ms
        self.start_time: float = 0
        self.duration_ms: float = 0

    def __enter__(self) -> "PerformanceTimer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.duration_ms = (time.perf_counter() - self.start_time) * 1000

        if exc_type is not None:
            logger.error(
                f"{self.operation_name} failed after {self.duration_ms:.1f}ms: {exc_type.__name__}",
                extra={"duration_ms": round(self.duration_ms, 2)},
            )
        elif self.duration_ms >= self.threshold_ms:
            logger.warning(
                f"Slow operation: {self.operation_name} took {self.duration_ms:.1f}ms",
                extra={"duration_ms": round(self.duration_ms, 2)},
            )
        else:
            logger.debug(
                f"{self.operation_name} completed in {self.duration_ms:.1f}ms",
                extra={"duration_ms": round(self.duration_ms, 2)},
            )
