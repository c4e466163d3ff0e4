"""X Mention Fetcher.

Mention counts for tracked keywords via the X API v2 recent counts
endpoint (tweepy). One request covers two lookback windows of hourly
buckets: the newer window is the current count, the older one the
baseline it is compared against.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

import tweepy

from social_arb.errors import FetchError
from social_arb.ingest.base import call_blocking
from social_arb.logging_config import PerformanceTimer
from social_arb.signal_engine.models import MentionMetrics

logger = logging.getLogger(__name__)


@dataclass
class FetcherConfig:
    """X mention fetcher configuration."""
    bearer_token: str = ""
    language: str = "en"
    exclude_retweets: bool = True
    # Sub-windows of the current window that must each beat the baseline rate
    sustained_checks: int = 2
    # Run a second counts query restricted to verified accounts
    check_verified: bool = False
    verified_min_mentions: int = 10
    # The counts endpoint rejects an end_time closer than ~10s to now
    end_time_margin_seconds: int = 30
    wait_on_rate_limit: bool = True
    # Upper bound on one counts request, rate-limit sleeps included
    request_timeout_seconds: Optional[float] = 30.0


def _parse_bucket_time(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


class XMentionFetcher:
    """Fetches MentionMetrics for a keyword from X recent tweet counts.

    Example:
        fetcher = XMentionFetcher.from_bearer_token(settings.x_bearer_token)
        metrics = await fetcher.fetch("celsius", lookback_hours=24)
        print(metrics.current, metrics.baseline, metrics.sustained)
    """

    def __init__(
        self,
        client: Any,
        config: Optional[FetcherConfig] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._client = client
        self.config = config or FetcherConfig()
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    @classmethod
    def from_bearer_token(
        cls,
        bearer_token: str,
        config: Optional[FetcherConfig] = None,
    ) -> "XMentionFetcher":
        config = config or FetcherConfig(bearer_token=bearer_token)
        client = tweepy.Client(
            bearer_token=bearer_token,
            wait_on_rate_limit=config.wait_on_rate_limit,
        )
        logger.info("X mention fetcher connected via API")
        return cls(client, config)

    def build_query(self, keyword: str, verified_only: bool = False) -> str:
        parts = [keyword]
        if verified_only:
            parts.append("is:verified")
        if self.config.exclude_retweets:
            parts.append("-is:retweet")
        parts.append(f"lang:{self.config.language}")
        return " ".join(parts)

    async def fetch(self, keyword: str, lookback_hours: int) -> MentionMetrics:
        """Count mentions for the current and prior lookback windows.

        Raises:
            FetchError: the counts request failed or timed out.
        """
        if lookback_hours <= 0:
            raise FetchError(f"lookback_hours must be positive, got {lookback_hours}", keyword)

        end = self._clock() - timedelta(seconds=self.config.end_time_margin_seconds)
        split = end - timedelta(hours=lookback_hours)
        start = split - timedelta(hours=lookback_hours)

        buckets = await self._counts(keyword, start, end)

        current = 0
        baseline_total = 0
        baseline_buckets = 0
        hourly: list[tuple[datetime, int]] = []
        for bucket_start, count in buckets:
            if bucket_start >= split:
                current += count
                hourly.append((bucket_start, count))
            else:
                baseline_total += count
                baseline_buckets += 1

        baseline = baseline_total if baseline_buckets else None
        sustained = self._is_sustained(hourly, baseline, split, lookback_hours)

        verified = False
        if self.config.check_verified:
            verified_buckets = await self._counts(keyword, split, end, verified_only=True)
            verified = sum(c for _, c in verified_buckets) >= self.config.verified_min_mentions

        logger.debug(
            f"{keyword}: current={current} baseline={baseline} sustained={sustained}",
            extra={"keyword": keyword},
        )
        return MentionMetrics(
            current=current,
            baseline=baseline,
            sustained=sustained,
            verified_sources=verified,
            hourly=hourly,
        )

    async def _counts(
        self,
        keyword: str,
        start: datetime,
        end: datetime,
        verified_only: bool = False,
    ) -> list[tuple[datetime, int]]:
        query = self.build_query(keyword, verified_only=verified_only)
        try:
            with PerformanceTimer(f"x_counts:{keyword}"):
                response = await call_blocking(
                    self._client.get_recent_tweets_count,
                    query,
                    granularity="hour",
                    start_time=start,
                    end_time=end,
                    timeout=self.config.request_timeout_seconds,
                )
        except asyncio.TimeoutError as e:
            raise FetchError(
                f"X counts request timed out after {self.config.request_timeout_seconds}s",
                keyword,
            ) from e
        except tweepy.TweepyException as e:
            raise FetchError(f"X counts request failed: {e}", keyword) from e

        buckets = []
        for item in response.data or []:
            buckets.append((_parse_bucket_time(item["start"]), int(item.get("tweet_count", 0))))
        return buckets

    def _is_sustained(
        self,
        hourly: list[tuple[datetime, int]],
        baseline: Optional[int],
        split: datetime,
        lookback_hours: int,
    ) -> bool:
        checks = self.config.sustained_checks
        if not baseline or checks <= 0:
            return False

        width = timedelta(hours=lookback_hours) / checks
        per_window = [0] * checks
        for bucket_start, count in hourly:
            idx = min(int((bucket_start - split) / width), checks - 1)
            per_window[idx] += count

        rate = baseline / checks
        return all(count > rate for count in per_window)
