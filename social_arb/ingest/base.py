"""Ingest Protocols & Shared Helpers."""

import asyncio
import functools
import logging
import re
from datetime import timedelta
from typing import Any, Callable, Iterable, Optional, Protocol, runtime_checkable

from social_arb.errors import ConfigurationError
from social_arb.research.models import CategoryResult, ResearchQuery
from social_arb.signal_engine.models import MentionMetrics

logger = logging.getLogger(__name__)

_SINCE_RE = re.compile(r"^\s*(\d+)\s*([dhm])\s*$", re.IGNORECASE)
_SINCE_UNITS = {"d": "days", "h": "hours", "m": "minutes"}


@runtime_checkable
class MentionFetcher(Protocol):
    """Source of per-keyword mention metrics."""

    async def fetch(self, keyword: str, lookback_hours: int) -> MentionMetrics: ...


@runtime_checkable
class PostSearcher(Protocol):
    """Source of posts for one categorized research query."""

    async def search(self, query: ResearchQuery) -> CategoryResult: ...


def parse_since(value: str) -> timedelta:
    """Parse a lookback string such as "7d", "24h" or "90m"."""
    match = _SINCE_RE.match(value or "")
    if not match:
        raise ConfigurationError(
            f"Invalid lookback '{value}': expected <number><d|h|m>, e.g. 7d, 24h, 90m"
        )
    amount, unit = int(match.group(1)), match.group(2).lower()
    if amount <= 0:
        raise ConfigurationError(f"Invalid lookback '{value}': must be positive")
    return timedelta(**{_SINCE_UNITS[unit]: amount})


async def batch_fetch(
    fetcher: MentionFetcher,
    keywords: Iterable[str],
    lookback_hours: int = 24,
    delay_seconds: float = 0.5,
) -> dict[str, MentionMetrics]:
    """Fetch metrics for each keyword in order, degrading failures.

    A keyword whose fetch raises comes back as zero metrics with
    fetch_error set, so the batch always covers every keyword.
    Cancellation is not caught and discards the partial map.

    Args:
        fetcher: Any MentionFetcher.
        keywords: Keywords in evaluation order.
        lookback_hours: Window passed to each fetch.
        delay_seconds: Pause between consecutive fetches.
    """
    results: dict[str, MentionMetrics] = {}
    for i, keyword in enumerate(keywords):
        if i > 0 and delay_seconds > 0:
            await asyncio.sleep(delay_seconds)
        try:
            results[keyword] = await fetcher.fetch(keyword, lookback_hours)
        except Exception as e:
            logger.error(
                f"Error fetching {keyword}: {e}",
                extra={"keyword": keyword},
            )
            results[keyword] = MentionMetrics.failed(str(e) or type(e).__name__)

    failed = sum(1 for m in results.values() if m.fetch_error)
    logger.info(f"Fetched metrics for {len(results)} keywords ({failed} failed)")
    return results


def response_meta(response, key: str, default: Optional[object] = None):
    """Read a key from a tweepy Response's meta dict."""
    meta = getattr(response, "meta", None) or {}
    return meta.get(key, default)


async def call_blocking(
    func: Callable[..., Any],
    *args,
    timeout: Optional[float] = None,
    **kwargs,
) -> Any:
    """Run a blocking client call in the default executor.

    tweepy is synchronous and may sleep through a rate-limit window, so
    calls leave the event loop and are bounded by ``timeout`` seconds.

    Raises:
        asyncio.TimeoutError: the call did not finish within timeout.
    """
    loop = asyncio.get_running_loop()
    return await asyncio.wait_for(
        loop.run_in_executor(None, functools.partial(func, *args, **kwargs)),
        timeout=timeout,
    )
