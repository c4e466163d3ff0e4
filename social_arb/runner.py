"""Cycle Orchestration.

Wires fetcher -> emission policy -> notifier for the batch cycle, and
searcher -> synthesizer -> notifier for topic research and watchlist
checks. Each run is wrapped in a CycleContext so every log line of the
run carries the same cycle id.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Sequence

from social_arb.alerts import (
    DeliveryAck,
    build_research_payload,
    build_signal_payload,
    build_status_payload,
)
from social_arb.errors import DeliveryError
from social_arb.ingest import batch_fetch
from social_arb.logging_config import CycleContext
from social_arb.research import ResearchResult, ResearchSignal, TopicResearcher
from social_arb.signal_engine import (
    EmissionPolicy,
    EngineStatus,
    TrackedKeyword,
    resolve_ticker,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Batch cycle
# =============================================================================


@dataclass
class CycleReport:
    """Outcome of one batch cycle."""
    cycle_id: str = ""
    started_at: Optional[datetime] = None
    throttled: bool = False
    status: Optional[EngineStatus] = None
    keywords_checked: int = 0
    fetch_failures: list = field(default_factory=list)  # list[str]
    signals: list = field(default_factory=list)  # list[Signal]
    acks: list = field(default_factory=list)  # list[DeliveryAck]
    delivery_errors: list = field(default_factory=list)  # list[str]

    @property
    def emitted(self) -> bool:
        return bool(self.signals)

    def to_dict(self) -> dict:
        return {
            "cycle_id": self.cycle_id,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "throttled": self.throttled,
            "keywords_checked": self.keywords_checked,
            "fetch_failures": self.fetch_failures,
            "signals": [s.to_dict() for s in self.signals],
            "delivery_errors": self.delivery_errors,
        }


class SignalRunner:
    """Runs one fetch/detect/deliver cycle over tracked keywords.

    Example:
        runner = SignalRunner(fetcher, EmissionPolicy(), DiscordNotifier(url), keywords)
        report = await runner.run_cycle()
    """

    def __init__(
        self,
        fetcher,
        policy: EmissionPolicy,
        notifier,
        keywords: Sequence,
        lookback_hours: int = 24,
        fetch_delay_seconds: float = 0.5,
    ):
        self.fetcher = fetcher
        self.policy = policy
        self.notifier = notifier
        self.keywords = [
            k.keyword if isinstance(k, TrackedKeyword) else str(k) for k in keywords
        ]
        self.lookback_hours = lookback_hours
        self.fetch_delay_seconds = fetch_delay_seconds

    async def run_cycle(self, now: Optional[datetime] = None) -> CycleReport:
        """Fetch, detect and deliver.

        A throttled engine only posts a status update. Delivery failures
        are recorded on the report; the policy has already committed the
        signal and is not rolled back.
        """
        now = now or self.policy.now()
        with CycleContext(kind="batch") as ctx:
            report = CycleReport(cycle_id=ctx.cycle_id, started_at=now)

            if self.policy.is_throttled(now):
                report.throttled = True
                report.status = self.policy.get_status(now)
                logger.info(
                    f"Rate limited, next signal in ~{report.status.next_signal_in_hours:.0f}h. "
                    f"Posting status update"
                )
                await self._deliver(build_status_payload(report.status), report)
                return report

            logger.info(f"Checking {len(self.keywords)} keywords")
            mentions = await batch_fetch(
                self.fetcher,
                self.keywords,
                lookback_hours=self.lookback_hours,
                delay_seconds=self.fetch_delay_seconds,
            )
            report.keywords_checked = len(mentions)
            report.fetch_failures = [k for k, m in mentions.items() if m.fetch_error]

            report.signals = self.policy.detect_signals(mentions, now)
            if not report.signals:
                logger.info("No high-confidence signals this cycle")

            for signal in report.signals:
                await self._deliver(build_signal_payload(signal), report)

            logger.info(
                f"Cycle complete in {ctx.elapsed_ms:.0f}ms: "
                f"{len(report.signals)} signal(s), {len(report.fetch_failures)} fetch failure(s)"
            )
            return report

    async def _deliver(self, payload, report: CycleReport) -> None:
        try:
            report.acks.append(await self.notifier.deliver(payload))
        except DeliveryError as e:
            logger.error(f"Delivery failed for '{payload.title}': {e}")
            report.delivery_errors.append(str(e))


# =============================================================================
# Topic research
# =============================================================================


@dataclass
class ResearchReport:
    """Outcome of researching one topic."""
    topic: str
    ticker: str = ""
    result: Optional[ResearchResult] = None
    signal: Optional[ResearchSignal] = None
    ack: Optional[DeliveryAck] = None
    error: Optional[str] = None

    @property
    def actionable(self) -> bool:
        return self.signal is not None

    def to_dict(self) -> dict:
        return {
            "topic": self.topic,
            "ticker": self.ticker,
            "result": self.result.to_dict() if self.result else None,
            "actionable": self.actionable,
            "delivered": self.ack is not None,
            "error": self.error,
        }


class ResearchRunner:
    """Researches topics and posts the ones that clear the bar.

    Independent of the batch engine: no rate limit, no cooldown.
    """

    def __init__(
        self,
        researcher: TopicResearcher,
        notifier,
        ticker_map: Optional[dict[str, str]] = None,
        watchlist_delay_seconds: float = 3.0,
    ):
        self.researcher = researcher
        self.notifier = notifier
        self._ticker_map = ticker_map
        self.watchlist_delay_seconds = watchlist_delay_seconds

    def resolve(self, topic: str, ticker: Optional[str] = None) -> str:
        return (ticker or resolve_ticker(topic, self._ticker_map) or topic).upper()

    async def research(
        self,
        topic: str,
        ticker: Optional[str] = None,
        since: str = "7d",
        min_likes: int = 10,
        pages: int = 2,
        limit: int = 20,
    ) -> ResearchReport:
        """Research one topic; deliver it if actionable."""
        report = ResearchReport(topic=topic, ticker=self.resolve(topic, ticker))
        with CycleContext(kind="research", topic=topic):
            report.result = await self.researcher.research_topic(
                topic, since=since, min_likes=min_likes, pages=pages, limit=limit
            )
            result = report.result

            if not self.researcher.is_actionable(result):
                logger.info(
                    f"No signal for {topic} ({result.signal_strength}/100, "
                    f"{result.metrics.total_mentions} mentions)",
                    extra={"topic": topic},
                )
                return report

            report.signal = self.researcher.to_signal(result, report.ticker)
            logger.info(
                f"Signal detected for {topic} ({result.signal_strength}/100, "
                f"{result.signal_type}, {result.sentiment})",
                extra={"topic": topic},
            )
            try:
                report.ack = await self.notifier.deliver(build_research_payload(report.signal))
            except DeliveryError as e:
                logger.error(f"Delivery failed for {topic}: {e}", extra={"topic": topic})
                report.error = str(e)
        return report

    async def check_watchlist(
        self,
        store,
        now: Optional[datetime] = None,
        since: str = "24h",
        min_likes: int = 10,
        pages: int = 1,
        limit: int = 15,
    ) -> list[ResearchReport]:
        """Research every watchlist entry with a short window.

        A failing entry is logged and reported; the rest still run.
        last_checked is updated once all entries are done.
        """
        entries = store.list_entries()
        if not entries:
            logger.info("No tickers in watchlist")
            return []

        logger.info(f"Checking {len(entries)} watchlist tickers")
        reports = []
        for i, entry in enumerate(entries):
            if i > 0 and self.watchlist_delay_seconds > 0:
                await asyncio.sleep(self.watchlist_delay_seconds)
            try:
                report = await self.research(
                    entry.keyword,
                    ticker=entry.ticker,
                    since=since,
                    min_likes=min_likes,
                    pages=pages,
                    limit=limit,
                )
            except Exception as e:
                logger.error(f"Error researching ${entry.ticker}: {e}")
                report = ResearchReport(topic=entry.keyword, ticker=entry.ticker, error=str(e))
            reports.append(report)

        store.mark_checked(now or datetime.now(timezone.utc))
        found = sum(1 for r in reports if r.actionable)
        logger.info(f"Watchlist check complete. {found} signal(s) found")
        return reports
