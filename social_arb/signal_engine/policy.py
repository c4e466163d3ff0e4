"""Emission Policy.

Stateful gatekeeper in front of the notifier. Applies the global rate
limit, per-keyword cooldowns, and the momentum/confidence bar, then
emits at most one signal per evaluation cycle.

Two clocks drive it, both purely wall-clock:
    global:      READY <-> THROTTLED   (min_hours_between_signals)
    per keyword: ELIGIBLE <-> COOLDOWN (cooldown_hours)
"""

import logging
import math
import threading
from datetime import datetime, timezone
from typing import Callable, Mapping, Optional

from social_arb.signal_engine.config import EngineConfig
from social_arb.signal_engine.keywords import resolve_ticker
from social_arb.signal_engine.models import (
    CooldownEntry,
    EngineState,
    EngineStatus,
    MentionMetrics,
    RecentSignal,
    Signal,
)
from social_arb.signal_engine.scorer import SignalScorer

logger = logging.getLogger(__name__)


def _hours_between(earlier: datetime, later: datetime) -> float:
    return (later - earlier).total_seconds() / 3600.0


class EmissionPolicy:
    """High-bar signal filter with rate limiting and keyword cooldown.

    The policy owns an EngineState (injectable for tests or for a caller
    that persists it between runs). State changes only when a signal is
    accepted; rejected cycles leave it untouched.

    Example:
        policy = EmissionPolicy()
        signals = policy.detect_signals({
            "celsius": MentionMetrics(current=2000, baseline=500, sustained=True),
        })
        status = policy.get_status()
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        state: Optional[EngineState] = None,
        scorer: Optional[SignalScorer] = None,
        ticker_map: Optional[dict[str, str]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.config = config or EngineConfig()
        self.state = state if state is not None else EngineState()
        self.scorer = scorer or SignalScorer()
        self._ticker_map = ticker_map
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._lock = threading.Lock()

    def now(self) -> datetime:
        return self._clock()

    # =========================================================================
    # Gates
    # =========================================================================

    def is_throttled(self, now: Optional[datetime] = None) -> bool:
        """True while the global rate limit blocks emission."""
        now = now or self.now()
        last = self.state.last_signal_time
        if last is None:
            return False
        return _hours_between(last, now) < self.config.min_hours_between_signals

    def in_cooldown(self, keyword: str, now: Optional[datetime] = None) -> bool:
        """True while a keyword is blocked by its own cooldown."""
        now = now or self.now()
        last = self.state.recent_signals.get(keyword)
        if last is None:
            return False
        return _hours_between(last, now) < self.config.cooldown_hours

    # =========================================================================
    # Evaluation
    # =========================================================================

    def detect_signals(
        self,
        mentions: Mapping[str, MentionMetrics],
        now: Optional[datetime] = None,
    ) -> list[Signal]:
        """Evaluate one cycle and return zero or one signal.

        Args:
            mentions: keyword -> MentionMetrics for this cycle. Iteration
                order is the tie-break order for equal confidence.
            now: Evaluation time. Defaults to the policy clock.

        Returns:
            [winner] if a candidate cleared every gate, else [].
        """
        with self._lock:
            now = now or self.now()

            if self.is_throttled(now):
                logger.info(
                    "Cycle rejected: rate limited",
                    extra={"reason": "throttled"},
                )
                return []

            candidates: list[Signal] = []
            for keyword, metrics in mentions.items():
                candidate = self._evaluate_keyword(keyword, metrics, now)
                if candidate is not None:
                    candidates.append(candidate)

            if not candidates:
                return []

            # sort() is stable, so equal confidence keeps first-seen order
            candidates.sort(key=lambda s: s.confidence, reverse=True)
            winner = candidates[0]

            self._prune_expired(now)
            self.state.last_signal_time = now
            self.state.recent_signals[winner.keyword] = now
            logger.info(
                f"Signal accepted: {winner.keyword} "
                f"(confidence={winner.confidence:.1f}, momentum={winner.momentum:.2f}, "
                f"candidates={len(candidates)})",
                extra={"keyword": winner.keyword},
            )
            return [winner]

    def _evaluate_keyword(
        self,
        keyword: str,
        metrics: MentionMetrics,
        now: datetime,
    ) -> Optional[Signal]:
        cfg = self.config

        if self.in_cooldown(keyword, now):
            self._reject(keyword, "cooldown")
            return None

        momentum = self.scorer.momentum(metrics)
        if momentum < cfg.min_momentum:
            self._reject(keyword, f"momentum {momentum:.2f} < {cfg.min_momentum}")
            return None

        confidence = self.scorer.confidence(momentum, metrics)
        if confidence < cfg.min_confidence:
            self._reject(keyword, f"confidence {confidence:.1f} < {cfg.min_confidence}")
            return None

        return Signal(
            keyword=keyword,
            ticker=resolve_ticker(keyword, self._ticker_map),
            momentum=momentum,
            confidence=confidence,
            mentions=metrics.current,
            thesis=self.scorer.thesis(keyword, momentum, metrics),
            swing_score=self.scorer.swing(confidence, momentum),
            timestamp=now,
        )

    def _prune_expired(self, now: datetime) -> None:
        # Entries past their cooldown no longer gate anything
        expired = [
            keyword for keyword, ts in self.state.recent_signals.items()
            if _hours_between(ts, now) >= self.config.cooldown_hours
        ]
        for keyword in expired:
            del self.state.recent_signals[keyword]

    @staticmethod
    def _reject(keyword: str, reason: str) -> None:
        logger.debug(
            f"Skipped {keyword}: {reason}",
            extra={"keyword": keyword, "reason": reason},
        )

    # =========================================================================
    # Status
    # =========================================================================

    def get_status(self, now: Optional[datetime] = None) -> EngineStatus:
        """Read-only view of the rate limit and cooldowns.

        Hours are rounded up to the next whole hour so a display never
        shows "0h" while still throttled.
        """
        now = now or self.now()
        cfg = self.config
        state = self.state

        next_in = 0.0
        if state.last_signal_time is not None:
            remaining = cfg.min_hours_between_signals - _hours_between(
                state.last_signal_time, now
            )
            if remaining > 0:
                next_in = float(math.ceil(remaining))

        cooldowns = []
        recent = []
        for keyword, ts in state.recent_signals.items():
            elapsed = _hours_between(ts, now)
            recent.append(RecentSignal(keyword=keyword, hours_ago=float(math.floor(elapsed))))
            if elapsed < cfg.cooldown_hours:
                cooldowns.append(CooldownEntry(
                    keyword=keyword,
                    hours_remaining=float(math.ceil(cfg.cooldown_hours - elapsed)),
                ))

        recent.sort(key=lambda r: r.hours_ago)
        cooldowns.sort(key=lambda c: c.hours_remaining)

        return EngineStatus(
            next_signal_in_hours=next_in,
            cooldown_keywords=cooldowns,
            recent_signals=recent,
            last_signal_time=state.last_signal_time,
        )
