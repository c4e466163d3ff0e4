"""Signal Engine Data Models.

Per-cycle mention metrics, emitted signals, and the mutable engine
state that backs the rate limiter and keyword cooldowns.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from social_arb.errors import InvalidMetricsError


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class MentionMetrics:
    """Mention measurement for one keyword in one cycle.

    A baseline of None or 0 means no comparable prior window, so
    momentum is undefined and scores as zero.
    """
    current: int = 0
    baseline: Optional[int] = None
    sustained: bool = False
    verified_sources: bool = False
    hourly: list = field(default_factory=list)  # list[(datetime, int)]
    fetch_error: Optional[str] = None

    def __post_init__(self):
        if self.current < 0:
            raise InvalidMetricsError(
                f"current mention count cannot be negative: {self.current}",
                field="current",
            )
        if self.baseline is not None and self.baseline < 0:
            raise InvalidMetricsError(
                f"baseline mention count cannot be negative: {self.baseline}",
                field="baseline",
            )

    @classmethod
    def failed(cls, error: str) -> "MentionMetrics":
        """Zero metrics for a keyword whose fetch failed."""
        return cls(current=0, fetch_error=error)

    @property
    def has_baseline(self) -> bool:
        return bool(self.baseline)


@dataclass(frozen=True)
class SwingScore:
    """Swing-trade descriptor derived from confidence and momentum."""
    entry: str
    timeframe: str
    risk_level: str
    exit_trigger: str
    catalyst: str = ""

    def to_dict(self) -> dict:
        return {
            "entry": self.entry,
            "timeframe": self.timeframe,
            "risk_level": self.risk_level,
            "exit_trigger": self.exit_trigger,
            "catalyst": self.catalyst,
        }


@dataclass(frozen=True)
class Signal:
    """An accepted emerging-trend signal. Immutable once emitted."""
    keyword: str
    ticker: Optional[str]
    momentum: float
    confidence: float
    mentions: int
    thesis: str
    swing_score: SwingScore
    timestamp: datetime = field(default_factory=_utc_now)
    signal_type: str = "EMERGING_TREND"

    def to_dict(self) -> dict:
        return {
            "type": self.signal_type,
            "keyword": self.keyword,
            "ticker": self.ticker,
            "momentum": round(self.momentum, 4),
            "confidence": round(self.confidence, 1),
            "mentions": self.mentions,
            "thesis": self.thesis,
            "swing_score": self.swing_score.to_dict(),
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class EngineState:
    """Process-scoped emission state.

    Mutated only by EmissionPolicy when it accepts a signal.
    """
    last_signal_time: Optional[datetime] = None
    recent_signals: dict = field(default_factory=dict)  # keyword -> datetime

    def to_dict(self) -> dict:
        return {
            "last_signal_time": (
                self.last_signal_time.isoformat() if self.last_signal_time else None
            ),
            "recent_signals": {
                kw: ts.isoformat() for kw, ts in self.recent_signals.items()
            },
        }

    @classmethod
    def from_dict(cls, data: dict) -> "EngineState":
        last = data.get("last_signal_time")
        return cls(
            last_signal_time=datetime.fromisoformat(last) if last else None,
            recent_signals={
                kw: datetime.fromisoformat(ts)
                for kw, ts in (data.get("recent_signals") or {}).items()
            },
        )


@dataclass(frozen=True)
class CooldownEntry:
    """A keyword currently blocked by its cooldown."""
    keyword: str
    hours_remaining: float


@dataclass(frozen=True)
class RecentSignal:
    """A keyword that emitted recently."""
    keyword: str
    hours_ago: float


@dataclass
class EngineStatus:
    """Read-only projection of EngineState for display."""
    next_signal_in_hours: float = 0.0
    cooldown_keywords: list = field(default_factory=list)  # list[CooldownEntry]
    recent_signals: list = field(default_factory=list)  # list[RecentSignal]
    last_signal_time: Optional[datetime] = None

    @property
    def is_ready(self) -> bool:
        return self.next_signal_in_hours <= 0

    def to_dict(self) -> dict:
        return {
            "next_signal_in_hours": self.next_signal_in_hours,
            "is_ready": self.is_ready,
            "cooldown_keywords": [
                {"keyword": c.keyword, "hours_remaining": c.hours_remaining}
                for c in self.cooldown_keywords
            ],
            "recent_signals": [
                {"keyword": r.keyword, "hours_ago": r.hours_ago}
                for r in self.recent_signals
            ],
        }
