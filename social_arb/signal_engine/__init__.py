"""Signal Detection & Emission Control.

Scores keyword mention momentum and gates emission behind a high
confidence bar, a global rate limit, and per-keyword cooldowns.

Example:
    from social_arb.signal_engine import EmissionPolicy, MentionMetrics

    policy = EmissionPolicy()
    signals = policy.detect_signals({
        "celsius": MentionMetrics(current=2000, baseline=500, sustained=True),
        "roblox": MentionMetrics(current=300, baseline=280),
    })
    # -> [Signal(keyword="celsius", ticker="CELH", confidence=90.0, ...)]
"""

from social_arb.signal_engine.config import (
    EngineConfig,
    ScorerConfig,
    EntryStrength,
    RiskLevel,
)
from social_arb.signal_engine.models import (
    MentionMetrics,
    Signal,
    SwingScore,
    EngineState,
    EngineStatus,
    CooldownEntry,
    RecentSignal,
)
from social_arb.signal_engine.scorer import (
    SignalScorer,
    calculate_momentum,
    score_confidence,
    generate_thesis,
    score_swing,
)
from social_arb.signal_engine.policy import EmissionPolicy
from social_arb.signal_engine.keywords import (
    TrackedKeyword,
    DEFAULT_KEYWORDS,
    TICKER_MAP,
    resolve_ticker,
    default_tracked_keywords,
)
from social_arb.signal_engine.state_store import EngineStateStore

__all__ = [
    # Config
    "EngineConfig",
    "ScorerConfig",
    "EntryStrength",
    "RiskLevel",
    # Models
    "MentionMetrics",
    "Signal",
    "SwingScore",
    "EngineState",
    "EngineStatus",
    "CooldownEntry",
    "RecentSignal",
    # Scorer
    "SignalScorer",
    "calculate_momentum",
    "score_confidence",
    "generate_thesis",
    "score_swing",
    # Policy
    "EmissionPolicy",
    # Keywords
    "TrackedKeyword",
    "DEFAULT_KEYWORDS",
    "TICKER_MAP",
    "resolve_ticker",
    "default_tracked_keywords",
    # Persistence
    "EngineStateStore",
]
