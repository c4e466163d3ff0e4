"""Signal Scorer.

Pure functions turning raw mention metrics into momentum, a 0-100
confidence score, a thesis line, and a swing-trade descriptor.
"""

from typing import Optional

from social_arb.errors import InvalidMetricsError
from social_arb.signal_engine.config import (
    DEFAULT_SCORER_CONFIG,
    EntryStrength,
    RiskLevel,
    ScorerConfig,
)
from social_arb.signal_engine.models import MentionMetrics, SwingScore


def calculate_momentum(
    current: int,
    baseline: Optional[int],
    config: ScorerConfig = DEFAULT_SCORER_CONFIG,
) -> float:
    """Weighted velocity + acceleration of mentions vs baseline.

    Returns 0.0 when there is no usable baseline. Acceleration is a
    single-reading proxy: half the velocity once velocity clears the
    acceleration threshold, else zero.
    """
    if baseline is None or baseline <= 0:
        return 0.0
    if current < 0:
        raise InvalidMetricsError(
            f"current mention count cannot be negative: {current}", field="current"
        )

    velocity = (current - baseline) / baseline
    acceleration = _acceleration(velocity, config)
    return config.velocity_weight * velocity + config.acceleration_weight * acceleration


def _acceleration(velocity: float, config: ScorerConfig) -> float:
    # No prior velocity sample is tracked
    if velocity > config.acceleration_threshold:
        return velocity * config.acceleration_factor
    return 0.0


def score_confidence(
    momentum: float,
    metrics: MentionMetrics,
    config: ScorerConfig = DEFAULT_SCORER_CONFIG,
) -> float:
    """Confidence in [0, 100].

    momentum (up to 40) + volume (up to 35) + sustained (15)
    + verified sources (10).
    """
    score = min(momentum * config.momentum_multiplier, config.momentum_cap)
    score += min(metrics.current / config.volume_divisor, config.volume_cap)
    if metrics.sustained:
        score += config.sustained_bonus
    if metrics.verified_sources:
        score += config.verified_bonus
    return max(0.0, min(score, 100.0))


def generate_thesis(
    keyword: str,
    momentum: float,
    metrics: MentionMetrics,
    config: ScorerConfig = DEFAULT_SCORER_CONFIG,
) -> str:
    """Thesis line chosen by momentum band."""
    if momentum > config.viral_thesis_momentum:
        return (
            f"Viral momentum detected for {keyword}. Crowd interest accelerating "
            f"ahead of potential earnings surprise ({metrics.current:,} mentions)."
        )
    if momentum > config.adoption_thesis_momentum:
        return (
            f"{keyword} mentions up {momentum * 100:.0f}% vs baseline. Social "
            f"velocity suggests early consumer adoption curve."
        )
    return (
        f"{keyword} trending across social channels. Cultural penetration "
        f"likely underreported in traditional metrics."
    )


def score_swing(
    confidence: float,
    momentum: float,
    config: ScorerConfig = DEFAULT_SCORER_CONFIG,
) -> SwingScore:
    """Map confidence/momentum to entry strength, risk and exit descriptor."""
    entry = (
        EntryStrength.STRONG
        if confidence >= config.strong_entry_confidence
        else EntryStrength.MODERATE
    )

    if momentum > config.very_high_risk_momentum:
        risk = RiskLevel.VERY_HIGH
    elif momentum > config.high_risk_momentum:
        risk = RiskLevel.HIGH
    else:
        risk = RiskLevel.MEDIUM

    return SwingScore(
        entry=entry.value,
        timeframe=config.timeframe,
        risk_level=risk.value,
        exit_trigger=config.exit_trigger,
        catalyst=config.catalyst,
    )


class SignalScorer:
    """Config-bound facade over the scoring functions.

    Example:
        scorer = SignalScorer()
        metrics = MentionMetrics(current=2000, baseline=500, sustained=True)
        momentum = scorer.momentum(metrics)          # 2.4
        confidence = scorer.confidence(momentum, metrics)  # 90.0
    """

    def __init__(self, config: Optional[ScorerConfig] = None):
        self.config = config or ScorerConfig()

    def momentum(self, metrics: MentionMetrics) -> float:
        return calculate_momentum(metrics.current, metrics.baseline, self.config)

    def confidence(self, momentum: float, metrics: MentionMetrics) -> float:
        return score_confidence(momentum, metrics, self.config)

    def thesis(self, keyword: str, momentum: float, metrics: MentionMetrics) -> str:
        return generate_thesis(keyword, momentum, metrics, self.config)

    def swing(self, confidence: float, momentum: float) -> SwingScore:
        return score_swing(confidence, momentum, self.config)
