"""Signal Engine Configuration.

Thresholds for the emission policy and weights for the scorer.
"""

from dataclasses import dataclass
from enum import Enum


class EntryStrength(str, Enum):
    """Swing entry conviction."""
    STRONG = "STRONG"
    MODERATE = "MODERATE"


class RiskLevel(str, Enum):
    """Swing risk classification by momentum."""
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    VERY_HIGH = "VERY HIGH"


@dataclass
class ScorerConfig:
    """Weights and bands for momentum/confidence scoring."""
    # Momentum = velocity_weight * velocity + acceleration_weight * acceleration
    velocity_weight: float = 0.6
    acceleration_weight: float = 0.4
    acceleration_threshold: float = 0.2
    acceleration_factor: float = 0.5

    # Confidence components (0-100 total)
    momentum_multiplier: float = 40.0
    momentum_cap: float = 40.0
    volume_divisor: float = 50.0
    volume_cap: float = 35.0
    sustained_bonus: float = 15.0
    verified_bonus: float = 10.0

    # Swing scoring
    strong_entry_confidence: float = 85.0
    high_risk_momentum: float = 2.0
    very_high_risk_momentum: float = 3.0
    timeframe: str = "1-2 weeks"
    exit_trigger: str = "Mention velocity rolls over or +15% gain"
    catalyst: str = "Social momentum -> Earnings/PR"

    # Thesis bands
    viral_thesis_momentum: float = 2.0
    adoption_thesis_momentum: float = 1.5


@dataclass
class EngineConfig:
    """Emission policy thresholds.

    max_signals_per_day is not counted directly; it is the consequence
    of min_hours_between_signals (24 / 8 leaves room for at most a few).
    """
    min_confidence: float = 80.0
    min_momentum: float = 1.0
    max_signals_per_day: int = 2
    min_hours_between_signals: float = 8.0
    cooldown_hours: float = 48.0


DEFAULT_ENGINE_CONFIG = EngineConfig()
DEFAULT_SCORER_CONFIG = ScorerConfig()
