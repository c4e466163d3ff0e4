"""Topic Research Configuration.

Search categories, sentiment word lists, strength bands, and the
acceptance bar applied by callers of the synthesizer.
"""

from dataclasses import dataclass, field
from enum import Enum


class ResearchCategory(str, Enum):
    """Categorized searches run for one topic."""
    CORE = "core"
    SENTIMENT = "sentiment"
    INTENT = "intent"
    EXPERT = "expert"


class SentimentLabel(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class ResearchSignalType(str, Enum):
    MENTION_SPIKE = "mention_spike"
    PURCHASE_INTENT = "purchase_intent"
    VIRAL_MOMENT = "viral_moment"


@dataclass
class ResearchConfig:
    """Configuration for synthesis and research acceptance."""
    positive_words: list[str] = field(default_factory=lambda: [
        "love", "amazing", "great", "best", "awesome", "bullish",
    ])
    negative_words: list[str] = field(default_factory=lambda: [
        "hate", "terrible", "broken", "bug", "issue", "awful", "bearish",
    ])

    # A post with at least this many likes is "high engagement"
    high_engagement_likes: int = 50
    # More than this many high-engagement posts makes a viral moment
    viral_min_high_engagement: int = 5
    top_posts: int = 5

    # (threshold, points), checked from the top down
    volume_bands: list[tuple[int, int]] = field(default_factory=lambda: [
        (50, 40), (20, 30), (10, 20), (5, 10),
    ])
    engagement_bands: list[tuple[float, int]] = field(default_factory=lambda: [
        (100, 40), (50, 30), (20, 20), (10, 10),
    ])
    virality_bands: list[tuple[int, int]] = field(default_factory=lambda: [
        (10, 20), (5, 15), (2, 10),
    ])

    # Acceptance bar used by callers (the synthesizer never rejects)
    min_signal_strength: int = 60
    min_total_mentions: int = 10

    # Delay between topics in batch research
    topic_delay_seconds: float = 2.0


DEFAULT_RESEARCH_CONFIG = ResearchConfig()
