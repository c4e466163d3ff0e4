"""Topic Research Data Models."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from social_arb.research.config import ResearchCategory


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ResearchPost:
    """A sampled post with its like count."""
    username: str = ""
    text: str = ""
    likes: int = 0
    url: str = ""
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "username": self.username,
            "text": self.text,
            "likes": self.likes,
            "url": self.url,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class ResearchQuery:
    """One categorized search with its own filter parameters."""
    category: ResearchCategory
    query: str
    since: str = "7d"
    min_likes: int = 10
    pages: int = 1
    limit: int = 20

    def to_dict(self) -> dict:
        return {"type": self.category.value, "query": self.query}


@dataclass
class CategoryResult:
    """Posts returned by one categorized search."""
    category: ResearchCategory
    query: str = ""
    posts: list = field(default_factory=list)  # list[ResearchPost]
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class ResearchMetrics:
    """Aggregates over the flattened post list."""
    total_mentions: int = 0
    avg_engagement: float = 0.0
    high_engagement_posts: int = 0
    positive_signals: int = 0
    negative_signals: int = 0

    def to_dict(self) -> dict:
        return {
            "total_mentions": self.total_mentions,
            "avg_engagement": round(self.avg_engagement, 1),
            "high_engagement_posts": self.high_engagement_posts,
            "positive_signals": self.positive_signals,
            "negative_signals": self.negative_signals,
        }


@dataclass
class ResearchResult:
    """Synthesized outcome of one topic's research."""
    topic: str
    signal_strength: int = 0
    sentiment: str = "neutral"
    signal_type: str = "mention_spike"
    metrics: ResearchMetrics = field(default_factory=ResearchMetrics)
    top_posts: list = field(default_factory=list)  # list[ResearchPost]
    queries: list = field(default_factory=list)  # list[ResearchQuery]
    errors: list = field(default_factory=list)
    timestamp: datetime = field(default_factory=_utc_now)

    def to_dict(self) -> dict:
        return {
            "topic": self.topic,
            "timestamp": self.timestamp.isoformat(),
            "signal_strength": self.signal_strength,
            "sentiment": self.sentiment,
            "signal_type": self.signal_type,
            "metrics": self.metrics.to_dict(),
            "top_posts": [p.to_dict() for p in self.top_posts],
            "research_queries": [q.to_dict() for q in self.queries],
            "errors": self.errors,
        }


@dataclass(frozen=True)
class ResearchSignal:
    """An accepted research result bound to a ticker."""
    keyword: str
    ticker: str
    confidence: int
    sentiment: str
    signal_type: str
    thesis: str
    metrics: ResearchMetrics
    top_posts: tuple = ()
    timestamp: datetime = field(default_factory=_utc_now)

    def to_dict(self) -> dict:
        return {
            "keyword": self.keyword,
            "ticker": self.ticker,
            "confidence": self.confidence,
            "sentiment": self.sentiment,
            "signal_type": self.signal_type,
            "thesis": self.thesis,
            "metrics": self.metrics.to_dict(),
            "top_posts": [p.to_dict() for p in self.top_posts],
            "timestamp": self.timestamp.isoformat(),
        }
