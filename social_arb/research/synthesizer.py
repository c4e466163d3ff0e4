"""Research Synthesizer.

Folds the categorized searches for one topic into a single 0-100
signal strength, a keyword-matched sentiment label, and a signal type.
Independent of the batch confidence score and of engine state.
"""

import logging
from datetime import datetime, timezone
from typing import Iterable, Optional, Sequence

from social_arb.research.config import (
    ResearchCategory,
    ResearchConfig,
    ResearchSignalType,
    SentimentLabel,
)
from social_arb.research.models import (
    CategoryResult,
    ResearchMetrics,
    ResearchPost,
    ResearchQuery,
    ResearchResult,
)

logger = logging.getLogger(__name__)


def _band(value: float, bands: Sequence[tuple[float, int]]) -> int:
    for threshold, points in bands:
        if value >= threshold:
            return points
    return 0


class ResearchSynthesizer:
    """Synthesizes categorized search results into a ResearchResult.

    Never rejects: acceptance (strength/mention bar) is the caller's
    decision, see TopicResearcher.is_actionable().

    Example:
        synth = ResearchSynthesizer()
        result = synth.synthesize("Celsius", category_results)
        print(result.signal_strength, result.sentiment, result.signal_type)
    """

    def __init__(self, config: Optional[ResearchConfig] = None):
        self.config = config or ResearchConfig()

    def synthesize(
        self,
        topic: str,
        results: Sequence[CategoryResult],
        queries: Optional[Sequence[ResearchQuery]] = None,
        timestamp: Optional[datetime] = None,
    ) -> ResearchResult:
        """Combine category results for one topic.

        Args:
            topic: Researched keyword/ticker.
            results: One CategoryResult per search that ran.
            queries: The search plan. Defaults to the queries implied by
                the results.
            timestamp: Result timestamp. Defaults to now.
        """
        cfg = self.config
        posts: list[ResearchPost] = [p for r in results for p in r.posts]

        metrics = self.compute_metrics(posts)
        categories = (
            {q.category for q in queries} if queries is not None
            else {r.category for r in results}
        )

        result = ResearchResult(
            topic=topic,
            signal_strength=self.signal_strength(
                metrics.total_mentions,
                metrics.avg_engagement,
                metrics.high_engagement_posts,
            ),
            sentiment=self.sentiment_label(
                metrics.positive_signals, metrics.negative_signals
            ).value,
            signal_type=self.classify(categories, metrics.high_engagement_posts).value,
            metrics=metrics,
            top_posts=sorted(posts, key=lambda p: p.likes, reverse=True)[:cfg.top_posts],
            queries=list(queries) if queries is not None else [],
            errors=[f"{r.category.value}: {r.error}" for r in results if r.error],
            timestamp=timestamp or datetime.now(timezone.utc),
        )
        logger.debug(
            f"Synthesized {topic}: strength={result.signal_strength} "
            f"sentiment={result.sentiment} type={result.signal_type} "
            f"posts={metrics.total_mentions}",
            extra={"topic": topic},
        )
        return result

    def compute_metrics(self, posts: Iterable[ResearchPost]) -> ResearchMetrics:
        """Volume, engagement and sentiment tallies over a flat post list."""
        cfg = self.config
        posts = list(posts)
        total = len(posts)
        total_likes = sum(p.likes for p in posts)

        positive = 0
        negative = 0
        for post in posts:
            text = (post.text or "").lower()
            # A post can count toward both tallies
            if any(w in text for w in cfg.positive_words):
                positive += 1
            if any(w in text for w in cfg.negative_words):
                negative += 1

        return ResearchMetrics(
            total_mentions=total,
            avg_engagement=total_likes / max(total, 1),
            high_engagement_posts=sum(
                1 for p in posts if p.likes >= cfg.high_engagement_likes
            ),
            positive_signals=positive,
            negative_signals=negative,
        )

    @staticmethod
    def sentiment_label(positive: int, negative: int) -> SentimentLabel:
        if positive > negative:
            return SentimentLabel.POSITIVE
        if negative > positive:
            return SentimentLabel.NEGATIVE
        return SentimentLabel.NEUTRAL

    def classify(
        self,
        categories: Iterable[ResearchCategory],
        high_engagement_posts: int,
    ) -> ResearchSignalType:
        """Signal type; viral_moment overwrites purchase_intent."""
        signal_type = ResearchSignalType.MENTION_SPIKE
        if ResearchCategory.INTENT in set(categories):
            signal_type = ResearchSignalType.PURCHASE_INTENT
        if high_engagement_posts > self.config.viral_min_high_engagement:
            signal_type = ResearchSignalType.VIRAL_MOMENT
        return signal_type

    def signal_strength(
        self,
        mentions: int,
        avg_engagement: float,
        high_engagement_posts: int,
    ) -> int:
        """Volume (0-40) + engagement (0-40) + virality (0-20)."""
        cfg = self.config
        return (
            _band(mentions, cfg.volume_bands)
            + _band(avg_engagement, cfg.engagement_bands)
            + _band(high_engagement_posts, cfg.virality_bands)
        )
