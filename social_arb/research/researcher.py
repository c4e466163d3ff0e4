"""Topic Researcher.

Runs the categorized search plan for a topic through a PostSearcher,
synthesizes the results, and decides whether the outcome is worth
posting. Never touches the batch engine's rate-limit state.
"""

import asyncio
import logging
from typing import Optional, Sequence

from social_arb.logging_config import PerformanceTimer
from social_arb.research.config import (
    ResearchConfig,
    ResearchSignalType,
    SentimentLabel,
)
from social_arb.research.models import (
    CategoryResult,
    ResearchResult,
    ResearchSignal,
)
from social_arb.research.plan import build_research_plan
from social_arb.research.synthesizer import ResearchSynthesizer

logger = logging.getLogger(__name__)


def research_thesis(keyword: str, signal_type: str, sentiment: str) -> str:
    """Thesis line from signal type plus a sentiment suffix."""
    if signal_type == ResearchSignalType.PURCHASE_INTENT.value:
        thesis = (
            f"Strong purchase intent detected on X. Users actively "
            f"buying/trying {keyword}."
        )
    elif signal_type == ResearchSignalType.VIRAL_MOMENT.value:
        thesis = (
            f"Viral moment detected. {keyword} trending with high engagement "
            f"across multiple post clusters."
        )
    else:
        thesis = (
            f"Social mention spike for {keyword}. Increased chatter may "
            f"precede price movement."
        )

    if sentiment == SentimentLabel.POSITIVE.value:
        thesis += " Sentiment is bullish."
    elif sentiment == SentimentLabel.NEGATIVE.value:
        thesis += " Sentiment is bearish (potential short opportunity)."
    return thesis


class TopicResearcher:
    """Deep research on a single keyword or ticker.

    Example:
        researcher = TopicResearcher(XPostSearcher(client))
        result = await researcher.research_topic("Celsius")
        if researcher.is_actionable(result):
            signal = researcher.to_signal(result, ticker="CELH")
    """

    def __init__(
        self,
        searcher,
        synthesizer: Optional[ResearchSynthesizer] = None,
        config: Optional[ResearchConfig] = None,
    ):
        self.searcher = searcher
        self.config = config or ResearchConfig()
        self.synthesizer = synthesizer or ResearchSynthesizer(self.config)

    async def research_topic(
        self,
        topic: str,
        since: str = "7d",
        min_likes: int = 10,
        pages: int = 2,
        limit: int = 20,
    ) -> ResearchResult:
        """Run the four searches sequentially and synthesize them."""
        plan = build_research_plan(topic, since, min_likes, pages, limit)
        results: list[CategoryResult] = []

        with PerformanceTimer(f"research:{topic}"):
            for query in plan:
                result = await self.searcher.search(query)
                if result.error:
                    logger.warning(
                        f"Search failed for {topic} ({query.category.value}): {result.error}",
                        extra={"topic": topic},
                    )
                results.append(result)

        return self.synthesizer.synthesize(topic, results, queries=plan)

    async def batch_research(
        self,
        topics: Sequence[str],
        delay_seconds: Optional[float] = None,
        **options,
    ) -> list[ResearchResult]:
        """Research topics one by one, skipping any that fail."""
        delay = self.config.topic_delay_seconds if delay_seconds is None else delay_seconds
        results = []
        for i, topic in enumerate(topics):
            if i > 0 and delay > 0:
                await asyncio.sleep(delay)
            try:
                results.append(await self.research_topic(topic, **options))
            except Exception as e:
                logger.error(f"Failed to research {topic}: {e}", extra={"topic": topic})
        return results

    def is_actionable(self, result: ResearchResult) -> bool:
        cfg = self.config
        return (
            result.signal_strength >= cfg.min_signal_strength
            and result.metrics.total_mentions >= cfg.min_total_mentions
        )

    def to_signal(self, result: ResearchResult, ticker: Optional[str] = None) -> ResearchSignal:
        """Bind a research result to a ticker and write its thesis."""
        return ResearchSignal(
            keyword=result.topic,
            ticker=(ticker or result.topic).upper(),
            confidence=result.signal_strength,
            sentiment=result.sentiment,
            signal_type=result.signal_type,
            thesis=research_thesis(result.topic, result.signal_type, result.sentiment),
            metrics=result.metrics,
            top_posts=tuple(result.top_posts),
            timestamp=result.timestamp,
        )
