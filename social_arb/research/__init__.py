"""Topic Research.

Categorized searches on one keyword or ticker, synthesized into a
0-100 signal strength with sentiment and a signal type.
"""

from social_arb.research.config import (
    DEFAULT_RESEARCH_CONFIG,
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
    ResearchSignal,
)
from social_arb.research.plan import build_research_plan
from social_arb.research.synthesizer import ResearchSynthesizer
from social_arb.research.researcher import TopicResearcher, research_thesis

__all__ = [
    # Config
    "DEFAULT_RESEARCH_CONFIG",
    "ResearchCategory",
    "ResearchConfig",
    "ResearchSignalType",
    "SentimentLabel",
    # Models
    "CategoryResult",
    "ResearchMetrics",
    "ResearchPost",
    "ResearchQuery",
    "ResearchResult",
    "ResearchSignal",
    # Plan
    "build_research_plan",
    # Synthesis
    "ResearchSynthesizer",
    # Researcher
    "TopicResearcher",
    "research_thesis",
]
