"""Research query plan: the four categorized searches run per topic."""

from social_arb.research.config import ResearchCategory
from social_arb.research.models import ResearchQuery

_BASE_FILTERS = "-is:retweet lang:en"

SENTIMENT_TERMS = ("love", "hate", "broken", "bug", "issue", "amazing", "terrible")
INTENT_TERMS = ("bought", "buying", "ordered", "purchased", "tried")
EXPERT_TERMS = ("url:github.com", "dev", "developer", "engineer")

# category -> (min_likes, pages, limit); core uses the caller's values
CATEGORY_PARAMS: dict[ResearchCategory, tuple[int, int, int]] = {
    ResearchCategory.SENTIMENT: (5, 1, 15),
    ResearchCategory.INTENT: (3, 1, 15),
    ResearchCategory.EXPERT: (10, 1, 10),
}


def _any_of(terms) -> str:
    return "(" + " OR ".join(terms) + ")"


def build_research_plan(
    topic: str,
    since: str = "7d",
    min_likes: int = 10,
    pages: int = 2,
    limit: int = 20,
) -> list[ResearchQuery]:
    """Build the core/sentiment/intent/expert searches for a topic.

    Args:
        topic: Keyword or ticker to research.
        since: Lookback window ("7d", "24h", "90m").
        min_likes: Like filter for the core search.
        pages: Page count for the core search.
        limit: Result cap for the core search.
    """
    quoted = f'"{topic}"'
    plan = [
        ResearchQuery(
            category=ResearchCategory.CORE,
            query=f"{quoted} {_BASE_FILTERS}",
            since=since, min_likes=min_likes, pages=pages, limit=limit,
        ),
    ]

    for category, terms in (
        (ResearchCategory.SENTIMENT, SENTIMENT_TERMS),
        (ResearchCategory.INTENT, INTENT_TERMS),
        (ResearchCategory.EXPERT, EXPERT_TERMS),
    ):
        cat_likes, cat_pages, cat_limit = CATEGORY_PARAMS[category]
        plan.append(ResearchQuery(
            category=category,
            query=f"{quoted} {_any_of(terms)} {_BASE_FILTERS}",
            since=since, min_likes=cat_likes, pages=cat_pages, limit=cat_limit,
        ))

    return plan
