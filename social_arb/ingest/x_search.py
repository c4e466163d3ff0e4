"""X Post Searcher.

Runs one categorized research query against the X API v2 recent
search endpoint and returns the matching posts, filtered by likes
and sorted most-liked first.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Optional

import tweepy

from social_arb.ingest.base import call_blocking, parse_since, response_meta
from social_arb.logging_config import PerformanceTimer
from social_arb.research.models import CategoryResult, ResearchPost, ResearchQuery

logger = logging.getLogger(__name__)

# Per-request bounds of the recent search endpoint
MIN_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


class XPostSearcher:
    """Searches recent X posts for a ResearchQuery.

    Example:
        searcher = XPostSearcher.from_bearer_token(settings.x_bearer_token)
        result = await searcher.search(plan[0])
        for post in result.posts:
            print(post.username, post.likes)
    """

    def __init__(
        self,
        client: Any,
        page_size: int = MAX_PAGE_SIZE,
        request_timeout: Optional[float] = 30.0,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._client = client
        self.page_size = max(MIN_PAGE_SIZE, min(page_size, MAX_PAGE_SIZE))
        self.request_timeout = request_timeout
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    @classmethod
    def from_bearer_token(cls, bearer_token: str, **kwargs) -> "XPostSearcher":
        client = tweepy.Client(bearer_token=bearer_token, wait_on_rate_limit=True)
        return cls(client, **kwargs)

    async def search(self, query: ResearchQuery) -> CategoryResult:
        """Run a query; failures are captured on the result."""
        try:
            start_time = self._clock() - parse_since(query.since)
            posts = await self._collect(query, start_time)
        except Exception as e:
            error = str(e) or type(e).__name__
            logger.warning(f"X search error for '{query.query}': {error}")
            return CategoryResult(category=query.category, query=query.query, error=error)

        posts = [p for p in posts if p.likes >= query.min_likes]
        posts.sort(key=lambda p: p.likes, reverse=True)
        return CategoryResult(
            category=query.category,
            query=query.query,
            posts=posts[:query.limit],
        )

    async def _collect(self, query: ResearchQuery, start_time: datetime) -> list[ResearchPost]:
        posts: list[ResearchPost] = []
        next_token = None

        for _ in range(max(query.pages, 1)):
            with PerformanceTimer(f"x_search:{query.category.value}"):
                response = await call_blocking(
                    self._client.search_recent_tweets,
                    query.query,
                    max_results=self.page_size,
                    start_time=start_time,
                    next_token=next_token,
                    tweet_fields=["created_at", "public_metrics", "author_id"],
                    expansions=["author_id"],
                    user_fields=["username"],
                    timeout=self.request_timeout,
                )
            posts.extend(self._parse(response))

            next_token = response_meta(response, "next_token")
            if not next_token:
                break

        return posts

    @staticmethod
    def _parse(response) -> list[ResearchPost]:
        includes = getattr(response, "includes", None) or {}
        usernames = {str(u.id): u.username for u in includes.get("users", [])}

        posts = []
        for tweet in response.data or []:
            metrics = tweet.public_metrics or {}
            username = usernames.get(str(tweet.author_id), "")
            url = (
                f"https://x.com/{username}/status/{tweet.id}" if username
                else f"https://x.com/i/status/{tweet.id}"
            )
            posts.append(ResearchPost(
                username=username,
                text=tweet.text,
                likes=int(metrics.get("like_count", 0)),
                url=url,
                created_at=tweet.created_at,
            ))
        return posts
