"""X/Twitter Ingest.

Mention counts for the batch engine and post search for topic
research, both over the X API v2 via tweepy.
"""

from social_arb.ingest.base import (
    MentionFetcher,
    PostSearcher,
    batch_fetch,
    call_blocking,
    parse_since,
)
from social_arb.ingest.x_fetcher import FetcherConfig, XMentionFetcher
from social_arb.ingest.x_search import XPostSearcher

__all__ = [
    # Protocols
    "MentionFetcher",
    "PostSearcher",
    # Helpers
    "batch_fetch",
    "call_blocking",
    "parse_since",
    # X API
    "FetcherConfig",
    "XMentionFetcher",
    "XPostSearcher",
]
