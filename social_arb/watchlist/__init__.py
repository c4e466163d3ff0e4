"""Research Watchlist.

Tickers checked on a schedule with short-window topic research.
"""

from social_arb.watchlist.models import (
    DEFAULT_WATCHLIST,
    Watchlist,
    WatchlistEntry,
    default_watchlist,
)
from social_arb.watchlist.store import WatchlistStore

__all__ = [
    "DEFAULT_WATCHLIST",
    "Watchlist",
    "WatchlistEntry",
    "default_watchlist",
    "WatchlistStore",
]
