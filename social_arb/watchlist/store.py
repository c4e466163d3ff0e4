"""Watchlist Store.

JSON file persistence for the research watchlist. Every mutating call
loads, changes and saves the file, so concurrent CLI invocations see
each other's changes.
"""

import json
import logging
import os
import tempfile
from collections import OrderedDict
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from social_arb.errors import WatchlistError
from social_arb.watchlist.models import (
    DEFAULT_CATEGORY,
    Watchlist,
    WatchlistEntry,
    default_watchlist,
)

logger = logging.getLogger(__name__)


class WatchlistStore:
    """Watchlist file manager.

    Example:
        store = WatchlistStore("data/watchlist.json")
        store.add("HOOD", "Robinhood", category="fintech")
        for entry in store.list_entries():
            print(entry.ticker, entry.keyword)
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self) -> Watchlist:
        """Load the watchlist; missing or corrupt files yield the defaults."""
        if not self.path.exists():
            return default_watchlist()
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return Watchlist.from_dict(data)
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning(f"Watchlist at {self.path} unreadable, using defaults: {e}")
            return default_watchlist()

    def save(self, watchlist: Watchlist) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(watchlist.to_dict(), fh, indent=2)
            os.replace(tmp, self.path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise

    def list_entries(self) -> list[WatchlistEntry]:
        return list(self.load().entries)

    def add(
        self,
        ticker: str,
        keyword: Optional[str] = None,
        category: str = DEFAULT_CATEGORY,
    ) -> WatchlistEntry:
        """Add a ticker.

        Raises:
            WatchlistError: ticker already watched.
        """
        watchlist = self.load()
        entry = WatchlistEntry(ticker=ticker, keyword=keyword or "", category=category)
        if watchlist.find(entry.ticker) is not None:
            raise WatchlistError(f"{entry.ticker} is already in watchlist")
        watchlist.entries.append(entry)
        self.save(watchlist)
        logger.info(f"Added ${entry.ticker} ({entry.keyword}) to watchlist")
        return entry

    def remove(self, ticker: str) -> WatchlistEntry:
        """Remove a ticker.

        Raises:
            WatchlistError: ticker not watched.
        """
        watchlist = self.load()
        entry = watchlist.find(ticker)
        if entry is None:
            raise WatchlistError(f"{ticker.upper()} not found in watchlist")
        watchlist.entries.remove(entry)
        self.save(watchlist)
        logger.info(f"Removed ${entry.ticker} from watchlist")
        return entry

    def reset(self) -> Watchlist:
        watchlist = default_watchlist()
        self.save(watchlist)
        logger.info("Watchlist reset to defaults")
        return watchlist

    def mark_checked(self, now: datetime) -> None:
        watchlist = self.load()
        watchlist.last_checked = now
        self.save(watchlist)

    def by_category(self) -> "OrderedDict[str, list[WatchlistEntry]]":
        """Entries grouped by category in first-seen order."""
        groups: OrderedDict[str, list[WatchlistEntry]] = OrderedDict()
        for entry in self.list_entries():
            groups.setdefault(entry.category or DEFAULT_CATEGORY, []).append(entry)
        return groups
