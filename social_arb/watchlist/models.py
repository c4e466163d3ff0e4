"""Watchlist Data Models."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

DEFAULT_CATEGORY = "other"


@dataclass
class WatchlistEntry:
    """A watched ticker and the keyword researched for it."""
    ticker: str
    keyword: str = ""
    category: str = DEFAULT_CATEGORY

    def __post_init__(self):
        self.ticker = self.ticker.strip().upper()
        self.keyword = self.keyword or self.ticker
        self.category = self.category or DEFAULT_CATEGORY

    def to_dict(self) -> dict:
        return {"ticker": self.ticker, "keyword": self.keyword, "category": self.category}

    @classmethod
    def from_dict(cls, data: dict) -> "WatchlistEntry":
        return cls(
            ticker=data["ticker"],
            keyword=data.get("keyword", ""),
            category=data.get("category", DEFAULT_CATEGORY),
        )


@dataclass
class Watchlist:
    entries: list = field(default_factory=list)  # list[WatchlistEntry]
    last_checked: Optional[datetime] = None

    def find(self, ticker: str) -> Optional[WatchlistEntry]:
        ticker = ticker.strip().upper()
        for entry in self.entries:
            if entry.ticker == ticker:
                return entry
        return None

    def to_dict(self) -> dict:
        return {
            "tickers": [e.to_dict() for e in self.entries],
            "last_checked": self.last_checked.isoformat() if self.last_checked else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Watchlist":
        last = data.get("last_checked")
        return cls(
            entries=[WatchlistEntry.from_dict(e) for e in data.get("tickers", [])],
            last_checked=datetime.fromisoformat(last) if last else None,
        )


DEFAULT_WATCHLIST: list[tuple[str, str, str]] = [
    ("AAPL", "Apple", "tech"),
    ("TSLA", "Tesla", "auto"),
    ("NVDA", "NVIDIA", "tech"),
    ("META", "Meta", "tech"),
    ("LINK", "Chainlink", "crypto"),
    ("COIN", "Coinbase", "crypto"),
]


def default_watchlist() -> Watchlist:
    return Watchlist(entries=[WatchlistEntry(t, k, c) for t, k, c in DEFAULT_WATCHLIST])
