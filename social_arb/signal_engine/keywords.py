"""Tracked Keywords & Ticker Mapping.

Static lookup data for the batch cycle: keyword categories and the
keyword -> ticker table. Not part of the engine's decision surface.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class TrackedKeyword:
    """A tracked term, optionally mapped to a market ticker."""
    keyword: str
    ticker: Optional[str] = None
    category: str = "other"


DEFAULT_KEYWORDS: dict[str, list[str]] = {
    "energy-drinks": ["celsius", "ghost energy", "prime hydration", "monster energy"],
    "athleisure": ["lululemon", "gymshark", "alo yoga", "athleta"],
    "gaming": ["fortnite", "roblox", "call of duty", "minecraft"],
    "streaming": ["netflix", "spotify", "hulu", "disney plus"],
    "ai-tools": ["chatgpt", "claude", "midjourney", "copilot"],
    "crypto": ["bitcoin", "ethereum", "solana", "coinbase"],
    "ev": ["tesla", "rivian", "lucid", "charging station"],
    "semiconductors": ["nvidia", "amd", "intel", "ai chips"],
}

# Keys are lower-cased; lookups go through resolve_ticker().
TICKER_MAP: dict[str, str] = {
    "celsius": "CELH",
    "lululemon": "LULU",
    "netflix": "NFLX",
    "spotify": "SPOT",
    "roblox": "RBLX",
    "tesla": "TSLA",
    "rivian": "RIVN",
    "nvidia": "NVDA",
    "amd": "AMD",
    "intel": "INTC",
    "bitcoin": "BTC",
    "ethereum": "ETH",
    "solana": "SOL",
    "coinbase": "COIN",
    "chatgpt": "MSFT",  # OpenAI partnership exposure
    "openai": "MSFT",
    "copilot": "MSFT",
    "fortnite": "EA",  # Epic is private; gaming exposure
    "apple": "AAPL",
    "iphone": "AAPL",
    "meta": "META",
    "chainlink": "LINK",
    "disney": "DIS",
    "amazon": "AMZN",
    "google": "GOOGL",
    "palantir": "PLTR",
    "robinhood": "HOOD",
}


def resolve_ticker(keyword: str, mapping: Optional[dict[str, str]] = None) -> Optional[str]:
    """Look up the ticker for a keyword (case-insensitive)."""
    table = TICKER_MAP if mapping is None else mapping
    return table.get(keyword.strip().lower())


def default_tracked_keywords(
    categories: Optional[dict[str, list[str]]] = None,
) -> list[TrackedKeyword]:
    """Flatten the category table into TrackedKeyword entries, in order."""
    categories = categories or DEFAULT_KEYWORDS
    return [
        TrackedKeyword(keyword=kw, ticker=resolve_ticker(kw), category=category)
        for category, keywords in categories.items()
        for kw in keywords
    ]
