"""Exception Hierarchy.

Typed exceptions for the signal pipeline. Policy rejections (below
threshold, cooldown, rate limit) are normal outcomes and never raise.
"""

from typing import Optional


class SocialArbError(Exception):
    """Base exception for all social arbitrage errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidMetricsError(SocialArbError, ValueError):
    """Raised when a collaborator hands the engine impossible metrics.

    Negative mention counts indicate a fetcher bug, not a runtime
    condition to recover from.
    """

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class FetchError(SocialArbError):
    """Raised when a mention fetch or post search fails."""

    def __init__(self, message: str, keyword: str = ""):
        super().__init__(message)
        self.keyword = keyword


class DeliveryError(SocialArbError):
    """Raised when a notifier fails to deliver a payload."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class WatchlistError(SocialArbError):
    """Raised on invalid watchlist mutations (duplicate or unknown ticker)."""


class ConfigurationError(SocialArbError, ValueError):
    """Raised when configuration values are malformed."""
