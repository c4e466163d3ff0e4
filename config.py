"""Configuration for Social Arbitrage - Social Momentum Signal System.

Tunables that can change per deployment live in social_arb.settings
(environment / .env). The values here are fixed CLI presentation and
watchlist query shape.
"""

# Discord
WEBHOOK_USERNAME = "Social Arbitrage"

# Watchlist checks use a shorter, shallower query than on-demand research
WATCHLIST_MIN_LIKES = 10
WATCHLIST_PAGES = 1
WATCHLIST_LIMIT = 15

# Output
BANNER_WIDTH = 60
