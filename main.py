"""CLI entry point: python main.py run | status | research <topic> | watch <cmd>"""

import argparse
import asyncio
import sys

import config
from social_arb.alerts import DiscordNotifier
from social_arb.errors import ConfigurationError, WatchlistError
from social_arb.ingest import FetcherConfig, XMentionFetcher, XPostSearcher, parse_since
from social_arb.logging_config import LoggingConfig, LogLevel, configure_logging
from social_arb.research import ResearchConfig, TopicResearcher
from social_arb.runner import ResearchRunner, SignalRunner
from social_arb.settings import Settings, get_settings
from social_arb.signal_engine import (
    EmissionPolicy,
    EngineConfig,
    EngineStateStore,
    default_tracked_keywords,
)
from social_arb.watchlist import WatchlistStore


def _banner(title: str) -> None:
    print("=" * config.BANNER_WIDTH)
    print(title)
    print("=" * config.BANNER_WIDTH)


def _require_token(settings: Settings) -> str:
    if not settings.x_bearer_token:
        raise ConfigurationError(
            "SOCIAL_ARB_X_BEARER_TOKEN is not set (environment or .env)"
        )
    return settings.x_bearer_token


def build_policy(settings: Settings, store: EngineStateStore) -> EmissionPolicy:
    engine_config = EngineConfig(
        min_confidence=settings.min_confidence,
        min_momentum=settings.min_momentum,
        min_hours_between_signals=settings.min_hours_between_signals,
        cooldown_hours=settings.cooldown_hours,
    )
    return EmissionPolicy(config=engine_config, state=store.load())


def build_notifier(settings: Settings) -> DiscordNotifier:
    return DiscordNotifier(
        settings.discord_webhook_url,
        timeout=settings.discord_timeout,
        username=config.WEBHOOK_USERNAME,
    )


def build_research_runner(settings: Settings) -> ResearchRunner:
    researcher = TopicResearcher(
        XPostSearcher.from_bearer_token(
            _require_token(settings), request_timeout=settings.x_request_timeout,
        ),
        config=ResearchConfig(topic_delay_seconds=settings.research_delay_seconds),
    )
    return ResearchRunner(
        researcher,
        build_notifier(settings),
        watchlist_delay_seconds=settings.watchlist_delay_seconds,
    )


# =============================================================================
# Commands
# =============================================================================


def cmd_run(args, settings: Settings) -> int:
    _banner("SOCIAL ARBITRAGE - SIGNAL RUN")
    print("High-quality signals only (1-2/day, 80%+ confidence)\n")

    store = EngineStateStore(settings.state_path)
    policy = build_policy(settings, store)
    keywords = default_tracked_keywords()[:settings.keyword_limit]
    token = _require_token(settings)
    fetcher_config = FetcherConfig(
        bearer_token=token, request_timeout_seconds=settings.x_request_timeout,
    )
    runner = SignalRunner(
        XMentionFetcher.from_bearer_token(token, fetcher_config),
        policy,
        build_notifier(settings),
        keywords,
        lookback_hours=settings.lookback_hours,
        fetch_delay_seconds=settings.fetch_delay_seconds,
    )

    try:
        report = asyncio.run(runner.run_cycle())
    finally:
        store.save(policy.state)

    if report.throttled:
        print(f"Rate limited. Next signal in ~{report.status.next_signal_in_hours:.0f}h. Status posted.")
        return 0

    print(f"Checked {report.keywords_checked} keywords ({len(report.fetch_failures)} failed)")
    if not report.signals:
        print("No high-confidence signals found. Quality over quantity.")
    for signal in report.signals:
        print(f"\nSignal: {signal.keyword} (${signal.ticker or 'N/A'})")
        print(f"  Confidence: {signal.confidence:.0f}%")
        print(f"  Momentum:   +{signal.momentum * 100:.0f}%")
        print(f"  Risk:       {signal.swing_score.risk_level}")
    for error in report.delivery_errors:
        print(f"Delivery failed: {error}")
    return 1 if report.delivery_errors else 0


def cmd_status(args, settings: Settings) -> int:
    store = EngineStateStore(settings.state_path)
    status = build_policy(settings, store).get_status()

    _banner("SOCIAL ARBITRAGE - ENGINE STATUS")
    print(f"Next signal available in: {status.next_signal_in_hours:.0f}h")
    print(f"Recent signals: {len(status.recent_signals)}")
    for recent in status.recent_signals:
        print(f"  {recent.keyword} ({recent.hours_ago:.0f}h ago)")
    cooldowns = ", ".join(c.keyword for c in status.cooldown_keywords)
    print(f"Cooldown keywords: {cooldowns or 'none'}")
    return 0


def _option(value, default):
    return default if value is None else value


def cmd_research(args, settings: Settings) -> int:
    since = _option(args.since, settings.research_since)
    parse_since(since)
    runner = build_research_runner(settings)

    _banner(f"SOCIAL ARBITRAGE - RESEARCH: {args.topic}")
    report = asyncio.run(runner.research(
        args.topic,
        ticker=args.ticker,
        since=since,
        min_likes=_option(args.min_likes, settings.research_min_likes),
        pages=_option(args.pages, settings.research_pages),
        limit=_option(args.limit, settings.research_limit),
    ))
    result = report.result
    m = result.metrics

    print(f"Signal strength: {result.signal_strength}/100")
    print(f"Sentiment:       {result.sentiment}")
    print(f"Signal type:     {result.signal_type}")
    print(f"Mentions: {m.total_mentions}  Avg likes: {m.avg_engagement:.0f}  "
          f"High engagement: {m.high_engagement_posts}")
    if args.verbose:
        for post in result.top_posts:
            print(f"  @{post.username} ({post.likes} likes): {post.text[:80]}")

    if report.actionable:
        print(f"\nSIGNAL DETECTED for ${report.ticker}")
        if report.error:
            print(f"Delivery failed: {report.error}")
            return 1
    else:
        print("\nNo signal (below 60/100 strength or 10 mentions)")
    return 0


def cmd_watch(args, settings: Settings) -> int:
    store = WatchlistStore(settings.watchlist_path)

    if args.watch_cmd == "list":
        print("\nSocial Arbitrage Watchlist\n")
        groups = store.by_category()
        if not groups:
            print("No tickers in watchlist.")
            return 0
        for category, entries in groups.items():
            print(f"{category.upper()}:")
            for entry in entries:
                print(f"  ${entry.ticker} -> \"{entry.keyword}\"")
            print("")
        last = store.load().last_checked
        if last:
            print(f"Last checked: {last.isoformat()}")
        return 0

    if args.watch_cmd == "add":
        entry = store.add(args.ticker, args.keyword, category=args.category)
        print(f"Added ${entry.ticker} ({entry.keyword}) to watchlist")
        return 0

    if args.watch_cmd == "remove":
        entry = store.remove(args.ticker)
        print(f"Removed ${entry.ticker} from watchlist")
        return 0

    if args.watch_cmd == "reset":
        store.reset()
        print("Watchlist reset to defaults")
        return 0

    # check
    parse_since(settings.watchlist_since)
    runner = build_research_runner(settings)
    reports = asyncio.run(runner.check_watchlist(
        store,
        since=settings.watchlist_since,
        min_likes=config.WATCHLIST_MIN_LIKES,
        pages=config.WATCHLIST_PAGES,
        limit=config.WATCHLIST_LIMIT,
    ))
    for report in reports:
        if report.result is None:
            print(f"  ${report.ticker}: error ({report.error})")
        elif report.actionable:
            print(f"  ${report.ticker}: SIGNAL ({report.result.signal_strength}/100)")
        else:
            print(f"  ${report.ticker}: no signal ({report.result.signal_strength}/100)")
    found = sum(1 for r in reports if r.actionable)
    print(f"\nWatchlist check complete. {found} signal(s) found.")
    return 0


# =============================================================================
# Parser
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Social Arbitrage - social momentum signals for swing trades"
    )
    parser.add_argument(
        "--verbose", action="store_true",
        help="Debug logging and detailed output"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("run", help="Run one batch signal cycle")
    sub.add_parser("status", help="Show rate limit and cooldown status")

    research = sub.add_parser("research", help="Deep research on a ticker or keyword")
    research.add_argument("topic", help='Ticker or keyword, e.g. AAPL or "iPhone 16"')
    research.add_argument("--ticker", default=None, help="Ticker to attach to the signal")
    research.add_argument("--since", default=None, help="Lookback window (7d, 24h, 90m)")
    research.add_argument("--min-likes", type=int, default=None)
    research.add_argument("--pages", type=int, default=None)
    research.add_argument("--limit", type=int, default=None)

    watch = sub.add_parser("watch", help="Manage and check the research watchlist")
    watch_sub = watch.add_subparsers(dest="watch_cmd", required=True)
    watch_sub.add_parser("list", help="Show all watched tickers")
    add = watch_sub.add_parser("add", help="Add ticker to watchlist")
    add.add_argument("ticker")
    add.add_argument("keyword", nargs="?", default=None)
    add.add_argument("--category", default="other")
    remove = watch_sub.add_parser("remove", help="Remove ticker from watchlist")
    remove.add_argument("ticker")
    watch_sub.add_parser("check", help="Research all watched tickers")
    watch_sub.add_parser("reset", help="Reset to default watchlist")

    return parser


COMMANDS = {
    "run": cmd_run,
    "status": cmd_status,
    "research": cmd_research,
    "watch": cmd_watch,
}


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(LoggingConfig(level=LogLevel.DEBUG if args.verbose else LogLevel.INFO))
    settings = get_settings()

    try:
        return COMMANDS[args.command](args, settings)
    except (ConfigurationError, WatchlistError) as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
