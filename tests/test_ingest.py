"""Tests for X ingest: mention fetcher, batch fetch, post searcher."""

import asyncio
import threading
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
import tweepy

T0 = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)


def _iso(dt):
    return dt.strftime("%Y-%m-%dT%H:%M:%S.000Z")


def _buckets(baseline_counts, current_counts, end=T0):
    """Hourly count buckets: baseline window first, then current window."""
    hours = len(baseline_counts) + len(current_counts)
    start = end - timedelta(hours=hours)
    counts = list(baseline_counts) + list(current_counts)
    return [
        {
            "start": _iso(start + timedelta(hours=i)),
            "end": _iso(start + timedelta(hours=i + 1)),
            "tweet_count": c,
        }
        for i, c in enumerate(counts)
    ]


class FakeCountsClient:
    """Stands in for tweepy.Client.get_recent_tweets_count."""

    def __init__(self, buckets=None, verified_buckets=None, error=None):
        self.buckets = buckets or []
        self.verified_buckets = verified_buckets or []
        self.error = error
        self.calls = []

    def get_recent_tweets_count(self, query, **kwargs):
        self.calls.append((query, kwargs))
        if self.error:
            raise self.error
        data = self.verified_buckets if "is:verified" in query else self.buckets
        return tweepy.Response(data=data, includes={}, errors=[], meta={})


class SlowCountsClient(FakeCountsClient):
    """Blocks on chosen keywords until released, like a rate-limit sleep."""

    def __init__(self, slow_keywords, buckets=None):
        super().__init__(buckets)
        self.slow_keywords = set(slow_keywords)
        self.release = threading.Event()

    def get_recent_tweets_count(self, query, **kwargs):
        if query.split(" -is:")[0] in self.slow_keywords:
            self.release.wait(timeout=5)
        return super().get_recent_tweets_count(query, **kwargs)


def _fetcher(client, **config):
    from social_arb.ingest import FetcherConfig, XMentionFetcher
    config.setdefault("end_time_margin_seconds", 0)
    return XMentionFetcher(client, FetcherConfig(**config), clock=lambda: T0)


# ═══════════════════════════════════════════════════════════════════════
# Test: Mention Fetcher
# ═══════════════════════════════════════════════════════════════════════


class TestXMentionFetcher:
    """Tests for XMentionFetcher."""

    @pytest.mark.asyncio
    async def test_current_and_baseline(self):
        client = FakeCountsClient(_buckets([10] * 24, [40] * 24))
        metrics = await _fetcher(client).fetch("celsius", 24)
        assert metrics.current == 960
        assert metrics.baseline == 240
        assert metrics.sustained
        assert not metrics.verified_sources
        assert len(metrics.hourly) == 24

    @pytest.mark.asyncio
    async def test_request_window(self):
        client = FakeCountsClient(_buckets([1] * 24, [1] * 24))
        await _fetcher(client).fetch("celsius", 24)
        query, kwargs = client.calls[0]
        assert query == "celsius -is:retweet lang:en"
        assert kwargs["granularity"] == "hour"
        assert kwargs["end_time"] == T0
        assert kwargs["start_time"] == T0 - timedelta(hours=48)

    @pytest.mark.asyncio
    async def test_late_spike_not_sustained(self):
        client = FakeCountsClient(_buckets([10] * 24, [0] * 12 + [80] * 12))
        metrics = await _fetcher(client).fetch("celsius", 24)
        assert metrics.current == 960
        assert not metrics.sustained

    @pytest.mark.asyncio
    async def test_no_baseline_buckets(self):
        client = FakeCountsClient(_buckets([], [50] * 24))
        metrics = await _fetcher(client).fetch("celsius", 24)
        assert metrics.current == 1200
        assert metrics.baseline is None
        assert not metrics.sustained

    @pytest.mark.asyncio
    async def test_verified_sources(self):
        client = FakeCountsClient(
            _buckets([10] * 24, [40] * 24),
            verified_buckets=_buckets([], [1] * 24),
        )
        metrics = await _fetcher(client, check_verified=True).fetch("celsius", 24)
        assert metrics.verified_sources
        assert "is:verified" in client.calls[1][0]

    @pytest.mark.asyncio
    async def test_api_error_raises_fetch_error(self):
        from social_arb.errors import FetchError
        client = FakeCountsClient(error=tweepy.TweepyException("429 Too Many Requests"))
        with pytest.raises(FetchError) as exc:
            await _fetcher(client).fetch("celsius", 24)
        assert exc.value.keyword == "celsius"

    @pytest.mark.asyncio
    async def test_request_timeout_raises_fetch_error(self):
        from social_arb.errors import FetchError
        client = SlowCountsClient({"celsius"})
        try:
            with pytest.raises(FetchError) as exc:
                await _fetcher(client, request_timeout_seconds=0.05).fetch("celsius", 24)
        finally:
            client.release.set()
        assert "timed out" in exc.value.message
        assert exc.value.keyword == "celsius"

    @pytest.mark.asyncio
    async def test_scores_through_policy(self):
        from social_arb.signal_engine import EmissionPolicy
        client = FakeCountsClient(_buckets([20] * 24, [90] * 24))
        metrics = await _fetcher(client).fetch("celsius", 24)
        signals = EmissionPolicy().detect_signals({"celsius": metrics}, now=T0)
        assert len(signals) == 1


# ═══════════════════════════════════════════════════════════════════════
# Test: Batch Fetch
# ═══════════════════════════════════════════════════════════════════════


class ScriptedFetcher:
    def __init__(self, results):
        self.results = results
        self.calls = []

    async def fetch(self, keyword, lookback_hours):
        from social_arb.signal_engine import MentionMetrics
        self.calls.append((keyword, lookback_hours))
        outcome = self.results.get(keyword, MentionMetrics(current=1, baseline=1))
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class TestBatchFetch:
    """Tests for batch_fetch."""

    @pytest.mark.asyncio
    async def test_failures_degrade_to_zero(self):
        from social_arb.ingest import batch_fetch
        fetcher = ScriptedFetcher({"roblox": TimeoutError("read timed out")})
        results = await batch_fetch(fetcher, ["celsius", "roblox", "netflix"], delay_seconds=0)

        assert list(results) == ["celsius", "roblox", "netflix"]
        assert results["roblox"].current == 0
        assert results["roblox"].baseline is None
        assert "timed out" in results["roblox"].fetch_error
        assert results["netflix"].fetch_error is None

    @pytest.mark.asyncio
    async def test_passes_lookback(self):
        from social_arb.ingest import batch_fetch
        fetcher = ScriptedFetcher({})
        await batch_fetch(fetcher, ["celsius"], lookback_hours=12, delay_seconds=0)
        assert fetcher.calls == [("celsius", 12)]

    @pytest.mark.asyncio
    async def test_slow_client_degrades_to_failed(self):
        from social_arb.ingest import batch_fetch
        client = SlowCountsClient({"roblox"}, buckets=_buckets([10] * 24, [40] * 24))
        fetcher = _fetcher(client, request_timeout_seconds=0.05)
        try:
            results = await batch_fetch(fetcher, ["celsius", "roblox", "netflix"], delay_seconds=0)
        finally:
            client.release.set()

        assert results["roblox"].current == 0
        assert "timed out" in results["roblox"].fetch_error
        assert results["celsius"].current == 960
        assert results["netflix"].fetch_error is None

    @pytest.mark.asyncio
    async def test_cancellation_propagates(self):
        from social_arb.ingest import batch_fetch
        fetcher = ScriptedFetcher({"roblox": asyncio.CancelledError()})
        with pytest.raises(asyncio.CancelledError):
            await batch_fetch(fetcher, ["celsius", "roblox", "netflix"], delay_seconds=0)
        assert [c[0] for c in fetcher.calls] == ["celsius", "roblox"]

    @pytest.mark.asyncio
    async def test_delay_between_calls(self, monkeypatch):
        from social_arb.ingest import base

        sleeps = []

        async def fake_sleep(seconds):
            sleeps.append(seconds)

        monkeypatch.setattr(base.asyncio, "sleep", fake_sleep)
        await base.batch_fetch(ScriptedFetcher({}), ["a", "b", "c"])
        assert sleeps == [0.5, 0.5]


# ═══════════════════════════════════════════════════════════════════════
# Test: Post Searcher
# ═══════════════════════════════════════════════════════════════════════


def _tweet(tweet_id, author_id, likes, text="post"):
    return SimpleNamespace(
        id=tweet_id,
        author_id=author_id,
        text=text,
        public_metrics={"like_count": likes, "retweet_count": 0},
        created_at=T0,
    )


class FakeSearchClient:
    """Stands in for tweepy.Client.search_recent_tweets with two pages."""

    def __init__(self, error=None):
        self.error = error
        self.calls = []
        self.pages = [
            tweepy.Response(
                data=[_tweet(1, 11, 5), _tweet(2, 12, 40)],
                includes={"users": [SimpleNamespace(id=11, username="alice"),
                                    SimpleNamespace(id=12, username="bob")]},
                errors=[],
                meta={"next_token": "page2"},
            ),
            tweepy.Response(
                data=[_tweet(3, 11, 120), _tweet(4, 99, 15)],
                includes={"users": [SimpleNamespace(id=11, username="alice")]},
                errors=[],
                meta={},
            ),
        ]

    def search_recent_tweets(self, query, **kwargs):
        self.calls.append((query, kwargs))
        if self.error:
            raise self.error
        return self.pages[1] if kwargs.get("next_token") else self.pages[0]


def _query(**overrides):
    from social_arb.research import ResearchCategory, ResearchQuery
    params = dict(category=ResearchCategory.CORE, query='"Celsius" -is:retweet lang:en',
                  since="7d", min_likes=10, pages=2, limit=20)
    params.update(overrides)
    return ResearchQuery(**params)


class TestXPostSearcher:
    """Tests for XPostSearcher."""

    @pytest.mark.asyncio
    async def test_paginates_filters_and_sorts(self):
        from social_arb.ingest import XPostSearcher
        client = FakeSearchClient()
        result = await XPostSearcher(client, clock=lambda: T0).search(_query())

        assert result.ok
        assert [p.likes for p in result.posts] == [120, 40, 15]
        assert result.posts[0].username == "alice"
        assert result.posts[0].url == "https://x.com/alice/status/3"
        assert result.posts[2].url == "https://x.com/i/status/4"
        assert len(client.calls) == 2
        assert client.calls[1][1]["next_token"] == "page2"
        assert client.calls[0][1]["start_time"] == T0 - timedelta(days=7)

    @pytest.mark.asyncio
    async def test_respects_page_count_and_limit(self):
        from social_arb.ingest import XPostSearcher
        client = FakeSearchClient()
        result = await XPostSearcher(client, clock=lambda: T0).search(
            _query(pages=1, min_likes=0, limit=1)
        )
        assert len(client.calls) == 1
        assert [p.likes for p in result.posts] == [40]

    @pytest.mark.asyncio
    async def test_error_captured(self):
        from social_arb.ingest import XPostSearcher
        client = FakeSearchClient(error=tweepy.TweepyException("503 Service Unavailable"))
        result = await XPostSearcher(client).search(_query())
        assert not result.ok
        assert result.posts == []
        assert "503" in result.error

    @pytest.mark.asyncio
    async def test_request_timeout_captured(self):
        from social_arb.ingest import XPostSearcher
        release = threading.Event()

        class SlowSearchClient(FakeSearchClient):
            def search_recent_tweets(self, query, **kwargs):
                release.wait(timeout=5)
                return super().search_recent_tweets(query, **kwargs)

        searcher = XPostSearcher(SlowSearchClient(), request_timeout=0.05, clock=lambda: T0)
        try:
            result = await searcher.search(_query())
        finally:
            release.set()
        assert not result.ok
        assert result.posts == []
        assert result.error == "TimeoutError"

    @pytest.mark.asyncio
    async def test_bad_since_captured(self):
        from social_arb.ingest import XPostSearcher
        client = FakeSearchClient()
        result = await XPostSearcher(client).search(_query(since="week"))
        assert result.error
        assert client.calls == []


class TestParseSince:
    """Tests for parse_since."""

    def test_units(self):
        from social_arb.ingest import parse_since
        assert parse_since("7d") == timedelta(days=7)
        assert parse_since("24h") == timedelta(hours=24)
        assert parse_since("90m") == timedelta(minutes=90)
        assert parse_since(" 2H ") == timedelta(hours=2)

    @pytest.mark.parametrize("value", ["", "7", "d7", "7w", "0h", "-1d"])
    def test_invalid(self, value):
        from social_arb.errors import ConfigurationError
        from social_arb.ingest import parse_since
        with pytest.raises(ConfigurationError):
            parse_since(value)
