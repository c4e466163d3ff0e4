"""Tests for the emission policy: gates, selection, status, persistence."""

import threading
import time
from datetime import datetime, timedelta, timezone

import pytest

T0 = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)


def _spike(current=2000, baseline=500, sustained=True, verified=False):
    from social_arb.signal_engine import MentionMetrics
    return MentionMetrics(
        current=current, baseline=baseline, sustained=sustained, verified_sources=verified,
    )


# ═══════════════════════════════════════════════════════════════════════
# Test: Detection
# ═══════════════════════════════════════════════════════════════════════


class TestDetectSignals:
    """Tests for EmissionPolicy.detect_signals."""

    def test_reference_spike_emits(self):
        from social_arb.signal_engine import EmissionPolicy
        policy = EmissionPolicy()
        signals = policy.detect_signals({"celsius": _spike()}, now=T0)

        assert len(signals) == 1
        sig = signals[0]
        assert sig.keyword == "celsius"
        assert sig.ticker == "CELH"
        assert sig.momentum == pytest.approx(2.4)
        assert sig.confidence == pytest.approx(90.0)
        assert sig.mentions == 2000
        assert sig.swing_score.entry == "STRONG"
        assert sig.timestamp == T0

    def test_commits_state_on_accept(self):
        from social_arb.signal_engine import EmissionPolicy
        policy = EmissionPolicy()
        policy.detect_signals({"celsius": _spike()}, now=T0)
        assert policy.state.last_signal_time == T0
        assert policy.state.recent_signals == {"celsius": T0}

    def test_empty_input(self):
        from social_arb.signal_engine import EmissionPolicy
        policy = EmissionPolicy()
        assert policy.detect_signals({}, now=T0) == []
        assert policy.state.last_signal_time is None

    def test_low_confidence_rejected_without_state_change(self):
        from social_arb.signal_engine import EmissionPolicy
        policy = EmissionPolicy()
        # momentum 1.2 passes, confidence 40 + 20 + 15 = 75 does not
        assert policy.detect_signals({"roblox": _spike(1000, 400)}, now=T0) == []
        assert policy.state.last_signal_time is None
        assert policy.state.recent_signals == {}

    def test_momentum_gate_applies_before_confidence(self):
        from social_arb.signal_engine import EmissionPolicy
        policy = EmissionPolicy()
        # confidence ~81 but momentum ~0.53
        metrics = _spike(10000, 6000, sustained=True, verified=True)
        assert policy.scorer.confidence(policy.scorer.momentum(metrics), metrics) >= 80
        assert policy.detect_signals({"netflix": metrics}, now=T0) == []

    def test_missing_baseline_never_emits(self):
        from social_arb.signal_engine import EmissionPolicy, MentionMetrics
        policy = EmissionPolicy()
        metrics = MentionMetrics(current=50000, baseline=None, sustained=True, verified_sources=True)
        assert policy.detect_signals({"bitcoin": metrics}, now=T0) == []

    def test_highest_confidence_wins(self):
        from social_arb.signal_engine import EmissionPolicy
        policy = EmissionPolicy()
        signals = policy.detect_signals({
            "lululemon": _spike(1500, 500),  # confidence 85
            "celsius": _spike(2000, 500),    # confidence 90
        }, now=T0)
        assert [s.keyword for s in signals] == ["celsius"]
        # the runner-up is not put in cooldown
        assert "lululemon" not in policy.state.recent_signals

    def test_tie_keeps_first_seen(self):
        from social_arb.signal_engine import EmissionPolicy
        policy = EmissionPolicy()
        signals = policy.detect_signals({"spotify": _spike(), "netflix": _spike()}, now=T0)
        assert signals[0].keyword == "spotify"

    def test_unmapped_keyword_has_no_ticker(self):
        from social_arb.signal_engine import EmissionPolicy
        policy = EmissionPolicy()
        signals = policy.detect_signals({"ghost energy": _spike()}, now=T0)
        assert signals[0].ticker is None

    def test_uses_injected_clock(self):
        from social_arb.signal_engine import EmissionPolicy
        policy = EmissionPolicy(clock=lambda: T0)
        signals = policy.detect_signals({"celsius": _spike()})
        assert signals[0].timestamp == T0


# ═══════════════════════════════════════════════════════════════════════
# Test: Rate Limit & Cooldown
# ═══════════════════════════════════════════════════════════════════════


class TestGates:
    """Tests for the global rate limit and keyword cooldown."""

    def test_throttled_within_window(self):
        from social_arb.signal_engine import EmissionPolicy
        policy = EmissionPolicy()
        policy.detect_signals({"celsius": _spike()}, now=T0)

        later = T0 + timedelta(hours=7, minutes=59)
        assert policy.is_throttled(later)
        assert policy.detect_signals({"roblox": _spike()}, now=later) == []
        assert policy.state.last_signal_time == T0

    def test_ready_at_window_boundary(self):
        from social_arb.signal_engine import EmissionPolicy
        policy = EmissionPolicy()
        policy.detect_signals({"celsius": _spike()}, now=T0)

        later = T0 + timedelta(hours=8)
        assert not policy.is_throttled(later)
        signals = policy.detect_signals({"roblox": _spike()}, now=later)
        assert [s.keyword for s in signals] == ["roblox"]

    def test_cooldown_blocks_same_keyword(self):
        from social_arb.signal_engine import EmissionPolicy
        policy = EmissionPolicy()
        policy.detect_signals({"celsius": _spike()}, now=T0)

        later = T0 + timedelta(hours=9)
        assert policy.in_cooldown("celsius", later)
        signals = policy.detect_signals(
            {"celsius": _spike(5000, 500), "roblox": _spike()}, now=later,
        )
        assert [s.keyword for s in signals] == ["roblox"]

    def test_cooldown_expires(self):
        from social_arb.signal_engine import EmissionPolicy
        policy = EmissionPolicy()
        policy.detect_signals({"celsius": _spike()}, now=T0)

        later = T0 + timedelta(hours=48)
        assert not policy.in_cooldown("celsius", later)
        assert len(policy.detect_signals({"celsius": _spike()}, now=later)) == 1

    def test_at_most_three_per_day(self):
        from social_arb.signal_engine import EmissionPolicy
        policy = EmissionPolicy()
        keywords = ["celsius", "roblox", "netflix", "spotify", "tesla", "nvidia"]
        emitted = 0
        for hour in range(24):
            now = T0 + timedelta(hours=hour)
            emitted += len(policy.detect_signals({kw: _spike() for kw in keywords}, now=now))
        assert emitted == 3

    def test_overlapping_triggers_emit_once(self):
        from social_arb.signal_engine import EmissionPolicy
        from social_arb.signal_engine.scorer import SignalScorer

        class SlowScorer(SignalScorer):
            def confidence(self, momentum, metrics):
                time.sleep(0.05)
                return super().confidence(momentum, metrics)

        policy = EmissionPolicy(scorer=SlowScorer())
        barrier = threading.Barrier(2)
        emitted = []

        def trigger(keyword):
            barrier.wait()
            emitted.extend(policy.detect_signals({keyword: _spike()}, now=T0))

        threads = [threading.Thread(target=trigger, args=(kw,)) for kw in ("celsius", "roblox")]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(emitted) == 1
        assert list(policy.state.recent_signals) == [emitted[0].keyword]
        assert policy.state.last_signal_time == T0

    def test_expired_entries_pruned_on_commit(self):
        from social_arb.signal_engine import EmissionPolicy
        policy = EmissionPolicy()
        policy.detect_signals({"celsius": _spike()}, now=T0)
        policy.detect_signals({"roblox": _spike()}, now=T0 + timedelta(hours=40))

        later = T0 + timedelta(hours=48)
        policy.detect_signals({"netflix": _spike()}, now=later)

        assert policy.state.recent_signals == {
            "roblox": T0 + timedelta(hours=40),
            "netflix": later,
        }

    def test_rejected_cycle_keeps_expired_entries(self):
        from social_arb.signal_engine import EmissionPolicy
        policy = EmissionPolicy()
        policy.detect_signals({"celsius": _spike()}, now=T0)
        assert policy.detect_signals({}, now=T0 + timedelta(hours=72)) == []
        assert policy.state.recent_signals == {"celsius": T0}

    def test_custom_thresholds(self):
        from social_arb.signal_engine import EmissionPolicy, EngineConfig
        policy = EmissionPolicy(config=EngineConfig(min_confidence=70.0))
        assert len(policy.detect_signals({"roblox": _spike(1000, 400)}, now=T0)) == 1


# ═══════════════════════════════════════════════════════════════════════
# Test: Status
# ═══════════════════════════════════════════════════════════════════════


class TestStatus:
    """Tests for EmissionPolicy.get_status."""

    def test_fresh_engine_ready(self):
        from social_arb.signal_engine import EmissionPolicy
        status = EmissionPolicy().get_status(T0)
        assert status.next_signal_in_hours == 0
        assert status.is_ready
        assert status.cooldown_keywords == []
        assert status.recent_signals == []

    def test_rounding(self):
        from social_arb.signal_engine import EmissionPolicy
        policy = EmissionPolicy()
        policy.detect_signals({"celsius": _spike()}, now=T0)

        status = policy.get_status(T0 + timedelta(hours=1, minutes=30))
        assert status.next_signal_in_hours == 7
        assert not status.is_ready
        assert status.recent_signals[0].keyword == "celsius"
        assert status.recent_signals[0].hours_ago == 1
        assert status.cooldown_keywords[0].hours_remaining == 47

    def test_expired_cooldown_still_listed_as_recent(self):
        from social_arb.signal_engine import EmissionPolicy
        policy = EmissionPolicy()
        policy.detect_signals({"celsius": _spike()}, now=T0)

        status = policy.get_status(T0 + timedelta(hours=50))
        assert status.is_ready
        assert status.cooldown_keywords == []
        assert status.recent_signals[0].hours_ago == 50

    def test_status_is_read_only(self):
        from social_arb.signal_engine import EmissionPolicy
        policy = EmissionPolicy()
        policy.get_status(T0)
        assert policy.state.last_signal_time is None

    def test_to_dict(self):
        from social_arb.signal_engine import EmissionPolicy
        policy = EmissionPolicy()
        policy.detect_signals({"celsius": _spike()}, now=T0)
        d = policy.get_status(T0 + timedelta(hours=2)).to_dict()
        assert d["next_signal_in_hours"] == 6
        assert d["is_ready"] is False
        assert d["cooldown_keywords"] == [{"keyword": "celsius", "hours_remaining": 46}]


# ═══════════════════════════════════════════════════════════════════════
# Test: State Store
# ═══════════════════════════════════════════════════════════════════════


class TestEngineStateStore:
    """Tests for JSON persistence of EngineState."""

    def test_missing_file_gives_fresh_state(self, tmp_path):
        from social_arb.signal_engine import EngineStateStore
        state = EngineStateStore(tmp_path / "state.json").load()
        assert state.last_signal_time is None
        assert state.recent_signals == {}

    def test_round_trip_restores_throttle(self, tmp_path):
        from social_arb.signal_engine import EmissionPolicy, EngineStateStore
        store = EngineStateStore(tmp_path / "nested" / "state.json")
        policy = EmissionPolicy()
        policy.detect_signals({"celsius": _spike()}, now=T0)
        store.save(policy.state)

        restored = EmissionPolicy(state=store.load())
        assert restored.state.last_signal_time == T0
        assert restored.is_throttled(T0 + timedelta(hours=1))
        assert restored.in_cooldown("celsius", T0 + timedelta(hours=1))

    def test_corrupt_file_gives_fresh_state(self, tmp_path):
        from social_arb.signal_engine import EngineStateStore
        path = tmp_path / "state.json"
        path.write_text("{not json")
        assert EngineStateStore(path).load().last_signal_time is None
