"""Pytest configuration and shared fixtures."""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


T0 = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)


class RecordingNotifier:
    """Notifier that records payloads; optionally fails every delivery."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.payloads = []

    async def deliver(self, payload):
        from social_arb.alerts import DeliveryAck
        from social_arb.errors import DeliveryError

        self.payloads.append(payload)
        if self.fail:
            raise DeliveryError("webhook down", status_code=503)
        return DeliveryAck(channel="test", message_id=str(len(self.payloads)))


@pytest.fixture
def t0():
    return T0


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def failing_notifier():
    return RecordingNotifier(fail=True)


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are cached process-wide; reset between tests."""
    from social_arb.settings import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
