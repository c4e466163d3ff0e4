"""Cycle Context Management.

Binds a cycle ID (one batch evaluation or one topic research) and
arbitrary extra fields to every log entry emitted inside the cycle.
"""

import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any


_cycle_id_var: ContextVar[str] = ContextVar("cycle_id", default="")
_extra_context_var: ContextVar[dict] = ContextVar("extra_context", default={})


def generate_cycle_id() -> str:
    """Generate a short unique cycle ID."""
    return uuid.uuid4().hex[:12]


def get_cycle_id() -> str:
    """Get the current cycle ID from context."""
    return _cycle_id_var.get()


def get_context_dict() -> dict[str, Any]:
    """Get all context variables as a dictionary for log binding."""
    ctx = {}
    cycle_id = _cycle_id_var.get()
    if cycle_id:
        ctx["cycle_id"] = cycle_id
    extra = _extra_context_var.get()
    if extra:
        ctx.update(extra)
    return ctx


class CycleContext:
    """Context manager for cycle-scoped logging context.

    Example:
        with CycleContext(kind="batch"):
            logger.info("fetching mentions")  # includes cycle_id, kind
    """

    def __init__(self, cycle_id: str = "", **extra: Any):
        self.cycle_id = cycle_id or generate_cycle_id()
        self.extra: dict[str, Any] = dict(extra)
        self.started_at = datetime.now(timezone.utc)
        self._tokens: list = []

    def __enter__(self) -> "CycleContext":
        self._tokens = [
            _cycle_id_var.set(self.cycle_id),
            _extra_context_var.set(self.extra.copy()),
        ]
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        cycle_token, extra_token = self._tokens
        _extra_context_var.reset(extra_token)
        _cycle_id_var.reset(cycle_token)
        self._tokens = []

    @property
    def elapsed_ms(self) -> float:
        """Milliseconds since the cycle started."""
        delta = datetime.now(timezone.utc) - self.started_at
        return delta.total_seconds() * 1000

    def bind(self, **kwargs: Any) -> None:
        """Add extra key-value pairs to the context."""
        current = _extra_context_var.get()
        _extra_context_var.set({**current, **kwargs})
        self.extra.update(kwargs)
