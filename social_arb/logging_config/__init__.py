"""Structured Logging & Cycle Tracing.

Structured JSON logging, per-cycle context binding, and timing of
external calls for the social arbitrage runner.
"""

from social_arb.logging_config.config import LogFormat, LoggingConfig, LogLevel
from social_arb.logging_config.context import CycleContext, generate_cycle_id
from social_arb.logging_config.performance import PerformanceTimer
from social_arb.logging_config.setup import configure_logging

__all__ = [
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "CycleContext",
    "PerformanceTimer",
    "configure_logging",
    "generate_cycle_id",
]
