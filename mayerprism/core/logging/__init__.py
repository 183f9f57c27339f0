"""Logging utilities for monitoring and debugging."""

from mayerprism.core.logging.config import LogConfig
from mayerprism.core.logging.logger import (
    configure_logging,
    current_trace_id,
    log_context,
    logger,
)
from mayerprism.core.logging.performance import PerformanceLogger

__all__ = [
    "LogConfig",
    "PerformanceLogger",
    "configure_logging",
    "current_trace_id",
    "log_context",
    "logger",
]
