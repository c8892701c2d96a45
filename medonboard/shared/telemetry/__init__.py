"""Logging setup, OpenTelemetry tracing and the @traced decorator."""

from medonboard.shared.telemetry.logging import get_logger, setup_logging
from medonboard.shared.telemetry.telemetry import (
    TelemetryConfig,
    get_telemetry,
    set_telemetry,
)
from medonboard.shared.telemetry.tracing import traced

__all__ = [
    "setup_logging",
    "get_logger",
    "TelemetryConfig",
    "get_telemetry",
    "set_telemetry",
    "traced",
]
