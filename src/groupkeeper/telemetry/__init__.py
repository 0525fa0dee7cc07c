"""Telemetry module for OpenTelemetry instrumentation."""
from groupkeeper.telemetry.instrumentation import TelemetryManager

__all__ = ["TelemetryManager"]
