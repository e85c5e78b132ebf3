"""Telemetry sinks."""

from gamebot.telemetry.inmemory import InMemoryTelemetry, NoopTelemetry

__all__ = ["InMemoryTelemetry", "NoopTelemetry"]
