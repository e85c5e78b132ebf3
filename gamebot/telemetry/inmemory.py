"""In-memory counter telemetry for the CLI and tests."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from loguru import logger


@dataclass
class InMemoryTelemetry:
    """Counts turn events in memory and mirrors each increment to the debug log."""

    counters: Counter[str] = field(default_factory=Counter)

    def incr(self, name: str, value: int = 1, labels: tuple[tuple[str, str], ...] = ()) -> None:
        """Increase a named counter."""
        key = self._make_key(name, labels)
        self.counters[key] += value
        logger.debug("metric {} +{}", key, value)

    def _make_key(self, name: str, labels: tuple[tuple[str, str], ...] | None) -> str:
        if not labels:
            return name
        label_str = ",".join(f"{k}={v}" for k, v in labels)
        return f"{name}{{{label_str}}}"

    def get_counter(self, name: str, labels: tuple[tuple[str, str], ...] = ()) -> int:
        """Get counter value for testing."""
        return int(self.counters[self._make_key(name, labels)])

    def snapshot(self) -> dict[str, int]:
        """Copy of all counters keyed by ``name{labels}``."""
        return dict(self.counters)


class NoopTelemetry:
    """Telemetry sink that drops everything."""

    def incr(self, name: str, value: int = 1, labels: tuple[tuple[str, str], ...] = ()) -> None:
        return None
