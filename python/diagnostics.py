"""
Diagnostics events raised by a configurator session (rejections, preset
lifecycle), delivered to a pluggable sink.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Protocol

logger = logging.getLogger("diagnostics")


@dataclass(frozen=True)
class DiagnosticEvent:
    name: str
    details: dict[str, Any] = field(default_factory=dict)


class DiagnosticsSink(Protocol):
    def record(self, event: DiagnosticEvent) -> None: ...


class LoggingSink:
    """Forward events to the 'diagnostics' logger."""

    def __init__(self, level: int = logging.INFO) -> None:
        self.level = level

    def record(self, event: DiagnosticEvent) -> None:
        logger.log(self.level, "%s %s", event.name, event.details)


class MemorySink:
    """Keep events in a list."""

    def __init__(self) -> None:
        self.events: list[DiagnosticEvent] = []

    def record(self, event: DiagnosticEvent) -> None:
        self.events.append(event)

    def names(self) -> list[str]:
        return [event.name for event in self.events]


class NullSink:
    def record(self, event: DiagnosticEvent) -> None:
        pass


def configure_logging(level: int = logging.WARNING) -> None:
    """Basic console logging for the demo scripts."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )
