"""
Diagnostic events emitted by the charge algorithms.

The reionizer and uncharger report what they do (charges corrected,
protons moved, loops abandoned) as named events sent to a sink. A sink
is anything with an ``emit`` method; the default one writes the events
to the standard :mod:`logging` hierarchy under ``ionipy.charge``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol, runtime_checkable


logger = logging.getLogger("ionipy.charge")


class ChargeEvent(str, Enum):
    """Names of the events emitted while adjusting charges."""

    CHARGE_CORRECTED = "charge_corrected"
    ACID_IONIZED = "acid_ionized"
    PROTON_MOVED = "proton_moved"
    REIONIZATION_ABORTED = "reionization_aborted"
    UNCHARGE_STARTED = "uncharge_started"
    NEGATIVE_NEUTRALIZED = "negative_neutralized"
    POSITIVE_NEUTRALIZED = "positive_neutralized"

    def __str__(self) -> str:
        return self.value


@runtime_checkable
class EventSink(Protocol):
    """Protocol for receivers of charge events."""

    def emit(self, event: ChargeEvent, **details: Any) -> None:
        """Receive one event with its details."""
        ...


_MESSAGES: dict[ChargeEvent, str] = {
    ChargeEvent.CHARGE_CORRECTED: "Applying charge correction {rule} {symbol} {charge}",
    ChargeEvent.ACID_IONIZED: "Ionizing {name} to balance previous charge corrections",
    ChargeEvent.PROTON_MOVED: "Moved proton from {acid} to {base}",
    ChargeEvent.REIONIZATION_ABORTED: "Aborted reionization ({reason})",
    ChargeEvent.UNCHARGE_STARTED: "Running Uncharger",
    ChargeEvent.NEGATIVE_NEUTRALIZED: "Removed negative charge",
    ChargeEvent.POSITIVE_NEUTRALIZED: "Removed positive charge",
}


class LoggingEventSink:
    """Sink writing events to a :class:`logging.Logger`.

    Aborted reionizations are logged at WARNING, everything else at INFO.
    """

    def __init__(self, log: logging.Logger | None = None) -> None:
        self.log = log if log is not None else logger

    def emit(self, event: ChargeEvent, **details: Any) -> None:
        level = logging.WARNING if event is ChargeEvent.REIONIZATION_ABORTED else logging.INFO
        if not self.log.isEnabledFor(level):
            return
        try:
            message = _MESSAGES[event].format(**details)
        except KeyError:
            message = str(event)
        self.log.log(level, message, extra={"charge_event": str(event), "details": details})


@dataclass(slots=True)
class RecordedEvent:
    """One event captured by :class:`RecordingEventSink`."""
    event: ChargeEvent
    details: dict[str, Any] = field(default_factory=dict)


class RecordingEventSink:
    """Sink keeping every event in memory.

    Example:
        >>> sink = RecordingEventSink()
        >>> Reionizer(sink=sink).reionize_in_place(mol)
        >>> sink.names()
        [<ChargeEvent.PROTON_MOVED: 'proton_moved'>]
    """

    def __init__(self) -> None:
        self.events: list[RecordedEvent] = []

    def emit(self, event: ChargeEvent, **details: Any) -> None:
        self.events.append(RecordedEvent(event, dict(details)))

    def names(self) -> list[ChargeEvent]:
        return [e.event for e in self.events]

    def of(self, event: ChargeEvent) -> list[RecordedEvent]:
        """Events of one kind, in emission order."""
        return [e for e in self.events if e.event is event]

    def clear(self) -> None:
        self.events.clear()


def default_sink() -> EventSink:
    """Sink used when none is given."""
    return LoggingEventSink()
