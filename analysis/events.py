"""
Event Model for the Banker's Algorithm Allocator.

Records every safety check and request decision made during a session.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from models.outcome import RequestOutcome, OutcomeKind


class EventType(Enum):
    """Types of events in an allocator session."""
    SAFETY_CHECK = "safety_check"
    GRANTED = "granted"
    EXCEEDS_NEED = "exceeds_need"
    NOT_AVAILABLE = "not_available"
    UNSAFE = "unsafe"


_OUTCOME_EVENTS = {
    OutcomeKind.GRANTED: EventType.GRANTED,
    OutcomeKind.EXCEEDS_NEED: EventType.EXCEEDS_NEED,
    OutcomeKind.NOT_AVAILABLE: EventType.NOT_AVAILABLE,
    OutcomeKind.UNSAFE: EventType.UNSAFE,
}


@dataclass
class AllocatorEvent:
    """
    Represents a single event in an allocator session.

    Attributes:
        seq: Position of the event in the session (0-based)
        event_type: Type of event
        process_id: PID involved in the event (-1 for system-wide checks)
        request: Requested vector (request events only)
        sequence: Safe sequence (granted requests and safe checks only)
        safe: Result of a safety check
    """
    seq: int
    event_type: EventType
    process_id: int = -1
    request: Optional[Tuple[int, ...]] = None
    sequence: Optional[Tuple[int, ...]] = None
    safe: Optional[bool] = None

    def __str__(self) -> str:
        """Format event for display."""
        base = f"#{self.seq}:"
        seq_str = ", ".join(str(pid) for pid in (self.sequence or ()))
        req_str = ", ".join(str(x) for x in (self.request or ()))

        if self.event_type == EventType.SAFETY_CHECK:
            if self.safe:
                return f"{base} safety check - SAFE [{seq_str}]"
            return f"{base} safety check - UNSAFE"
        elif self.event_type == EventType.GRANTED:
            return f"{base} P{self.process_id} requests [{req_str}] - GRANTED [{seq_str}]"
        else:
            status = self.event_type.value.replace("_", " ").upper()
            return f"{base} P{self.process_id} requests [{req_str}] - DENIED ({status})"


@dataclass
class EventLog:
    """Collection of allocator events."""
    events: list = None

    def __post_init__(self):
        if self.events is None:
            self.events = []

    def add(self, event: AllocatorEvent) -> None:
        """Add an event to the log."""
        self.events.append(event)

    def record_safety(self, is_safe: bool, sequence) -> AllocatorEvent:
        """Record the result of a safety check."""
        event = AllocatorEvent(
            seq=len(self.events),
            event_type=EventType.SAFETY_CHECK,
            sequence=tuple(sequence) if is_safe and sequence is not None else None,
            safe=is_safe
        )
        self.add(event)
        return event

    def record_outcome(self, outcome: RequestOutcome) -> AllocatorEvent:
        """Record the decision on a resource request."""
        event = AllocatorEvent(
            seq=len(self.events),
            event_type=_OUTCOME_EVENTS[outcome.kind],
            process_id=outcome.pid,
            request=tuple(outcome.request),
            sequence=getattr(outcome, 'order', None)
        )
        self.add(event)
        return event

    def get_events_by_type(self, event_type: EventType) -> list:
        """Get all events of a specific type."""
        return [e for e in self.events if e.event_type == event_type]

    def get_events_by_process(self, pid: int) -> list:
        """Get all events involving a specific process."""
        return [e for e in self.events if e.process_id == pid]

    def display(self) -> str:
        """Format all events for display."""
        return "\n".join(str(event) for event in self.events)
