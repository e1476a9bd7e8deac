"""
Request Outcome model for the Banker's Algorithm Allocator.

One variant per possible answer to a resource request. Only a granted
request carries a witness safe sequence.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class OutcomeKind(Enum):
    """Possible results of evaluating a resource request."""
    GRANTED = "granted"
    EXCEEDS_NEED = "exceeds_need"
    NOT_AVAILABLE = "not_available"
    UNSAFE = "unsafe"


@dataclass(frozen=True)
class RequestOutcome:
    """
    Base for all request outcomes.

    Attributes:
        pid: Process that made the request
        request: Requested units per resource class [R]
    """
    pid: int
    request: Tuple[int, ...]

    kind = None

    @property
    def granted(self) -> bool:
        """True only when the request was committed."""
        return self.kind == OutcomeKind.GRANTED


@dataclass(frozen=True)
class Granted(RequestOutcome):
    """Request committed; `order` is a safe sequence for the new state."""
    order: Tuple[int, ...] = ()

    kind = OutcomeKind.GRANTED


@dataclass(frozen=True)
class ExceedsNeed(RequestOutcome):
    """Request is above the process's remaining declared need."""
    resource_type: int = 0
    requested: int = 0
    need: int = 0

    kind = OutcomeKind.EXCEEDS_NEED


@dataclass(frozen=True)
class NotAvailable(RequestOutcome):
    """Not enough free units right now; the caller may retry later."""
    resource_type: int = 0
    requested: int = 0
    available: int = 0

    kind = OutcomeKind.NOT_AVAILABLE


@dataclass(frozen=True)
class Unsafe(RequestOutcome):
    """Granting would leave the system without a safe sequence; state restored."""

    kind = OutcomeKind.UNSAFE
