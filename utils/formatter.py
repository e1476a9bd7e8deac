"""
State formatter for the Banker's Algorithm Allocator.

Stateless rendering of AllocationState snapshots and request outcomes.
Nothing here touches the engine; callers pass in read-only snapshots.
"""

from typing import Optional, Sequence

from models.allocation_state import AllocationState
from models.outcome import (
    RequestOutcome, OutcomeKind, ExceedsNeed, NotAvailable, Granted
)


def format_sequence(sequence: Optional[Sequence[int]]) -> str:
    """Render a PID sequence as "[1, 3, 4, 0, 2]"."""
    if sequence is None:
        return "[]"
    return "[" + ", ".join(str(int(pid)) for pid in sequence) + "]"


def format_vector(label: str, vector) -> str:
    """Render a labeled vector block."""
    return f"# {label}\n{format_sequence(list(vector))}\n"


def format_matrix(label: str, matrix) -> str:
    """
    Render a labeled matrix block, one row per line:

        # Maximum Matrix
        [[7, 5, 3],
         [3, 2, 2]]
    """
    rows = [format_sequence(list(row)) for row in matrix]
    return f"# {label}\n[" + ",\n ".join(rows) + "]\n"


def format_state(state: AllocationState) -> str:
    """
    Generate readable representation of an allocation state.

    Args:
        state: Snapshot to render

    Returns:
        Header with dimensions followed by Available, Maximum,
        Allocation and Need blocks
    """
    output = [
        f"n = {state.num_processes} # Number of processes",
        f"m = {state.num_resources} # Number of resources types",
        "",
        format_vector("Available Vector (initially total resources available)", state.available),
        format_matrix("Maximum Matrix", state.maximum),
        format_matrix("Allocation Matrix", state.allocation),
        format_matrix("Need Matrix (Max - Allocation)", state.need),
    ]
    return "\n".join(output)


def format_safety(is_safe: bool, sequence: Optional[Sequence[int]]) -> str:
    """Render the result of a safety check."""
    if is_safe:
        return f"System is in a SAFE state.\nSafe Sequence: {format_sequence(sequence)}"
    return "System is in an UNSAFE state."


def format_outcome(outcome: RequestOutcome) -> str:
    """
    Render a request outcome as a user-facing message.

    Args:
        outcome: Result of a request evaluation

    Returns:
        Message describing the decision
    """
    if isinstance(outcome, Granted):
        return f"Request granted.\nSafe Sequence: {format_sequence(outcome.order)}"
    elif isinstance(outcome, ExceedsNeed):
        return f"Error: Request exceeds remaining need for P{outcome.pid}."
    elif isinstance(outcome, NotAvailable):
        return f"Resources not available. Process P{outcome.pid} must wait."
    elif outcome.kind == OutcomeKind.UNSAFE:
        return "Error: Request would lead to an unsafe state."
    else:
        return f"Unknown outcome: {outcome!r}"


def describe_outcome(outcome: RequestOutcome) -> str:
    """Short reason string for logs, e.g. "requested R0[4], need 1"."""
    if isinstance(outcome, Granted):
        return f"safe sequence: {' -> '.join(f'P{pid}' for pid in outcome.order)}"
    elif isinstance(outcome, ExceedsNeed):
        return f"requested R{outcome.resource_type}[{outcome.requested}], need {outcome.need}"
    elif isinstance(outcome, NotAvailable):
        return (
            f"requested R{outcome.resource_type}[{outcome.requested}], "
            f"available {outcome.available}"
        )
    return "no safe sequence after tentative allocation"
