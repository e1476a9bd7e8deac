"""
Deadlock Avoidance Algorithm (Banker's Algorithm) for the Allocator.

Implements the safety check and the request evaluation protocol on top
of an immutable AllocationState.
"""

import numpy as np
from typing import List, Optional, Sequence, Tuple

from models.allocation_state import AllocationState, has_integer_entries
from models.outcome import RequestOutcome, Granted, ExceedsNeed, NotAvailable, Unsafe


class InvalidRequestError(ValueError):
    """Raised when a request is malformed (bad PID, wrong length, negative amounts)."""
    pass


def is_safe_state(state: AllocationState) -> Tuple[bool, Optional[List[int]]]:
    """
    Check if the system is in a safe state using Banker's Algorithm.

    Algorithm:
    1. Initialize Work = Available, Finish = [False] * num_processes
    2. Scan unfinished processes in PID order; whenever Need[i] <= Work,
       set Finish[i] = True, Work += Allocation[i], append i to the sequence
    3. Repeat the scan until a full pass finishes nobody
    4. SAFE if every process finished, UNSAFE otherwise

    Time Complexity: O(P²×R)

    Args:
        state: Allocation state to examine (not modified)

    Returns:
        Tuple of (is_safe, safe_sequence if safe else None)

    References:
        Silberschatz, A., Galvin, P. B., & Gagne, G. (2018).
        Operating System Concepts (10th ed.). Chapter 7.5: Deadlock Avoidance.
    """
    work = state.available.copy()
    finish = np.zeros(state.num_processes, dtype=bool)
    safe_sequence = []

    made_progress = True
    while made_progress:
        made_progress = False

        for i in range(state.num_processes):
            if finish[i]:
                continue

            if np.all(state.need[i] <= work):
                work += state.allocation[i]
                finish[i] = True
                safe_sequence.append(i)
                made_progress = True

    if np.all(finish):
        return True, safe_sequence
    return False, None


def is_valid_sequence(state: AllocationState, sequence: Sequence[int]) -> bool:
    """
    Replay a finishing order and check it against the eligibility rule.

    A sequence is valid when it names every process exactly once and each
    process's Need fits in Work at the moment it is chosen.

    Args:
        state: Allocation state the sequence was produced for
        sequence: Candidate safe sequence of PIDs

    Returns:
        True if the sequence proves the state safe
    """
    if sorted(sequence) != list(range(state.num_processes)):
        return False

    work = state.available.copy()
    for pid in sequence:
        if not np.all(state.need[pid] <= work):
            return False
        work += state.allocation[pid]

    return True


def validate_request(state: AllocationState, pid: int, request: Sequence[int]) -> Tuple[int, ...]:
    """
    Check a request's shape and return its amounts as Python ints.

    Amounts are kept as unbounded ints so that values too wide for int64
    reach the need check intact instead of wrapping.

    Raises:
        InvalidRequestError: If pid is out of range or the request is not
            a vector of m non-negative integers
    """
    if isinstance(pid, bool) or not isinstance(pid, (int, np.integer)):
        raise InvalidRequestError(f"Invalid PID: {pid!r}")
    if pid < 0 or pid >= state.num_processes:
        raise InvalidRequestError(
            f"Invalid PID: {pid} (expected 0-{state.num_processes - 1})"
        )

    try:
        vector = np.array(request)
    except ValueError as e:
        raise InvalidRequestError(f"P{pid}: malformed request ({e})")

    if vector.shape != (state.num_resources,):
        raise InvalidRequestError(
            f"P{pid}: request must have {state.num_resources} entries, got shape {vector.shape}"
        )
    if not has_integer_entries(vector):
        raise InvalidRequestError(f"P{pid}: request entries must be integers")

    amounts = tuple(int(x) for x in vector.flat)
    if any(x < 0 for x in amounts):
        raise InvalidRequestError(f"P{pid}: request entries must be non-negative")

    return amounts


def evaluate_request(
    state: AllocationState,
    pid: int,
    request: Sequence[int]
) -> Tuple[RequestOutcome, AllocationState]:
    """
    Evaluate a resource request using Banker's Algorithm.

    Steps:
    1. Validate: request <= need (otherwise ExceedsNeed)
    2. Check: request <= available (otherwise NotAvailable)
    3. Build the candidate state with the request applied
    4. Run safety algorithm on the candidate
    5. If safe: return Granted with the candidate
       If unsafe: return Unsafe with the original state

    Args:
        state: Current allocation state
        pid: Process making the request
        request: Units requested per resource class [R]

    Returns:
        Tuple of (outcome, resulting state). The resulting state is the
        candidate only when the outcome is Granted; otherwise it is `state`.

    Raises:
        InvalidRequestError: If the request is malformed
    """
    requested = validate_request(state, pid, request)

    # Step 1: Request must not exceed remaining need
    for j, amount in enumerate(requested):
        need = int(state.need[pid][j])
        if amount > need:
            return ExceedsNeed(
                pid=pid,
                request=requested,
                resource_type=j,
                requested=amount,
                need=need
            ), state

    # Step 2: Resources must be free right now
    for j, amount in enumerate(requested):
        available = int(state.available[j])
        if amount > available:
            return NotAvailable(
                pid=pid,
                request=requested,
                resource_type=j,
                requested=amount,
                available=available
            ), state

    # Step 3-4: Tentative allocation on a fresh candidate
    # Every amount is now <= Need, so it fits in int64
    candidate = state.with_request(pid, np.array(requested, dtype=np.int64))
    is_safe, safe_seq = is_safe_state(candidate)

    # Step 5: Commit by returning the candidate, roll back by returning the original
    if is_safe:
        return Granted(pid=pid, request=requested, order=tuple(safe_seq)), candidate

    return Unsafe(pid=pid, request=requested), state
