"""
Allocator Engine for the Banker's Algorithm Allocator.

Owns the current AllocationState and exposes the safety check and
request evaluation to callers (CLI, tests, services).
"""

import threading
from typing import List, Optional, Sequence, Tuple

from models.allocation_state import AllocationState
from models.outcome import RequestOutcome
from algorithms.avoidance import is_safe_state, evaluate_request


# Canonical 5-process / 3-resource-class example
CANONICAL_AVAILABLE = [3, 3, 2]
CANONICAL_MAXIMUM = [
    [7, 5, 3],
    [3, 2, 2],
    [9, 0, 2],
    [2, 2, 2],
    [4, 3, 3]
]
CANONICAL_ALLOCATION = [
    [0, 1, 0],
    [2, 0, 0],
    [3, 0, 2],
    [2, 1, 1],
    [0, 0, 2]
]


class AllocatorEngine:
    """
    Deadlock-avoidance allocator for a fixed set of processes and resource classes.

    Every public operation sees one consistent snapshot. A granted request
    swaps in a new snapshot; any other outcome leaves the current one in place.
    Calls are serialized through an internal lock.
    """

    def __init__(
        self,
        num_processes: int,
        num_resources: int,
        available: Sequence[int],
        maximum: Sequence[Sequence[int]],
        allocation: Sequence[Sequence[int]]
    ):
        """
        Build the engine from its initial state.

        Raises:
            ConstructionError: If the inputs are inconsistent (no engine is created)
        """
        self._state = AllocationState.build(
            num_processes, num_resources, available, maximum, allocation
        )
        self._total = self._state.total
        self._lock = threading.Lock()

    @classmethod
    def canonical(cls) -> "AllocatorEngine":
        """Engine initialized with the classic textbook 5x3 scenario."""
        return cls(5, 3, CANONICAL_AVAILABLE, CANONICAL_MAXIMUM, CANONICAL_ALLOCATION)

    @property
    def num_processes(self) -> int:
        """Number of processes (n)."""
        return self._state.num_processes

    @property
    def num_resources(self) -> int:
        """Number of resource classes (m)."""
        return self._state.num_resources

    @property
    def total(self) -> List[int]:
        """Total supply per resource class, fixed at construction."""
        return self._total.tolist()

    def snapshot(self) -> AllocationState:
        """Read-only copy of the current state, detached from the engine."""
        with self._lock:
            return self._state.copy()

    def safety_check(self) -> Tuple[bool, Optional[List[int]]]:
        """
        Check whether the current state is safe.

        Returns:
            Tuple of (is_safe, safe_sequence if safe else None)
        """
        with self._lock:
            state = self._state
        return is_safe_state(state)

    def request(self, pid: int, request: Sequence[int]) -> RequestOutcome:
        """
        Try to grant `request` to process `pid`.

        Returns:
            Granted (state committed) or ExceedsNeed / NotAvailable / Unsafe
            (state unchanged)

        Raises:
            InvalidRequestError: If pid or request is malformed
        """
        with self._lock:
            outcome, new_state = evaluate_request(self._state, pid, request)

            if outcome.granted:
                # SANITY CHECK: Verify resource conservation before commit
                new_state.assert_resource_conservation(
                    self._total, f"after granting {list(outcome.request)} to P{pid}"
                )
                self._state = new_state

            return outcome
