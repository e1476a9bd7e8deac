"""
Allocation State model for the Banker's Algorithm Allocator.

Holds the Available vector and the Maximum/Allocation/Need matrices
required by the safety algorithm. A state is an immutable value: a
committed request produces a new state instead of editing this one.
"""

import numpy as np
from typing import Dict, List, Optional, Sequence
from dataclasses import dataclass


INT64_MAX = int(np.iinfo(np.int64).max)


class ConstructionError(Exception):
    """Exception raised when an allocation state cannot be built from its inputs."""
    pass


def has_integer_entries(array: np.ndarray) -> bool:
    """
    True if every entry is an integer (bools excluded).

    Python ints too wide for int64 land in uint64 or object arrays, so those
    are accepted here and range-checked by the caller.
    """
    if array.dtype == object:
        return all(
            isinstance(x, (int, np.integer)) and not isinstance(x, (bool, np.bool_))
            for x in array.flat
        )
    return array.dtype != bool and np.issubdtype(array.dtype, np.integer)


def _as_int_array(values, shape: tuple, name: str) -> np.ndarray:
    """
    Convert input to a read-only int64 numpy array of the given shape.

    Raises:
        ConstructionError: If values are ragged, non-integer, negative,
            too large for int64 or mis-shaped
    """
    try:
        array = np.array(values)
    except ValueError as e:
        raise ConstructionError(f"{name}: ragged or malformed input ({e})")

    if array.size == 0 and np.prod(shape) != 0:
        raise ConstructionError(f"{name}: expected shape {shape}, got empty input")

    if array.shape != shape:
        raise ConstructionError(
            f"{name}: shape {array.shape} does not match expected {shape}"
        )

    if not has_integer_entries(array):
        raise ConstructionError(f"{name}: entries must be integers (got dtype {array.dtype})")

    entries = [int(x) for x in array.flat]
    if any(x < 0 for x in entries):
        raise ConstructionError(f"{name}: entries must be non-negative")
    if any(x > INT64_MAX for x in entries):
        raise ConstructionError(f"{name}: entries must not exceed {INT64_MAX}")

    return _freeze(np.array(entries, dtype=np.int64).reshape(shape))


def _freeze(array: np.ndarray) -> np.ndarray:
    """Read-only view over a read-only base, so the view cannot be made writable again."""
    base = np.ascontiguousarray(array).copy()
    base.setflags(write=False)
    return base.view()


@dataclass(frozen=True, eq=False)
class AllocationState:
    """
    Snapshot of resource allocation for n processes and m resource classes.

    Attributes:
        available: [R] Units of each resource class currently unallocated
        maximum: [P][R] Declared maximum demand of each process
        allocation: [P][R] Units currently held by each process
        need: [P][R] Computed as Maximum - Allocation

    Invariants:
        0 <= allocation[i][j] <= maximum[i][j]
        available[j] >= 0
        available[j] + sum(allocation[:, j]) == total[j]
    """
    available: np.ndarray
    maximum: np.ndarray
    allocation: np.ndarray
    need: np.ndarray

    @classmethod
    def build(
        cls,
        num_processes: int,
        num_resources: int,
        available: Sequence[int],
        maximum: Sequence[Sequence[int]],
        allocation: Sequence[Sequence[int]]
    ) -> "AllocationState":
        """
        Validate inputs and build the initial state.

        Args:
            num_processes: Number of processes (n > 0)
            num_resources: Number of resource classes (m > 0)
            available: [R] Unallocated units per resource class
            maximum: [P][R] Maximum demand matrix
            allocation: [P][R] Current allocation matrix

        Returns:
            A fully validated AllocationState

        Raises:
            ConstructionError: On any dimension mismatch, negative entry,
                or allocation exceeding declared maximum
        """
        for label, value in (("num_processes", num_processes), ("num_resources", num_resources)):
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise ConstructionError(f"{label} must be an integer, got {value!r}")
            if value <= 0:
                raise ConstructionError(f"{label} must be positive, got {value}")

        n, m = int(num_processes), int(num_resources)
        available_vector = _as_int_array(available, (m,), "available")
        maximum_matrix = _as_int_array(maximum, (n, m), "maximum")
        allocation_matrix = _as_int_array(allocation, (n, m), "allocation")

        over = np.argwhere(allocation_matrix > maximum_matrix)
        if len(over) > 0:
            i, j = (int(x) for x in over[0])
            raise ConstructionError(
                f"P{i}: allocation[{j}] ({allocation_matrix[i][j]}) "
                f"exceeds maximum[{j}] ({maximum_matrix[i][j]})"
            )

        # Work in the safety check grows up to the total supply
        for j in range(m):
            supply = int(available_vector[j]) + sum(int(x) for x in allocation_matrix[:, j])
            if supply > INT64_MAX:
                raise ConstructionError(
                    f"R{j}: total supply ({supply}) exceeds {INT64_MAX}"
                )

        return cls(
            available=available_vector,
            maximum=maximum_matrix,
            allocation=allocation_matrix,
            need=_freeze(maximum_matrix - allocation_matrix)
        )

    @property
    def num_processes(self) -> int:
        """Number of processes in the system."""
        return self.maximum.shape[0]

    @property
    def num_resources(self) -> int:
        """Number of resource classes in the system."""
        return self.maximum.shape[1]

    @property
    def total(self) -> np.ndarray:
        """Total supply per resource class (available + allocated)."""
        return _freeze(self.available + self.allocation.sum(axis=0))

    def with_request(self, pid: int, request: np.ndarray) -> "AllocationState":
        """
        Build the candidate state in which `request` has been handed to `pid`.

        The receiver is left untouched; callers must have checked that the
        request fits both Need[pid] and Available.
        """
        available = self.available - request
        allocation = self.allocation.copy()
        allocation[pid] += request

        return AllocationState(
            available=_freeze(available),
            maximum=self.maximum,
            allocation=_freeze(allocation),
            need=_freeze(self.maximum - allocation)
        )

    def copy(self) -> "AllocationState":
        """Detached copy; nothing done to it can reach the receiver."""
        return AllocationState(
            available=_freeze(self.available),
            maximum=_freeze(self.maximum),
            allocation=_freeze(self.allocation),
            need=_freeze(self.need)
        )

    def same_as(self, other: "AllocationState") -> bool:
        """Full comparison of every vector and matrix in both snapshots."""
        return (
            np.array_equal(self.available, other.available)
            and np.array_equal(self.maximum, other.maximum)
            and np.array_equal(self.allocation, other.allocation)
            and np.array_equal(self.need, other.need)
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, AllocationState):
            return NotImplemented
        return self.same_as(other)

    __hash__ = None

    def to_dict(self) -> Dict[str, List]:
        """Plain-list copy of the state for presentation or serialization."""
        return {
            'available': self.available.tolist(),
            'maximum': self.maximum.tolist(),
            'allocation': self.allocation.tolist(),
            'need': self.need.tolist()
        }

    def assert_resource_conservation(self, total: Optional[np.ndarray] = None, context: str = "") -> None:
        """Verify the allocation invariants, and conservation against `total` when given.

        Args:
            total: Expected total supply per resource class
            context: Description of when this check is being run (for error messages)

        Raises:
            AssertionError: If any invariant is violated
        """
        assert np.all(self.allocation >= 0), f"Negative allocation {context}"
        assert np.all(self.allocation <= self.maximum), (
            f"Allocation exceeds maximum {context}\n"
            f"  Allocation: {self.allocation.tolist()}\n"
            f"  Maximum: {self.maximum.tolist()}"
        )
        assert np.array_equal(self.need, self.maximum - self.allocation), (
            f"Need out of sync with Maximum - Allocation {context}"
        )
        assert np.all(self.available >= 0), (
            f"Negative available resources {context}\n"
            f"  Available: {self.available.tolist()}"
        )

        if total is None:
            return

        for r_idx in range(self.num_resources):
            allocated = int(self.allocation[:, r_idx].sum())
            available = int(self.available[r_idx])
            expected = int(total[r_idx])

            assert allocated + available == expected, (
                f"Resource conservation violated for R{r_idx} {context}\n"
                f"  Allocated: {allocated}, Available: {available}, Total: {expected}\n"
                f"  Allocated + Available = {allocated + available} != {expected}"
            )
