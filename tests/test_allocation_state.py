"""
Allocation State Tests

Tests construction, validation and invariants of the AllocationState model.
"""

import sys
from pathlib import Path

import numpy as np

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from models.allocation_state import AllocationState, ConstructionError
from algorithms.engine import (
    CANONICAL_AVAILABLE, CANONICAL_MAXIMUM, CANONICAL_ALLOCATION
)


def _canonical_state() -> AllocationState:
    return AllocationState.build(
        5, 3, CANONICAL_AVAILABLE, CANONICAL_MAXIMUM, CANONICAL_ALLOCATION
    )


def _expect_construction_error(*args) -> str:
    try:
        AllocationState.build(*args)
    except ConstructionError as e:
        return str(e)
    assert False, f"Should have raised ConstructionError for {args}"


def test_build_canonical_state():
    """Matrices are built and Need = Max - Allocation."""
    state = _canonical_state()

    assert state.num_processes == 5
    assert state.num_resources == 3
    assert state.allocation.shape == (5, 3)
    assert state.available.tolist() == [3, 3, 2]
    assert state.need.tolist() == [
        [7, 4, 3],
        [1, 2, 2],
        [6, 0, 0],
        [0, 1, 1],
        [4, 3, 1]
    ]
    # Total supply: available + column sums of allocation
    assert state.total.tolist() == [10, 5, 7]


def test_state_arrays_are_read_only():
    """Snapshots cannot be mutated through their arrays."""
    state = _canonical_state()

    for array in (state.available, state.maximum, state.allocation, state.need):
        try:
            array[0] = 99
        except ValueError:
            pass
        else:
            assert False, "Snapshot arrays must be read-only"

        try:
            array.setflags(write=True)
        except ValueError:
            pass
        else:
            assert False, "Snapshot arrays must not be re-enabled for writing"

    assert state == _canonical_state()


def test_copy_is_detached():
    """Forcing a copy's buffer writable does not reach the original."""
    state = _canonical_state()
    duplicate = state.copy()

    assert duplicate == state
    assert duplicate.available is not state.available

    buffer = duplicate.available.base
    buffer.setflags(write=True)
    buffer[0] = 99

    assert state.available.tolist() == [3, 3, 2]


def test_build_copies_inputs():
    """Mutating the caller's lists after construction does not affect the state."""
    available = [3, 3, 2]
    allocation = [row[:] for row in CANONICAL_ALLOCATION]
    state = AllocationState.build(5, 3, available, CANONICAL_MAXIMUM, allocation)

    available[0] = 100
    allocation[0][0] = 7

    assert state.available[0] == 3
    assert state.allocation[0][0] == 0


def test_dimension_mismatch_rejected():
    """Shapes inconsistent with n, m fail construction."""
    _expect_construction_error(5, 3, [3, 3], CANONICAL_MAXIMUM, CANONICAL_ALLOCATION)
    _expect_construction_error(4, 3, CANONICAL_AVAILABLE, CANONICAL_MAXIMUM, CANONICAL_ALLOCATION)
    _expect_construction_error(5, 3, CANONICAL_AVAILABLE, CANONICAL_MAXIMUM, CANONICAL_ALLOCATION[:4])

    ragged = [row[:] for row in CANONICAL_MAXIMUM]
    ragged[2] = [9, 0]
    message = _expect_construction_error(5, 3, CANONICAL_AVAILABLE, ragged, CANONICAL_ALLOCATION)
    assert "maximum" in message


def test_invalid_dimensions_rejected():
    """n and m must be positive integers."""
    _expect_construction_error(0, 3, [1, 1, 1], [], [])
    _expect_construction_error(1, 0, [], [[]], [[]])
    _expect_construction_error(-1, 1, [1], [[1]], [[0]])
    _expect_construction_error(1.5, 1, [1], [[1]], [[0]])
    _expect_construction_error(True, 1, [1], [[1]], [[0]])


def test_negative_and_non_integer_entries_rejected():
    """Entries must be non-negative integers."""
    _expect_construction_error(1, 2, [-1, 0], [[1, 1]], [[0, 0]])
    _expect_construction_error(1, 2, [1, 0], [[1, 1]], [[-1, 0]])
    _expect_construction_error(1, 2, [1.5, 0], [[1, 1]], [[0, 0]])
    _expect_construction_error(1, 2, ["1", "0"], [[1, 1]], [[0, 0]])


def test_entries_beyond_int64_rejected():
    """Values that do not fit a signed 64-bit integer are refused, not wrapped."""
    message = _expect_construction_error(1, 1, [2**63], [[1]], [[0]])
    assert "available" in message.lower()

    _expect_construction_error(1, 1, [0], [[2**70]], [[0]])
    _expect_construction_error(1, 1, [0], [[2**63]], [[2**63]])

    # Each entry fits, but Available + column sum does not
    message = _expect_construction_error(
        2, 1, [2**63 - 1], [[1], [1]], [[1], [0]]
    )
    assert "R0" in message

    edge = AllocationState.build(1, 1, [2**63 - 2], [[1]], [[1]])
    assert edge.total.tolist() == [2**63 - 1]


def test_allocation_above_maximum_rejected():
    """Initial allocation may not exceed declared maximum."""
    allocation = [row[:] for row in CANONICAL_ALLOCATION]
    allocation[3] = [3, 1, 1]  # Max[3] = [2, 2, 2]

    message = _expect_construction_error(
        5, 3, CANONICAL_AVAILABLE, CANONICAL_MAXIMUM, allocation
    )
    assert "P3" in message


def test_with_request_leaves_original_untouched():
    """The candidate state is a fresh object; the receiver keeps its values."""
    state = _canonical_state()
    before = state.to_dict()

    candidate = state.with_request(1, np.array([1, 0, 2]))

    assert state.to_dict() == before
    assert candidate.available.tolist() == [2, 3, 0]
    assert candidate.allocation[1].tolist() == [3, 0, 2]
    assert candidate.need[1].tolist() == [0, 2, 0]
    assert candidate.maximum is state.maximum
    assert candidate.total.tolist() == state.total.tolist()


def test_equality_compares_all_matrices():
    """Two snapshots with the same contents compare equal."""
    first = _canonical_state()
    second = _canonical_state()

    assert first == second
    assert first.same_as(second)
    assert first != first.with_request(3, np.array([0, 1, 0]))


def test_resource_conservation_check():
    """The conservation check catches mismatched totals."""
    state = _canonical_state()
    state.assert_resource_conservation(state.total, "canonical")

    try:
        state.assert_resource_conservation(np.array([10, 5, 8]), "wrong total")
    except AssertionError as e:
        assert "R2" in str(e)
    else:
        assert False, "Should have detected conservation violation"


def main():
    """Run all allocation state tests."""
    tests = [
        test_build_canonical_state,
        test_state_arrays_are_read_only,
        test_copy_is_detached,
        test_build_copies_inputs,
        test_dimension_mismatch_rejected,
        test_invalid_dimensions_rejected,
        test_negative_and_non_integer_entries_rejected,
        test_entries_beyond_int64_rejected,
        test_allocation_above_maximum_rejected,
        test_with_request_leaves_original_untouched,
        test_equality_compares_all_matrices,
        test_resource_conservation_check,
    ]

    for test in tests:
        test()
        print(f"  ✓ {test.__name__}")

    print("\n✅ Allocation State Tests PASSED")
    return 0


if __name__ == '__main__':
    sys.exit(main())
