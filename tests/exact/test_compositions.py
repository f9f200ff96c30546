"""
Tests for the composition enumerator behind the exact test.

Validates:
    - Support size equals C(N + k - 1, k - 1)
    - Lexicographic ascending order
    - Every composition appears exactly once and sums to N
    - Degenerate shapes (k = 1, N = 0)
    - Invalid shapes raise InvalidDimensionError
    - CompositionSpace is restartable, chunkable and size-guarded
"""

import math

import numpy as np
import pytest

from pycrimetools.core.exceptions import (
    DimensionError,
    InvalidDimensionError,
    ResourceExceededError,
)
from pycrimetools.exact import CompositionSpace, iter_compositions, n_compositions


class TestSupportSize:
    """Stars and bars."""

    @pytest.mark.parametrize("total,n_bins", [(0, 1), (0, 4), (1, 1), (5, 2), (4, 3), (6, 5)])
    def test_count_matches_formula(self, total, n_bins):
        comps = list(iter_compositions(total, n_bins))
        assert len(comps) == math.comb(total + n_bins - 1, n_bins - 1)
        assert len(comps) == n_compositions(total, n_bins)

    def test_benford_support(self):
        assert n_compositions(12, 9) == 125970

    def test_huge_support_is_exact(self):
        """Computed analytically, no enumeration."""
        assert n_compositions(100, 20) == math.comb(119, 19)


class TestOrdering:

    def test_two_bins(self):
        assert list(iter_compositions(5, 2)) == [
            (0, 5), (1, 4), (2, 3), (3, 2), (4, 1), (5, 0),
        ]

    def test_three_bins(self):
        assert list(iter_compositions(2, 3)) == [
            (0, 0, 2), (0, 1, 1), (0, 2, 0), (1, 0, 1), (1, 1, 0), (2, 0, 0),
        ]

    def test_lexicographic_ascending(self):
        comps = list(iter_compositions(4, 4))
        assert comps == sorted(comps)

    def test_unique_and_valid(self):
        comps = list(iter_compositions(5, 4))
        assert len(set(comps)) == len(comps)
        for c in comps:
            assert len(c) == 4
            assert sum(c) == 5
            assert min(c) >= 0


class TestDegenerateShapes:

    def test_single_bin(self):
        assert list(iter_compositions(7, 1)) == [(7,)]

    def test_zero_total(self):
        assert list(iter_compositions(0, 3)) == [(0, 0, 0)]


class TestInvalidShapes:

    def test_negative_total(self):
        with pytest.raises(InvalidDimensionError) as exc_info:
            iter_compositions(-1, 3)
        assert exc_info.value.total == -1
        assert exc_info.value.n_bins == 3

    def test_zero_bins(self):
        with pytest.raises(InvalidDimensionError):
            n_compositions(3, 0)

    def test_validated_eagerly(self):
        """The error comes from the call, not from the first next()."""
        with pytest.raises(InvalidDimensionError):
            iter_compositions(2, -1)

    def test_non_integer(self):
        with pytest.raises(InvalidDimensionError):
            CompositionSpace(2.5, 3)

    def test_is_dimension_error(self):
        with pytest.raises(DimensionError):
            CompositionSpace(1, 0)


class TestCompositionSpace:

    def test_size_and_len(self):
        space = CompositionSpace(12, 9)
        assert space.size == 125970
        assert len(space) == 125970
        assert space.total == 12
        assert space.n_bins == 9

    def test_restartable(self):
        space = CompositionSpace(3, 3)
        assert list(space) == list(space)

    def test_contains(self):
        space = CompositionSpace(3, 3)
        assert (1, 1, 1) in space
        assert (3, 0, 0) in space
        assert (1, 1, 0) not in space
        assert (1, 1) not in space
        assert (4, -1, 0) not in space
        assert "abc" not in space

    def test_chunks_cover_support_in_order(self):
        space = CompositionSpace(4, 3)
        blocks = list(space.chunks(4))
        assert all(b.dtype == np.int64 for b in blocks)
        assert [b.shape[0] for b in blocks] == [4, 4, 4, 3]
        stacked = np.vstack(blocks)
        np.testing.assert_array_equal(stacked, np.array(list(space)))

    def test_chunks_rejects_bad_size(self):
        with pytest.raises(ValueError, match="chunk_size"):
            next(CompositionSpace(2, 2).chunks(0))

    def test_materialize(self):
        arr = CompositionSpace(5, 2).materialize(safety_threshold=10)
        assert arr.shape == (6, 2)
        np.testing.assert_array_equal(arr.sum(axis=1), 5)

    def test_materialize_over_threshold(self):
        space = CompositionSpace(100, 20)
        with pytest.raises(ResourceExceededError) as exc_info:
            space.materialize(safety_threshold=1_000_000)
        assert exc_info.value.support_size == math.comb(119, 19)
        assert exc_info.value.threshold == 1_000_000

    def test_threshold_boundary(self):
        """Size equal to the threshold is allowed."""
        space = CompositionSpace(5, 2)
        space.check_materializable(6)
        with pytest.raises(ResourceExceededError):
            space.check_materializable(5)

    def test_repr(self):
        assert repr(CompositionSpace(5, 2)) == "CompositionSpace(total=5, n_bins=2, size=6)"
