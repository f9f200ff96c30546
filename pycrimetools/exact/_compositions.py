"""
Enumeration of weak compositions: every way to place N indistinguishable
events into k labelled bins.

The support of a multinomial count vector with total N over k cells is
exactly this set, of size C(N + k - 1, k - 1) ("stars and bars").
Enumeration is iterative and lexicographic ascending, so

    N=5, k=2  ->  (0, 5), (1, 4), (2, 3), (3, 2), (4, 1), (5, 0)

The successor of a composition c is found by taking the rightmost
non-zero position j >= 1, adding one to position j - 1, and moving the
remaining c[j] - 1 events to the last bin. This needs O(k) state and no
recursion, so the space can be streamed regardless of its size.
"""

from __future__ import annotations

import math
import operator
from itertools import islice
from typing import Iterator

import numpy as np
from numpy.typing import NDArray

from pycrimetools.core.exceptions import InvalidDimensionError, ResourceExceededError


def _check_dimension(total: int, n_bins: int) -> tuple[int, int]:
    try:
        total = operator.index(total)
        n_bins = operator.index(n_bins)
    except TypeError as e:
        raise InvalidDimensionError(
            f"total and n_bins must be integers, got total={total!r}, "
            f"n_bins={n_bins!r}",
            total=None, n_bins=None,
        ) from e
    if total < 0:
        raise InvalidDimensionError(
            f"total must be >= 0, got {total}", total=total, n_bins=n_bins,
        )
    if n_bins < 1:
        raise InvalidDimensionError(
            f"n_bins must be >= 1, got {n_bins}", total=total, n_bins=n_bins,
        )
    return total, n_bins


def n_compositions(total: int, n_bins: int) -> int:
    """
    Number of compositions of ``total`` into ``n_bins`` non-negative parts.

    Exact (arbitrary precision), so it is safe to call for problem sizes
    that could never be enumerated.

    >>> n_compositions(12, 9)
    125970
    """
    total, n_bins = _check_dimension(total, n_bins)
    return math.comb(total + n_bins - 1, n_bins - 1)


def _generate(total: int, n_bins: int) -> Iterator[tuple[int, ...]]:
    current = [0] * n_bins
    current[-1] = total
    last = n_bins - 1
    while True:
        yield tuple(current)
        j = last
        while j > 0 and current[j] == 0:
            j -= 1
        if j == 0:
            return
        moved = current[j]
        current[j] = 0
        current[j - 1] += 1
        current[last] = moved - 1


def iter_compositions(total: int, n_bins: int) -> Iterator[tuple[int, ...]]:
    """
    Lazily yield every composition of ``total`` into ``n_bins`` parts.

    Arguments are validated when this function is called, not when the
    first item is requested.

    Raises:
        InvalidDimensionError: If total < 0 or n_bins < 1
    """
    total, n_bins = _check_dimension(total, n_bins)
    return _generate(total, n_bins)


class CompositionSpace:
    """
    The full support set for a (total, n_bins) problem.

    A finite, restartable lazy sequence: every ``iter()`` starts a fresh
    enumeration, and nothing is held in memory until ``chunks()`` or
    ``materialize()`` is asked for it.

    Parameters
    ----------
    total : int
        Number of events N (>= 0).
    n_bins : int
        Number of bins k (>= 1).
    """

    def __init__(self, total: int, n_bins: int):
        self._total, self._n_bins = _check_dimension(total, n_bins)
        self._size = math.comb(self._total + self._n_bins - 1, self._n_bins - 1)

    @property
    def total(self) -> int:
        return self._total

    @property
    def n_bins(self) -> int:
        return self._n_bins

    @property
    def size(self) -> int:
        """Exact number of compositions, C(N + k - 1, k - 1)."""
        return self._size

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[tuple[int, ...]]:
        return _generate(self._total, self._n_bins)

    def __contains__(self, item: object) -> bool:
        try:
            values = [operator.index(v) for v in item]  # type: ignore[union-attr]
        except TypeError:
            return False
        return (
            len(values) == self._n_bins
            and all(v >= 0 for v in values)
            and sum(values) == self._total
        )

    def __repr__(self) -> str:
        return (
            f"CompositionSpace(total={self._total}, n_bins={self._n_bins}, "
            f"size={self._size})"
        )

    def chunks(self, chunk_size: int) -> Iterator[NDArray[np.int64]]:
        """
        Yield the support in enumeration order as int64 arrays.

        Each array has shape (m, n_bins) with m <= chunk_size; only the
        current chunk is alive at any time.
        """
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be >= 1, got {chunk_size}")
        it = iter(self)
        while True:
            block = list(islice(it, chunk_size))
            if not block:
                return
            yield np.array(block, dtype=np.int64).reshape(len(block), self._n_bins)

    def check_materializable(self, safety_threshold: int) -> None:
        """
        Refuse to materialize a support larger than ``safety_threshold``.

        Raises:
            ResourceExceededError: If size > safety_threshold
        """
        if self._size > safety_threshold:
            raise ResourceExceededError(
                f"support set for N={self._total}, k={self._n_bins} has "
                f"{self._size} compositions, exceeding the safety threshold "
                f"of {safety_threshold}; reduce the problem or use streaming=True",
                support_size=self._size,
                threshold=safety_threshold,
            )

    def materialize(self, safety_threshold: int) -> NDArray[np.int64]:
        """
        Return the whole support as one (size, n_bins) int64 array.

        Rows are filled one composition at a time from the Python
        generator, which is fast enough up to the default safety threshold.

        Raises:
            ResourceExceededError: If size > safety_threshold (checked first)
        """
        self.check_materializable(safety_threshold)
        out = np.empty((self._size, self._n_bins), dtype=np.int64)
        for i, comp in enumerate(self):
            out[i] = comp
        return out
