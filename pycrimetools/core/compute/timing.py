"""
Wall-clock timing for solver backends.

A Timer wraps one solve. Named sections inside it accumulate, so a section
entered once per chunk reports the time summed over all chunks. When the
backend runs on a CUDA device the timer synchronizes before every reading;
otherwise queued kernels would be billed to whichever section happens to
block first.

    with Timer() as timer:
        with timer.section('observed'):
            observed = score(counts[np.newaxis, :])
        for chunk in space.chunks(65536):
            with timer.section('enumerate_score'):
                accumulator.add(*score(chunk))

    timer.result()
    # {'total_seconds': 0.41, 'observed': 0.001, 'enumerate_score': 0.4}
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Iterator


class Timer:
    """
    Total elapsed time plus named sections.

    Args:
        sync_cuda: Call torch.cuda.synchronize() before each clock reading.
    """

    def __init__(self, sync_cuda: bool = False):
        self._sync_cuda = sync_cuda
        self._sections: dict[str, float] = {}
        self._started: float | None = None
        self._total: float | None = None

    def _now(self) -> float:
        if self._sync_cuda:
            import torch
            if torch.cuda.is_available():
                torch.cuda.synchronize()
        return time.perf_counter()

    def start(self) -> None:
        self._started = self._now()
        self._total = None

    def stop(self) -> None:
        if self._started is None:
            raise RuntimeError("Timer.stop() called before start()")
        self._total = self._now() - self._started

    def __enter__(self) -> Timer:
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        """Add the time spent in the block to section ``name``."""
        begin = self._now()
        try:
            yield
        finally:
            spent = self._now() - begin
            self._sections[name] = self._sections.get(name, 0.0) + spent

    def result(self) -> dict[str, float]:
        """
        Timings in seconds: 'total_seconds' plus one key per section.

        Raises:
            RuntimeError: If the timer has not been stopped
        """
        if self._total is None:
            raise RuntimeError("Timer.result() called before stop()")
        return {'total_seconds': self._total, **self._sections}
