"""
GPU backend for the small-sample exact test.

Enumeration stays on the host; each chunk of compositions is copied to
the device, scored there (statistic and multinomial log-probability), and
copied back for the shared reduction. CUDA runs in float64 and matches the
CPU reference. Apple MPS has no float64, so it runs in float32 and the tie
tolerance is widened to the float32 tier.
"""

from __future__ import annotations

import warnings

import numpy as np

from pycrimetools.core.result import Result
from pycrimetools.core.compute.device import require_gpu
from pycrimetools.core.compute.timing import Timer
from pycrimetools.core.compute.tolerances import select_tolerance
from pycrimetools.exact._common import SmallSampleParams, StatisticKind
from pycrimetools.exact._reduce import TailAccumulator
from pycrimetools.exact.design import ExactTestDesign


class GPUExactBackend:
    """
    GPU backend for exact tests.

    Parameters
    ----------
    device : str
        'auto' picks CUDA, then MPS. Anything else is passed to
        torch.device() as-is.
    """

    def __init__(self, device: str = 'auto'):
        import torch

        self._torch = torch

        if device == 'auto':
            info = require_gpu()
            self._device = torch.device(info.torch_device)
            fp64 = info.supports_fp64
        else:
            self._device = torch.device(device)
            fp64 = self._device.type != 'mps'

        self._warnings: tuple[str, ...] = ()
        if not fp64:
            msg = "MPS device has no float64 support; scoring in float32"
            warnings.warn(msg, RuntimeWarning, stacklevel=2)
            self._warnings = (msg,)
        self._dtype = torch.float64 if fp64 else torch.float32

    @property
    def name(self) -> str:
        precision = 'fp64' if self._dtype == self._torch.float64 else 'fp32'
        return f'gpu_{self._device.type}_{precision}_exact'

    def _score(self, block, expected, log_p, log_n_factorial, kind, total):
        torch = self._torch
        c = torch.as_tensor(block, device=self._device).to(self._dtype)

        if total == 0:
            stats = torch.zeros(c.shape[0], dtype=self._dtype, device=self._device)
        elif kind is StatisticKind.CHI_SQUARE:
            diff = c - expected
            stats = torch.sum(diff * diff / expected, dim=1)
        else:
            stats = 2.0 * torch.sum(torch.xlogy(c, c / expected), dim=1)

        log_probs = (
            log_n_factorial
            - torch.sum(torch.lgamma(c + 1.0), dim=1)
            + torch.sum(c * log_p, dim=1)
        )
        return (
            stats.cpu().numpy().astype(np.float64),
            log_probs.cpu().numpy().astype(np.float64),
        )

    def solve(self, design: ExactTestDesign) -> Result[SmallSampleParams]:
        torch = self._torch
        timer = Timer(sync_cuda=self._device.type == 'cuda')
        timer.start()

        total = design.total
        kind = design.statistic_kind
        p = torch.as_tensor(design.null_probs, dtype=self._dtype, device=self._device)
        expected = total * p
        log_p = torch.log(p)
        log_n_factorial = float(torch.lgamma(torch.tensor(total + 1.0, dtype=torch.float64)))

        tier = select_tolerance(self.name)
        tie_tolerance = max(design.tie_tolerance, tier.rtol)

        with timer.section('observed'):
            observed_stats, _ = self._score(
                design.counts[np.newaxis, :], expected, log_p,
                log_n_factorial, kind, total,
            )
            observed_stat = float(observed_stats[0])

        acc = TailAccumulator(
            observed_stat,
            tie_tolerance,
            keep_arrays=not design.streaming,
            cdf=design.cdf,
        )

        with timer.section('enumerate_score'):
            if design.streaming:
                blocks = design.support.chunks(design.chunk_size)
            else:
                blocks = iter([design.support.materialize(design.safety_threshold)])
            for block in blocks:
                acc.add(*self._score(block, expected, log_p, log_n_factorial, kind, total))

        reduction = acc.finish()
        timer.stop()

        params = SmallSampleParams(
            statistic=observed_stat,
            statistic_kind=kind,
            p_value=reduction.p_value,
            counts=design.counts,
            null_probs=design.null_probs,
            total=total,
            total_permutations=design.support_size,
            total_probability=reduction.total_probability,
            tie_tolerance=tie_tolerance,
            streaming=design.streaming,
            cdf=reduction.cdf,
            stats=reduction.stats,
            probabilities=reduction.probabilities,
        )

        return Result(
            params=params,
            info={
                'N': total,
                'k': design.n_bins,
                'support_size': design.support_size,
                'n_evaluated': reduction.n_evaluated,
                'n_chunks': reduction.n_chunks,
                'streaming': design.streaming,
                'device': str(self._device),
            },
            timing=timer.result(),
            backend_name=self.name,
            warnings=self._warnings,
        )
