"""
Numerical tolerances and engine defaults.

Two kinds of constants live here:

- Tolerance tiers for comparing results across compute paths
  (CPU float64 reference, GPU float64, GPU float32 / Apple MPS).
- Per-call defaults for the exact test engine. None of these are global
  state: every solver accepts them as explicit keyword arguments and only
  falls back to the values below when the caller passes nothing.

Used by the validators, the exact-test backends and the test suite.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


# CPU reference: float64 log-space arithmetic
CPU_FP64 = ToleranceTier(
    rtol=1e-10,
    atol=1e-12,
    name='cpu_fp64',
    description='CPU double precision reference',
)

# GPU with FP64 (CUDA devices)
GPU_FP64 = ToleranceTier(
    rtol=1e-10,
    atol=1e-12,
    name='gpu_fp64',
    description='GPU double precision, matches CPU reference',
)

# GPU with FP32 (Apple MPS has no float64)
GPU_FP32 = ToleranceTier(
    rtol=1e-5,
    atol=1e-6,
    name='gpu_fp32',
    description='GPU single precision, statistically equivalent',
)


def select_tolerance(backend_name: str) -> ToleranceTier:
    """Select the tolerance tier for a given backend name."""
    if 'gpu' in backend_name:
        if 'fp64' in backend_name:
            return GPU_FP64
        return GPU_FP32
    return CPU_FP64


# --- Exact test engine defaults ---

# Null probabilities must sum to one within this absolute tolerance.
PROBABILITY_SUM_TOLERANCE = 1e-6

# A support statistic counts as "at least as extreme" when
# stat >= observed - TIE_TOLERANCE * max(1, |observed|).
TIE_TOLERANCE = 1e-10

# Largest support set the engine will hold in memory at once.
# At k = 9 bins this is roughly 72 MB of int64 compositions.
DEFAULT_SAFETY_THRESHOLD = 1_000_000

# Rows per chunk in streaming mode.
DEFAULT_CHUNK_SIZE = 65_536

# Statistic values are grouped at this many decimals for the null CDF table.
CDF_DECIMALS = 8
