"""
Result envelope shared by every solver in pycrimetools.

A domain computes its numbers into a frozen payload dataclass (for example
SmallSampleParams or PoissonFitParams) and hands it back wrapped in
Result[P], together with what the shared tooling needs: which backend ran,
how long each stage took, and anything worth telling the caller that was
not bad enough to raise.

Nothing here knows about a specific test; Solution classes in each
subpackage read the envelope and present it.
"""

from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

P = TypeVar('P')


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable output of one solver call.

    Attributes:
        params: Domain payload
        info: Run metadata, e.g. {'support_size': 125970, 'n_chunks': 1,
            'streaming': False}
        timing: Timer.result() output, or None when the solver does not time
        backend_name: e.g. 'cpu_exact', 'gpu_cuda_fp64_exact', 'cpu_pai'
        warnings: Non-fatal diagnostics, in the order they were raised
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def has_warning(self, substring: str) -> bool:
        """True if any warning message contains ``substring``."""
        return any(substring in message for message in self.warnings)
