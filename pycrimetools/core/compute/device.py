"""
Hardware detection for the optional GPU backends.

torch is imported lazily: the CPU path never needs it, and the package
installs without it.
"""

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class DeviceInfo:
    """
    A torch compute device and the float precision it supports.

    Attributes:
        device_type: 'cuda' or 'mps'
        device_index: Device index
        name: Human-readable device name
        supports_fp64: False on Apple MPS, which has no float64 kernels
    """
    device_type: Literal['cuda', 'mps']
    device_index: int
    name: str
    supports_fp64: bool

    def __str__(self) -> str:
        return f"{self.device_type.upper()}:{self.device_index} ({self.name})"

    @property
    def torch_device(self) -> str:
        """Device string accepted by torch.device()."""
        if self.device_type == 'cuda':
            return f"cuda:{self.device_index}"
        return 'mps'


def detect_gpu() -> DeviceInfo | None:
    """
    Detect available GPU, if any.

    Returns:
        DeviceInfo for the best available GPU, or None if torch is missing
        or no GPU is visible. Priority: CUDA > MPS.
    """
    try:
        import torch
    except ImportError:
        return None

    if torch.cuda.is_available():
        idx = torch.cuda.current_device()
        return DeviceInfo(
            device_type='cuda',
            device_index=idx,
            name=torch.cuda.get_device_name(idx),
            supports_fp64=True,
        )

    if hasattr(torch.backends, 'mps') and torch.backends.mps.is_available():
        return DeviceInfo(
            device_type='mps',
            device_index=0,
            name='Apple Silicon GPU',
            supports_fp64=False,
        )

    return None


def require_gpu() -> DeviceInfo:
    """
    Return the detected GPU or fail.

    Raises:
        RuntimeError: If no GPU is available
    """
    gpu = detect_gpu()
    if gpu is None:
        raise RuntimeError(
            "GPU requested but no GPU available. "
            "Ensure PyTorch is installed with CUDA/MPS support."
        )
    return gpu
