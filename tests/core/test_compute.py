"""
Tests for core.compute: tolerance tiers, engine defaults, timer, devices.
"""

import pytest

from pycrimetools.core.compute import DeviceInfo, Timer
from pycrimetools.core.compute.tolerances import (
    CDF_DECIMALS,
    CPU_FP64,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_SAFETY_THRESHOLD,
    GPU_FP32,
    GPU_FP64,
    PROBABILITY_SUM_TOLERANCE,
    TIE_TOLERANCE,
    select_tolerance,
)


class TestToleranceTiers:

    def test_cpu_backend(self):
        assert select_tolerance("cpu_exact") is CPU_FP64

    def test_cuda_backend(self):
        assert select_tolerance("gpu_cuda_fp64_exact") is GPU_FP64

    def test_mps_backend(self):
        assert select_tolerance("gpu_mps_fp32_exact") is GPU_FP32

    def test_fp32_looser_than_fp64(self):
        assert GPU_FP32.rtol > GPU_FP64.rtol


class TestDefaults:

    def test_values(self):
        assert PROBABILITY_SUM_TOLERANCE == 1e-6
        assert TIE_TOLERANCE == 1e-10
        assert DEFAULT_SAFETY_THRESHOLD == 1_000_000
        assert DEFAULT_CHUNK_SIZE == 65_536
        assert CDF_DECIMALS == 8


class TestTimer:

    def test_sections_accumulate(self):
        timer = Timer()
        timer.start()
        with timer.section("enumerate_score"):
            pass
        with timer.section("enumerate_score"):
            pass
        timer.stop()
        result = timer.result()
        assert set(result) == {"total_seconds", "enumerate_score"}
        assert result["total_seconds"] >= 0.0

    def test_result_before_stop(self):
        timer = Timer()
        timer.start()
        with pytest.raises(RuntimeError, match="before stop"):
            timer.result()

    def test_stop_before_start(self):
        with pytest.raises(RuntimeError, match="before start"):
            Timer().stop()


class TestDeviceInfo:

    def test_cuda_device_string(self):
        info = DeviceInfo("cuda", 1, "Test GPU", True)
        assert info.torch_device == "cuda:1"
        assert str(info) == "CUDA:1 (Test GPU)"

    def test_mps_device_string(self):
        info = DeviceInfo("mps", 0, "Apple", False)
        assert info.torch_device == "mps"
        assert not info.supports_fp64
