"""
GPU tests for the exact test.

The GPU backend scores the same support as the CPU backend, so p-values
must agree to the precision tier of the device. The torch backend also
accepts the host CPU as its device, which runs wherever torch is installed.
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from pycrimetools.exact import ExactTestDesign, small_samptest

try:
    import torch
    GPU_AVAILABLE = torch.cuda.is_available()
except ImportError:
    GPU_AVAILABLE = False


BENFORD = [0.301, 0.176, 0.125, 0.097, 0.079, 0.067, 0.058, 0.051, 0.046]
COUNTS = [3, 4, 1, 0, 0, 0, 2, 0, 2]


@pytest.mark.skipif(not GPU_AVAILABLE, reason="CUDA not available")
class TestExactGPU:
    """CUDA backend agrees with the CPU reference."""

    def test_gpu_matches_cpu(self):
        cpu = small_samptest(COUNTS, BENFORD, backend="cpu")
        gpu = small_samptest(COUNTS, BENFORD, backend="gpu")
        assert gpu.statistic == pytest.approx(cpu.statistic, rel=1e-10)
        assert gpu.p_value == pytest.approx(cpu.p_value, rel=1e-10)
        assert gpu.total_permutations == cpu.total_permutations

    def test_gpu_backend_name(self):
        res = small_samptest(COUNTS, BENFORD, backend="gpu")
        assert res.backend_name == "gpu_cuda_fp64_exact"
        assert res.info["device"].startswith("cuda")

    def test_gpu_streaming(self):
        res = small_samptest(COUNTS, BENFORD, backend="gpu", streaming=True, chunk_size=5000)
        assert res.info["n_chunks"] == 26
        assert res.total_probability == pytest.approx(1.0, abs=1e-9)

    def test_gpu_chisq(self):
        cpu = small_samptest([2, 0, 1], type="chisq")
        gpu = small_samptest([2, 0, 1], type="chisq", backend="gpu")
        assert gpu.p_value == pytest.approx(cpu.p_value, rel=1e-10)

    def test_gpu_zero_total(self):
        res = small_samptest([0, 0], backend="gpu")
        assert res.p_value == 1.0
        assert np.all(res.stats == 0.0)


class TestAutoBackend:

    def test_auto_runs_anywhere(self):
        """'auto' falls back to the CPU when no GPU is present."""
        res = small_samptest([2, 0], backend="auto")
        assert res.p_value == pytest.approx(0.5, rel=1e-6)


class TestTorchBackendOnHost:
    """
    The torch backend scores on any torch device. Run it on the host CPU
    so its scoring path is checked without a GPU.
    """

    @pytest.fixture(autouse=True)
    def _torch(self):
        pytest.importorskip("torch")

    @pytest.fixture
    def backends(self):
        from pycrimetools.exact.backends.cpu import CPUExactBackend
        from pycrimetools.exact.backends.gpu import GPUExactBackend
        return CPUExactBackend(), GPUExactBackend(device="cpu")

    @pytest.mark.parametrize("streaming", [False, True])
    def test_matches_cpu_reference(self, backends, streaming):
        cpu, torch_backend = backends
        design = ExactTestDesign.for_small_samptest(
            COUNTS, BENFORD, streaming=streaming, chunk_size=5000,
        )
        expected = cpu.solve(design)
        actual = torch_backend.solve(design)
        assert actual.params.statistic == pytest.approx(expected.params.statistic, rel=1e-10)
        assert actual.params.p_value == pytest.approx(expected.params.p_value, rel=1e-10)
        assert actual.params.total_probability == pytest.approx(1.0, abs=1e-9)
        assert actual.info["n_evaluated"] == 125970
        assert actual.info["n_chunks"] == (26 if streaming else 1)

    def test_materialized_arrays_match(self, backends):
        cpu, torch_backend = backends
        design = ExactTestDesign.for_small_samptest([3, 1, 2, 0], statistic="chisq")
        expected = cpu.solve(design).params
        actual = torch_backend.solve(design).params
        assert_allclose(actual.stats, expected.stats, rtol=1e-12, atol=1e-12)
        assert_allclose(actual.probabilities, expected.probabilities, rtol=1e-10)

    def test_name_and_device(self, backends):
        _, torch_backend = backends
        res = torch_backend.solve(ExactTestDesign.for_small_samptest([2, 0]))
        assert res.backend_name == "gpu_cpu_fp64_exact"
        assert res.info["device"] == "cpu"
        assert res.warnings == ()
        assert res.params.p_value == pytest.approx(0.5, rel=1e-12)
