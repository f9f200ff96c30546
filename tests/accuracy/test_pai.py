"""
Tests for pai() and pai_summary().

The small tables below are worked out by hand: four unit-area cells with
counts (5, 0, 3, 2).
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from pycrimetools.core.exceptions import DimensionMismatchError, ValidationError
from pycrimetools.accuracy import pai, pai_summary, PAISolution

COUNT = [5, 0, 3, 2]
PRED = [0.1, 0.9, 0.5, 0.5]


@pytest.fixture(scope="module")
def model():
    return pai(COUNT, PRED)


@pytest.fixture(scope="module")
def perfect():
    return pai(COUNT, COUNT)


class TestRanking:

    def test_order_is_stable_descending(self, model):
        np.testing.assert_array_equal(model.order, [1, 2, 3, 0])
        assert_allclose(model.count, [0, 3, 2, 5])
        assert_allclose(model.pred, [0.9, 0.5, 0.5, 0.1])

    def test_cumulative_columns(self, model):
        assert_allclose(model.cum_count, [0, 3, 5, 10])
        assert_allclose(model.cum_area, [1, 2, 3, 4])
        assert_allclose(model.cum_pred, [0.9, 1.4, 1.9, 2.0])


class TestIndices:

    def test_shares(self, model):
        assert_allclose(model.p_count, [0.0, 0.3, 0.5, 1.0])
        assert_allclose(model.p_area, [0.25, 0.5, 0.75, 1.0])

    def test_pai(self, model):
        assert_allclose(model.pai, [0.0, 0.6, 0.5 / 0.75, 1.0])

    def test_pei_against_best_ordering(self, model):
        """Best capture at 1, 2, 3, 4 cells is 5, 8, 10, 10."""
        assert_allclose(model.pei, [0.0, 3 / 8, 5 / 10, 1.0])

    def test_rri_nan_until_capture(self, model):
        assert np.isnan(model.rri[0])
        assert_allclose(model.rri[1:], [1.4 / 3, 1.9 / 5, 2.0 / 10])

    def test_full_coverage_pai_is_one(self, model):
        assert model.pai[-1] == pytest.approx(1.0)
        assert model.pei[-1] == pytest.approx(1.0)

    def test_perfect_prediction(self, perfect):
        assert_allclose(perfect.pai, [2.0, 1.6, 10 / 7.5, 1.0])
        assert_allclose(perfect.pei, 1.0)
        assert_allclose(perfect.rri, 1.0)

    def test_unequal_areas(self):
        res = pai([4, 1], [1, 2], area=[1, 3])
        assert_allclose(res.p_area, [0.75, 1.0])
        assert_allclose(res.p_count, [0.2, 1.0])
        assert_allclose(res.pai, [0.2 / 0.75, 1.0])
        # best curve passes (1, 4) and (4, 5); at area 3 it has 4 + 2/3
        assert res.pei[0] == pytest.approx(1 / (4 + 2 / 3))
        assert res.total_area == pytest.approx(4.0)


class TestValidation:

    def test_length_mismatch(self):
        with pytest.raises(DimensionMismatchError):
            pai([1, 2, 3], [0.1, 0.2])

    def test_negative_count(self):
        with pytest.raises(ValidationError, match="count"):
            pai([1, -1], [0.1, 0.2])

    def test_zero_area(self):
        with pytest.raises(ValidationError, match="area"):
            pai([1, 1], [0.1, 0.2], area=[1.0, 0.0])

    def test_zero_total_count(self):
        with pytest.raises(ValidationError, match="total count is 0"):
            pai([0, 0], [0.1, 0.2])

    def test_nan_prediction(self):
        with pytest.raises(ValidationError, match="pred"):
            pai([1, 1], [np.nan, 0.2])


class TestPAIOutput:

    def test_len(self, model):
        assert len(model) == 4

    def test_as_dict(self, model):
        table = model.as_dict()
        assert {"pai", "pei", "rri", "p_area", "order"} <= set(table)

    def test_summary(self, model):
        text = model.summary()
        assert "\tPredictive Accuracy Table" in text
        assert "PAI" in text
        assert "NA" in text

    def test_summary_truncated(self):
        res = pai(np.arange(30) + 1, np.arange(30))
        assert "... 10 more rows" in res.summary(max_rows=20)

    def test_repr(self, model):
        assert repr(model) == "PAISolution(units=4, total_count=10, total_area=4)"


# ═══════════════════════════════════════════════════════════════════════
# pai_summary
# ═══════════════════════════════════════════════════════════════════════


class TestPAISummary:

    def test_rows_threshold_major(self, model, perfect):
        s = pai_summary({"model": model, "perfect": perfect}, [0.25, 0.5])
        assert list(s.label) == ["model", "perfect", "model", "perfect"]
        assert_allclose(s.threshold, [0.25, 0.25, 0.5, 0.5])

    def test_deepest_rank_within_threshold(self, model, perfect):
        s = pai_summary({"model": model, "perfect": perfect}, [0.25, 0.5])
        np.testing.assert_array_equal(s.n_units, [1, 1, 2, 2])
        assert_allclose(s.pai, [0.0, 2.0, 0.6, 1.6])
        assert_allclose(s.p_area, [0.25, 0.25, 0.5, 0.5])

    def test_threshold_between_ranks(self, model):
        s = pai_summary(model, 0.6)
        assert s.n_units[0] == 2
        assert s.p_area[0] == pytest.approx(0.5)

    def test_rank_by_pai(self, model, perfect):
        s = pai_summary({"model": model, "perfect": perfect}, [0.25, 0.5])
        np.testing.assert_array_equal(s.rank, [2, 1, 2, 1])
        assert s.ranked(0.25) == ["perfect", "model"]

    def test_empty_selection(self, model, perfect):
        s = pai_summary({"model": model, "perfect": perfect}, 0.1)
        np.testing.assert_array_equal(s.n_units, [0, 0])
        assert_allclose(s.p_count, [0.0, 0.0])
        assert np.all(np.isnan(s.pai))
        np.testing.assert_array_equal(s.rank, [1, 2])

    def test_nan_ranks_last(self, perfect):
        small = pai([1, 1, 1, 1, 1, 1, 1, 1], np.arange(8))
        s = pai_summary({"coarse": perfect, "fine": small}, 0.125)
        assert np.isnan(s.pai[0])
        assert s.ranked(0.125) == ["fine", "coarse"]

    def test_single_table_label(self, model):
        s = pai_summary(model, [0.5])
        assert s.labels == ("pred",)

    def test_pai_table_shape(self, model, perfect):
        s = pai_summary({"model": model, "perfect": perfect}, [0.25, 0.5, 1.0])
        table = s.pai_table()
        assert table.shape == (2, 3)
        assert_allclose(table[1], [2.0, 1.6, 1.0])

    def test_full_threshold(self, model):
        s = pai_summary(model, 1.0)
        assert s.n_units[0] == 4
        assert s.pai[0] == pytest.approx(1.0)

    def test_ranked_unknown_threshold(self, model):
        s = pai_summary(model, [0.5])
        with pytest.raises(KeyError):
            s.ranked(0.3)

    @pytest.mark.parametrize("bad", [0.0, -0.1, 1.5])
    def test_threshold_out_of_range(self, model, bad):
        with pytest.raises(ValidationError, match="thresholds"):
            pai_summary(model, [0.5, bad])

    def test_empty_mapping(self):
        with pytest.raises(ValidationError, match="at least one"):
            pai_summary({}, [0.5])


class TestPAISummaryOutput:

    def test_wide(self, model, perfect):
        text = pai_summary({"model": model, "perfect": perfect}, [0.25, 0.5]).summary()
        assert "\tPAI Summary" in text
        assert "PAI@0.25" in text
        assert "PAI@0.5" in text

    def test_long(self, model, perfect):
        s = pai_summary({"model": model, "perfect": perfect}, [0.25], wide=False)
        lines = s.summary().splitlines()
        rows = [ln for ln in lines if ln.strip().startswith("0.25")]
        assert len(rows) == 2
        assert "perfect" in rows[0]
        assert "model" in rows[1]

    def test_override_layout(self, model):
        s = pai_summary(model, [0.5], wide=True)
        assert "PAI@" not in s.summary(wide=False)

    def test_as_dict(self, model):
        table = pai_summary(model, [0.5]).as_dict()
        assert set(table) == {
            "label", "threshold", "n_units", "p_area", "p_count",
            "pai", "pei", "rri", "rank",
        }

    def test_repr(self, model):
        assert repr(pai_summary(model, [0.5])) == (
            "PAISummarySolution(labels=['pred'], thresholds=[0.5])"
        )


def test_solution_type(model):
    assert isinstance(model, PAISolution)
