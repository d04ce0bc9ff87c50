"""Tests for pipeline contracts.

These tests verify that contracts are enforced at stage boundaries.
They test contract violations directly, without defensive logic downstream.
"""

import pytest
import pandas as pd
import numpy as np

pytestmark = pytest.mark.unit

from deltagam.contracts import (
    ContractViolation,
    ModelFitError,
    require,
    assert_observations,
    assert_sites,
    assert_grid_within_support,
    assert_combined_predictions,
    assert_profile,
)
from deltagam.contracts.invariants import PIPELINE_INVARIANTS


def _observations(**overrides):
    data = {
        "x": [0.0, 1.0, 2.0],
        "y": [0.0, 1.0, 2.0],
        "depth": [100.0, 150.0, 200.0],
        "density": [0.0, 5.0, 2.0],
        "present": [0, 1, 1],
    }
    data.update(overrides)
    return pd.DataFrame(data)


def _predictions(binary, positive, combined=None):
    binary = np.asarray(binary, dtype=float)
    positive = np.asarray(positive, dtype=float)
    return pd.DataFrame({
        "x": np.arange(binary.size, dtype=float),
        "y": np.zeros(binary.size),
        "depth": np.full(binary.size, 150.0),
        "binary_prediction": binary,
        "positive_prediction": positive,
        "combined_prediction": binary * positive if combined is None else combined,
    })


class TestRequire:

    def test_require_passes_silently(self):
        require(True, "never raised")

    def test_require_raises_contract_violation(self):
        with pytest.raises(ContractViolation, match="broken"):
            require(False, "broken")

    def test_failure_types_are_runtime_errors(self):
        assert issubclass(ContractViolation, RuntimeError)
        assert issubclass(ModelFitError, RuntimeError)
        assert not issubclass(ModelFitError, ContractViolation)


class TestObservationContract:

    def test_valid_observations_pass(self):
        assert_observations(_observations())

    def test_missing_present_column_fails(self):
        df = _observations().drop(columns="present")
        with pytest.raises(ContractViolation, match="missing 'present'"):
            assert_observations(df)

    def test_empty_observations_fail(self):
        with pytest.raises(ContractViolation, match="no observations"):
            assert_observations(_observations().iloc[0:0])

    def test_negative_density_fails(self):
        with pytest.raises(ContractViolation, match="negative density"):
            assert_observations(_observations(density=[-1.0, 5.0, 2.0], present=[0, 1, 1]))

    def test_present_label_must_match_density(self):
        """A positive density labelled absent breaks the presence invariant."""
        with pytest.raises(ContractViolation, match="present != \\(density > 0\\)"):
            assert_observations(_observations(present=[0, 0, 1]))

    def test_sites_need_depth(self):
        with pytest.raises(ContractViolation, match="missing 'depth'"):
            assert_sites(pd.DataFrame({"x": [0.0], "y": [0.0]}))


class TestGridContract:

    def _grid(self, depth, y):
        return pd.DataFrame({"x": np.zeros(len(depth)), "y": y, "depth": depth})

    def test_grid_inside_support_passes(self):
        grid = self._grid([100.0, 150.0, 200.0], [5.0, 6.0, 7.0])
        assert_grid_within_support(grid, (100.0, 200.0), y_cutoff=4.5)

    def test_grid_depth_outside_range_fails(self):
        grid = self._grid([99.0, 150.0], [5.0, 6.0])
        with pytest.raises(ContractViolation, match="outside depth range"):
            assert_grid_within_support(grid, (100.0, 200.0))

    def test_grid_at_cutoff_fails(self):
        grid = self._grid([150.0, 150.0], [4.5, 6.0])
        with pytest.raises(ContractViolation, match="y cutoff"):
            assert_grid_within_support(grid, (100.0, 200.0), y_cutoff=4.5)

    def test_non_finite_grid_fails(self):
        grid = self._grid([150.0, 150.0], [np.inf, 6.0])
        with pytest.raises(ContractViolation, match="non-finite"):
            assert_grid_within_support(grid, (100.0, 200.0))


class TestPredictionContract:

    def test_valid_predictions_pass(self):
        assert_combined_predictions(_predictions([0.2, 0.9], [3.0, 0.5]))

    def test_probability_above_one_fails(self):
        with pytest.raises(ContractViolation, match="outside \\[0, 1\\]"):
            assert_combined_predictions(_predictions([1.2, 0.5], [3.0, 0.5]))

    def test_negative_magnitude_fails(self):
        with pytest.raises(ContractViolation, match="negative positive_prediction"):
            assert_combined_predictions(_predictions([0.2, 0.5], [-3.0, 0.5]))

    def test_product_mismatch_fails(self):
        df = _predictions([0.2, 0.5], [3.0, 0.5], combined=np.array([0.6, 0.3]))
        with pytest.raises(ContractViolation, match="combined_prediction != binary \\* positive"):
            assert_combined_predictions(df)

    def test_missing_column_fails(self):
        df = _predictions([0.2], [3.0]).drop(columns="combined_prediction")
        with pytest.raises(ContractViolation, match="missing 'combined_prediction'"):
            assert_combined_predictions(df)


class TestProfileContract:

    def _profile(self, binary, positive, depth=None, combined=None):
        binary = np.asarray(binary, dtype=float)
        positive = np.asarray(positive, dtype=float)
        return pd.DataFrame({
            "depth": np.arange(binary.size, dtype=float) if depth is None else depth,
            "binary_estimate": binary,
            "positive_estimate": positive,
            "combined_estimate": binary * positive if combined is None else combined,
        })

    def test_valid_profile_passes(self):
        assert_profile(self._profile([0.1, 0.5, 0.9], [2.0, 3.0, 1.0]))

    def test_combined_above_magnitude_fails(self):
        df = self._profile([0.5, 0.5], [2.0, 2.0], combined=np.array([1.0, 2.5]))
        with pytest.raises(ContractViolation):
            assert_profile(df)

    def test_unsorted_depth_fails(self):
        df = self._profile([0.5, 0.5], [2.0, 2.0], depth=np.array([200.0, 100.0]))
        with pytest.raises(ContractViolation, match="not sorted"):
            assert_profile(df)


def test_invariants_cover_every_stage():
    assert set(PIPELINE_INVARIANTS) == {"survey", "grid", "fit", "prediction", "profile"}
    assert all(PIPELINE_INVARIANTS.values())
