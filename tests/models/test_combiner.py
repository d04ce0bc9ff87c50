"""Tests for the delta combination of presence and magnitude predictions."""

import numpy as np
import pytest

from deltagam.contracts import ContractViolation
from deltagam.models import combine_predictions, fit_presence, fit_magnitude
from deltagam.schemas import LinearSpec

from helpers.fixed_model import FixedLinkModel

pytestmark = pytest.mark.unit


def test_combined_is_exact_product(observations, grid):
    presence = fit_presence(observations, LinearSpec(depth_degree=2))
    magnitude = fit_magnitude(observations, LinearSpec(depth_degree=2))

    out = combine_predictions(grid, presence, magnitude)

    assert len(out) == len(grid)
    np.testing.assert_array_equal(
        out["combined_prediction"].to_numpy(),
        out["binary_prediction"].to_numpy() * out["positive_prediction"].to_numpy(),
    )
    assert out["binary_prediction"].between(0, 1).all()
    assert (out["positive_prediction"] >= 0).all()


def test_sites_are_not_modified(grid):
    before = grid.copy()
    combine_predictions(grid, FixedLinkModel("binomial", 0.0), FixedLinkModel("gamma", 1.0))

    assert list(grid.columns) == list(before.columns)
    np.testing.assert_array_equal(grid.to_numpy(), before.to_numpy())


def test_any_fitted_model_can_be_combined(grid):
    """Combination only needs the FittedModel interface."""
    out = combine_predictions(
        grid,
        FixedLinkModel("binomial", 0.0),
        FixedLinkModel("gamma", np.log(4.0)),
    )

    np.testing.assert_allclose(out["binary_prediction"], 0.5)
    np.testing.assert_allclose(out["positive_prediction"], 4.0)
    np.testing.assert_allclose(out["combined_prediction"], 2.0)


def test_extreme_presence_stays_in_unit_interval(grid):
    out = combine_predictions(
        grid,
        FixedLinkModel("binomial", 0.0, slope=1.0),
        FixedLinkModel("gamma", 0.0),
    )

    assert out["binary_prediction"].between(0, 1).all()


def test_sites_without_depth_rejected(grid):
    with pytest.raises(ContractViolation, match="missing 'depth'"):
        combine_predictions(
            grid.drop(columns="depth"),
            FixedLinkModel("binomial", 0.0),
            FixedLinkModel("gamma", 0.0),
        )
