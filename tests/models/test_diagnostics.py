"""Tests for magnitude-model residual diagnostics."""

import numpy as np
import pytest

from deltagam.models import positive_residuals, residual_summary, fit_magnitude
from deltagam.schemas import LinearSpec

from helpers.fixed_model import FixedLinkModel

pytestmark = pytest.mark.unit


def test_residuals_only_for_positive_tows(observations):
    magnitude = fit_magnitude(observations, LinearSpec(depth_degree=2))

    res = positive_residuals(observations, magnitude)

    assert len(res) == int((observations["density"] > 0).sum())
    assert (res["density"] > 0).all()


def test_residual_is_link_prediction_minus_log_density(three_observations):
    magnitude = FixedLinkModel("gamma", np.log(3.0))

    res = positive_residuals(three_observations, magnitude)

    np.testing.assert_allclose(res["link_prediction"], np.log(3.0))
    np.testing.assert_allclose(res["residual"], np.log(3.0) - np.log([5.0, 2.0]))


def test_observations_not_modified(three_observations):
    before = three_observations.copy()
    positive_residuals(three_observations, FixedLinkModel("gamma", 0.0))

    assert list(three_observations.columns) == list(before.columns)


def test_residual_summary(three_observations):
    res = positive_residuals(three_observations, FixedLinkModel("gamma", np.log(3.0)))
    summary = residual_summary(res)

    assert summary["n"] == 2
    assert summary["share_positive"] == pytest.approx(0.5)
    assert summary["mean"] == pytest.approx(np.mean(np.log(3.0) - np.log([5.0, 2.0])))


def test_intercept_only_residuals_average_near_zero(three_observations):
    """Gamma log-link MLE matches the mean, so residuals straddle zero."""
    magnitude = fit_magnitude(three_observations, LinearSpec(depth_degree=0))

    res = positive_residuals(three_observations, magnitude)

    assert (res["residual"] > 0).sum() == 1
