"""Link-scale residuals of the magnitude model.

For each positive observation::

    residual = predicted log density - log(observed density)

Same-signed residuals clustering in space mean the covariates miss spatial
structure (e.g. depth alone without a spatial smooth).
"""

import logging

import numpy as np
import pandas as pd

from deltagam.contracts import assert_observations
from deltagam.models.base import FittedModel

__all__ = ['positive_residuals', 'residual_summary']

logger = logging.getLogger(__name__)


def positive_residuals(observations: pd.DataFrame, magnitude_model: FittedModel) -> pd.DataFrame:
    """Residuals of the magnitude model at every positive observation.

    Returns
    -------
    pd.DataFrame
        Positive observations with ``log_density``, ``link_prediction`` and
        ``residual`` columns.
    """
    assert_observations(observations)
    positives = observations.loc[observations["density"] > 0].copy()
    positives["log_density"] = np.log(positives["density"])
    positives["link_prediction"] = magnitude_model.predict(positives, scale="link").estimate
    positives["residual"] = positives["link_prediction"] - positives["log_density"]

    summary = residual_summary(positives)
    logger.info(
        "Magnitude residuals (n=%d): mean %.3f, sd %.3f, %.1f%% over-predicted",
        summary["n"], summary["mean"], summary["sd"], 100.0 * summary["share_positive"],
    )
    return positives


def residual_summary(residuals: pd.DataFrame) -> dict:
    """Mean, spread and sign balance of the residual column."""
    r = residuals["residual"].to_numpy(dtype=float)
    return {
        "n": int(r.size),
        "mean": float(np.mean(r)) if r.size else float("nan"),
        "sd": float(np.std(r, ddof=1)) if r.size > 1 else float("nan"),
        "share_positive": float(np.mean(r > 0)) if r.size else float("nan"),
    }
