"""Delta (hurdle) combination of presence and magnitude predictions.

Under a hurdle model the unconditional expectation is

    E[Y] = P(Y > 0) * E[Y | Y > 0]

so the combined surface is the pointwise product of the presence
probability and the positive-magnitude expectation.
"""

import logging

import pandas as pd

from deltagam.contracts import assert_combined_predictions
from deltagam.models.base import FittedModel

__all__ = ['combine_predictions']

logger = logging.getLogger(__name__)


def combine_predictions(
    sites: pd.DataFrame,
    presence_model: FittedModel,
    magnitude_model: FittedModel,
) -> pd.DataFrame:
    """Predict both halves of the delta model and multiply them.

    Parameters
    ----------
    sites : pd.DataFrame
        Prediction grid or synthetic covariate sequence with ``x``, ``y``,
        ``depth``.
    presence_model, magnitude_model : FittedModel
        Fitted binomial and gamma models.

    Returns
    -------
    pd.DataFrame
        Copy of ``sites`` with ``positive_prediction``,
        ``binary_prediction`` and ``combined_prediction`` columns.
    """
    out = sites.copy()
    out["positive_prediction"] = magnitude_model.predict(sites).estimate
    out["binary_prediction"] = presence_model.predict(sites).estimate
    out["combined_prediction"] = out["binary_prediction"] * out["positive_prediction"]

    assert_combined_predictions(out)
    logger.info(
        "Combined predictions at %d sites: mean density %.4g (presence %.3f x magnitude %.4g)",
        len(out), out["combined_prediction"].mean(),
        out["binary_prediction"].mean(), out["positive_prediction"].mean(),
    )
    return out
