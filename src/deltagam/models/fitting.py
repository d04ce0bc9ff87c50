"""Single fitting entry point for presence and magnitude models.

``fit_model`` dispatches on the model spec's ``kind``:

- ``linear`` → statsmodels GLM (:class:`~deltagam.models.glm.GLMFit`)
- ``additive_spatial`` → pyGAM GAM (:class:`~deltagam.models.gam.GAMFit`)

``fit_presence`` and ``fit_magnitude`` fix the family and the rows each
half of the delta model is fitted on.
"""

import logging

import pandas as pd

from deltagam.contracts import ModelFitError, assert_observations
from deltagam.models.base import FAMILIES, FittedModel
from deltagam.models.glm import GLMFit
from deltagam.models.gam import GAMFit

__all__ = ['fit_model', 'fit_presence', 'fit_magnitude', 'ENGINES']

logger = logging.getLogger(__name__)

ENGINES = {
    "linear": GLMFit,
    "additive_spatial": GAMFit,
}


def fit_model(frame: pd.DataFrame, response: str, spec, family: str) -> FittedModel:
    """Fit one model of the given family with the engine selected by ``spec``.

    Parameters
    ----------
    frame : pd.DataFrame
        Rows with ``x``, ``y``, ``depth`` and the response column.
    response : str
        Response column name.
    spec : LinearSpec or AdditiveSpatialSpec
        Covariate structure.
    family : {"binomial", "gamma"}
        Response family; binomial uses a logit link, gamma a log link.

    Raises
    ------
    ModelFitError
        Empty input, a binomial response without variation, a non-positive
        gamma response, or any engine failure.
    """
    if family not in FAMILIES:
        raise ValueError(f"Unknown family {family!r}, expected one of {sorted(FAMILIES)}")
    if spec.kind not in ENGINES:
        raise ValueError(f"Unknown model kind {spec.kind!r}")

    if len(frame) == 0:
        raise ModelFitError(f"No rows to fit the {family} model on")

    y = frame[response]
    if family == "binomial" and y.nunique() < 2:
        raise ModelFitError(
            f"Presence response has no variation (all values are {y.iloc[0]!r})"
        )
    if family == "gamma" and not bool((y > 0).all()):
        raise ModelFitError("Gamma response must be strictly positive")

    logger.debug("Fitting %s model (%s) on %d rows", family, spec.kind, len(frame))
    return ENGINES[spec.kind].fit(frame, response, spec, FAMILIES[family])


def fit_presence(observations: pd.DataFrame, spec) -> FittedModel:
    """Binomial presence/absence model on every observation."""
    assert_observations(observations)
    return fit_model(observations, "present", spec, "binomial")


def fit_magnitude(observations: pd.DataFrame, spec) -> FittedModel:
    """Gamma (log link) model of density on positive observations only."""
    assert_observations(observations)
    positives = observations.loc[observations["density"] > 0]
    if len(positives) == 0:
        raise ModelFitError("No positive observations to fit the magnitude model on")
    return fit_model(positives, "density", spec, "gamma")
