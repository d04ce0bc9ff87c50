"""Common interface of fitted presence and magnitude models.

Both fitting engines (statsmodels GLM, pygam GAM) are wrapped behind
FittedModel so the combiner, diagnostics and profile never care which one
produced a model.
"""

import abc
import logging
from typing import Callable, NamedTuple, Optional

import numpy as np
import pandas as pd
from scipy.special import expit, logit

from deltagam.contracts import ModelFitError, assert_sites, require

__all__ = ['FAMILIES', 'Family', 'FittedModel', 'Prediction', 'DepthPolynomial', 'check_full_rank']

logger = logging.getLogger(__name__)


class Family(NamedTuple):
    """Response family with its link function."""
    name: str
    link_name: str
    link: Callable
    inverse: Callable
    mu_eta: Callable  # d mu / d eta, as a function of mu


FAMILIES = {
    "binomial": Family("binomial", "logit", logit, expit, lambda mu: mu * (1.0 - mu)),
    "gamma": Family("gamma", "log", np.log, np.exp, lambda mu: mu),
}


class Prediction(NamedTuple):
    """Point prediction and optional standard error."""
    estimate: np.ndarray
    se: Optional[np.ndarray] = None


class DepthPolynomial:
    """Powers of standardized depth.

    Depth is centred and scaled with the fitting data's mean and standard
    deviation; the same constants are reapplied to any prediction sites.

    Parameters
    ----------
    degree : int
        Highest power. Zero yields no columns.
    mean, sd : float
        Standardization constants.
    """

    def __init__(self, degree: int, mean: float, sd: float):
        self.degree = degree
        self.mean = mean
        self.sd = sd

    @classmethod
    def from_depth(cls, depth, degree: int) -> "DepthPolynomial":
        depth = np.asarray(depth, dtype=float)
        sd = float(np.std(depth, ddof=1)) if depth.size > 1 else 0.0
        if not np.isfinite(sd) or sd == 0:
            sd = 1.0
        return cls(degree, float(np.mean(depth)), sd)

    @property
    def names(self):
        return [f"depth_{p}" for p in range(1, self.degree + 1)]

    def transform(self, depth) -> np.ndarray:
        """Return an (n, degree) array of standardized depth powers."""
        z = (np.asarray(depth, dtype=float) - self.mean) / self.sd
        if self.degree == 0:
            return np.empty((z.size, 0))
        return np.column_stack([z ** p for p in range(1, self.degree + 1)])


def check_full_rank(X: np.ndarray, label: str, min_resid_df: int = 0) -> None:
    """Raise ModelFitError when a design matrix is rank deficient.

    ``min_resid_df`` is the number of rows required beyond the column count,
    e.g. 1 for families whose dispersion is estimated from the residuals.
    """
    n, p = X.shape
    if n < p:
        raise ModelFitError(
            f"{label}: {n} observations cannot identify {p} parametric coefficients"
        )
    if n - p < min_resid_df:
        raise ModelFitError(
            f"{label}: {n} observations for {p} coefficients leave no residual "
            f"degrees of freedom to estimate the dispersion"
        )
    rank = np.linalg.matrix_rank(X)
    if rank < p:
        raise ModelFitError(f"{label}: design matrix is rank deficient (rank {rank} < {p})")


class FittedModel(abc.ABC):
    """A presence or magnitude model produced by an external fitting engine.

    Subclasses implement ``_predict_link``; everything else (scale handling,
    standard error transformation, site validation) lives here.

    Attributes
    ----------
    spec : LinearSpec or AdditiveSpatialSpec
        Specification the model was fitted with.
    family : Family
        Response family and link.
    response : str
        Name of the modelled column (``present`` or ``density``).
    depth_terms : DepthPolynomial
        Depth standardization learnt from the fitting data.
    """

    def __init__(self, spec, family: Family, response: str, depth_terms: DepthPolynomial):
        self.spec = spec
        self.family = family
        self.response = response
        self.depth_terms = depth_terms

    @property
    @abc.abstractmethod
    def n_obs(self) -> int:
        """Number of rows the model was fitted on."""

    @property
    @abc.abstractmethod
    def aic(self) -> float:
        """Akaike information criterion reported by the engine."""

    @abc.abstractmethod
    def _predict_link(self, sites: pd.DataFrame, se_fit: bool):
        """Return (eta, se or None) on the link scale."""

    def predict(self, sites: pd.DataFrame, scale: str = "response", se_fit: bool = False) -> Prediction:
        """Predict at arbitrary covariate rows.

        Parameters
        ----------
        sites : pd.DataFrame
            Rows with ``x``, ``y`` and ``depth``.
        scale : {"response", "link"}
            ``response`` returns probabilities (presence) or expected
            densities (magnitude); ``link`` returns the linear predictor.
        se_fit : bool
            Also return standard errors. On the response scale they are
            delta-method transforms of the link-scale errors.

        Returns
        -------
        Prediction
            ``(estimate, se)`` arrays; ``se`` is None unless requested.
        """
        if scale not in ("response", "link"):
            raise ValueError(f"scale must be 'response' or 'link', got {scale!r}")
        assert_sites(sites)
        eta, se = self._predict_link(sites, se_fit)
        require(
            len(eta) == len(sites),
            f"Prediction contract violated: {len(eta)} predictions for {len(sites)} sites"
        )

        if scale == "link":
            return Prediction(eta, se)

        mu = self.family.inverse(eta)
        if se is not None:
            se = se * np.abs(self.family.mu_eta(mu))
        return Prediction(mu, se)

    def describe(self) -> dict:
        """Short, JSON-friendly description of the fit."""
        return {
            "kind": self.spec.kind,
            "family": self.family.name,
            "link": self.family.link_name,
            "response": self.response,
            "depth_degree": self.spec.depth_degree,
            "n_obs": int(self.n_obs),
            "aic": float(self.aic),
        }

    def __repr__(self):
        return (f"{type(self).__name__}(kind={self.spec.kind!r}, family={self.family.name!r}, "
                f"n_obs={self.n_obs})")
