"""Depth polynomial plus anisotropic spatial smooth GAMs fitted with pyGAM.

Feature columns are laid out as ``[depth_1 .. depth_k, x, y]``. Depth powers
enter as linear terms; location enters through a tensor-product smooth
``te(x, y)`` whose marginal bases carry their own basis size and smoothing
penalty, so wiggliness can differ along x and y.

pyGAM exposes no link-scale standard errors directly. They are computed the
way pyGAM builds its own intervals, from the model matrix ``M`` of the
prediction sites and the Bayesian coefficient covariance ``statistics_["cov"]``::

    se = sqrt(diag(M cov Mᵀ))
"""

import logging
import warnings

import numpy as np
import pandas as pd
from pygam import GammaGAM, LogisticGAM, l, te

from deltagam.contracts import ModelFitError
from deltagam.models.base import FittedModel, DepthPolynomial, Family, check_full_rank

__all__ = ['GAMFit']

logger = logging.getLogger(__name__)


def build_terms(spec):
    """pyGAM term list for a depth polynomial and a te(x, y) smooth."""
    k = spec.depth_degree
    terms = te(k, k + 1, n_splines=list(spec.n_splines), lam=list(spec.lam))
    for i in range(k):
        terms += l(i, lam=spec.linear_lam)
    return terms


class GAMFit(FittedModel):
    """pyGAM model behind the FittedModel interface."""

    def __init__(self, spec, family, response, depth_terms, gam):
        super().__init__(spec, family, response, depth_terms)
        self.gam = gam

    @staticmethod
    def features(sites: pd.DataFrame, depth_terms: DepthPolynomial) -> np.ndarray:
        """Feature matrix ``[depth powers, x, y]`` for the given rows."""
        return np.column_stack([
            depth_terms.transform(sites["depth"]),
            sites["x"].to_numpy(dtype=float),
            sites["y"].to_numpy(dtype=float),
        ])

    @classmethod
    def fit(cls, frame: pd.DataFrame, response: str, spec, family: Family) -> "GAMFit":
        """Fit by penalized iteratively re-weighted least squares.

        Raises
        ------
        ModelFitError
            Rank-deficient parametric block, non-finite coefficients, or a
            pyGAM convergence warning.
        """
        depth_terms = DepthPolynomial.from_depth(frame["depth"], spec.depth_degree)
        X = cls.features(frame, depth_terms)
        y = frame[response].to_numpy(dtype=float)

        parametric = np.column_stack([np.ones(len(frame)), X[:, :spec.depth_degree]])
        check_full_rank(parametric, f"{family.name} GAM")

        terms = build_terms(spec)
        if family.name == "binomial":
            gam = LogisticGAM(terms, max_iter=spec.max_iter)
        elif family.name == "gamma":
            gam = GammaGAM(terms, max_iter=spec.max_iter)
        else:
            raise ValueError(f"Unsupported family: {family.name}")

        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            try:
                gam.fit(X, y)
            except (ValueError, np.linalg.LinAlgError) as exc:
                raise ModelFitError(f"{family.name} GAM: {exc}") from exc

        for w in caught:
            message = str(w.message)
            if "converge" in message.lower() or "diverge" in message.lower():
                raise ModelFitError(f"{family.name} GAM: {message}")
            logger.debug("pyGAM warning: %s", message)

        if not np.all(np.isfinite(gam.coef_)):
            raise ModelFitError(f"{family.name} GAM produced non-finite coefficients")

        logger.info(
            "Fitted %s GAM on %d rows (depth degree %d, te n_splines=%s lam=%s): AIC=%.2f, edof=%.1f",
            family.name, len(y), spec.depth_degree, tuple(spec.n_splines), tuple(spec.lam),
            gam.statistics_["AIC"], gam.statistics_["edof"],
        )
        return cls(spec, family, response, depth_terms, gam)

    @property
    def n_obs(self) -> int:
        return int(self.gam.statistics_["n_samples"])

    @property
    def aic(self) -> float:
        return float(self.gam.statistics_["AIC"])

    @property
    def edof(self) -> float:
        """Effective degrees of freedom of the whole model."""
        return float(self.gam.statistics_["edof"])

    def _predict_link(self, sites, se_fit):
        X = self.features(sites, self.depth_terms)
        modelmat = self.gam._modelmat(X).toarray()
        eta = modelmat @ self.gam.coef_
        if not se_fit:
            return eta, None
        cov = self.gam.statistics_["cov"]
        se = np.sqrt(np.einsum("ij,jk,ik->i", modelmat, cov, modelmat))
        return eta, se

    def describe(self) -> dict:
        info = super().describe()
        info.update({
            "n_splines": list(self.spec.n_splines),
            "lam": list(self.spec.lam),
            "edof": self.edof,
        })
        return info
