"""Polynomial-in-depth GLMs fitted with statsmodels.

The design matrix is an explicit ``const`` column plus standardized depth
powers. Link-scale standard errors come from the design matrix and the
estimated coefficient covariance, ``se = sqrt(diag(X Σ Xᵀ))``.
"""

import logging
import warnings

import numpy as np
import pandas as pd
import statsmodels.api as sm
from statsmodels.tools.sm_exceptions import PerfectSeparationError, PerfectSeparationWarning

from deltagam.contracts import ModelFitError
from deltagam.models.base import FittedModel, DepthPolynomial, Family, check_full_rank

__all__ = ['GLMFit']

logger = logging.getLogger(__name__)


def _sm_family(family: Family):
    if family.name == "binomial":
        return sm.families.Binomial()
    if family.name == "gamma":
        return sm.families.Gamma(link=sm.families.links.Log())
    raise ValueError(f"Unsupported family: {family.name}")


class GLMFit(FittedModel):
    """statsmodels GLM behind the FittedModel interface.

    Examples
    --------
    >>> model = GLMFit.fit(obs, "present", LinearSpec(depth_degree=2), FAMILIES["binomial"])
    >>> model.predict(grid).estimate  # probabilities
    """

    def __init__(self, spec, family, response, depth_terms, result):
        super().__init__(spec, family, response, depth_terms)
        self.result = result

    @staticmethod
    def design(sites: pd.DataFrame, depth_terms: DepthPolynomial) -> pd.DataFrame:
        """Intercept plus depth powers for the given rows."""
        X = pd.DataFrame(
            depth_terms.transform(sites["depth"]),
            columns=depth_terms.names,
            index=sites.index,
        )
        X.insert(0, "const", 1.0)
        return X

    @classmethod
    def fit(cls, frame: pd.DataFrame, response: str, spec, family: Family) -> "GLMFit":
        """Fit by IRLS.

        Raises
        ------
        ModelFitError
            Rank-deficient design, a saturated Gamma fit with no residual
            degrees of freedom, perfect separation (binomial), numerical
            failure inside statsmodels, or non-convergence.
        """
        depth_terms = DepthPolynomial.from_depth(frame["depth"], spec.depth_degree)
        X = cls.design(frame, depth_terms)
        y = frame[response].astype(float)
        check_full_rank(X.to_numpy(), f"{family.name} GLM",
                        min_resid_df=1 if family.name == "gamma" else 0)

        model = sm.GLM(y, X, family=_sm_family(family))
        with warnings.catch_warnings():
            if family.name == "binomial":
                warnings.simplefilter("error", PerfectSeparationWarning)
            try:
                result = model.fit()
            except (PerfectSeparationError, PerfectSeparationWarning,
                    ValueError, np.linalg.LinAlgError) as exc:
                raise ModelFitError(f"{family.name} GLM: {exc}") from exc

        if not result.converged:
            raise ModelFitError(f"{family.name} GLM did not converge")

        logger.info(
            "Fitted %s GLM on %d rows (depth degree %d): AIC=%.2f, deviance=%.3f",
            family.name, int(result.nobs), spec.depth_degree, result.aic, result.deviance,
        )
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("%s", result.summary())
        return cls(spec, family, response, depth_terms, result)

    @property
    def n_obs(self) -> int:
        return int(self.result.nobs)

    @property
    def aic(self) -> float:
        return float(self.result.aic)

    def _predict_link(self, sites, se_fit):
        X = self.design(sites, self.depth_terms).to_numpy()
        params = np.asarray(self.result.params)
        eta = X @ params
        if not se_fit:
            return eta, None
        cov = np.asarray(self.result.cov_params())
        se = np.sqrt(np.einsum("ij,jk,ik->i", X, cov, X))
        return eta, se
