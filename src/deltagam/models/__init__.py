"""Presence/absence and positive-magnitude models and their combination.

- base: FittedModel interface, families and depth polynomial
- glm / gam: statsmodels and pyGAM engines
- fitting: single entry point dispatching on the model spec
- combiner, diagnostics, profile: read-only consumers of fitted models
"""

from deltagam.models.base import FAMILIES, FittedModel, Prediction
from deltagam.models.fitting import fit_model, fit_presence, fit_magnitude
from deltagam.models.combiner import combine_predictions
from deltagam.models.diagnostics import positive_residuals, residual_summary
from deltagam.models.profile import marginal_effect_profile, depth_sequence

__all__ = [
    'FAMILIES',
    'FittedModel',
    'Prediction',
    'fit_model',
    'fit_presence',
    'fit_magnitude',
    'combine_predictions',
    'positive_residuals',
    'residual_summary',
    'marginal_effect_profile',
    'depth_sequence',
]
