"""`deltagam` - Delta-Gamma hurdle models for survey density data.

Subpackages:
- survey: Observation and prediction-grid loading
- models: Presence (binomial) and magnitude (Gamma) GLM/GAM fits, combiner, diagnostics
- pipeline: Composable delta model pipeline and orchestrator
- visualization: Plotting
"""

__version__ = "0.1.0"
