"""Delta model pipeline: the composable fitting function and its orchestrator."""

from deltagam.pipeline.delta import DeltaModelResult, run_delta_model, variant_tag
from deltagam.pipeline.orchestrator import DeltaOrchestrator

__all__ = ['DeltaModelResult', 'run_delta_model', 'variant_tag', 'DeltaOrchestrator']
