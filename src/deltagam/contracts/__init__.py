"""Pipeline contracts: fail-fast enforcement of stage invariants.

This package enforces semantic guarantees between pipeline stages.
Contracts fail immediately and loudly when pipeline stages don't produce
their promised invariants.

Key principle:
- Pydantic validates config correctness
- Contracts validate pipeline correctness
- The fitting engines handle numerical edge cases
"""

from deltagam.contracts.failure import ContractViolation, ModelFitError
from deltagam.contracts.base import require
from deltagam.contracts.survey import (
    assert_observations,
    assert_sites,
    assert_grid_within_support,
)
from deltagam.contracts.prediction import assert_combined_predictions, assert_profile

__all__ = [
    "ContractViolation",
    "ModelFitError",
    "require",
    "assert_observations",
    "assert_sites",
    "assert_grid_within_support",
    "assert_combined_predictions",
    "assert_profile",
]
