"""Centralized failure types for the delta model pipeline.

Contracts fail fast, loud, and once. All contract violations raise the same
exception type, allowing callers to handle pipeline bugs uniformly. Model
fitting failures have their own type so callers can tell a broken stage from
a model specification the data cannot support.
"""


class ContractViolation(RuntimeError):
    """Raised when a pipeline contract is violated.

    This indicates a bug in pipeline logic, not bad user input. It means a
    pipeline stage did not produce the invariants it promised.

    Key distinction:
    - ValueError: User/config/data error (handled by Pydantic or the loader)
    - ModelFitError: the fitting engine cannot fit the requested model
    - ContractViolation: Pipeline bug (programmer error)
    """
    pass


class ModelFitError(RuntimeError):
    """Raised when a presence or magnitude model cannot be fitted.

    Causes include a response without variation, a rank-deficient design
    matrix, an empty positive subset, perfect separation, and engine
    non-convergence. No retry or fallback family is attempted; the caller
    is expected to change the model specification.
    """
    pass
