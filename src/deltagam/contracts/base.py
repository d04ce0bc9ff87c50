"""Single enforcement point for pipeline contracts."""

from deltagam.contracts.failure import ContractViolation


def require(condition: bool, message: str) -> None:
    """Raise ContractViolation with ``message`` unless ``condition`` holds.

    Stage boundaries call this to check what the previous stage promised.
    There is no recovery path: a failed contract means a pipeline bug.

    Examples
    --------
    >>> require("present" in obs.columns, "Observation contract violated: missing 'present' column")
    >>> require(len(grid) == len(eta), "Prediction contract violated: length mismatch")
    """
    if not condition:
        raise ContractViolation(message)
