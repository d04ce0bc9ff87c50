"""Prediction stage contracts.

Enforces the delta-model identities on combined predictions and on the
marginal effect profile.
"""

import numpy as np
import pandas as pd
from deltagam.contracts.base import require


PREDICTION_COLUMNS = ("positive_prediction", "binary_prediction", "combined_prediction")


def assert_combined_predictions(df: pd.DataFrame, rtol: float = 1e-9) -> None:
    """Enforce combiner contract.

    Called after combine_predictions(). Verifies the three prediction columns
    exist and satisfy the hurdle identities.

    Parameters
    ----------
    df : pd.DataFrame
        Output of combine_predictions().
    rtol : float, optional
        Relative tolerance on the product identity.

    Raises
    ------
    ContractViolation
        If a column is missing, a probability leaves [0, 1], a magnitude is
        negative, or combined != binary * positive.
    """
    for col in PREDICTION_COLUMNS:
        require(
            col in df.columns,
            f"Prediction contract violated: missing '{col}' column"
        )

    positive = df["positive_prediction"].to_numpy(dtype=float)
    binary = df["binary_prediction"].to_numpy(dtype=float)
    combined = df["combined_prediction"].to_numpy(dtype=float)

    require(
        bool(np.all((binary >= 0) & (binary <= 1))),
        "Prediction contract violated: binary_prediction outside [0, 1]"
    )
    require(
        bool(np.all(positive >= 0)),
        "Prediction contract violated: negative positive_prediction"
    )
    require(
        np.allclose(combined, binary * positive, rtol=rtol, atol=0.0),
        "Prediction contract violated: combined_prediction != binary * positive"
    )


def assert_profile(df: pd.DataFrame, rtol: float = 1e-9) -> None:
    """Enforce marginal profile contract.

    The combined curve equals the product of the two estimates and lies
    between zero and the magnitude curve at every depth.
    """
    for col in ("depth", "positive_estimate", "binary_estimate", "combined_estimate"):
        require(
            col in df.columns,
            f"Profile contract violated: missing '{col}' column"
        )
    positive = df["positive_estimate"].to_numpy(dtype=float)
    binary = df["binary_estimate"].to_numpy(dtype=float)
    combined = df["combined_estimate"].to_numpy(dtype=float)
    require(
        np.allclose(combined, binary * positive, rtol=rtol, atol=0.0),
        "Profile contract violated: combined_estimate != binary * positive"
    )
    require(
        bool(np.all((combined >= 0) & (combined <= positive * (1 + rtol)))),
        "Profile contract violated: combined_estimate outside [0, positive_estimate]"
    )
    require(
        bool(np.all(np.diff(df["depth"].to_numpy(dtype=float)) >= 0)),
        "Profile contract violated: depth sequence is not sorted"
    )
