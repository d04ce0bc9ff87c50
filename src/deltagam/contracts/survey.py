"""Survey stage contracts.

Enforces the guarantees of the loader: observations carry a consistent
presence label, and the prediction grid never leaves the observed support.
"""

from typing import Optional, Tuple

import numpy as np
import pandas as pd
from deltagam.contracts.base import require


OBSERVATION_COLUMNS = ("x", "y", "depth", "density", "present")
SITE_COLUMNS = ("x", "y", "depth")


def assert_observations(df: pd.DataFrame) -> None:
    """Enforce observation contract.

    Parameters
    ----------
    df : pd.DataFrame
        Output of the survey loader.

    Raises
    ------
    ContractViolation
        If a column is missing, a density is negative, or ``present``
        disagrees with ``density > 0`` on any row.
    """
    for col in OBSERVATION_COLUMNS:
        require(
            col in df.columns,
            f"Observation contract violated: missing '{col}' column"
        )
    require(
        len(df) > 0,
        "Observation contract violated: no observations"
    )
    require(
        bool((df["density"] >= 0).all()),
        "Observation contract violated: negative density"
    )
    mismatched = int((df["present"].astype(bool) != (df["density"] > 0)).sum())
    require(
        mismatched == 0,
        f"Observation contract violated: {mismatched} rows where present != (density > 0)"
    )


def assert_sites(df: pd.DataFrame) -> None:
    """Enforce that a site table has coordinates and depth."""
    for col in SITE_COLUMNS:
        require(
            col in df.columns,
            f"Site contract violated: missing '{col}' column"
        )


def assert_grid_within_support(
    grid: pd.DataFrame,
    depth_range: Tuple[float, float],
    y_cutoff: Optional[float] = None,
) -> None:
    """Enforce that the filtered grid does not extrapolate.

    Parameters
    ----------
    grid : pd.DataFrame
        Filtered prediction grid.
    depth_range : tuple of float
        (min, max) observed depth.
    y_cutoff : float, optional
        Sites with ``y <= y_cutoff`` must be absent.

    Raises
    ------
    ContractViolation
        If any site lies outside the observed depth range or at/below the
        latitude cutoff.
    """
    assert_sites(grid)
    depth_min, depth_max = depth_range
    outside = int(((grid["depth"] < depth_min) | (grid["depth"] > depth_max)).sum())
    require(
        outside == 0,
        f"Grid contract violated: {outside} sites outside depth range "
        f"[{depth_min:g}, {depth_max:g}]"
    )
    if y_cutoff is not None:
        below = int((grid["y"] <= y_cutoff).sum())
        require(
            below == 0,
            f"Grid contract violated: {below} sites at or below y cutoff {y_cutoff:g}"
        )
    require(
        bool(np.isfinite(grid[list(SITE_COLUMNS)].to_numpy(dtype=float)).all()),
        "Grid contract violated: non-finite coordinates or depth"
    )
