"""Read survey tows and prediction grids into normalized pandas tables.

This module handles loading the two input tables of a delta model run and
bringing them onto a common footing:

- Renames configured columns to the canonical ``x``, ``y``, ``depth``,
  ``density`` names
- Divides both coordinate columns by the same ``coord_scale`` for numerical
  conditioning
- Derives ``present = density > 0`` for observations
- Restricts the prediction grid to the observed depth range and, when
  configured, to sites north of a latitude cutoff

Latitude support is set only by ``data.y_cutoff``. It defaults to ``None``,
in which case no site is dropped for its latitude, including sites north or
south of every observed tow. Set a cutoff to exclude a poorly sampled
southern edge.

Observation frames returned here are treated as immutable by every
downstream stage.
"""

from pathlib import Path
from typing import TYPE_CHECKING, Optional, Tuple, Union
import logging

import numpy as np
import pandas as pd

from deltagam.contracts import (
    assert_observations,
    assert_sites,
    assert_grid_within_support,
)

if TYPE_CHECKING:
    from deltagam.schemas import InternalConfig

__all__ = ['SurveyDataLoader', 'filter_grid_to_support', 'depth_support', 'mean_location']

logger = logging.getLogger(__name__)


def depth_support(observations: pd.DataFrame) -> Tuple[float, float]:
    """Observed (min, max) depth."""
    return float(observations["depth"].min()), float(observations["depth"].max())


def filter_grid_to_support(
    grid: pd.DataFrame,
    observations: pd.DataFrame,
    y_cutoff: Optional[float] = None,
) -> pd.DataFrame:
    """Drop grid sites outside the observed covariate support.

    Parameters
    ----------
    grid : pd.DataFrame
        Prediction sites with ``x``, ``y``, ``depth``.
    observations : pd.DataFrame
        Prepared observations; their depth range defines the support.
    y_cutoff : float, optional
        Sites with ``y <= y_cutoff`` are removed as well. ``None`` applies
        no latitude filter; the observed y range is not used as a bound.

    Returns
    -------
    pd.DataFrame
        New frame with a fresh index. The grid contract is enforced
        before returning.
    """
    depth_min, depth_max = depth_support(observations)
    keep = grid["depth"].between(depth_min, depth_max, inclusive="both")
    if y_cutoff is not None:
        keep &= grid["y"] > y_cutoff

    filtered = grid.loc[keep].reset_index(drop=True)
    logger.info(
        "Grid filtered to depth [%g, %g]%s: kept %d of %d sites",
        depth_min, depth_max,
        f" and y > {y_cutoff:g}" if y_cutoff is not None else "",
        len(filtered), len(grid),
    )

    assert_grid_within_support(filtered, (depth_min, depth_max), y_cutoff)
    return filtered


class SurveyDataLoader:
    """Load and normalize observation and prediction-grid tables.

    Configuration
    =============
    Reads the ``data`` section of InternalConfig:

    - ``x_col``, ``y_col``, ``depth_col``, ``density_col`` : source column names
    - ``coord_scale`` : divisor applied to both coordinates of both tables
    - ``y_cutoff`` : optional latitude cutoff for the grid (scaled units);
      ``None`` (default) leaves latitude unrestricted

    Examples
    --------
    >>> loader = SurveyDataLoader(config)
    >>> obs = loader.load_observations("data/tows.csv")
    >>> grid = loader.load_grid("data/grid.csv", observations=obs)
    >>> obs["present"].mean()  # share of positive tows
    """

    def __init__(self, config: "InternalConfig"):
        self.config = config
        data_cfg = config.data
        self.x_col = data_cfg.x_col
        self.y_col = data_cfg.y_col
        self.depth_col = data_cfg.depth_col
        self.density_col = data_cfg.density_col
        self.coord_scale = data_cfg.coord_scale
        self.y_cutoff = data_cfg.y_cutoff

    def _read_csv(self, path: Union[str, Path]) -> pd.DataFrame:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Input table not found: {path}")
        df = pd.read_csv(path)
        logger.info("Read %d rows from %s", len(df), path)
        return df

    def _normalize(self, df: pd.DataFrame, columns: dict, kind: str) -> pd.DataFrame:
        """Select, rename, clean and rescale one table."""
        missing = [src for src in columns if src not in df.columns]
        if missing:
            raise ValueError(f"{kind} table is missing columns: {missing}")

        out = df[list(columns)].rename(columns=columns).astype(float)

        n_before = len(out)
        out = out.dropna().reset_index(drop=True)
        if len(out) < n_before:
            logger.warning("Dropped %d %s rows with missing values", n_before - len(out), kind)

        out["x"] = out["x"] / self.coord_scale
        out["y"] = out["y"] / self.coord_scale
        return out

    def prepare_observations(self, df: pd.DataFrame) -> pd.DataFrame:
        """Normalize an in-memory observation table.

        Raises
        ------
        ValueError
            If a configured column is missing or any density is negative.
        """
        columns = {
            self.x_col: "x",
            self.y_col: "y",
            self.depth_col: "depth",
            self.density_col: "density",
        }
        obs = self._normalize(df, columns, "observation")

        n_negative = int((obs["density"] < 0).sum())
        if n_negative:
            raise ValueError(f"Observation table has {n_negative} negative densities")

        obs["present"] = (obs["density"] > 0).astype(int)

        logger.info(
            "Observations: %d tows, %d positive (%.1f%%), depth %g-%g",
            len(obs), int(obs["present"].sum()), 100.0 * obs["present"].mean(),
            obs["depth"].min(), obs["depth"].max(),
        )
        assert_observations(obs)
        return obs

    def prepare_grid(
        self,
        df: pd.DataFrame,
        observations: Optional[pd.DataFrame] = None,
    ) -> pd.DataFrame:
        """Normalize an in-memory prediction grid.

        When ``observations`` is given, the grid is also restricted to their
        depth range and the configured latitude cutoff.
        """
        columns = {
            self.x_col: "x",
            self.y_col: "y",
            self.depth_col: "depth",
        }
        grid = self._normalize(df, columns, "grid")
        assert_sites(grid)

        if observations is None:
            return grid
        return filter_grid_to_support(grid, observations, self.y_cutoff)

    def load_observations(self, path: Union[str, Path]) -> pd.DataFrame:
        """Read and normalize the observation CSV."""
        return self.prepare_observations(self._read_csv(path))

    def load_grid(
        self,
        path: Union[str, Path],
        observations: Optional[pd.DataFrame] = None,
    ) -> pd.DataFrame:
        """Read, normalize and (optionally) filter the prediction-grid CSV."""
        return self.prepare_grid(self._read_csv(path), observations)


def mean_location(observations: pd.DataFrame) -> Tuple[float, float]:
    """Representative (x, y) used to pin space in one-dimensional profiles."""
    return float(np.mean(observations["x"])), float(np.mean(observations["y"]))
