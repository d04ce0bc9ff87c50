"""Delta model visualization.

Renders prediction rasters over the grid, observation and residual maps,
and the marginal depth profile to image files.
"""

import logging
from pathlib import Path
from typing import Dict, Optional, TYPE_CHECKING

import numpy as np
import pandas as pd
import xarray as xr
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
from matplotlib.colors import TwoSlopeNorm

from deltagam.setup_directories import get_plot_path

if TYPE_CHECKING:
    from deltagam.schemas import InternalConfig
    from deltagam.pipeline.delta import DeltaModelResult

__all__ = ['DeltaPlotter', 'grid_to_dataarray']

logger = logging.getLogger(__name__)

PREDICTION_LABELS = {
    "positive_prediction": "Expected density | present",
    "binary_prediction": "Probability present",
    "combined_prediction": "Expected density",
}


def grid_to_dataarray(predictions: pd.DataFrame, column: str) -> xr.DataArray:
    """Pivot a long prediction table onto a (y, x) raster.

    Sites missing from an irregular grid become NaN cells; duplicate
    coordinates are averaged.
    """
    return (
        predictions.groupby(["y", "x"])[column]
        .mean()
        .to_xarray()
        .rename(column)
    )


class DeltaPlotter:
    """Generates maps and profiles for delta model results.

    **Prediction maps:** one raster per prediction column (presence
    probability, conditional magnitude, combined density) drawn with
    pcolormesh over the gridded sites.

    **Observation map:** tows as points; absences as small grey crosses,
    positives coloured and sized by density.

    **Residual map:** positive tows coloured by link-scale residual on a
    diverging scale centred at zero, to expose spatial clustering.

    **Depth profile:** magnitude and presence curves with their intervals,
    and the combined curve (no interval).

    Example usage::

        plotter = DeltaPlotter(config)
        paths = plotter.plot_result(result, output_dirs)
    """

    def __init__(self, config: "InternalConfig"):
        viz = config.visualization
        self.dpi = viz.dpi
        self.figsize = tuple(viz.figsize)
        self.output_format = viz.output_format
        self.prediction_cmap = viz.prediction_cmap
        self.residual_cmap = viz.residual_cmap
        self.point_size_scale = viz.point_size_scale
        self.point_alpha = viz.point_alpha

        logger.debug("DeltaPlotter initialized (format=%s, dpi=%d)", self.output_format, self.dpi)

    def _save(self, fig: plt.Figure, output_path) -> Path:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(output_path, dpi=self.dpi, bbox_inches="tight")
        plt.close(fig)
        logger.info("Saved plot: %s", output_path)
        return output_path

    def _setup_map_axes(self, ax: plt.Axes, title: str) -> None:
        ax.set_aspect("equal")
        ax.set_xlabel("x")
        ax.set_ylabel("y")
        ax.set_title(title)

    def plot_prediction_map(
        self,
        predictions: pd.DataFrame,
        column: str,
        output_path,
        title: Optional[str] = None,
    ) -> Path:
        """Raster heatmap of one prediction column over the grid."""
        da = grid_to_dataarray(predictions, column)

        fig, ax = plt.subplots(figsize=self.figsize)
        mesh = ax.pcolormesh(
            da["x"].values,
            da["y"].values,
            np.ma.masked_invalid(da.values),
            cmap=self.prediction_cmap,
            shading="auto",
        )
        fig.colorbar(mesh, ax=ax, label=PREDICTION_LABELS.get(column, column),
                     fraction=0.046, pad=0.04)
        self._setup_map_axes(ax, title or PREDICTION_LABELS.get(column, column))
        return self._save(fig, output_path)

    def plot_observations(self, observations: pd.DataFrame, output_path) -> Path:
        """Tows coloured and sized by density."""
        absent = observations.loc[observations["density"] <= 0]
        present = observations.loc[observations["density"] > 0]

        fig, ax = plt.subplots(figsize=self.figsize)
        ax.scatter(absent["x"], absent["y"], marker="x", s=8, c="0.6",
                   linewidths=0.6, label="absent")
        if len(present):
            sizes = self.point_size_scale * np.sqrt(present["density"] / present["density"].max())
            points = ax.scatter(
                present["x"], present["y"],
                s=sizes, c=present["density"],
                cmap=self.prediction_cmap, alpha=self.point_alpha,
                edgecolors="none", label="present",
            )
            fig.colorbar(points, ax=ax, label="Observed density", fraction=0.046, pad=0.04)
        ax.legend(loc="best", fontsize=8)
        self._setup_map_axes(ax, "Observed density")
        return self._save(fig, output_path)

    def plot_residual_map(self, residuals: pd.DataFrame, output_path, title: Optional[str] = None) -> Path:
        """Positive tows coloured by magnitude-model residual."""
        r = residuals["residual"].to_numpy(dtype=float)
        bound = float(np.nanmax(np.abs(r))) if r.size else 1.0
        bound = bound if bound > 0 else 1.0
        norm = TwoSlopeNorm(vcenter=0.0, vmin=-bound, vmax=bound)

        fig, ax = plt.subplots(figsize=self.figsize)
        points = ax.scatter(
            residuals["x"], residuals["y"],
            c=r, cmap=self.residual_cmap, norm=norm,
            s=self.point_size_scale * 0.5, alpha=self.point_alpha, edgecolors="none",
        )
        fig.colorbar(points, ax=ax, label="Residual (log scale)", fraction=0.046, pad=0.04)
        self._setup_map_axes(ax, title or "Magnitude model residuals")
        return self._save(fig, output_path)

    def plot_marginal_profile(self, profile: pd.DataFrame, output_path) -> Path:
        """Depth effect of each model and of their product."""
        depth = profile["depth"]
        fig, axes = plt.subplots(1, 3, figsize=(self.figsize[0] * 1.6, self.figsize[1] * 0.7))

        ax = axes[0]
        ax.fill_between(depth, profile["positive_lower"], profile["positive_upper"],
                        color="C0", alpha=0.25, linewidth=0)
        ax.plot(depth, profile["positive_estimate"], color="C0")
        ax.set_ylabel("Expected density | present")

        ax = axes[1]
        ax.fill_between(depth, profile["binary_lower"], profile["binary_upper"],
                        color="C1", alpha=0.25, linewidth=0)
        ax.plot(depth, profile["binary_estimate"], color="C1")
        ax.set_ylim(0, 1)
        ax.set_ylabel("Probability present")

        ax = axes[2]
        ax.plot(depth, profile["combined_estimate"], color="C2")
        ax.set_ylabel("Expected density")

        for ax in axes:
            ax.set_xlabel("Depth")
        fig.tight_layout()
        return self._save(fig, output_path)

    def plot_result(self, result: "DeltaModelResult", output_dirs: Dict[str, Path],
                    observations: Optional[pd.DataFrame] = None) -> Dict[str, Path]:
        """Render every figure for one delta model result.

        Returns
        -------
        dict
            Plot name -> written path.
        """
        tag = result.tag
        paths = {}
        for column in PREDICTION_LABELS:
            paths[column] = self.plot_prediction_map(
                result.predictions, column,
                get_plot_path(output_dirs, column, tag, self.output_format),
                title=f"{PREDICTION_LABELS[column]} ({tag})",
            )
        paths["residuals"] = self.plot_residual_map(
            result.residuals,
            get_plot_path(output_dirs, "residuals", tag, self.output_format),
            title=f"Magnitude model residuals ({tag})",
        )
        paths["profile"] = self.plot_marginal_profile(
            result.profile,
            get_plot_path(output_dirs, "depth_profile", tag, self.output_format),
        )
        if observations is not None:
            paths["observations"] = self.plot_observations(
                observations,
                get_plot_path(output_dirs, "observations", tag, self.output_format),
            )
        return paths
