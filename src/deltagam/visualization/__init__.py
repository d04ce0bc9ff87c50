"""Visualization of delta model predictions and diagnostics."""

from deltagam.visualization.plotter import DeltaPlotter, grid_to_dataarray

__all__ = ['DeltaPlotter', 'grid_to_dataarray']
