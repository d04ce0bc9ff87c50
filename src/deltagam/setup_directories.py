"""
Directory setup for delta model runs.

Flat layout under one base directory:
- tables/ : prediction, residual and profile CSVs plus run summaries
- plots/  : rendered maps and profiles
- logs/   : pipeline log files
File names carry the model variant tag so GLM and GAM runs sit side by side.
"""

from pathlib import Path


def setup_output_directories(base_output_dir=None):
    """
    Set up organized output directory structure.
    
    Parameters
    ----------
    base_output_dir : str or Path, optional
        Base output directory. If None, ``./output`` is used.
    
    Returns
    -------
    dict
        Dictionary with paths: 'base', 'tables', 'plots', 'logs'
    """
    if base_output_dir is None:
        base_output_dir = Path.cwd() / "output"
    
    base_output_dir = Path(base_output_dir).expanduser().resolve()
    
    directories = {
        "base": base_output_dir,
        "tables": base_output_dir / "tables",
        "plots": base_output_dir / "plots",
        "logs": base_output_dir / "logs",
    }
    
    for path in directories.values():
        path.mkdir(parents=True, exist_ok=True)
    
    return directories


def get_table_path(output_dirs, stem, tag, suffix="csv"):
    """
    Get path of an output table.
    
    Example
    -------
    >>> get_table_path(dirs, "predictions", "additive_spatial")
    Path('output/tables/predictions_additive_spatial.csv')
    """
    return Path(output_dirs["tables"]) / f"{stem}_{tag}.{suffix}"


def get_plot_path(output_dirs, stem, tag, output_format="png"):
    """
    Get path of a rendered figure.
    
    Example
    -------
    >>> get_plot_path(dirs, "combined_prediction", "linear")
    Path('output/plots/combined_prediction_linear.png')
    """
    return Path(output_dirs["plots"]) / f"{stem}_{tag}.{output_format}"
