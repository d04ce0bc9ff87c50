"""Batch orchestration of one delta model run.

Loads the survey tables named in configuration, runs the delta pipeline,
and persists tables, a JSON summary and figures under the output directories.
"""

import json
import logging
import math
from pathlib import Path
from typing import Dict, Optional

from deltagam.survey import SurveyDataLoader
from deltagam.pipeline.delta import DeltaModelResult, run_delta_model, variant_tag
from deltagam.setup_directories import get_table_path
from deltagam.visualization import DeltaPlotter

__all__ = ['DeltaOrchestrator', 'json_safe']

logger = logging.getLogger(__name__)


def json_safe(value):
    """Replace non-finite floats (NaN, inf) with None, recursively."""
    if isinstance(value, dict):
        return {key: json_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [json_safe(item) for item in value]
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


class DeltaOrchestrator:
    """Runs the delta model pipeline end to end from configuration.

    **Stages:**

    1. **Load**: read the observation and grid CSVs, rename and rescale
       columns, label presence, and restrict the grid to the observed depth
       range and latitude cutoff.

    2. **Model**: fit the presence and magnitude models with the configured
       specs, predict over the grid, and derive residuals and the marginal
       depth profile (:func:`~deltagam.pipeline.delta.run_delta_model`).

    3. **Persist**: write ``predictions_<tag>.csv``, ``residuals_<tag>.csv``,
       ``profile_<tag>.csv`` and ``summary_<tag>.json`` to ``tables/``.

    4. **Plot**: render maps and the profile to ``plots/`` when
       visualization is enabled.

    **Logging:**

    All output goes to both console and ``logs/deltagam_<tag>.log``.
    Log level controlled via ``config.logging.level``.

    Example usage::

        from deltagam.schemas import resolve_config, ParamConfig, UserConfig
        from deltagam.setup_directories import setup_output_directories

        config = resolve_config(ParamConfig(), UserConfig(OBSERVATIONS="tows.csv", GRID="grid.csv"))
        orch = DeltaOrchestrator(config, setup_output_directories(config.base_dir))
        result = orch.run()
    """

    def __init__(self, config, output_dirs: Dict[str, Path]):
        """Initialize orchestrator.

        Parameters
        ----------
        config : InternalConfig
            Resolved runtime configuration.
        output_dirs : dict
            Output directory paths created by ``setup_output_directories()``.
        """
        self.config = config
        self.output_dirs = output_dirs
        self.tag = variant_tag(config.presence, config.magnitude)
        self._file_handler: Optional[logging.Handler] = None

    def _setup_logging(self):
        """Configure root logger with file and console handlers."""
        log_level = getattr(logging, self.config.logging.level.upper(), logging.INFO)

        log_dir = Path(self.output_dirs["logs"])
        log_dir.mkdir(parents=True, exist_ok=True)
        log_path = log_dir / f"deltagam_{self.tag}.log"

        formatter = logging.Formatter(
            fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        # Clear existing handlers and add new ones
        root = logging.getLogger()
        root.setLevel(log_level)
        for handler in root.handlers[:]:
            root.removeHandler(handler)

        fh = logging.FileHandler(log_path)
        fh.setLevel(log_level)
        fh.setFormatter(formatter)
        root.addHandler(fh)
        self._file_handler = fh

        ch = logging.StreamHandler()
        ch.setLevel(log_level)
        ch.setFormatter(formatter)
        root.addHandler(ch)

        logger.info("Logging: level=%s, file=%s", self.config.logging.level, log_path)

    def _close_log_file(self):
        if self._file_handler is not None:
            logging.getLogger().removeHandler(self._file_handler)
            self._file_handler.close()
            self._file_handler = None

    def _require_inputs(self):
        missing = [
            name for name, value in (
                ("observations_path", self.config.observations_path),
                ("grid_path", self.config.grid_path),
            )
            if value is None
        ]
        if missing:
            raise ValueError(f"Configuration is missing input paths: {missing}")

    def save_result(self, result: DeltaModelResult) -> Dict[str, Path]:
        """Write result tables and the run summary.

        Returns
        -------
        dict
            Table name -> written path.
        """
        float_format = self.config.output.float_format
        tables = {
            "predictions": result.predictions,
            "residuals": result.residuals,
            "profile": result.profile,
        }
        paths = {}
        for stem, frame in tables.items():
            path = get_table_path(self.output_dirs, stem, result.tag)
            frame.to_csv(path, index=False, float_format=float_format)
            logger.info("Saved %s (%d rows): %s", stem, len(frame), path)
            paths[stem] = path

        summary_path = get_table_path(self.output_dirs, "summary", result.tag, suffix="json")
        summary = result.summary()
        summary["observations_path"] = self.config.observations_path
        summary["grid_path"] = self.config.grid_path
        with open(summary_path, "w") as f:
            json.dump(json_safe(summary), f, indent=2, allow_nan=False)
        logger.info("Saved summary: %s", summary_path)
        paths["summary"] = summary_path
        return paths

    def run(self) -> DeltaModelResult:
        """Execute the full pipeline once.

        Raises
        ------
        ValueError
            Missing input paths or malformed input tables.
        FileNotFoundError
            An input CSV does not exist.
        ModelFitError
            Either model cannot be fitted.
        """
        self._setup_logging()
        try:
            logger.info("=" * 60)
            logger.info("Starting delta model pipeline (%s)", self.tag)
            logger.info("=" * 60)

            self._require_inputs()
            loader = SurveyDataLoader(self.config)
            observations = loader.load_observations(self.config.observations_path)
            grid = loader.load_grid(self.config.grid_path, observations=observations)

            result = run_delta_model(
                observations,
                grid,
                self.config.presence,
                self.config.magnitude,
                n_points=self.config.profile.n_points,
                ci_multiplier=self.config.profile.ci_multiplier,
            )

            if self.config.output.save_tables:
                self.save_result(result)
            else:
                logger.info("Table output disabled")

            if self.config.visualization.enabled:
                DeltaPlotter(self.config).plot_result(result, self.output_dirs, observations=observations)
            else:
                logger.info("Visualization disabled")

            logger.info("✓ Delta model pipeline complete (%s)", self.tag)
            return result
        finally:
            self._close_log_file()
