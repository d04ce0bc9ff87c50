"""deltagam User Configuration.

This is the user-facing configuration file. Modify settings here to customize
the pipeline behavior. Advanced settings are in src/deltagam/schemas/param.py

Usage:
    python scripts/run_delta_pipeline.py scripts/user_config.py
    python scripts/run_delta_pipeline.py scripts/user_config.py --model gam
"""

CONFIG = {
    # ========================================================================
    # INPUTS & OUTPUTS
    # ========================================================================
    "OBSERVATIONS": "data/survey_tows.csv",   # columns X, Y, depth, density
    "GRID": "data/prediction_grid.csv",       # columns X, Y, depth
    "BASE_DIR": "output",                     # All outputs go here

    # ========================================================================
    # MODEL
    # ========================================================================
    "MODEL": "glm",           # "glm" (depth polynomial) or "gam" (+ te(x, y) smooth)
    "DEPTH_DEGREE": 2,        # Polynomial degree in standardized depth

    # ========================================================================
    # DATA
    # ========================================================================
    "COORD_SCALE": 10,        # Coordinates are divided by this value
    "Y_CUTOFF": None,         # Drop grid sites with y <= cutoff (scaled units)

    # ========================================================================
    # ADVANCED (nested overrides)
    # ========================================================================
    # "magnitude": {"n_splines": (12, 8), "lam": (0.6, 1.0)},
    # "visualization": {"output_format": "pdf"},
}
