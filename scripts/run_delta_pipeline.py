#!/usr/bin/env python3
"""``deltagam`` delta model pipeline runner.

Usage:
    python scripts/run_delta_pipeline.py scripts/user_config.py
    python scripts/run_delta_pipeline.py scripts/user_config.py --model gam
    python scripts/run_delta_pipeline.py scripts/user_config.py --observations tows.csv --grid grid.csv

Note: User config in scripts/user_config.py, expert defaults in src/deltagam/schemas/param.py
"""

import argparse

from deltagam.cli import run_delta_pipeline


def main():
    parser = argparse.ArgumentParser(description="Fit a delta-Gamma hurdle model and predict over a grid")
    parser.add_argument("config", help="Path to user config file")
    parser.add_argument("--observations", help="Observation CSV (overrides config)")
    parser.add_argument("--grid", help="Prediction grid CSV (overrides config)")
    parser.add_argument("--base-dir", help="Output directory")
    parser.add_argument("--model", choices=["glm", "gam", "linear", "additive_spatial"],
                        help="Model variant for both presence and magnitude")
    parser.add_argument("--no-plots", action="store_true", help="Skip figure rendering")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    run_delta_pipeline(
        args.config,
        cli_args={
            "observations": args.observations,
            "grid": args.grid,
            "base_dir": args.base_dir,
            "model": args.model,
            "no_plots": args.no_plots or None,
        },
        verbose=args.verbose,
    )


if __name__ == "__main__":
    main()
