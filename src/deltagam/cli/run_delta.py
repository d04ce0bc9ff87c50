"""Core delta model pipeline execution logic.

This module contains the actual pipeline runner, separated from argument parsing.
Scripts are thin wrappers; this is the real implementation.
"""

import json
import logging
import importlib.util
from pathlib import Path
from typing import Optional, Dict, Any

from deltagam.setup_directories import setup_output_directories
from deltagam.pipeline.orchestrator import DeltaOrchestrator
from deltagam.pipeline.delta import DeltaModelResult
from deltagam.schemas import resolve_config, ParamConfig, UserConfig, CLIConfig


logger = logging.getLogger(__name__)


def load_user_config_dict(config_path: str) -> dict:
    """Load user config dict from Python file.
    
    Returns the raw dict before Pydantic validation.
    
    Parameters
    ----------
    config_path : str
        Path to user config Python file containing CONFIG dict.
        
    Returns
    -------
    dict
        Raw user configuration dictionary.
        
    Raises
    ------
    FileNotFoundError
        If config file does not exist.
    ValueError
        If no CONFIG dict found in file.
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")
    
    spec = importlib.util.spec_from_file_location("config_module", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    
    for name in dir(module):
        if name.startswith('CONFIG'):
            obj = getattr(module, name)
            if isinstance(obj, dict):
                return obj
    
    raise ValueError(f"No CONFIG dict found in {path}")


def run_delta_pipeline(
    user_config_path: str,
    cli_args: Optional[Dict[str, Any]] = None,
    verbose: bool = False
) -> DeltaModelResult:
    """Execute the delta model pipeline once.
    
    1. Loads and resolves configuration (Param < User < CLI)
    2. Sets up output directories
    3. Runs the orchestrator (load, fit, predict, save, plot)
    
    Parameters
    ----------
    user_config_path : str
        Path to user config file (Python file with CONFIG dict).
        
    cli_args : dict, optional
        CLI argument overrides. Keys: observations, grid, base_dir, model,
        log_level, no_plots. All optional.
        
    verbose : bool, optional
        If True, enable DEBUG logging and print full resolved config.
    
    Returns
    -------
    DeltaModelResult
        
    Raises
    ------
    FileNotFoundError
        If the config file or an input table does not exist.
    ValueError
        If configuration validation fails or inputs are malformed.
    ModelFitError
        If either model cannot be fitted.
        
    Examples
    --------
    Run the GLM variant from a user config::
    
        run_delta_pipeline("scripts/user_config.py")
        
    Run the spatial GAM variant into a separate directory::
    
        run_delta_pipeline(
            "scripts/user_config.py",
            cli_args={"model": "gam", "base_dir": "output_gam"},
        )
    """
    param_cfg = ParamConfig()  # Expert defaults
    
    user_cfg_dict = load_user_config_dict(user_config_path)
    user_cfg = UserConfig.model_validate(user_cfg_dict)
    
    cli_args = dict(cli_args or {})
    if verbose and "log_level" not in cli_args:
        cli_args["log_level"] = "DEBUG"
    
    # Filter None values
    cli_dict = {k: v for k, v in cli_args.items() if v is not None}
    cli_cfg = CLIConfig.model_validate(cli_dict) if cli_dict else CLIConfig()
    
    config = resolve_config(param_cfg, user_cfg, cli_cfg)
    
    output_dirs = setup_output_directories(config.base_dir)
    
    print(f"\n{'='*60}")
    print("Delta-Gamma Hurdle Model Pipeline")
    print('='*60)
    print(f"Config:       {user_config_path}")
    print(f"Observations: {config.observations_path}")
    print(f"Grid:         {config.grid_path}")
    print(f"Presence:     {config.presence.kind}")
    print(f"Magnitude:    {config.magnitude.kind}")
    print(f"Output:       {output_dirs['base']}")
    print('='*60)

    if verbose:
        print("\nFull Internal Configuration:")
        print(json.dumps(config.model_dump(), indent=2))
        print('='*60)
    
    orchestrator = DeltaOrchestrator(config, output_dirs)
    return orchestrator.run()
