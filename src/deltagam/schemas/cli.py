"""CLIConfig: Command-line operational overrides.

Minimal configuration for parameters that commonly change between runs:
input tables, output directory, model variant, verbosity.

This schema handles command-line arguments parsed by argparse.
"""

from typing import Literal, Optional
from pydantic import field_validator
from deltagam.schemas.base import DeltaBaseModel
from deltagam.schemas.user import normalize_model_kind


class CLIConfig(DeltaBaseModel):
    """Command-line configuration overrides.
    
    Operational-only settings that override user and param configs.
    Highest priority in config resolution.
    
    Usage
    -----
        cli_cfg = CLIConfig(
            observations="data/tows.csv",
            model="gam",
            base_dir="/scratch/deltagam_output",
        )
        
        internal = resolve_config(param_cfg, user_cfg, cli_cfg)
    """
    
    observations: Optional[str] = None
    grid: Optional[str] = None
    base_dir: Optional[str] = None
    model: Optional[str] = None
    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]] = None
    no_plots: bool = False

    @field_validator("model", mode="before")
    @classmethod
    def normalize_model(cls, v):
        """Accept glm/gam shorthand."""
        return normalize_model_kind(v)
    
    def to_internal_overrides(self) -> dict:
        """Convert CLI config to internal config structure.
        
        Returns
        -------
        dict
            Nested dictionary matching InternalConfig structure
        """
        overrides = {}
        
        if self.observations is not None:
            overrides["observations_path"] = str(self.observations)
        if self.grid is not None:
            overrides["grid_path"] = str(self.grid)
        if self.base_dir is not None:
            overrides["base_dir"] = str(self.base_dir)
        
        if self.model is not None:
            overrides["presence"] = {"kind": self.model}
            overrides["magnitude"] = {"kind": self.model}
        
        if self.log_level is not None:
            overrides["logging"] = {"level": self.log_level}
        
        if self.no_plots:
            overrides["visualization"] = {"enabled": False}
        
        return overrides
