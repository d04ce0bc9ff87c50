"""ParamConfig: Expert defaults for the delta model pipeline.

This module defines the complete default configuration. ALL pipeline
parameters must have defaults here. No runtime code should define fallback
values - this is the single source of truth for defaults.

Runtime code NEVER reads from ParamConfig directly - it only receives InternalConfig.
"""

from typing import Literal, Optional
from pydantic import Field, field_validator
from deltagam.schemas.base import DeltaBaseModel
from deltagam.schemas.model_spec import ModelSpec, LinearSpec


# =============================================================================
# Nested Configuration Models
# =============================================================================

class DataConfig(DeltaBaseModel):
    """Input table layout and support filtering."""
    x_col: str = "X"
    y_col: str = "Y"
    depth_col: str = "depth"
    density_col: str = "density"
    coord_scale: float = Field(10.0, gt=0, description="Divisor applied to both coordinates")
    y_cutoff: Optional[float] = Field(None, description="Drop grid sites with y <= cutoff (scaled units); None disables the latitude filter")

    @field_validator("coord_scale", mode="before")
    @classmethod
    def coerce_coord_scale_to_float(cls, v):
        """Allow int or float for coord_scale."""
        return float(v)


class ProfileConfig(DeltaBaseModel):
    """Marginal depth-effect profile settings."""
    n_points: int = Field(100, ge=2)
    ci_multiplier: float = Field(1.96, gt=0, description="Half-width in standard errors")


class VisualizationConfig(DeltaBaseModel):
    """Visualization settings."""
    enabled: bool = True
    dpi: int = Field(150, ge=50)
    figsize: tuple[float, float] = (8.0, 6.0)
    output_format: Literal["png", "pdf", "jpeg"] = "png"
    prediction_cmap: str = "viridis"
    residual_cmap: str = "RdBu_r"
    point_size_scale: float = Field(30.0, gt=0)
    point_alpha: float = Field(0.7, ge=0, le=1.0)


class OutputConfig(DeltaBaseModel):
    """Output file configuration."""
    save_tables: bool = True
    float_format: str = "%.6g"


class LoggingConfig(DeltaBaseModel):
    """Logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"


# =============================================================================
# Main ParamConfig
# =============================================================================

class ParamConfig(DeltaBaseModel):
    """Complete expert configuration with all defaults.
    
    This is the single source of truth for all pipeline parameters.
    Every tunable parameter MUST have a default here.
    
    Usage
    -----
    This config is NOT used directly by runtime code. It serves as the
    base layer in config resolution:
    
        internal_cfg = resolve_config(param_cfg, user_cfg, cli_cfg)
    
    Runtime code only sees InternalConfig.
    """
    
    observations_path: Optional[str] = None
    grid_path: Optional[str] = None
    base_dir: Optional[str] = None
    data: DataConfig = Field(default_factory=DataConfig)
    presence: ModelSpec = Field(default_factory=LinearSpec)
    magnitude: ModelSpec = Field(default_factory=LinearSpec)
    profile: ProfileConfig = Field(default_factory=ProfileConfig)
    visualization: VisualizationConfig = Field(default_factory=VisualizationConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
