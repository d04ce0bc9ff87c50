"""InternalConfig: Authoritative runtime configuration.

This is the ONLY config schema that runtime code sees. It is fully validated,
normalized, and contains NO optional fields that processing code depends on.

All .get() calls, fallback defaults, and validation logic are FORBIDDEN in
runtime code - everything is explicit here.
"""

from typing import Literal, Optional
from pydantic import ConfigDict
from deltagam.schemas.base import DeltaBaseModel
from deltagam.schemas.model_spec import ModelSpec


# =============================================================================
# Nested Configuration Models (Runtime)
# =============================================================================

class InternalDataConfig(DeltaBaseModel):
    """Runtime input table configuration."""
    x_col: str
    y_col: str
    depth_col: str
    density_col: str
    coord_scale: float
    y_cutoff: Optional[float]


class InternalProfileConfig(DeltaBaseModel):
    """Runtime marginal profile configuration."""
    n_points: int
    ci_multiplier: float


class InternalVisualizationConfig(DeltaBaseModel):
    """Runtime visualization settings."""
    enabled: bool
    dpi: int
    figsize: tuple[float, float]
    output_format: Literal["png", "pdf", "jpeg"]
    prediction_cmap: str
    residual_cmap: str
    point_size_scale: float
    point_alpha: float


class InternalOutputConfig(DeltaBaseModel):
    """Runtime output configuration."""
    save_tables: bool
    float_format: str


class InternalLoggingConfig(DeltaBaseModel):
    """Runtime logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


# =============================================================================
# Main InternalConfig
# =============================================================================

class InternalConfig(DeltaBaseModel):
    """Authoritative runtime configuration.
    
    This is the ONLY configuration schema that processing code sees.
    It is fully validated, immutable, and contains explicit values for
    all parameters.
    
    Usage
    -----
    Runtime modules receive InternalConfig and access fields directly:
    
        def __init__(self, config: InternalConfig):
            self.n_points = config.profile.n_points  # NOT .get()
            self.presence_spec = config.presence
    
    Rules
    -----
    - NO .get() calls
    - NO fallback defaults
    - NO validation
    
    All of that happens during config resolution, not in runtime code.
    Input paths stay Optional because in-memory runs do not need them;
    the orchestrator checks them before reading files.
    """
    
    observations_path: Optional[str]
    grid_path: Optional[str]
    base_dir: Optional[str]
    data: InternalDataConfig
    presence: ModelSpec
    magnitude: ModelSpec
    profile: InternalProfileConfig
    visualization: InternalVisualizationConfig
    output: InternalOutputConfig
    logging: InternalLoggingConfig
    
    model_config = ConfigDict(
        extra='forbid',
        validate_assignment=True,
        use_enum_values=True,
        str_strip_whitespace=True,
        frozen=True,  # Immutable after construction
    )
