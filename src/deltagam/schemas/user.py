"""UserConfig: Forgiving, minimal user-facing configuration.

This schema accepts user inputs in a variety of formats, with aliases
for common naming patterns (e.g., OBSERVATIONS → observations_path,
MODEL → presence.kind and magnitude.kind).

UserConfig is intentionally minimal - users only specify what they want
to override from the expert defaults. Validation is lenient to accept
both uppercase and lowercase keys, integers where floats are expected,
and the short model names "glm" and "gam".
"""

from typing import Any, Optional
from pydantic import Field, field_validator
from deltagam.schemas.base import DeltaBaseModel


# Short names accepted wherever a model kind is expected
MODEL_KIND_ALIASES = {
    "glm": "linear",
    "linear": "linear",
    "gam": "additive_spatial",
    "spatial": "additive_spatial",
    "additive_spatial": "additive_spatial",
}


def normalize_model_kind(v):
    """Map a user model name to its canonical kind."""
    if not isinstance(v, str):
        return v
    key = v.lower().strip().replace("-", "_")
    if key not in MODEL_KIND_ALIASES:
        raise ValueError(
            f"Unknown model '{v}', expected one of {sorted(MODEL_KIND_ALIASES)}"
        )
    return MODEL_KIND_ALIASES[key]


class UserDataConfig(DeltaBaseModel):
    """User-facing data config."""
    x_col: Optional[str] = None
    y_col: Optional[str] = None
    depth_col: Optional[str] = None
    density_col: Optional[str] = None
    coord_scale: Optional[float] = None
    y_cutoff: Optional[float] = None


class UserModelConfig(DeltaBaseModel):
    """User-facing model spec overrides (either variant)."""
    kind: Optional[str] = None
    depth_degree: Optional[int] = None
    n_splines: Optional[tuple[int, int]] = None
    lam: Optional[tuple[float, float]] = None
    linear_lam: Optional[float] = None
    max_iter: Optional[int] = None

    @field_validator("kind", mode="before")
    @classmethod
    def normalize_kind(cls, v):
        """Accept glm/gam shorthand."""
        return normalize_model_kind(v)


class UserProfileConfig(DeltaBaseModel):
    """User-facing profile config."""
    n_points: Optional[int] = None
    ci_multiplier: Optional[float] = None


class UserConfig(DeltaBaseModel):
    """User-facing configuration schema.
    
    Minimal, forgiving, and uses common aliases. Users only specify
    what they want to override from ParamConfig defaults.
    
    Usage
    -----
        user_cfg = UserConfig(
            observations="data/tows.csv",
            grid="data/grid.csv",
            base_dir="/data/deltagam",
            model="gam",
        )
        
        internal = resolve_config(param_cfg, user_cfg, cli_cfg)
    """
    
    # Inputs and outputs
    observations: Optional[str] = Field(None, alias="OBSERVATIONS")
    grid: Optional[str] = Field(None, alias="GRID")
    base_dir: Optional[str] = Field(None, alias="BASE_DIR")
    
    # Model settings (flat aliases)
    model: Optional[str] = Field(None, alias="MODEL")
    presence_model: Optional[str] = Field(None, alias="PRESENCE_MODEL")
    magnitude_model: Optional[str] = Field(None, alias="MAGNITUDE_MODEL")
    depth_degree: Optional[int] = Field(None, alias="DEPTH_DEGREE")
    
    # Data settings (flat aliases)
    coord_scale: Optional[float] = Field(None, alias="COORD_SCALE")
    y_cutoff: Optional[float] = Field(None, alias="Y_CUTOFF")
    
    # Profile settings (flat aliases)
    profile_points: Optional[int] = Field(None, alias="PROFILE_POINTS")
    
    log_level: Optional[str] = Field(None, alias="LOG_LEVEL")
    
    # Nested overrides (advanced users)
    data: Optional[UserDataConfig] = None
    presence: Optional[UserModelConfig] = None
    magnitude: Optional[UserModelConfig] = None
    profile: Optional[UserProfileConfig] = None
    visualization: Optional[dict[str, Any]] = None
    output: Optional[dict[str, Any]] = None
    
    model_config = DeltaBaseModel.model_config.copy()
    # Allow forgiving input dictionaries (ignore unknown legacy keys)
    model_config.update({"populate_by_name": True, "extra": "ignore"})

    @field_validator("model", "presence_model", "magnitude_model", mode="before")
    @classmethod
    def normalize_model_names(cls, v):
        """Accept glm/gam shorthand for model kinds."""
        return normalize_model_kind(v)

    @field_validator("coord_scale", "y_cutoff", mode="before")
    @classmethod
    def coerce_numeric_fields(cls, v):
        """Accept int or float for numeric fields."""
        if v is not None:
            return float(v)
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        """Log levels are uppercase."""
        if isinstance(v, str):
            return v.upper().strip()
        return v
    
    def _model_overrides(self, flat_kind: Optional[str], nested: Optional[UserModelConfig]) -> dict:
        """Build overrides for one model spec section."""
        section = {}
        if self.model is not None:
            section["kind"] = self.model
        if flat_kind is not None:
            section["kind"] = flat_kind
        if self.depth_degree is not None:
            section["depth_degree"] = self.depth_degree
        if nested is not None:
            section.update(nested.model_dump(exclude_none=True))
        return section

    def to_internal_overrides(self) -> dict:
        """Convert flat UserConfig to nested InternalConfig structure.
        
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
        
        # Data section
        data = {}
        if self.coord_scale is not None:
            data["coord_scale"] = self.coord_scale
        if self.y_cutoff is not None:
            data["y_cutoff"] = self.y_cutoff
        if self.data is not None:
            data.update(self.data.model_dump(exclude_none=True))
        if data:
            overrides["data"] = data
        
        # Model sections
        presence = self._model_overrides(self.presence_model, self.presence)
        if presence:
            overrides["presence"] = presence
        magnitude = self._model_overrides(self.magnitude_model, self.magnitude)
        if magnitude:
            overrides["magnitude"] = magnitude
        
        # Profile section
        profile = {}
        if self.profile_points is not None:
            profile["n_points"] = self.profile_points
        if self.profile is not None:
            profile.update(self.profile.model_dump(exclude_none=True))
        if profile:
            overrides["profile"] = profile
        
        if self.visualization:
            overrides["visualization"] = dict(self.visualization)
        if self.output:
            overrides["output"] = dict(self.output)
        
        if self.log_level is not None:
            overrides["logging"] = {"level": self.log_level}
        
        return overrides
