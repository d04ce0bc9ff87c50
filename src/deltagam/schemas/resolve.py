"""Configuration resolution and merging logic.

This module provides the single entrypoint for configuration resolution:
resolve_config(). It merges ParamConfig, UserConfig, and CLIConfig in
the correct precedence order and returns a validated InternalConfig.

Precedence (highest to lowest):
1. CLIConfig (command-line overrides)
2. UserConfig (user file)
3. ParamConfig (expert defaults)
"""

from typing import Union, Optional
from deltagam.schemas.param import ParamConfig
from deltagam.schemas.user import UserConfig
from deltagam.schemas.cli import CLIConfig
from deltagam.schemas.internal import InternalConfig


MODEL_SECTIONS = ("presence", "magnitude")

# Fields every model spec variant understands
SHARED_SPEC_FIELDS = ("depth_degree",)


def deep_merge(base: dict, *overrides: dict) -> dict:
    """Deep merge multiple dictionaries.
    
    Later dictionaries override earlier ones. Nested dictionaries are
    merged recursively; other values are replaced.
    
    Parameters
    ----------
    base : dict
        Base dictionary (lowest priority)
    *overrides : dict
        Override dictionaries (higher priority, left to right)
    
    Returns
    -------
    dict
        Merged dictionary
    
    Examples
    --------
    >>> base = {"a": 1, "b": {"c": 2, "d": 3}}
    >>> override = {"b": {"d": 4, "e": 5}, "f": 6}
    >>> deep_merge(base, override)
    {'a': 1, 'b': {'c': 2, 'd': 4, 'e': 5}, 'f': 6}
    """
    result = base.copy()
    
    for override in overrides:
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                # Recursive merge for nested dicts
                result[key] = deep_merge(result[key], value)
            else:
                # Replace value
                result[key] = value
    
    return result


def merge_model_spec(base: dict, override: dict) -> dict:
    """Merge a model spec override into a base spec dict.

    When the override switches ``kind``, fields belonging only to the old
    variant are dropped so the new variant starts from its own defaults.
    Fields shared by every variant (``depth_degree``) carry over.

    Examples
    --------
    >>> merge_model_spec({"kind": "additive_spatial", "depth_degree": 1, "lam": (1, 1)},
    ...                  {"kind": "linear"})
    {'depth_degree': 1, 'kind': 'linear'}
    """
    new_kind = override.get("kind")
    if new_kind is not None and new_kind != base.get("kind"):
        base = {k: v for k, v in base.items() if k in SHARED_SPEC_FIELDS}
    return deep_merge(base, override)


def resolve_config(
    param_cfg: Union[dict, ParamConfig],
    user_cfg: Optional[Union[dict, UserConfig]] = None,
    cli_cfg: Optional[Union[dict, CLIConfig]] = None,
) -> InternalConfig:
    """Resolve final runtime configuration from param, user, and CLI configs.
    
    This is the SINGLE ENTRYPOINT for configuration resolution. It validates
    and merges configs in the correct precedence order, then returns an
    immutable InternalConfig for runtime use.
    
    Precedence (highest to lowest):
    1. CLIConfig (command-line overrides)
    2. UserConfig (user file overrides)
    3. ParamConfig (expert defaults)
    
    Parameters
    ----------
    param_cfg : dict or ParamConfig
        Expert configuration with complete defaults. Required.
    user_cfg : dict or UserConfig, optional
        User configuration with overrides. If None or empty, uses only param defaults.
    cli_cfg : dict or CLIConfig, optional
        Command-line overrides. If None or empty, no CLI overrides applied.
    
    Returns
    -------
    InternalConfig
        Fully validated, immutable runtime configuration
    
    Raises
    ------
    ValidationError
        If any config fails Pydantic validation
    
    Examples
    --------
    >>> from deltagam.schemas import resolve_config, ParamConfig, UserConfig
    >>> 
    >>> # User wants the spatial GAM for both models
    >>> user = UserConfig(MODEL="gam", OBSERVATIONS="tows.csv")
    >>> 
    >>> config = resolve_config(ParamConfig(), user)
    >>> config.presence.kind
    'additive_spatial'
    >>> config.observations_path
    'tows.csv'
    """
    # Validate/convert inputs to Pydantic models
    if not isinstance(param_cfg, ParamConfig):
        param = ParamConfig.model_validate(param_cfg)
    else:
        param = param_cfg
    
    if user_cfg is None or (isinstance(user_cfg, dict) and not user_cfg):
        user = UserConfig()
    elif not isinstance(user_cfg, UserConfig):
        user = UserConfig.model_validate(user_cfg)
    else:
        user = user_cfg
    
    if cli_cfg is None or (isinstance(cli_cfg, dict) and not cli_cfg):
        cli = CLIConfig()
    elif not isinstance(cli_cfg, CLIConfig):
        cli = CLIConfig.model_validate(cli_cfg)
    else:
        cli = cli_cfg
    
    param_dict = param.model_dump()
    user_overrides = user.to_internal_overrides()
    cli_overrides = cli.to_internal_overrides()
    
    # Model specs are tagged variants; merge them separately
    spec_sections = {}
    for section in MODEL_SECTIONS:
        spec = param_dict.pop(section)
        for overrides in (user_overrides, cli_overrides):
            if section in overrides:
                spec = merge_model_spec(spec, overrides[section])
        spec_sections[section] = spec
    
    user_overrides = {k: v for k, v in user_overrides.items() if k not in MODEL_SECTIONS}
    cli_overrides = {k: v for k, v in cli_overrides.items() if k not in MODEL_SECTIONS}
    
    # Deep merge: param < user < cli
    merged = deep_merge(param_dict, user_overrides, cli_overrides)
    merged.update(spec_sections)
    
    # Validate and freeze as InternalConfig
    return InternalConfig.model_validate(merged)
