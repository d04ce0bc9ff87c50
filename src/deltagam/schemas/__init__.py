"""Pydantic configuration schemas for the delta model pipeline.

This module provides strictly typed configuration models for deltagam.
All configuration validation, coercion, and normalization happens at
schema validation time via Pydantic.

Exports
-------
resolve_config : function
    Single entrypoint for configuration resolution
InternalConfig : class
    Fully validated, authoritative runtime configuration
ParamConfig : class
    Expert defaults (complete)
UserConfig : class
    User-facing configuration (forgiving, minimal)
CLIConfig : class
    Command-line operational overrides
LinearSpec, AdditiveSpatialSpec, ModelSpec
    Model specification variants
"""

from deltagam.schemas.model_spec import LinearSpec, AdditiveSpatialSpec, ModelSpec
from deltagam.schemas.resolve import resolve_config
from deltagam.schemas.internal import InternalConfig
from deltagam.schemas.param import ParamConfig
from deltagam.schemas.user import UserConfig
from deltagam.schemas.cli import CLIConfig

__all__ = [
    'resolve_config',
    'InternalConfig',
    'ParamConfig',
    'UserConfig',
    'CLIConfig',
    'LinearSpec',
    'AdditiveSpatialSpec',
    'ModelSpec',
]
