"""Shared pydantic base for every deltagam configuration layer."""

from pydantic import BaseModel, ConfigDict


class DeltaBaseModel(BaseModel):
    """Strict base for param, user, CLI, internal and model spec schemas.

    Unknown keys are errors, assignments are re-validated, and string
    values are stripped. Layers that must be forgiving (UserConfig) or
    immutable (InternalConfig) adjust ``model_config`` themselves.
    """
    
    model_config = ConfigDict(
        extra='forbid',
        validate_assignment=True,
        use_enum_values=True,
        str_strip_whitespace=True,
    )
