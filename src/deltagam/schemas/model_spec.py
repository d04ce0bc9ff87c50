"""Model specifications shared by the presence and magnitude estimators.

A model specification is a tagged variant: ``kind`` selects the covariate
structure and the fitting engine behind it.

- ``linear``: intercept plus a polynomial in standardized depth, fitted as a
  GLM with statsmodels.
- ``additive_spatial``: the same depth polynomial plus a tensor-product
  smooth over (x, y), fitted as a GAM with pygam. The smooth carries one
  basis size and one penalty per axis, so wiggliness may differ along x
  and y (anisotropic).
"""

from typing import Annotated, Literal, Union

from pydantic import Field, field_validator

from deltagam.schemas.base import DeltaBaseModel


class LinearSpec(DeltaBaseModel):
    """Polynomial-in-depth GLM."""
    kind: Literal["linear"] = "linear"
    depth_degree: int = Field(2, ge=0, le=5, description="Highest depth power (0 = intercept only)")


class AdditiveSpatialSpec(DeltaBaseModel):
    """Polynomial-in-depth plus anisotropic te(x, y) smooth GAM."""
    kind: Literal["additive_spatial"] = "additive_spatial"
    depth_degree: int = Field(2, ge=0, le=5)
    n_splines: tuple[int, int] = (10, 10)
    lam: tuple[float, float] = (0.6, 0.6)
    linear_lam: float = Field(0.0, ge=0, description="Ridge penalty on the depth terms")
    max_iter: int = Field(100, ge=1)

    @field_validator("n_splines")
    @classmethod
    def check_n_splines(cls, v):
        """Cubic B-splines need more basis functions than their order."""
        if min(v) < 4:
            raise ValueError(f"n_splines must be >= 4 along each axis, got {v}")
        return v

    @field_validator("lam")
    @classmethod
    def check_lam(cls, v):
        """Smoothing penalties are non-negative."""
        if min(v) < 0:
            raise ValueError(f"lam must be non-negative, got {v}")
        return v


ModelSpec = Annotated[
    Union[LinearSpec, AdditiveSpatialSpec],
    Field(discriminator="kind"),
]
