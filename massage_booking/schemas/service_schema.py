"""Service tier catalog model."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class ServiceTier(BaseModel):
    """A named massage offering with a base price and a linear surcharge.

    ``increment_minutes`` must be positive; a tier that violates the
    constraints is a catalog configuration error and fails validation
    before it can ever be priced.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    name: str = Field(min_length=1)
    base_duration_minutes: int = Field(gt=0)
    base_price: Decimal = Field(gt=0, decimal_places=2)
    increment_minutes: int = Field(gt=0)
    increment_price: Decimal = Field(ge=0, decimal_places=2)
    active: bool = True
