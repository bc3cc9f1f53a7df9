"""Shared field types and the base class for input records."""

from enum import Enum
from typing import Dict

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from typing_extensions import Annotated


def _enum_value(value):
    return value.value if isinstance(value, Enum) else value


# Registry key (fuel type, ship type, grade); resolved by the engines so that
# unknown keys surface as UnsupportedCategoryError
CategoryKey = Annotated[str, BeforeValidator(_enum_value)]

# Non-negative, finite physical quantity (mass, distance, energy, days, price)
NonNegative = Annotated[float, Field(ge=0)]

Percent = Annotated[float, Field(ge=0, le=100)]

FuelMasses = Dict[CategoryKey, NonNegative]


class Record(BaseModel):
    """Immutable input record; rejects unknown fields and NaN/inf values."""
    model_config = ConfigDict(frozen=True, extra="forbid", allow_inf_nan=False)
