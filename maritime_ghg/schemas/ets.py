"""EU ETS voyage input records."""

from typing import Optional

from pydantic import Field

from ..config import settings
from .common import CategoryKey, FuelMasses, NonNegative, Record


class VoyageRecord(Record):
    """A reporting-period voyage between two ports."""
    origin_is_eu: bool = Field(..., description="Departure port in an EU/EEA member state")
    destination_is_eu: bool = Field(..., description="Arrival port in an EU/EEA member state")
    fuel_mt: FuelMasses = Field(default_factory=dict, description="Fossil fuel type -> MT")
    biofuel_mt: NonNegative = Field(0, description="Biofuel blend consumed (MT)")
    biofuel_grade: CategoryKey = Field("B30", description="B24, B30, B50, B100 or CUSTOM")
    biofuel_custom_fraction: Optional[float] = Field(
        None, ge=0, le=1, description="Bio share for CUSTOM grade (0-1)"
    )
    biofuel_base_fuel: CategoryKey = Field("mgo", description="Fossil fuel the biofuel is blended into")
    year: int = Field(2026, ge=2015, le=2050)
    eua_price: NonNegative = Field(
        default_factory=lambda: settings.default_eua_price_eur,
        description="EU Allowance price (EUR per tCO2e)",
    )
