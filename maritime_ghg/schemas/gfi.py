"""IMO GFI input records."""

from pydantic import Field

from ..config import settings
from .common import CategoryKey, FuelMasses, NonNegative, Percent, Record


class GFIState(Record):
    """Annual fuel inventory with an optional biofuel blend simulation."""
    year: int = Field(2028, ge=2020, le=2060)
    fuel_mt: FuelMasses = Field(default_factory=dict, description="Fuel type -> MT")
    bio_blend_percent: Percent = Field(0, description="Share of the source fuel replaced by bio (%)")
    bio_source_fuel: CategoryKey = Field("vlsfo", description="Fuel displaced by the biofuel blend")
    tier1_price: NonNegative = Field(
        default_factory=lambda: settings.gfi_tier1_price_usd,
        description="Tier 1 remedial unit price (USD/tCO2eq)",
    )
    tier2_price: NonNegative = Field(
        default_factory=lambda: settings.gfi_tier2_price_usd,
        description="Tier 2 remedial unit price (USD/tCO2eq)",
    )
