"""CII calculation and simulation input records."""

from pydantic import Field

from .common import CategoryKey, FuelMasses, NonNegative, Percent, Record


class CIIRequest(Record):
    """Annual operational data for a CII rating."""
    vessel_type: CategoryKey = Field("bulk_carrier", description="IMO vessel type category")
    dwt: NonNegative = Field(..., description="Deadweight tonnage")
    total_distance_nm: NonNegative = Field(..., description="Distance sailed (nm)")
    fuel_mt: FuelMasses = Field(default_factory=dict, description="Fuel type -> MT consumed")
    year: int = Field(2024, ge=2019, le=2050)


class SimulationMeasures(Record):
    """Operational and technical measures layered over the actual CII."""
    biofuel_percent: Percent = Field(0, description="Share of fuel replaced by biofuel (%)")
    mewis_duct: bool = False
    air_lubrication: bool = False
    hull_coating: bool = False
    power_limit_pct: Percent = Field(0, description="Engine power limitation (%)")

    @property
    def is_active(self) -> bool:
        return (
            self.biofuel_percent > 0
            or self.power_limit_pct > 0
            or self.mewis_duct
            or self.air_lubrication
            or self.hull_coating
        )
