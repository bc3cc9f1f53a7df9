"""Biofuel / fossil blend input records."""

from pydantic import Field

from .common import CategoryKey, NonNegative, Record


class BiofuelComponent(Record):
    """Biofuel share of a blend."""
    mass_mt: NonNegative = Field(0, description="Biofuel mass (MT)")
    lcv_mj_per_kg: NonNegative = Field(37.0, description="Lower calorific value (MJ/kg)")
    ghg_intensity: float = Field(..., description="Certified GHG intensity (gCO2e/MJ)")
    is_certified: bool = Field(False, description="Holds a sustainability certificate (PoS)")

    @classmethod
    def from_energy(
        cls,
        mass_mt: float,
        energy_mj: float,
        ghg_intensity: float,
        is_certified: bool = False,
    ) -> "BiofuelComponent":
        """Build from a bunker delivery note that states energy instead of LCV."""
        lcv = energy_mj / (mass_mt * 1000) if mass_mt > 0 else 0.0
        return cls(
            mass_mt=mass_mt,
            lcv_mj_per_kg=lcv,
            ghg_intensity=ghg_intensity,
            is_certified=is_certified,
        )


class FossilComponent(Record):
    """Fossil share of a blend."""
    fuel_type: CategoryKey = Field("vlsfo", description="Fuel Standards Table key")
    mass_mt: NonNegative = Field(0, description="Fossil fuel mass (MT)")
