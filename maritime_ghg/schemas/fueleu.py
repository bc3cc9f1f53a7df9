"""FuelEU Maritime input records."""

from pydantic import Field

from .common import FuelMasses, NonNegative, Record


class ComplianceMechanisms(Record):
    """Article 20/21 flexibility mechanisms; amounts in tCO2eq."""
    use_banking: bool = False
    banked_t: NonNegative = 0
    use_borrowing: bool = False
    borrow_t: NonNegative = 0
    use_pooling: bool = False
    pool_t: float = Field(0, description="Pool allocation (negative when giving surplus away)")


class FuelEUState(Record):
    """Reporting-period energy use of one ship."""
    year: int = Field(2025, ge=2020, le=2060)
    fuel_mt: FuelMasses = Field(default_factory=dict, description="Fuel category -> MT")
    ice_class: bool = False
    mechanisms: ComplianceMechanisms = Field(default_factory=ComplianceMechanisms)
    consecutive_deficit_years: int = Field(1, description="Non-compliance streak incl. this year")
