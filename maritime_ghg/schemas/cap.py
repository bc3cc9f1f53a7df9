"""Corrective Action Plan input records."""

from typing import List, Optional

from pydantic import Field

from .common import CategoryKey, NonNegative, Record

MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
          "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


class MonthlyLog(Record):
    """One month of operational profile."""
    sea_days: NonNegative = 0
    port_days: NonNegative = 0
    anchorage_days: NonNegative = 0
    sea_consumption_mt: NonNegative = 0
    port_consumption_mt: NonNegative = 0
    distance_nm: NonNegative = 0


class AnnualBaseline(Record):
    """Annual totals the monthly logs are reconciled against."""
    sea_days: NonNegative = 0
    port_days: NonNegative = 0
    anchorage_days: NonNegative = 0
    sea_consumption_mt: NonNegative = 0
    port_consumption_mt: NonNegative = 0
    distance_nm: NonNegative = 0


class FuelLedgerItem(Record):
    """Bunker inventory line; cf defaults to the Fuel Standards Table value."""
    fuel_type: CategoryKey = "vlsfo"
    mass_mt: NonNegative = 0
    cf: Optional[NonNegative] = Field(None, description="Carbon factor override (gCO2/g)")


class CAPPlan(Record):
    """Vessel, year, twelve monthly logs and the fuel ledger."""
    vessel_type: CategoryKey = Field("tanker", description="IMO vessel type category")
    dwt: NonNegative = Field(..., description="Deadweight tonnage")
    year: int = Field(2025, ge=2019, le=2050)
    monthly_logs: List[MonthlyLog] = Field(..., min_length=12, max_length=12)
    fuel_ledger: List[FuelLedgerItem] = Field(default_factory=list)
