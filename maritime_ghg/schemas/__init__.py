"""
Input records for the compliance engines.

Re-exports all schema classes:
    from maritime_ghg.schemas import VoyageRecord, FuelEUState, ...
"""

from .common import Record  # noqa: F401
from .fuel import BiofuelComponent, FossilComponent  # noqa: F401
from .cii import CIIRequest, SimulationMeasures  # noqa: F401
from .cap import (  # noqa: F401
    MONTHS,
    AnnualBaseline,
    CAPPlan,
    FuelLedgerItem,
    MonthlyLog,
)
from .ets import VoyageRecord  # noqa: F401
from .fueleu import ComplianceMechanisms, FuelEUState  # noqa: F401
from .gfi import GFIState  # noqa: F401
