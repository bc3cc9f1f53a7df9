"""
CII Corrective Action Plan (CAP) aggregation.

Rolls twelve monthly operational logs and a bunker fuel ledger up into the
annual attained CII and rating, and produces the 2023-2030 rating band
trajectory a SEEMP Part III corrective action plan is drawn against.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np

from ..schemas.cap import AnnualBaseline, CAPPlan, FuelLedgerItem, MonthlyLog
from .cii import CIICalculator, CIIRating, ReductionRequirement, TrajectoryPoint
from .factors import DEFAULT_LEDGER_CF, get_fuel_standard

logger = logging.getLogger(__name__)

LOG_FIELDS = (
    "sea_days",
    "port_days",
    "anchorage_days",
    "sea_consumption_mt",
    "port_consumption_mt",
    "distance_nm",
)

# Summed monthly values are rounded to 0.1, so twelve months may drift by 0.6
RECONCILE_TOLERANCE = 0.6


@dataclass
class AnnualTotals:
    """Sums of the twelve monthly logs."""
    sea_days: float
    port_days: float
    anchorage_days: float
    sea_consumption_mt: float
    port_consumption_mt: float
    distance_nm: float

    @property
    def fuel_mt(self) -> float:
        return self.sea_consumption_mt + self.port_consumption_mt


@dataclass
class LedgerSummary:
    """Fuel ledger mass, CO2 and the effective carbon factor."""
    total_mass_mt: float
    total_co2_mt: float
    effective_cf: float
    is_fallback: bool


@dataclass
class ReconciliationResult:
    """Monthly totals minus the annual baseline, per field."""
    differences: Dict[str, float]
    is_consistent: bool


@dataclass
class CAPResult:
    """Annual CII position of a corrective action plan."""
    year: int
    totals: AnnualTotals
    ledger: LedgerSummary
    annual_co2_mt: float
    attained_cii: float
    required_cii: float
    target_c: float  # upper bound of the C band
    attained_rating: Optional[CIIRating]  # None when nothing was sailed
    excess_pct: float  # attained vs C band upper bound, positive = above
    reduction_to_c: ReductionRequirement  # CO2 cut needed to get back into C
    monthly_averages: Dict[str, float]
    trajectory: List[TrajectoryPoint] = field(default_factory=list)


def sum_logs(logs: List[MonthlyLog]) -> AnnualTotals:
    """Add up the monthly logs field by field."""
    matrix = np.array(
        [[getattr(log, name) for name in LOG_FIELDS] for log in logs], dtype=float
    ).reshape(-1, len(LOG_FIELDS))
    sums = matrix.sum(axis=0)
    return AnnualTotals(**{name: float(value) for name, value in zip(LOG_FIELDS, sums)})


def summarize_ledger(items: List[FuelLedgerItem]) -> LedgerSummary:
    """Effective Cf = ledger CO2 / ledger mass; 3.151 for an empty ledger."""
    total_mass = 0.0
    total_co2 = 0.0
    for item in items:
        cf = item.cf if item.cf is not None else get_fuel_standard(item.fuel_type).cf
        total_mass += item.mass_mt
        total_co2 += item.mass_mt * cf

    if total_mass > 0:
        return LedgerSummary(total_mass, total_co2, total_co2 / total_mass, False)

    logger.warning("Fuel ledger is empty, using default Cf %.3f", DEFAULT_LEDGER_CF)
    return LedgerSummary(total_mass, total_co2, DEFAULT_LEDGER_CF, True)


def distribute_annual(baseline: AnnualBaseline) -> List[MonthlyLog]:
    """Spread the annual baseline evenly over twelve months (0.1 precision)."""
    month = {name: round(getattr(baseline, name) / 12, 1) for name in LOG_FIELDS}
    return [MonthlyLog(**month) for _ in range(12)]


def reconcile(logs: List[MonthlyLog], baseline: AnnualBaseline) -> ReconciliationResult:
    """Compare summed monthly logs with the annual baseline."""
    totals = sum_logs(logs)
    differences = {
        name: getattr(totals, name) - getattr(baseline, name) for name in LOG_FIELDS
    }
    consistent = all(abs(diff) <= RECONCILE_TOLERANCE for diff in differences.values())
    if not consistent:
        logger.info("Monthly logs differ from annual baseline: %s", differences)
    return ReconciliationResult(differences=differences, is_consistent=consistent)


def compute_cap(plan: CAPPlan) -> CAPResult:
    """
    Aggregate a corrective action plan into the annual CII position.

    Args:
        plan: Vessel type, DWT, year, twelve monthly logs and fuel ledger

    Returns:
        CAPResult with attained/required CII, rating and 2023-2030 trajectory
    """
    totals = sum_logs(plan.monthly_logs)
    ledger = summarize_ledger(plan.fuel_ledger)
    annual_co2 = totals.fuel_mt * ledger.effective_cf

    calculator = CIICalculator(plan.vessel_type, plan.dwt, plan.year)
    result = calculator.calculate_from_co2(annual_co2, totals.distance_nm)

    target_c = result.rating_boundaries["C_upper"]
    rating = result.rating if result.attained_cii > 0 else None
    excess_pct = (result.attained_cii - target_c) / target_c * 100 if target_c > 0 else 0.0

    logger.debug(
        "CAP %d: %.1f MT fuel x Cf %.4f over %.0f nm -> CII %.4f",
        plan.year, totals.fuel_mt, ledger.effective_cf, totals.distance_nm, result.attained_cii,
    )

    return CAPResult(
        year=plan.year,
        totals=totals,
        ledger=ledger,
        annual_co2_mt=annual_co2,
        attained_cii=result.attained_cii,
        required_cii=result.required_cii,
        target_c=target_c,
        attained_rating=rating,
        excess_pct=excess_pct,
        reduction_to_c=calculator.required_reduction(result, CIIRating.C),
        monthly_averages={
            "sea_days": totals.sea_days / 12,
            "port_days": totals.port_days / 12,
            "anchorage_days": totals.anchorage_days / 12,
            "distance_nm": totals.distance_nm / 12,
            "consumption_mt": totals.fuel_mt / 12,
        },
        trajectory=calculator.rating_trajectory(),
    )
