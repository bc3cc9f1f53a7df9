"""
Carbon Intensity Indicator (CII) Calculator.

Operational carbon intensity rating under MARPOL Annex VI:
- Attained CII from annual fuel consumption and distance
- Reference line a × DWT^(-c) and the required CII after the annual cut
- Rating A-E from the attained/required ratio and the d1..d4 vector
- Overlay of efficiency measures (biofuel, ESDs, power limitation)
- Rating band trajectory 2023-2030 and the cut needed to reach a band

Reference: IMO MEPC.352(78) / MEPC.353(78) / MEPC.354(78)
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from ..schemas.cii import CIIRequest, SimulationMeasures
from .factors import (
    BIOFUEL_LIFECYCLE_REDUCTION,
    CII_REDUCTION_FACTORS,
    CII_TRAJECTORY_YEARS,
    CIICoefficients,
    VesselType,
    get_cii_coefficients,
    get_fuel_standard,
    resolve_vessel_type,
)

logger = logging.getLogger(__name__)


class CIIRating(Enum):
    """CII Rating grades (A = best, E = worst)."""
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"


# Upper-bound key of each band that has one
BAND_UPPER_KEYS = {
    CIIRating.A: "A_upper",
    CIIRating.B: "B_upper",
    CIIRating.C: "C_upper",
    CIIRating.D: "D_upper",
}

# Energy saving device factors
MEWIS_DUCT_FACTOR = 0.97
AIR_LUBRICATION_FACTOR = 0.95
HULL_COATING_FACTOR = 0.96
# Share of a power limitation that turns into a CO2 cut
POWER_LIMIT_EFFECT = 0.6


@dataclass
class CIIResult:
    """Attained vs required CII of one year."""
    attained_cii: float  # g CO2 / (dwt·nm)
    required_cii: float
    reference_cii: float  # 2019 line a × DWT^(-c)
    ratio: float  # attained / required
    rating: CIIRating
    rating_boundaries: Dict[str, float]  # A_upper..D_upper plus "reference"
    reduction_factor: float  # Z% applied to the reference line
    year: int
    vessel_type: VesselType
    total_co2_mt: float
    total_distance_nm: float
    capacity: float
    margin_to_downgrade: float  # % headroom left in the current band
    margin_to_upgrade: float  # % cut to enter the next better band


@dataclass
class CIISimulationResult:
    """Actual vs simulated CII after applying efficiency measures."""
    base_co2_mt: float
    simulated_co2_mt: float
    attained_actual: float
    attained_simulated: float
    required_cii: float
    ratio_actual: float
    ratio_simulated: float
    rating_actual: CIIRating
    rating_simulated: CIIRating
    is_simulating: bool
    reduction_to_a_pct: float  # further cut of the simulated CII to reach A
    boundaries: Dict[str, float]  # d1..d4 as ratio thresholds


@dataclass
class ReductionRequirement:
    """Cut of attained CII needed to reach the upper bound of a band."""
    target_rating: CIIRating
    target_cii: float
    attained_cii: float
    reduction_pct: float
    co2_reduction_mt: float  # at unchanged distance

    @property
    def is_met(self) -> bool:
        return self.reduction_pct == 0


@dataclass
class TrajectoryPoint:
    """Required CII and rating band upper bounds for one year."""
    year: int
    required: float
    a_upper: float
    b_upper: float
    c_upper: float
    d_upper: float


def rating_from_ratio(ratio: float, coeffs: CIICoefficients) -> CIIRating:
    """Map attained/required to a rating; a ratio on a boundary takes the better band."""
    for rating, bound in zip(BAND_UPPER_KEYS, (coeffs.d1, coeffs.d2, coeffs.d3, coeffs.d4)):
        if ratio <= bound:
            return rating
    return CIIRating.E


def apply_measures(co2_mt: float, measures: SimulationMeasures) -> float:
    """Apply biofuel, ESD and power limitation reductions multiplicatively."""
    simulated = co2_mt * (1 - measures.biofuel_percent / 100 * BIOFUEL_LIFECYCLE_REDUCTION)

    if measures.mewis_duct:
        simulated *= MEWIS_DUCT_FACTOR
    if measures.air_lubrication:
        simulated *= AIR_LUBRICATION_FACTOR
    if measures.hull_coating:
        simulated *= HULL_COATING_FACTOR
    if measures.power_limit_pct > 0:
        simulated *= 1 - (measures.power_limit_pct / 100) * POWER_LIMIT_EFFECT

    return simulated


class CIICalculator:
    """
    Operational CII rating of one ship.

    Example usage:
        calculator = CIICalculator(VesselType.BULK_CARRIER, dwt=62000, year=2024)
        result = calculator.calculate({"hfo": 4500, "mgo": 250}, total_distance_nm=60045)
        print(result.rating.value)
    """

    def __init__(self, vessel_type, dwt: float, year: int = 2024):
        """
        Args:
            vessel_type: VesselType, its value or a ship type label
            dwt: Deadweight tonnage (capacity for every category)
            year: Default calculation year
        """
        if dwt < 0:
            raise ValueError(f"DWT must be non-negative, got {dwt}")

        self.vessel_type = resolve_vessel_type(vessel_type)
        self.coefficients = get_cii_coefficients(self.vessel_type)
        self.dwt = dwt
        self.capacity = dwt
        self.year = year

    def calculate(
        self,
        total_fuel_mt: Dict[str, float],
        total_distance_nm: float,
        year: Optional[int] = None,
    ) -> CIIResult:
        """
        Rate a year of operation.

        Args:
            total_fuel_mt: Fuel type -> MT consumed, e.g. {"hfo": 4500, "mgo": 250}
            total_distance_nm: Distance sailed
            year: Calculation year (instance year if None)
        """
        total_co2_mt = self.calculate_co2_emissions(total_fuel_mt)
        return self.calculate_from_co2(total_co2_mt, total_distance_nm, year)

    def calculate_from_co2(
        self,
        total_co2_mt: float,
        total_distance_nm: float,
        year: Optional[int] = None,
    ) -> CIIResult:
        """Rate an already aggregated CO2 mass."""
        calc_year = year or self.year

        attained = self.attained_cii(total_co2_mt, total_distance_nm)
        reference = self.reference_cii()
        z = CII_REDUCTION_FACTORS[calc_year]
        required = reference * (100 - z) / 100

        ratio = attained / required if required > 0 else 0.0
        rating = rating_from_ratio(ratio, self.coefficients)
        boundaries = self._band_bounds(required)
        downgrade, upgrade = self._margins(attained, rating, boundaries)

        logger.debug(
            "CII %s %d: attained %.4f, required %.4f, ratio %.4f -> %s",
            self.vessel_type.value, calc_year, attained, required, ratio, rating.value,
        )

        return CIIResult(
            attained_cii=attained,
            required_cii=required,
            reference_cii=reference,
            ratio=ratio,
            rating=rating,
            rating_boundaries=boundaries,
            reduction_factor=z,
            year=calc_year,
            vessel_type=self.vessel_type,
            total_co2_mt=total_co2_mt,
            total_distance_nm=total_distance_nm,
            capacity=self.capacity,
            margin_to_downgrade=round(downgrade, 2),
            margin_to_upgrade=round(upgrade, 2),
        )

    def simulate(
        self,
        total_fuel_mt: Dict[str, float],
        total_distance_nm: float,
        measures: SimulationMeasures,
        year: Optional[int] = None,
    ) -> CIISimulationResult:
        """
        Compare the actual CII with the CII after efficiency measures.

        Args:
            total_fuel_mt: Fuel consumption by type in MT
            total_distance_nm: Distance sailed
            measures: Biofuel share, energy saving devices, power limitation
            year: Calculation year

        Returns:
            CIISimulationResult with both ratings side by side
        """
        actual = self.calculate(total_fuel_mt, total_distance_nm, year)

        simulated_co2 = apply_measures(actual.total_co2_mt, measures)
        attained_sim = self.attained_cii(simulated_co2, total_distance_nm)
        required = actual.required_cii
        ratio_sim = attained_sim / required if required > 0 else 0.0

        a_upper = actual.rating_boundaries["A_upper"]
        if attained_sim > 0:
            reduction_to_a = max(0.0, (attained_sim - a_upper) / attained_sim * 100)
        else:
            reduction_to_a = 0.0

        coeffs = self.coefficients
        return CIISimulationResult(
            base_co2_mt=actual.total_co2_mt,
            simulated_co2_mt=simulated_co2,
            attained_actual=actual.attained_cii,
            attained_simulated=attained_sim,
            required_cii=required,
            ratio_actual=actual.ratio,
            ratio_simulated=ratio_sim,
            rating_actual=actual.rating,
            rating_simulated=rating_from_ratio(ratio_sim, coeffs),
            is_simulating=measures.is_active,
            reduction_to_a_pct=reduction_to_a,
            boundaries={"A": coeffs.d1, "B": coeffs.d2, "C": coeffs.d3, "D": coeffs.d4},
        )

    @staticmethod
    def required_reduction(
        result: CIIResult,
        target_rating: CIIRating = CIIRating.C,
    ) -> ReductionRequirement:
        """
        Cut needed to bring the attained CII down to a band's upper bound.

        E has no upper bound, so it never needs a cut. At fixed distance the
        CII scales with CO2, so the same percentage applies to the CO2 mass.
        """
        attained = result.attained_cii
        if target_rating is CIIRating.E:
            target = attained
        else:
            target = result.rating_boundaries[BAND_UPPER_KEYS[target_rating]]

        if attained > target > 0:
            pct = (1 - target / attained) * 100
        else:
            pct = 0.0

        return ReductionRequirement(
            target_rating=target_rating,
            target_cii=target,
            attained_cii=attained,
            reduction_pct=pct,
            co2_reduction_mt=result.total_co2_mt * pct / 100,
        )

    def rating_trajectory(self, years: Optional[List[int]] = None) -> List[TrajectoryPoint]:
        """Required CII and A-D band upper bounds per year (default 2023-2030)."""
        if years is None:
            years = CII_TRAJECTORY_YEARS

        reference = self.reference_cii()
        coeffs = self.coefficients
        trajectory = []
        for year in years:
            required = reference * (100 - CII_REDUCTION_FACTORS[year]) / 100
            trajectory.append(TrajectoryPoint(
                year=year,
                required=required,
                a_upper=required * coeffs.d1,
                b_upper=required * coeffs.d2,
                c_upper=required * coeffs.d3,
                d_upper=required * coeffs.d4,
            ))
        return trajectory

    def calculate_co2_emissions(self, fuel_mt: Dict[str, float]) -> float:
        """Sum of mass × Cf over the fuel mix (MT CO2)."""
        total_co2 = 0.0

        for fuel_type, amount_mt in fuel_mt.items():
            if amount_mt < 0:
                raise ValueError(f"Negative fuel mass for {fuel_type}: {amount_mt}")
            total_co2 += amount_mt * get_fuel_standard(fuel_type).cf

        return total_co2

    def attained_cii(self, total_co2_mt: float, total_distance_nm: float) -> float:
        """g CO2 per dwt·nm; zero when either DWT or distance is zero."""
        if self.capacity <= 0 or total_distance_nm <= 0:
            return 0.0
        return total_co2_mt * 1_000_000 / (self.capacity * total_distance_nm)

    def reference_cii(self) -> float:
        if self.capacity <= 0:
            return 0.0
        return self.coefficients.a * (self.capacity ** (-self.coefficients.c))

    def _band_bounds(self, required_cii: float) -> Dict[str, float]:
        coeffs = self.coefficients
        bounds = {
            key: required_cii * d
            for key, d in zip(BAND_UPPER_KEYS.values(), (coeffs.d1, coeffs.d2, coeffs.d3, coeffs.d4))
        }
        bounds["reference"] = required_cii
        return bounds

    @staticmethod
    def _margins(
        attained_cii: float,
        rating: CIIRating,
        boundaries: Dict[str, float],
    ) -> Tuple[float, float]:
        """(% headroom to the band's upper bound, % cut to the better band's bound)."""
        if attained_cii <= 0:
            return 0.0, 0.0

        ratings = list(CIIRating)
        idx = ratings.index(rating)

        downgrade = 0.0
        if rating in BAND_UPPER_KEYS:
            downgrade = (boundaries[BAND_UPPER_KEYS[rating]] - attained_cii) / attained_cii * 100

        upgrade = 0.0
        if idx > 0:
            better_bound = boundaries[BAND_UPPER_KEYS[ratings[idx - 1]]]
            upgrade = (attained_cii - better_bound) / attained_cii * 100

        return max(0.0, downgrade), max(0.0, upgrade)


def compute_cii(
    vessel_type,
    dwt: float,
    total_distance_nm: float,
    fuel_mt: Dict[str, float],
    year: int = 2024,
) -> CIIResult:
    """
    Validate the inputs and compute attained/required CII with rating.

    Raises:
        pydantic.ValidationError: negative or non-finite inputs
        UnsupportedCategoryError: unknown ship or fuel type
    """
    request = CIIRequest(
        vessel_type=vessel_type,
        dwt=dwt,
        total_distance_nm=total_distance_nm,
        fuel_mt=fuel_mt,
        year=year,
    )
    calculator = CIICalculator(request.vessel_type, request.dwt, request.year)
    return calculator.calculate(request.fuel_mt, request.total_distance_nm)
