"""
FuelEU Maritime (EU 2023/1805) GHG Intensity Calculator.

Implements the EU's Well-to-Wake GHG intensity framework:
- GHG intensity calculation (gCO2eq/MJ)
- Compliance balance (surplus/deficit vs annual limit)
- Banking, borrowing (capped at 2% of the limit × energy) and pooling
- Penalty exposure with escalation for consecutive deficit years
- Fleet pooling simulation
- Multi-year compliance projection

Reference: EU Regulation 2023/1805 (FuelEU Maritime)
Baseline: 91.16 gCO2eq/MJ (2020 EU MRV reference)
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from ..schemas.fueleu import ComplianceMechanisms, FuelEUState
from .factors import (
    BORROWING_CAP_FRACTION,
    FUELEU_FUEL_SPECS,
    FUELEU_REDUCTION_TARGETS,
    FUELEU_REFERENCE_GHG,
    ICE_CLASS_ENERGY_FACTOR,
    MAX_CONSECUTIVE_DEFICIT_YEARS,
    PENALTY_EUR_PER_T_VLSFO,
    RFNBO_INCENTIVE_LAST_YEAR,
    RFNBO_KEY,
    VLSFO_ENERGY_MJ_PER_T,
    get_fueleu_spec,
    normalize_key,
)

logger = logging.getLogger(__name__)

GRAMS_PER_T = 1_000_000


# =============================================================================
# Result Dataclasses
# =============================================================================

@dataclass
class FuelBreakdown:
    """Per-fuel breakdown of energy and emissions."""
    fuel_type: str
    mass_mt: float
    energy_mj: float
    wtt_gco2eq: float
    ttw_gco2eq: float
    wtw_gco2eq: float
    wtw_intensity: float  # gCO2eq/MJ counted for this fuel
    zero_rated: bool = False  # RFNBO incentive applied


@dataclass
class GHGIntensityResult:
    """Well-to-Wake intensity of a fuel mix."""
    ghg_intensity: float  # gCO2eq/MJ (WtW)
    total_energy_mj: float
    total_co2eq_g: float
    fuel_breakdown: List[FuelBreakdown] = field(default_factory=list)


@dataclass
class FuelEUResult:
    """Compliance balance and penalty of one reporting period."""
    year: int
    reduction_target_pct: float
    ghg_target: float  # gCO2eq/MJ
    ghg_actual: float  # gCO2eq/MJ
    total_energy_mj: float
    total_co2eq_g: float

    raw_balance_gco2eq: float  # (target - actual) × energy
    banked_gco2eq: float
    borrowing_cap_gco2eq: float
    borrowed_gco2eq: float
    pooled_gco2eq: float
    compliance_balance_gco2eq: float  # after mechanisms; negative = deficit
    is_deficit: bool

    consecutive_deficit_years: int  # after clamping to 1..10
    escalation_multiplier: float
    vlsfo_equivalent_t: float
    penalty_eur: float

    fuel_breakdown: List[FuelBreakdown] = field(default_factory=list)

    @property
    def compliance_balance_t(self) -> float:
        return self.compliance_balance_gco2eq / GRAMS_PER_T

    @property
    def status(self) -> str:
        return "deficit" if self.is_deficit else "compliant"


@dataclass
class FuelEUPoolingVesselResult:
    """Individual vessel result within a pooling scenario."""
    name: str
    ghg_intensity: float
    total_energy_mj: float
    total_co2eq_g: float
    individual_balance_gco2eq: float
    status: str


@dataclass
class FuelEUPoolingResult:
    """Result of fleet pooling simulation."""
    fleet_ghg_intensity: float
    fleet_total_energy_mj: float
    fleet_total_co2eq_g: float
    fleet_balance_gco2eq: float
    per_vessel: List[FuelEUPoolingVesselResult] = field(default_factory=list)
    status: str = "compliant"


@dataclass
class FuelEUProjectionYear:
    """Single year in a multi-year projection."""
    year: int
    ghg_intensity: float
    ghg_limit: float
    reduction_target_pct: float
    compliance_balance_gco2eq: float
    total_energy_mj: float
    status: str
    penalty_eur: float


# =============================================================================
# Calculator
# =============================================================================

class FuelEUCalculator:
    """FuelEU Maritime (EU 2023/1805) GHG intensity calculator."""

    def calculate(self, state: FuelEUState) -> FuelEUResult:
        """
        Calculate GHG intensity, compliance balance and penalty.

        Args:
            state: Reporting year, fuel use by category, ice class flag,
                   flexibility mechanisms and non-compliance streak

        Returns:
            FuelEUResult with every intermediate term
        """
        reduction = self.get_reduction_target(state.year)
        target = FUELEU_REFERENCE_GHG * (1 - reduction)

        intensity = self.calculate_ghg_intensity(
            state.fuel_mt, state.year, ice_class=state.ice_class
        )
        actual = intensity.ghg_intensity
        energy = intensity.total_energy_mj

        raw_balance = (target - actual) * energy
        banked, cap, borrowed, pooled = self._apply_mechanisms(
            state.mechanisms, target, energy
        )
        balance = raw_balance + banked + borrowed + pooled
        is_deficit = balance < 0

        streak = self._clamp_streak(state.consecutive_deficit_years)
        multiplier = 1 + (streak - 1) / 10
        vlsfo_t, penalty = self.calculate_penalty(balance, actual, streak)

        logger.debug(
            "FuelEU %d: actual %.4f vs target %.4f gCO2eq/MJ, balance %.0f g, penalty %.2f EUR",
            state.year, actual, target, balance, penalty,
        )

        return FuelEUResult(
            year=state.year,
            reduction_target_pct=reduction * 100,
            ghg_target=target,
            ghg_actual=actual,
            total_energy_mj=energy,
            total_co2eq_g=intensity.total_co2eq_g,
            raw_balance_gco2eq=raw_balance,
            banked_gco2eq=banked,
            borrowing_cap_gco2eq=cap,
            borrowed_gco2eq=borrowed,
            pooled_gco2eq=pooled,
            compliance_balance_gco2eq=balance,
            is_deficit=is_deficit,
            consecutive_deficit_years=streak,
            escalation_multiplier=multiplier,
            vlsfo_equivalent_t=vlsfo_t,
            penalty_eur=penalty,
            fuel_breakdown=intensity.fuel_breakdown,
        )

    def calculate_ghg_intensity(
        self,
        fuel_mt: Dict[str, float],
        year: int,
        ice_class: bool = False,
    ) -> GHGIntensityResult:
        """
        Calculate Well-to-Wake GHG intensity for given fuel consumption.

        Args:
            fuel_mt: Dict of fuel category -> consumption in metric tons
                     e.g., {"hfo": 10000, "mgo": 1500, "bio": 200}
            year: Reporting year (RFNBO counts as zero emission up to 2033)
            ice_class: Exclude 5% of energy for ice-class navigation

        Returns:
            GHGIntensityResult with GHG intensity and per-fuel breakdown
        """
        total_energy = 0.0
        total_co2eq = 0.0
        breakdown = []

        for fuel_type, mass_mt in fuel_mt.items():
            spec = get_fueleu_spec(fuel_type)
            fuel_key = normalize_key(fuel_type)
            if mass_mt <= 0:
                continue

            # Energy in MJ: mass (MT) * 1e6 (g/MT) * LCV (MJ/g)
            energy_mj = mass_mt * GRAMS_PER_T * spec.lcv
            if ice_class:
                energy_mj *= ICE_CLASS_ENERGY_FACTOR

            zero_rated = fuel_key == RFNBO_KEY and year <= RFNBO_INCENTIVE_LAST_YEAR
            wtt = 0.0 if zero_rated else spec.wtt
            ttw = 0.0 if zero_rated else spec.ttw
            wtw = wtt + ttw

            total_energy += energy_mj
            total_co2eq += energy_mj * wtw

            breakdown.append(FuelBreakdown(
                fuel_type=fuel_key,
                mass_mt=mass_mt,
                energy_mj=energy_mj,
                wtt_gco2eq=energy_mj * wtt,
                ttw_gco2eq=energy_mj * ttw,
                wtw_gco2eq=energy_mj * wtw,
                wtw_intensity=wtw,
                zero_rated=zero_rated,
            ))

        if total_energy <= 0:
            return GHGIntensityResult(
                ghg_intensity=0.0,
                total_energy_mj=0.0,
                total_co2eq_g=0.0,
                fuel_breakdown=[],
            )

        return GHGIntensityResult(
            ghg_intensity=total_co2eq / total_energy,
            total_energy_mj=total_energy,
            total_co2eq_g=total_co2eq,
            fuel_breakdown=breakdown,
        )

    @staticmethod
    def calculate_penalty(
        balance_gco2eq: float,
        ghg_actual: float,
        consecutive_deficit_years: int = 1,
    ) -> Tuple[float, float]:
        """
        Penalty for a negative compliance balance (Annex IV).

        Args:
            balance_gco2eq: Final compliance balance
            ghg_actual: Attained GHG intensity (gCO2eq/MJ)
            consecutive_deficit_years: Streak including this year (1-10)

        Returns:
            (VLSFO-equivalent tonnes, penalty in EUR); zero when compliant
            or when the attained intensity is zero
        """
        if balance_gco2eq >= 0 or ghg_actual <= 0:
            return 0.0, 0.0

        vlsfo_t = abs(balance_gco2eq) / (ghg_actual * VLSFO_ENERGY_MJ_PER_T)
        multiplier = 1 + (consecutive_deficit_years - 1) / 10
        return vlsfo_t, vlsfo_t * PENALTY_EUR_PER_T_VLSFO * multiplier

    def simulate_pooling(
        self, vessels: List[Dict], year: int
    ) -> FuelEUPoolingResult:
        """
        Simulate fleet pooling: aggregate all vessels' energy and emissions.

        Pool: sum all energy, sum all emissions → fleet-average GHG intensity.
        Compare against limit → pooled balance.

        Args:
            vessels: List of dicts with keys:
                     - name: str
                     - fuel_mt: Dict[str, float]
            year: Compliance year

        Returns:
            FuelEUPoolingResult with fleet-level and per-vessel results
        """
        limit = FUELEU_REFERENCE_GHG * (1 - self.get_reduction_target(year))

        fleet_energy = 0.0
        fleet_co2eq = 0.0
        per_vessel = []

        for v in vessels:
            result = self.calculate_ghg_intensity(v["fuel_mt"], year)
            individual_balance = (limit - result.ghg_intensity) * result.total_energy_mj

            fleet_energy += result.total_energy_mj
            fleet_co2eq += result.total_co2eq_g

            per_vessel.append(FuelEUPoolingVesselResult(
                name=v["name"],
                ghg_intensity=result.ghg_intensity,
                total_energy_mj=result.total_energy_mj,
                total_co2eq_g=result.total_co2eq_g,
                individual_balance_gco2eq=individual_balance,
                status="compliant" if individual_balance >= 0 else "deficit",
            ))

        if fleet_energy <= 0:
            return FuelEUPoolingResult(
                fleet_ghg_intensity=0.0,
                fleet_total_energy_mj=0.0,
                fleet_total_co2eq_g=0.0,
                fleet_balance_gco2eq=0.0,
                per_vessel=per_vessel,
                status="compliant",
            )

        fleet_intensity = fleet_co2eq / fleet_energy
        fleet_balance = (limit - fleet_intensity) * fleet_energy

        return FuelEUPoolingResult(
            fleet_ghg_intensity=fleet_intensity,
            fleet_total_energy_mj=fleet_energy,
            fleet_total_co2eq_g=fleet_co2eq,
            fleet_balance_gco2eq=fleet_balance,
            per_vessel=per_vessel,
            status="compliant" if fleet_balance >= 0 else "deficit",
        )

    def project_compliance(
        self,
        fuel_mt: Dict[str, float],
        start_year: int = 2025,
        end_year: int = 2050,
        annual_efficiency_improvement_pct: float = 0.0,
    ) -> List[FuelEUProjectionYear]:
        """
        Project compliance across years as limits tighten.

        Each deficit year extends the non-compliance streak used for the
        penalty escalation; a compliant year resets it.

        Args:
            fuel_mt: Current annual fuel consumption by category
            start_year: First projection year
            end_year: Last projection year
            annual_efficiency_improvement_pct: Annual fuel reduction %

        Returns:
            List of FuelEUProjectionYear for each year
        """
        projections = []
        streak = 0

        for year in range(start_year, end_year + 1):
            year_offset = year - start_year
            efficiency_factor = (1 - annual_efficiency_improvement_pct / 100) ** year_offset

            adjusted_fuel = {
                ft: amount * efficiency_factor
                for ft, amount in fuel_mt.items()
            }

            result = self.calculate(FuelEUState(
                year=year,
                fuel_mt=adjusted_fuel,
                consecutive_deficit_years=streak + 1,
            ))
            streak = streak + 1 if result.is_deficit else 0

            projections.append(FuelEUProjectionYear(
                year=year,
                ghg_intensity=result.ghg_actual,
                ghg_limit=result.ghg_target,
                reduction_target_pct=result.reduction_target_pct,
                compliance_balance_gco2eq=result.compliance_balance_gco2eq,
                total_energy_mj=result.total_energy_mj,
                status=result.status,
                penalty_eur=result.penalty_eur,
            ))

        return projections

    def get_limits_by_year(self) -> List[Dict]:
        """Return GHG intensity limits for all target years."""
        limits = []
        for year, reduction in FUELEU_REDUCTION_TARGETS.items():
            limit = FUELEU_REFERENCE_GHG * (1 - reduction)
            limits.append({
                "year": year,
                "reduction_pct": round(reduction * 100, 2),
                "ghg_limit": round(limit, 2),
            })
        return limits

    @staticmethod
    def get_fuel_info() -> List[Dict]:
        """Return fuel categories with their emission factor data."""
        fuels = []
        for fuel_key, spec in FUELEU_FUEL_SPECS.items():
            fuels.append({
                "id": fuel_key,
                "name": fuel_key.upper().replace("_", " "),
                "lcv_mj_per_g": spec.lcv,
                "wtt_gco2eq_per_mj": spec.wtt,
                "ttw_gco2eq_per_mj": spec.ttw,
                "wtw_gco2eq_per_mj": round(spec.wtw, 2),
            })
        return fuels

    # ---- private helpers ----------------------------------------------------

    @staticmethod
    def get_reduction_target(year: int) -> float:
        """Reduction fraction of the largest target year not after ``year``."""
        return FUELEU_REDUCTION_TARGETS[year]

    @staticmethod
    def _apply_mechanisms(
        mechanisms: ComplianceMechanisms,
        target: float,
        total_energy_mj: float,
    ) -> Tuple[float, float, float, float]:
        """Return (banked, borrowing cap, borrowed, pooled) in gCO2eq."""
        banked = mechanisms.banked_t * GRAMS_PER_T if mechanisms.use_banking else 0.0
        pooled = mechanisms.pool_t * GRAMS_PER_T if mechanisms.use_pooling else 0.0

        cap = target * total_energy_mj * BORROWING_CAP_FRACTION
        borrowed = 0.0
        if mechanisms.use_borrowing:
            requested = mechanisms.borrow_t * GRAMS_PER_T
            borrowed = min(requested, cap)
            if requested > cap:
                logger.info(
                    "Borrowing request %.0f g exceeds 2%% cap, limited to %.0f g",
                    requested, cap,
                )

        return banked, cap, borrowed, pooled

    @staticmethod
    def _clamp_streak(years: int) -> int:
        clamped = min(max(years, 1), MAX_CONSECUTIVE_DEFICIT_YEARS)
        if clamped != years:
            logger.debug("Non-compliance streak %d clamped to %d", years, clamped)
        return clamped


def compute_fueleu(state: FuelEUState) -> FuelEUResult:
    """Compute the FuelEU compliance balance and penalty for one ship."""
    return FuelEUCalculator().calculate(state)
