"""
IMO Global Fuel Intensity (GFI) Calculator.

Two-tier compliance model of the IMO Net-Zero Framework (MEPC 83 draft):
- Base target: looser ceiling, deficits above it need Tier 2 remedial units
- Direct compliance target: stricter goal, deficits below the base target
  need Tier 1 remedial units
- Surplus units when the attained GFI is under the direct target
- Zero/near-zero (ZNZ) reward eligibility

Both targets scale the 2008 baseline of 93.3 gCO2eq/MJ.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List

from ..schemas.gfi import GFIState
from .factors import (
    GFI_2008_BASELINE,
    GFI_BASE_TARGET_REDUCTIONS,
    GFI_BIO_LCV,
    GFI_BIO_WTW,
    GFI_DIRECT_COMPLIANCE_REDUCTIONS,
    GFI_YEARS,
    ZNZ_THRESHOLD,
    ZNZ_THRESHOLD_2035,
    ZNZ_TIGHTENING_YEAR,
    get_gfi_factors,
    normalize_key,
)

logger = logging.getLogger(__name__)

GRAMS_PER_T = 1_000_000
BIO_ROW = "bio"


class GFIStatus(Enum):
    COMPLIANT = "COMPLIANT"
    TIER_1_DEFICIT = "TIER_1_DEFICIT"
    TIER_2_DEFICIT = "TIER_2_DEFICIT"


@dataclass
class GFIFuelRow:
    fuel_type: str
    mass_mt: float  # after biofuel displacement
    wtw_factor: float  # gCO2eq/g
    energy_mj: float
    emissions_g: float


@dataclass
class GFITargets:
    year: int
    base_target: float
    direct_target: float


@dataclass
class GFIResult:
    """GFI position, remedial units and penalty for one year."""
    year: int
    attained_gfi: float  # gCO2eq/MJ
    base_target: float
    direct_target: float
    status: GFIStatus
    tier1_units_t: float
    tier2_units_t: float
    surplus_units_t: float
    tier1_cost: float
    tier2_cost: float
    penalty: float
    total_energy_mj: float
    total_emissions_g: float
    znz_eligible: bool
    fuel_breakdown: List[GFIFuelRow] = field(default_factory=list)


class GFICalculator:
    """IMO GFI two-tier calculator."""

    @staticmethod
    def get_targets(year: int) -> GFITargets:
        """Base and direct compliance targets, clamped to 2028-2035."""
        return GFITargets(
            year=year,
            base_target=GFI_2008_BASELINE * (1 - GFI_BASE_TARGET_REDUCTIONS[year]),
            direct_target=GFI_2008_BASELINE * (1 - GFI_DIRECT_COMPLIANCE_REDUCTIONS[year]),
        )

    def calculate(self, state: GFIState) -> GFIResult:
        """
        Calculate attained GFI, tier classification and remedial unit cost.

        Args:
            state: Fuel inventory, biofuel blend on a source fuel, year and
                   Tier 1 / Tier 2 unit prices

        Returns:
            GFIResult with targets, tonnage, penalty and per-fuel breakdown
        """
        targets = self.get_targets(state.year)
        base, direct = targets.base_target, targets.direct_target

        rows = self._fuel_rows(state)
        total_energy = sum(r.energy_mj for r in rows)
        total_emissions = sum(r.emissions_g for r in rows)
        attained = total_emissions / total_energy if total_energy > 0 else 0.0

        if attained <= direct:
            status = GFIStatus.COMPLIANT
        elif attained <= base:
            status = GFIStatus.TIER_1_DEFICIT
        else:
            status = GFIStatus.TIER_2_DEFICIT

        tier1 = tier2 = surplus = 0.0
        if status == GFIStatus.COMPLIANT:
            surplus = (direct - attained) * total_energy / GRAMS_PER_T
        else:
            tier1 = (min(attained, base) - direct) * total_energy / GRAMS_PER_T
            if status == GFIStatus.TIER_2_DEFICIT:
                tier2 = (attained - base) * total_energy / GRAMS_PER_T

        tier1_cost = tier1 * state.tier1_price
        tier2_cost = tier2 * state.tier2_price

        logger.debug(
            "GFI %d: attained %.3f (direct %.3f, base %.3f) -> %s",
            state.year, attained, direct, base, status.value,
        )

        return GFIResult(
            year=state.year,
            attained_gfi=attained,
            base_target=base,
            direct_target=direct,
            status=status,
            tier1_units_t=tier1,
            tier2_units_t=tier2,
            surplus_units_t=surplus,
            tier1_cost=tier1_cost,
            tier2_cost=tier2_cost,
            penalty=tier1_cost + tier2_cost,
            total_energy_mj=total_energy,
            total_emissions_g=total_emissions,
            znz_eligible=is_znz_eligible(attained, state.year),
            fuel_breakdown=rows,
        )

    def project_gfi(self, state: GFIState) -> List[GFIResult]:
        """Evaluate the same inventory against every year 2028-2035."""
        return [
            self.calculate(state.model_copy(update={"year": year}))
            for year in GFI_YEARS
        ]

    def get_targets_by_year(self) -> List[Dict]:
        """Return base and direct targets for all GFI years."""
        targets = []
        for year in GFI_YEARS:
            t = self.get_targets(year)
            targets.append({
                "year": year,
                "base_reduction_pct": round(GFI_BASE_TARGET_REDUCTIONS[year] * 100, 1),
                "direct_reduction_pct": round(GFI_DIRECT_COMPLIANCE_REDUCTIONS[year] * 100, 1),
                "base_target": round(t.base_target, 2),
                "direct_target": round(t.direct_target, 2),
            })
        return targets

    @staticmethod
    def _fuel_rows(state: GFIState) -> List[GFIFuelRow]:
        source = normalize_key(state.bio_source_fuel)
        get_gfi_factors(source)
        share = state.bio_blend_percent / 100

        rows = []
        bio_mass = 0.0
        for fuel_type, mass in state.fuel_mt.items():
            wtw, lcv = get_gfi_factors(fuel_type)
            key = normalize_key(fuel_type)
            if key == source:
                bio_mass += mass * share
                mass = mass * (1 - share)
            energy = mass * GRAMS_PER_T * lcv
            rows.append(GFIFuelRow(
                fuel_type=key,
                mass_mt=mass,
                wtw_factor=wtw,
                energy_mj=energy,
                emissions_g=mass * wtw * GRAMS_PER_T,
            ))

        if bio_mass > 0:
            rows.append(GFIFuelRow(
                fuel_type=BIO_ROW,
                mass_mt=bio_mass,
                wtw_factor=GFI_BIO_WTW,
                energy_mj=bio_mass * GRAMS_PER_T * GFI_BIO_LCV,
                emissions_g=bio_mass * GFI_BIO_WTW * GRAMS_PER_T,
            ))

        return rows


def is_znz_eligible(attained: float, year: int) -> bool:
    """Zero/near-zero reward gate, independent of tier status."""
    threshold = ZNZ_THRESHOLD_2035 if year >= ZNZ_TIGHTENING_YEAR else ZNZ_THRESHOLD
    return attained <= threshold


def compute_gfi(state: GFIState) -> GFIResult:
    """Compute the GFI tier position and penalty for one year."""
    return GFICalculator().calculate(state)
