"""
Biofuel / fossil blended emission factor (Cf) calculator.

Computes the energy-weighted carbon factor of a biofuel blend as used for
MRV and CII reporting of drop-in biofuels:

- Unit conversion (MJ/kg -> MJ/g, MT -> g)
- Sustainability gate: certified and at most 33 gCO2e/MJ, otherwise the
  biofuel is charged at the fossil carbon factor
- Energy ratios and per-component contribution to the blended Cf

Reference: IMO MEPC.1/Circ.905 (interim guidance on biofuels)
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from ..schemas.fuel import BiofuelComponent, FossilComponent
from .factors import (
    BIOFUEL_LIFECYCLE_REDUCTION,
    SUSTAINABILITY_THRESHOLD,
    get_fuel_standard,
    grade_fraction,
    normalize_key,
)

logger = logging.getLogger(__name__)

GRAMS_PER_MT = 1_000_000


@dataclass
class ComponentBreakdown:
    """Energy and Cf terms of one blend component."""
    lcv: float  # MJ/g
    mass_g: float
    energy_mj: float
    cf: float  # gCO2/g fuel
    ratio: float  # share of blend energy
    contribution: float  # ratio × cf


@dataclass
class BiofuelBreakdown(ComponentBreakdown):
    is_sustainability_compliant: bool = False


@dataclass
class FossilBreakdown(ComponentBreakdown):
    fuel_type: str = ""


@dataclass
class BlendResult:
    """Result of a blended Cf calculation."""
    biofuel: BiofuelBreakdown
    fossil: FossilBreakdown
    total_mass_g: float
    total_energy_mj: float
    blended_cf: float


@dataclass
class BiofuelSavings:
    """Baseline vs biofuel-displacement CO2 for a fuel mix."""
    baseline_co2_mt: float
    scenario_co2_mt: float
    savings_co2_mt: float
    biofuel_percent: float


def is_sustainability_compliant(biofuel: BiofuelComponent) -> bool:
    """Certified and at or below the sustainability threshold."""
    return biofuel.is_certified and biofuel.ghg_intensity <= SUSTAINABILITY_THRESHOLD


def compute_blend(biofuel: BiofuelComponent, fossil: FossilComponent) -> BlendResult:
    """
    Calculate the energy-weighted Cf of a biofuel/fossil blend.

    Args:
        biofuel: Biofuel mass, LCV (MJ/kg), GHG intensity and certification
        fossil: Fossil fuel type and mass

    Returns:
        BlendResult with per-component energy, ratio and contribution
    """
    standard = get_fuel_standard(fossil.fuel_type)

    bio_lcv = biofuel.lcv_mj_per_kg / 1000
    bio_mass_g = biofuel.mass_mt * GRAMS_PER_MT
    fossil_mass_g = fossil.mass_mt * GRAMS_PER_MT

    compliant = is_sustainability_compliant(biofuel)
    if compliant:
        # Cf [gCO2e/g] = intensity [gCO2e/MJ] × LCV [MJ/g]
        bio_cf = biofuel.ghg_intensity * bio_lcv
    else:
        logger.warning(
            "Biofuel not sustainability compliant (certified=%s, %.2f gCO2e/MJ), "
            "charging at %s Cf %.3f",
            biofuel.is_certified, biofuel.ghg_intensity, standard.name, standard.cf,
        )
        bio_cf = standard.cf
    bio_cf = max(0.0, bio_cf)

    bio_energy = bio_mass_g * bio_lcv
    fossil_energy = fossil_mass_g * standard.lcv
    total_energy = bio_energy + fossil_energy

    bio_ratio = bio_energy / total_energy if total_energy > 0 else 0.0
    fossil_ratio = fossil_energy / total_energy if total_energy > 0 else 0.0

    bio_contribution = bio_ratio * bio_cf
    fossil_contribution = fossil_ratio * standard.cf
    blended_cf = bio_contribution + fossil_contribution

    logger.debug(
        "Blend: bio %.1f MJ (ratio %.4f), fossil %.1f MJ (ratio %.4f) -> Cf %.4f",
        bio_energy, bio_ratio, fossil_energy, fossil_ratio, blended_cf,
    )

    return BlendResult(
        biofuel=BiofuelBreakdown(
            lcv=bio_lcv,
            mass_g=bio_mass_g,
            energy_mj=bio_energy,
            cf=bio_cf,
            ratio=bio_ratio,
            contribution=bio_contribution,
            is_sustainability_compliant=compliant,
        ),
        fossil=FossilBreakdown(
            lcv=standard.lcv,
            mass_g=fossil_mass_g,
            energy_mj=fossil_energy,
            cf=standard.cf,
            ratio=fossil_ratio,
            contribution=fossil_contribution,
            fuel_type=normalize_key(fossil.fuel_type),
        ),
        total_mass_g=bio_mass_g + fossil_mass_g,
        total_energy_mj=total_energy,
        blended_cf=blended_cf,
    )


def split_blend(
    total_mass_mt: float,
    grade,
    custom_fraction: Optional[float] = None,
) -> Tuple[float, float]:
    """
    Split a graded blend (B24, B30, ...) into biofuel and fossil mass.

    Returns:
        (biofuel_mt, fossil_mt)
    """
    fraction = grade_fraction(grade, custom_fraction)
    bio_mt = total_mass_mt * fraction
    return bio_mt, total_mass_mt - bio_mt


def estimate_biofuel_savings(
    fuel_mt: Dict[str, float],
    biofuel_percent: float,
) -> BiofuelSavings:
    """
    Estimate CO2 saved by replacing a share of the fuel mix with biofuel.

    The replaced share is assumed to emit BIOFUEL_LIFECYCLE_REDUCTION less
    CO2 than the fossil fuel it displaces.

    Args:
        fuel_mt: Fuel type -> MT consumed
        biofuel_percent: Share of the mix replaced by biofuel (0-100)
    """
    baseline = sum(
        mass * get_fuel_standard(fuel_type).cf for fuel_type, mass in fuel_mt.items()
    )
    scenario = baseline * (1 - biofuel_percent / 100 * BIOFUEL_LIFECYCLE_REDUCTION)

    return BiofuelSavings(
        baseline_co2_mt=baseline,
        scenario_co2_mt=scenario,
        savings_co2_mt=baseline - scenario,
        biofuel_percent=biofuel_percent,
    )
