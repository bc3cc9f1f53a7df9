"""
EU Emissions Trading System (ETS) maritime allowance calculator.

Implements the shipping extension of Directive 2003/87/EC:
- Voyage scope classification (intra-EU 100%, inbound/outbound 50%)
- CO2-equivalent emissions (CO2, CH4 and N2O weighted by GWP)
- Biofuel blends: only the fossil share of the blend is chargeable
- Phase-in of the surrender obligation (40% 2024, 70% 2025, 100% 2026+)
- EUA liability at a given spot price
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List

from ..schemas.ets import VoyageRecord
from .factors import (
    ETS_PHASE_IN,
    get_ets_factor,
    grade_fraction,
    normalize_key,
    resolve_grade,
)

logger = logging.getLogger(__name__)

BIOFUEL_ROW = "biofuel"


class VoyageScope(Enum):
    """Voyage classification by EU membership of its two ports."""
    INTRA_EU = "intra_eu"
    INBOUND = "inbound"
    OUTBOUND = "outbound"
    NON_EU = "non_eu"

    @property
    def factor(self) -> float:
        return SCOPE_FACTORS[self]

    @property
    def label(self) -> str:
        return SCOPE_LABELS[self]


SCOPE_FACTORS = {
    VoyageScope.INTRA_EU: 1.0,
    VoyageScope.INBOUND: 0.5,
    VoyageScope.OUTBOUND: 0.5,
    VoyageScope.NON_EU: 0.0,
}

SCOPE_LABELS = {
    VoyageScope.INTRA_EU: "Intra-EU",
    VoyageScope.INBOUND: "Inbound",
    VoyageScope.OUTBOUND: "Outbound",
    VoyageScope.NON_EU: "Out of scope",
}


@dataclass
class ETSFuelRow:
    """CO2e of one fuel line."""
    fuel_type: str
    mass_mt: float
    chargeable_mass_mt: float
    co2eq_factor: float  # tCO2e per t fuel
    co2eq_t: float


@dataclass
class ETSResult:
    """EU ETS liability of one voyage."""
    year: int
    scope: VoyageScope
    voyage_label: str
    scope_factor: float
    phase_in_factor: float
    total_co2eq_t: float
    eua_to_surrender: float
    eua_price: float
    financial_impact_eur: float
    fuel_breakdown: List[ETSFuelRow] = field(default_factory=list)


@dataclass
class ETSFleetResult:
    """Aggregated liability over several voyages."""
    total_co2eq_t: float
    eua_to_surrender: float
    financial_impact_eur: float
    voyages: List[ETSResult] = field(default_factory=list)


def classify_voyage(origin_is_eu: bool, destination_is_eu: bool) -> VoyageScope:
    """Classify a voyage from the EU membership of its ports."""
    if origin_is_eu and destination_is_eu:
        return VoyageScope.INTRA_EU
    elif destination_is_eu:
        return VoyageScope.INBOUND
    elif origin_is_eu:
        return VoyageScope.OUTBOUND
    else:
        return VoyageScope.NON_EU


class ETSCalculator:
    """EU ETS allowance liability calculator."""

    def calculate(self, voyage: VoyageRecord) -> ETSResult:
        """
        Calculate CO2e, EUAs to surrender and their cost for a voyage.

        Args:
            voyage: Port EU membership, fuel consumption, biofuel blend,
                    reporting year and EUA price

        Returns:
            ETSResult with scope, phase-in and per-fuel breakdown
        """
        scope = classify_voyage(voyage.origin_is_eu, voyage.destination_is_eu)
        rows = self._fuel_rows(voyage)
        total_co2eq = sum(row.co2eq_t for row in rows)

        phase_in = ETS_PHASE_IN[voyage.year]
        eua = total_co2eq * scope.factor * phase_in
        cost = eua * voyage.eua_price

        logger.debug(
            "ETS %s voyage %d: %.2f tCO2e x %.1f x %.1f = %.2f EUA",
            scope.label, voyage.year, total_co2eq, scope.factor, phase_in, eua,
        )

        return ETSResult(
            year=voyage.year,
            scope=scope,
            voyage_label=scope.label,
            scope_factor=scope.factor,
            phase_in_factor=phase_in,
            total_co2eq_t=total_co2eq,
            eua_to_surrender=eua,
            eua_price=voyage.eua_price,
            financial_impact_eur=cost,
            fuel_breakdown=rows,
        )

    def calculate_voyages(self, voyages: List[VoyageRecord]) -> ETSFleetResult:
        """Sum the liability of several voyages."""
        results = [self.calculate(v) for v in voyages]
        return ETSFleetResult(
            total_co2eq_t=sum(r.total_co2eq_t for r in results),
            eua_to_surrender=sum(r.eua_to_surrender for r in results),
            financial_impact_eur=sum(r.financial_impact_eur for r in results),
            voyages=results,
        )

    @staticmethod
    def _fuel_rows(voyage: VoyageRecord) -> List[ETSFuelRow]:
        rows = []
        for fuel_type, mass in voyage.fuel_mt.items():
            factor = get_ets_factor(fuel_type).co2eq
            rows.append(ETSFuelRow(
                fuel_type=normalize_key(fuel_type),
                mass_mt=mass,
                chargeable_mass_mt=mass,
                co2eq_factor=factor,
                co2eq_t=mass * factor,
            ))

        # Grade and base fuel are validated even for an empty biofuel row
        resolve_grade(voyage.biofuel_grade)
        base_factor = get_ets_factor(voyage.biofuel_base_fuel).co2eq
        if voyage.biofuel_mt > 0:
            bio_fraction = grade_fraction(voyage.biofuel_grade, voyage.biofuel_custom_fraction)
            chargeable = voyage.biofuel_mt * (1 - bio_fraction)
            rows.append(ETSFuelRow(
                fuel_type=BIOFUEL_ROW,
                mass_mt=voyage.biofuel_mt,
                chargeable_mass_mt=chargeable,
                co2eq_factor=base_factor,
                co2eq_t=chargeable * base_factor,
            ))

        return rows


def compute_ets(voyage: VoyageRecord) -> ETSResult:
    """Compute the EU ETS liability of a single voyage."""
    return ETSCalculator().calculate(voyage)
