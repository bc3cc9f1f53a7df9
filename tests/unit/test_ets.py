"""Tests for the EU ETS maritime allowance calculator."""

import pytest

from maritime_ghg.compliance.ets import (
    ETSCalculator,
    VoyageScope,
    classify_voyage,
    compute_ets,
)
from maritime_ghg.compliance.factors import UnsupportedCategoryError
from maritime_ghg.schemas import VoyageRecord


@pytest.fixture
def calc():
    return ETSCalculator()


def voyage(origin=True, destination=True, **kwargs):
    kwargs.setdefault("eua_price", 80.0)
    return VoyageRecord(origin_is_eu=origin, destination_is_eu=destination, **kwargs)


# =============================================================================
# Scope
# =============================================================================

class TestScope:
    @pytest.mark.parametrize("origin,destination,scope,factor", [
        (True, True, VoyageScope.INTRA_EU, 1.0),
        (False, True, VoyageScope.INBOUND, 0.5),
        (True, False, VoyageScope.OUTBOUND, 0.5),
        (False, False, VoyageScope.NON_EU, 0.0),
    ])
    def test_classification(self, origin, destination, scope, factor):
        result = classify_voyage(origin, destination)
        assert result == scope
        assert result.factor == factor

    def test_labels(self):
        assert VoyageScope.INTRA_EU.label == "Intra-EU"
        assert VoyageScope.NON_EU.label == "Out of scope"

    def test_non_eu_voyage_has_no_liability(self, calc):
        result = calc.calculate(voyage(False, False, fuel_mt={"hfo": 500}))
        assert result.total_co2eq_t > 0
        assert result.eua_to_surrender == 0.0
        assert result.financial_impact_eur == 0.0


# =============================================================================
# Emissions and liability
# =============================================================================

class TestLiability:
    def test_intra_eu_2026(self, calc):
        result = calc.calculate(voyage(fuel_mt={"hfo": 100}, year=2026))
        assert result.total_co2eq_t == pytest.approx(316.3)
        assert result.phase_in_factor == 1.0
        assert result.eua_to_surrender == pytest.approx(316.3)
        assert result.financial_impact_eur == pytest.approx(316.3 * 80)

    def test_inbound_2024_phase_in(self, calc):
        result = calc.calculate(voyage(False, True, fuel_mt={"mgo": 100}, year=2024))
        assert result.voyage_label == "Inbound"
        assert result.eua_to_surrender == pytest.approx(325.5 * 0.5 * 0.4)

    @pytest.mark.parametrize("year,phase_in", [
        (2023, 0.0),
        (2024, 0.4),
        (2025, 0.7),
        (2026, 1.0),
        (2030, 1.0),
    ])
    def test_phase_in(self, calc, year, phase_in):
        result = calc.calculate(voyage(fuel_mt={"lng": 10}, year=year))
        assert result.phase_in_factor == phase_in

    def test_vlsfo_uses_lfo_factor(self, calc):
        lfo = calc.calculate(voyage(fuel_mt={"lfo": 100}))
        vlsfo = calc.calculate(voyage(fuel_mt={"vlsfo": 100}))
        assert lfo.total_co2eq_t == pytest.approx(vlsfo.total_co2eq_t)

    def test_unknown_fuel_rejected(self, calc):
        with pytest.raises(UnsupportedCategoryError):
            calc.calculate(voyage(fuel_mt={"methanol": 100}))

    def test_liability_scales_with_price(self, calc):
        cheap = calc.calculate(voyage(fuel_mt={"hfo": 100}, eua_price=50))
        dear = calc.calculate(voyage(fuel_mt={"hfo": 100}, eua_price=100))
        assert dear.financial_impact_eur == pytest.approx(cheap.financial_impact_eur * 2)

    def test_default_price_from_settings(self):
        record = VoyageRecord(origin_is_eu=True, destination_is_eu=True)
        assert record.eua_price == 85.0


# =============================================================================
# Biofuel blends
# =============================================================================

class TestBiofuel:
    def test_b30_on_mgo(self, calc):
        result = calc.calculate(voyage(biofuel_mt=100, biofuel_grade="B30", biofuel_base_fuel="mgo"))
        row = result.fuel_breakdown[-1]
        assert row.fuel_type == "biofuel"
        assert row.chargeable_mass_mt == pytest.approx(70)
        assert row.co2eq_t == pytest.approx(70 * 3.255)

    def test_b100_not_chargeable(self, calc):
        result = calc.calculate(voyage(biofuel_mt=100, biofuel_grade="B100"))
        assert result.total_co2eq_t == 0.0

    def test_custom_fraction(self, calc):
        result = calc.calculate(voyage(
            biofuel_mt=100, biofuel_grade="CUSTOM", biofuel_custom_fraction=0.8,
        ))
        assert result.fuel_breakdown[-1].chargeable_mass_mt == pytest.approx(20)

    def test_custom_without_fraction_defaults(self, calc):
        result = calc.calculate(voyage(biofuel_mt=100, biofuel_grade="CUSTOM"))
        assert result.fuel_breakdown[-1].chargeable_mass_mt == pytest.approx(70)

    def test_no_biofuel_row_when_zero(self, calc):
        result = calc.calculate(voyage(fuel_mt={"hfo": 10}))
        assert [r.fuel_type for r in result.fuel_breakdown] == ["hfo"]

    def test_unknown_grade(self, calc):
        with pytest.raises(UnsupportedCategoryError, match="biofuel grade"):
            calc.calculate(voyage(biofuel_mt=10, biofuel_grade="B77"))

    def test_higher_blend_lowers_liability(self, calc):
        grades = ["B24", "B30", "B50", "B100"]
        liabilities = [
            calc.calculate(voyage(biofuel_mt=100, biofuel_grade=g)).eua_to_surrender
            for g in grades
        ]
        assert liabilities == sorted(liabilities, reverse=True)


# =============================================================================
# Several voyages
# =============================================================================

class TestVoyages:
    def test_calculate_voyages(self, calc):
        voyages = [
            voyage(True, True, fuel_mt={"hfo": 100}),
            voyage(True, False, fuel_mt={"hfo": 100}),
            voyage(False, False, fuel_mt={"hfo": 100}),
        ]
        result = calc.calculate_voyages(voyages)
        assert len(result.voyages) == 3
        assert result.eua_to_surrender == pytest.approx(316.3 * 1.5)
        assert result.total_co2eq_t == pytest.approx(316.3 * 3)

    def test_compute_ets(self, calc):
        record = voyage(fuel_mt={"mgo": 42})
        assert compute_ets(record) == calc.calculate(record)
