"""Tests for the IMO GFI two-tier compliance module."""

import pytest

from maritime_ghg.compliance.factors import GFI_2008_BASELINE, UnsupportedCategoryError
from maritime_ghg.compliance.gfi import (
    GFICalculator,
    GFIStatus,
    compute_gfi,
    is_znz_eligible,
)
from maritime_ghg.schemas import GFIState

VLSFO_GFI = 3.58 / 0.0410  # ~87.32 gCO2eq/MJ
BIO_GFI = 0.55 / 0.0370  # ~14.86 gCO2eq/MJ


@pytest.fixture
def calc():
    return GFICalculator()


def state(**kwargs):
    kwargs.setdefault("tier1_price", 100)
    kwargs.setdefault("tier2_price", 380)
    return GFIState(**kwargs)


# =============================================================================
# Targets
# =============================================================================

class TestTargets:
    def test_2028_targets(self, calc):
        targets = calc.get_targets(2028)
        assert targets.base_target == pytest.approx(GFI_2008_BASELINE * 0.96)
        assert targets.direct_target == pytest.approx(GFI_2008_BASELINE * 0.83)

    @pytest.mark.parametrize("year", range(2028, 2036))
    def test_direct_below_base(self, calc, year):
        targets = calc.get_targets(year)
        assert targets.direct_target < targets.base_target

    def test_years_clamped(self, calc):
        assert calc.get_targets(2026).base_target == calc.get_targets(2028).base_target
        assert calc.get_targets(2040).direct_target == calc.get_targets(2035).direct_target

    def test_targets_by_year(self, calc):
        rows = calc.get_targets_by_year()
        assert [r["year"] for r in rows] == list(range(2028, 2036))
        assert rows[-1]["base_reduction_pct"] == 30.0
        assert rows[-1]["direct_reduction_pct"] == 43.0


# =============================================================================
# Tier classification
# =============================================================================

class TestClassification:
    def test_vlsfo_2028_tier1(self, calc):
        result = calc.calculate(state(year=2028, fuel_mt={"vlsfo": 1000}))
        energy = 1000 * 1e6 * 0.0410

        assert result.attained_gfi == pytest.approx(VLSFO_GFI)
        assert result.status == GFIStatus.TIER_1_DEFICIT
        assert result.tier1_units_t == pytest.approx(
            (VLSFO_GFI - result.direct_target) * energy / 1e6
        )
        assert result.tier2_units_t == 0.0
        assert result.surplus_units_t == 0.0
        assert result.penalty == pytest.approx(result.tier1_units_t * 100)

    def test_vlsfo_2035_tier2(self, calc):
        result = calc.calculate(state(year=2035, fuel_mt={"vlsfo": 1000}))
        energy = result.total_energy_mj

        assert result.status == GFIStatus.TIER_2_DEFICIT
        assert result.tier1_units_t == pytest.approx(
            (result.base_target - result.direct_target) * energy / 1e6
        )
        assert result.tier2_units_t == pytest.approx(
            (VLSFO_GFI - result.base_target) * energy / 1e6
        )
        assert result.penalty == pytest.approx(
            result.tier1_units_t * 100 + result.tier2_units_t * 380
        )

    def test_lng_2028_compliant(self, calc):
        result = calc.calculate(state(year=2028, fuel_mt={"lng": 1000}))
        assert result.status == GFIStatus.COMPLIANT
        assert result.tier1_units_t == 0.0
        assert result.penalty == 0.0
        assert result.surplus_units_t == pytest.approx(
            (result.direct_target - result.attained_gfi) * result.total_energy_mj / 1e6
        )

    def test_empty_inventory(self, calc):
        result = calc.calculate(state(year=2030))
        assert result.attained_gfi == 0.0
        assert result.total_energy_mj == 0.0
        assert result.status == GFIStatus.COMPLIANT
        assert result.penalty == 0.0

    def test_unknown_fuel_rejected(self, calc):
        with pytest.raises(UnsupportedCategoryError):
            calc.calculate(state(fuel_mt={"ammonia": 100}))


# =============================================================================
# Biofuel blend
# =============================================================================

class TestBiofuelBlend:
    def test_half_blend(self, calc):
        result = calc.calculate(state(
            year=2028, fuel_mt={"vlsfo": 1000}, bio_blend_percent=50, bio_source_fuel="vlsfo",
        ))
        rows = {r.fuel_type: r for r in result.fuel_breakdown}

        assert rows["vlsfo"].mass_mt == pytest.approx(500)
        assert rows["bio"].mass_mt == pytest.approx(500)
        expected = (500 * 3.58 + 500 * 0.55) / (500 * 0.0410 + 500 * 0.0370)
        assert result.attained_gfi == pytest.approx(expected)
        assert result.status == GFIStatus.COMPLIANT

    def test_blend_only_touches_source_fuel(self, calc):
        result = calc.calculate(state(
            fuel_mt={"hfo": 200, "vlsfo": 1000}, bio_blend_percent=20, bio_source_fuel="vlsfo",
        ))
        rows = {r.fuel_type: r for r in result.fuel_breakdown}
        assert rows["hfo"].mass_mt == pytest.approx(200)
        assert rows["vlsfo"].mass_mt == pytest.approx(800)
        assert rows["bio"].mass_mt == pytest.approx(200)

    def test_source_missing_from_inventory(self, calc):
        result = calc.calculate(state(fuel_mt={"hfo": 100}, bio_blend_percent=50, bio_source_fuel="mgo"))
        assert [r.fuel_type for r in result.fuel_breakdown] == ["hfo"]

    def test_blend_lowers_attained(self, calc):
        plain = calc.calculate(state(fuel_mt={"vlsfo": 1000}))
        blended = calc.calculate(state(fuel_mt={"vlsfo": 1000}, bio_blend_percent=10))
        assert blended.attained_gfi < plain.attained_gfi

    def test_unknown_source_fuel(self, calc):
        with pytest.raises(UnsupportedCategoryError):
            calc.calculate(state(fuel_mt={"vlsfo": 1000}, bio_source_fuel="kerosene"))


# =============================================================================
# ZNZ reward
# =============================================================================

class TestZNZ:
    def test_full_bio_2028_eligible(self, calc):
        result = calc.calculate(state(year=2028, fuel_mt={"vlsfo": 100}, bio_blend_percent=100))
        assert result.attained_gfi == pytest.approx(BIO_GFI)
        assert result.znz_eligible is True

    def test_threshold_tightens_in_2035(self):
        assert is_znz_eligible(BIO_GFI, 2034) is True
        assert is_znz_eligible(BIO_GFI, 2035) is False
        assert is_znz_eligible(14.0, 2035) is True

    def test_fossil_not_eligible(self, calc):
        result = calc.calculate(state(fuel_mt={"lng": 100}))
        assert result.znz_eligible is False


# =============================================================================
# Projection and prices
# =============================================================================

class TestProjection:
    def test_project_all_years(self, calc):
        results = calc.project_gfi(state(fuel_mt={"vlsfo": 1000}))
        assert [r.year for r in results] == list(range(2028, 2036))
        penalties = [r.penalty for r in results]
        assert penalties == sorted(penalties)

    def test_explicit_prices_used(self, calc):
        result = calc.calculate(state(fuel_mt={"vlsfo": 1000}, tier1_price=50))
        assert result.tier1_cost == pytest.approx(result.tier1_units_t * 50)

    def test_default_prices_from_settings(self):
        record = GFIState(fuel_mt={"vlsfo": 1})
        assert record.tier1_price == 100.0
        assert record.tier2_price == 380.0

    def test_compute_gfi(self, calc):
        record = state(year=2030, fuel_mt={"mgo": 500})
        assert compute_gfi(record) == calc.calculate(record)
