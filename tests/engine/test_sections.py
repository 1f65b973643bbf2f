from decimal import Decimal

from homefit.engine.commute_burden import calculate_commute_burden_index
from homefit.engine.sections import (
    CAUTION_LEASE,
    CAUTION_SHARE,
    TAG_COST,
    TAG_LEASE,
    TAG_SCHOOL,
    TAG_SCHOOL_INSENSITIVE,
    be_cautious,
    best_suited_for,
    bottom_line,
    commute_comparison,
    education_block,
    education_impact,
    housing_tradeoff,
    moving_phrase,
)
from homefit.models.commute import BusDependency, MrtAccess, TransferComplexity
from homefit.models.comparison import ChoiceFlexibility, ComparisonMetrics
from homefit.models.education import SchoolLandscape


def metrics(delta_price=0, delta_lease=0.0, delta_epi=None, delta_rent_gap=None) -> ComparisonMetrics:
    return ComparisonMetrics(
        delta_price=Decimal(delta_price),
        delta_lease_years=delta_lease,
        lease_a=80.0,
        lease_b=80.0 - delta_lease,
        frac_below_critical_a=0.0,
        frac_below_critical_b=0.0,
        delta_epi=delta_epi,
        delta_rent_gap=delta_rent_gap,
    )


class TestEducationBlock:
    def test_none_without_data(self):
        assert education_block("A", "B", None, None) is None

    def test_one_side_missing(self, epi_factory):
        block = education_block("BEDOK", "TAMPINES", epi_factory("BEDOK", 20), None)
        assert "• TAMPINES: Data not available" in block.comparison
        assert block.explanation == "School pressure data is only available for BEDOK."
        assert block.pressure_range_note is None

    def test_both_low(self, epi_factory):
        block = education_block("BEDOK", "TAMPINES", epi_factory("BEDOK", 20), epi_factory("TAMPINES", 25))
        assert block.explanation == "Both areas offer similar school competition levels."
        assert block.pressure_range_note.startswith("Both areas fall within the Low pressure range (0–33)")

    def test_higher_pressure_in_a(self, epi_factory):
        block = education_block("BEDOK", "TAMPINES", epi_factory("BEDOK", 70), epi_factory("TAMPINES", 30))
        assert block.explanation.startswith("Families in BEDOK face more concentrated competition")
        assert block.pressure_range_note.startswith("One or both areas have higher pressure (67+)")


class TestEducationImpact:
    def test_requires_landscapes(self, epi_older, epi_newer):
        assert education_impact(epi_older, epi_newer, None, None) is None

    def test_moving_to_lower_pressure(self, epi_older, epi_newer, landscape_pair):
        impact = education_impact(epi_older, epi_newer, *landscape_pair)
        assert impact.epi_change_text == "-20.0 (Low)"
        assert impact.high_demand_schools_text == "-2"
        assert impact.school_count_text == "10 → 14"
        assert impact.choice_flexibility is ChoiceFlexibility.BETTER
        assert impact.explanation.startswith("Pressure decreases significantly")

    def test_small_rise_stays_low(self, epi_factory):
        same = SchoolLandscape(area_id="X", school_count=8, high_demand_schools=1)
        impact = education_impact(epi_factory("A", 20), epi_factory("B", 24), same, same)
        assert impact.epi_change_text == "+4.0 (still Low)"
        assert impact.choice_flexibility is ChoiceFlexibility.SIMILAR
        assert "stays within Low range" in impact.explanation


class TestCommuteComparison:
    def test_similar(self, access_factory):
        args = (3, 14, MrtAccess.HIGH, TransferComplexity.DIRECT, BusDependency.LOW)
        table = {"A": access_factory("A", *args), "B": access_factory("B", *args)}
        result = commute_comparison(
            "A", "B",
            calculate_commute_burden_index("A", table),
            calculate_commute_burden_index("B", table),
        )
        assert result.summary == "Both areas carry a similar structural commute burden."
        assert result.label_a == result.label_b == "Low burden"

    def test_none(self):
        assert commute_comparison("A", "B", None, None) is None


class TestTags:
    def test_best_suited_for(self):
        tags = best_suited_for(metrics(delta_price=-40_000, delta_lease=-25.0, delta_epi=20.0))
        assert tags.area_a == (TAG_COST, TAG_SCHOOL_INSENSITIVE)
        assert tags.area_b == (TAG_SCHOOL, TAG_LEASE)

    def test_no_tags_when_close(self):
        tags = best_suited_for(metrics(delta_price=-10_000, delta_lease=-5.0, delta_epi=4.0))
        assert tags.area_a == tags.area_b == ()

    def test_be_cautious(self, older_area, newer_area, profile_factory):
        assert be_cautious(older_area, newer_area).area_a == (CAUTION_LEASE,)
        crowded = profile_factory("X", 400_000, 62.0, frac_below_critical=0.40)
        assert be_cautious(crowded, newer_area).area_a == (CAUTION_SHARE,)


class TestBottomLine:
    def test_nothing_material(self):
        assert bottom_line(metrics(delta_price=5_000)) is None

    def test_lease_led(self):
        result = bottom_line(metrics(delta_price=-40_000, delta_lease=-30.0, delta_epi=5.0))
        assert result.changes == (
            "👍 Lease security improves significantly",
            "👍 School pressure decreases slightly",
            "💰 Higher upfront price",
        )
        assert result.best_for.startswith("Best for families planning long-term ownership")

    def test_similar_affordability(self):
        result = bottom_line(metrics(delta_rent_gap=Decimal("20")))
        assert result.changes == ("💰 Similar monthly affordability",)


class TestPhrases:
    def test_moving_phrase_needs_a_significant_change(self):
        assert moving_phrase("A", "B", metrics(delta_price=10_000)) is None

    def test_moving_phrase_single_part(self):
        assert moving_phrase("A", "B", metrics(delta_price=50_000)) == "Moving from A to B reduces entry cost."

    def test_housing_tradeoff(self):
        result = housing_tradeoff("A", "B", metrics(delta_price=35_000, delta_lease=16.0))
        assert result.price == "Entry cost is higher in A."
        assert result.lease == "Remaining lease is healthier in A."
