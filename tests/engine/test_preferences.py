from decimal import Decimal

import pytest

from homefit.engine.preferences import (
    PREFERENCE_MODES,
    apply_planning_horizon,
    apply_rule_profile,
    check_hard_rules,
    evaluate_school_rules,
    get_preference_mode,
    map_family_profile_to_rule_profile,
    normalize_weights,
)
from homefit.models.comparison import ComparisonMetrics
from homefit.models.education import EpiLevel
from homefit.models.preference import (
    CostVsValue,
    FamilyProfile,
    HoldingPeriod,
    Lens,
    LifeStage,
    ModeId,
    PersonalizedContext,
    PlanningHorizon,
    PreferenceMode,
    RuleEffect,
    RuleProfile,
    SchoolImpact,
    SchoolSensitivity,
    Weights,
)


def metrics(
    delta_price: int = 0,
    lease_a: float = 80.0,
    lease_b: float = 80.0,
    delta_epi: float | None = None,
    level_a: EpiLevel | None = None,
    level_b: EpiLevel | None = None,
) -> ComparisonMetrics:
    return ComparisonMetrics(
        delta_price=Decimal(delta_price),
        delta_lease_years=lease_a - lease_b,
        lease_a=lease_a,
        lease_b=lease_b,
        frac_below_critical_a=0.0,
        frac_below_critical_b=0.0,
        delta_epi=delta_epi,
        epi_level_a=level_a,
        epi_level_b=level_b,
    )


class TestPreferenceModes:
    @pytest.mark.parametrize("mode_id", list(ModeId))
    def test_weights_sum_to_one(self, mode_id):
        assert PREFERENCE_MODES[mode_id].weights.total == pytest.approx(1.0)

    def test_lens_mapping(self):
        assert get_preference_mode(Lens.LOWER_COST).id is ModeId.LOW_ENTRY
        assert get_preference_mode("lease_safety").id is ModeId.LONG_TERM
        assert get_preference_mode("school_pressure").id is ModeId.LOW_SCHOOL_PRESSURE
        assert get_preference_mode(Lens.BALANCED).id is ModeId.BALANCED

    def test_unknown_lens_is_balanced(self):
        assert get_preference_mode("cheapest_possible").id is ModeId.BALANCED

    def test_long_term_flag(self):
        assert get_preference_mode(Lens.BALANCED, long_term=True).id is ModeId.LONG_TERM
        assert get_preference_mode(Lens.LOWER_COST, long_term=True).id is ModeId.LONG_TERM

    def test_long_term_flag_keeps_school_lens(self):
        assert get_preference_mode(Lens.SCHOOL_PRESSURE, long_term=True).id is ModeId.LOW_SCHOOL_PRESSURE

    def test_max_tradeoffs(self):
        assert PREFERENCE_MODES[ModeId.BALANCED].max_tradeoffs == 4
        assert PREFERENCE_MODES[ModeId.LOW_ENTRY].max_tradeoffs == 3
        assert PREFERENCE_MODES[ModeId.LONG_TERM].max_tradeoffs == 3
        assert PREFERENCE_MODES[ModeId.LOW_SCHOOL_PRESSURE].max_tradeoffs == 4


class TestNormalizeWeights:
    def test_rescales(self):
        w = normalize_weights(Weights(cost=0.6, lease=0.3, school=0.3))
        assert w.total == pytest.approx(1.0)
        assert w.cost == pytest.approx(0.5)

    def test_clamps_above_one_before_rescaling(self):
        w = normalize_weights(Weights(cost=2, lease=1, school=1))
        assert w.cost == pytest.approx(1 / 3)
        assert w.lease == pytest.approx(1 / 3)

    def test_clamps_negative(self):
        w = normalize_weights(Weights(cost=0.5, lease=-0.2, school=0.5))
        assert w.lease == 0.0
        assert w.cost == pytest.approx(0.5)

    def test_all_zero_falls_back_to_balanced(self):
        assert normalize_weights(Weights()) == PREFERENCE_MODES[ModeId.BALANCED].weights


class TestApplyRuleProfile:
    def test_adds_and_renormalizes(self):
        """{.55, .25, .15, .05} + {school .10, lease .05} renormalized over 1.15."""
        mode = PreferenceMode(id=ModeId.LOW_ENTRY, weights=Weights(cost=0.55, lease=0.25, school=0.15, stability=0.05))
        profile = RuleProfile(
            active_mode=ModeId.LOW_ENTRY,
            adjustments=Weights(school=0.10, lease=0.05),
            context=PersonalizedContext(stage="s", holding="h", priority="p"),
        )
        adjusted = apply_rule_profile(mode, profile).weights
        assert adjusted.total == pytest.approx(1.0)
        assert adjusted.cost == pytest.approx(0.55 / 1.15)
        assert adjusted.lease == pytest.approx(0.30 / 1.15)
        assert adjusted.school == pytest.approx(0.25 / 1.15)
        assert adjusted.stability == pytest.approx(0.05 / 1.15)

    def test_keeps_active_mode_rules(self):
        mode = PREFERENCE_MODES[ModeId.LONG_TERM]
        profile = map_family_profile_to_rule_profile(
            FamilyProfile(LifeStage.OLDER_CHILDREN, HoldingPeriod.LONG, CostVsValue.VALUE)
        )
        adjusted = apply_rule_profile(mode, profile)
        assert adjusted.id is ModeId.LONG_TERM
        assert adjusted.hard_rules == mode.hard_rules
        assert adjusted.max_tradeoffs == 3


class TestMapFamilyProfile:
    def test_adjustments_capped(self):
        """School +.35, lease +.10, stability +.05 exceeds the .30 cap and is scaled by .6."""
        profile = map_family_profile_to_rule_profile(FamilyProfile(
            stage=LifeStage.PRIMARY_FAMILY,
            holding_period=HoldingPeriod.LONG,
            cost_vs_value=CostVsValue.VALUE,
            school_sensitivity=SchoolSensitivity.HIGH,
        ))
        adj = profile.adjustments
        assert adj.school == pytest.approx(0.21)
        assert adj.lease == pytest.approx(0.06)
        assert adj.stability == pytest.approx(0.03)
        assert profile.active_mode is ModeId.LONG_TERM

    def test_cost_priority(self):
        profile = map_family_profile_to_rule_profile(FamilyProfile(
            stage=LifeStage.NO_CHILDREN,
            holding_period=HoldingPeriod.SHORT,
            cost_vs_value=CostVsValue.COST,
        ))
        assert profile.active_mode is ModeId.LOW_ENTRY
        assert profile.adjustments.school == pytest.approx(-0.10)
        assert profile.adjustments.lease == pytest.approx(-0.10)
        assert profile.adjustments.cost == pytest.approx(0.05)

    def test_long_holding_forces_long_term(self):
        profile = map_family_profile_to_rule_profile(FamilyProfile(
            stage=LifeStage.NO_CHILDREN,
            holding_period=HoldingPeriod.LONG,
            cost_vs_value=CostVsValue.BALANCED,
        ))
        assert profile.active_mode is ModeId.LONG_TERM

    def test_context(self):
        profile = map_family_profile_to_rule_profile(FamilyProfile(
            stage=LifeStage.PRIMARY_FAMILY,
            holding_period=HoldingPeriod.MEDIUM,
            cost_vs_value=CostVsValue.BALANCED,
        ))
        assert profile.context.stage == "Family with primary-school child(ren)"
        assert profile.context.holding == "5–15 years"
        assert profile.context.priority == "Balanced"

    def test_adjusted_weights_sum_to_one(self):
        for stage in LifeStage:
            for holding in HoldingPeriod:
                for priority in CostVsValue:
                    for sensitivity in SchoolSensitivity:
                        rule_profile = map_family_profile_to_rule_profile(
                            FamilyProfile(stage, holding, priority, sensitivity)
                        )
                        mode = apply_rule_profile(PREFERENCE_MODES[rule_profile.active_mode], rule_profile)
                        assert mode.weights.total == pytest.approx(1.0)
                        assert all(v >= 0 for v in mode.weights.as_dict().values())


class TestApplyPlanningHorizon:
    def test_medium_is_identity(self):
        base = PREFERENCE_MODES[ModeId.BALANCED].weights
        adjusted = apply_planning_horizon(base, PlanningHorizon.MEDIUM)
        for key, value in base.as_dict().items():
            assert adjusted.as_dict()[key] == pytest.approx(value)

    def test_short_favours_cost(self):
        base = PREFERENCE_MODES[ModeId.BALANCED].weights
        short = apply_planning_horizon(base, PlanningHorizon.SHORT)
        assert short.cost > base.cost
        assert short.lease < base.lease
        assert short.total == pytest.approx(1.0)

    def test_long_favours_lease(self):
        base = PREFERENCE_MODES[ModeId.BALANCED].weights
        long = apply_planning_horizon(base, PlanningHorizon.LONG)
        assert long.lease > base.lease
        assert long.cost < base.cost
        assert long.total == pytest.approx(1.0)

    def test_keeps_multiplier_ratio_for_heavy_weight(self):
        """cost .9 x 1.25 goes past 1 and must not be clamped before rescaling."""
        short = apply_planning_horizon(Weights(cost=0.9, lease=0.1), PlanningHorizon.SHORT)
        assert short.total == pytest.approx(1.0)
        assert short.cost / short.lease == pytest.approx((0.9 * 1.25) / (0.1 * 0.80))

    def test_all_zero_falls_back_to_balanced(self):
        assert apply_planning_horizon(Weights(), PlanningHorizon.LONG) == PREFERENCE_MODES[ModeId.BALANCED].weights


class TestHardRules:
    def test_lease_warning(self):
        warnings = check_hard_rules(metrics(lease_a=85, lease_b=58), PREFERENCE_MODES[ModeId.LONG_TERM])
        assert len(warnings) == 1
        assert warnings[0].effect is RuleEffect.WARNING
        assert "below 60 years" in warnings[0].message

    def test_lease_ok(self):
        assert check_hard_rules(metrics(lease_a=85, lease_b=75), PREFERENCE_MODES[ModeId.LONG_TERM]) == ()

    def test_price_gap_override(self):
        warnings = check_hard_rules(metrics(delta_price=-25_000), PREFERENCE_MODES[ModeId.LOW_ENTRY])
        assert len(warnings) == 1
        assert warnings[0].effect is RuleEffect.OVERRIDE

    def test_balanced_has_no_rules(self):
        assert check_hard_rules(metrics(delta_price=90_000, lease_b=50), PREFERENCE_MODES[ModeId.BALANCED]) == ()


class TestSchoolRules:
    school_mode = PREFERENCE_MODES[ModeId.LOW_SCHOOL_PRESSURE]

    def test_significant_change(self):
        outcome = evaluate_school_rules(
            metrics(delta_epi=12.0, level_a=EpiLevel.MEDIUM, level_b=EpiLevel.LOW), self.school_mode,
        )
        assert outcome.impact is SchoolImpact.SIGNIFICANT

    def test_small_change_within_low(self):
        outcome = evaluate_school_rules(
            metrics(delta_epi=4.0, level_a=EpiLevel.LOW, level_b=EpiLevel.LOW), self.school_mode,
        )
        assert outcome.impact is SchoolImpact.MUTED
        assert "stays within Low range" in outcome.message

    def test_small_change_not_low(self):
        outcome = evaluate_school_rules(
            metrics(delta_epi=4.0, level_a=EpiLevel.MEDIUM, level_b=EpiLevel.MEDIUM), self.school_mode,
        )
        assert outcome.impact is SchoolImpact.NEUTRAL

    def test_missing_epi(self):
        assert evaluate_school_rules(metrics(), self.school_mode).impact is SchoolImpact.NEUTRAL

    def test_other_modes_neutral(self):
        outcome = evaluate_school_rules(
            metrics(delta_epi=30.0, level_a=EpiLevel.HIGH, level_b=EpiLevel.LOW),
            PREFERENCE_MODES[ModeId.BALANCED],
        )
        assert outcome.impact is SchoolImpact.NEUTRAL
