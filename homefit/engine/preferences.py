"""Preference rule engine.

Maps a lens or a family questionnaire to a weight vector, applies bounded
adjustments and evaluates the mode's hard rules and school rules against
comparison metrics. Every weight vector returned here sums to 1.
"""

from types import MappingProxyType

from homefit.engine.thresholds import (
    LEASE_HIGH,
    MAX_TOTAL_ADJUSTMENT,
    PRICE_MODERATE,
)
from homefit.models.comparison import ComparisonMetrics
from homefit.models.education import EpiLevel
from homefit.models.preference import (
    CostVsValue,
    FamilyProfile,
    HardRule,
    HardRuleCondition,
    HoldingPeriod,
    Lens,
    LifeStage,
    ModeId,
    PersonalizedContext,
    PlanningHorizon,
    PreferenceMode,
    RuleEffect,
    RuleProfile,
    RuleWarning,
    SchoolImpact,
    SchoolRule,
    SchoolRuleCondition,
    SchoolRuleOutcome,
    SchoolSensitivity,
    Weights,
)

PREFERENCE_MODES: MappingProxyType = MappingProxyType({
    ModeId.BALANCED: PreferenceMode(
        id=ModeId.BALANCED,
        weights=Weights(cost=0.30, lease=0.35, school=0.30, stability=0.05),
        description="Weighted across affordability, lease safety, school pressure, and market stability.",
        max_tradeoffs=4,
    ),
    ModeId.LOW_ENTRY: PreferenceMode(
        id=ModeId.LOW_ENTRY,
        weights=Weights(cost=0.60, lease=0.20, school=0.15, stability=0.05),
        description="Prioritises lower upfront cost and monthly cash flow.",
        hard_rules=(
            HardRule(
                condition=HardRuleCondition.PRICE_GAP_ABOVE,
                threshold=PRICE_MODERATE,
                effect=RuleEffect.OVERRIDE,
                message="💰 Significant price difference detected — this may be the primary factor.",
            ),
        ),
        max_tradeoffs=3,
    ),
    ModeId.LONG_TERM: PreferenceMode(
        id=ModeId.LONG_TERM,
        weights=Weights(cost=0.15, lease=0.55, school=0.20, stability=0.10),
        description="Optimised for long holding periods and future resale.",
        hard_rules=(
            HardRule(
                condition=HardRuleCondition.LEASE_BELOW,
                threshold=LEASE_HIGH,
                effect=RuleEffect.WARNING,
                message=(
                    "⚠ Lease Risk: One or both areas have median lease below {threshold} years, "
                    "which may face financing constraints."
                ),
            ),
        ),
        max_tradeoffs=3,
    ),
    ModeId.LOW_SCHOOL_PRESSURE: PreferenceMode(
        id=ModeId.LOW_SCHOOL_PRESSURE,
        weights=Weights(cost=0.20, lease=0.20, school=0.55, stability=0.05),
        description="Prioritises lower primary school competition and flexibility.",
        school_rules=(
            SchoolRule(
                condition=SchoolRuleCondition.EPI_DELTA_AT_LEAST,
                threshold=10,
                impact=SchoolImpact.SIGNIFICANT,
                message="School pressure changes significantly — this should be a primary consideration.",
            ),
            SchoolRule(
                condition=SchoolRuleCondition.FINAL_LEVEL_LOW,
                impact=SchoolImpact.MUTED,
                message=(
                    "School pressure changes slightly, but stays within Low range — "
                    "unlikely to materially affect daily stress."
                ),
            ),
        ),
        max_tradeoffs=4,
    ),
})

LENS_TO_MODE: MappingProxyType = MappingProxyType({
    Lens.LOWER_COST: ModeId.LOW_ENTRY,
    Lens.LEASE_SAFETY: ModeId.LONG_TERM,
    Lens.SCHOOL_PRESSURE: ModeId.LOW_SCHOOL_PRESSURE,
    Lens.BALANCED: ModeId.BALANCED,
})

# Family questionnaire: additive weight deltas
STAGE_ADJUSTMENTS: dict[LifeStage, Weights] = {
    LifeStage.NO_CHILDREN: Weights(school=-0.10),
    LifeStage.PRIMARY_FAMILY: Weights(school=0.15),
    LifeStage.PLANNING_PRIMARY: Weights(school=0.15),
    LifeStage.OLDER_CHILDREN: Weights(lease=0.05, stability=0.05),
}

HOLDING_ADJUSTMENTS: dict[HoldingPeriod, Weights] = {
    HoldingPeriod.SHORT: Weights(cost=0.05, lease=-0.10),
    HoldingPeriod.MEDIUM: Weights(),
    HoldingPeriod.LONG: Weights(lease=0.10, stability=0.05),
}

SENSITIVITY_ADJUSTMENTS: dict[SchoolSensitivity, Weights] = {
    SchoolSensitivity.HIGH: Weights(school=0.20),
    SchoolSensitivity.NEUTRAL: Weights(),
    SchoolSensitivity.LOW: Weights(school=-0.10),
}

BASE_MODE_BY_PRIORITY: dict[CostVsValue, ModeId] = {
    CostVsValue.COST: ModeId.LOW_ENTRY,
    CostVsValue.VALUE: ModeId.LONG_TERM,
    CostVsValue.BALANCED: ModeId.BALANCED,
}

STAGE_DESCRIPTIONS: dict[LifeStage, str] = {
    LifeStage.NO_CHILDREN: "Young couple / No children yet",
    LifeStage.PRIMARY_FAMILY: "Family with primary-school child(ren)",
    LifeStage.PLANNING_PRIMARY: "Planning for primary school soon",
    LifeStage.OLDER_CHILDREN: "Older children / Long-term stability focus",
}

HOLDING_DESCRIPTIONS: dict[HoldingPeriod, str] = {
    HoldingPeriod.SHORT: "< 5 years",
    HoldingPeriod.MEDIUM: "5–15 years",
    HoldingPeriod.LONG: "15+ years",
}

PRIORITY_DESCRIPTIONS: dict[CostVsValue, str] = {
    CostVsValue.COST: "Lower upfront & monthly cost",
    CostVsValue.VALUE: "Long-term value & resale safety",
    CostVsValue.BALANCED: "Balanced",
}

HORIZON_BY_HOLDING: dict[HoldingPeriod, PlanningHorizon] = {
    HoldingPeriod.SHORT: PlanningHorizon.SHORT,
    HoldingPeriod.MEDIUM: PlanningHorizon.MEDIUM,
    HoldingPeriod.LONG: PlanningHorizon.LONG,
}

# Multiplicative factors per dimension, renormalized afterwards
HORIZON_MULTIPLIERS: dict[PlanningHorizon, Weights] = {
    PlanningHorizon.SHORT: Weights(cost=1.25, lease=0.80, school=1.0, stability=0.90, rent=1.10),
    PlanningHorizon.MEDIUM: Weights(cost=1.0, lease=1.0, school=1.0, stability=1.0, rent=1.0),
    PlanningHorizon.LONG: Weights(cost=0.85, lease=1.25, school=1.0, stability=1.20, rent=0.90),
}


def _add(a: Weights, b: Weights) -> Weights:
    return Weights(
        cost=a.cost + b.cost,
        lease=a.lease + b.lease,
        school=a.school + b.school,
        stability=a.stability + b.stability,
        rent=a.rent + b.rent,
    )


def _scale(w: Weights, factor: float) -> Weights:
    return Weights(**{k: v * factor for k, v in w.as_dict().items()})


def normalize_weights(w: Weights) -> Weights:
    """Clamp each weight to [0, 1] and rescale so they sum to 1.

    An all-zero vector falls back to the balanced weights.
    """
    clamped = Weights(**{k: max(0.0, min(1.0, v)) for k, v in w.as_dict().items()})
    total = clamped.total
    if total <= 0:
        return PREFERENCE_MODES[ModeId.BALANCED].weights
    return _scale(clamped, 1 / total)


def _coerce_lens(lens: Lens | str) -> Lens:
    if isinstance(lens, Lens):
        return lens
    try:
        return Lens(lens)
    except ValueError:
        return Lens.BALANCED


def get_preference_mode(lens: Lens | str, long_term: bool = False) -> PreferenceMode:
    """Mode for a lens. Unknown lenses read as balanced.

    The long-term flag forces the long-term mode unless the lens is school pressure.
    """
    mode_id = LENS_TO_MODE[_coerce_lens(lens)]
    if long_term and mode_id is not ModeId.LOW_SCHOOL_PRESSURE:
        mode_id = ModeId.LONG_TERM
    return PREFERENCE_MODES[mode_id]


def map_family_profile_to_rule_profile(profile: FamilyProfile) -> RuleProfile:
    """Translate the family questionnaire into a base mode and weight deltas."""
    mode_id = BASE_MODE_BY_PRIORITY[profile.cost_vs_value]
    if profile.holding_period is HoldingPeriod.LONG and mode_id is not ModeId.LOW_SCHOOL_PRESSURE:
        mode_id = ModeId.LONG_TERM

    adjustments = Weights()
    for delta in (
        STAGE_ADJUSTMENTS[profile.stage],
        HOLDING_ADJUSTMENTS[profile.holding_period],
        SENSITIVITY_ADJUSTMENTS[profile.school_sensitivity],
    ):
        adjustments = _add(adjustments, delta)

    magnitude = sum(abs(v) for v in adjustments.as_dict().values())
    if magnitude > MAX_TOTAL_ADJUSTMENT:
        adjustments = _scale(adjustments, MAX_TOTAL_ADJUSTMENT / magnitude)

    return RuleProfile(
        active_mode=mode_id,
        adjustments=adjustments,
        context=PersonalizedContext(
            stage=STAGE_DESCRIPTIONS[profile.stage],
            holding=HOLDING_DESCRIPTIONS[profile.holding_period],
            priority=PRIORITY_DESCRIPTIONS[profile.cost_vs_value],
        ),
        family=profile,
    )


def apply_rule_profile(mode: PreferenceMode, rule_profile: RuleProfile) -> PreferenceMode:
    """Add the profile's deltas to the mode's weights, clamp, renormalize."""
    base = PREFERENCE_MODES[rule_profile.active_mode]
    return PreferenceMode(
        id=rule_profile.active_mode,
        weights=normalize_weights(_add(mode.weights, rule_profile.adjustments)),
        description=mode.description,
        hard_rules=base.hard_rules,
        school_rules=base.school_rules,
        max_tradeoffs=base.max_tradeoffs,
    )


def apply_planning_horizon(weights: Weights, horizon: PlanningHorizon) -> Weights:
    """Short horizons lean on entry cost; long horizons on lease and stability."""
    m = HORIZON_MULTIPLIERS[horizon]
    shifted = Weights(
        cost=weights.cost * m.cost,
        lease=weights.lease * m.lease,
        school=weights.school * m.school,
        stability=weights.stability * m.stability,
        rent=weights.rent * m.rent,
    )
    # Rescale only; clamping here would flatten a boosted weight above 1
    total = shifted.total
    if total <= 0:
        return PREFERENCE_MODES[ModeId.BALANCED].weights
    return _scale(shifted, 1 / total)


def _rule_fires(rule: HardRule, metrics: ComparisonMetrics) -> bool:
    if rule.condition is HardRuleCondition.LEASE_BELOW:
        return metrics.lease_a < rule.threshold or metrics.lease_b < rule.threshold
    if rule.condition is HardRuleCondition.PRICE_GAP_ABOVE:
        return abs(metrics.delta_price) > rule.threshold
    return False


def check_hard_rules(metrics: ComparisonMetrics, mode: PreferenceMode) -> tuple[RuleWarning, ...]:
    """Warnings for every triggered hard rule, in declaration order."""
    return tuple(
        RuleWarning(
            effect=rule.effect,
            message=rule.message.format(threshold=int(rule.threshold)),
            condition=rule.condition,
        )
        for rule in mode.hard_rules
        if _rule_fires(rule, metrics)
    )


def evaluate_school_rules(metrics: ComparisonMetrics, mode: PreferenceMode) -> SchoolRuleOutcome:
    """First matching school rule wins. Neutral without both EPIs or rules."""
    if not mode.school_rules or metrics.delta_epi is None:
        return SchoolRuleOutcome(impact=SchoolImpact.NEUTRAL)

    change = abs(metrics.delta_epi)
    # Level of the lower-pressure area, i.e. where a pressure-averse buyer lands
    final_level = metrics.epi_level_b if metrics.delta_epi > 0 else metrics.epi_level_a

    for rule in mode.school_rules:
        if rule.condition is SchoolRuleCondition.EPI_DELTA_AT_LEAST and change >= rule.threshold:
            return SchoolRuleOutcome(impact=rule.impact, message=rule.message)
        if rule.condition is SchoolRuleCondition.FINAL_LEVEL_LOW and final_level is EpiLevel.LOW:
            return SchoolRuleOutcome(impact=rule.impact, message=rule.message)
    return SchoolRuleOutcome(impact=SchoolImpact.NEUTRAL)
