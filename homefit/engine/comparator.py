"""Two-area comparison.

Pipeline:
  1. Raw deltas (A - B) for price, lease, EPI, CBI
  2. Pairwise dimension scores (0-100, relative to the pair only)
  3. Mode weights adjusted for the planning horizon
  4. Overall score per area = weighted sum of dimension scores
  5. Confidence from the overall-score gap
  6. Headline: first matching headline rule
  7. Trade-off bullets: entry cost, lease, school, commute, in that order
  8. Post-processing rules applied in order to the draft
"""

from collections.abc import Callable
from dataclasses import dataclass, replace

from homefit.engine import sections
from homefit.engine.preferences import (
    HORIZON_BY_HOLDING,
    PREFERENCE_MODES,
    apply_rule_profile,
    check_hard_rules,
    evaluate_school_rules,
    get_preference_mode,
    map_family_profile_to_rule_profile,
)
from homefit.engine.scoring import (
    classify_confidence,
    dimension_scores,
    effective_weights,
    overall_score,
)
from homefit.engine.templates import (
    BALANCED_CLEAR,
    BALANCED_SLIGHT,
    DECISION_HINTS,
    EPI_LEVEL_TEXT,
    EVEN_HEADLINES,
    FAMILY_HEADLINES,
    HEADLINES,
    LENS_HEADLINES,
    NOT_AVAILABLE_TEMPLATES,
    SCHOOL_LENS_MAJOR,
    SCHOOL_LENS_TRADEOFF,
    SCHOOL_NOTE_SUFFIX,
    TOPIC_ORDER,
    Topic,
    add_headline_note,
    fill,
    format_currency,
    format_years,
    magnitude_band,
    tradeoff_template,
)
from homefit.engine.thresholds import (
    CONFIDENCE_CLEAR_WINNER,
    EPI_MINOR,
    EPI_MODERATE,
    EPI_SIGNIFICANT,
    HIGH_DEMAND_SCHOOLS_SIGNIFICANT,
    PRICE_SIGNIFICANT,
    SCHOOL_COUNT_SIGNIFICANT,
)
from homefit.models.area import AreaProfile
from homefit.models.commute import CommuteBurdenIndex
from homefit.models.comparison import (
    ComparisonMetrics,
    ComparisonResult,
    DimensionScores,
    EducationImpact,
)
from homefit.models.education import EducationPressureIndex, EpiLevel, SchoolLandscape
from homefit.models.preference import (
    CostVsValue,
    FamilyProfile,
    Lens,
    ModeId,
    PlanningHorizon,
    PreferenceMode,
    RuleProfile,
    SchoolSensitivity,
)


@dataclass(frozen=True)
class ComparisonContext:
    """Everything the headline, bullet and post-processing rules read."""
    name_a: str
    name_b: str
    a: AreaProfile
    b: AreaProfile
    metrics: ComparisonMetrics
    mode: PreferenceMode
    scores_a: DimensionScores
    scores_b: DimensionScores
    epi_a: EducationPressureIndex | None
    epi_b: EducationPressureIndex | None
    cbi_a: CommuteBurdenIndex | None
    cbi_b: CommuteBurdenIndex | None
    impact: EducationImpact | None
    rule_profile: RuleProfile | None
    candidate_tradeoffs: tuple[tuple[Topic, str], ...]

    @property
    def winner(self) -> str | None:
        """Higher overall score; None on an exact tie."""
        if self.scores_a.overall == self.scores_b.overall:
            return None
        return self.name_b if self.scores_b.overall > self.scores_a.overall else self.name_a

    @property
    def overall_gap(self) -> float:
        return abs(self.scores_b.overall - self.scores_a.overall)

    @property
    def has_both_epi(self) -> bool:
        return self.metrics.delta_epi is not None

    @property
    def epi_level_crossed(self) -> bool:
        return self.has_both_epi and self.metrics.epi_level_a is not self.metrics.epi_level_b

    def better(self, delta: float, lower_is_better: bool) -> str | None:
        """Area favoured by an A - B delta; None when the delta is zero."""
        if delta == 0:
            return None
        a_wins = delta < 0 if lower_is_better else delta > 0
        return self.name_a if a_wins else self.name_b

    def other(self, name: str) -> str:
        return self.name_b if name == self.name_a else self.name_a

    def epi_for(self, name: str) -> EducationPressureIndex | None:
        return self.epi_a if name == self.name_a else self.epi_b


@dataclass
class ComparisonDraft:
    headline: str
    lens_headline: str
    tradeoffs: list[tuple[Topic, str]]


# ── Step 1-5: metrics, scores, weights ──


def build_metrics(
    a: AreaProfile,
    b: AreaProfile,
    epi_a: EducationPressureIndex | None,
    epi_b: EducationPressureIndex | None,
    cbi_a: CommuteBurdenIndex | None,
    cbi_b: CommuteBurdenIndex | None,
) -> ComparisonMetrics:
    both_epi = epi_a is not None and epi_b is not None
    return ComparisonMetrics(
        delta_price=a.median_price - b.median_price,
        delta_lease_years=a.median_remaining_lease - b.median_remaining_lease,
        lease_a=a.median_remaining_lease,
        lease_b=b.median_remaining_lease,
        frac_below_critical_a=a.frac_below_critical,
        frac_below_critical_b=b.frac_below_critical,
        delta_epi=round(epi_a.epi - epi_b.epi, 1) if both_epi else None,
        epi_level_a=epi_a.level if epi_a else None,
        epi_level_b=epi_b.level if epi_b else None,
        delta_cbi=cbi_a.cbi - cbi_b.cbi if cbi_a and cbi_b else None,
        delta_rent_gap=(
            a.rent_buy_gap - b.rent_buy_gap
            if a.rent_buy_gap is not None and b.rent_buy_gap is not None
            else None
        ),
    )


def resolve_mode(
    mode: PreferenceMode | None,
    lens: Lens | str,
    long_term: bool,
    family_profile: FamilyProfile | None,
) -> tuple[PreferenceMode, RuleProfile | None]:
    """Family profile beats an explicit mode, which beats lens + long-term flag."""
    if family_profile is not None:
        rule_profile = map_family_profile_to_rule_profile(family_profile)
        base = mode or PREFERENCE_MODES[rule_profile.active_mode]
        return apply_rule_profile(base, rule_profile), rule_profile
    if mode is not None:
        return mode, None
    return get_preference_mode(lens, long_term), None


def resolve_horizon(horizon: PlanningHorizon | None, family_profile: FamilyProfile | None) -> PlanningHorizon:
    if horizon is not None:
        return horizon
    if family_profile is not None:
        return HORIZON_BY_HOLDING[family_profile.holding_period]
    return PlanningHorizon.MEDIUM


# ── Step 6: headlines ──


def _family_headline(ctx: ComparisonContext) -> str:
    profile = ctx.rule_profile
    family = profile.family
    stage = profile.context.stage.lower()
    holding = profile.context.holding.lower()
    m = ctx.metrics

    if ctx.mode.id is ModeId.LONG_TERM or (family and family.cost_vs_value is CostVsValue.VALUE):
        better = ctx.better(m.delta_lease_years, lower_is_better=False)
        if better is None:
            return fill(FAMILY_HEADLINES["even"], stage=stage, holding=holding)
        pricier = (m.delta_price > 0) == (better == ctx.name_a) and m.delta_price != 0
        key = "lease_pricier" if pricier else "lease"
        return fill(FAMILY_HEADLINES[key], stage=stage, holding=holding, better=better)

    if ctx.mode.id is ModeId.LOW_ENTRY or (family and family.cost_vs_value is CostVsValue.COST):
        better = ctx.better(float(m.delta_price), lower_is_better=True)
        if better is None:
            return fill(FAMILY_HEADLINES["even"], stage=stage, holding=holding)
        return fill(FAMILY_HEADLINES["cost"], stage=stage, better=better)

    school_focus = ctx.mode.id is ModeId.LOW_SCHOOL_PRESSURE or (
        family and family.school_sensitivity is SchoolSensitivity.HIGH
    )
    if school_focus and ctx.has_both_epi:
        better = ctx.better(m.delta_epi, lower_is_better=True)
        if better is None:
            return fill(FAMILY_HEADLINES["even"], stage=stage, holding=holding)
        return fill(FAMILY_HEADLINES["school"], stage=stage, better=better)

    if ctx.winner is None:
        return fill(FAMILY_HEADLINES["even"], stage=stage, holding=holding)
    return fill(FAMILY_HEADLINES["overall"], stage=stage, holding=holding, better=ctx.winner)


def _education_led(ctx: ComparisonContext) -> str:
    better = ctx.better(ctx.metrics.delta_epi, lower_is_better=True)
    return fill(HEADLINES["education_led"], better=better, worse=ctx.other(better))


def _partial_coverage(ctx: ComparisonContext) -> str:
    available = ctx.name_a if ctx.epi_a is not None else ctx.name_b
    return fill(HEADLINES["partial_coverage"], available=available, missing=ctx.other(available))


def _price_led(ctx: ComparisonContext) -> str:
    better = ctx.better(float(ctx.metrics.delta_price), lower_is_better=True)
    return fill(HEADLINES["price_led"], better=better, worse=ctx.other(better))


# First matching rule wins
HEADLINE_RULES: tuple[tuple[str, Callable[[ComparisonContext], bool], Callable[[ComparisonContext], str]], ...] = (
    ("family_profile", lambda ctx: ctx.rule_profile is not None, _family_headline),
    (
        "education_led",
        lambda ctx: ctx.has_both_epi and abs(ctx.metrics.delta_epi) >= EPI_SIGNIFICANT,
        _education_led,
    ),
    ("partial_coverage", lambda ctx: (ctx.epi_a is None) != (ctx.epi_b is None), _partial_coverage),
    ("price_led", lambda ctx: abs(ctx.metrics.delta_price) >= PRICE_SIGNIFICANT, _price_led),
    ("similar", lambda ctx: True, lambda ctx: HEADLINES["similar"]),
)


def select_headline(ctx: ComparisonContext) -> str:
    for _name, applies, build in HEADLINE_RULES:
        if applies(ctx):
            return build(ctx)
    return HEADLINES["similar"]


def lens_headline(ctx: ComparisonContext) -> str:
    m = ctx.metrics
    mode_id = ctx.mode.id
    if mode_id is ModeId.LOW_ENTRY:
        better = ctx.better(float(m.delta_price), lower_is_better=True)
    elif mode_id is ModeId.LONG_TERM:
        better = ctx.better(m.delta_lease_years, lower_is_better=False)
    elif mode_id is ModeId.LOW_SCHOOL_PRESSURE and ctx.has_both_epi:
        better = ctx.better(m.delta_epi, lower_is_better=True)
    else:
        if ctx.winner is None:
            return EVEN_HEADLINES[ModeId.BALANCED]
        template = BALANCED_CLEAR if ctx.overall_gap > CONFIDENCE_CLEAR_WINNER else BALANCED_SLIGHT
        return fill(template, better=ctx.winner)
    if better is None:
        return EVEN_HEADLINES[mode_id]
    return fill(LENS_HEADLINES[mode_id], better=better)


# ── Step 7: trade-off bullets ──


def _entry_cost_bullet(ctx: ComparisonContext) -> str | None:
    delta = float(ctx.metrics.delta_price)
    band = magnitude_band(delta, Topic.ENTRY_COST)
    return fill(
        tradeoff_template(Topic.ENTRY_COST, band),
        better=ctx.better(delta, lower_is_better=True),
        diff=format_currency(delta),
    )


def _lease_bullet(ctx: ComparisonContext) -> str | None:
    delta = ctx.metrics.delta_lease_years
    band = magnitude_band(delta, Topic.LEASE)
    return fill(
        tradeoff_template(Topic.LEASE, band),
        better=ctx.better(delta, lower_is_better=False),
        diff=format_years(delta),
    )


def _school_bullet(ctx: ComparisonContext) -> str | None:
    if ctx.epi_a is None and ctx.epi_b is None:
        return None
    if not ctx.has_both_epi:
        missing = ctx.name_a if ctx.epi_a is None else ctx.name_b
        return fill(NOT_AVAILABLE_TEMPLATES[Topic.SCHOOL], missing=missing)

    delta = ctx.metrics.delta_epi
    better = ctx.better(delta, lower_is_better=True)
    level = ctx.epi_for(better or ctx.name_a).level
    if ctx.metrics.epi_level_a is ctx.metrics.epi_level_b is EpiLevel.LOW:
        level_text = "still Low"
    else:
        level_text = EPI_LEVEL_TEXT[level]
    return fill(
        tradeoff_template(Topic.SCHOOL, magnitude_band(delta, Topic.SCHOOL)),
        better=better,
        diff=f"{abs(delta):.1f}",
        level=level_text,
    )


def _commute_bullet(ctx: ComparisonContext) -> str | None:
    if ctx.cbi_a is None and ctx.cbi_b is None:
        return None
    if ctx.cbi_a is None or ctx.cbi_b is None:
        missing = ctx.name_a if ctx.cbi_a is None else ctx.name_b
        return fill(NOT_AVAILABLE_TEMPLATES[Topic.COMMUTE], missing=missing)

    delta = ctx.metrics.delta_cbi
    better = ctx.better(delta, lower_is_better=True)
    cbi = ctx.cbi_b if better == ctx.name_b else ctx.cbi_a
    return fill(
        tradeoff_template(Topic.COMMUTE, magnitude_band(delta, Topic.COMMUTE)),
        better=better,
        level=cbi.label,
    )


TRADEOFF_BUILDERS: dict[Topic, Callable[[ComparisonContext], str | None]] = {
    Topic.ENTRY_COST: _entry_cost_bullet,
    Topic.LEASE: _lease_bullet,
    Topic.SCHOOL: _school_bullet,
    Topic.COMMUTE: _commute_bullet,
}


def candidate_tradeoffs(ctx: ComparisonContext) -> tuple[tuple[Topic, str], ...]:
    """One bullet per topic in fixed order; topics without any data are skipped."""
    bullets = []
    for topic in TOPIC_ORDER:
        text = TRADEOFF_BUILDERS[topic](ctx)
        if text is not None:
            bullets.append((topic, text))
    return tuple(bullets)


# ── Step 8: post-processing rules ──


def _school_lens_applies(ctx: ComparisonContext, draft: ComparisonDraft) -> bool:
    return (
        ctx.mode.id is ModeId.LOW_SCHOOL_PRESSURE
        and ctx.has_both_epi
        and abs(ctx.metrics.delta_epi) >= EPI_MINOR
    )


def _school_lens_rewrite(ctx: ComparisonContext, draft: ComparisonDraft) -> None:
    delta = ctx.metrics.delta_epi
    better = ctx.better(delta, lower_is_better=True)
    template = SCHOOL_LENS_MAJOR if abs(delta) > EPI_MODERATE else SCHOOL_LENS_TRADEOFF
    draft.headline = fill(template, better=better)


def _education_mention_required(ctx: ComparisonContext, draft: ComparisonDraft) -> bool:
    if not ctx.has_both_epi:
        return False
    if any(topic is Topic.SCHOOL for topic, _ in draft.tradeoffs):
        return False
    if ctx.mode.id is ModeId.LOW_SCHOOL_PRESSURE or ctx.epi_level_crossed:
        return True
    impact = ctx.impact
    return impact is not None and (
        abs(impact.high_demand_schools_change) >= HIGH_DEMAND_SCHOOLS_SIGNIFICANT
        or abs(impact.school_count_change) >= SCHOOL_COUNT_SIGNIFICANT
    )


def _force_education_mention(ctx: ComparisonContext, draft: ComparisonDraft) -> None:
    """Insert the school bullet in topic order, dropping the last bullet if full."""
    school = next((b for b in ctx.candidate_tradeoffs if b[0] is Topic.SCHOOL), None)
    if school is None:
        return
    bullets = draft.tradeoffs
    if len(bullets) >= ctx.mode.max_tradeoffs:
        bullets = bullets[: max(0, ctx.mode.max_tradeoffs - 1)]
    bullets.append(school)
    bullets.sort(key=lambda b: TOPIC_ORDER.index(b[0]))
    draft.tradeoffs = bullets


def _level_note_applies(ctx: ComparisonContext, draft: ComparisonDraft) -> bool:
    return (
        ctx.mode.id is not ModeId.LOW_SCHOOL_PRESSURE
        and ctx.epi_level_crossed
        and "school" not in draft.headline.lower()
    )


def _add_level_note(ctx: ComparisonContext, draft: ComparisonDraft) -> None:
    draft.headline = add_headline_note(draft.headline, SCHOOL_NOTE_SUFFIX)


# (name, precondition, effect), applied in order to the draft
POST_PROCESSING_RULES: tuple[
    tuple[
        str,
        Callable[[ComparisonContext, ComparisonDraft], bool],
        Callable[[ComparisonContext, ComparisonDraft], None],
    ],
    ...,
] = (
    ("school_lens_headline", _school_lens_applies, _school_lens_rewrite),
    ("force_education_mention", _education_mention_required, _force_education_mention),
    ("level_crossing_note", _level_note_applies, _add_level_note),
)


def apply_post_processing(ctx: ComparisonContext, draft: ComparisonDraft) -> ComparisonDraft:
    for _name, applies, effect in POST_PROCESSING_RULES:
        if applies(ctx, draft):
            effect(ctx, draft)
    return draft


# ── Decision hint ──


DECISION_HINT_RULES: tuple[tuple[str, Callable[[ComparisonContext], bool]], ...] = (
    ("long_term", lambda ctx: ctx.mode.id is ModeId.LONG_TERM),
    (
        "low_entry",
        lambda ctx: ctx.mode.id is ModeId.LOW_ENTRY and abs(ctx.metrics.delta_price) > PRICE_SIGNIFICANT,
    ),
    (
        "low_school_pressure",
        lambda ctx: (
            ctx.mode.id is ModeId.LOW_SCHOOL_PRESSURE
            and ctx.has_both_epi
            and abs(ctx.metrics.delta_epi) >= EPI_MODERATE
        ),
    ),
)


def decision_hint(ctx: ComparisonContext) -> str:
    for key, applies in DECISION_HINT_RULES:
        if applies(ctx):
            return DECISION_HINTS[key]
    return DECISION_HINTS["default"]


# ── Entry point ──


def compare(
    profile_a: AreaProfile,
    profile_b: AreaProfile,
    mode: PreferenceMode | None = None,
    *,
    lens: Lens | str = Lens.BALANCED,
    long_term: bool = False,
    family_profile: FamilyProfile | None = None,
    horizon: PlanningHorizon | None = None,
    epi_a: EducationPressureIndex | None = None,
    epi_b: EducationPressureIndex | None = None,
    landscape_a: SchoolLandscape | None = None,
    landscape_b: SchoolLandscape | None = None,
    cbi_a: CommuteBurdenIndex | None = None,
    cbi_b: CommuteBurdenIndex | None = None,
) -> ComparisonResult:
    """Compare two areas under one preference mode.

    Both profiles are required; every other input is optional and its
    absence only removes or marks the sections that depend on it.
    """
    name_a, name_b = profile_a.area_id, profile_b.area_id
    base_mode, rule_profile = resolve_mode(mode, lens, long_term, family_profile)
    planning_horizon = resolve_horizon(horizon, family_profile)

    metrics = build_metrics(profile_a, profile_b, epi_a, epi_b, cbi_a, cbi_b)
    raw_a, raw_b = dimension_scores(profile_a, profile_b, epi_a, epi_b)
    weights = effective_weights(base_mode.weights, planning_horizon, raw_a.cash_flow is not None)
    effective_mode = replace(base_mode, weights=weights)

    scores_a = replace(raw_a, overall=overall_score(raw_a, weights))
    scores_b = replace(raw_b, overall=overall_score(raw_b, weights))

    ctx = ComparisonContext(
        name_a=name_a,
        name_b=name_b,
        a=profile_a,
        b=profile_b,
        metrics=metrics,
        mode=effective_mode,
        scores_a=scores_a,
        scores_b=scores_b,
        epi_a=epi_a,
        epi_b=epi_b,
        cbi_a=cbi_a,
        cbi_b=cbi_b,
        impact=sections.education_impact(epi_a, epi_b, landscape_a, landscape_b),
        rule_profile=rule_profile,
        candidate_tradeoffs=(),
    )
    ctx = replace(ctx, candidate_tradeoffs=candidate_tradeoffs(ctx))

    draft = ComparisonDraft(
        headline=select_headline(ctx),
        lens_headline=lens_headline(ctx),
        tradeoffs=list(ctx.candidate_tradeoffs[: effective_mode.max_tradeoffs]),
    )
    draft = apply_post_processing(ctx, draft)

    return ComparisonResult(
        area_a=name_a,
        area_b=name_b,
        mode=effective_mode,
        horizon=planning_horizon,
        metrics=metrics,
        scores_a=scores_a,
        scores_b=scores_b,
        confidence=classify_confidence(scores_a.overall, scores_b.overall),
        headline=draft.headline,
        lens_headline=draft.lens_headline,
        tradeoffs=tuple(text for _topic, text in draft.tradeoffs),
        decision_hint=decision_hint(ctx),
        warnings=check_hard_rules(metrics, effective_mode),
        school_rule=evaluate_school_rules(metrics, effective_mode),
        education=sections.education_block(name_a, name_b, epi_a, epi_b),
        education_impact=ctx.impact,
        commute=sections.commute_comparison(name_a, name_b, cbi_a, cbi_b),
        housing_tradeoff=sections.housing_tradeoff(name_a, name_b, metrics),
        best_suited_for=sections.best_suited_for(metrics),
        be_cautious=sections.be_cautious(profile_a, profile_b),
        bottom_line=sections.bottom_line(metrics),
        moving_phrase=sections.moving_phrase(name_a, name_b, metrics),
        badges=sections.badges(profile_a, profile_b),
        rule_profile=rule_profile,
    )
