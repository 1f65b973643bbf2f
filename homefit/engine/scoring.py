"""Pairwise dimension scoring.

Scores are relative to the two areas being compared only: the better area
on a dimension scores 100, the worse 0, and a tie scores 50 for both.
Stability blends the volatility and volume shares, so it rarely hits the
extremes.
"""

from decimal import Decimal

from homefit.engine.preferences import apply_planning_horizon, normalize_weights
from homefit.engine.thresholds import CONFIDENCE_BALANCED, CONFIDENCE_CLEAR_WINNER
from homefit.models.area import AreaProfile
from homefit.models.comparison import Confidence, DimensionScores
from homefit.models.education import EducationPressureIndex
from homefit.models.preference import PlanningHorizon, Weights

NEUTRAL_SCORE = 50
MIN_VOLATILITY = 0.01
MIN_VOLUME = 1


def pairwise_scores(value_a: float, value_b: float, higher_is_better: bool = True) -> tuple[int, int]:
    """Min-max both values onto 0-100 against each other."""
    low, high = min(value_a, value_b), max(value_a, value_b)
    if high == low:
        return NEUTRAL_SCORE, NEUTRAL_SCORE

    def scale(v: float) -> int:
        s = (v - low) / (high - low) * 100
        return int(round(s if higher_is_better else 100 - s))

    return scale(value_a), scale(value_b)


def stability_scores(a: AreaProfile, b: AreaProfile) -> tuple[int, int]:
    """Half from low volatility, half from transaction volume share."""
    max_vol = max(a.volatility, b.volatility, MIN_VOLATILITY)
    max_volume = max(a.volume_recent, b.volume_recent, MIN_VOLUME)

    def score(p: AreaProfile) -> int:
        calm = (1 - min(1.0, p.volatility / max_vol)) * 50
        liquid = p.volume_recent / max_volume * 50
        return int(round(calm + liquid))

    return score(a), score(b)


def cash_flow_scores(gap_a: Decimal | None, gap_b: Decimal | None) -> tuple[int, int] | None:
    """Rent-minus-financing advantage. None unless both areas have rent data."""
    if gap_a is None or gap_b is None:
        return None
    max_gap = max(abs(float(gap_a)), abs(float(gap_b)), 1.0)

    def score(gap: Decimal) -> int:
        if gap <= 0:
            return 0
        return int(round(min(100.0, float(gap) / max_gap * 100)))

    return score(gap_a), score(gap_b)


def dimension_scores(
    a: AreaProfile,
    b: AreaProfile,
    epi_a: EducationPressureIndex | None,
    epi_b: EducationPressureIndex | None,
) -> tuple[DimensionScores, DimensionScores]:
    """Per-dimension pairwise scores for both areas, overall not yet set.

    School pressure is neutral for both unless both EPIs are known.
    """
    cost_a, cost_b = pairwise_scores(float(a.median_price), float(b.median_price), higher_is_better=False)
    lease_a, lease_b = pairwise_scores(a.median_remaining_lease, b.median_remaining_lease)
    if epi_a is not None and epi_b is not None:
        school_a, school_b = pairwise_scores(epi_a.epi, epi_b.epi, higher_is_better=False)
    else:
        school_a = school_b = NEUTRAL_SCORE
    stab_a, stab_b = stability_scores(a, b)
    cash = cash_flow_scores(a.rent_buy_gap, b.rent_buy_gap)

    return (
        DimensionScores(
            cost=cost_a, lease=lease_a, school=school_a, stability=stab_a,
            cash_flow=cash[0] if cash else None,
        ),
        DimensionScores(
            cost=cost_b, lease=lease_b, school=school_b, stability=stab_b,
            cash_flow=cash[1] if cash else None,
        ),
    )


def effective_weights(weights: Weights, horizon: PlanningHorizon, has_cash_flow: bool) -> Weights:
    """Horizon-adjusted weights; the rent weight is dropped without rent data."""
    if not has_cash_flow and weights.rent > 0:
        weights = normalize_weights(Weights(
            cost=weights.cost,
            lease=weights.lease,
            school=weights.school,
            stability=weights.stability,
        ))
    return apply_planning_horizon(weights, horizon)


def overall_score(scores: DimensionScores, weights: Weights) -> float:
    total = (
        scores.cost * weights.cost
        + scores.lease * weights.lease
        + scores.school * weights.school
        + scores.stability * weights.stability
    )
    if scores.cash_flow is not None:
        total += scores.cash_flow * weights.rent
    return round(total, 1)


def classify_confidence(overall_a: float, overall_b: float) -> Confidence:
    gap = abs(overall_b - overall_a)
    if gap > CONFIDENCE_CLEAR_WINNER:
        return Confidence.CLEAR_WINNER
    if gap > CONFIDENCE_BALANCED:
        return Confidence.BALANCED
    return Confidence.DEPENDS_ON_PREFERENCE
