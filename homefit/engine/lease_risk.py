"""Lease risk scoring.

Points accumulate from three independent checks:
  Median remaining lease:  +3 below CRITICAL, +2 below HIGH, +1 below MODERATE
  Share below CRITICAL:    +2 at high concentration, +1 at moderate
  Share below HIGH:        +1 when a majority

Score -> level: >=5 critical, >=3 high, >=1 moderate, else low.
"""

from homefit.engine.thresholds import (
    FRAC_BELOW_CRITICAL_HIGH,
    FRAC_BELOW_CRITICAL_MODERATE,
    FRAC_BELOW_HIGH_MAJORITY,
    LEASE_CRITICAL,
    LEASE_HIGH,
    LEASE_MODERATE,
)
from homefit.models.area import LeaseRiskAssessment, LeaseRiskLevel

LEVEL_THRESHOLDS: list[tuple[int, LeaseRiskLevel]] = [
    (5, LeaseRiskLevel.CRITICAL),
    (3, LeaseRiskLevel.HIGH),
    (1, LeaseRiskLevel.MODERATE),
]


def _median_lease_points(median_lease: float) -> tuple[int, str | None]:
    if median_lease < LEASE_CRITICAL:
        return 3, f"Median remaining lease is below {LEASE_CRITICAL} years"
    if median_lease < LEASE_HIGH:
        return 2, f"Median remaining lease is below {LEASE_HIGH} years"
    if median_lease < LEASE_MODERATE:
        return 1, f"Median remaining lease is below {LEASE_MODERATE} years"
    return 0, None


def _critical_share_points(frac_below_critical: float) -> tuple[int, str | None]:
    if frac_below_critical >= FRAC_BELOW_CRITICAL_HIGH:
        return 2, f"High share of transactions below {LEASE_CRITICAL} years"
    if frac_below_critical >= FRAC_BELOW_CRITICAL_MODERATE:
        return 1, f"Meaningful share of transactions below {LEASE_CRITICAL} years"
    return 0, None


def _high_share_points(frac_below_high: float) -> tuple[int, str | None]:
    if frac_below_high >= FRAC_BELOW_HIGH_MAJORITY:
        return 1, f"Majority of transactions below {LEASE_HIGH} years"
    return 0, None


def lease_risk_level(score: int) -> LeaseRiskLevel:
    for min_score, level in LEVEL_THRESHOLDS:
        if score >= min_score:
            return level
    return LeaseRiskLevel.LOW


def calculate_lease_risk(
    median_lease: float,
    frac_below_critical: float,
    frac_below_high: float,
) -> LeaseRiskAssessment:
    """Classify lease risk and explain which checks fired, in evaluation order."""
    score = 0
    reasons: list[str] = []
    for points, reason in (
        _median_lease_points(median_lease),
        _critical_share_points(frac_below_critical),
        _high_share_points(frac_below_high),
    ):
        score += points
        if reason is not None:
            reasons.append(reason)

    return LeaseRiskAssessment(level=lease_risk_level(score), reasons=tuple(reasons))
