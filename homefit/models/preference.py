"""Preference modes, rule profiles and the family questionnaire."""

from dataclasses import dataclass
from enum import Enum


class Lens(Enum):
    LOWER_COST = "lower_cost"
    LEASE_SAFETY = "lease_safety"
    SCHOOL_PRESSURE = "school_pressure"
    BALANCED = "balanced"


class ModeId(Enum):
    BALANCED = "balanced"
    LOW_ENTRY = "low_entry"
    LONG_TERM = "long_term"
    LOW_SCHOOL_PRESSURE = "low_school_pressure"


class PlanningHorizon(Enum):
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"


class RuleEffect(Enum):
    WARNING = "warning"
    PENALTY = "penalty"
    OVERRIDE = "override"


class HardRuleCondition(Enum):
    LEASE_BELOW = "lease_below"  # either area's median lease < threshold
    PRICE_GAP_ABOVE = "price_gap_above"  # |price delta| > threshold


class SchoolRuleCondition(Enum):
    EPI_DELTA_AT_LEAST = "epi_delta_at_least"  # |EPI delta| >= threshold
    FINAL_LEVEL_LOW = "final_level_low"  # destination area stays Low


class SchoolImpact(Enum):
    SIGNIFICANT = "significant"
    MUTED = "muted"
    NEUTRAL = "neutral"


class LifeStage(Enum):
    NO_CHILDREN = "no_children"
    PRIMARY_FAMILY = "primary_family"
    PLANNING_PRIMARY = "planning_primary"
    OLDER_CHILDREN = "older_children"


class HoldingPeriod(Enum):
    SHORT = "short"  # < 5 years
    MEDIUM = "medium"  # 5-15 years
    LONG = "long"  # 15+ years


class CostVsValue(Enum):
    COST = "cost"
    VALUE = "value"
    BALANCED = "balanced"


class SchoolSensitivity(Enum):
    HIGH = "high"
    NEUTRAL = "neutral"
    LOW = "low"


@dataclass(frozen=True)
class Weights:
    """Dimension weights. Modes sum to 1; adjustment deltas may be negative."""
    cost: float = 0.0
    lease: float = 0.0
    school: float = 0.0
    stability: float = 0.0
    rent: float = 0.0

    @property
    def total(self) -> float:
        return self.cost + self.lease + self.school + self.stability + self.rent

    def as_dict(self) -> dict[str, float]:
        return {
            "cost": self.cost,
            "lease": self.lease,
            "school": self.school,
            "stability": self.stability,
            "rent": self.rent,
        }


@dataclass(frozen=True)
class HardRule:
    condition: HardRuleCondition
    threshold: float
    effect: RuleEffect
    message: str


@dataclass(frozen=True)
class SchoolRule:
    condition: SchoolRuleCondition
    impact: SchoolImpact
    message: str
    threshold: float = 0.0


@dataclass(frozen=True)
class PreferenceMode:
    id: ModeId
    weights: Weights
    description: str = ""
    hard_rules: tuple[HardRule, ...] = ()
    school_rules: tuple[SchoolRule, ...] = ()
    max_tradeoffs: int = 4


@dataclass(frozen=True)
class FamilyProfile:
    stage: LifeStage
    holding_period: HoldingPeriod
    cost_vs_value: CostVsValue
    school_sensitivity: SchoolSensitivity = SchoolSensitivity.NEUTRAL


@dataclass(frozen=True)
class PersonalizedContext:
    stage: str
    holding: str
    priority: str


@dataclass(frozen=True)
class RuleProfile:
    active_mode: ModeId
    adjustments: Weights
    context: PersonalizedContext
    family: FamilyProfile | None = None


@dataclass(frozen=True)
class RuleWarning:
    effect: RuleEffect
    message: str
    condition: HardRuleCondition


@dataclass(frozen=True)
class SchoolRuleOutcome:
    impact: SchoolImpact
    message: str | None = None
