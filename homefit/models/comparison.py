"""Comparison output types.

Every section that depends on optional data (education, commute, landscapes)
is typed `X | None` and is None when the data was not available.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from homefit.models.education import EpiLevel
from homefit.models.preference import (
    PlanningHorizon,
    PreferenceMode,
    RuleProfile,
    RuleWarning,
    SchoolRuleOutcome,
)


class Confidence(Enum):
    CLEAR_WINNER = "clear_winner"
    BALANCED = "balanced"
    DEPENDS_ON_PREFERENCE = "depends_on_preference"


class MagnitudeBand(Enum):
    NOT_SIGNIFICANT = "not_significant"
    MINOR = "minor"
    MODERATE = "moderate"
    MAJOR = "major"


class ChoiceFlexibility(Enum):
    BETTER = "Better"
    SIMILAR = "Similar"
    WORSE = "Worse"


class BadgeTone(Enum):
    GOOD = "good"
    WARN = "warn"


class Side(Enum):
    A = "A"
    B = "B"


@dataclass(frozen=True)
class ComparisonMetrics:
    """Raw deltas between the two areas. All deltas are A - B."""
    delta_price: Decimal
    delta_lease_years: float
    lease_a: float
    lease_b: float
    frac_below_critical_a: float
    frac_below_critical_b: float
    delta_epi: float | None = None
    epi_level_a: EpiLevel | None = None
    epi_level_b: EpiLevel | None = None
    delta_cbi: int | None = None
    delta_rent_gap: Decimal | None = None


@dataclass(frozen=True)
class DimensionScores:
    """Pairwise-normalized scores (0-100) for one area. Relative to the other area only."""
    cost: int
    lease: int
    school: int
    stability: int
    cash_flow: int | None = None
    overall: float = 0.0


@dataclass(frozen=True)
class EducationPressureBlock:
    comparison: str
    explanation: str
    pressure_range_note: str | None = None


@dataclass(frozen=True)
class EducationImpact:
    """What changes for school admission when moving from area A to area B."""
    epi_change: float
    epi_change_text: str
    high_demand_schools_change: int
    high_demand_schools_text: str
    school_count_change: int
    school_count_text: str
    choice_flexibility: ChoiceFlexibility
    explanation: str


@dataclass(frozen=True)
class CommuteComparison:
    summary: str
    cbi_a: int | None = None
    cbi_b: int | None = None
    label_a: str | None = None
    label_b: str | None = None


@dataclass(frozen=True)
class HousingTradeoff:
    price: str | None = None
    lease: str | None = None


@dataclass(frozen=True)
class SuitabilityTags:
    area_a: tuple[str, ...] = ()
    area_b: tuple[str, ...] = ()


@dataclass(frozen=True)
class BottomLine:
    changes: tuple[str, ...]
    best_for: str


@dataclass(frozen=True)
class Badge:
    side: Side
    label: str
    tone: BadgeTone


@dataclass(frozen=True)
class ComparisonResult:
    area_a: str
    area_b: str
    mode: PreferenceMode
    horizon: PlanningHorizon
    metrics: ComparisonMetrics
    scores_a: DimensionScores
    scores_b: DimensionScores
    confidence: Confidence
    headline: str
    lens_headline: str
    tradeoffs: tuple[str, ...]
    decision_hint: str
    warnings: tuple[RuleWarning, ...] = ()
    school_rule: SchoolRuleOutcome | None = None
    education: EducationPressureBlock | None = None
    education_impact: EducationImpact | None = None
    commute: CommuteComparison | None = None
    housing_tradeoff: HousingTradeoff = field(default_factory=HousingTradeoff)
    best_suited_for: SuitabilityTags = field(default_factory=SuitabilityTags)
    be_cautious: SuitabilityTags = field(default_factory=SuitabilityTags)
    bottom_line: BottomLine | None = None
    moving_phrase: str | None = None
    badges: tuple[Badge, ...] = ()
    rule_profile: RuleProfile | None = None

    @property
    def winner(self) -> str | None:
        """Area with the higher overall score, None on an exact tie."""
        if self.scores_a.overall == self.scores_b.overall:
            return None
        return self.area_a if self.scores_a.overall > self.scores_b.overall else self.area_b
