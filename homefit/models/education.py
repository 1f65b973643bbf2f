"""School admission data and the Education Pressure Index."""

from dataclasses import dataclass, field
from enum import Enum


class CutoffBand(Enum):
    LOW = "low"
    MID = "mid"
    HIGH = "high"


class EpiLevel(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class PressureFactor(Enum):
    DEMAND = "demand"
    CHOICE = "choice"
    UNCERTAINTY = "uncertainty"
    CROWDING = "crowding"


# Composite weights: demand, choice, uncertainty, crowding
EPI_WEIGHTS: dict[PressureFactor, float] = {
    PressureFactor.DEMAND: 0.40,
    PressureFactor.CHOICE: 0.30,
    PressureFactor.UNCERTAINTY: 0.20,
    PressureFactor.CROWDING: 0.10,
}
EPI_LOW_MAX = 33
EPI_MEDIUM_MAX = 66


def epi_level(epi: float) -> EpiLevel:
    if epi <= EPI_LOW_MAX:
        return EpiLevel.LOW
    if epi <= EPI_MEDIUM_MAX:
        return EpiLevel.MEDIUM
    return EpiLevel.HIGH


@dataclass(frozen=True)
class School:
    school_id: str
    name: str
    area_id: str


@dataclass(frozen=True)
class CutoffRecord:
    """One year of admission cut-off data for a school.

    Cut-offs are aggregate scores (lower = easier entry). Sources publish a
    min/max pair, a free-text range ("≤230", "231-250", "≥251"), or both.
    """
    school_id: str
    year: int
    cutoff_min: int | None = None
    cutoff_max: int | None = None
    cutoff_range: str | None = None


@dataclass(frozen=True)
class EducationPressureIndex:
    area_id: str
    demand_pressure: float
    choice_constraint: float
    uncertainty: float
    crowding: float
    dominant_factor: PressureFactor
    explanation: str
    why: tuple[str, ...] = ()

    @property
    def sub_scores(self) -> dict[PressureFactor, float]:
        return {
            PressureFactor.DEMAND: self.demand_pressure,
            PressureFactor.CHOICE: self.choice_constraint,
            PressureFactor.UNCERTAINTY: self.uncertainty,
            PressureFactor.CROWDING: self.crowding,
        }

    @property
    def epi(self) -> float:
        """Weighted composite, always derived from the four sub-scores."""
        total = sum(EPI_WEIGHTS[f] * v for f, v in self.sub_scores.items())
        return round(min(100.0, max(0.0, total)), 1)

    @property
    def level(self) -> EpiLevel:
        return epi_level(self.epi)


@dataclass(frozen=True)
class SchoolLandscape:
    area_id: str
    school_count: int
    cutoff_distribution: dict[CutoffBand, int] = field(default_factory=dict)
    high_demand_schools: int = 0
