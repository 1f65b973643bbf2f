"""Education Pressure Index (EPI).

Sub-scores (0-100, higher = more pressure):
  D  Demand pressure:    share of schools whose latest cut-off is in the high
                         band, through a logistic centred at 25%
  C  Choice constraint:  100 * (1 - min(1, ln(1+n) / ln(1+12)))
  U  Uncertainty:        mean year-to-year stddev of cut-off bands
  R  Crowding:           recent transaction volume against 5,000

EPI = 0.40*D + 0.30*C + 0.20*U + 0.10*R
"""

import math
from collections import defaultdict
from dataclasses import replace

from homefit.engine.normalize import match_area_name
from homefit.models.education import (
    CutoffBand,
    CutoffRecord,
    EducationPressureIndex,
    PressureFactor,
    School,
    SchoolLandscape,
)

RECENT_CUTOFF_YEARS = 5
LANDSCAPE_CUTOFF_YEARS = 3

HIGH_DEMAND_THRESHOLD = 0.25
SIGMOID_SCALE = 0.08
REFERENCE_SCHOOL_COUNT = 12
MIN_CUTOFF_YEARS = 2
STD_SCALE = 0.25
CROWDING_MAX_VOLUME = 5000

BAND_VALUES: dict[CutoffBand, float] = {
    CutoffBand.LOW: 0.0,
    CutoffBand.MID: 0.5,
    CutoffBand.HIGH: 1.0,
}

# Composite below EXPLAIN_LOW reads as low pressure, above EXPLAIN_HIGH as high
EXPLAIN_LOW = 25
EXPLAIN_HIGH = 50

EXPLANATIONS: dict[str, dict[PressureFactor, str]] = {
    "low": {
        PressureFactor.DEMAND: "A wide range of lower-demand schools keeps competition manageable.",
        PressureFactor.CHOICE: "Multiple school options provide flexibility and reduce pressure.",
        PressureFactor.UNCERTAINTY: "Stable cut-off patterns make outcomes more predictable.",
        PressureFactor.CROWDING: "Lower local demand keeps competition manageable.",
    },
    "medium": {
        PressureFactor.DEMAND: "Moderate mix of school demand levels, with some competition for popular schools.",
        PressureFactor.CHOICE: "Adequate school options, but distance bands still matter.",
        PressureFactor.UNCERTAINTY: "Cut-off patterns show moderate variability year to year.",
        PressureFactor.CROWDING: "Moderate local demand suggests balanced competition levels.",
    },
    "high": {
        PressureFactor.DEMAND: "Competition is concentrated in a few high-demand schools.",
        PressureFactor.CHOICE: "Fewer nearby schools means fewer alternatives; distance bands matter more.",
        PressureFactor.UNCERTAINTY: "Cut-off levels fluctuate more here, making outcomes less predictable.",
        PressureFactor.CROWDING: "Higher demand indicators suggest tighter competition for popular schools.",
    },
}

# "Why" bullets: sub-score below WHY_LOW / above WHY_HIGH / in between
WHY_LOW = 30
WHY_HIGH = 70

WHY_BULLETS: dict[PressureFactor, dict[str, str | None]] = {
    PressureFactor.DEMAND: {
        "low": "Few high-demand schools → less concentrated competition",
        "mid": "Moderate mix of school demand levels",
        "high": "Many high-demand schools → more concentrated competition",
    },
    PressureFactor.CHOICE: {
        "low": "Multiple school options → wider safety net",
        "mid": "Moderate number of school choices available",
        "high": "Fewer school options → distance bands matter more",
    },
    PressureFactor.UNCERTAINTY: {
        "low": "Stable cut-off patterns → outcomes more predictable",
        "mid": "Moderate cut-off stability",
        "high": "Fluctuating cut-off patterns → outcomes less predictable",
    },
    PressureFactor.CROWDING: {
        "low": None,
        "mid": None,
        "high": "Higher local demand → tighter competition for popular schools",
    },
}


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def sigmoid(x: float) -> float:
    return 1 / (1 + math.exp(-x))


def cutoff_band(record: CutoffRecord) -> CutoffBand:
    """Band a cut-off: max score first, then min score, then the range text."""
    if record.cutoff_max is not None:
        if record.cutoff_max <= 230:
            return CutoffBand.LOW
        if record.cutoff_max <= 250:
            return CutoffBand.MID
        return CutoffBand.HIGH
    if record.cutoff_min is not None:
        if record.cutoff_min >= 251:
            return CutoffBand.HIGH
        if record.cutoff_min >= 231:
            return CutoffBand.MID
        return CutoffBand.LOW
    if record.cutoff_range:
        text = record.cutoff_range
        if "≤230" in text or "<=230" in text:
            return CutoffBand.LOW
        if "≥251" in text or ">=251" in text:
            return CutoffBand.HIGH
        if "231" in text or "250" in text:
            return CutoffBand.MID
    return CutoffBand.MID


def _recent_by_school(cutoffs: list[CutoffRecord], since_year: int) -> dict[str, list[CutoffRecord]]:
    grouped: dict[str, list[CutoffRecord]] = defaultdict(list)
    for c in cutoffs:
        if c.year >= since_year:
            grouped[c.school_id].append(c)
    for records in grouped.values():
        records.sort(key=lambda c: c.year)
    return grouped


def _latest_bands(
    schools: list[School], cutoffs: list[CutoffRecord], since_year: int
) -> dict[str, CutoffBand]:
    """Band of each school's most recent cut-off within the window."""
    grouped = _recent_by_school(cutoffs, since_year)
    return {
        s.school_id: cutoff_band(grouped[s.school_id][-1])
        for s in schools
        if grouped.get(s.school_id)
    }


def demand_pressure(schools: list[School], cutoffs: list[CutoffRecord], as_of_year: int) -> float:
    if not schools:
        return 50.0  # neutral
    bands = _latest_bands(schools, cutoffs, as_of_year - RECENT_CUTOFF_YEARS)
    p_high = sum(1 for b in bands.values() if b is CutoffBand.HIGH) / len(schools)
    return clamp(100 * sigmoid((p_high - HIGH_DEMAND_THRESHOLD) / SIGMOID_SCALE))


def choice_constraint(school_count: int) -> float:
    if school_count <= 0:
        return 100.0  # worst case
    ratio = math.log(1 + school_count) / math.log(1 + REFERENCE_SCHOOL_COUNT)
    return clamp(100 * (1 - min(1.0, ratio)))


def uncertainty(schools: list[School], cutoffs: list[CutoffRecord], as_of_year: int) -> float:
    if not schools or not cutoffs:
        return 50.0  # neutral
    grouped = _recent_by_school(cutoffs, as_of_year - RECENT_CUTOFF_YEARS)

    stds: list[float] = []
    for school in schools:
        records = grouped.get(school.school_id, [])
        if len(records) < MIN_CUTOFF_YEARS:
            continue
        values = [BAND_VALUES[cutoff_band(r)] for r in records]
        mean = sum(values) / len(values)
        stds.append(math.sqrt(sum((v - mean) ** 2 for v in values) / len(values)))

    if not stds:
        return 50.0  # neutral
    return clamp(sum(stds) / len(stds) / STD_SCALE * 100)


def crowding(recent_volume: int | None) -> float:
    if recent_volume is None:
        return 50.0  # neutral
    return clamp(recent_volume / CROWDING_MAX_VOLUME * 100)


def dominant_factor(scores: dict[PressureFactor, float]) -> PressureFactor:
    """First factor with the highest score, in declaration order."""
    best = PressureFactor.DEMAND
    for factor in PressureFactor:
        if scores[factor] > scores[best]:
            best = factor
    return best


def explanation_for(epi: float, factor: PressureFactor) -> str:
    if epi < EXPLAIN_LOW:
        band = "low"
    elif epi > EXPLAIN_HIGH:
        band = "high"
    else:
        band = "medium"
    return EXPLANATIONS[band][factor]


def why_bullets(scores: dict[PressureFactor, float]) -> tuple[str, ...]:
    bullets = []
    for factor in PressureFactor:
        value = scores[factor]
        band = "low" if value < WHY_LOW else "high" if value > WHY_HIGH else "mid"
        text = WHY_BULLETS[factor][band]
        if text is not None:
            bullets.append(text)
    return tuple(bullets)


def compute_education_pressure(
    area_id: str,
    schools: list[School],
    cutoffs: list[CutoffRecord],
    recent_volume: int | None,
    as_of_year: int,
) -> EducationPressureIndex:
    """Score an area from its resolved schools. Works for zero schools."""
    scores = {
        PressureFactor.DEMAND: round(demand_pressure(schools, cutoffs, as_of_year), 1),
        PressureFactor.CHOICE: round(choice_constraint(len(schools)), 1),
        PressureFactor.UNCERTAINTY: round(uncertainty(schools, cutoffs, as_of_year), 1),
        PressureFactor.CROWDING: round(crowding(recent_volume), 1),
    }
    factor = dominant_factor(scores)

    index = EducationPressureIndex(
        area_id=area_id,
        demand_pressure=scores[PressureFactor.DEMAND],
        choice_constraint=scores[PressureFactor.CHOICE],
        uncertainty=scores[PressureFactor.UNCERTAINTY],
        crowding=scores[PressureFactor.CROWDING],
        dominant_factor=factor,
        explanation="",
        why=why_bullets(scores),
    )
    # Explanation keys off the composite, which is derived from the sub-scores
    return replace(index, explanation=explanation_for(index.epi, factor))


def schools_for_area(area_id: str, schools: list[School]) -> list[School]:
    """Schools serving an area, tolerating quoting and case differences."""
    stored = match_area_name(area_id, (s.area_id for s in schools))
    if stored is None:
        return []
    return [s for s in schools if s.area_id == stored]


def calculate_education_pressure_index(
    area_id: str,
    schools: list[School],
    cutoffs: list[CutoffRecord],
    recent_volume: int | None,
    as_of_year: int,
) -> EducationPressureIndex | None:
    """EPI for one area, or None when no school resolves to it.

    Args:
        area_id: Area name as entered by the caller
        schools: Full school directory (all areas)
        cutoffs: Cut-off history for any schools; unrelated rows are ignored
        recent_volume: Area transaction volume used for crowding, None if unknown
        as_of_year: Reference year for the recent-history windows
    """
    area_schools = schools_for_area(area_id, schools)
    if not area_schools:
        return None
    ids = {s.school_id for s in area_schools}
    area_cutoffs = [c for c in cutoffs if c.school_id in ids]
    return compute_education_pressure(area_id, area_schools, area_cutoffs, recent_volume, as_of_year)


def build_school_landscape(
    area_id: str,
    schools: list[School],
    cutoffs: list[CutoffRecord],
    as_of_year: int,
) -> SchoolLandscape | None:
    """School count and latest cut-off band distribution for an area."""
    area_schools = schools_for_area(area_id, schools)
    if not area_schools:
        return None

    bands = _latest_bands(area_schools, cutoffs, as_of_year - LANDSCAPE_CUTOFF_YEARS)
    distribution = {band: 0 for band in CutoffBand}
    for band in bands.values():
        distribution[band] += 1

    return SchoolLandscape(
        area_id=area_id,
        school_count=len(area_schools),
        cutoff_distribution=distribution,
        high_demand_schools=distribution[CutoffBand.HIGH],
    )
