"""Optional comparison sections.

Each builder reads as "moving from area A to area B" where direction matters,
and returns None when its inputs are missing.
"""

from homefit.engine.templates import EPI_LEVEL_TEXT
from homefit.engine.thresholds import (
    CBI_MINOR,
    EPI_MINOR,
    EPI_MODERATE,
    EPI_SIGNIFICANT,
    FRAC_BELOW_CRITICAL_HIGH,
    LEASE_CRITICAL,
    LEASE_HIGH,
    LEASE_MODERATE_GAP,
    PRICE_SIGNIFICANT,
    RENT_GAP_SIMILAR,
)
from homefit.models.area import AreaProfile, LeaseRiskLevel
from homefit.models.commute import CommuteBurdenIndex
from homefit.models.comparison import (
    Badge,
    BadgeTone,
    BottomLine,
    ChoiceFlexibility,
    CommuteComparison,
    ComparisonMetrics,
    EducationImpact,
    EducationPressureBlock,
    HousingTradeoff,
    Side,
    SuitabilityTags,
)
from homefit.models.education import (
    EPI_LOW_MAX,
    EPI_MEDIUM_MAX,
    EducationPressureIndex,
    EpiLevel,
    SchoolLandscape,
)

TAG_SCHOOL = "Families prioritising lower primary school pressure"
TAG_COST = "Buyers prioritising lower upfront cost"
TAG_LEASE = "Long-term owners valuing lease security"
TAG_SCHOOL_INSENSITIVE = "Buyers less sensitive to school competition"

CAUTION_LEASE = f"High lease risk — may face financing constraints (below {LEASE_HIGH} years)"
CAUTION_SHARE = f"Significant portion of flats below {LEASE_CRITICAL} years remaining"


def _epi_line(name: str, epi: EducationPressureIndex | None) -> str:
    if epi is None:
        return f"• {name}: Data not available"
    return f"• {name}: EPI {epi.epi} ({EPI_LEVEL_TEXT[epi.level]})"


def _pressure_range_note(a: EducationPressureIndex, b: EducationPressureIndex) -> str:
    if a.level is EpiLevel.LOW and b.level is EpiLevel.LOW:
        return (
            f"Both areas fall within the Low pressure range (0–{EPI_LOW_MAX}), "
            "meaning primary school competition is generally manageable."
        )
    if a.level is EpiLevel.MEDIUM and b.level is EpiLevel.MEDIUM:
        return (
            f"Both areas fall within the Moderate pressure range ({EPI_LOW_MAX + 1}–{EPI_MEDIUM_MAX}), "
            "with moderate competition levels."
        )
    if EpiLevel.HIGH in (a.level, b.level):
        return (
            f"One or both areas have higher pressure ({EPI_MEDIUM_MAX + 1}+), "
            "indicating more concentrated competition."
        )
    return "Both areas fall within manageable pressure ranges, meaning primary school competition is generally manageable."


def education_block(
    name_a: str,
    name_b: str,
    epi_a: EducationPressureIndex | None,
    epi_b: EducationPressureIndex | None,
) -> EducationPressureBlock | None:
    if epi_a is None and epi_b is None:
        return None

    comparison = "\n".join([
        "Primary school pressure:",
        _epi_line(name_a, epi_a),
        _epi_line(name_b, epi_b),
    ])

    if epi_a is None or epi_b is None:
        available = name_a if epi_a is not None else name_b
        return EducationPressureBlock(
            comparison=comparison,
            explanation=f"School pressure data is only available for {available}.",
        )

    diff = epi_a.epi - epi_b.epi
    if diff >= EPI_SIGNIFICANT:
        explanation = f"Families in {name_a} face more concentrated competition and fewer lower-risk options."
    elif diff <= -EPI_SIGNIFICANT:
        explanation = f"{name_a} offers a wider range of lower-pressure school options."
    else:
        explanation = "Both areas offer similar school competition levels."

    return EducationPressureBlock(
        comparison=comparison,
        explanation=explanation,
        pressure_range_note=_pressure_range_note(epi_a, epi_b),
    )


def _choice_flexibility(count_change: int, high_demand_change: int) -> ChoiceFlexibility:
    if count_change > 2 and high_demand_change <= 0:
        return ChoiceFlexibility.BETTER
    if count_change < -2 or (count_change <= 0 and high_demand_change > 0):
        return ChoiceFlexibility.WORSE
    return ChoiceFlexibility.SIMILAR


def _impact_explanation(change: float, level_a: EpiLevel, level_b: EpiLevel) -> str:
    size = abs(change)
    if size < EPI_MINOR:
        return "Pressure remains similar — moving is unlikely to materially change day-to-day stress."
    if size < EPI_MODERATE:
        if change > 0:
            return (
                f"Pressure increases slightly, but stays within {EPI_LEVEL_TEXT[level_b]} range — "
                "moving is unlikely to materially change day-to-day stress unless you target specific elite schools."
            )
        return "Pressure decreases slightly — moving may reduce competition, especially if you're targeting mid-tier schools."
    if change > 0:
        if level_a is not level_b:
            return (
                f"Pressure increases significantly and crosses into {EPI_LEVEL_TEXT[level_b]} range — "
                "moving may meaningfully increase competition, especially for popular schools."
            )
        return "Pressure increases significantly — moving may meaningfully increase competition, especially for popular schools."
    return "Pressure decreases significantly — moving may meaningfully reduce competition and increase your school options."


def education_impact(
    epi_a: EducationPressureIndex | None,
    epi_b: EducationPressureIndex | None,
    landscape_a: SchoolLandscape | None,
    landscape_b: SchoolLandscape | None,
) -> EducationImpact | None:
    """What changes for school admission when moving from A to B."""
    if epi_a is None or epi_b is None or landscape_a is None or landscape_b is None:
        return None

    change = round(epi_b.epi - epi_a.epi, 1)
    level_text = "still Low" if epi_a.level is epi_b.level is EpiLevel.LOW else EPI_LEVEL_TEXT[epi_b.level]
    sign = "+" if change > 0 else ""

    high_demand_change = landscape_b.high_demand_schools - landscape_a.high_demand_schools
    count_change = landscape_b.school_count - landscape_a.school_count

    return EducationImpact(
        epi_change=change,
        epi_change_text=f"{sign}{change:.1f} ({level_text})",
        high_demand_schools_change=high_demand_change,
        high_demand_schools_text=f"+{high_demand_change}" if high_demand_change >= 0 else str(high_demand_change),
        school_count_change=count_change,
        school_count_text=f"{landscape_a.school_count} → {landscape_b.school_count}",
        choice_flexibility=_choice_flexibility(count_change, high_demand_change),
        explanation=_impact_explanation(change, epi_a.level, epi_b.level),
    )


def commute_comparison(
    name_a: str,
    name_b: str,
    cbi_a: CommuteBurdenIndex | None,
    cbi_b: CommuteBurdenIndex | None,
) -> CommuteComparison | None:
    if cbi_a is None and cbi_b is None:
        return None
    if cbi_a is None or cbi_b is None:
        available = name_a if cbi_a is not None else name_b
        return CommuteComparison(
            summary=f"Commute data is only available for {available}.",
            cbi_a=cbi_a.cbi if cbi_a else None,
            cbi_b=cbi_b.cbi if cbi_b else None,
            label_a=cbi_a.label if cbi_a else None,
            label_b=cbi_b.label if cbi_b else None,
        )

    if abs(cbi_a.cbi - cbi_b.cbi) < CBI_MINOR:
        summary = "Both areas carry a similar structural commute burden."
    elif cbi_a.cbi < cbi_b.cbi:
        summary = f"{name_a} has a lighter structural commute than {name_b}."
    else:
        summary = f"{name_b} has a lighter structural commute than {name_a}."
    return CommuteComparison(
        summary=summary,
        cbi_a=cbi_a.cbi,
        cbi_b=cbi_b.cbi,
        label_a=cbi_a.label,
        label_b=cbi_b.label,
    )


def housing_tradeoff(name_a: str, name_b: str, metrics: ComparisonMetrics) -> HousingTradeoff:
    price = lease = None
    if abs(metrics.delta_price) >= PRICE_SIGNIFICANT:
        price = f"Entry cost is higher in {name_a}." if metrics.delta_price > 0 else f"Entry cost is lower in {name_a}."
    if abs(metrics.delta_lease_years) >= LEASE_MODERATE_GAP:
        healthier = name_a if metrics.delta_lease_years > 0 else name_b
        lease = f"Remaining lease is healthier in {healthier}."
    return HousingTradeoff(price=price, lease=lease)


def best_suited_for(metrics: ComparisonMetrics) -> SuitabilityTags:
    """Pairwise tags: each dimension with a significant gap tags the better area."""
    tags_a: list[str] = []
    tags_b: list[str] = []

    if metrics.delta_epi is not None:
        if metrics.delta_epi < -EPI_SIGNIFICANT:
            tags_a.append(TAG_SCHOOL)
        if metrics.delta_epi > EPI_SIGNIFICANT:
            tags_b.append(TAG_SCHOOL)

    if metrics.delta_price < -PRICE_SIGNIFICANT:
        tags_a.append(TAG_COST)
    if metrics.delta_price > PRICE_SIGNIFICANT:
        tags_b.append(TAG_COST)

    if metrics.delta_lease_years > LEASE_MODERATE_GAP:
        tags_a.append(TAG_LEASE)
    if metrics.delta_lease_years < -LEASE_MODERATE_GAP:
        tags_b.append(TAG_LEASE)

    # Higher-pressure area still suits buyers who don't need the schools
    if metrics.delta_epi is not None:
        if metrics.delta_epi > EPI_SIGNIFICANT:
            tags_a.append(TAG_SCHOOL_INSENSITIVE)
        if metrics.delta_epi < -EPI_SIGNIFICANT:
            tags_b.append(TAG_SCHOOL_INSENSITIVE)

    return SuitabilityTags(area_a=tuple(tags_a), area_b=tuple(tags_b))


def _cautions(profile: AreaProfile) -> tuple[str, ...]:
    notes = []
    if profile.median_remaining_lease < LEASE_HIGH:
        notes.append(CAUTION_LEASE)
    if profile.frac_below_critical > FRAC_BELOW_CRITICAL_HIGH:
        notes.append(CAUTION_SHARE)
    return tuple(notes)


def be_cautious(a: AreaProfile, b: AreaProfile) -> SuitabilityTags:
    return SuitabilityTags(area_a=_cautions(a), area_b=_cautions(b))


def bottom_line(metrics: ComparisonMetrics) -> BottomLine | None:
    """Headline changes when moving from A to B. None if nothing changes materially."""
    changes: list[str] = []

    if abs(metrics.delta_lease_years) >= LEASE_MODERATE_GAP:
        changes.append(
            "👍 Lease security improves significantly" if metrics.delta_lease_years < 0
            else "⚠ Lease security decreases"
        )

    if metrics.delta_epi is not None and metrics.delta_epi != 0:
        decreases = metrics.delta_epi > 0
        if abs(metrics.delta_epi) >= EPI_SIGNIFICANT:
            changes.append("👍 School pressure decreases" if decreases else "⚠ School pressure increases")
        else:
            changes.append(
                "👍 School pressure decreases slightly" if decreases else "⚠ School pressure increases slightly"
            )

    if abs(metrics.delta_price) >= PRICE_SIGNIFICANT:
        changes.append("💰 Lower upfront price" if metrics.delta_price > 0 else "💰 Higher upfront price")

    if metrics.delta_rent_gap is not None and abs(metrics.delta_rent_gap) < RENT_GAP_SIMILAR:
        changes.append("💰 Similar monthly affordability")

    if not changes:
        return None

    if metrics.delta_lease_years < -LEASE_MODERATE_GAP:
        best_for = "Best for families planning long-term ownership and prioritising lease stability."
    elif metrics.delta_epi is not None and metrics.delta_epi > EPI_SIGNIFICANT:
        best_for = "Best for families prioritising lower primary school pressure."
    elif metrics.delta_price > PRICE_SIGNIFICANT:
        best_for = "Best for buyers prioritising lower upfront cost."
    else:
        best_for = "Both areas offer viable options — choose based on your priorities."

    return BottomLine(changes=tuple(changes), best_for=best_for)


def moving_phrase(name_a: str, name_b: str, metrics: ComparisonMetrics) -> str | None:
    """'Moving from A to B reduces entry cost, but reduces lease security.'"""
    parts: list[str] = []
    if metrics.delta_epi is not None and abs(metrics.delta_epi) >= EPI_SIGNIFICANT:
        parts.append("reduces school pressure" if metrics.delta_epi > 0 else "increases school pressure")
    if abs(metrics.delta_price) >= PRICE_SIGNIFICANT:
        parts.append("reduces entry cost" if metrics.delta_price > 0 else "increases entry cost")
    if abs(metrics.delta_lease_years) >= LEASE_MODERATE_GAP:
        parts.append("improves lease security" if metrics.delta_lease_years < 0 else "reduces lease security")
    if not parts:
        return None
    return f"Moving from {name_a} to {name_b} {', but '.join(parts)}."


def _badge(side: Side, profile: AreaProfile) -> Badge:
    if profile.lease_risk is LeaseRiskLevel.CRITICAL:
        return Badge(side=side, label="High lease risk", tone=BadgeTone.WARN)
    if profile.lease_risk is LeaseRiskLevel.HIGH:
        return Badge(side=side, label="Lease risk", tone=BadgeTone.WARN)
    return Badge(side=side, label="Lease healthier", tone=BadgeTone.GOOD)


def badges(a: AreaProfile, b: AreaProfile) -> tuple[Badge, ...]:
    return (_badge(Side.A, a), _badge(Side.B, b))
