"""Canned sentence tables for comparison output.

Selection is a pure lookup: (topic, magnitude band) -> template, then
`fill` substitutes named values. Nothing here composes free text.
"""

from enum import Enum

from homefit.engine.thresholds import (
    CBI_MINOR,
    CBI_MODERATE,
    CBI_SIGNIFICANT,
    EPI_MINOR,
    EPI_MODERATE,
    EPI_SIGNIFICANT,
    LEASE_MAJOR_GAP,
    LEASE_MINOR_GAP,
    LEASE_MODERATE_GAP,
    PRICE_MINOR,
    PRICE_MODERATE,
    PRICE_SIGNIFICANT,
)
from homefit.models.comparison import MagnitudeBand
from homefit.models.education import EpiLevel
from homefit.models.preference import ModeId


class Topic(Enum):
    ENTRY_COST = "entry_cost"
    LEASE = "lease"
    SCHOOL = "school"
    COMMUTE = "commute"


TOPIC_ORDER = (Topic.ENTRY_COST, Topic.LEASE, Topic.SCHOOL, Topic.COMMUTE)

# (minor, moderate, major) lower bounds on |delta|
BAND_EDGES: dict[Topic, tuple[float, float, float]] = {
    Topic.ENTRY_COST: (PRICE_MINOR, PRICE_MODERATE, PRICE_SIGNIFICANT),
    Topic.LEASE: (LEASE_MINOR_GAP, LEASE_MODERATE_GAP, LEASE_MAJOR_GAP),
    Topic.SCHOOL: (EPI_MINOR, EPI_MODERATE, EPI_SIGNIFICANT),
    Topic.COMMUTE: (CBI_MINOR, CBI_MODERATE, CBI_SIGNIFICANT),
}

TRADEOFF_TEMPLATES: dict[Topic, dict[MagnitudeBand, str]] = {
    Topic.ENTRY_COST: {
        MagnitudeBand.NOT_SIGNIFICANT: "💰 Upfront: Entry prices are similar (within ~{diff})",
        MagnitudeBand.MINOR: "💰 Upfront: {better} is slightly cheaper (~{diff})",
        MagnitudeBand.MODERATE: "💰 Upfront: {better} is cheaper by ~{diff}",
        MagnitudeBand.MAJOR: "💰 Upfront: {better} is significantly cheaper, by ~{diff}",
    },
    Topic.LEASE: {
        MagnitudeBand.NOT_SIGNIFICANT: "🧱 Lease: Remaining lease profiles are similar",
        MagnitudeBand.MINOR: "🧱 Lease: {better} has slightly longer remaining leases (+{diff} yrs)",
        MagnitudeBand.MODERATE: "🧱 Lease: {better} has healthier lease profile (+{diff} yrs)",
        MagnitudeBand.MAJOR: "🧱 Lease: {better} has significantly healthier lease profile (+{diff} yrs)",
    },
    Topic.SCHOOL: {
        MagnitudeBand.NOT_SIGNIFICANT: "🎓 School: School pressure remains similar",
        MagnitudeBand.MINOR: "🎓 School: Moving to {better} lowers EPI slightly ({level})",
        MagnitudeBand.MODERATE: "🎓 School: Moving to {better} lowers EPI by {diff} ({level})",
        MagnitudeBand.MAJOR: "🎓 School: Moving to {better} lowers EPI significantly ({level})",
    },
    Topic.COMMUTE: {
        MagnitudeBand.NOT_SIGNIFICANT: "🚇 Commute: Daily commute burden is similar",
        MagnitudeBand.MINOR: "🚇 Commute: {better} has a slightly lighter commute",
        MagnitudeBand.MODERATE: "🚇 Commute: {better} has a lighter commute ({level})",
        MagnitudeBand.MAJOR: "🚇 Commute: {better} has a much lighter commute ({level})",
    },
}

NOT_AVAILABLE_TEMPLATES: dict[Topic, str] = {
    Topic.SCHOOL: "🎓 School: Pressure data not available for {missing}",
    Topic.COMMUTE: "🚇 Commute: Commute data not available for {missing}",
}

HEADLINES: dict[str, str] = {
    "education_led": "{better} offers significantly lower primary school pressure than {worse}.",
    "partial_coverage": "Primary school pressure data is available for {available}, but not for {missing}.",
    "price_led": "{worse} commands higher entry prices than {better}.",
    "similar": "Both areas offer similar housing profiles.",
}

FAMILY_HEADLINES: dict[str, str] = {
    "lease": (
        "For a {stage} planning to stay {holding}, lease security matters more than upfront price. "
        "{better} offers a healthier lease profile."
    ),
    "lease_pricier": (
        "For a {stage} planning to stay {holding}, lease security matters more than upfront price. "
        "{better} offers a healthier lease profile, even though entry cost is higher."
    ),
    "cost": (
        "For a {stage} prioritising lower upfront & monthly cost, {better} offers better affordability, "
        "though lease profile may be shorter."
    ),
    "school": (
        "For a {stage} sensitive to school competition, {better} offers lower primary school pressure, "
        "making it a better fit for your priorities."
    ),
    "overall": "For a {stage} planning to stay {holding}, {better} offers a better overall balance for your situation.",
    "even": "For a {stage} planning to stay {holding}, both areas offer a comparable fit for your situation.",
}

LENS_HEADLINES: dict[ModeId, str] = {
    ModeId.LOW_ENTRY: "Choose {better} if you prioritise lower entry price.",
    ModeId.LONG_TERM: "Choose {better} if you prioritise long-term lease safety.",
    ModeId.LOW_SCHOOL_PRESSURE: "Choose {better} if you prioritise lower primary school pressure.",
}
BALANCED_CLEAR = "Choose {better} based on balanced factors."
BALANCED_SLIGHT = "Both areas are viable — {better} has a slight edge."

# Exact ties: no area is named
EVEN_HEADLINES: dict[ModeId, str] = {
    ModeId.BALANCED: "Both areas are evenly matched on balanced factors.",
    ModeId.LOW_ENTRY: "Both areas are evenly matched on entry price.",
    ModeId.LONG_TERM: "Both areas are evenly matched on long-term lease safety.",
    ModeId.LOW_SCHOOL_PRESSURE: "Both areas are evenly matched on primary school pressure.",
}

SCHOOL_LENS_MAJOR = "Choose {better} if you prioritise significantly lower primary school pressure."
SCHOOL_LENS_TRADEOFF = "Choose {better} for lower school pressure, but consider trade-offs with price and lease."
SCHOOL_NOTE_SUFFIX = ", but note the school pressure difference."

DECISION_HINTS: dict[str, str] = {
    "long_term": "If you plan to hold long-term (15+ years), lease profile matters more than upfront price.",
    "low_entry": "If upfront cost is your primary concern, the price difference may outweigh other factors.",
    "low_school_pressure": (
        "If primary school pressure is your priority, the EPI difference should be your main consideration."
    ),
    "default": "Consider your holding period and priorities when making this decision.",
}

EPI_LEVEL_TEXT: dict[EpiLevel, str] = {
    EpiLevel.LOW: "Low",
    EpiLevel.MEDIUM: "Moderate",
    EpiLevel.HIGH: "High",
}


def magnitude_band(delta: float, topic: Topic) -> MagnitudeBand:
    minor, moderate, major = BAND_EDGES[topic]
    size = abs(delta)
    if size >= major:
        return MagnitudeBand.MAJOR
    if size >= moderate:
        return MagnitudeBand.MODERATE
    if size >= minor:
        return MagnitudeBand.MINOR
    return MagnitudeBand.NOT_SIGNIFICANT


def tradeoff_template(topic: Topic, band: MagnitudeBand) -> str:
    return TRADEOFF_TEMPLATES[topic][band]


def fill(template: str, **values: object) -> str:
    return template.format(**values)


def format_currency(amount: float) -> str:
    return f"${int(round(abs(amount))):,}"


def format_years(years: float) -> str:
    return str(int(round(abs(years))))


def add_headline_note(headline: str, suffix: str) -> str:
    """'Choose X.' -> 'Choose X, but note ...'"""
    return headline.rstrip(".") + suffix
