"""Area-name and unit-type normalization.

Source tables are inconsistent about quoting and case ('"KALLANG/WHAMPOA"',
'Ang Mo Kio', 'ANG MO KIO'). Matching tries progressively looser variants.
"""

import re
from collections.abc import Iterable

_ROOM_PATTERN = re.compile(r"^(\d+)\s*[- ]?\s*room$")


def normalize_area_name(name: str) -> str:
    """Strip one pair of surrounding quotes and whitespace."""
    if not name:
        return ""
    return re.sub(r"^[\"']|[\"']$", "", name.strip()).strip()


def name_variants(name: str) -> list[str]:
    """Exact-match candidates in lookup order: clean, then quoted."""
    clean = normalize_area_name(name)
    return [clean, f'"{clean}"']


def match_area_name(name: str, candidates: Iterable[str]) -> str | None:
    """Find the stored spelling of an area name.

    Order: exact, quoted, case-insensitive, case-insensitive quoted.
    """
    stored = list(candidates)
    for variant in name_variants(name):
        if variant in stored:
            return variant

    lowered = {c.lower(): c for c in reversed(stored)}
    for variant in name_variants(name):
        if variant.lower() in lowered:
            return lowered[variant.lower()]
    return None


def normalize_unit_type(value: str) -> str:
    """'4-room', '4 Room', '4room' -> '4 ROOM'; 'exec' -> 'EXECUTIVE'."""
    raw = (value or "").strip()
    if not raw:
        return ""
    lower = re.sub(r"\s+", " ", raw.lower())
    if lower in ("all", "any", "any size", "any-size"):
        return "All"
    if lower in ("executive", "exec"):
        return "EXECUTIVE"
    m = _ROOM_PATTERN.match(lower)
    if m:
        return f"{m.group(1)} ROOM"
    return raw
