"""Static structural commute attributes per town.

Station and stop counts are approximate town-level tallies; access,
transfer and bus-dependency classes describe the route to the CBD. The
table can be replaced wholesale by a JSON list of AccessRow records via
settings.commute_table_path.
"""

import json
import logging
from pathlib import Path
from types import MappingProxyType

from pydantic import TypeAdapter

from homefit.config import settings
from homefit.models.commute import AccessRecord, BusDependency, MrtAccess, TransferComplexity
from homefit.models.snapshot import AccessRow

logger = logging.getLogger(__name__)

H, M, L, N = MrtAccess.HIGH, MrtAccess.MEDIUM, MrtAccess.LOW, MrtAccess.NONE
DIRECT, ONE, TWO = TransferComplexity.DIRECT, TransferComplexity.ONE_TRANSFER, TransferComplexity.TWO_PLUS
BUS_LOW, BUS_MED, BUS_HIGH = BusDependency.LOW, BusDependency.MEDIUM, BusDependency.HIGH

# town: (mrt stations, bus stops, mrt access, transfers to CBD, bus dependency)
_TOWNS: dict[str, tuple[int, int, MrtAccess, TransferComplexity, BusDependency]] = {
    "ANG MO KIO": (3, 14, H, DIRECT, BUS_LOW),
    "BEDOK": (4, 16, H, DIRECT, BUS_LOW),
    "BISHAN": (2, 10, H, DIRECT, BUS_LOW),
    "BUKIT BATOK": (2, 12, M, ONE, BUS_MED),
    "BUKIT MERAH": (5, 15, H, DIRECT, BUS_LOW),
    "BUKIT PANJANG": (4, 11, M, ONE, BUS_MED),
    "BUKIT TIMAH": (3, 8, H, DIRECT, BUS_LOW),
    "CENTRAL AREA": (8, 20, H, DIRECT, BUS_LOW),
    "CHOA CHU KANG": (2, 12, M, ONE, BUS_MED),
    "CLEMENTI": (2, 11, H, DIRECT, BUS_LOW),
    "GEYLANG": (5, 14, H, DIRECT, BUS_LOW),
    "HOUGANG": (2, 13, M, ONE, BUS_MED),
    "JURONG EAST": (3, 12, H, DIRECT, BUS_LOW),
    "JURONG WEST": (3, 15, M, ONE, BUS_MED),
    "KALLANG/WHAMPOA": (5, 13, H, DIRECT, BUS_LOW),
    "MARINE PARADE": (2, 8, M, ONE, BUS_MED),
    "PASIR RIS": (1, 10, L, ONE, BUS_HIGH),
    "PUNGGOL": (1, 12, L, TWO, BUS_HIGH),
    "QUEENSTOWN": (4, 12, H, DIRECT, BUS_LOW),
    "SEMBAWANG": (1, 7, L, TWO, BUS_HIGH),
    "SENGKANG": (1, 13, M, TWO, BUS_HIGH),
    "SERANGOON": (2, 9, H, DIRECT, BUS_LOW),
    "TAMPINES": (3, 16, M, ONE, BUS_MED),
    "TENGAH": (0, 4, N, TWO, BUS_HIGH),
    "TOA PAYOH": (3, 12, H, DIRECT, BUS_LOW),
    "WOODLANDS": (4, 14, M, ONE, BUS_MED),
    "YISHUN": (2, 12, M, ONE, BUS_MED),
}

DEFAULT_COMMUTE_TABLE: MappingProxyType[str, AccessRecord] = MappingProxyType({
    town: AccessRecord(
        area_id=town,
        mrt_station_count=stations,
        bus_stop_count=stops,
        mrt_access=access,
        transfer_complexity=transfers,
        bus_dependency=bus,
    )
    for town, (stations, stops, access, transfers, bus) in _TOWNS.items()
})

_ROWS = TypeAdapter(list[AccessRow])


def load_commute_table(path: str | Path) -> MappingProxyType[str, AccessRecord]:
    """Read-only table from a JSON list of AccessRow records."""
    rows = _ROWS.validate_python(json.loads(Path(path).read_text()))
    logger.info("Loaded %d commute records from %s", len(rows), path)
    return MappingProxyType({row.town: row.to_access_record() for row in rows})


def get_commute_table() -> MappingProxyType[str, AccessRecord]:
    """The configured override when set, otherwise the built-in table."""
    if settings.commute_table_path:
        return load_commute_table(settings.commute_table_path)
    return DEFAULT_COMMUTE_TABLE
