"""Commute Burden Index (CBI).

Structural only: derived from static transport access attributes, never from
transactions. CBI = round(0.40*A + 0.25*T + 0.20*N + 0.15*F).

Level: <=25 low, <=50 moderate, <=75 high, else very high.
"""

from collections.abc import Mapping

from homefit.engine.normalize import match_area_name
from homefit.models.commute import (
    CBI_WEIGHTS,
    AccessRecord,
    BusDependency,
    CommuteBurdenIndex,
    CommuteLevel,
    CommuteProfile,
    DistanceBand,
    MrtAccess,
    TransferComplexity,
)

LEVEL_THRESHOLDS: list[tuple[int, CommuteLevel]] = [
    (25, CommuteLevel.LOW),
    (50, CommuteLevel.MODERATE),
    (75, CommuteLevel.HIGH),
]

TRANSFERS_TO_CBD: dict[TransferComplexity, int] = {
    TransferComplexity.DIRECT: 0,
    TransferComplexity.ONE_TRANSFER: 1,
    TransferComplexity.TWO_PLUS: 2,
}

FRICTION_BY_BUS_DEPENDENCY: dict[BusDependency, int] = {
    BusDependency.LOW: 10,
    BusDependency.MEDIUM: 20,
    BusDependency.HIGH: 35,
}


def _central_access_burden(access: AccessRecord) -> int:
    """Structural distance to job centres, from MRT access and station count."""
    stations = access.mrt_station_count
    if access.mrt_access is MrtAccess.HIGH:
        if stations >= 4:
            return 10
        if stations >= 2:
            return 15
        return 20
    if access.mrt_access is MrtAccess.MEDIUM:
        return 25 if stations >= 2 else 35
    if access.mrt_access is MrtAccess.LOW:
        return 45
    return 60


def _transfer_burden(access: AccessRecord, central_access: int) -> int:
    if access.transfer_complexity is TransferComplexity.DIRECT:
        # Direct routes from poorly connected areas are still slow
        return 15 if central_access >= 40 else 10
    if access.transfer_complexity is TransferComplexity.ONE_TRANSFER:
        return 25
    return 50


def _network_redundancy(access: AccessRecord) -> int:
    """Alternative routes when one line is disrupted. Lower is better."""
    stations = access.mrt_station_count
    buses = access.bus_stop_count
    if stations >= 3:
        return 10
    if stations >= 1:
        if buses >= 10:
            return 20
        if buses >= 5:
            return 28
        return 35
    return 40 if buses >= 10 else 55


def _distance_band(central_access: int) -> DistanceBand:
    if central_access <= 15:
        return DistanceBand.CENTRAL
    if central_access <= 35:
        return DistanceBand.WELL_CONNECTED
    return DistanceBand.PERIPHERAL


def derive_commute_profile(access: AccessRecord) -> CommuteProfile:
    central = _central_access_burden(access)
    stations = access.mrt_station_count
    return CommuteProfile(
        area_id=access.area_id,
        central_access_burden=central,
        transfer_burden=_transfer_burden(access, central),
        network_redundancy=_network_redundancy(access),
        daily_mobility_friction=FRICTION_BY_BUS_DEPENDENCY[access.bus_dependency],
        mrt_lines_count=2 if stations > 2 else (1 if stations > 0 else 0),
        average_transfers_to_cbd=TRANSFERS_TO_CBD[access.transfer_complexity],
        distance_band=_distance_band(central),
    )


def commute_burden_score(profile: CommuteProfile) -> int:
    raw = (
        CBI_WEIGHTS["a"] * profile.central_access_burden
        + CBI_WEIGHTS["t"] * profile.transfer_burden
        + CBI_WEIGHTS["n"] * profile.network_redundancy
        + CBI_WEIGHTS["f"] * profile.daily_mobility_friction
    )
    return int(round(raw))


def commute_level(cbi: int) -> CommuteLevel:
    for max_score, level in LEVEL_THRESHOLDS:
        if cbi <= max_score:
            return level
    return CommuteLevel.VERY_HIGH


def calculate_commute_burden_index(
    area_id: str, table: Mapping[str, AccessRecord]
) -> CommuteBurdenIndex | None:
    """Look up an area in the structural table and score it. None if absent."""
    key = match_area_name(area_id, table.keys())
    if key is None:
        return None
    profile = derive_commute_profile(table[key])
    cbi = commute_burden_score(profile)
    return CommuteBurdenIndex(area_id=area_id, cbi=cbi, level=commute_level(cbi), profile=profile)
