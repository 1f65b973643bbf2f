"""Structural commute data types.

Commute Burden Index (0-100, higher = heavier daily commute):
  Central-access burden (A):  40%
  Transfer burden (T):        25%
  Network redundancy (N):     20%
  Daily-mobility friction (F): 15%
"""

from dataclasses import dataclass
from enum import Enum


class MrtAccess(Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    NONE = "none"


class TransferComplexity(Enum):
    DIRECT = "direct"
    ONE_TRANSFER = "1_transfer"
    TWO_PLUS = "2_plus"


class BusDependency(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class DistanceBand(Enum):
    CENTRAL = "central"
    WELL_CONNECTED = "well_connected"
    PERIPHERAL = "peripheral"


DISTANCE_BAND_LABELS: dict[DistanceBand, str] = {
    DistanceBand.CENTRAL: "Central",
    DistanceBand.WELL_CONNECTED: "Well-connected",
    DistanceBand.PERIPHERAL: "Peripheral",
}


class CommuteLevel(Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    VERY_HIGH = "very_high"


CBI_WEIGHTS = {"a": 0.40, "t": 0.25, "n": 0.20, "f": 0.15}

COMMUTE_LEVEL_LABELS: dict[CommuteLevel, str] = {
    CommuteLevel.LOW: "Low burden",
    CommuteLevel.MODERATE: "Moderate",
    CommuteLevel.HIGH: "High",
    CommuteLevel.VERY_HIGH: "Very High",
}


@dataclass(frozen=True)
class AccessRecord:
    """Static transport access attributes for one area."""
    area_id: str
    mrt_station_count: int
    bus_stop_count: int
    mrt_access: MrtAccess
    transfer_complexity: TransferComplexity
    bus_dependency: BusDependency


@dataclass(frozen=True)
class CommuteProfile:
    area_id: str
    central_access_burden: int
    transfer_burden: int
    network_redundancy: int
    daily_mobility_friction: int
    mrt_lines_count: int
    average_transfers_to_cbd: int
    distance_band: DistanceBand


@dataclass(frozen=True)
class CommuteBurdenIndex:
    area_id: str
    cbi: int
    level: CommuteLevel
    profile: CommuteProfile

    @property
    def label(self) -> str:
        return COMMUTE_LEVEL_LABELS[self.level]
