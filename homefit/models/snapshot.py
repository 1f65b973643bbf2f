"""Pydantic models for stored rows and JSON snapshots.

Column names follow the hosted tables so the same models validate both
PostgREST responses and snapshot files.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from homefit.models.area import PeriodStats
from homefit.models.commute import AccessRecord, BusDependency, MrtAccess, TransferComplexity
from homefit.models.education import CutoffRecord, School


class TransactionRow(BaseModel):
    town: str
    flat_type: str
    month: str  # "YYYY-MM" or "YYYY-MM-DD"
    tx_count: int = 0
    median_price: Decimal = Decimal("0")
    median_psm: Decimal = Decimal("0")
    median_lease_years: float = 0.0

    def to_period_stats(self) -> PeriodStats:
        return PeriodStats(
            period=self.month[:7],
            tx_count=self.tx_count,
            median_price=self.median_price,
            median_price_per_area=self.median_psm,
            median_lease_years=self.median_lease_years,
        )


class RentalRow(BaseModel):
    town: str
    flat_type: str
    month: str
    median_rent: Decimal


class SchoolRow(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    school_name: str
    town: str

    def to_school(self) -> School:
        return School(school_id=self.id, name=self.school_name, area_id=self.town)


class CutoffRow(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    school_id: str
    year: int
    cutoff_min: int | None = None
    cutoff_max: int | None = None
    cutoff_range: str | None = None

    def to_cutoff(self) -> CutoffRecord:
        return CutoffRecord(
            school_id=self.school_id,
            year=self.year,
            cutoff_min=self.cutoff_min,
            cutoff_max=self.cutoff_max,
            cutoff_range=self.cutoff_range,
        )


class AccessRow(BaseModel):
    town: str
    mrt_station_count: int = 0
    bus_stop_count: int = 0
    mrt_access: MrtAccess = MrtAccess.NONE
    transfer_complexity: TransferComplexity = TransferComplexity.TWO_PLUS
    bus_dependency: BusDependency = BusDependency.HIGH

    def to_access_record(self) -> AccessRecord:
        return AccessRecord(
            area_id=self.town,
            mrt_station_count=self.mrt_station_count,
            bus_stop_count=self.bus_stop_count,
            mrt_access=self.mrt_access,
            transfer_complexity=self.transfer_complexity,
            bus_dependency=self.bus_dependency,
        )


class Snapshot(BaseModel):
    """A self-contained export of every table the comparison reads."""
    transactions: list[TransactionRow] = Field(default_factory=list)
    rentals: list[RentalRow] = Field(default_factory=list)
    schools: list[SchoolRow] = Field(default_factory=list)
    cutoffs: list[CutoffRow] = Field(default_factory=list)
    access: list[AccessRow] = Field(default_factory=list)
