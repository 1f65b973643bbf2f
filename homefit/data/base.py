"""Protocol definitions for data sources.

Each protocol defines the interface that concrete data source implementations must satisfy.
"""

from decimal import Decimal
from typing import Protocol, runtime_checkable

from homefit.models.area import PeriodStats
from homefit.models.education import CutoffRecord, School


@runtime_checkable
class TransactionSource(Protocol):
    async def get_period_stats(self, area_id: str, unit_type: str, months: int) -> list[PeriodStats]:
        """Per-month aggregates for one area and unit type, trailing `months` window."""
        ...

    async def get_median_rent(self, area_id: str, unit_type: str, months: int) -> Decimal | None:
        """Median monthly rent over the window, None when no rentals are recorded."""
        ...

    async def get_area_volume(self, area_id: str, months: int) -> int | None:
        """Total transactions across all unit types over the window."""
        ...


@runtime_checkable
class SchoolSource(Protocol):
    async def get_schools(self) -> list[School]:
        """Full school directory across all areas."""
        ...

    async def get_cutoffs(self, school_ids: list[str]) -> list[CutoffRecord]:
        """Cut-off history for the given schools."""
        ...
