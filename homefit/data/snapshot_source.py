"""In-memory data source over a validated JSON snapshot.

Serves the same protocols as the PostgREST client, so offline comparisons
and tests run through identical resolution logic.
"""

import json
import logging
from decimal import Decimal
from pathlib import Path
from types import MappingProxyType

from homefit.engine.area_profile import trailing_window, window_median_rent
from homefit.engine.normalize import match_area_name
from homefit.models.area import PeriodStats
from homefit.models.commute import AccessRecord
from homefit.models.education import CutoffRecord, School
from homefit.models.snapshot import Snapshot

logger = logging.getLogger(__name__)

ALL_UNIT_TYPES = "All"


class SnapshotSource:
    def __init__(self, snapshot: Snapshot):
        self.snapshot = snapshot

    @classmethod
    def from_file(cls, path: str | Path) -> "SnapshotSource":
        """Load and validate a snapshot file. Raises pydantic.ValidationError on bad rows."""
        data = json.loads(Path(path).read_text())
        snapshot = Snapshot.model_validate(data)
        logger.info(
            "Loaded snapshot %s: %d transaction rows, %d schools",
            path, len(snapshot.transactions), len(snapshot.schools),
        )
        return cls(snapshot)

    def _town(self, area_id: str, towns: list[str]) -> str | None:
        return match_area_name(area_id, dict.fromkeys(towns))

    # ── TransactionSource ──

    async def get_period_stats(self, area_id: str, unit_type: str, months: int) -> list[PeriodStats]:
        rows = self.snapshot.transactions
        town = self._town(area_id, [r.town for r in rows])
        if town is None:
            return []
        stats = [
            r.to_period_stats()
            for r in rows
            if r.town == town and (unit_type == ALL_UNIT_TYPES or r.flat_type == unit_type)
        ]
        return trailing_window(stats, months)

    async def get_median_rent(self, area_id: str, unit_type: str, months: int) -> Decimal | None:
        rows = self.snapshot.rentals
        town = self._town(area_id, [r.town for r in rows])
        if town is None:
            return None
        rentals = [
            r for r in rows
            if r.town == town and (unit_type == ALL_UNIT_TYPES or r.flat_type == unit_type)
        ]
        return window_median_rent(rentals, months)

    async def get_area_volume(self, area_id: str, months: int) -> int | None:
        stats = await self.get_period_stats(area_id, ALL_UNIT_TYPES, months)
        if not stats:
            return None
        return sum(s.tx_count for s in stats)

    # ── SchoolSource ──

    async def get_schools(self) -> list[School]:
        return [row.to_school() for row in self.snapshot.schools]

    async def get_cutoffs(self, school_ids: list[str]) -> list[CutoffRecord]:
        wanted = set(school_ids)
        return [row.to_cutoff() for row in self.snapshot.cutoffs if row.school_id in wanted]

    # ── Commute ──

    def commute_table(self) -> MappingProxyType[str, AccessRecord] | None:
        """Access records shipped in the snapshot, None when it carries none."""
        if not self.snapshot.access:
            return None
        return MappingProxyType({row.town: row.to_access_record() for row in self.snapshot.access})
