"""PostgREST client for the hosted transaction, rental and school tables."""

import logging
from decimal import Decimal

import httpx
from pydantic import ValidationError

from homefit.config import settings
from homefit.data.cache import cached_rows
from homefit.engine.area_profile import trailing_window, window_median_rent
from homefit.engine.normalize import name_variants, normalize_area_name
from homefit.models.area import PeriodStats
from homefit.models.education import CutoffRecord, School
from homefit.models.snapshot import CutoffRow, RentalRow, SchoolRow, TransactionRow

logger = logging.getLogger(__name__)

TRANSACTIONS_TABLE = "aggregated_monthly"
RENTALS_TABLE = "rental_monthly"
SCHOOLS_TABLE = "primary_schools"
CUTOFFS_TABLE = "psle_cutoff"
ALL_UNIT_TYPES = "All"


class PostgrestClient:
    def __init__(self, base_url: str | None = None, api_key: str | None = None):
        self.base_url = (base_url or settings.postgrest_url).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.postgrest_api_key
        self.headers = {"Accept": "application/json"}
        if self.api_key:
            self.headers["apikey"] = self.api_key
            self.headers["Authorization"] = f"Bearer {self.api_key}"

    async def _get(self, table: str, params: dict | None = None) -> list[dict]:
        async with httpx.AsyncClient(timeout=15.0) as client:
            resp = await client.get(
                f"{self.base_url}/{table}",
                headers=self.headers,
                params=params or {},
            )
            resp.raise_for_status()
            return resp.json()

    @cached_rows("postgrest")
    async def _query(self, table: str, params: dict) -> list[dict]:
        return await self._get(table, params)

    async def fetch_rows(self, table: str, params: dict) -> list[dict]:
        """Rows from a table, or [] when the request fails."""
        try:
            return await self._query(table, params)
        except (httpx.HTTPStatusError, httpx.RequestError) as e:
            logger.warning("PostgREST query on %s failed: %s", table, e)
            return []

    async def _rows_for_town(self, table: str, town: str, params: dict) -> list[dict]:
        """Try exact then quoted town spellings, then case-insensitive ones."""
        for variant in name_variants(town):
            rows = await self.fetch_rows(table, {**params, "town": f"eq.{variant}"})
            if rows:
                return rows
        for variant in name_variants(town):
            rows = await self.fetch_rows(table, {**params, "town": f"ilike.{variant}"})
            if rows:
                return rows
        logger.info("No %s rows for town %s", table, normalize_area_name(town))
        return []

    # ── TransactionSource ──

    async def get_period_stats(self, area_id: str, unit_type: str, months: int) -> list[PeriodStats]:
        params = {"select": "*", "order": "month.asc"}
        if unit_type and unit_type != ALL_UNIT_TYPES:
            params["flat_type"] = f"eq.{unit_type}"
        rows = await self._rows_for_town(TRANSACTIONS_TABLE, area_id, params)
        try:
            stats = [TransactionRow(**row).to_period_stats() for row in rows]
        except ValidationError as e:
            logger.warning("Malformed %s rows for %s: %s", TRANSACTIONS_TABLE, area_id, e)
            return []
        return trailing_window(stats, months)

    async def get_median_rent(self, area_id: str, unit_type: str, months: int) -> Decimal | None:
        params = {"select": "*", "order": "month.asc"}
        if unit_type and unit_type != ALL_UNIT_TYPES:
            params["flat_type"] = f"eq.{unit_type}"
        rows = await self._rows_for_town(RENTALS_TABLE, area_id, params)
        try:
            rentals = [RentalRow(**row) for row in rows]
        except ValidationError as e:
            logger.warning("Malformed %s rows for %s: %s", RENTALS_TABLE, area_id, e)
            return None
        return window_median_rent(rentals, months)

    async def get_area_volume(self, area_id: str, months: int) -> int | None:
        stats = await self.get_period_stats(area_id, ALL_UNIT_TYPES, months)
        if not stats:
            return None
        return sum(s.tx_count for s in stats)

    # ── SchoolSource ──

    async def get_schools(self) -> list[School]:
        rows = await self.fetch_rows(SCHOOLS_TABLE, {"select": "id,school_name,town"})
        try:
            return [SchoolRow(**row).to_school() for row in rows]
        except ValidationError as e:
            logger.warning("Malformed %s rows: %s", SCHOOLS_TABLE, e)
            return []

    async def get_cutoffs(self, school_ids: list[str]) -> list[CutoffRecord]:
        if not school_ids:
            return []
        ids = ",".join(sorted(school_ids))
        rows = await self.fetch_rows(CUTOFFS_TABLE, {"select": "*", "school_id": f"in.({ids})"})
        try:
            return [CutoffRow(**row).to_cutoff() for row in rows]
        except ValidationError as e:
            logger.warning("Malformed %s rows: %s", CUTOFFS_TABLE, e)
            return []

