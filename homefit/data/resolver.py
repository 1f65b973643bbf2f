"""Comparison resolver: gathers both areas' inputs and runs the comparator.

Flow: transaction rows + rent + volume (both areas, concurrently)
      → area profiles → school directory + cut-offs → EPI + landscape
      → commute table → compare()
"""

import asyncio
import logging
from collections.abc import Mapping

from homefit.config import settings
from homefit.data.base import SchoolSource, TransactionSource
from homefit.data.commute_table import get_commute_table
from homefit.engine.area_profile import build_area_profile
from homefit.engine.commute_burden import calculate_commute_burden_index
from homefit.engine.comparator import compare
from homefit.engine.education_pressure import (
    build_school_landscape,
    calculate_education_pressure_index,
    schools_for_area,
)
from homefit.engine.normalize import normalize_area_name, normalize_unit_type
from homefit.models.area import AreaProfile
from homefit.models.commute import AccessRecord
from homefit.models.comparison import ComparisonResult
from homefit.models.preference import FamilyProfile, Lens, PlanningHorizon, PreferenceMode

logger = logging.getLogger(__name__)


class ComparisonResolver:
    def __init__(
        self,
        transactions: TransactionSource,
        schools: SchoolSource | None = None,
        commute_table: Mapping[str, AccessRecord] | None = None,
    ):
        self.transactions = transactions
        self.schools = schools
        self.commute_table = commute_table if commute_table is not None else get_commute_table()

    async def resolve_profile(self, area_id: str, unit_type: str, months: int) -> tuple[AreaProfile | None, int | None]:
        """Area profile plus all-unit-type volume for crowding."""
        rows, rent, volume = await asyncio.gather(
            self.transactions.get_period_stats(area_id, unit_type, months),
            self.transactions.get_median_rent(area_id, unit_type, months),
            self.transactions.get_area_volume(area_id, months),
        )
        profile = build_area_profile(
            normalize_area_name(area_id), unit_type, rows,
            median_rent=rent, window_months=months,
        )
        return profile, volume

    async def compare(
        self,
        area_a: str,
        area_b: str,
        unit_type: str,
        as_of_year: int,
        *,
        mode: PreferenceMode | None = None,
        lens: Lens | str = Lens.BALANCED,
        long_term: bool = False,
        family_profile: FamilyProfile | None = None,
        horizon: PlanningHorizon | None = None,
        months: int | None = None,
    ) -> ComparisonResult:
        """Resolve both areas and compare them.

        Raises ValueError when either area has no transactions in the window.
        School and commute inputs are optional; their absence only marks the
        corresponding sections as unavailable.
        """
        unit_type = normalize_unit_type(unit_type)
        months = months or settings.default_window_months

        (profile_a, volume_a), (profile_b, volume_b) = await asyncio.gather(
            self.resolve_profile(area_a, unit_type, months),
            self.resolve_profile(area_b, unit_type, months),
        )
        for name, profile in ((area_a, profile_a), (area_b, profile_b)):
            if profile is None:
                raise ValueError(f"No {unit_type} transactions for {name} in the last {months} months")
        logger.info(
            "Profiles: %s %s, %s %s (%s, %d months)",
            profile_a.area_id, profile_a.median_price, profile_b.area_id, profile_b.median_price,
            unit_type, months,
        )

        epi_a = epi_b = landscape_a = landscape_b = None
        if self.schools is not None:
            directory = await self.schools.get_schools()
            ids = sorted({
                s.school_id
                for area in (area_a, area_b)
                for s in schools_for_area(area, directory)
            })
            cutoffs = await self.schools.get_cutoffs(ids) if ids else []
            epi_a = calculate_education_pressure_index(area_a, directory, cutoffs, volume_a, as_of_year)
            epi_b = calculate_education_pressure_index(area_b, directory, cutoffs, volume_b, as_of_year)
            landscape_a = build_school_landscape(area_a, directory, cutoffs, as_of_year)
            landscape_b = build_school_landscape(area_b, directory, cutoffs, as_of_year)
            logger.info(
                "EPI: %s %s, %s %s",
                area_a, epi_a.epi if epi_a else "n/a", area_b, epi_b.epi if epi_b else "n/a",
            )

        cbi_a = calculate_commute_burden_index(profile_a.area_id, self.commute_table)
        cbi_b = calculate_commute_burden_index(profile_b.area_id, self.commute_table)

        return compare(
            profile_a,
            profile_b,
            mode,
            lens=lens,
            long_term=long_term,
            family_profile=family_profile,
            horizon=horizon,
            epi_a=epi_a,
            epi_b=epi_b,
            landscape_a=landscape_a,
            landscape_b=landscape_b,
            cbi_a=cbi_a,
            cbi_b=cbi_b,
        )
