"""Tests for the in-memory snapshot source."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from homefit.data.snapshot_source import SnapshotSource
from homefit.engine.education_pressure import schools_for_area
from homefit.models.snapshot import Snapshot


@pytest.fixture
def source(snapshot):
    return SnapshotSource(snapshot)


class TestTransactions:
    async def test_trailing_window(self, source):
        stats = await source.get_period_stats("ANG MO KIO", "4 ROOM", 6)
        assert [s.period for s in stats] == [f"2024-{m:02d}" for m in range(7, 13)]
        assert stats[-1].median_price == Decimal("532000")

    async def test_case_insensitive_town(self, source):
        stats = await source.get_period_stats("ang mo kio", "4 ROOM", 3)
        assert len(stats) == 3

    async def test_all_unit_types(self, source):
        stats = await source.get_period_stats("ANG MO KIO", "All", 1)
        assert len(stats) == 2
        assert sum(s.tx_count for s in stats) == 100

    async def test_unknown_town(self, source):
        assert await source.get_period_stats("WOODLANDS", "4 ROOM", 12) == []

    async def test_area_volume_spans_unit_types(self, source):
        assert await source.get_area_volume("ANG MO KIO", 6) == 600
        assert await source.get_area_volume("WOODLANDS", 6) is None


class TestRent:
    async def test_upper_median(self, source):
        assert await source.get_median_rent("ANG MO KIO", "4 ROOM", 12) == Decimal("3300")

    async def test_missing_rent(self, source):
        assert await source.get_median_rent("PUNGGOL", "4 ROOM", 12) is None
        assert await source.get_median_rent("ANG MO KIO", "3 ROOM", 12) is None


class TestSchools:
    async def test_quoted_towns_still_match(self, source):
        schools = await source.get_schools()
        assert {s.school_id for s in schools_for_area("ANG MO KIO", schools)} == {"s1", "s2"}

    async def test_cutoffs_filtered_by_id(self, source):
        cutoffs = await source.get_cutoffs(["s1"])
        assert [c.year for c in cutoffs] == [2022, 2023]
        assert await source.get_cutoffs([]) == []

    def test_numeric_ids_coerced(self):
        snapshot = Snapshot.model_validate({
            "schools": [{"id": 101, "school_name": "Bedok Green Primary", "town": "BEDOK"}],
            "cutoffs": [{"school_id": 101, "year": 2023, "cutoff_max": 240}],
        })
        assert snapshot.schools[0].to_school().school_id == "101"
        assert snapshot.cutoffs[0].to_cutoff().school_id == "101"


class TestSnapshotFile:
    def test_from_file(self, snapshot, tmp_path):
        path = tmp_path / "snapshot.json"
        path.write_text(snapshot.model_dump_json())
        loaded = SnapshotSource.from_file(path)
        assert len(loaded.snapshot.transactions) == 36
        assert loaded.snapshot.rentals[1].median_rent == Decimal("3300")

    def test_malformed_rows_rejected(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text('{"transactions": [{"town": "BEDOK"}]}')
        with pytest.raises(ValidationError):
            SnapshotSource.from_file(path)

    def test_commute_table_absent(self, source):
        assert source.commute_table() is None

    def test_commute_table_from_access_rows(self):
        snapshot = Snapshot.model_validate({
            "access": [{"town": "TENGAH", "mrt_access": "none", "bus_dependency": "high"}],
        })
        table = SnapshotSource(snapshot).commute_table()
        assert table["TENGAH"].mrt_station_count == 0
        with pytest.raises(TypeError):
            table["BEDOK"] = table["TENGAH"]

    def test_access_categories_validated_on_load(self):
        with pytest.raises(ValidationError):
            Snapshot.model_validate({"access": [{"town": "TENGAH", "transfer_complexity": "3_plus"}]})
