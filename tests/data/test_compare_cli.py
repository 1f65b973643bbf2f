from unittest.mock import patch

import pytest

from homefit.data.compare_cli import build_parser, main


@pytest.fixture
def snapshot_file(snapshot, tmp_path):
    path = tmp_path / "snapshot.json"
    path.write_text(snapshot.model_dump_json())
    return str(path)


class TestParser:
    def test_defaults(self):
        args = build_parser().parse_args(["BEDOK", "TAMPINES"])
        assert args.areas == ["BEDOK", "TAMPINES"]
        assert args.unit_type == "4 ROOM"
        assert args.lens == "balanced"
        assert args.stage is None
        assert args.months is None

    def test_rejects_unknown_lens(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["BEDOK", "TAMPINES", "--lens", "cheapest"])


class TestMain:
    async def test_snapshot_comparison(self, snapshot_file, capsys):
        argv = [
            "homefit-compare", "ANG MO KIO", "PUNGGOL",
            "--snapshot", snapshot_file, "--months", "6", "--as-of-year", "2024", "--lens", "lease_safety",
        ]
        with patch("sys.argv", argv):
            await main()
        out = capsys.readouterr().out
        assert "ANG MO KIO  vs  PUNGGOL" in out
        assert "Choose PUNGGOL if you prioritise long-term lease safety." in out

    async def test_family_profile(self, snapshot_file, capsys):
        argv = [
            "homefit-compare", "ANG MO KIO", "PUNGGOL", "--snapshot", snapshot_file,
            "--months", "6", "--as-of-year", "2024",
            "--stage", "primary_family", "--holding", "long", "--priority", "value",
        ]
        with patch("sys.argv", argv):
            await main()
        assert "long_term (long horizon)" in capsys.readouterr().out

    async def test_unknown_area_exits(self, snapshot_file):
        argv = ["homefit-compare", "ANG MO KIO", "WOODLANDS", "--snapshot", snapshot_file, "--as-of-year", "2024"]
        with patch("sys.argv", argv), pytest.raises(SystemExit):
            await main()

    async def test_bad_commute_table_exits(self, tmp_path):
        path = tmp_path / "access.json"
        path.write_text('[{"town": "TENGAH", "bus_dependency": "extreme"}]')
        argv = ["homefit-compare", "BEDOK", "TAMPINES"]
        with patch("sys.argv", argv), patch("homefit.data.commute_table.settings") as mock_settings:
            mock_settings.commute_table_path = str(path)
            with pytest.raises(SystemExit):
                await main()

    async def test_needs_two_areas(self):
        with patch("sys.argv", ["homefit-compare", "BEDOK"]), pytest.raises(SystemExit):
            await main()

    async def test_affordability_only(self, capsys):
        with patch("sys.argv", ["homefit-compare", "--afford", "9000", "150000"]):
            await main()
        assert "Max property price" in capsys.readouterr().out
