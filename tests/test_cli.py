"""Tests for the command-line interface."""

import json

import pytest

from listings_enricher import cli
from listings_enricher.demo import DEMO_CLIMATE_CSV, demo_listings


@pytest.fixture(autouse=True)
def no_logging_setup(monkeypatch):
    """Keep main() from replacing pytest's log handlers."""
    monkeypatch.setattr("listings_enricher.config.setup_logging", lambda: None)


@pytest.fixture
def input_files(tmp_path):
    listings = tmp_path / "listings.tsv"
    climate = tmp_path / "climate.csv"
    listings.write_text(demo_listings(), encoding="utf-8")
    climate.write_text(DEMO_CLIMATE_CSV, encoding="utf-8")
    return listings, climate


class TestEnrichCommand:
    def test_writes_json_to_stdout(self, input_files, capsys):
        listings, climate = input_files
        cli.main(["enrich", "--listings", str(listings), "--climate", str(climate)])

        out, err = capsys.readouterr()
        data = json.loads(out)
        assert [row["price"] for row in data] == [440000, 520000, 800000]
        assert "Listings in: 6" in err
        assert "Duplicates collapsed: 1" in err

    def test_writes_output_file(self, input_files, tmp_path, capsys):
        listings, climate = input_files
        output = tmp_path / "listings_enriched.json"
        cli.main([
            "enrich", "--listings", str(listings), "--climate", str(climate),
            "--output", str(output),
        ])

        data = json.loads(output.read_text(encoding="utf-8"))
        assert len(data) == 3
        assert "✓ Wrote 3 listings" in capsys.readouterr().err

    def test_bom_prefixed_file(self, input_files, capsys):
        listings, climate = input_files
        listings.write_text(demo_listings(), encoding="utf-8-sig")
        cli.main(["enrich", "--listings", str(listings), "--climate", str(climate)])
        assert len(json.loads(capsys.readouterr().out)) == 3

    def test_missing_file_exits(self, tmp_path, input_files, capsys):
        _, climate = input_files
        with pytest.raises(SystemExit) as exc_info:
            cli.main([
                "enrich", "--listings", str(tmp_path / "nope.csv"), "--climate", str(climate),
            ])
        assert exc_info.value.code == 1
        assert "✗ Could not read input" in capsys.readouterr().err

    def test_structural_error_exits_without_output(self, input_files, tmp_path, capsys):
        listings, climate = input_files
        listings.write_text(demo_listings(with_malformed_row=True), encoding="utf-8")
        output = tmp_path / "out.json"

        with pytest.raises(SystemExit) as exc_info:
            cli.main([
                "enrich", "--listings", str(listings), "--climate", str(climate),
                "--output", str(output),
            ])

        out, err = capsys.readouterr()
        assert exc_info.value.code == 1
        assert out == ""
        assert "✗ Enrichment failed: listings row 7" in err
        assert not output.exists()


class TestDemoCommand:
    def test_demo(self, capsys):
        cli.main(["demo"])
        data = json.loads(capsys.readouterr().out)
        assert data[0]["apn"] == "12-34-567890"
        assert data[0]["flood_zone"] == "AE"

    def test_demo_with_malformed_row(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["demo", "--with-malformed-row"])
        assert exc_info.value.code == 1
        assert "status" in capsys.readouterr().err


class TestParser:
    def test_no_command_prints_help(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli.main([])
        assert exc_info.value.code == 1
        assert "Listings Enricher" in capsys.readouterr().out

    def test_serve_args(self):
        args = cli.build_parser().parse_args(["serve", "--port", "9000"])
        assert args.port == 9000
        assert args.host is None
        assert args.func is cli.cmd_serve
