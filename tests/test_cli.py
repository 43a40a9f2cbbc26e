"""Tests for the typer CLI using local match files."""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from seedsight.cli import app

runner = CliRunner()


def _match(match_id: str, date: int, winner: str | None, time_ms: int, **extra) -> dict:
    return {
        "id": match_id,
        "type": 2,
        "date": date,
        "players": [
            {"uuid": "u-alice", "nickname": "Alice"},
            {"uuid": "u-bob", "nickname": "Bob"},
        ],
        "result": {"uuid": winner, "time": time_ms},
        "seed": {"overworld": "VILLAGE", "bastion": "TREASURE", "variations": []},
        **extra,
    }


@pytest.fixture
def matches_file(tmp_path):
    timelines = [
        {"uuid": "u-alice", "type": "story.enter_the_nether", "time": 90000},
        {"uuid": "u-alice", "type": "nether.find_bastion", "time": 120000},
        {"uuid": "u-bob", "type": "story.enter_the_nether", "time": 80000},
    ]
    data = {
        "data": [
            _match("1", 1_700_000_000, "u-alice", 600000, timelines=timelines),
            _match("2", 1_700_100_000, None, 0, forfeited=True),
            _match("3", 1_700_200_000, "u-bob", 700000),
        ]
    }
    path = tmp_path / "matches.json"
    path.write_text(json.dumps(data))
    return path


class TestStatsCommand:
    def test_overview(self, matches_file):
        result = runner.invoke(app, ["stats", "Alice", "--input", str(matches_file)])
        assert result.exit_code == 0, result.output
        assert "Overview" in result.output
        assert "Win Rate" in result.output

    def test_export_json(self, matches_file, tmp_path):
        out = tmp_path / "report.json"
        result = runner.invoke(app, ["stats", "Alice", "-i", str(matches_file), "-o", str(out)])
        assert result.exit_code == 0, result.output
        report = json.loads(out.read_text())
        assert report["uuid"] == "u-alice"
        assert report["overview"]["total"] == 3
        assert report["overview"]["wins"] == 1
        assert report["overview"]["draws"] == 1

    def test_type_filter_excludes_everything(self, matches_file, tmp_path):
        out = tmp_path / "report.json"
        result = runner.invoke(
            app, ["stats", "Alice", "-i", str(matches_file), "--type", "1", "-o", str(out)]
        )
        assert result.exit_code == 0, result.output
        assert json.loads(out.read_text())["overview"]["total"] == 0

    def test_bad_date(self, matches_file):
        result = runner.invoke(app, ["stats", "Alice", "-i", str(matches_file), "--since", "yesterday"])
        assert result.exit_code == 1

    def test_unsupported_export(self, matches_file, tmp_path):
        result = runner.invoke(
            app, ["stats", "Alice", "-i", str(matches_file), "-o", str(tmp_path / "out.txt")]
        )
        assert result.exit_code == 1

    def test_variation_implies_bastion(self, tmp_path):
        def seed(bastion, tags):
            return {"overworld": "VILLAGE", "bastion": bastion, "variations": tags}

        path = tmp_path / "gaps.json"
        path.write_text(
            json.dumps(
                [
                    _match("a", 1_700_000_000, "u-alice", 1, seed=seed("STABLES", ["bastion:good_gap:1"])),
                    _match("b", 1_700_000_001, "u-alice", 1, seed=seed("TREASURE", ["bastion:good_gap:1"])),
                    _match("c", 1_700_000_002, "u-alice", 1, seed=seed("STABLES", [])),
                ]
            )
        )
        out = tmp_path / "report.json"
        result = runner.invoke(
            app, ["stats", "Alice", "-i", str(path), "--variation", "bastion:good_gap:1", "-o", str(out)]
        )
        assert result.exit_code == 0, result.output
        report = json.loads(out.read_text())
        assert report["overview"]["total"] == 1
        assert report["bastion"] == [{"name": "STABLES", "count": 1}]


class TestExportSettings:
    """Export options taken from the config file."""

    def _config_file(self, tmp_path):
        path = tmp_path / "seedsight.yaml"
        path.write_text('export:\n  default_format: json\n  json_indent: 4\n  csv_delimiter: ";"\n')
        return path

    def test_suffixless_output_uses_default_format(self, matches_file, tmp_path):
        config = self._config_file(tmp_path)
        out = tmp_path / "report"
        result = runner.invoke(
            app, ["--config", str(config), "stats", "Alice", "-i", str(matches_file), "-o", str(out)]
        )
        assert result.exit_code == 0, result.output
        lines = (tmp_path / "report.json").read_text().splitlines()
        assert lines[1].startswith('    "_metadata"')

    def test_csv_delimiter(self, matches_file, tmp_path):
        config = self._config_file(tmp_path)
        out = tmp_path / "series.csv"
        result = runner.invoke(
            app, ["--config", str(config), "stats", "Alice", "-i", str(matches_file), "-o", str(out)]
        )
        assert result.exit_code == 0, result.output
        assert out.read_text().splitlines()[0].startswith("date_sec;time_ms;type")


class TestOptionsCommand:
    def test_lists_seed_values(self, matches_file):
        result = runner.invoke(app, ["options", "Alice", "-i", str(matches_file)])
        assert result.exit_code == 0, result.output
        assert "VILLAGE" in result.output
        assert "TREASURE" in result.output


class TestPhasesCommand:
    def test_phases_from_input(self, matches_file, tmp_path):
        out = tmp_path / "phases.json"
        result = runner.invoke(app, ["phases", "Alice", "-i", str(matches_file), "-o", str(out)])
        assert result.exit_code == 0, result.output
        assert "Run Phases" in result.output
        report = json.loads(out.read_text())
        assert report["phases"]["overworld"]["count"] == 1
        assert report["phases"]["overworld"]["mean_ms"] == 90000
        assert report["phases"]["terrainToBastion"]["count"] == 1
        assert report["phases"]["terrainToBastion"]["mean_ms"] == 30000


class TestVariationsCommand:
    def test_decodes_tags(self):
        result = runner.invoke(app, ["variations", "bastion:housing", "end_spawn:buried:1"])
        assert result.exit_code == 0, result.output
        assert "housing" in result.output
        assert "1" in result.output


class TestConfigCommand:
    def test_init_writes_file(self, tmp_path):
        path = tmp_path / "seedsight.yaml"
        result = runner.invoke(app, ["config", "--init", str(path)])
        assert result.exit_code == 0, result.output
        assert "concurrency_limit" in path.read_text()

    def test_init_refuses_overwrite(self, tmp_path):
        path = tmp_path / "seedsight.yaml"
        path.write_text("existing")
        result = runner.invoke(app, ["config", "--init", str(path)])
        assert result.exit_code == 1
        assert path.read_text() == "existing"
