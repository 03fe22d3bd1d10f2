"""Tests for the view command."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from latticeview.cli import cli


class TestViewCommand:
    def test_json(self, cli_runner: CliRunner, dataset_file: Path) -> None:
        result = cli_runner.invoke(cli, ["--json", "view", str(dataset_file)])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["ok"] is True
        assert data["op"] == "view"
        assert data["data"]["count"] == 4

    def test_filters_and_focus(self, cli_runner: CliRunner, dataset_file: Path) -> None:
        args = ["--json", "view", str(dataset_file), "--tier", "MEGA", "--tier", "hyper"]
        result = cli_runner.invoke(cli, [*args, "--focus", "B"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)["data"]
        assert data["count"] == 2
        assert data["focused"] == ["B", "C"]
        assert data["faded"] == []

    def test_query_and_layout(self, cli_runner: CliRunner, dataset_file: Path) -> None:
        result = cli_runner.invoke(
            cli,
            ["--json", "view", str(dataset_file), "--query", "lattice", "--layout", "concentric"],
        )
        data = json.loads(result.output)["data"]
        assert data["matches"] == ["B", "C"]
        assert data["layout"] == "concentric"

    def test_rich_output(self, cli_runner: CliRunner, dataset_file: Path) -> None:
        result = cli_runner.invoke(cli, ["view", str(dataset_file), "--select", "C"])
        assert result.exit_code == 0, result.output
        assert "OK" in result.output
        assert "Gamma lattice" in result.output
        assert "selected_id: C" in result.output

    def test_no_labels(self, cli_runner: CliRunner, dataset_file: Path) -> None:
        result = cli_runner.invoke(cli, ["view", str(dataset_file), "--no-labels"])
        assert "Gamma lattice" not in result.output

    def test_unknown_layout_warning_on_stderr(
        self, cli_runner: CliRunner, dataset_file: Path
    ) -> None:
        result = cli_runner.invoke(cli, ["view", str(dataset_file), "--layout", "spiral"])
        assert result.exit_code == 0
        assert "WARNING: Unknown layout kind 'spiral'" in result.stderr
        assert "WARNING" not in result.stdout

    def test_focus_not_found(self, cli_runner: CliRunner, dataset_file: Path) -> None:
        result = cli_runner.invoke(cli, ["--json", "view", str(dataset_file), "--focus", "Z"])
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["ok"] is False
        assert data["error"]["code"] == "NOT_FOUND"

    def test_missing_dataset(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        missing = tmp_path / "nope.json"
        result = cli_runner.invoke(cli, ["--json", "view", str(missing)])
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["error"]["code"] == "INVALID_DATASET"
        assert data["error"]["detail"]["path"] == str(missing)

    def test_malformed_dataset(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        bad = tmp_path / "bad.json"
        bad.write_text("[1, 2, 3]")
        result = cli_runner.invoke(cli, ["view", str(bad)])
        assert result.exit_code == 1
        assert "INVALID_DATASET" in result.stderr

    def test_skipped_records_reported(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "partial.json"
        path.write_text(json.dumps({"nodes": [{"id": "a"}, {"label": "no id"}], "edges": []}))
        result = cli_runner.invoke(cli, ["--json", "view", str(path)])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["data"]["count"] == 1
        assert data["warnings"][0].startswith("Skipped node #1")

    def test_invalid_tier_choice(self, cli_runner: CliRunner, dataset_file: Path) -> None:
        result = cli_runner.invoke(cli, ["view", str(dataset_file), "--tier", "ultra"])
        assert result.exit_code == 2
