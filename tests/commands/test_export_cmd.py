"""Tests for the export command."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from latticeview.cli import cli


class TestExportCommand:
    def test_default_cytoscape_to_stdout(self, cli_runner: CliRunner, dataset_file: Path) -> None:
        result = cli_runner.invoke(cli, ["export", str(dataset_file)])
        assert result.exit_code == 0, result.output
        doc = json.loads(result.stdout)
        assert doc["layout"]["name"] == "cose"

    def test_dot_to_file(
        self, cli_runner: CliRunner, dataset_file: Path, tmp_path: Path
    ) -> None:
        out = tmp_path / "view.dot"
        result = cli_runner.invoke(
            cli, ["export", str(dataset_file), "--format", "dot", "--output", str(out)]
        )
        assert result.exit_code == 0, result.output
        assert "path:" in result.output
        assert out.read_text().startswith("digraph lattice {")

    def test_quiet_d3(self, cli_runner: CliRunner, dataset_file: Path) -> None:
        result = cli_runner.invoke(
            cli, ["-q", "export", str(dataset_file), "--format", "d3", "--tier", "hyper"]
        )
        doc = json.loads(result.output)
        assert [n["id"] for n in doc["nodes"]] == ["C"]

    def test_format_from_config(
        self, cli_runner: CliRunner, dataset_file: Path, tmp_path: Path
    ) -> None:
        (tmp_path / "latticeview.toml").write_text('[export]\nformat = "dot"\n')
        result = cli_runner.invoke(cli, ["export", str(dataset_file)])
        assert result.output.startswith("digraph lattice {")

    def test_invalid_format_in_config(
        self, cli_runner: CliRunner, dataset_file: Path, tmp_path: Path
    ) -> None:
        (tmp_path / "latticeview.toml").write_text('[export]\nformat = "png"\n')
        result = cli_runner.invoke(cli, ["--json", "export", str(dataset_file)])
        assert result.exit_code == 1
        assert json.loads(result.output)["error"]["code"] == "INVALID_FORMAT"

    def test_bad_format_option(self, cli_runner: CliRunner, dataset_file: Path) -> None:
        result = cli_runner.invoke(cli, ["export", str(dataset_file), "--format", "png"])
        assert result.exit_code == 2
