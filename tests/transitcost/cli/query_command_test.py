"""Tests for the transitcost query CLI command."""

from pathlib import Path

import pandas as pd
import pytest
from click.testing import CliRunner

from transitcost.cli import cli
from transitcost.cli.query import frame_to_table


@pytest.fixture
def loaded_dir(tmp_path: Path, transit_csv: Path) -> Path:
    """Return a data directory whose store contains the fixture."""
    runner = CliRunner()
    result = runner.invoke(cli, ["load", "-d", str(tmp_path), "--csv", str(transit_csv)])
    assert result.exit_code == 0, result.output
    return tmp_path


class TestFrameToTable:
    """Tests for frame_to_table."""

    def test_columns_and_missing_values(self):
        frame = pd.DataFrame(
            {
                "city": pd.array(["Paris", None], dtype="string"),
                "n": pd.array([1, None], dtype="Int64"),
            }
        )
        table = frame_to_table(frame, title="t")
        assert [column.header for column in table.columns] == ["city", "n"]
        assert table.row_count == 2
        assert table.columns[0].justify == "left"
        assert table.columns[1].justify == "right"
        assert list(table.columns[0].cells) == ["Paris", "NA"]
        assert list(table.columns[1].cells) == ["1", "NA"]


class TestQueryCommand:
    """Tests for `transitcost query`."""

    def test_sql(self, loaded_dir: Path):
        runner = CliRunner()
        result = runner.invoke(
            cli,
            ["query", "-d", str(loaded_dir), "SELECT COUNT(*) AS n FROM transit_cost"],
        )

        assert result.exit_code == 0, result.output
        assert "55" in result.output

    def test_named_query(self, loaded_dir: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["query", "-d", str(loaded_dir), "-n", "lines_by_country"])

        assert result.exit_code == 0, result.output
        assert "Turkey" in result.output
        assert "United Kingdom" in result.output
        assert "Denmark" in result.output
        assert "France" not in result.output

    def test_named_query_overrides(self, loaded_dir: Path):
        runner = CliRunner()
        result = runner.invoke(
            cli,
            ["query", "-d", str(loaded_dir), "-n", "lines_by_country", "--min-lines", "9"],
        )

        assert result.exit_code == 0, result.output
        assert "France" in result.output

        result = runner.invoke(
            cli,
            ["query", "-d", str(loaded_dir), "-n", "lines_by_country", "--max-rows", "1"],
        )

        assert result.exit_code == 0, result.output
        assert "Turkey" in result.output
        assert "Denmark" not in result.output

    def test_needs_sql_or_name(self, loaded_dir: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["query", "-d", str(loaded_dir)])

        assert result.exit_code == 2
        assert "Specify either SQL or --name NAME." in result.output

    def test_unknown_name(self, loaded_dir: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["query", "-d", str(loaded_dir), "-n", "nope"])

        assert result.exit_code == 1
        assert "no such query template" in result.output

    def test_syntax_error(self, loaded_dir: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["query", "-d", str(loaded_dir), "SELEC 1"])

        assert result.exit_code == 1
        assert "Error" in result.output

    def test_unknown_relation(self, loaded_dir: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["query", "-d", str(loaded_dir), "SELECT * FROM nope"])

        assert result.exit_code == 1
        assert "Error" in result.output

    def test_runtime_error(self, loaded_dir: Path):
        runner = CliRunner()
        result = runner.invoke(
            cli, ["query", "-d", str(loaded_dir), "SELECT CAST(city AS INTEGER) FROM transit_cost"]
        )

        assert result.exit_code == 1
        assert "Could not convert" in result.output
        assert isinstance(result.exception, SystemExit)

    def test_store_not_loaded(self, tmp_path: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["query", "-d", str(tmp_path), "SELECT 1"])

        assert result.exit_code == 1
        assert "Store not found" in result.output
        assert not (tmp_path / "transit.duckdb").exists()
