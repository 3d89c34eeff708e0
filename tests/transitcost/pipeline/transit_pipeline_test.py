"""Tests for the transitcost.pipeline.pipeline module."""

from pathlib import Path
from unittest.mock import patch

import pandas as pd
import pytest

from transitcost.pipeline import (
    SourceFetchError,
    TransitPipeline,
    lines_by_country,
    results_equivalent,
)
from transitcost.pipeline.store import STORE_DEFAULT_FILENAME


class TestTransitPipelineInit:
    """Test for TransitPipeline.__init__ method."""

    def test_default_data_dir(self):
        pipe = TransitPipeline()
        assert pipe.data_dir == Path.cwd() / ".transitcost"
        assert pipe.store_path == pipe.data_dir / STORE_DEFAULT_FILENAME

    def test_custom_data_dir_and_filename(self, tmp_path: Path):
        pipe = TransitPipeline(tmp_path, store_filename="other.duckdb")
        assert pipe.store_path == tmp_path / "other.duckdb"


class TestTransitPipelineLoadSources:
    """Test for TransitPipeline.load_sources method."""

    def test_local_source_is_normalized(self, tmp_path: Path, transit_csv: Path):
        tables = TransitPipeline(tmp_path).load_sources(source=transit_csv)
        assert "UK" not in set(tables.transit["country_code"])
        assert (tables.transit["country_code"] == "GB").sum() == 11
        assert "GB" in set(tables.codes["iso2c"])

    @patch("transitcost.pipeline.pipeline.fetch_transit_cost")
    def test_downloads_when_no_source(self, mock_fetch, tmp_path: Path, transit_csv: Path):
        mock_fetch.return_value = transit_csv.read_text()
        pipe = TransitPipeline(tmp_path)

        tables = pipe.load_sources(url="https://example.com/transit.csv")

        mock_fetch.assert_called_once_with("https://example.com/transit.csv", session=None)
        assert len(tables.transit) == 55

    @patch("transitcost.pipeline.pipeline.fetch_transit_cost")
    def test_fetch_failure_propagates(self, mock_fetch, tmp_path: Path):
        mock_fetch.side_effect = SourceFetchError("unreachable")
        with pytest.raises(SourceFetchError):
            TransitPipeline(tmp_path).load_sources()


class TestTransitPipelineQueries:
    """Test for persisting and querying through TransitPipeline."""

    def test_persist_sources(self, tmp_path: Path, transit_csv: Path):
        pipe = TransitPipeline(tmp_path)
        tables = pipe.load_sources(source=transit_csv)
        with pipe.open_store() as store:
            pipe.persist_sources(store, tables)
            assert store.relations() == ["country_codes", "transit_cost"]
            transit = store.query("SELECT * FROM transit_cost")
        pd.testing.assert_frame_equal(transit, tables.transit)
        assert pipe.store_path.exists()

    def test_sql_and_pandas_are_equivalent(self, tmp_path: Path, transit_csv: Path):
        pipe = TransitPipeline(tmp_path)
        tables = pipe.load_sources(source=transit_csv)
        with pipe.open_store() as store:
            pipe.persist_sources(store, tables)
            result = pipe.execute_query_template(
                store, "lines_by_country", MIN_LINES=10, MAX_ROWS=15
            )

        expected = lines_by_country(tables.transit, tables.codes)

        assert results_equivalent(result.frame, expected)
        pd.testing.assert_frame_equal(result.frame, expected, check_dtype=False)
        assert result.frame.values.tolist() == [
            ["TR", "Turkey", 12],
            ["GB", "United Kingdom", 11],
            ["DK", "Denmark", 10],
        ]

    @pytest.mark.parametrize(("min_lines", "max_rows"), [(9, 15), (10, 2), (11, 15), (1, 4)])
    def test_equivalent_for_other_thresholds(
        self, tmp_path: Path, transit_csv: Path, min_lines: int, max_rows: int
    ):
        pipe = TransitPipeline(tmp_path)
        tables = pipe.load_sources(source=transit_csv)
        with pipe.open_store() as store:
            pipe.persist_sources(store, tables)
            result = pipe.execute_query_template(
                store, "lines_by_country", MIN_LINES=min_lines, MAX_ROWS=max_rows
            )

        expected = lines_by_country(
            tables.transit, tables.codes, min_lines=min_lines, max_rows=max_rows
        )

        assert results_equivalent(result.frame, expected)

    def test_having_boundary_in_sql(self, tmp_path: Path, make_transit, make_codes):
        transit = make_transit(
            [("AA", f"a{idx}") for idx in range(9)] + [("BB", f"b{idx}") for idx in range(10)]
        )
        codes = make_codes([("AA", "Aland"), ("BB", "Bland")])
        pipe = TransitPipeline(tmp_path)
        with pipe.open_store() as store:
            store.persist("transit_cost", transit)
            store.persist("country_codes", codes)
            result = pipe.execute_query_template(
                store, "lines_by_country", MIN_LINES=10, MAX_ROWS=15
            )
        assert result.frame.values.tolist() == [["BB", "Bland", 10]]

    def test_template_metadata(self, tmp_path: Path, make_transit, make_codes):
        pipe = TransitPipeline(tmp_path)
        with pipe.open_store() as store:
            store.persist("transit_cost", make_transit([("AA", "x")]))
            store.persist("country_codes", make_codes([("AA", "Aland")]))
            result = pipe.execute_query_template(store, "cost_by_country", MIN_LINES=1, MAX_ROWS=5)
        assert result.template.name == "cost_by_country"
        assert "{MIN_LINES}" not in result.template.text
        assert len(result.template.template_hash) == 64
        assert result.frame["country_code"].tolist() == ["AA"]
        assert result.frame["num_costs"].tolist() == [1]
