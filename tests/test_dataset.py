"""Tests for dataset construction and size validation"""

import logging
from dataclasses import FrozenInstanceError

import pytest

from sheet_analyzer.config import DATA_LIMITS
from sheet_analyzer.core.dataset import analyze_column, build_dataset, validate_data_size
from sheet_analyzer.models import DatasetValidationError


class TestBuildDataset:

    def test_headers_and_types(self, sales_dataset):
        assert sales_dataset.sheet_name == "Orders"
        assert sales_dataset.headers == ("Region", "Units", "Revenue", "Date", "Returned")
        assert sales_dataset.row_count == 8
        assert sales_dataset.column_count == 5
        types = {c.name: c.type for c in sales_dataset.columns}
        assert types == {
            "Region": "string",
            "Units": "number",
            "Revenue": "number",
            "Date": "date",
            "Returned": "boolean",
        }

    def test_rows_are_copied(self, sales_rows):
        dataset = build_dataset(sales_rows)
        sales_rows[0]["Units"] = 1000
        assert dataset.rows[0]["Units"] == 1
        with pytest.raises(FrozenInstanceError):
            dataset.sheet_name = "Other"

    def test_inconsistent_keys_rejected(self):
        rows = [{"a": 1, "b": 2}, {"a": 3}]
        with pytest.raises(DatasetValidationError, match="Row 1"):
            build_dataset(rows)

    def test_validation_error_is_value_error(self):
        with pytest.raises(ValueError):
            build_dataset([{"a": 1}, {"a": 1, "b": 2}])

    def test_non_mapping_row_rejected(self):
        with pytest.raises(DatasetValidationError):
            build_dataset([{"a": 1}, [1]])

    def test_empty_input(self):
        dataset = build_dataset([])
        assert dataset.row_count == 0
        assert dataset.headers == ()
        assert dataset.columns == ()

    def test_column_lookup(self, sales_dataset):
        assert sales_dataset.column("Units").max == 8.0
        assert sales_dataset.column("Missing") is None
        assert sales_dataset.column_values("Region")[:2] == ["North", "South"]

    def test_size_warning_logged(self, monkeypatch, caplog):
        monkeypatch.setitem(DATA_LIMITS, "recommended_row_count", 2)
        with caplog.at_level(logging.WARNING, logger="sheet_analyzer.core.dataset"):
            build_dataset([{"a": i} for i in range(3)])
        assert "Large dataset" in caplog.text


class TestAnalyzeColumn:

    def test_numeric_summary(self):
        info = analyze_column("V", [10, 20, None, "30"])
        assert info.type == "number"
        assert info.null_count == 1
        assert info.unique_values == 3
        assert info.min == 10.0
        assert info.max == 30.0
        assert info.sum == 60.0
        assert info.avg == pytest.approx(20.0)

    def test_non_numeric_has_no_stats(self):
        info = analyze_column("S", ["a", "b", "a"])
        assert info.type == "string"
        assert info.unique_values == 2
        assert info.min is None and info.avg is None

    def test_unique_values_distinguish_kinds(self):
        info = analyze_column("X", [1, 1.0, "1", True])
        assert info.unique_values == 3


class TestValidateDataSize:

    def test_within_limits(self):
        result = validate_data_size(100, 10)
        assert result.is_valid
        assert result.errors == [] and result.warnings == []

    def test_large_but_valid(self):
        result = validate_data_size(60000, 10)
        assert result.is_valid
        assert len(result.warnings) == 1

    def test_too_many_rows_and_columns(self):
        result = validate_data_size(100001, 101)
        assert not result.is_valid
        assert len(result.errors) == 2


class TestSerialization:

    def test_dataset_to_dict(self, sales_dataset):
        data = sales_dataset.to_dict()
        assert data["headers"] == ["Region", "Units", "Revenue", "Date", "Returned"]
        assert data["row_count"] == 8
        assert data["columns"][1]["name"] == "Units"
        assert data["columns"][1]["max"] == 8.0
