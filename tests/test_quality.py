"""Tests for data quality scoring"""

import pytest

from sheet_analyzer.core.dataset import build_dataset
from sheet_analyzer.core.quality import analyze_quality, detect_mixed_types, detect_outliers


class TestDetectOutliers:

    def test_zero_iqr_flags_any_other_value(self):
        result = detect_outliers([1, 1, 1, 1, 100])
        assert result["count"] == 1
        assert result["bounds"] == (1.0, 1.0)
        assert result["outliers"] == [100]

    def test_needs_four_values(self):
        assert detect_outliers([1, 2, 300])["count"] == 0

    def test_no_outliers(self):
        assert detect_outliers(list(range(1, 9)))["count"] == 0


class TestDetectMixedTypes:

    def test_first_seen_order(self):
        assert detect_mixed_types(["a", 1, None, "b", 2]) == ["string", "number"]

    def test_single_type(self):
        assert detect_mixed_types([1, "2", 3.5]) == ["number"]


class TestAnalyzeQuality:

    def test_outlier_issue(self, outlier_dataset):
        report = analyze_quality(outlier_dataset)
        assert len(report.issues) == 1
        issue = report.issues[0]
        assert issue.type == "outlier"
        assert issue.column == "V"
        assert issue.severity == "high"
        assert issue.affected_rows == 1
        assert issue.percentage == pytest.approx(20.0)
        assert issue.message == '20.0% outliers detected in "V"'
        assert report.column_health == {"Name": 100, "V": 70}
        assert report.overall_score == 80

    def test_duplicate_rows(self, duplicate_dataset):
        report = analyze_quality(duplicate_dataset)
        duplicates = [i for i in report.issues if i.type == "duplicate"]
        assert len(duplicates) == 1
        issue = duplicates[0]
        assert issue.column is None
        assert issue.affected_rows == 4
        assert issue.percentage == pytest.approx(20.0)
        assert issue.severity == "medium"
        assert issue.details == "Found 1 groups of duplicate rows (20.0% of data)."

    def test_missing_value_severity(self):
        rows = [{"A": i, "B": None if i < 3 else i, "C": None if i < 6 else "x"} for i in range(10)]
        report = analyze_quality(build_dataset(rows))
        missing = {i.column: i for i in report.issues if i.type == "missing"}
        assert missing["B"].severity == "high"
        assert missing["B"].message == '30.0% missing values in "B"'
        assert missing["B"].suggestion == "Fill missing values with mean/median or forward-fill"
        assert missing["C"].severity == "critical"
        assert missing["C"].suggestion == "Consider removing this column or imputing values"
        assert "A" not in missing

    def test_mixed_types(self):
        rows = [{"X": v} for v in ["a", 1, "b", 2, "c"]]
        report = analyze_quality(build_dataset(rows))
        mixed = [i for i in report.issues if i.type == "mixed_type"]
        assert len(mixed) == 1
        assert mixed[0].severity == "medium"
        assert mixed[0].percentage == 100.0
        assert report.column_health["X"] == 80

    def test_issues_sorted_by_severity(self):
        rows = [{"A": None if i < 6 else i, "X": "a" if i % 2 else i} for i in range(10)]
        report = analyze_quality(build_dataset(rows))
        severities = [i.severity for i in report.issues]
        assert severities[0] == "critical"
        order = {"critical": 0, "high": 1, "medium": 2, "low": 3}
        assert severities == sorted(severities, key=order.get)
        assert report.summary.total_issues == len(report.issues)
        assert report.summary.critical_count == 1

    def test_score_bounds(self):
        rows = [{"A": None if i < 8 else i, "B": "x" if i % 2 else i, "C": "same"} for i in range(10)]
        rows += [dict(rows[0]) for _ in range(5)]
        report = analyze_quality(build_dataset(rows))
        assert 0 <= report.overall_score <= 100
        assert all(0 <= score <= 100 for score in report.column_health.values())

    def test_clean_dataset(self, sales_dataset):
        report = analyze_quality(sales_dataset)
        assert report.issues == []
        assert report.overall_score == 100

    def test_empty_dataset(self):
        report = analyze_quality(build_dataset([]))
        assert report.overall_score == 0
        assert report.issues == []
        assert report.summary.total_issues == 0

    def test_idempotent(self):
        a_values = [None, None, None, 1, 1, 1, 1, 1, 1, 100]
        rows = [{"A": a_values[i], "X": "a" if i % 2 else i} for i in range(10)]
        dataset = build_dataset(rows)
        report = analyze_quality(dataset)
        assert {i.type for i in report.issues} == {"missing", "outlier", "mixed_type", "duplicate"}
        assert analyze_quality(dataset) == report
        assert analyze_quality(build_dataset(rows)) == report

    def test_mixed_types_without_prebuilt_lookup(self, sales_rows):
        rows = [dict(row, Date="someday") if i == 0 else row for i, row in enumerate(sales_rows)]
        assert detect_mixed_types([r["Date"] for r in rows]) == ["string", "date"]
