"""Tests for pairwise Pearson correlation"""

import pytest

from sheet_analyzer.core.correlation import (
    compute_correlations,
    correlate,
    correlation_strength,
    pearson_correlation,
)
from sheet_analyzer.core.dataset import build_dataset


class TestCorrelationStrength:

    @pytest.mark.parametrize("r,expected", [
        (0.05, "none"),
        (0.1, "weak"),
        (0.3, "moderate"),
        (0.5, "strong"),
        (0.7, "very_strong"),
        (-0.8, "very_strong"),
        (-0.2, "weak"),
    ])
    def test_bands(self, r, expected):
        assert correlation_strength(r) == expected


class TestPearson:

    def test_perfect_linear(self):
        x = list(range(1, 11))
        y = [2 * v for v in x]
        assert pearson_correlation(x, y) == pytest.approx(1.0)

    def test_symmetric(self):
        x = [1, 2, 3, 4, 5, 6]
        y = [1, 3, 2, 5, 4, 6]
        assert pearson_correlation(x, y) == pearson_correlation(y, x)
        assert pearson_correlation(x, y) == pytest.approx(15.5 / 17.5)

    def test_constant_column_is_zero(self):
        assert pearson_correlation([1, 2, 3], [4, 4, 4]) == 0.0

    def test_too_few_values(self):
        assert pearson_correlation([1, 2], [2, 4]) == 0.0

    def test_values_pair_by_position(self):
        # Each side drops its own nulls before pairing
        r, strength = correlate([1, None, 2, 3], [2, 4, 6, None])
        assert r == pytest.approx(1.0)
        assert strength == "very_strong"


class TestComputeCorrelations:

    def test_linear_columns(self):
        dataset = build_dataset([{"x": i, "y": 2 * i} for i in range(1, 11)])
        pairs = compute_correlations(dataset)
        assert len(pairs) == 1
        assert pairs[0].column1 == "x"
        assert pairs[0].column2 == "y"
        assert pairs[0].correlation == 1.0
        assert pairs[0].strength == "very_strong"

    def test_sorted_by_magnitude_then_header_order(self):
        a = [1, 2, 3, 4, 5, 6]
        c = [1, 3, 2, 5, 4, 6]
        dataset = build_dataset([{"a": a[i], "b": 2 * a[i], "c": c[i]} for i in range(6)])
        pairs = compute_correlations(dataset)
        assert [(p.column1, p.column2) for p in pairs] == [("a", "b"), ("a", "c"), ("b", "c")]
        assert pairs[1].correlation == 0.886
        assert pairs[1].strength == "very_strong"

    def test_skips_non_numeric_and_short_columns(self):
        dataset = build_dataset([
            {"n": 1, "m": None, "s": "a"},
            {"n": 2, "m": None, "s": "b"},
            {"n": 3, "m": 5, "s": "c"},
        ])
        assert compute_correlations(dataset) == []
