"""
Pairwise Pearson correlation between numeric columns.

Each column is filtered to its numeric values independently and the first
n = min(len_a, len_b) values of each are compared by position. Rows are not
aligned, so two columns with different null patterns are compared at shifted
offsets. This matches how the dashboard has always reported correlations.
"""

import logging
import math
from typing import List, Sequence, Tuple

import numpy as np

from sheet_analyzer.config import (
    CORRELATION_DECIMALS,
    CORRELATION_STRENGTH_BANDS,
    CORRELATION_STRENGTH_MAX,
    MIN_CORRELATION_VALUES,
)
from sheet_analyzer.core.type_inference import numeric_values
from sheet_analyzer.models import CorrelationPair, Dataset
from sheet_analyzer.utils.data_utils import round_half_up

logger = logging.getLogger(__name__)


def correlation_strength(r: float) -> str:
    magnitude = abs(r)
    for upper, label in CORRELATION_STRENGTH_BANDS:
        if magnitude < upper:
            return label
    return CORRELATION_STRENGTH_MAX


def pearson_correlation(x: Sequence[float], y: Sequence[float]) -> float:
    n = min(len(x), len(y))
    if n < MIN_CORRELATION_VALUES:
        return 0.0

    xs = np.asarray(x[:n], dtype=float)
    ys = np.asarray(y[:n], dtype=float)
    dx = xs - xs.mean()
    dy = ys - ys.mean()

    denominator = math.sqrt(float(np.sum(dx * dx)) * float(np.sum(dy * dy)))
    if denominator == 0 or not math.isfinite(denominator):
        return 0.0
    return float(np.sum(dx * dy)) / denominator


def correlate(values_a: Sequence, values_b: Sequence) -> Tuple[float, str]:
    """Pearson r and its strength for two raw value sequences"""
    r = pearson_correlation(numeric_values(values_a), numeric_values(values_b))
    return r, correlation_strength(r)


def compute_correlations(dataset: Dataset) -> List[CorrelationPair]:
    """All unordered numeric column pairs, strongest |r| first"""
    numeric_columns = [c.name for c in dataset.columns if c.type == 'number']
    values = {name: numeric_values(dataset.column_values(name)) for name in numeric_columns}

    pairs = []
    for i, first in enumerate(numeric_columns):
        for second in numeric_columns[i + 1:]:
            if len(values[first]) < MIN_CORRELATION_VALUES or len(values[second]) < MIN_CORRELATION_VALUES:
                continue
            r = pearson_correlation(values[first], values[second])
            pairs.append(CorrelationPair(
                column1=first,
                column2=second,
                correlation=round_half_up(r, CORRELATION_DECIMALS),
                strength=correlation_strength(r),
            ))

    pairs.sort(key=lambda p: -abs(p.correlation))
    logger.debug(f"Computed {len(pairs)} correlations over {len(numeric_columns)} numeric columns")
    return pairs
