"""Core profiling engine"""

import logging
import math
from collections import Counter
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from sheet_analyzer.config import (
    CARDINALITY_THRESHOLDS,
    DISTRIBUTION_TOP_K,
    HIGH_NULL_PERCENTAGE,
    HISTOGRAM_MAX_BINS,
    SKEWNESS_STDDEV_FACTOR,
    STRONG_CORRELATION_STRENGTHS,
)
from sheet_analyzer.core.correlation import compute_correlations
from sheet_analyzer.core.quality import analyze_quality
from sheet_analyzer.core.type_inference import numeric_values
from sheet_analyzer.models import (
    ColumnInfo,
    ColumnProfile,
    CorrelationPair,
    DataProfile,
    DataQualityReport,
    Dataset,
    HistogramBin,
    Quartiles,
    ValueFrequency,
)
from sheet_analyzer.utils.data_utils import (
    display_string,
    nearest_rank_quartiles,
    non_null_values,
    truncate_display,
)
from sheet_analyzer.utils.dtype_mapper import get_human_readable_type

logger = logging.getLogger(__name__)


def get_cardinality(unique_count: int, total_count: int) -> str:
    ratio = unique_count / total_count if total_count > 0 else 0.0
    if ratio == 1:
        return 'unique'
    if ratio > CARDINALITY_THRESHOLDS['high']:
        return 'high'
    if ratio > CARDINALITY_THRESHOLDS['medium']:
        return 'medium'
    return 'low'


def calculate_median(sorted_values: np.ndarray) -> float:
    n = len(sorted_values)
    mid = n // 2
    if n % 2:
        return float(sorted_values[mid])
    return float((sorted_values[mid - 1] + sorted_values[mid]) / 2)


def classify_skewness(mean: float, median: float, std_dev: float) -> str:
    if mean < median - std_dev * SKEWNESS_STDDEV_FACTOR:
        return 'left'
    if mean > median + std_dev * SKEWNESS_STDDEV_FACTOR:
        return 'right'
    return 'symmetric'


def build_histogram(values: np.ndarray, low: float, value_range: float) -> List[HistogramBin]:
    """Equal-width bins over [min, max]; a zero range puts everything in bin 0"""
    bin_count = min(HISTOGRAM_MAX_BINS, math.ceil(math.sqrt(len(values))))
    bin_width = value_range / bin_count

    if bin_width > 0 and math.isfinite(bin_width):
        indices = np.floor((values - low) / bin_width).astype(int)
        indices = np.clip(indices, 0, bin_count - 1)
    else:
        indices = np.zeros(len(values), dtype=int)

    counts = np.bincount(indices, minlength=bin_count)
    return [
        HistogramBin(
            bin=f"{low + i * bin_width:.1f}-{low + (i + 1) * bin_width:.1f}",
            count=int(counts[i])
        )
        for i in range(bin_count)
    ]


def value_distribution(present: Sequence[Any], total_count: int) -> List[ValueFrequency]:
    """Top values by frequency; ties keep first-encountered order"""
    counts = Counter(display_string(v) for v in present)
    ranked = sorted(counts.items(), key=lambda item: -item[1])[:DISTRIBUTION_TOP_K]
    return [
        ValueFrequency(
            value=truncate_display(value),
            count=count,
            percentage=(count / total_count) * 100 if total_count > 0 else 0.0
        )
        for value, count in ranked
    ]


def profile_column(column_info: ColumnInfo, values: Sequence[Any]) -> ColumnProfile:
    total_count = len(values)
    present = non_null_values(values)
    null_percentage = ((total_count - len(present)) / total_count) * 100 if total_count > 0 else 0.0

    base = dict(
        name=column_info.name,
        type=column_info.type,
        total_count=total_count,
        unique_count=column_info.unique_values,
        null_count=column_info.null_count,
        null_percentage=null_percentage,
        cardinality=get_cardinality(column_info.unique_values, total_count),
        distribution=value_distribution(present, total_count),
        human_readable_type=get_human_readable_type(column_info.type, present),
    )

    if column_info.type != 'number':
        return ColumnProfile(**base)

    numbers = np.asarray(numeric_values(present), dtype=float)
    if len(numbers) == 0:
        return ColumnProfile(**base)

    sorted_values = np.sort(numbers)
    mean = float(numbers.mean())
    median = calculate_median(sorted_values)
    std_dev = float(numbers.std())
    low = column_info.min if column_info.min is not None else float(sorted_values[0])
    high = column_info.max if column_info.max is not None else float(sorted_values[-1])
    value_range = high - low
    q1, q3 = nearest_rank_quartiles(sorted_values)

    # Bins span the finite values only; none at all means no histogram
    finite = numbers[np.isfinite(numbers)]
    histogram = None
    if len(finite) > 0:
        histogram = build_histogram(finite, float(finite.min()), float(finite.max() - finite.min()))

    return ColumnProfile(
        **base,
        mean=mean,
        median=median,
        std_dev=std_dev,
        min=low,
        max=high,
        range=value_range,
        quartiles=Quartiles(q1=q1, q2=median, q3=q3),
        skewness=classify_skewness(mean, median, std_dev),
        histogram=histogram,
    )


def generate_recommendations(columns: List[ColumnProfile], correlations: List[CorrelationPair]) -> List[str]:
    recommendations = []

    high_null = [c.name for c in columns if c.null_percentage > HIGH_NULL_PERCENTAGE]
    if high_null:
        recommendations.append(
            f"Consider imputing or removing columns with high null rates: {', '.join(high_null)}"
        )

    id_columns = [c.name for c in columns if c.cardinality == 'unique' and c.type == 'string']
    if id_columns:
        recommendations.append(f"Potential ID columns detected: {', '.join(id_columns)}")

    strong = [c for c in correlations if c.strength in STRONG_CORRELATION_STRENGTHS]
    if strong:
        pairs = ', '.join(f"{c.column1} ↔ {c.column2}" for c in strong[:3])
        recommendations.append(f"Strong correlations found between: {pairs}")

    skewed = [c.name for c in columns if c.skewness and c.skewness != 'symmetric']
    if skewed:
        recommendations.append(f"Consider log transformation for skewed columns: {', '.join(skewed)}")

    return recommendations


def generate_data_profile(dataset: Dataset) -> DataProfile:
    columns = [profile_column(info, dataset.column_values(info.name)) for info in dataset.columns]
    correlations = compute_correlations(dataset)
    return DataProfile(
        columns=columns,
        correlations=correlations,
        recommendations=generate_recommendations(columns, correlations),
    )


class DataProfilerEngine:
    """Runs the full analysis pass over one Dataset"""

    def __init__(self, dataset: Dataset):
        self.dataset = dataset
        self.column_profiles: Dict[str, ColumnProfile] = {}
        self.data_profile: Optional[DataProfile] = None
        self.quality_report: Optional[DataQualityReport] = None

    def analyze_column(self, column: str) -> ColumnProfile:
        info = self.dataset.column(column)
        if info is None:
            raise KeyError(f"Unknown column: {column}")
        return profile_column(info, self.dataset.column_values(column))

    def profile(self) -> DataProfile:
        logger.info(
            f"Profiling '{self.dataset.sheet_name}': "
            f"{self.dataset.row_count} rows, {self.dataset.column_count} columns"
        )
        self.data_profile = generate_data_profile(self.dataset)
        self.column_profiles = {p.name: p for p in self.data_profile.columns}
        self.quality_report = analyze_quality(self.dataset)
        logger.info(
            f"Profiling complete: quality score {self.quality_report.overall_score}, "
            f"{len(self.quality_report.issues)} issues, "
            f"{len(self.data_profile.correlations)} correlations"
        )
        return self.data_profile
