"""Data quality scoring: missing values, outliers, mixed types and duplicate rows"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from sheet_analyzer.config import (
    DUPLICATE_SEVERITY,
    ISSUE_PENALTY_CAP,
    ISSUE_PENALTY_PER_ISSUE,
    MISSING_PENALTY_CAP,
    MISSING_REPORT_THRESHOLD,
    MISSING_SEVERITY,
    MIXED_TYPE_PENALTY,
    OUTLIER_IQR_FACTOR,
    OUTLIER_MIN_VALUES,
    OUTLIER_PENALTY_CAP,
    OUTLIER_PENALTY_FACTOR,
    OUTLIER_REPORT_THRESHOLD,
    OUTLIER_SEVERITY,
    SEVERITY_ORDER,
)
from sheet_analyzer.core.type_inference import (
    classify_value,
    numeric_values,
    parse_date_candidates,
)
from sheet_analyzer.models import (
    ColumnInfo,
    DataQualityIssue,
    DataQualityReport,
    Dataset,
    QualitySummary,
)
from sheet_analyzer.utils.data_utils import (
    count_duplicate_rows,
    find_exact_duplicates,
    nearest_rank_quartiles,
    round_score,
)

logger = logging.getLogger(__name__)


def _severity_for(percentage: float, bands: List[Tuple[float, str]]) -> str:
    for threshold, severity in bands:
        if percentage > threshold:
            return severity
    return 'low'


def detect_outliers(values: Sequence[float]) -> Dict[str, Any]:
    """IQR fences around nearest-rank Q1/Q3; needs at least four values"""
    if len(values) < OUTLIER_MIN_VALUES:
        return {"count": 0, "bounds": (None, None), "outliers": []}

    q1, q3 = nearest_rank_quartiles(sorted(values))
    iqr = q3 - q1
    lower_bound = q1 - OUTLIER_IQR_FACTOR * iqr
    upper_bound = q3 + OUTLIER_IQR_FACTOR * iqr
    outliers = [v for v in values if v < lower_bound or v > upper_bound]
    return {
        "count": len(outliers),
        "bounds": (lower_bound, upper_bound),
        "outliers": outliers,
    }


def detect_mixed_types(values: Sequence[Any],
                       parsed_dates: Optional[Mapping[str, bool]] = None) -> List[str]:
    """Distinct per-value types in first-seen order"""
    if parsed_dates is None:
        parsed_dates = parse_date_candidates(values)
    seen = []
    for value in values:
        kind = classify_value(value, parsed_dates)
        if kind is not None and kind not in seen:
            seen.append(kind)
    return seen


def _format_bound(value: Optional[float]) -> str:
    return f"{value:.2f}" if value is not None else "n/a"


class _IssueCollector:
    def __init__(self):
        self.issues: List[DataQualityIssue] = []

    def add(self, **fields) -> DataQualityIssue:
        issue = DataQualityIssue(id=f"issue-{len(self.issues)}", **fields)
        self.issues.append(issue)
        return issue


def _check_column(info: ColumnInfo, values: Sequence[Any], row_count: int,
                  collector: _IssueCollector, parsed_dates: Optional[Mapping[str, bool]] = None) -> int:
    """Emit this column's issues and return its health score"""
    column_score = 100.0

    # Missing values
    missing_pct = (info.null_count / row_count) * 100 if row_count > 0 else 0.0
    if missing_pct > MISSING_REPORT_THRESHOLD:
        severity = _severity_for(missing_pct, MISSING_SEVERITY)
        collector.add(
            type='missing',
            column=info.name,
            severity=severity,
            message=f'{missing_pct:.1f}% missing values in "{info.name}"',
            details=f"{info.null_count} out of {row_count} rows have missing values in this column.",
            affected_rows=info.null_count,
            percentage=missing_pct,
            suggestion=(
                'Consider removing this column or imputing values'
                if severity == 'critical'
                else 'Fill missing values with mean/median or forward-fill'
            ),
        )
        column_score -= min(missing_pct, MISSING_PENALTY_CAP)

    # Outliers
    if info.type == 'number':
        numbers = numeric_values(values)
        outlier_info = detect_outliers(numbers)
        outlier_pct = (outlier_info["count"] / len(numbers)) * 100 if numbers else 0.0
        if outlier_pct > OUTLIER_REPORT_THRESHOLD:
            collector.add(
                type='outlier',
                column=info.name,
                severity=_severity_for(outlier_pct, OUTLIER_SEVERITY),
                message=f'{outlier_pct:.1f}% outliers detected in "{info.name}"',
                details=(
                    f"{outlier_info['count']} values fall outside the interquartile range (IQR). "
                    f"Range: {_format_bound(info.min)} - {_format_bound(info.max)}"
                ),
                affected_rows=outlier_info["count"],
                percentage=outlier_pct,
                suggestion='Review outliers for data entry errors or consider capping/transforming values',
            )
            column_score -= min(outlier_pct * OUTLIER_PENALTY_FACTOR, OUTLIER_PENALTY_CAP)

    # Mixed types
    types = detect_mixed_types(values, parsed_dates)
    if len(types) > 1:
        collector.add(
            type='mixed_type',
            column=info.name,
            severity='medium',
            message=f'Mixed data types in "{info.name}"',
            details=f"Column contains multiple types: {', '.join(types)}. This may cause analysis issues.",
            affected_rows=row_count,
            percentage=100.0,
            suggestion='Convert to a consistent type or split into separate columns',
        )
        column_score -= MIXED_TYPE_PENALTY

    return max(0, round_score(column_score))


def _summarize(issues: List[DataQualityIssue]) -> QualitySummary:
    return QualitySummary(
        total_issues=len(issues),
        critical_count=sum(1 for i in issues if i.severity == 'critical'),
        high_count=sum(1 for i in issues if i.severity == 'high'),
        medium_count=sum(1 for i in issues if i.severity == 'medium'),
        low_count=sum(1 for i in issues if i.severity == 'low'),
    )


def analyze_quality(dataset: Dataset) -> DataQualityReport:
    row_count = dataset.row_count
    if row_count == 0 or dataset.column_count == 0:
        logger.info("Empty dataset, returning an empty quality report")
        return DataQualityReport(overall_score=0, issues=[], summary=QualitySummary(), column_health={})

    collector = _IssueCollector()
    column_health: Dict[str, int] = {}

    for info in dataset.columns:
        column_health[info.name] = _check_column(
            info, dataset.column_values(info.name), row_count, collector,
            dataset.parsed_dates.get(info.name),
        )

    # Duplicate rows
    groups = find_exact_duplicates(dataset.rows, dataset.headers)
    duplicate_rows = count_duplicate_rows(groups)
    if duplicate_rows > 0:
        duplicate_pct = (duplicate_rows / row_count) * 100
        collector.add(
            type='duplicate',
            severity=_severity_for(duplicate_pct, DUPLICATE_SEVERITY),
            message=f"{duplicate_rows} duplicate rows detected",
            details=f"Found {len(groups)} groups of duplicate rows ({duplicate_pct:.1f}% of data).",
            affected_rows=duplicate_rows,
            percentage=duplicate_pct,
            suggestion='Remove duplicate rows to ensure data integrity',
        )

    issues = sorted(collector.issues, key=lambda i: SEVERITY_ORDER[i.severity])

    avg_column_health = sum(column_health.values()) / len(column_health)
    issues_penalty = min(len(issues) * ISSUE_PENALTY_PER_ISSUE, ISSUE_PENALTY_CAP)
    overall_score = max(0, round_score(avg_column_health - issues_penalty))

    logger.debug(
        f"Quality pass over {dataset.column_count} columns: "
        f"{len(issues)} issues, {duplicate_rows} duplicate rows, score {overall_score}"
    )

    return DataQualityReport(
        overall_score=overall_score,
        issues=issues,
        summary=_summarize(issues),
        column_health=column_health,
    )
