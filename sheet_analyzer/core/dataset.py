"""Dataset construction: row validation, column typing and per-column summaries"""

import logging
from collections.abc import Mapping
from typing import Any, Dict, Iterable, List, Optional, Sequence

import numpy as np

from sheet_analyzer.config import DATA_LIMITS
from sheet_analyzer.core.type_inference import (
    infer_type,
    numeric_values,
    parse_date_candidates,
    value_kind,
)
from sheet_analyzer.models import ColumnInfo, Dataset, DatasetValidationError, ValidationResult
from sheet_analyzer.utils.data_utils import display_string, non_null_values

logger = logging.getLogger(__name__)


def _unique_key(value: Any):
    # 1 and 1.0 collapse, 1 and "1" and True stay distinct
    try:
        hash(value)
        return value_kind(value), value
    except TypeError:
        return value_kind(value), display_string(value)


def analyze_column(name: str, values: Sequence[Any],
                   parsed_dates: Optional[Mapping[str, bool]] = None) -> ColumnInfo:
    """Infer the column type and compute its summary counts"""
    column_type = infer_type(values, parsed_dates=parsed_dates)
    present = non_null_values(values)
    unique_values = len({_unique_key(v) for v in present})
    null_count = len(values) - len(present)

    if column_type != 'number':
        return ColumnInfo(
            name=name,
            type=column_type,
            unique_values=unique_values,
            null_count=null_count,
        )

    numbers = np.asarray(numeric_values(present), dtype=float)
    if len(numbers) == 0:
        return ColumnInfo(
            name=name,
            type=column_type,
            unique_values=unique_values,
            null_count=null_count,
        )

    total = float(numbers.sum())
    return ColumnInfo(
        name=name,
        type=column_type,
        unique_values=unique_values,
        null_count=null_count,
        min=float(numbers.min()),
        max=float(numbers.max()),
        sum=total,
        avg=total / len(numbers),
    )


def validate_data_size(row_count: int, column_count: int) -> ValidationResult:
    """Check a dataset's shape against the configured size limits"""
    errors: List[str] = []
    warnings: List[str] = []

    if row_count > DATA_LIMITS['max_row_count']:
        errors.append(
            f"Dataset has {row_count:,} rows, exceeding maximum of {DATA_LIMITS['max_row_count']:,}"
        )
    elif row_count > DATA_LIMITS['recommended_row_count']:
        warnings.append(f"Large dataset ({row_count:,} rows). Some features may be slower.")

    if column_count > DATA_LIMITS['max_column_count']:
        errors.append(
            f"Dataset has {column_count} columns, exceeding maximum of {DATA_LIMITS['max_column_count']}"
        )

    return ValidationResult(is_valid=not errors, errors=errors, warnings=warnings)


def build_dataset(rows: Iterable[Mapping], sheet_name: str = "Sheet1") -> Dataset:
    """
    Build an immutable Dataset from parsed rows.

    Headers come from the first row's key order. Every row must carry exactly
    that key set; a row that doesn't raises DatasetValidationError.
    """
    rows = list(rows)
    if not rows:
        return Dataset(sheet_name=sheet_name, headers=(), rows=(), columns=())

    copied: List[Dict[str, Any]] = []
    headers = None
    for index, row in enumerate(rows):
        if not isinstance(row, Mapping):
            raise DatasetValidationError(f"Row {index} is not a mapping: {type(row).__name__}")
        if headers is None:
            headers = tuple(row.keys())
            expected = set(headers)
        elif set(row.keys()) != expected:
            missing = sorted(str(k) for k in expected - set(row.keys()))
            extra = sorted(str(k) for k in set(row.keys()) - expected)
            raise DatasetValidationError(
                f"Row {index} does not match the header set (missing: {missing}, extra: {extra})"
            )
        copied.append({h: row[h] for h in headers})

    size_check = validate_data_size(len(copied), len(headers))
    for message in size_check.warnings + size_check.errors:
        logger.warning(message)

    column_values = {h: [row[h] for row in copied] for h in headers}
    parsed_dates = {h: parse_date_candidates(column_values[h]) for h in headers}
    columns = tuple(analyze_column(h, column_values[h], parsed_dates[h]) for h in headers)
    logger.debug(f"Built dataset '{sheet_name}': {len(copied)} rows, {len(headers)} columns")

    return Dataset(
        sheet_name=sheet_name,
        headers=headers,
        rows=tuple(copied),
        columns=columns,
        parsed_dates=parsed_dates,
    )
