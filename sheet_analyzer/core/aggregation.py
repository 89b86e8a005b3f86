"""Chart-ready aggregation and chart suggestions"""

import logging
import math
from typing import Any, Dict, List, Sequence

import pandas as pd

from sheet_analyzer.config import (
    AGGREGATION_DECIMALS,
    AGGREGATION_OPS,
    AGGREGATION_TOP_K,
    CATEGORY_MAX_UNIQUE,
    MAX_CHART_SUGGESTIONS,
    UNKNOWN_GROUP_LABEL,
)
from sheet_analyzer.core.type_inference import to_number
from sheet_analyzer.models import AggregatedValue, ChartSuggestion, ColumnInfo
from sheet_analyzer.utils.data_utils import display_string, round_half_up

logger = logging.getLogger(__name__)

_PANDAS_REDUCERS = {
    'sum': 'sum',
    'avg': 'mean',
    'count': 'count',
    'min': 'min',
    'max': 'max',
}


def _group_label(value: Any) -> str:
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return UNKNOWN_GROUP_LABEL
    return display_string(value)


def aggregate(rows: Sequence[Dict[str, Any]], group_by: str, value_column: str,
              op: str = 'sum') -> List[AggregatedValue]:
    """
    Group rows by one column and reduce another.

    Values that don't coerce to a number are dropped before reducing, so
    `count` counts numeric values rather than rows. Groups left without any
    value report 0 for sum/count and are omitted for avg/min/max. Results are
    rounded to two decimals, sorted descending and cut to the top ten.
    """
    if op not in AGGREGATION_OPS:
        raise ValueError(f"Unknown aggregation '{op}', expected one of {', '.join(AGGREGATION_OPS)}")

    if not rows:
        return []

    frame = pd.DataFrame({
        'name': [_group_label(row.get(group_by)) for row in rows],
        'value': [to_number(row.get(value_column)) for row in rows],
    })

    reduced = frame.groupby('name', sort=False)['value'].agg(_PANDAS_REDUCERS[op])
    reduced = reduced.dropna()

    result = pd.DataFrame({'name': reduced.index, 'value': reduced.values})
    result['value'] = result['value'].map(lambda v: round_half_up(float(v), AGGREGATION_DECIMALS))
    result = result.sort_values('value', ascending=False, kind='mergesort').head(AGGREGATION_TOP_K)

    logger.debug(f"Aggregated {value_column} by {group_by} ({op}): {len(reduced)} groups")
    return [AggregatedValue(name=str(name), value=float(value))
            for name, value in zip(result['name'], result['value'])]


def generate_chart_suggestions(columns: Sequence[ColumnInfo]) -> List[ChartSuggestion]:
    numeric = [c for c in columns if c.type == 'number']
    categories = [c for c in columns if c.type == 'string' and c.unique_values <= CATEGORY_MAX_UNIQUE]
    dates = [c for c in columns if c.type == 'date']

    suggestions = []

    for cat in categories:
        for num in numeric[:2]:
            suggestions.append(ChartSuggestion('bar', cat.name, num.name, f"{num.name} by {cat.name}"))

    for date_col in dates:
        for num in numeric[:2]:
            suggestions.append(ChartSuggestion('line', date_col.name, num.name, f"{num.name} over Time"))

    if numeric:
        for cat in categories[:2]:
            suggestions.append(ChartSuggestion(
                'pie', cat.name, numeric[0].name, f"{numeric[0].name} Distribution by {cat.name}"
            ))

    if dates and numeric:
        suggestions.append(ChartSuggestion('area', dates[0].name, numeric[0].name, f"{numeric[0].name} Trend"))

    if len(numeric) >= 2:
        suggestions.append(ChartSuggestion(
            'scatter', numeric[0].name, numeric[1].name, f"{numeric[0].name} vs {numeric[1].name}"
        ))

    return suggestions[:MAX_CHART_SUGGESTIONS]
