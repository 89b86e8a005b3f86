"""General data utilities"""

import json
import math
from datetime import date, datetime
from typing import Any, Dict, List, Sequence, Tuple

import numpy as np
import pandas as pd

from sheet_analyzer.config import DISPLAY_VALUE_ELLIPSIS, DISPLAY_VALUE_MAX_LENGTH
from sheet_analyzer.models import DuplicateGroup


def is_null(value: Any) -> bool:
    """None, NaN/NaT and empty strings all count as missing"""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ''
    if isinstance(value, (float, np.floating)):
        return math.isnan(value)
    if value is pd.NaT or value is pd.NA:
        return True
    return False


def non_null_values(values: Sequence[Any]) -> List[Any]:
    return [v for v in values if not is_null(v)]


def round_half_up(value: float, digits: int = 0) -> float:
    """Round half towards +inf, matching JavaScript's Math.round"""
    if not math.isfinite(value):
        return value
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def round_score(value: float) -> int:
    return int(math.floor(value + 0.5))


def display_string(value: Any) -> str:
    """Render a cell value the way the spreadsheet front end prints it"""
    if value is None:
        return 'null'
    if isinstance(value, (bool, np.bool_)):
        return 'true' if value else 'false'
    if isinstance(value, (int, np.integer)):
        return str(int(value))
    if isinstance(value, (float, np.floating)):
        value = float(value)
        if math.isnan(value):
            return 'NaN'
        if math.isinf(value):
            return 'Infinity' if value > 0 else '-Infinity'
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return repr(value)
    if isinstance(value, (datetime, date, pd.Timestamp)):
        return value.isoformat()
    return str(value)


def truncate_display(text: str, max_length: int = DISPLAY_VALUE_MAX_LENGTH) -> str:
    if len(text) > max_length:
        return text[:max_length] + DISPLAY_VALUE_ELLIPSIS
    return text


def _canonical_cell(value: Any) -> Any:
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if isinstance(value, (int, np.integer)):
        return int(value)
    if isinstance(value, (float, np.floating)):
        value = float(value)
        if math.isnan(value):
            return None
        return int(value) if value.is_integer() and abs(value) < 1e21 else value
    if isinstance(value, (datetime, date, pd.Timestamp)):
        return {'$date': value.isoformat()}
    return value


def row_signature(row: Dict[str, Any], headers: Sequence[str]) -> str:
    """Canonical serialization of a full row, used as a duplicate key"""
    return json.dumps([_canonical_cell(row[h]) for h in headers], default=str)


def find_exact_duplicates(rows: Sequence[Dict[str, Any]], headers: Sequence[str]) -> List[DuplicateGroup]:
    """Find groups of structurally identical rows via canonical row keys"""
    if not rows:
        return []

    signatures = pd.Series([row_signature(row, headers) for row in rows])

    # duplicated(keep=False) marks every member of a duplicate group
    dup_mask = signatures.duplicated(keep=False)
    if not dup_mask.any():
        return []

    dup_signatures = signatures[dup_mask]
    hash_groups = dup_signatures.groupby(dup_signatures, sort=False).groups

    groups = []
    group_id = 1
    # Number groups by their first row
    for signature, indices in sorted(hash_groups.items(), key=lambda item: min(item[1])):
        idx_list = sorted(int(i) for i in indices)
        if len(idx_list) < 2:
            continue
        groups.append(DuplicateGroup(
            group_id=group_id,
            indices=idx_list,
            representative_value=signature
        ))
        group_id += 1

    return groups


def count_duplicate_rows(groups: List[DuplicateGroup]) -> int:
    """Rows beyond the first occurrence of each group"""
    return sum(len(g.indices) - 1 for g in groups)


def nearest_rank_quartiles(sorted_values: Sequence[float]) -> Tuple[float, float]:
    """Q1/Q3 by index into the sorted values, no interpolation"""
    n = len(sorted_values)
    q1 = float(sorted_values[math.floor(n * 0.25)])
    q3 = float(sorted_values[math.floor(n * 0.75)])
    return q1, q3
