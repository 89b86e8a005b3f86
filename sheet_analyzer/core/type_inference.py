"""Column type inference over raw cell values"""

import math
import re
import warnings
from datetime import date, datetime
from enum import Enum
from functools import lru_cache
from typing import Any, Dict, Mapping, Optional, Sequence

import numpy as np
import pandas as pd

from sheet_analyzer.config import (
    DATE_DETECTION_MODE,
    DATE_DETECTION_MODES,
    TYPE_INFERENCE_THRESHOLD,
)
from sheet_analyzer.utils.data_utils import is_null, non_null_values


class ValueKind(str, Enum):
    NULL = "null"
    NUMBER = "number"
    TEXT = "text"
    BOOLEAN = "boolean"
    DATE = "date"


_DECIMAL_PATTERN = re.compile(r'^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$')
_INFINITY_PATTERN = re.compile(r'^[+-]?Infinity$')
_RADIX_PATTERNS = (
    (re.compile(r'^0[xX][0-9a-fA-F]+$'), 16),
    (re.compile(r'^0[oO][0-7]+$'), 8),
    (re.compile(r'^0[bB][01]+$'), 2),
)
_BOOLEAN_LITERALS = ('true', 'false')


def value_kind(value: Any) -> ValueKind:
    """Tag a raw cell value with its variant"""
    if is_null(value):
        return ValueKind.NULL
    if isinstance(value, (bool, np.bool_)):
        return ValueKind.BOOLEAN
    if isinstance(value, (int, float, np.integer, np.floating)):
        return ValueKind.NUMBER
    if isinstance(value, (datetime, date, pd.Timestamp, np.datetime64)):
        return ValueKind.DATE
    return ValueKind.TEXT


def to_number(value: Any) -> float:
    """
    Coerce a cell value to a float the way a spreadsheet front end does.

    Booleans become 1/0, numeric strings (decimal, exponent, hex/octal/binary,
    Infinity) are parsed after trimming. Everything else, including nulls and
    dates, yields NaN.
    """
    kind = value_kind(value)
    if kind == ValueKind.BOOLEAN:
        return 1.0 if value else 0.0
    if kind == ValueKind.NUMBER:
        return float(value)
    if kind != ValueKind.TEXT or not isinstance(value, str):
        return math.nan

    text = value.strip()
    if not text:
        return math.nan
    if _DECIMAL_PATTERN.match(text):
        return float(text)
    if _INFINITY_PATTERN.match(text):
        return -math.inf if text.startswith('-') else math.inf
    for pattern, base in _RADIX_PATTERNS:
        if pattern.match(text):
            return float(int(text[2:], base))
    return math.nan


def is_numeric(value: Any) -> bool:
    return not math.isnan(to_number(value))


def numeric_values(values: Sequence[Any]) -> list:
    """Numeric-coercible values in original order, NaN dropped"""
    result = []
    for v in values:
        n = to_number(v)
        if not math.isnan(n):
            result.append(n)
    return result


def _parse_dates(texts: Sequence[str]) -> Dict[str, bool]:
    """Parse a batch of strings together; maps text -> parses"""
    if not texts:
        return {}
    series = pd.Series(list(texts), dtype=object)
    try:
        with warnings.catch_warnings():
            warnings.simplefilter('ignore')
            # Fast path: one format inferred from the first value
            parsed = pd.to_datetime(series, errors='coerce', utc=True)
            parses = parsed.notna().to_numpy(dtype=bool, copy=True)
            if not parses.all():
                retry = ~parses
                parses[retry] = pd.to_datetime(
                    series[retry], errors='coerce', format='mixed', utc=True
                ).notna().to_numpy()
    except (ValueError, TypeError, OverflowError):
        # One unparseable outlier can fail the whole batch; retry value by value
        return {text: parses_as_date(text) for text in texts}
    return {text: bool(ok) for text, ok in zip(texts, parses)}


@lru_cache(maxsize=4096)
def parses_as_date(text: str) -> bool:
    try:
        with warnings.catch_warnings():
            warnings.simplefilter('ignore')
            parsed = pd.to_datetime(text, errors='coerce', format='mixed', utc=True)
    except (ValueError, TypeError, OverflowError):
        return False
    return not pd.isna(parsed)


def parse_date_candidates(values: Sequence[Any]) -> Dict[str, bool]:
    """
    Date-parse lookup for one column.

    Only distinct strings containing '/' or '-' can vote for a date, so those
    are parsed once, together. Type inference and mixed-type detection both
    read the returned mapping instead of parsing per value.
    """
    candidates = list(dict.fromkeys(
        v for v in values if isinstance(v, str) and ('/' in v or '-' in v)
    ))
    return _parse_dates(candidates)


def is_boolean_like(value: Any) -> bool:
    if isinstance(value, (bool, np.bool_)):
        return True
    return isinstance(value, str) and value in _BOOLEAN_LITERALS


def is_date_like(value: Any, mode: Optional[str] = None,
                 parsed_dates: Optional[Mapping[str, bool]] = None) -> bool:
    """
    Date vote for one value; see DATE_DETECTION_MODE for the two readings.

    `parsed_dates` is a column lookup from parse_date_candidates. Strings not
    found in it are parsed on their own.
    """
    mode = mode or DATE_DETECTION_MODE
    if mode not in DATE_DETECTION_MODES:
        raise ValueError(f"Unknown date detection mode: {mode}")

    if value_kind(value) == ValueKind.DATE:
        return True
    if not isinstance(value, str):
        return False

    has_slash = '/' in value
    has_dash = '-' in value
    if not (has_slash or has_dash):
        return False
    if mode == 'literal' and has_dash:
        return True

    if parsed_dates is not None and value in parsed_dates:
        return parsed_dates[value]
    return parses_as_date(value)


def classify_value(value: Any, parsed_dates: Optional[Mapping[str, bool]] = None) -> Optional[str]:
    """Per-value type used by mixed-type detection; None for nulls"""
    if is_null(value):
        return None
    if not isinstance(value, (bool, np.bool_)) and is_numeric(value):
        return 'number'
    if is_boolean_like(value):
        return 'boolean'
    if is_date_like(value, mode='grouped', parsed_dates=parsed_dates):
        return 'date'
    return 'string'


def infer_type(values: Sequence[Any], mode: Optional[str] = None,
               parsed_dates: Optional[Mapping[str, bool]] = None) -> str:
    """Majority-vote column type: boolean, then number, then date, else string"""
    present = non_null_values(values)
    if not present:
        return 'string'

    total = len(present)

    boolean_count = sum(1 for v in present if is_boolean_like(v))
    if boolean_count / total >= TYPE_INFERENCE_THRESHOLD:
        return 'boolean'

    number_count = sum(1 for v in present if is_numeric(v))
    if number_count / total >= TYPE_INFERENCE_THRESHOLD:
        return 'number'

    if parsed_dates is None:
        parsed_dates = parse_date_candidates(present)
    date_count = sum(1 for v in present if is_date_like(v, mode, parsed_dates))
    if date_count / total >= TYPE_INFERENCE_THRESHOLD:
        return 'date'

    return 'string'
