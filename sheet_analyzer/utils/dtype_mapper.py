"""
Type Mapper - Convert inferred column types to human-readable labels

This module provides a centralized mapping strategy for converting the
engine's inferred column types (number, string, date, boolean) into
business-friendly labels suitable for reports, dashboards, and
non-technical stakeholders.
"""

from types import MappingProxyType
from typing import Any, Optional, Sequence

from sheet_analyzer.core.type_inference import numeric_values


# ============================================================================
# TYPE MAPPING DICTIONARY
# ============================================================================

TYPE_TO_HUMAN_READABLE = MappingProxyType({
    'number': 'Decimal Number',
    'integer': 'Whole Number',
    'string': 'Text',
    'date': 'Date & Time',
    'boolean': 'True / False',
})


# ============================================================================
# SAFE TYPE RESOLVER FUNCTION
# ============================================================================

def get_human_readable_type(column_type: Optional[str], values: Optional[Sequence[Any]] = None) -> str:
    """
    Convert an inferred column type to a human-readable label.

    Parameters
    ----------
    column_type : str
        One of 'number', 'string', 'date', 'boolean'. Case-insensitive.
    values : sequence, optional
        Raw column values. When given for a number column whose numeric
        values are all integral, the label becomes "Whole Number".

    Returns
    -------
    str
        Human-readable label, "Unknown" for anything unmapped.

    Examples
    --------
    >>> get_human_readable_type('string')
    'Text'

    >>> get_human_readable_type('number', [1, 2, 3])
    'Whole Number'

    >>> get_human_readable_type('number', [1.5, 2])
    'Decimal Number'
    """
    if not column_type:
        return 'Unknown'

    type_str = str(column_type).strip().lower()

    if type_str == 'number' and values is not None:
        numbers = numeric_values(values)
        if numbers and all(float(n).is_integer() for n in numbers):
            return TYPE_TO_HUMAN_READABLE['integer']

    return TYPE_TO_HUMAN_READABLE.get(type_str, 'Unknown')

