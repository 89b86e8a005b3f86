"""Data models for Sheet Analyzer"""

from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional, Any, Tuple


class DatasetValidationError(ValueError):
    """Raised when rows do not share one consistent header set"""


@dataclass(frozen=True)
class ColumnInfo:
    name: str
    type: str
    unique_values: int
    null_count: int
    # Only set for number columns with at least one numeric value
    min: Optional[float] = None
    max: Optional[float] = None
    sum: Optional[float] = None
    avg: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Dataset:
    sheet_name: str
    headers: Tuple[str, ...]
    rows: Tuple[Dict[str, Any], ...]
    columns: Tuple[ColumnInfo, ...]
    # Column name -> date-parse lookup built once at construction
    parsed_dates: Dict[str, Dict[str, bool]] = field(default_factory=dict, repr=False, compare=False)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def column_count(self) -> int:
        return len(self.headers)

    def column_values(self, name: str) -> List[Any]:
        return [row[name] for row in self.rows]

    def column(self, name: str) -> Optional[ColumnInfo]:
        for info in self.columns:
            if info.name == name:
                return info
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sheet_name": self.sheet_name,
            "headers": list(self.headers),
            "rows": [dict(row) for row in self.rows],
            "columns": [c.to_dict() for c in self.columns],
            "row_count": self.row_count,
            "column_count": self.column_count,
        }


@dataclass(frozen=True)
class ValueFrequency:
    value: str
    count: int
    percentage: float


@dataclass(frozen=True)
class Quartiles:
    q1: float
    q2: float
    q3: float


@dataclass(frozen=True)
class HistogramBin:
    bin: str
    count: int


@dataclass(frozen=True)
class ColumnProfile:
    name: str
    type: str
    total_count: int
    unique_count: int
    null_count: int
    null_percentage: float
    cardinality: str
    distribution: List[ValueFrequency] = field(default_factory=list)
    # Business-friendly type label
    human_readable_type: str = "Unknown"

    # Numeric stats
    mean: Optional[float] = None
    median: Optional[float] = None
    std_dev: Optional[float] = None
    min: Optional[float] = None
    max: Optional[float] = None
    range: Optional[float] = None
    quartiles: Optional[Quartiles] = None
    skewness: Optional[str] = None
    histogram: Optional[List[HistogramBin]] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CorrelationPair:
    column1: str
    column2: str
    correlation: float
    strength: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DataProfile:
    columns: List[ColumnProfile]
    correlations: List[CorrelationPair]
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DuplicateGroup:
    group_id: int
    indices: List[int]
    representative_value: Optional[str] = None


@dataclass(frozen=True)
class DataQualityIssue:
    id: str
    type: str
    severity: str
    message: str
    details: str
    affected_rows: int
    percentage: float
    suggestion: str
    column: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class QualitySummary:
    total_issues: int = 0
    critical_count: int = 0
    high_count: int = 0
    medium_count: int = 0
    low_count: int = 0


@dataclass(frozen=True)
class DataQualityReport:
    overall_score: int
    issues: List[DataQualityIssue]
    summary: QualitySummary
    column_health: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class AggregatedValue:
    name: str
    value: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ChartSuggestion:
    type: str
    x_axis: str
    y_axis: str
    title: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Insight:
    text: str
    severity: str
    confidence: float
    category: str
    related_columns: List[str] = field(default_factory=list)
    chart_type: Optional[str] = None
    explanation: Optional[str] = None
    data_points: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class InsightResult:
    insights: List[Insight]
    # "provider" or "fallback"
    source: str
    error: Optional[str] = None
    timed_out: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
