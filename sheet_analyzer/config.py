"""Configuration and constants for Sheet Analyzer"""

# Type inference
TYPE_INFERENCE_THRESHOLD = 0.8

# "literal": (parses and contains '/') or contains '-'
# "grouped": parses and (contains '/' or contains '-')
DATE_DETECTION_MODES = ("literal", "grouped")
DATE_DETECTION_MODE = "literal"

# Column profiling
DISTRIBUTION_TOP_K = 10
DISPLAY_VALUE_MAX_LENGTH = 30
DISPLAY_VALUE_ELLIPSIS = "…"
HISTOGRAM_MAX_BINS = 10
SKEWNESS_STDDEV_FACTOR = 0.2

CARDINALITY_THRESHOLDS = {
    "high": 0.5,
    "medium": 0.1,
}

# Correlation (upper bounds on |r|, checked in order)
MIN_CORRELATION_VALUES = 3
CORRELATION_DECIMALS = 3
CORRELATION_STRENGTH_BANDS = [
    (0.1, "none"),
    (0.3, "weak"),
    (0.5, "moderate"),
    (0.7, "strong"),
]
CORRELATION_STRENGTH_MAX = "very_strong"

# Data quality
MISSING_REPORT_THRESHOLD = 5.0
MISSING_SEVERITY = [
    (50.0, "critical"),
    (25.0, "high"),
    (10.0, "medium"),
]
MISSING_PENALTY_CAP = 50.0

OUTLIER_MIN_VALUES = 4
OUTLIER_IQR_FACTOR = 1.5
OUTLIER_REPORT_THRESHOLD = 1.0
OUTLIER_SEVERITY = [
    (15.0, "high"),
    (5.0, "medium"),
]
OUTLIER_PENALTY_FACTOR = 2.0
OUTLIER_PENALTY_CAP = 30.0

MIXED_TYPE_PENALTY = 20.0

DUPLICATE_SEVERITY = [
    (20.0, "high"),
    (10.0, "medium"),
]

ISSUE_PENALTY_PER_ISSUE = 5
ISSUE_PENALTY_CAP = 30

SEVERITY_ORDER = {
    "critical": 0,
    "high": 1,
    "medium": 2,
    "low": 3,
}

# Recommendations / insights
HIGH_NULL_PERCENTAGE = 20.0
STRONG_CORRELATION_STRENGTHS = ("strong", "very_strong")
QUALITY_SCORE_SUCCESS = 80
QUALITY_SCORE_WARNING = 60
INSIGHT_TIMEOUT_SECONDS = 30.0

# Aggregation
AGGREGATION_OPS = ("sum", "avg", "count", "min", "max")
AGGREGATION_TOP_K = 10
AGGREGATION_DECIMALS = 2
UNKNOWN_GROUP_LABEL = "Unknown"

# Chart suggestions
CATEGORY_MAX_UNIQUE = 20
MAX_CHART_SUGGESTIONS = 6

# Dataset size limits
DATA_LIMITS = {
    "max_row_count": 100000,
    "recommended_row_count": 50000,
    "max_column_count": 100,
}
