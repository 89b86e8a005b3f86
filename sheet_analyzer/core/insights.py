"""
Insight request payload and deterministic local fallback.

The free-text insight service is an external collaborator. This module builds
the payload it receives, parses what it sends back, and produces a local set of
insights from the engine's own output whenever the service is missing, fails,
times out or answers with something unusable.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from sheet_analyzer.config import (
    HIGH_NULL_PERCENTAGE,
    INSIGHT_TIMEOUT_SECONDS,
    QUALITY_SCORE_SUCCESS,
    QUALITY_SCORE_WARNING,
    STRONG_CORRELATION_STRENGTHS,
)
from sheet_analyzer.models import DataProfile, DataQualityReport, Dataset, Insight, InsightResult

logger = logging.getLogger(__name__)

InsightProvider = Callable[[Dict[str, Any]], Awaitable[Any]]

INSIGHT_SEVERITIES = ('info', 'warning', 'success', 'critical')
INSIGHT_CATEGORIES = ('trend', 'anomaly', 'correlation', 'quality', 'pattern')


def _column_counts(dataset: Dataset) -> Dict[str, int]:
    return {
        'numeric': sum(1 for c in dataset.columns if c.type == 'number'),
        'categorical': sum(1 for c in dataset.columns if c.type == 'string'),
    }


def build_insight_payload(dataset: Dataset, quality_report: DataQualityReport,
                          data_profile: DataProfile) -> Dict[str, Any]:
    """Request body for the insight service (keys follow its JSON contract)"""
    counts = _column_counts(dataset)
    return {
        'dataStats': {
            'rowCount': dataset.row_count,
            'columnCount': dataset.column_count,
            'numericColumns': counts['numeric'],
            'categoricalColumns': counts['categorical'],
        },
        'qualityReport': {
            'overallScore': quality_report.overall_score,
            'issues': [
                {
                    'type': issue.type,
                    'column': issue.column,
                    'severity': issue.severity,
                    'message': issue.message,
                    'percentage': issue.percentage,
                }
                for issue in quality_report.issues
            ],
        },
        'profiling': {
            'columns': [
                {
                    'name': c.name,
                    'type': c.type,
                    'nullPercentage': c.null_percentage,
                    'cardinality': c.cardinality,
                    'mean': c.mean,
                    'median': c.median,
                    'stdDev': c.std_dev,
                    'min': c.min,
                    'max': c.max,
                    'skewness': c.skewness,
                }
                for c in data_profile.columns
            ],
            'correlations': [
                {
                    'column1': p.column1,
                    'column2': p.column2,
                    'correlation': p.correlation,
                    'strength': p.strength,
                }
                for p in data_profile.correlations
            ],
        },
    }


def generate_fallback_insights(dataset: Dataset, quality_report: DataQualityReport,
                               data_profile: DataProfile) -> List[Insight]:
    insights = []
    counts = _column_counts(dataset)

    insights.append(Insight(
        text=f"Dataset contains {dataset.row_count:,} rows across {dataset.column_count} columns",
        severity='info',
        confidence=100,
        category='pattern',
        explanation='Basic dataset structure analysis',
        data_points=[
            f"{counts['numeric']} numeric columns",
            f"{counts['categorical']} categorical columns",
        ],
    ))

    score = quality_report.overall_score
    if score >= QUALITY_SCORE_SUCCESS:
        quality_severity = 'success'
    elif score >= QUALITY_SCORE_WARNING:
        quality_severity = 'warning'
    else:
        quality_severity = 'critical'
    insights.append(Insight(
        text=f"Data quality score: {score}/100",
        severity=quality_severity,
        confidence=100,
        category='quality',
        explanation=f"{len(quality_report.issues)} data quality issues detected",
        data_points=[i.message for i in quality_report.issues[:3]],
    ))

    high_null = [c for c in data_profile.columns if c.null_percentage > HIGH_NULL_PERCENTAGE]
    if high_null:
        insights.append(Insight(
            text=f"{len(high_null)} column(s) have >20% missing values",
            severity='warning',
            confidence=95,
            category='quality',
            related_columns=[c.name for c in high_null],
            chart_type='bar',
            explanation='Missing data may affect analysis accuracy',
            data_points=[f"{c.name}: {c.null_percentage:.1f}% null" for c in high_null[:3]],
        ))

    strong = [p for p in data_profile.correlations if p.strength in STRONG_CORRELATION_STRENGTHS]
    if strong:
        top = strong[0]
        insights.append(Insight(
            text=f"Strong correlation found: {top.column1} ↔ {top.column2}",
            severity='info',
            confidence=abs(top.correlation) * 100,
            category='correlation',
            related_columns=[top.column1, top.column2],
            chart_type='scatter',
            explanation=f"Correlation coefficient: {top.correlation * 100:.0f}%",
            data_points=[f"{p.column1} ↔ {p.column2}: {p.correlation * 100:.0f}%" for p in strong[:3]],
        ))

    skewed = [c for c in data_profile.columns if c.skewness in ('left', 'right')]
    if skewed:
        insights.append(Insight(
            text=f"{len(skewed)} numeric column(s) show skewed distribution",
            severity='info',
            confidence=85,
            category='pattern',
            related_columns=[c.name for c in skewed],
            chart_type='bar',
            explanation='Skewed data may require transformation for certain analyses',
            data_points=[f"{c.name}: {c.skewness}-skewed" for c in skewed[:3]],
        ))

    return insights


def parse_insights(response: Any) -> List[Insight]:
    """Validate a provider response; raises ValueError when it is malformed"""
    if isinstance(response, dict):
        if response.get('error'):
            raise ValueError(str(response['error']))
        response = response.get('insights')
    if not isinstance(response, list):
        raise ValueError("Insight response is not a list")

    insights = []
    for item in response:
        if not isinstance(item, dict) or not isinstance(item.get('text'), str):
            raise ValueError(f"Malformed insight: {item!r}")
        severity = item.get('severity', 'info')
        category = item.get('category', 'pattern')
        if severity not in INSIGHT_SEVERITIES or category not in INSIGHT_CATEGORIES:
            raise ValueError(f"Unknown severity/category in insight: {item!r}")

        related = list(item.get('relatedColumns') or [])
        insights.append(Insight(
            text=item['text'],
            severity=severity,
            confidence=float(item.get('confidence', 0)),
            category=category,
            related_columns=related,
            chart_type=item.get('chartType'),
            explanation=item.get('explanation') or (
                f"Based on analysis of {', '.join(related) if related else 'dataset'}"
            ),
            data_points=list(item.get('dataPoints') or []),
        ))
    return insights


async def request_insights(provider: Optional[InsightProvider], dataset: Dataset,
                           quality_report: DataQualityReport, data_profile: DataProfile,
                           timeout_seconds: float = INSIGHT_TIMEOUT_SECONDS) -> InsightResult:
    """
    Ask the insight provider, bounded by a timeout, falling back to local insights.

    The provider is awaited through asyncio.wait_for, so it is cancelled when
    the timeout expires. Failures never propagate to the caller.
    """
    if provider is None:
        return InsightResult(
            insights=generate_fallback_insights(dataset, quality_report, data_profile),
            source='fallback',
        )

    payload = build_insight_payload(dataset, quality_report, data_profile)
    try:
        response = await asyncio.wait_for(provider(payload), timeout=timeout_seconds)
        insights = parse_insights(response)
    except asyncio.TimeoutError:
        logger.warning(f"Insight provider timed out after {timeout_seconds}s, using local analysis")
        return InsightResult(
            insights=generate_fallback_insights(dataset, quality_report, data_profile),
            source='fallback',
            error='timeout',
            timed_out=True,
        )
    except Exception as e:
        logger.warning(f"Insight provider failed, using local analysis: {e}")
        return InsightResult(
            insights=generate_fallback_insights(dataset, quality_report, data_profile),
            source='fallback',
            error=str(e),
        )

    logger.info(f"Insight provider returned {len(insights)} insights")
    return InsightResult(insights=insights, source='provider')
