# kpi_dashboard/targeting/scoring.py
"""
KPI Scoring for Employee Performance

Handles:
- Per-KPI scores from recorded actuals and configured formulas
- Final score per employee/period (clamped to 0..100)
- Team summaries, score trends and ranking tables for dashboards

Unconfigured KPI types and missing targets score 0 rather than raising,
so historical data keeps rendering after a config is deleted.
"""

import logging
from typing import Dict, List, Optional, Tuple, Union
import pandas as pd
import numpy as np

from ..config import config
from .constants import (
    FORMULA_CONVERSION_FROM_LEADS,
    FORMULA_DIRECT_PENALTY,
    FORMULA_GOAL_ACHIEVEMENT,
    HIGH_PERFORMANCE_THRESHOLD,
    LEAD_CONVERSION_RATE,
    LEADS_KPI_TYPE,
    LOW_PERFORMANCE_THRESHOLD,
    MAX_FINAL_SCORE,
    MIN_FINAL_SCORE,
)
from .models import Employee, Kpi, KpiConfig
from .periods import Period, recent_periods

logger = logging.getLogger(__name__)

PeriodLike = Union[Period, str]


def _period_key(period: PeriodLike) -> str:
    return str(period)


def _thresholds(high: Optional[float], low: Optional[float]) -> Tuple[float, float]:
    """Fill missing thresholds from app settings."""
    if high is None:
        high = config.get_app_setting("HIGH_PERFORMANCE_THRESHOLD", HIGH_PERFORMANCE_THRESHOLD)
    if low is None:
        low = config.get_app_setting("LOW_PERFORMANCE_THRESHOLD", LOW_PERFORMANCE_THRESHOLD)
    return high, low


# =============================================================================
# PER-KPI AND FINAL SCORES
# =============================================================================

def score_of(
    kpi: Kpi,
    period: PeriodLike,
    sibling_kpis: List[Kpi],
    config_registry: Dict[str, KpiConfig]
) -> float:
    """
    Score a single KPI for a period.
    
    Args:
        kpi: KPI being scored
        period: Period or its "Month Year" key
        sibling_kpis: All KPIs of the same employee (for conversion_from_leads)
        config_registry: KPI type -> KpiConfig
        
    Returns:
        Points earned (negative for penalties)
    """
    config = config_registry.get(kpi.type)
    if config is None:
        return 0

    key = _period_key(period)
    actual = kpi.scores.get(key) or 0

    if config.formula == FORMULA_GOAL_ACHIEVEMENT:
        if not kpi.target:
            return 0
        return min(actual / kpi.target, 1) * config.max_points

    if config.formula == FORMULA_DIRECT_PENALTY:
        return actual * config.max_points

    if config.formula == FORMULA_CONVERSION_FROM_LEADS:
        leads_kpi = next((k for k in sibling_kpis if k.type == LEADS_KPI_TYPE), None)
        leads_actual = (leads_kpi.scores.get(key) or 0) if leads_kpi else 0
        if not leads_actual:
            return 0
        return min(actual / (LEAD_CONVERSION_RATE * leads_actual), 1) * config.max_points

    return 0


def final_score_of(
    employee: Employee,
    period: PeriodLike,
    config_registry: Dict[str, KpiConfig]
) -> float:
    """Sum of KPI scores for the period, clamped to [0, 100]."""
    total = sum(
        score_of(kpi, period, employee.kpis, config_registry)
        for kpi in employee.kpis
    )
    return max(MIN_FINAL_SCORE, min(total, MAX_FINAL_SCORE))


def performance_band(
    score: float,
    high_threshold: Optional[float] = None,
    low_threshold: Optional[float] = None
) -> str:
    high_threshold, low_threshold = _thresholds(high_threshold, low_threshold)
    if score >= high_threshold:
        return 'high'
    if score >= low_threshold:
        return 'medium'
    return 'low'


def kpi_breakdown(
    employee: Employee,
    period: PeriodLike,
    config_registry: Dict[str, KpiConfig]
) -> List[Dict]:
    """
    Per-KPI rows for reports. KPIs without a config are omitted.
    `actual` is None when nothing was recorded for the period.
    """
    key = _period_key(period)
    rows = []
    for kpi in employee.kpis:
        config = config_registry.get(kpi.type)
        if config is None:
            continue
        rows.append({
            'kpi_id': kpi.id,
            'kpi_type': kpi.type,
            'kpi_name': config.name,
            'target': kpi.target,
            'actual': kpi.scores.get(key),
            'score': score_of(kpi, key, employee.kpis, config_registry),
        })
    return rows


# =============================================================================
# TEAM AGGREGATIONS
# =============================================================================

def team_summary(
    employees: List[Employee],
    period: PeriodLike,
    config_registry: Dict[str, KpiConfig],
    high_threshold: Optional[float] = None,
    low_threshold: Optional[float] = None
) -> Dict:
    """
    Team-level stats for dashboard cards.
    
    Returns:
        Dict with average score, high/low performer counts and headcount
    """
    high_threshold, low_threshold = _thresholds(high_threshold, low_threshold)
    scores = [final_score_of(emp, period, config_registry) for emp in employees]

    if not scores:
        return {'average': 0, 'high': 0, 'low': 0, 'count': 0}

    return {
        'average': sum(scores) / len(scores),
        'high': sum(1 for s in scores if s >= high_threshold),
        'low': sum(1 for s in scores if s < low_threshold),
        'count': len(scores),
    }


def score_trend(
    employees: List[Employee],
    period: PeriodLike,
    config_registry: Dict[str, KpiConfig],
    periods: Optional[int] = None,
    high_threshold: Optional[float] = None,
    low_threshold: Optional[float] = None
) -> pd.DataFrame:
    """
    Team trend over the `periods` months ending at period (oldest first).
    
    Returns:
        DataFrame with columns: period, average_score, high_performers, low_performers
    """
    if periods is None:
        periods = config.get_app_setting("TREND_PERIODS", 6)

    rows = []
    for p in recent_periods(Period.parse(period), periods):
        summary = team_summary(employees, p, config_registry, high_threshold, low_threshold)
        rows.append({
            'period': p.key,
            'average_score': summary['average'],
            'high_performers': summary['high'],
            'low_performers': summary['low'],
        })

    return pd.DataFrame(rows, columns=['period', 'average_score', 'high_performers', 'low_performers'])


def score_table(
    employees: List[Employee],
    period: PeriodLike,
    config_registry: Dict[str, KpiConfig],
    search: str = '',
    sort: str = 'default',
    high_threshold: Optional[float] = None,
    low_threshold: Optional[float] = None
) -> pd.DataFrame:
    """
    Ranking table of employees for a period.
    
    Args:
        search: Case-insensitive substring filter on the employee name
        sort: 'default' (input order), 'name_asc', 'name_desc', 'score_asc', 'score_desc'
        
    Returns:
        DataFrame with columns: employee_id, name, department, final_score, band
    """
    high_threshold, low_threshold = _thresholds(high_threshold, low_threshold)
    columns = ['employee_id', 'name', 'department', 'final_score', 'band']

    needle = (search or '').lower()
    rows = [
        {
            'employee_id': emp.id,
            'name': emp.name,
            'department': emp.department,
            'final_score': final_score_of(emp, period, config_registry),
        }
        for emp in employees
        if needle in emp.name.lower()
    ]

    if not rows:
        return pd.DataFrame(columns=columns)

    df = pd.DataFrame(rows)
    df['band'] = np.where(
        df['final_score'] >= high_threshold, 'high',
        np.where(df['final_score'] >= low_threshold, 'medium', 'low')
    )

    sort_map = {
        'name_asc': ('name', True),
        'name_desc': ('name', False),
        'score_asc': ('final_score', True),
        'score_desc': ('final_score', False),
    }
    if sort in sort_map:
        by, ascending = sort_map[sort]
        df = df.sort_values(by, ascending=ascending, kind='mergesort')
    elif sort != 'default':
        logger.debug(f"Unknown sort option {sort!r}, keeping input order")

    return df[columns].reset_index(drop=True)
