# kpi_dashboard/targeting/__init__.py
"""
Targeting Module

KPI scoring, sales capacity planning, territory-based target allocation
and manual target carry-over. Every engine is a pure function over the
records passed in; state changes go through AppState.

Components:
- periods: Month/season/year arithmetic
- models: Dataclass records and derived target trees
- scoring: KPI scores, final scores and team summaries
- planner: Funnel-based capacity and financial projection
- allocation: Market-share allocation and seasonal/monthly timephasing
- carry_over: Year-to-date shortfall carry-over for manual targets
- validators: Input validation
- store: Application state with copy-on-write transitions

Usage:
    from kpi_dashboard.targeting import (
        AppState,
        allocate,
        final_score_of,
        project_metrics,
        shortfall_before,
    )
"""

from .periods import (
    Period,
    month_index,
    season_of,
    months_of_season,
    previous_period,
    next_period,
    compare_periods,
    periods_in_year_before,
    recent_periods,
)
from .models import (
    Kpi,
    Employee,
    KpiConfig,
    Product,
    Territory,
    SalesTargetEntry,
    SalesConfig,
    PlannerInputs,
    PlannerState,
    MonthlyTarget,
    SeasonalTarget,
    AnnualTarget,
    TerritoryTargetDetail,
    EmployeeAutoTarget,
    Metrics,
)
from .scoring import (
    score_of,
    final_score_of,
    performance_band,
    kpi_breakdown,
    team_summary,
    score_trend,
    score_table,
)
from .planner import project_metrics
from .allocation import (
    timephase,
    allocate,
    market_size,
    territory_potentials,
    company_totals,
    targets_to_frame,
)
from .carry_over import (
    CarryOverRow,
    shortfall_before,
    carry_over_row,
    carry_over_table,
)
from .validators import TargetingValidator
from .store import AppState

# Constants
from .constants import (
    MONTH_ORDER,
    SEASON_ORDER,
    SEASON_WEIGHTS,
    KPI_FORMULAS,
    TERRITORY_PROVINCE,
    TERRITORY_MEDICAL_CENTER,
    MARKET_SCOPE_NATIONAL,
    MARKET_SCOPE_TEHRAN,
    UNKNOWN_NUM_SALESPEOPLE,
    UNKNOWN_TARGET_CUSTOMERS,
)

__all__ = [
    # Periods
    'Period',
    'month_index',
    'season_of',
    'months_of_season',
    'previous_period',
    'next_period',
    'compare_periods',
    'periods_in_year_before',
    'recent_periods',
    
    # Models
    'Kpi',
    'Employee',
    'KpiConfig',
    'Product',
    'Territory',
    'SalesTargetEntry',
    'SalesConfig',
    'PlannerInputs',
    'PlannerState',
    'MonthlyTarget',
    'SeasonalTarget',
    'AnnualTarget',
    'TerritoryTargetDetail',
    'EmployeeAutoTarget',
    'Metrics',
    
    # Engines
    'score_of',
    'final_score_of',
    'performance_band',
    'kpi_breakdown',
    'team_summary',
    'score_trend',
    'score_table',
    'project_metrics',
    'timephase',
    'allocate',
    'market_size',
    'territory_potentials',
    'company_totals',
    'targets_to_frame',
    'CarryOverRow',
    'shortfall_before',
    'carry_over_row',
    'carry_over_table',
    
    # State
    'TargetingValidator',
    'AppState',
    
    # Constants
    'MONTH_ORDER',
    'SEASON_ORDER',
    'SEASON_WEIGHTS',
    'KPI_FORMULAS',
    'TERRITORY_PROVINCE',
    'TERRITORY_MEDICAL_CENTER',
    'MARKET_SCOPE_NATIONAL',
    'MARKET_SCOPE_TEHRAN',
    'UNKNOWN_NUM_SALESPEOPLE',
    'UNKNOWN_TARGET_CUSTOMERS',
]

__version__ = '1.0.0'
