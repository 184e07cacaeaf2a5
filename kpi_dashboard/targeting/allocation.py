# kpi_dashboard/targeting/allocation.py
"""
Auto-Targeting Allocation Engine

Distributes a market size (units) across employees through the territories
assigned to them, then timephases every quantity into seasons and months.

Flow:
    territory share (%) x market units      -> potential units
    potential units x acquisition rate (%)  -> territory annual quantity
    timephase(quantity, price)              -> annual / seasonal / monthly tree

Employee totals are re-timephased from the summed territory annual
quantities instead of summing the per-territory seasonal and monthly trees.

USAGE:
    results = allocate(employees, territories, product, market_size(data, 1, 1404))
    frame = targets_to_frame(results)
"""

import logging
import math
import time
from typing import Dict, List, Optional
import pandas as pd

from .constants import (
    MONTH_GROWTH_FACTOR,
    SEASON_MONTHS,
    SEASON_ORDER,
    SEASON_WEIGHTS,
)
from .models import (
    AnnualTarget,
    Employee,
    EmployeeAutoTarget,
    MonthlyTarget,
    Product,
    SeasonalTarget,
    Territory,
    TerritoryTargetDetail,
)

logger = logging.getLogger(__name__)


# =============================================================================
# TIMEPHASING
# =============================================================================

def distribute_to_months(
    seasonal_qty: float,
    month_names: List[str],
    price: float
) -> Dict[str, MonthlyTarget]:
    """
    Split a seasonal quantity over its three months with a mild ramp
    (0.95 / 1.00 / 1.05 of the average).
    
    Months 1 and 2 are ceiled independently; month 3 takes the remainder up to
    ceil(seasonal_qty), floored at 0.
    """
    if seasonal_qty <= 0:
        return {name: MonthlyTarget(0, 0) for name in month_names}

    monthly_avg = seasonal_qty / 3
    raw = [
        monthly_avg * (1 - MONTH_GROWTH_FACTOR),
        monthly_avg,
        monthly_avg * (1 + MONTH_GROWTH_FACTOR),
    ]
    raw_total = raw[0] + raw[1] + raw[2]

    m1 = math.ceil(raw[0] / raw_total * seasonal_qty)
    m2 = math.ceil(raw[1] / raw_total * seasonal_qty)
    m3 = max(0, math.ceil(seasonal_qty) - (m1 + m2))

    return {
        month_names[0]: MonthlyTarget(m1, m1 * price),
        month_names[1]: MonthlyTarget(m2, m2 * price),
        month_names[2]: MonthlyTarget(m3, m3 * price),
    }


def timephase(annual_qty: float, price: float) -> AnnualTarget:
    """
    Build the annual -> seasonal -> monthly target tree for a quantity.
    
    Totals are rebuilt bottom-up from the rounded monthly quantities, so
    annual.quantity == sum(seasons) == sum(months) and value == quantity * price
    at every level. Non-positive quantities yield an all-zero tree.
    """
    total_weight = sum(SEASON_WEIGHTS[s] for s in SEASON_ORDER)

    seasons: Dict[str, SeasonalTarget] = {}
    annual_quantity = 0

    for season in SEASON_ORDER:
        seasonal_qty = annual_qty * SEASON_WEIGHTS[season] / total_weight
        months = distribute_to_months(seasonal_qty, SEASON_MONTHS[season], price)
        quantity = sum(m.quantity for m in months.values())
        annual_quantity += quantity
        seasons[season] = SeasonalTarget(quantity, quantity * price, months)

    return AnnualTarget(annual_quantity, annual_quantity * price, seasons)


# =============================================================================
# ALLOCATION
# =============================================================================

def allocate(
    employees: List[Employee],
    territories: List[Territory],
    product: Optional[Product],
    total_market_units: float
) -> List[EmployeeAutoTarget]:
    """
    Allocate a market size to employees through their territories.
    
    Args:
        employees: Candidate employees
        territories: Provinces and/or medical centers
        product: Product being targeted (None short-circuits)
        total_market_units: Market size in units (<= 0 short-circuits)
        
    Returns:
        One EmployeeAutoTarget per employee with at least one territory,
        in employee input order
    """
    if product is None or total_market_units <= 0:
        return []

    start_time = time.perf_counter()

    by_id = {emp.id: emp for emp in employees}
    details: Dict[int, List[TerritoryTargetDetail]] = {emp.id: [] for emp in employees}
    total_share: Dict[int, float] = {emp.id: 0 for emp in employees}

    for territory in territories:
        if territory.assigned_to is None:
            continue

        employee = by_id.get(territory.assigned_to)
        if employee is None:
            logger.debug(
                f"Skipping territory {territory.id}: assigned to missing employee {territory.assigned_to}"
            )
            continue

        share = territory.share_of(product.id)
        potential_units = share / 100 * total_market_units
        annual_qty = potential_units * (employee.target_acquisition_rate / 100)

        total_share[employee.id] += share
        details[employee.id].append(TerritoryTargetDetail(
            territory_name=territory.name,
            territory_share=share,
            annual=timephase(annual_qty, product.price),
            territory_id=territory.id,
            territory_kind=territory.kind,
            potential_units=potential_units,
            raw_quantity=annual_qty,
        ))

    results = []
    for emp in employees:
        emp_details = details[emp.id]
        if not emp_details:
            continue

        total_qty = sum(d.annual.quantity for d in emp_details)
        results.append(EmployeeAutoTarget(
            employee_id=emp.id,
            employee_name=emp.name,
            target_acquisition_rate=emp.target_acquisition_rate,
            total_share=total_share[emp.id],
            annual=timephase(total_qty, product.price),
            territories=emp_details,
        ))

    elapsed = time.perf_counter() - start_time
    logger.debug(
        f"Allocated product {product.id} ({total_market_units:,.0f} units) to "
        f"{len(results)} employees across {len(territories)} territories in {elapsed:.3f}s"
    )

    return results


# =============================================================================
# MARKET DATA & MONITORING
# =============================================================================

def market_size(market_data: Dict[int, Dict[int, float]], product_id: int, year: int) -> float:
    """Market size in units for a product/year, 0 when not entered."""
    return (market_data.get(product_id) or {}).get(year) or 0


def territory_potentials(
    territories: List[Territory],
    employees: List[Employee],
    product_id: int,
    total_market_units: float
) -> List[Dict]:
    """
    Potential and annual target per territory (medical-center monitor).
    
    Unassigned territories and territories pointing at a missing employee
    keep their potential with a zero target. Values rounded to 1 decimal.
    """
    by_id = {emp.id: emp for emp in employees}
    rows = []

    for territory in territories:
        potential = territory.share_of(product_id) / 100 * total_market_units
        employee = by_id.get(territory.assigned_to) if territory.assigned_to is not None else None
        target = potential * (employee.target_acquisition_rate / 100) if employee else 0

        rows.append({
            'territory_id': territory.id,
            'territory_name': territory.name,
            'assigned_to': employee.id if employee else None,
            'potential_units': round(potential, 1),
            'annual_target_units': round(target, 1),
        })

    return rows


# =============================================================================
# PRESENTATION HELPERS
# =============================================================================

def company_totals(results: List[EmployeeAutoTarget]) -> Dict:
    return {
        'quantity': sum(r.annual.quantity for r in results),
        'value': sum(r.annual.value for r in results),
    }


def targets_to_frame(results: List[EmployeeAutoTarget]) -> pd.DataFrame:
    """
    Flatten allocation results to one row per employee/territory/month.
    
    Returns:
        DataFrame with columns: employee_id, employee_name, territory_name,
        territory_share, season, month, quantity, value
    """
    columns = [
        'employee_id', 'employee_name', 'territory_name', 'territory_share',
        'season', 'month', 'quantity', 'value'
    ]

    rows = []
    for result in results:
        for detail in result.territories:
            for season_name, season in detail.annual.seasons.items():
                for month_name, month in season.months.items():
                    rows.append({
                        'employee_id': result.employee_id,
                        'employee_name': result.employee_name,
                        'territory_name': detail.territory_name,
                        'territory_share': detail.territory_share,
                        'season': season_name,
                        'month': month_name,
                        'quantity': month.quantity,
                        'value': month.value,
                    })

    return pd.DataFrame(rows, columns=columns)
