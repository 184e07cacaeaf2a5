# kpi_dashboard/targeting/carry_over.py
"""
Carry-over for manual sales targets.

Unmet target quantity rolls forward month by month within a calendar year.
Overachievement carries a negative amount that lowers the next month's
effective target. Every year starts from zero.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Union

from .models import Product, SalesTargetEntry
from .periods import Period, periods_in_year_before


# employee id -> period key -> product id -> entry
SalesLedger = Dict[int, Dict[str, Dict[int, SalesTargetEntry]]]


@dataclass
class CarryOverRow:
    product_id: int
    carry_over: float
    target: float
    actual: float
    total_target: float
    shortfall: float
    achievement_percent: float


def ledger_entry(
    ledger: SalesLedger,
    employee_id: int,
    period: Union[Period, str],
    product_id: int
) -> Optional[SalesTargetEntry]:
    return ((ledger.get(employee_id) or {}).get(str(period)) or {}).get(product_id)


def shortfall_before(
    employee_id: int,
    product_id: int,
    period: Union[Period, str],
    ledger: SalesLedger
) -> float:
    """
    Cumulative carry-over entering `period` from the earlier months of its year.
    
    For each earlier month in order:
        carry = (target + carry) - actual
    with missing targets/actuals read as 0.
    """
    period = Period.parse(period)
    carry = 0

    for loop_period in periods_in_year_before(period):
        entry = ledger_entry(ledger, employee_id, loop_period, product_id)
        loop_target = (entry.target or 0) if entry else 0
        loop_actual = (entry.actual or 0) if entry else 0
        carry = (loop_target + carry) - loop_actual

    return carry


def carry_over_row(
    employee_id: int,
    product_id: int,
    period: Union[Period, str],
    ledger: SalesLedger
) -> CarryOverRow:
    """Effective target, shortfall and achievement for one product/period."""
    carry = shortfall_before(employee_id, product_id, period, ledger)

    entry = ledger_entry(ledger, employee_id, period, product_id)
    target = (entry.target or 0) if entry else 0
    actual = (entry.actual or 0) if entry else 0

    total_target = target + carry
    achievement = actual / total_target * 100 if total_target > 0 else 0

    return CarryOverRow(
        product_id=product_id,
        carry_over=carry,
        target=target,
        actual=actual,
        total_target=total_target,
        shortfall=total_target - actual,
        achievement_percent=achievement,
    )


def carry_over_table(
    employee_id: int,
    period: Union[Period, str],
    products: List[Product],
    ledger: SalesLedger
) -> List[CarryOverRow]:
    """One row per product for the manual targeting table."""
    return [carry_over_row(employee_id, p.id, period, ledger) for p in products]
