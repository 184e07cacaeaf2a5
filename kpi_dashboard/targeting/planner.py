# kpi_dashboard/targeting/planner.py
"""
Sales Capacity Planner

Funnel-based projection of headcount, customers and sales economics.
The caller picks which of (num_salespeople, target_customers) is unknown;
the other one is taken from the inputs.

Every degenerate denominator resolves to 0 or infinity, never an exception.
"""

import logging
import math

from .constants import PLANNER_UNKNOWNS, UNKNOWN_NUM_SALESPEOPLE
from .models import (
    FinancialResults,
    Metrics,
    OperationalResults,
    PlannerInputs,
    SalesConfig,
)

logger = logging.getLogger(__name__)


def project_metrics(
    inputs: PlannerInputs,
    unknown_variable: str,
    config: SalesConfig
) -> Metrics:
    """
    Project operational and financial metrics.
    
    Args:
        inputs: Headcount, customer target, salary and deal size
        unknown_variable: 'num_salespeople' or 'target_customers'
        config: Time budget, funnel rates (percent) and commission (percent)
        
    Returns:
        Metrics with the solved value in `calculated_value`
    """
    if unknown_variable not in PLANNER_UNKNOWNS:
        logger.debug(f"Unknown planner variable {unknown_variable!r}, solving for target_customers")

    lead_to_opp = config.lead_to_opp_rate / 100
    opp_to_customer = config.opp_to_customer_rate / 100
    commission = config.commission_rate / 100

    funnel_rate = lead_to_opp * opp_to_customer
    leads_per_customer = 1 / funnel_rate if funnel_rate > 0 else math.inf
    opps_per_customer = 1 / opp_to_customer if opp_to_customer > 0 else math.inf

    time_per_new_customer = (
        leads_per_customer * config.lead_to_opp_time
        + opps_per_customer * config.opp_to_customer_time
    )
    available_time = (config.total_time_per_person - config.existing_client_time) * 12

    if unknown_variable == UNKNOWN_NUM_SALESPEOPLE:
        customers = inputs.target_customers
        salespeople = (
            customers * time_per_new_customer / available_time
            if available_time > 0 else math.inf
        )
        calculated_value = salespeople
    else:
        salespeople = inputs.num_salespeople
        capacity_per_person = (
            available_time / time_per_new_customer
            if available_time > 0 and time_per_new_customer > 0 else 0
        )
        customers = capacity_per_person * salespeople
        calculated_value = customers

    revenue = customers * inputs.average_deal_size
    fixed_cost = salespeople * inputs.average_salary * 12
    cost = fixed_cost + revenue * commission

    margin_per_deal = inputs.average_deal_size * (1 - commission)

    operational = OperationalResults(
        total_new_customers=customers,
        required_leads=_safe_product(customers, leads_per_customer),
        required_opps=_safe_product(customers, opps_per_customer),
        market_share=customers / config.market_size * 100 if config.market_size > 0 else 0,
    )
    financial = FinancialResults(
        revenue=revenue,
        cost=cost,
        cac=cost / customers if customers > 0 else 0,
        roi=(revenue - cost) / cost * 100 if cost > 0 else 0,
        break_even_customers=fixed_cost / margin_per_deal if margin_per_deal > 0 else math.inf,
    )

    return Metrics(
        calculated_value=calculated_value,
        num_salespeople=salespeople,
        operational=operational,
        financial=financial,
    )


def _safe_product(count: float, per_unit: float) -> float:
    # 0 customers need no leads even when the funnel rate is 0
    if count == 0:
        return 0
    return count * per_unit
