# kpi_dashboard/targeting/models.py
"""
Data containers for the targeting module.

Source records (Employee, Kpi, KpiConfig, Product, Territory, SalesTargetEntry,
SalesConfig, PlannerInputs) are created and replaced by the store. Target trees
(MonthlyTarget, SeasonalTarget, AnnualTarget) and EmployeeAutoTarget are derived
on every read and never persisted.
"""

from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional, Any

from .constants import (
    DEFAULT_ACQUISITION_RATE,
    DEFAULT_PLANNER_INPUTS,
    DEFAULT_SALES_CONFIG,
    TERRITORY_PROVINCE,
    UNKNOWN_NUM_SALESPEOPLE,
)


# =============================================================================
# SOURCE RECORDS
# =============================================================================

@dataclass
class Kpi:
    """A KPI owned by one employee. Missing score keys mean "not recorded"."""
    id: int
    type: str
    target: Optional[float] = None
    scores: Dict[str, float] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Kpi":
        return cls(
            id=data["id"],
            type=data["type"],
            target=data.get("target"),
            scores=dict(data.get("scores") or {}),
        )


@dataclass
class Employee:
    id: int
    name: str
    title: str = ""
    department: str = ""
    kpis: List[Kpi] = field(default_factory=list)
    notes: Dict[str, str] = field(default_factory=dict)
    target_acquisition_rate: float = DEFAULT_ACQUISITION_RATE

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Employee":
        rate = data.get("target_acquisition_rate")
        return cls(
            id=data["id"],
            name=data["name"],
            title=data.get("title", ""),
            department=data.get("department", ""),
            kpis=[Kpi.from_dict(k) for k in data.get("kpis") or []],
            notes=dict(data.get("notes") or {}),
            target_acquisition_rate=DEFAULT_ACQUISITION_RATE if rate is None else rate,
        )


@dataclass
class KpiConfig:
    """Scoring rule for a KPI type. max_points is negative for penalties."""
    name: str
    max_points: float
    formula: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "KpiConfig":
        return cls(name=data["name"], max_points=data["max_points"], formula=data["formula"])


@dataclass
class Product:
    id: int
    name: str
    price: float

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Product":
        return cls(id=data["id"], name=data["name"], price=data["price"])


@dataclass
class Territory:
    """
    Province or medical center. Both share the same shape; `kind` is the
    discriminant used by presentation, allocation ignores it.
    """
    id: str
    name: str
    market_share: Dict[int, float] = field(default_factory=dict)
    assigned_to: Optional[int] = None
    kind: str = TERRITORY_PROVINCE

    def share_of(self, product_id: int) -> float:
        return self.market_share.get(product_id) or 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any], kind: str = TERRITORY_PROVINCE) -> "Territory":
        return cls(
            id=str(data["id"]),
            name=data["name"],
            market_share={int(k): v for k, v in (data.get("market_share") or {}).items()},
            assigned_to=data.get("assigned_to"),
            kind=data.get("kind", kind),
        )


@dataclass
class SalesTargetEntry:
    """Manually entered target/actual pair. actual None means not yet recorded."""
    target: float = 0
    actual: Optional[float] = None


@dataclass
class SalesConfig:
    """Funnel and cost assumptions for the planner. Rates are percents."""
    total_time_per_person: float = DEFAULT_SALES_CONFIG["total_time_per_person"]
    existing_client_time: float = DEFAULT_SALES_CONFIG["existing_client_time"]
    lead_to_opp_time: float = DEFAULT_SALES_CONFIG["lead_to_opp_time"]
    opp_to_customer_time: float = DEFAULT_SALES_CONFIG["opp_to_customer_time"]
    lead_to_opp_rate: float = DEFAULT_SALES_CONFIG["lead_to_opp_rate"]
    opp_to_customer_rate: float = DEFAULT_SALES_CONFIG["opp_to_customer_rate"]
    commission_rate: float = DEFAULT_SALES_CONFIG["commission_rate"]
    market_size: float = DEFAULT_SALES_CONFIG["market_size"]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class PlannerInputs:
    num_salespeople: float = DEFAULT_PLANNER_INPUTS["num_salespeople"]
    target_customers: float = DEFAULT_PLANNER_INPUTS["target_customers"]
    average_salary: float = DEFAULT_PLANNER_INPUTS["average_salary"]
    average_deal_size: float = DEFAULT_PLANNER_INPUTS["average_deal_size"]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class PlannerState:
    unknown_variable: str = UNKNOWN_NUM_SALESPEOPLE
    inputs: PlannerInputs = field(default_factory=PlannerInputs)


# =============================================================================
# DERIVED TARGET TREES
# =============================================================================

@dataclass
class MonthlyTarget:
    quantity: float = 0
    value: float = 0


@dataclass
class SeasonalTarget:
    quantity: float = 0
    value: float = 0
    months: Dict[str, MonthlyTarget] = field(default_factory=dict)


@dataclass
class AnnualTarget:
    quantity: float = 0
    value: float = 0
    seasons: Dict[str, SeasonalTarget] = field(default_factory=dict)


@dataclass
class TerritoryTargetDetail:
    territory_name: str
    territory_share: float
    annual: AnnualTarget
    territory_id: Optional[str] = None
    territory_kind: str = TERRITORY_PROVINCE
    potential_units: float = 0
    raw_quantity: float = 0


@dataclass
class EmployeeAutoTarget:
    employee_id: int
    employee_name: str
    target_acquisition_rate: float
    total_share: float
    annual: AnnualTarget
    territories: List[TerritoryTargetDetail] = field(default_factory=list)


# =============================================================================
# PLANNER RESULTS
# =============================================================================

@dataclass
class OperationalResults:
    total_new_customers: float
    required_leads: float
    required_opps: float
    market_share: float


@dataclass
class FinancialResults:
    revenue: float
    cost: float
    cac: float
    roi: float
    break_even_customers: float


@dataclass
class Metrics:
    calculated_value: float
    num_salespeople: float
    operational: OperationalResults
    financial: FinancialResults
