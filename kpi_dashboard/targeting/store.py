# kpi_dashboard/targeting/store.py
"""
Application State Store

Holds employees, KPI configs, products, territories, market data and the
manual sales-target ledger. Every transition copies the state, applies the
change to the copy and returns it; the original is never mutated, so
cascading deletes (employee -> territory assignments, KPI config -> KPIs)
are visible all at once or not at all.

Usage:
    state = AppState.default()
    state = state.add_employee("Sara", "Sales Manager", "Sales")
    state = state.assign_territory("province", "KR", employee_id)
    targets = state.auto_targets(product_id=1, year=1404)
"""

import copy
import logging
import math
from dataclasses import dataclass, field, fields, asdict
from typing import Any, Callable, Dict, List, Optional, Union

from ..config import config
from .allocation import allocate, market_size
from .carry_over import SalesLedger
from .constants import (
    DEFAULT_ACQUISITION_RATE,
    DEFAULT_EMPLOYEES,
    DEFAULT_KPI_CONFIGS,
    DEFAULT_PRODUCTS,
    DEFAULT_PROVINCES,
    DEFAULT_YEAR,
    MARKET_SCOPE_NATIONAL,
    MARKET_SCOPE_TEHRAN,
    TERRITORY_MEDICAL_CENTER,
    TERRITORY_PROVINCE,
)
from .models import (
    Employee,
    EmployeeAutoTarget,
    Kpi,
    KpiConfig,
    Metrics,
    PlannerInputs,
    PlannerState,
    Product,
    SalesConfig,
    SalesTargetEntry,
    Territory,
)
from .periods import Period
from .planner import project_metrics
from .validators import TargetingValidator

logger = logging.getLogger(__name__)

MarketData = Dict[int, Dict[int, float]]

_validator = TargetingValidator()


def _raise_if(errors: List[str]):
    if errors:
        logger.warning(f"Rejected state change: {'; '.join(errors)}")
        raise ValueError("; ".join(errors))


def _next_id(ids) -> int:
    return max(ids, default=0) + 1


@dataclass
class AppState:
    employees: List[Employee] = field(default_factory=list)
    kpi_configs: Dict[str, KpiConfig] = field(default_factory=dict)
    sales_config: SalesConfig = field(default_factory=SalesConfig)
    planner_state: PlannerState = field(default_factory=PlannerState)
    products: List[Product] = field(default_factory=list)
    sales_targets: SalesLedger = field(default_factory=dict)
    provinces: List[Territory] = field(default_factory=list)
    medical_centers: List[Territory] = field(default_factory=list)
    market_data: MarketData = field(default_factory=dict)
    tehran_market_data: MarketData = field(default_factory=dict)
    available_years: List[int] = field(default_factory=list)

    # =========================================================================
    # CONSTRUCTION
    # =========================================================================

    @classmethod
    def default(cls) -> "AppState":
        """Initial data set used on first launch."""
        rate = config.get_app_setting("DEFAULT_ACQUISITION_RATE", DEFAULT_ACQUISITION_RATE)
        return cls(
            employees=[Employee(target_acquisition_rate=rate, **e) for e in DEFAULT_EMPLOYEES],
            kpi_configs={k: KpiConfig(**v) for k, v in DEFAULT_KPI_CONFIGS.items()},
            products=[Product(**p) for p in DEFAULT_PRODUCTS],
            provinces=[
                Territory(id=code, name=name, market_share={1: share}, kind=TERRITORY_PROVINCE)
                for code, name, share in DEFAULT_PROVINCES
            ],
            available_years=[config.get_app_setting("DEFAULT_YEAR", DEFAULT_YEAR)],
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppState":
        """
        Restore state from a structured object graph (e.g. a JSON backup).
        Missing sections fall back to the defaults.
        """
        base = cls.default()

        employees = [Employee.from_dict(e) for e in data.get("employees", [])] \
            if "employees" in data else base.employees
        kpi_configs = {k: KpiConfig.from_dict(v) for k, v in data.get("kpi_configs", {}).items()} \
            if "kpi_configs" in data else base.kpi_configs
        products = [Product.from_dict(p) for p in data.get("products", [])] \
            if "products" in data else base.products
        provinces = [Territory.from_dict(t, TERRITORY_PROVINCE) for t in data.get("provinces", [])] \
            if "provinces" in data else base.provinces

        planner = data.get("planner_state") or {}

        return cls(
            employees=employees,
            kpi_configs=kpi_configs,
            sales_config=SalesConfig(**_known(SalesConfig, data.get("sales_config"))),
            planner_state=PlannerState(
                unknown_variable=planner.get("unknown_variable", base.planner_state.unknown_variable),
                inputs=PlannerInputs(**_known(PlannerInputs, planner.get("inputs"))),
            ),
            products=products,
            sales_targets=_ledger_from_dict(data.get("sales_targets") or {}),
            provinces=provinces,
            medical_centers=[
                Territory.from_dict(t, TERRITORY_MEDICAL_CENTER)
                for t in data.get("medical_centers") or []
            ],
            market_data=_market_from_dict(data.get("market_data") or {}),
            tehran_market_data=_market_from_dict(data.get("tehran_market_data") or {}),
            available_years=list(data.get("available_years") or base.available_years),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["sales_targets"] = {
            str(emp_id): {
                period: {str(pid): asdict(entry) for pid, entry in products.items()}
                for period, products in periods.items()
            }
            for emp_id, periods in self.sales_targets.items()
        }
        for key in ("market_data", "tehran_market_data"):
            data[key] = {
                str(pid): {str(year): size for year, size in years.items()}
                for pid, years in getattr(self, key).items()
            }
        for key in ("provinces", "medical_centers"):
            for territory in data[key]:
                territory["market_share"] = {str(k): v for k, v in territory["market_share"].items()}
        return data

    # =========================================================================
    # QUERIES
    # =========================================================================

    def find_employee(self, employee_id: int) -> Optional[Employee]:
        return next((e for e in self.employees if e.id == employee_id), None)

    def find_product(self, product_id: int) -> Optional[Product]:
        return next((p for p in self.products if p.id == product_id), None)

    def territories(self, kind: Optional[str] = None) -> List[Territory]:
        if kind == TERRITORY_PROVINCE:
            return list(self.provinces)
        if kind == TERRITORY_MEDICAL_CENTER:
            return list(self.medical_centers)
        return list(self.provinces) + list(self.medical_centers)

    def auto_targets(
        self,
        product_id: int,
        year: int,
        scope: str = MARKET_SCOPE_NATIONAL
    ) -> List[EmployeeAutoTarget]:
        """
        Allocation for a product/year.

        national: provinces and medical centers against the national market.
        tehran: medical centers only against the Tehran market.
        """
        if scope == MARKET_SCOPE_TEHRAN:
            territories = self.medical_centers
            units = market_size(self.tehran_market_data, product_id, year)
        else:
            territories = self.territories()
            units = market_size(self.market_data, product_id, year)

        return allocate(self.employees, territories, self.find_product(product_id), units)

    def planner_metrics(self) -> Metrics:
        return project_metrics(
            self.planner_state.inputs,
            self.planner_state.unknown_variable,
            self.sales_config,
        )

    # =========================================================================
    # TRANSITIONS
    # =========================================================================

    def _transition(self, description: str, updater: Callable[["AppState"], None]) -> "AppState":
        draft = copy.deepcopy(self)
        updater(draft)
        logger.info(f"State change: {description}")
        return draft

    def _territory_list(self, kind: str) -> List[Territory]:
        return self.medical_centers if kind == TERRITORY_MEDICAL_CENTER else self.provinces

    # --- Years ---------------------------------------------------------------

    def add_year(self, year: int) -> "AppState":
        _raise_if(_validator.validate_year(year))

        def apply(d: "AppState"):
            if year not in d.available_years:
                d.available_years.append(year)
                d.available_years.sort(reverse=True)

        return self._transition(f"add year {year}", apply)

    # --- Employees -----------------------------------------------------------

    def add_employee(
        self,
        name: str,
        title: str = "",
        department: str = "",
        target_acquisition_rate: Optional[float] = None
    ) -> "AppState":
        if target_acquisition_rate is None:
            target_acquisition_rate = config.get_app_setting(
                "DEFAULT_ACQUISITION_RATE", DEFAULT_ACQUISITION_RATE
            )
        _raise_if(_validator.validate_employee(name, target_acquisition_rate))

        def apply(d: "AppState"):
            d.employees.append(Employee(
                id=_next_id(e.id for e in d.employees),
                name=name,
                title=title,
                department=department,
                target_acquisition_rate=target_acquisition_rate,
            ))

        return self._transition(f"add employee {name!r}", apply)

    def update_employee(
        self,
        employee_id: int,
        name: str,
        title: str,
        department: str,
        target_acquisition_rate: float
    ) -> "AppState":
        _raise_if(_validator.validate_employee(name, target_acquisition_rate))

        def apply(d: "AppState"):
            emp = d.find_employee(employee_id)
            if emp:
                emp.name = name
                emp.title = title
                emp.department = department
                emp.target_acquisition_rate = target_acquisition_rate

        return self._transition(f"update employee {employee_id}", apply)

    def delete_employee(self, employee_id: int) -> "AppState":
        """Remove an employee and release every territory assigned to them."""
        def apply(d: "AppState"):
            d.employees = [e for e in d.employees if e.id != employee_id]
            for territory in d.territories():
                if territory.assigned_to == employee_id:
                    territory.assigned_to = None

        return self._transition(f"delete employee {employee_id}", apply)

    # --- KPIs ----------------------------------------------------------------

    def add_kpi_to_employee(
        self,
        employee_id: int,
        kpi_type: str,
        target: Optional[float] = None
    ) -> "AppState":
        def apply(d: "AppState"):
            emp = d.find_employee(employee_id)
            if emp:
                all_ids = [k.id for e in d.employees for k in e.kpis]
                emp.kpis.append(Kpi(id=_next_id(all_ids), type=kpi_type, target=target))

        return self._transition(f"add {kpi_type} KPI to employee {employee_id}", apply)

    def record_score(
        self,
        employee_id: int,
        kpi_id: int,
        period: Union[Period, str],
        value: Optional[float]
    ) -> "AppState":
        """Record an actual. None or NaN removes the entry (not recorded)."""
        key = str(Period.parse(period))

        def apply(d: "AppState"):
            emp = d.find_employee(employee_id)
            kpi = next((k for k in emp.kpis if k.id == kpi_id), None) if emp else None
            if kpi is None:
                return
            if value is None or (isinstance(value, float) and math.isnan(value)):
                kpi.scores.pop(key, None)
            else:
                kpi.scores[key] = value

        return self._transition(f"record score {key} for KPI {kpi_id}", apply)

    def save_note(self, employee_id: int, period: Union[Period, str], note: str) -> "AppState":
        key = str(Period.parse(period))

        def apply(d: "AppState"):
            emp = d.find_employee(employee_id)
            if emp is None:
                return
            if note and note.strip():
                emp.notes[key] = note
            else:
                emp.notes.pop(key, None)

        return self._transition(f"save note {key} for employee {employee_id}", apply)

    def save_kpi_config(self, kpi_type: str, name: str, max_points: float, formula: str) -> "AppState":
        _raise_if(_validator.validate_kpi_config(kpi_type, name, max_points, formula))

        def apply(d: "AppState"):
            d.kpi_configs[kpi_type] = KpiConfig(name=name, max_points=max_points, formula=formula)

        return self._transition(f"save KPI config {kpi_type}", apply)

    def delete_kpi_config(self, kpi_type: str) -> "AppState":
        """Remove a KPI config and every employee KPI of that type."""
        def apply(d: "AppState"):
            d.kpi_configs.pop(kpi_type, None)
            for emp in d.employees:
                emp.kpis = [k for k in emp.kpis if k.type != kpi_type]

        return self._transition(f"delete KPI config {kpi_type}", apply)

    # --- Products ------------------------------------------------------------

    def save_product(self, product: Product) -> "AppState":
        """Replace the product with the same id, or add it under a new id."""
        _raise_if(_validator.validate_product(product.name, product.price))

        def apply(d: "AppState"):
            for i, existing in enumerate(d.products):
                if existing.id == product.id:
                    d.products[i] = copy.deepcopy(product)
                    return
            d.products.append(Product(
                id=_next_id(p.id for p in d.products),
                name=product.name,
                price=product.price,
            ))

        return self._transition(f"save product {product.name!r}", apply)

    def delete_product(self, product_id: int) -> "AppState":
        def apply(d: "AppState"):
            d.products = [p for p in d.products if p.id != product_id]

        return self._transition(f"delete product {product_id}", apply)

    # --- Territories ---------------------------------------------------------

    def save_territory(self, territory: Territory) -> "AppState":
        """
        Replace the territory with the same id and kind. A new medical center
        gets an "mc_" id; a new province keeps the id it was given.
        """
        _raise_if(_validator.validate_territory(territory.name, territory.kind))

        def apply(d: "AppState"):
            items = d._territory_list(territory.kind)
            for i, existing in enumerate(items):
                if existing.id == territory.id:
                    items[i] = copy.deepcopy(territory)
                    return
            new = copy.deepcopy(territory)
            if territory.kind == TERRITORY_MEDICAL_CENTER:
                used = [int(t.id[3:]) for t in items if t.id.startswith("mc_") and t.id[3:].isdigit()]
                new.id = f"mc_{_next_id(used)}"
            items.append(new)

        return self._transition(f"save {territory.kind} {territory.name!r}", apply)

    def delete_territory(self, kind: str, territory_id: str) -> "AppState":
        def apply(d: "AppState"):
            if kind == TERRITORY_MEDICAL_CENTER:
                d.medical_centers = [t for t in d.medical_centers if t.id != territory_id]
            else:
                d.provinces = [t for t in d.provinces if t.id != territory_id]

        return self._transition(f"delete {kind} {territory_id}", apply)

    def assign_territory(self, kind: str, territory_id: str, employee_id: Optional[int]) -> "AppState":
        def apply(d: "AppState"):
            territory = next((t for t in d._territory_list(kind) if t.id == territory_id), None)
            if territory:
                territory.assigned_to = employee_id

        return self._transition(f"assign {kind} {territory_id} to {employee_id}", apply)

    # --- Market data ---------------------------------------------------------

    def update_market_data(
        self,
        product_id: int,
        year: int,
        size: float,
        scope: str = MARKET_SCOPE_NATIONAL
    ) -> "AppState":
        _raise_if(_validator.validate_market_size(scope, size))

        def apply(d: "AppState"):
            data = d.tehran_market_data if scope == MARKET_SCOPE_TEHRAN else d.market_data
            data.setdefault(product_id, {})[year] = size

        return self._transition(f"update {scope} market size {product_id}/{year}", apply)

    # --- Sales ledger --------------------------------------------------------

    def save_sales_target_data(
        self,
        employee_id: int,
        period: Union[Period, str],
        product_id: int,
        field_name: str,
        value: Optional[float]
    ) -> "AppState":
        """Set the target or actual of a ledger entry, creating it on first write."""
        _raise_if(_validator.validate_target_field(field_name, value))
        key = str(Period.parse(period))

        def apply(d: "AppState"):
            periods = d.sales_targets.setdefault(employee_id, {})
            products = periods.setdefault(key, {})
            entry = products.setdefault(product_id, SalesTargetEntry())
            setattr(entry, field_name, value)

        return self._transition(f"save {field_name} {key} for employee {employee_id}", apply)

    # --- Planner -------------------------------------------------------------

    def update_sales_config(self, **changes) -> "AppState":
        unknown = [k for k in changes if not hasattr(self.sales_config, k)]
        _raise_if([f"Unknown sales config field: {k}" for k in unknown])

        def apply(d: "AppState"):
            for k, v in changes.items():
                setattr(d.sales_config, k, v)

        return self._transition("update sales config", apply)

    def update_planner_state(self, unknown_variable: Optional[str] = None, **inputs) -> "AppState":
        errors = []
        if unknown_variable is not None:
            errors.extend(_validator.validate_unknown_variable(unknown_variable))
        errors.extend(f"Unknown planner input: {k}" for k in inputs if not hasattr(self.planner_state.inputs, k))
        _raise_if(errors)

        def apply(d: "AppState"):
            if unknown_variable is not None:
                d.planner_state.unknown_variable = unknown_variable
            for k, v in inputs.items():
                setattr(d.planner_state.inputs, k, v)

        return self._transition("update planner state", apply)


# =============================================================================
# SERIALIZATION HELPERS
# =============================================================================

def _ledger_from_dict(data: Dict[str, Any]) -> SalesLedger:
    ledger: SalesLedger = {}
    for emp_id, periods in data.items():
        ledger[int(emp_id)] = {
            str(period): {
                int(pid): SalesTargetEntry(
                    target=entry.get("target") or 0,
                    actual=entry.get("actual"),
                )
                for pid, entry in products.items()
            }
            for period, products in periods.items()
        }
    return ledger


def _market_from_dict(data: Dict[str, Any]) -> MarketData:
    return {
        int(pid): {int(year): size for year, size in years.items()}
        for pid, years in data.items()
    }


def _known(cls, data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in (data or {}).items() if k in names}
