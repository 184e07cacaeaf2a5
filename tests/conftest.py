import pytest

from kpi_dashboard.targeting import (
    Employee,
    Kpi,
    KpiConfig,
    Product,
    SalesTargetEntry,
    Territory,
    TERRITORY_MEDICAL_CENTER,
)


@pytest.fixture
def kpi_configs():
    return {
        "sales": KpiConfig(name="Sales", max_points=40, formula="goal_achievement"),
        "leads": KpiConfig(name="Leads", max_points=20, formula="goal_achievement"),
        "conversion": KpiConfig(name="Conversion", max_points=20, formula="conversion_from_leads"),
        "procurement_error": KpiConfig(name="Procurement Error", max_points=-2, formula="direct_penalty"),
    }


@pytest.fixture
def scored_employee():
    # sales capped at 40, leads 20, conversion 20, penalty -6 => 74
    return Employee(
        id=1,
        name="Sara Hosseini",
        department="Sales",
        kpis=[
            Kpi(id=1, type="sales", target=100, scores={"Farvardin 1404": 150}),
            Kpi(id=2, type="leads", target=50, scores={"Farvardin 1404": 50}),
            Kpi(id=3, type="conversion", scores={"Farvardin 1404": 10}),
            Kpi(id=4, type="procurement_error", scores={"Farvardin 1404": 3}),
        ],
    )


@pytest.fixture
def product():
    return Product(id=1, name="Biopsy Needle", price=1000)


@pytest.fixture
def employees():
    return [
        Employee(id=1, name="Sara Hosseini", target_acquisition_rate=100),
        Employee(id=2, name="Amir Dabiri", target_acquisition_rate=20),
        Employee(id=3, name="No Territory", target_acquisition_rate=50),
    ]


@pytest.fixture
def territories():
    return [
        Territory(id="ES", name="Isfahan", market_share={1: 2}, assigned_to=1),
        Territory(id="FA", name="Fars", market_share={1: 3}, assigned_to=1),
        Territory(id="KR", name="Khorasan Razavi", market_share={1: 10}, assigned_to=2),
        Territory(id="IL", name="Ilam", market_share={1: 1}, assigned_to=None),
        Territory(
            id="mc_1", name="Imam Hospital", market_share={1: 4},
            assigned_to=999, kind=TERRITORY_MEDICAL_CENTER,
        ),
    ]


@pytest.fixture
def ledger():
    return {
        7: {
            "Farvardin 1404": {1: SalesTargetEntry(target=100, actual=80)},
            "Ordibehesht 1404": {1: SalesTargetEntry(target=100, actual=None)},
        }
    }
