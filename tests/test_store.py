import math

import pytest

from kpi_dashboard.targeting import (
    AppState,
    MARKET_SCOPE_TEHRAN,
    Product,
    TERRITORY_MEDICAL_CENTER,
    TERRITORY_PROVINCE,
    Territory,
    UNKNOWN_TARGET_CUSTOMERS,
)


@pytest.fixture
def state():
    return AppState.default()


class TestDefaults:
    def test_seed_data(self, state):
        assert len(state.employees) == 3
        assert len(state.products) == 3
        assert len(state.provinces) == 30
        assert state.medical_centers == []
        assert set(state.kpi_configs) == {
            "sales", "leads", "conversion", "procurement_error", "dissatisfaction_error"
        }
        assert state.available_years == [1404]

    def test_provinces_start_unassigned(self, state):
        assert all(p.assigned_to is None for p in state.provinces)
        assert all(p.kind == TERRITORY_PROVINCE for p in state.provinces)


class TestTransitions:
    def test_original_state_is_not_mutated(self, state):
        new_state = state.add_employee("Reza", "Rep", "Sales")

        assert len(state.employees) == 3
        assert len(new_state.employees) == 4
        assert new_state is not state

    def test_new_employee_gets_next_id_and_default_rate(self, state):
        new_state = state.add_employee("Reza")
        emp = new_state.employees[-1]

        assert emp.id == 4
        assert emp.target_acquisition_rate == 10

    def test_invalid_employee_is_rejected(self, state):
        with pytest.raises(ValueError):
            state.add_employee("   ")
        with pytest.raises(ValueError):
            state.add_employee("Reza", target_acquisition_rate=-1)

    def test_update_employee(self, state):
        new_state = state.update_employee(2, "Sara H.", "Director", "Sales", 25)
        emp = new_state.find_employee(2)

        assert emp.name == "Sara H."
        assert emp.target_acquisition_rate == 25
        assert state.find_employee(2).name == "Sara Hosseini"

    def test_delete_employee_releases_territories(self, state):
        state = state.save_territory(Territory(
            id="", name="Imam Hospital", market_share={1: 3}, kind=TERRITORY_MEDICAL_CENTER
        ))
        state = state.assign_territory(TERRITORY_PROVINCE, "KR", 2)
        state = state.assign_territory(TERRITORY_MEDICAL_CENTER, "mc_1", 2)

        new_state = state.delete_employee(2)

        assert new_state.find_employee(2) is None
        assert all(t.assigned_to != 2 for t in new_state.territories())
        assert next(t for t in state.provinces if t.id == "KR").assigned_to == 2

    def test_add_year_keeps_descending_order(self, state):
        new_state = state.add_year(1406).add_year(1405).add_year(1405)
        assert new_state.available_years == [1406, 1405, 1404]

    @pytest.mark.parametrize("year", [140, 14055, "1405", True])
    def test_invalid_year_is_rejected(self, state, year):
        with pytest.raises(ValueError):
            state.add_year(year)


class TestKpiTransitions:
    def test_kpi_ids_are_unique_across_employees(self, state):
        state = state.add_kpi_to_employee(1, "sales", 100)
        state = state.add_kpi_to_employee(2, "leads", 50)

        assert state.find_employee(1).kpis[0].id == 1
        assert state.find_employee(2).kpis[0].id == 2

    def test_record_and_clear_score(self, state):
        state = state.add_kpi_to_employee(1, "sales", 100)
        state = state.record_score(1, 1, "Farvardin 1404", 80)
        assert state.find_employee(1).kpis[0].scores == {"Farvardin 1404": 80}

        cleared = state.record_score(1, 1, "Farvardin 1404", None)
        assert cleared.find_employee(1).kpis[0].scores == {}

        cleared = state.record_score(1, 1, "Farvardin 1404", math.nan)
        assert cleared.find_employee(1).kpis[0].scores == {}

    def test_blank_note_removes_it(self, state):
        state = state.save_note(1, "Tir 1404", "Good month")
        assert state.find_employee(1).notes == {"Tir 1404": "Good month"}

        state = state.save_note(1, "Tir 1404", "   ")
        assert state.find_employee(1).notes == {}

    def test_invalid_period_is_rejected(self, state):
        with pytest.raises(ValueError):
            state.save_note(1, "Smarch 1404", "note")

    def test_delete_kpi_config_cascades(self, state):
        state = state.add_kpi_to_employee(1, "sales", 100)
        state = state.add_kpi_to_employee(1, "leads", 50)

        new_state = state.delete_kpi_config("sales")

        assert "sales" not in new_state.kpi_configs
        assert [k.type for k in new_state.find_employee(1).kpis] == ["leads"]

    def test_invalid_formula_is_rejected(self, state):
        with pytest.raises(ValueError):
            state.save_kpi_config("calls", "Calls", 10, "average")

    def test_save_kpi_config(self, state):
        new_state = state.save_kpi_config("calls", "Calls", 10, "goal_achievement")
        assert new_state.kpi_configs["calls"].max_points == 10


class TestCatalogTransitions:
    def test_save_product_adds_or_replaces(self, state):
        added = state.save_product(Product(id=0, name="Gel", price=5000))
        assert added.products[-1].id == 4

        replaced = added.save_product(Product(id=4, name="Gel XL", price=6000))
        assert len(replaced.products) == 4
        assert replaced.find_product(4).name == "Gel XL"

    def test_negative_price_is_rejected(self, state):
        with pytest.raises(ValueError):
            state.save_product(Product(id=0, name="Gel", price=-1))

    def test_delete_product(self, state):
        assert state.delete_product(3).find_product(3) is None

    def test_medical_center_ids(self, state):
        center = Territory(id="", name="Imam Hospital", kind=TERRITORY_MEDICAL_CENTER)
        state = state.save_territory(center).save_territory(center)

        assert [t.id for t in state.medical_centers] == ["mc_1", "mc_2"]

        state = state.delete_territory(TERRITORY_MEDICAL_CENTER, "mc_1")
        assert [t.id for t in state.medical_centers] == ["mc_2"]

    def test_ledger_entry_created_on_first_write(self, state):
        state = state.save_sales_target_data(2, "Mehr 1404", 1, "actual", 12)
        entry = state.sales_targets[2]["Mehr 1404"][1]

        assert entry.target == 0
        assert entry.actual == 12

    def test_invalid_ledger_field_is_rejected(self, state):
        with pytest.raises(ValueError):
            state.save_sales_target_data(2, "Mehr 1404", 1, "forecast", 12)


class TestQueries:
    def test_national_auto_targets(self, state):
        state = state.update_market_data(1, 1404, 1000)
        state = state.assign_territory(TERRITORY_PROVINCE, "KR", 2)

        results = state.auto_targets(1, 1404)

        assert [r.employee_id for r in results] == [2]
        assert results[0].territories[0].territory_name == "Khorasan Razavi"

    def test_no_market_data_means_no_targets(self, state):
        state = state.assign_territory(TERRITORY_PROVINCE, "KR", 2)
        assert state.auto_targets(1, 1404) == []

    def test_tehran_scope_uses_medical_centers(self, state):
        state = state.save_territory(Territory(
            id="", name="Imam Hospital", market_share={1: 10}, kind=TERRITORY_MEDICAL_CENTER
        ))
        state = state.assign_territory(TERRITORY_MEDICAL_CENTER, "mc_1", 1)
        state = state.assign_territory(TERRITORY_PROVINCE, "KR", 2)
        state = state.update_market_data(1, 1404, 500, scope=MARKET_SCOPE_TEHRAN)

        results = state.auto_targets(1, 1404, scope=MARKET_SCOPE_TEHRAN)

        assert [r.employee_id for r in results] == [1]
        assert results[0].territories[0].potential_units == pytest.approx(50)
        # national market was never entered
        assert state.auto_targets(1, 1404) == []

    def test_planner_metrics(self, state):
        metrics = state.planner_metrics()
        assert metrics.calculated_value == pytest.approx(450 * 550 / 70800)
        assert metrics.num_salespeople == metrics.calculated_value

        state = state.update_planner_state(UNKNOWN_TARGET_CUSTOMERS, num_salespeople=3)
        metrics = state.planner_metrics()
        assert metrics.calculated_value == pytest.approx(70800 / 550 * 3)
        assert metrics.num_salespeople == 3

    def test_invalid_planner_variable_is_rejected(self, state):
        with pytest.raises(ValueError):
            state.update_planner_state("revenue")
        with pytest.raises(ValueError):
            state.update_planner_state(UNKNOWN_TARGET_CUSTOMERS, budget=10)

    def test_unknown_sales_config_field_is_rejected(self, state):
        with pytest.raises(ValueError):
            state.update_sales_config(hours_per_week=40)


class TestSerialization:
    def test_from_empty_dict_uses_defaults(self):
        state = AppState.from_dict({})
        assert len(state.provinces) == 30
        assert state.available_years == [1404]

    def test_round_trip_keeps_integer_keys(self, state):
        state = state.save_sales_target_data(2, "Mehr 1404", 1, "target", 30)
        state = state.update_market_data(1, 1404, 1000)
        state = state.assign_territory(TERRITORY_PROVINCE, "KR", 2)

        data = state.to_dict()
        assert "2" in data["sales_targets"]

        restored = AppState.from_dict(data)
        assert restored.sales_targets[2]["Mehr 1404"][1].target == 30
        assert restored.market_data == {1: {1404: 1000}}
        assert restored.provinces[0].market_share == state.provinces[0].market_share
        assert restored.auto_targets(1, 1404)[0].annual == state.auto_targets(1, 1404)[0].annual

    def test_unknown_keys_are_ignored(self):
        state = AppState.from_dict({"sales_config": {"bogus": 1, "commission_rate": 50}})
        assert state.sales_config.commission_rate == 50
