import pytest

from kpi_dashboard.targeting import (
    Employee,
    Kpi,
    KpiConfig,
    Period,
    final_score_of,
    kpi_breakdown,
    performance_band,
    score_of,
    score_table,
    score_trend,
    team_summary,
)

PERIOD = "Farvardin 1404"


class TestScoreOf:
    def test_goal_achievement_is_capped_at_max_points(self, scored_employee, kpi_configs):
        sales = scored_employee.kpis[0]
        assert score_of(sales, PERIOD, scored_employee.kpis, kpi_configs) == 40

    def test_goal_achievement_is_proportional_below_target(self, kpi_configs):
        kpi = Kpi(id=1, type="sales", target=200, scores={PERIOD: 50})
        assert score_of(kpi, PERIOD, [kpi], kpi_configs) == pytest.approx(10)

    @pytest.mark.parametrize("target", [None, 0])
    def test_goal_achievement_without_target_scores_zero(self, kpi_configs, target):
        kpi = Kpi(id=1, type="sales", target=target, scores={PERIOD: 50})
        assert score_of(kpi, PERIOD, [kpi], kpi_configs) == 0

    def test_unconfigured_kpi_scores_zero(self, kpi_configs):
        kpi = Kpi(id=1, type="deleted_type", target=10, scores={PERIOD: 10})
        assert score_of(kpi, PERIOD, [kpi], kpi_configs) == 0

    def test_unrecorded_period_reads_as_zero(self, scored_employee, kpi_configs):
        sales = scored_employee.kpis[0]
        assert score_of(sales, "Tir 1404", scored_employee.kpis, kpi_configs) == 0

    def test_direct_penalty_is_linear_and_uncapped(self, kpi_configs):
        kpi = Kpi(id=1, type="procurement_error", scores={PERIOD: 100})
        assert score_of(kpi, PERIOD, [kpi], kpi_configs) == -200

    def test_conversion_uses_twenty_percent_of_leads(self, scored_employee, kpi_configs):
        conversion = scored_employee.kpis[2]
        assert score_of(conversion, PERIOD, scored_employee.kpis, kpi_configs) == pytest.approx(20)

    def test_conversion_partial(self, kpi_configs):
        leads = Kpi(id=1, type="leads", target=100, scores={PERIOD: 100})
        conversion = Kpi(id=2, type="conversion", scores={PERIOD: 5})
        # 5 / (0.2 * 100) = 25% of 20 points
        assert score_of(conversion, PERIOD, [leads, conversion], kpi_configs) == pytest.approx(5)

    def test_conversion_without_leads_scores_zero(self, kpi_configs):
        conversion = Kpi(id=2, type="conversion", scores={PERIOD: 5})
        leads = Kpi(id=1, type="leads", target=100, scores={})
        assert score_of(conversion, PERIOD, [conversion], kpi_configs) == 0
        assert score_of(conversion, PERIOD, [leads, conversion], kpi_configs) == 0

    def test_accepts_period_objects(self, scored_employee, kpi_configs):
        sales = scored_employee.kpis[0]
        assert score_of(sales, Period("Farvardin", 1404), scored_employee.kpis, kpi_configs) == 40


class TestFinalScore:
    def test_sums_kpi_scores(self, scored_employee, kpi_configs):
        assert final_score_of(scored_employee, PERIOD, kpi_configs) == pytest.approx(74)

    def test_floor_is_zero(self, kpi_configs):
        emp = Employee(id=1, name="A", kpis=[Kpi(id=1, type="procurement_error", scores={PERIOD: 50})])
        assert final_score_of(emp, PERIOD, kpi_configs) == 0

    def test_ceiling_is_one_hundred(self):
        configs = {
            "a": KpiConfig(name="A", max_points=80, formula="goal_achievement"),
            "b": KpiConfig(name="B", max_points=80, formula="goal_achievement"),
        }
        emp = Employee(id=1, name="A", kpis=[
            Kpi(id=1, type="a", target=1, scores={PERIOD: 1}),
            Kpi(id=2, type="b", target=1, scores={PERIOD: 1}),
        ])
        assert final_score_of(emp, PERIOD, configs) == 100

    def test_employee_without_kpis_scores_zero(self, kpi_configs):
        assert final_score_of(Employee(id=1, name="A"), PERIOD, kpi_configs) == 0


class TestReports:
    def test_kpi_breakdown_skips_unconfigured(self, scored_employee, kpi_configs):
        scored_employee.kpis.append(Kpi(id=9, type="deleted_type", scores={PERIOD: 1}))
        rows = kpi_breakdown(scored_employee, PERIOD, kpi_configs)
        assert [r['kpi_type'] for r in rows] == ["sales", "leads", "conversion", "procurement_error"]
        assert rows[0]['score'] == 40

    def test_kpi_breakdown_marks_unrecorded_actual(self, scored_employee, kpi_configs):
        rows = kpi_breakdown(scored_employee, "Tir 1404", kpi_configs)
        assert all(r['actual'] is None for r in rows)

    def test_performance_band(self):
        assert performance_band(85, 80, 50) == 'high'
        assert performance_band(80, 80, 50) == 'high'
        assert performance_band(60, 80, 50) == 'medium'
        assert performance_band(49.9, 80, 50) == 'low'


class TestTeamAggregations:
    @pytest.fixture
    def team(self, scored_employee):
        star = Employee(id=2, name="Amir", kpis=[Kpi(id=5, type="sales", target=1, scores={PERIOD: 5})])
        star.kpis.append(Kpi(id=6, type="leads", target=1, scores={PERIOD: 5}))
        star.kpis.append(Kpi(id=7, type="conversion", scores={PERIOD: 1}))
        star.kpis.append(Kpi(id=8, type="procurement_error", scores={}))
        idle = Employee(id=3, name="Hamid")
        # scores: 74, 80, 0
        return [scored_employee, star, idle]

    def test_team_summary(self, team, kpi_configs):
        summary = team_summary(team, PERIOD, kpi_configs, high_threshold=80, low_threshold=50)
        assert summary['count'] == 3
        assert summary['average'] == pytest.approx((74 + 80 + 0) / 3)
        assert summary['high'] == 1
        assert summary['low'] == 1

    def test_team_summary_empty(self, kpi_configs):
        assert team_summary([], PERIOD, kpi_configs) == {'average': 0, 'high': 0, 'low': 0, 'count': 0}

    def test_score_trend_window_ends_at_period(self, team, kpi_configs):
        trend = score_trend(team, "Ordibehesht 1404", kpi_configs, periods=6)
        assert len(trend) == 6
        assert trend['period'].tolist()[0] == "Azar 1403"
        assert trend['period'].tolist()[-1] == "Ordibehesht 1404"
        farvardin = trend[trend['period'] == PERIOD].iloc[0]
        assert farvardin['average_score'] == pytest.approx(154 / 3)

    def test_score_table_sorted_by_score(self, team, kpi_configs):
        table = score_table(team, PERIOD, kpi_configs, sort='score_desc', high_threshold=80, low_threshold=50)
        assert table['employee_id'].tolist() == [2, 1, 3]
        assert table['band'].tolist() == ['high', 'medium', 'low']

    def test_score_table_search_is_case_insensitive(self, team, kpi_configs):
        table = score_table(team, PERIOD, kpi_configs, search="AMIR")
        assert table['name'].tolist() == ["Amir"]

    def test_score_table_no_match(self, team, kpi_configs):
        table = score_table(team, PERIOD, kpi_configs, search="nobody")
        assert table.empty
        assert 'final_score' in table.columns
