# tests/test_engine.py
import logging

import pytest

from config.models import SimulatorParameters
from config.scenarios import get_scenario
from simulation.engine import compute_budget, session_driven_items
from utils.exceptions import ParameterValidationError


def test_base_case_capex():
    capex = compute_budget(SimulatorParameters()).capex
    assert capex.construction == pytest.approx(1_540_000)
    assert capex.av_system == pytest.approx(90_000)
    assert capex.equipment == pytest.approx(167_500)
    assert capex.furniture == pytest.approx(130_000)
    assert capex.soft_costs == pytest.approx(481_875)
    assert capex.contingency == pytest.approx(240_937.5)
    assert capex.total == pytest.approx(2_650_312.5)
    assert capex.existing_credits == pytest.approx(100_000)
    assert capex.net == pytest.approx(2_550_312.5)


def test_base_case_opex():
    opex = compute_budget(SimulatorParameters()).opex
    assert opex.staffing == pytest.approx(255_500)
    assert opex.faculty_development == pytest.approx(18_000)
    assert opex.maintenance == pytest.approx(20_100)
    assert opex.consumables == pytest.approx(24_000)
    assert opex.utilities == pytest.approx(9_000)
    assert opex.software == pytest.approx(12_000)
    assert opex.refresh == pytest.approx(38_625)
    assert opex.annual == pytest.approx(359_225)
    assert opex.monthly == pytest.approx(359_225 / 12)


def test_base_case_five_year():
    five = compute_budget(SimulatorParameters()).five_year
    assert len(five.year_by_year) == 5
    assert five.total_capex == pytest.approx(2_550_312.5)
    assert five.total_opex == pytest.approx(1_907_174.311347, abs=1e-6)
    assert five.total_cost == pytest.approx(4_457_486.811347, abs=1e-6)

    years = five.year_by_year
    assert [y.label for y in years] == ["Year 1", "Year 2", "Year 3", "Year 4", "Year 5"]
    assert years[0].capex == pytest.approx(2_550_312.5)
    assert all(y.capex == 0 for y in years[1:])
    assert years[-1].cumulative_total == pytest.approx(five.total_cost)


def test_line_items_sum_to_totals():
    results = compute_budget(SimulatorParameters(opex_model="sessions-based", cost_region="high-cost"))
    capex, opex = results.capex, results.opex
    assert sum(i.amount for i in capex.line_items) == pytest.approx(capex.net)
    assert sum(i.amount for i in opex.line_items) == pytest.approx(opex.annual)
    assert capex.construction + capex.equipment + capex.furniture + capex.av_system \
        + capex.soft_costs + capex.contingency == pytest.approx(capex.total)
    assert [i.id for i in opex.line_items] == [
        "staffing", "faculty-development", "maintenance", "consumables",
        "utilities", "software", "refresh-reserve",
    ]


def test_sessions_based_consumables():
    results = compute_budget(SimulatorParameters(opex_model="sessions-based"))
    assert results.opex.consumables == pytest.approx(64_800)
    assert results.opex.utilities == pytest.approx(21_600)


def test_session_growth_only_in_sessions_based_mode():
    room = compute_budget(SimulatorParameters(inflation_percent=0))
    assert session_driven_items(SimulatorParameters()) == ()
    assert room.five_year.year_by_year[4].opex == pytest.approx(room.opex.annual)

    sessions = compute_budget(SimulatorParameters(inflation_percent=0, opex_model="sessions-based"))
    year5 = sessions.five_year.year_by_year[4]
    growth = 1.05 ** 4
    expected = sessions.opex.annual + (64_800 + 21_600) * (growth - 1)
    assert year5.opex == pytest.approx(expected)
    assert year5.sessions_per_year == pytest.approx(1440 * growth)


def test_unit_metrics():
    m = compute_budget(SimulatorParameters()).metrics
    assert m.annual_sessions == 1440
    assert m.total_rooms == 6
    assert m.cost_per_session == pytest.approx(359_225 / 1440)
    assert m.cost_per_learner_hour == pytest.approx(359_225 / (1440 * 8))
    assert m.cost_per_sf == pytest.approx(2_550_312.5 / 4000)
    assert m.cost_per_room == pytest.approx(2_550_312.5 / 6)


def test_zero_sessions_reports_zero_unit_costs(caplog):
    with caplog.at_level(logging.WARNING):
        results = compute_budget(SimulatorParameters(sessions_per_month=0))
    assert results.metrics.cost_per_session == 0
    assert results.metrics.cost_per_learner_hour == 0
    assert all(y.cost_per_session == 0 for y in results.five_year.year_by_year)
    assert "No sessions scheduled" in caplog.text


def test_zero_floor_area_and_sessions_report_zero_unit_costs():
    metrics = compute_budget(SimulatorParameters(floor_area=0, sessions_per_month=0)).metrics
    assert metrics.cost_per_sf == 0
    assert metrics.cost_per_session == 0
    assert metrics.cost_per_room > 0


@pytest.mark.parametrize("region, factor", [("high-cost", 1.3), ("low-cost", 0.85)])
def test_region_scales_construction(region, factor):
    base = compute_budget(SimulatorParameters()).capex.construction
    scaled = compute_budget(SimulatorParameters(cost_region=region)).capex.construction
    assert scaled == pytest.approx(base * factor)


@pytest.mark.parametrize("field, low, high", [
    ("sim_rooms", 2, 4),
    ("floor_area", 3000, 6000),
    ("high_fidelity_manikins", 1, 3),
    ("contingency_percent", 5, 15),
])
def test_more_inputs_cost_more(field, low, high):
    a = compute_budget(SimulatorParameters().with_updates(**{field: low}))
    b = compute_budget(SimulatorParameters().with_updates(**{field: high}))
    assert b.capex.net > a.capex.net
    assert b.five_year.total_cost > a.five_year.total_cost


def test_compute_budget_is_repeatable():
    params = SimulatorParameters(av_tier="premium", quality_level="premium")
    assert compute_budget(params).to_dict() == compute_budget(params).to_dict()


def test_invalid_parameters_rejected():
    with pytest.raises(ParameterValidationError) as exc:
        compute_budget(SimulatorParameters(floor_area=float("nan"), core_fte="two"))
    assert len(exc.value.errors) == 2
    assert "floor_area" in str(exc.value)


def test_more_sim_rooms_never_lowers_opex():
    prev = compute_budget(SimulatorParameters(sim_rooms=1))
    for rooms in range(2, 9):
        cur = compute_budget(SimulatorParameters(sim_rooms=rooms))
        assert cur.opex.staffing >= prev.opex.staffing
        assert cur.opex.annual >= prev.opex.annual
        prev = cur


@pytest.mark.parametrize("preset", ["budget", "enhanced", "expansion"])
def test_net_is_total_less_credits(preset):
    capex = compute_budget(get_scenario(preset).parameters).capex
    assert capex.net == pytest.approx(capex.total - capex.existing_credits)
    assert capex.net <= capex.total
