# tests/test_comparison.py
import pytest

from config.models import SimulatorParameters, ProjectParameters
from config.scenarios import SCENARIOS, CAPEX_SCENARIOS, get_scenario
from simulation.comparison import compare_scenarios, compare_capex_scenarios, cheapest


def test_compare_against_base_case():
    comparisons = compare_scenarios(SimulatorParameters(), SCENARIOS)
    assert [c.scenario.id for c in comparisons] == [s.id for s in SCENARIOS]

    by_id = {c.scenario.id: c for c in comparisons}
    assert by_id["base"].delta_from_current == pytest.approx(0)
    assert by_id["budget"].delta_from_current < 0
    assert by_id["enhanced"].delta_from_current > 0
    assert by_id["expansion"].delta_from_current > by_id["enhanced"].delta_from_current


def test_delta_is_relative_to_current_parameters():
    current = get_scenario("expansion").parameters
    comparisons = compare_scenarios(current, SCENARIOS)
    expansion = next(c for c in comparisons if c.scenario.id == "expansion")
    assert expansion.delta_from_current == pytest.approx(0)
    for c in comparisons:
        assert c.delta_from_current == pytest.approx(
            c.results.five_year.total_cost - expansion.results.five_year.total_cost)


def test_cheapest():
    comparisons = compare_scenarios(SimulatorParameters(), SCENARIOS)
    assert cheapest(comparisons).scenario.id == "budget"
    with pytest.raises(ValueError):
        cheapest([])


def test_compare_capex_scenarios():
    comparisons = compare_capex_scenarios(ProjectParameters(), CAPEX_SCENARIOS)
    by_id = {c.scenario.id: c for c in comparisons}
    assert by_id["bhl-base"].delta_from_current == pytest.approx(0)
    assert by_id["bhl-base"].results.total_project_cost == pytest.approx(3_058_125)
    assert by_id["budget-option"].delta_from_current < 0
    assert by_id["bhl-enhanced"].delta_from_current > 0
