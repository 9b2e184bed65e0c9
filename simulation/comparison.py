#!/usr/bin/env python3
"""
Scenario comparator: prices named presets against the current parameters.
"""

import logging
from dataclasses import dataclass
from typing import List, Iterable

from config.models import Scenario, SimulatorParameters, ProjectParameters
from simulation.capex_model import calculate_capex
from simulation.engine import compute_budget
from simulation.results import BudgetResults, CapexResult

log = logging.getLogger(__name__)


@dataclass
class ScenarioComparison:
    scenario: Scenario
    results: BudgetResults
    delta_from_current: float  # 5-year total cost, positive = costlier than current


@dataclass
class CapexScenarioComparison:
    scenario: Scenario
    results: CapexResult
    delta_from_current: float  # total project cost


def compare_scenarios(current: SimulatorParameters,
                      scenarios: Iterable[Scenario]) -> List[ScenarioComparison]:
    """
    Compare budget presets against the current parameter set.

    Args:
        current: Parameters currently loaded in the simulator
        scenarios: Presets to price (each carries a complete parameter set)

    Returns:
        One comparison per scenario, in input order
    """
    baseline = compute_budget(current).five_year.total_cost
    comparisons = []
    for scenario in scenarios:
        results = compute_budget(scenario.parameters)
        delta = results.five_year.total_cost - baseline
        log.debug("Scenario %s: 5-year %.2f (delta %+.2f)", scenario.id,
                  results.five_year.total_cost, delta)
        comparisons.append(ScenarioComparison(scenario, results, delta))
    return comparisons


def compare_capex_scenarios(current: ProjectParameters,
                            scenarios: Iterable[Scenario]) -> List[CapexScenarioComparison]:
    """Same diffing for the CAPEX model, on total project cost."""
    baseline = calculate_capex(current).total_project_cost
    comparisons = []
    for scenario in scenarios:
        results = calculate_capex(scenario.parameters)
        comparisons.append(CapexScenarioComparison(
            scenario, results, results.total_project_cost - baseline))
    return comparisons


def cheapest(comparisons: List[ScenarioComparison]) -> ScenarioComparison:
    """Scenario with the lowest 5-year total cost."""
    if not comparisons:
        raise ValueError("No scenarios to compare")
    return min(comparisons, key=lambda c: c.results.five_year.total_cost)
