#!/usr/bin/env python3
"""
Scenario definitions for the simulation center planner.
Predefined budget-simulator presets and CAPEX-model build options.
"""

from typing import List

from config.models import Scenario, SimulatorParameters, ProjectParameters
from utils.exceptions import UnknownScenarioError

# Budget simulator presets; unspecified fields keep the defaults
SCENARIOS = [
    Scenario(
        id="base",
        name="Base Case",
        description="3-room center with standard equipment",
        parameters=SimulatorParameters(),
    ),
    Scenario(
        id="enhanced",
        name="Enhanced",
        description="5-room center with premium A/V",
        parameters=SimulatorParameters(
            floor_area=6000, sim_rooms=5, control_rooms=2, debrief_rooms=3,
            high_fidelity_manikins=4, task_trainers=10, av_tier="premium",
            quality_level="standard", core_fte=3.5,
        ),
    ),
    Scenario(
        id="budget",
        name="Budget",
        description="2-room center with basic setup",
        parameters=SimulatorParameters(
            floor_area=2500, sim_rooms=2, control_rooms=1, debrief_rooms=1,
            high_fidelity_manikins=1, task_trainers=3, av_tier="basic",
            quality_level="budget", core_fte=2.0,
        ),
    ),
    Scenario(
        id="expansion",
        name="Full Expansion",
        description="8-room flagship center",
        parameters=SimulatorParameters(
            floor_area=10_000, sim_rooms=8, control_rooms=4, debrief_rooms=4,
            high_fidelity_manikins=6, task_trainers=20, av_tier="premium",
            quality_level="premium", core_fte=5.0,
        ),
    ),
]

# CAPEX model build options
CAPEX_SCENARIOS = [
    Scenario(
        id="bhl-base",
        name="BHL Base Build",
        description="Current plan: 3 sim rooms in hospital renovation",
        parameters=ProjectParameters(),
    ),
    Scenario(
        id="bhl-enhanced",
        name="BHL Enhanced Build",
        description="Expanded plan: 5 sim rooms with premium equipment",
        parameters=ProjectParameters(
            floor_area=6000, sim_rooms=5, control_rooms=2, debrief_rooms=3, support_spaces=4,
            quality_level="premium",
        ),
    ),
    Scenario(
        id="budget-option",
        name="Budget Build",
        description="Minimal viable center: 2 sim rooms, budget equipment",
        parameters=ProjectParameters(
            floor_area=2500, sim_rooms=2, control_rooms=1, debrief_rooms=1, support_spaces=2,
            quality_level="budget",
        ),
    ),
    Scenario(
        id="new-building",
        name="New Building Option",
        description="Clean shell build-out without hospital constraints",
        parameters=ProjectParameters(
            floor_area=5000, sim_rooms=4, construction_type="clean-shell",
        ),
    ),
]


def _find(scenarios: List[Scenario], scenario_id: str) -> Scenario:
    for scenario in scenarios:
        if scenario.id == scenario_id:
            return scenario
    raise UnknownScenarioError(
        f"Unknown scenario: {scenario_id}. Available: {[s.id for s in scenarios]}")


def get_scenario(scenario_id: str) -> Scenario:
    """Look up a budget simulator preset by id."""
    return _find(SCENARIOS, scenario_id)


def get_capex_scenario(scenario_id: str) -> Scenario:
    """Look up a CAPEX model preset by id."""
    return _find(CAPEX_SCENARIOS, scenario_id)


def scenario_names() -> List[str]:
    return [s.name for s in SCENARIOS]


def scenario_from_parameters(params: SimulatorParameters, name: str,
                             existing: List[Scenario] = (), description: str = "") -> Scenario:
    """
    Wrap the current parameters as a named scenario.

    The id is a slug of the name, suffixed when it collides with one of
    the presets or with an already saved scenario.
    """
    name = name.strip() or "Custom"
    slug = "-".join(name.lower().split())
    taken = {s.id for s in SCENARIOS} | {s.id for s in existing}
    scenario_id, n = slug, 2
    while scenario_id in taken:
        scenario_id, n = f"{slug}-{n}", n + 1
    return Scenario(id=scenario_id, name=name, description=description or "Saved from the dashboard",
                    parameters=params)
