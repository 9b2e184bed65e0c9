# config/__init__.py
"""Configuration module for the simulation center planner."""

from .models import (
    SimulatorParameters,
    ProjectParameters,
    OrganizationInputs,
    Scenario,
    save_parameters,
    load_parameters
)
from .parameters import (
    SIMULATOR_PARAM_SPECS,
    PROJECT_PARAM_SPECS,
    SIMULATOR_GROUPS,
    PROJECT_GROUPS,
    clamp_to_spec,
    apply_overrides,
    get_log_level
)
from .scenarios import SCENARIOS, CAPEX_SCENARIOS, get_scenario, get_capex_scenario

__all__ = [
    'SimulatorParameters',
    'ProjectParameters',
    'OrganizationInputs',
    'Scenario',
    'save_parameters',
    'load_parameters',
    'SIMULATOR_PARAM_SPECS',
    'PROJECT_PARAM_SPECS',
    'SIMULATOR_GROUPS',
    'PROJECT_GROUPS',
    'clamp_to_spec',
    'apply_overrides',
    'get_log_level',
    'SCENARIOS',
    'CAPEX_SCENARIOS',
    'get_scenario',
    'get_capex_scenario'
]
