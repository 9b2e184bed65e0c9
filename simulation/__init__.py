# simulation/__init__.py
"""Calculation core: CAPEX model, budget simulator, scenarios and ROI."""

from .capex_model import calculate_capex, calculate_net_investment, get_total_existing_assets
from .engine import compute_budget
from .comparison import compare_scenarios, compare_capex_scenarios, ScenarioComparison
from .roi import estimate_roi
from .validation import preflight_validate, planning_warnings, organization_warnings

__all__ = [
    'calculate_capex',
    'calculate_net_investment',
    'get_total_existing_assets',
    'compute_budget',
    'compare_scenarios',
    'compare_capex_scenarios',
    'ScenarioComparison',
    'estimate_roi',
    'preflight_validate',
    'planning_warnings',
    'organization_warnings'
]
