# analysis/__init__.py
"""Analysis and metrics module."""

from .metrics import (
    capex_frame,
    opex_frame,
    projection_frame,
    comparison_frame,
    roi_category_frame,
    compute_budget_kpis,
    assess_benchmarks,
    compute_sensitivity_analysis
)

__all__ = [
    'capex_frame',
    'opex_frame',
    'projection_frame',
    'comparison_frame',
    'roi_category_frame',
    'compute_budget_kpis',
    'assess_benchmarks',
    'compute_sensitivity_analysis'
]
