# ui/__init__.py
"""User interface components module."""

from .components import (
    render_parameter_group,
    render_parameter,
    build_help_text,
    get_default_value,
    render_budget_kpis,
    render_organization_inputs,
    render_roi_summary
)

__all__ = [
    'render_parameter_group',
    'render_parameter',
    'build_help_text',
    'get_default_value',
    'render_budget_kpis',
    'render_organization_inputs',
    'render_roi_summary'
]
