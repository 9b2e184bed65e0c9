# visualization/__init__.py
"""Visualization and chart generation module."""

from .charts import (
    FigureCapture,
    create_safe_heatmap,
    capex_chart_data,
    opex_chart_data,
    five_year_chart_data,
    comparison_chart_data,
    plot_capex_breakdown,
    plot_five_year_projection,
    plot_scenario_comparison,
    plot_roi_timeline,
    render_all_figures
)

__all__ = [
    'FigureCapture',
    'create_safe_heatmap',
    'capex_chart_data',
    'opex_chart_data',
    'five_year_chart_data',
    'comparison_chart_data',
    'plot_capex_breakdown',
    'plot_five_year_projection',
    'plot_scenario_comparison',
    'plot_roi_timeline',
    'render_all_figures'
]
