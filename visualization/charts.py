#!/usr/bin/env python3
"""
Chart data and matplotlib figures for the budget dashboard.
"""

import io
import logging
from typing import Dict, List, Optional, Tuple

import matplotlib
import matplotlib.pyplot as plt
from matplotlib.ticker import FuncFormatter
import numpy as np
import pandas as pd
import seaborn as sns

from simulation.results import BudgetResults, ROIResults
from utils.helpers import format_currency

log = logging.getLogger(__name__)

COLORS = {
    "capex": "#3b82f6",
    "opex": "#10b981",
    "staffing": "#8b5cf6",
    "equipment": "#f59e0b",
    "construction": "#06b6d4",
    "maintenance": "#ef4444",
    "software": "#ec4899",
    "other": "#6b7280",
}


def capex_chart_data(results: BudgetResults) -> List[Dict]:
    """CAPEX breakdown rows {name, value, color}; values sum to gross CAPEX."""
    capex = results.capex
    return [
        {"name": "Construction", "value": capex.construction, "color": COLORS["construction"]},
        {"name": "Equipment", "value": capex.equipment, "color": COLORS["equipment"]},
        {"name": "Furniture", "value": capex.furniture, "color": COLORS["staffing"]},
        {"name": "A/V System", "value": capex.av_system, "color": COLORS["software"]},
        {"name": "Soft Costs", "value": capex.soft_costs, "color": COLORS["other"]},
        {"name": "Contingency", "value": capex.contingency, "color": COLORS["maintenance"]},
    ]


def opex_chart_data(results: BudgetResults) -> List[Dict]:
    """Annual OPEX rows {name, value, color}; values sum to annual OPEX."""
    opex = results.opex
    return [
        {"name": "Staffing", "value": opex.staffing, "color": COLORS["staffing"]},
        {"name": "Maintenance", "value": opex.maintenance, "color": COLORS["maintenance"]},
        {"name": "Consumables", "value": opex.consumables, "color": COLORS["equipment"]},
        {"name": "Software", "value": opex.software, "color": COLORS["software"]},
        {"name": "Utilities", "value": opex.utilities, "color": COLORS["construction"]},
        {"name": "Refresh Reserve", "value": opex.refresh, "color": COLORS["other"]},
    ]


def five_year_chart_data(results: BudgetResults) -> List[Dict]:
    return [
        {"name": y.label, "capex": y.capex, "opex": y.opex, "cumulative": y.cumulative_total}
        for y in results.five_year.year_by_year
    ]


def comparison_chart_data(comparisons) -> List[Dict]:
    return [
        {
            "name": c.scenario.name,
            "capex": c.results.capex.net,
            "opex": c.results.five_year.total_opex,
            "total": c.results.five_year.total_cost,
        }
        for c in comparisons
    ]


def _money_axis(ax, axis="y"):
    fmt = FuncFormatter(lambda v, _: format_currency(v))
    (ax.yaxis if axis == "y" else ax.xaxis).set_major_formatter(fmt)


def plot_capex_breakdown(results: BudgetResults, title: str = "CAPEX Breakdown"):
    rows = [r for r in capex_chart_data(results) if r["value"] > 0]
    fig, ax = plt.subplots(figsize=(7, 5))
    ax.pie([r["value"] for r in rows], labels=[r["name"] for r in rows],
           colors=[r["color"] for r in rows], autopct="%1.0f%%", startangle=90)
    ax.set_title(f"{title} ({format_currency(results.capex.total)} gross)")
    ax.axis("equal")
    return fig


def plot_five_year_projection(results: BudgetResults, title: str = "5-Year Cost Projection"):
    """Stacked CAPEX/OPEX bars per year with the cumulative total as a line."""
    data = five_year_chart_data(results)
    labels = [d["name"] for d in data]
    capex = np.array([d["capex"] for d in data])
    opex = np.array([d["opex"] for d in data])

    fig, ax = plt.subplots(figsize=(9, 5))
    ax.bar(labels, capex, color=COLORS["capex"], label="CAPEX")
    ax.bar(labels, opex, bottom=capex, color=COLORS["opex"], label="OPEX")
    ax.plot(labels, [d["cumulative"] for d in data], color="black", marker="o", label="Cumulative")
    _money_axis(ax)
    ax.set_title(title)
    ax.legend()
    return fig


def plot_scenario_comparison(comparisons, title: str = "Scenario Comparison (5-Year Total)"):
    data = comparison_chart_data(comparisons)
    names = [d["name"] for d in data]
    capex = np.array([d["capex"] for d in data])
    opex = np.array([d["opex"] for d in data])

    fig, ax = plt.subplots(figsize=(9, 5))
    ax.barh(names, capex, color=COLORS["capex"], label="CAPEX (net)")
    ax.barh(names, opex, left=capex, color=COLORS["opex"], label="5-year OPEX")
    _money_axis(ax, axis="x")
    ax.set_title(title)
    ax.legend()
    return fig


def scenario_opex_matrix(comparisons) -> pd.DataFrame:
    """Scenario x OPEX category annual amounts."""
    return pd.DataFrame(
        {c.scenario.name: {r["name"]: r["value"] for r in opex_chart_data(c.results)} for c in comparisons}
    ).T


def create_safe_heatmap(data, **kwargs):
    """
    Safely create heatmap, handling empty or invalid data.

    Args:
        data: Data for heatmap
        **kwargs: Additional arguments for seaborn.heatmap ("title" is used
            for the placeholder figure)

    Returns:
        matplotlib axes object
    """
    title = kwargs.pop("title", None)
    data_array = data.values if hasattr(data, "values") else np.array(data)

    message = None
    if data_array.size == 0:
        message = "No data available for heatmap"
    elif np.isnan(data_array.astype(float)).all():
        message = "All data is NaN"

    if message:
        log.warning("%s, drawing placeholder", message)
        plt.figure(figsize=(6, 4))
        plt.text(0.5, 0.5, message, ha="center", va="center", transform=plt.gca().transAxes)
        plt.title(title or "Empty Heatmap")
        return plt.gca()

    plt.figure(figsize=(9, max(3, 0.6 * data_array.shape[0] + 1)))
    ax = sns.heatmap(data, **kwargs)
    if title:
        ax.set_title(title)
    return ax


def plot_roi_timeline(roi: ROIResults, title: str = "Cumulative Cost vs. Savings"):
    """Value timeline; returns None when the estimate has no budget attached."""
    if not roi.value_timeline:
        return None
    years = [f"Year {p.year}" for p in roi.value_timeline]
    fig, ax = plt.subplots(figsize=(9, 5))
    ax.plot(years, [p.cumulative_cost for p in roi.value_timeline], color=COLORS["maintenance"],
            marker="o", label="Cumulative cost")
    ax.plot(years, [p.cumulative_savings for p in roi.value_timeline], color=COLORS["opex"],
            marker="o", label="Cumulative savings")
    ax.axhline(0, color="gray", linewidth=0.8)
    _money_axis(ax)
    ax.set_title(title)
    ax.legend()
    return fig


class FigureCapture:
    """
    Context manager collecting matplotlib figures as PNG bytes.
    Redirects plt.show() to save numbered PNGs and maintains a manifest,
    so the same plotting code feeds both the page and the zip download.
    """

    def __init__(self, title_suffix: str = ""):
        self.title_suffix = title_suffix
        self._orig_show = None
        self.images: List[Tuple[str, bytes]] = []
        self.manifest: List[Dict] = []

    @staticmethod
    def _title_for(fig) -> str:
        parts = []
        if fig._suptitle is not None and fig._suptitle.get_text():
            parts.append(fig._suptitle.get_text())
        parts += [ax.get_title() for ax in fig.axes if ax.get_title()]
        return " | ".join(parts).strip()

    def capture(self, fig=None):
        """Save a figure (the current one by default) and close it."""
        fig = fig if fig is not None else plt.gcf()
        if self.title_suffix and not any(ax.get_title() for ax in fig.get_axes()):
            fig.suptitle(self.title_suffix)
        fig.tight_layout()

        buf = io.BytesIO()
        fig.savefig(buf, dpi=150, bbox_inches="tight", format="png")
        fname = f"fig_{len(self.images) + 1:02d}.png"
        self.images.append((fname, buf.getvalue()))
        self.manifest.append({"file": fname, "title": self._title_for(fig)})
        plt.close(fig)
        return fname

    def __enter__(self):
        matplotlib.use("Agg", force=True)
        self._orig_show = plt.show
        plt.show = lambda *args, **kwargs: self.capture()
        return self

    def __exit__(self, exc_type, exc, tb):
        if self._orig_show:
            plt.show = self._orig_show


def render_all_figures(results: BudgetResults, comparisons=None,
                       roi: Optional[ROIResults] = None) -> FigureCapture:
    """Render every dashboard figure into a FigureCapture."""
    with FigureCapture() as cap:
        cap.capture(plot_capex_breakdown(results))
        cap.capture(plot_five_year_projection(results))
        if comparisons:
            cap.capture(plot_scenario_comparison(comparisons))
            create_safe_heatmap(scenario_opex_matrix(comparisons), annot=True, fmt=",.0f",
                                cmap="Blues", title="Annual OPEX by Scenario")
            plt.show()
        if roi is not None:
            fig = plot_roi_timeline(roi)
            if fig is not None:
                cap.capture(fig)
    return cap
