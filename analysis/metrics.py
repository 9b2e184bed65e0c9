#!/usr/bin/env python3
"""
Tabular views, KPIs and benchmark checks over the calculator results.
Turns result records into pandas DataFrames for the tables, charts and exports.
"""

from dataclasses import asdict
from typing import Dict, Iterable, List, Tuple

import pandas as pd

from config.models import SimulatorParameters
from simulation.capex_model import BENCHMARK_METRICS, equipment_share
from simulation.engine import compute_budget
from simulation.results import BudgetResults, CapexResult, CostLineItem, ROIResults

LINE_ITEM_COLUMNS = ["id", "category", "name", "amount", "basis", "notes"]


def _line_item_frame(items: List[CostLineItem]) -> pd.DataFrame:
    if not items:
        return pd.DataFrame(columns=LINE_ITEM_COLUMNS)
    return pd.DataFrame([asdict(item) for item in items], columns=LINE_ITEM_COLUMNS)


def capex_frame(results) -> pd.DataFrame:
    """
    CAPEX line items as a DataFrame.

    Args:
        results: BudgetResults or CapexResult

    Returns:
        One row per line item with an added share-of-total column
    """
    items = results.capex.line_items if isinstance(results, BudgetResults) else results.line_items
    df = _line_item_frame(items)
    total = df["amount"].sum()
    df["share"] = df["amount"] / total if total else 0.0
    return df


def opex_frame(results: BudgetResults) -> pd.DataFrame:
    df = _line_item_frame(results.opex.line_items)
    df["monthly"] = df["amount"] / 12
    return df


def projection_frame(results: BudgetResults) -> pd.DataFrame:
    """Year-by-year projection, one row per year."""
    return pd.DataFrame([asdict(y) for y in results.five_year.year_by_year])


def comparison_frame(comparisons) -> pd.DataFrame:
    """Scenario comparison table (works for budget and CAPEX comparisons)."""
    rows = []
    for comp in comparisons:
        if isinstance(comp.results, BudgetResults):
            rows.append({
                "scenario": comp.scenario.name,
                "capex_net": comp.results.capex.net,
                "annual_opex": comp.results.opex.annual,
                "five_year_total": comp.results.five_year.total_cost,
                "cost_per_session": comp.results.metrics.cost_per_session,
                "delta_from_current": comp.delta_from_current,
            })
        else:
            rows.append({
                "scenario": comp.scenario.name,
                "total_project_cost": comp.results.total_project_cost,
                "cost_per_sf": comp.results.cost_per_sf,
                "cost_per_room": comp.results.cost_per_room,
                "delta_from_current": comp.delta_from_current,
            })
    return pd.DataFrame(rows)


def roi_category_frame(roi: ROIResults) -> pd.DataFrame:
    df = pd.DataFrame([
        {
            "category": c.category,
            "name": c.name,
            "annual_savings": c.annual_savings,
            "five_year_savings": c.five_year_savings,
            "confidence": c.confidence,
            "citations": len(c.citations),
        }
        for c in roi.by_category
    ])
    return df.sort_values("annual_savings", ascending=False).reset_index(drop=True)


def compute_budget_kpis(results: BudgetResults) -> Dict[str, float]:
    """
    Headline figures for the dashboard cards.

    Args:
        results: Budget simulator output

    Returns:
        Dictionary of KPIs
    """
    capex = results.capex
    opex = results.opex
    return {
        "capex_net": capex.net,
        "capex_gross": capex.total,
        "annual_opex": opex.annual,
        "monthly_opex": opex.monthly,
        "five_year_total": results.five_year.total_cost,
        "cost_per_session": results.metrics.cost_per_session,
        "cost_per_learner_hour": results.metrics.cost_per_learner_hour,
        "cost_per_sf": results.metrics.cost_per_sf,
        "staffing_share": opex.staffing / opex.annual if opex.annual else 0.0,
        "capex_share_of_five_year": capex.net / results.five_year.total_cost if results.five_year.total_cost else 0.0,
    }


def _benchmark_points(value: float, bench: dict) -> int:
    if bench["low"] <= value <= bench["high"]:
        return 2
    # within 20% outside the range
    if bench["low"] * 0.8 <= value <= bench["high"] * 1.2:
        return 1
    return 0


def assess_benchmarks(capex: CapexResult) -> Tuple[float, str, List[dict]]:
    """
    Score a CAPEX estimate against industry benchmarks.

    Returns:
        Tuple of (score 0-100, interpretation, per-metric rows)
    """
    values = {
        "total-cost-per-sf": capex.cost_per_sf,
        "cost-per-room": capex.cost_per_room,
        "equipment-percentage": equipment_share(capex) * 100,
    }
    rows = []
    points = 0
    for metric_id, value in values.items():
        bench = BENCHMARK_METRICS[metric_id]
        p = _benchmark_points(value, bench)
        points += p
        if value < bench["low"]:
            position = "below"
        elif value > bench["high"]:
            position = "above"
        else:
            position = "within"
        rows.append({
            "metric": bench["name"],
            "value": value,
            "low": bench["low"],
            "mid": bench["mid"],
            "high": bench["high"],
            "unit": bench["unit"],
            "position": position,
        })

    score = points / (2 * len(values)) * 100

    if score >= 80:
        interpretation = "Aligned: Estimate sits within industry ranges"
    elif score >= 50:
        interpretation = "Plausible: Some metrics near the edge of industry ranges"
    else:
        interpretation = "Outlier: Review assumptions before presenting"

    return score, interpretation, rows


def compute_sensitivity_analysis(params: SimulatorParameters, field: str,
                                 values: Iterable[float]) -> pd.DataFrame:
    """
    Re-run the budget across a range of values for one parameter.

    Args:
        params: Baseline parameters
        field: Parameter field to vary
        values: Values to try

    Returns:
        DataFrame with CAPEX, annual OPEX and 5-year totals per value
    """
    rows = []
    for value in values:
        results = compute_budget(params.with_updates(**{field: value}))
        rows.append({
            field: value,
            "capex_net": results.capex.net,
            "annual_opex": results.opex.annual,
            "five_year_total": results.five_year.total_cost,
        })
    return pd.DataFrame(rows)
