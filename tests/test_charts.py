# tests/test_charts.py
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pandas as pd
import pytest

from config.models import SimulatorParameters, OrganizationInputs
from config.scenarios import SCENARIOS
from simulation.comparison import compare_scenarios
from simulation.engine import compute_budget
from simulation.roi import estimate_roi
from visualization.charts import (
    FigureCapture, capex_chart_data, opex_chart_data, five_year_chart_data,
    create_safe_heatmap, plot_roi_timeline, render_all_figures
)


@pytest.fixture(scope="module")
def results():
    return compute_budget(SimulatorParameters())


def test_chart_data_sums(results):
    assert sum(r["value"] for r in capex_chart_data(results)) == pytest.approx(results.capex.total)
    assert sum(r["value"] for r in opex_chart_data(results)) == pytest.approx(results.opex.annual)
    rows = five_year_chart_data(results)
    assert [r["name"] for r in rows][0] == "Year 1"
    assert rows[-1]["cumulative"] == pytest.approx(results.five_year.total_cost)


def test_roi_timeline_needs_budget():
    assert plot_roi_timeline(estimate_roi(OrganizationInputs())) is None


def test_empty_heatmap_draws_placeholder():
    ax = create_safe_heatmap(pd.DataFrame(), title="Nothing")
    assert ax.get_title() == "Nothing"
    plt.close("all")


def test_figure_capture_collects_pngs():
    with FigureCapture() as cap:
        plt.plot([1, 2, 3])
        plt.title("Line")
        plt.show()
    assert cap.images[0][0] == "fig_01.png"
    assert cap.images[0][1].startswith(b"\x89PNG")
    assert cap.manifest == [{"file": "fig_01.png", "title": "Line"}]


def test_render_all_figures(results):
    params = SimulatorParameters()
    comparisons = compare_scenarios(params, SCENARIOS)
    roi = estimate_roi(OrganizationInputs(), params, results)
    cap = render_all_figures(results, comparisons, roi)
    assert len(cap.images) == 5
    assert all(data for _, data in cap.images)
    assert "Annual OPEX by Scenario" in [m["title"] for m in cap.manifest]
