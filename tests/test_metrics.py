# tests/test_metrics.py
import numpy as np
import pytest

from config.models import SimulatorParameters, ProjectParameters, OrganizationInputs
from config.scenarios import SCENARIOS
from simulation.capex_model import calculate_capex
from simulation.comparison import compare_scenarios
from simulation.engine import compute_budget
from simulation.roi import estimate_roi
from analysis.metrics import (
    capex_frame, opex_frame, projection_frame, comparison_frame, roi_category_frame,
    compute_budget_kpis, assess_benchmarks, compute_sensitivity_analysis
)


@pytest.fixture(scope="module")
def results():
    return compute_budget(SimulatorParameters())


def test_capex_frame_sums_to_net(results):
    df = capex_frame(results)
    assert df["amount"].sum() == pytest.approx(results.capex.net)
    assert df.loc[df["id"] == "existing-credits", "amount"].iloc[0] == pytest.approx(-100_000)
    assert df["share"].sum() == pytest.approx(1.0)


def test_capex_frame_accepts_capex_model_result():
    df = capex_frame(calculate_capex(ProjectParameters()))
    assert len(df) == 7
    assert df["amount"].sum() == pytest.approx(2_912_500)


def test_opex_and_projection_frames(results):
    opex = opex_frame(results)
    assert opex["amount"].sum() == pytest.approx(359_225)
    assert opex["monthly"].sum() == pytest.approx(359_225 / 12)
    proj = projection_frame(results)
    assert list(proj["year"]) == [1, 2, 3, 4, 5]
    assert proj["cumulative_total"].iloc[-1] == pytest.approx(results.five_year.total_cost)


def test_comparison_frame():
    df = comparison_frame(compare_scenarios(SimulatorParameters(), SCENARIOS))
    assert list(df["scenario"]) == ["Base Case", "Enhanced", "Budget", "Full Expansion"]
    assert df["delta_from_current"].iloc[0] == pytest.approx(0)


def test_roi_category_frame_sorted():
    df = roi_category_frame(estimate_roi(OrganizationInputs()))
    assert df["category"].iloc[0] == "code-blue"
    assert list(df["annual_savings"]) == sorted(df["annual_savings"], reverse=True)


def test_budget_kpis(results):
    kpis = compute_budget_kpis(results)
    assert kpis["capex_net"] == pytest.approx(2_550_312.5)
    assert kpis["staffing_share"] == pytest.approx(255_500 / 359_225)


def test_default_capex_is_an_outlier():
    score, interpretation, rows = assess_benchmarks(calculate_capex(ProjectParameters()))
    assert score == pytest.approx(100 / 6)
    assert interpretation.startswith("Outlier")
    assert [r["position"] for r in rows] == ["above", "below", "below"]


def test_sensitivity_analysis():
    df = compute_sensitivity_analysis(SimulatorParameters(), "sim_rooms", [2, 3, 4])
    assert list(df["sim_rooms"]) == [2, 3, 4]
    assert df["capex_net"].is_monotonic_increasing
    assert df.loc[1, "five_year_total"] == pytest.approx(4_457_486.811347, abs=1e-6)


def test_sensitivity_analysis_accepts_numpy_ranges():
    df = compute_sensitivity_analysis(SimulatorParameters(), "sim_rooms", np.arange(2, 6))
    assert list(df["sim_rooms"]) == [2, 3, 4, 5]
    assert df["annual_opex"].is_monotonic_increasing
    assert df.loc[1, "five_year_total"] == pytest.approx(4_457_486.811347, abs=1e-6)
