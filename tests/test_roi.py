# tests/test_roi.py
import logging

import pytest

from config.models import OrganizationInputs, SimulatorParameters
from simulation.engine import compute_budget
from simulation.roi import (
    estimate_roi, citations_for, npv_of_savings, payback_months, internal_rate_of_return, CATEGORY_NAMES
)


def _savings(roi):
    return {c.category: c.annual_savings for c in roi.by_category}


def test_default_category_savings():
    savings = _savings(estimate_roi(OrganizationInputs()))
    assert list(savings) == list(CATEGORY_NAMES)
    assert savings["nurse-retention"] == pytest.approx(3_177_720)
    assert savings["code-blue"] == pytest.approx(5_400_000)
    assert savings["medication-errors"] == pytest.approx(87_000)
    assert savings["infection-prevention"] == pytest.approx(464_062.5)
    assert savings["malpractice"] == pytest.approx(31_250)
    assert savings["magnet-status"] == pytest.approx(1_380_000)
    assert savings["onboarding-efficiency"] == pytest.approx(700_000)


def test_confidence_range():
    roi = estimate_roi(OrganizationInputs())
    rng = roi.confidence_range
    assert rng.baseline == pytest.approx(11_240_032.5)
    assert rng.conservative == pytest.approx(rng.baseline * 0.7)
    assert rng.optimistic == pytest.approx(rng.baseline * 1.3)
    assert roi.total_annual_savings == rng.baseline


def test_without_simulator_parameters_only_categories():
    roi = estimate_roi(OrganizationInputs())
    assert roi.summary is None
    assert roi.by_asset == []
    assert roi.value_timeline == []


def test_at_or_better_than_target_saves_nothing():
    org = OrganizationInputs(turnover_rate=0.05, code_blue_survival=0.6, pursuing_magnet=False)
    savings = _savings(estimate_roi(org))
    assert savings["nurse-retention"] == 0
    assert savings["code-blue"] == 0
    assert savings["magnet-status"] == 0
    assert all(v >= 0 for v in savings.values())


def test_negative_inputs_clamp_to_zero_with_warning(caplog):
    with caplog.at_level(logging.WARNING):
        savings = _savings(estimate_roi(OrganizationInputs(total_rns=-100)))
    assert savings["nurse-retention"] == 0
    assert savings["onboarding-efficiency"] == 0
    assert all(v >= 0 for v in savings.values())
    assert "Negative nurse-retention savings" in caplog.text


def test_magnet_confidence_follows_pursuit():
    pursuing = {c.category: c.confidence for c in estimate_roi(OrganizationInputs()).by_category}
    idle = {c.category: c.confidence for c in
            estimate_roi(OrganizationInputs(pursuing_magnet=False)).by_category}
    assert pursuing["magnet-status"] == "moderate"
    assert idle["magnet-status"] == "low"
    assert pursuing["code-blue"] == "high"


def test_summary_with_budget():
    params = SimulatorParameters()
    results = compute_budget(params)
    roi = estimate_roi(OrganizationInputs(), params, results)
    s = roi.summary
    assert s.total_annual_savings == pytest.approx(11_240_032.5)
    assert s.total_five_year_savings == pytest.approx(npv_of_savings(11_240_032.5, 0.08))
    assert s.net_roi == pytest.approx(s.total_five_year_savings - results.five_year.total_cost)
    assert s.roi_percent == pytest.approx(s.net_roi / results.five_year.total_cost * 100)
    assert s.payback_period_months == 3
    assert s.irr_percent is not None and s.irr_percent > 0


def test_budget_computed_when_omitted():
    params = SimulatorParameters(sim_rooms=4)
    implicit = estimate_roi(OrganizationInputs(), params)
    explicit = estimate_roi(OrganizationInputs(), params, compute_budget(params))
    assert implicit.to_dict() == explicit.to_dict()


def test_asset_contributions_sorted_and_skip_empty():
    params = SimulatorParameters(task_trainers=0)
    roi = estimate_roi(OrganizationInputs(), params)
    annual = [a.annual_contribution for a in roi.by_asset]
    assert annual == sorted(annual, reverse=True)
    assert "task-trainer" not in [a.asset_type for a in roi.by_asset]
    for a in roi.by_asset:
        assert a.five_year_contribution == pytest.approx(a.annual_contribution * 5)
        assert a.payback_months is None or a.payback_months >= 1


def test_value_timeline():
    params = SimulatorParameters()
    results = compute_budget(params)
    timeline = estimate_roi(OrganizationInputs(), params, results).value_timeline
    assert [p.year for p in timeline] == [1, 2, 3, 4, 5]
    assert timeline[0].cumulative_cost == pytest.approx(results.capex.net + results.opex.annual)
    assert timeline[0].cumulative_savings == pytest.approx(11_240_032.5)
    assert timeline[1].cumulative_cost == pytest.approx(
        results.capex.net + results.opex.annual * (1 + 1.03))
    for p in timeline:
        assert p.net_position == pytest.approx(p.cumulative_savings - p.cumulative_cost)


def test_citations_are_unique_per_category():
    ids = [c["id"] for c in citations_for("nurse-retention")]
    assert ids == ["nsi-2025", "commonspirit-2023", "nurse-residency-roi-2022"]
    assert citations_for("malpractice")[0]["source"]


def test_financial_helpers():
    assert npv_of_savings(100, 0.0, 5) == pytest.approx(500)
    assert npv_of_savings(100, 0.1, 1) == pytest.approx(100 / 1.1)
    assert payback_months(1200, 1200) == 12
    assert payback_months(0, 1200) == 0
    assert payback_months(1000, 0) is None
    assert internal_rate_of_return([-100, 110]) == pytest.approx(10.0)
    assert internal_rate_of_return([100, 100]) is None


def test_invalid_organization_rejected():
    with pytest.raises(ValueError):
        estimate_roi(OrganizationInputs(total_rns=None))
