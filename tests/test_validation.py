# tests/test_validation.py
from config.models import SimulatorParameters, OrganizationInputs
from simulation import validation
from simulation.validation import preflight_validate, planning_warnings, organization_warnings


def test_preflight_reports_errors(monkeypatch):
    shown = []
    monkeypatch.setattr(validation.st, "error", shown.append)
    assert preflight_validate(SimulatorParameters())
    assert shown == []

    assert not preflight_validate(SimulatorParameters(sim_rooms=None))
    assert "sim_rooms is required" in shown[0]


def test_default_plan_has_no_warnings():
    assert planning_warnings(SimulatorParameters()) == []


def test_planning_warnings():
    params = SimulatorParameters(floor_area=1200, sim_rooms=2, sessions_per_month=200,
                                 high_fidelity_manikins=5, core_fte=0.5)
    warnings = planning_warnings(params)
    assert len(warnings) == 4
    assert any("SF per room" in w for w in warnings)
    assert any("exceeds" in w for w in warnings)
    assert any("manikins" in w for w in warnings)
    assert any("FTE" in w for w in warnings)


def test_zero_sessions_warning():
    warnings = planning_warnings(SimulatorParameters(sessions_per_month=0))
    assert warnings == ["No sessions scheduled - per-session costs will show as $0"]


def test_organization_warnings():
    assert organization_warnings(OrganizationInputs()) == []
    org = OrganizationInputs(turnover_rate=0.05, code_blue_survival=0.5, has_magnet_status=True)
    assert len(organization_warnings(org)) == 3
