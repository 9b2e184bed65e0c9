# tests/test_capex_model.py
import pytest

from config.models import ProjectParameters
from simulation.capex_model import (
    calculate_capex, calculate_net_investment, get_total_existing_assets, equipment_share
)


def _amounts(result):
    return {item.id: item.amount for item in result.line_items}


def test_default_project_line_items():
    result = calculate_capex(ProjectParameters())
    amounts = _amounts(result)
    assert amounts["base-building"] == pytest.approx(1_500_000)
    assert amounts["mep-upgrades"] == pytest.approx(375_000)
    assert amounts["av-system"] == pytest.approx(90_000)
    assert amounts["simulators"] == pytest.approx(240_000)
    assert amounts["it-security"] == pytest.approx(40_000)
    assert amounts["furniture"] == pytest.approx(85_000)
    assert amounts["soft-costs"] == pytest.approx(582_500)


def test_default_project_totals():
    result = calculate_capex(ProjectParameters())
    assert result.subtotal_hard_costs == pytest.approx(2_330_000)
    assert result.soft_costs == pytest.approx(582_500)
    assert result.contingency == pytest.approx(145_625)
    assert result.total_project_cost == pytest.approx(3_058_125)
    assert result.cost_per_sf == 765
    assert result.cost_per_room == 339_792
    assert sum(_amounts(result).values()) + result.contingency == pytest.approx(result.total_project_cost)


def test_clean_shell_drops_renovation_premium():
    reno = _amounts(calculate_capex(ProjectParameters()))
    shell = _amounts(calculate_capex(ProjectParameters(construction_type="clean-shell")))
    assert shell["base-building"] == pytest.approx(reno["base-building"] / 1.25)
    assert shell["mep-upgrades"] == pytest.approx(reno["mep-upgrades"] / 1.25)
    assert shell["it-security"] == pytest.approx(reno["it-security"])


def test_region_applies_to_building_only():
    moderate = _amounts(calculate_capex(ProjectParameters()))
    high = _amounts(calculate_capex(ProjectParameters(cost_region="high-cost")))
    assert high["base-building"] == pytest.approx(moderate["base-building"] * 1.3)
    assert high["mep-upgrades"] == pytest.approx(moderate["mep-upgrades"] * 1.3)
    for item in ("furniture", "av-system", "simulators", "it-security"):
        assert high[item] == pytest.approx(moderate[item])


def test_zero_area_and_rooms_report_zero_unit_costs():
    result = calculate_capex(ProjectParameters(floor_area=0, sim_rooms=0, control_rooms=0, debrief_rooms=0,
                                               support_spaces=0))
    assert result.cost_per_sf == 0
    assert result.cost_per_room == 0


def test_quality_insensitive_categories_use_mid_estimate():
    budget = _amounts(calculate_capex(ProjectParameters(quality_level="budget")))
    premium = _amounts(calculate_capex(ProjectParameters(quality_level="premium")))
    assert budget["mep-upgrades"] == premium["mep-upgrades"]
    assert budget["it-security"] == premium["it-security"]
    assert budget["simulators"] < premium["simulators"]


def test_net_investment():
    assert get_total_existing_assets() == 95_000
    net = calculate_net_investment(ProjectParameters())
    assert net["gross_cost"] == pytest.approx(3_058_125)
    assert net["net_investment"] == pytest.approx(3_058_125 - 95_000)


def test_equipment_share():
    result = calculate_capex(ProjectParameters())
    assert equipment_share(result) == pytest.approx(330_000 / 3_058_125)
