#!/usr/bin/env python3
"""
CAPEX cost model for the simulation center build-out.

Weighted cost categories (facility, technology, furniture, soft costs) priced
from floor area and room counts, adjusted for construction type, cost region
and quality level, plus a fixed 5% contingency.
"""

import logging
from typing import Dict, List

from config.models import ProjectParameters, ConstructionType, CostRegion, QualityLevel
from simulation.results import CostLineItem, CapexResult
from utils.helpers import safe_divide, round_currency

log = logging.getLogger(__name__)

PER_SF = "per_sf"
PER_ROOM = "per_room"
PERCENTAGE = "percentage"

# (low, mid, high) estimates are picked by quality level; quality-insensitive
# categories always use the mid estimate.
COST_CATEGORIES = [
    {"id": "base-building", "name": "Base Building / Renovation", "group": "Construction", "basis": PER_SF,
     "estimates": (200, 300, 400), "quality_sensitive": True,
     "notes": "Hospital interior renovation typically $250-$400/SF. Clean shell space $200-$300/SF."},
    {"id": "mep-upgrades", "name": "MEP Upgrades (Power/Data/HVAC)", "group": "Construction", "basis": PER_SF,
     "estimates": (50, 75, 100), "quality_sensitive": False,
     "notes": "MEP typically adds 20-35% on top of base building costs."},
    {"id": "av-system", "name": "A/V Capture & Storage", "group": "Technology", "basis": PER_ROOM,
     "estimates": (20_000, 30_000, 40_000), "quality_sensitive": True,
     "notes": "Mid-sized center (5 rooms) typically $100K-$200K total. Includes first year support."},
    {"id": "simulators", "name": "Simulators & Task Trainers", "group": "Equipment", "basis": PER_ROOM,
     "estimates": (50_000, 80_000, 100_000), "quality_sensitive": True,
     "notes": "Often 40-50% of total budget. High-fidelity adult simulators $30K-$100K each."},
    {"id": "it-security", "name": "IT & Security Infrastructure", "group": "Technology", "basis": PER_SF,
     "estimates": (5, 10, 15), "quality_sensitive": False,
     "notes": "Network, control room workstations, access control."},
    {"id": "furniture", "name": "Furniture & Fixtures", "group": "Equipment", "basis": PER_ROOM,
     "estimates": (10_000, 15_000, 20_000), "quality_sensitive": True,
     "notes": "Common areas (debrief, offices, lobby) add ~$30K-$50K beyond sim room furniture."},
    {"id": "soft-costs", "name": "Soft Costs", "group": "Soft Costs", "basis": PERCENTAGE,
     "estimates": (20, 25, 30), "quality_sensitive": True,
     "notes": "Design fees, permits, commissioning, training, vendor implementation."},
]

COMMON_AREA_FURNITURE = 40_000
CONTINGENCY_PCT = 0.05

CONSTRUCTION_MULTIPLIERS: Dict[ConstructionType, float] = {
    ConstructionType.HOSPITAL_RENOVATION: 1.25,  # ICRA, after-hours work, phasing
    ConstructionType.CLEAN_SHELL: 1.0,
}
REGION_MULTIPLIERS: Dict[CostRegion, float] = {
    CostRegion.LOW: 0.85,
    CostRegion.MODERATE: 1.0,
    CostRegion.HIGH: 1.3,
}
QUALITY_INDEX: Dict[QualityLevel, int] = {
    QualityLevel.BUDGET: 0,
    QualityLevel.STANDARD: 1,
    QualityLevel.PREMIUM: 2,
}

CONSTRUCTION_TYPE_APPLIES_TO = ("base-building", "mep-upgrades")
REGION_APPLIES_TO = ("base-building", "mep-upgrades")

EXISTING_ASSETS = [
    {"category_id": "simulators", "description": "SimMan 3G PLUS (purchased Dec 2024)", "value": 75_000},
    {"category_id": "simulators", "description": "Basic manikin trainers from nursing education", "value": 5_000},
    {"category_id": "furniture", "description": "Potential hospital surplus equipment (beds, monitors)", "value": 15_000},
]

BENCHMARK_METRICS = {
    "total-cost-per-sf": {"name": "Total Cost per Square Foot", "low": 300, "mid": 450, "high": 600, "unit": "$/SF"},
    "cost-per-room": {"name": "Cost per Simulation Suite", "low": 360_000, "mid": 500_000, "high": 720_000, "unit": "$/room"},
    "equipment-percentage": {"name": "Equipment as % of Total", "low": 35, "mid": 45, "high": 55, "unit": "%"},
}


def _unit_estimate(category: dict, quality: QualityLevel) -> float:
    idx = QUALITY_INDEX[quality] if category["quality_sensitive"] else 1
    return category["estimates"][idx]


def _multiplier(category_id: str, params: ProjectParameters) -> float:
    mult = 1.0
    if category_id in CONSTRUCTION_TYPE_APPLIES_TO:
        mult *= CONSTRUCTION_MULTIPLIERS[params.construction_type]
    if category_id in REGION_APPLIES_TO:
        mult *= REGION_MULTIPLIERS[params.cost_region]
    return mult


def calculate_capex(params: ProjectParameters) -> CapexResult:
    """
    Price every cost category for one facility scenario.

    Args:
        params: Facility parameters

    Returns:
        CapexResult whose line items (hard costs + soft costs) plus contingency
        sum to the total project cost
    """
    params.ensure_valid()
    line_items: List[CostLineItem] = []

    for cat in COST_CATEGORIES:
        if cat["basis"] == PERCENTAGE:
            continue
        unit_cost = _unit_estimate(cat, params.quality_level)
        mult = _multiplier(cat["id"], params)

        if cat["basis"] == PER_SF:
            cost = params.floor_area * unit_cost * mult
            basis = f"{params.floor_area:,.0f} SF × ${unit_cost:,}/SF × {mult:.2f}"
        else:
            cost = params.sim_rooms * unit_cost
            basis = f"{params.sim_rooms} rooms × ${unit_cost:,}/room"
            if cat["id"] == "furniture":
                cost += COMMON_AREA_FURNITURE
                basis += f" + ${COMMON_AREA_FURNITURE:,} common areas"
            cost *= mult
            if mult != 1.0:
                basis += f" × {mult:.2f}"

        line_items.append(CostLineItem(
            id=cat["id"],
            category=cat["group"],
            name=cat["name"],
            amount=cost,
            basis=basis,
            notes=cat["notes"],
        ))

    subtotal_hard_costs = sum(item.amount for item in line_items)

    soft_cat = next(c for c in COST_CATEGORIES if c["basis"] == PERCENTAGE)
    soft_pct = _unit_estimate(soft_cat, params.quality_level) / 100
    soft_costs = subtotal_hard_costs * soft_pct
    line_items.append(CostLineItem(
        id=soft_cat["id"],
        category=soft_cat["group"],
        name=soft_cat["name"],
        amount=soft_costs,
        basis=f"{soft_pct * 100:.0f}% of ${subtotal_hard_costs:,.0f} hard costs",
        notes=soft_cat["notes"],
    ))

    subtotal = sum(item.amount for item in line_items)
    contingency = subtotal * CONTINGENCY_PCT
    total_project_cost = subtotal + contingency

    result = CapexResult(
        line_items=line_items,
        subtotal_hard_costs=subtotal_hard_costs,
        soft_costs=soft_costs,
        contingency=contingency,
        total_project_cost=total_project_cost,
        cost_per_sf=round_currency(safe_divide(total_project_cost, params.floor_area)),
        cost_per_room=round_currency(safe_divide(total_project_cost, params.total_rooms)),
    )
    log.debug("CAPEX model: total %.2f (%d line items)", total_project_cost, len(line_items))
    return result


def get_total_existing_assets() -> float:
    return float(sum(asset["value"] for asset in EXISTING_ASSETS))


def calculate_net_investment(params: ProjectParameters) -> Dict[str, float]:
    """Gross project cost less equipment the hospital already owns."""
    capex = calculate_capex(params)
    assets = get_total_existing_assets()
    return {
        "gross_cost": capex.total_project_cost,
        "existing_assets": assets,
        "net_investment": capex.total_project_cost - assets,
    }


def equipment_share(result: CapexResult) -> float:
    """Simulators + A/V as a fraction of total project cost."""
    equipment = sum(item.amount for item in result.line_items if item.id in ("simulators", "av-system"))
    return safe_divide(equipment, result.total_project_cost)
