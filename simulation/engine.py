#!/usr/bin/env python3
"""
Budget simulator: the unified CAPEX / OPEX calculation engine.

Takes one SimulatorParameters snapshot and derives the full cost model
(capital line items, annual operating line items, unit economics and a
5-year projection). Pure and deterministic, re-run in full on every
parameter change.
"""

import logging
from typing import Dict, List

from config.models import SimulatorParameters, AVTier, CostRegion, QualityLevel, OpexModel
from simulation.results import (
    CostLineItem, CapexSummary, OpexSummary, YearProjection,
    FiveYearProjection, UnitMetrics, BudgetResults
)
from utils.helpers import safe_divide

log = logging.getLogger(__name__)

PROJECTION_YEARS = 5

# Per-SF construction rates
BASE_CONSTRUCTION_RATE: Dict[QualityLevel, float] = {
    QualityLevel.BUDGET: 200,
    QualityLevel.STANDARD: 300,
    QualityLevel.PREMIUM: 400,
}
MEP_RATE: Dict[QualityLevel, float] = {
    QualityLevel.BUDGET: 50,
    QualityLevel.STANDARD: 75,
    QualityLevel.PREMIUM: 100,
}
IT_SECURITY_RATE = 10

REGION_MULTIPLIER: Dict[CostRegion, float] = {
    CostRegion.LOW: 0.85,
    CostRegion.MODERATE: 1.0,
    CostRegion.HIGH: 1.3,
}

# Per-room rates
AV_PER_ROOM: Dict[AVTier, float] = {
    AVTier.BASIC: 15_000,
    AVTier.STANDARD: 30_000,
    AVTier.PREMIUM: 50_000,
}
FURNITURE_PER_ROOM: Dict[QualityLevel, float] = {
    QualityLevel.BUDGET: 8_000,
    QualityLevel.STANDARD: 15_000,
    QualityLevel.PREMIUM: 25_000,
}
COMMON_AREA_FURNITURE = 40_000

# Equipment
HIGH_FIDELITY_MANIKIN_COST = 75_000
TASK_TRAINER_COST = 3_500
MAINTENANCE_PCT = 0.12  # of equipment value, annually

SOFT_COST_PCT: Dict[QualityLevel, float] = {
    QualityLevel.BUDGET: 0.20,
    QualityLevel.STANDARD: 0.25,
    QualityLevel.PREMIUM: 0.30,
}

# Equipment already owned, credited against the gross investment
EXISTING_ASSETS = {
    "SimMan 3G Plus": 75_000,
    "Basic trainers": 15_000,
    "Procedural supplies": 10_000,
}

# Staffing (loaded)
AVG_SALARY_LOADED = 95_000
FACULTY_HOURLY_RATE = 150
FACULTY_POOL_SIZE = 15

# OPEX drivers
SUPPLIES_PER_ROOM = 8_000
UTILITIES_PER_ROOM = 3_000
CONSUMABLES_PER_SESSION = 45
UTILITIES_PER_SESSION = 15

SOFTWARE_LICENSES: Dict[AVTier, float] = {
    AVTier.BASIC: 5_000,
    AVTier.STANDARD: 12_000,
    AVTier.PREMIUM: 25_000,
}

AVG_LEARNERS_PER_SESSION = 4
AVG_SESSION_HOURS = 2


def _capex(params: SimulatorParameters) -> CapexSummary:
    region = REGION_MULTIPLIER[params.cost_region]
    quality = params.quality_level
    items: List[CostLineItem] = []
    area = params.floor_area

    base_rate = BASE_CONSTRUCTION_RATE[quality]
    base_construction = area * base_rate * region
    items.append(CostLineItem(
        "base-construction", "Construction", "Base Building/Renovation", base_construction,
        f"{area:,.0f} SF × ${base_rate:,.0f} × {region}",
        f"{quality.value} quality, {params.cost_region.value} region"))

    mep_rate = MEP_RATE[quality]
    mep_upgrades = area * mep_rate * region
    items.append(CostLineItem(
        "mep-upgrades", "Construction", "MEP Upgrades", mep_upgrades,
        f"{area:,.0f} SF × ${mep_rate:,.0f} × {region}",
        "Mechanical, Electrical, Plumbing"))

    it_security = area * IT_SECURITY_RATE * region
    items.append(CostLineItem(
        "it-security", "Construction", "IT & Security Infrastructure", it_security,
        f"{area:,.0f} SF × ${IT_SECURITY_RATE} × {region}"))

    construction = base_construction + mep_upgrades + it_security

    av_rate = AV_PER_ROOM[params.av_tier]
    av_system = params.sim_rooms * av_rate
    items.append(CostLineItem(
        "av-system", "Equipment", "A/V Capture & Recording", av_system,
        f"{params.sim_rooms} rooms × ${av_rate:,.0f}",
        f"{params.av_tier.value} tier system"))

    manikins = params.high_fidelity_manikins * HIGH_FIDELITY_MANIKIN_COST
    items.append(CostLineItem(
        "high-fidelity", "Equipment", "High-Fidelity Manikins", manikins,
        f"{params.high_fidelity_manikins} units × ${HIGH_FIDELITY_MANIKIN_COST:,}",
        "SimMan, HAL, or equivalent"))

    trainers = params.task_trainers * TASK_TRAINER_COST
    items.append(CostLineItem(
        "task-trainers", "Equipment", "Task Trainers", trainers,
        f"{params.task_trainers} units × ${TASK_TRAINER_COST:,}",
        "IV arms, intubation heads, etc."))

    equipment = manikins + trainers

    furniture_rate = FURNITURE_PER_ROOM[quality]
    furniture = params.total_rooms * furniture_rate + COMMON_AREA_FURNITURE
    items.append(CostLineItem(
        "furniture", "Equipment", "Furniture & Fixtures", furniture,
        f"({params.total_rooms} rooms × ${furniture_rate:,.0f}) + ${COMMON_AREA_FURNITURE:,} common",
        "Hospital beds, desks, chairs, storage"))

    hard_costs = construction + av_system + equipment + furniture
    soft_rate = SOFT_COST_PCT[quality]
    soft_costs = hard_costs * soft_rate
    items.append(CostLineItem(
        "soft-costs", "Soft Costs", "Design, Permits, Fees", soft_costs,
        f"${hard_costs:,.0f} × {soft_rate * 100:.0f}%",
        "Architecture, engineering, permits, inspections"))

    subtotal = hard_costs + soft_costs
    contingency = subtotal * (params.contingency_percent / 100)
    items.append(CostLineItem(
        "contingency", "Contingency", "Contingency Reserve", contingency,
        f"${subtotal:,.0f} × {params.contingency_percent}%",
        "Buffer for unforeseen costs"))

    existing_credits = float(sum(EXISTING_ASSETS.values()))
    items.append(CostLineItem(
        "existing-credits", "Credits", "Existing Equipment Credit", -existing_credits,
        " + ".join(f"{name} (${value:,})" for name, value in EXISTING_ASSETS.items()),
        "Equipment already owned"))

    total = subtotal + contingency
    return CapexSummary(
        construction=construction,
        equipment=equipment,
        furniture=furniture,
        av_system=av_system,
        soft_costs=soft_costs,
        contingency=contingency,
        existing_credits=existing_credits,
        total=total,
        net=total - existing_credits,
        line_items=items,
    )


def _opex(params: SimulatorParameters, capex: CapexSummary) -> OpexSummary:
    items: List[CostLineItem] = []
    annual_sessions = params.sessions_per_month * 12
    sessions_based = params.opex_model is OpexModel.SESSIONS_BASED

    core_staff = params.core_fte * AVG_SALARY_LOADED
    items.append(CostLineItem(
        "staffing", "Staffing", "Core Staff", core_staff,
        f"{params.core_fte} FTE × ${AVG_SALARY_LOADED:,}",
        "Director, coordinator, admin (loaded costs)"))

    faculty_hours = (params.training_hours_per_year
                     * (params.faculty_allocation_percent / 100) * FACULTY_POOL_SIZE)
    faculty_development = faculty_hours * FACULTY_HOURLY_RATE
    items.append(CostLineItem(
        "faculty-development", "Staffing", "Faculty Development", faculty_development,
        f"{faculty_hours:,.0f} hours × ${FACULTY_HOURLY_RATE}",
        f"{params.faculty_allocation_percent}% of a {FACULTY_POOL_SIZE}-person faculty pool"))

    maintenance = capex.equipment * MAINTENANCE_PCT
    items.append(CostLineItem(
        "maintenance", "Operations", "Equipment Maintenance", maintenance,
        f"${capex.equipment:,.0f} × {MAINTENANCE_PCT * 100:.0f}%",
        "Service contracts, repairs, calibration"))

    if sessions_based:
        consumables = annual_sessions * CONSUMABLES_PER_SESSION
        consumables_calc = f"{annual_sessions:,.0f} sessions × ${CONSUMABLES_PER_SESSION}"
        utilities = annual_sessions * UTILITIES_PER_SESSION
        utilities_calc = f"{annual_sessions:,.0f} sessions × ${UTILITIES_PER_SESSION}"
    else:
        consumables = params.sim_rooms * SUPPLIES_PER_ROOM
        consumables_calc = f"{params.sim_rooms} rooms × ${SUPPLIES_PER_ROOM:,}"
        utilities = params.sim_rooms * UTILITIES_PER_ROOM
        utilities_calc = f"{params.sim_rooms} rooms × ${UTILITIES_PER_ROOM:,}"
    items.append(CostLineItem(
        "consumables", "Operations", "Consumable Supplies", consumables,
        consumables_calc, f"{params.opex_model.value} model"))
    items.append(CostLineItem(
        "utilities", "Operations", "Utilities & Facility", utilities,
        utilities_calc, "Electricity, HVAC, cleaning"))

    software = SOFTWARE_LICENSES[params.av_tier]
    items.append(CostLineItem(
        "software", "Technology", "Software & Licenses", software,
        f"{params.av_tier.value} tier: ${software:,.0f}",
        "LMS, video management, scheduling"))

    refresh_base = capex.equipment + capex.av_system
    refresh = refresh_base * (params.refresh_reserve_percent / 100)
    items.append(CostLineItem(
        "refresh-reserve", "Reserve", "Capital Refresh Reserve", refresh,
        f"${refresh_base:,.0f} × {params.refresh_reserve_percent}%",
        "Annual set-aside for equipment replacement"))

    annual = sum(item.amount for item in items)
    return OpexSummary(
        staffing=core_staff + faculty_development,
        faculty_development=faculty_development,
        maintenance=maintenance,
        consumables=consumables,
        software=software,
        utilities=utilities,
        refresh=refresh,
        annual=annual,
        monthly=annual / 12,
        line_items=items,
    )


def session_driven_items(params: SimulatorParameters) -> tuple:
    """OPEX line ids that scale with session volume under the chosen model."""
    if params.opex_model is OpexModel.SESSIONS_BASED:
        return ("consumables", "utilities")
    return ()


def _project(params: SimulatorParameters, capex: CapexSummary, opex: OpexSummary) -> FiveYearProjection:
    annual_sessions = params.sessions_per_month * 12
    driven = session_driven_items(params)
    years: List[YearProjection] = []
    cumulative = 0.0

    for year in range(1, PROJECTION_YEARS + 1):
        inflation_mult = (1 + params.inflation_percent / 100) ** (year - 1)
        growth_mult = (1 + params.growth_rate_percent / 100) ** (year - 1)

        year_capex = capex.net if year == 1 else 0.0
        year_opex = sum(
            item.amount * inflation_mult * (growth_mult if item.id in driven else 1.0)
            for item in opex.line_items
        )
        year_sessions = annual_sessions * growth_mult
        year_total = year_capex + year_opex
        cumulative += year_total

        years.append(YearProjection(
            year=year,
            label=f"Year {year}",
            capex=year_capex,
            opex=year_opex,
            total=year_total,
            cumulative_total=cumulative,
            sessions_per_year=year_sessions,
            cost_per_session=safe_divide(year_opex, year_sessions),
        ))

    total_capex = sum(y.capex for y in years)
    total_opex = sum(y.opex for y in years)
    return FiveYearProjection(
        year_by_year=years,
        total_capex=total_capex,
        total_opex=total_opex,
        total_cost=total_capex + total_opex,
    )


def _metrics(params: SimulatorParameters, capex: CapexSummary, opex: OpexSummary) -> UnitMetrics:
    annual_sessions = params.sessions_per_month * 12
    learner_hours = annual_sessions * AVG_LEARNERS_PER_SESSION * AVG_SESSION_HOURS
    if annual_sessions == 0:
        log.warning("No sessions scheduled; per-session metrics reported as 0")
    return UnitMetrics(
        cost_per_session=safe_divide(opex.annual, annual_sessions),
        cost_per_learner_hour=safe_divide(opex.annual, learner_hours),
        cost_per_sf=safe_divide(capex.net, params.floor_area),
        cost_per_room=safe_divide(capex.net, params.total_rooms),
        total_rooms=params.total_rooms,
        annual_sessions=annual_sessions,
    )


def compute_budget(params: SimulatorParameters) -> BudgetResults:
    """
    Compute the full budget model for one parameter snapshot.

    Args:
        params: Simulator parameters (validated here, never mutated)

    Returns:
        BudgetResults with capex, opex, five_year and metrics sections

    Raises:
        ParameterValidationError: on missing / non-numeric / NaN fields
    """
    params.ensure_valid()
    capex = _capex(params)
    opex = _opex(params, capex)
    results = BudgetResults(
        capex=capex,
        opex=opex,
        five_year=_project(params, capex, opex),
        metrics=_metrics(params, capex, opex),
    )
    log.debug("Budget computed: net capex %.2f, annual opex %.2f, 5-year %.2f",
              capex.net, opex.annual, results.five_year.total_cost)
    return results
