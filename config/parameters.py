#!/usr/bin/env python3
"""
Parameter specifications and mappings for the simulation center planner.
Slider/select specs for every input, grouped for the sidebar, plus the mapping
from UI keys onto the parameter records.
"""

import logging
import os
from typing import Any, Dict

from utils.helpers import clamp
from config.models import (
    SimulatorParameters, AVTier, CostRegion, QualityLevel, OpexModel, ConstructionType
)

log = logging.getLogger(__name__)

LOG_LEVEL_ENV = "SIMCENTER_LOG_LEVEL"


def get_log_level() -> str:
    """Log level name from the environment, INFO when unset or unknown."""
    level = os.environ.get(LOG_LEVEL_ENV, "INFO").upper()
    if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        return "INFO"
    return level


def _options(choice) -> list:
    return [member.value for member in choice]


# BUDGET SIMULATOR PARAMETER SPECIFICATIONS
SIMULATOR_PARAM_SPECS = {
    # Facility (GREEN - drives most of the CAPEX)
    "FLOOR_AREA": {"type": "int", "min": 2000, "max": 10_000, "step": 500, "label": "Floor area (SF)",
                   "desc": "Total square footage of the simulation center", "rec": (3500, 6000), "color": "green"},
    "SIM_ROOMS": {"type": "int", "min": 1, "max": 8, "step": 1, "label": "Simulation rooms",
                  "desc": "High-fidelity simulation suites", "rec": (2, 5), "color": "green"},
    "CONTROL_ROOMS": {"type": "int", "min": 1, "max": 4, "step": 1, "label": "Control rooms",
                      "desc": "Observation and operator rooms", "rec": (1, 2), "color": "green"},
    "DEBRIEF_ROOMS": {"type": "int", "min": 1, "max": 4, "step": 1, "label": "Debrief rooms",
                      "desc": "Post-scenario debriefing space", "rec": (1, 3), "color": "green"},

    # Equipment (GREEN)
    "HIGH_FIDELITY_MANIKINS": {"type": "int", "min": 0, "max": 6, "step": 1, "label": "High-fidelity manikins",
                               "desc": "$75,000 each (SimMan, HAL or equivalent)", "rec": (1, 4), "color": "green"},
    "TASK_TRAINERS": {"type": "int", "min": 0, "max": 20, "step": 1, "label": "Task trainers",
                      "desc": "$3,500 each (IV arms, intubation heads)", "rec": (4, 12), "color": "green"},
    "AV_TIER": {"type": "select", "options": _options(AVTier), "label": "A/V system tier",
                "desc": "Basic $15K, standard $30K, premium $50K per sim room", "default": AVTier.STANDARD.value,
                "color": "green"},

    # Staffing (AMBER)
    "CORE_FTE": {"type": "float", "min": 1.0, "max": 5.0, "step": 0.5, "label": "Core staff (FTE)",
                 "desc": "Director, coordinator, operations specialists at $95K loaded", "rec": (2.0, 3.5),
                 "color": "amber"},
    "FACULTY_ALLOCATION_PERCENT": {"type": "float", "min": 0.0, "max": 50.0, "step": 5.0,
                                   "label": "Faculty allocation (%)",
                                   "desc": "Share of a 15-person faculty pool in simulation training",
                                   "rec": (10, 30), "color": "amber"},
    "TRAINING_HOURS_PER_YEAR": {"type": "int", "min": 0, "max": 200, "step": 10, "label": "Faculty training hours / yr",
                                "desc": "Development hours per faculty member at $150/hour", "rec": (20, 80),
                                "color": "amber"},

    # Operations (AMBER)
    "SESSIONS_PER_MONTH": {"type": "int", "min": 20, "max": 300, "step": 10, "label": "Sessions per month",
                           "desc": "Scheduled simulation sessions across all rooms", "rec": (60, 180),
                           "color": "amber"},
    "OPEX_MODEL": {"type": "select", "options": _options(OpexModel), "label": "Consumables model",
                   "desc": "Price supplies and utilities per room or per session",
                   "default": OpexModel.ROOM_BASED.value, "color": "amber"},
    "GROWTH_RATE_PERCENT": {"type": "float", "min": 0.0, "max": 15.0, "step": 0.5, "label": "Session growth (%/yr)",
                            "desc": "Annual growth in session volume", "rec": (2, 8), "color": "amber"},
    "INFLATION_PERCENT": {"type": "float", "min": 0.0, "max": 10.0, "step": 0.5, "label": "Cost inflation (%/yr)",
                          "desc": "Annual escalation of operating costs", "rec": (2, 4), "color": "red"},

    # Advanced (RED - rarely changed)
    "QUALITY_LEVEL": {"type": "select", "options": _options(QualityLevel), "label": "Construction quality",
                      "desc": "Drives construction, furniture and soft-cost rates",
                      "default": QualityLevel.STANDARD.value, "color": "red"},
    "COST_REGION": {"type": "select", "options": _options(CostRegion), "label": "Cost region",
                    "desc": "Regional construction multiplier (0.85 / 1.0 / 1.3)",
                    "default": CostRegion.MODERATE.value, "color": "red"},
    "CONTINGENCY_PERCENT": {"type": "float", "min": 5.0, "max": 20.0, "step": 1.0, "label": "Contingency (%)",
                            "desc": "Reserve on construction + soft costs", "rec": (8, 15), "color": "red"},
    "REFRESH_RESERVE_PERCENT": {"type": "float", "min": 10.0, "max": 25.0, "step": 1.0,
                                "label": "Refresh reserve (%/yr)",
                                "desc": "Annual set-aside for equipment and A/V replacement", "rec": (12, 20),
                                "color": "red"},
}

# CAPEX MODEL PARAMETER SPECIFICATIONS
PROJECT_PARAM_SPECS = {
    "FLOOR_AREA": SIMULATOR_PARAM_SPECS["FLOOR_AREA"],
    "SIM_ROOMS": SIMULATOR_PARAM_SPECS["SIM_ROOMS"],
    "CONTROL_ROOMS": SIMULATOR_PARAM_SPECS["CONTROL_ROOMS"],
    "DEBRIEF_ROOMS": SIMULATOR_PARAM_SPECS["DEBRIEF_ROOMS"],
    "SUPPORT_SPACES": {"type": "int", "min": 0, "max": 8, "step": 1, "label": "Support spaces",
                       "desc": "Storage, tech workshop, offices", "rec": (2, 4), "color": "green"},
    "CONSTRUCTION_TYPE": {"type": "select", "options": _options(ConstructionType), "label": "Construction type",
                          "desc": "Hospital renovation adds 25% for ICRA, phasing and after-hours work",
                          "default": ConstructionType.HOSPITAL_RENOVATION.value, "color": "amber"},
    "COST_REGION": SIMULATOR_PARAM_SPECS["COST_REGION"],
    "QUALITY_LEVEL": SIMULATOR_PARAM_SPECS["QUALITY_LEVEL"],
}

SIMULATOR_GROUPS = {
    "facility": {
        "title": "Facility",
        "color": "green",
        "basic": ["FLOOR_AREA", "SIM_ROOMS"],
        "detailed": ["CONTROL_ROOMS", "DEBRIEF_ROOMS"]
    },
    "equipment": {
        "title": "Equipment & Technology",
        "color": "green",
        "basic": ["HIGH_FIDELITY_MANIKINS", "TASK_TRAINERS", "AV_TIER"],
        "detailed": []
    },
    "staffing": {
        "title": "Staffing",
        "color": "amber",
        "basic": ["CORE_FTE"],
        "detailed": ["FACULTY_ALLOCATION_PERCENT", "TRAINING_HOURS_PER_YEAR"]
    },
    "operations": {
        "title": "Operations",
        "color": "amber",
        "basic": ["SESSIONS_PER_MONTH", "OPEX_MODEL"],
        "detailed": ["GROWTH_RATE_PERCENT", "INFLATION_PERCENT"]
    },
    "advanced": {
        "title": "Advanced Assumptions",
        "color": "red",
        "basic": ["QUALITY_LEVEL", "COST_REGION"],
        "detailed": ["CONTINGENCY_PERCENT", "REFRESH_RESERVE_PERCENT"]
    },
}

PROJECT_GROUPS = {
    "space": {
        "title": "Space Program",
        "color": "green",
        "basic": ["FLOOR_AREA", "SIM_ROOMS"],
        "detailed": ["CONTROL_ROOMS", "DEBRIEF_ROOMS", "SUPPORT_SPACES"]
    },
    "cost_drivers": {
        "title": "Cost Drivers",
        "color": "amber",
        "basic": ["CONSTRUCTION_TYPE", "QUALITY_LEVEL"],
        "detailed": ["COST_REGION"]
    },
}


def field_name(key: str) -> str:
    """UI key -> parameter record field (FLOOR_AREA -> floor_area)."""
    return key.lower()


def clamp_to_spec(key: str, value: Any, specs: Dict[str, dict] = SIMULATOR_PARAM_SPECS) -> Any:
    """
    Clamp a numeric value to its slider bounds; selects must be a listed option.

    Args:
        key: UI parameter key
        value: Proposed value
        specs: Spec table to look the key up in

    Returns:
        The value, clamped and cast to the spec type
    """
    spec = specs.get(key)
    if spec is None:
        raise KeyError(f"Unknown parameter: {key}")
    if spec["type"] == "select":
        if value not in spec["options"]:
            raise ValueError(f"Invalid {key}: {value!r}. Available: {spec['options']}")
        return value
    clamped = clamp(value, spec["min"], spec["max"])
    if clamped != value:
        log.info("%s=%s clamped to %s", key, value, clamped)
    return int(clamped) if spec["type"] == "int" else float(clamped)


def apply_overrides(params, overrides: Dict[str, Any], specs: Dict[str, dict] = SIMULATOR_PARAM_SPECS):
    """
    Apply UI overrides to a parameter record.

    UI keys are mapped to record fields and clamped to their bounds; the
    record is replaced wholesale, never mutated.
    """
    changes = {}
    for key, value in overrides.items():
        if key in specs:
            changes[field_name(key)] = clamp_to_spec(key, value, specs)
        else:
            changes[key] = value
    return params.with_updates(**changes)


def default_ui_values(params=None, specs: Dict[str, dict] = SIMULATOR_PARAM_SPECS) -> Dict[str, Any]:
    """Current values keyed by UI key, for seeding widgets."""
    params = params if params is not None else SimulatorParameters()
    data = params.to_dict()
    return {key: data[field_name(key)] for key in specs}
