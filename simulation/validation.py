#!/usr/bin/env python3
"""
Input validation and planning sanity checks for simulator parameters.
Blocks calculations on broken inputs and flags combinations that rarely make
sense for a hospital simulation center.
"""

import streamlit as st
from typing import List

from config.models import SimulatorParameters, OrganizationInputs

# Planning rules of thumb
MIN_SF_PER_ROOM = 300
MAX_SESSIONS_PER_ROOM_MONTH = 88  # 22 working days x 4 sessions
ROOMS_PER_FTE = 3


def preflight_validate(params: SimulatorParameters) -> bool:
    """
    Validate parameters before the budget runs.

    Args:
        params: Simulator parameters

    Returns:
        bool: True if parameters are usable
    """
    errs = params.validate()
    if errs:
        st.error("Invalid inputs:\n- " + "\n- ".join(errs))
        return False
    return True


def planning_warnings(params: SimulatorParameters) -> List[str]:
    """
    Check a parameter set for combinations that are legal but questionable.

    Args:
        params: Simulator parameters

    Returns:
        List of warning messages (empty when nothing stands out)
    """
    warnings = []

    if params.total_rooms and params.floor_area / params.total_rooms < MIN_SF_PER_ROOM:
        warnings.append(
            f"Only {params.floor_area / params.total_rooms:,.0f} SF per room - "
            f"simulation suites usually need at least {MIN_SF_PER_ROOM} SF")

    capacity = params.sim_rooms * MAX_SESSIONS_PER_ROOM_MONTH
    if params.sessions_per_month > capacity:
        warnings.append(
            f"{params.sessions_per_month:.0f} sessions/month exceeds the "
            f"{capacity} session capacity of {params.sim_rooms} sim rooms")

    if params.high_fidelity_manikins > params.sim_rooms * 2:
        warnings.append("More than two high-fidelity manikins per sim room - check utilization")

    if params.core_fte * ROOMS_PER_FTE < params.sim_rooms:
        warnings.append(
            f"{params.core_fte} FTE may be too few to operate {params.sim_rooms} sim rooms")

    if params.sessions_per_month == 0:
        warnings.append("No sessions scheduled - per-session costs will show as $0")

    return warnings


def organization_warnings(org: OrganizationInputs) -> List[str]:
    """Flag baseline figures that will zero out a savings category."""
    warnings = []
    if org.turnover_rate <= 0.08:
        warnings.append("Turnover is already at or below the 8% target - no retention savings")
    if org.code_blue_survival >= 0.45:
        warnings.append("Code blue survival is already at or above 45% - no code blue savings")
    if org.has_magnet_status and org.pursuing_magnet:
        warnings.append("Organization already holds Magnet status; revenue uplift may be overstated")
    return warnings
