#!/usr/bin/env python3
"""
Reusable UI components for the Streamlit interface.
Handles parameter rendering, progressive disclosure and result cards.
"""

import streamlit as st

from config.models import OrganizationInputs
from simulation.results import BudgetResults, ROIResults
from utils.helpers import format_currency, format_currency_full, format_percentage


def render_parameter_group(group_config: dict, values: dict, specs: dict, prefix: str = ""):
    """
    Render a parameter group with progressive disclosure.

    Args:
        group_config: Configuration for the group (title, color, basic, detailed)
        values: Current values keyed by UI key
        specs: Parameter specifications for the keys in the group
        prefix: Prefix for widget keys

    Returns:
        Updated values
    """
    color_indicators = {"green": "🟢", "amber": "🟡", "red": "🔴"}
    color_descriptions = {
        "green": "Most likely to vary between centers",
        "amber": "May need adjustment for your organization",
        "red": "Set once during planning"
    }

    color = group_config.get('color', 'amber')
    st.caption(f"{color_indicators[color]} {color_descriptions[color]}")

    for param_name in group_config['basic']:
        values[param_name] = render_parameter(param_name, specs[param_name], values.get(param_name), prefix)

    if group_config.get('detailed'):
        with st.expander("🔧 Advanced Settings", expanded=False):
            for param_name in group_config['detailed']:
                values[param_name] = render_parameter(param_name, specs[param_name], values.get(param_name), prefix)

    return values


def render_parameter(param_name: str, spec: dict, current_value, prefix: str = ""):
    """
    Render individual parameter with appropriate widget.

    Args:
        param_name: UI key of the parameter
        spec: Parameter specification
        current_value: Current parameter value
        prefix: Prefix for widget keys

    Returns:
        Updated parameter value
    """
    param_type = spec['type']
    label = spec['label']
    help_text = build_help_text(spec)
    key = f"{prefix}_{param_name}" if prefix else param_name

    if current_value is None:
        current_value = get_default_value(spec)

    if param_type in ('int', 'float'):
        cast = int if param_type == 'int' else float
        value = st.slider(
            label,
            min_value=cast(spec['min']),
            max_value=cast(spec['max']),
            value=cast(current_value),
            step=cast(spec['step']),
            key=key,
            help=help_text
        )
        show_range_hint(value, spec)
        return value

    if param_type == 'select':
        options = spec['options']
        current_index = options.index(current_value) if current_value in options else 0
        return st.selectbox(label, options=options, index=current_index, key=key, help=help_text,
                            format_func=lambda x: x.replace("-", " ").title())

    return current_value


def build_help_text(spec: dict) -> str:
    """
    Build help text from parameter specification.

    Args:
        spec: Parameter specification dictionary

    Returns:
        Formatted help text
    """
    parts = []

    if 'desc' in spec:
        parts.append(spec['desc'])

    if 'rec' in spec and isinstance(spec['rec'], (list, tuple)) and len(spec['rec']) == 2:
        parts.append(f"Typical range: {spec['rec'][0]} - {spec['rec'][1]}")

    return " | ".join(parts)


def show_range_hint(value, spec: dict):
    """Show a caption when the value is outside the recommended range."""
    if not st.session_state.get("_show_hints", True):
        return

    rec = spec.get("rec")
    if isinstance(rec, (list, tuple)) and len(rec) == 2:
        lo, hi = float(rec[0]), float(rec[1])
        if value < lo or value > hi:
            st.caption(f"⚠️ Outside typical range ({lo:g}-{hi:g}). Consider if this fits your center.")


def get_default_value(spec: dict):
    """
    Get default value for parameter specification.

    Args:
        spec: Parameter specification

    Returns:
        Default value for the parameter
    """
    if 'default' in spec:
        return spec['default']
    elif spec['type'] in ['int', 'float']:
        return spec['min']
    elif spec['type'] == 'select':
        return spec['options'][0]
    return None


def render_budget_kpis(results: BudgetResults):
    """Headline metric cards for the budget simulator."""
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Net CAPEX", format_currency(results.capex.net))
    col2.metric("Annual OPEX", format_currency(results.opex.annual))
    col3.metric("5-Year Total", format_currency(results.five_year.total_cost))
    col4.metric("Cost / Session", format_currency_full(results.metrics.cost_per_session))

    col5, col6, col7, col8 = st.columns(4)
    col5.metric("Cost / SF", format_currency_full(results.metrics.cost_per_sf))
    col6.metric("Cost / Room", format_currency(results.metrics.cost_per_room))
    col7.metric("Cost / Learner Hour", format_currency_full(results.metrics.cost_per_learner_hour))
    col8.metric("Annual Sessions", f"{results.metrics.annual_sessions:,.0f}")


def render_organization_inputs(org: OrganizationInputs, prefix: str = "roi") -> OrganizationInputs:
    """
    Render hospital baseline inputs for the ROI estimate.

    Returns:
        A new OrganizationInputs built from the widgets
    """
    col1, col2 = st.columns(2)
    with col1:
        st.markdown("**Workforce**")
        total_rns = st.number_input("Total RNs", min_value=0, step=10, value=int(org.total_rns),
                                    key=f"{prefix}_rns")
        turnover = st.slider("Current RN turnover (%)", 0.0, 40.0, org.turnover_rate * 100, 0.1,
                             key=f"{prefix}_turnover") / 100
        turnover_cost = st.number_input("Cost per RN turnover ($)", min_value=0, step=1000,
                                        value=int(org.turnover_cost), key=f"{prefix}_turnover_cost")
        st.markdown("**Patient Safety**")
        code_blue = st.number_input("Code blue events / yr", min_value=0, step=5,
                                    value=int(org.code_blue_events), key=f"{prefix}_code_blue")
        survival = st.slider("Current code blue survival (%)", 0.0, 100.0, org.code_blue_survival * 100, 1.0,
                             key=f"{prefix}_survival") / 100
        med_errors = st.number_input("Medication errors / yr", min_value=0, step=10,
                                     value=int(org.medication_errors), key=f"{prefix}_med_errors")
        med_cost = st.number_input("Cost per medication error ($)", min_value=0, step=50,
                                   value=int(org.medication_error_cost), key=f"{prefix}_med_cost")
    with col2:
        st.markdown("**Infection Prevention**")
        clabsi_rate = st.number_input("CLABSI rate (per 1,000 line days)", min_value=0.0, step=0.1,
                                      value=float(org.clabsi_rate), key=f"{prefix}_clabsi_rate")
        line_days = st.number_input("Central line days / yr", min_value=0, step=500,
                                    value=int(org.central_line_days), key=f"{prefix}_line_days")
        clabsi_cost = st.number_input("Cost per CLABSI ($)", min_value=0, step=500,
                                      value=int(org.clabsi_cost), key=f"{prefix}_clabsi_cost")
        st.markdown("**Organization**")
        premium = st.number_input("Malpractice premium ($/yr)", min_value=0, step=10_000,
                                  value=int(org.malpractice_premium), key=f"{prefix}_premium")
        has_magnet = st.checkbox("Has Magnet status", value=org.has_magnet_status, key=f"{prefix}_has_magnet")
        pursuing = st.checkbox("Pursuing Magnet", value=org.pursuing_magnet, key=f"{prefix}_pursuing")
        discharges = st.number_input("Annual discharges", min_value=0, step=500,
                                     value=int(org.annual_discharges), key=f"{prefix}_discharges")
        discount = st.slider("Discount rate (%)", 0.0, 15.0, org.discount_rate * 100, 0.5,
                             key=f"{prefix}_discount") / 100

    return org.with_updates(
        total_rns=total_rns, turnover_rate=turnover, turnover_cost=turnover_cost,
        code_blue_events=code_blue, code_blue_survival=survival,
        medication_errors=med_errors, medication_error_cost=med_cost,
        clabsi_rate=clabsi_rate, central_line_days=line_days, clabsi_cost=clabsi_cost,
        malpractice_premium=premium, has_magnet_status=has_magnet, pursuing_magnet=pursuing,
        annual_discharges=discharges, discount_rate=discount,
    )


def render_roi_summary(roi: ROIResults):
    """Savings range and, when a budget is attached, the financial summary."""
    rng = roi.confidence_range
    col1, col2, col3 = st.columns(3)
    col1.metric("Conservative (70%)", format_currency(rng.conservative))
    col2.metric("Baseline annual savings", format_currency(rng.baseline))
    col3.metric("Optimistic (130%)", format_currency(rng.optimistic))

    if roi.summary is None:
        return
    s = roi.summary
    col4, col5, col6, col7 = st.columns(4)
    col4.metric("5-Year NPV of Savings", format_currency(s.total_five_year_savings))
    col5.metric("Net ROI", format_currency(s.net_roi), format_percentage(s.roi_percent / 100))
    col6.metric("Payback", f"{s.payback_period_months} mo" if s.payback_period_months is not None else "Never")
    col7.metric("IRR", f"{s.irr_percent:.1f}%" if s.irr_percent is not None else "n/a")
