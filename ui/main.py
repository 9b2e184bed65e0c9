#!/usr/bin/env python3
"""
Main Streamlit application for the simulation center planner.
Orchestrates the sidebar, the calculator tabs and the downloads.
"""

import io
import json
import logging
import zipfile

import matplotlib.pyplot as plt
import streamlit as st
import pandas as pd

from config.models import (
    SimulatorParameters, ProjectParameters, OrganizationInputs, parameters_to_json, parameters_from_json
)
from config.parameters import (
    SIMULATOR_PARAM_SPECS, PROJECT_PARAM_SPECS, SIMULATOR_GROUPS, PROJECT_GROUPS,
    apply_overrides, default_ui_values
)
from config.scenarios import SCENARIOS, CAPEX_SCENARIOS, scenario_from_parameters
from simulation.capex_model import calculate_capex, calculate_net_investment
from simulation.comparison import compare_scenarios, compare_capex_scenarios, cheapest
from simulation.engine import compute_budget
from simulation.roi import estimate_roi
from simulation.validation import preflight_validate, planning_warnings, organization_warnings
from analysis.metrics import (
    capex_frame, opex_frame, projection_frame, comparison_frame, roi_category_frame, assess_benchmarks
)
from visualization.charts import (
    plot_capex_breakdown, plot_five_year_projection, plot_scenario_comparison, plot_roi_timeline,
    render_all_figures
)
from ui.components import (
    render_parameter_group, render_budget_kpis, render_organization_inputs, render_roi_summary
)
from pdf_export import export_budget_pdf
from rfp_export import (
    VENDOR_CATEGORIES, export_budget_workbook, build_vendor_bid_request, rfp_filename, export_rfp_pdf,
    export_run, load_parameters_from_workbook
)
from utils.helpers import format_currency, format_currency_full

log = logging.getLogger(__name__)


def initialize_streamlit():
    """Initialize Streamlit configuration and page setup."""
    st.set_page_config(page_title="Simulation Center Planner", layout="wide")
    st.title("Simulation Center Planner")
    st.caption("Budget, capital cost, scenario and cost-avoidance planning for a hospital simulation center")


def _all_scenarios():
    """Built-in presets followed by the scenarios saved or loaded this session."""
    return SCENARIOS + st.session_state.setdefault("saved_scenarios", [])


def _add_scenario(scenario):
    st.session_state.setdefault("saved_scenarios", []).append(scenario)
    st.session_state["_preset_select"] = scenario.id


def _save_current(params: SimulatorParameters):
    name = st.session_state.get("_save_name", "")
    _add_scenario(scenario_from_parameters(params, name, st.session_state.get("saved_scenarios", [])))


def _load_uploaded():
    """Turn an uploaded parameter file (.json or exported .xlsx) into a selectable scenario."""
    upload = st.session_state.get("_upload")
    st.session_state.pop("_load_error", None)
    if upload is None:
        return
    try:
        if upload.name.lower().endswith(".xlsx"):
            params = load_parameters_from_workbook(io.BytesIO(upload.getvalue()))
        else:
            params = parameters_from_json(upload.getvalue().decode("utf-8"))
    except (ValueError, KeyError, OSError, zipfile.BadZipFile) as e:
        log.warning("Could not load %s: %s", upload.name, e)
        st.session_state["_load_error"] = f"Could not load {upload.name}: {e}"
        return
    name = upload.name.rsplit(".", 1)[0]
    _add_scenario(scenario_from_parameters(params, name, st.session_state.get("saved_scenarios", []),
                                           description=f"Loaded from {upload.name}"))


def render_sidebar() -> SimulatorParameters:
    """
    Render the sidebar with all budget simulator controls.

    Returns:
        SimulatorParameters built from the preset and the widget values
    """
    with st.sidebar:
        with st.expander("About this model", expanded=False):
            st.markdown("Planning estimates only. All figures derive from published cost benchmarks "
                        "and should be validated with vendor quotes.")

        st.header("Configuration")
        st.caption("Hover over any label for explanation. Colors indicate how likely parameters "
                   "are to vary between centers.")
        st.session_state["_show_hints"] = st.toggle("Show range hints", value=True)

        scenarios = {s.id: s for s in _all_scenarios()}
        preset_id = st.selectbox("Scenario preset", list(scenarios), key="_preset_select",
                                 format_func=lambda sid: scenarios[sid].name)
        preset = scenarios[preset_id]

        st.session_state["_preset"] = preset.id
        st.session_state["_preset_name"] = preset.name

        # Widget keys carry the preset id so switching presets reseeds them
        values = default_ui_values(preset.parameters)
        for group_name, group_config in SIMULATOR_GROUPS.items():
            with st.expander(group_config["title"], expanded=(group_name == "facility")):
                values = render_parameter_group(group_config, values, SIMULATOR_PARAM_SPECS, f"sim_{preset.id}")

        params = apply_overrides(preset.parameters, values, SIMULATOR_PARAM_SPECS)

        with st.expander("Save / load", expanded=False):
            st.text_input("Scenario name", value=f"{preset.name} (modified)", key="_save_name")
            st.button("Save current as scenario", on_click=_save_current, args=(params,))
            st.download_button("Download parameters (json)", data=parameters_to_json(params),
                               file_name="simulation_center_parameters.json", mime="application/json")
            st.file_uploader("Load parameters", type=["json", "xlsx"], key="_upload", on_change=_load_uploaded,
                             help="A saved parameter file or a budget workbook exported from this dashboard")
            if st.session_state.get("_load_error"):
                st.error(st.session_state["_load_error"])

    st.session_state["params"] = params
    return params


def _show(fig):
    st.pyplot(fig)
    plt.close(fig)


def render_budget_tab(params: SimulatorParameters, results):
    st.subheader("Budget Simulator")
    for warning in planning_warnings(params):
        st.warning(warning)

    render_budget_kpis(results)

    col1, col2 = st.columns(2)
    with col1:
        st.markdown("#### Capital costs")
        _show(plot_capex_breakdown(results))
        st.dataframe(capex_frame(results), use_container_width=True)
    with col2:
        st.markdown("#### Annual operating costs")
        st.dataframe(opex_frame(results), use_container_width=True)
        st.metric("Monthly OPEX", format_currency_full(results.opex.monthly))

    st.markdown("#### 5-year projection")
    _show(plot_five_year_projection(results))
    st.dataframe(projection_frame(results), use_container_width=True)


def render_capex_tab():
    """Standalone CAPEX cost model with benchmark scoring."""
    st.subheader("CAPEX Model")
    values = default_ui_values(ProjectParameters(), PROJECT_PARAM_SPECS)
    cols = st.columns(len(PROJECT_GROUPS))
    for col, group_config in zip(cols, PROJECT_GROUPS.values()):
        with col:
            st.markdown(f"**{group_config['title']}**")
            values = render_parameter_group(group_config, values, PROJECT_PARAM_SPECS, "capex")

    project = apply_overrides(ProjectParameters(), values, PROJECT_PARAM_SPECS)
    capex = calculate_capex(project)
    net = calculate_net_investment(project)

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Total project cost", format_currency(capex.total_project_cost))
    col2.metric("Net new investment", format_currency(net["net_investment"]))
    col3.metric("Cost / SF", format_currency_full(capex.cost_per_sf))
    col4.metric("Cost / Room", format_currency(capex.cost_per_room))

    st.dataframe(capex_frame(capex), use_container_width=True)

    score, interpretation, rows = assess_benchmarks(capex)
    st.markdown(f"#### Benchmark check: {score:.0f}/100")
    st.caption(interpretation)
    st.dataframe(pd.DataFrame(rows), use_container_width=True)

    st.markdown("#### Build options")
    st.dataframe(comparison_frame(compare_capex_scenarios(project, CAPEX_SCENARIOS)), use_container_width=True)


def render_scenarios_tab(params: SimulatorParameters):
    st.subheader("Scenario Comparison")
    comparisons = compare_scenarios(params, _all_scenarios())
    _show(plot_scenario_comparison(comparisons))
    st.dataframe(comparison_frame(comparisons), use_container_width=True)
    best = cheapest(comparisons)
    st.caption(f"Lowest 5-year cost: {best.scenario.name} ({format_currency(best.results.five_year.total_cost)})")
    return comparisons


def render_roi_tab(params: SimulatorParameters, results):
    st.subheader("ROI / Cost Avoidance")
    with st.expander("Hospital baseline", expanded=False):
        org = render_organization_inputs(OrganizationInputs())

    errs = org.validate()
    if errs:
        st.error("Invalid inputs:\n- " + "\n- ".join(errs))
        return None
    for warning in organization_warnings(org):
        st.warning(warning)

    roi = estimate_roi(org, params, results)
    render_roi_summary(roi)

    st.dataframe(roi_category_frame(roi), use_container_width=True)
    fig = plot_roi_timeline(roi)
    if fig is not None:
        _show(fig)

    if roi.by_asset:
        st.markdown("#### Contribution by asset")
        st.dataframe(pd.DataFrame([vars(a) for a in roi.by_asset]), use_container_width=True)

    with st.expander("Evidence", expanded=False):
        for cat in roi.by_category:
            st.markdown(f"**{cat.name}**")
            for c in cat.citations:
                st.markdown(f"- {c['source']} ({c['year']}): {c['description']}")
    return roi


def render_download_section(params: SimulatorParameters, results, comparisons, roi):
    """
    Render the download section with the workbook, PDF report, RFPs and plots.

    Args:
        params: Simulator parameters
        results: Budget results
        comparisons: Scenario comparisons (optional)
        roi: ROI results (optional)
    """
    st.subheader("Exports")
    scenario_name = st.session_state.get("_preset_name", "Custom")

    col1, col2 = st.columns(2)
    col1.download_button(
        "Download budget workbook (xlsx)",
        data=export_budget_workbook(params, results, scenario_name),
        file_name="simulation_center_budget.xlsx",
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    )
    col2.download_button("Download budget report (pdf)", data=export_budget_pdf(params, results, scenario_name),
                         file_name="simulation_center_budget.pdf", mime="application/pdf")

    st.markdown("#### Vendor bid requests")
    organization_name = st.text_input("Organization name", value="Community Health System")
    category = st.selectbox("Vendor category", list(VENDOR_CATEGORIES),
                            format_func=lambda c: VENDOR_CATEGORIES[c]["title"])
    notes = st.text_area("Additional notes", value="")
    rfp = build_vendor_bid_request(params, results, category, organization_name=organization_name,
                                   additional_notes=notes or None)
    col1, col2 = st.columns(2)
    col1.download_button("Download RFP (Markdown)", data=rfp,
                         file_name=rfp_filename(category, organization_name), mime="text/markdown")
    col2.download_button("Download RFP (pdf)",
                         data=export_rfp_pdf(params, results, category, organization_name=organization_name,
                                             additional_notes=notes or None),
                         file_name=rfp_filename(category, organization_name, ext="pdf"), mime="application/pdf")
    with st.expander("Preview", expanded=False):
        st.markdown(rfp)

    # Create downloadable zip of plots
    cap = render_all_figures(results, comparisons, roi)
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        zf.writestr("manifest.json", json.dumps(cap.manifest, indent=2))
        for fname, data in cap.images:
            zf.writestr(fname, data)
    st.download_button("Download plots (zip)", data=buf.getvalue(), file_name="simulation_center_plots.zip")

    st.markdown("#### Save run to folder")
    output_root = st.text_input("Output folder", value="runs")
    if st.button("Save run"):
        try:
            out = export_run(params, results, output_root, scenario_name, figures=cap)
        except OSError as e:
            st.error(f"Could not write run folder: {e}")
        else:
            st.success(f"Saved run {out['run_id']} to {out['out_dir']}")


def main():
    """Main application entry point."""
    initialize_streamlit()

    params = render_sidebar()

    # Preflight validation
    if not preflight_validate(params):
        st.stop()

    results = compute_budget(params)
    log.debug("Budget computed: 5-year total %.2f", results.five_year.total_cost)

    tab_budget, tab_capex, tab_scen, tab_roi, tab_export = st.tabs(
        ["Budget Simulator", "CAPEX Model", "Scenarios", "ROI", "Exports"]
    )
    with tab_budget:
        render_budget_tab(params, results)
    with tab_capex:
        render_capex_tab()
    with tab_scen:
        comparisons = render_scenarios_tab(params)
    with tab_roi:
        roi = render_roi_tab(params, results)
    with tab_export:
        render_download_section(params, results, comparisons, roi)


if __name__ == "__main__":
    main()
