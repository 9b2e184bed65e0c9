#!/usr/bin/env python3
"""
Budget workbook and vendor RFP exports.

The workbook mirrors the dashboard (Summary, CAPEX, OPEX, 5-Year sheets) and
carries a Parameters sheet that load_parameters_from_workbook reads back. The
RFP is a Markdown request for proposal per vendor category, priced from the
current budget with a +/-15% range, and can also be rendered as a PDF.
"""

# rfp_export.py

import datetime
import hashlib
import io
import json
import os
from typing import Any, Dict, List, Optional

from openpyxl import Workbook, load_workbook
from openpyxl.styles import Font

from config.models import SimulatorParameters, camel_case_name
from pdf_export import export_budget_pdf, markdown_to_pdf
from simulation.results import BudgetResults
from utils.exceptions import ParameterValidationError
from utils.helpers import budget_range, format_currency_full

CURRENCY_FORMAT = '"$"#,##0'
HEADER_FONT = Font(bold=True)
TITLE_FONT = Font(bold=True, size=14)

VENDOR_CATEGORIES = {
    "av-systems": {
        "title": "Audio/Visual Systems",
        "description": "Capture, recording, display, and communication systems for simulation rooms",
    },
    "simulation-equipment": {
        "title": "Simulation Equipment",
        "description": "High-fidelity manikins, task trainers, and medical simulation devices",
    },
    "construction": {
        "title": "Construction / General Contractor",
        "description": "Building renovation, MEP upgrades, and infrastructure installation",
    },
    "it-software": {
        "title": "IT Infrastructure & Software",
        "description": "Learning management systems, video management, scheduling, and network infrastructure",
    },
    "furniture-fixtures": {
        "title": "Furniture & Fixtures",
        "description": "Hospital beds, medical furniture, control room workstations, and storage solutions",
    },
}

AV_TIER_SPECS = {
    "basic": {
        "Camera System": "PTZ cameras (1 per room)",
        "Recording": "Basic DVR recording",
        "Displays": '55" display per room',
        "Audio": "Ceiling microphones, wall speakers",
        "Control": "Basic control panel",
        "features": ["Live viewing", "Basic recording", "Manual camera control"],
    },
    "standard": {
        "Camera System": "HD PTZ cameras (2 per room)",
        "Recording": "Multi-channel recording with playback",
        "Displays": '65" primary + 32" secondary per room',
        "Audio": "Array microphones, directional speakers",
        "Control": "Touch panel control system",
        "features": ["Multi-angle recording", "Debriefing software", "Annotation tools", "Basic analytics"],
    },
    "premium": {
        "Camera System": "4K PTZ cameras (3+ per room) with tracking",
        "Recording": "Enterprise recording platform with cloud backup",
        "Displays": '75" primary + 55" secondary + mobile displays',
        "Audio": "Professional array mics, surround sound",
        "Control": "Centralized control with automation",
        "features": ["AI-assisted tracking", "Multi-room management", "Advanced analytics",
                     "Remote observation", "Integration APIs"],
    },
}

QUALITY_SPECS = {
    "budget": {
        "Finishes": "Standard commercial finishes",
        "HVAC": "Zone heating/cooling",
        "Lighting": "LED fixtures with dimming",
        "Acoustics": "Basic sound absorption",
    },
    "standard": {
        "Finishes": "Healthcare-grade finishes with epoxy flooring",
        "HVAC": "Individual room climate control",
        "Lighting": "Programmable LED with simulation modes",
        "Acoustics": "Sound-rated walls between rooms",
    },
    "premium": {
        "Finishes": "Premium healthcare finishes, seamless flooring",
        "HVAC": "Hospital-grade air handling with HEPA filtration",
        "Lighting": "Full simulation lighting with day/night cycles",
        "Acoustics": "STC 50+ rated construction throughout",
    },
}

SUBMISSION_ITEMS = [
    "Company profile and relevant healthcare simulation experience",
    "Detailed technical specifications for all proposed equipment/services",
    "Itemized pricing with options for different configurations",
    "Project timeline and implementation plan",
    "Warranty and support terms",
    "References from similar healthcare simulation installations",
    "Proof of relevant certifications and insurance",
]

EVALUATION_CRITERIA = [
    ("Technical Capability & Solution Quality", "30%"),
    ("Healthcare Simulation Experience", "25%"),
    ("Total Cost of Ownership", "20%"),
    ("Support & Warranty Terms", "15%"),
    ("Implementation Timeline", "10%"),
]

DEFAULT_CONTACT = {
    "name": "Project Coordinator",
    "email": "simulation@example-health.org",
    "phone": "(555) 010-0100",
}


def _short_hash(obj: Any) -> str:
    s = json.dumps(obj, sort_keys=True, default=str)
    return hashlib.sha1(s.encode("utf-8")).hexdigest()[:8]


def _now_ts() -> str:
    return datetime.datetime.now().strftime("%Y%m%d_%H%M%S")


def make_run_id(config_like: Dict[str, Any]) -> str:
    """Timestamp plus a short hash of the inputs, e.g. 20250101_120000_1a2b3c4d."""
    return f"{_now_ts()}_{_short_hash(config_like)}"


# ---------- Workbook ----------

def _write_rows(ws, rows: List[list], currency_rows=()):
    for row in rows:
        ws.append(row)
    for r in currency_rows:
        ws.cell(row=r, column=2).number_format = CURRENCY_FORMAT


def _summary_sheet(ws, params: SimulatorParameters, results: BudgetResults, scenario_name: str):
    p = params.to_dict()
    m = results.metrics
    rows = [
        ["SIMULATION CENTER BUDGET SUMMARY"],
        [],
        ["Scenario:", scenario_name],
        ["Generated:", datetime.datetime.now().strftime("%Y-%m-%d %H:%M")],
        [],
        ["KEY METRICS"],
        ["Total 5-Year Cost", results.five_year.total_cost],
        ["Phase 1 CAPEX (Net)", results.capex.net],
        ["Annual OPEX", results.opex.annual],
        ["Monthly OPEX", results.opex.monthly],
        ["Cost per Session", m.cost_per_session],
        ["Cost per SF", m.cost_per_sf],
        ["Cost per Learner Hour", m.cost_per_learner_hour],
        ["Annual Sessions", m.annual_sessions],
        [],
        ["FACILITY CONFIGURATION"],
        ["Floor Area (SF)", p["floor_area"]],
        ["Simulation Rooms", p["sim_rooms"]],
        ["Control Rooms", p["control_rooms"]],
        ["Debrief Rooms", p["debrief_rooms"]],
        ["High-Fidelity Manikins", p["high_fidelity_manikins"]],
        ["Task Trainers", p["task_trainers"]],
        ["A/V Tier", p["av_tier"]],
        ["Quality Level", p["quality_level"]],
        ["Cost Region", p["cost_region"]],
        [],
        ["STAFFING & OPERATIONS"],
        ["Core Staff FTE", p["core_fte"]],
        ["Faculty Allocation %", p["faculty_allocation_percent"]],
        ["Training Hours/Year", p["training_hours_per_year"]],
        ["Sessions per Month", p["sessions_per_month"]],
        ["OPEX Model", p["opex_model"]],
        ["Growth Rate %", p["growth_rate_percent"]],
        ["Inflation Rate %", p["inflation_percent"]],
        ["Contingency %", p["contingency_percent"]],
        ["Refresh Reserve %", p["refresh_reserve_percent"]],
    ]
    _write_rows(ws, rows, currency_rows=range(7, 14))
    ws["A1"].font = TITLE_FONT
    for cell in ("A6", "A16", "A27"):
        ws[cell].font = HEADER_FONT
    ws.column_dimensions["A"].width = 25
    ws.column_dimensions["B"].width = 20


def _line_item_sheet(ws, title: str, items, totals: List[list]):
    ws.append([title])
    ws["A1"].font = TITLE_FONT
    ws.append([])
    ws.append(["Category", "Item", "Amount", "Calculation", "Notes"])
    for cell in ws[3]:
        cell.font = HEADER_FONT
    for item in items:
        ws.append([item.category, item.name, item.amount, item.basis, item.notes])
        ws.cell(row=ws.max_row, column=3).number_format = CURRENCY_FORMAT
    ws.append([])
    ws.append(["TOTALS"])
    ws.cell(row=ws.max_row, column=1).font = HEADER_FONT
    for label, value in totals:
        ws.append([label, None, value])
        ws.cell(row=ws.max_row, column=3).number_format = CURRENCY_FORMAT
    ws.column_dimensions["A"].width = 16
    ws.column_dimensions["B"].width = 30
    ws.column_dimensions["C"].width = 16
    ws.column_dimensions["D"].width = 40


def _projection_sheet(ws, results: BudgetResults):
    ws.append(["5-YEAR PROJECTION"])
    ws["A1"].font = TITLE_FONT
    ws.append([])
    ws.append(["Year", "CAPEX", "OPEX", "Total", "Cumulative", "Sessions", "Cost per Session"])
    for cell in ws[3]:
        cell.font = HEADER_FONT
    for y in results.five_year.year_by_year:
        ws.append([y.label, y.capex, y.opex, y.total, y.cumulative_total, y.sessions_per_year, y.cost_per_session])
        for col in (2, 3, 4, 5, 7):
            ws.cell(row=ws.max_row, column=col).number_format = CURRENCY_FORMAT
    ws.append([])
    ws.append(["5-Year Total", results.five_year.total_capex, results.five_year.total_opex,
               results.five_year.total_cost])
    for col in (2, 3, 4):
        ws.cell(row=ws.max_row, column=col).number_format = CURRENCY_FORMAT


PARAMETER_DESCRIPTIONS = {
    "floor_area": "Total floor area in square feet",
    "sim_rooms": "Number of simulation rooms",
    "control_rooms": "Number of control rooms",
    "debrief_rooms": "Number of debrief rooms",
    "high_fidelity_manikins": "High-fidelity manikin count",
    "task_trainers": "Task trainer count",
    "av_tier": "A/V system tier (basic/standard/premium)",
    "core_fte": "Core staff FTE",
    "faculty_allocation_percent": "Faculty allocation percentage",
    "training_hours_per_year": "Annual training hours",
    "sessions_per_month": "Expected sessions per month",
    "opex_model": "OPEX calculation model",
    "growth_rate_percent": "Annual growth rate",
    "inflation_percent": "Annual inflation rate",
    "quality_level": "Quality tier (budget/standard/premium)",
    "cost_region": "Cost region factor",
    "contingency_percent": "Contingency percentage",
    "refresh_reserve_percent": "Equipment refresh reserve",
}
PARAMETERS_FIRST_ROW = 5


def _parameters_sheet(ws, params: SimulatorParameters):
    ws.append(["SIMULATION PARAMETERS"])
    ws["A1"].font = TITLE_FONT
    ws.append(["These values can be used to recreate this scenario"])
    ws.append([])
    ws.append(["Parameter", "Value", "Description"])
    for cell in ws[4]:
        cell.font = HEADER_FONT
    for name, value in params.to_dict().items():
        ws.append([camel_case_name(name), value, PARAMETER_DESCRIPTIONS.get(name, "")])
    ws.column_dimensions["A"].width = 25
    ws.column_dimensions["B"].width = 20
    ws.column_dimensions["C"].width = 40


def load_parameters_from_workbook(source) -> SimulatorParameters:
    """
    Rebuild the simulator parameters from an exported workbook.

    Args:
        source: Path or binary file object of a workbook written by
            export_budget_workbook

    Raises:
        ParameterValidationError: when the Parameters sheet is missing or incomplete
    """
    wb = load_workbook(source, read_only=True, data_only=True)
    if "Parameters" not in wb.sheetnames:
        wb.close()
        raise ParameterValidationError(["workbook has no Parameters sheet"])
    data = {}
    for name, value, *_ in wb["Parameters"].iter_rows(min_row=PARAMETERS_FIRST_ROW, values_only=True):
        if name is None:
            break
        data[name] = value
    wb.close()
    return SimulatorParameters.from_dict(data)


def export_budget_workbook(params: SimulatorParameters, results: BudgetResults,
                           scenario_name: str = "Custom",
                           output_path: Optional[str] = None) -> bytes:
    """
    Write the budget to an .xlsx workbook.

    Args:
        params: Parameters the budget was computed from
        results: Budget simulator output
        scenario_name: Label for the Summary sheet
        output_path: When given, the workbook is also written there

    Returns:
        Workbook bytes (for st.download_button)
    """
    wb = Workbook()
    _summary_sheet(wb.active, params, results, scenario_name)
    wb.active.title = "Summary"

    capex = results.capex
    _line_item_sheet(wb.create_sheet("CAPEX"), "CAPEX BREAKDOWN", capex.line_items, [
        ["Gross CAPEX", capex.total],
        ["Existing Asset Credits", capex.existing_credits],
        ["Net CAPEX", capex.net],
    ])
    opex = results.opex
    _line_item_sheet(wb.create_sheet("OPEX"), "ANNUAL OPEX BREAKDOWN", opex.line_items, [
        ["Annual OPEX", opex.annual],
        ["Monthly OPEX", opex.monthly],
    ])
    _projection_sheet(wb.create_sheet("5-Year"), results)
    _parameters_sheet(wb.create_sheet("Parameters"), params)

    buf = io.BytesIO()
    wb.save(buf)
    data = buf.getvalue()
    if output_path:
        with open(output_path, "wb") as f:
            f.write(data)
    return data


# ---------- Vendor RFP ----------

def budget_for_category(category: str, results: BudgetResults) -> float:
    """Planning budget for one vendor category."""
    if category == "av-systems":
        return results.capex.av_system
    if category == "simulation-equipment":
        return sum(i.amount for i in results.capex.line_items if i.id in ("high-fidelity", "task-trainers"))
    if category == "construction":
        return results.capex.construction
    if category == "it-software":
        return results.opex.software * 5  # 5-year licensing
    if category == "furniture-fixtures":
        return sum(i.amount for i in results.capex.line_items if i.id == "furniture")
    raise ValueError(f"Unknown vendor category: {category}. Available: {list(VENDOR_CATEGORIES)}")


def _bullets(items: List[str]) -> List[str]:
    return [f"- {item}" for item in items]


def _key_values(pairs) -> List[str]:
    return [f"- **{k}:** {v}" for k, v in pairs]


def _av_requirements(p: SimulatorParameters, results: BudgetResults) -> List[str]:
    specs = AV_TIER_SPECS[p.av_tier.value]
    lines = [
        f"Vendor shall provide a complete audio/visual system for {p.sim_rooms} simulation rooms, "
        f"including cameras, microphones, recording systems, displays, and control systems. "
        f'The system tier specified is "{p.av_tier.value.upper()}".',
        "",
        "### System Specifications",
    ]
    lines += _key_values((k, v) for k, v in specs.items() if k != "features")
    lines += ["", "### Required Features"] + _bullets(specs["features"])
    lines += ["", "### Room-by-Room Requirements"] + _bullets([
        f"{p.sim_rooms} Simulation Rooms: Full A/V capture and recording capability",
        f"{p.control_rooms} Control Rooms: Operator workstations with multi-room monitoring",
        f"{p.debrief_rooms} Debriefing Rooms: Playback system with annotation capability",
    ])
    lines += ["", "### Integration Requirements"] + _bullets([
        "Integration with simulation manikin systems (Laerdal, CAE, Gaumard)",
        "Patient monitor integration for vital signs overlay",
        "Learning management system (LMS) integration capability",
        "Network connectivity for remote observation",
    ])
    return lines


def _equipment_requirements(p: SimulatorParameters, results: BudgetResults) -> List[str]:
    lines = [
        "Vendor shall provide simulation equipment including high-fidelity manikins and task trainers "
        "to support clinical training across multiple specialties.",
        "",
        "### High-Fidelity Manikins",
        f"- **Quantity Required:** {p.high_fidelity_manikins} units",
    ]
    lines += _bullets([
        "Adult patient simulator with wireless operation",
        "Programmable vital signs and clinical scenarios",
        "Airway management capabilities (intubation, suctioning)",
        "IV access and medication administration",
        "Cardiac monitoring and defibrillation compatible",
    ])
    lines += ["", "### Task Trainers", f"- **Quantity Required:** {p.task_trainers} units total"]
    lines += _bullets([
        "IV insertion arms (minimum 2 units)",
        "Intubation training heads (minimum 2 units)",
        "Chest tube insertion trainers",
        "Suturing and wound care trainers",
        "Catheterization trainers",
    ])
    lines += ["", "### Support Requirements"] + _bullets([
        "Comprehensive training for simulation staff",
        "Service contract options (include pricing for 3-year and 5-year terms)",
        "Remote technical support availability",
        "Software updates and scenario library access",
    ])
    return lines


def _construction_requirements(p: SimulatorParameters, results: BudgetResults) -> List[str]:
    specs = QUALITY_SPECS[p.quality_level.value]
    per_room = round(p.floor_area * 0.4 / p.sim_rooms) if p.sim_rooms else 0
    lines = [
        f"General contractor shall provide complete renovation/buildout of {p.floor_area:,.0f} square feet "
        f"of space to healthcare simulation center specifications. "
        f"Quality level: {p.quality_level.value.upper()}.",
        "",
        "### Space Requirements",
    ]
    lines += _key_values([
        ("Total Area", f"{p.floor_area:,.0f} SF"),
        ("Simulation Rooms", f"{p.sim_rooms} rooms (approx. {per_room:,} SF each)"),
        ("Control Rooms", f"{p.control_rooms} rooms"),
        ("Debriefing Rooms", f"{p.debrief_rooms} rooms"),
        ("Support Areas", "Storage, break room, office space"),
    ])
    lines += ["", "### Construction Specifications"] + _key_values(specs.items())
    lines += ["", "### MEP Requirements"] + _bullets([
        "Medical gas simulation capability in each sim room",
        "Dedicated electrical circuits for simulation equipment (20A minimum)",
        "Data drops (minimum 4 per room) for A/V and network",
        "Emergency power connection capability",
    ])
    lines += ["", "### Special Considerations"] + _bullets([
        "Work to be performed in occupied healthcare facility",
        "Infection control protocols required",
        "Noise restrictions during patient care hours",
    ])
    return lines


def _it_requirements(p: SimulatorParameters, results: BudgetResults) -> List[str]:
    annual_sessions = p.sessions_per_month * 12
    lines = [
        f"Vendor shall provide software solutions for learning management, video capture and management, "
        f"scheduling, and analytics for a {p.sim_rooms}-room simulation center with "
        f"{annual_sessions:,.0f} projected annual sessions.",
        "",
        "### Learning Management System (LMS)",
    ]
    lines += _bullets([
        "Learner registration and scheduling",
        "Competency tracking and assessment",
        "Integration with hospital HR systems",
        "SCORM/xAPI compliance",
    ])
    lines += ["", "### Video Management"] + _bullets([
        f"Storage capacity for {annual_sessions * 5:,.0f} hours/year (5-year retention)",
        "Secure, HIPAA-compliant storage and access",
        "Annotation and bookmarking tools",
    ])
    lines += ["", "### Licensing Model"]
    lines += _key_values([("Software Tier",
                           f"{p.av_tier.value.capitalize()} ({format_currency_full(results.opex.software)}/year)")])
    lines += _bullets(["Provide pricing for perpetual and subscription models"])
    return lines


def _furniture_requirements(p: SimulatorParameters, results: BudgetResults) -> List[str]:
    lines = [
        f"Vendor shall provide furniture and fixtures for {p.total_rooms} rooms plus common areas "
        f"in a healthcare simulation center. All items must be healthcare-grade.",
        "",
        f"### Simulation Rooms ({p.sim_rooms} rooms)",
    ]
    lines += _bullets([
        "Hospital beds (electric, full function) - 1 per room",
        "Overbed and bedside tables - 1 each per room",
        "IV poles - 2 per room",
        "Supply carts/crash cart shells - 1 per room",
    ])
    lines += ["", f"### Control Rooms ({p.control_rooms} rooms)"] + _bullets([
        "Operator workstations (L-shaped desks) - 2 per room",
        "Ergonomic task chairs - 2 per room",
        "Equipment racks - 1 per room",
    ])
    lines += ["", f"### Debriefing Rooms ({p.debrief_rooms} rooms)"] + _bullets([
        "Conference tables (seats 8-10) - 1 per room",
        "Conference chairs - 10 per room",
        "Whiteboard/glass writing surface - 1 per room",
    ])
    lines += ["", "### Common Areas"] + _bullets([
        "Reception desk with storage",
        "Storage cabinets for supplies and equipment",
        "Office furniture for administrative space",
    ])
    return lines


_REQUIREMENTS = {
    "av-systems": _av_requirements,
    "simulation-equipment": _equipment_requirements,
    "construction": _construction_requirements,
    "it-software": _it_requirements,
    "furniture-fixtures": _furniture_requirements,
}


def build_vendor_bid_request(params: SimulatorParameters, results: BudgetResults, category: str,
                             organization_name: str = "Community Health System",
                             project_name: str = "Healthcare Simulation Center",
                             contact: Optional[Dict[str, str]] = None,
                             submission_deadline: str = "30 days from receipt",
                             additional_notes: Optional[str] = None) -> str:
    """
    Build a Markdown request for proposal for one vendor category.

    The document is deterministic for a given input (no dates are embedded).

    Raises:
        ValueError: on an unknown vendor category
    """
    if category not in VENDOR_CATEGORIES:
        raise ValueError(f"Unknown vendor category: {category}. Available: {list(VENDOR_CATEGORIES)}")
    info = VENDOR_CATEGORIES[category]
    contact = contact or DEFAULT_CONTACT
    amount = budget_for_category(category, results)
    low, high = budget_range(amount)

    lines = [
        "# REQUEST FOR PROPOSAL",
        f"## {info['title']}",
        "",
        f"**{organization_name}** | {project_name}",
        f"**Submission deadline:** {submission_deadline}",
        "",
        "## 1. Project Overview",
        "",
        f"{organization_name} is soliciting proposals from qualified vendors for "
        f"{info['description'].lower()} as part of the development of a new {project_name}. "
        f"This facility will serve as a training hub for healthcare professionals, providing "
        f"simulation-based education and assessment capabilities.",
        "",
    ]
    lines += _key_values([
        ("Total Floor Area", f"{params.floor_area:,.0f} square feet"),
        ("Simulation Rooms", f"{params.sim_rooms} rooms"),
        ("Control Rooms", f"{params.control_rooms} rooms"),
        ("Debriefing Rooms", f"{params.debrief_rooms} rooms"),
        ("Total Rooms", f"{params.total_rooms} rooms"),
        ("Quality Level", params.quality_level.value.capitalize()),
    ])
    lines += ["", "## 2. Scope of Work & Requirements", ""]
    lines += _REQUIREMENTS[category](params, results)
    lines += [
        "",
        "## 3. Budget Guidance",
        "",
        "The following budget estimates are provided as guidance only. Vendors should provide itemized "
        "pricing based on their proposed solutions.",
        "",
    ]
    lines += _key_values([
        ("Planning Estimate", format_currency_full(amount)),
        ("Budget Range", f"{format_currency_full(low)} - {format_currency_full(high)}"),
    ])
    lines += [
        "",
        "Note: This range represents +/- 15% of the planning estimate. "
        "Proposals outside this range will be considered if justified.",
        "",
        "## 4. Proposal Submission Requirements",
        "",
    ]
    lines += _bullets(SUBMISSION_ITEMS + [
        "Submit proposal in PDF format via email",
        "Include separate pricing spreadsheet (Excel format)",
    ])
    lines += ["", "## 5. Evaluation Criteria", "", "| Criterion | Weight |", "| --- | --- |"]
    lines += [f"| {criterion} | {weight} |" for criterion, weight in EVALUATION_CRITERIA]
    lines += ["", "## 6. Contact Information", ""]
    lines += _key_values([("Primary Contact", contact["name"]), ("Email", contact["email"]),
                          ("Phone", contact["phone"])])
    lines += [
        "",
        "All questions regarding this RFP should be submitted in writing via email. "
        "Responses to substantive questions will be shared with all prospective bidders.",
    ]
    if additional_notes:
        lines += ["", "## 7. Additional Notes", "", additional_notes]
    lines += ["", "---", f"*{organization_name} - {project_name} RFP: {info['title']} | CONFIDENTIAL*", ""]
    return "\n".join(lines)


def export_rfp_pdf(params: SimulatorParameters, results: BudgetResults, category: str, **kwargs) -> bytes:
    """
    Render the vendor RFP for one category as a PDF.

    Takes the same keyword arguments as build_vendor_bid_request.

    Raises:
        ValueError: on an unknown vendor category
    """
    return markdown_to_pdf(build_vendor_bid_request(params, results, category, **kwargs))


def rfp_filename(category: str, organization_name: str = "Community Health System", ext: str = "md") -> str:
    return f"RFP_{category}_{'_'.join(organization_name.split())}.{ext}"


def export_run(params: SimulatorParameters, results: BudgetResults, output_root: str,
               scenario_name: str = "Custom", categories: Optional[List[str]] = None,
               figures=None) -> Dict[str, Any]:
    """
    Create a per-run folder with the workbook, PDF report, RFPs, figures and metadata.json.

    Args:
        figures: Optional FigureCapture whose PNGs are written alongside

    Returns:
        Dict with run_id, out_dir and the written paths
    """
    snapshot = params.to_dict()
    run_id = make_run_id(snapshot)
    out_dir = os.path.join(output_root, run_id)
    os.makedirs(out_dir, exist_ok=True)

    workbook_path = os.path.join(out_dir, "budget.xlsx")
    export_budget_workbook(params, results, scenario_name, output_path=workbook_path)

    report_path = os.path.join(out_dir, "budget_report.pdf")
    with open(report_path, "wb") as f:
        f.write(export_budget_pdf(params, results, scenario_name))

    rfp_paths = []
    for category in categories or list(VENDOR_CATEGORIES):
        rfp = build_vendor_bid_request(params, results, category)
        path = os.path.join(out_dir, rfp_filename(category))
        with open(path, "w", encoding="utf-8") as f:
            f.write(rfp)
        pdf_path = os.path.join(out_dir, rfp_filename(category, ext="pdf"))
        with open(pdf_path, "wb") as f:
            f.write(markdown_to_pdf(rfp))
        rfp_paths += [path, pdf_path]

    figure_paths = []
    if figures is not None:
        for fname, data in figures.images:
            path = os.path.join(out_dir, fname)
            with open(path, "wb") as f:
                f.write(data)
            figure_paths.append(path)

    meta = {
        "run_id": run_id,
        "scenario": scenario_name,
        "parameters": snapshot,
        "five_year_total": results.five_year.total_cost,
        "files": [os.path.basename(p) for p in [workbook_path, report_path] + rfp_paths + figure_paths],
        "figures": figures.manifest if figures is not None else [],
    }
    meta_path = os.path.join(out_dir, "metadata.json")
    with open(meta_path, "w", encoding="utf-8") as f:
        json.dump(meta, f, indent=2)

    return {
        "run_id": run_id,
        "out_dir": out_dir,
        "workbook_path": workbook_path,
        "report_path": report_path,
        "rfp_paths": rfp_paths,
        "figure_paths": figure_paths,
        "metadata_path": meta_path,
    }
