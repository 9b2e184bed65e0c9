# tests/test_rfp_export.py
import io
import json
from pathlib import Path

import pytest
from openpyxl import Workbook, load_workbook

from config.models import SimulatorParameters
from pdf_export import export_budget_pdf
from simulation.engine import compute_budget
from utils.exceptions import ParameterValidationError
import rfp_export
from rfp_export import (
    VENDOR_CATEGORIES, export_budget_workbook, budget_for_category, build_vendor_bid_request,
    rfp_filename, export_run, make_run_id, export_rfp_pdf, load_parameters_from_workbook
)


@pytest.fixture(scope="module")
def params():
    return SimulatorParameters()


@pytest.fixture(scope="module")
def results(params):
    return compute_budget(params)


def test_workbook_sheets_and_values(params, results):
    wb = load_workbook(io.BytesIO(export_budget_workbook(params, results, "Base Case")))
    assert wb.sheetnames == ["Summary", "CAPEX", "OPEX", "5-Year", "Parameters"]

    summary = wb["Summary"]
    assert summary["B3"].value == "Base Case"
    assert summary["A7"].value == "Total 5-Year Cost"
    assert summary["B7"].value == pytest.approx(results.five_year.total_cost)
    assert summary["B8"].value == pytest.approx(2_550_312.5)

    capex_rows = [r for r in wb["CAPEX"].iter_rows(min_row=4, values_only=True) if r[0]]
    assert ("Credits", "Existing Equipment Credit") == capex_rows[len(results.capex.line_items) - 1][:2]

    years = list(wb["5-Year"].iter_rows(min_row=4, max_row=8, values_only=True))
    assert [y[0] for y in years] == ["Year 1", "Year 2", "Year 3", "Year 4", "Year 5"]

    sheet = wb["Parameters"]
    assert sheet["A1"].value == "SIMULATION PARAMETERS"
    assert [c.value for c in sheet[4]] == ["Parameter", "Value", "Description"]
    assert [c.value for c in sheet[5]] == ["floorArea", 4000, "Total floor area in square feet"]


def test_workbook_parameters_load_back(results, tmp_path: Path):
    custom = SimulatorParameters(floor_area=6500, sim_rooms=5, av_tier="premium", opex_model="sessions-based",
                                 cost_region="high-cost", growth_rate_percent=7.5)
    out = tmp_path / "custom.xlsx"
    export_budget_workbook(custom, compute_budget(custom), "Custom", output_path=str(out))
    assert load_parameters_from_workbook(str(out)) == custom
    assert load_parameters_from_workbook(io.BytesIO(out.read_bytes())) == custom


def test_workbook_without_parameters_sheet_is_rejected(tmp_path: Path):
    out = tmp_path / "other.xlsx"
    wb = Workbook()
    wb.active.title = "Notes"
    wb.save(out)
    with pytest.raises(ParameterValidationError):
        load_parameters_from_workbook(str(out))


def test_workbook_written_to_path(params, results, tmp_path: Path):
    out = tmp_path / "budget.xlsx"
    data = export_budget_workbook(params, results, output_path=str(out))
    assert out.read_bytes() == data


def test_category_budgets(results):
    assert budget_for_category("av-systems", results) == pytest.approx(90_000)
    assert budget_for_category("simulation-equipment", results) == pytest.approx(167_500)
    assert budget_for_category("construction", results) == pytest.approx(1_540_000)
    assert budget_for_category("it-software", results) == pytest.approx(60_000)
    assert budget_for_category("furniture-fixtures", results) == pytest.approx(130_000)
    with pytest.raises(ValueError):
        budget_for_category("catering", results)


@pytest.mark.parametrize("category", list(VENDOR_CATEGORIES))
def test_bid_request_sections(params, results, category):
    text = build_vendor_bid_request(params, results, category)
    assert text.startswith("# REQUEST FOR PROPOSAL")
    assert VENDOR_CATEGORIES[category]["title"] in text
    for heading in ("## 1. Project Overview", "## 2. Scope of Work", "## 3. Budget Guidance",
                    "## 4. Proposal Submission", "## 5. Evaluation Criteria", "## 6. Contact Information"):
        assert heading in text
    assert "## 7. Additional Notes" not in text
    assert text == build_vendor_bid_request(params, results, category)


def test_bid_request_budget_range(params, results):
    text = build_vendor_bid_request(params, results, "av-systems", organization_name="Mercy General",
                                    additional_notes="Site visit on request.")
    assert "Planning Estimate" in text
    assert "$90,000" in text
    assert "$76,500 - $103,500" in text
    assert "+/- 15%" in text
    assert "**Mercy General**" in text
    assert "## 7. Additional Notes" in text


def test_bid_request_unknown_category(params, results):
    with pytest.raises(ValueError):
        build_vendor_bid_request(params, results, "catering")


def test_rfp_filename():
    assert rfp_filename("construction", "Mercy General") == "RFP_construction_Mercy_General.md"
    assert rfp_filename("construction", ext="pdf") == "RFP_construction_Community_Health_System.pdf"


def test_budget_report_pdf(params, results):
    data = export_budget_pdf(params, results, "Base Case")
    assert data.startswith(b"%PDF")


@pytest.mark.parametrize("category", ["av-systems", "it-software"])
def test_rfp_pdf(params, results, category):
    data = export_rfp_pdf(params, results, category, organization_name="Mercy General & Partners",
                          additional_notes="Budget < $100k is preferred.")
    assert data.startswith(b"%PDF")


def test_rfp_pdf_unknown_category(params, results):
    with pytest.raises(ValueError):
        export_rfp_pdf(params, results, "catering")


def test_run_id_is_stable_for_inputs(monkeypatch, params):
    monkeypatch.setattr(rfp_export, "_now_ts", lambda: "20250101_120000")
    run_id = make_run_id(params.to_dict())
    assert run_id.startswith("20250101_120000_")
    assert run_id == make_run_id(params.to_dict())
    assert run_id != make_run_id(params.with_updates(sim_rooms=4).to_dict())


def test_export_run(params, results, tmp_path: Path):
    out = export_run(params, results, str(tmp_path), scenario_name="Base Case",
                     categories=["av-systems", "construction"])
    out_dir = Path(out["out_dir"])
    assert out_dir.parent == tmp_path
    assert Path(out["workbook_path"]).exists()
    assert Path(out["report_path"]).read_bytes().startswith(b"%PDF")
    assert [Path(p).suffix for p in out["rfp_paths"]] == [".md", ".pdf", ".md", ".pdf"]
    assert out["figure_paths"] == []

    meta = json.loads(Path(out["metadata_path"]).read_text())
    assert meta["run_id"] == out["run_id"]
    assert meta["scenario"] == "Base Case"
    assert meta["parameters"]["av_tier"] == "standard"
    assert meta["files"][0] == "budget.xlsx"
    assert meta["files"][1] == "budget_report.pdf"
