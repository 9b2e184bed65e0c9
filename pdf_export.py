#!/usr/bin/env python3
"""
PDF renditions of the budget report and the vendor RFPs.

Both documents are laid out with reportlab platypus flowables: the budget
report is built from the results directly, RFPs are rendered from the same
Markdown that the dashboard offers for download.
"""

# pdf_export.py

import datetime
import html
import io
import re
from typing import List

from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.platypus import (
    SimpleDocTemplate,
    Paragraph,
    Spacer,
    Table,
    TableStyle,
    ListFlowable,
    ListItem,
)

from config.models import OpexModel, SimulatorParameters
from simulation.results import BudgetResults
from utils.helpers import format_currency_full

PAGE_MARGIN = 50

TABLE_STYLE = TableStyle([
    ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#1f2933')),
    ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
    ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
    ('FONTSIZE', (0, 0), (-1, -1), 9),
    ('GRID', (0, 0), (-1, -1), 0.25, colors.grey),
    ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.whitesmoke, colors.lightgrey]),
    ('VALIGN', (0, 0), (-1, -1), 'TOP'),
])

_BOLD = re.compile(r"\*\*(.+?)\*\*")
_ITALIC = re.compile(r"\*(.+?)\*")


def _document(buffer):
    return SimpleDocTemplate(
        buffer,
        pagesize=letter,
        leftMargin=PAGE_MARGIN,
        rightMargin=PAGE_MARGIN,
        topMargin=PAGE_MARGIN,
        bottomMargin=PAGE_MARGIN,
    )


def _table(rows: List[list], col_widths=None, total_row=False) -> Table:
    table = Table(rows, hAlign='LEFT', colWidths=col_widths, repeatRows=1)
    table.setStyle(TABLE_STYLE)
    if total_row:
        table.setStyle(TableStyle([('FONTNAME', (0, -1), (-1, -1), 'Helvetica-Bold')]))
    return table


def _inline(text: str) -> str:
    """Escape text for a Paragraph and turn Markdown emphasis into tags."""
    text = html.escape(text, quote=False)
    text = _BOLD.sub(r"<b>\1</b>", text)
    return _ITALIC.sub(r"<i>\1</i>", text)


def export_budget_pdf(params: SimulatorParameters, results: BudgetResults,
                      scenario_name: str = "Custom") -> bytes:
    """
    Render the budget report as a PDF.

    Sections: executive summary, facility configuration, CAPEX and OPEX
    breakdowns and the 5-year projection.

    Returns:
        PDF bytes
    """
    buffer = io.BytesIO()
    doc = _document(buffer)
    usable_width = doc.width

    styles = getSampleStyleSheet()
    title_style = styles['Title']
    heading_style = styles['Heading2']
    body_style = styles['BodyText']
    caption_style = ParagraphStyle('Caption', parent=body_style, fontSize=8, textColor=colors.grey)

    money = format_currency_full
    m = results.metrics
    story = [
        Paragraph("Simulation Center Budget Report", title_style),
        Paragraph(f"Scenario: {html.escape(scenario_name)}", body_style),
        Paragraph(f"Generated: {datetime.datetime.now().strftime('%Y-%m-%d %H:%M')}", caption_style),
        Spacer(1, 12),
        Paragraph("Executive Summary", heading_style),
        _table([
            ["Metric", "Value"],
            ["Total 5-Year Cost", money(results.five_year.total_cost)],
            ["Phase 1 CAPEX (Net)", money(results.capex.net)],
            ["Annual OPEX", money(results.opex.annual)],
            ["Cost per Session", money(m.cost_per_session)],
            ["Cost per SF", money(m.cost_per_sf)],
            ["Annual Sessions", f"{m.annual_sessions:,.0f}"],
        ], col_widths=[usable_width * 0.5, usable_width * 0.3]),
        Spacer(1, 12),
        Paragraph("Facility Configuration", heading_style),
        _table([
            ["Parameter", "Value"],
            ["Floor Area", f"{params.floor_area:,.0f} SF"],
            ["Simulation Rooms", str(params.sim_rooms)],
            ["Control Rooms", str(params.control_rooms)],
            ["Debrief Rooms", str(params.debrief_rooms)],
            ["High-Fidelity Manikins", str(params.high_fidelity_manikins)],
            ["Task Trainers", str(params.task_trainers)],
            ["A/V Tier", params.av_tier.value.capitalize()],
            ["Quality Level", params.quality_level.value.capitalize()],
            ["Cost Region", params.cost_region.value.replace("-", " ").title()],
        ], col_widths=[usable_width * 0.5, usable_width * 0.3]),
        Spacer(1, 12),
        Paragraph("CAPEX Breakdown", heading_style),
    ]

    capex_rows = [["Item", "Amount"]]
    capex_rows += [[item.name, money(item.amount)] for item in results.capex.line_items]
    capex_rows.append(["Net CAPEX", money(results.capex.net)])
    story += [_table(capex_rows, col_widths=[usable_width * 0.6, usable_width * 0.3], total_row=True),
              Spacer(1, 12)]

    model = "Room-Based" if params.opex_model == OpexModel.ROOM_BASED else "Sessions-Based"
    opex_rows = [["Item", "Amount"]]
    opex_rows += [[item.name, money(item.amount)] for item in results.opex.line_items]
    opex_rows.append(["Total Annual OPEX", money(results.opex.annual)])
    story += [
        Paragraph(f"Annual OPEX Breakdown ({model} Model)", heading_style),
        _table(opex_rows, col_widths=[usable_width * 0.6, usable_width * 0.3], total_row=True),
        Spacer(1, 12),
        Paragraph("5-Year Projection", heading_style),
    ]

    fy = results.five_year
    projection_rows = [["Year", "CAPEX", "OPEX", "Total", "Sessions"]]
    projection_rows += [
        [y.label, money(y.capex), money(y.opex), money(y.total), f"{y.sessions_per_year:,.0f}"]
        for y in fy.year_by_year
    ]
    projection_rows.append(["5-Year Total", money(fy.total_capex), money(fy.total_opex),
                            money(fy.total_cost), ""])
    story.append(_table(projection_rows, total_row=True))
    story += [
        Spacer(1, 12),
        Paragraph("Planning estimates only. Validate all figures with vendor quotes.", caption_style),
    ]

    doc.build(story)
    return buffer.getvalue()


def markdown_to_pdf(text: str) -> bytes:
    """
    Render the Markdown subset used by the RFP documents.

    Headings, paragraphs, bullet lists, pipe tables and horizontal rules are
    supported; emphasis is carried over as bold and italic.

    Returns:
        PDF bytes
    """
    buffer = io.BytesIO()
    doc = _document(buffer)

    styles = getSampleStyleSheet()
    heading_styles = {1: styles['Title'], 2: styles['Heading2'], 3: styles['Heading3']}
    body_style = styles['BodyText']
    small_style = ParagraphStyle('Small', parent=body_style, fontSize=9, leading=12)

    story = []
    bullets: List[ListItem] = []
    table_rows: List[list] = []

    def flush():
        if bullets:
            story.append(ListFlowable(list(bullets), bulletType='bullet', start='•', leftPadding=12))
            bullets.clear()
        if table_rows:
            header, *body = table_rows
            story.append(_table([header] + [[Paragraph(_inline(c), small_style) for c in row] for row in body]))
            table_rows.clear()

    for raw in text.splitlines():
        line = raw.strip()
        if line.startswith("- "):
            if table_rows:
                flush()
            bullets.append(ListItem(Paragraph(_inline(line[2:]), body_style)))
            continue
        if line.startswith("|"):
            if bullets:
                flush()
            cells = [c.strip() for c in line.strip("|").split("|")]
            if not all(set(c) <= set("-: ") for c in cells):
                table_rows.append(cells)
            continue
        flush()
        if not line:
            story.append(Spacer(1, 6))
        elif line == "---":
            story.append(Spacer(1, 18))
        elif line.startswith("#"):
            level = len(line) - len(line.lstrip("#"))
            story.append(Paragraph(_inline(line[level:].strip()), heading_styles.get(level, styles['Heading3'])))
        else:
            story.append(Paragraph(_inline(line), body_style))
    flush()

    doc.build(story)
    return buffer.getvalue()
