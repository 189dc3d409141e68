"""Shared test fixtures for report engine and API tests."""

from __future__ import annotations

from io import BytesIO
from pathlib import Path

import pytest

from engine.report.model import LineItem, Report, Section, Template
from engine.report.sections import default_sections


# ======================================================================
# Line items
# ======================================================================

@pytest.fixture
def scenario_line_items() -> list[LineItem]:
    """Two 5-year items plus an overridden 39-year item (totals 22100 / 5000)."""
    return [
        LineItem(id="a", category="5-year", description="Carpeting", qty=1200, unit_cost=8),
        LineItem(id="b", category="5-year", description="Millwork", qty=1, unit_cost=12500),
        LineItem(id="c", category="39-year", description="Building Shell", qty=1,
                 unit_cost=325000, total_override=5000),
    ]


# ======================================================================
# Reports and templates
# ======================================================================

@pytest.fixture
def sample_template(template_pdf: Path) -> Template:
    return Template(
        id="tmpl-1",
        name="Standard",
        source_file_path=str(template_pdf),
        default_sections=default_sections(),
    )


@pytest.fixture
def sample_report(scenario_line_items) -> Report:
    """Fully populated report with every section enabled."""
    return Report(
        id="rep-1",
        template_id="tmpl-1",
        name="Maple Street",
        fields={
            "owner": "Acme Holdings LLC",
            "address": "12 Maple Street, Springfield",
            "reportDate": "2026-03-01",
            "squareFootage": "24,000",
            "lotSize": "1.2 acres",
            "placedInService": "2025-11-15",
            "totalCostBasis": "$4,250,000",
            "landValue": "",
        },
        sections=default_sections(),
        narrative={
            "summary": "We are pleased to provide this cost segregation summary letter.",
            "methodology": "Detailed engineering approach.",
            "certifications": "Prepared by qualified professionals.",
            "taxClassification": "Assets classified by recovery period.",
        },
        line_items=scenario_line_items,
    )


def _sections_with(*enabled: str, disabled: tuple[str, ...] = ()) -> list[Section]:
    result = [Section(key=k, label=k.title(), enabled=True) for k in enabled]
    result += [Section(key=k, label=k.title(), enabled=False) for k in disabled]
    return result


@pytest.fixture
def make_sections():
    """Callable building a Section list holding only the named keys, in the given order."""
    return _sections_with


# ======================================================================
# Files
# ======================================================================

@pytest.fixture
def template_pdf(tmp_path: Path) -> Path:
    """Two-page A4 template; only the first page may reach an export."""
    from reportlab.lib.pagesizes import A4
    from reportlab.pdfgen.canvas import Canvas

    path = tmp_path / "template.pdf"
    canvas = Canvas(str(path), pagesize=A4)
    canvas.setFont("Helvetica", 18)
    canvas.drawString(72, 72, "TEMPLATE COVER MARK")
    canvas.showPage()
    canvas.drawString(72, 72, "TEMPLATE SECOND PAGE")
    canvas.showPage()
    canvas.save()
    return path


def _write_image(path: Path, fmt: str) -> Path:
    from PIL import Image

    Image.new("RGB", (200, 100), (30, 90, 160)).save(path, format=fmt)
    return path


@pytest.fixture
def cover_png(tmp_path: Path) -> Path:
    return _write_image(tmp_path / "cover.PNG", "PNG")


@pytest.fixture
def cover_jpg(tmp_path: Path) -> Path:
    return _write_image(tmp_path / "cover.jpg", "JPEG")


def _pdf_pages(data: bytes):
    from pypdf import PdfReader

    return PdfReader(BytesIO(data)).pages


@pytest.fixture
def read_pdf():
    """Callable returning the pypdf pages of PDF bytes."""
    return _pdf_pages
