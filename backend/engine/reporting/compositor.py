"""Document compositor.

Turns a report snapshot and its totals into a ``DocumentPlan``: one page
spec per enabled section, in registry order. Pure function of its inputs;
no file access happens here, the cover image reference is passed through
for the backend to resolve.

Every section renders to exactly one page. The table of contents relies
on that when it numbers entries; a section kind that spans several pages
would need the numbers recomputed after layout.
"""

from __future__ import annotations

from collections.abc import Callable

from engine.report.model import Report, Section
from engine.report.sections import (
    COVER,
    DEPRECIATION,
    EXHIBITS,
    NARRATIVE,
    PHOTOS,
    SUMMARY,
    TOC,
    enabled_sections,
)
from engine.report.totals import Totals, compute_totals

from .formatting import fmt_currency, fmt_qty, or_missing
from .page_spec import DocumentPlan, DrawOp, ImageOp, PageSpec, TextOp

# ══════════════════════════════════════════════════════════════════════
# Layout constants (points from the top-left corner)
# ══════════════════════════════════════════════════════════════════════

LEFT = 60
TITLE_X = 50
TITLE_TOP = 32
TITLE_SIZE = 20
BODY_TOP = 82
BODY_SIZE = 12
CONTENT_WIDTH = 480

COVER_OWNER_TOP = 140
COVER_OWNER_SIZE = 22
COVER_ADDRESS_TOP = 170
COVER_ADDRESS_SIZE = 14
COVER_IMAGE_SCALE = 0.4
COVER_IMAGE_RIGHT_INSET = 60
COVER_IMAGE_TOP_INSET = 120

TOC_PAGE_X = 500
TOC_ROW_STEP = 20

NARRATIVE_KEYS = ("methodology", "certifications", "taxClassification")
NARRATIVE_BLOCK_STEP = 80

EXHIBIT_HEADING_TOP = 72
EXHIBIT_FIRST_ROW_TOP = 102
EXHIBIT_VALUE_X = 250
EXHIBIT_ROW_STEP = 20
EXHIBIT_FIELDS = (
    ("Square Footage", "squareFootage"),
    ("Lot Size", "lotSize"),
    ("Placed in Service", "placedInService"),
    ("Total Cost Basis", "totalCostBasis"),
    ("Land Value", "landValue"),
)

PHOTOS_PLACEHOLDER = "Photos can be uploaded in the Photos section (MVP placeholder)."

LEDGER_COLUMNS = (("Category", 60), ("Description", 160), ("Qty", 360), ("Total", 430))
LEDGER_DESCRIPTION_WIDTH = 180
LEDGER_ROW_SIZE = 11
LEDGER_HEADER_STEP = 20
LEDGER_ROW_STEP = 18
LEDGER_TOTALS_GAP = 12


# ══════════════════════════════════════════════════════════════════════
# Page builders
# ══════════════════════════════════════════════════════════════════════

def _title(section: Section) -> TextOp:
    return TextOp(section.label, x=TITLE_X, top=TITLE_TOP, size=TITLE_SIZE, bold=True)


def _build_cover(report: Report, section: Section, **_) -> list[DrawOp]:
    ops: list[DrawOp] = [
        TextOp(report.field_value("owner") or "Owner", x=LEFT, top=COVER_OWNER_TOP,
               size=COVER_OWNER_SIZE, bold=True),
        TextOp(report.field_value("address") or "Property Address", x=LEFT,
               top=COVER_ADDRESS_TOP, size=COVER_ADDRESS_SIZE),
    ]
    if report.cover_image_path:
        ops.append(ImageOp(
            source=report.cover_image_path,
            scale=COVER_IMAGE_SCALE,
            right_inset=COVER_IMAGE_RIGHT_INSET,
            top_inset=COVER_IMAGE_TOP_INSET,
        ))
    return ops


def _build_toc(report: Report, section: Section, *, toc_entries, **_) -> list[DrawOp]:
    ops: list[DrawOp] = [_title(section)]
    top = BODY_TOP
    for label, page_no in toc_entries:
        ops.append(TextOp(label, x=LEFT, top=top, size=BODY_SIZE))
        ops.append(TextOp(str(page_no), x=TOC_PAGE_X, top=top, size=BODY_SIZE))
        top += TOC_ROW_STEP
    return ops


def _build_summary(report: Report, section: Section, **_) -> list[DrawOp]:
    return [
        _title(section),
        TextOp(report.narrative_text("summary"), x=LEFT, top=BODY_TOP,
               size=BODY_SIZE, max_width=CONTENT_WIDTH),
    ]


def _build_narrative(report: Report, section: Section, **_) -> list[DrawOp]:
    # Fixed bands; a block that overflows its band overlaps the next one.
    ops: list[DrawOp] = [_title(section)]
    for idx, key in enumerate(NARRATIVE_KEYS):
        ops.append(TextOp(report.narrative_text(key), x=LEFT,
                          top=BODY_TOP + idx * NARRATIVE_BLOCK_STEP,
                          size=BODY_SIZE, max_width=CONTENT_WIDTH))
    return ops


def _build_exhibits(report: Report, section: Section, **_) -> list[DrawOp]:
    ops: list[DrawOp] = [
        _title(section),
        TextOp("Property Facts", x=LEFT, top=EXHIBIT_HEADING_TOP, size=14, bold=True),
    ]
    top = EXHIBIT_FIRST_ROW_TOP
    for label, key in EXHIBIT_FIELDS:
        ops.append(TextOp(label, x=LEFT, top=top, size=BODY_SIZE))
        ops.append(TextOp(or_missing(report.fields.get(key)), x=EXHIBIT_VALUE_X,
                          top=top, size=BODY_SIZE))
        top += EXHIBIT_ROW_STEP
    return ops


def _build_photos(report: Report, section: Section, **_) -> list[DrawOp]:
    return [
        _title(section),
        TextOp(PHOTOS_PLACEHOLDER, x=LEFT, top=BODY_TOP, size=BODY_SIZE),
    ]


def _build_depreciation(report: Report, section: Section, *, totals: Totals, **_) -> list[DrawOp]:
    ops: list[DrawOp] = [_title(section)]
    top = BODY_TOP
    for heading, x in LEDGER_COLUMNS:
        ops.append(TextOp(heading, x=x, top=top, size=BODY_SIZE, bold=True))
    top += LEDGER_HEADER_STEP

    (_, cat_x), (_, desc_x), (_, qty_x), (_, total_x) = LEDGER_COLUMNS
    for item in report.line_items:
        ops.append(TextOp(str(item.category), x=cat_x, top=top, size=LEDGER_ROW_SIZE))
        ops.append(TextOp(str(item.description), x=desc_x, top=top, size=LEDGER_ROW_SIZE,
                          max_width=LEDGER_DESCRIPTION_WIDTH, max_lines=1))
        ops.append(TextOp(fmt_qty(item.qty), x=qty_x, top=top, size=LEDGER_ROW_SIZE))
        ops.append(TextOp(fmt_currency(item.effective_total()), x=total_x, top=top,
                          size=LEDGER_ROW_SIZE))
        top += LEDGER_ROW_STEP

    top += LEDGER_TOTALS_GAP
    for category, subtotal in totals.by_category.items():
        ops.append(TextOp(f"{category} subtotal", x=cat_x, top=top, size=LEDGER_ROW_SIZE))
        ops.append(TextOp(fmt_currency(subtotal), x=total_x, top=top, size=LEDGER_ROW_SIZE))
        top += LEDGER_ROW_STEP
    ops.append(TextOp("Grand Total", x=cat_x, top=top, size=LEDGER_ROW_SIZE, bold=True))
    ops.append(TextOp(fmt_currency(totals.grand_total), x=total_x, top=top,
                      size=LEDGER_ROW_SIZE, bold=True))
    return ops


_BUILDERS: dict[str, Callable[..., list[DrawOp]]] = {
    COVER: _build_cover,
    TOC: _build_toc,
    SUMMARY: _build_summary,
    NARRATIVE: _build_narrative,
    EXHIBITS: _build_exhibits,
    PHOTOS: _build_photos,
    DEPRECIATION: _build_depreciation,
}


# ══════════════════════════════════════════════════════════════════════
# Public API
# ══════════════════════════════════════════════════════════════════════

def toc_entries(sections: list[Section]) -> list[tuple[str, int]]:
    """(label, page number) for every listed section.

    Page number = index among enabled non-TOC sections + 2. With the cover
    counted at index 0 this is the section's real page position.
    """
    non_toc = [s for s in sections if s.key != TOC]
    return [
        (s.label, idx + 2)
        for idx, s in enumerate(non_toc)
        if s.key != COVER
    ]


def compose_document(report: Report, totals: Totals | None = None) -> DocumentPlan:
    """Build the page plan for ``report``.

    ``totals`` defaults to ``compute_totals(report.line_items)``.
    """
    if totals is None:
        totals = compute_totals(report.line_items)

    sections = enabled_sections(report)
    entries = toc_entries(sections)

    pages = []
    for section in sections:
        builder = _BUILDERS[section.key]
        ops = builder(report, section, totals=totals, toc_entries=entries)
        pages.append(PageSpec(section_key=section.key, ops=tuple(ops),
                              overlay=section.key == COVER))
    return DocumentPlan(pages=tuple(pages))
