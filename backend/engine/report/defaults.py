"""Starter content for new reports."""

from __future__ import annotations

import copy
import uuid
from datetime import date

from .model import FIELD_KEYS, LineItem, Report, Template, utc_now
from .sections import default_sections

DEFAULT_SECTIONS = default_sections()

# (category, description, qty, unit_cost)
STARTER_LINE_ITEMS: tuple[tuple[str, str, float, float], ...] = (
    ("5-year", "Carpeting", 1200, 8),
    ("5-year", "Millwork", 1, 12500),
    ("15-year", "Landscaping", 1, 18000),
    ("39-year", "Building Shell", 1, 325000),
)

DEFAULT_NARRATIVE: dict[str, str] = {
    "summary": "We are pleased to provide this cost segregation summary letter.",
    "methodology": "Our methodology follows IRS guidelines and industry best practices.",
    "certifications": "We certify that this report was prepared by qualified professionals.",
    "taxClassification": "Assets have been classified into appropriate recovery periods.",
}

NEW_ITEM_CATEGORY = "5-year"
NEW_ITEM_DESCRIPTION = "New Item"


def new_id() -> str:
    return uuid.uuid4().hex


def new_line_item() -> LineItem:
    return LineItem(
        id=new_id(),
        category=NEW_ITEM_CATEGORY,
        description=NEW_ITEM_DESCRIPTION,
        qty=1,
        unit_cost=0,
        total_override=None,
    )


def starter_line_items() -> list[LineItem]:
    return [
        LineItem(id=new_id(), category=cat, description=desc, qty=qty, unit_cost=cost)
        for cat, desc, qty, cost in STARTER_LINE_ITEMS
    ]


def default_fields(today: date | None = None) -> dict[str, str]:
    fields = {key: "" for key in FIELD_KEYS}
    fields["reportDate"] = (today or date.today()).isoformat()
    return fields


def new_report_from_template(
    template: Template,
    name: str | None = None,
    today: date | None = None,
    report_id: str | None = None,
) -> Report:
    """Create a report owning a copy of ``template``'s sections."""
    today = today or date.today()
    return Report(
        id=report_id or new_id(),
        template_id=template.id,
        name=name or f"New Report {today.isoformat()}",
        fields=default_fields(today),
        sections=copy.deepcopy(template.default_sections or DEFAULT_SECTIONS),
        narrative=dict(DEFAULT_NARRATIVE),
        line_items=starter_line_items(),
        cover_image_path="",
        photos=[],
        updated_at=utc_now(),
    )
