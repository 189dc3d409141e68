"""JSON-ready conversion of reports and templates.

The key names follow the report document format used by the builder's
browser client and by exported ``.json`` files (camelCase).
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from .defaults import new_id
from .model import LineItem, Report, Section, Template, utc_now


def _parse_ts(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if value:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    return utc_now()


def section_to_dict(section: Section) -> dict[str, Any]:
    return {"key": section.key, "label": section.label, "enabled": section.enabled}


def section_from_dict(data: dict[str, Any]) -> Section:
    return Section(
        key=data["key"],
        label=data.get("label", data["key"]),
        enabled=bool(data.get("enabled", True)),
    )


def line_item_to_dict(item: LineItem) -> dict[str, Any]:
    return {
        "id": item.id,
        "category": item.category,
        "description": item.description,
        "qty": item.qty,
        "unitCost": item.unit_cost,
        "totalOverride": item.total_override,
    }


def line_item_from_dict(data: dict[str, Any]) -> LineItem:
    return LineItem(
        id=data.get("id") or new_id(),
        category=data.get("category", ""),
        description=data.get("description", ""),
        qty=data.get("qty", 0),
        unit_cost=data.get("unitCost", 0),
        total_override=data.get("totalOverride"),
    )


def report_to_dict(report: Report) -> dict[str, Any]:
    return {
        "id": report.id,
        "templateId": report.template_id,
        "name": report.name,
        "fields": dict(report.fields),
        "sections": [section_to_dict(s) for s in report.sections],
        "narrative": dict(report.narrative),
        "lineItems": [line_item_to_dict(i) for i in report.line_items],
        "coverImagePath": report.cover_image_path,
        "photos": list(report.photos),
        "updatedAt": report.updated_at.isoformat(),
    }


def report_from_dict(data: dict[str, Any]) -> Report:
    return Report(
        id=data.get("id") or new_id(),
        template_id=data.get("templateId", ""),
        name=data.get("name", ""),
        fields=dict(data.get("fields") or {}),
        sections=[section_from_dict(s) for s in data.get("sections") or []],
        narrative=dict(data.get("narrative") or {}),
        line_items=[line_item_from_dict(i) for i in data.get("lineItems") or []],
        cover_image_path=data.get("coverImagePath") or "",
        photos=list(data.get("photos") or []),
        updated_at=_parse_ts(data.get("updatedAt")),
    )


def import_report(data: dict[str, Any]) -> Report:
    """Re-create an exported report under a new id."""
    report = report_from_dict(data)
    report.id = new_id()
    report.updated_at = utc_now()
    return report


def template_to_dict(template: Template) -> dict[str, Any]:
    return {
        "id": template.id,
        "name": template.name,
        "filePath": template.source_file_path,
        "sections": [section_to_dict(s) for s in template.default_sections],
        "createdAt": template.created_at.isoformat(),
    }


def template_from_dict(data: dict[str, Any]) -> Template:
    return Template(
        id=data["id"],
        name=data.get("name", ""),
        source_file_path=data.get("filePath", ""),
        default_sections=[section_from_dict(s) for s in data.get("sections") or []],
        created_at=_parse_ts(data.get("createdAt")),
    )
