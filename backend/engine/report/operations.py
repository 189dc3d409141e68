"""Named update operations on a report.

Inputs are never mutated; changes come back as a new ``Report``.
"""

from __future__ import annotations

import copy
from dataclasses import replace

from .defaults import new_id, new_line_item
from .model import LINE_ITEM_MUTABLE, LineItem, Report, Section, utc_now


def _touch(report: Report, **changes) -> Report:
    return replace(copy.deepcopy(report), updated_at=utc_now(), **changes)


def replace_report(current: Report, incoming: Report) -> Report:
    """Whole-document replace. Identity and template link are kept."""
    return replace(
        copy.deepcopy(incoming),
        id=current.id,
        template_id=current.template_id,
        updated_at=utc_now(),
    )


def update_fields(report: Report, fields: dict[str, str]) -> Report:
    return _touch(report, fields=dict(fields))


def update_narrative(report: Report, narrative: dict[str, str]) -> Report:
    return _touch(report, narrative=dict(narrative))


def find_replace_narrative(report: Report, find: str, replace_with: str) -> Report:
    """Literal substitution across all narrative blocks."""
    if not find:
        return report
    narrative = {
        key: value.replace(find, replace_with) if isinstance(value, str) else value
        for key, value in report.narrative.items()
    }
    return _touch(report, narrative=narrative)


def set_section_enabled(report: Report, key: str, enabled: bool) -> Report:
    if not any(section.key == key for section in report.sections):
        return report
    sections = [
        Section(key=s.key, label=s.label, enabled=enabled if s.key == key else s.enabled)
        for s in report.sections
    ]
    return _touch(report, sections=sections)


def add_line_item(report: Report, item: LineItem | None = None) -> Report:
    """Append ``item`` (a default item when None).

    An item whose id is empty or already taken in ``report`` is added under
    a fresh id, so ids stay unique within the report.
    """
    items = copy.deepcopy(report.line_items)
    if item is None:
        item = new_line_item()
    elif not item.id or any(existing.id == item.id for existing in items):
        item = replace(item, id=new_id())
    items.append(item)
    return _touch(report, line_items=items)


def _index_of(report: Report, item_id: str) -> int:
    for idx, item in enumerate(report.line_items):
        if item.id == item_id:
            return idx
    raise KeyError(item_id)


def update_line_item(report: Report, item_id: str, **changes) -> Report:
    unknown = set(changes) - set(LINE_ITEM_MUTABLE)
    if unknown:
        raise ValueError(f"Line item fields not editable: {', '.join(sorted(unknown))}")
    idx = _index_of(report, item_id)
    items = copy.deepcopy(report.line_items)
    items[idx] = replace(items[idx], **changes)
    return _touch(report, line_items=items)


def remove_line_item(report: Report, item_id: str) -> Report:
    idx = _index_of(report, item_id)
    items = copy.deepcopy(report.line_items)
    del items[idx]
    return _touch(report, line_items=items)


def set_cover_image(report: Report, path: str) -> Report:
    return _touch(report, cover_image_path=path)
