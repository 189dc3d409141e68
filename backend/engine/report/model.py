"""Report data model: templates, sections, line items and reports.

These are plain in-memory values. Nothing here validates input; the API
layer is responsible for handing the engine well-formed documents.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

FIELD_KEYS: tuple[str, ...] = (
    "owner",
    "address",
    "reportDate",
    "squareFootage",
    "lotSize",
    "placedInService",
    "totalCostBasis",
    "landValue",
)

NARRATIVE_KEYS: tuple[str, ...] = (
    "summary",
    "methodology",
    "certifications",
    "taxClassification",
)

# Fields that may be changed on an existing line item.
LINE_ITEM_MUTABLE: tuple[str, ...] = (
    "category",
    "description",
    "qty",
    "unit_cost",
    "total_override",
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Section:
    """A toggleable block of report content."""
    key: str
    label: str
    enabled: bool = True


@dataclass
class LineItem:
    """One row of the depreciation ledger."""
    id: str
    category: str
    description: str
    qty: float
    unit_cost: float
    total_override: float | None = None

    def effective_total(self) -> float:
        """Override when one is set, otherwise qty x unit cost."""
        if self.total_override is not None:
            return self.total_override
        return self.qty * self.unit_cost


@dataclass
class Template:
    id: str
    name: str
    source_file_path: str
    default_sections: list[Section] = field(default_factory=list)
    created_at: datetime = field(default_factory=utc_now)


@dataclass
class Report:
    id: str
    template_id: str
    name: str
    fields: dict[str, str] = field(default_factory=dict)
    sections: list[Section] = field(default_factory=list)
    narrative: dict[str, str] = field(default_factory=dict)
    line_items: list[LineItem] = field(default_factory=list)
    cover_image_path: str = ""
    photos: list[str] = field(default_factory=list)
    updated_at: datetime = field(default_factory=utc_now)

    def field_value(self, key: str) -> str:
        return self.fields.get(key) or ""

    def narrative_text(self, key: str) -> str:
        return self.narrative.get(key) or ""
