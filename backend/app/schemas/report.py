from datetime import datetime

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

# Wire format is camelCase (templateId, lineItems, unitCost, ...) so exported
# documents and API payloads share one shape.
CAMEL = {"alias_generator": to_camel, "populate_by_name": True}


class SectionSchema(BaseModel):
    model_config = CAMEL

    key: str = Field(max_length=64)
    label: str = Field(max_length=255)
    enabled: bool = True


class LineItemSchema(BaseModel):
    model_config = CAMEL

    id: str | None = Field(default=None, max_length=64)
    category: str = Field(default="5-year", max_length=255)
    description: str = Field(default="New Item", max_length=2000)
    qty: float = 1
    unit_cost: float = 0
    total_override: float | None = None


class LineItemUpdate(BaseModel):
    model_config = CAMEL

    category: str | None = Field(default=None, max_length=255)
    description: str | None = Field(default=None, max_length=2000)
    qty: float | None = None
    unit_cost: float | None = None
    # null clears the override; the other fields may be omitted but not nulled
    total_override: float | None = None

    @field_validator("category", "description", "qty", "unit_cost")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class ReportDocument(BaseModel):
    """Editable report content. PUT replaces all of it at once."""

    model_config = CAMEL

    name: str = Field(max_length=255)
    fields: dict[str, str] = Field(default_factory=dict)
    sections: list[SectionSchema] = Field(default_factory=list)
    narrative: dict[str, str] = Field(default_factory=dict)
    line_items: list[LineItemSchema] = Field(default_factory=list)
    cover_image_path: str = ""
    photos: list[str] = Field(default_factory=list)


class ReportImport(ReportDocument):
    template_id: str = ""


class ReportResponse(ReportDocument):
    id: str
    template_id: str
    updated_at: datetime


class ReportCreate(BaseModel):
    name: str | None = Field(default=None, max_length=255)


class FindReplaceRequest(BaseModel):
    find: str = Field(min_length=1)
    replace: str = ""


class SectionToggle(BaseModel):
    enabled: bool


class TotalsResponse(BaseModel):
    model_config = CAMEL

    by_category: dict[str, float]
    grand_total: float


class CoverResponse(BaseModel):
    model_config = CAMEL

    cover_image_path: str
