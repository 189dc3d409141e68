from datetime import datetime

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from app.schemas.report import SectionSchema


class TemplateResponse(BaseModel):
    model_config = {"alias_generator": to_camel, "populate_by_name": True}

    id: str
    name: str
    file_path: str
    sections: list[SectionSchema]
    created_at: datetime
