import uuid
from datetime import datetime

from sqlalchemy import DateTime, String, func
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.models.database import Base


class Report(Base):
    """A report document. JSON columns hold the camelCase document format."""

    __tablename__ = "reports"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    # Weak link: reports outlive their template and imports may reference unknown ones.
    template_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    fields: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    sections: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)
    narrative: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    line_items: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)
    cover_image_path: Mapped[str] = mapped_column(String(1024), nullable=False, default="")
    photos: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
