"""Bridges ORM rows, API schemas and engine report values."""

from __future__ import annotations

import uuid

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.report import Report as ReportRow
from app.models.template import Template as TemplateRow
from app.schemas.report import ReportDocument, ReportResponse
from app.schemas.template import TemplateResponse
from engine.report.interchange import (
    line_item_to_dict,
    report_from_dict,
    report_to_dict,
    section_from_dict,
    section_to_dict,
)
from engine.report.model import Report, Template


def _parse_uuid(value: str | uuid.UUID, what: str) -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{what} not found") from None


async def find_template_row(db: AsyncSession, template_id: str) -> TemplateRow | None:
    """Template row for ``template_id``, or None when the id is unknown or malformed."""
    try:
        tid = uuid.UUID(str(template_id))
    except ValueError:
        return None
    result = await db.execute(select(TemplateRow).where(TemplateRow.id == tid))
    return result.scalar_one_or_none()


async def get_template_row(db: AsyncSession, template_id: str | uuid.UUID) -> TemplateRow:
    tid = _parse_uuid(template_id, "Template")
    row = await find_template_row(db, str(tid))
    if not row:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Template not found")
    return row


async def get_report_row(db: AsyncSession, report_id: str | uuid.UUID) -> ReportRow:
    rid = _parse_uuid(report_id, "Report")
    result = await db.execute(select(ReportRow).where(ReportRow.id == rid))
    row = result.scalar_one_or_none()
    if not row:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Report not found")
    return row


def template_from_row(row: TemplateRow) -> Template:
    return Template(
        id=str(row.id),
        name=row.name,
        source_file_path=row.file_path,
        default_sections=[section_from_dict(s) for s in row.sections or []],
        created_at=row.created_at,
    )


def template_response(row: TemplateRow) -> TemplateResponse:
    return TemplateResponse(
        id=str(row.id),
        name=row.name,
        file_path=row.file_path,
        sections=row.sections or [],
        created_at=row.created_at,
    )


def report_from_row(row: ReportRow) -> Report:
    return report_from_dict({
        "id": str(row.id),
        "templateId": row.template_id,
        "name": row.name,
        "fields": row.fields,
        "sections": row.sections,
        "narrative": row.narrative,
        "lineItems": row.line_items,
        "coverImagePath": row.cover_image_path,
        "photos": row.photos,
        "updatedAt": row.updated_at,
    })


def report_from_document(doc: ReportDocument, report_id: str = "", template_id: str = "") -> Report:
    data = doc.model_dump(by_alias=True, mode="json")
    data["id"] = report_id
    data["templateId"] = template_id
    return report_from_dict(data)


def apply_report(row: ReportRow, report: Report) -> ReportRow:
    """Write every document attribute of ``report`` onto ``row``."""
    row.template_id = report.template_id
    row.name = report.name
    row.fields = dict(report.fields)
    row.sections = [section_to_dict(s) for s in report.sections]
    row.narrative = dict(report.narrative)
    row.line_items = [line_item_to_dict(i) for i in report.line_items]
    row.cover_image_path = report.cover_image_path
    row.photos = list(report.photos)
    row.updated_at = report.updated_at
    return row


def new_report_row(report: Report) -> ReportRow:
    row = ReportRow(id=_parse_uuid(report.id, "Report"))
    return apply_report(row, report)


def report_response(report: Report) -> ReportResponse:
    return ReportResponse.model_validate(report_to_dict(report))


async def save_report(db: AsyncSession, row: ReportRow, report: Report) -> Report:
    apply_report(row, report)
    await db.commit()
    await db.refresh(row)
    return report_from_row(row)
