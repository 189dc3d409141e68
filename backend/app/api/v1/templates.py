"""Template upload and report creation endpoints."""

import logging
import uuid

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.rate_limit import upload_limiter
from app.models.database import get_db
from app.models.template import Template as TemplateRow
from app.schemas.report import ReportCreate, ReportResponse
from app.schemas.template import TemplateResponse
from app.services.report_service import (
    get_template_row,
    new_report_row,
    report_from_row,
    report_response,
    template_from_row,
    template_response,
)
from app.services.storage import save_upload, template_path
from engine.report.defaults import new_report_from_template
from engine.report.interchange import section_to_dict
from engine.report.sections import default_sections

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/",
    response_model=list[TemplateResponse],
    summary="List templates",
    description="Return all uploaded report templates, oldest first.",
)
async def list_templates(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(TemplateRow).order_by(TemplateRow.created_at))
    return [template_response(row) for row in result.scalars().all()]


@router.post(
    "/",
    response_model=TemplateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload template",
    description="Store a template PDF whose first page becomes the cover of every exported report.",
)
async def create_template(
    request: Request,
    template: UploadFile = File(...),
    name: str | None = Form(default=None),
    db: AsyncSession = Depends(get_db),
):
    upload_limiter.check(request)
    filename = template.filename or ""
    if template.content_type not in ("application/pdf", "application/octet-stream") and not filename.lower().endswith(".pdf"):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Template PDF required.")

    template_id = uuid.uuid4()
    stored = await save_upload(template, template_path(str(template_id)))

    row = TemplateRow(
        id=template_id,
        name=name or filename or "Untitled template",
        file_path=str(stored),
        sections=[section_to_dict(s) for s in default_sections()],
    )
    db.add(row)
    await db.commit()
    await db.refresh(row)
    logger.info("Template %s uploaded", row.id, extra={"template_id": str(row.id)})
    return template_response(row)


@router.get(
    "/{template_id}",
    response_model=TemplateResponse,
    summary="Get template",
)
async def get_template(template_id: str, db: AsyncSession = Depends(get_db)):
    return template_response(await get_template_row(db, template_id))


@router.post(
    "/{template_id}/reports",
    response_model=ReportResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create report",
    description="Start a report from a template: its sections, starter line items and default narrative.",
)
async def create_report(
    template_id: str,
    body: ReportCreate | None = None,
    db: AsyncSession = Depends(get_db),
):
    template = template_from_row(await get_template_row(db, template_id))
    report = new_report_from_template(template, name=body.name if body else None)

    row = new_report_row(report)
    db.add(row)
    await db.commit()
    await db.refresh(row)
    logger.info("Report %s created from template %s", row.id, template.id,
                extra={"report_id": str(row.id), "template_id": template.id})
    return report_response(report_from_row(row))
