"""Report editing, export and import endpoints."""

import json
import logging

from fastapi import APIRouter, Body, Depends, File, HTTPException, Request, UploadFile, status
from fastapi.responses import Response
from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from app.core.rate_limit import export_limiter, upload_limiter
from app.models.database import get_db
from app.models.report import Report as ReportRow
from app.schemas.report import (
    CoverResponse,
    FindReplaceRequest,
    LineItemSchema,
    LineItemUpdate,
    ReportDocument,
    ReportImport,
    ReportResponse,
    SectionToggle,
    TotalsResponse,
)
from app.services.report_service import (
    find_template_row,
    get_report_row,
    new_report_row,
    report_from_document,
    report_from_row,
    report_response,
    save_report,
    template_from_row,
)
from app.services.storage import cover_path, discard_upload, save_upload
from engine.report import operations
from engine.report.interchange import import_report, line_item_from_dict, report_to_dict
from engine.report.totals import compute_totals
from engine.reporting import RenderError, export_report_pdf

logger = logging.getLogger(__name__)

router = APIRouter()


# ======================================================================
# Read / replace / delete
# ======================================================================


@router.get("/", response_model=list[ReportResponse], summary="List reports")
async def list_reports(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(ReportRow).order_by(ReportRow.updated_at.desc()))
    return [report_response(report_from_row(row)) for row in result.scalars().all()]


@router.get("/{report_id}", response_model=ReportResponse, summary="Get report")
async def get_report(report_id: str, db: AsyncSession = Depends(get_db)):
    return report_response(report_from_row(await get_report_row(db, report_id)))


@router.put(
    "/{report_id}",
    response_model=ReportResponse,
    summary="Replace report",
    description="Replace the whole report document. Identity and template link are kept.",
)
async def replace_report(report_id: str, body: ReportDocument, db: AsyncSession = Depends(get_db)):
    row = await get_report_row(db, report_id)
    current = report_from_row(row)
    incoming = report_from_document(body)
    report = await save_report(db, row, operations.replace_report(current, incoming))
    return report_response(report)


@router.delete("/{report_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete report")
async def delete_report(report_id: str, db: AsyncSession = Depends(get_db)):
    row = await get_report_row(db, report_id)
    cover = row.cover_image_path
    await db.delete(row)
    await db.commit()
    discard_upload(cover)


# ======================================================================
# Field-level updates
# ======================================================================


@router.patch("/{report_id}/fields", response_model=ReportResponse, summary="Replace property fields")
async def update_fields(
    report_id: str,
    fields: dict[str, str] = Body(...),
    db: AsyncSession = Depends(get_db),
):
    row = await get_report_row(db, report_id)
    report = operations.update_fields(report_from_row(row), fields)
    return report_response(await save_report(db, row, report))


@router.patch("/{report_id}/narrative", response_model=ReportResponse, summary="Replace narrative")
async def update_narrative(
    report_id: str,
    narrative: dict[str, str] = Body(...),
    db: AsyncSession = Depends(get_db),
):
    row = await get_report_row(db, report_id)
    report = operations.update_narrative(report_from_row(row), narrative)
    return report_response(await save_report(db, row, report))


@router.post(
    "/{report_id}/narrative/find-replace",
    response_model=ReportResponse,
    summary="Find and replace in narrative",
)
async def find_replace_narrative(
    report_id: str,
    body: FindReplaceRequest,
    db: AsyncSession = Depends(get_db),
):
    row = await get_report_row(db, report_id)
    report = operations.find_replace_narrative(report_from_row(row), body.find, body.replace)
    return report_response(await save_report(db, row, report))


@router.patch(
    "/{report_id}/sections/{key}",
    response_model=ReportResponse,
    summary="Toggle section",
)
async def toggle_section(
    report_id: str,
    key: str,
    body: SectionToggle,
    db: AsyncSession = Depends(get_db),
):
    row = await get_report_row(db, report_id)
    current = report_from_row(row)
    if not any(s.key == key for s in current.sections):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Section '{key}' not found")
    report = operations.set_section_enabled(current, key, body.enabled)
    return report_response(await save_report(db, row, report))


# ======================================================================
# Line items
# ======================================================================


@router.post(
    "/{report_id}/line-items",
    response_model=ReportResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add line item",
)
async def add_line_item(
    report_id: str,
    body: LineItemSchema | None = None,
    db: AsyncSession = Depends(get_db),
):
    row = await get_report_row(db, report_id)
    item = line_item_from_dict(body.model_dump(by_alias=True)) if body else None
    report = operations.add_line_item(report_from_row(row), item)
    return report_response(await save_report(db, row, report))


@router.patch(
    "/{report_id}/line-items/{item_id}",
    response_model=ReportResponse,
    summary="Edit line item",
)
async def update_line_item(
    report_id: str,
    item_id: str,
    body: LineItemUpdate,
    db: AsyncSession = Depends(get_db),
):
    row = await get_report_row(db, report_id)
    try:
        report = operations.update_line_item(
            report_from_row(row), item_id, **body.model_dump(exclude_unset=True)
        )
    except KeyError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Line item not found") from None
    return report_response(await save_report(db, row, report))


@router.delete(
    "/{report_id}/line-items/{item_id}",
    response_model=ReportResponse,
    summary="Remove line item",
)
async def remove_line_item(report_id: str, item_id: str, db: AsyncSession = Depends(get_db)):
    row = await get_report_row(db, report_id)
    try:
        report = operations.remove_line_item(report_from_row(row), item_id)
    except KeyError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Line item not found") from None
    return report_response(await save_report(db, row, report))


@router.get(
    "/{report_id}/totals",
    response_model=TotalsResponse,
    summary="Ledger totals",
    description="Per-category subtotals in first-seen order and the grand total.",
)
async def get_totals(report_id: str, db: AsyncSession = Depends(get_db)):
    report = report_from_row(await get_report_row(db, report_id))
    totals = compute_totals(report.line_items)
    return TotalsResponse(by_category=totals.by_category, grand_total=totals.grand_total)


# ======================================================================
# Cover, export, import
# ======================================================================


@router.post("/{report_id}/cover", response_model=CoverResponse, summary="Upload cover image")
async def upload_cover(
    report_id: str,
    request: Request,
    cover: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
):
    upload_limiter.check(request)
    row = await get_report_row(db, report_id)
    previous = row.cover_image_path
    stored = await save_upload(cover, cover_path(str(row.id), cover.filename))
    report = await save_report(db, row, operations.set_cover_image(report_from_row(row), str(stored)))
    discard_upload(previous, keep=stored)
    return CoverResponse(cover_image_path=report.cover_image_path)


@router.get(
    "/{report_id}/export",
    summary="Download PDF",
    description="Render the report onto its template and return the PDF.",
)
async def export_pdf(report_id: str, request: Request, db: AsyncSession = Depends(get_db)):
    export_limiter.check(request)
    row = await get_report_row(db, report_id)
    report = report_from_row(row)

    template_row = await find_template_row(db, report.template_id)
    if template_row is None:
        logger.warning("Report %s references unknown template %s; exporting with a blank cover",
                       report.id, report.template_id, extra={"report_id": report.id})
    template = template_from_row(template_row) if template_row else None

    try:
        pdf_bytes = await run_in_threadpool(export_report_pdf, report, template)
    except RenderError:
        logger.exception("Export of report %s failed", report.id, extra={"report_id": report.id})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Report rendering failed",
        ) from None

    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="report-{report.id}.pdf"'},
    )


@router.get("/{report_id}/export-json", summary="Download report JSON")
async def export_json(report_id: str, db: AsyncSession = Depends(get_db)):
    report = report_from_row(await get_report_row(db, report_id))
    return Response(
        content=json.dumps(report_to_dict(report), indent=2),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="report-{report.id}.json"'},
    )


@router.post(
    "/import",
    response_model=ReportResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Import report JSON",
    description="Create a report from an exported JSON file. A new report id is assigned.",
)
async def import_report_json(
    request: Request,
    report: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
):
    upload_limiter.check(request)
    try:
        payload = json.loads(await report.read())
        doc = ReportImport.model_validate(payload)
    except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid report JSON: {exc}") from None

    imported = import_report(doc.model_dump(by_alias=True, mode="json"))
    row = new_report_row(imported)
    db.add(row)
    await db.commit()
    await db.refresh(row)
    logger.info("Imported report %s", row.id, extra={"report_id": str(row.id)})
    return report_response(report_from_row(row))
