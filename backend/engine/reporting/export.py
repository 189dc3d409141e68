"""End-to-end PDF export of a report."""

from __future__ import annotations

import logging
import time

from engine.report.model import Report, Template
from engine.report.totals import compute_totals

from .compositor import compose_document
from .pdf_backend import PdfBackend, TemplateSource

logger = logging.getLogger(__name__)


def export_report_pdf(
    report: Report,
    template: Template | None = None,
    template_source: TemplateSource = None,
    backend: PdfBackend | None = None,
) -> bytes:
    """Render ``report`` to PDF bytes.

    The template document is taken from ``template_source`` when given,
    otherwise from ``template.source_file_path``.

    Raises
    ------
    RenderError
        If the backend cannot produce the document.
    """
    start = time.perf_counter()
    if template_source is None and template is not None:
        template_source = template.source_file_path

    totals = compute_totals(report.line_items)
    plan = compose_document(report, totals)
    pdf_bytes = (backend or PdfBackend()).render(plan, template_source)

    logger.info(
        "Exported report %s: %d pages, %d bytes (%.1fms)",
        report.id, plan.page_count, len(pdf_bytes),
        (time.perf_counter() - start) * 1000,
    )
    return pdf_bytes
