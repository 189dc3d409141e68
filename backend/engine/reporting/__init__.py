"""Report composition and PDF rendering."""

from .compositor import compose_document
from .errors import RenderError
from .export import export_report_pdf
from .pdf_backend import PdfBackend

__all__ = ["PdfBackend", "RenderError", "compose_document", "export_report_pdf"]
