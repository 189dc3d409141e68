"""PDF realization of document plans.

Pages are drawn with the reportlab canvas using the standard Helvetica
family. The template's first page is read with pypdf and the cover
overlay is merged onto it; the remaining pages follow in plan order.
"""

from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path

from PIL import Image as PILImage
from pypdf import PdfReader, PdfWriter
from pypdf.errors import PyPdfError
from reportlab.lib.pagesizes import letter
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen.canvas import Canvas

from .errors import RenderError
from .page_spec import DocumentPlan, ImageOp, PageSpec, TextOp

logger = logging.getLogger(__name__)

FONT_REGULAR = "Helvetica"
FONT_BOLD = "Helvetica-Bold"
LINE_SPACING = 1.2
ELLIPSIS = "..."

# Extension -> Pillow decoder. Anything else is treated as JPEG.
IMAGE_FORMATS = {".png": "PNG", ".jpg": "JPEG", ".jpeg": "JPEG"}
DEFAULT_IMAGE_FORMAT = "JPEG"

TemplateSource = str | Path | bytes | None


def image_format(source: str) -> str:
    """Decoder for an image reference, chosen by extension (case-insensitive)."""
    return IMAGE_FORMATS.get(Path(source).suffix.lower(), DEFAULT_IMAGE_FORMAT)


def wrap_text(
    text: str, font: str, size: float,
    max_width: float | None = None, max_lines: int | None = None,
) -> list[str]:
    """Split ``text`` into lines no wider than ``max_width``.

    With ``max_lines`` the result is cut to that many lines and the last
    kept line ends in an ellipsis when anything was dropped.
    """
    if max_width is None:
        lines = text.split("\n")
    else:
        lines = simpleSplit(text, font, size, max_width) or [""]
    if max_lines is None or len(lines) <= max_lines:
        return lines

    kept = lines[:max_lines]
    last = kept[-1]
    limit = max_width if max_width is not None else float("inf")
    while last and stringWidth(last + ELLIPSIS, font, size) > limit:
        last = last[:-1]
    kept[-1] = last.rstrip() + ELLIPSIS
    return kept


class PdfBackend:
    """Turns a ``DocumentPlan`` into PDF bytes."""

    def __init__(self, page_size: tuple[float, float] = letter):
        self.page_size = page_size

    # ── public ──────────────────────────────────────────────────────

    def render(self, plan: DocumentPlan, template_source: TemplateSource = None) -> bytes:
        """Render ``plan``; the cover overlay lands on the template's first page.

        An unreadable template falls back to a blank first page and an
        unreadable cover image is left out. Any other failure raises
        ``RenderError``.
        """
        template_page = None
        if plan.pages and plan.pages[0].overlay:
            template_page = self._load_template_page(template_source)

        try:
            drawn = self._draw_pages(plan, template_page) if plan.pages else None
            return self._assemble(plan, drawn, template_page)
        except RenderError:
            raise
        except Exception as exc:
            raise RenderError(f"Failed to render document: {exc}") from exc

    # ── template ────────────────────────────────────────────────────

    def _load_template_page(self, source: TemplateSource):
        if source is None or source == "":
            logger.warning("No template source given; using a blank cover page")
            return None
        try:
            data = source if isinstance(source, bytes) else Path(source).read_bytes()
            reader = PdfReader(BytesIO(data))
            if reader.is_encrypted:
                reader.decrypt("")
            return reader.pages[0]
        except (OSError, PyPdfError, IndexError) as exc:
            logger.warning("Template source unreadable, using a blank cover page: %s", exc)
            return None

    # ── drawing ─────────────────────────────────────────────────────

    def _draw_pages(self, plan: DocumentPlan, template_page) -> bytes:
        buf = BytesIO()
        canvas = Canvas(buf, pagesize=self.page_size)
        for page in plan.pages:
            size = self.page_size
            if page.overlay and template_page is not None:
                size = (float(template_page.mediabox.width), float(template_page.mediabox.height))
            canvas.setPageSize(size)
            self._draw_page(canvas, page, size)
            canvas.showPage()
        canvas.save()
        return buf.getvalue()

    def _draw_page(self, canvas: Canvas, page: PageSpec, size: tuple[float, float]) -> None:
        for op in page.ops:
            if isinstance(op, TextOp):
                self._draw_text(canvas, op, size)
            elif isinstance(op, ImageOp):
                self._draw_image(canvas, op, size)

    def _draw_text(self, canvas: Canvas, op: TextOp, size: tuple[float, float]) -> None:
        font = FONT_BOLD if op.bold else FONT_REGULAR
        canvas.setFont(font, op.size)
        y = size[1] - op.top
        for line in wrap_text(op.text, font, op.size, op.max_width, op.max_lines):
            canvas.drawString(op.x, y, line)
            y -= op.size * LINE_SPACING

    def _draw_image(self, canvas: Canvas, op: ImageOp, size: tuple[float, float]) -> None:
        image = self._load_image(op.source)
        if image is None:
            return
        width = image.width * op.scale
        height = image.height * op.scale
        x = size[0] - width - op.right_inset
        y = size[1] - op.top_inset - height
        canvas.drawImage(ImageReader(image), x, y, width=width, height=height, mask="auto")

    def _load_image(self, source: str):
        try:
            data = Path(source).read_bytes()
        except OSError as exc:
            logger.warning("Cover image %s unreadable, skipping: %s", source, exc)
            return None
        fmt = image_format(source)
        try:
            image = PILImage.open(BytesIO(data), formats=[fmt])
            image.load()
        except (OSError, ValueError) as exc:
            raise RenderError(f"Cannot decode {source} as {fmt}: {exc}") from exc
        return image

    # ── assembly ────────────────────────────────────────────────────

    def _assemble(self, plan: DocumentPlan, drawn: bytes | None, template_page) -> bytes:
        writer = PdfWriter()
        if drawn is not None:
            reader = PdfReader(BytesIO(drawn))
            for idx, page in enumerate(reader.pages):
                if idx == 0 and plan.pages[0].overlay and template_page is not None:
                    writer.add_page(template_page)
                    writer.pages[0].merge_page(page)
                else:
                    writer.add_page(page)
        out = BytesIO()
        writer.write(out)
        return out.getvalue()
