"""Local storage for uploaded template PDFs and cover images."""

from __future__ import annotations

import logging
from pathlib import Path

from fastapi import HTTPException, UploadFile, status

from app.config import settings

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024
IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg"}


async def save_upload(upload: UploadFile, dest: Path) -> Path:
    """Stream ``upload`` to ``dest``; 413 past the configured size limit."""
    limit = settings.max_upload_mb * 1024 * 1024
    dest.parent.mkdir(parents=True, exist_ok=True)
    written = 0
    with dest.open("wb") as fh:
        while chunk := await upload.read(CHUNK_SIZE):
            written += len(chunk)
            if written > limit:
                fh.close()
                dest.unlink(missing_ok=True)
                raise HTTPException(
                    status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                    detail=f"Upload exceeds {settings.max_upload_mb} MB",
                )
            fh.write(chunk)
    logger.info("Stored upload %s (%d bytes)", dest.name, written)
    return dest


def discard_upload(path: str | Path | None, keep: Path | None = None) -> None:
    """Delete a stored upload. Paths outside the uploads directory are left alone."""
    if not path:
        return
    target = Path(path).resolve()
    if keep is not None and target == keep.resolve():
        return
    if not target.is_relative_to(settings.uploads_dir.resolve()):
        return
    target.unlink(missing_ok=True)
    logger.info("Removed upload %s", target.name)


def template_path(template_id: str) -> Path:
    return settings.templates_dir / f"{template_id}.pdf"


def cover_path(report_id: str, filename: str | None) -> Path:
    ext = Path(filename or "").suffix.lower() or ".jpg"
    if ext not in IMAGE_EXTENSIONS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cover image must be PNG or JPEG",
        )
    return settings.uploads_dir / f"{report_id}-cover{ext}"
