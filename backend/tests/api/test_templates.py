"""Tests for template upload and report creation endpoints."""

from __future__ import annotations

import uuid
from pathlib import Path

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


class TestTemplateUpload:
    async def test_upload(self, client: AsyncClient, uploaded_template, storage_dir: Path):
        assert uploaded_template["name"] == "Standard"
        assert [s["key"] for s in uploaded_template["sections"]] == [
            "cover", "toc", "summary", "narrative", "exhibits", "photos", "depreciation",
        ]
        assert all(s["enabled"] for s in uploaded_template["sections"])
        stored = Path(uploaded_template["filePath"])
        assert stored.parent == storage_dir / "templates"
        assert stored.read_bytes().startswith(b"%PDF")

    async def test_name_defaults_to_filename(self, client: AsyncClient, template_pdf):
        resp = await client.post(
            "/api/v1/templates/",
            files={"template": ("letterhead.pdf", template_pdf.read_bytes(), "application/pdf")},
        )
        assert resp.status_code == 201
        assert resp.json()["name"] == "letterhead.pdf"

    async def test_rejects_non_pdf(self, client: AsyncClient):
        resp = await client.post(
            "/api/v1/templates/",
            files={"template": ("notes.txt", b"hello", "text/plain")},
        )
        assert resp.status_code == 400

    async def test_upload_too_large(self, client: AsyncClient, template_pdf, monkeypatch):
        from app.config import settings

        monkeypatch.setattr(settings, "max_upload_mb", 0)
        resp = await client.post(
            "/api/v1/templates/",
            files={"template": ("big.pdf", template_pdf.read_bytes(), "application/pdf")},
        )
        assert resp.status_code == 413

    async def test_list_and_get(self, client: AsyncClient, uploaded_template):
        resp = await client.get("/api/v1/templates/")
        assert resp.status_code == 200
        assert [t["id"] for t in resp.json()] == [uploaded_template["id"]]

        resp = await client.get(f"/api/v1/templates/{uploaded_template['id']}")
        assert resp.status_code == 200
        assert resp.json()["filePath"] == uploaded_template["filePath"]

    async def test_get_not_found(self, client: AsyncClient):
        resp = await client.get(f"/api/v1/templates/{uuid.uuid4()}")
        assert resp.status_code == 404

    async def test_get_malformed_id(self, client: AsyncClient):
        resp = await client.get("/api/v1/templates/not-a-uuid")
        assert resp.status_code == 404


class TestCreateReport:
    async def test_starter_content(self, created_report, uploaded_template):
        assert created_report["name"] == "Maple Street"
        assert created_report["templateId"] == uploaded_template["id"]
        assert created_report["sections"] == uploaded_template["sections"]
        assert [i["description"] for i in created_report["lineItems"]] == [
            "Carpeting", "Millwork", "Landscaping", "Building Shell",
        ]
        assert created_report["fields"]["owner"] == ""
        assert created_report["fields"]["reportDate"]
        assert created_report["narrative"]["summary"].startswith("We are pleased")
        assert created_report["coverImagePath"] == ""

    async def test_default_name(self, client: AsyncClient, uploaded_template):
        resp = await client.post(f"/api/v1/templates/{uploaded_template['id']}/reports")
        assert resp.status_code == 201
        assert resp.json()["name"].startswith("New Report ")

    async def test_unknown_template(self, client: AsyncClient):
        resp = await client.post(f"/api/v1/templates/{uuid.uuid4()}/reports", json={})
        assert resp.status_code == 404
