"""Report export tests — HTML template, Documate PDF path, route errors."""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import asyncio
import json
from datetime import date
from unittest.mock import AsyncMock, patch

import httpx
import pytest
from fastapi.testclient import TestClient

from idea_validator.main import app
from idea_validator.services.export_service import (
    ExportError,
    ExportedDocument,
    export_document,
    render_pdf_via_documate,
    render_report_html,
    score_color,
)

client = TestClient(app)

RESULTS = [
    {
        "id": "business-idea",
        "icon": "💡",
        "title": "Business Idea Validator",
        "score": 7,
        "status": "moderate",
        "summary": "Promising niche.",
        "details": "Rare plants ship badly.\nUse insulated boxes.",
    },
    {
        "id": "go-to-market",
        "icon": "🚀",
        "title": "Go-to-Market Strategy",
        "score": 9,
        "status": "strong",
        "summary": "Clear channels.",
        "details": "Instagram plant communities.",
    },
]


class TestRenderHtml:
    def test_contains_idea_score_and_sections(self):
        html = render_report_html(RESULTS, 8.0, "Rare houseplants", generated_on=date(2026, 10, 19))
        assert "Generated on October 19, 2026" in html
        assert "Rare houseplants" in html
        assert "8/10" in html
        assert "Based on 2 validation tools" in html
        assert "Business Idea Validator" in html and "Go-to-Market Strategy" in html
        assert html.count('class="page-break"') == 1

    def test_escapes_user_and_model_text(self):
        results = [dict(RESULTS[0], summary="<script>alert(1)</script>")]
        html = render_report_html(results, 7.0, "<b>Idea</b> & co")
        assert "<script>" not in html
        assert "&lt;script&gt;" in html
        assert "&lt;b&gt;Idea&lt;/b&gt; &amp; co" in html
        assert "Based on 1 validation tool<" in html

    def test_score_color(self):
        assert score_color(9) == "#10b981"
        assert score_color(6) == "#f59e0b"
        assert score_color(3) == "#ef4444"


class TestDocumate:
    def test_posts_html_and_returns_pdf(self):
        seen = {}

        def handler(request):
            seen["auth"] = request.headers["authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, content=b"%PDF-1.7 fake")

        async def go():
            async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
                return await render_pdf_via_documate("<html></html>", client=http)

        with patch("idea_validator.services.export_service.get_documate_key", return_value="doc-key"):
            pdf = asyncio.run(go())

        assert pdf == b"%PDF-1.7 fake"
        assert seen["auth"] == "Bearer doc-key"
        assert seen["body"]["html"] == "<html></html>"
        assert seen["body"]["options"]["format"] == "A4"

    def test_error_status_raises(self):
        async def go():
            transport = httpx.MockTransport(lambda r: httpx.Response(500, text="boom"))
            async with httpx.AsyncClient(transport=transport) as http:
                return await render_pdf_via_documate("<html></html>", client=http)

        with patch("idea_validator.services.export_service.get_documate_key", return_value="doc-key"):
            with pytest.raises(ExportError):
                asyncio.run(go())

    def test_html_fallback_without_key(self):
        with patch("idea_validator.services.export_service.get_documate_key", return_value=""):
            document = asyncio.run(export_document(RESULTS, 8.0, "Rare houseplants"))
        assert document.media_type == "text/html"
        assert document.filename.startswith("validation-report-")
        assert document.filename.endswith(".html")
        assert b"Rare houseplants" in document.content


class TestExportRoute:
    def _payload(self, **overrides):
        payload = {"validationResults": RESULTS, "averageScore": 8.0, "businessIdea": "Rare houseplants"}
        payload.update(overrides)
        return payload

    def test_pdf_download(self):
        document = ExportedDocument(b"%PDF-1.7", "application/pdf", "validation-report-1.pdf")
        with patch("idea_validator.routes.export.export_document", AsyncMock(return_value=document)):
            res = client.post("/generate-pdf-report", json=self._payload())
        assert res.status_code == 200
        assert res.headers["content-type"] == "application/pdf"
        assert res.headers["content-disposition"] == 'attachment; filename="validation-report-1.pdf"'
        assert res.content == b"%PDF-1.7"

    def test_missing_results_is_400(self):
        res = client.post("/generate-pdf-report", json=self._payload(validationResults=[]))
        assert res.status_code == 400
        assert res.json()["error"] == "Validation results and business idea are required"

    def test_missing_idea_is_400(self):
        res = client.post("/generate-pdf-report", json=self._payload(businessIdea="  "))
        assert res.status_code == 400

    def test_export_error_is_502(self):
        failing = AsyncMock(side_effect=ExportError("Failed to generate PDF: HTTP 500"))
        with patch("idea_validator.routes.export.export_document", failing):
            res = client.post("/generate-pdf-report", json=self._payload())
        assert res.status_code == 502
        assert res.json()["error"] == "Failed to generate PDF: HTTP 500"
