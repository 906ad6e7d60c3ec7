"""Saved report tests — persistence, owner scoping, ordering, deletion."""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import uuid
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker

from idea_validator.database import Base, get_db
from idea_validator.main import app
from idea_validator.models import BusinessIdea, ValidationReport
from idea_validator.services.auth_utils import create_access_token
from idea_validator.services.report_service import idea_title

# ---------------------------------------------------------------------------
# Test database setup (file-based SQLite for compatibility)
# ---------------------------------------------------------------------------
TEST_DATABASE_URL = "sqlite:///./test_reports.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


client = TestClient(app)


@pytest.fixture(autouse=True)
def setup_db():
    """Create tables before each test, drop after."""
    app.dependency_overrides[get_db] = override_get_db
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    app.dependency_overrides.pop(get_db, None)


def _auth(user_id):
    token = create_access_token(user_id, f"{user_id}@example.com")
    return {"Authorization": f"Bearer {token}"}


def _result(tool_id, score, status):
    return {
        "id": tool_id,
        "icon": "💡",
        "title": tool_id.replace("-", " ").title(),
        "score": score,
        "status": status,
        "summary": f"{tool_id} summary",
        "details": f"{tool_id} details",
    }


def _save(user_id, idea="A subscription box for rare houseplants", score=8.0):
    payload = {
        "businessIdea": idea,
        "selectedTools": ["business-idea", "go-to-market"],
        "results": [_result("business-idea", 7, "moderate"), _result("go-to-market", 9, "strong")],
        "averageScore": score,
    }
    res = client.post("/reports", json=payload, headers=_auth(user_id))
    assert res.status_code == 201, f"Save failed: {res.text}"
    return res.json()


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

class TestIdeaTitle:
    def test_short_text_unchanged(self):
        assert idea_title("  Plant boxes  ") == "Plant boxes"

    def test_long_text_truncated(self):
        title = idea_title("x" * 150)
        assert title == "x" * 100 + "..."


class TestSaveReport:
    def test_save_returns_record(self):
        data = _save("user-a")
        assert uuid.UUID(data["id"])
        assert uuid.UUID(data["ideaId"])
        assert data["ideaTitle"] == "A subscription box for rare houseplants"
        assert data["businessIdea"] == "A subscription box for rare houseplants"
        assert data["selectedTools"] == ["business-idea", "go-to-market"]
        assert data["averageScore"] == 8.0
        assert [r["id"] for r in data["results"]] == ["business-idea", "go-to-market"]
        assert "createdAt" in data

    def test_save_persists_idea_and_report(self):
        _save("user-a")
        db = TestingSessionLocal()
        try:
            assert db.query(BusinessIdea).count() == 1
            report = db.query(ValidationReport).one()
            assert report.user_id == "user-a"
            assert report.business_idea.user_id == "user-a"
        finally:
            db.close()

    def test_requires_auth(self):
        res = client.post("/reports", json={})
        assert res.status_code == 401

    def test_rejects_inconsistent_status(self):
        payload = {
            "businessIdea": "Idea",
            "selectedTools": ["business-idea"],
            "results": [_result("business-idea", 9, "needs-work")],
            "averageScore": 9.0,
        }
        res = client.post("/reports", json=payload, headers=_auth("user-a"))
        assert res.status_code == 422

    def test_store_error_passed_through(self):
        with patch(
            "idea_validator.routes.reports.report_service.save_report",
            side_effect=OperationalError("INSERT", {}, Exception("database is locked")),
        ):
            res = client.post(
                "/reports",
                json={
                    "businessIdea": "Idea",
                    "selectedTools": ["business-idea"],
                    "results": [_result("business-idea", 7, "moderate")],
                    "averageScore": 7.0,
                },
                headers=_auth("user-a"),
            )
        assert res.status_code == 500
        body = res.json()
        assert body["error"] == "Failed to save report"
        assert "database is locked" in body["details"]

    def test_failed_report_insert_leaves_no_idea_behind(self):
        with patch(
            "idea_validator.services.report_service.create_report",
            side_effect=OperationalError("INSERT", {}, Exception("disk I/O error")),
        ):
            res = client.post(
                "/reports",
                json={
                    "businessIdea": "Idea",
                    "selectedTools": ["business-idea"],
                    "results": [_result("business-idea", 7, "moderate")],
                    "averageScore": 7.0,
                },
                headers=_auth("user-a"),
            )
        assert res.status_code == 500

        db = TestingSessionLocal()
        try:
            assert db.query(BusinessIdea).count() == 0
            assert db.query(ValidationReport).count() == 0
        finally:
            db.close()


class TestListAndGet:
    def test_list_is_newest_first(self):
        first = _save("user-a", idea="First idea")
        second = _save("user-a", idea="Second idea")
        res = client.get("/reports", headers=_auth("user-a"))
        assert res.status_code == 200
        ids = [r["id"] for r in res.json()["reports"]]
        assert ids == [second["id"], first["id"]]

    def test_list_is_owner_scoped(self):
        _save("user-a")
        _save("user-b")
        res = client.get("/reports", headers=_auth("user-b"))
        assert len(res.json()["reports"]) == 1

    def test_get_single(self):
        saved = _save("user-a")
        res = client.get(f"/reports/{saved['id']}", headers=_auth("user-a"))
        assert res.status_code == 200
        assert res.json()["id"] == saved["id"]

    def test_get_other_users_report_is_404(self):
        saved = _save("user-a")
        res = client.get(f"/reports/{saved['id']}", headers=_auth("user-b"))
        assert res.status_code == 404
        assert res.json()["error"] == "Report not found"


class TestDeleteReport:
    def test_delete_removes_report_and_idea(self):
        saved = _save("user-a")
        res = client.delete(f"/reports/{saved['id']}", headers=_auth("user-a"))
        assert res.status_code == 204
        assert client.get(f"/reports/{saved['id']}", headers=_auth("user-a")).status_code == 404

        db = TestingSessionLocal()
        try:
            assert db.query(BusinessIdea).count() == 0
        finally:
            db.close()

    def test_cannot_delete_other_users_report(self):
        saved = _save("user-a")
        res = client.delete(f"/reports/{saved['id']}", headers=_auth("user-b"))
        assert res.status_code == 404
        assert client.get(f"/reports/{saved['id']}", headers=_auth("user-a")).status_code == 200

    def test_delete_unknown_is_404(self):
        res = client.delete(f"/reports/{uuid.uuid4()}", headers=_auth("user-a"))
        assert res.status_code == 404


class TestExportSavedReport:
    def test_html_export_without_documate(self):
        saved = _save("user-a")
        with patch("idea_validator.services.export_service.get_documate_key", return_value=""):
            res = client.get(f"/reports/{saved['id']}/export", headers=_auth("user-a"))
        assert res.status_code == 200
        assert res.headers["content-type"].startswith("text/html")
        assert "attachment; filename=" in res.headers["content-disposition"]
        assert "A subscription box for rare houseplants" in res.text

    def test_store_error_passed_through(self):
        saved = _save("user-a")
        with patch(
            "idea_validator.routes.reports.report_service.get_report",
            side_effect=OperationalError("SELECT", {}, Exception("database is locked")),
        ):
            res = client.get(f"/reports/{saved['id']}/export", headers=_auth("user-a"))
        assert res.status_code == 500
        body = res.json()
        assert body["error"] == "Failed to load report"
        assert "database is locked" in body["details"]

    def test_other_users_report_is_404(self):
        saved = _save("user-a")
        res = client.get(f"/reports/{saved['id']}/export", headers=_auth("user-b"))
        assert res.status_code == 404
