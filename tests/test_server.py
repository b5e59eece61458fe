"""REST API tests using FastAPI's TestClient.

The lifespan is not run: the form store and checkout service are stashed
on ``app.state`` directly, with an in-memory sink.  Submission read-back
routes get a mock repository through ``dependency_overrides``.
"""

import uuid
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from giftform_rules.checkout import CheckoutService
from giftform_rules.errors import SubmissionError
from giftform_rules.interfaces import SubmissionSink
from giftform_server.app import create_app
from giftform_server.config import ServerSettings
from giftform_server.dependencies import get_db, get_repository

from test_checkout import FakeSink
from test_sink import MockSubmissionRow


class BrokenSink(SubmissionSink):
    async def submit(self, payload):
        raise SubmissionError("Failed to store submission: database unavailable")


class StaticRepository:
    def __init__(self, rows):
        self.rows = {row.id: row for row in rows}

    async def get_by_id(self, db, submission_id):
        return self.rows.get(submission_id)

    async def list_by_form(self, db, form_id, *, limit=20, offset=0):
        rows = [r for r in self.rows.values() if r.form_id == form_id]
        return rows[offset:offset + limit]


@pytest.fixture
def sink():
    return FakeSink()


@pytest.fixture
def row():
    return MockSubmissionRow(
        form_id="purensol-spring",
        total=1500,
        answers={"question_bracelet01": "$1500 月光石手鍊"},
        confirmation_html="<p>感謝您的訂購</p>",
        created_at=datetime(2026, 10, 17, tzinfo=timezone.utc),
    )


@pytest.fixture
def app(store, sink, row):
    application = create_app(ServerSettings(log_level="WARNING"))
    application.state.store = store
    application.state.service = CheckoutService(store, sink)

    async def _db():
        yield AsyncMock()

    application.dependency_overrides[get_db] = _db
    application.dependency_overrides[get_repository] = lambda: StaticRepository([row])
    return application


@pytest.fixture
def client(app):
    return TestClient(app)


# =====================================================================
# Forms
# =====================================================================

def test_list_forms(client):
    resp = client.get("/api/v1/forms")
    assert resp.status_code == 200
    spring = next(f for f in resp.json() if f["form_id"] == "purensol-spring")
    assert spring["gift_section_count"] == 2


def test_get_form(client):
    resp = client.get("/api/v1/forms/purensol-spring")
    assert resp.status_code == 200
    body = resp.json()
    assert body["form"]["formId"] == "purensol-spring"
    assert [s["question_id"] for s in body["gift_sections"]] == ["gift01", "gift02"]
    assert body["gift_sections"][1]["thresholds"] == [
        {"amount": 12000, "gifts": 1},
        {"amount": 15000, "gifts": 2},
    ]
    assert body["steps"]["gifts"][0] == "gift-stage-1"


def test_get_unknown_form_is_404(client):
    resp = client.get("/api/v1/forms/missing-form")
    assert resp.status_code == 404
    assert resp.json() == {"detail": "Resource not found"}


# =====================================================================
# Quote & submit
# =====================================================================

def test_quote_trims_gift_selection(client):
    resp = client.post(
        "/api/v1/forms/purensol-spring/quote",
        json={
            "answers": {
                "question_bracelet01": "$1500 月光石手鍊",
                "question_amethyst01": ["紫水晶金屬纏繞墜"],
                "question_gift01": ["粉晶原礦", "白水晶原礦"],
            }
        },
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["state"]["total"] == 1880
    gift01 = body["state"]["gift_sections"][0]
    assert gift01["status"] == "below_first_tier"
    assert gift01["message"] == "消費滿 $2,500 可選 1 項"
    assert body["answers"]["question_gift01"] == []


def test_submit_recomputes_total(client, sink):
    resp = client.post(
        "/api/v1/forms/purensol-spring/submit",
        json={
            "answers": {"question_bracelet01": "$1500 月光石手鍊"},
            "email": "buyer@example.com",
            "total": 1,
        },
    )
    assert resp.status_code == 201
    assert resp.json() == {"success": True, "submission_id": "sub-1", "total": 1500}
    assert sink.payloads[0].email == "buyer@example.com"


def test_submit_sink_failure_is_502(app, store):
    app.state.service = CheckoutService(store, BrokenSink())
    resp = TestClient(app).post("/api/v1/forms/purensol-spring/submit", json={"answers": {}})
    assert resp.status_code == 502
    assert resp.json() == {
        "success": False,
        "detail": "Failed to store submission: database unavailable",
    }


def test_submit_unknown_form_is_404(client):
    resp = client.post("/api/v1/forms/missing-form/submit", json={"answers": {}})
    assert resp.status_code == 404


# =====================================================================
# Submissions
# =====================================================================

def test_get_submission(client, row):
    resp = client.get(f"/api/v1/forms/purensol-spring/submissions/{row.id}")
    assert resp.status_code == 200
    body = resp.json()
    assert body["submission_id"] == str(row.id)
    assert body["total"] == 1500
    assert body["status"] == "received"
    assert body["confirmation_html"] == "<p>感謝您的訂購</p>"
    assert body["admin_notification_html"] is None


def test_get_missing_submission_is_404(client):
    resp = client.get(f"/api/v1/forms/purensol-spring/submissions/{uuid.uuid4()}")
    assert resp.status_code == 404


def test_list_submissions(client, row):
    resp = client.get("/api/v1/forms/purensol-spring/submissions?limit=5")
    assert resp.status_code == 200
    assert [s["submission_id"] for s in resp.json()] == [str(row.id)]
