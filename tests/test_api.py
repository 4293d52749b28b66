"""
Pytest tests for the FastAPI boundary, using a scripted model client and a
temporary SQLite history.
"""

from __future__ import annotations

import base64

import pytest
from fastapi.testclient import TestClient

from dirty_data.api import create_app
from dirty_data.errors import PersistenceError, UpstreamError

from tests.conftest import PRIMARY_JSON, REVIEW_JSON

SPREADSHEET_BODY = {
    "type": "spreadsheet",
    "fileName": "ledger.xlsx",
    "data": {
        "headers": ["Date", "Amount"],
        "rows": [["2024-01-01", 100], ["2024-01-02", -50000000]],
        "totalRows": 2,
        "totalCols": 2,
        "truncated": False,
    },
}


@pytest.fixture
def api(make_service):
    """Return a factory: replies -> (TestClient, ScriptedClient)."""

    def _make(*replies):
        service, model = make_service(*replies)
        return TestClient(create_app(service)), model

    return _make


def test_analyze_spreadsheet_version_two(api, primary_text, review_text):
    client, model = api(primary_text, review_text)

    r = client.post("/api/analyze", json=SPREADSHEET_BODY)

    assert r.status_code == 200
    body = r.json()
    assert body["version"] == 2
    assert body["anderson"]["summary"] == PRIMARY_JSON["summary"]
    assert body["anderson"]["the_dirty"][1]["why"] is None
    assert body["rybo"]["bottom_line"] == REVIEW_JSON["bottom_line"]
    assert isinstance(body["id"], int)
    assert "Row 3: 2024-01-02 | -50000000" in model.calls[0]["messages"][0]["content"]


def test_review_failure_returns_version_one(api, primary_text):
    client, _ = api(primary_text, UpstreamError("overloaded"))

    r = client.post("/api/analyze", json=SPREADSHEET_BODY)

    assert r.status_code == 200
    assert r.json()["version"] == 1
    assert r.json()["rybo"] is None


def test_primary_upstream_failure_is_error_only(api):
    client, model = api(UpstreamError("Model API returned HTTP 401: invalid x-api-key"))

    r = client.post("/api/analyze", json=SPREADSHEET_BODY)

    assert r.status_code == 502
    assert r.json() == {"error": "Model API returned HTTP 401: invalid x-api-key"}
    assert len(model.calls) == 1


def test_primary_malformed_reply_is_error_only(api):
    client, model = api("I think this data looks fine!")

    r = client.post("/api/analyze", json=SPREADSHEET_BODY)

    assert r.status_code == 500
    assert set(r.json()) == {"error"}
    assert len(model.calls) == 1


def test_pdf_payload(api, primary_text, review_text):
    client, model = api(primary_text, review_text)
    pdf_b64 = base64.b64encode(b"%PDF-1.4 minimal").decode()

    r = client.post(
        "/api/analyze",
        json={"type": "pdf", "fileName": "q3.pdf", "data": {"base64": pdf_b64}},
    )

    assert r.status_code == 200
    block = model.calls[0]["messages"][0]["content"][0]
    assert block["source"]["data"] == pdf_b64


@pytest.mark.parametrize(
    "body",
    [
        {"type": "docx", "fileName": "a.docx", "data": {}},
        {"type": "pdf", "fileName": "a.pdf", "data": {}},
        {"type": "pdf", "fileName": "a.pdf", "data": {"base64": "@@not base64@@"}},
        {"type": "spreadsheet", "fileName": "a.csv", "data": {"rows": "nope"}},
        {"fileName": "a.csv"},
    ],
)
def test_malformed_requests_rejected(api, body):
    client, model = api()
    r = client.post("/api/analyze", json=body)
    assert r.status_code == 400
    assert "error" in r.json()
    assert model.calls == []


def test_history_list_and_delete(api, primary_text, review_text):
    client, _ = api(primary_text, review_text)
    analysis_id = client.post("/api/analyze", json=SPREADSHEET_BODY).json()["id"]

    listed = client.get("/api/analyses").json()
    assert [item["id"] for item in listed] == [analysis_id]
    assert listed[0]["file_type"] == "xlsx"
    assert listed[0]["row_count"] == 2

    assert client.delete(f"/api/analyses/{analysis_id}").status_code == 200
    assert client.get("/api/analyses").json() == []
    assert client.delete(f"/api/analyses/{analysis_id}").status_code == 404


def test_save_failure_still_returns_result(api, primary_text, review_text, monkeypatch):
    client, _ = api(primary_text, review_text)

    def _fail(*args, **kwargs):
        raise PersistenceError("disk full")

    monkeypatch.setattr("dirty_data.service.insert_analysis", _fail)

    r = client.post("/api/analyze", json=SPREADSHEET_BODY)
    assert r.status_code == 200
    assert r.json()["version"] == 2
    assert r.json()["id"] is None


def test_health(api):
    client, _ = api()
    assert client.get("/health").json() == {"status": "ok"}
