"""Tests for the HTTP API."""

import sqlite3
from io import BytesIO

import pytest
from fastapi.testclient import TestClient
from openpyxl import Workbook

from api import dependencies
from api.main import app
from api.routes import reports
from conftest import TEXT_VARIANT_B
from core import database

API_KEY = "test-key"
HEADERS = {"X-API-Key": API_KEY}


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    path = tmp_path / "service-reports.db"
    monkeypatch.setattr(database, "DB_PATH", path)
    conn = database.get_connection()
    database.create_tables(conn)
    conn.close()
    return path


@pytest.fixture
def client(db_path, monkeypatch):
    monkeypatch.setattr(dependencies, "SR_API_KEY", API_KEY)
    with TestClient(app) as test_client:
        yield test_client


def efsr_workbook_bytes(sheet_title="EFSR") -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_title
    ws["B3"] = "2024016"
    ws["B6"] = "Acme Co"
    ws["A41"] = 44927
    ws["B41"] = "7:00"
    ws["C41"] = "12:00"
    ws["D41"] = "12:30"
    ws["E41"] = "15:30"
    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def request_rows(db_path):
    conn = sqlite3.connect(db_path)
    try:
        return conn.execute(
            "SELECT endpoint, status_code, error_code, entries_extracted FROM api_requests"
        ).fetchall()
    finally:
        conn.close()


class TestHealth:
    def test_healthy(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["database_available"] is True

    def test_unhealthy_without_database(self, tmp_path, monkeypatch):
        monkeypatch.setattr(database, "DB_PATH", tmp_path / "missing.db")
        response = TestClient(app).get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"


class TestAuth:
    def test_missing_key(self, client):
        response = client.post("/v1/charges/calculate", json={"entries": []})
        assert response.status_code == 422

    def test_wrong_key(self, client):
        response = client.post(
            "/v1/charges/calculate", json={"entries": []}, headers={"X-API-Key": "nope"}
        )
        assert response.status_code == 401
        assert response.json()["detail"]["code"] == "UNAUTHORIZED"


class TestExtract:
    def test_spreadsheet_upload(self, client, db_path):
        response = client.post(
            "/v1/reports/extract",
            headers=HEADERS,
            files={"file": ("SR2024016.xlsx", efsr_workbook_bytes())},
            data={"variant": "spreadsheet"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["srNumber"] == "2024016"
        assert body["timeEntries"][0]["date"] == "2023-01-01"
        assert body["timeEntries"][0]["lunchDuration"] == 0.5
        assert request_rows(db_path) == [("/v1/reports/extract", 200, None, 1)]

    def test_extraction_archived(self, client, db_path):
        client.post(
            "/v1/reports/extract",
            headers=HEADERS,
            files={"file": ("SR2024016.xlsx", efsr_workbook_bytes())},
            data={"variant": "spreadsheet"},
        )
        conn = sqlite3.connect(db_path)
        try:
            names = conn.execute("SELECT name, source_name FROM imports").fetchall()
        finally:
            conn.close()
        assert len(names) == 1
        assert names[0][1] == "SR2024016.xlsx"

    def test_timesheet_format(self, client):
        response = client.post(
            "/v1/reports/extract",
            headers=HEADERS,
            files={"file": ("SR2024016.xlsx", efsr_workbook_bytes())},
            data={"variant": "spreadsheet", "format": "timesheet"},
        )

        assert response.status_code == 200
        assert response.json()["invoiceInfo"]["invoiceNumber"] == "2024016"

    def test_missing_sheet_is_format_error(self, client, db_path):
        response = client.post(
            "/v1/reports/extract",
            headers=HEADERS,
            files={"file": ("SR2024016.xlsx", efsr_workbook_bytes("Sheet1"))},
            data={"variant": "spreadsheet"},
        )

        assert response.status_code == 422
        assert response.json()["detail"]["code"] == "FORMAT_ERROR"
        assert request_rows(db_path) == [("/v1/reports/extract", 422, "FORMAT_ERROR", None)]

    def test_unreadable_workbook_is_format_error(self, client):
        response = client.post(
            "/v1/reports/extract",
            headers=HEADERS,
            files={"file": ("SR2024016.xlsx", b"not a workbook")},
            data={"variant": "spreadsheet"},
        )
        assert response.status_code == 422

    def test_wrong_file_type(self, client):
        response = client.post(
            "/v1/reports/extract",
            headers=HEADERS,
            files={"file": ("report.pdf", b"%PDF-1.4")},
            data={"variant": "spreadsheet"},
        )

        assert response.status_code == 415
        assert response.json()["detail"]["code"] == "UNSUPPORTED_MEDIA_TYPE"

    def test_unknown_variant(self, client):
        response = client.post(
            "/v1/reports/extract",
            headers=HEADERS,
            files={"file": ("SR2024016.xlsx", efsr_workbook_bytes())},
            data={"variant": "text-variant-Z"},
        )

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "INVALID_REQUEST"

    def test_file_too_large(self, client, monkeypatch):
        monkeypatch.setattr(reports, "MAX_UPLOAD_SIZE_BYTES", 10)
        response = client.post(
            "/v1/reports/extract",
            headers=HEADERS,
            files={"file": ("SR2024016.xlsx", efsr_workbook_bytes())},
            data={"variant": "spreadsheet"},
        )

        assert response.status_code == 413
        assert response.json()["detail"]["code"] == "FILE_TOO_LARGE"


class TestExtractText:
    def test_variant_b(self, client):
        response = client.post(
            "/v1/reports/extract-text",
            headers=HEADERS,
            json={"variant": "text-variant-B", "text": TEXT_VARIANT_B},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["customer"]["company"] == "Acme Packaging"
        assert body["timeEntries"][0]["serviceWork"] == "Replaced bearing"

    def test_empty_text(self, client):
        response = client.post(
            "/v1/reports/extract-text",
            headers=HEADERS,
            json={"variant": "text-variant-A", "text": ""},
        )

        assert response.status_code == 422
        assert response.json()["detail"]["code"] == "FORMAT_ERROR"

    def test_strict_malformed_date(self, client, monkeypatch):
        monkeypatch.setattr(reports, "STRICT_PARSING", True)
        response = client.post(
            "/v1/reports/extract-text",
            headers=HEADERS,
            json={"variant": "text-variant-B", "text": "Mon 13/45/24 7:00 12:00"},
        )

        assert response.status_code == 422
        assert response.json()["detail"]["code"] == "VALIDATION_ERROR"

    def test_spreadsheet_variant_needs_upload(self, client):
        response = client.post(
            "/v1/reports/extract-text",
            headers=HEADERS,
            json={"variant": "spreadsheet", "text": "x"},
        )
        assert response.status_code == 400


class TestCharges:
    def test_saturday_overtime(self, client, db_path):
        response = client.post(
            "/v1/charges/calculate",
            headers=HEADERS,
            json={
                "entries": [
                    {"date": "2024-09-21", "onsite": {"active": True, "start": "8:00", "end": "16:00"}}
                ],
                "travelData": {"perDiemDays": "1"},
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["overtime"]["hours"] == 8.0
        assert body["straight"]["hours"] == 0.0
        assert body["travel"]["perDiemTotal"] == 220.0
        assert body["warnings"] == []
        assert request_rows(db_path) == [("/v1/charges/calculate", 200, None, 1)]

    def test_invariant_violations_returned_as_warnings(self, client):
        response = client.post(
            "/v1/charges/calculate",
            headers=HEADERS,
            json={
                "entries": [
                    {"date": "2024-09-16", "onsite": {"active": True, "start": "16:00", "end": "8:00"}}
                ]
            },
        )

        assert response.status_code == 200
        assert any("is not after start" in w for w in response.json()["warnings"])


class TestWorkbook:
    def test_returns_xlsx(self, client):
        extracted = client.post(
            "/v1/reports/extract-text",
            headers=HEADERS,
            json={"variant": "text-variant-B", "text": TEXT_VARIANT_B},
        ).json()
        response = client.post("/v1/reports/workbook", headers=HEADERS, json=extracted)

        assert response.status_code == 200
        assert 'filename="service_report_2024133.xlsx"' in response.headers["content-disposition"]
        assert response.content[:2] == b"PK"
