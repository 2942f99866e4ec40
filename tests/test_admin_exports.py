"""Tests for admin CSV/HTML exports."""
import csv
import io

import pytest
from httpx import AsyncClient

from syariahos.db.models import ActivityLog, Tool
from syariahos.services import admin_export_service

BOM = b"\xef\xbb\xbf"


def _rows(response) -> list[list[str]]:
    assert response.content.startswith(BOM)
    return list(csv.reader(io.StringIO(response.content[len(BOM):].decode("utf-8"))))


@pytest.mark.parametrize(
    "value,expected",
    [
        ("=SUM(A1)", "'=SUM(A1)"),
        ("+62", "'+62"),
        ("-1", "'-1"),
        ("@cmd", "'@cmd"),
        ("Aman", "Aman"),
        ("", ""),
    ],
)
def test_csv_safe(value, expected):
    assert admin_export_service._csv_safe(value) == expected


@pytest.mark.asyncio
@pytest.mark.parametrize("export_format", ["xlsx", "csv"])
async def test_users_spreadsheet_export(admin_client: AsyncClient, make_user, db, export_format):
    make_user(name="=HYPERLINK(evil)")

    response = await admin_client.get("/admin/users/export", params={"format": export_format})
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    disposition = response.headers["content-disposition"]
    assert disposition.startswith('attachment; filename="users_export_')
    assert disposition.endswith('.csv"')

    rows = _rows(response)
    assert rows[0] == ["SyariahOS Users Report"]
    assert ["Total Users", "2"] in rows
    header_index = rows.index(["ID", "Name", "Email", "Role", "Tasks", "Registered"])
    names = [row[1] for row in rows[header_index + 1:]]
    assert "'=HYPERLINK(evil)" in names

    log = db.query(ActivityLog).filter(ActivityLog.action == "admin.users_exported").one()
    assert log.details == {"format": export_format, "rows": 2}


@pytest.mark.asyncio
async def test_users_export_defaults_to_spreadsheet(admin_client: AsyncClient):
    response = await admin_client.get("/admin/users/export")
    assert response.status_code == 200
    assert response.content.startswith(BOM)


@pytest.mark.asyncio
@pytest.mark.parametrize("export_format", ["pdf", "html"])
async def test_tools_print_export(admin_client: AsyncClient, db, export_format):
    db.add(Tool(name="<script>x</script>", category="Keuangan", description="d", inputs=["a", "b"]))
    db.commit()

    response = await admin_client.get("/admin/tools/export", params={"format": export_format})
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert response.headers["content-disposition"].endswith('.html"')
    body = response.text
    assert body.startswith("<!DOCTYPE html>")
    assert "SyariahOS Tools Report" in body
    assert "&lt;script&gt;x&lt;/script&gt;" in body
    assert "<script>" not in body
    assert "a; b" in body


@pytest.mark.asyncio
async def test_stats_export(admin_client: AsyncClient, db):
    response = await admin_client.get("/admin/stats/export", params={"format": "csv"})
    assert response.status_code == 200
    rows = _rows(response)
    assert rows[0] == ["SyariahOS Platform Statistics"]
    assert ["Total Users", "1"] in rows
    header_index = rows.index(["Month", "New Users", "Total Users", "Active Users", "Growth Rate (%)"])
    assert len(rows[header_index + 1:]) == 6
    assert db.query(ActivityLog).filter(ActivityLog.action == "admin.stats_exported").count() == 1


@pytest.mark.asyncio
async def test_unknown_format_is_rejected(admin_client: AsyncClient, db):
    response = await admin_client.get("/admin/users/export", params={"format": "docx"})
    assert response.status_code == 422
    assert "format" in response.json()["errors"]
    assert db.query(ActivityLog).count() == 0
