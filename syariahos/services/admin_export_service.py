"""Admin exports for users, tools and platform statistics.

Spreadsheet requests (xlsx/csv) get a UTF-8 CSV with a byte-order mark and
a summary block above the detail table. Print requests (pdf/html) get a
self-contained HTML report styled for printing to PDF.
"""

from __future__ import annotations

import csv
import html
import io
import json
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, Sequence

from sqlalchemy.orm import Session

from syariahos.db.enums import ActivityAction
from syariahos.db.models import Task, Tool, User
from syariahos.db.types import utcnow
from syariahos.services import activity_log_service, stats_service

CSV_BOM = "\ufeff"
CSV_DANGEROUS_PREFIXES = ("=", "+", "-", "@")


class ExportFormat(str, Enum):
    XLSX = "xlsx"
    CSV = "csv"
    PDF = "pdf"
    HTML = "html"

    @property
    def is_spreadsheet(self) -> bool:
        return self in (ExportFormat.XLSX, ExportFormat.CSV)


class ExportKind(str, Enum):
    USERS = "users"
    TOOLS = "tools"
    STATS = "stats"


EXPORT_ACTIONS = {
    ExportKind.USERS: ActivityAction.ADMIN_USERS_EXPORTED,
    ExportKind.TOOLS: ActivityAction.ADMIN_TOOLS_EXPORTED,
    ExportKind.STATS: ActivityAction.ADMIN_STATS_EXPORTED,
}


def _csv_safe(value: str) -> str:
    if value and value.startswith(CSV_DANGEROUS_PREFIXES):
        return f"'{value}"
    return value


def _serialize_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M:%S")
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, sort_keys=True)
    return str(value)


def _write_csv(
    title: str,
    summary: Sequence[tuple[str, Any]],
    headers: Sequence[str],
    rows: Iterable[Sequence[Any]],
) -> str:
    output = io.StringIO()
    output.write(CSV_BOM)
    writer = csv.writer(output)
    writer.writerow([title])
    writer.writerow(["Generated", _serialize_value(utcnow())])
    writer.writerow([])
    writer.writerow(["Summary"])
    for label, value in summary:
        writer.writerow([label, _csv_safe(_serialize_value(value))])
    writer.writerow([])
    writer.writerow(headers)
    for row in rows:
        writer.writerow([_csv_safe(_serialize_value(value)) for value in row])
    return output.getvalue()


HTML_STYLE = """
body { font-family: Arial, sans-serif; margin: 24px; color: #1f2937; }
h1 { color: #047857; font-size: 20px; margin-bottom: 4px; }
.meta { color: #6b7280; font-size: 12px; margin-bottom: 16px; }
.summary { display: flex; gap: 12px; margin-bottom: 16px; flex-wrap: wrap; }
.card { border: 1px solid #d1d5db; border-radius: 6px; padding: 8px 12px; }
.card .label { font-size: 11px; color: #6b7280; }
.card .value { font-size: 16px; font-weight: bold; }
table { width: 100%; border-collapse: collapse; font-size: 12px; }
th, td { border: 1px solid #d1d5db; padding: 6px; text-align: left; vertical-align: top; }
th { background: #ecfdf5; }
@media print { body { margin: 0; } }
"""


def _write_html(
    title: str,
    summary: Sequence[tuple[str, Any]],
    headers: Sequence[str],
    rows: Iterable[Sequence[Any]],
) -> str:
    esc = html.escape
    cards = "".join(
        f'<div class="card"><div class="label">{esc(label)}</div>'
        f'<div class="value">{esc(_serialize_value(value))}</div></div>'
        for label, value in summary
    )
    head = "".join(f"<th>{esc(h)}</th>" for h in headers)
    body = "".join(
        "<tr>" + "".join(f"<td>{esc(_serialize_value(v))}</td>" for v in row) + "</tr>"
        for row in rows
    )
    return (
        "<!DOCTYPE html>\n<html><head><meta charset=\"utf-8\">"
        f"<title>{esc(title)}</title><style>{HTML_STYLE}</style></head><body>"
        f"<h1>{esc(title)}</h1>"
        f'<div class="meta">Generated {esc(_serialize_value(utcnow()))} UTC</div>'
        f'<div class="summary">{cards}</div>'
        f"<table><thead><tr>{head}</tr></thead><tbody>{body}</tbody></table>"
        "</body></html>"
    )


# =============================================================================
# Report data
# =============================================================================

def _users_report(db: Session) -> tuple[str, list, list, list]:
    users = db.query(User).order_by(User.id).all()
    task_counts: dict[int, int] = {}
    for user_id, in db.query(Task.user_id).all():
        task_counts[user_id] = task_counts.get(user_id, 0) + 1
    admins = sum(1 for u in users if u.is_admin)
    summary = [
        ("Total Users", len(users)),
        ("Admins", admins),
        ("Regular Users", len(users) - admins),
    ]
    headers = ["ID", "Name", "Email", "Role", "Tasks", "Registered"]
    rows = [
        [u.id, u.name, u.email, u.role, task_counts.get(u.id, 0), u.created_at]
        for u in users
    ]
    return "SyariahOS Users Report", summary, headers, rows


def _tools_report(db: Session) -> tuple[str, list, list, list]:
    tools = db.query(Tool).order_by(Tool.category, Tool.name).all()
    categories = sorted({t.category for t in tools})
    summary = [("Total Tools", len(tools)), ("Categories", len(categories))]
    headers = ["ID", "Name", "Category", "Description", "Inputs", "Outputs", "Benefits", "Link"]
    rows = [
        [
            t.id,
            t.name,
            t.category,
            t.description,
            "; ".join(t.inputs or []),
            "; ".join(t.outputs or []),
            "; ".join(t.benefits or []),
            t.link,
        ]
        for t in tools
    ]
    return "SyariahOS Tools Report", summary, headers, rows


def _stats_report(db: Session) -> tuple[str, list, list, list]:
    stats = stats_service.get_stats(db)
    growth = stats_service.get_user_growth(db)
    completion = (
        round(stats["completed_tasks"] / stats["total_tasks"] * 100, 1)
        if stats["total_tasks"]
        else 0
    )
    summary = [
        ("Total Users", stats["total_users"]),
        ("Active Users (30 days)", stats["active_users"]),
        ("Total Tasks", stats["total_tasks"]),
        ("Completed Tasks", stats["completed_tasks"]),
        ("Completion Rate (%)", completion),
    ]
    headers = ["Month", "New Users", "Total Users", "Active Users", "Growth Rate (%)"]
    rows = [
        [m["month_full"], m["new_users"], m["total_users"], m["active_users"], m["growth_rate"]]
        for m in growth["monthly"]
    ]
    return "SyariahOS Platform Statistics", summary, headers, rows


REPORTS = {
    ExportKind.USERS: _users_report,
    ExportKind.TOOLS: _tools_report,
    ExportKind.STATS: _stats_report,
}


def build_export(
    db: Session, actor_id: int, kind: ExportKind, export_format: ExportFormat
) -> tuple[str, str, str]:
    """
    Render a report and record the export in the activity log.

    Returns:
        (content, media_type, filename)
    """
    title, summary, headers, rows = REPORTS[kind](db)
    stamp = utcnow().strftime("%Y%m%d_%H%M%S")

    if export_format.is_spreadsheet:
        content = _write_csv(title, summary, headers, rows)
        media_type = "text/csv; charset=utf-8"
        filename = f"{kind.value}_export_{stamp}.csv"
    else:
        content = _write_html(title, summary, headers, rows)
        media_type = "text/html; charset=utf-8"
        filename = f"{kind.value}_export_{stamp}.html"

    activity_log_service.log_activity(
        db,
        actor_id=actor_id,
        action=EXPORT_ACTIONS[kind],
        details={"format": export_format.value, "rows": len(rows)},
    )
    db.commit()
    return content, media_type, filename
