import csv
import io
import math
from datetime import datetime
from io import BytesIO
from typing import Iterable, List

import openpyxl
from openpyxl.styles import Font, PatternFill, Alignment
from openpyxl.utils import get_column_letter

from isoyard.utils import fmt_time

CSV_HEADERS = [
    "時間 (Time)", "槽號 (Tank ID)", "動作 (Action)", "內容物 (Content)", "區域 (Zone)", "儲位 (Slot)",
    "淨重 (Net)", "總重 (Total)", "車頭 (Head)", "空櫃 (Empty)", "備註 (Remark)", "人員 (User)",
]


def sort_logs(logs: Iterable) -> list:
    """Newest first; rows with the same timestamp keep insertion order reversed."""
    return sorted(logs, key=lambda l: (l.time or datetime.min, l.id or 0), reverse=True)


def search_text(log) -> str:
    return " ".join([
        fmt_time(log.time),
        log.tank or "",
        log.action or "",
        log.zone or "",
        log.slot or "",
        log.content or "",
        log.user or "",
        log.remark or "",
    ])


def filter_logs(logs: Iterable, q: str = "") -> list:
    """Sort newest first, then keep rows whose displayed fields contain q (case-insensitive)."""
    ordered = sort_logs(logs)
    needle = (q or "").upper()
    if not needle:
        return ordered
    return [l for l in ordered if needle in search_text(l).upper()]


def paginate(rows: List, page: int, page_size: int) -> dict:
    total = len(rows)
    total_pages = math.ceil(total / page_size) if page_size else 0
    start = (page - 1) * page_size
    return {
        "items": rows[start:start + page_size],
        "total": total,
        "page": page,
        "page_size": page_size,
        "total_pages": total_pages,
    }


def _row(log) -> list:
    return [
        fmt_time(log.time),
        log.tank,
        log.action,
        log.content or "",
        log.zone or "",
        log.slot or "",
        log.weight or 0,
        log.total or 0,
        log.head or 0,
        log.empty or 0,
        log.remark or "",
        log.user or "",
    ]


def logs_to_csv(logs: Iterable) -> str:
    """CSV text with a byte-order mark so spreadsheet tools detect UTF-8."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for log in logs:
        writer.writerow(_row(log))
    return "\ufeff" + buf.getvalue()


def logs_to_xlsx(logs: Iterable) -> bytes:
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Logs"

    ws.append(CSV_HEADERS)

    # Style header row
    header_fill = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
    header_font = Font(bold=True, color="FFFFFF")
    for cell in ws[1]:
        cell.fill = header_fill
        cell.font = header_font
        cell.alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)

    for log in logs:
        ws.append(_row(log))

    column_widths = [20, 16, 10, 16, 14, 12, 12, 12, 12, 12, 24, 12]
    for i, width in enumerate(column_widths, 1):
        ws.column_dimensions[get_column_letter(i)].width = width

    output = BytesIO()
    wb.save(output)
    return output.getvalue()


def export_filename(ext: str) -> str:
    return f"ISO_Logs_{datetime.now().strftime('%Y-%m-%d')}.{ext}"
