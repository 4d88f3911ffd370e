import csv
import io
from datetime import datetime
from types import SimpleNamespace

import openpyxl

from isoyard.models.log_model import LogEntry
from isoyard.services.log_view import filter_logs, paginate, logs_to_csv, CSV_HEADERS

from conftest import gate_in, make_user


def _log(id, time, tank, action="進場", zone="A區", content="", user="op", remark="", slot=""):
    return SimpleNamespace(id=id, time=datetime.fromisoformat(time), tank=tank, action=action,
                           zone=zone, content=content, user=user, remark=remark, slot=slot,
                           weight=1000.0, total=None, head=None, empty=None)


SAMPLE = [
    _log(1, "2024-05-01 08:00:00", "TNKU0000001", content="Acetone"),
    _log(2, "2024-05-03 09:00:00", "TNKU0000002", action="出場", zone="B區"),
    _log(3, "2024-05-02 10:00:00", "TNKU0000003", remark="leaking valve", slot="A區-7"),
]


def test_filter_sorts_newest_first():
    assert [l.id for l in filter_logs(SAMPLE)] == [2, 3, 1]


def test_filter_is_case_insensitive_substring():
    assert [l.id for l in filter_logs(SAMPLE, "acetONE")] == [1]
    assert [l.id for l in filter_logs(SAMPLE, "Valve")] == [3]
    assert [l.id for l in filter_logs(SAMPLE, "a區-7")] == [3]


def test_filter_matches_across_fields():
    assert [l.id for l in filter_logs(SAMPLE, "2024-05-0")] == [2, 3, 1]
    assert [l.id for l in filter_logs(SAMPLE, "出場")] == [2]
    assert filter_logs(SAMPLE, "nothing like this") == []


def test_filter_keeps_surrounding_spaces():
    assert [l.id for l in filter_logs(SAMPLE, " valve")] == [3]
    assert filter_logs(SAMPLE, "valve ") == []


def test_paginate():
    rows = list(range(120))
    page = paginate(rows, 3, 50)
    assert page["items"] == list(range(100, 120))
    assert page["total"] == 120
    assert page["total_pages"] == 3
    assert paginate(rows, 4, 50)["items"] == []


def test_csv_has_bom_header_and_one_row_per_log():
    text = logs_to_csv(SAMPLE[:2])
    assert text.startswith("\ufeff")
    rows = list(csv.reader(io.StringIO(text[1:])))
    assert rows[0] == CSV_HEADERS
    assert len(rows) == 3


def test_csv_header_present_without_rows():
    rows = list(csv.reader(io.StringIO(logs_to_csv([])[1:])))
    assert rows == [CSV_HEADERS]


def test_csv_keeps_commas_inside_fields():
    text = logs_to_csv([_log(9, "2024-05-01 08:00:00", "T1", remark="dent, left side")])
    rows = list(csv.reader(io.StringIO(text[1:])))
    assert rows[1][10] == "dent, left side"


def _seed(client, headers):
    gate_in(client, headers, id="TANKA", content="ACETONE")
    gate_in(client, headers, id="TANKB", content="METHANOL", zone="Z-02")
    gate_in(client, headers, id="TANKA", zone="Z-02")


def test_search_logs_endpoint(client, op_headers, zones):
    _seed(client, op_headers)
    res = client.get("/api/logs", headers=op_headers, params={"q": "methanol"})
    data = res.json()["data"]
    assert data["total"] == 1
    assert data["items"][0]["tank"] == "TANKB"

    res = client.get("/api/logs", headers=op_headers, params={"page_size": 2, "page": 2})
    data = res.json()["data"]
    assert data["total"] == 3
    assert data["total_pages"] == 2
    assert len(data["items"]) == 1


def test_search_logs_newest_first(client, op_headers, zones):
    _seed(client, op_headers)
    items = client.get("/api/logs", headers=op_headers).json()["data"]["items"]
    assert [i["action"] for i in items] == ["移區", "進場", "進場"]


def test_export_csv_matches_filter(client, op_headers, zones):
    _seed(client, op_headers)
    res = client.get("/api/logs/export", headers=op_headers, params={"q": "tanka"})
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/csv")
    assert "ISO_Logs_" in res.headers["content-disposition"]

    text = res.content.decode("utf-8")
    assert text.startswith("\ufeff")
    rows = list(csv.reader(io.StringIO(text[1:])))
    assert rows[0] == CSV_HEADERS
    assert len(rows) - 1 == 2


def test_export_excel(client, op_headers, zones):
    _seed(client, op_headers)
    res = client.get("/api/logs/export-to-excel", headers=op_headers)
    assert res.status_code == 200

    wb = openpyxl.load_workbook(io.BytesIO(res.content))
    ws = wb.active
    assert ws.max_row == 4
    assert ws.cell(row=1, column=2).value == CSV_HEADERS[1]


def test_edit_and_delete_need_super_user(client, op_headers, zones, db):
    _seed(client, op_headers)
    log_id = db.query(LogEntry).first().id

    assert client.put(f"/api/logs/{log_id}", headers=op_headers, json={"remark": "x"}).status_code == 403
    assert client.delete(f"/api/logs/{log_id}", headers=op_headers).status_code == 403


def test_super_user_edits_log(client, admin_headers, op_headers, zones, db):
    _seed(client, op_headers)
    super_headers = make_user(client, admin_headers, "boss", "op", is_super=True)
    log_id = db.query(LogEntry).order_by(LogEntry.id).first().id

    res = client.put(f"/api/logs/{log_id}", headers=super_headers,
                     json={"remark": "corrected", "weight": 20000, "tank": "tanka"})
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["remark"] == "corrected"
    assert data["weight"] == 20000
    assert data["tank"] == "TANKA"

    res = client.put(f"/api/logs/{log_id}", headers=super_headers, json={"action": "bogus"})
    assert res.status_code == 400


def test_log_edit_rejects_missing_tank(client, admin_headers, op_headers, zones, db):
    _seed(client, op_headers)
    log_id = db.query(LogEntry).order_by(LogEntry.id).first().id

    for tank in (None, "   "):
        res = client.put(f"/api/logs/{log_id}", headers=admin_headers, json={"tank": tank})
        assert res.status_code == 400
        assert res.json()["message"] == "Tank number cannot be empty"

    db.expire_all()
    assert db.query(LogEntry).filter(LogEntry.id == log_id).one().tank


def test_super_user_deletes_log(client, admin_headers, op_headers, zones, db):
    _seed(client, op_headers)
    log_id = db.query(LogEntry).order_by(LogEntry.id).first().id

    res = client.delete(f"/api/logs/{log_id}", headers=admin_headers)
    assert res.status_code == 200
    assert db.query(LogEntry).filter(LogEntry.id == log_id).first() is None
    assert client.delete(f"/api/logs/{log_id}", headers=admin_headers).status_code == 404
