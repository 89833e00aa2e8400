import io
import json
from urllib.parse import quote

import pytest
from fastapi.testclient import TestClient
from openpyxl import load_workbook

from diners.api.api_run import _sheets, app, reset_sheets
from diners.infra import paths
from diners.infra.Diner_Repository import DinerRepository, PersistenceError
from diners.logic.grid.range_fill import MSG_NOT_A_NUMBER
from diners.logic.sheet.session import MSG_NO_CHANGES, MSG_SAVED
from diners.utilities import config

ACCOUNTS = [
    {"account_id": "C1", "account_name": "행복요양원", "account_type": "위탁급식"},
    {"account_id": "S1", "account_name": "미래초등학교", "account_type": "학교", "extra_diet1_name": "교직원"},
]
C1 = {"account_id": "C1", "year": 2025, "month": 2}
S1 = {"account_id": "S1", "year": 2025, "month": 2}


@pytest.fixture
def client(tmp_path, monkeypatch):
    accounts_file = tmp_path / "accounts.json"
    accounts_file.write_text(json.dumps(ACCOUNTS, ensure_ascii=False), encoding="utf-8")
    monkeypatch.setattr(paths, "ACCOUNTS_FILE", accounts_file)
    monkeypatch.setattr(paths, "DINERS_FILE", tmp_path / "diners.json")
    reset_sheets()
    yield TestClient(app)
    reset_sheets()


def _open(client, ref):
    resp = client.get('/api/sheet', params=ref)
    assert resp.status_code == 200
    return resp.json()


def test_accounts_listing(client):
    data = client.get('/api/accounts').json()
    assert data["count"] == 2
    assert [a["account_id"] for a in data["accounts"]] == ["S1", "C1"]

    data = client.get('/api/accounts', params={"q": "행복"}).json()
    assert data["count"] == 1
    assert data["selected"]["account_id"] == "C1"


def test_extra_diets(client):
    resp = client.get('/api/accounts/S1/extra-diets')
    assert resp.json()["extraDiets"] == [{"name": "교직원", "priceKey": "extra_diet1_price"}]
    assert client.get('/api/accounts/nope/extra-diets').status_code == 404


def test_sheet_load(client):
    view = _open(client, C1)
    assert len(view["rows"]) == 28
    assert view["rows"][0]["diner_date"] == "2025-02-01"
    assert view["workingDay"] is None
    assert view["changedCells"] == []
    assert client.get('/api/sheet', params={**C1, "account_id": "nope"}).status_code == 404
    assert client.get('/api/sheet', params={**C1, "month": 13}).status_code == 422


def test_sheet_defaults_to_first_account(client):
    view = client.get('/api/sheet').json()
    assert view["account"]["account_id"] == "S1"
    assert view["workingDay"] == 0


def test_cell_edit(client):
    _open(client, C1)
    resp = client.patch('/api/sheet/cell', json={**C1, "row_index": 0, "key": "breakfast", "value": "30"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["total"] == 10
    assert data["summary"]["totals"]["breakfast"] == 30
    assert [0, "breakfast"] in data["changedCells"]

    assert client.patch('/api/sheet/cell', json={**C1, "row_index": 0, "key": "total", "value": 1}).status_code == 400
    hidden = client.patch('/api/sheet/cell', json={**C1, "row_index": 0, "key": "employ_breakfast", "value": 1})
    assert hidden.status_code == 400


def test_range_fill_flow(client):
    _open(client, C1)
    assert client.post('/api/sheet/selection/down', json={**C1, "row": 0, "col": 0}).json()["phase"] == "selecting"
    client.post('/api/sheet/selection/enter', json={**C1, "row": 1, "col": 1})
    state = client.post('/api/sheet/selection/up', json={**C1, "row": 1, "col": 1}).json()
    assert state["phase"] == "prompting"
    assert state["targetKeys"] == ["breakfast", "lunch"]
    assert state["prompt"] is not None

    bad = client.post('/api/sheet/selection/confirm', json={**C1, "value": "abc"})
    assert bad.status_code == 400
    assert bad.json()["detail"] == MSG_NOT_A_NUMBER

    good = client.post('/api/sheet/selection/confirm', json={**C1, "value": "6"}).json()
    assert good["applied"] is True
    assert good["selection"]["phase"] == "idle"
    assert [r["total"] for r in good["rows"][:3]] == [4, 4, 0]

    assert client.post('/api/sheet/selection/sideways', json={**C1, "row": 0, "col": 0}).status_code == 404


def test_range_fill_cancel(client):
    _open(client, C1)
    client.post('/api/sheet/selection/down', json={**C1, "row": 0, "col": 0})
    client.post('/api/sheet/selection/up', json={**C1, "row": 0, "col": 0})
    assert client.post('/api/sheet/selection/cancel', json=C1).json()["phase"] == "idle"
    view = _open(client, C1)
    assert view["changedCells"] == []


def test_save(client):
    _open(client, C1)
    assert client.post('/api/sheet/save', json=C1).json()["message"] == MSG_NO_CHANGES

    client.patch('/api/sheet/cell', json={**C1, "row_index": 3, "key": "lunch", "value": 9})
    data = client.post('/api/sheet/save', json=C1).json()
    assert data["message"] == MSG_SAVED
    assert data["saved"] == 1
    assert data["changedCells"] == []
    assert DinerRepository().fetch_rows("C1", 2025, 2)[0]["lunch"] == 9

    # A fresh load reads the saved value back
    reset_sheets()
    assert _open(client, C1)["rows"][3]["lunch"] == 9


def test_working_day(client):
    _open(client, S1)
    assert client.put('/api/sheet/working-day', json={**C1, "working_day": 3}).status_code == 400
    assert client.put('/api/sheet/working-day', json={**S1, "working_day": -1}).status_code == 422

    data = client.put('/api/sheet/working-day', json={**S1, "working_day": "20"}).json()
    assert data == {"workingDay": 20, "changed": True}
    saved = client.post('/api/sheet/save', json=S1).json()
    assert saved["saved"] == 28
    assert saved["workingDay"] == 20


def test_save_failure_keeps_edits(client, monkeypatch):
    def failing_save(self, account_id, year, month, rows):
        raise PersistenceError("disk full")

    _open(client, C1)
    client.patch('/api/sheet/cell', json={**C1, "row_index": 0, "key": "dinner", "value": 3})
    monkeypatch.setattr(DinerRepository, "save_rows", failing_save)
    resp = client.post('/api/sheet/save', json=C1)
    assert resp.status_code == 500
    assert "disk full" in resp.json()["detail"]

    # The pending edit survives and can be retried
    data = client.patch('/api/sheet/cell', json={**C1, "row_index": 1, "key": "dinner", "value": 3}).json()
    assert [0, "dinner"] in data["changedCells"]
    assert [1, "dinner"] in data["changedCells"]


def test_xlsx_export(client):
    _open(client, C1)
    client.patch('/api/sheet/cell', json={**C1, "row_index": 0, "key": "lunch", "value": 1500})
    resp = client.get('/api/sheet/export.xlsx', params=C1)
    assert resp.status_code == 200
    assert quote("식수관리_행복요양원_2025-02.xlsx") in resp.headers["content-disposition"]
    ws = load_workbook(io.BytesIO(resp.content)).active
    assert ws["A1"].value == "■ 행복요양원 / 2025-02"
    # One header row for the default layout: day 1 sits on row 3
    assert ws["A3"].value == "2025-02-01"
    assert ws["C3"].value == 1500


def test_pdf_export(client):
    _open(client, S1)
    resp = client.get('/api/sheet/export.pdf', params=S1)
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "application/pdf"
    assert resp.content.startswith(b"%PDF")
    assert client.get('/api/sheet/export.pdf', params={**S1, "month": 0}).status_code == 422


def test_one_open_month_per_account(client):
    _open(client, C1)
    _open(client, {**C1, "month": 3})
    _open(client, S1)
    assert sorted(_sheets) == [("C1", 2025, 3), ("S1", 2025, 2)]


def test_open_sheets_are_capped(client, monkeypatch):
    monkeypatch.setattr(config, "MAX_OPEN_SHEETS", 1)
    _open(client, C1)
    _open(client, S1)
    assert list(_sheets) == [("S1", 2025, 2)]
    # An evicted sheet reopens from storage on its next use
    resp = client.patch('/api/sheet/cell', json={**C1, "row_index": 0, "key": "lunch", "value": 3})
    assert resp.status_code == 200
    assert list(_sheets) == [("C1", 2025, 2)]
