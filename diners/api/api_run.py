from fastapi import FastAPI, APIRouter, HTTPException, Query, Response
from datetime import date as _date
from threading import Lock
from typing import Dict, Optional, Tuple
from urllib.parse import quote
import logging

from diners.infra.Account_Repository import AccountRepository
from diners.infra.Diner_Repository import DinerRepository, PersistenceError
from diners.infra.pdf_utils import generate_pdf_for_sheet
from diners.infra.xlsx_utils import XLSX_MEDIA_TYPE, generate_xlsx_for_sheet
from diners.logic.accounts.lookup import default_selection
from diners.logic.sheet.session import DinerSheet
from diners.utilities import config
from diners.utilities.validators import CellEditInput, FillValueInput, PointerInput, SheetRef, WorkingDayInput

# Routers
from diners.api.routes import accounts

# Logging
logger = logging.getLogger("diners_app")

# Initialize FastAPI app
app = FastAPI(title="Diner Count Sheet API")
router = APIRouter()

# Include routers
app.include_router(accounts.router)

# In-memory sheets, one month per account, oldest dropped past MAX_OPEN_SHEETS
_sheets: Dict[Tuple[str, int, int], DinerSheet] = {}
_sheets_lock = Lock()


# -------------------- Helpers --------------------
def _open_sheet(account_id: str, year: int, month: int) -> DinerSheet:
    account_repo = AccountRepository()
    account = account_repo.get_account(account_id)
    if account is None:
        raise HTTPException(status_code=404, detail="Account not found")
    extras = account_repo.extra_diet_columns(account_id)
    return DinerSheet(account, year, month, extras, DinerRepository()).load()


def _get_sheet(ref: SheetRef, reload: bool = False) -> DinerSheet:
    key = (ref.account_id, ref.year, ref.month)
    sheet = _sheets.get(key)
    if sheet is None or reload:
        sheet = _open_sheet(*key)
        _sheets.pop(key, None)
        for other in [k for k in _sheets if k[0] == ref.account_id]:
            del _sheets[other]
        while len(_sheets) >= max(config.MAX_OPEN_SHEETS, 1):
            oldest = next(iter(_sheets))
            logger.debug("Dropping idle sheet %s", _sheets.pop(oldest))
        _sheets[key] = sheet
    return sheet


def reset_sheets() -> None:
    """Drop every in-memory sheet (used when the data directory changes)."""
    with _sheets_lock:
        _sheets.clear()


def _download(content: bytes, media_type: str, filename: str) -> Response:
    # Non-ASCII names need the RFC 5987 form
    return Response(
        content=content,
        media_type=media_type,
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"
        },
    )


# -------------------- API: Sheet --------------------
@router.get('/api/sheet')
def api_sheet(account_id: Optional[str] = Query(default=None),
              year: Optional[int] = Query(default=None, ge=2000, le=2100),
              month: Optional[int] = Query(default=None, ge=1, le=12)):
    """(Re)load the sheet from storage; defaults to the first account and the current month."""
    today = _date.today()
    year = today.year if year is None else year
    month = today.month if month is None else month
    if not account_id:
        first = default_selection(AccountRepository().list_accounts())
        if first is None:
            raise HTTPException(status_code=404, detail="No accounts available")
        account_id = first.account_id
    ref = SheetRef(account_id=account_id, year=year, month=month)
    with _sheets_lock:
        sheet = _get_sheet(ref, reload=True)
        return sheet.view()


@router.patch('/api/sheet/cell')
def api_sheet_cell(payload: CellEditInput):
    with _sheets_lock:
        sheet = _get_sheet(payload)
        try:
            row = sheet.edit_cell(payload.row_index, payload.key, payload.value)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return {"row_index": payload.row_index, "total": row["total"], "summary": sheet.summary(),
                "changedCells": [[i, k] for i, k in sheet.changed_cells()]}


@router.post('/api/sheet/selection/confirm')
def api_sheet_selection_confirm(payload: FillValueInput):
    with _sheets_lock:
        sheet = _get_sheet(payload)
        outcome = sheet.confirm_fill(payload.value)
        if outcome.error:
            raise HTTPException(status_code=400, detail=outcome.error)
        logger.debug("Range fill applied=%s on %s", outcome.applied, sheet)
        return {"applied": outcome.applied, **sheet.view()}


@router.post('/api/sheet/selection/cancel')
def api_sheet_selection_cancel(payload: SheetRef):
    with _sheets_lock:
        sheet = _get_sheet(payload)
        return sheet.cancel_fill().to_dict()


@router.post('/api/sheet/selection/{event}')
def api_sheet_selection(event: str, payload: PointerInput):
    """Range-fill pointer events: down (anchor), enter (extend), up (end drag, prompt)."""
    with _sheets_lock:
        sheet = _get_sheet(payload)
        if event == "down":
            selector = sheet.pointer_down(payload.row, payload.col, payload.modifier)
        elif event == "enter":
            selector = sheet.pointer_enter(payload.row, payload.col)
        elif event == "up":
            selector = sheet.pointer_up()
        else:
            raise HTTPException(status_code=404, detail="Unknown selection event")
        return selector.to_dict()


@router.put('/api/sheet/working-day')
def api_sheet_working_day(payload: WorkingDayInput):
    with _sheets_lock:
        sheet = _get_sheet(payload)
        if not sheet.account.tracks_working_day:
            raise HTTPException(status_code=400, detail="This account does not track working days")
        value = sheet.set_working_day(payload.working_day)
        return {"workingDay": value, "changed": sheet.working_day_changed}


@router.post('/api/sheet/save')
def api_sheet_save(payload: SheetRef):
    with _sheets_lock:
        sheet = _get_sheet(payload)
        try:
            result = sheet.save()
        except PersistenceError as e:
            logger.error("Save failed for %s: %s", sheet, e)
            raise HTTPException(status_code=500, detail=f"Save failed: {e}")
        return {**result, **sheet.view()}


@router.get('/api/sheet/export.xlsx')
def api_sheet_export_xlsx(account_id: str = Query(...), year: int = Query(..., ge=2000, le=2100),
                           month: int = Query(..., ge=1, le=12)):
    ref = SheetRef(account_id=account_id, year=year, month=month)
    with _sheets_lock:
        sheet = _get_sheet(ref)
        try:
            grid = sheet.export_grid()
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        filename = sheet.export_filename()
    logger.info("Exporting %s as %s", sheet, filename)
    return _download(generate_xlsx_for_sheet(grid), XLSX_MEDIA_TYPE, filename)


@router.get('/api/sheet/export.pdf')
def api_sheet_export_pdf(account_id: str = Query(...), year: int = Query(..., ge=2000, le=2100),
                           month: int = Query(..., ge=1, le=12)):
    ref = SheetRef(account_id=account_id, year=year, month=month)
    with _sheets_lock:
        sheet = _get_sheet(ref)
        try:
            grid = sheet.export_grid()
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        filename = sheet.export_filename().rsplit(".", 1)[0] + ".pdf"
    logger.info("Exporting %s as %s", sheet, filename)
    return _download(generate_pdf_for_sheet(grid), "application/pdf", filename)


# Register router
app.include_router(router)
