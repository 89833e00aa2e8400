import io

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from diners.logic.reporting.export_mirror import (
    ExportGrid, ROLE_AVERAGES, ROLE_DATA, ROLE_DATE, ROLE_HEADER, ROLE_TITLE, ROLE_TOTALS,
)
from diners.utilities.constants import BORDER_COLOR, FILL_AVERAGES, FILL_HEADER, FILL_TOTALS, SHEET_TITLE

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

_THIN = Side(style="thin", color=BORDER_COLOR)
_BORDER = Border(top=_THIN, left=_THIN, bottom=_THIN, right=_THIN)
_CENTER = Alignment(vertical="center", horizontal="center")
_FILLS = {
    ROLE_HEADER: PatternFill(fill_type="solid", fgColor=FILL_HEADER),
    ROLE_TOTALS: PatternFill(fill_type="solid", fgColor=FILL_TOTALS),
    ROLE_AVERAGES: PatternFill(fill_type="solid", fgColor=FILL_AVERAGES),
}


def _style(ws_cell, role: str) -> None:
    if role == ROLE_TITLE:
        ws_cell.font = Font(bold=True, size=12)
        ws_cell.alignment = Alignment(vertical="center", horizontal="left")
        return
    ws_cell.border = _BORDER
    if role == ROLE_HEADER:
        ws_cell.alignment = Alignment(vertical="center", horizontal="center", wrap_text=True)
    else:
        ws_cell.alignment = _CENTER
    if role in _FILLS:
        ws_cell.fill = _FILLS[role]
    if role in (ROLE_HEADER, ROLE_TOTALS, ROLE_AVERAGES):
        ws_cell.font = Font(bold=True)


def generate_xlsx_for_sheet(grid: ExportGrid) -> bytes:
    """Write the export grid to a one-sheet workbook and return the file bytes."""
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE

    # Values and styles first; merging afterwards turns covered cells read-only
    for (row, col), cell in sorted(grid.cells.items()):
        ws_cell = ws.cell(row=row, column=col)
        if cell.value is not None:
            ws_cell.value = cell.value
        if cell.number_format and cell.role in (ROLE_DATA, ROLE_TOTALS, ROLE_AVERAGES):
            ws_cell.number_format = cell.number_format
        _style(ws_cell, cell.role if cell.role != ROLE_DATE else ROLE_DATA)

    for start_row, start_col, end_row, end_col in grid.merges:
        ws.merge_cells(start_row=start_row, start_column=start_col, end_row=end_row, end_column=end_col)

    ws.row_dimensions[1].height = 24
    for col, width in grid.column_widths.items():
        ws.column_dimensions[get_column_letter(col)].width = width

    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()
