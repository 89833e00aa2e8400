"""Export mirror: transcribes layout + grid + summary into a sink-neutral cell grid.

The grid uses 1-based (row, column) coordinates like a worksheet:

    row 1                title, merged across every column
    rows 2..1+h          header rows, placed by their spans
    next len(rows) rows  one row per day
    last two rows        totals, then averages

No numbers are computed here; totals and averages come from the summary.
Both the xlsx and the pdf sinks render this same structure.
"""
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple

from diners.domain.DinerRow import is_numeric_column, row_date
from diners.domain.LayoutDescriptor import LayoutDescriptor
from diners.utilities.constants import (
    DATE_COLUMN_WIDTH, DEFAULT_COLUMN_WIDTH, NOTE_COLUMN_WIDTH, ISO_DATE_FORMAT, NUMBER_FORMAT,
    LABEL_AVG_ROW, LABEL_SUM_ROW, LABEL_WORKING_DAY, SHEET_TITLE,
)
from diners.utilities.numbers import parse_number

__all__ = [
    "ExportCell", "ExportGrid", "build_export_grid", "report_date_label", "export_title", "export_filename",
    "ROLE_TITLE", "ROLE_HEADER", "ROLE_DATE", "ROLE_DATA", "ROLE_TOTALS", "ROLE_AVERAGES",
]

ROLE_TITLE = "title"
ROLE_HEADER = "header"
ROLE_DATE = "date"
ROLE_DATA = "data"
ROLE_TOTALS = "totals"
ROLE_AVERAGES = "averages"

HEADER_START_ROW = 2
DEFAULT_ACCOUNT_NAME = "거래처"
_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|]')

Merge = Tuple[int, int, int, int]


@dataclass
class ExportCell:
    row: int
    col: int
    value: Any
    role: str
    number_format: Optional[str] = None


@dataclass
class ExportGrid:
    title: str
    column_count: int
    cells: Dict[Tuple[int, int], ExportCell] = field(default_factory=dict)
    merges: List[Merge] = field(default_factory=list)
    column_widths: Dict[int, float] = field(default_factory=dict)
    header_row_count: int = 0
    data_row_count: int = 0

    @property
    def data_start_row(self) -> int:
        return HEADER_START_ROW + self.header_row_count

    @property
    def totals_row(self) -> int:
        return self.data_start_row + self.data_row_count

    @property
    def averages_row(self) -> int:
        return self.totals_row + 1

    @property
    def max_row(self) -> int:
        return self.averages_row

    def put(self, row: int, col: int, value: Any, role: str, number_format: Optional[str] = None) -> ExportCell:
        cell = ExportCell(row, col, value, role, number_format)
        self.cells[(row, col)] = cell
        return cell

    def cell(self, row: int, col: int) -> Optional[ExportCell]:
        return self.cells.get((row, col))

    def value_matrix(self) -> List[List[Any]]:
        """Dense row-major values; cells covered by a merge are empty strings."""
        matrix = [["" for _ in range(self.column_count)] for _ in range(self.max_row)]
        for (r, c), cell in self.cells.items():
            matrix[r - 1][c - 1] = "" if cell.value is None else cell.value
        return matrix


def report_date_label(year: int, month: int) -> str:
    return f"{int(year)}-{int(month):02d}"


def export_title(account_name: str, year: int, month: int, working_day: Optional[Any] = None) -> str:
    """``■ name / YYYY-MM`` plus `` / 근무일수 n`` when the account tracks working days."""
    title = f"■ {account_name} / {report_date_label(year, month)}"
    if working_day is not None:
        title += f" / {LABEL_WORKING_DAY} {parse_number(working_day)}"
    return title


def export_filename(account_name: str, year: int, month: int) -> str:
    safe = _UNSAFE_FILENAME_CHARS.sub("_", account_name or DEFAULT_ACCOUNT_NAME)
    return f"{SHEET_TITLE}_{safe}_{report_date_label(year, month)}.xlsx"


def _place_headers(grid: ExportGrid, layout: LayoutDescriptor) -> None:
    occupied: Set[Tuple[int, int]] = set()
    for row_idx, header_row in enumerate(layout.header_rows):
        row_no = HEADER_START_ROW + row_idx
        col_cursor = 1
        for header in header_row:
            while (row_no, col_cursor) in occupied:
                col_cursor += 1
            end_row = row_no + max(header.row_span, 1) - 1
            end_col = col_cursor + max(header.col_span, 1) - 1
            for r in range(row_no, end_row + 1):
                for c in range(col_cursor, end_col + 1):
                    occupied.add((r, c))
                    if (r, c) != (row_no, col_cursor):
                        grid.put(r, c, None, ROLE_HEADER)
            grid.put(row_no, col_cursor, header.label, ROLE_HEADER)
            if end_row > row_no or end_col > col_cursor:
                grid.merges.append((row_no, col_cursor, end_row, end_col))
            col_cursor = end_col + 1


def _date_text(row: Dict[str, Any]) -> str:
    day = row_date(row)
    return day.strftime(ISO_DATE_FORMAT) if isinstance(day, date) else ""


def build_export_grid(layout: LayoutDescriptor, rows: Sequence[Dict[str, Any]], summary: Dict[str, Dict[str, Any]],
                      account_name: str, year: int, month: int, working_day: Optional[Any] = None) -> ExportGrid:
    """Lay out title, headers, day rows and the totals/averages rows for a spreadsheet sink.

    ``working_day`` is None for accounts that do not track it; the title then omits it.
    """
    columns = list(layout.visible_columns)
    account_name = str(account_name or DEFAULT_ACCOUNT_NAME)
    grid = ExportGrid(
        title=export_title(account_name, year, month, working_day),
        column_count=layout.column_count,
        header_row_count=len(layout.header_rows),
        data_row_count=len(rows),
    )

    grid.put(1, 1, grid.title, ROLE_TITLE)
    if grid.column_count > 1:
        grid.merges.append((1, 1, 1, grid.column_count))

    _place_headers(grid, layout)

    for offset, row in enumerate(rows):
        row_no = grid.data_start_row + offset
        grid.put(row_no, 1, _date_text(row), ROLE_DATE)
        for col_idx, key in enumerate(columns, start=2):
            if is_numeric_column(key):
                grid.put(row_no, col_idx, parse_number(row.get(key)), ROLE_DATA, NUMBER_FORMAT)
            else:
                value = row.get(key)
                grid.put(row_no, col_idx, "" if value is None else value, ROLE_DATA)

    totals = (summary or {}).get("totals", {})
    averages = (summary or {}).get("averages", {})
    for row_no, label, values, role in ((grid.totals_row, LABEL_SUM_ROW, totals, ROLE_TOTALS),
                                        (grid.averages_row, LABEL_AVG_ROW, averages, ROLE_AVERAGES)):
        grid.put(row_no, 1, label, role)
        for col_idx, key in enumerate(columns, start=2):
            if key in values:
                grid.put(row_no, col_idx, parse_number(values[key]), role, NUMBER_FORMAT)
            else:
                grid.put(row_no, col_idx, "", role)

    grid.column_widths[1] = DATE_COLUMN_WIDTH
    for col_idx, key in enumerate(columns, start=2):
        grid.column_widths[col_idx] = NOTE_COLUMN_WIDTH if key == "note" else DEFAULT_COLUMN_WIDTH
    return grid
