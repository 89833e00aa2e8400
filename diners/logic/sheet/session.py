"""Per-selection diner sheet: the state behind one (account, year, month) view.

A DinerSheet owns the active grid, its baseline snapshot, the working-day
count and the range-fill selector. Every mutation replaces ``rows`` with a
new list; the baseline only changes on (re)load, so a failed save leaves
both untouched and the user can retry.
"""
import logging
from typing import Any, Dict, List, Optional

from diners.domain.AccountProfile import AccountProfile
from diners.domain.DinerRow import row_date
from diners.domain.ExtraDietColumn import ExtraDietColumn
from diners.domain.LayoutDescriptor import LayoutDescriptor
from diners.logic.grid.changes import changed_cells, changed_rows
from diners.logic.grid.range_fill import FillOutcome, RangeFillSelector
from diners.logic.grid.synthesizer import apply_cell_edit, snapshot, synthesize
from diners.logic.layout.descriptor import build_layout
from diners.logic.reporting.export_mirror import ExportGrid, build_export_grid, export_filename
from diners.logic.reporting.summary import summarize
from diners.utilities.constants import DAY_FORMAT
from diners.utilities.numbers import parse_number

logger = logging.getLogger(__name__)

__all__ = ["DinerSheet", "MSG_NO_CHANGES", "MSG_SAVED", "MSG_NO_DATA"]

MSG_NO_CHANGES = "변경된 데이터가 없습니다."
MSG_SAVED = "저장되었습니다."
MSG_NO_DATA = "다운로드할 데이터가 없습니다."


def _initial_working_day(rows: List[Dict[str, Any]]):
    for row in rows:
        if row.get("working_day") is not None:
            return parse_number(row.get("working_day"))
    return 0


class DinerSheet:
    def __init__(self, account: AccountProfile, year: int, month: int,
                 extra_columns: Optional[List[ExtraDietColumn]] = None, repository=None):
        self.account = account
        self.year = int(year)
        self.month = int(month)
        self.extra_columns = list(extra_columns or [])
        self.repository = repository
        self.rows: List[Dict[str, Any]] = []
        self.baseline: List[Dict[str, Any]] = []
        self.working_day = 0
        self.original_working_day = 0
        self.selector = RangeFillSelector()
        self.layout: LayoutDescriptor = build_layout(
            account.account_id, account.daycare_visible, self.extra_columns, account.account_type
        )

    def __str__(self) -> str:
        return f"DinerSheet({self.account.account_id}, {self.year}-{self.month:02d})"

    __repr__ = __str__

    # -------------------- Loading --------------------
    def load(self) -> "DinerSheet":
        """(Re)build the grid from storage and take a fresh baseline."""
        persisted = self.repository.fetch_rows(self.account.account_id, self.year, self.month) if self.repository else []
        self.rows = synthesize(persisted, self.year, self.month, self.account.account_type,
                               self.extra_columns, self.account.account_id)
        self.baseline = snapshot(self.rows)
        self.working_day = _initial_working_day(self.rows)
        self.original_working_day = self.working_day
        self.selector = RangeFillSelector()
        return self

    # -------------------- Editing --------------------
    def _rule_args(self):
        return self.account.account_type, self.extra_columns, self.account.account_id

    def edit_cell(self, row_index: int, key: str, value: Any) -> Dict[str, Any]:
        """Apply one cell edit; raises ValueError for bad coordinates or read-only columns."""
        if key not in self.layout.visible_columns:
            raise ValueError(f"Column '{key}' is not shown for this account")
        self.rows = apply_cell_edit(self.rows, row_index, key, value, *self._rule_args())
        return self.rows[row_index]

    def set_working_day(self, value: Any) -> int:
        self.working_day = parse_number(value)
        return self.working_day

    @property
    def working_day_changed(self) -> bool:
        return self.account.tracks_working_day and self.working_day != self.original_working_day

    # -------------------- Range fill --------------------
    def pointer_down(self, row: int, col: int, modifier: bool = True) -> RangeFillSelector:
        self.selector = self.selector.pointer_down(row, col, self.layout.visible_columns, modifier)
        return self.selector

    def pointer_enter(self, row: int, col: int) -> RangeFillSelector:
        self.selector = self.selector.pointer_enter(row, col)
        return self.selector

    def pointer_up(self) -> RangeFillSelector:
        self.selector = self.selector.pointer_up()
        return self.selector

    def confirm_fill(self, raw_value: Any) -> FillOutcome:
        """Answer the range-fill prompt. On invalid input the selector keeps prompting."""
        outcome = self.selector.confirm(raw_value, self.rows, *self._rule_args())
        self.selector = outcome.selector
        self.rows = outcome.rows
        return outcome

    def cancel_fill(self) -> RangeFillSelector:
        self.selector = self.selector.cancel()
        return self.selector

    # -------------------- Derived views --------------------
    def summary(self) -> Dict[str, Dict[str, Any]]:
        return summarize(self.rows, self.layout.visible_columns)

    def changed_rows(self) -> List[Dict[str, Any]]:
        return changed_rows(self.rows, self.baseline)

    def changed_cells(self):
        return changed_cells(self.rows, self.baseline)

    # -------------------- Saving --------------------
    def save_payload(self) -> List[Dict[str, Any]]:
        """Rows to persist: every row when the working day changed, else only changed rows."""
        rows_to_send = self.rows if self.working_day_changed else self.changed_rows()
        payload = []
        for row in rows_to_send:
            day = row_date(row)
            record = {
                **row,
                "account_id": self.account.account_id,
                "diner_year": self.year,
                "diner_month": self.month,
                "diner_date": day.strftime(DAY_FORMAT) if day else "",
            }
            if self.account.tracks_working_day:
                record["working_day"] = self.working_day
            payload.append(record)
        return payload

    def save(self) -> Dict[str, Any]:
        """Persist pending changes, then reload so the saved state becomes the new baseline.

        Propagates PersistenceError from the repository with rows and baseline unchanged.
        """
        payload = self.save_payload()
        if not payload:
            return {"saved": 0, "message": MSG_NO_CHANGES}
        saved = self.repository.save_rows(self.account.account_id, self.year, self.month, payload)
        logger.info("Saved %s rows for %s", saved, self)
        self.load()
        return {"saved": saved, "message": MSG_SAVED}

    # -------------------- Export --------------------
    def export_grid(self) -> ExportGrid:
        if not self.rows:
            raise ValueError(MSG_NO_DATA)
        working_day = self.working_day if self.account.tracks_working_day else None
        return build_export_grid(self.layout, self.rows, self.summary(), self._export_name(),
                                 self.year, self.month, working_day)

    def _export_name(self) -> str:
        return self.account.account_name or self.account.account_id

    def export_filename(self) -> str:
        return export_filename(self._export_name(), self.year, self.month)

    def view(self) -> Dict[str, Any]:
        return {
            "account": self.account.to_dict(),
            "year": self.year,
            "month": self.month,
            "layout": self.layout.to_dict(),
            "extraDiets": [c.to_dict() for c in self.extra_columns],
            "rows": [{**r, "diner_date": (row_date(r).isoformat() if row_date(r) else "")} for r in self.rows],
            "summary": self.summary(),
            "workingDay": self.working_day if self.account.tracks_working_day else None,
            "changedCells": [[idx, key] for idx, key in self.changed_cells()],
            "selection": self.selector.to_dict(),
        }
