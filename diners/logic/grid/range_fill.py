"""Range-fill selection: drag a rectangle of cells, then assign one number to all of them.

The selector is an immutable value; every pointer event returns the next
state, so the gesture can be driven (and tested) without a UI:

    idle --pointer_down--> selecting --pointer_enter--> selecting
         --pointer_up--> prompting --confirm/cancel--> idle

An invalid answer to the prompt leaves the selector in ``prompting`` with
an error message so the caller can ask again.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from diners.domain.DinerRow import is_editable_numeric
from diners.logic.totals.rules import compute_total
from diners.utilities.numbers import Number, try_parse_number

logger = logging.getLogger(__name__)

__all__ = [
    "SelectionPhase", "SelectionRange", "RangeFillSelector", "FillOutcome",
    "validate_fill_value", "apply_fill", "run_prompt",
    "MSG_EMPTY_VALUE", "MSG_NOT_A_NUMBER",
]

PROMPT_TITLE = "값 입력"
PROMPT_TEXT = "선택한 셀 범위에 입력할 숫자를 적어주세요."
MSG_EMPTY_VALUE = "값을 입력하세요."
MSG_NOT_A_NUMBER = "숫자만 입력할 수 있어요."


class SelectionPhase(Enum):
    IDLE = "idle"
    SELECTING = "selecting"
    PROMPTING = "prompting"


@dataclass(frozen=True)
class SelectionRange:
    start_row: int
    end_row: int
    start_col: int
    end_col: int

    def normalized(self) -> Tuple[int, int, int, int]:
        """(first row, last row, first col, last col); anchor and cursor may be in any order."""
        return (min(self.start_row, self.end_row), max(self.start_row, self.end_row),
                min(self.start_col, self.end_col), max(self.start_col, self.end_col))

    def contains(self, row: int, col: int) -> bool:
        r1, r2, c1, c2 = self.normalized()
        return r1 <= row <= r2 and c1 <= col <= c2

    def to_dict(self):
        return {"startRow": self.start_row, "endRow": self.end_row,
                "startCol": self.start_col, "endCol": self.end_col}


@dataclass(frozen=True)
class FillOutcome:
    selector: "RangeFillSelector"
    rows: List[Dict[str, Any]]
    error: Optional[str] = None
    applied: bool = False


def validate_fill_value(raw: Any) -> Tuple[Optional[Number], Optional[str]]:
    """Return (number, None) for acceptable input, else (None, message to show on re-prompt)."""
    text = "" if raw is None else str(raw).strip()
    if not text:
        return None, MSG_EMPTY_VALUE
    value = try_parse_number(text)
    if value is None:
        return None, MSG_NOT_A_NUMBER
    return value, None


def apply_fill(rows: List[Dict[str, Any]], selection: SelectionRange, columns: Sequence[str], value: Number,
               account_type: Any, extra_columns=None, account_id: str = "") -> List[Dict[str, Any]]:
    """Return a new grid with ``value`` written to every editable numeric cell in the rectangle."""
    r1, r2, c1, c2 = selection.normalized()
    target_keys = [k for k in list(columns)[c1:c2 + 1] if is_editable_numeric(k)]
    if not target_keys or not rows:
        return list(rows)
    next_rows = list(rows)
    for r in range(max(r1, 0), min(r2, len(rows) - 1) + 1):
        row_copy = dict(next_rows[r])
        for key in target_keys:
            row_copy[key] = value
        row_copy["total"] = compute_total(row_copy, account_type, extra_columns, account_id)
        next_rows[r] = row_copy
    return next_rows


@dataclass(frozen=True)
class RangeFillSelector:
    phase: SelectionPhase = SelectionPhase.IDLE
    selection: Optional[SelectionRange] = None
    columns: Tuple[str, ...] = ()

    def _eligible(self, col: int, columns: Sequence[str]) -> bool:
        return 0 <= col < len(columns) and is_editable_numeric(columns[col])

    def pointer_down(self, row: int, col: int, visible_columns: Sequence[str],
                     modifier: bool = True) -> "RangeFillSelector":
        """Anchor a new selection on an eligible cell (modifier key held, nothing else active)."""
        if self.phase is not SelectionPhase.IDLE or not modifier or row < 0:
            return self
        if not self._eligible(col, visible_columns):
            return self
        return RangeFillSelector(
            phase=SelectionPhase.SELECTING,
            selection=SelectionRange(row, row, col, col),
            columns=tuple(visible_columns),
        )

    def pointer_enter(self, row: int, col: int) -> "RangeFillSelector":
        if self.phase is not SelectionPhase.SELECTING or row < 0:
            return self
        if not self._eligible(col, self.columns):
            return self
        return replace(self, selection=replace(self.selection, end_row=row, end_col=col))

    def pointer_up(self) -> "RangeFillSelector":
        """End the drag and ask for a value; pointer-up while not dragging is ignored."""
        if self.phase is not SelectionPhase.SELECTING:
            return self
        return replace(self, phase=SelectionPhase.PROMPTING)

    def cancel(self) -> "RangeFillSelector":
        return RangeFillSelector()

    def is_cell_selected(self, row: int, col: int) -> bool:
        if self.selection is None or not self._eligible(col, self.columns):
            return False
        return self.selection.contains(row, col)

    def target_keys(self) -> List[str]:
        if self.selection is None:
            return []
        _, _, c1, c2 = self.selection.normalized()
        return [k for k in self.columns[c1:c2 + 1] if is_editable_numeric(k)]

    def confirm(self, raw_value: Any, rows: List[Dict[str, Any]], account_type: Any,
                extra_columns=None, account_id: str = "") -> FillOutcome:
        if self.phase is not SelectionPhase.PROMPTING:
            return FillOutcome(self, list(rows))
        value, error = validate_fill_value(raw_value)
        if error:
            return FillOutcome(self, list(rows), error=error)
        next_rows = apply_fill(rows, self.selection, self.columns, value, account_type, extra_columns, account_id)
        logger.debug("Range fill %s with %s on %s", self.selection.normalized(), value, self.target_keys())
        return FillOutcome(RangeFillSelector(), next_rows, applied=True)

    def to_dict(self):
        return {
            "phase": self.phase.value,
            "selection": self.selection.to_dict() if self.selection else None,
            "targetKeys": self.target_keys(),
            "prompt": {"title": PROMPT_TITLE, "text": PROMPT_TEXT} if self.phase is SelectionPhase.PROMPTING else None,
        }


def run_prompt(selector: RangeFillSelector, rows: List[Dict[str, Any]],
               ask: Callable[[Optional[str]], Optional[str]], account_type: Any,
               extra_columns=None, account_id: str = "") -> FillOutcome:
    """Drive the blocking prompt: ``ask(error)`` returns the typed text, or None to cancel.

    The first call receives None; later calls receive the message explaining why
    the previous answer was rejected.
    """
    error = None
    while selector.phase is SelectionPhase.PROMPTING:
        answer = ask(error)
        if answer is None:
            return FillOutcome(selector.cancel(), list(rows))
        outcome = selector.confirm(answer, rows, account_type, extra_columns, account_id)
        if outcome.error is None:
            return outcome
        error = outcome.error
    return FillOutcome(selector, list(rows))
