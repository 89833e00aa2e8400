"""LayoutDescriptor domain entity: grouped header rows plus the ordered data column keys.

The same descriptor drives the on-screen table and the spreadsheet export,
so its geometry must be self-consistent: the first header row's colspans
cover the date column plus every visible column.
"""
from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class HeaderCell:
    label: str
    row_span: int = 1
    col_span: int = 1

    def to_dict(self):
        return {"label": self.label, "rowSpan": self.row_span, "colSpan": self.col_span}


@dataclass
class LayoutDescriptor:
    header_rows: List[List[HeaderCell]]
    visible_columns: List[str] = field(default_factory=list)

    @property
    def column_count(self) -> int:
        """Date column plus one column per visible key."""
        return 1 + len(self.visible_columns)

    def first_row_span(self) -> int:
        return sum(cell.col_span for cell in self.header_rows[0]) if self.header_rows else 0

    def validate(self) -> "LayoutDescriptor":
        """Raise ValueError if the header geometry does not match the column keys."""
        if self.first_row_span() != self.column_count:
            raise ValueError(
                f"Header spans cover {self.first_row_span()} columns, expected {self.column_count}"
            )
        for idx, row in enumerate(self.header_rows[1:], start=1):
            covered = _columns_covered_from_above(self.header_rows, idx)
            if covered + sum(c.col_span for c in row) != self.column_count:
                raise ValueError(f"Header row {idx} does not fill the remaining columns")
        return self

    def to_dict(self):
        return {
            "headerRows": [[cell.to_dict() for cell in row] for row in self.header_rows],
            "visibleColumns": list(self.visible_columns),
        }


def _columns_covered_from_above(header_rows: List[List[HeaderCell]], row_index: int) -> int:
    covered = 0
    for upper_idx in range(row_index):
        for cell in header_rows[upper_idx]:
            if upper_idx + cell.row_span > row_index:
                covered += cell.col_span
    return covered
