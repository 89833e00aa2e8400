from typing import Final

DAY_FORMAT: Final[str] = "%d"
ISO_DATE_FORMAT: Final[str] = "%Y-%m-%d"

# Accounts whose default layout shows the daycare lunch/dinner columns
DAYCARE_ACCOUNT_IDS: Final[frozenset] = frozenset({
    "20250919162439",
    "20250819193615",
    "20250819193504",
    "20250819193455",
})

# Accounts with a hand-specified (colspan/rowspan) header layout
SPECIAL_LAYOUT_IDS: Final[frozenset] = frozenset({
    "20250819193620",
    "20250819193603",
    "20250819193502",
    "20250819193632",
    "20250819193523",
    "20250819193544",
    "20250819193634",
    "20250819193630",
    "20250819193610",
})

# School account whose main meal is breakfast instead of lunch
BREAKFAST_MAIN_ACCOUNT_ID: Final[str] = "20250819193651"

EXTRA_DIET_SLOTS: Final[int] = 5

NUMERIC_COLUMNS: Final[tuple] = (
    "breakfast",
    "lunch",
    "dinner",
    "ceremony",
    "ceremony2",
    "breakfast2",
    "lunch2",
    "dinner2",
    "daycare_breakfast",
    "daycare_lunch",
    "daycare_diner",
    "daycare_employ_breakfast",
    "daycare_employ_lunch",
    "daycare_employ_dinner",
    "daycare_elderly_lunch",
    "daycare_elderly_dinner",
    "employ",
    "employ_breakfast",
    "employ_lunch",
    "employ_dinner",
    "total",
) + tuple(f"extra_diet{i}_price" for i in range(1, EXTRA_DIET_SLOTS + 1))

TEXT_COLUMNS: Final[tuple] = ("note", "breakcancel", "lunchcancel", "dinnercancel")
FLAG_COLUMNS: Final[tuple] = ("special_yn",)
READONLY_COLUMNS: Final[tuple] = ("total", "diner_date")

# Header labels
LABEL_DATE: Final[str] = "구분"
LABEL_BREAKFAST: Final[str] = "조식"
LABEL_LUNCH: Final[str] = "중식"
LABEL_DINNER: Final[str] = "석식"
LABEL_CEREMONY: Final[str] = "경관식"
LABEL_STUDENT: Final[str] = "학생"
LABEL_SPECIAL_YN: Final[str] = "특식여부"
LABEL_EMPLOY: Final[str] = "직원"
LABEL_TOTAL: Final[str] = "계"
LABEL_NOTE: Final[str] = "비고"
LABEL_BREAKFAST_CANCEL: Final[str] = "조식취소"
LABEL_LUNCH_CANCEL: Final[str] = "중식취소"
LABEL_DINNER_CANCEL: Final[str] = "석식취소"
LABEL_DAYCARE_LUNCH: Final[str] = "데이케어 중식"
LABEL_DAYCARE_DINNER: Final[str] = "데이케어 석식"

# Export
SHEET_TITLE: Final[str] = "식수관리"
LABEL_SUM_ROW: Final[str] = "합계"
LABEL_AVG_ROW: Final[str] = "평균"
LABEL_WORKING_DAY: Final[str] = "근무일수"
NUMBER_FORMAT: Final[str] = "#,##0"
FILL_HEADER: Final[str] = "FFF0F0F0"
FILL_TOTALS: Final[str] = "FFFFEB3B"
FILL_AVERAGES: Final[str] = "FFB2EBF2"
BORDER_COLOR: Final[str] = "FF686D76"
DATE_COLUMN_WIDTH: Final[int] = 14
NOTE_COLUMN_WIDTH: Final[int] = 70
DEFAULT_COLUMN_WIDTH: Final[int] = 11
