import io

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.cidfonts import UnicodeCIDFont
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from diners.logic.reporting.export_mirror import HEADER_START_ROW, ExportGrid
from diners.utilities.numbers import format_number

# Built-in CID font with Hangul glyphs; no font file needed
KOREAN_FONT = "HYSMyeongJo-Medium"
pdfmetrics.registerFont(UnicodeCIDFont(KOREAN_FONT))


def _text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return format_number(value)
    return str(value)


def generate_pdf_for_sheet(grid: ExportGrid):
    """Render the export grid as a landscape A4 table with the same header spans."""
    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf, pagesize=landscape(A4),
        rightMargin=20, leftMargin=20, topMargin=20, bottomMargin=20
    )

    styles = getSampleStyleSheet()
    title_style = styles["Title"].clone("SheetTitle", fontName=KOREAN_FONT, fontSize=14)
    elements = [
        Paragraph(grid.title, title_style),
        Spacer(1, 12),
    ]

    # Table starts at the first header row; the title is the paragraph above
    matrix = grid.value_matrix()[HEADER_START_ROW - 1:]
    data = [[_text(v) for v in row] for row in matrix]
    header_rows = grid.header_row_count
    totals_idx = grid.totals_row - HEADER_START_ROW
    averages_idx = grid.averages_row - HEADER_START_ROW

    style = [
        ("FONTNAME", (0, 0), (-1, -1), KOREAN_FONT),
        ("FONTSIZE", (0, 0), (-1, -1), 7),
        ("ALIGN", (0, 0), (-1, -1), "CENTER"),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("BACKGROUND", (0, 0), (-1, header_rows - 1), colors.HexColor("#F0F0F0")),
        ("BACKGROUND", (0, totals_idx), (-1, totals_idx), colors.HexColor("#FFEB3B")),
        ("BACKGROUND", (0, averages_idx), (-1, averages_idx), colors.HexColor("#B2EBF2")),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.HexColor("#686D76")),
    ]
    for start_row, start_col, end_row, end_col in grid.merges:
        if start_row < HEADER_START_ROW:
            continue
        style.append(("SPAN", (start_col - 1, start_row - HEADER_START_ROW), (end_col - 1, end_row - HEADER_START_ROW)))

    table = Table(data, repeatRows=header_rows)
    table.setStyle(TableStyle(style))

    elements.append(table)
    doc.build(elements)
    return buf.getvalue()
