from __future__ import annotations

import re
import unicodedata
from typing import Iterable

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from docgen.core.errors import BuildFailed
from docgen.domain import SheetTable

from .base import DocumentExporter

FONT_NAME = "Malgun Gothic"
HEADER_FONT_SIZE = 11
BODY_FONT_SIZE = 10
HEADER_FILL = "C0C0C0"

# Column widths in 1/256 of a character, the unit Excel stores internally.
MIN_COLUMN_WIDTH = 3000
MAX_COLUMN_WIDTH = 15000
WIDTH_UNITS_PER_CHAR = 256
WIDTH_PADDING_CHARS = 2

SHEET_TITLE_MAX_CHARS = 31
INVALID_SHEET_TITLE_RE = re.compile(r"[\\*?:/\[\]]")

_THIN = Side(style="thin")
THIN_BORDER = Border(left=_THIN, right=_THIN, top=_THIN, bottom=_THIN)


def _display_width(text: str) -> int:
    return sum(2 if unicodedata.east_asian_width(char) in ("W", "F") else 1 for char in text)


def estimate_column_width(values: Iterable[str]) -> int:
    """Width in 1/256 character units needed by the widest line in ``values``."""

    widest = 0
    for value in values:
        for line in str(value).splitlines() or [""]:
            widest = max(widest, _display_width(line))
    return (widest + WIDTH_PADDING_CHARS) * WIDTH_UNITS_PER_CHAR


def clamp_column_width(units: int) -> int:
    if units < MIN_COLUMN_WIDTH:
        return MIN_COLUMN_WIDTH
    if units > MAX_COLUMN_WIDTH:
        return MAX_COLUMN_WIDTH
    return units


def _sheet_titles(names: Iterable[str]) -> list[str]:
    titles: list[str] = []
    seen: set[str] = set()
    for name in names:
        base = INVALID_SHEET_TITLE_RE.sub("_", name).strip("'")[:SHEET_TITLE_MAX_CHARS] or "Sheet"
        title = base
        counter = 2
        while title.lower() in seen:
            suffix = f" ({counter})"
            title = f"{base[: SHEET_TITLE_MAX_CHARS - len(suffix)]}{suffix}"
            counter += 1
        seen.add(title.lower())
        titles.append(title)
    return titles


def _clean_text(value: str) -> str:
    return ILLEGAL_CHARACTERS_RE.sub("", value)


class SpreadsheetExporter(DocumentExporter):
    """Render a sheet table into an ``.xlsx`` workbook."""

    extension = ".xlsx"
    format_label = "spreadsheet"

    header_font = Font(name=FONT_NAME, size=HEADER_FONT_SIZE, bold=True)
    header_fill = PatternFill(start_color=HEADER_FILL, end_color=HEADER_FILL, fill_type="solid")
    header_alignment = Alignment(horizontal="center", vertical="center")
    body_font = Font(name=FONT_NAME, size=BODY_FONT_SIZE)
    body_alignment = Alignment(horizontal="left", vertical="center")

    def build(self, title: str, table: SheetTable) -> str:
        if not table:
            raise BuildFailed("Failed to create spreadsheet file: no sheet data")
        return self._publish(title, lambda path: self.render(table).save(path))

    def render(self, table: SheetTable) -> Workbook:
        workbook = Workbook()
        titles = _sheet_titles(table.keys())
        for index, (sheet_title, rows) in enumerate(zip(titles, table.values())):
            sheet = workbook.active if index == 0 else workbook.create_sheet()
            sheet.title = sheet_title
            self._write_rows(sheet, rows)
            self._size_columns(sheet, rows)
        return workbook

    def _write_rows(self, sheet: Worksheet, rows: list[list[str]]) -> None:
        for row_index, cells in enumerate(rows, start=1):
            is_header = row_index == 1
            for column_index, value in enumerate(cells, start=1):
                cell = sheet.cell(row=row_index, column=column_index)
                cell.value = _clean_text(value)
                if cell.data_type == "f":
                    # keep "=..." text literal instead of turning it into a formula
                    cell.data_type = "s"
                cell.border = THIN_BORDER
                if is_header:
                    cell.font = self.header_font
                    cell.fill = self.header_fill
                    cell.alignment = self.header_alignment
                else:
                    cell.font = self.body_font
                    cell.alignment = self.body_alignment

    def _size_columns(self, sheet: Worksheet, rows: list[list[str]]) -> None:
        if not rows:
            return
        for column_index in range(len(rows[0])):
            values = [row[column_index] for row in rows if column_index < len(row)]
            units = clamp_column_width(estimate_column_width(values))
            letter = get_column_letter(column_index + 1)
            sheet.column_dimensions[letter].width = units / WIDTH_UNITS_PER_CHAR
