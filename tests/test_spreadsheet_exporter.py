from __future__ import annotations

import re
import sys
from datetime import datetime
from pathlib import Path

import pytest
from openpyxl import load_workbook

sys.path.append(str(Path(__file__).resolve().parents[1]))

from docgen.core.errors import BuildFailed
from docgen.core.naming import build_file_name, sanitize_title
from docgen.exporters import SpreadsheetExporter
from docgen.exporters.spreadsheet import (
    MAX_COLUMN_WIDTH,
    MIN_COLUMN_WIDTH,
    clamp_column_width,
    estimate_column_width,
)

FIXED_NOW = datetime(2025, 1, 2, 3, 4, 5)


def _exporter(tmp_path: Path) -> SpreadsheetExporter:
    return SpreadsheetExporter(tmp_path / "out", clock=lambda: FIXED_NOW)


def _width_units(sheet, letter: str) -> int:
    return round(sheet.column_dimensions[letter].width * 256)


def test_rows_and_header_styling_round_trip(tmp_path):
    exporter = _exporter(tmp_path)
    file_name = exporter.build("Scores", {"S1": [["A", "B"], ["1", "2"], ["3", "4"]]})

    workbook = load_workbook(tmp_path / "out" / file_name)
    assert workbook.sheetnames == ["S1"]
    sheet = workbook["S1"]
    assert sheet.max_row == 3
    assert sheet.cell(row=2, column=1).value == "1"
    assert sheet.cell(row=3, column=2).value == "4"

    header = sheet["A1"]
    assert header.font.b is True
    assert header.font.sz == 11
    assert header.font.name == "Malgun Gothic"
    assert header.fill.fill_type == "solid"
    assert header.fill.fgColor.rgb.endswith("C0C0C0")
    assert header.alignment.horizontal == "center"
    assert header.border.top.style == "thin"

    body = sheet["B3"]
    assert not body.font.b
    assert body.font.sz == 10
    assert body.alignment.horizontal == "left"
    assert body.border.left.style == "thin"
    assert body.border.bottom.style == "thin"


def test_sheets_follow_table_order_and_rows_stay_ragged(tmp_path):
    exporter = _exporter(tmp_path)
    table = {
        "Summary": [["Item", "Cost", "Owner"], ["Hosting", "10"]],
        "Q1/Q2": [["Quarter"], ["Q1"]],
        "Empty": [],
    }
    file_name = exporter.build("Plan", table)

    workbook = load_workbook(tmp_path / "out" / file_name)
    assert workbook.sheetnames == ["Summary", "Q1_Q2", "Empty"]
    summary = workbook["Summary"]
    assert summary.cell(row=2, column=2).value == "10"
    assert summary.cell(row=2, column=3).value is None
    assert workbook["Empty"].max_row == 1
    assert workbook["Empty"]["A1"].value is None


def test_formula_like_text_stays_literal(tmp_path):
    exporter = _exporter(tmp_path)
    file_name = exporter.build("Formulas", {"S": [["Expr"], ["=SUM(A1:A2)"]]})

    cell = load_workbook(tmp_path / "out" / file_name)["S"]["A2"]
    assert cell.value == "=SUM(A1:A2)"
    assert cell.data_type == "s"


def test_column_widths_are_clamped(tmp_path):
    exporter = _exporter(tmp_path)
    table = {
        "S": [
            ["a", "b", "c"],
            ["1", "x" * 200, "y" * 30],
        ]
    }
    file_name = exporter.build("Widths", table)

    sheet = load_workbook(tmp_path / "out" / file_name)["S"]
    assert _width_units(sheet, "A") == MIN_COLUMN_WIDTH
    assert _width_units(sheet, "B") == MAX_COLUMN_WIDTH
    assert _width_units(sheet, "C") == (30 + 2) * 256


def test_only_header_columns_are_sized(tmp_path):
    exporter = _exporter(tmp_path)
    file_name = exporter.build("Ragged", {"S": [["h"], ["value", "z" * 80]]})

    sheet = load_workbook(tmp_path / "out" / file_name)["S"]
    assert _width_units(sheet, "A") == MIN_COLUMN_WIDTH
    assert sheet.column_dimensions["B"].width != MAX_COLUMN_WIDTH / 256


def test_width_helpers():
    assert clamp_column_width(10) == MIN_COLUMN_WIDTH
    assert clamp_column_width(5000) == 5000
    assert clamp_column_width(99999) == MAX_COLUMN_WIDTH
    assert estimate_column_width(["abc", "a"]) == (3 + 2) * 256
    assert estimate_column_width(["매출액"]) == (6 + 2) * 256
    assert estimate_column_width(["short\nmuch longer line"]) == (16 + 2) * 256


def test_file_name_sanitises_title():
    name = build_file_name("Q3 Report / Draft?", ".xlsx", FIXED_NOW)

    assert name == "Q3_Report___Draft__20250102_030405.xlsx"
    assert re.fullmatch(r"Q3_Report___Draft__\d{8}_\d{6}\.xlsx", name)


def test_sanitize_keeps_non_latin_letters():
    assert sanitize_title("분기 보고서") == "분기_보고서"
    assert sanitize_title("Отчёт-2025") == "Отчёт_2025"
    assert sanitize_title("a_b.c") == "a_b_c"


def test_output_folder_is_created_and_only_the_final_file_remains(tmp_path):
    exporter = _exporter(tmp_path)
    file_name = exporter.build("Q3 Report / Draft?", {"S": [["a"]]})

    assert file_name == "Q3_Report___Draft__20250102_030405.xlsx"
    assert [path.name for path in (tmp_path / "out").iterdir()] == [file_name]


def test_empty_table_fails(tmp_path):
    with pytest.raises(BuildFailed):
        _exporter(tmp_path).build("Nothing", {})


def test_io_error_becomes_build_failed(tmp_path):
    blocker = tmp_path / "out"
    blocker.write_text("not a directory", encoding="utf-8")

    with pytest.raises(BuildFailed):
        _exporter(tmp_path).build("Blocked", {"S": [["a"]]})
