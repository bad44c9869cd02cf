#!/usr/bin/env python
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from docgen.domain import Slide
from docgen.exporters import SlideDeckExporter, SpreadsheetExporter
from docgen.extractors.shapes import decode_sheet_table, decode_slides


SAMPLE_TABLE = {
    "Budget": [
        ["Item", "Q1", "Q2", "Owner"],
        ["Cloud hosting", "1200", "1350", "Platform"],
        ["Licences", "800", "800", "IT"],
        ["Training", "300", "450", "HR"],
    ],
    "Milestones": [
        ["Milestone", "Due"],
        ["Pilot", "2025-02-15"],
        ["Rollout", "2025-05-01"],
    ],
}

SAMPLE_SLIDES = [
    Slide(title="Agenda", content="Context\nGoals\nTimeline", notes="Keep this under two minutes"),
    Slide(title="Goals", content="Reduce cost by 10%\n\nShip the pilot in Q1"),
    Slide(title="Next steps", content="Approve budget\nStaff the team"),
]


def main() -> None:
    parser = argparse.ArgumentParser(description="Render sample spreadsheet and slide deck files")
    parser.add_argument("--title", default="Quarterly Plan", help="Document title")
    parser.add_argument("--output", required=True, help="Output directory")
    parser.add_argument("--table-json", help="JSON file with a sheet table ({sheet: [[...], ...]})")
    parser.add_argument("--slides-json", help='JSON file with slides ({"slides": [{...}, ...]})')
    args = parser.parse_args()

    output = Path(args.output)
    output.mkdir(parents=True, exist_ok=True)

    table = SAMPLE_TABLE
    if args.table_json:
        table = decode_sheet_table(json.loads(Path(args.table_json).read_text(encoding="utf-8")))

    slides = SAMPLE_SLIDES
    if args.slides_json:
        slides = decode_slides(json.loads(Path(args.slides_json).read_text(encoding="utf-8")))

    spreadsheet = SpreadsheetExporter(output).build(args.title, table)
    deck = SlideDeckExporter(output).build(args.title, slides)

    print(f"Spreadsheet written: {output / spreadsheet}")
    print(f"Slide deck written: {output / deck}")


if __name__ == "__main__":
    main()
