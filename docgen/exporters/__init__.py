"""Document builders writing office files into the output folder."""

from .slides import SlideDeckExporter
from .spreadsheet import SpreadsheetExporter

__all__ = ["SlideDeckExporter", "SpreadsheetExporter"]
