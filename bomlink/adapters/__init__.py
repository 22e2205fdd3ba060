"""File adapters that turn BOM files into ``(headers, rows)`` pairs."""

from .csv_adapter import CsvAdapter
from .excel_adapter import ExcelAdapter

__all__ = ["CsvAdapter", "ExcelAdapter"]
