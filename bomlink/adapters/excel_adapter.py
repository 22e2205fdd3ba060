import io
import logging
import openpyxl
from pathlib import Path
from typing import Dict, List, Tuple, Union

from ..errors import BomParseError

logger = logging.getLogger(__name__)


def _cell_text(value) -> str:
    return "" if value is None else str(value).strip()


class ExcelAdapter:
    """Spreadsheet adapter: first worksheet, row 1 holds the headers."""

    def can_handle(self, file_path):
        return Path(file_path).suffix.lower() in [".xlsx", ".xlsm"]

    def read(self, source: Union[str, Path, bytes]) -> Tuple[List[str], List[Dict[str, str]]]:
        """Read a workbook from a path or raw bytes.

        Every cell is coerced to its string form. Empty header cells are
        dropped together with their column, and rows that are empty after
        coercion are skipped.

        Raises:
            BomParseError: If the workbook cannot be loaded, has no worksheet,
                or its first row has no header names
        """
        if isinstance(source, (bytes, bytearray)):
            if not source:
                raise BomParseError("Excel file is empty")
            source = io.BytesIO(source)
        elif not Path(source).exists():
            raise FileNotFoundError(f"File not found: {source}")

        try:
            wb = openpyxl.load_workbook(source, data_only=True, read_only=True)
        except Exception as e:
            raise BomParseError(f"Failed to load Excel file: {e}")

        try:
            if not wb.worksheets:
                raise BomParseError("Excel file has no worksheets")
            ws = wb.worksheets[0]

            row_iter = ws.iter_rows(values_only=True)
            header_cells = next(row_iter, None) or ()
            columns = [
                (index, _cell_text(value))
                for index, value in enumerate(header_cells)
                if _cell_text(value)
            ]
            if not columns:
                raise BomParseError("Excel file has no valid headers in the first row")

            headers = [name for _, name in columns]
            rows = []
            for values in row_iter:
                row = {
                    name: _cell_text(values[index]) if index < len(values) else ""
                    for index, name in columns
                }
                if any(row.values()):
                    rows.append(row)
        finally:
            wb.close()

        logger.debug(f"Parsed worksheet: {len(headers)} columns, {len(rows)} data rows")
        return headers, rows
