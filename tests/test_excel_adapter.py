"""Tests for the spreadsheet adapter. Workbooks are built with openpyxl."""

import openpyxl
import pytest

from bomlink.adapters.excel_adapter import ExcelAdapter
from bomlink.errors import BomParseError


@pytest.fixture
def workbook_path(tmp_path):
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "BOM"
    ws.append(["Designator", None, "Value", "Qty"])
    ws.append(["R1, R2", "ignored", "10k", 2])
    ws.append([None, None, None, None])
    ws.append(["C1", None, 100, 1])
    
    # A second sheet must be ignored
    other = wb.create_sheet("Notes")
    other.append(["Something", "Else"])
    
    path = tmp_path / "bom.xlsx"
    wb.save(path)
    return path


class TestExcelAdapter:
    
    def test_headers_skip_empty_cells(self, workbook_path):
        headers, _ = ExcelAdapter().read(workbook_path)
        
        assert headers == ["Designator", "Value", "Qty"]
    
    def test_cells_coerced_to_strings(self, workbook_path):
        _, rows = ExcelAdapter().read(workbook_path)
        
        assert rows[0] == {"Designator": "R1, R2", "Value": "10k", "Qty": "2"}
        assert rows[1]["Value"] == "100"
    
    def test_empty_rows_dropped(self, workbook_path):
        _, rows = ExcelAdapter().read(workbook_path)
        
        assert [row["Designator"] for row in rows] == ["R1, R2", "C1"]
    
    def test_read_from_bytes(self, workbook_path):
        headers, rows = ExcelAdapter().read(workbook_path.read_bytes())
        
        assert headers == ["Designator", "Value", "Qty"]
        assert len(rows) == 2
    
    def test_empty_bytes_are_fatal(self):
        with pytest.raises(BomParseError):
            ExcelAdapter().read(b"")
    
    def test_garbage_is_fatal(self):
        with pytest.raises(BomParseError, match="Failed to load"):
            ExcelAdapter().read(b"this is not a workbook")
    
    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ExcelAdapter().read(tmp_path / "missing.xlsx")
    
    def test_can_handle(self):
        assert ExcelAdapter().can_handle("bom.xlsx")
        assert ExcelAdapter().can_handle("bom.XLSM")
        assert not ExcelAdapter().can_handle("bom.csv")
