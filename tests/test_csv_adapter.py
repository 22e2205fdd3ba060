"""Tests for the delimited-text adapter."""

import pytest

from bomlink.adapters.csv_adapter import CsvAdapter
from bomlink.errors import BomParseError


@pytest.fixture
def adapter():
    return CsvAdapter()


class TestReadText:
    """Parsing delimited text into headers and rows."""
    
    def test_basic_rows(self, adapter):
        headers, rows = adapter.read_text("Designator,Value\nR1,10k\nR2,22k\n")
        
        assert headers == ["Designator", "Value"]
        assert rows == [
            {"Designator": "R1", "Value": "10k"},
            {"Designator": "R2", "Value": "22k"},
        ]
    
    def test_quoted_field_keeps_delimiter(self, adapter):
        _, rows = adapter.read_text('Designator,Value\n"R1,R2",100k\n')
        
        assert rows[0]["Designator"] == "R1,R2"
        assert rows[0]["Value"] == "100k"
    
    def test_doubled_quote_is_literal_quote(self, adapter):
        _, rows = adapter.read_text('Designator,Description\nR1,"Header 2"" pitch"\n')
        
        assert rows[0]["Description"] == 'Header 2" pitch'
    
    def test_leading_blank_lines_skipped(self, adapter):
        headers, rows = adapter.read_text("\n\n   \nDesignator,Value\nR1,1k\n")
        
        assert headers == ["Designator", "Value"]
        assert len(rows) == 1
    
    def test_blank_data_lines_skipped(self, adapter):
        _, rows = adapter.read_text("Designator,Value\nR1,1k\n\n , \nR2,2k\n")
        
        assert [row["Designator"] for row in rows] == ["R1", "R2"]
    
    def test_cells_and_headers_trimmed(self, adapter):
        headers, rows = adapter.read_text(" Designator , Value \n R1 , 1k \n")
        
        assert headers == ["Designator", "Value"]
        assert rows[0] == {"Designator": "R1", "Value": "1k"}
    
    def test_empty_header_cells_dropped(self, adapter):
        headers, rows = adapter.read_text("Designator,,Value\nR1,junk,1k\n")
        
        assert headers == ["Designator", "Value"]
        assert rows[0] == {"Designator": "R1", "Value": "1k"}
    
    def test_short_rows_padded(self, adapter):
        _, rows = adapter.read_text("Designator,Value,Footprint\nR1,1k\n")
        
        assert rows[0]["Footprint"] == ""
    
    def test_semicolon_delimiter_detected(self, adapter):
        headers, rows = adapter.read_text("Designator;Value\nR1;4k7\n")
        
        assert headers == ["Designator", "Value"]
        assert rows[0]["Value"] == "4k7"
    
    def test_designator_cell_with_semicolons_does_not_change_delimiter(self, adapter):
        headers, rows = adapter.read_text("Designator,Value\nR1;R2,100k\n")
        
        assert headers == ["Designator", "Value"]
        assert rows[0]["Designator"] == "R1;R2"
    
    @pytest.mark.parametrize("text", ["", "   ", "\n\n\n"])
    def test_empty_input_is_fatal(self, adapter, text):
        with pytest.raises(BomParseError):
            adapter.read_text(text)
    
    def test_header_without_names_is_fatal(self, adapter):
        with pytest.raises(BomParseError, match="no valid headers"):
            adapter.read_text(",,\nR1,1k,x\n")


class TestReadFiles:
    """Reading from disk and from raw bytes."""
    
    def test_read_csv_file(self, adapter, tmp_path):
        path = tmp_path / "bom.csv"
        path.write_text("Designator,Value\nC1,100n\n", encoding="utf-8")
        
        headers, rows = adapter.read(path)
        
        assert headers == ["Designator", "Value"]
        assert rows == [{"Designator": "C1", "Value": "100n"}]
    
    def test_read_tsv_file(self, adapter, tmp_path):
        path = tmp_path / "bom.tsv"
        path.write_text("Designator\tValue\nC1, C2\t100n\n", encoding="utf-8")
        
        _, rows = adapter.read(path)
        
        assert rows[0]["Designator"] == "C1, C2"
    
    def test_byte_order_mark_stripped(self, adapter):
        raw = b"\xef\xbb\xbfDesignator,Value\r\nR1,1k\r\n"
        
        headers, rows = adapter.read_bytes(raw)
        
        assert headers == ["Designator", "Value"]
        assert rows[0]["Value"] == "1k"
    
    def test_empty_bytes_are_fatal(self, adapter):
        with pytest.raises(BomParseError):
            adapter.read_bytes(b"")
    
    def test_missing_file(self, adapter, tmp_path):
        with pytest.raises(FileNotFoundError):
            adapter.read(tmp_path / "missing.csv")
    
    def test_can_handle(self, adapter):
        assert adapter.can_handle("bom.csv")
        assert adapter.can_handle("BOM.TSV")
        assert not adapter.can_handle("bom.xlsx")
