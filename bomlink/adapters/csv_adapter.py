import csv
import io
import logging
import chardet
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from ..errors import BomParseError

logger = logging.getLogger(__name__)


class CsvAdapter:
    """CSV adapter for reading delimited BOM text into headers and rows.
    
    Handles:
    - Multiple encodings (UTF-8, UTF-8-BOM, Windows-1252, ISO-8859-1, etc.)
    - Different delimiters (comma, semicolon, tab)
    - Quoted fields containing the delimiter and "" escapes
    - Leading blank lines before the header and blank data lines
    """
    
    def can_handle(self, file_path: str) -> bool:
        """Check if this adapter can handle the given file."""
        return Path(file_path).suffix.lower() in [".csv", ".tsv"]
    
    def _detect_encoding(self, raw_data: bytes) -> str:
        """Detect byte encoding using chardet with fallback."""
        # Check for BOM first
        if raw_data.startswith(b'\xef\xbb\xbf'):
            return 'utf-8-sig'
        
        result = chardet.detect(raw_data[:10000])
        encoding = result.get('encoding') or 'utf-8'
        
        # Normalize common encodings
        encoding_lower = encoding.lower()
        if 'utf-8' in encoding_lower or 'utf8' in encoding_lower or encoding_lower == 'ascii':
            return 'utf-8'
        
        return encoding
    
    def _decode(self, raw_data: bytes) -> str:
        """Decode raw bytes, trying fallbacks when the detected encoding fails."""
        encoding = self._detect_encoding(raw_data)
        try:
            return raw_data.decode(encoding)
        except (UnicodeDecodeError, LookupError) as e:
            for fallback_encoding in ['utf-8', 'cp1252', 'latin-1']:
                try:
                    return raw_data.decode(fallback_encoding)
                except UnicodeDecodeError:
                    continue
            raise BomParseError(f"Could not decode CSV content: {e}")
    
    def _detect_delimiter(self, header_line: str) -> str:
        """Detect CSV delimiter by counting candidates on the header line."""
        comma_count = header_line.count(',')
        semicolon_count = header_line.count(';')
        tab_count = header_line.count('\t')
        
        # Return delimiter with highest count
        if tab_count > comma_count and tab_count > semicolon_count:
            return '\t'
        elif semicolon_count > comma_count:
            return ';'
        else:
            return ','
    
    def read_text(self, text: str, delimiter: Optional[str] = None) -> Tuple[List[str], List[Dict[str, str]]]:
        """Parse delimited text into headers and rows.
        
        Args:
            text: Full file content
            delimiter: Field delimiter (detected from the header line if omitted)
            
        Returns:
            Tuple of (headers, rows). Headers are trimmed and empty header cells
            dropped; each row maps every header to its trimmed cell value.
            
        Raises:
            BomParseError: If the text is empty or the header line has no names
        """
        if text is None or not text.strip():
            raise BomParseError("CSV file is empty")
        
        if text.startswith('\ufeff'):
            text = text[1:]
        
        lines = text.splitlines(keepends=True)
        
        # Skip leading blank lines before selecting the header line
        start = 0
        while start < len(lines) and not lines[start].strip():
            start += 1
        
        if delimiter is None:
            delimiter = self._detect_delimiter(lines[start])
        
        reader = csv.reader(io.StringIO(''.join(lines[start:])), delimiter=delimiter)
        
        try:
            header_cells = next(reader)
        except (StopIteration, csv.Error) as e:
            raise BomParseError(f"CSV file has no valid headers: {e}")
        
        # Keep the original column index of every non-empty header
        columns = [(index, cell.strip()) for index, cell in enumerate(header_cells) if cell.strip()]
        if not columns:
            raise BomParseError("CSV file has no valid headers")
        
        headers = [name for _, name in columns]
        rows = []
        try:
            for values in reader:
                # Skip rows that are completely empty
                if all(not (value or '').strip() for value in values):
                    continue
                row = {}
                for index, name in columns:
                    row[name] = values[index].strip() if index < len(values) else ''
                rows.append(row)
        except csv.Error as e:
            raise BomParseError(f"Error parsing CSV content at line {reader.line_num}: {e}")
        
        logger.debug(f"Parsed CSV: {len(headers)} columns, {len(rows)} data rows")
        return headers, rows
    
    def read_bytes(self, raw_data: bytes, delimiter: Optional[str] = None) -> Tuple[List[str], List[Dict[str, str]]]:
        """Decode raw file bytes and parse them. See :meth:`read_text`."""
        if not raw_data:
            raise BomParseError("CSV file is empty")
        return self.read_text(self._decode(raw_data), delimiter=delimiter)
    
    def read(self, file_path: Union[str, Path]) -> Tuple[List[str], List[Dict[str, str]]]:
        """Read a CSV/TSV file and return its headers and rows.
        
        Args:
            file_path: Path to the CSV/TSV file
            
        Returns:
            Tuple of (headers, rows)
            
        Raises:
            FileNotFoundError: If file doesn't exist
            BomParseError: If file is empty or cannot be parsed
        """
        path = Path(file_path)
        
        # Check if file exists
        if not path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")
        
        # TSV files use tab delimiter
        delimiter = '\t' if path.suffix.lower() == '.tsv' else None
        
        return self.read_bytes(path.read_bytes(), delimiter=delimiter)
