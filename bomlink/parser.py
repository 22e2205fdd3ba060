from .flattener import BomFlattener, AmbiguousRow, find_quantity_column
from .normalizer import BomNormalizer
from .config import BomConfig
from .errors import BomParseError
from .schema import ID_FIELD, PROJECT_FIELD
from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional, Union
from pathlib import Path
import csv
import json
import logging
import openpyxl

logger = logging.getLogger(__name__)


@dataclass
class BomImportResult:
    """Outcome of importing one BOM file.

    ``success`` is False only for input-malformed files; ``error`` then holds
    the message to show the user. Ambiguous rows are returned alongside the
    records for the caller to resolve. ``corrected_quantities`` lists the ids
    of records whose quantity cell was missing or invalid and was set to 1.
    """
    success: bool
    error: Optional[str] = None
    records: List[Dict[str, str]] = field(default_factory=list)
    ambiguous: List[AmbiguousRow] = field(default_factory=list)
    headers: List[str] = field(default_factory=list)
    designator_column: Optional[str] = None
    quantity_column: Optional[str] = None
    skipped_rows: int = 0
    corrected_quantities: List[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.records)


class BomParser:
    """Parser for Bill of Materials files: ingest, flatten and normalize."""
    
    def __init__(self, config: Optional[BomConfig] = None, normalize: bool = True):
        """Initialize the BOM parser.
        
        Args:
            config: Shared configuration (defaults to BomConfig())
            normalize: If True, map records to canonical field names (default: True)
        """
        self.config = config or BomConfig()
        self.adapters = []
        self.flattener = BomFlattener(self.config)
        self.normalizer = BomNormalizer(self.config) if normalize else None
    
    def register_adapter(self, adapter):
        """Register a file adapter for parsing.
        
        Args:
            adapter: Adapter instance with can_handle() and read() methods
        """
        self.adapters.append(adapter)
    
    def _find_adapter(self, file_name: str):
        for a in self.adapters:
            if a.can_handle(file_name):
                return a
        raise BomParseError(f"No adapter found for {file_name}")
    
    def read(self, source: Union[str, Path, bytes], file_name: Optional[str] = None):
        """Read headers and raw rows from a file path or raw bytes.
        
        Args:
            source: Path to the BOM file, or its raw content
            file_name: Name used to pick the adapter when source is bytes
            
        Returns:
            Tuple of (headers, rows)
            
        Raises:
            BomParseError: If no adapter handles the file or it is malformed
        """
        if isinstance(source, (bytes, bytearray)):
            if not file_name:
                raise BomParseError("A file name is required to parse raw content")
            adapter = self._find_adapter(file_name)
            if hasattr(adapter, "read_bytes"):
                return adapter.read_bytes(bytes(source))
            return adapter.read(bytes(source))
        
        adapter = self._find_adapter(file_name or str(source))
        return adapter.read(source)

    def parse(self, source: Union[str, Path, bytes], project_name: str,
              file_name: Optional[str] = None) -> BomImportResult:
        """Parse a BOM file into component records.
        
        Args:
            source: Path to the BOM file, or its raw content
            project_name: Project tag stored on every record
            file_name: File name when source is raw content
            
        Returns:
            BomImportResult with flattened (and optionally normalized) records
            
        Raises:
            BomParseError: If the file is empty, has no headers, or has no
                designator column
        """
        if not project_name or not str(project_name).strip():
            raise BomParseError("A project name is required")
        project_name = str(project_name).strip()
        
        headers, rows = self.read(source, file_name=file_name)
        
        normalizer = self.normalizer or BomNormalizer(self.config)
        designator_column = normalizer.find_designator_column(headers)
        if designator_column is None:
            candidates = [self.config.designator_column, *self.config.alternate_designator_columns]
            raise BomParseError(
                f"No designator column found. Expected one of: {', '.join(candidates)}"
            )
        
        quantity_column = find_quantity_column(headers, self.config)
        flattened = self.flattener.flatten(
            rows, headers, designator_column, project_name, quantity_column=quantity_column
        )
        
        records = flattened.records
        if self.normalizer:
            records = self.normalizer.normalize(records, designator_column)
        
        source_name = file_name or (source if not isinstance(source, (bytes, bytearray)) else "<bytes>")
        logger.info(f"Imported {len(records)} records for project '{project_name}' from {source_name}")
        return BomImportResult(
            success=True,
            records=records,
            ambiguous=flattened.ambiguous,
            headers=list(headers),
            designator_column=designator_column,
            quantity_column=quantity_column,
            skipped_rows=flattened.skipped_rows,
            corrected_quantities=flattened.corrected_quantities,
        )
    
    def process_file(self, source: Union[str, Path, bytes], project_name: str,
                     file_name: Optional[str] = None) -> BomImportResult:
        """Parse a BOM file, reporting malformed input as a failed result.
        
        Unlike parse(), this never raises for bad input; the error message is
        returned in the result.
        """
        try:
            return self.parse(source, project_name, file_name=file_name)
        except (BomParseError, FileNotFoundError) as e:
            logger.warning(f"BOM import failed: {e}")
            return BomImportResult(success=False, error=str(e))
    
    def resolve_ambiguous(self, artifact: AmbiguousRow, resolution) -> List[Dict[str, str]]:
        """Resolve an ambiguous row and normalize the resulting records."""
        records = self.flattener.resolve_ambiguous(artifact, resolution)
        if self.normalizer:
            records = self.normalizer.normalize(records, artifact.designator_column)
        return records
    
    def get_mapping_report(self, source: Union[str, Path, bytes], file_name: Optional[str] = None) -> Dict[str, Any]:
        """Get a report of how columns from a file map to canonical fields.
        
        Args:
            source: Path to the BOM file, or its raw content
            file_name: File name when source is raw content
            
        Returns:
            Dictionary with mapping information including mapped and unmapped columns
        """
        headers, _ = self.read(source, file_name=file_name)
        normalizer = self.normalizer or BomNormalizer(self.config)
        return normalizer.get_mapping_report(headers)
    
    def export(self, data: List[Dict[str, Any]], output_path: str, format: Optional[str] = None) -> str:
        """Export component records to a file.
        
        Args:
            data: List of component records
            output_path: Path where the file should be saved
            format: Output format ('csv', 'excel', 'json', or None for auto-detect from extension)
            
        Returns:
            Path to the exported file
            
        Raises:
            ValueError: If format is not supported or data is empty
        """
        if not data:
            raise ValueError("Cannot export empty data")
        
        output_path = Path(output_path)
        
        # Auto-detect format from extension if not provided
        if format is None:
            suffix = output_path.suffix.lower()
            if suffix == '.csv':
                format = 'csv'
            elif suffix in ['.xlsx', '.xlsm']:
                format = 'excel'
            elif suffix == '.json':
                format = 'json'
            else:
                format = 'csv'
                output_path = output_path.with_suffix('.csv')
        
        format = format.lower()
        headers = self._export_headers(data)
        
        if format == 'csv':
            self._export_csv(data, output_path, headers)
        elif format == 'excel':
            self._export_excel(data, output_path, headers)
        elif format == 'json':
            self._export_json(data, output_path)
        else:
            raise ValueError(f"Unsupported export format: {format}. Supported formats: csv, excel, json")
        
        logger.info(f"Exported {len(data)} records to {output_path}")
        return str(output_path)
    
    def _export_headers(self, data: List[Dict[str, Any]]) -> List[str]:
        """Column order: canonical designator first, then keys in first-seen order.
        
        The bookkeeping id and project fields are left out.
        """
        headers = [self.config.designator_column]
        for row in data:
            for key in row.keys():
                if key not in headers and key not in (ID_FIELD, PROJECT_FIELD):
                    headers.append(key)
        return headers
    
    def _export_csv(self, data: List[Dict[str, Any]], output_path: Path, headers: List[str]) -> None:
        """Export data to CSV file."""
        with open(output_path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=headers, extrasaction='ignore')
            writer.writeheader()
            for row in data:
                complete_row = {header: row.get(header, '') for header in headers}
                writer.writerow(complete_row)
    
    def _export_excel(self, data: List[Dict[str, Any]], output_path: Path, headers: List[str]) -> None:
        """Export data to Excel file."""
        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = "BOM"
        
        for col_idx, header in enumerate(headers, start=1):
            ws.cell(row=1, column=col_idx, value=header)
        
        for row_idx, row_data in enumerate(data, start=2):
            for col_idx, header in enumerate(headers, start=1):
                ws.cell(row=row_idx, column=col_idx, value=row_data.get(header, ''))
        
        wb.save(output_path)
    
    def _export_json(self, data: List[Dict[str, Any]], output_path: Path) -> None:
        """Export data to JSON file."""
        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
