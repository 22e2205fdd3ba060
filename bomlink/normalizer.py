from typing import List, Dict, Any, Optional, Sequence
import logging
from .config import BomConfig

logger = logging.getLogger(__name__)


class BomNormalizer:
    """Normalizer for standardizing flattened BOM component records.
    
    Maps source column names to canonical field names through the configured
    field-mapping dictionary and consolidates quantity synonyms into the
    canonical quantity field.
    """
    
    def __init__(self, config: Optional[BomConfig] = None):
        """Initialize the normalizer with column mappings.
        
        Args:
            config: Configuration holding field mappings and canonical names
        """
        self.config = config or BomConfig()
    
    @property
    def canonical_designator(self) -> str:
        return self.config.designator_column
    
    def find_designator_column(self, headers: Sequence[str]) -> Optional[str]:
        """Find the column holding designators.
        
        The primary designator column wins; otherwise the configured
        alternates are tried in order.
        
        Args:
            headers: Column names from the BOM file
            
        Returns:
            Matching column name, or None when no candidate is present
        """
        if not headers:
            return None
        
        if self.config.designator_column in headers:
            return self.config.designator_column
        
        for alternate in self.config.alternate_designator_columns or []:
            if alternate in headers:
                return alternate
        
        return None
    
    def _allows_overwrite(self, source: str, target: str) -> bool:
        """Quantity synonyms may overwrite the canonical quantity field."""
        return target == self.config.quantity_field and self.config.is_quantity_synonym(source)
    
    def normalize_row(self, record: Dict[str, Any], designator_column: Optional[str] = None) -> Dict[str, Any]:
        """Normalize a single flattened record to canonical field names.
        
        Args:
            record: Component record from the flattener
            designator_column: Column the designators were read from
            
        Returns:
            New record; the input is not modified
        """
        if record is None:
            return record
        
        normalized = dict(record)
        
        # Map designator to the canonical field
        if designator_column and designator_column != self.canonical_designator:
            normalized[self.canonical_designator] = record.get(designator_column, "")
        
        # Apply field mappings against the source values
        for source, target in (self.config.field_mappings or {}).items():
            if designator_column and target == self.canonical_designator:
                continue  # already taken from the designator column
            value = record.get(source)
            if not value or not str(value).strip():
                continue
            # Presence of the target is judged on the source record, so later
            # synonyms of the same field override earlier ones
            current = record.get(target)
            if not current or not str(current).strip() or self._allows_overwrite(source, target):
                normalized[target] = value
        
        # Drop legacy quantity fields once the canonical one exists
        if self.config.quantity_field in normalized:
            for legacy in self.config.legacy_quantity_fields:
                if legacy != self.config.quantity_field and legacy in normalized:
                    del normalized[legacy]
        
        return normalized
    
    def normalize(self, records: List[Dict[str, Any]], designator_column: Optional[str] = None) -> List[Dict[str, Any]]:
        """Normalize a list of records to canonical field names."""
        return [self.normalize_row(record, designator_column) for record in records]
    
    def get_mapping_report(self, headers: Sequence[str]) -> Dict[str, Any]:
        """Generate a report of column mappings for debugging.
        
        Args:
            headers: Column names from a BOM file
            
        Returns:
            Dictionary with mapped (canonical -> source columns), unmapped
            columns and the designator column that would be used
        """
        mapped = {}
        unmapped = []
        mappings = self.config.field_mappings or {}
        canonical = set(mappings.values())
        
        for column in headers or []:
            if column is None:
                continue
            target = mappings.get(column)
            if target is None and column in canonical:
                target = column
            if target:
                mapped.setdefault(target, []).append(column)
            else:
                unmapped.append(column)
        
        return {
            "mapped": mapped,
            "unmapped": unmapped,
            "designator_column": self.find_designator_column(headers),
        }
