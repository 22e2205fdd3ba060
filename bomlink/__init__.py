from .parser import BomParser, BomImportResult
from .flattener import BomFlattener, AmbiguousRow, AmbiguityResolution, FlattenResult
from .normalizer import BomNormalizer
from .config import BomConfig
from .errors import BomLinkError, BomParseError, SequenceExhaustedError, StoreError
from .schematic import SchematicParser, SchematicModel, SchematicComponent, export_component
from .linker import (
    link_components, detect_duplicates, resolve_duplicates, extract_part_key,
    LinkResult, LinkedPair, DuplicatePart, DuplicateResolution, DuplicateResolutionResult,
)
from .identifiers import generate_part_hash, assemble_identifier, parse_identifier, validate_identifier_format
from .assigner import IdentifierAssigner, AssignmentResult, BatchAssignmentResult
from .store import ComponentStore, InMemoryComponentStore, PostgresComponentStore

__all__ = [
    "BomParser", "BomImportResult",
    "BomFlattener", "AmbiguousRow", "AmbiguityResolution", "FlattenResult",
    "BomNormalizer", "BomConfig",
    "BomLinkError", "BomParseError", "SequenceExhaustedError", "StoreError",
    "SchematicParser", "SchematicModel", "SchematicComponent", "export_component",
    "link_components", "detect_duplicates", "resolve_duplicates", "extract_part_key",
    "LinkResult", "LinkedPair", "DuplicatePart", "DuplicateResolution", "DuplicateResolutionResult",
    "generate_part_hash", "assemble_identifier", "parse_identifier", "validate_identifier_format",
    "IdentifierAssigner", "AssignmentResult", "BatchAssignmentResult",
    "ComponentStore", "InMemoryComponentStore", "PostgresComponentStore",
]
