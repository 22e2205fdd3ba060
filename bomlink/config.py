"""Runtime configuration for BOM import, schematic linking and LPN assignment.

Every tunable defaults to the values in :mod:`bomlink.schema`. A saved
settings dict (for example one loaded from the store) can be turned back
into a config with :meth:`BomConfig.from_dict`.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, List

from . import schema


@dataclass
class BomConfig:
    """Configuration shared by the parser, flattener, normalizer, linker and assigner."""

    designator_column: str = schema.DESIGNATOR_FIELD
    alternate_designator_columns: List[str] = field(
        default_factory=lambda: list(schema.ALTERNATE_DESIGNATOR_COLUMNS)
    )
    field_mappings: Dict[str, str] = field(
        default_factory=lambda: dict(schema.DEFAULT_FIELD_MAPPINGS)
    )
    quantity_field: str = schema.QUANTITY_FIELD
    quantity_synonyms: List[str] = field(
        default_factory=lambda: list(schema.QUANTITY_SYNONYMS)
    )
    legacy_quantity_fields: List[str] = field(
        default_factory=lambda: list(schema.LEGACY_QUANTITY_FIELDS)
    )
    mpn_fields: List[str] = field(default_factory=lambda: list(schema.MPN_FIELDS))
    canonical_key_field: str = schema.MPN_FIELD
    identifier_field: str = schema.IDENTIFIER_FIELD
    lpn_prefix: str = schema.LPN_PREFIX
    power_marker: str = schema.POWER_MARKER
    designator_meanings: Dict[str, str] = field(
        default_factory=lambda: dict(schema.DEFAULT_DESIGNATOR_MAP)
    )

    def __post_init__(self):
        if len(self.lpn_prefix) != 2 or not self.lpn_prefix.isalpha():
            raise ValueError(f"LPN prefix must be two letters, got {self.lpn_prefix!r}")
        self.lpn_prefix = self.lpn_prefix.upper()

    def quantity_candidates(self) -> List[str]:
        """Quantity column names in lookup order: canonical, synonyms, fallbacks."""
        candidates = [self.quantity_field, *self.quantity_synonyms, *schema.QUANTITY_FALLBACKS]
        ordered = []
        seen = set()
        for name in candidates:
            key = name.strip().lower()
            if key and key not in seen:
                seen.add(key)
                ordered.append(name)
        return ordered

    def is_quantity_synonym(self, column: str) -> bool:
        """True if ``column`` names a quantity under a non-canonical name."""
        if column == self.quantity_field:
            return False
        lowered = column.strip().lower()
        return any(lowered == name.strip().lower() for name in self.quantity_candidates())

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BomConfig":
        """Build a config from saved settings, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in (data or {}).items() if k in known})
