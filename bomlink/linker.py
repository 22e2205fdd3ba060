"""Linking BOM component records to schematic instances by part number."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .flattener import parse_quantity
from .schema import ID_FIELD, LEGACY_QUANTITY_FIELDS, MPN_FIELDS, PROJECT_FIELD, QUANTITY_FIELD
from .schematic.model import SchematicComponent, SchematicModel

logger = logging.getLogger(__name__)


def extract_part_key(source: Optional[Mapping[str, Any]], key_fields: Optional[Sequence[str]] = None) -> Optional[str]:
    """Return the first non-empty part-number value, trimmed.

    ``key_fields`` is tried in order; it defaults to the manufacturer part
    number synonyms in :data:`bomlink.schema.MPN_FIELDS`. Works on BOM records
    and on schematic property dicts alike.
    """
    if not source:
        return None
    for name in key_fields or MPN_FIELDS:
        value = source.get(name)
        if value is None:
            continue
        value = str(value).strip()
        if value:
            return value
    return None


def normalize_key(key: Optional[str]) -> str:
    """Comparison form of a part key: trimmed and uppercased."""
    return (key or "").strip().upper()


@dataclass
class LinkedPair:
    record: Dict[str, Any]
    component: SchematicComponent
    key: str

    @property
    def record_id(self) -> Optional[str]:
        return self.record.get(ID_FIELD)

    @property
    def reference(self) -> str:
        return self.component.reference


@dataclass
class LinkResult:
    matched: List[LinkedPair] = field(default_factory=list)
    unmatched_bom: List[Dict[str, Any]] = field(default_factory=list)
    unmatched_schematic: List[SchematicComponent] = field(default_factory=list)

    def summary(self) -> Dict[str, int]:
        return {
            "matched": len(self.matched),
            "unmatched_bom": len(self.unmatched_bom),
            "unmatched_schematic": len(self.unmatched_schematic),
        }

    def to_dict(self) -> Dict[str, Any]:
        """Plain-data form: ids and references only."""
        return {
            "matched": [
                {"record_id": pair.record_id, "reference": pair.reference, "key": pair.key}
                for pair in self.matched
            ],
            "unmatched_bom": [record.get(ID_FIELD) for record in self.unmatched_bom],
            "unmatched_schematic": [component.reference for component in self.unmatched_schematic],
        }


def link_components(
    records: Sequence[Dict[str, Any]],
    model: SchematicModel,
    project_name: Optional[str] = None,
    key_fields: Optional[Sequence[str]] = None,
) -> LinkResult:
    """Match BOM records to schematic instances by canonical part key.

    Records are processed in order. Each takes the first instance, in file
    order, whose key matches and that no earlier record has claimed. Keys
    compare case- and whitespace-insensitively.

    Args:
        records: Component records
        model: Parsed schematic
        project_name: If given, only records tagged with this project take part
        key_fields: Ordered part-number field names (defaults to MPN synonyms)

    Returns:
        A freshly computed LinkResult
    """
    result = LinkResult()

    # key -> references in file order
    candidates: Dict[str, List[str]] = {}
    for reference, component in model.instances.items():
        key = normalize_key(extract_part_key(component.properties, key_fields))
        if key:
            candidates.setdefault(key, []).append(reference)

    claimed = set()
    for record in records:
        if project_name is not None and record.get(PROJECT_FIELD) != project_name:
            continue

        key = normalize_key(extract_part_key(record, key_fields))
        if not key:
            result.unmatched_bom.append(record)
            continue

        match = None
        for reference in candidates.get(key, []):
            if reference not in claimed:
                match = reference
                break

        if match is None:
            result.unmatched_bom.append(record)
            continue

        claimed.add(match)
        result.matched.append(LinkedPair(record=record, component=model.instances[match], key=key))

    result.unmatched_schematic = [
        component for reference, component in model.instances.items() if reference not in claimed
    ]

    logger.info(
        f"Linked {len(result.matched)} records; {len(result.unmatched_bom)} BOM and "
        f"{len(result.unmatched_schematic)} schematic components unmatched"
    )
    return result


@dataclass
class DuplicatePart:
    """A newly imported record whose part key already exists in the store."""
    key: str
    new_record: Dict[str, Any]
    existing_record: Dict[str, Any]


def detect_duplicates(
    new_records: Sequence[Dict[str, Any]],
    existing_records: Sequence[Dict[str, Any]],
    key_fields: Optional[Sequence[str]] = None,
) -> List[DuplicatePart]:
    """Find new records whose part key matches an existing record.

    Each new record is reported at most once, against the first existing
    record with the same key. Records without a key are never duplicates.
    """
    existing_by_key: Dict[str, Dict[str, Any]] = {}
    for record in existing_records:
        key = normalize_key(extract_part_key(record, key_fields))
        if key and key not in existing_by_key:
            existing_by_key[key] = record

    duplicates = []
    for record in new_records:
        key = normalize_key(extract_part_key(record, key_fields))
        if key and key in existing_by_key:
            duplicates.append(DuplicatePart(key=key, new_record=record, existing_record=existing_by_key[key]))

    if duplicates:
        logger.info(f"Found {len(duplicates)} records duplicating existing parts")
    return duplicates


class DuplicateResolution(str, Enum):
    MERGE = "merge"        # add the new quantity onto the existing record
    SEPARATE = "separate"  # store the new record alongside the existing one
    SKIP = "skip"          # drop the new record


@dataclass
class DuplicateResolutionResult:
    to_add: List[Dict[str, Any]] = field(default_factory=list)
    to_update: List[Dict[str, Any]] = field(default_factory=list)
    skipped: List[Dict[str, Any]] = field(default_factory=list)


def _record_quantity(record: Mapping[str, Any], quantity_fields: Sequence[str]) -> int:
    for name in quantity_fields:
        quantity = parse_quantity(record.get(name))
        if quantity is not None and quantity > 0:
            return quantity
    return 1


def resolve_duplicates(
    duplicates: Sequence[DuplicatePart],
    resolutions: Mapping[str, DuplicateResolution],
    quantity_field: str = QUANTITY_FIELD,
) -> DuplicateResolutionResult:
    """Apply the caller's choice for each duplicated part key.

    ``resolutions`` maps a part key (compared trimmed and uppercased) to a
    choice. Merging sums quantities onto a copy of the existing record; when
    several new records merge into the same existing record, all of their
    quantities are added. A missing or invalid quantity counts as 1.
    Duplicates without a resolution are left out. Inputs are not modified.

    Returns:
        DuplicateResolutionResult with records to insert, updated copies of
        existing records, and the skipped new records
    """
    choices = {normalize_key(key): DuplicateResolution(choice) for key, choice in resolutions.items()}
    quantity_fields = [quantity_field, *LEGACY_QUANTITY_FIELDS]

    result = DuplicateResolutionResult()
    merged: Dict[Any, Dict[str, Any]] = {}
    for duplicate in duplicates:
        choice = choices.get(normalize_key(duplicate.key))
        if choice is None:
            logger.debug(f"No resolution for duplicate part {duplicate.key}")
            continue

        if choice is DuplicateResolution.SKIP:
            result.skipped.append(duplicate.new_record)
        elif choice is DuplicateResolution.SEPARATE:
            result.to_add.append(duplicate.new_record)
        else:
            slot = duplicate.existing_record.get(ID_FIELD) or id(duplicate.existing_record)
            target = merged.get(slot)
            if target is None:
                target = dict(duplicate.existing_record)
                target[quantity_field] = str(_record_quantity(target, quantity_fields))
                merged[slot] = target
                result.to_update.append(target)
            total = int(target[quantity_field]) + _record_quantity(duplicate.new_record, quantity_fields)
            target[quantity_field] = str(total)

    logger.info(
        f"Resolved duplicates: {len(result.to_update)} merged, {len(result.to_add)} added, "
        f"{len(result.skipped)} skipped"
    )
    return result
