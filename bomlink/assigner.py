"""Assigning Local Part Numbers to component records.

Two records with the same manufacturer part number are the same physical
part and must share one LPN. The assigner therefore asks the store for an
existing identifier before minting a new one, and batches run strictly one
record at a time so a record sees the identifier persisted for the previous
one.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from .config import BomConfig
from .errors import SequenceExhaustedError, StoreError
from .identifiers import assemble_identifier, generate_part_hash, has_identifier
from .linker import extract_part_key
from .schema import ID_FIELD
from .store.base import ComponentStore

logger = logging.getLogger(__name__)

MISSING_KEY = "Component must have a Manufacturer Part Number (MPN) to generate LPN"
ALREADY_ASSIGNED = "Component already has an LPN assigned"
SEQUENCE_EXHAUSTED = "LPN sequence exhausted"
PERSISTENCE_FAILED = "Failed to update component with LPN"


@dataclass
class AssignmentResult:
    success: bool
    record_id: Optional[str] = None
    identifier: Optional[str] = None
    key: Optional[str] = None
    sequence: Optional[int] = None
    hash: Optional[str] = None
    reused: bool = False
    error: Optional[str] = None


@dataclass
class BatchAssignmentResult:
    results: List[AssignmentResult] = field(default_factory=list)

    @property
    def succeeded(self) -> List[AssignmentResult]:
        return [r for r in self.results if r.success]

    @property
    def failed(self) -> List[AssignmentResult]:
        return [r for r in self.results if not r.success]

    @property
    def success(self) -> bool:
        return not self.failed

    @property
    def total(self) -> int:
        return len(self.results)


class IdentifierAssigner:
    """Assigns LPNs through an injected :class:`ComponentStore`."""

    def __init__(self, store: ComponentStore, config: Optional[BomConfig] = None):
        self.store = store
        self.config = config or BomConfig()

    def assign(self, record: Dict[str, Any]) -> AssignmentResult:
        """Give one record an LPN, reusing the identifier of its part key if one exists.

        On success the identifier and canonical key are persisted to the
        store and written onto ``record``. On failure the record is left
        untouched and ``error`` holds the reason.
        """
        record_id = record.get(ID_FIELD) if record else None
        key = extract_part_key(record, self.config.mpn_fields)
        if not key:
            return AssignmentResult(success=False, record_id=record_id, error=MISSING_KEY)
        if has_identifier(record, self.config.identifier_field):
            return AssignmentResult(success=False, record_id=record_id, key=key, error=ALREADY_ASSIGNED)

        sequence = None
        part_hash = generate_part_hash(key)
        try:
            identifier = self.store.find_identifier_by_key(key)
            reused = identifier is not None
            if not reused:
                sequence = self.store.get_next_sequence()
                identifier = assemble_identifier(sequence, part_hash, self.config.lpn_prefix)

            fields = {
                self.config.identifier_field: identifier,
                self.config.canonical_key_field: key,
            }
            self.store.persist_record(record_id, fields)
        except SequenceExhaustedError as e:
            logger.warning(f"Cannot assign LPN to {record_id}: {e}")
            return AssignmentResult(success=False, record_id=record_id, key=key, error=SEQUENCE_EXHAUSTED)
        except StoreError as e:
            if sequence is not None:
                logger.error(f"Sequence {sequence} was reserved for {record_id} but not persisted; it is unused")
            logger.error(f"Failed to persist LPN for {record_id}: {e}")
            return AssignmentResult(success=False, record_id=record_id, key=key, error=f"{PERSISTENCE_FAILED}: {e}")

        record.update(fields)
        logger.info(f"{'Reused' if reused else 'Assigned'} LPN {identifier} for {key} on {record_id}")
        return AssignmentResult(
            success=True,
            record_id=record_id,
            identifier=identifier,
            key=key,
            sequence=sequence,
            hash=part_hash,
            reused=reused,
        )

    def assign_batch(self, records: Sequence[Dict[str, Any]]) -> BatchAssignmentResult:
        """Assign LPNs one record after another; failures never stop the batch."""
        batch = BatchAssignmentResult()
        for record in records:
            batch.results.append(self.assign(record))
        logger.info(f"Batch LPN assignment: {len(batch.succeeded)} assigned, {len(batch.failed)} failed")
        return batch
