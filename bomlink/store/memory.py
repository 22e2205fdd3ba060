"""In-process component store, used by tests and scripts."""

import copy
import logging
import threading
from typing import Optional, Dict, Any, List

from ..errors import SequenceExhaustedError, StoreError
from ..schema import ID_FIELD, IDENTIFIER_FIELD, MAX_SEQUENCE, MIN_SEQUENCE, MPN_FIELD, PROJECT_FIELD
from .base import ComponentStore

logger = logging.getLogger(__name__)


class InMemoryComponentStore(ComponentStore):
    """
    Dict-backed ComponentStore.
    
    Sequence reservation is guarded by a lock, so the store can be shared
    between threads. Records are copied on the way in and out.
    """
    
    def __init__(
        self,
        next_sequence: int = MIN_SEQUENCE,
        key_field: str = MPN_FIELD,
        identifier_field: str = IDENTIFIER_FIELD
    ):
        """
        Args:
            next_sequence: First value get_next_sequence() will return
            key_field: Canonical part-number field queried by find_identifier_by_key()
            identifier_field: Field holding assigned identifiers
        """
        self._next_sequence = next_sequence
        self.key_field = key_field
        self.identifier_field = identifier_field
        self._records: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()
    
    def get_next_sequence(self) -> int:
        with self._lock:
            sequence = self._next_sequence
            if sequence > MAX_SEQUENCE:
                raise SequenceExhaustedError(
                    f"LPN sequence exhausted: {sequence} is past the maximum of {MAX_SEQUENCE}"
                )
            self._next_sequence = sequence + 1
            return sequence
    
    def find_identifier_by_key(self, key: str) -> Optional[str]:
        wanted = (key or "").strip().upper()
        if not wanted:
            return None
        with self._lock:
            for record in self._records.values():
                stored_key = str(record.get(self.key_field) or "").strip().upper()
                identifier = str(record.get(self.identifier_field) or "").strip()
                if stored_key == wanted and identifier:
                    return identifier
        return None
    
    def persist_record(self, record_id: str, fields: Dict[str, Any]) -> None:
        with self._lock:
            record = self._records.get(record_id)
            if record is None:
                raise StoreError(f"Record {record_id} not found")
            record.update(fields)
    
    def add_records(self, records: List[Dict[str, Any]]) -> int:
        count = 0
        with self._lock:
            for record in records:
                record_id = record.get(ID_FIELD)
                if not record_id:
                    raise StoreError("Cannot store a record without an id")
                self._records[record_id] = copy.deepcopy(record)
                count += 1
        logger.debug(f"Stored {count} records")
        return count
    
    def get_record(self, record_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            record = self._records.get(record_id)
            return copy.deepcopy(record) if record is not None else None
    
    def list_records(self, project_name: Optional[str] = None) -> List[Dict[str, Any]]:
        with self._lock:
            return [
                copy.deepcopy(record) for record in self._records.values()
                if project_name is None or record.get(PROJECT_FIELD) == project_name
            ]
    
    def delete_record(self, record_id: str) -> bool:
        with self._lock:
            return self._records.pop(record_id, None) is not None
    
    def delete_project(self, project_name: str) -> int:
        with self._lock:
            doomed = [rid for rid, record in self._records.items() if record.get(PROJECT_FIELD) == project_name]
            for rid in doomed:
                del self._records[rid]
        return len(doomed)
