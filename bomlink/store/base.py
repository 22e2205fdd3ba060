"""
Component store interface.

The store owns the persisted component records and the shared LPN sequence
counter. The identifier assigner only talks to it through this interface,
so any backend (Postgres, an in-process dict, a remote service) can sit
behind it.
"""

from typing import Optional, Dict, Any, List


class ComponentStore:
    """
    Abstract component store interface.
    
    Implement this interface with your actual storage backend.
    get_next_sequence() must be atomic: no two callers may ever receive the
    same sequence number, even concurrently.
    """
    
    def get_next_sequence(self) -> int:
        """
        Reserve the next LPN sequence number.
        
        Returns:
            The reserved sequence number (1..99999)
            
        Raises:
            SequenceExhaustedError: If the counter has passed 99999
            StoreError: If the counter cannot be read or written
        """
        raise NotImplementedError
    
    def find_identifier_by_key(self, key: str) -> Optional[str]:
        """
        Look up an identifier already assigned to a part key.
        
        Keys compare trimmed and case-insensitively against the canonical
        part-number field of stored records.
        
        Args:
            key: Canonical part key
            
        Returns:
            The existing identifier, or None if no record with this key has one
        """
        raise NotImplementedError
    
    def persist_record(self, record_id: str, fields: Dict[str, Any]) -> None:
        """
        Write fields onto an existing record.
        
        Args:
            record_id: Record id
            fields: Field name -> value pairs to set
            
        Raises:
            StoreError: If the record does not exist or the write fails
        """
        raise NotImplementedError
    
    def add_records(self, records: List[Dict[str, Any]]) -> int:
        """
        Insert component records. Each record must carry an ``id``.
        
        Returns:
            Number of records stored
        """
        raise NotImplementedError
    
    def get_record(self, record_id: str) -> Optional[Dict[str, Any]]:
        """Return a copy of a record, or None."""
        raise NotImplementedError
    
    def list_records(self, project_name: Optional[str] = None) -> List[Dict[str, Any]]:
        """Return all records, optionally only those of one project."""
        raise NotImplementedError
    
    def delete_record(self, record_id: str) -> bool:
        """Delete one record; returns False if it did not exist."""
        raise NotImplementedError
    
    def delete_project(self, project_name: str) -> int:
        """Delete every record of a project; returns the number deleted."""
        raise NotImplementedError
