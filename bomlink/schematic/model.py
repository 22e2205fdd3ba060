"""Data classes produced by :class:`bomlink.schematic.parser.SchematicParser`."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class SchematicMetadata:
    """Title-block fields. The UI layer may edit these after parsing."""
    title: str = ""
    date: str = ""
    rev: str = ""
    company: str = ""


@dataclass
class SchematicComponent:
    """One placed symbol instance.

    ``raw_text`` is the instance block exactly as it appeared in the file,
    line endings included.
    """
    reference: str
    lib_id: str
    properties: Dict[str, str] = field(default_factory=dict)
    raw_text: str = ""

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.properties.get(name, default)


@dataclass
class SchematicModel:
    definitions: Dict[str, str] = field(default_factory=dict)
    instances: Dict[str, SchematicComponent] = field(default_factory=dict)
    metadata: SchematicMetadata = field(default_factory=SchematicMetadata)
    skipped_count: int = 0
    dropped_count: int = 0
    unresolved: List[str] = field(default_factory=list)
    duplicate_references: List[str] = field(default_factory=list)
    file_name: Optional[str] = None
    content_hash: str = ""

    @property
    def component_count(self) -> int:
        return len(self.instances)

    def is_resolved(self, reference: str) -> bool:
        """True if the instance's lib_id has a definition in this model."""
        component = self.instances.get(reference)
        return component is not None and component.lib_id in self.definitions

    def summary(self) -> Dict[str, object]:
        return {
            "file_name": self.file_name,
            "title": self.metadata.title,
            "date": self.metadata.date,
            "rev": self.metadata.rev,
            "company": self.metadata.company,
            "definitions": len(self.definitions),
            "components": len(self.instances),
            "skipped": self.skipped_count,
            "dropped": self.dropped_count,
            "unresolved": len(self.unresolved),
            "duplicates": len(self.duplicate_references),
        }
