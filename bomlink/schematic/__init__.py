from .model import SchematicComponent, SchematicMetadata, SchematicModel
from .parser import SchematicParser, ParserState
from .export import export_component, build_component_summary

__all__ = [
    "SchematicComponent",
    "SchematicMetadata",
    "SchematicModel",
    "SchematicParser",
    "ParserState",
    "export_component",
    "build_component_summary",
]
