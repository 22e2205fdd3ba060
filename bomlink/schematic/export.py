"""Clipboard-style export of schematic components."""

import logging
from typing import Any, Dict, Mapping, Optional

from ..config import BomConfig
from ..designators import get_component_type
from ..schema import DESIGNATOR_FIELD, MPN_FIELD
from .model import SchematicComponent, SchematicModel

logger = logging.getLogger(__name__)

SUMMARY_FIELDS = ["Reference", "Value", "Footprint", "MPN", "Manufacturer", "Description", "Datasheet"]


def export_component(model: SchematicModel, designator: str) -> Optional[str]:
    """Return the symbol definition text followed by the instance text.

    Both parts are copied verbatim from the parsed file, so the result can be
    pasted back into the schematic editor. An instance whose lib_id has no
    definition exports as the instance text alone.

    Returns:
        The concatenated text, or None if ``designator`` is not in the model
    """
    if not designator:
        return None
    component = model.instances.get(designator.strip())
    if component is None:
        return None
    definition = model.definitions.get(component.lib_id)
    if definition is None:
        logger.debug(f"No definition for {component.lib_id}; exporting instance only")
        return component.raw_text
    return definition + component.raw_text


def build_component_summary(
    record: Mapping[str, Any],
    component: Optional[SchematicComponent] = None,
    config: Optional[BomConfig] = None,
) -> Dict[str, Any]:
    """Merge a BOM record with its schematic counterpart for display.

    BOM values win; empty ones fall back to the schematic properties.

    Returns:
        Dict with ``reference``, ``type``, ``value``, ``footprint``, an ordered
        ``fields`` list of name/value pairs and a plain-text ``copy_text``
    """
    config = config or BomConfig()
    properties = component.properties if component is not None else {}

    def pick(name: str) -> str:
        value = record.get(name) or properties.get(name) or ""
        return str(value)

    reference = str(record.get(DESIGNATOR_FIELD) or record.get("Reference") or "REF?")
    values = {
        "Reference": reference,
        "Value": pick("Value"),
        "Footprint": pick("Footprint"),
        "MPN": str(record.get(MPN_FIELD) or ""),
        "Manufacturer": str(record.get("Manufacturer") or ""),
        "Description": pick("Description"),
        "Datasheet": pick("Datasheet"),
    }

    copy_lines = []
    for name in SUMMARY_FIELDS:
        shown = values[name]
        if name == "Manufacturer" and not shown:
            shown = "N/A"
        copy_lines.append(f"{name}: {shown}")

    return {
        "reference": reference,
        "type": get_component_type(reference, config.designator_meanings),
        "value": values["Value"],
        "footprint": values["Footprint"],
        "fields": [{"name": name, "value": values[name]} for name in SUMMARY_FIELDS],
        "copy_text": "\n".join(copy_lines),
    }
