"""Canonical field names and column synonym lists for BOM component records."""

from typing import Dict, List

# Record bookkeeping fields added by the flattener
ID_FIELD = "id"
PROJECT_FIELD = "ProjectName"

# Canonical field names
DESIGNATOR_FIELD = "Designator"
QUANTITY_FIELD = "Quantity"
MPN_FIELD = "Mfr. Part #"
IDENTIFIER_FIELD = "Local_Part_Number"

# Columns tried (in order) when the primary designator column is missing
ALTERNATE_DESIGNATOR_COLUMNS: List[str] = ["Reference", "RefDes", "Ref"]

# Source column -> canonical field. When several sources feed one field the
# last one present wins, so part-number synonyms run in rising MPN_FIELDS priority.
DEFAULT_FIELD_MAPPINGS: Dict[str, str] = {
    "Part#": MPN_FIELD,
    "Part Number": MPN_FIELD,
    "MPN": MPN_FIELD,
    "Reference": DESIGNATOR_FIELD,
    "Ref": DESIGNATOR_FIELD,
    "RefDes": DESIGNATOR_FIELD,
    "Qty": QUANTITY_FIELD,
    "Description": "Description",
    "Desc": "Description",
    "Value": "Value",
    "Package": "Footprint",
    "Manufacturer": "Manufacturer",
    "Mfr": "Manufacturer",
}

# Column names that carry a quantity under another name
QUANTITY_SYNONYMS: List[str] = ["Qty", "Qty.", "Qnty", "Qty Required"]

# Always tried last when looking for a quantity column
QUANTITY_FALLBACKS: List[str] = ["qty", "quantity", "qnt", "count", "amount"]

# Quantity fields dropped once the canonical quantity field is filled
LEGACY_QUANTITY_FIELDS: List[str] = ["Qty"]

# Ordered field names that may hold the manufacturer part number.
# The first non-empty one is the canonical part key.
MPN_FIELDS: List[str] = [
    MPN_FIELD,
    "MPN",
    "Manufacturer Part Number",
    "Part Number",
    "PartNumber",
    "Part#",
]

# Local Part Number layout: PREFIX-DDDDD-HHHHHH
LPN_PREFIX = "KL"
MIN_SEQUENCE = 1
MAX_SEQUENCE = 99999

# Schematic references starting with this marker are power/flag symbols
POWER_MARKER = "#"

# Designator prefix -> component type
DEFAULT_DESIGNATOR_MAP: Dict[str, str] = {
    "R": "Resistor",
    "C": "Capacitor",
    "L": "Inductor",
    "D": "Diode",
    "Q": "Transistor",
    "U": "Integrated Circuit",
    "IC": "Integrated Circuit",
    "J": "Connector",
    "P": "Connector",
    "SW": "Switch",
    "F": "Fuse",
    "T": "Transformer",
    "K": "Relay",
    "X": "Crystal/Oscillator",
    "Y": "Crystal",
    "BT": "Battery",
    "TP": "Test Point",
    "FID": "Fiducial",
    "FB": "Ferrite Bead",
    "RN": "Resistor Network",
}

UNSPECIFIED_TYPE = "Unspecified"

__all__ = [
    "ID_FIELD",
    "PROJECT_FIELD",
    "DESIGNATOR_FIELD",
    "QUANTITY_FIELD",
    "MPN_FIELD",
    "IDENTIFIER_FIELD",
    "ALTERNATE_DESIGNATOR_COLUMNS",
    "DEFAULT_FIELD_MAPPINGS",
    "QUANTITY_SYNONYMS",
    "QUANTITY_FALLBACKS",
    "LEGACY_QUANTITY_FIELDS",
    "MPN_FIELDS",
    "LPN_PREFIX",
    "MIN_SEQUENCE",
    "MAX_SEQUENCE",
    "POWER_MARKER",
    "DEFAULT_DESIGNATOR_MAP",
    "UNSPECIFIED_TYPE",
]
