"""Reference designator helpers."""

import re
from typing import Dict, List, Optional

from .schema import DEFAULT_DESIGNATOR_MAP, UNSPECIFIED_TYPE

_SEPARATORS = re.compile(r"[,;]\s*|\s+")
_PREFIX = re.compile(r"^[A-Z]+")


def split_designators(cell: Optional[str]) -> List[str]:
    """Split a designator cell on commas, semicolons or whitespace runs.

    Empty tokens are dropped, so ``"R1, R2;;R3  R4"`` gives four designators
    and a blank cell gives an empty list.
    """
    if cell is None:
        return []
    return [token.strip() for token in _SEPARATORS.split(str(cell)) if token and token.strip()]


def get_component_type(designator: Optional[str], custom_map: Optional[Dict[str, str]] = None) -> str:
    """Return the component type for a designator from its letter prefix.

    Args:
        designator: Designator such as ``"R101"`` or ``"sw2"``
        custom_map: Prefix -> type overrides merged over the default map

    Returns:
        Component type, or ``"Unspecified"`` when the prefix is unknown
    """
    if not designator or not isinstance(designator, str):
        return UNSPECIFIED_TYPE

    combined = dict(DEFAULT_DESIGNATOR_MAP)
    if custom_map:
        combined.update({k.upper(): v for k, v in custom_map.items()})

    match = _PREFIX.match(designator.strip().upper())
    if match:
        return combined.get(match.group(0), UNSPECIFIED_TYPE)
    return UNSPECIFIED_TYPE
