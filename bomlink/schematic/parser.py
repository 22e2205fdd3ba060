"""Line-oriented parser for KiCad ``.kicad_sch`` schematic files.

Only the parts needed to recover components are understood: the
``lib_symbols`` library block with its symbol definitions, top-level symbol
instances with their ``property`` and ``lib_id`` entries, and the title
block. Everything else is carried along verbatim inside the raw text of
whichever block it appears in.

The scan is a small state machine. Each open block sits on a stack together
with the parenthesis depth at which it opened; a block closes when the
running depth falls back to that value.
"""

import hashlib
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Union

from ..config import BomConfig
from ..errors import BomParseError
from .model import SchematicComponent, SchematicMetadata, SchematicModel

logger = logging.getLogger(__name__)

_QUOTED = r'"((?:[^"\\]|\\.)*)"'

LIBRARY_MARKER = re.compile(r"^\(lib_symbols(?:\s|\)|$)")
DEFINITION_MARKER = re.compile(r'^\(symbol\s+(?:' + _QUOTED + r'|([^\s()"]+))')
INSTANCE_MARKER = re.compile(r"^\(symbol(?:\s|$)")
PROPERTY_PATTERN = re.compile(r"\(property\s+" + _QUOTED + r"\s+" + _QUOTED)
LIB_ID_PATTERN = re.compile(r'\(lib_id\s+(?:' + _QUOTED + r'|([^\s()"]+))\s*\)')

METADATA_PATTERNS = {
    name: re.compile(r"\(" + name + r"\s+" + _QUOTED + r"\s*\)")
    for name in ("title", "date", "rev", "company")
}

REFERENCE_PROPERTY = "Reference"


class ParserState(Enum):
    IDLE = "idle"
    IN_LIBRARY_BLOCK = "in_library_block"
    IN_DEFINITION = "in_definition"
    IN_INSTANCE = "in_instance"


@dataclass
class _Block:
    state: ParserState
    open_depth: int
    name: str = ""
    lines: List[str] = field(default_factory=list)
    properties: Dict[str, str] = field(default_factory=dict)
    lib_id: Optional[str] = None


def unescape(value: str) -> str:
    """Undo KiCad string escaping of quotes and backslashes."""
    return re.sub(r'\\(["\\])', r"\1", value)


def paren_delta(line: str) -> int:
    """Net change in parenthesis depth for one line.

    Parentheses inside double-quoted strings do not count. A backslash inside
    a string escapes the next character.
    """
    delta = 0
    in_string = False
    escaped = False
    for ch in line:
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
        elif ch == "(":
            delta += 1
        elif ch == ")":
            delta -= 1
    return delta


def extract_metadata(text: str) -> SchematicMetadata:
    """Find title-block values by direct search; missing ones stay empty."""
    values = {}
    for name, pattern in METADATA_PATTERNS.items():
        match = pattern.search(text)
        values[name] = unescape(match.group(1)) if match else ""
    return SchematicMetadata(**values)


class SchematicParser:
    """Builds a :class:`SchematicModel` from schematic text.

    The parser keeps no state between calls, so the same instance can parse
    any number of files and results can be cached by ``content_hash``.
    """

    def __init__(self, config: Optional[BomConfig] = None):
        self.config = config or BomConfig()

    def parse_file(self, file_path: Union[str, Path]) -> SchematicModel:
        """Read and parse a schematic file.

        The file is decoded as UTF-8 (a leading byte-order mark is allowed).
        Line endings are kept as-is so raw text matches the file byte for byte.

        Raises:
            FileNotFoundError: If the file does not exist
            BomParseError: If the file is not valid UTF-8
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")
        try:
            text = path.read_bytes().decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise BomParseError(f"Schematic file is not valid UTF-8: {e}")
        return self.parse(text, file_name=path.name)

    def parse(self, text: str, file_name: Optional[str] = None) -> SchematicModel:
        """Parse schematic text into definitions and instances.

        Args:
            text: Full schematic file content
            file_name: Name recorded on the model

        Returns:
            SchematicModel; malformed or unknown constructs never raise
        """
        text = text or ""
        model = SchematicModel(
            file_name=file_name,
            content_hash=hashlib.sha256(text.encode("utf-8")).hexdigest(),
            metadata=extract_metadata(text),
        )

        stack: List[_Block] = []
        depth = 0

        for line in text.splitlines(keepends=True):
            stripped = line.strip()
            state = stack[-1].state if stack else ParserState.IDLE

            if state is ParserState.IDLE:
                if LIBRARY_MARKER.match(stripped):
                    stack.append(_Block(ParserState.IN_LIBRARY_BLOCK, depth))
                elif INSTANCE_MARKER.match(stripped):
                    stack.append(_Block(ParserState.IN_INSTANCE, depth))
            elif state is ParserState.IN_LIBRARY_BLOCK:
                match = DEFINITION_MARKER.match(stripped)
                if match and depth == stack[-1].open_depth + 1:
                    lib_id = unescape(match.group(1)) if match.group(1) is not None else match.group(2)
                    stack.append(_Block(ParserState.IN_DEFINITION, depth, name=lib_id))

            top = stack[-1] if stack else None
            if top is not None and top.state in (ParserState.IN_DEFINITION, ParserState.IN_INSTANCE):
                top.lines.append(line)
                if top.state is ParserState.IN_INSTANCE:
                    self._scan_instance_line(top, line)

            depth += paren_delta(line)

            while stack and depth <= stack[-1].open_depth:
                self._close_block(stack.pop(), model)

        for block in reversed(stack):
            logger.warning(f"Unterminated {block.state.value} block at end of {file_name or 'schematic'}")
            if block.state is ParserState.IN_INSTANCE:
                model.dropped_count += 1

        model.unresolved = [
            reference for reference, component in model.instances.items()
            if component.lib_id not in model.definitions
        ]
        if model.unresolved:
            logger.warning(f"{len(model.unresolved)} instances reference unknown symbols: {', '.join(model.unresolved)}")
        if model.duplicate_references:
            logger.warning(
                f"{len(model.duplicate_references)} duplicate references kept first instance: "
                f"{', '.join(model.duplicate_references)}"
            )

        logger.info(
            f"Parsed {file_name or 'schematic'}: {len(model.definitions)} definitions, "
            f"{len(model.instances)} components, {model.skipped_count} power symbols, "
            f"{model.dropped_count} dropped"
        )
        return model

    def _scan_instance_line(self, block: _Block, line: str) -> None:
        for match in PROPERTY_PATTERN.finditer(line):
            name = unescape(match.group(1))
            if name not in block.properties:
                block.properties[name] = unescape(match.group(2))
        if block.lib_id is None:
            match = LIB_ID_PATTERN.search(line)
            if match:
                block.lib_id = unescape(match.group(1)) if match.group(1) is not None else match.group(2)

    def _close_block(self, block: _Block, model: SchematicModel) -> None:
        if block.state is ParserState.IN_DEFINITION:
            if block.name in model.definitions:
                logger.debug(f"Duplicate symbol definition '{block.name}' ignored")
                return
            model.definitions[block.name] = "".join(block.lines)
            return

        if block.state is not ParserState.IN_INSTANCE:
            return

        reference = block.properties.get(REFERENCE_PROPERTY, "").strip()
        if reference.startswith(self.config.power_marker):
            model.skipped_count += 1
            return
        if not reference or not block.lib_id:
            logger.debug(f"Dropped symbol block without reference or lib_id (reference={reference!r})")
            model.dropped_count += 1
            return
        if reference in model.instances:
            logger.debug(f"Duplicate reference {reference}")
            model.duplicate_references.append(reference)
            return

        model.instances[reference] = SchematicComponent(
            reference=reference,
            lib_id=block.lib_id,
            properties=dict(block.properties),
            raw_text="".join(block.lines),
        )
