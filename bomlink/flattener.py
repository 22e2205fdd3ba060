"""BOM flattening: one component record per physical designator.

A BOM row often lists several designators in one cell (``"R1, R2, R3"``).
The flattener splits such rows into one record per designator. Rows that list
several designators *and* a quantity greater than one are ambiguous: the
quantity may be per designator or the row total. Those rows are never guessed
at; they come back as :class:`AmbiguousRow` artifacts for the caller to
resolve with :func:`resolve_ambiguous`.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence
from uuid import uuid4

from .config import BomConfig
from .designators import split_designators
from .schema import ID_FIELD, PROJECT_FIELD

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"^[+-]?\d+")


def parse_quantity(value: Any) -> Optional[int]:
    """Parse the leading integer of a quantity cell (``"3 pcs"`` -> 3).

    Returns None when the cell has no leading integer.
    """
    if value is None:
        return None
    match = _LEADING_INT.match(str(value).strip())
    return int(match.group(0)) if match else None


def find_quantity_column(headers: Sequence[str], config: Optional[BomConfig] = None) -> Optional[str]:
    """Return the header holding quantities, or None.

    Candidates are tried in order (canonical name, configured synonyms, hard
    fallbacks); the first one matching a header case-insensitively wins.
    """
    config = config or BomConfig()
    by_lower = {}
    for header in headers:
        if header is None:
            continue
        by_lower.setdefault(header.strip().lower(), header)
    for candidate in config.quantity_candidates():
        header = by_lower.get(candidate.strip().lower())
        if header is not None:
            return header
    return None


@dataclass
class AmbiguousRow:
    """A multi-designator row whose quantity is greater than one.

    ``row`` holds the full source row plus the ``id`` and project fields.
    """
    id: str
    project_name: str
    row: Dict[str, str]
    designators: List[str]
    original_quantity: str
    quantity_column: str
    designator_column: str


@dataclass
class FlattenResult:
    records: List[Dict[str, str]] = field(default_factory=list)
    ambiguous: List[AmbiguousRow] = field(default_factory=list)
    skipped_rows: int = 0
    source_rows: int = 0
    # ids of records whose quantity was missing or not a positive integer
    corrected_quantities: List[str] = field(default_factory=list)

    @property
    def designator_count(self) -> int:
        return len(self.records)


class AmbiguityResolution(str, Enum):
    FLATTEN = "flatten"  # one record per designator, quantity 1
    KEEP = "keep"        # single record, listed quantity kept
    SKIP = "skip"        # drop the row


class BomFlattener:
    """Splits BOM rows into per-designator component records.

    Record ids are unique within one flattener instance: each id carries a
    random run token and a counter that only ever increases.
    """

    def __init__(self, config: Optional[BomConfig] = None):
        self.config = config or BomConfig()
        self._run_token = uuid4().hex[:8]
        self._counter = 0

    def _next_id(self, project_name: str, designator: str) -> str:
        safe = re.sub(r"[^A-Za-z0-9_-]", "_", designator.strip())
        record_id = f"{project_name}-{safe}-{self._run_token}-{self._counter}"
        self._counter += 1
        return record_id

    def _base_record(self, row: Mapping[str, Any], headers: Sequence[str], project_name: str, record_id: str) -> Dict[str, str]:
        record = {ID_FIELD: record_id, PROJECT_FIELD: project_name}
        for header in headers:
            value = row.get(header)
            record[header] = "" if value is None else str(value)
        return record

    def _quantity_cells(self, columns: Sequence[str], quantity_column: Optional[str]) -> List[str]:
        """Columns the normalizer may read a quantity from."""
        targets = {self.config.quantity_field}
        if quantity_column:
            targets.add(quantity_column)
        targets.update(
            source for source, target in (self.config.field_mappings or {}).items()
            if target == self.config.quantity_field
        )
        return [column for column in columns if column in targets]

    def _write_quantity(self, record: Dict[str, str], quantity_column: Optional[str], quantity: int) -> None:
        for column in self._quantity_cells(list(record), quantity_column):
            record[column] = str(quantity)

    def flatten(
        self,
        rows: Sequence[Mapping[str, Any]],
        headers: Sequence[str],
        designator_column: str,
        project_name: str,
        quantity_column: Optional[str] = None,
    ) -> FlattenResult:
        """Flatten rows into component records.

        Args:
            rows: Row mappings from an adapter
            headers: Ordered column names
            designator_column: Column holding the designator cell
            project_name: Tag stored on every record
            quantity_column: Explicit quantity column (resolved from headers if omitted)

        Returns:
            FlattenResult with flattened records and ambiguous artifacts
        """
        result = FlattenResult()
        if not rows or not headers or not project_name or not designator_column:
            return result

        if quantity_column is None:
            quantity_column = find_quantity_column(headers, self.config)

        for row in rows:
            if not row:
                continue
            result.source_rows += 1

            designators = split_designators(row.get(designator_column))
            if not designators:
                result.skipped_rows += 1
                continue

            if len(designators) == 1:
                record = self._base_record(row, headers, project_name, self._next_id(project_name, designators[0]))
                record[designator_column] = designators[0]
                if quantity_column:
                    quantity = parse_quantity(row.get(quantity_column))
                    if quantity is None or quantity < 1:
                        logger.warning(
                            f"Row '{designators[0]}' has quantity {row.get(quantity_column)!r}; counting it as 1"
                        )
                        result.corrected_quantities.append(record[ID_FIELD])
                        quantity = 1
                    self._write_quantity(record, quantity_column, quantity)
                result.records.append(record)
                continue

            quantity = parse_quantity(row.get(quantity_column)) if quantity_column else None
            if quantity is not None and quantity > 1:
                cell = str(row.get(designator_column) or "").strip()
                artifact_id = self._next_id(project_name, cell)
                artifact = AmbiguousRow(
                    id=artifact_id,
                    project_name=project_name,
                    row=self._base_record(row, headers, project_name, artifact_id),
                    designators=designators,
                    original_quantity=str(row.get(quantity_column)).strip(),
                    quantity_column=quantity_column,
                    designator_column=designator_column,
                )
                logger.debug(
                    f"Ambiguous row '{cell}': {len(designators)} designators, quantity {quantity}"
                )
                result.ambiguous.append(artifact)
                continue

            for designator in designators:
                record = self._base_record(row, headers, project_name, self._next_id(project_name, designator))
                record[designator_column] = designator
                if quantity_column:
                    self._write_quantity(record, quantity_column, 1)
                result.records.append(record)

        logger.info(
            f"Flattened {result.source_rows} rows into {len(result.records)} records "
            f"({len(result.ambiguous)} ambiguous, {result.skipped_rows} skipped)"
        )
        return result

    def resolve_ambiguous(self, artifact: AmbiguousRow, resolution: AmbiguityResolution) -> List[Dict[str, str]]:
        """Turn an ambiguous row into records according to the caller's choice."""
        resolution = AmbiguityResolution(resolution)

        if resolution is AmbiguityResolution.SKIP:
            return []

        if resolution is AmbiguityResolution.KEEP:
            record = dict(artifact.row)
            self._write_quantity(record, artifact.quantity_column, parse_quantity(artifact.original_quantity))
            return [record]

        records = []
        for designator in artifact.designators:
            record = dict(artifact.row)
            record[ID_FIELD] = self._next_id(artifact.project_name, designator)
            record[artifact.designator_column] = designator
            self._write_quantity(record, artifact.quantity_column, 1)
            records.append(record)
        return records

    def resolve_all(
        self,
        artifacts: Sequence[AmbiguousRow],
        resolutions: Mapping[str, AmbiguityResolution],
    ) -> List[Dict[str, str]]:
        """Resolve many artifacts; ``resolutions`` maps artifact id to a choice.

        Artifacts without a resolution are left out.
        """
        records = []
        for artifact in artifacts:
            choice = resolutions.get(artifact.id)
            if choice is None:
                logger.debug(f"No resolution for ambiguous row {artifact.id}")
                continue
            records.extend(self.resolve_ambiguous(artifact, choice))
        return records
