#!/usr/bin/env python3
"""Example: import a BOM, link it to a KiCad schematic and assign LPNs.

Records are kept in Postgres when BOMLINK_DB_URL (or the BOMLINK_DB_HOST
family of variables) is set, in memory otherwise. Variables may be put in a
.env file next to this script's project root.
"""

import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from bomlink import BomParser, SchematicParser, IdentifierAssigner, link_components, export_component
from bomlink.adapters.csv_adapter import CsvAdapter
from bomlink.adapters.excel_adapter import ExcelAdapter
from bomlink.store import InMemoryComponentStore, PostgresComponentStore

project_root = Path(__file__).parent.parent
load_dotenv(project_root / ".env")

logger = logging.getLogger("link_schematic")


def open_store():
    if os.getenv("BOMLINK_DB_URL") or os.getenv("BOMLINK_DB_HOST"):
        store = PostgresComponentStore()
        store.ensure_schema()
        return store
    return InMemoryComponentStore()


def link_schematic(bom_file: str, schematic_file: str, project_name: str, output_file: str = None):
    """Run the whole pipeline for one project.
    
    Ambiguous BOM rows are listed and left out; resolve them in the BOM
    (or with BomParser.resolve_ambiguous) and run again.
    """
    parser = BomParser()
    parser.register_adapter(CsvAdapter())
    parser.register_adapter(ExcelAdapter())
    
    imported = parser.process_file(bom_file, project_name)
    if not imported.success:
        print(f"✗ {imported.error}")
        return None
    
    print(f"✓ Imported {imported.count} components from {bom_file}")
    for artifact in imported.ambiguous:
        print(
            f"  ? {', '.join(artifact.designators)}: quantity {artifact.original_quantity} "
            f"for {len(artifact.designators)} designators, left out"
        )
    
    model = SchematicParser().parse_file(schematic_file)
    print(f"✓ Parsed {model.component_count} components from {schematic_file}")
    if model.metadata.title:
        print(f"  Title: {model.metadata.title}  Rev: {model.metadata.rev or '-'}")
    
    result = link_components(imported.records, model, project_name=project_name)
    summary = result.summary()
    print(f"\nLinked: {summary['matched']}")
    print(f"  BOM only: {summary['unmatched_bom']}")
    print(f"  Schematic only: {summary['unmatched_schematic']}")
    for component in result.unmatched_schematic:
        print(f"    {component.reference} ({component.lib_id})")
    
    store = open_store()
    try:
        store.add_records(imported.records)
        batch = IdentifierAssigner(store).assign_batch(imported.records)
        print(f"\nLPNs assigned: {len(batch.succeeded)}, failed: {len(batch.failed)}")
        for failure in batch.failed:
            print(f"  {failure.record_id}: {failure.error}")
    finally:
        if isinstance(store, PostgresComponentStore):
            store.close()
    
    if result.matched:
        first = result.matched[0]
        print(f"\nClipboard text for {first.reference}:")
        print(export_component(model, first.reference))
    
    if output_file:
        print(f"✓ Output saved to: {parser.export(imported.records, output_file)}")
    
    return result


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    
    if len(sys.argv) < 4:
        print("Usage: python link_schematic.py <bom_file> <schematic_file> <project_name> [output_file]")
        print("\nExample:")
        print("  python link_schematic.py bom.csv board.kicad_sch MainBoard linked_bom.xlsx")
        sys.exit(1)
    
    link_schematic(sys.argv[1], sys.argv[2], sys.argv[3], sys.argv[4] if len(sys.argv) > 4 else None)
