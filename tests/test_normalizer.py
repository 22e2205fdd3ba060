"""Test suite for field normalization."""

import pytest

from bomlink.config import BomConfig
from bomlink.linker import extract_part_key
from bomlink.normalizer import BomNormalizer


@pytest.fixture
def normalizer():
    return BomNormalizer()


class TestFindDesignatorColumn:
    
    def test_primary_column_wins(self, normalizer):
        assert normalizer.find_designator_column(["Reference", "Designator"]) == "Designator"
    
    def test_alternates_in_order(self, normalizer):
        assert normalizer.find_designator_column(["Ref", "RefDes", "Value"]) == "RefDes"
    
    def test_no_candidate(self, normalizer):
        assert normalizer.find_designator_column(["Value", "Footprint"]) is None
        assert normalizer.find_designator_column([]) is None
    
    def test_configured_alternates(self):
        normalizer = BomNormalizer(BomConfig(alternate_designator_columns=["Bauteil"]))
        
        assert normalizer.find_designator_column(["Bauteil", "Ref"]) == "Bauteil"


class TestNormalizeRow:
    
    def test_designator_copied_to_canonical_field(self, normalizer):
        record = {"id": "1", "Reference": "R1", "Value": "1k"}
        
        normalized = normalizer.normalize_row(record, "Reference")
        
        assert normalized["Designator"] == "R1"
        assert normalized["Reference"] == "R1"
    
    def test_mapping_fills_empty_target(self, normalizer):
        record = {"Designator": "U1", "Part Number": "STM32F407VGT6", "Mfr": "ST"}
        
        normalized = normalizer.normalize_row(record, "Designator")
        
        assert normalized["Mfr. Part #"] == "STM32F407VGT6"
        assert normalized["Manufacturer"] == "ST"
    
    def test_mapping_does_not_overwrite_existing_value(self, normalizer):
        record = {"Designator": "U1", "MPN": "OLD-1", "Mfr. Part #": "NEW-2"}
        
        normalized = normalizer.normalize_row(record, "Designator")
        
        assert normalized["Mfr. Part #"] == "NEW-2"
    
    def test_mapping_fills_blank_existing_target(self, normalizer):
        record = {"Designator": "U1", "MPN": "ABC", "Mfr. Part #": "  "}
        
        normalized = normalizer.normalize_row(record, "Designator")
        
        assert normalized["Mfr. Part #"] == "ABC"
    
    def test_mpn_beats_internal_part_number(self, normalizer):
        record = {"Designator": "U1", "Part Number": "INT-0007", "MPN": "STM32F407VGT6"}

        normalized = normalizer.normalize_row(record, "Designator")

        assert normalized["Mfr. Part #"] == "STM32F407VGT6"
        assert normalized["Part Number"] == "INT-0007"

    def test_part_number_synonyms_follow_key_priority(self, normalizer):
        record = {"Designator": "U1", "Part#": "LOW", "MPN": "HIGH"}

        normalized = normalizer.normalize_row(record, "Designator")

        assert normalized["Mfr. Part #"] == extract_part_key(record) == "HIGH"

    def test_other_designator_synonym_ignored(self, normalizer):
        record = {"id": "1", "Reference": "R7", "Ref": "SHEET2"}

        normalized = normalizer.normalize_row(record, "Reference")

        assert normalized["Designator"] == "R7"

    def test_empty_source_is_not_copied(self, normalizer):
        record = {"Designator": "U1", "MPN": ""}
        
        normalized = normalizer.normalize_row(record, "Designator")
        
        assert "Mfr. Part #" not in normalized
    
    def test_quantity_synonym_overwrites_canonical(self, normalizer):
        record = {"Designator": "R1", "Qty": "4", "Quantity": "1"}
        
        normalized = normalizer.normalize_row(record, "Designator")
        
        assert normalized["Quantity"] == "4"
        assert "Qty" not in normalized
    
    def test_legacy_quantity_dropped(self, normalizer):
        record = {"Designator": "R1", "Qty": "", "Quantity": "2"}
        
        normalized = normalizer.normalize_row(record, "Designator")
        
        assert normalized["Quantity"] == "2"
        assert "Qty" not in normalized
    
    def test_legacy_quantity_kept_without_canonical(self, normalizer):
        record = {"Designator": "R1", "Qty": ""}
        
        normalized = normalizer.normalize_row(record, "Designator")
        
        assert normalized["Qty"] == ""
        assert "Quantity" not in normalized
    
    def test_configured_quantity_synonym(self):
        config = BomConfig(field_mappings={"Qty.": "Quantity"})
        record = {"Designator": "R1", "Qty.": "7", "Quantity": "1"}
        
        normalized = BomNormalizer(config).normalize_row(record, "Designator")
        
        assert normalized["Quantity"] == "7"
    
    def test_input_not_mutated(self, normalizer):
        record = {"id": "1", "Ref": "C3", "Qty": "1", "Part#": "X"}
        snapshot = dict(record)
        
        normalizer.normalize_row(record, "Ref")
        
        assert record == snapshot
    
    def test_normalize_list(self, normalizer):
        records = [{"RefDes": "R1"}, {"RefDes": "R2"}]
        
        normalized = normalizer.normalize(records, "RefDes")
        
        assert [r["Designator"] for r in normalized] == ["R1", "R2"]


class TestMappingReport:
    
    def test_report(self, normalizer):
        report = normalizer.get_mapping_report(["Designator", "MPN", "Qty", "Notes"])
        
        assert report["mapped"]["Mfr. Part #"] == ["MPN"]
        assert report["mapped"]["Quantity"] == ["Qty"]
        assert report["mapped"]["Designator"] == ["Designator"]
        assert report["unmapped"] == ["Notes"]
        assert report["designator_column"] == "Designator"
    
    def test_report_without_designator(self, normalizer):
        report = normalizer.get_mapping_report(["Value"])
        
        assert report["designator_column"] is None
