"""Tests for designator helpers and configuration."""

import pytest

from bomlink.config import BomConfig
from bomlink.designators import get_component_type, split_designators


class TestSplitDesignators:
    
    @pytest.mark.parametrize("cell,expected", [
        ("R1", ["R1"]),
        ("R1,R2", ["R1", "R2"]),
        ("R1, R2;R3", ["R1", "R2", "R3"]),
        ("R1  R2\tR3", ["R1", "R2", "R3"]),
        ("R1,,;R2", ["R1", "R2"]),
        (" , ; ", []),
        ("", []),
        (None, []),
    ])
    def test_split(self, cell, expected):
        assert split_designators(cell) == expected


class TestComponentType:
    
    @pytest.mark.parametrize("designator,expected", [
        ("R12", "Resistor"),
        ("c3", "Capacitor"),
        ("U1", "Integrated Circuit"),
        ("SW2", "Switch"),
        ("TP4", "Test Point"),
        ("ZZ1", "Unspecified"),
        ("", "Unspecified"),
        (None, "Unspecified"),
    ])
    def test_default_map(self, designator, expected):
        assert get_component_type(designator) == expected
    
    def test_custom_map(self):
        assert get_component_type("ant1", {"ant": "Antenna"}) == "Antenna"
        assert get_component_type("R1", {"R": "Resistor (custom)"}) == "Resistor (custom)"


class TestBomConfig:
    
    def test_defaults(self):
        config = BomConfig()
        
        assert config.designator_column == "Designator"
        assert config.lpn_prefix == "KL"
        assert config.mpn_fields[0] == "Mfr. Part #"
    
    def test_prefix_uppercased(self):
        assert BomConfig(lpn_prefix="ab").lpn_prefix == "AB"
    
    @pytest.mark.parametrize("prefix", ["K", "KLM", "K1", ""])
    def test_invalid_prefix(self, prefix):
        with pytest.raises(ValueError):
            BomConfig(lpn_prefix=prefix)
    
    def test_round_trip(self):
        config = BomConfig(alternate_designator_columns=["Bauteil"], quantity_synonyms=["Menge"])
        
        restored = BomConfig.from_dict(config.to_dict())
        
        assert restored == config
    
    def test_from_dict_ignores_unknown_keys(self):
        config = BomConfig.from_dict({"lpn_prefix": "XY", "theme": "dark"})
        
        assert config.lpn_prefix == "XY"
    
    def test_defaults_not_shared(self):
        first = BomConfig()
        first.field_mappings["Foo"] = "Bar"
        
        assert "Foo" not in BomConfig().field_mappings
    
    def test_quantity_candidates(self):
        candidates = BomConfig().quantity_candidates()
        
        assert candidates[0] == "Quantity"
        assert "Qty" in candidates
        assert "qty" not in candidates
        assert candidates[-1] == "amount"
    
    def test_is_quantity_synonym(self):
        config = BomConfig()
        
        assert config.is_quantity_synonym("Qty")
        assert config.is_quantity_synonym("QTY REQUIRED")
        assert not config.is_quantity_synonym("Quantity")
        assert not config.is_quantity_synonym("Value")
