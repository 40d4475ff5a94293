"""Tests for the rule dataset and fuzzy lookup."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from dsa_manager.core.exceptions import DataFormatError, NameLookupError
from dsa_manager.models.rules import (
    Ambiguous,
    Found,
    NotFound,
    RuleDataset,
    load_rule_dataset,
    match_search,
)


NAMES = [("körperkraft", 1), ("kraftakt", 2), ("klettern", 3)]


class TestMatchSearch:
    """Tests for case-insensitive substring lookup."""

    def test_unique_substring(self) -> None:
        """Test a substring with a single match."""
        assert match_search(NAMES, "lett") == Found(name="klettern", value=3)

    def test_case_insensitive(self) -> None:
        """Test the search ignores case."""
        assert match_search(NAMES, "KLETTERN") == Found(name="klettern", value=3)

    def test_ambiguous(self) -> None:
        """Test a substring matching several names reports all of them."""
        result = match_search(NAMES, "kraft")

        assert isinstance(result, Ambiguous)
        assert set(result.candidates) == {"körperkraft", "kraftakt"}

    def test_start_anchor(self) -> None:
        """Test a leading underscore anchors at the start."""
        assert match_search(NAMES, "_kraft") == Found(name="kraftakt", value=2)

    def test_end_anchor(self) -> None:
        """Test a trailing underscore anchors at the end."""
        assert match_search(NAMES, "kraft_") == Found(name="körperkraft", value=1)

    def test_both_anchors(self) -> None:
        """Test anchoring at both ends requires an exact name."""
        assert isinstance(match_search(NAMES, "_kraft_"), NotFound)

    def test_not_found(self) -> None:
        """Test a search without matches."""
        assert match_search(NAMES, "schwimmen") == NotFound(search="schwimmen")


class TestUnwrap:
    """Tests for converting lookup results into values or errors."""

    def test_found(self) -> None:
        """Test unwrapping a single match."""
        assert match_search(NAMES, "lett").unwrap() == ("klettern", 3)

    def test_not_found_raises(self) -> None:
        """Test unwrapping a failed lookup."""
        with pytest.raises(NameLookupError) as exc_info:
            match_search(NAMES, "xyz").unwrap()

        assert exc_info.value.message == 'No matches found for "xyz"'
        assert exc_info.value.is_ambiguous is False

    def test_ambiguous_raises_with_candidates(self) -> None:
        """Test unwrapping an ambiguous lookup lists the candidates."""
        with pytest.raises(NameLookupError) as exc_info:
            match_search(NAMES, "kraft").unwrap()

        assert exc_info.value.is_ambiguous is True
        assert '"körperkraft"' in exc_info.value.message
        assert '"_"' in exc_info.value.message


class TestRuleDataset:
    """Tests for the dataset schema and loader."""

    def test_short_name(self, sample_rules: RuleDataset) -> None:
        """Test attribute short names."""
        assert sample_rules.attribute_short_name("mut") == "MU"
        assert sample_rules.attribute_short_name("MUT") == "MU"

    def test_short_name_falls_back_to_id(self, sample_rules: RuleDataset) -> None:
        """Test unknown attributes display their id."""
        assert sample_rules.attribute_short_name("sozialstatus") == "sozialstatus"

    def test_load(self, tmp_path: Path, sample_rules_data: dict[str, Any]) -> None:
        """Test loading a dataset from disk."""
        path = tmp_path / "rules.json"
        path.write_text(json.dumps(sample_rules_data), encoding="utf-8")

        dataset = load_rule_dataset(path)

        assert dataset.version == 2
        assert dataset.talents["klettern"].attributes == ("mut", "gewandtheit", "körperkraft")
        assert dataset.combat_techniques["bögen"].ranged is True

    def test_load_missing_file(self, tmp_path: Path) -> None:
        """Test a missing file raises DataFormatError."""
        with pytest.raises(DataFormatError) as exc_info:
            load_rule_dataset(tmp_path / "missing.json")

        assert "source_file" in exc_info.value.details

    def test_load_invalid_data(self, tmp_path: Path) -> None:
        """Test a talent without attributes is rejected."""
        path = tmp_path / "rules.json"
        path.write_text(json.dumps({"talents": {"klettern": {"attributes": []}}}), encoding="utf-8")

        with pytest.raises(DataFormatError):
            load_rule_dataset(path)
