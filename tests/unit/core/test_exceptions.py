"""Tests for the exception hierarchy."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from dsa_manager.core.exceptions import (
    ConfigurationError,
    ContractViolationError,
    DataFormatError,
    DiceRollError,
    DsaManagerError,
    ErrorKind,
    FacilitationError,
    InvalidInputError,
    NameLookupError,
)


class TestDsaManagerError:
    """Tests for the base DsaManagerError exception."""

    def test_basic_message(self) -> None:
        """Test exception with basic message."""
        exc = DsaManagerError("Test error message")
        assert exc.message == "Test error message"
        assert exc.details == {}
        assert str(exc) == "Test error message"

    def test_with_details(self) -> None:
        """Test exception with additional details."""
        exc = DsaManagerError(
            "Test error",
            details={"key": "value", "count": 42},
        )
        assert exc.details == {"key": "value", "count": 42}
        assert "key='value'" in str(exc)
        assert "count=42" in str(exc)

    def test_repr(self) -> None:
        """Test exception repr output."""
        exc = DsaManagerError("Test", details={"x": 1})
        repr_str = repr(exc)
        assert "DsaManagerError" in repr_str
        assert "Test" in repr_str
        assert "x" in repr_str


class TestErrorKinds:
    """Tests for error categories."""

    @pytest.mark.parametrize(
        ("exc", "kind"),
        [
            (DiceRollError("bad"), ErrorKind.INVALID_INPUT),
            (FacilitationError("bad"), ErrorKind.INVALID_INPUT),
            (NameLookupError("bad", search="x"), ErrorKind.INVALID_INPUT),
            (DataFormatError("bad"), ErrorKind.INVALID_INPUT),
            (ContractViolationError("bug"), ErrorKind.CONTRACT),
            (ConfigurationError("bad"), ErrorKind.CONFIGURATION),
        ],
    )
    def test_kind(self, exc: DsaManagerError, kind: ErrorKind) -> None:
        """Test every exception reports its category."""
        assert exc.kind == kind

    def test_invalid_input_is_not_contract_violation(self) -> None:
        """Test the two main branches do not overlap."""
        assert not issubclass(InvalidInputError, ContractViolationError)
        assert not issubclass(ContractViolationError, InvalidInputError)


class TestInputExceptions:
    """Tests for user-facing input exceptions."""

    def test_dice_roll_error_with_expression(self) -> None:
        """Test DiceRollError with expression."""
        exc = DiceRollError("Invalid die type: 0", expression="2d0")
        assert exc.details["expression"] == "2d0"
        assert isinstance(exc, InvalidInputError)

    def test_facilitation_error_with_argument(self) -> None:
        """Test FacilitationError with argument."""
        exc = FacilitationError("Unable to parse facilitation", argument="abc")
        assert exc.details["argument"] == "abc"

    def test_lookup_not_found(self) -> None:
        """Test NameLookupError without candidates."""
        exc = NameLookupError("No matches", search="xyz")
        assert exc.search == "xyz"
        assert exc.candidates == []
        assert exc.is_ambiguous is False
        assert "candidates" not in exc.details

    def test_lookup_ambiguous(self) -> None:
        """Test NameLookupError with candidates."""
        exc = NameLookupError("Ambiguous", search="kraft", candidates=["kraftakt", "körperkraft"])
        assert exc.is_ambiguous is True
        assert exc.details["candidates"] == ["kraftakt", "körperkraft"]

    def test_data_format_error_with_source_file(self) -> None:
        """Test DataFormatError with source file."""
        exc = DataFormatError("Invalid", source_file="rules.json")
        assert exc.details["source_file"] == "rules.json"


class TestConfigurationError:
    """Tests for configuration exceptions."""

    def test_configuration_error_with_key(self) -> None:
        """Test ConfigurationError with config key."""
        exc = ConfigurationError("Missing file", config_key="data")
        assert exc.details["config_key"] == "data"

    def test_catchable_as_base(self) -> None:
        """Test that all errors can be caught as DsaManagerError."""
        with pytest.raises(DsaManagerError):
            raise ConfigurationError("boom")


class TestDetailsOwnership:
    """Tests that exceptions never modify the details passed in."""

    @pytest.mark.parametrize(
        "factory",
        [
            lambda details: DiceRollError("bad", expression="1d", details=details),
            lambda details: FacilitationError("bad", argument="x", details=details),
            lambda details: NameLookupError("bad", search="x", candidates=["a", "b"], details=details),
            lambda details: DataFormatError("bad", source_file="rules.json", details=details),
            lambda details: ConfigurationError("bad", config_key="data", details=details),
        ],
    )
    def test_caller_details_unchanged(
        self, factory: Callable[[dict[str, Any]], DsaManagerError]
    ) -> None:
        """Test context keys are added to a copy of the caller's dict."""
        details = {"origin": "test"}

        exc = factory(details)

        assert details == {"origin": "test"}
        assert exc.details["origin"] == "test"
        assert len(exc.details) > 1
