"""Custom exception hierarchy for the DSA check manager.

All exceptions inherit from DsaManagerError, enabling unified error
handling at the command boundary while preserving domain-specific
context. Every exception carries an ErrorKind so callers can tell
user-facing input problems (re-issue the command) apart from contract
violations (a bug in the calling code).

Example:
    >>> from dsa_manager.core.exceptions import DiceRollError
    >>> raise DiceRollError("Invalid die type: 0", expression="2d0")
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorKind(StrEnum):
    """Category of an error."""

    INVALID_INPUT = "invalid_input"
    CONTRACT = "contract"
    CONFIGURATION = "configuration"


class DsaManagerError(Exception):
    """Base exception for all DSA manager errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
        kind: Category of the error.
    """

    kind: ErrorKind = ErrorKind.INVALID_INPUT

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        """Return a detailed string representation of the exception.

        Returns:
            String representation suitable for debugging.
        """
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Invalid Input (user-facing, recoverable)
# =============================================================================


class InvalidInputError(DsaManagerError):
    """Base exception for malformed or unresolvable user input.

    These errors are always recoverable by re-issuing the command with
    corrected input; nothing is retried automatically.
    """

    kind = ErrorKind.INVALID_INPUT


class DiceRollError(InvalidInputError):
    """Raised when a dice expression cannot be parsed or exceeds limits."""

    def __init__(
        self,
        message: str,
        *,
        expression: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize dice roll error with expression context.

        Args:
            message: Human-readable error description.
            expression: The offending part of the dice expression.
            details: Optional dictionary containing additional error context.
        """
        combined_details = dict(details or {})
        if expression is not None:
            combined_details["expression"] = expression
        super().__init__(message, details=combined_details)


class FacilitationError(InvalidInputError):
    """Raised when a facilitation argument is not a valid integer or pair."""

    def __init__(
        self,
        message: str,
        *,
        argument: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        combined_details = dict(details or {})
        if argument is not None:
            combined_details["argument"] = argument
        super().__init__(message, details=combined_details)


class NameLookupError(InvalidInputError):
    """Raised when a fuzzy name lookup finds no match or more than one.

    Attributes:
        search: The search term entered by the user.
        candidates: Names that matched; empty when nothing matched.
    """

    def __init__(
        self,
        message: str,
        *,
        search: str,
        candidates: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize lookup error with search context.

        Args:
            message: Human-readable error description.
            search: The search term that failed.
            candidates: Conflicting names for an ambiguous search.
            details: Optional dictionary containing additional error context.
        """
        self.search = search
        self.candidates = list(candidates or [])
        combined_details = dict(details or {})
        combined_details["search"] = search
        if self.candidates:
            combined_details["candidates"] = self.candidates
        super().__init__(message, details=combined_details)

    @property
    def is_ambiguous(self) -> bool:
        """Whether the search matched more than one name."""
        return len(self.candidates) > 1


class DataFormatError(InvalidInputError):
    """Raised when rule or character data cannot be read or validated."""

    def __init__(
        self,
        message: str,
        *,
        source_file: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        combined_details = dict(details or {})
        if source_file:
            combined_details["source_file"] = source_file
        super().__init__(message, details=combined_details)


# =============================================================================
# Contract Violations (programming errors)
# =============================================================================


class ContractViolationError(DsaManagerError):
    """Raised when a trusted caller breaks an engine precondition.

    Examples are an inverted random range or a facilitation vector whose
    length differs from the number of attribute lines. These are bugs and
    are never coerced into a valid input.
    """

    kind = ErrorKind.CONTRACT


# =============================================================================
# Configuration
# =============================================================================


class ConfigurationError(DsaManagerError):
    """Raised when application configuration is invalid."""

    kind = ErrorKind.CONFIGURATION

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = dict(details or {})
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


__all__ = [
    "ErrorKind",
    "DsaManagerError",
    "InvalidInputError",
    "DiceRollError",
    "FacilitationError",
    "NameLookupError",
    "DataFormatError",
    "ContractViolationError",
    "ConfigurationError",
]
