"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        DsaManagerError: Base exception for all application errors.
        InvalidInputError: User-facing, recoverable input errors.
        ContractViolationError: Broken engine preconditions.
        ConfigurationError: Configuration-related errors.

    Configuration:
        Settings: Main application settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Configure structlog explicitly.
        setup_logging: Apply the logging settings.
        reset_logging: Restore structlog defaults.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        clear_context: Clear logging context.
"""

from __future__ import annotations

from dsa_manager.core.config import (
    DataSettings,
    DiceSettings,
    InitiativeSettings,
    RulesSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)
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
from dsa_manager.core.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    reset_logging,
    setup_logging,
)


__all__ = [
    # Exceptions
    "ErrorKind",
    "DsaManagerError",
    "InvalidInputError",
    "DiceRollError",
    "FacilitationError",
    "NameLookupError",
    "DataFormatError",
    "ContractViolationError",
    "ConfigurationError",
    # Configuration
    "Settings",
    "RulesSettings",
    "DiceSettings",
    "InitiativeSettings",
    "DataSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "setup_logging",
    "reset_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
