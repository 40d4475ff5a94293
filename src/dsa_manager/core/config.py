"""Configuration management for the DSA check manager.

This module provides centralized configuration management using
pydantic-settings, supporting environment variables, .env files, and
runtime configuration overrides.

Example:
    >>> from dsa_manager.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.rules.crit_rules)
    'default_crits'

Environment Variables:
    DSA_MANAGER_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    DSA_MANAGER_RULES_CRIT_RULES: Crit house rule for skill checks
    DSA_MANAGER_RULES_CRIT_THRESHOLD: Extreme rolls needed for a default crit
    DSA_MANAGER_DICE_MAX_DICE: Maximum number of dice in one term
    DSA_MANAGER_DICE_MAX_TERMS: Maximum number of terms in one expression
    DSA_MANAGER_INI_MAX_TIEBREAK_ROUNDS: Safety bound for initiative tie-breaks
    DSA_MANAGER_DATA_RULES_PATH: Path to the rule dataset JSON file
    DSA_MANAGER_DATA_CHARACTER_PATH: Path to a character JSON file
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from dsa_manager.core.exceptions import ConfigurationError


if TYPE_CHECKING:
    from dsa_manager.engine.checks import CritRule


class RulesSettings(BaseSettings):
    """Configuration for the house rules applied to checks.

    Attributes:
        crit_rules: Crit handling for skill, spell and chant checks.
            'no_crits' disables crits, 'default_crits' requires
            crit_threshold extreme rolls within one check and
            'alternative_crits' confirms every extreme roll.
        crit_threshold: Number of 1s (or 20s) needed for a default crit.
    """

    model_config = SettingsConfigDict(
        env_prefix="DSA_MANAGER_RULES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    crit_rules: Literal["no_crits", "default_crits", "alternative_crits"] = Field(
        default="default_crits",
        description="Crit rule for skill checks",
    )
    crit_threshold: int = Field(
        default=2,
        ge=1,
        description="Extreme rolls required for a default crit",
    )

    def skill_crit_rule(self) -> CritRule:
        """Translate the configured crit rule into an engine crit rule.

        Returns:
            The CritRule used for skill, spell and chant checks.
        """
        from dsa_manager.engine.checks import ConfirmableCrits, NoCrits, ThresholdCrits

        if self.crit_rules == "no_crits":
            return NoCrits()
        if self.crit_rules == "alternative_crits":
            return ConfirmableCrits()
        return ThresholdCrits(required=self.crit_threshold)


class DiceSettings(BaseSettings):
    """Limits for free-form dice expressions.

    Attributes:
        max_dice: Maximum number of dice in a single term.
        max_terms: Maximum number of terms in an expression.
    """

    model_config = SettingsConfigDict(
        env_prefix="DSA_MANAGER_DICE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    max_dice: int = Field(default=100, ge=1, le=10_000, description="Maximum dice per term")
    max_terms: int = Field(default=20, ge=1, le=1_000, description="Maximum terms per expression")


class InitiativeSettings(BaseSettings):
    """Configuration for initiative resolution."""

    model_config = SettingsConfigDict(
        env_prefix="DSA_MANAGER_INI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    max_tiebreak_rounds: int = Field(
        default=32,
        ge=1,
        le=1_000,
        description="Tie-break rounds before falling back to input order",
    )


class DataSettings(BaseSettings):
    """Locations of the rule dataset and character files.

    Attributes:
        rules_path: JSON file with attributes, talents, spells, chants and
            combat techniques.
        character_path: JSON file describing the active character.
    """

    model_config = SettingsConfigDict(
        env_prefix="DSA_MANAGER_DATA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    rules_path: Path | None = Field(default=None, description="Rule dataset JSON file")
    character_path: Path | None = Field(default=None, description="Character JSON file")

    @field_validator("rules_path", "character_path", mode="after")
    @classmethod
    def ensure_file_exists(cls, value: Path | None) -> Path | None:
        """Reject configured data paths that do not point at a file.

        Args:
            value: The configured path, if any.

        Returns:
            The validated path.

        Raises:
            ConfigurationError: If the path is set but is not a file.
        """
        if value is not None and not value.is_file():
            raise ConfigurationError(
                f"Configured data file does not exist: {value}",
                config_key="data",
            )
        return value


class Settings(BaseSettings):
    """Main application settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Enable debug mode.
        log_level: Application logging level.
        rules: House rule settings.
        dice: Dice expression limits.
        initiative: Initiative resolution settings.
        data: Data file locations.
    """

    model_config = SettingsConfigDict(
        env_prefix="DSA_MANAGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(default="DSA Check Manager", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    rules: RulesSettings = Field(default_factory=RulesSettings)
    dice: DiceSettings = Field(default_factory=DiceSettings)
    initiative: InitiativeSettings = Field(default_factory=InitiativeSettings)
    data: DataSettings = Field(default_factory=DataSettings)

    @property
    def is_production(self) -> bool:
        """Check if running in production mode.

        Returns:
            True if not in debug mode.
        """
        return not self.debug


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The application Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except ConfigurationError:
        raise
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access.

    This is primarily useful for testing or when environment variables
    have changed at runtime.
    """
    get_settings.cache_clear()


__all__ = [
    "RulesSettings",
    "DiceSettings",
    "InitiativeSettings",
    "DataSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
