"""Pytest configuration and shared fixtures.

This module provides common fixtures for the DSA check manager test
suite: settings isolation, randomness sources and sample game data.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest


if TYPE_CHECKING:
    from collections.abc import Generator
    from pathlib import Path

    from dsa_manager.core.config import Settings
    from dsa_manager.engine.randomness import SystemRandomSource
    from dsa_manager.models.character import Character
    from dsa_manager.models.rules import RuleDataset


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[None, None, None]:
    """Isolate every test from .env files, cached settings and logging setup."""
    from dsa_manager.core.config import clear_settings_cache
    from dsa_manager.core.logging import reset_logging

    monkeypatch.chdir(tmp_path)
    for key in (
        "DSA_MANAGER_RULES_CRIT_RULES",
        "DSA_MANAGER_RULES_CRIT_THRESHOLD",
        "DSA_MANAGER_DATA_RULES_PATH",
        "DSA_MANAGER_DATA_CHARACTER_PATH",
        "DSA_MANAGER_LOG_LEVEL",
        "DSA_MANAGER_DEBUG",
    ):
        monkeypatch.delenv(key, raising=False)
    clear_settings_cache()
    reset_logging()
    yield
    clear_settings_cache()
    reset_logging()


@pytest.fixture
def settings() -> Settings:
    """Default settings."""
    from dsa_manager.core.config import Settings

    return Settings()


# =============================================================================
# Randomness Fixtures
# =============================================================================


@pytest.fixture
def seeded_source() -> SystemRandomSource:
    """A SystemRandomSource with a fixed seed for reproducible tests."""
    from dsa_manager.engine.randomness import SystemRandomSource

    return SystemRandomSource(seed=42)


# =============================================================================
# Game Data Fixtures
# =============================================================================


@pytest.fixture
def sample_rules_data() -> dict[str, Any]:
    """Provide a small rule dataset as raw JSON-compatible data."""
    return {
        "version": 2,
        "attributes": {
            "mut": {"short_name": "MU"},
            "klugheit": {"short_name": "KL"},
            "intuition": {"short_name": "IN"},
            "charisma": {"short_name": "CH"},
            "fingerfertigkeit": {"short_name": "FF"},
            "gewandtheit": {"short_name": "GE"},
            "konstitution": {"short_name": "KO"},
            "körperkraft": {"short_name": "KK"},
        },
        "talents": {
            "klettern": {"attributes": ["mut", "gewandtheit", "körperkraft"]},
            "kraftakt": {"attributes": ["konstitution", "körperkraft", "körperkraft"]},
            "sinnesschärfe": {"attributes": ["klugheit", "intuition", "intuition"]},
            "körperbeherrschung": {"attributes": ["gewandtheit", "gewandtheit", "konstitution"]},
        },
        "combat_techniques": {
            "schwerter": {"attributes": ["gewandtheit", "körperkraft"], "ranged": False},
            "bögen": {"attributes": ["fingerfertigkeit"], "ranged": True},
            "raufen": {"attributes": ["gewandtheit", "körperkraft"], "ranged": False},
        },
        "spells": {
            "ignifaxius": {"attributes": ["mut", "klugheit", "charisma"]},
        },
        "chants": {
            "segen": {"attributes": ["mut", "intuition", "charisma"]},
        },
    }


@pytest.fixture
def sample_rules(sample_rules_data: dict[str, Any]) -> RuleDataset:
    """Create a RuleDataset from the sample data."""
    from dsa_manager.models.rules import RuleDataset

    return RuleDataset.model_validate(sample_rules_data)


@pytest.fixture
def sample_character_data() -> dict[str, Any]:
    """Provide sample character data as exported to JSON."""
    return {
        "name": "Alrik",
        "attributes": [
            {"id": "mut", "level": 14},
            {"id": "klugheit", "level": 12},
            {"id": "intuition", "level": 13},
            {"id": "charisma", "level": 11},
            {"id": "fingerfertigkeit", "level": 12},
            {"id": "gewandtheit", "level": 13},
            {"id": "konstitution", "level": 12},
            {"id": "körperkraft", "level": 15},
        ],
        "skills": [
            {"id": "klettern", "level": 7},
            {"id": "kraftakt", "level": 10},
        ],
        "combattechniques": [
            {"id": "schwerter", "level": 12},
            {"id": "bögen", "level": 9},
            {"ruleelement": {"name": "Kettenpeitsche"}, "level": 8},
        ],
        "spells": [
            {"id": "ignifaxius", "level": 6},
            {
                "ruleelement": {
                    "name": "Flammenwand",
                    "check": ["mut", "klugheit", "konstitution"],
                },
                "level": 4,
            },
        ],
        "chants": [
            {"id": "segen"},
        ],
    }


@pytest.fixture
def sample_character(sample_character_data: dict[str, Any]) -> Character:
    """Create a sample Character instance."""
    from dsa_manager.models.character import Character

    return Character.model_validate(sample_character_data)
