"""Integration tests for the check flow.

Tests complete scenarios from configured data files through check
resolution to rendered output.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from dsa_manager import (
    CheckCommand,
    CheckRequest,
    get_settings,
    load_character,
    load_rule_dataset,
    parse_custom_participants,
    render_check,
    render_initiative,
    render_roll,
    roll_dice,
    roll_initiative,
    run_check,
)
from dsa_manager.engine.checks import ConfirmableCrits
from dsa_manager.engine.randomness import ScriptedRandomSource, seeded_random


@pytest.fixture
def data_files(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    sample_rules_data: dict[str, Any],
    sample_character_data: dict[str, Any],
) -> tuple[Path, Path]:
    """Write the sample data to disk and point the settings at it."""
    rules_path = tmp_path / "rules.json"
    character_path = tmp_path / "alrik.json"
    rules_path.write_text(json.dumps(sample_rules_data), encoding="utf-8")
    character_path.write_text(json.dumps(sample_character_data), encoding="utf-8")
    monkeypatch.setenv("DSA_MANAGER_DATA_RULES_PATH", str(rules_path))
    monkeypatch.setenv("DSA_MANAGER_DATA_CHARACTER_PATH", str(character_path))
    return rules_path, character_path


class TestCheckFlow:
    """Test complete check scenarios."""

    def test_configured_skill_check(self, data_files: tuple[Path, Path]) -> None:
        """Load configured data, roll a skill check and render it."""
        settings = get_settings()
        rules = load_rule_dataset(settings.data.rules_path)
        character = load_character(settings.data.character_path)

        report = run_check(
            CheckRequest(command=CheckCommand.SKILL, target="kraftakt"),
            character,
            rules,
            ScriptedRandomSource([12, 15, 20]),
            settings,
        )

        # KO 12, KK 15, KK 15: only the 20 costs 5 of 10 points
        assert report.result.remaining_points == 5
        assert report.result.quality == 2
        text = render_check(report)
        assert text.startswith("Alrik, Check for Kraftakt (level 10)")
        assert "Remaining points: 5" in text

    def test_alternative_crits_from_environment(
        self, data_files: tuple[Path, Path], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Switch the house rule through the environment."""
        monkeypatch.setenv("DSA_MANAGER_RULES_CRIT_RULES", "alternative_crits")
        settings = get_settings()
        rules = load_rule_dataset(settings.data.rules_path)
        character = load_character(settings.data.character_path)

        report = run_check(
            CheckRequest(command=CheckCommand.SKILL, target="klettern"),
            character,
            rules,
            ScriptedRandomSource([1, 8, 9, 3]),
            settings,
        )

        assert report.crit_rule == ConfirmableCrits()
        assert report.result.crit_successes == 1
        assert "Crit roll:" in render_check(report)

    def test_seeded_checks_are_reproducible(self, data_files: tuple[Path, Path]) -> None:
        """The same seed yields the same report."""
        settings = get_settings()
        rules = load_rule_dataset(settings.data.rules_path)
        character = load_character(settings.data.character_path)
        request = CheckRequest(command=CheckCommand.SPELL, target="igni", facilitation="-1")

        first = run_check(request, character, rules, seeded_random(99), settings)
        second = run_check(request, character, rules, seeded_random(99), settings)

        assert first.result == second.result
        assert len(first.result.rolls) == 3


class TestInitiativeAndDiceFlow:
    """Test initiative and free dice rolls from the command layer."""

    def test_initiative_with_custom_participants(self, data_files: tuple[Path, Path]) -> None:
        """Roll initiative for a character and two custom opponents."""
        character = load_character(get_settings().data.character_path)
        extras = parse_custom_participants(["Ork", "12", "Goblin", "9"])

        result = roll_initiative([character], seeded_random(5), extra_participants=extras)

        assert sorted(outcome.name for outcome in result.order) == ["Alrik", "Goblin", "Ork"]
        assert render_initiative(result).startswith("Initiative:")

    def test_dice(self) -> None:
        """Roll a free dice expression."""
        expression = roll_dice("3w6+2", seeded_random(1))

        assert 5 <= expression.total <= 20
        assert render_roll(expression).endswith(f"Total: {expression.total}")
