"""DSA Check Manager - rules resolution for Das Schwarze Auge.

Resolves attribute, skill, combat, spell and chant checks into
pass/fail/quality outcomes and rolls initiative with tie-breaking.

Example:
    >>> from dsa_manager import (
    ...     CheckCommand, CheckRequest, SystemRandomSource, run_check,
    ... )
    >>> request = CheckRequest(command=CheckCommand.SKILL, target="klettern")
    >>> report = run_check(request, character, rules, SystemRandomSource())
    >>> print(render_check(report))

Modules:
    core: Configuration, logging, and base exceptions.
    engine: Randomness, dice expressions, checks and initiative.
    models: Rule dataset, fuzzy lookup and character schema.
    commands: Command enum and check builders.
    ui: Plain-text rendering.
"""

from __future__ import annotations

# Core
from dsa_manager.core.config import Settings, get_settings
from dsa_manager.core.exceptions import DsaManagerError, InvalidInputError
from dsa_manager.core.logging import configure_logging, get_logger, setup_logging

# Engine
from dsa_manager.engine import (
    AttributeLine,
    CheckResult,
    Facilitation,
    IniParticipant,
    InitiativeResult,
    RandomSource,
    SystemRandomSource,
    resolve_check,
    resolve_initiative,
    roll_expression,
)

# Data
from dsa_manager.models import Character, RuleDataset, load_character, load_rule_dataset

# Commands
from dsa_manager.commands import (
    CheckCommand,
    CheckReport,
    CheckRequest,
    parse_custom_participants,
    roll_dice,
    roll_initiative,
    run_check,
)
from dsa_manager.ui import render_check, render_initiative, render_roll


__version__ = "0.1.0"
__all__ = [
    "__version__",
    # Core
    "DsaManagerError",
    "InvalidInputError",
    "Settings",
    "get_settings",
    "configure_logging",
    "setup_logging",
    "get_logger",
    # Engine
    "AttributeLine",
    "CheckResult",
    "Facilitation",
    "IniParticipant",
    "InitiativeResult",
    "RandomSource",
    "SystemRandomSource",
    "resolve_check",
    "resolve_initiative",
    "roll_expression",
    # Data
    "Character",
    "RuleDataset",
    "load_character",
    "load_rule_dataset",
    # Commands
    "CheckCommand",
    "CheckRequest",
    "CheckReport",
    "run_check",
    "roll_initiative",
    "roll_dice",
    "parse_custom_participants",
    # Presentation
    "render_check",
    "render_initiative",
    "render_roll",
]
