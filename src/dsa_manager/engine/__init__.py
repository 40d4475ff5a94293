"""Check resolution and initiative engine.

The engine is a pure, synchronous computation library. It performs no
I/O and holds no global state; every resolver receives its randomness
source explicitly.

Submodules:
    randomness: Injected uniform integer sources
    dice: Free-form dice expressions (NdM+K...)
    facilitation: Situational modifiers per attribute line
    checks: Attribute, skill, combat, spell and chant check resolution
    initiative: Initiative order with recursive tie-breaking

Example:
    >>> from dsa_manager.engine import (
    ...     AttributeLine, Facilitation, SimpleCheck, ConfirmableCrits,
    ...     SystemRandomSource, resolve_check,
    ... )
    >>> lines = [AttributeLine(label="MU", level=12)]
    >>> result = resolve_check(
    ...     lines, SimpleCheck(), ConfirmableCrits(),
    ...     Facilitation.neutral(1), SystemRandomSource(),
    ... )
    >>> result.passed
"""

from __future__ import annotations

# =============================================================================
# Randomness
# =============================================================================
from dsa_manager.engine.randomness import (
    RandomSource,
    ScriptedRandomSource,
    SystemRandomSource,
    gameplay_random,
    seeded_random,
)

# =============================================================================
# Dice Expressions
# =============================================================================
from dsa_manager.engine.dice import (
    DiceExpression,
    DiceRoller,
    DiceTerm,
    RolledDie,
    parse_expression,
    roll_expression,
)

# =============================================================================
# Checks
# =============================================================================
from dsa_manager.engine.facilitation import (
    Facilitation,
    build_facilitation,
    parse_facilitation,
)
from dsa_manager.engine.checks import (
    AttributeLine,
    CheckKind,
    CheckResult,
    ConfirmableCrits,
    CritRule,
    NoCrits,
    PointsCheck,
    SimpleCheck,
    ThresholdCrits,
    quality_level,
    resolve_check,
)

# =============================================================================
# Initiative
# =============================================================================
from dsa_manager.engine.initiative import (
    IniOutcome,
    IniParticipant,
    InitiativeResult,
    resolve_initiative,
)


__all__ = [
    # Randomness
    "RandomSource",
    "SystemRandomSource",
    "ScriptedRandomSource",
    "gameplay_random",
    "seeded_random",
    # Dice
    "DiceExpression",
    "DiceRoller",
    "DiceTerm",
    "RolledDie",
    "parse_expression",
    "roll_expression",
    # Facilitation
    "Facilitation",
    "build_facilitation",
    "parse_facilitation",
    # Checks
    "AttributeLine",
    "CheckKind",
    "CheckResult",
    "SimpleCheck",
    "PointsCheck",
    "CritRule",
    "NoCrits",
    "ConfirmableCrits",
    "ThresholdCrits",
    "quality_level",
    "resolve_check",
    # Initiative
    "IniParticipant",
    "IniOutcome",
    "InitiativeResult",
    "resolve_initiative",
]
