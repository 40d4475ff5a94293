"""Check resolution: the rules core.

A check rolls one d20 per attribute line. A roll above the line's level
(plus its facilitation) costs the difference from a running points
counter; a roll of 1 never costs anything. Simple checks start the
counter at 0, so any overage fails them. Points checks start it at the
skill level plus bonus and derive a quality level from what is left.

Extreme rolls (1 and 20) are evaluated by one of three crit rules:

- NoCrits: ignored.
- ConfirmableCrits: every 1 and every 20 is confirmed by a second d20
  against the unmodified line level.
- ThresholdCrits(n): one crit success when at least n lines rolled a 1,
  one crit failure when at least n lines rolled a 20.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TypeAlias

from pydantic import BaseModel, ConfigDict, Field

from dsa_manager.core.exceptions import ContractViolationError
from dsa_manager.core.logging import get_logger
from dsa_manager.engine.facilitation import Facilitation
from dsa_manager.engine.randomness import RandomSource


logger = get_logger(__name__)

CRIT_SUCCESS_ROLL = 1
CRIT_FAILURE_ROLL = 20
MIN_QUALITY = 1
MAX_QUALITY = 6


# =============================================================================
# Check and Crit Variants
# =============================================================================


@dataclass(frozen=True)
class SimpleCheck:
    """Binary check without a points budget (attributes, attack, parry, dodge)."""


@dataclass(frozen=True)
class PointsCheck:
    """Check with a points budget that absorbs overages (skills, spells, chants)."""

    available_points: int


CheckKind: TypeAlias = SimpleCheck | PointsCheck


@dataclass(frozen=True)
class NoCrits:
    """Extreme rolls have no special effect."""


@dataclass(frozen=True)
class ConfirmableCrits:
    """Every extreme roll is confirmed with a second roll."""


@dataclass(frozen=True)
class ThresholdCrits:
    """A crit needs at least `required` extreme rolls within one check."""

    required: int

    def __post_init__(self) -> None:
        if self.required < 1:
            raise ContractViolationError(
                "Crit threshold must be positive",
                details={"required": self.required},
            )


CritRule: TypeAlias = NoCrits | ConfirmableCrits | ThresholdCrits


# =============================================================================
# Lines and Results
# =============================================================================


class AttributeLine(BaseModel):
    """One attribute or technique participating in a check."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    label: str = Field(description="Display label, e.g. an attribute short name")
    level: int = Field(description="Level the roll is compared against")


class CheckResult(BaseModel):
    """Outcome of a single check.

    Attributes:
        rolls: The d20 roll for each line, in line order.
        confirmation_rolls: The confirmation d20 for each line, None where
            no confirmation was rolled.
        remaining_points: Points counter after all overages.
        passed: Whether the counter stayed non-negative.
        quality: Quality level 1-6 for a passed points check, else None.
        crit_successes: Confirmed critical successes.
        unconfirmed_crit_successes: Unconfirmed critical successes.
        crit_failures: Confirmed critical failures.
        unconfirmed_crit_failures: Unconfirmed critical failures.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    rolls: tuple[int, ...]
    confirmation_rolls: tuple[int | None, ...] = ()
    remaining_points: int
    passed: bool
    quality: int | None = Field(default=None, ge=MIN_QUALITY, le=MAX_QUALITY)
    crit_successes: int = Field(default=0, ge=0)
    unconfirmed_crit_successes: int = Field(default=0, ge=0)
    crit_failures: int = Field(default=0, ge=0)
    unconfirmed_crit_failures: int = Field(default=0, ge=0)

    @property
    def has_crits(self) -> bool:
        """Whether any crit, confirmed or not, occurred."""
        return (
            self.crit_successes
            + self.unconfirmed_crit_successes
            + self.crit_failures
            + self.unconfirmed_crit_failures
        ) > 0


# =============================================================================
# Resolution
# =============================================================================


def quality_level(points: int) -> int:
    """Quality level for the points left after a passed points check.

    Every started three points raise the quality by one, with a floor of
    1 and a cap of 6.
    """
    return max(MIN_QUALITY, min(MAX_QUALITY, math.ceil(points / 3)))


def _initial_points(kind: CheckKind, facilitation: Facilitation) -> int:
    if isinstance(kind, PointsCheck):
        return max(0, kind.available_points + facilitation.points_bonus)
    return 0


def resolve_check(
    lines: Sequence[AttributeLine],
    kind: CheckKind,
    crit_rule: CritRule,
    facilitation: Facilitation,
    source: RandomSource,
) -> CheckResult:
    """Roll and evaluate a check.

    Args:
        lines: Attribute lines in roll order; must not be empty.
        kind: SimpleCheck or PointsCheck.
        crit_rule: How extreme rolls are evaluated.
        facilitation: Modifiers with exactly one entry per line.
        source: Randomness source for every d20.

    Returns:
        The immutable CheckResult.

    Raises:
        ContractViolationError: If lines is empty or the facilitation
            length does not match the number of lines.
    """
    if not lines:
        raise ContractViolationError("A check needs at least one attribute line")
    if len(facilitation.per_line_modifier) != len(lines):
        raise ContractViolationError(
            "Facilitation length does not match attribute lines",
            details={
                "lines": len(lines),
                "modifiers": len(facilitation.per_line_modifier),
            },
        )

    points = _initial_points(kind, facilitation)
    rolls: list[int] = []
    for line, modifier in zip(lines, facilitation.per_line_modifier):
        roll = source.d20()
        if roll != CRIT_SUCCESS_ROLL:
            points -= max(0, roll - (line.level + modifier))
        rolls.append(roll)
        logger.debug("Check line rolled", label=line.label, roll=roll, points=points)

    confirmations: list[int | None] = [None] * len(lines)
    crit_succ = unconfirmed_succ = crit_fail = unconfirmed_fail = 0

    if isinstance(crit_rule, ConfirmableCrits):
        for idx, (line, roll) in enumerate(zip(lines, rolls)):
            if roll == CRIT_SUCCESS_ROLL:
                confirmation = source.d20()
                confirmations[idx] = confirmation
                if confirmation <= line.level:
                    crit_succ += 1
                else:
                    unconfirmed_succ += 1
            elif roll == CRIT_FAILURE_ROLL:
                confirmation = source.d20()
                confirmations[idx] = confirmation
                if confirmation > line.level:
                    crit_fail += 1
                else:
                    unconfirmed_fail += 1
    elif isinstance(crit_rule, ThresholdCrits):
        if rolls.count(CRIT_SUCCESS_ROLL) >= crit_rule.required:
            crit_succ = 1
        if rolls.count(CRIT_FAILURE_ROLL) >= crit_rule.required:
            crit_fail = 1

    passed = points >= 0
    quality = quality_level(points) if passed and isinstance(kind, PointsCheck) else None

    result = CheckResult(
        rolls=tuple(rolls),
        confirmation_rolls=tuple(confirmations),
        remaining_points=points,
        passed=passed,
        quality=quality,
        crit_successes=crit_succ,
        unconfirmed_crit_successes=unconfirmed_succ,
        crit_failures=crit_fail,
        unconfirmed_crit_failures=unconfirmed_fail,
    )
    logger.info(
        "Check resolved",
        lines=[line.label for line in lines],
        rolls=result.rolls,
        passed=passed,
        quality=quality,
        has_crits=result.has_crits,
    )
    return result


__all__ = [
    "SimpleCheck",
    "PointsCheck",
    "CheckKind",
    "NoCrits",
    "ConfirmableCrits",
    "ThresholdCrits",
    "CritRule",
    "AttributeLine",
    "CheckResult",
    "quality_level",
    "resolve_check",
]
