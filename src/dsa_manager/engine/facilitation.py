"""Facilitation (situational modifiers) for checks.

A facilitation is a flat modifier applied to every attribute line, plus
optional per-attribute overrides and a bonus to the points budget of
skill-type checks. Positive values make a check easier.

Overrides are matched case-insensitively against one key per line.
Override names that match no line are ignored; users can mistype an
attribute name and the check still runs with the flat modifier only.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from pydantic import BaseModel, ConfigDict, Field

from dsa_manager.core.exceptions import FacilitationError
from dsa_manager.core.logging import get_logger


logger = get_logger(__name__)

_INTEGER = re.compile(r"[+-]?[0-9]+")


class Facilitation(BaseModel):
    """Per-line modifiers and points bonus for a single check.

    Attributes:
        per_line_modifier: One modifier per attribute line, in line order.
        points_bonus: Added to the available points of a points check.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    per_line_modifier: tuple[int, ...] = Field(description="Modifier per attribute line")
    points_bonus: int = Field(default=0, description="Bonus to the points budget")

    @classmethod
    def neutral(cls, line_count: int) -> Facilitation:
        """Facilitation that changes nothing for a check with line_count lines."""
        return cls(per_line_modifier=(0,) * line_count)


def _parse_int(text: str) -> int | None:
    stripped = text.strip()
    if not _INTEGER.fullmatch(stripped):
        return None
    return int(stripped)


def parse_overrides(text: str) -> list[tuple[str, int]]:
    """Parse ``name:delta,name:delta`` into (name, delta) pairs.

    Raises:
        FacilitationError: If a pair does not split into exactly two parts
            or a delta is not an integer.
    """
    overrides: list[tuple[str, int]] = []
    for pair in text.split(","):
        parts = pair.split(":")
        if len(parts) != 2:
            raise FacilitationError(
                "Unable to parse facilitation: Attribute name and facilitation "
                "must be separated by a colon",
                argument=pair,
            )
        amount = _parse_int(parts[1])
        if amount is None:
            raise FacilitationError(
                "Unable to parse facilitation: Invalid attribute facilitation amount",
                argument=pair,
            )
        overrides.append((parts[0].strip(), amount))
    return overrides


def build_facilitation(
    keys: Sequence[str],
    flat: int = 0,
    overrides: Iterable[tuple[str, int]] | None = None,
    points_bonus: int = 0,
) -> Facilitation:
    """Merge a flat modifier, overrides and a points bonus.

    Args:
        keys: One override key per attribute line.
        flat: Modifier applied to every line.
        overrides: (key, delta) pairs added on top of the flat modifier
            for every line whose key matches case-insensitively.
        points_bonus: Bonus to the points budget.

    Returns:
        Facilitation with exactly len(keys) modifiers.
    """
    modifiers = [flat] * len(keys)
    folded = [key.casefold() for key in keys]
    for name, delta in overrides or ():
        target = name.casefold()
        matched = False
        for idx, key in enumerate(folded):
            if key == target:
                modifiers[idx] += delta
                matched = True
        if not matched:
            logger.debug("Facilitation override matched no attribute", override=name)
    return Facilitation(per_line_modifier=tuple(modifiers), points_bonus=points_bonus)


def parse_facilitation(
    keys: Sequence[str],
    flat: str = "0",
    overrides: str | None = None,
    bonus_points: str | None = None,
) -> Facilitation:
    """Build a facilitation from raw user-supplied strings.

    Args:
        keys: One override key per attribute line.
        flat: Flat modifier, e.g. "-2".
        overrides: Comma separated ``name:delta`` pairs, e.g. "mu:1,kl:-2".
        bonus_points: Integer bonus to the points budget.

    Raises:
        FacilitationError: If any argument is malformed.
    """
    flat_value = _parse_int(flat)
    if flat_value is None:
        raise FacilitationError(
            "Unable to parse facilitation: Argument must be an integer",
            argument=flat,
        )

    parsed_overrides: list[tuple[str, int]] = []
    if overrides is not None and overrides.strip():
        parsed_overrides = parse_overrides(overrides)

    bonus = 0
    if bonus_points is not None:
        parsed_bonus = _parse_int(bonus_points)
        if parsed_bonus is None:
            raise FacilitationError(
                "Unable to parse facilitation: bonus-points must be an integer",
                argument=bonus_points,
            )
        bonus = parsed_bonus

    return build_facilitation(keys, flat_value, parsed_overrides, bonus)


__all__ = [
    "Facilitation",
    "parse_overrides",
    "build_facilitation",
    "parse_facilitation",
]
