"""Free-form dice expressions.

Expressions are sums of terms separated by explicit ``+``/``-`` signs.
Each term is either an integer literal or ``[count]d[sides]``; ``w``
(German "Würfel") is accepted as an alternative die separator and the
count defaults to 1::

    3d6
    1d20+5
    2w6 - 1d4 + 3

The whole expression is parsed before any die is rolled, so a malformed
term never produces a partial total.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from dsa_manager.core.exceptions import DiceRollError
from dsa_manager.core.logging import get_logger
from dsa_manager.engine.randomness import RandomSource


logger = get_logger(__name__)

DEFAULT_MAX_DICE = 100
DEFAULT_MAX_TERMS = 20

_NUMBER = re.compile(r"[0-9]+")
_DIE_SEPARATOR = re.compile(r"[dw]")


@dataclass(frozen=True)
class DiceTerm:
    """One parsed term of an expression.

    Attributes:
        text: The term as written, including its sign.
        sign: +1 or -1.
        count: Number of dice; 0 for a literal.
        sides: Die size; 0 for a literal.
        constant: Literal value; 0 for a dice term.
    """

    text: str
    sign: int
    count: int = 0
    sides: int = 0
    constant: int = 0

    @property
    def is_dice(self) -> bool:
        return self.sides > 0


@dataclass(frozen=True)
class RolledDie:
    """A single die result annotated with its size."""

    value: int
    sides: int
    subtracted: bool = False

    def __str__(self) -> str:
        return f"{'-' if self.subtracted else ''}{self.value}/{self.sides}"


@dataclass(frozen=True)
class DiceExpression:
    """A rolled dice expression.

    Attributes:
        expression: The original dice expression string.
        total: The signed sum of all terms.
        dice: Individual dice results in rolling order.
        modifier: Signed sum of the literal terms.
    """

    expression: str
    total: int
    dice: tuple[RolledDie, ...]
    modifier: int


def split_terms(expression: str) -> list[str]:
    """Split an expression into signed terms.

    A sign starts a new term unless it is the first character of the
    current term, so ``-2d6+1`` yields ``["-2d6", "+1"]``.
    """
    compact = "".join(expression.split())
    terms: list[str] = []
    begin = 0
    while begin < len(compact):
        end = len(compact)
        for idx in range(begin + 1, len(compact)):
            if compact[idx] in "+-":
                end = idx
                break
        terms.append(compact[begin:end])
        begin = end
    return terms


def parse_term(term: str, *, max_dice: int = DEFAULT_MAX_DICE) -> DiceTerm:
    """Parse a single signed term.

    Raises:
        DiceRollError: If the term is malformed or exceeds max_dice.
    """
    sign = 1
    body = term
    if body[:1] in ("+", "-"):
        sign = -1 if body[0] == "-" else 1
        body = body[1:]
    lowered = body.lower()

    if not _DIE_SEPARATOR.search(lowered):
        if not _NUMBER.fullmatch(body):
            raise DiceRollError(f'Unable to parse number "{term}"', expression=term)
        return DiceTerm(text=term, sign=sign, constant=int(body))

    parts = _DIE_SEPARATOR.split(lowered)
    if len(parts) > 2:
        raise DiceRollError(
            f'Too many "d"s and/or "w"s in expression "{term}"', expression=term
        )
    count_text, sides_text = parts
    if not sides_text:
        raise DiceRollError(f'Die type missing in expression "{term}"', expression=term)
    if not _NUMBER.fullmatch(sides_text):
        raise DiceRollError(
            f'Unable to parse die type in expression "{term}"', expression=term
        )
    if count_text and not _NUMBER.fullmatch(count_text):
        raise DiceRollError(f'Invalid die number in expression "{term}"', expression=term)

    count = int(count_text) if count_text else 1
    sides = int(sides_text)
    if sides < 1:
        raise DiceRollError(f"Invalid die type: {sides}", expression=term)
    if count > max_dice:
        raise DiceRollError(
            f"Number of dice exceeds maximum of {max_dice}: {count}", expression=term
        )
    return DiceTerm(text=term, sign=sign, count=count, sides=sides)


def parse_expression(
    expression: str,
    *,
    max_dice: int = DEFAULT_MAX_DICE,
    max_terms: int = DEFAULT_MAX_TERMS,
) -> tuple[DiceTerm, ...]:
    """Parse a full expression without rolling anything.

    Raises:
        DiceRollError: On an empty expression, too many terms, or the first
            malformed term.
    """
    if not expression or not expression.strip():
        raise DiceRollError("Empty dice expression", expression=expression)
    terms = split_terms(expression)
    if len(terms) > max_terms:
        raise DiceRollError(
            f"Number of roll expressions exceeds maximum of {max_terms}",
            expression=expression,
        )
    return tuple(parse_term(term, max_dice=max_dice) for term in terms)


def roll_expression(
    expression: str,
    source: RandomSource,
    *,
    max_dice: int = DEFAULT_MAX_DICE,
    max_terms: int = DEFAULT_MAX_TERMS,
) -> DiceExpression:
    """Parse and roll a dice expression.

    Args:
        expression: Dice expression (e.g., '1d20+5', '3w6-2').
        source: Randomness source for the dice.
        max_dice: Maximum number of dice in one term.
        max_terms: Maximum number of terms.

    Returns:
        DiceExpression with the total and every individual die.

    Raises:
        DiceRollError: If the expression is invalid.
    """
    terms = parse_expression(expression, max_dice=max_dice, max_terms=max_terms)
    logger.debug("Rolling dice", expression=expression, terms=len(terms))

    total = 0
    modifier = 0
    dice: list[RolledDie] = []
    for term in terms:
        if not term.is_dice:
            modifier += term.sign * term.constant
            total += term.sign * term.constant
            continue
        for _ in range(term.count):
            value = source.die(term.sides)
            dice.append(RolledDie(value=value, sides=term.sides, subtracted=term.sign < 0))
            total += term.sign * value

    logger.info("Dice rolled", expression=expression, total=total, dice=len(dice))
    return DiceExpression(
        expression=expression,
        total=total,
        dice=tuple(dice),
        modifier=modifier,
    )


class DiceRoller:
    """Dice rolling bound to one randomness source and a set of limits.

    Example:
        >>> roller = DiceRoller(SystemRandomSource(seed=7))
        >>> result = roller.roll("1d20+5")
        >>> print(f"Total: {result.total}")
    """

    def __init__(
        self,
        source: RandomSource,
        *,
        max_dice: int = DEFAULT_MAX_DICE,
        max_terms: int = DEFAULT_MAX_TERMS,
    ) -> None:
        self._source = source
        self._max_dice = max_dice
        self._max_terms = max_terms

    @property
    def source(self) -> RandomSource:
        return self._source

    def roll(self, expression: str) -> DiceExpression:
        """Roll dice according to the given expression.

        Raises:
            DiceRollError: If the expression is invalid.
        """
        return roll_expression(
            expression,
            self._source,
            max_dice=self._max_dice,
            max_terms=self._max_terms,
        )


__all__ = [
    "DEFAULT_MAX_DICE",
    "DEFAULT_MAX_TERMS",
    "DiceTerm",
    "RolledDie",
    "DiceExpression",
    "DiceRoller",
    "split_terms",
    "parse_term",
    "parse_expression",
    "roll_expression",
]
