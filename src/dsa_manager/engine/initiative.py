"""Initiative ordering with recursive tie-breaking.

Every participant rolls 1d6 and adds it to their base initiative level.
Participants with an equal value are separated round by round: the first
tie-break round appends each tied participant's base level (the higher
base level acts first), every later round appends a fresh 1d6. Ties are
regrouped by the newly appended value and only still-tied participants
continue.

Ordering rule: comparison keys are compared position by position,
highest first. A shorter key is padded with a sentinel below every
possible value, so it ranks behind a longer key it agrees with. Keys
that are completely equal (only possible once the round bound is hit)
keep their input order.
"""

from __future__ import annotations

from collections.abc import Sequence
from itertools import groupby

from pydantic import BaseModel, ConfigDict, Field

from dsa_manager.core.exceptions import ContractViolationError
from dsa_manager.core.logging import get_logger
from dsa_manager.engine.randomness import RandomSource


logger = get_logger(__name__)

DEFAULT_MAX_TIEBREAK_ROUNDS = 32

_PAD = float("-inf")


class IniParticipant(BaseModel):
    """A participant in an initiative roll."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1, description="Display name")
    base_level: int = Field(description="Initiative base level")


class IniOutcome(BaseModel):
    """One participant's place in the initiative order.

    Attributes:
        participant_index: Position of the participant in the input.
        name: Display name of the participant.
        base_level: Initiative base level.
        comparison_key: base_level + first die, followed by every
            tie-break value in the order it was appended.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    participant_index: int = Field(ge=0)
    name: str
    base_level: int
    comparison_key: tuple[int, ...] = Field(min_length=1)

    @property
    def initiative(self) -> int:
        return self.comparison_key[0]

    @property
    def initial_die(self) -> int:
        """The first d6, recovered from the initial key value."""
        return self.comparison_key[0] - self.base_level

    @property
    def tie_breaks(self) -> tuple[int, ...]:
        return self.comparison_key[1:]


class InitiativeResult(BaseModel):
    """Complete initiative order.

    Attributes:
        order: Outcomes, first to act first.
        rounds_used: Deepest tie-break round that was needed.
        unresolved: True when the round bound left ties that were broken
            by input order.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    order: tuple[IniOutcome, ...]
    rounds_used: int = Field(default=0, ge=0)
    unresolved: bool = False


def ordering_key(key: Sequence[int], length: int) -> tuple[float, ...]:
    """Pad a comparison key to `length` with the lowest sentinel."""
    return tuple(key) + (_PAD,) * (length - len(key))


def resolve_initiative(
    participants: Sequence[IniParticipant],
    source: RandomSource,
    *,
    max_rounds: int = DEFAULT_MAX_TIEBREAK_ROUNDS,
) -> InitiativeResult:
    """Roll initiative and resolve ties.

    Args:
        participants: Participants in input order; must not be empty.
        source: Randomness source for every d6.
        max_rounds: Tie-break rounds before remaining ties fall back to
            input order.

    Returns:
        The InitiativeResult with the full order.

    Raises:
        ContractViolationError: If participants is empty or max_rounds < 1.
    """
    if not participants:
        raise ContractViolationError("Initiative needs at least one participant")
    if max_rounds < 1:
        raise ContractViolationError(
            "Tie-break round bound must be positive",
            details={"max_rounds": max_rounds},
        )

    keys: list[list[int]] = [[p.base_level + source.d6()] for p in participants]
    rounds_used = 0
    unresolved = False

    def break_ties(indices: list[int], depth: int) -> None:
        nonlocal rounds_used, unresolved
        ordered = sorted(indices, key=lambda i: keys[i][-1])
        for value, group in groupby(ordered, key=lambda i: keys[i][-1]):
            tied = list(group)
            if len(tied) < 2:
                continue
            if depth > max_rounds:
                unresolved = True
                logger.warning(
                    "Initiative tie left unresolved",
                    participants=[participants[i].name for i in tied],
                    rounds=max_rounds,
                )
                continue
            for i in tied:
                if len(keys[i]) == 1:
                    keys[i].append(participants[i].base_level)
                else:
                    keys[i].append(source.d6())
            rounds_used = max(rounds_used, depth)
            logger.debug(
                "Initiative tie-break round",
                round=depth,
                tied_value=value,
                participants=[participants[i].name for i in tied],
            )
            break_ties(tied, depth + 1)

    break_ties(list(range(len(participants))), 1)

    length = max(len(key) for key in keys)
    ranking = sorted(
        range(len(participants)),
        key=lambda i: ordering_key(keys[i], length),
        reverse=True,
    )
    order = tuple(
        IniOutcome(
            participant_index=i,
            name=participants[i].name,
            base_level=participants[i].base_level,
            comparison_key=tuple(keys[i]),
        )
        for i in ranking
    )
    logger.info(
        "Initiative resolved",
        order=[outcome.name for outcome in order],
        rounds_used=rounds_used,
    )
    return InitiativeResult(order=order, rounds_used=rounds_used, unresolved=unresolved)


__all__ = [
    "DEFAULT_MAX_TIEBREAK_ROUNDS",
    "IniParticipant",
    "IniOutcome",
    "InitiativeResult",
    "ordering_key",
    "resolve_initiative",
]
