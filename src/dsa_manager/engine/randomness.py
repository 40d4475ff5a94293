"""Injected randomness sources.

Every resolver takes a RandomSource explicitly; there is no module-level
generator. Create one source per command invocation so concurrent
commands never share generator state.
"""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from collections.abc import Iterable

from dsa_manager.core.exceptions import ContractViolationError


class RandomSource(ABC):
    """Uniform integer source for dice rolls."""

    @abstractmethod
    def roll(self, minimum: int, maximum: int) -> int:
        """Return an integer uniformly distributed in [minimum, maximum].

        Raises:
            ContractViolationError: If minimum > maximum.
        """

    def d20(self) -> int:
        return self.roll(1, 20)

    def d6(self) -> int:
        return self.roll(1, 6)

    def die(self, sides: int) -> int:
        return self.roll(1, sides)


def _check_range(minimum: int, maximum: int) -> None:
    if minimum > maximum:
        raise ContractViolationError(
            "Random range is empty",
            details={"minimum": minimum, "maximum": maximum},
        )


class SystemRandomSource(RandomSource):
    """Randomness backed by a private random.Random instance.

    Args:
        seed: Optional seed for reproducible sequences.
    """

    def __init__(self, seed: int | None = None) -> None:
        self._seed = seed
        self._rng = random.Random(seed)

    @property
    def seed(self) -> int | None:
        return self._seed

    def roll(self, minimum: int, maximum: int) -> int:
        _check_range(minimum, maximum)
        return self._rng.randint(minimum, maximum)


class ScriptedRandomSource(RandomSource):
    """Replays a fixed sequence of values.

    Each value must lie inside the range requested for it. Running out of
    values or receiving an out-of-range value is a contract violation,
    which makes tests fail loudly instead of silently drifting.

    Example:
        >>> source = ScriptedRandomSource([1, 20])
        >>> source.d20(), source.d20()
        (1, 20)
    """

    def __init__(self, values: Iterable[int]) -> None:
        self._values = list(values)
        self._position = 0

    @property
    def remaining(self) -> int:
        """Number of values not consumed yet."""
        return len(self._values) - self._position

    def roll(self, minimum: int, maximum: int) -> int:
        _check_range(minimum, maximum)
        if self._position >= len(self._values):
            raise ContractViolationError(
                "Scripted random source exhausted",
                details={"consumed": self._position},
            )
        value = self._values[self._position]
        if not minimum <= value <= maximum:
            raise ContractViolationError(
                "Scripted value outside requested range",
                details={"value": value, "minimum": minimum, "maximum": maximum},
            )
        self._position += 1
        return value


def gameplay_random() -> SystemRandomSource:
    return SystemRandomSource(seed=None)


def seeded_random(seed: int) -> SystemRandomSource:
    return SystemRandomSource(seed=seed)


__all__ = [
    "RandomSource",
    "SystemRandomSource",
    "ScriptedRandomSource",
    "gameplay_random",
    "seeded_random",
]
