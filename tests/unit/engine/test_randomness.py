"""Tests for injected randomness sources."""

from __future__ import annotations

from collections import Counter

import pytest

from dsa_manager.core.exceptions import ContractViolationError
from dsa_manager.engine.randomness import (
    ScriptedRandomSource,
    SystemRandomSource,
    gameplay_random,
    seeded_random,
)


class TestSystemRandomSource:
    """Tests for the random.Random backed source."""

    def test_rolls_within_range(self, seeded_source: SystemRandomSource) -> None:
        """Test every roll stays inside the requested range."""
        for _ in range(200):
            assert 1 <= seeded_source.d20() <= 20
            assert 1 <= seeded_source.d6() <= 6
            assert 3 <= seeded_source.roll(3, 5) <= 5

    def test_rolls_are_uniform(self) -> None:
        """Test every face of a d6 and a d20 comes up about equally often."""
        source = seeded_random(2024)
        d6_counts = Counter(source.d6() for _ in range(60_000))
        d20_counts = Counter(source.d20() for _ in range(60_000))

        assert sorted(d6_counts) == list(range(1, 7))
        assert all(abs(count - 10_000) < 500 for count in d6_counts.values())
        assert sorted(d20_counts) == list(range(1, 21))
        assert all(abs(count - 3_000) < 300 for count in d20_counts.values())

    def test_single_value_range(self, seeded_source: SystemRandomSource) -> None:
        """Test a range with one value always yields it."""
        assert seeded_source.roll(4, 4) == 4

    def test_same_seed_same_sequence(self) -> None:
        """Test seeded sources are reproducible."""
        first = seeded_random(123)
        second = seeded_random(123)

        assert [first.d20() for _ in range(20)] == [second.d20() for _ in range(20)]

    def test_sources_do_not_share_state(self) -> None:
        """Test rolling on one source does not advance another."""
        reference = seeded_random(5).d6()
        quiet = seeded_random(5)
        busy = seeded_random(5)
        for _ in range(10):
            busy.d6()

        assert quiet.d6() == reference

    def test_empty_range_is_contract_violation(self, seeded_source: SystemRandomSource) -> None:
        """Test minimum > maximum is rejected."""
        with pytest.raises(ContractViolationError):
            seeded_source.roll(6, 1)

    def test_factories(self) -> None:
        """Test the gameplay and seeded factories."""
        assert gameplay_random().seed is None
        assert seeded_random(9).seed == 9


class TestScriptedRandomSource:
    """Tests for the replaying test source."""

    def test_replays_values_in_order(self) -> None:
        """Test values come back in the scripted order."""
        source = ScriptedRandomSource([1, 20, 6])

        assert source.d20() == 1
        assert source.d20() == 20
        assert source.d6() == 6
        assert source.remaining == 0

    def test_exhausted(self) -> None:
        """Test running out of values fails loudly."""
        source = ScriptedRandomSource([3])
        source.d6()

        with pytest.raises(ContractViolationError) as exc_info:
            source.d6()

        assert "exhausted" in exc_info.value.message

    def test_value_outside_range(self) -> None:
        """Test a scripted value that does not fit the die is rejected."""
        source = ScriptedRandomSource([15])

        with pytest.raises(ContractViolationError):
            source.d6()
        assert source.remaining == 1

    def test_die_helper(self) -> None:
        """Test rolling an arbitrary die size."""
        source = ScriptedRandomSource([77])

        assert source.die(100) == 77
