"""Plain-text rendering of check, initiative and dice results.

Output is meant for terminals and chat messages. Tables are rendered
with fixed-width, left-aligned columns so they line up in monospace
code blocks.
"""

from __future__ import annotations

from collections.abc import Sequence

from dsa_manager.commands import CheckReport
from dsa_manager.engine.checks import CheckResult, ConfirmableCrits, PointsCheck
from dsa_manager.engine.dice import DiceExpression
from dsa_manager.engine.initiative import InitiativeResult


COLUMN_WIDTH = 17


def uppercase_first(text: str) -> str:
    return text[:1].upper() + text[1:]


def format_table(rows: Sequence[Sequence[str]], *, width: int = COLUMN_WIDTH) -> list[str]:
    """Render rows as fixed-width columns; headers are ordinary rows."""
    return ["".join(f"{entry:<{width}}" for entry in row).rstrip() for row in rows]


def format_modifier(level: int, modifier: int) -> str:
    """Render a level with its facilitation, e.g. '12 + 2' or '12 - 1'."""
    if modifier == 0:
        return str(level)
    if modifier > 0:
        return f"{level} + {modifier}"
    return f"{level} - {-modifier}"


def _count_line(count: int, singular: str, plural: str) -> str | None:
    if count == 1:
        return uppercase_first(singular)
    if count > 1:
        return f"{count} {plural}"
    return None


def crit_lines(result: CheckResult) -> list[str]:
    """Summary lines for every kind of crit that occurred."""
    candidates = [
        _count_line(result.crit_successes, "critical success", "critical successes"),
        _count_line(
            result.unconfirmed_crit_successes,
            "unconfirmed critical success",
            "unconfirmed critical successes",
        ),
        _count_line(result.crit_failures, "critical failure", "critical failures"),
        _count_line(
            result.unconfirmed_crit_failures,
            "unconfirmed critical failure",
            "unconfirmed critical failures",
        ),
    ]
    return [line for line in candidates if line is not None]


def render_check(report: CheckReport) -> str:
    """Render a resolved check as text.

    Example output::

        Alrik, Check for Klettern (level 7)

                         MU               GE               KK
        Character:       12               13 + 1           11
        Roll:            4                15               9

        Check passed, quality level 2
        Remaining points: 6
    """
    result = report.result
    title = uppercase_first(report.title)
    if isinstance(report.kind, PointsCheck):
        level = format_modifier(report.kind.available_points, report.facilitation.points_bonus)
        header = f"{report.character_name}, Check for {title} (level {level})"
    else:
        header = f"{report.character_name}, Check for {title}"

    rows: list[list[str]] = [
        ["", *(uppercase_first(line.label) for line in report.lines)],
        [
            "Character:",
            *(
                format_modifier(line.level, modifier)
                for line, modifier in zip(report.lines, report.facilitation.per_line_modifier)
            ),
        ],
        ["Roll:", *(str(roll) for roll in result.rolls)],
    ]
    if isinstance(report.crit_rule, ConfirmableCrits) and any(
        roll is not None for roll in result.confirmation_rolls
    ):
        rows.append(
            ["Crit roll:", *("" if roll is None else str(roll) for roll in result.confirmation_rolls)]
        )

    output = [header, "", *format_table(rows), ""]
    if not result.passed:
        output.append("Check failed")
    elif result.quality is not None:
        output.append(f"Check passed, quality level {result.quality}")
    else:
        output.append("Check passed")
    if isinstance(report.kind, PointsCheck):
        output.append(f"Remaining points: {result.remaining_points}")
    elif not result.passed:
        output.append(f"Missed by {-result.remaining_points}")
    output.extend(crit_lines(result))
    return "\n".join(output)


def render_initiative(result: InitiativeResult) -> str:
    """Render an initiative order, one participant per row.

    Each row shows the initiative value split into base level and die,
    followed by every tie-break value.
    """
    rows = [
        [
            f"{outcome.name}:",
            f"{outcome.initiative} ({outcome.base_level} + {outcome.initial_die}/6)",
            *(str(value) for value in outcome.tie_breaks),
        ]
        for outcome in result.order
    ]
    output = ["Initiative:", "", *format_table(rows)]
    if result.unresolved:
        output.append("")
        output.append("Remaining ties were broken by input order")
    return "\n".join(output)


def render_roll(expression: DiceExpression) -> str:
    """Render a dice expression as its individual dice and total."""
    dice = " ".join(str(die) for die in expression.dice)
    return "\n".join([f"Rolls: {dice}".rstrip(), f"Total: {expression.total}"])


__all__ = [
    "COLUMN_WIDTH",
    "uppercase_first",
    "format_table",
    "format_modifier",
    "crit_lines",
    "render_check",
    "render_initiative",
    "render_roll",
]
