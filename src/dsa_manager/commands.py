"""Command boundary between user input and the engine.

Front-ends (CLI, chat bots) translate user text into a CheckRequest and
call run_check. Each CheckCommand has exactly one builder that looks the
target up in the rule dataset, derives the attribute lines from the
character and picks the check kind and crit rule. The engine itself has
no notion of commands.

Facilitation keys differ from display labels: skill-type checks match
overrides against attribute ids ("mut:2"), combat checks use the fixed
keys "attack", "parry" and "dodge".
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from dsa_manager.core.config import Settings, get_settings
from dsa_manager.core.exceptions import InvalidInputError
from dsa_manager.core.logging import bind_context, clear_context, get_logger, setup_logging
from dsa_manager.engine.checks import (
    AttributeLine,
    CheckKind,
    CheckResult,
    ConfirmableCrits,
    CritRule,
    PointsCheck,
    SimpleCheck,
    resolve_check,
)
from dsa_manager.engine.dice import DiceExpression, DiceRoller
from dsa_manager.engine.facilitation import Facilitation, parse_facilitation
from dsa_manager.engine.initiative import IniParticipant, InitiativeResult, resolve_initiative
from dsa_manager.engine.randomness import RandomSource
from dsa_manager.models.character import Character
from dsa_manager.models.rules import RuleDataset, match_search


logger = get_logger(__name__)

ATTACK_KEY = "attack"
PARRY_KEY = "parry"
DODGE_KEY = "dodge"

_INTEGER = re.compile(r"[+-]?[0-9]+")


class CheckCommand(StrEnum):
    """Every check a user can request."""

    ATTRIBUTE = "attribute"
    SKILL = "skill"
    ATTACK = "attack"
    SPELL = "spell"
    CHANT = "chant"
    DODGE = "dodge"
    PARRY = "parry"


class CheckRequest(BaseModel):
    """A parsed check command.

    Attributes:
        command: Which check to roll.
        target: Search term for the attribute, talent, technique, spell
            or chant. Not used by dodge checks.
        facilitation: Flat modifier as typed by the user.
        attribute_facilitation: Comma separated ``name:delta`` overrides.
        bonus_points: Bonus to the points budget of skill-type checks.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    command: CheckCommand
    target: str | None = None
    facilitation: str = Field(default="0")
    attribute_facilitation: str | None = None
    bonus_points: str | None = None


@dataclass(frozen=True)
class CheckPlan:
    """Everything needed to resolve a check, before any die is rolled."""

    title: str
    lines: tuple[AttributeLine, ...]
    facilitation_keys: tuple[str, ...]
    kind: CheckKind
    crit_rule: CritRule


@dataclass(frozen=True)
class CheckReport:
    """A resolved check together with the context needed to display it."""

    character_name: str
    command: CheckCommand
    title: str
    lines: tuple[AttributeLine, ...]
    facilitation: Facilitation
    kind: CheckKind
    crit_rule: CritRule
    result: CheckResult


# =============================================================================
# Builders
# =============================================================================


Builder = Callable[[str | None, Character, RuleDataset, Settings], CheckPlan]


def _require_target(target: str | None, command: CheckCommand) -> str:
    if target is None or not target.strip():
        raise InvalidInputError(
            f"The {command} command requires a name",
            details={"command": str(command)},
        )
    return target.strip()


def _attribute_lines(
    attribute_ids: Sequence[str], character: Character, rules: RuleDataset
) -> tuple[AttributeLine, ...]:
    return tuple(
        AttributeLine(
            label=rules.attribute_short_name(attribute_id),
            level=character.attribute_level(attribute_id),
        )
        for attribute_id in attribute_ids
    )


def build_attribute_check(
    target: str | None, character: Character, rules: RuleDataset, settings: Settings
) -> CheckPlan:
    attribute_id, info = match_search(
        rules.attributes.items(), _require_target(target, CheckCommand.ATTRIBUTE)
    ).unwrap()
    return CheckPlan(
        title=attribute_id,
        lines=(AttributeLine(label=info.short_name, level=character.attribute_level(attribute_id)),),
        facilitation_keys=(attribute_id,),
        kind=SimpleCheck(),
        crit_rule=ConfirmableCrits(),
    )


def build_skill_check(
    target: str | None, character: Character, rules: RuleDataset, settings: Settings
) -> CheckPlan:
    talent_id, talent = match_search(
        rules.talents.items(), _require_target(target, CheckCommand.SKILL)
    ).unwrap()
    return CheckPlan(
        title=talent_id,
        lines=_attribute_lines(talent.attributes, character, rules),
        facilitation_keys=tuple(talent.attributes),
        kind=PointsCheck(available_points=character.skill_level(talent_id)),
        crit_rule=settings.rules.skill_crit_rule(),
    )


def build_attack_check(
    target: str | None, character: Character, rules: RuleDataset, settings: Settings
) -> CheckPlan:
    entries = [(name, info.ranged) for name, info in rules.combat_techniques.items()]
    # custom techniques carry no ranged flag and count as melee
    entries.extend((name, False) for name in character.custom_techniques())
    technique_id, ranged = match_search(
        entries, _require_target(target, CheckCommand.ATTACK)
    ).unwrap()
    return CheckPlan(
        title=f"Attack: {technique_id}",
        lines=(AttributeLine(label=technique_id, level=character.attack_level(technique_id, ranged)),),
        facilitation_keys=(ATTACK_KEY,),
        kind=SimpleCheck(),
        crit_rule=ConfirmableCrits(),
    )


def build_spell_check(
    target: str | None, character: Character, rules: RuleDataset, settings: Settings
) -> CheckPlan:
    entries = [(name, spell.attributes) for name, spell in rules.spells.items()]
    entries.extend(character.custom_spells())
    spell_id, attributes = match_search(
        entries, _require_target(target, CheckCommand.SPELL)
    ).unwrap()
    return CheckPlan(
        title=spell_id,
        lines=_attribute_lines(attributes, character, rules),
        facilitation_keys=tuple(attributes),
        kind=PointsCheck(available_points=character.spell_level(spell_id)),
        crit_rule=settings.rules.skill_crit_rule(),
    )


def build_chant_check(
    target: str | None, character: Character, rules: RuleDataset, settings: Settings
) -> CheckPlan:
    entries = [(name, chant.attributes) for name, chant in rules.chants.items()]
    entries.extend(character.custom_chants())
    chant_id, attributes = match_search(
        entries, _require_target(target, CheckCommand.CHANT)
    ).unwrap()
    return CheckPlan(
        title=chant_id,
        lines=_attribute_lines(attributes, character, rules),
        facilitation_keys=tuple(attributes),
        kind=PointsCheck(available_points=character.chant_level(chant_id)),
        crit_rule=settings.rules.skill_crit_rule(),
    )


def build_dodge_check(
    target: str | None, character: Character, rules: RuleDataset, settings: Settings
) -> CheckPlan:
    return CheckPlan(
        title="Dodge",
        lines=(AttributeLine(label="Dodge", level=character.dodge_level()),),
        facilitation_keys=(DODGE_KEY,),
        kind=SimpleCheck(),
        crit_rule=ConfirmableCrits(),
    )


def build_parry_check(
    target: str | None, character: Character, rules: RuleDataset, settings: Settings
) -> CheckPlan:
    technique_id, technique = match_search(
        rules.combat_techniques.items(), _require_target(target, CheckCommand.PARRY)
    ).unwrap()
    return CheckPlan(
        title=f"Parry: {technique_id}",
        lines=(
            AttributeLine(
                label="Parry",
                level=character.parry_level(technique_id, technique.attributes),
            ),
        ),
        facilitation_keys=(PARRY_KEY,),
        kind=SimpleCheck(),
        crit_rule=ConfirmableCrits(),
    )


BUILDERS: dict[CheckCommand, Builder] = {
    CheckCommand.ATTRIBUTE: build_attribute_check,
    CheckCommand.SKILL: build_skill_check,
    CheckCommand.ATTACK: build_attack_check,
    CheckCommand.SPELL: build_spell_check,
    CheckCommand.CHANT: build_chant_check,
    CheckCommand.DODGE: build_dodge_check,
    CheckCommand.PARRY: build_parry_check,
}

if set(BUILDERS) != set(CheckCommand):
    raise RuntimeError(f"Check commands without builder: {set(CheckCommand) - set(BUILDERS)}")


# =============================================================================
# Entry Points
# =============================================================================


def plan_check(
    request: CheckRequest,
    character: Character,
    rules: RuleDataset,
    settings: Settings | None = None,
) -> CheckPlan:
    """Resolve names and levels for a request without rolling.

    Raises:
        InvalidInputError: If the target is missing, unknown or ambiguous.
    """
    settings = settings or get_settings()
    return BUILDERS[request.command](request.target, character, rules, settings)


def run_check(
    request: CheckRequest,
    character: Character,
    rules: RuleDataset,
    source: RandomSource,
    settings: Settings | None = None,
) -> CheckReport:
    """Build and resolve a check for a character.

    Args:
        request: The parsed check command.
        character: The acting character.
        rules: Rule dataset for name lookup.
        source: Randomness source for this invocation.
        settings: Settings; defaults to the application settings.

    Returns:
        CheckReport with the structured result.

    Raises:
        InvalidInputError: If the target or a facilitation argument is
            invalid.
    """
    settings = settings or get_settings()
    setup_logging(settings)
    bind_context(character=character.name, command=str(request.command))
    try:
        plan = plan_check(request, character, rules, settings)
        facilitation = parse_facilitation(
            plan.facilitation_keys,
            request.facilitation,
            request.attribute_facilitation,
            request.bonus_points,
        )
        result = resolve_check(plan.lines, plan.kind, plan.crit_rule, facilitation, source)
    finally:
        clear_context()

    return CheckReport(
        character_name=character.name,
        command=request.command,
        title=plan.title,
        lines=plan.lines,
        facilitation=facilitation,
        kind=plan.kind,
        crit_rule=plan.crit_rule,
        result=result,
    )


def parse_custom_participants(values: Sequence[str]) -> list[IniParticipant]:
    """Turn ``name level name level ...`` into initiative participants.

    Raises:
        InvalidInputError: On an odd number of values, an empty name or a
            non-integer level.
    """
    if len(values) % 2 != 0:
        raise InvalidInputError(
            "Custom initiative participants need an even number of values "
            "(name and level for each participant)",
            details={"count": len(values)},
        )
    participants: list[IniParticipant] = []
    for idx in range(0, len(values), 2):
        name, level = values[idx].strip(), values[idx + 1].strip()
        if not name:
            raise InvalidInputError("Custom initiative participant needs a name")
        if not _INTEGER.fullmatch(level):
            raise InvalidInputError(
                f"Unable to parse custom initiative level: {level}",
                details={"participant": name},
            )
        participants.append(IniParticipant(name=name, base_level=int(level)))
    return participants


def roll_initiative(
    characters: Sequence[Character],
    source: RandomSource,
    *,
    extra_participants: Sequence[IniParticipant] = (),
    settings: Settings | None = None,
) -> InitiativeResult:
    """Roll initiative for characters and additional participants.

    Characters take part with their derived initiative level and come
    before the additional participants in input order.

    Raises:
        InvalidInputError: If there is nobody to roll for.
    """
    settings = settings or get_settings()
    setup_logging(settings)
    participants = [
        IniParticipant(name=character.name, base_level=character.initiative_level())
        for character in characters
    ]
    participants.extend(extra_participants)
    if not participants:
        raise InvalidInputError("No participants for initiative")
    return resolve_initiative(
        participants,
        source,
        max_rounds=settings.initiative.max_tiebreak_rounds,
    )


def roll_dice(
    expression: str,
    source: RandomSource,
    settings: Settings | None = None,
) -> DiceExpression:
    """Roll a free-form dice expression with the configured limits.

    Raises:
        DiceRollError: If the expression is invalid.
    """
    settings = settings or get_settings()
    setup_logging(settings)
    roller = DiceRoller(
        source,
        max_dice=settings.dice.max_dice,
        max_terms=settings.dice.max_terms,
    )
    return roller.roll(expression)


__all__ = [
    "CheckCommand",
    "CheckRequest",
    "CheckPlan",
    "CheckReport",
    "BUILDERS",
    "build_attribute_check",
    "build_skill_check",
    "build_attack_check",
    "build_spell_check",
    "build_chant_check",
    "build_dodge_check",
    "build_parry_check",
    "plan_check",
    "run_check",
    "parse_custom_participants",
    "roll_initiative",
    "roll_dice",
]
