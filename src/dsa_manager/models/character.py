"""Character sheet schema and derived combat values.

Characters are read from JSON exports. Combat techniques, spells and
chants reference either a dataset id (``{"id": "...", "level": 8}``) or
a custom rule element that is not part of the dataset::

    {"ruleelement": {"name": "Feuerlanze", "check": ["mut", "klugheit", "konstitution"]},
     "level": 4}

All name comparisons are case-insensitive. Missing attributes and skills
count as level 0, missing combat techniques as level 6.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic import ValidationError as PydanticValidationError

from dsa_manager.core.exceptions import DataFormatError
from dsa_manager.core.logging import get_logger


logger = get_logger(__name__)

MUT = "mut"
GEWANDTHEIT = "gewandtheit"
FINGERFERTIGKEIT = "fingerfertigkeit"

DEFAULT_TECHNIQUE_LEVEL = 6
ATTRIBUTE_BONUS_THRESHOLD = 8
ATTRIBUTE_BONUS_STEP = 3


def attribute_bonus(level: int) -> int:
    """Combat bonus granted by an attribute: one point per 3 above 8."""
    return max(0, (level - ATTRIBUTE_BONUS_THRESHOLD) // ATTRIBUTE_BONUS_STEP)


# =============================================================================
# Sheet Entries
# =============================================================================


class CharacterAttribute(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    level: int


class CharacterSkill(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    level: int


class CustomTechnique(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(min_length=1)


class CustomRuleElement(BaseModel):
    """A spell or chant that is not part of the rule dataset."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    name: str = Field(min_length=1)
    attributes: tuple[str, ...] = Field(default=(), alias="check")


class _IdOrCustom(BaseModel):
    """Entry referencing either a dataset id or a custom element."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str | None = None

    @model_validator(mode="after")
    def exactly_one_reference(self) -> _IdOrCustom:
        if (self.id is None) == (getattr(self, "ruleelement", None) is None):
            raise ValueError("entry needs exactly one of 'id' or 'ruleelement'")
        return self

    @property
    def name(self) -> str:
        if self.id is not None:
            return self.id
        return self.ruleelement.name  # type: ignore[attr-defined]

    def matches_name(self, name: str) -> bool:
        return self.name.casefold() == name.casefold()


class CharacterCombatTechnique(_IdOrCustom):
    ruleelement: CustomTechnique | None = None
    level: int


class CharacterSpell(_IdOrCustom):
    ruleelement: CustomRuleElement | None = None
    level: int | None = None


class CharacterChant(_IdOrCustom):
    ruleelement: CustomRuleElement | None = None
    level: int | None = None


# =============================================================================
# Character
# =============================================================================


class Character(BaseModel):
    """A player character as seen by the check builders.

    Attributes:
        name: Character name.
        attributes: Attribute levels.
        skills: Talent levels.
        combattechniques: Combat technique levels.
        spells: Spell levels, possibly custom.
        chants: Chant levels, possibly custom.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(min_length=1)
    attributes: tuple[CharacterAttribute, ...] = ()
    skills: tuple[CharacterSkill, ...] = ()
    combattechniques: tuple[CharacterCombatTechnique, ...] = ()
    spells: tuple[CharacterSpell, ...] = ()
    chants: tuple[CharacterChant, ...] = ()

    def attribute_level(self, attribute_id: str) -> int:
        folded = attribute_id.casefold()
        for attribute in self.attributes:
            if attribute.id.casefold() == folded:
                return attribute.level
        return 0

    def skill_level(self, skill_id: str) -> int:
        folded = skill_id.casefold()
        for skill in self.skills:
            if skill.id.casefold() == folded:
                return skill.level
        return 0

    def technique_level(self, technique_id: str) -> int:
        for technique in self.combattechniques:
            if technique.matches_name(technique_id):
                return technique.level
        return DEFAULT_TECHNIQUE_LEVEL

    def attack_level(self, technique_id: str, ranged: bool = False) -> int:
        """Attack value: technique level plus the courage bonus.

        Ranged techniques use dexterity (Fingerfertigkeit) instead of
        courage (Mut).
        """
        attribute = FINGERFERTIGKEIT if ranged else MUT
        return self.technique_level(technique_id) + attribute_bonus(
            self.attribute_level(attribute)
        )

    def parry_level(self, technique_id: str, technique_attributes: tuple[str, ...]) -> int:
        """Parry value: half the technique level plus the best primary attribute bonus."""
        best = 0
        for attribute_id in technique_attributes:
            best = max(best, self.attribute_level(attribute_id))
        return self.technique_level(technique_id) // 2 + attribute_bonus(best)

    def dodge_level(self) -> int:
        return self.attribute_level(GEWANDTHEIT) // 2

    def initiative_level(self) -> int:
        return (self.attribute_level(MUT) + self.attribute_level(GEWANDTHEIT)) // 2

    def spell_level(self, spell_id: str) -> int:
        for spell in self.spells:
            if spell.matches_name(spell_id):
                return spell.level or 0
        return 0

    def chant_level(self, chant_id: str) -> int:
        for chant in self.chants:
            if chant.matches_name(chant_id):
                return chant.level or 0
        return 0

    def custom_techniques(self) -> Iterator[str]:
        for technique in self.combattechniques:
            if technique.ruleelement is not None:
                yield technique.ruleelement.name

    def custom_spells(self) -> Iterator[tuple[str, tuple[str, ...]]]:
        for spell in self.spells:
            if spell.ruleelement is not None:
                yield spell.ruleelement.name, spell.ruleelement.attributes

    def custom_chants(self) -> Iterator[tuple[str, tuple[str, ...]]]:
        for chant in self.chants:
            if chant.ruleelement is not None:
                yield chant.ruleelement.name, chant.ruleelement.attributes


def load_character(path: Path) -> Character:
    """Load a character from a JSON file.

    Raises:
        DataFormatError: If the file cannot be read or does not validate.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DataFormatError(
            f"Unable to read character: {exc}", source_file=str(path)
        ) from exc
    try:
        character = Character.model_validate_json(raw)
    except PydanticValidationError as exc:
        raise DataFormatError(
            f"Invalid character data: {exc.error_count()} validation error(s)",
            source_file=str(path),
            details={"errors": [e["msg"] for e in exc.errors()]},
        ) from exc
    logger.info("Character loaded", path=str(path), character=character.name)
    return character


__all__ = [
    "attribute_bonus",
    "CharacterAttribute",
    "CharacterSkill",
    "CustomTechnique",
    "CustomRuleElement",
    "CharacterCombatTechnique",
    "CharacterSpell",
    "CharacterChant",
    "Character",
    "load_character",
]
