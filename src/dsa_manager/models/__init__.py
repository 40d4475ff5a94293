"""Pydantic V2 schemas for game data.

Submodules:
    rules: Rule dataset and fuzzy name lookup
    character: Character sheet and derived combat values
"""

from __future__ import annotations

from dsa_manager.models.character import (
    Character,
    CharacterAttribute,
    CharacterChant,
    CharacterCombatTechnique,
    CharacterSkill,
    CharacterSpell,
    CustomRuleElement,
    CustomTechnique,
    attribute_bonus,
    load_character,
)
from dsa_manager.models.rules import (
    Ambiguous,
    AttributeInfo,
    CombatTechniqueInfo,
    Found,
    GoverningAttributes,
    LookupResult,
    NotFound,
    RuleDataset,
    load_rule_dataset,
    match_search,
)


__all__ = [
    # Rules
    "Found",
    "NotFound",
    "Ambiguous",
    "LookupResult",
    "match_search",
    "AttributeInfo",
    "GoverningAttributes",
    "CombatTechniqueInfo",
    "RuleDataset",
    "load_rule_dataset",
    # Character
    "attribute_bonus",
    "Character",
    "CharacterAttribute",
    "CharacterSkill",
    "CharacterCombatTechnique",
    "CharacterSpell",
    "CharacterChant",
    "CustomTechnique",
    "CustomRuleElement",
    "load_character",
]
