"""Rule dataset and fuzzy name lookup.

The rule dataset maps attribute, talent, spell, chant and combat
technique identifiers to their governing attributes. Users refer to
entries by any case-insensitive substring of the identifier; a leading
``_`` anchors the search at the start of the name and a trailing ``_``
at its end. ``kraft`` matches both ``körperkraft`` and ``kraftakt``;
``_kraft`` matches only ``kraftakt``.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Generic, TypeAlias, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from dsa_manager.core.exceptions import DataFormatError, NameLookupError
from dsa_manager.core.logging import get_logger


logger = get_logger(__name__)

V = TypeVar("V")

ANCHOR = "_"


# =============================================================================
# Lookup Results
# =============================================================================


@dataclass(frozen=True)
class Found(Generic[V]):
    """Exactly one entry matched."""

    name: str
    value: V

    def unwrap(self) -> tuple[str, V]:
        return self.name, self.value


@dataclass(frozen=True)
class NotFound:
    """No entry matched the search."""

    search: str

    def unwrap(self) -> tuple[str, object]:
        raise NameLookupError(f'No matches found for "{self.search}"', search=self.search)


@dataclass(frozen=True)
class Ambiguous:
    """More than one entry matched the search."""

    search: str
    candidates: tuple[str, ...] = field(default_factory=tuple)

    def unwrap(self) -> tuple[str, object]:
        names = ", ".join(f'"{name}"' for name in self.candidates)
        raise NameLookupError(
            f'Ambiguous identifier "{self.search}": Matched {names}.\n'
            f'Note: You can use "{ANCHOR}" to mark the beginning and/or end of the name.',
            search=self.search,
            candidates=list(self.candidates),
        )


LookupResult: TypeAlias = Found[V] | NotFound | Ambiguous


def match_search(entries: Iterable[tuple[str, V]], search: str) -> LookupResult[V]:
    """Find the single entry whose name matches a search term.

    Args:
        entries: (name, value) pairs to search.
        search: Case-insensitive substring, optionally anchored with a
            leading and/or trailing underscore.

    Returns:
        Found, NotFound or Ambiguous naming every matching candidate.
    """
    term = search.casefold()
    at_start = term.startswith(ANCHOR)
    if at_start:
        term = term[len(ANCHOR):]
    at_end = term.endswith(ANCHOR)
    if at_end:
        term = term[: -len(ANCHOR)]

    matches: list[tuple[str, V]] = []
    for name, value in entries:
        folded = name.casefold()
        if term not in folded:
            continue
        if at_start and not folded.startswith(term):
            continue
        if at_end and not folded.endswith(term):
            continue
        matches.append((name, value))

    if not matches:
        logger.debug("Lookup found nothing", search=search)
        return NotFound(search=search)
    if len(matches) > 1:
        logger.debug("Lookup ambiguous", search=search, candidates=len(matches))
        return Ambiguous(search=search, candidates=tuple(name for name, _ in matches))
    name, value = matches[0]
    return Found(name=name, value=value)


# =============================================================================
# Dataset Schema
# =============================================================================


class AttributeInfo(BaseModel):
    """An attribute entry (e.g. 'mut' with short name 'MU')."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    short_name: str = Field(min_length=1, description="Abbreviation shown in tables")


class GoverningAttributes(BaseModel):
    """Attributes a talent, spell or chant is checked against."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    attributes: tuple[str, ...] = Field(min_length=1, description="Attribute ids")


class CombatTechniqueInfo(BaseModel):
    """A combat technique with its primary attributes."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    attributes: tuple[str, ...] = Field(default=(), description="Primary attribute ids")
    ranged: bool = Field(default=False, description="Ranged technique")


class RuleDataset(BaseModel):
    """Read-only game data used to build checks.

    Attributes:
        version: Data format version.
        attributes: Attribute id to attribute info.
        talents: Talent id to governing attributes.
        combat_techniques: Technique id to technique info.
        spells: Spell id to governing attributes.
        chants: Chant id to governing attributes.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    version: int = Field(default=0, ge=0)
    attributes: dict[str, AttributeInfo] = Field(default_factory=dict)
    talents: dict[str, GoverningAttributes] = Field(default_factory=dict)
    combat_techniques: dict[str, CombatTechniqueInfo] = Field(default_factory=dict)
    spells: dict[str, GoverningAttributes] = Field(default_factory=dict)
    chants: dict[str, GoverningAttributes] = Field(default_factory=dict)

    def attribute_short_name(self, attribute_id: str) -> str:
        """Short name of an attribute, falling back to the id itself."""
        info = self.attributes.get(attribute_id)
        if info is None:
            folded = attribute_id.casefold()
            for name, candidate in self.attributes.items():
                if name.casefold() == folded:
                    info = candidate
                    break
        return info.short_name if info is not None else attribute_id


def load_rule_dataset(path: Path) -> RuleDataset:
    """Load a rule dataset from a JSON file.

    Raises:
        DataFormatError: If the file cannot be read or does not validate.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DataFormatError(
            f"Unable to read rule data: {exc}", source_file=str(path)
        ) from exc
    try:
        dataset = RuleDataset.model_validate_json(raw)
    except PydanticValidationError as exc:
        raise DataFormatError(
            f"Invalid rule data: {exc.error_count()} validation error(s)",
            source_file=str(path),
            details={"errors": [e["msg"] for e in exc.errors()]},
        ) from exc
    logger.info(
        "Rule dataset loaded",
        path=str(path),
        version=dataset.version,
        talents=len(dataset.talents),
        spells=len(dataset.spells),
    )
    return dataset


__all__ = [
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
]
