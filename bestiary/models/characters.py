"""Character domain models."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from ._validation import FieldSpec, ModelValidator, is_non_empty_str
from .abilities import Ability

ABILITY_SLOTS: tuple[str, ...] = ("offensive", "defensive", "secondary")

CHARACTER_STAT_NAMES: tuple[str, ...] = (
    "strength",
    "intelligence",
    "vitality",
    "arcana",
    "defense",
    "mystica",
    "accuracy",
    "agility",
)


@dataclass(frozen=True, slots=True)
class CharacterFields:
    """Declarative character or monster data mapped from one character row.

    The ability slots hold slugs into the ability catalog; they are resolved
    only when an instance is manufactured.
    """

    name: Any = None
    slug: Any = None
    region: Any = None
    description: Any = None
    level: Any = None
    strength: Any = None
    intelligence: Any = None
    vitality: Any = None
    arcana: Any = None
    defense: Any = None
    mystica: Any = None
    accuracy: Any = None
    agility: Any = None
    experience: Any = None
    offensive: Any = None
    defensive: Any = None
    secondary: Any = None

    def to_mapping(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "CharacterFields":
        return cls(**{name: mapping.get(name) for name in CHARACTER_FIELD_NAMES})

    def ability_slugs(self) -> Dict[str, Any]:
        return {slot: getattr(self, slot) for slot in ABILITY_SLOTS}


CHARACTER_FIELD_NAMES: tuple[str, ...] = (
    "name",
    "slug",
    "region",
    "description",
    "level",
    *CHARACTER_STAT_NAMES,
    "experience",
    *ABILITY_SLOTS,
)


class CharacterFieldsValidator(ModelValidator):
    model = CharacterFields
    fields = {
        "name": FieldSpec(is_non_empty_str, "a non-empty string name"),
        "slug": FieldSpec(is_non_empty_str, "a non-empty string slug"),
        "region": FieldSpec(str, "a region name", allow_none=True),
        "description": FieldSpec(str, "a string description", allow_none=True),
        "offensive": FieldSpec(str, "an ability slug", allow_none=True),
        "defensive": FieldSpec(str, "an ability slug", allow_none=True),
        "secondary": FieldSpec(str, "an ability slug", allow_none=True),
    }


CharacterFields.validator = CharacterFieldsValidator


@dataclass(slots=True)
class Character:
    """A runtime character stamped out from a blueprint."""

    blueprint: Any
    name: Any = None
    slug: Any = None
    region: Any = None
    description: Any = None
    level: Any = None
    strength: Any = None
    intelligence: Any = None
    vitality: Any = None
    arcana: Any = None
    defense: Any = None
    mystica: Any = None
    accuracy: Any = None
    agility: Any = None
    experience: Any = None
    offensive: Optional[Ability] = None
    defensive: Optional[Ability] = None
    secondary: Optional[Ability] = None
    ability_slugs: Dict[str, Any] = field(default_factory=dict)

    @property
    def abilities(self) -> Dict[str, Optional[Ability]]:
        return {slot: getattr(self, slot) for slot in ABILITY_SLOTS}

    @property
    def missing_abilities(self) -> List[str]:
        """Slots that named an ability slug which did not resolve."""

        return [
            slot
            for slot in ABILITY_SLOTS
            if self.ability_slugs.get(slot) and getattr(self, slot) is None
        ]

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"blueprint": self.blueprint}
        for name in CHARACTER_FIELD_NAMES:
            value = getattr(self, name)
            if name in ABILITY_SLOTS:
                value = value.slug if value is not None else None
            payload[name] = value
        return payload


__all__ = [
    "ABILITY_SLOTS",
    "CHARACTER_FIELD_NAMES",
    "CHARACTER_STAT_NAMES",
    "Character",
    "CharacterFields",
    "CharacterFieldsValidator",
]
