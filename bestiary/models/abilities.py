"""Ability domain models: declarative row data plus resolved behavior."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional

from ._validation import FieldSpec, ModelValidator, is_non_empty_str

log = logging.getLogger(__name__)

BehaviorMethod = Callable[..., Any]


@dataclass(frozen=True, slots=True)
class AbilityFields:
    """Declarative ability stats as mapped from one ability row."""

    name: Any = None
    slug: Any = None
    ability_type: Any = None
    description: Any = None
    mp_cost: Any = None
    area: Any = None
    base_accuracy: Any = None
    base_speed: Any = None
    modifier: Any = None
    effect: Any = None
    base_effect: Any = None

    def to_mapping(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "AbilityFields":
        return cls(**{name: mapping.get(name) for name in ABILITY_FIELD_NAMES})


ABILITY_FIELD_NAMES: tuple[str, ...] = (
    "name",
    "slug",
    "ability_type",
    "description",
    "mp_cost",
    "area",
    "base_accuracy",
    "base_speed",
    "modifier",
    "effect",
    "base_effect",
)


class AbilityFieldsValidator(ModelValidator):
    model = AbilityFields
    fields = {
        "name": FieldSpec(is_non_empty_str, "a non-empty string name"),
        "slug": FieldSpec(is_non_empty_str, "a non-empty string slug"),
        "description": FieldSpec(str, "a string description", allow_none=True),
    }


AbilityFields.validator = AbilityFieldsValidator


def default_do(ability: "Ability", *args: Any, **kwargs: Any) -> None:
    """Fallback action for abilities without code-defined behavior."""

    log.debug("Ability %s has no code-defined 'do'; nothing happens", ability.slug)
    return None


DEFAULT_BEHAVIOR_METHODS: Mapping[str, BehaviorMethod] = MappingProxyType(
    {"do": default_do}
)


@dataclass(frozen=True, slots=True)
class AbilityBehavior:
    """Method table selected for an ability when it is built.

    ``source`` names the behavior module the table was merged from and
    ``overridden`` lists the method names actually replaced.  An ability whose
    behavior source was found but contributed nothing still reports the
    source, so callers can tell "no module" apart from "module without
    methods".
    """

    methods: Mapping[str, BehaviorMethod] = field(
        default_factory=lambda: DEFAULT_BEHAVIOR_METHODS
    )
    source: Optional[str] = None
    overridden: frozenset[str] = frozenset()

    @property
    def is_default(self) -> bool:
        return not self.overridden

    def method(self, name: str) -> BehaviorMethod:
        try:
            return self.methods[name]
        except KeyError:
            raise AttributeError(f"Ability behavior has no method {name!r}") from None

    def __contains__(self, name: object) -> bool:
        return name in self.methods


@dataclass(frozen=True, slots=True, eq=False)
class Ability:
    """A resolved ability shared by every character that references its slug."""

    data: AbilityFields
    behavior: AbilityBehavior = field(default_factory=AbilityBehavior)

    @property
    def slug(self) -> Any:
        return self.data.slug

    @property
    def name(self) -> Any:
        return self.data.name

    def call(self, method: str, *args: Any, **kwargs: Any) -> Any:
        return self.behavior.method(method)(self, *args, **kwargs)

    def do(self, *args: Any, **kwargs: Any) -> Any:
        return self.call("do", *args, **kwargs)


__all__ = [
    "ABILITY_FIELD_NAMES",
    "Ability",
    "AbilityBehavior",
    "AbilityFields",
    "AbilityFieldsValidator",
    "BehaviorMethod",
    "DEFAULT_BEHAVIOR_METHODS",
    "default_do",
]
