"""Builders turning field records into abilities and character blueprints."""

from __future__ import annotations

import logging
from collections.abc import Hashable
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional

from .models import (
    ABILITY_SLOTS,
    CHARACTER_FIELD_NAMES,
    DEFAULT_BEHAVIOR_METHODS,
    Ability,
    AbilityBehavior,
    AbilityFields,
    Character,
    CharacterFields,
)
from .registry import BehaviorRegistry, behavior_methods

log = logging.getLogger(__name__)


class OverrideStrategy(str, Enum):
    """How a code-defined behavior source is merged into an ability.

    ``MERGE`` replaces each default method with the one the source defines.
    ``LEGACY`` finds the source but copies nothing, so the ability keeps its
    default behavior; older catalogs were built this way.
    """

    MERGE = "merge"
    LEGACY = "legacy"

    @classmethod
    def from_value(
        cls,
        value: "OverrideStrategy | str | None",
        *,
        default: "OverrideStrategy | None" = None,
    ) -> "OverrideStrategy":
        if isinstance(value, cls):
            return value
        if value is None:
            return default or cls.MERGE
        normalized = str(value).strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        if default is not None:
            return default
        raise ValueError(f"Unknown override strategy: {value}")


class OverridePolicy(str, Enum):
    """Decides when a per-instance option replaces a blueprint default.

    ``TRUTHY`` only accepts truthy overrides, so ``0`` or ``""`` fall back to
    the blueprint value.  ``PRESENT`` accepts anything that is not ``None``.
    """

    TRUTHY = "truthy"
    PRESENT = "present"

    @classmethod
    def from_value(
        cls,
        value: "OverridePolicy | str | None",
        *,
        default: "OverridePolicy | None" = None,
    ) -> "OverridePolicy":
        if isinstance(value, cls):
            return value
        if value is None:
            return default or cls.TRUTHY
        normalized = str(value).strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        if default is not None:
            return default
        raise ValueError(f"Unknown override policy: {value}")

    def pick(self, override: Any, default: Any) -> Any:
        if self is OverridePolicy.TRUTHY:
            return override or default
        return default if override is None else override


def resolve_behavior(
    fields: AbilityFields,
    registry: Optional[BehaviorRegistry],
    *,
    strategy: OverrideStrategy = OverrideStrategy.MERGE,
) -> AbilityBehavior:
    if registry is None:
        return AbilityBehavior()

    key = registry.key_for(fields.slug)
    source = registry.lookup(key)
    if source is None:
        log.debug("No behavior source %s for ability %r", key, fields.slug)
        return AbilityBehavior()

    if strategy is OverrideStrategy.LEGACY:
        log.debug("Ability %r found %s but keeps default behavior", fields.slug, key)
        return AbilityBehavior(source=key)

    overrides = behavior_methods(source)
    if not overrides:
        log.debug(
            "Behavior source %s defines no methods; ability %r keeps default behavior",
            key,
            fields.slug,
        )
        return AbilityBehavior(source=key)

    methods = dict(DEFAULT_BEHAVIOR_METHODS)
    methods.update(overrides)
    return AbilityBehavior(
        methods=MappingProxyType(methods),
        source=key,
        overridden=frozenset(overrides),
    )


def build_ability(
    fields: AbilityFields,
    registry: Optional[BehaviorRegistry] = None,
    *,
    strategy: OverrideStrategy = OverrideStrategy.MERGE,
) -> Ability:
    """Resolve one ability row and its optional behavior source.

    A lookup miss is not an error: the ability simply keeps the default
    method table.  The returned object is meant to be the only instance for
    its slug; every character referencing the slug shares it.
    """

    return Ability(
        data=fields,
        behavior=resolve_behavior(fields, registry, strategy=strategy),
    )


@dataclass(frozen=True, slots=True, eq=False)
class Blueprint:
    """Template stamping out characters of one slug.

    ``abilities`` is the factory's live ability catalog, not a snapshot.
    Ability slugs are looked up in it each time a character is instantiated.
    """

    defaults: CharacterFields
    abilities: Mapping[str, Ability]
    policy: OverridePolicy = OverridePolicy.TRUTHY

    @property
    def slug(self) -> Any:
        return self.defaults.slug

    def resolve_ability(self, slug: Any) -> Optional[Ability]:
        if not slug or not isinstance(slug, Hashable):
            return None
        ability = self.abilities.get(slug)
        if ability is None:
            log.debug("Blueprint %r references unknown ability %r", self.slug, slug)
        return ability

    def instantiate(self, options: Optional[Mapping[str, Any]] = None) -> Character:
        options = options or {}
        values = {
            name: self.policy.pick(options.get(name), getattr(self.defaults, name))
            for name in CHARACTER_FIELD_NAMES
        }
        ability_slugs = {slot: values[slot] for slot in ABILITY_SLOTS}
        for slot, ability_slug in ability_slugs.items():
            values[slot] = self.resolve_ability(ability_slug)
        return Character(blueprint=self.slug, ability_slugs=ability_slugs, **values)


def build_blueprint(
    fields: CharacterFields,
    abilities: Mapping[str, Ability],
    *,
    policy: OverridePolicy = OverridePolicy.TRUTHY,
) -> Blueprint:
    return Blueprint(defaults=fields, abilities=abilities, policy=policy)


__all__ = [
    "Blueprint",
    "OverridePolicy",
    "OverrideStrategy",
    "build_ability",
    "build_blueprint",
    "resolve_behavior",
]
