"""Two-phase catalog builder and character manufacturing."""

from __future__ import annotations

import logging
from collections.abc import Hashable
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Dict,
    Iterator,
    List,
    Mapping,
    Optional,
    Tuple,
    TypeVar,
    Union,
)

from .builders import (
    Blueprint,
    OverridePolicy,
    OverrideStrategy,
    build_ability,
    build_blueprint,
)
from .models import Ability, AbilityFields, Character, CharacterFields, ModelValidationError
from .registry import BehaviorRegistry
from .rows import (
    DEFAULT_SKIP_ROWS,
    MalformedRowError,
    Table,
    is_blank_row,
    iter_data_rows,
    map_ability_row,
    map_character_row,
)

if TYPE_CHECKING:
    from .config import FactoryConfig

log = logging.getLogger(__name__)

T = TypeVar("T", AbilityFields, CharacterFields)


class FactoryState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"


class FactoryStateError(RuntimeError):
    pass


@dataclass(frozen=True, slots=True)
class NotFound:
    """Returned by :meth:`CharacterFactory.manufacture` for unknown slugs."""

    slug: Any = None

    def __bool__(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class RowError:
    table: str
    position: int
    reason: str


ManufactureResult = Union[Character, NotFound]


class CharacterFactory:
    """Builds the ability and blueprint catalogs and manufactures characters.

    Abilities are always built first: blueprints capture the ability catalog
    when they are created, so the catalog must be complete before the first
    character row is processed.
    """

    def __init__(
        self,
        registry: Optional[BehaviorRegistry] = None,
        *,
        skip_rows: int = DEFAULT_SKIP_ROWS,
        strict_rows: bool = False,
        override_strategy: OverrideStrategy | str = OverrideStrategy.MERGE,
        override_policy: OverridePolicy | str = OverridePolicy.TRUTHY,
    ) -> None:
        if skip_rows < 0:
            raise ValueError("skip_rows cannot be negative")
        self.registry = registry if registry is not None else BehaviorRegistry.load()
        self.skip_rows = skip_rows
        self.strict_rows = strict_rows
        self.override_strategy = OverrideStrategy.from_value(override_strategy)
        self.override_policy = OverridePolicy.from_value(override_policy)
        self.state = FactoryState.UNINITIALIZED
        self.errors: List[RowError] = []
        self._abilities: Dict[Any, Ability] = {}
        self._blueprints: Dict[Any, Blueprint] = {}

    @classmethod
    def from_config(
        cls, config: "FactoryConfig", *, registry: Optional[BehaviorRegistry] = None
    ) -> "CharacterFactory":
        if registry is None:
            registry = BehaviorRegistry.load(
                config.behavior_dir, suffix=config.behavior_suffix
            )
        return cls(
            registry,
            skip_rows=config.skip_rows,
            strict_rows=config.strict_rows,
            override_strategy=config.override_strategy,
            override_policy=config.override_policy,
        )

    # ------------------------------------------------------------------
    # Catalog access
    # ------------------------------------------------------------------

    @property
    def is_initialized(self) -> bool:
        return self.state is FactoryState.INITIALIZED

    @property
    def abilities(self) -> Mapping[Any, Ability]:
        return MappingProxyType(self._abilities)

    @property
    def blueprints(self) -> Mapping[Any, Blueprint]:
        return MappingProxyType(self._blueprints)

    def ability(self, slug: Any) -> Optional[Ability]:
        if not isinstance(slug, Hashable):
            return None
        return self._abilities.get(slug)

    def blueprint(self, slug: Any) -> Optional[Blueprint]:
        if not isinstance(slug, Hashable):
            return None
        return self._blueprints.get(slug)

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    def init(
        self,
        character_rows: Table,
        ability_rows: Table,
        *,
        rebuild: bool = False,
    ) -> "CharacterFactory":
        """Build both catalogs from raw tables and return ``self``.

        Calling ``init`` again requires ``rebuild=True``.  A rebuild starts from
        empty catalogs; characters manufactured earlier keep the abilities they
        were created with.
        """

        if self.is_initialized:
            if not rebuild:
                raise FactoryStateError(
                    "CharacterFactory is already initialized; pass rebuild=True to rebuild"
                )
            log.info("Rebuilding catalogs; existing characters keep their abilities")

        self.errors = []
        self.load_abilities(ability_rows)
        self.load_characters(character_rows)
        self.state = FactoryState.INITIALIZED
        log.info(
            "Built %d abilities and %d blueprints (%d rejected rows)",
            len(self._abilities),
            len(self._blueprints),
            len(self.errors),
        )
        return self

    def load_abilities(self, ability_rows: Table) -> int:
        """Replace the ability catalog with one built from ``ability_rows``."""

        abilities: Dict[Any, Ability] = {}
        for position, fields in self._mapped_rows("ability", ability_rows, map_ability_row):
            ability = build_ability(
                fields, self.registry, strategy=self.override_strategy
            )
            self._store(abilities, "ability", position, fields.slug, ability)
        self._abilities = abilities
        return len(abilities)

    def load_characters(self, character_rows: Table) -> int:
        """Replace the blueprint catalog, binding it to the current ability catalog."""

        blueprints: Dict[Any, Blueprint] = {}
        for position, fields in self._mapped_rows(
            "character", character_rows, map_character_row
        ):
            blueprint = build_blueprint(
                fields, self._abilities, policy=self.override_policy
            )
            self._store(blueprints, "character", position, fields.slug, blueprint)
        self._blueprints = blueprints
        return len(blueprints)

    def _mapped_rows(
        self,
        table: str,
        rows: Table,
        mapper: Callable[..., T],
    ) -> Iterator[Tuple[int, T]]:
        for position, row in iter_data_rows(rows, skip_rows=self.skip_rows):
            if is_blank_row(row):
                continue
            try:
                fields = mapper(row, strict=self.strict_rows)
            except (MalformedRowError, ModelValidationError) as exc:
                self._reject(table, position, str(exc))
                continue
            slug = fields.slug
            if slug is None or slug == "" or not isinstance(slug, Hashable):
                self._reject(table, position, "row has no slug")
                continue
            yield position, fields

    def _reject(self, table: str, position: int, reason: str) -> None:
        log.warning("Skipping %s row %d: %s", table, position, reason)
        self.errors.append(RowError(table=table, position=position, reason=reason))

    @staticmethod
    def _store(
        catalog: Dict[Any, Any], table: str, position: int, slug: Any, entry: Any
    ) -> None:
        if slug in catalog:
            log.warning(
                "%s row %d redefines slug %r; the later row wins", table, position, slug
            )
        catalog[slug] = entry

    # ------------------------------------------------------------------
    # Manufacturing
    # ------------------------------------------------------------------

    def manufacture(
        self, options: Optional[Mapping[str, Any]] = None, **overrides: Any
    ) -> ManufactureResult:
        """Instantiate the blueprint named by ``options["type"]``.

        Every other option overrides the matching blueprint field.  Unknown or
        missing types return :class:`NotFound`, which is falsy.
        """

        payload: Dict[str, Any] = dict(options or {})
        payload.update(overrides)
        slug = payload.get("type")
        blueprint = self.blueprint(slug) if slug is not None else None
        if blueprint is None:
            log.debug("No blueprint for character type %r", slug)
            return NotFound(slug)
        return blueprint.instantiate(payload)


__all__ = [
    "CharacterFactory",
    "FactoryState",
    "FactoryStateError",
    "ManufactureResult",
    "NotFound",
    "RowError",
]
