"""Entity-definition factory for characters, monsters and their abilities.

Usage::

    from bestiary import CharacterFactory

    factory = CharacterFactory().init(character_rows, ability_rows)
    goblin = factory.manufacture({"type": "goblin", "level": 3})
"""

from .builders import (
    Blueprint,
    OverridePolicy,
    OverrideStrategy,
    build_ability,
    build_blueprint,
)
from .config import FactoryConfig
from .factory import (
    CharacterFactory,
    FactoryState,
    FactoryStateError,
    NotFound,
    RowError,
)
from .models import (
    Ability,
    AbilityBehavior,
    AbilityFields,
    Character,
    CharacterFields,
    ModelValidationError,
)
from .registry import BehaviorLoadError, BehaviorRegistry
from .rows import MalformedRowError, map_ability_row, map_character_row

__all__ = [
    # Models
    "Ability",
    "AbilityBehavior",
    "AbilityFields",
    "Character",
    "CharacterFields",
    "ModelValidationError",
    # Rows
    "MalformedRowError",
    "map_ability_row",
    "map_character_row",
    # Behaviors
    "BehaviorLoadError",
    "BehaviorRegistry",
    # Builders
    "Blueprint",
    "OverridePolicy",
    "OverrideStrategy",
    "build_ability",
    "build_blueprint",
    # Factory
    "CharacterFactory",
    "FactoryConfig",
    "FactoryState",
    "FactoryStateError",
    "NotFound",
    "RowError",
]
