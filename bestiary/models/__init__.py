"""Domain models for abilities and characters."""

from ._validation import (
    FieldSpec,
    ModelValidationError,
    ModelValidator,
    validate_dataclass_payload,
)
from .abilities import (
    ABILITY_FIELD_NAMES,
    Ability,
    AbilityBehavior,
    AbilityFields,
    DEFAULT_BEHAVIOR_METHODS,
)
from .characters import (
    ABILITY_SLOTS,
    CHARACTER_FIELD_NAMES,
    Character,
    CharacterFields,
)

__all__ = [
    "ABILITY_FIELD_NAMES",
    "ABILITY_SLOTS",
    "CHARACTER_FIELD_NAMES",
    "Ability",
    "AbilityBehavior",
    "AbilityFields",
    "Character",
    "CharacterFields",
    "DEFAULT_BEHAVIOR_METHODS",
    "FieldSpec",
    "ModelValidationError",
    "ModelValidator",
    "validate_dataclass_payload",
]
