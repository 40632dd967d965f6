"""Checks applied to mapped row records before they become field models.

Only strict row mapping validates.  A validator names the fields it cares
about; when the caller passes the column map of the table, every failure is
reported with the spreadsheet column that held the bad cell.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Mapping, Optional, Sequence


class ModelValidationError(ValueError):
    """Raised when a mapped row does not satisfy a model's requirements."""

    def __init__(self, model: type[Any], errors: Sequence[str]) -> None:
        self.model = model
        self.errors = list(errors)
        super().__init__(f"{model.__name__} validation failed: {', '.join(self.errors)}")


@dataclass(frozen=True)
class FieldSpec:
    expected: Any
    description: str
    allow_none: bool = False


def is_non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def _accepts(expected: Any, value: Any) -> bool:
    if isinstance(expected, type):
        return isinstance(value, expected)
    return bool(expected(value))


class ModelValidator:
    """Base class for row record validators."""

    model: ClassVar[type[Any]]
    fields: ClassVar[Mapping[str, FieldSpec]]

    @classmethod
    def validate(
        cls, data: Mapping[str, Any], *, columns: Optional[Mapping[str, int]] = None
    ) -> dict[str, Any]:
        errors: list[str] = []
        for name, spec in cls.fields.items():
            label = f"Field '{name}'"
            if columns and name in columns:
                label += f" (column {columns[name]})"

            value = data.get(name)
            if value is None:
                if not spec.allow_none:
                    errors.append(f"{label} cannot be empty")
                continue
            if not _accepts(spec.expected, value):
                errors.append(
                    f"{label} expected {spec.description}, received {value!r}"
                )

        if errors:
            raise ModelValidationError(cls.model, errors)
        return dict(data)


def validate_dataclass_payload(
    cls: type[Any],
    data: Mapping[str, Any],
    *,
    columns: Optional[Mapping[str, int]] = None,
) -> dict[str, Any]:
    """Validate a record for a dataclass if a validator is registered."""

    validator: type[ModelValidator] | None = getattr(cls, "validator", None)
    if validator is None:
        return dict(data)
    return validator.validate(data, columns=columns)
