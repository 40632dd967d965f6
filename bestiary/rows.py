"""Positional mapping of raw spreadsheet rows into field records.

Rows carry no header binding: every field is read from a fixed spreadsheet
column number.  Columns are numbered from 1 the way the spreadsheet numbers
them, so ``name`` lives in column 1 and ``slug`` in column 2.  A row can be
either a mapping keyed by column number (a spreadsheet cell object) or a plain
sequence, in which case column ``N`` is read from index ``N - 1``.

Character rows::

    1 name          7 strength       11 defense      22 experience
    2 slug          8 intelligence   12 mystica      23 offensive
    3 region        9 vitality       13 accuracy     24 defensive
    4 description  10 arcana         14 agility      25 secondary
    5 level

Columns 6 and 15-21 are not read.

Ability rows::

    1 name          5 mp_cost        9 modifier
    2 slug          6 area          10 effect
    3 ability_type  7 base_accuracy 11 base_effect
    4 description   8 base_speed

Reordering the spreadsheet columns silently changes what every field holds.
"""

from __future__ import annotations

from typing import Any, Iterator, Mapping, Sequence, Tuple, Type, TypeVar, Union

from .models import AbilityFields, CharacterFields, validate_dataclass_payload

Row = Union[Sequence[Any], Mapping[int, Any]]
Table = Union[Sequence[Row], Mapping[int, Row]]

T = TypeVar("T", AbilityFields, CharacterFields)

CHARACTER_COLUMNS: Mapping[str, int] = {
    "name": 1,
    "slug": 2,
    "region": 3,
    "description": 4,
    "level": 5,
    "strength": 7,
    "intelligence": 8,
    "vitality": 9,
    "arcana": 10,
    "defense": 11,
    "mystica": 12,
    "accuracy": 13,
    "agility": 14,
    "experience": 22,
    "offensive": 23,
    "defensive": 24,
    "secondary": 25,
}

ABILITY_COLUMNS: Mapping[str, int] = {
    "name": 1,
    "slug": 2,
    "ability_type": 3,
    "description": 4,
    "mp_cost": 5,
    "area": 6,
    "base_accuracy": 7,
    "base_speed": 8,
    "modifier": 9,
    "effect": 10,
    "base_effect": 11,
}

DEFAULT_SKIP_ROWS = 1


class MalformedRowError(ValueError):
    """Raised when a row cannot be mapped into a field record."""

    def __init__(
        self,
        reason: str,
        *,
        table: str | None = None,
        position: int | None = None,
    ) -> None:
        self.reason = reason
        self.table = table
        self.position = position
        location = ""
        if table is not None:
            location = f"{table} row"
            if position is not None:
                location += f" {position}"
            location += ": "
        super().__init__(f"{location}{reason}")


def _ensure_row(row: Any) -> None:
    if isinstance(row, (str, bytes)) or not isinstance(row, (Sequence, Mapping)):
        raise MalformedRowError(
            f"expected a sequence of cells, received {type(row).__name__}"
        )


def cell(row: Row, column: int) -> Any:
    """Return the value at spreadsheet ``column`` or ``None`` when absent."""

    if isinstance(row, Mapping):
        return row.get(column)
    index = column - 1
    if 0 <= index < len(row):
        return row[index]
    return None


def row_width(row: Row) -> int:
    if isinstance(row, Mapping):
        columns = [key for key in row if isinstance(key, int)]
        return max(columns, default=0)
    return len(row)


def is_blank_row(row: Any) -> bool:
    if isinstance(row, (str, bytes)) or not isinstance(row, (Sequence, Mapping)):
        return False
    values = row.values() if isinstance(row, Mapping) else row
    for value in values:
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return False
    return True


def _map_row(
    row: Row,
    columns: Mapping[str, int],
    model: Type[T],
    *,
    strict: bool,
) -> T:
    _ensure_row(row)
    if strict:
        required = max(columns.values())
        width = row_width(row)
        if width < required:
            raise MalformedRowError(
                f"expected at least {required} columns, received {width}"
            )
    payload = {field_name: cell(row, column) for field_name, column in columns.items()}
    if strict:
        payload = validate_dataclass_payload(model, payload, columns=columns)
    return model.from_mapping(payload)


def map_character_row(row: Row, *, strict: bool = False) -> CharacterFields:
    """Map one character or bestiary row into :class:`CharacterFields`.

    In lenient mode a short row yields ``None`` for every column it lacks.  In
    strict mode a short row raises :class:`MalformedRowError` and the record
    must carry a non-empty name and slug.
    """

    return _map_row(row, CHARACTER_COLUMNS, CharacterFields, strict=strict)


def map_ability_row(row: Row, *, strict: bool = False) -> AbilityFields:
    """Map one ability row into :class:`AbilityFields`."""

    return _map_row(row, ABILITY_COLUMNS, AbilityFields, strict=strict)


def iter_data_rows(
    table: Table, *, skip_rows: int = DEFAULT_SKIP_ROWS
) -> Iterator[Tuple[int, Row]]:
    """Yield ``(position, row)`` for every row after the header rows.

    ``position`` counts from 0 over the table in iteration order, header rows
    included.  Tables keyed by row number are walked in ascending key order.
    """

    if skip_rows < 0:
        raise ValueError("skip_rows cannot be negative")
    if isinstance(table, Mapping):
        rows: Sequence[Row] = [table[key] for key in sorted(table)]
    else:
        rows = table
    for position, row in enumerate(rows):
        if position < skip_rows:
            continue
        yield position, row


__all__ = [
    "ABILITY_COLUMNS",
    "CHARACTER_COLUMNS",
    "DEFAULT_SKIP_ROWS",
    "MalformedRowError",
    "Row",
    "Table",
    "cell",
    "is_blank_row",
    "iter_data_rows",
    "map_ability_row",
    "map_character_row",
    "row_width",
]
