from __future__ import annotations

import sys
from pathlib import Path

import pytest

PROJECT_BASE = Path(__file__).resolve().parents[1]
if str(PROJECT_BASE) not in sys.path:
    sys.path.insert(0, str(PROJECT_BASE))

from bestiary.models import (
    AbilityFields,
    CharacterFields,
    ModelValidationError,
    validate_dataclass_payload,
)
from bestiary.rows import (
    ABILITY_COLUMNS,
    CHARACTER_COLUMNS,
    MalformedRowError,
    cell,
    is_blank_row,
    iter_data_rows,
    map_ability_row,
    map_character_row,
    row_width,
)

GOBLIN = {
    "name": "Goblin",
    "slug": "goblin",
    "region": "Mirefen",
    "description": "A small, spiteful raider.",
    "level": 2,
    "strength": 6,
    "intelligence": 3,
    "vitality": 30,
    "arcana": 5,
    "defense": 4,
    "mystica": 1,
    "accuracy": 70,
    "agility": 9,
    "experience": 14,
    "offensive": "fireball",
    "defensive": "guard",
    "secondary": None,
}

FIREBALL = {
    "name": "Fireball",
    "slug": "fireball",
    "ability_type": "offensive",
    "description": "A ball of fire.",
    "mp_cost": 8,
    "area": "single",
    "base_accuracy": 90,
    "base_speed": 3,
    "modifier": 2,
    "effect": "burn",
    "base_effect": 10,
}


def _character_row(**values) -> list:
    fields = dict(GOBLIN)
    fields.update(values)
    row: list = ["unused"] * max(CHARACTER_COLUMNS.values())
    for name, column in CHARACTER_COLUMNS.items():
        row[column - 1] = fields[name]
    return row


def _ability_row(**values) -> list:
    fields = dict(FIREBALL)
    fields.update(values)
    row: list = [None] * max(ABILITY_COLUMNS.values())
    for name, column in ABILITY_COLUMNS.items():
        row[column - 1] = fields[name]
    return row


def test_character_row_reads_fixed_columns() -> None:
    fields = map_character_row(_character_row())

    assert fields == CharacterFields(**GOBLIN)
    assert "unused" not in fields.to_mapping().values()


def test_character_row_uses_spreadsheet_column_numbers() -> None:
    row = _character_row()

    assert cell(row, 1) == "Goblin"
    assert cell(row, 2) == "goblin"
    assert cell(row, 6) == "unused"
    assert cell(row, 25) is None
    assert cell(row, 26) is None


def test_character_row_accepts_cells_keyed_by_column() -> None:
    row = {column: value for column, value in enumerate(_character_row(), start=1)}

    assert map_character_row(row) == map_character_row(_character_row())


def test_ability_row_reads_fixed_columns() -> None:
    fields = map_ability_row(_ability_row())

    assert fields == AbilityFields(**FIREBALL)
    assert fields.mp_cost == 8
    assert fields.base_effect == 10


def test_cell_values_pass_through_untouched() -> None:
    fields = map_ability_row(_ability_row(mp_cost="8", modifier=1.5))

    assert fields.mp_cost == "8"
    assert fields.modifier == 1.5


def test_short_row_yields_absent_fields_when_lenient() -> None:
    fields = map_character_row(["Goblin", "goblin", "Mirefen"])

    assert fields.name == "Goblin"
    assert fields.slug == "goblin"
    assert fields.region == "Mirefen"
    assert fields.level is None
    assert fields.offensive is None


def test_short_row_is_rejected_when_strict() -> None:
    with pytest.raises(MalformedRowError) as excinfo:
        map_character_row(["Goblin", "goblin", "Mirefen"], strict=True)

    assert "expected at least 25 columns" in str(excinfo.value)


def test_strict_mapping_validates_name_and_slug() -> None:
    with pytest.raises(ModelValidationError) as excinfo:
        map_ability_row(_ability_row(name=None, slug="  "), strict=True)

    assert excinfo.value.errors == [
        "Field 'name' (column 1) cannot be empty",
        "Field 'slug' (column 2) expected a non-empty string slug, received '  '",
    ]


def test_strict_mapping_reports_character_columns() -> None:
    with pytest.raises(ModelValidationError) as excinfo:
        map_character_row(_character_row(offensive=7), strict=True)

    assert excinfo.value.errors == [
        "Field 'offensive' (column 23) expected an ability slug, received 7"
    ]
    assert "CharacterFields validation failed" in str(excinfo.value)


def test_validator_without_columns_names_fields_only() -> None:
    with pytest.raises(ModelValidationError) as excinfo:
        validate_dataclass_payload(AbilityFields, {"name": "Fireball", "slug": None})

    assert excinfo.value.errors == ["Field 'slug' cannot be empty"]
    assert validate_dataclass_payload(AbilityFields, FIREBALL) == FIREBALL


def test_strict_mapping_accepts_well_formed_rows() -> None:
    assert map_character_row(_character_row(), strict=True).slug == "goblin"
    assert map_ability_row(_ability_row(), strict=True).slug == "fireball"


def test_non_sequence_row_is_malformed() -> None:
    with pytest.raises(MalformedRowError):
        map_ability_row("fireball")
    with pytest.raises(MalformedRowError):
        map_character_row(42)  # type: ignore[arg-type]


def test_row_width_counts_columns() -> None:
    assert row_width(["a", "b"]) == 2
    assert row_width({1: "a", 4: "d"}) == 4
    assert row_width({}) == 0


def test_iter_data_rows_skips_header() -> None:
    table = [["Name", "Slug"], ["Goblin", "goblin"], ["Troll", "troll"]]

    assert list(iter_data_rows(table)) == [
        (1, ["Goblin", "goblin"]),
        (2, ["Troll", "troll"]),
    ]


def test_iter_data_rows_honours_skip_count() -> None:
    table = [["title"], ["Name", "Slug"], ["Goblin", "goblin"]]

    assert [row for _, row in iter_data_rows(table, skip_rows=2)] == [["Goblin", "goblin"]]
    assert len(list(iter_data_rows(table, skip_rows=0))) == 3


def test_iter_data_rows_orders_keyed_tables() -> None:
    table = {3: ["Troll", "troll"], 1: ["Name", "Slug"], 2: ["Goblin", "goblin"]}

    assert [row[1] for _, row in iter_data_rows(table)] == ["goblin", "troll"]


def test_iter_data_rows_rejects_negative_skip() -> None:
    with pytest.raises(ValueError):
        list(iter_data_rows([], skip_rows=-1))


def test_blank_rows_are_detected() -> None:
    assert is_blank_row([None, "", "   "])
    assert is_blank_row({})
    assert not is_blank_row(["", "goblin"])
    assert not is_blank_row("goblin")
