#!/usr/bin/env python3
"""Build the ability and character catalogs from CSV exports and audit them."""

from __future__ import annotations

import argparse
import csv
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from bestiary import CharacterFactory, FactoryConfig
from bestiary.references import (
    build_reference_graph,
    dangling_references,
    unused_abilities,
)


def read_csv_table(path: Path) -> list[list[str]]:
    """Read a spreadsheet export, header row included."""

    with path.open(newline="", encoding="utf8") as handle:
        return [row for row in csv.reader(handle)]


def build_factory(
    characters: Path, abilities: Path, config_path: Path | None = None
) -> CharacterFactory:
    config = FactoryConfig.from_toml(config_path) if config_path else FactoryConfig.from_env()
    factory = CharacterFactory.from_config(config)
    return factory.init(read_csv_table(characters), read_csv_table(abilities))


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("characters", type=Path, help="CSV export of the character sheet.")
    parser.add_argument("abilities", type=Path, help="CSV export of the ability sheet.")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="TOML file with a [factory] table. Environment variables are used otherwise.",
    )
    parser.add_argument(
        "--fail-on-dangling",
        action="store_true",
        help="Exit with status 1 when a character names an unknown ability.",
    )

    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO)

    factory = build_factory(args.characters, args.abilities, args.config)
    graph = build_reference_graph(factory)
    dangling = dangling_references(graph)

    print(f"Abilities: {len(factory.abilities)}")
    for slug, ability in sorted(factory.abilities.items(), key=lambda item: str(item[0])):
        marker = "*" if not ability.behavior.is_default else " "
        print(f"  {marker} {slug}")
    print(f"Characters: {len(factory.blueprints)}")
    for slug in sorted(factory.blueprints, key=str):
        print(f"    {slug}")

    if factory.errors:
        print(f"Rejected rows: {len(factory.errors)}")
        for error in factory.errors:
            print(f"    {error.table} row {error.position}: {error.reason}")
    if dangling:
        print(f"Dangling ability references: {len(dangling)}")
        for character, slot, ability in dangling:
            print(f"    {character}.{slot} -> {ability}")
    unused = unused_abilities(graph)
    if unused:
        print("Unused abilities: " + ", ".join(str(slug) for slug in unused))

    if dangling and args.fail_on_dangling:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
