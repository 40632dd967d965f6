from __future__ import annotations

import sys
from pathlib import Path

PROJECT_BASE = Path(__file__).resolve().parents[1]
if str(PROJECT_BASE) not in sys.path:
    sys.path.insert(0, str(PROJECT_BASE))

from bestiary.factory import CharacterFactory
from bestiary.registry import BehaviorRegistry
from bestiary.references import (
    ability_node,
    build_reference_graph,
    character_node,
    dangling_references,
    unused_abilities,
)


def _character_row(slug: str, offensive=None, defensive=None, secondary=None) -> list:
    row: list = [None] * 25
    row[0] = slug.title()
    row[1] = slug
    row[22] = offensive
    row[23] = defensive
    row[24] = secondary
    return row


def _ability_row(slug: str) -> list:
    return [slug.title(), slug, "offensive", f"The {slug} ability."]


def _make_factory() -> CharacterFactory:
    registry = BehaviorRegistry.from_slugs({"fireball": {"do": lambda ability: "boom"}})
    characters = [
        ["header"],
        _character_row("goblin", offensive="fireball", defensive="guard"),
        _character_row("troll", offensive="smash", defensive="guard", secondary="smash"),
        _character_row("imp"),
    ]
    abilities = [
        ["header"],
        _ability_row("fireball"),
        _ability_row("guard"),
        _ability_row("heal"),
    ]
    return CharacterFactory(registry).init(characters, abilities)


def test_graph_links_characters_to_abilities() -> None:
    graph = build_reference_graph(_make_factory())

    assert graph.has_edge(character_node("goblin"), ability_node("fireball"))
    assert graph.has_edge(character_node("goblin"), ability_node("guard"))
    assert graph.edges[character_node("troll"), ability_node("smash")]["slots"] == [
        "offensive",
        "secondary",
    ]
    assert graph.out_degree(character_node("imp")) == 0
    assert graph.nodes[ability_node("fireball")]["overridden"] is True
    assert graph.nodes[ability_node("guard")]["overridden"] is False
    assert graph.nodes[character_node("goblin")]["label"] == "Goblin"


def test_dangling_references_name_missing_abilities() -> None:
    graph = build_reference_graph(_make_factory())

    assert graph.nodes[ability_node("smash")]["resolved"] is False
    assert dangling_references(graph) == [
        ("troll", "offensive", "smash"),
        ("troll", "secondary", "smash"),
    ]


def test_unused_abilities_are_reported() -> None:
    graph = build_reference_graph(_make_factory())

    assert unused_abilities(graph) == ["heal"]


def test_empty_factory_has_empty_graph() -> None:
    graph = build_reference_graph(CharacterFactory(BehaviorRegistry()))

    assert graph.number_of_nodes() == 0
    assert dangling_references(graph) == []
    assert unused_abilities(graph) == []
