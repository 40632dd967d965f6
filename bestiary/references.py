"""Audit of the references from character blueprints to abilities.

Missing ability slugs never fail a build or a manufacture call; a character
just ends up without that ability.  The reference graph makes those silent
misses visible before gameplay code trips over them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, List, Tuple

import networkx as nx

from .models import ABILITY_SLOTS

if TYPE_CHECKING:
    from .factory import CharacterFactory


def character_node(slug: Any) -> str:
    return f"character:{slug}"


def ability_node(slug: Any) -> str:
    return f"ability:{slug}"


def build_reference_graph(factory: "CharacterFactory") -> nx.DiGraph:
    """Return a graph with an edge from each character to each ability it names.

    Ability nodes carry ``resolved=False`` when the slug is absent from the
    ability catalog.  Edges carry the list of ``slots`` naming the ability.
    """

    graph = nx.DiGraph()
    for slug, ability in factory.abilities.items():
        graph.add_node(
            ability_node(slug),
            kind="ability",
            slug=slug,
            label=str(ability.name or slug),
            resolved=True,
            overridden=not ability.behavior.is_default,
        )

    for slug, blueprint in factory.blueprints.items():
        source = character_node(slug)
        graph.add_node(
            source,
            kind="character",
            slug=slug,
            label=str(blueprint.defaults.name or slug),
        )
        for slot in ABILITY_SLOTS:
            ability_slug = getattr(blueprint.defaults, slot)
            if not ability_slug:
                continue
            target = ability_node(ability_slug)
            if target not in graph:
                graph.add_node(
                    target,
                    kind="ability",
                    slug=ability_slug,
                    label=str(ability_slug),
                    resolved=False,
                    overridden=False,
                )
            if graph.has_edge(source, target):
                graph.edges[source, target]["slots"].append(slot)
            else:
                graph.add_edge(source, target, slots=[slot])
    return graph


def dangling_references(graph: nx.DiGraph) -> List[Tuple[Any, str, Any]]:
    """List ``(character, slot, ability)`` triples naming unknown abilities."""

    missing: List[Tuple[Any, str, Any]] = []
    for source, target, data in graph.edges(data=True):
        if graph.nodes[target].get("resolved", True):
            continue
        character = graph.nodes[source]["slug"]
        ability = graph.nodes[target]["slug"]
        for slot in data.get("slots", ()):
            missing.append((character, slot, ability))
    return sorted(missing, key=lambda entry: tuple(str(part) for part in entry))


def unused_abilities(graph: nx.DiGraph) -> List[Any]:
    """Catalogued abilities that no character blueprint references."""

    unused = [
        data["slug"]
        for node, data in graph.nodes(data=True)
        if data.get("kind") == "ability"
        and data.get("resolved")
        and graph.in_degree(node) == 0
    ]
    return sorted(unused, key=str)


__all__ = [
    "ability_node",
    "build_reference_graph",
    "character_node",
    "dangling_references",
    "unused_abilities",
]
