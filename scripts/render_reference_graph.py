#!/usr/bin/env python3
"""Render the character to ability reference graph of a catalog."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import matplotlib.pyplot as plt
import networkx as nx
from matplotlib.lines import Line2D

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from bestiary.references import build_reference_graph
from build_catalog import build_factory

CHARACTER_NODE_COLOUR = "#f5deb3"
ABILITY_NODE_COLOUR = "#98df8a"
SCRIPTED_NODE_COLOUR = "#9467bd"
MISSING_NODE_COLOUR = "#d62728"

SLOT_STYLES = {
    "offensive": {"color": "#d62728", "style": "solid", "label": "Offensive"},
    "defensive": {"color": "#1f77b4", "style": "solid", "label": "Defensive"},
    "secondary": {"color": "#7f7f7f", "style": "dashed", "label": "Secondary"},
}


def _node_colour(data: dict) -> str:
    if data.get("kind") == "character":
        return CHARACTER_NODE_COLOUR
    if not data.get("resolved"):
        return MISSING_NODE_COLOUR
    if data.get("overridden"):
        return SCRIPTED_NODE_COLOUR
    return ABILITY_NODE_COLOUR


def render_reference_graph(
    graph: nx.DiGraph, output_path: Path, dpi: int = 200, seed: int = 42, size: float = 12.0
) -> None:
    pos = nx.spring_layout(graph, k=0.8, seed=seed)

    plt.figure(figsize=(size, size), dpi=dpi)
    nx.draw_networkx_nodes(
        graph,
        pos,
        node_color=[_node_colour(graph.nodes[node]) for node in graph.nodes],
        node_size=420,
        linewidths=0.5,
        edgecolors="#333333",
    )
    labels = {node: graph.nodes[node].get("label", node) for node in graph.nodes}
    nx.draw_networkx_labels(graph, pos, labels=labels, font_size=6)

    for slot, style in SLOT_STYLES.items():
        edges = [
            (source, target)
            for source, target, data in graph.edges(data=True)
            if slot in data.get("slots", ())
        ]
        if not edges:
            continue
        nx.draw_networkx_edges(
            graph,
            pos,
            edgelist=edges,
            edge_color=style["color"],
            style=style["style"],
            arrows=True,
            arrowsize=8,
            alpha=0.75,
        )

    legend_handles = [
        Line2D([], [], color=style["color"], linestyle=style["style"], label=style["label"])
        for style in SLOT_STYLES.values()
    ]
    for colour, label in (
        (CHARACTER_NODE_COLOUR, "Character"),
        (ABILITY_NODE_COLOUR, "Ability"),
        (SCRIPTED_NODE_COLOUR, "Ability with code-defined behavior"),
        (MISSING_NODE_COLOUR, "Missing ability"),
    ):
        legend_handles.append(
            Line2D([], [], marker="o", linestyle="", color=colour, label=label)
        )

    plt.legend(handles=legend_handles, loc="upper left", frameon=False, fontsize=8)
    plt.axis("off")
    plt.tight_layout()

    output_path.parent.mkdir(parents=True, exist_ok=True)
    plt.savefig(output_path, bbox_inches="tight")
    plt.close()


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("characters", type=Path, help="CSV export of the character sheet.")
    parser.add_argument("abilities", type=Path, help="CSV export of the ability sheet.")
    parser.add_argument("--config", type=Path, default=None, help="TOML factory configuration.")
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("img/ability-references.png"),
        help="Where to write the rendered graph image.",
    )
    parser.add_argument("--dpi", type=int, default=200, help="Rendering DPI.")
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed passed to the spring layout to produce stable results.",
    )
    parser.add_argument("--size", type=float, default=12.0, help="Figure width in inches.")

    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO)

    factory = build_factory(args.characters, args.abilities, args.config)
    graph = build_reference_graph(factory)
    render_reference_graph(graph, args.output, dpi=args.dpi, seed=args.seed, size=args.size)


if __name__ == "__main__":
    main()
