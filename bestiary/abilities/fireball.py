"""Fireball: arcane damage scaled by the caster's intelligence."""

from __future__ import annotations

from typing import Any


def _number(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def do(ability, caster: Any = None, target: Any = None) -> dict[str, Any]:
    intelligence = _number(getattr(caster, "intelligence", None))
    damage = _number(ability.data.base_effect) + intelligence * _number(
        ability.data.modifier, 1.0
    )
    return {
        "ability": ability.slug,
        "target": getattr(target, "slug", None),
        "damage": max(0.0, damage),
    }
