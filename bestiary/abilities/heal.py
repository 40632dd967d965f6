"""Heal: restores vitality to the target, or to the caster when untargeted."""

from __future__ import annotations

from typing import Any


def _number(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def do(ability, caster: Any = None, target: Any = None) -> dict[str, Any]:
    recipient = target if target is not None else caster
    mystica = _number(getattr(caster, "mystica", None))
    amount = _number(ability.data.base_effect) + mystica * _number(
        ability.data.modifier, 0.5
    )
    return {
        "ability": ability.slug,
        "target": getattr(recipient, "slug", None),
        "healing": max(0.0, amount),
    }
