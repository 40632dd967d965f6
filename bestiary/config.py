"""Factory configuration utilities."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import tomllib

from .builders import OverridePolicy, OverrideStrategy
from .registry import BUNDLED_BEHAVIOR_DIR, DEFAULT_BEHAVIOR_SUFFIX
from .rows import DEFAULT_SKIP_ROWS

_TRUE_VALUES = {"1", "true", "yes", "on"}


def env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


@dataclass(slots=True)
class FactoryConfig:
    behavior_dir: Path = BUNDLED_BEHAVIOR_DIR
    behavior_suffix: str = DEFAULT_BEHAVIOR_SUFFIX
    skip_rows: int = DEFAULT_SKIP_ROWS
    strict_rows: bool = False
    override_strategy: OverrideStrategy = OverrideStrategy.MERGE
    override_policy: OverridePolicy = OverridePolicy.TRUTHY

    @classmethod
    def from_env(cls) -> "FactoryConfig":
        behavior_dir = os.getenv("BESTIARY_BEHAVIOR_DIR")
        skip_rows = int(os.getenv("BESTIARY_SKIP_ROWS", str(DEFAULT_SKIP_ROWS)))
        return cls(
            behavior_dir=(
                Path(behavior_dir).expanduser() if behavior_dir else BUNDLED_BEHAVIOR_DIR
            ),
            behavior_suffix=os.getenv("BESTIARY_BEHAVIOR_SUFFIX", DEFAULT_BEHAVIOR_SUFFIX),
            skip_rows=max(0, skip_rows),
            strict_rows=env_flag("BESTIARY_STRICT_ROWS"),
            override_strategy=OverrideStrategy.from_value(
                os.getenv("BESTIARY_OVERRIDE_STRATEGY")
            ),
            override_policy=OverridePolicy.from_value(
                os.getenv("BESTIARY_OVERRIDE_POLICY")
            ),
        )

    @classmethod
    def from_mapping(
        cls, options: Mapping[str, Any], *, base: Path | None = None
    ) -> "FactoryConfig":
        behavior_dir = options.get("behavior_dir")
        if behavior_dir:
            path = Path(str(behavior_dir)).expanduser()
            if not path.is_absolute() and base is not None:
                path = base / path
        else:
            path = BUNDLED_BEHAVIOR_DIR
        return cls(
            behavior_dir=path,
            behavior_suffix=str(options.get("behavior_suffix", DEFAULT_BEHAVIOR_SUFFIX)),
            skip_rows=max(0, int(options.get("skip_rows", DEFAULT_SKIP_ROWS))),
            strict_rows=bool(options.get("strict_rows", False)),
            override_strategy=OverrideStrategy.from_value(options.get("override_strategy")),
            override_policy=OverridePolicy.from_value(options.get("override_policy")),
        )

    @classmethod
    def from_toml(cls, path: Path | str) -> "FactoryConfig":
        """Read the ``[factory]`` table of a TOML file.

        Relative ``behavior_dir`` entries are resolved against the file's
        directory.
        """

        config_path = Path(path)
        try:
            with config_path.open("rb") as handle:
                payload = tomllib.load(handle)
        except FileNotFoundError as exc:
            raise RuntimeError(f"Missing factory configuration at {config_path}") from exc

        options = payload.get("factory", {})
        if not isinstance(options, Mapping):
            raise RuntimeError("factory configuration must define a [factory] table")
        return cls.from_mapping(options, base=config_path.parent)


__all__ = ["FactoryConfig", "env_flag"]
