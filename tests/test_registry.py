from __future__ import annotations

import logging
import sys
import textwrap
from pathlib import Path
from types import SimpleNamespace

import pytest

PROJECT_BASE = Path(__file__).resolve().parents[1]
if str(PROJECT_BASE) not in sys.path:
    sys.path.insert(0, str(PROJECT_BASE))

from bestiary.registry import (
    BUNDLED_BEHAVIOR_DIR,
    BehaviorLoadError,
    BehaviorRegistry,
    behavior_methods,
)


def _write_behavior(directory: Path, name: str, body: str) -> Path:
    path = directory / name
    path.write_text(textwrap.dedent(body), encoding="utf8")
    return path


def test_bundled_behaviors_are_keyed_by_file_name() -> None:
    registry = BehaviorRegistry.load()

    assert "fireball.py" in registry
    assert "heal.py" in registry
    assert "__init__.py" not in registry
    assert registry.lookup("fireball") is None
    assert registry.lookup_slug("fireball") is registry.lookup("fireball.py")


def test_load_reads_every_module_in_directory(tmp_path: Path) -> None:
    _write_behavior(
        tmp_path,
        "spark.py",
        """
        from os.path import join

        def do(ability, caster=None, target=None):
            return "spark"

        def describe(ability):
            return "a spark"

        def _helper():
            return None
        """,
    )
    _write_behavior(tmp_path, "notes.txt", "not a behavior")
    _write_behavior(tmp_path, "__init__.py", "")

    registry = BehaviorRegistry.load(tmp_path)

    assert list(registry) == ["spark.py"]
    assert len(registry) == 1
    methods = behavior_methods(registry.lookup("spark.py"))
    assert set(methods) == {"do", "describe"}


def test_load_skips_modules_that_fail_to_import(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    _write_behavior(tmp_path, "broken.py", "def do(:\n")
    _write_behavior(tmp_path, "quake.py", "def do(ability):\n    return 'quake'\n")

    with caplog.at_level(logging.WARNING, logger="bestiary.registry"):
        registry = BehaviorRegistry.load(tmp_path)

    assert "broken.py" not in registry
    assert "quake.py" in registry
    assert any("broken.py" in record.getMessage() for record in caplog.records)


def test_missing_directory_yields_empty_registry(tmp_path: Path) -> None:
    registry = BehaviorRegistry.load(tmp_path / "missing")

    assert len(registry) == 0


def test_missing_directory_can_be_required(tmp_path: Path) -> None:
    with pytest.raises(BehaviorLoadError):
        BehaviorRegistry.load(tmp_path / "missing", required=True)


def test_from_slugs_appends_suffix() -> None:
    behavior = {"do": lambda ability: "boom"}
    registry = BehaviorRegistry.from_slugs({"fireball": behavior})

    assert registry.key_for("fireball") == "fireball.py"
    assert registry.lookup("fireball.py") is behavior
    assert registry.lookup_slug("fireball") is behavior
    assert registry.lookup_slug("frostbolt") is None


def test_custom_suffix_changes_join_key() -> None:
    registry = BehaviorRegistry.from_slugs({"fireball": {}}, suffix=".js")

    assert registry.key_for("fireball") == "fireball.js"
    assert "fireball.js" in registry


def test_registry_is_read_only() -> None:
    registry = BehaviorRegistry({"fireball.py": {}})

    with pytest.raises(TypeError):
        registry.behaviors["heal.py"] = {}  # type: ignore[index]


def test_class_sources_are_instantiated_once() -> None:
    class Fireball:
        def do(self, ability):
            return "boom"

    registry = BehaviorRegistry({"fireball.py": Fireball})
    source = registry.lookup("fireball.py")

    assert isinstance(source, Fireball)
    assert behavior_methods(source)["do"](None) == "boom"


def test_behavior_methods_lists_public_callables() -> None:
    source = SimpleNamespace(do=lambda ability: 1, _private=lambda ability: 2, power=5)

    assert set(behavior_methods(source)) == {"do"}
    assert set(behavior_methods({"do": print, "_hidden": print, "value": 3})) == {"do"}
    assert behavior_methods(None) == {}
    assert behavior_methods(SimpleNamespace()) == {}


def test_bundled_directory_points_inside_package() -> None:
    assert BUNDLED_BEHAVIOR_DIR.name == "abilities"
    assert (BUNDLED_BEHAVIOR_DIR / "fireball.py").is_file()
