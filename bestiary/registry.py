"""Index of code-defined ability behaviors.

Behavior sources live one per file in a directory (``bestiary/abilities`` by
default).  Each file is keyed by its literal file name, extension included, so
the behavior for the ``fireball`` ability is found under ``fireball.py``.  A
source contributes every public function it defines; those functions receive
the resolved :class:`~bestiary.models.Ability` as their first argument.
"""

from __future__ import annotations

import importlib.util
import inspect
import logging
from pathlib import Path
from types import MappingProxyType, ModuleType
from typing import Any, Callable, Dict, Iterator, Mapping, Optional

log = logging.getLogger(__name__)

DEFAULT_BEHAVIOR_SUFFIX = ".py"
BUNDLED_BEHAVIOR_DIR = Path(__file__).resolve().parent / "abilities"


class BehaviorLoadError(RuntimeError):
    pass


def behavior_methods(source: Any) -> Dict[str, Callable[..., Any]]:
    """Return the public methods a behavior source exposes, by name."""

    if source is None:
        return {}
    if isinstance(source, ModuleType):
        return {
            name: member
            for name, member in vars(source).items()
            if not name.startswith("_")
            and inspect.isfunction(member)
            and member.__module__ == source.__name__
        }
    if isinstance(source, Mapping):
        return {
            str(name): member
            for name, member in source.items()
            if callable(member) and not str(name).startswith("_")
        }
    methods: Dict[str, Callable[..., Any]] = {}
    for name in dir(source):
        if name.startswith("_"):
            continue
        member = getattr(source, name)
        if callable(member):
            methods[name] = member
    return methods


def _load_module(path: Path) -> Optional[ModuleType]:
    spec = importlib.util.spec_from_file_location(
        f"bestiary.behaviors.{path.stem}", path
    )
    if spec is None or spec.loader is None:
        return None
    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)  # type: ignore[union-attr]
    except Exception:
        log.warning("Skipping behavior module %s: import failed", path, exc_info=True)
        return None
    return module


class BehaviorRegistry:
    """Read-only mapping from behavior key to behavior source."""

    def __init__(
        self,
        behaviors: Optional[Mapping[str, Any]] = None,
        *,
        suffix: str = DEFAULT_BEHAVIOR_SUFFIX,
    ) -> None:
        prepared: Dict[str, Any] = {}
        for key, source in (behaviors or {}).items():
            # Classes are instantiated once, like a module is executed once.
            prepared[str(key)] = source() if inspect.isclass(source) else source
        self._behaviors = MappingProxyType(prepared)
        self.suffix = suffix

    @classmethod
    def load(
        cls,
        directory: Path | str | None = None,
        *,
        suffix: str = DEFAULT_BEHAVIOR_SUFFIX,
        required: bool = False,
    ) -> "BehaviorRegistry":
        """Import every behavior file in ``directory``.

        Files starting with ``__`` are ignored and files that fail to import are
        skipped with a warning.  A missing directory yields an empty registry
        unless ``required`` is set.
        """

        base = Path(directory) if directory is not None else BUNDLED_BEHAVIOR_DIR
        behaviors: Dict[str, Any] = {}
        if not base.is_dir():
            if required:
                raise BehaviorLoadError(f"Behavior directory {base} does not exist")
            log.info("No behavior directory at %s; abilities keep default behavior", base)
            return cls(behaviors, suffix=suffix)

        for path in sorted(base.glob(f"*{suffix}")):
            if path.name.startswith("__") or not path.is_file():
                continue
            module = _load_module(path)
            if module is None:
                continue
            behaviors[path.name] = module

        log.info("Loaded %d ability behavior(s) from %s", len(behaviors), base)
        return cls(behaviors, suffix=suffix)

    @classmethod
    def from_slugs(
        cls,
        behaviors: Mapping[str, Any],
        *,
        suffix: str = DEFAULT_BEHAVIOR_SUFFIX,
    ) -> "BehaviorRegistry":
        """Build a registry from behaviors keyed by ability slug."""

        return cls(
            {f"{slug}{suffix}": source for slug, source in behaviors.items()},
            suffix=suffix,
        )

    @property
    def behaviors(self) -> Mapping[str, Any]:
        return self._behaviors

    def key_for(self, slug: Any) -> str:
        return f"{slug}{self.suffix}"

    def lookup(self, key: str) -> Any | None:
        return self._behaviors.get(key)

    def lookup_slug(self, slug: Any) -> Any | None:
        return self.lookup(self.key_for(slug))

    def __contains__(self, key: object) -> bool:
        return key in self._behaviors

    def __iter__(self) -> Iterator[str]:
        return iter(self._behaviors)

    def __len__(self) -> int:
        return len(self._behaviors)


__all__ = [
    "BUNDLED_BEHAVIOR_DIR",
    "BehaviorLoadError",
    "BehaviorRegistry",
    "DEFAULT_BEHAVIOR_SUFFIX",
    "behavior_methods",
]
