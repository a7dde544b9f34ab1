# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Deferred imports for plugin references and package attributes.

Plugins can be registered by import path (`"my_pkg.models:OllamaProvider"`)
so that registering a provider never imports it. The reference is resolved
the first time the registry needs the class.
"""

from __future__ import annotations

import importlib
import threading

from collections.abc import Callable, Mapping
from functools import reduce
from typing import Any, cast


_UNRESOLVED = object()


class LazyImport[Import: Any]:
    """A reference to `module[:attr.path]` that imports on first use.

    Resolution happens once, under a lock, and the result is cached. Calling
    the reference calls the resolved object, and attribute reads are
    forwarded to it.

    Examples:
        >>> provider_cls = LazyImport.from_path("forage_ollama.provider:OllamaProvider")
        >>> provider_cls.is_resolved()
        False
        >>> provider = provider_cls()  # import happens here
    """

    __slots__ = ("_attrs", "_lock", "_module_name", "_target")

    _module_name: str
    _attrs: tuple[str, ...]
    _target: Any
    _lock: threading.Lock

    def __init__(self, module_name: str, *attrs: str) -> None:
        for slot, value in (
            ("_module_name", module_name),
            ("_attrs", attrs),
            ("_target", _UNRESOLVED),
            ("_lock", threading.Lock()),
        ):
            object.__setattr__(self, slot, value)

    @classmethod
    def from_path(cls, path: str) -> LazyImport[Import]:
        """Build a reference from `module:attr.chain` or a dotted `module.Attr` path."""
        path = path.strip()
        if ":" in path:
            module_name, _, attr_path = path.partition(":")
            return cls(module_name, *filter(None, attr_path.split(".")))
        module_name, _, attr = path.rpartition(".")
        return cls(module_name, attr) if module_name else cls(attr)

    @property
    def path(self) -> str:
        """The reference as a `module:attr` string."""
        if not self._attrs:
            return self._module_name
        return f"{self._module_name}:{'.'.join(self._attrs)}"

    @property
    def qualified_name(self) -> str:
        """The reference as a dotted name, the way a class reports itself."""
        return ".".join((self._module_name, *self._attrs))

    def is_resolved(self) -> bool:
        """Whether the import has happened."""
        return self._target is not _UNRESOLVED

    def resolve(self) -> Import:
        """Import and return the referenced object."""
        if self._target is _UNRESOLVED:
            with self._lock:
                if self._target is _UNRESOLVED:
                    object.__setattr__(self, "_target", self._load())
        return cast(Import, self._target)

    def _load(self) -> Any:
        try:
            module = importlib.import_module(self._module_name)
        except ImportError as e:
            raise ImportError(f"Cannot import module {self._module_name!r} for {self.path!r}") from e

        def step(obj: Any, index: int) -> Any:
            try:
                return getattr(obj, self._attrs[index])
            except AttributeError as e:
                missing = ".".join(self._attrs[: index + 1])
                raise AttributeError(
                    f"Module {self._module_name!r} has no attribute path {missing!r}"
                ) from e

        return reduce(step, range(len(self._attrs)), module)

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return self.resolve()(*args, **kwargs)

    def __getattr__(self, name: str) -> Any:
        return getattr(self.resolve(), name)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is read-only")

    def __repr__(self) -> str:
        state = "resolved" if self.is_resolved() else "not resolved"
        return f"<LazyImport {self.path!r} ({state})>"


def lazy_import[Import: Any](module_name: str, *attrs: str) -> LazyImport[Import]:
    """Reference `module_name` (and an optional attribute chain) without importing it."""
    return LazyImport(module_name, *attrs)


def create_lazy_getattr(
    dynamic_imports: Mapping[str, tuple[str, str]],
    module_globals: dict[str, object],
    module_name: str,
) -> Callable[[str], object]:
    """Build a package `__getattr__` that imports public names from submodules on demand.

    `dynamic_imports` maps each name to `(package, submodule)`. A loaded name
    is written into `module_globals` so later lookups skip the hook.
    """

    def __getattr__(name: str) -> object:  # noqa: N807
        if (location := dynamic_imports.get(name)) is None:
            try:
                return module_globals[name]
            except KeyError:
                raise AttributeError(f"module {module_name!r} has no attribute {name!r}") from None
        package, submodule = location
        value = getattr(importlib.import_module(f"{package}.{submodule}"), name)
        module_globals[name] = value
        return value

    __getattr__.__module__ = module_name
    return __getattr__


__all__ = ("LazyImport", "create_lazy_getattr", "lazy_import")
