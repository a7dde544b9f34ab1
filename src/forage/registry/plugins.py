# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Plugin registry for provider implementations.

Plugins are registered explicitly, or discovered from the entry point group
`forage.plugins.<kind>`:

    [project.entry-points."forage.plugins.chat_model"]
    ollama = "forage_ollama.provider:OllamaProvider"

A plugin is a class with a `name` class attribute. It is imported and
instantiated (without arguments) the first time it is looked up, and that
instance is reused afterwards.
"""

from __future__ import annotations

import logging
import threading

from collections.abc import Iterator
from importlib.metadata import entry_points
from typing import Any, ClassVar, Protocol, runtime_checkable

import textcase

from forage.core.enum import BaseEnum
from forage.core.lazy_import import LazyImport
from forage.exceptions import PluginNotFoundError, ProviderError


logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "forage.plugins"


class ProviderKind(BaseEnum):
    """The kinds of plugins Forage knows how to look up."""

    AGENT = "agent"
    CHAT_MODEL = "chat_model"
    CHAT_MEMORY = "chat_memory"
    DATA_SOURCE = "data_source"
    ROUTE_POLICY = "route_policy"
    CONNECTION_FACTORY = "connection_factory"
    BEAN_FACTORY = "bean_factory"

    @property
    def label(self) -> str:
        """The kind in plain words, such as `data source`."""
        return textcase.lower(self.value)

    @property
    def entry_point_group(self) -> str:
        """The entry point group plugins of this kind are published under."""
        return f"{ENTRY_POINT_GROUP}.{self.value}"

    @classmethod
    def resolve(cls, kind: ProviderKind | str) -> ProviderKind:
        """Return the member for `kind`, adding a new member for unknown plugin kinds."""
        if isinstance(kind, ProviderKind):
            return kind
        if cls.is_member(kind):
            return cls.from_string(kind)
        logger.debug("Adding plugin kind %r", kind)
        return cls.add_member(kind, kind)


@runtime_checkable
class Plugin(Protocol):
    """A plugin exposes a stable name."""

    name: ClassVar[str]


@runtime_checkable
class Provider[T](Plugin, Protocol):
    """A plugin that creates things for a configuration prefix."""

    def create(self, prefix: str | None = None) -> T:
        """Create the provided object, configured from `prefix`."""
        ...


type PluginFactory = type[Any] | LazyImport[Any] | str


def qualified_name(obj: Any) -> str:
    """`module.QualName` of a class, or of an instance's class."""
    cls = obj if isinstance(obj, type) else type(obj)
    return f"{cls.__module__}.{cls.__qualname__}"


class _Registration:
    __slots__ = ("factory", "instance", "lock", "name")

    def __init__(self, name: str, factory: PluginFactory | object) -> None:
        self.name = name
        self.factory = LazyImport.from_path(factory) if isinstance(factory, str) else factory
        self.instance: Any = None if self._needs_instantiation else factory
        self.lock = threading.Lock()

    @property
    def _needs_instantiation(self) -> bool:
        return isinstance(self.factory, type | LazyImport)

    @property
    def class_name(self) -> str:
        if isinstance(self.factory, LazyImport):
            return self.factory.qualified_name
        return qualified_name(self.factory)

    def new(self) -> Any:
        if not self._needs_instantiation:
            return self.factory
        factory = self.factory.resolve() if isinstance(self.factory, LazyImport) else self.factory
        return factory()

    def get(self) -> Any:
        if self.instance is not None:
            return self.instance
        with self.lock:
            if self.instance is None:
                self.instance = self.new()
        return self.instance


class PluginRegistry:
    """Explicit `register(name, factory)` / `lookup(name)` registry, per plugin kind."""

    def __init__(self) -> None:
        self._plugins: dict[ProviderKind, dict[str, _Registration]] = {}
        self._lock = threading.Lock()
        self._discovered: set[ProviderKind] = set()

    def register(
        self,
        kind: ProviderKind | str,
        factory: PluginFactory | object,
        *,
        name: str | None = None,
    ) -> str:
        """Register a plugin class, an import path (`"pkg.mod:Class"`) or a ready instance.

        Returns the name it was registered under. A later registration under
        the same name replaces the earlier one.
        """
        kind = ProviderKind.resolve(kind)
        if name is None:
            if isinstance(factory, str | LazyImport):
                raise ValueError("A name is required when registering a plugin by import path")
            name = getattr(factory, "name", None)
        if not name or not isinstance(name, str):
            raise ValueError(f"Plugin {factory!r} does not declare a name")
        registration = _Registration(name, factory)
        with self._lock:
            plugins = self._plugins.setdefault(kind, {})
            if name in plugins:
                logger.debug("Replacing %s plugin %r", kind.value, name)
            plugins[name] = registration
        return name

    def unregister(self, kind: ProviderKind | str, name: str) -> None:
        """Remove a plugin, if registered."""
        kind = ProviderKind.resolve(kind)
        with self._lock:
            self._plugins.get(kind, {}).pop(name, None)

    def names(self, kind: ProviderKind | str) -> tuple[str, ...]:
        """Registered plugin names of `kind`, in registration order."""
        return tuple(self._plugins.get(ProviderKind.resolve(kind), {}))

    def _instantiate(self, kind: ProviderKind, registration: _Registration) -> Any | None:
        try:
            return registration.get()
        except Exception:
            logger.exception("Failed to load %s plugin %r", kind.value, registration.name)
            return None

    def lookup(self, kind: ProviderKind | str, name: str) -> Any | None:
        """The plugin instance registered as `name`, or None."""
        kind = ProviderKind.resolve(kind)
        registration = self._plugins.get(kind, {}).get(name)
        if registration is None:
            return None
        return self._instantiate(kind, registration)

    def require(self, kind: ProviderKind | str, name: str) -> Any:
        """The plugin instance registered as `name`; raises when there is none."""
        kind = ProviderKind.resolve(kind)
        if (plugin := self.lookup(kind, name)) is None:
            raise PluginNotFoundError(
                f"{kind.as_title} plugin '{name}' is not registered",
                details={"key": name, "registered": self.names(kind)},
                suggestions=[
                    f"Install a package publishing it under the '{kind.entry_point_group}' entry point group",
                    "Or register it with PluginRegistry.register",
                ],
            )
        return plugin

    def _find_registration(self, kind: ProviderKind, class_name: str) -> _Registration | None:
        class_name = class_name.strip()
        registrations = tuple(self._plugins.get(kind, {}).values())
        for registration in registrations:
            if class_name in (registration.name, registration.class_name):
                return registration
        # ready instances only reveal their class once loaded
        for registration in registrations:
            if registration.instance is not None and qualified_name(registration.instance) == class_name:
                return registration
        logger.debug("No %s plugin matches class %s", kind.value, class_name)
        return None

    def find_by_class_name(self, kind: ProviderKind | str, class_name: str) -> Any | None:
        """The plugin whose qualified class name, or registered name, is `class_name`."""
        kind = ProviderKind.resolve(kind)
        if (registration := self._find_registration(kind, class_name)) is None:
            return None
        return self._instantiate(kind, registration)

    def new_instance(self, kind: ProviderKind | str, class_name: str) -> Any | None:
        """A fresh instance of the plugin matching `class_name`, for stateful plugins.

        Plugins registered as ready instances are returned as they are.
        """
        kind = ProviderKind.resolve(kind)
        if (registration := self._find_registration(kind, class_name)) is None:
            return None
        try:
            return registration.new()
        except Exception:
            logger.exception("Failed to instantiate %s plugin %r", kind.value, registration.name)
            return None

    def plugins(self, kind: ProviderKind | str) -> Iterator[Any]:
        """Every loadable plugin instance of `kind`."""
        kind = ProviderKind.resolve(kind)
        for registration in tuple(self._plugins.get(kind, {}).values()):
            if (plugin := self._instantiate(kind, registration)) is not None:
                yield plugin

    def discover(self, *kinds: ProviderKind | str) -> int:
        """Register plugins published as entry points; each kind is scanned once.

        Returns the number of newly registered plugins.
        """
        targets = [ProviderKind.resolve(k) for k in kinds] if kinds else list(ProviderKind)
        count = 0
        for kind in targets:
            if kind in self._discovered:
                continue
            self._discovered.add(kind)
            for entry_point in entry_points(group=kind.entry_point_group):
                if entry_point.name in self._plugins.get(kind, {}):
                    continue
                self.register(kind, entry_point.value, name=entry_point.name)
                count += 1
        if count:
            logger.info("Discovered %d plugins from entry points", count)
        return count

    def create(self, kind: ProviderKind | str, name: str, prefix: str | None = None) -> Any:
        """Look up provider `name` and call its `create(prefix)`."""
        provider = self.require(kind, name)
        if not isinstance(provider, Provider):
            raise ProviderError(
                f"Plugin '{name}' does not provide a create method",
                details={"key": name, "prefix": prefix},
            )
        try:
            return provider.create(prefix)
        except Exception as e:
            raise ProviderError(
                f"Provider '{name}' failed to create an instance",
                details={"key": name, "prefix": prefix},
            ) from e

    def clear(self) -> None:
        """Forget every registered plugin."""
        with self._lock:
            self._plugins.clear()
            self._discovered.clear()


__all__ = (
    "ENTRY_POINT_GROUP",
    "Plugin",
    "PluginFactory",
    "PluginRegistry",
    "Provider",
    "ProviderKind",
    "qualified_name",
)
