# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Registries of named provider instances.

A multi-instance registry turns an instance key (`agent1`, `ds2`, ...) into a
provider instance built from that key's settings. Each allowed key is
constructed at most once; cached keys are served without taking a lock and
without re-validating the key.
"""

from __future__ import annotations

import abc
import logging
import threading

from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, ClassVar

from forage.config.features import FeatureConfig, FeatureSettings
from forage.exceptions import UndefinedInstanceError
from forage.routing.selectors import InstanceSelector, create_selector


if TYPE_CHECKING:
    from forage.config.descriptor import SettingDescriptor
    from forage.context import ForageContext
    from forage.registry.plugins import PluginRegistry, ProviderKind
    from forage.routing.context import RequestContext


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ProviderEntry[ConfigT, InstanceT]:
    """A constructed instance together with the config it was built from."""

    config: ConfigT
    instance: InstanceT


class MultiInstanceSettings(FeatureSettings, feature="forage-multi-instance"):
    """Settings every multi-instance feature declares.

    Subclasses override each attribute with their own property names, e.g.
    `forage.multi.agent.names`.
    """

    NAMES: ClassVar[SettingDescriptor]
    ID_SOURCE: ClassVar[SettingDescriptor]
    ID_SOURCE_HEADER: ClassVar[SettingDescriptor]
    ID_SOURCE_PROPERTY: ClassVar[SettingDescriptor]
    ID_SOURCE_VARIABLE: ClassVar[SettingDescriptor]


class MultiInstanceConfig[S: MultiInstanceSettings](FeatureConfig[S]):
    """The allow-list and selector settings of a multi-instance feature."""

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self.as_list(self.settings.NAMES))

    @property
    def id_source(self) -> str | None:
        return self.value(self.settings.ID_SOURCE)

    @property
    def id_source_header(self) -> str | None:
        return self.value(self.settings.ID_SOURCE_HEADER)

    @property
    def id_source_property(self) -> str | None:
        return self.value(self.settings.ID_SOURCE_PROPERTY)

    @property
    def id_source_variable(self) -> str | None:
        return self.value(self.settings.ID_SOURCE_VARIABLE)


class MultiInstanceRegistry[ConfigT, InstanceT](abc.ABC):
    """Resolve, construct and cache named provider instances.

    Subclasses say which keys are allowed, how a key's config is built and
    how an instance is constructed from it. `construct` may return None when
    no plugin can build the instance; that result is logged and not cached.
    """

    kind: ClassVar[ProviderKind]

    def __init__(self, *, context: ForageContext | None = None) -> None:
        if context is None:
            from forage.context import get_context

            context = get_context()
        self.context = context
        self._cache: dict[str, ProviderEntry[ConfigT, InstanceT]] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._locks_lock = threading.Lock()

    @property
    def plugins(self) -> PluginRegistry:
        return self.context.plugins

    @abc.abstractmethod
    def allowed_keys(self) -> tuple[str, ...]:
        """The keys this registry may construct."""

    @abc.abstractmethod
    def selector(self) -> InstanceSelector:
        """The selector that reads a key from a request."""

    @abc.abstractmethod
    def new_config(self, key: str) -> ConfigT:
        """Register and resolve the settings of instance `key`."""

    @abc.abstractmethod
    def construct(self, config: ConfigT, key: str) -> InstanceT | None:
        """Build the instance for `key`, or None when no plugin can."""

    @property
    def feature(self) -> str:
        """What this registry holds, in words, for messages."""
        return self.kind.label

    def undefined(
        self, key: str | None, allowed: tuple[str, ...], request: RequestContext | None = None
    ) -> UndefinedInstanceError:
        """The error raised for a key outside the allow-list."""
        if request is not None:
            return self.selector().undefined(request, allowed, feature=self.feature)
        return UndefinedInstanceError(
            f"'{key}' is not a defined {self.feature}", key=key, allowed=allowed, feature=self.feature
        )

    def resolve(self, request: RequestContext, *, strict: bool = False) -> InstanceT | None:
        """The instance selected by `request`.

        In strict mode a request without a key raises
        `SelectorSourceNotFoundError`; otherwise it is treated as an undefined
        instance.
        """
        selector = self.selector()
        key = selector.require(request) if strict else selector.select(request)
        return self._get(key, request)

    def get(self, key: str) -> InstanceT | None:
        """The instance named `key`, constructing it on first use."""
        return self._get(key, None)

    def _get(self, key: str | None, request: RequestContext | None) -> InstanceT | None:
        if key is not None and (entry := self._cache.get(key)) is not None:
            return entry.instance
        allowed = self.allowed_keys()
        if key is None or key not in allowed:
            raise self.undefined(key, allowed, request)
        with self._lock_for(key):
            if (entry := self._cache.get(key)) is not None:
                return entry.instance
            config = self.new_config(key)
            instance = self.construct(config, key)
            if instance is None:
                logger.warning("No %s could be constructed for '%s'", self.kind.value, key)
                return None
            self._cache[key] = ProviderEntry(config, instance)
            logger.debug("Constructed %s '%s'", self.kind.value, key)
            return instance

    def _lock_for(self, key: str) -> threading.Lock:
        if (lock := self._locks.get(key)) is not None:
            return lock
        with self._locks_lock:
            return self._locks.setdefault(key, threading.Lock())

    def find_plugin(self, class_name: str | None, kind: ProviderKind | None = None) -> Any | None:
        """The plugin of `kind` (this registry's kind by default) matching `class_name`."""
        kind = kind or self.kind
        if not class_name:
            logger.warning("No %s class configured", kind.value)
            return None
        if (plugin := self.plugins.find_by_class_name(kind, class_name)) is None:
            logger.warning(
                "No %s plugin found for class %s. Registered: %s",
                kind.value,
                class_name,
                ", ".join(self.plugins.names(kind)) or "(none)",
            )
        return plugin

    def entries(self) -> MappingProxyType[str, ProviderEntry[ConfigT, InstanceT]]:
        """A read-only snapshot of every constructed instance."""
        return MappingProxyType(dict(self._cache))

    def keys(self) -> tuple[str, ...]:
        """The keys constructed so far."""
        return tuple(self._cache)

    def clear(self) -> None:
        """Drop every cached instance."""
        with self._locks_lock:
            self._cache.clear()
            self._locks.clear()


class SelectingRegistry[ConfigT, InstanceT](MultiInstanceRegistry[ConfigT, InstanceT]):
    """A registry whose allow-list and selector come from a `MultiInstanceConfig`."""

    def __init__(
        self, selection: MultiInstanceConfig[Any], *, context: ForageContext | None = None
    ) -> None:
        super().__init__(context=context or selection.context)
        self.selection = selection
        self._selector = create_selector(selection)

    def allowed_keys(self) -> tuple[str, ...]:
        return self.selection.names

    def selector(self) -> InstanceSelector:
        return self._selector


__all__ = (
    "MultiInstanceConfig",
    "MultiInstanceRegistry",
    "MultiInstanceSettings",
    "ProviderEntry",
    "SelectingRegistry",
)
