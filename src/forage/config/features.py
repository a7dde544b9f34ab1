# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Per-feature setting registries and the config base class built on them.

A feature declares its settings as class attributes of a `FeatureSettings`
subclass:

    class JdbcSettings(FeatureSettings, feature="forage-jdbc", resource_name="forage-datasource-factory"):
        URL = setting("forage.jdbc.url", "JDBC connection url", required=True)

The class attributes are the default descriptors. An instance of the class is
the live registry: it also holds the clones registered for every named
instance. Instances are owned by a `FeatureCatalog`, which belongs to a
`ForageContext`, so every context (and every test) gets fresh registries.
"""

from __future__ import annotations

import logging
import re
import threading

from types import MappingProxyType
from typing import TYPE_CHECKING, Any, ClassVar, Self

from forage.config.descriptor import SettingDescriptor
from forage.config.helpers import named_property_regex, split_list, to_bool
from forage.core.enum import SettingCategory, ValueType
from forage.exceptions import ConfigurationError, MissingConfigError


if TYPE_CHECKING:
    from forage.config.properties import ResourceAnchor
    from forage.config.store import SettingValueStore
    from forage.context import ForageContext


logger = logging.getLogger(__name__)

_UNOWNED = "__unowned__"


def setting(
    name: str,
    description: str | None = None,
    *,
    default: str | int | bool | None = None,
    value_type: ValueType | str = ValueType.STRING,
    required: bool = False,
    category: SettingCategory | str = SettingCategory.COMMON,
    display_name: str | None = None,
) -> SettingDescriptor:
    """Declare a setting on a `FeatureSettings` subclass.

    The owner is filled in when the class is created.
    """
    return SettingDescriptor.of(
        _UNOWNED,
        name,
        description=description,
        display_name=display_name,
        default_value=default,  # type: ignore[arg-type]
        value_type=value_type,
        required=required,
        category=category,
    )


class FeatureSettings:
    """The setting registry of one feature."""

    feature: ClassVar[str]
    """Id of the feature, used as the owner of its descriptors."""

    resource_name: ClassVar[str]
    """Base name of the feature's properties file."""

    resource_package: ClassVar[ResourceAnchor | None] = None
    """Package holding the feature's bundled properties file."""

    _defaults: ClassVar[MappingProxyType[str, SettingDescriptor]] = MappingProxyType({})

    def __init_subclass__(
        cls,
        *,
        feature: str | None = None,
        resource_name: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init_subclass__(**kwargs)
        if feature is not None:
            cls.feature = feature
        if not hasattr(cls, "feature"):
            raise TypeError(f"{cls.__qualname__} must declare a feature id")
        if resource_name is not None:
            cls.resource_name = resource_name
        elif feature is not None or not hasattr(cls, "resource_name"):
            cls.resource_name = cls.feature
        if vars(cls).get("resource_package") is None:
            cls.resource_package = cls.__module__.rpartition(".")[0] or cls.__module__

        defaults: dict[str, SettingDescriptor] = {}
        for base in reversed(cls.__mro__):
            for attr, value in vars(base).items():
                if isinstance(value, SettingDescriptor):
                    owned = value.model_copy(update={"owner": cls.feature})
                    defaults[attr] = owned
        for attr, descriptor in defaults.items():
            setattr(cls, attr, descriptor)
        cls._defaults = MappingProxyType(defaults)

    def __init__(self, store: SettingValueStore) -> None:
        self.store = store
        self._lock = threading.Lock()
        self._registered: dict[str | None, MappingProxyType[str, SettingDescriptor]] = {
            None: MappingProxyType({d.name: d for d in self._defaults.values()})
        }

    @classmethod
    def entries(cls) -> MappingProxyType[str, SettingDescriptor]:
        """The default descriptors, keyed by attribute name."""
        return cls._defaults

    @property
    def prefixes(self) -> tuple[str, ...]:
        """Every instance name registered so far."""
        with self._lock:
            return tuple(p for p in self._registered if p is not None)

    def descriptors(self, prefix: str | None = None) -> tuple[SettingDescriptor, ...]:
        """The descriptors registered for `prefix`; empty for an unregistered prefix."""
        return tuple((self._registered.get(prefix) or {}).values())

    def find(self, prefix: str | None, raw_name: str) -> SettingDescriptor | None:
        """The descriptor of instance `prefix` whose full or local name is `raw_name`."""
        registered = self._registered.get(prefix)
        if registered is None:
            return None
        raw_name = raw_name.strip()
        if found := registered.get(raw_name):
            return found
        return next((d for d in registered.values() if d.matches(raw_name)), None)

    def register(self, prefix: str | None) -> None:
        """Register clones of every default descriptor for instance `prefix`."""
        if prefix is None or prefix in self._registered:
            return
        clones = MappingProxyType({d.name: d.as_named(prefix) for d in self._defaults.values()})
        with self._lock:
            self._registered.setdefault(prefix, clones)
        logger.debug("Registered %d settings of %s for %r", len(clones), self.feature, prefix)

    def load_overrides(self, prefix: str | None = None) -> None:
        """Resolve every descriptor of instance `prefix` through the store."""
        for descriptor in self.descriptors(prefix):
            self.store.load(descriptor)

    def named_prefixes(self, marker: str) -> set[str]:
        """Instance names found in the properties file with `forage.<name>.<marker>.*` keys."""
        return self.store.read_prefixes(self, named_property_regex(marker))

    def read_prefixes(self, regex: str | re.Pattern[str]) -> set[str]:
        """Instance names found in the properties file by a custom regex."""
        return self.store.read_prefixes(self, regex)


class FeatureCatalog:
    """One `FeatureSettings` instance per feature class."""

    def __init__(self, store: SettingValueStore) -> None:
        self.store = store
        self._features: dict[type[FeatureSettings], FeatureSettings] = {}
        self._lock = threading.Lock()

    def get[S: FeatureSettings](self, settings_class: type[S]) -> S:
        """The registry of `settings_class`, created on first use."""
        if (found := self._features.get(settings_class)) is not None:
            return found  # type: ignore[return-value]
        with self._lock:
            return self._features.setdefault(settings_class, settings_class(self.store))  # type: ignore[return-value]

    def __contains__(self, settings_class: object) -> bool:
        return settings_class in self._features

    def clear(self) -> None:
        """Drop every registry."""
        with self._lock:
            self._features.clear()


class FeatureConfig[S: FeatureSettings]:
    """Resolved settings of one instance of a feature.

    Creating a config registers the instance's descriptors, feeds the
    properties file into the store and then resolves every descriptor through
    the precedence chain.
    """

    settings_class: ClassVar[type[FeatureSettings]]

    def __init__(self, prefix: str | None = None, *, context: ForageContext | None = None) -> None:
        if context is None:
            from forage.context import get_context

            context = get_context()
        self.context = context
        self.prefix = prefix or None
        self.settings: S = context.features.get(self.settings_class)  # type: ignore[assignment]
        self._from_qualified_keys: set[SettingDescriptor] = set()
        self.settings.register(self.prefix)
        self.store.load_feature(self.settings, self.register)
        self.settings.load_overrides(self.prefix)

    @property
    def store(self) -> SettingValueStore:
        return self.context.store

    def register(self, name: str, value: str) -> None:
        """Store a raw properties entry if it belongs to this instance.

        Fully qualified keys always win. A key matched only by its local name
        is skipped once a fully qualified key in the same file set the value.
        """
        descriptor = self.settings.find(self.prefix, name)
        if descriptor is None:
            return
        if descriptor.matches(name):
            self._from_qualified_keys.add(descriptor)
        elif descriptor in self._from_qualified_keys:
            return
        self.store.set(descriptor, value)

    def descriptor(self, default: SettingDescriptor) -> SettingDescriptor:
        """This instance's clone of a default descriptor."""
        return default.as_named(self.prefix)

    def value(self, default: SettingDescriptor) -> str | None:
        """The resolved value of a setting, or None."""
        return self.store.get(self.descriptor(default))

    def require(self, default: SettingDescriptor) -> str:
        """The resolved value of a setting; raises MissingConfigError when it has none."""
        if (value := self.value(default)) is None:
            raise self._missing(default)
        return value

    def as_list(self, default: SettingDescriptor) -> list[str]:
        """A comma-separated setting as a list."""
        return split_list(self.value(default))

    def as_bool(self, default: SettingDescriptor, *, fallback: bool = False) -> bool:
        """A setting as a boolean."""
        try:
            return to_bool(self.value(default), default=fallback)
        except ValueError as e:
            raise self._invalid(default, e) from e

    def as_int(self, default: SettingDescriptor) -> int | None:
        """A setting as an integer, or None when unset."""
        if (value := self.value(default)) is None:
            return None
        try:
            return int(value)
        except ValueError as e:
            raise self._invalid(default, e) from e

    def validate_required(self) -> Self:
        """Raise MissingConfigError for the first required setting without a value."""
        for default in self.settings.entries().values():
            if default.required and self.value(default) is None:
                raise self._missing(default)
        return self

    def _details(self, default: SettingDescriptor) -> dict[str, Any]:
        descriptor = self.descriptor(default)
        return {
            "feature": self.settings.feature,
            "prefix": self.prefix,
            "setting": descriptor.property_name,
            "env_name": descriptor.env_name,
        }

    def _missing(self, default: SettingDescriptor) -> MissingConfigError:
        details = self._details(default)
        return MissingConfigError(
            f"Missing required setting {details['setting']}",
            details=details,
            suggestions=[
                f"Set the {details['env_name']} environment variable",
                f"Add {details['setting']} to {self.settings.resource_name}.properties",
            ],
        )

    def _invalid(self, default: SettingDescriptor, cause: Exception) -> ConfigurationError:
        details = self._details(default)
        return ConfigurationError(
            f"Invalid value for {details['setting']}: {cause}", details=details
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(prefix={self.prefix!r})"


__all__ = (
    "FeatureCatalog",
    "FeatureConfig",
    "FeatureSettings",
    "setting",
)
