# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""The setting value store.

The store maps descriptors to resolved string values. `load` resolves one
descriptor through a fixed precedence chain and stores the winner:

1. environment variable (`descriptor.env_name`, empty values ignored)
2. system property (`descriptor.system_property_name`)
3. the runtime `application.properties`, when one is configured
4. the value already in the store (usually from the feature's properties file)
5. the descriptor's default value

Reads never take the lock; writes hold it only for the dict update.
"""

from __future__ import annotations

import logging
import re
import threading

from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from forage.common.logging import redact
from forage.config.properties import (
    CONFIG_DIR_PROPERTY,
    ResourceAnchor,
    load_properties,
    load_properties_file,
)
from forage.config.settings import ForageSettings, get_settings
from forage.config.sources import SystemProperties, env_value


if TYPE_CHECKING:
    from forage.config.descriptor import SettingDescriptor


logger = logging.getLogger(__name__)

type RegisterCallback = Callable[[str, str], None]


@runtime_checkable
class PropertiesSource(Protocol):
    """Anything that names a properties resource: in practice a feature's settings."""

    @property
    def resource_name(self) -> str: ...

    @property
    def resource_package(self) -> ResourceAnchor | None: ...


def extract_prefixes(keys: Iterable[str], regex: str | re.Pattern[str]) -> set[str]:
    """Distinct first capturing groups of `regex` found in `keys`."""
    pattern = re.compile(regex) if isinstance(regex, str) else regex
    found: set[str] = set()
    for key in keys:
        if (match := pattern.search(key)) and match.lastindex:
            found.add(match.group(1))
    return found


class SettingValueStore:
    """Thread-safe cache of resolved setting values."""

    def __init__(
        self,
        *,
        settings: ForageSettings | None = None,
        system_properties: SystemProperties | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        """Create a store.

        Args:
            settings: Library settings; the global settings when omitted.
            system_properties: The system property table to consult.
            environ: Environment to read overrides from; `os.environ` when omitted.
        """
        self._values: dict[SettingDescriptor, str] = {}
        self._direct: dict[str, str] = {}
        self._lock = threading.Lock()
        self._anchor: ResourceAnchor | None = None
        self._settings = settings
        self._environ = environ
        self.system_properties = system_properties if system_properties is not None else SystemProperties()

    @property
    def settings(self) -> ForageSettings:
        """The library settings in effect for this store."""
        return self._settings or get_settings()

    # ------------------------------------------------------------------
    # descriptor access

    def get(self, descriptor: SettingDescriptor) -> str | None:
        """The stored value for `descriptor`, or None."""
        return self._values.get(descriptor)

    def set(self, descriptor: SettingDescriptor, value: str | None) -> None:
        """Store `value` for `descriptor`, replacing any previous value; None removes it."""
        with self._lock:
            if value is None:
                self._values.pop(descriptor, None)
            else:
                self._values[descriptor] = str(value)

    def load(self, descriptor: SettingDescriptor) -> str | None:
        """Resolve `descriptor` through the precedence chain, store and return the result."""
        value, origin = self._resolve(descriptor)
        if value is None:
            logger.debug("No value for %s", descriptor.property_name)
            return None
        logger.debug(
            "Resolved %s=%s from %s",
            descriptor.property_name,
            redact(value, secret=descriptor.value_type.is_secret),
            origin,
        )
        self.set(descriptor, value)
        return value

    def _resolve(self, descriptor: SettingDescriptor) -> tuple[str | None, str]:
        if (value := env_value(descriptor.env_name, self._environ)) is not None:
            return value, "environment"
        if (value := self.system_properties.get(descriptor.system_property_name)) is not None:
            return value, "system property"
        if (value := self._application_property(descriptor.property_name)) is not None:
            return value, "application properties"
        if (value := self._values.get(descriptor)) is not None:
            return value, "store"
        return descriptor.default_value, "default"

    def _application_property(self, key: str) -> str | None:
        path = self.settings.application_properties
        if path is None:
            return None
        return load_properties_file(path).get(key)

    # ------------------------------------------------------------------
    # raw keys

    def set_direct(self, key: str, value: str | None) -> None:
        """Store a value under a raw string key."""
        with self._lock:
            if value is None:
                self._direct.pop(key, None)
            else:
                self._direct[key] = str(value)

    def get_direct(self, key: str) -> str | None:
        """The value stored under a raw string key, or None."""
        return self._direct.get(key)

    def direct_keys(self, prefix: str = "") -> tuple[str, ...]:
        """Raw keys stored with `set_direct` that start with `prefix`."""
        with self._lock:
            return tuple(key for key in self._direct if key.startswith(prefix))

    # ------------------------------------------------------------------
    # properties resources

    def set_resource_anchor(self, anchor: ResourceAnchor | None) -> None:
        """Set the package whose resources are searched for properties files."""
        with self._lock:
            self._anchor = anchor

    @property
    def resource_anchor(self) -> ResourceAnchor | None:
        """The current resource anchor, if any."""
        return self._anchor

    def search_dirs(self) -> tuple[Path, ...]:
        """Directories searched for properties files, in order."""
        settings = self.settings
        dirs = [settings.working_dir or Path.cwd()]
        if configured := self.system_properties.get(CONFIG_DIR_PROPERTY):
            dirs.append(Path(configured))
        elif settings.config_dir is not None:
            dirs.append(settings.config_dir)
        return tuple(dirs)

    def feature_properties(self, feature: PropertiesSource) -> dict[str, str]:
        """Read the raw entries of a feature's properties file."""
        return load_properties(
            feature.resource_name,
            search_dirs=self.search_dirs(),
            anchor=self._anchor,
            package=feature.resource_package,
        )

    def load_feature(self, feature: PropertiesSource, register: RegisterCallback) -> None:
        """Read the feature's properties file and hand every entry to `register`."""
        for key, value in self.feature_properties(feature).items():
            register(key, value)

    def read_prefixes(self, feature: PropertiesSource, regex: str | re.Pattern[str]) -> set[str]:
        """Instance names found in the feature's properties keys by `regex`."""
        return extract_prefixes(self.feature_properties(feature), regex)

    # ------------------------------------------------------------------

    def entries(self) -> MappingProxyType[SettingDescriptor, str]:
        """A read-only snapshot of every stored descriptor value."""
        with self._lock:
            return MappingProxyType(dict(self._values))

    def clear(self) -> None:
        """Forget every stored value."""
        with self._lock:
            self._values.clear()
            self._direct.clear()


__all__ = ("PropertiesSource", "RegisterCallback", "SettingValueStore", "extract_prefixes")
