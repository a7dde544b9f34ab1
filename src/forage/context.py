# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""The Forage context: every piece of process state, in one injectable object.

A context owns the system properties, the value store, the feature registries
and the plugin registry. Pass one explicitly with `context=`, or use the
process default from `get_context()`.

A host calls `activate` once at startup. It fixes the resource anchor,
discovers entry point plugins and runs every registered bean factory.
"""

from __future__ import annotations

import logging
import threading

from typing import TYPE_CHECKING

from forage.common.logging import setup_logger_from_settings
from forage.config.features import FeatureCatalog
from forage.config.settings import ForageSettings, get_settings
from forage.config.sources import SystemProperties
from forage.config.store import SettingValueStore
from forage.exceptions import ForageError
from forage.registry.beans import BeanFactory, BeanRegistry
from forage.registry.plugins import PluginRegistry, ProviderKind


if TYPE_CHECKING:
    from collections.abc import Mapping

    from forage.config.properties import ResourceAnchor


logger = logging.getLogger(__name__)


class ForageContext:
    """Process state shared by every feature."""

    def __init__(
        self,
        settings: ForageSettings | None = None,
        *,
        system_properties: SystemProperties | None = None,
        environ: Mapping[str, str] | None = None,
        plugins: PluginRegistry | None = None,
    ) -> None:
        """Create a context.

        Args:
            settings: Library settings; the global settings when omitted.
            system_properties: System property table; a fresh, empty one when omitted.
            environ: Environment for setting overrides; `os.environ` when omitted.
            plugins: Plugin registry; a fresh, empty one when omitted.
        """
        self.settings = settings or get_settings()
        self.system_properties = system_properties if system_properties is not None else SystemProperties()
        self.store = SettingValueStore(
            settings=self.settings, system_properties=self.system_properties, environ=environ
        )
        self.features = FeatureCatalog(self.store)
        self.plugins = plugins if plugins is not None else PluginRegistry()
        self._beans: BeanRegistry | None = None
        self._lock = threading.Lock()

    @property
    def activated(self) -> bool:
        """Whether `activate` has run."""
        return self._beans is not None

    def activate(
        self,
        beans: BeanRegistry | None = None,
        *,
        resource_anchor: ResourceAnchor | None = None,
    ) -> BeanRegistry:
        """Set up Forage for a host: run once, later calls return the same beans.

        Each bean factory runs in registration order. A factory that fails is
        logged and skipped so one broken feature does not stop the others.
        """
        with self._lock:
            if self._beans is not None:
                logger.debug("Forage context already activated")
                return self._beans
            self._beans = beans = beans if beans is not None else BeanRegistry()
        if resource_anchor is not None:
            self.store.set_resource_anchor(resource_anchor)
        if self.settings.discover_entry_points:
            self.plugins.discover()
        for factory in self.plugins.plugins(ProviderKind.BEAN_FACTORY):
            if not isinstance(factory, BeanFactory):
                logger.warning("Plugin %r is not a bean factory; skipping", factory)
                continue
            try:
                factory.configure(self, beans)
            except ForageError as e:
                logger.warning("Bean factory '%s' failed to configure:\n%s", factory.name, e.report)
            except Exception:
                logger.warning("Bean factory '%s' failed to configure", factory.name, exc_info=True)
        return beans


_context: ForageContext | None = None
_context_lock = threading.Lock()


def get_context() -> ForageContext:
    """The process default context, created on first use."""
    global _context
    if _context is None:
        with _context_lock:
            if _context is None:
                settings = get_settings()
                setup_logger_from_settings(settings)
                _context = ForageContext(settings)
    return _context


def reset_context() -> None:
    """Drop the process default context."""
    global _context
    with _context_lock:
        _context = None


def activate(
    beans: BeanRegistry | None = None, *, resource_anchor: ResourceAnchor | None = None
) -> BeanRegistry:
    """Activate the process default context."""
    return get_context().activate(beans, resource_anchor=resource_anchor)


__all__ = ("ForageContext", "activate", "get_context", "reset_context")
