# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Plugin lookup, named-instance registries and host beans."""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

from forage.core.lazy_import import create_lazy_getattr


if TYPE_CHECKING:
    from forage.registry.beans import BeanFactory, BeanRegistry
    from forage.registry.multi import (
        MultiInstanceConfig,
        MultiInstanceRegistry,
        MultiInstanceSettings,
        ProviderEntry,
        SelectingRegistry,
    )
    from forage.registry.plugins import Plugin, PluginRegistry, Provider, ProviderKind

_dynamic_imports: MappingProxyType[str, tuple[str, str]] = MappingProxyType({
    "BeanFactory": (__spec__.parent, "beans"),
    "BeanRegistry": (__spec__.parent, "beans"),
    "MultiInstanceConfig": (__spec__.parent, "multi"),
    "MultiInstanceRegistry": (__spec__.parent, "multi"),
    "MultiInstanceSettings": (__spec__.parent, "multi"),
    "Plugin": (__spec__.parent, "plugins"),
    "PluginRegistry": (__spec__.parent, "plugins"),
    "Provider": (__spec__.parent, "plugins"),
    "ProviderEntry": (__spec__.parent, "multi"),
    "ProviderKind": (__spec__.parent, "plugins"),
    "SelectingRegistry": (__spec__.parent, "multi"),
})

__getattr__ = create_lazy_getattr(_dynamic_imports, globals(), __name__)

__all__ = (
    "BeanFactory",
    "BeanRegistry",
    "MultiInstanceConfig",
    "MultiInstanceRegistry",
    "MultiInstanceSettings",
    "Plugin",
    "PluginRegistry",
    "Provider",
    "ProviderEntry",
    "ProviderKind",
    "SelectingRegistry",
)


def __dir__() -> list[str]:
    return list(__all__)
