# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Forage: layered configuration and named provider registries for routing hosts."""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

from forage._version import __version__
from forage.core.lazy_import import create_lazy_getattr
from forage.exceptions import (
    ConfigurationError,
    DependencyConstructionError,
    ForageError,
    MissingConfigError,
    PluginNotFoundError,
    ProviderError,
    SelectorSourceNotFoundError,
    UndefinedInstanceError,
    UnknownSelectorSourceError,
)


if TYPE_CHECKING:
    from forage.context import ForageContext, activate, get_context, reset_context

_dynamic_imports: MappingProxyType[str, tuple[str, str]] = MappingProxyType({
    "ForageContext": (__spec__.parent, "context"),
    "activate": (__spec__.parent, "context"),
    "get_context": (__spec__.parent, "context"),
    "reset_context": (__spec__.parent, "context"),
})

__getattr__ = create_lazy_getattr(_dynamic_imports, globals(), __name__)

__all__ = (
    "ConfigurationError",
    "DependencyConstructionError",
    "ForageContext",
    "ForageError",
    "MissingConfigError",
    "PluginNotFoundError",
    "ProviderError",
    "SelectorSourceNotFoundError",
    "UndefinedInstanceError",
    "UnknownSelectorSourceError",
    "__version__",
    "activate",
    "get_context",
    "reset_context",
)
