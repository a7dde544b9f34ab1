# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Per-route policies."""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

from forage.core.lazy_import import create_lazy_getattr


if TYPE_CHECKING:
    from forage.policies.config import RoutePolicyFactoryConfig, RoutePolicyFactorySettings
    from forage.policies.factory import (
        RoutePolicyBeanFactory,
        RoutePolicyChain,
        RoutePolicyFactory,
        RoutePolicyProvider,
        RoutePolicyRegistry,
    )

_dynamic_imports: MappingProxyType[str, tuple[str, str]] = MappingProxyType({
    "RoutePolicyBeanFactory": (__spec__.parent, "factory"),
    "RoutePolicyChain": (__spec__.parent, "factory"),
    "RoutePolicyFactory": (__spec__.parent, "factory"),
    "RoutePolicyFactoryConfig": (__spec__.parent, "config"),
    "RoutePolicyFactorySettings": (__spec__.parent, "config"),
    "RoutePolicyProvider": (__spec__.parent, "factory"),
    "RoutePolicyRegistry": (__spec__.parent, "factory"),
})

__getattr__ = create_lazy_getattr(_dynamic_imports, globals(), __name__)

__all__ = (
    "RoutePolicyBeanFactory",
    "RoutePolicyChain",
    "RoutePolicyFactory",
    "RoutePolicyFactoryConfig",
    "RoutePolicyFactorySettings",
    "RoutePolicyProvider",
    "RoutePolicyRegistry",
)


def __dir__() -> list[str]:
    return list(__all__)
