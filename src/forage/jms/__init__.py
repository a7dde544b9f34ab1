# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Named messaging connection factories."""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

from forage.core.lazy_import import create_lazy_getattr


if TYPE_CHECKING:
    from forage.jms.config import ConnectionFactoryConfig, ConnectionFactorySettings
    from forage.jms.factory import ConnectionFactoryBeanFactory, create_connection_factory

_dynamic_imports: MappingProxyType[str, tuple[str, str]] = MappingProxyType({
    "ConnectionFactoryBeanFactory": (__spec__.parent, "factory"),
    "ConnectionFactoryConfig": (__spec__.parent, "config"),
    "ConnectionFactorySettings": (__spec__.parent, "config"),
    "create_connection_factory": (__spec__.parent, "factory"),
})

__getattr__ = create_lazy_getattr(_dynamic_imports, globals(), __name__)

__all__ = (
    "ConnectionFactoryBeanFactory",
    "ConnectionFactoryConfig",
    "ConnectionFactorySettings",
    "create_connection_factory",
)


def __dir__() -> list[str]:
    return list(__all__)
