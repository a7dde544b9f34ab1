# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Agents configured per name and selected per request."""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

from forage.core.lazy_import import create_lazy_getattr


if TYPE_CHECKING:
    from forage.agents.config import (
        FEATURE_MEMORY,
        AgentFactoryConfig,
        AgentFactorySettings,
        MultiAgentConfig,
        MultiAgentSettings,
    )
    from forage.agents.factory import (
        AgentBeanFactory,
        AgentBuilder,
        AgentConfiguration,
        ConfigurationAware,
        MultiAgentFactory,
    )

_dynamic_imports: MappingProxyType[str, tuple[str, str]] = MappingProxyType({
    "FEATURE_MEMORY": (__spec__.parent, "config"),
    "AgentBeanFactory": (__spec__.parent, "factory"),
    "AgentBuilder": (__spec__.parent, "factory"),
    "AgentConfiguration": (__spec__.parent, "factory"),
    "AgentFactoryConfig": (__spec__.parent, "config"),
    "AgentFactorySettings": (__spec__.parent, "config"),
    "ConfigurationAware": (__spec__.parent, "factory"),
    "MultiAgentConfig": (__spec__.parent, "config"),
    "MultiAgentFactory": (__spec__.parent, "factory"),
    "MultiAgentSettings": (__spec__.parent, "config"),
})

__getattr__ = create_lazy_getattr(_dynamic_imports, globals(), __name__)

__all__ = (
    "FEATURE_MEMORY",
    "AgentBeanFactory",
    "AgentBuilder",
    "AgentConfiguration",
    "AgentFactoryConfig",
    "AgentFactorySettings",
    "ConfigurationAware",
    "MultiAgentConfig",
    "MultiAgentFactory",
    "MultiAgentSettings",
)


def __dir__() -> list[str]:
    return list(__all__)
