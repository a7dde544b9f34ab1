# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Creating messaging connection factories by name.

A connection factory plugin is registered under its broker kind (`artemis`,
`ibmmq`, ...) and creates a connection factory for a config prefix.
"""

from __future__ import annotations

import logging

from typing import TYPE_CHECKING, Any, ClassVar

from forage.exceptions import MissingConfigError
from forage.jms.config import ConnectionFactoryConfig
from forage.registry.plugins import ProviderKind
from forage.transactions import bind_transaction_policies


if TYPE_CHECKING:
    from forage.context import ForageContext
    from forage.registry.beans import BeanRegistry


logger = logging.getLogger(__name__)

DEFAULT_CONNECTION_FACTORY_BEAN = "connectionFactory"


def create_connection_factory(
    context: ForageContext, config: ConnectionFactoryConfig, name: str | None
) -> Any | None:
    """Create the connection factory described by `config` with the plugin for its kind."""
    jms_kind = config.jms_kind
    if not jms_kind:
        logger.warning("Connection factory '%s' has no jms kind configured", name)
        return None
    provider = context.plugins.find_by_class_name(ProviderKind.CONNECTION_FACTORY, jms_kind)
    if provider is None:
        logger.warning("Connection factory '%s' has no provider for %s", name, jms_kind)
        return None
    logger.info("Creating connection factory '%s' of kind %s", name or DEFAULT_CONNECTION_FACTORY_BEAN, jms_kind)
    return provider.create(name)


class ConnectionFactoryBeanFactory:
    """Binds every named connection factory, or a single default one, on activation."""

    name: ClassVar[str] = "jms"

    def configure(self, context: ForageContext, beans: BeanRegistry) -> None:
        config = ConnectionFactoryConfig(context=context)
        if config.transaction_enabled:
            bind_transaction_policies(beans, feature=self.name)
        if names := config.names():
            for name in names:
                if beans.lookup(name) is not None:
                    continue
                try:
                    named = ConnectionFactoryConfig(name, context=context).validate_required()
                except MissingConfigError as e:
                    logger.error("Connection factory '%s' is not configured: %s", name, e)
                    continue
                if (connection_factory := create_connection_factory(context, named, name)) is not None:
                    beans.bind(name, connection_factory)
            return
        if beans.lookup(DEFAULT_CONNECTION_FACTORY_BEAN) is not None:
            return
        if (connection_factory := self._default(context, config)) is not None:
            beans.bind(DEFAULT_CONNECTION_FACTORY_BEAN, connection_factory)

    def _default(self, context: ForageContext, config: ConnectionFactoryConfig) -> Any | None:
        if config.jms_kind:
            return create_connection_factory(context, config, None)
        providers = list(context.plugins.plugins(ProviderKind.CONNECTION_FACTORY))
        if len(providers) != 1:
            logger.error(
                "Cannot pick a default connection factory: %d connection factory plugins are registered",
                len(providers),
            )
            return None
        return providers[0].create(None)


__all__ = (
    "DEFAULT_CONNECTION_FACTORY_BEAN",
    "ConnectionFactoryBeanFactory",
    "create_connection_factory",
)
