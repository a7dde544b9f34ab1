# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Messaging connection factory settings.

Named connection factories are found from their keys in
`forage-connectionfactory.properties`:

    forage.orders.jms.kind=artemis
    forage.orders.jms.broker.url=tcp://localhost:61616
"""

from __future__ import annotations

from forage.config.features import FeatureConfig, FeatureSettings, setting
from forage.core.enum import SettingCategory, ValueType


CONNECTION_FACTORY_RESOURCE = "forage-connectionfactory"

JMS_MARKER = "jms"
"""The key segment that marks a connection factory setting."""


class ConnectionFactorySettings(
    FeatureSettings, feature="forage-jms", resource_name=CONNECTION_FACTORY_RESOURCE
):
    """Settings of one connection factory."""

    JMS_KIND = setting(
        "forage.jms.kind",
        "Broker kind; selects the connection factory plugin of the same name",
        required=True,
    )
    BROKER_URL = setting("forage.jms.broker.url", "Broker url", required=True)
    USERNAME = setting("forage.jms.username", "Broker user")
    PASSWORD = setting(
        "forage.jms.password",
        "Broker password",
        value_type=ValueType.PASSWORD,
        category=SettingCategory.SECURITY,
    )
    CLIENT_ID = setting("forage.jms.client.id", "Client id for durable subscriptions")
    POOL_ENABLED = setting(
        "forage.jms.pool.enabled",
        "Pool connections and sessions",
        default=True,
        value_type=ValueType.BOOLEAN,
        category=SettingCategory.ADVANCED,
    )
    POOL_MAX_CONNECTIONS = setting(
        "forage.jms.pool.max.connections",
        "Maximum number of pooled connections",
        default=10,
        value_type=ValueType.INTEGER,
        category=SettingCategory.ADVANCED,
    )
    POOL_MAX_SESSIONS = setting(
        "forage.jms.pool.max.sessions.per.connection",
        "Maximum number of sessions per pooled connection",
        default=500,
        value_type=ValueType.INTEGER,
        category=SettingCategory.ADVANCED,
    )
    POOL_IDLE_TIMEOUT = setting(
        "forage.jms.pool.idle.timeout.millis",
        "Milliseconds before an idle pooled connection is closed",
        default=30000,
        value_type=ValueType.LONG,
        category=SettingCategory.ADVANCED,
    )
    TRANSACTION_ENABLED = setting(
        "forage.jms.transaction.enabled",
        "Bind transaction policy beans for transacted routes",
        default=False,
        value_type=ValueType.BOOLEAN,
    )
    TRANSACTION_TIMEOUT = setting(
        "forage.jms.transaction.timeout.seconds",
        "Transaction timeout in seconds",
        default=30,
        value_type=ValueType.INTEGER,
        category=SettingCategory.ADVANCED,
    )


class ConnectionFactoryConfig(FeatureConfig[ConnectionFactorySettings]):
    """Resolved settings of one connection factory."""

    settings_class = ConnectionFactorySettings

    @property
    def jms_kind(self) -> str | None:
        return self.value(ConnectionFactorySettings.JMS_KIND)

    @property
    def broker_url(self) -> str | None:
        return self.value(ConnectionFactorySettings.BROKER_URL)

    @property
    def username(self) -> str | None:
        return self.value(ConnectionFactorySettings.USERNAME)

    @property
    def password(self) -> str | None:
        return self.value(ConnectionFactorySettings.PASSWORD)

    @property
    def client_id(self) -> str | None:
        return self.value(ConnectionFactorySettings.CLIENT_ID)

    @property
    def pool_enabled(self) -> bool:
        return self.as_bool(ConnectionFactorySettings.POOL_ENABLED, fallback=True)

    @property
    def pool_max_connections(self) -> int | None:
        return self.as_int(ConnectionFactorySettings.POOL_MAX_CONNECTIONS)

    @property
    def pool_max_sessions(self) -> int | None:
        return self.as_int(ConnectionFactorySettings.POOL_MAX_SESSIONS)

    @property
    def pool_idle_timeout_millis(self) -> int | None:
        return self.as_int(ConnectionFactorySettings.POOL_IDLE_TIMEOUT)

    @property
    def transaction_enabled(self) -> bool:
        return self.as_bool(ConnectionFactorySettings.TRANSACTION_ENABLED)

    @property
    def transaction_timeout(self) -> int | None:
        return self.as_int(ConnectionFactorySettings.TRANSACTION_TIMEOUT)

    def names(self) -> tuple[str, ...]:
        """Connection factory names found in the properties file."""
        return tuple(sorted(self.settings.named_prefixes(JMS_MARKER)))


__all__ = (
    "CONNECTION_FACTORY_RESOURCE",
    "JMS_MARKER",
    "ConnectionFactoryConfig",
    "ConnectionFactorySettings",
)
