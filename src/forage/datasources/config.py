# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Data source settings.

Named data sources are found from their keys in
`forage-datasource-factory.properties`:

    forage.ds1.jdbc.db.kind=postgresql
    forage.ds1.jdbc.url=jdbc:postgresql://localhost:5432/orders
    forage.ds2.jdbc.db.kind=h2
    forage.ds2.jdbc.url=jdbc:h2:mem:test
"""

from __future__ import annotations

from forage.config.features import FeatureConfig, FeatureSettings, setting
from forage.core.enum import SettingCategory, ValueType
from forage.registry.multi import MultiInstanceConfig, MultiInstanceSettings


DATASOURCE_RESOURCE = "forage-datasource-factory"

JDBC_MARKER = "jdbc"
"""The key segment that marks a data source setting."""


class DataSourceSettings(FeatureSettings, feature="forage-jdbc", resource_name=DATASOURCE_RESOURCE):
    """Settings of one data source."""

    DB_KIND = setting(
        "forage.jdbc.db.kind",
        "Database kind; selects the data source plugin of the same name",
        required=True,
    )
    URL = setting("forage.jdbc.url", "JDBC connection url", required=True)
    USERNAME = setting("forage.jdbc.username", "Database user")
    PASSWORD = setting(
        "forage.jdbc.password",
        "Database password",
        value_type=ValueType.PASSWORD,
        category=SettingCategory.SECURITY,
    )
    POOL_INITIAL_SIZE = setting(
        "forage.jdbc.pool.initial.size",
        "Connections opened when the pool starts",
        default=5,
        value_type=ValueType.INTEGER,
        category=SettingCategory.ADVANCED,
    )
    POOL_MIN_SIZE = setting(
        "forage.jdbc.pool.min.size",
        "Minimum number of pooled connections",
        default=2,
        value_type=ValueType.INTEGER,
        category=SettingCategory.ADVANCED,
    )
    POOL_MAX_SIZE = setting(
        "forage.jdbc.pool.max.size",
        "Maximum number of pooled connections",
        default=20,
        value_type=ValueType.INTEGER,
        category=SettingCategory.ADVANCED,
    )
    ACQUISITION_TIMEOUT = setting(
        "forage.jdbc.pool.acquisition.timeout.seconds",
        "Seconds to wait for a free connection",
        default=5,
        value_type=ValueType.INTEGER,
        category=SettingCategory.ADVANCED,
    )
    TRANSACTION_ENABLED = setting(
        "forage.jdbc.transaction.enabled",
        "Whether the data source takes part in transactions",
        default=False,
        value_type=ValueType.BOOLEAN,
    )


class DataSourceConfig(FeatureConfig[DataSourceSettings]):
    """Resolved settings of one data source."""

    settings_class = DataSourceSettings

    @property
    def db_kind(self) -> str | None:
        return self.value(DataSourceSettings.DB_KIND)

    @property
    def url(self) -> str | None:
        return self.value(DataSourceSettings.URL)

    @property
    def username(self) -> str | None:
        return self.value(DataSourceSettings.USERNAME)

    @property
    def password(self) -> str | None:
        return self.value(DataSourceSettings.PASSWORD)

    @property
    def pool_initial_size(self) -> int | None:
        return self.as_int(DataSourceSettings.POOL_INITIAL_SIZE)

    @property
    def pool_min_size(self) -> int | None:
        return self.as_int(DataSourceSettings.POOL_MIN_SIZE)

    @property
    def pool_max_size(self) -> int | None:
        return self.as_int(DataSourceSettings.POOL_MAX_SIZE)

    @property
    def acquisition_timeout(self) -> int | None:
        return self.as_int(DataSourceSettings.ACQUISITION_TIMEOUT)

    @property
    def transaction_enabled(self) -> bool:
        return self.as_bool(DataSourceSettings.TRANSACTION_ENABLED)


class MultiDataSourceSettings(
    MultiInstanceSettings, feature="forage-multi-datasource", resource_name=DATASOURCE_RESOURCE
):
    """Which data sources a request may select, and how."""

    NAMES = setting(
        "forage.multi.datasource.names",
        "Comma-separated names of the selectable data sources; defaults to every named data source found",
    )
    ID_SOURCE = setting(
        "forage.multi.datasource.id.source",
        "Where the data source name is read from: route, header, property or variable",
        default="route",
    )
    ID_SOURCE_HEADER = setting(
        "forage.multi.datasource.id.source.header",
        "Header carrying the data source name",
        category=SettingCategory.ADVANCED,
    )
    ID_SOURCE_PROPERTY = setting(
        "forage.multi.datasource.id.source.property",
        "Exchange property carrying the data source name",
        category=SettingCategory.ADVANCED,
    )
    ID_SOURCE_VARIABLE = setting(
        "forage.multi.datasource.id.source.variable",
        "Variable carrying the data source name",
        category=SettingCategory.ADVANCED,
    )


class MultiDataSourceConfig(MultiInstanceConfig[MultiDataSourceSettings]):
    """The allow-list and selector settings for data sources."""

    settings_class = MultiDataSourceSettings

    @property
    def names(self) -> tuple[str, ...]:
        if configured := super().names:
            return configured
        data_sources = self.context.features.get(DataSourceSettings)
        return tuple(sorted(data_sources.named_prefixes(JDBC_MARKER)))


__all__ = (
    "DATASOURCE_RESOURCE",
    "JDBC_MARKER",
    "DataSourceConfig",
    "DataSourceSettings",
    "MultiDataSourceConfig",
    "MultiDataSourceSettings",
)
