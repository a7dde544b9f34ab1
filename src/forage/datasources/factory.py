# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Creating data sources by name.

A data source plugin is registered under its database kind (`postgresql`,
`h2`, ...) and creates a data source for a config prefix. The plugin reads
its own connection settings through `DataSourceConfig(prefix)`.
"""

from __future__ import annotations

import logging

from typing import TYPE_CHECKING, Any, ClassVar, override

from forage.datasources.config import DataSourceConfig, MultiDataSourceConfig
from forage.exceptions import MissingConfigError
from forage.registry.multi import SelectingRegistry
from forage.registry.plugins import ProviderKind
from forage.transactions import bind_transaction_policies


if TYPE_CHECKING:
    from forage.context import ForageContext
    from forage.registry.beans import BeanRegistry


logger = logging.getLogger(__name__)

DEFAULT_DATASOURCE_BEAN = "dataSource"


def create_data_source(context: ForageContext, config: DataSourceConfig, name: str | None) -> Any | None:
    """Create the data source described by `config` with the plugin for its db kind."""
    db_kind = config.db_kind
    if not db_kind:
        logger.warning("Data source '%s' has no db kind configured", name)
        return None
    provider = context.plugins.find_by_class_name(ProviderKind.DATA_SOURCE, db_kind)
    if provider is None:
        logger.warning("Data source '%s' has no provider for %s", name, db_kind)
        return None
    logger.info("Creating data source '%s' of kind %s", name or DEFAULT_DATASOURCE_BEAN, db_kind)
    return provider.create(name)


class MultiDataSourceFactory(SelectingRegistry[DataSourceConfig, Any]):
    """Picks the data source for a request and creates each named data source once."""

    kind = ProviderKind.DATA_SOURCE

    def __init__(self, *, context: ForageContext | None = None) -> None:
        if context is None:
            from forage.context import get_context

            context = get_context()
        super().__init__(MultiDataSourceConfig(context=context), context=context)

    @override
    def new_config(self, key: str) -> DataSourceConfig:
        return DataSourceConfig(key, context=self.context).validate_required()

    @override
    def construct(self, config: DataSourceConfig, key: str) -> Any | None:
        return create_data_source(self.context, config, key)


class DataSourceBeanFactory:
    """Binds every named data source, or a single default one, on activation."""

    name: ClassVar[str] = "jdbc"

    def configure(self, context: ForageContext, beans: BeanRegistry) -> None:
        if DataSourceConfig(context=context).transaction_enabled:
            bind_transaction_policies(beans, feature=self.name)
        factory = MultiDataSourceFactory(context=context)
        if names := factory.allowed_keys():
            for name in names:
                if beans.lookup(name) is not None:
                    continue
                try:
                    data_source = factory.get(name)
                except MissingConfigError as e:
                    logger.error("Data source '%s' is not configured: %s", name, e)
                    continue
                if data_source is not None:
                    beans.bind(name, data_source)
            return
        if beans.lookup(DEFAULT_DATASOURCE_BEAN) is not None:
            return
        if (data_source := self._default(context)) is not None:
            beans.bind(DEFAULT_DATASOURCE_BEAN, data_source)

    def _default(self, context: ForageContext) -> Any | None:
        config = DataSourceConfig(context=context)
        if config.db_kind:
            return create_data_source(context, config, None)
        providers = list(context.plugins.plugins(ProviderKind.DATA_SOURCE))
        if len(providers) != 1:
            logger.error(
                "Cannot pick a default data source: %d data source plugins are registered",
                len(providers),
            )
            return None
        return providers[0].create(None)


__all__ = (
    "DEFAULT_DATASOURCE_BEAN",
    "DataSourceBeanFactory",
    "MultiDataSourceFactory",
    "create_data_source",
)
