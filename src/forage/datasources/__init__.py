# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Named JDBC-style data sources."""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

from forage.core.lazy_import import create_lazy_getattr


if TYPE_CHECKING:
    from forage.datasources.config import (
        DataSourceConfig,
        DataSourceSettings,
        MultiDataSourceConfig,
        MultiDataSourceSettings,
    )
    from forage.datasources.factory import (
        DataSourceBeanFactory,
        MultiDataSourceFactory,
        create_data_source,
    )

_dynamic_imports: MappingProxyType[str, tuple[str, str]] = MappingProxyType({
    "DataSourceBeanFactory": (__spec__.parent, "factory"),
    "DataSourceConfig": (__spec__.parent, "config"),
    "DataSourceSettings": (__spec__.parent, "config"),
    "MultiDataSourceConfig": (__spec__.parent, "config"),
    "MultiDataSourceFactory": (__spec__.parent, "factory"),
    "MultiDataSourceSettings": (__spec__.parent, "config"),
    "create_data_source": (__spec__.parent, "factory"),
})

__getattr__ = create_lazy_getattr(_dynamic_imports, globals(), __name__)

__all__ = (
    "DataSourceBeanFactory",
    "DataSourceConfig",
    "DataSourceSettings",
    "MultiDataSourceConfig",
    "MultiDataSourceFactory",
    "MultiDataSourceSettings",
    "create_data_source",
)


def __dir__() -> list[str]:
    return list(__all__)
