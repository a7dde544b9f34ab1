# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Tests for data source settings and named data source creation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

import pytest

from forage.context import ForageContext
from forage.datasources.config import DataSourceConfig, MultiDataSourceConfig
from forage.datasources.factory import (
    DEFAULT_DATASOURCE_BEAN,
    DataSourceBeanFactory,
    MultiDataSourceFactory,
)
from forage.exceptions import MissingConfigError, UndefinedInstanceError
from forage.registry.beans import BeanRegistry
from forage.registry.plugins import ProviderKind
from forage.routing import RequestContext
from forage.transactions import Propagation, TransactionPolicy


pytestmark = [pytest.mark.unit]


@dataclass
class FakeDataSource:
    kind: str
    url: str | None
    username: str | None
    pool_max_size: int | None


class FakeDataSourceProvider:
    """Reads its connection settings from the context it was given."""

    name: ClassVar[str] = "h2"

    def __init__(self, context: ForageContext) -> None:
        self.context = context
        self.created: list[str | None] = []

    def create(self, prefix: str | None = None) -> FakeDataSource:
        self.created.append(prefix)
        config = DataSourceConfig(prefix, context=self.context)
        return FakeDataSource(self.name, config.url, config.username, config.pool_max_size)


class FakePostgresProvider(FakeDataSourceProvider):
    name: ClassVar[str] = "postgresql"


DATA_SOURCES = """
    forage.ds1.jdbc.db.kind=h2
    forage.ds1.jdbc.url=jdbc:h2:mem:x
    forage.ds1.jdbc.username=ignored
    forage.ds2.jdbc.db.kind=postgresql
    forage.ds2.jdbc.url=jdbc:postgresql://localhost:5432/orders
    forage.ds2.jdbc.pool.max.size=50
"""


@pytest.fixture
def h2(context: ForageContext) -> FakeDataSourceProvider:
    provider = FakeDataSourceProvider(context)
    context.plugins.register(ProviderKind.DATA_SOURCE, provider)
    return provider


@pytest.fixture
def postgres(context: ForageContext) -> FakeDataSourceProvider:
    provider = FakePostgresProvider(context)
    context.plugins.register(ProviderKind.DATA_SOURCE, provider)
    return provider


class TestDataSourceConfig:
    """Resolving data source settings."""

    def test_environment_overrides_named_file_value(
        self, context: ForageContext, write_properties, monkeypatch: pytest.MonkeyPatch
    ):
        write_properties("forage-datasource-factory", DATA_SOURCES)
        monkeypatch.setenv("FORAGE_DS1_JDBC_USERNAME", "sa")

        config = DataSourceConfig("ds1", context=context)

        assert config.url == "jdbc:h2:mem:x"
        assert config.username == "sa"

    def test_file_value_applies_once_environment_is_cleared(
        self, context: ForageContext, write_properties, monkeypatch: pytest.MonkeyPatch
    ):
        write_properties(
            "forage-datasource-factory",
            """
            forage.ds1.jdbc.db.kind=h2
            forage.ds1.jdbc.url=jdbc:h2:mem:x
            forage.jdbc.username=fromfile
            """,
        )
        monkeypatch.setenv("FORAGE_DS1_JDBC_USERNAME", "sa")
        assert DataSourceConfig("ds1", context=context).username == "sa"

        monkeypatch.delenv("FORAGE_DS1_JDBC_USERNAME")

        assert DataSourceConfig("ds1", context=context).username == "fromfile"

    @pytest.mark.parametrize(
        "lines",
        [
            ("forage.ds1.jdbc.username=named", "forage.jdbc.username=shared"),
            ("forage.jdbc.username=shared", "forage.ds1.jdbc.username=named"),
        ],
        ids=["named-first", "shared-first"],
    )
    def test_named_key_beats_shared_key(self, context: ForageContext, write_properties, lines):
        write_properties("forage-datasource-factory", "\n".join(("forage.ds1.jdbc.db.kind=h2", *lines)))

        assert DataSourceConfig("ds1", context=context).username == "named"

    def test_defaults(self, context: ForageContext, write_properties):
        write_properties("forage-datasource-factory", DATA_SOURCES)
        config = DataSourceConfig("ds1", context=context)

        assert config.pool_initial_size == 5
        assert config.pool_min_size == 2
        assert config.pool_max_size == 20
        assert config.acquisition_timeout == 5
        assert config.transaction_enabled is False
        assert config.password is None

    def test_named_instances_are_independent(self, context: ForageContext, write_properties):
        write_properties("forage-datasource-factory", DATA_SOURCES)

        ds1 = DataSourceConfig("ds1", context=context)
        ds2 = DataSourceConfig("ds2", context=context)

        assert ds1.db_kind == "h2"
        assert ds2.db_kind == "postgresql"
        assert ds2.pool_max_size == 50
        assert ds1.pool_max_size == 20

    def test_names_are_discovered_from_keys(self, context: ForageContext, write_properties):
        write_properties("forage-datasource-factory", DATA_SOURCES)

        assert MultiDataSourceConfig(context=context).names == ("ds1", "ds2")

    def test_configured_names_win(self, context: ForageContext, write_properties):
        write_properties(
            "forage-datasource-factory", DATA_SOURCES + "\nforage.multi.datasource.names=ds2\n"
        )

        assert MultiDataSourceConfig(context=context).names == ("ds2",)


class TestMultiDataSourceFactory:
    """Selecting and creating named data sources."""

    def test_route_selects_data_source(
        self, context: ForageContext, write_properties, h2: FakeDataSourceProvider, postgres
    ):
        write_properties("forage-datasource-factory", DATA_SOURCES)
        factory = MultiDataSourceFactory(context=context)

        data_source = factory.resolve(RequestContext(route_id="ds2"))

        assert data_source == FakeDataSource(
            "postgresql", "jdbc:postgresql://localhost:5432/orders", None, 50
        )
        assert factory.resolve(RequestContext(route_id="ds2")) is data_source
        assert postgres.created == ["ds2"]
        assert h2.created == []

    def test_unknown_data_source(self, context: ForageContext, write_properties, h2: FakeDataSourceProvider):
        write_properties("forage-datasource-factory", DATA_SOURCES)

        with pytest.raises(UndefinedInstanceError):
            MultiDataSourceFactory(context=context).get("ds3")
        assert h2.created == []

    def test_unknown_route_names_the_data_source_feature(
        self, context: ForageContext, write_properties, h2: FakeDataSourceProvider
    ):
        write_properties("forage-datasource-factory", DATA_SOURCES)

        with pytest.raises(UndefinedInstanceError) as exc_info:
            MultiDataSourceFactory(context=context).resolve(RequestContext(route_id="orders"))

        error = exc_info.value
        assert error.message == (
            "Route 'orders' has no defined data source capable of handling this request. "
            "Allowed names: ds1, ds2"
        )
        assert error.details["feature"] == "data source"
        assert "ds1, ds2" in str(error)

    def test_missing_required_setting_is_raised(
        self, context: ForageContext, write_properties, h2: FakeDataSourceProvider
    ):
        write_properties("forage-datasource-factory", DATA_SOURCES + "\nforage.ds3.jdbc.db.kind=h2\n")

        with pytest.raises(MissingConfigError, match=r"forage\.ds3\.jdbc\.url") as exc_info:
            MultiDataSourceFactory(context=context).get("ds3")

        assert exc_info.value.details["env_name"] == "FORAGE_DS3_JDBC_URL"
        assert h2.created == []

    def test_missing_provider_is_not_cached(
        self, context: ForageContext, write_properties, h2: FakeDataSourceProvider, caplog
    ):
        write_properties("forage-datasource-factory", DATA_SOURCES)
        factory = MultiDataSourceFactory(context=context)

        assert factory.get("ds2") is None
        assert "no provider for postgresql" in caplog.text

        context.plugins.register(ProviderKind.DATA_SOURCE, FakePostgresProvider(context))
        assert factory.get("ds2") is not None


class TestDataSourceBeanFactory:
    """Binding data sources on activation."""

    def test_binds_every_named_data_source(
        self, context: ForageContext, write_properties, h2: FakeDataSourceProvider, postgres
    ):
        write_properties("forage-datasource-factory", DATA_SOURCES)
        beans = BeanRegistry()

        DataSourceBeanFactory().configure(context, beans)

        assert set(beans) == {"ds1", "ds2"}
        assert beans["ds1"].url == "jdbc:h2:mem:x"

    def test_unconfigured_data_source_is_skipped(
        self,
        context: ForageContext,
        write_properties,
        h2: FakeDataSourceProvider,
        postgres,
        caplog: pytest.LogCaptureFixture,
    ):
        write_properties("forage-datasource-factory", DATA_SOURCES + "\nforage.ds3.jdbc.db.kind=h2\n")
        beans = BeanRegistry()

        DataSourceBeanFactory().configure(context, beans)

        assert set(beans) == {"ds1", "ds2"}
        assert "Data source 'ds3' is not configured" in caplog.text

    def test_transaction_policies_are_bound_when_enabled(
        self, context: ForageContext, write_properties, h2: FakeDataSourceProvider
    ):
        write_properties(
            "forage-datasource-factory",
            """
            forage.jdbc.db.kind=h2
            forage.jdbc.url=jdbc:h2:mem:x
            forage.jdbc.transaction.enabled=true
            """,
        )
        beans = BeanRegistry()

        DataSourceBeanFactory().configure(context, beans)

        assert {p.value for p in Propagation} <= set(beans)
        assert beans["PROPAGATION_REQUIRED"] == TransactionPolicy(Propagation.REQUIRED, "jdbc")
        assert DEFAULT_DATASOURCE_BEAN in beans

    def test_no_transaction_policies_by_default(
        self, context: ForageContext, write_properties, h2: FakeDataSourceProvider
    ):
        write_properties("forage-datasource-factory", DATA_SOURCES)
        beans = BeanRegistry()

        DataSourceBeanFactory().configure(context, beans)

        assert not any(p.value in beans for p in Propagation)

    def test_binds_default_by_db_kind(
        self, context: ForageContext, write_properties, h2: FakeDataSourceProvider, postgres
    ):
        write_properties(
            "forage-datasource-factory",
            """
            forage.jdbc.db.kind=postgresql
            forage.jdbc.url=jdbc:postgresql://db/app
            """,
        )
        beans = BeanRegistry()

        DataSourceBeanFactory().configure(context, beans)

        assert beans[DEFAULT_DATASOURCE_BEAN].url == "jdbc:postgresql://db/app"
        assert postgres.created == [None]

    def test_single_plugin_is_the_default(self, context: ForageContext, h2: FakeDataSourceProvider):
        beans = BeanRegistry()

        DataSourceBeanFactory().configure(context, beans)

        assert beans[DEFAULT_DATASOURCE_BEAN].kind == "h2"

    def test_ambiguous_default_is_logged(
        self, context: ForageContext, h2: FakeDataSourceProvider, postgres, caplog: pytest.LogCaptureFixture
    ):
        beans = BeanRegistry()

        DataSourceBeanFactory().configure(context, beans)

        assert DEFAULT_DATASOURCE_BEAN not in beans
        assert "2 data source plugins are registered" in caplog.text

    def test_no_plugins(self, context: ForageContext, caplog: pytest.LogCaptureFixture):
        beans = BeanRegistry()

        DataSourceBeanFactory().configure(context, beans)

        assert len(beans) == 0
        assert "0 data source plugins are registered" in caplog.text
