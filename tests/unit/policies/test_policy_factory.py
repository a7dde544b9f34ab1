# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Tests for per-route policies."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

import pytest

from forage.context import ForageContext
from forage.policies.config import RoutePolicyFactoryConfig, route_policy_prefix
from forage.policies.factory import (
    ROUTE_POLICY_FACTORY_BEAN,
    RoutePolicyBeanFactory,
    RoutePolicyChain,
    RoutePolicyFactory,
    RoutePolicyRegistry,
)
from forage.registry.beans import BeanRegistry


pytestmark = [pytest.mark.unit]


@dataclass(frozen=True)
class FakePolicy:
    kind: str
    config_prefix: str


class ScheduleProvider:
    name: ClassVar[str] = "schedule"

    def create(self, config_prefix: str) -> FakePolicy:
        return FakePolicy(self.name, config_prefix)


class ThrottleProvider(ScheduleProvider):
    name: ClassVar[str] = "throttle"


class FailingProvider:
    name: ClassVar[str] = "failing"

    def create(self, config_prefix: str) -> FakePolicy:
        raise RuntimeError("bad cron expression")


POLICIES = """
    forage.route.policy.enabled=true
    forage.route.policy.orders.name=schedule, throttle
    forage.route.policy.orders.schedule.cron=0 0 * * *
    forage.route.policy.billing.name=unknown,failing,schedule
    forage.route.policy.audit.name=failing
"""


@pytest.fixture
def factory(context: ForageContext, write_properties) -> RoutePolicyFactory:
    write_properties("forage-policy-factory", POLICIES)
    registry = RoutePolicyRegistry(context.plugins)
    for provider in (ScheduleProvider, ThrottleProvider, FailingProvider):
        registry.register(provider)
    return RoutePolicyFactory(context=context, registry=registry)


class TestRoutePolicyFactory:
    """Creating policy chains."""

    def test_chain_keeps_configuration_order(self, factory: RoutePolicyFactory):
        chain = factory.create_route_policy("orders")

        assert chain is not None
        assert [p.kind for p in chain] == ["schedule", "throttle"]
        assert chain.route_id == "orders"

    def test_last_policy_takes_effect(self, factory: RoutePolicyFactory):
        chain = factory.create_route_policy("orders")

        assert chain.effective == FakePolicy("throttle", "forage.route.policy.orders.throttle")

    def test_policies_get_their_config_prefix(self, factory: RoutePolicyFactory):
        chain = factory.create_route_policy("orders")

        assert chain.policies[0].config_prefix == route_policy_prefix("orders", "schedule")

    def test_unknown_and_failing_policies_are_skipped(
        self, factory: RoutePolicyFactory, caplog: pytest.LogCaptureFixture
    ):
        chain = factory.create_route_policy("billing")

        assert [p.kind for p in chain] == ["schedule"]
        assert "Unknown route policy 'unknown' for route 'billing'" in caplog.text
        assert "Failed to create policy 'failing' for route 'billing'" in caplog.text

    def test_only_failing_policies_gives_no_chain(self, factory: RoutePolicyFactory):
        assert factory.create_route_policy("audit") is None

    def test_route_without_policies(self, factory: RoutePolicyFactory):
        assert factory.create_route_policy("inventory") is None

    def test_environment_overrides_route_policies(
        self, factory: RoutePolicyFactory, monkeypatch: pytest.MonkeyPatch
    ):
        monkeypatch.setenv("FORAGE_ROUTE_POLICY_ORDERS_NAME", "throttle")

        assert [p.kind for p in factory.create_route_policy("orders")] == ["throttle"]

    def test_file_changes_are_picked_up(self, factory: RoutePolicyFactory, write_properties):
        write_properties("forage-policy-factory", "forage.route.policy.orders.name=schedule")

        assert len(factory.create_route_policy("orders")) == 1

    def test_removed_route_keys_are_forgotten(self, factory: RoutePolicyFactory, write_properties):
        assert factory.create_route_policy("billing") is not None

        write_properties("forage-policy-factory", "forage.route.policy.orders.name=schedule")

        assert factory.create_route_policy("billing") is None
        assert [p.kind for p in factory.create_route_policy("orders")] == ["schedule"]


class TestRoutePolicyConfig:
    """Reading route policy settings."""

    def test_disabled_by_default(self, context: ForageContext):
        assert RoutePolicyFactoryConfig(context=context).enabled is False

    def test_enabled_from_file(self, context: ForageContext, write_properties):
        write_properties("forage-policy-factory", POLICIES)

        assert RoutePolicyFactoryConfig(context=context).enabled is True

    def test_removing_enabled_disables_again(self, context: ForageContext, write_properties):
        write_properties("forage-policy-factory", POLICIES)
        config = RoutePolicyFactoryConfig(context=context)
        assert config.enabled is True

        write_properties("forage-policy-factory", "forage.route.policy.orders.name=schedule")

        assert config.enabled is False
        assert RoutePolicyFactoryConfig(context=context).enabled is False

    def test_policy_names(self, context: ForageContext, write_properties):
        write_properties("forage-policy-factory", POLICIES)
        config = RoutePolicyFactoryConfig(context=context)

        assert config.policy_names("orders") == "schedule, throttle"
        assert config.policy_names("inventory") is None

    def test_route_descriptor(self, context: ForageContext):
        descriptor = RoutePolicyFactoryConfig(context=context).route_descriptor("orders")

        assert descriptor.property_name == "forage.route.policy.orders.name"
        assert descriptor.env_name == "FORAGE_ROUTE_POLICY_ORDERS_NAME"


class TestRoutePolicyBeanFactory:
    """Binding the factory on activation."""

    def test_binds_when_enabled(self, context: ForageContext, write_properties):
        write_properties("forage-policy-factory", POLICIES)
        beans = BeanRegistry()

        RoutePolicyBeanFactory().configure(context, beans)

        assert isinstance(beans.lookup(ROUTE_POLICY_FACTORY_BEAN), RoutePolicyFactory)

    def test_skips_when_disabled(self, context: ForageContext):
        beans = BeanRegistry()

        RoutePolicyBeanFactory().configure(context, beans)

        assert ROUTE_POLICY_FACTORY_BEAN not in beans


def test_chain_len_and_iteration():
    chain = RoutePolicyChain("orders", (FakePolicy("a", "p"), FakePolicy("b", "p")))

    assert len(chain) == 2
    assert chain.effective.kind == "b"
    assert [p.kind for p in chain] == ["a", "b"]
