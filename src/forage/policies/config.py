# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Route policy settings.

Policies are attached per route in `forage-policy-factory.properties`:

    forage.route.policy.enabled=true
    forage.route.policy.orders.name=schedule,throttle
    forage.route.policy.orders.schedule.cron=0 0 * * *

Per-route keys are not known in advance, so they are resolved on demand with
a descriptor built for the route.
"""

from __future__ import annotations

from typing import override

from forage.config.descriptor import SettingDescriptor
from forage.config.features import FeatureConfig, FeatureSettings, setting
from forage.core.enum import ValueType


POLICY_RESOURCE = "forage-policy-factory"

ROUTE_POLICY_PREFIX = "forage.route.policy"


class RoutePolicyFactorySettings(
    FeatureSettings, feature="forage-route-policy", resource_name=POLICY_RESOURCE
):
    """Settings of the route policy factory."""

    ENABLED = setting(
        f"{ROUTE_POLICY_PREFIX}.enabled",
        "Enable or disable the route policy factory",
        default=False,
        value_type=ValueType.BOOLEAN,
    )


def route_policy_prefix(route_id: str, policy: str) -> str:
    """The config prefix a policy provider reads its settings under."""
    return f"{ROUTE_POLICY_PREFIX}.{route_id}.{policy}"


class RoutePolicyFactoryConfig(FeatureConfig[RoutePolicyFactorySettings]):
    """Resolved route policy settings; everything is re-read on each call."""

    settings_class = RoutePolicyFactorySettings

    @override
    def register(self, name: str, value: str) -> None:
        super().register(name, value)
        if name.startswith(f"{ROUTE_POLICY_PREFIX}."):
            self.store.set_direct(name, value)

    def refresh(self) -> None:
        """Re-read the properties file, forgetting per-route keys it no longer has."""
        entries = self.store.feature_properties(self.settings)
        for key in self.store.direct_keys(f"{ROUTE_POLICY_PREFIX}."):
            if key not in entries:
                self.store.set_direct(key, None)
        self._from_qualified_keys.clear()
        for key, value in entries.items():
            self.register(key, value)

    def _reload(self, descriptor: SettingDescriptor) -> str | None:
        self.store.set(descriptor, None)
        self.refresh()
        if (from_file := self.store.get_direct(descriptor.property_name)) is not None:
            self.store.set(descriptor, from_file)
        return self.store.load(descriptor)

    @property
    def enabled(self) -> bool:
        self._reload(self.descriptor(RoutePolicyFactorySettings.ENABLED))
        return self.as_bool(RoutePolicyFactorySettings.ENABLED)

    def route_descriptor(self, route_id: str) -> SettingDescriptor:
        """The descriptor of the policy names of one route."""
        return SettingDescriptor.of(
            self.settings.feature,
            f"{ROUTE_POLICY_PREFIX}.{route_id}.name",
            description=f"Comma-separated list of policy names for route {route_id}",
        )

    def policy_names(self, route_id: str) -> str | None:
        """The raw, comma-separated policy names of `route_id`, or None."""
        return self._reload(self.route_descriptor(route_id))


__all__ = (
    "POLICY_RESOURCE",
    "ROUTE_POLICY_PREFIX",
    "RoutePolicyFactoryConfig",
    "RoutePolicyFactorySettings",
    "route_policy_prefix",
)
