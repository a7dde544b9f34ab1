# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Route policies built from per-route settings.

Each policy name configured for a route is looked up among the route policy
plugins and created with the config prefix
`forage.route.policy.<route>.<policy>`. Unknown policies and policies that
fail to build are logged and skipped.
"""

from __future__ import annotations

import logging

from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar, Protocol, runtime_checkable

from forage.config.helpers import split_list
from forage.policies.config import RoutePolicyFactoryConfig, route_policy_prefix
from forage.registry.plugins import ProviderKind


if TYPE_CHECKING:
    from forage.context import ForageContext
    from forage.registry.beans import BeanRegistry
    from forage.registry.plugins import PluginRegistry


logger = logging.getLogger(__name__)

ROUTE_POLICY_FACTORY_BEAN = "forageRoutePolicyFactory"


@runtime_checkable
class RoutePolicyProvider(Protocol):
    """Creates one kind of route policy."""

    name: ClassVar[str]

    def create(self, config_prefix: str) -> Any: ...


@dataclass(frozen=True, slots=True)
class RoutePolicyChain:
    """The policies of one route, in configuration order.

    When a host can apply a single policy only, it applies `effective`, the
    last configured policy.
    """

    route_id: str
    policies: tuple[Any, ...]

    @property
    def effective(self) -> Any:
        return self.policies[-1]

    def __iter__(self) -> Iterator[Any]:
        return iter(self.policies)

    def __len__(self) -> int:
        return len(self.policies)


class RoutePolicyRegistry:
    """Route policy providers by name."""

    def __init__(self, plugins: PluginRegistry) -> None:
        self.plugins = plugins

    def register(self, provider: RoutePolicyProvider | type[RoutePolicyProvider]) -> str:
        return self.plugins.register(ProviderKind.ROUTE_POLICY, provider)

    def get_provider(self, name: str) -> RoutePolicyProvider | None:
        return self.plugins.lookup(ProviderKind.ROUTE_POLICY, name)

    def names(self) -> tuple[str, ...]:
        return self.plugins.names(ProviderKind.ROUTE_POLICY)


class RoutePolicyFactory:
    """Creates the policy chain of a route."""

    def __init__(
        self,
        *,
        context: ForageContext | None = None,
        registry: RoutePolicyRegistry | None = None,
        config: RoutePolicyFactoryConfig | None = None,
    ) -> None:
        if context is None:
            from forage.context import get_context

            context = get_context()
        self.context = context
        self.registry = registry or RoutePolicyRegistry(context.plugins)
        self.config = config or RoutePolicyFactoryConfig(context=context)

    def create_route_policy(self, route_id: str) -> RoutePolicyChain | None:
        """The policies configured for `route_id`, or None when there are none."""
        names = split_list(self.config.policy_names(route_id))
        if not names:
            logger.debug("No policies configured for route: %s", route_id)
            return None
        policies = [p for name in names if (p := self._create(route_id, name)) is not None]
        if not policies:
            logger.debug("No valid policies created for route: %s", route_id)
            return None
        chain = RoutePolicyChain(route_id, tuple(policies))
        if len(chain) > 1:
            logger.info(
                "Multiple policies configured for route '%s'; the last one takes effect: %s",
                route_id,
                type(chain.effective).__name__,
            )
        return chain

    def _create(self, route_id: str, name: str) -> Any | None:
        provider = self.registry.get_provider(name)
        if provider is None:
            logger.warning(
                "Unknown route policy '%s' for route '%s'. Policy will be skipped. Available policies: %s",
                name,
                route_id,
                ", ".join(self.registry.names()) or "(none)",
            )
            return None
        config_prefix = route_policy_prefix(route_id, name)
        logger.debug("Creating policy '%s' for route '%s' with config prefix: %s", name, route_id, config_prefix)
        try:
            policy = provider.create(config_prefix)
        except Exception as e:
            logger.warning("Failed to create policy '%s' for route '%s': %s", name, route_id, e)
            logger.debug("Policy creation failure details", exc_info=True)
            return None
        if policy is not None:
            logger.info("Applied route policy '%s' to route '%s'", name, route_id)
        return policy


class RoutePolicyBeanFactory:
    """Binds the route policy factory on activation when it is enabled."""

    name: ClassVar[str] = "route-policy"

    def configure(self, context: ForageContext, beans: BeanRegistry) -> None:
        config = RoutePolicyFactoryConfig(context=context)
        if not config.enabled:
            logger.debug("Route policy factory is disabled")
            return
        if beans.lookup(ROUTE_POLICY_FACTORY_BEAN) is None:
            beans.bind(ROUTE_POLICY_FACTORY_BEAN, RoutePolicyFactory(context=context, config=config))


__all__ = (
    "ROUTE_POLICY_FACTORY_BEAN",
    "RoutePolicyBeanFactory",
    "RoutePolicyChain",
    "RoutePolicyFactory",
    "RoutePolicyProvider",
    "RoutePolicyRegistry",
)
