# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Building agents from their settings and choosing one per request.

An agent plugin is looked up by the configured agent class. If it accepts a
configuration (it has a `configure` method), it gets:

- a chat model from the configured model provider (mandatory);
- a chat memory from the memory provider, when the `memory` feature is on;
- the configured input and output guardrail classes.
"""

from __future__ import annotations

import logging

from typing import TYPE_CHECKING, Annotated, Any, ClassVar, Protocol, runtime_checkable, override

from pydantic import Field, ImportString, TypeAdapter, ValidationError

from forage.agents.config import AgentFactoryConfig, MultiAgentConfig
from forage.core.models import BasedModel
from forage.exceptions import DependencyConstructionError
from forage.registry.multi import SelectingRegistry
from forage.registry.plugins import ProviderKind


if TYPE_CHECKING:
    from forage.context import ForageContext
    from forage.registry.beans import BeanRegistry
    from forage.routing.context import RequestContext


logger = logging.getLogger(__name__)

DEFAULT_AGENT_BEAN = "agent"
MULTI_AGENT_FACTORY_BEAN = "multiAgentFactory"

_import_adapter: TypeAdapter[Any] = TypeAdapter(ImportString)


class AgentConfiguration(BasedModel):
    """Everything a configurable agent is handed when it is built."""

    name: Annotated[str | None, Field(description="The instance name the agent was built for.")] = None
    chat_model: Annotated[Any, Field(description="The chat model created by the model provider.")]
    chat_memory: Annotated[Any | None, Field(description="The chat memory, when the memory feature is enabled.")] = None
    input_guardrails: tuple[type[Any], ...] = ()
    output_guardrails: tuple[type[Any], ...] = ()
    features: tuple[str, ...] = ()


@runtime_checkable
class ConfigurationAware(Protocol):
    """An agent that accepts its dependencies after construction."""

    def configure(self, configuration: AgentConfiguration) -> None: ...


def load_classes(paths: list[str], *, agent: str | None = None) -> tuple[type[Any], ...]:
    """Import every path in `paths`; raises DependencyConstructionError on the first failure."""
    loaded: list[type[Any]] = []
    for path in paths:
        try:
            loaded.append(_import_adapter.validate_python(path))
        except ValidationError as e:
            raise DependencyConstructionError(
                f"The class named {path} could not be loaded",
                details={"key": agent, "setting": path},
            ) from e
    return tuple(loaded)


class AgentBuilder:
    """Builds one agent from an `AgentFactoryConfig`."""

    def __init__(self, context: ForageContext) -> None:
        self.context = context

    def build(self, config: AgentFactoryConfig, name: str | None) -> Any | None:
        """The configured agent, or None when no agent plugin matches."""
        agent_class = config.agent_class
        agent = self.context.plugins.new_instance(ProviderKind.AGENT, agent_class)
        if agent is None:
            logger.warning(
                "No agent plugin found for class %s. Registered: %s",
                agent_class,
                ", ".join(self.context.plugins.names(ProviderKind.AGENT)) or "(none)",
            )
            return None
        if isinstance(agent, ConfigurationAware):
            agent.configure(self.configuration(config, name))
        logger.info("Created agent '%s' from %s", name or DEFAULT_AGENT_BEAN, agent_class)
        return agent

    def configuration(self, config: AgentFactoryConfig, name: str | None) -> AgentConfiguration:
        """Resolve the dependencies of a configurable agent."""
        return AgentConfiguration(
            name=name,
            chat_model=self._chat_model(config, name),
            chat_memory=self._chat_memory(config, name),
            input_guardrails=load_classes(config.input_guardrails, agent=name),
            output_guardrails=load_classes(config.output_guardrails, agent=name),
            features=config.features,
        )

    def _chat_model(self, config: AgentFactoryConfig, name: str | None) -> Any:
        class_name = config.model_factory_class
        provider = (
            self.context.plugins.find_by_class_name(ProviderKind.CHAT_MODEL, class_name)
            if class_name
            else None
        )
        if provider is None:
            raise DependencyConstructionError(
                "A model must be provided for using an agent",
                details={"key": name, "setting": class_name},
                suggestions=["Set forage.provider.model.factory.class to a registered chat model provider"],
            )
        try:
            return provider.create(name)
        except Exception as e:
            raise DependencyConstructionError(
                f"The chat model for agent '{name}' could not be created",
                details={"key": name, "setting": class_name},
            ) from e

    def _chat_memory(self, config: AgentFactoryConfig, name: str | None) -> Any | None:
        if not config.memory_enabled:
            return None
        class_name = config.memory_factory_class
        provider = (
            self.context.plugins.find_by_class_name(ProviderKind.CHAT_MEMORY, class_name)
            if class_name
            else None
        )
        if provider is None:
            logger.warning("Memory is enabled for agent '%s' but no memory provider matches %s", name, class_name)
            return None
        try:
            return provider.create(name)
        except Exception as e:
            raise DependencyConstructionError(
                f"The chat memory for agent '{name}' could not be created",
                details={"key": name, "setting": class_name},
            ) from e


class MultiAgentFactory(SelectingRegistry[AgentFactoryConfig, Any]):
    """Picks the agent for a request and builds each named agent once."""

    kind = ProviderKind.AGENT

    def __init__(self, *, context: ForageContext | None = None) -> None:
        if context is None:
            from forage.context import get_context

            context = get_context()
        super().__init__(MultiAgentConfig(context=context), context=context)
        self.builder = AgentBuilder(context)

    @override
    def new_config(self, key: str) -> AgentFactoryConfig:
        return AgentFactoryConfig(key, context=self.context)

    @override
    def construct(self, config: AgentFactoryConfig, key: str) -> Any | None:
        return self.builder.build(config, key)

    def agent(self, request: RequestContext, *, strict: bool = False) -> Any | None:
        """The agent that should handle `request`."""
        return self.resolve(request, strict=strict)


class AgentBeanFactory:
    """Binds the multi-agent factory, or a single default agent, on activation."""

    name: ClassVar[str] = "agent"

    def configure(self, context: ForageContext, beans: BeanRegistry) -> None:
        selection = MultiAgentConfig(context=context)
        if selection.names:
            if beans.lookup(MULTI_AGENT_FACTORY_BEAN) is None:
                beans.bind(MULTI_AGENT_FACTORY_BEAN, MultiAgentFactory(context=context))
                logger.info("Registered multi-agent factory for %s", ", ".join(selection.names))
            return
        config = AgentFactoryConfig(context=context)
        if config.value(config.settings.AGENT_CLASS) is None:
            logger.debug("No agent configuration found, skipping agent registration")
            return
        if beans.lookup(DEFAULT_AGENT_BEAN) is not None:
            return
        if (agent := AgentBuilder(context).build(config, None)) is not None:
            beans.bind(DEFAULT_AGENT_BEAN, agent)


__all__ = (
    "DEFAULT_AGENT_BEAN",
    "MULTI_AGENT_FACTORY_BEAN",
    "AgentBeanFactory",
    "AgentBuilder",
    "AgentConfiguration",
    "ConfigurationAware",
    "MultiAgentFactory",
    "load_classes",
)
