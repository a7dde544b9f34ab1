# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Settings for agents and for choosing between several named agents.

Both live in `forage-agent-factory.properties`:

    forage.multi.agent.names=agent1,agent2
    forage.multi.agent.id.source=header
    forage.multi.agent.id.source.header=X-Agent

    forage.agent1.provider.agent.class=my_agents.SimpleAgent
    forage.agent1.provider.model.factory.class=ollama
    forage.agent1.provider.features=memory
    forage.agent1.provider.features.memory.factory.class=message-window
"""

from __future__ import annotations

from forage.config.features import FeatureConfig, FeatureSettings, setting
from forage.core.enum import SettingCategory
from forage.registry.multi import MultiInstanceConfig, MultiInstanceSettings


AGENT_RESOURCE = "forage-agent-factory"

FEATURE_MEMORY = "memory"
"""The feature flag that enables chat memory for an agent."""


class MultiAgentSettings(
    MultiInstanceSettings, feature="forage-multi-agent", resource_name=AGENT_RESOURCE
):
    """Which agents exist and how a request picks one."""

    NAMES = setting(
        "forage.multi.agent.names",
        "Comma-separated names of the agents a request may select",
        required=True,
    )
    ID_SOURCE = setting(
        "forage.multi.agent.id.source",
        "Where the agent name is read from: route, header, property or variable",
        default="route",
    )
    ID_SOURCE_HEADER = setting(
        "forage.multi.agent.id.source.header",
        "Header carrying the agent name when the id source is 'header'",
        category=SettingCategory.ADVANCED,
    )
    ID_SOURCE_PROPERTY = setting(
        "forage.multi.agent.id.source.property",
        "Exchange property carrying the agent name when the id source is 'property'",
        category=SettingCategory.ADVANCED,
    )
    ID_SOURCE_VARIABLE = setting(
        "forage.multi.agent.id.source.variable",
        "Variable carrying the agent name when the id source is 'variable'",
        category=SettingCategory.ADVANCED,
    )


class MultiAgentConfig(MultiInstanceConfig[MultiAgentSettings]):
    """The allow-list and selector settings for agents."""

    settings_class = MultiAgentSettings


class AgentFactorySettings(FeatureSettings, feature="forage-agent", resource_name=AGENT_RESOURCE):
    """Settings of one agent."""

    MODEL_FACTORY_CLASS = setting(
        "forage.provider.model.factory.class",
        "Class or plugin name of the chat model provider",
        required=True,
    )
    FEATURES = setting(
        "forage.provider.features",
        "Comma-separated optional agent features, such as 'memory'",
    )
    MEMORY_FACTORY_CLASS = setting(
        "forage.provider.features.memory.factory.class",
        "Class or plugin name of the chat memory provider",
    )
    AGENT_CLASS = setting(
        "forage.provider.agent.class",
        "Class or plugin name of the agent",
        required=True,
    )
    INPUT_GUARDRAILS = setting(
        "forage.guardrails.input.classes",
        "Comma-separated import paths of input guardrails",
        category=SettingCategory.SECURITY,
    )
    OUTPUT_GUARDRAILS = setting(
        "forage.guardrails.output.classes",
        "Comma-separated import paths of output guardrails",
        category=SettingCategory.SECURITY,
    )


class AgentFactoryConfig(FeatureConfig[AgentFactorySettings]):
    """Resolved settings of one agent."""

    settings_class = AgentFactorySettings

    @property
    def agent_class(self) -> str:
        return self.require(AgentFactorySettings.AGENT_CLASS)

    @property
    def model_factory_class(self) -> str | None:
        return self.value(AgentFactorySettings.MODEL_FACTORY_CLASS)

    @property
    def features(self) -> tuple[str, ...]:
        return tuple(f.lower() for f in self.as_list(AgentFactorySettings.FEATURES))

    @property
    def memory_enabled(self) -> bool:
        return FEATURE_MEMORY in self.features

    @property
    def memory_factory_class(self) -> str | None:
        return self.value(AgentFactorySettings.MEMORY_FACTORY_CLASS)

    @property
    def input_guardrails(self) -> list[str]:
        return self.as_list(AgentFactorySettings.INPUT_GUARDRAILS)

    @property
    def output_guardrails(self) -> list[str]:
        return self.as_list(AgentFactorySettings.OUTPUT_GUARDRAILS)


__all__ = (
    "AGENT_RESOURCE",
    "FEATURE_MEMORY",
    "AgentFactoryConfig",
    "AgentFactorySettings",
    "MultiAgentConfig",
    "MultiAgentSettings",
)
