# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Instance-id selectors.

A selector reads the key of a named instance from a request. Which part of
the request it reads is configured per feature:

    forage.multi.agent.id.source=header
    forage.multi.agent.id.source.header=X-Agent

`select` is lenient and returns None when the request does not carry the
value; `require` raises `SelectorSourceNotFoundError` instead.
"""

from __future__ import annotations

import abc
import logging

from dataclasses import dataclass
from typing import Protocol, override

from forage.core.enum import SelectorSource, supported_sources
from forage.exceptions import (
    SelectorSourceNotFoundError,
    UndefinedInstanceError,
    UnknownSelectorSourceError,
)
from forage.routing.context import RequestContext


logger = logging.getLogger(__name__)


class SelectorConfig(Protocol):
    """Settings that describe where an instance key comes from."""

    @property
    def id_source(self) -> str | None: ...

    @property
    def id_source_header(self) -> str | None: ...

    @property
    def id_source_property(self) -> str | None: ...

    @property
    def id_source_variable(self) -> str | None: ...


class InstanceSelector(abc.ABC):
    """Extracts an instance key from a request."""

    source: SelectorSource

    @abc.abstractmethod
    def select(self, request: RequestContext) -> str | None:
        """The instance key carried by `request`, or None."""

    @property
    @abc.abstractmethod
    def description(self) -> str:
        """Where this selector reads from, for messages."""

    def require(self, request: RequestContext) -> str:
        """The instance key carried by `request`; raises when it is missing."""
        if (key := self.select(request)) is None:
            raise SelectorSourceNotFoundError(
                f"No instance id found in {self.description}",
                details={"source": self.source.value, "key": request.route_id},
            )
        return key

    def undefined(
        self, request: RequestContext, allowed: tuple[str, ...], *, feature: str = "instance"
    ) -> UndefinedInstanceError:
        """The error for a request whose key is not in `allowed`; `feature` names what was asked for."""
        return UndefinedInstanceError.from_route_id(request.route_id, allowed, feature=feature)


def _as_key(value: object) -> str | None:
    if value is None:
        return None
    key = str(value).strip()
    return key or None


@dataclass(frozen=True, slots=True)
class RouteSelector(InstanceSelector):
    """Uses the route id as the instance key."""

    source = SelectorSource.ROUTE

    @override
    def select(self, request: RequestContext) -> str | None:
        return _as_key(request.route_id)

    @property
    @override
    def description(self) -> str:
        return "the route id"


@dataclass(frozen=True, slots=True)
class _NamedSelector(InstanceSelector):
    name: str

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError(f"A {self.source.value} name is required for {self.source.value} id selection")
        object.__setattr__(self, "name", self.name.strip())


@dataclass(frozen=True, slots=True)
class HeaderSelector(_NamedSelector):
    """Reads the instance key from a request header."""

    source = SelectorSource.HEADER

    @override
    def select(self, request: RequestContext) -> str | None:
        return _as_key(request.header(self.name))

    @property
    @override
    def description(self) -> str:
        return f"header '{self.name}'"

    @override
    def undefined(
        self, request: RequestContext, allowed: tuple[str, ...], *, feature: str = "instance"
    ) -> UndefinedInstanceError:
        return UndefinedInstanceError.from_header(self.name, self.select(request), allowed, feature=feature)


@dataclass(frozen=True, slots=True)
class PropertySelector(_NamedSelector):
    """Reads the instance key from an exchange property."""

    source = SelectorSource.PROPERTY

    @override
    def select(self, request: RequestContext) -> str | None:
        return _as_key(request.property(self.name))

    @property
    @override
    def description(self) -> str:
        return f"property '{self.name}'"

    @override
    def undefined(
        self, request: RequestContext, allowed: tuple[str, ...], *, feature: str = "instance"
    ) -> UndefinedInstanceError:
        return UndefinedInstanceError.from_property(self.name, self.select(request), allowed, feature=feature)


@dataclass(frozen=True, slots=True)
class VariableSelector(_NamedSelector):
    """Reads the instance key from a variable."""

    source = SelectorSource.VARIABLE

    @override
    def select(self, request: RequestContext) -> str | None:
        return _as_key(request.variable(self.name))

    @property
    @override
    def description(self) -> str:
        return f"variable '{self.name}'"

    @override
    def undefined(
        self, request: RequestContext, allowed: tuple[str, ...], *, feature: str = "instance"
    ) -> UndefinedInstanceError:
        return UndefinedInstanceError.from_variable(self.name, self.select(request), allowed, feature=feature)


def _source_of(config: SelectorConfig) -> SelectorSource:
    raw = (config.id_source or SelectorSource.ROUTE.value).strip()
    try:
        return SelectorSource.from_string(raw)
    except ValueError as e:
        raise UnknownSelectorSourceError(
            f"Unsupported id source '{raw}'. Supported sources are: {', '.join(supported_sources())}",
            details={"source": raw},
            suggestions=[f"Use one of: {', '.join(supported_sources())}"],
        ) from e


def create_selector(config: SelectorConfig) -> InstanceSelector:
    """Build the selector described by `config`; the route id when no source is set."""
    match _source_of(config):
        case SelectorSource.ROUTE:
            return RouteSelector()
        case SelectorSource.HEADER:
            return HeaderSelector(config.id_source_header or "")
        case SelectorSource.PROPERTY:
            return PropertySelector(config.id_source_property or "")
        case SelectorSource.VARIABLE:
            return VariableSelector(config.id_source_variable or "")


def undefined_instance_error(
    config: SelectorConfig,
    request: RequestContext,
    allowed: tuple[str, ...],
    *,
    feature: str = "instance",
) -> UndefinedInstanceError:
    """Describe why `request` maps to no defined instance, falling back to the route id."""
    try:
        selector = create_selector(config)
    except (UnknownSelectorSourceError, ValueError) as e:
        logger.debug("Falling back to route id for the undefined instance error: %s", e)
        selector = RouteSelector()
    return selector.undefined(request, allowed, feature=feature)


__all__ = (
    "HeaderSelector",
    "InstanceSelector",
    "PropertySelector",
    "RouteSelector",
    "SelectorConfig",
    "VariableSelector",
    "create_selector",
    "undefined_instance_error",
)
