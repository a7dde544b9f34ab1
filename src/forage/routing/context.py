# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""The minimal view of a routed request that selectors need."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any


def _frozen(values: Mapping[str, Any] | None) -> Mapping[str, Any]:
    return MappingProxyType(dict(values or {}))


@dataclass(frozen=True, slots=True)
class RequestContext:
    """A request travelling through a route.

    Header names are matched case-insensitively; property and variable names
    are matched exactly.
    """

    route_id: str | None = None
    headers: Mapping[str, Any] = field(default_factory=dict)
    properties: Mapping[str, Any] = field(default_factory=dict)
    variables: Mapping[str, Any] = field(default_factory=dict)
    exchange_id: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", _frozen(self.headers))
        object.__setattr__(self, "properties", _frozen(self.properties))
        object.__setattr__(self, "variables", _frozen(self.variables))

    def header(self, name: str) -> Any:
        """The value of header `name`, or None."""
        if name in self.headers:
            return self.headers[name]
        lowered = name.lower()
        return next((v for k, v in self.headers.items() if k.lower() == lowered), None)

    def property(self, name: str) -> Any:
        """The value of exchange property `name`, or None."""
        return self.properties.get(name)

    def variable(self, name: str) -> Any:
        """The value of variable `name`, or None."""
        return self.variables.get(name)


__all__ = ("RequestContext",)
