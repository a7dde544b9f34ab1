# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Requests and the selectors that pick a named instance for them."""

from forage.routing.context import RequestContext
from forage.routing.selectors import (
    HeaderSelector,
    InstanceSelector,
    PropertySelector,
    RouteSelector,
    SelectorConfig,
    VariableSelector,
    create_selector,
    undefined_instance_error,
)


__all__ = (
    "HeaderSelector",
    "InstanceSelector",
    "PropertySelector",
    "RequestContext",
    "RouteSelector",
    "SelectorConfig",
    "VariableSelector",
    "create_selector",
    "undefined_instance_error",
)
