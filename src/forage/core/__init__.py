# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Core types shared by every Forage package."""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

from forage.core.lazy_import import LazyImport, create_lazy_getattr, lazy_import


if TYPE_CHECKING:
    from forage.core.enum import BaseEnum, SelectorSource, SettingCategory, ValueType
    from forage.core.models import BasedModel, FrozenBasedModel

_dynamic_imports: MappingProxyType[str, tuple[str, str]] = MappingProxyType({
    "BaseEnum": (__spec__.parent, "enum"),
    "BasedModel": (__spec__.parent, "models"),
    "FrozenBasedModel": (__spec__.parent, "models"),
    "SelectorSource": (__spec__.parent, "enum"),
    "SettingCategory": (__spec__.parent, "enum"),
    "ValueType": (__spec__.parent, "enum"),
})

__getattr__ = create_lazy_getattr(_dynamic_imports, globals(), __name__)

__all__ = (
    "BaseEnum",
    "BasedModel",
    "FrozenBasedModel",
    "LazyImport",
    "SelectorSource",
    "SettingCategory",
    "ValueType",
    "create_lazy_getattr",
    "lazy_import",
)


def __dir__() -> list[str]:
    return list(__all__)
