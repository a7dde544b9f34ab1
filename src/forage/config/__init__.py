# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Layered configuration: descriptors, the value store and feature registries."""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

from forage.core.lazy_import import create_lazy_getattr


if TYPE_CHECKING:
    from forage.config.descriptor import SettingDescriptor
    from forage.config.features import FeatureCatalog, FeatureConfig, FeatureSettings, setting
    from forage.config.helpers import (
        named_property_regex,
        split_list,
        to_bool,
    )
    from forage.config.settings import ForageSettings, get_settings, reset_settings
    from forage.config.sources import SystemProperties
    from forage.config.store import SettingValueStore, extract_prefixes

_dynamic_imports: MappingProxyType[str, tuple[str, str]] = MappingProxyType({
    "FeatureCatalog": (__spec__.parent, "features"),
    "FeatureConfig": (__spec__.parent, "features"),
    "FeatureSettings": (__spec__.parent, "features"),
    "ForageSettings": (__spec__.parent, "settings"),
    "SettingDescriptor": (__spec__.parent, "descriptor"),
    "SettingValueStore": (__spec__.parent, "store"),
    "SystemProperties": (__spec__.parent, "sources"),
    "extract_prefixes": (__spec__.parent, "store"),
    "get_settings": (__spec__.parent, "settings"),
    "named_property_regex": (__spec__.parent, "helpers"),
    "reset_settings": (__spec__.parent, "settings"),
    "setting": (__spec__.parent, "features"),
    "split_list": (__spec__.parent, "helpers"),
    "to_bool": (__spec__.parent, "helpers"),
})

__getattr__ = create_lazy_getattr(_dynamic_imports, globals(), __name__)

__all__ = (
    "FeatureCatalog",
    "FeatureConfig",
    "FeatureSettings",
    "ForageSettings",
    "SettingDescriptor",
    "SettingValueStore",
    "SystemProperties",
    "extract_prefixes",
    "get_settings",
    "named_property_regex",
    "reset_settings",
    "setting",
    "split_list",
    "to_bool",
)


def __dir__() -> list[str]:
    return list(__all__)
