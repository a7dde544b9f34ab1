# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Small conversions shared by feature configs."""

from __future__ import annotations

import re


_TRUE = frozenset({"true", "yes", "on", "1"})
_FALSE = frozenset({"false", "no", "off", "0"})


def named_property_regex(marker: str) -> str:
    """Regex capturing the instance name in keys like `forage.ds1.jdbc.url`."""
    return rf"forage\.(.+)\.{re.escape(marker)}\..+"


def split_list(value: str | None) -> list[str]:
    """Split a comma-separated value, trimming items and dropping empty ones."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def to_bool(value: str | None, *, default: bool = False) -> bool:
    """Interpret a setting value as a boolean."""
    if value is None:
        return default
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ValueError(f"{value!r} is not a boolean value")


__all__ = ("named_property_regex", "split_list", "to_bool")
