# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Setting descriptors: the identity and metadata of one configurable property.

A descriptor is the key of every stored value. The default descriptor of a
feature has no prefix; a named instance (`ds1`, `agent2`, ...) gets its own
clone through `as_named`, which places the instance name right after the
`forage.` namespace:

    forage.jdbc.url  --as_named("ds1")-->  forage.ds1.jdbc.url  (FORAGE_DS1_JDBC_URL)
"""

from __future__ import annotations

from typing import Annotated, Any, Self

import textcase

from pydantic import Field, computed_field, field_validator

from forage.core.enum import SettingCategory, ValueType
from forage.core.models import FrozenBasedModel


NAMESPACE = "forage"
"""The namespace every feature property lives under."""


def qualify(name: str, prefix: str | None) -> str:
    """Return the full property name of `name` for instance `prefix`."""
    if not prefix:
        return name
    namespace = f"{NAMESPACE}."
    if name.startswith(namespace):
        return f"{namespace}{prefix}.{name.removeprefix(namespace)}"
    return f"{prefix}.{name}"


def to_env_name(property_name: str) -> str:
    """Environment variable name for a property name."""
    return property_name.upper().replace(".", "_").replace("-", "_")


class SettingDescriptor(FrozenBasedModel):
    """One configurable property of a feature.

    Equality and hashing only consider the owning feature and the full
    property name, so a descriptor can be used as a dict key and compared
    with a re-created one.
    """

    owner: Annotated[str, Field(description="Id of the feature that declares this setting.")]
    name: Annotated[str, Field(description="Local property name, without any instance prefix.")]
    prefix: Annotated[str | None, Field(description="Instance name, or None for the default instance.")] = None
    description: str | None = None
    display_name: str | None = None
    default_value: str | None = None
    value_type: ValueType = ValueType.STRING
    required: bool = False
    category: SettingCategory = SettingCategory.COMMON

    @field_validator("prefix", mode="before")
    @classmethod
    def _blank_prefix_is_default(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("default_value", mode="before")
    @classmethod
    def _stringify_default(cls, value: Any) -> Any:
        if isinstance(value, bool):
            return str(value).lower()
        if isinstance(value, int | float):
            return str(value)
        return value

    @classmethod
    def of(
        cls,
        owner: str,
        name: str,
        description: str | None = None,
        display_name: str | None = None,
        default_value: str | None = None,
        value_type: ValueType | str = ValueType.STRING,
        *,
        required: bool = False,
        category: SettingCategory | str = SettingCategory.COMMON,
    ) -> Self:
        """Construct a default (unprefixed) descriptor."""
        return cls(
            owner=owner,
            name=name,
            description=description,
            display_name=display_name or default_display_name(name),
            default_value=default_value,
            value_type=ValueType.from_string(value_type) if isinstance(value_type, str) else value_type,
            required=required,
            category=SettingCategory.from_string(category)
            if isinstance(category, str)
            else category,
        )

    @computed_field
    @property
    def property_name(self) -> str:
        """The full, prefix-qualified property name."""
        return qualify(self.name, self.prefix)

    @property
    def env_name(self) -> str:
        """The environment variable that overrides this setting."""
        return to_env_name(self.property_name)

    @property
    def system_property_name(self) -> str:
        """The system property that overrides this setting."""
        return self.property_name

    def as_named(self, prefix: str | None) -> Self:
        """Clone this descriptor for the instance called `prefix`.

        The clone is always derived from the local name, so naming an already
        named descriptor replaces its prefix.
        """
        if prefix is None or not prefix.strip():
            return self
        if prefix == self.prefix:
            return self
        return self.model_copy(update={"prefix": prefix})

    def matches(self, raw_key: str) -> bool:
        """Whether `raw_key` is this descriptor's full property name."""
        return raw_key.strip() == self.property_name

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SettingDescriptor):
            return NotImplemented
        return (self.owner, self.property_name) == (other.owner, other.property_name)

    def __hash__(self) -> int:
        return hash((self.owner, self.property_name))

    def __repr__(self) -> str:
        return f"SettingDescriptor({self.owner!r}, {self.property_name!r})"


def default_display_name(name: str) -> str:
    """Human readable label derived from the last segments of a property name."""
    parts = [p for p in name.split(".") if p and p != NAMESPACE]
    return textcase.title(" ".join(parts[-2:])) if parts else name


__all__ = (
    "NAMESPACE",
    "SettingDescriptor",
    "default_display_name",
    "qualify",
    "to_env_name",
)
