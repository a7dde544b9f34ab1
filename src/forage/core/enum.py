# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Base enum and the small enums shared across Forage."""

from __future__ import annotations

import contextlib

from collections.abc import Callable, Generator
from enum import Enum, unique
from functools import cache
from types import MappingProxyType
from typing import Self, override

import textcase

from aenum import extend_enum  # type: ignore


type EnumExtend = Callable[[Enum, str, str], Enum]
extend_enum: EnumExtend = extend_enum  # pyright: ignore[reportUnknownVariableType]


class BaseEnum(Enum):
    """A string-valued enum that tolerates how people write values in settings.

    `from_string` accepts the value or name in any case, with dashes or
    underscores, so `bean-name`, `BEAN_NAME` and `BeanName` all find the same
    member. `add_member` extends the enum at runtime for plugin kinds.
    """

    @staticmethod
    def _deconstruct_string(value: str) -> list[str]:
        value = textcase.snake(value.strip())
        return [v for v in value.split("_") if v]

    @property
    def aka(self) -> tuple[str, ...]:
        """Every spelling this member answers to."""
        names = {self.value, self.name}
        names |= {
            variant
            for name in tuple(names)
            for variant in (
                textcase.lower(name),
                textcase.snake(name),
                textcase.kebab(name),
                textcase.pascal(name),
                textcase.camel(name),
            )
        }
        return tuple(sorted(names))

    @classmethod
    @override
    def _missing_(cls, value: object) -> Self | None:
        if not isinstance(value, str):
            return None
        with contextlib.suppress(ValueError):
            return cls.from_string(value)
        return None

    @classmethod
    def aliases(cls) -> MappingProxyType[str, Self]:
        """A mapping of every lower-cased alias to its member."""
        return MappingProxyType({
            alias.lower(): member for member in cls for alias in member.aka
        })

    @classmethod
    def from_string(cls, value: str) -> Self:
        """Convert a string to the corresponding member, flexible about case and separators."""
        lowered = str(value).strip().lower()
        if member := cls.aliases().get(lowered):
            return member
        value_parts = cls._deconstruct_string(value)
        if found := next(
            (member for member in cls if cls._deconstruct_string(member.value) == value_parts),
            None,
        ):
            return found
        raise ValueError(f"{value} is not a valid {cls.__qualname__} member")

    @classmethod
    def is_member(cls, value: str) -> bool:
        """Check whether `value` names a member."""
        try:
            cls.from_string(value)
        except ValueError:
            return False
        return True

    @classmethod
    def values(cls) -> Generator[str]:
        """Yield every member value."""
        yield from (member.value for member in cls)

    @classmethod
    def add_member(cls, name: str, value: str) -> Self:
        """Dynamically add a new member to the enum."""
        extend_enum(cls, textcase.constant(name), value)
        return cls(value)

    @property
    def as_title(self) -> str:
        """The title-cased representation of the member."""
        return textcase.title(self.value)

    def __str__(self) -> str:
        """Return the member value."""
        return self.value


@unique
class ValueType(BaseEnum):
    """The declared type of a setting value."""

    STRING = "string"
    INTEGER = "integer"
    LONG = "long"
    DOUBLE = "double"
    BOOLEAN = "boolean"
    PASSWORD = "password"
    BEAN_NAME = "bean-name"

    @property
    def is_secret(self) -> bool:
        """Whether values of this type must not be logged."""
        return self is ValueType.PASSWORD


@unique
class SettingCategory(BaseEnum):
    """Where a setting is shown to users."""

    COMMON = "common"
    ADVANCED = "advanced"
    SECURITY = "security"


@unique
class SelectorSource(BaseEnum):
    """Where an instance key is read from on a request."""

    ROUTE = "route"
    HEADER = "header"
    PROPERTY = "property"
    VARIABLE = "variable"


@cache
def supported_sources() -> tuple[str, ...]:
    """The id source values accepted in settings."""
    return tuple(SelectorSource.values())


__all__ = (
    "BaseEnum",
    "SelectorSource",
    "SettingCategory",
    "ValueType",
    "supported_sources",
)
