# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Unified exception hierarchy for Forage.

Every error raised by Forage inherits from `ForageError` and carries the
feature, key and descriptor involved in `details`, so a failed lookup can be
traced back to the setting that caused it.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, ClassVar


class ForageError(Exception):
    """Base exception for all Forage errors.

    Provides structured error information including details and suggestions
    for resolution.
    """

    _detail_keys: ClassVar[tuple[str, ...]] = (
        "feature",
        "prefix",
        "setting",
        "key",
        "env_name",
        "source",
    )

    def __init__(
        self,
        message: str,
        *,
        details: dict[str, Any] | None = None,
        suggestions: list[str] | None = None,
    ) -> None:
        """Initialize Forage error.

        Args:
            message: Human-readable error message
            details: Additional context about the error
            suggestions: Actionable suggestions for resolving the error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.suggestions = suggestions or []

    def __str__(self) -> str:
        """Return descriptive error message with context details."""
        parts = [self.message]
        if self.details:
            detail_parts = [
                f"{key.replace('_', ' ')}: {self.details[key]}"
                for key in self._detail_keys
                if self.details.get(key) is not None
            ]
            if detail_parts:
                parts.append(f"({', '.join(detail_parts)})")
        return " ".join(parts)

    @property
    def report(self) -> str:
        """Generate a full error report including details and suggestions."""
        return "\n".join((
            f"- Error Message: {self.message}",
            "- Details: " + ", ".join(f"{k}: {v}" for k, v in self.details.items())
            if self.details
            else "- No additional details provided.",
            "- Suggestions: " + ", ".join(self.suggestions)
            if self.suggestions
            else "- No suggestions provided.",
        ))


class ConfigurationError(ForageError):
    """Configuration and settings errors.

    Raised when there are issues with properties files, environment variables,
    or the settings of a named instance.
    """


class MissingConfigError(ConfigurationError):
    """A required setting has no value.

    Raised when a required setting resolved to nothing through every layer of
    the precedence chain.
    """


class UndefinedInstanceError(ConfigurationError):
    """The requested instance key is not in the allow-list.

    Raised by a multi-instance registry before any provider is looked up. The
    message says where the key came from and which names are allowed, so
    callers can fix the request or the configured names.
    """

    def __init__(
        self,
        message: str,
        *,
        key: str | None = None,
        allowed: Iterable[str] = (),
        feature: str = "instance",
        details: dict[str, Any] | None = None,
        suggestions: list[str] | None = None,
    ) -> None:
        """Initialize the error with the offending key and the allowed keys."""
        self.key = key
        self.allowed = tuple(allowed)
        self.feature = feature
        allowed_names = ", ".join(self.allowed) or "(none)"
        super().__init__(
            f"{message}. Allowed names: {allowed_names}",
            details={"feature": feature, "key": key, "allowed": self.allowed, **(details or {})},
            suggestions=suggestions or [f"Use one of the configured names: {allowed_names}"],
        )

    @classmethod
    def _build(
        cls, message: str, key: str | None, allowed: Iterable[str], source: str, feature: str
    ) -> UndefinedInstanceError:
        return cls(
            f"{message} has no defined {feature} capable of handling this request",
            key=key,
            allowed=allowed,
            feature=feature,
            details={"source": source},
        )

    @classmethod
    def from_route_id(
        cls, route_id: str | None, allowed: Iterable[str] = (), *, feature: str = "instance"
    ) -> UndefinedInstanceError:
        """The route id does not name a defined instance."""
        return cls._build(f"Route '{route_id}'", route_id, allowed, "route", feature)

    @classmethod
    def from_header(
        cls, header: str, value: str | None, allowed: Iterable[str] = (), *, feature: str = "instance"
    ) -> UndefinedInstanceError:
        """The header value does not name a defined instance."""
        return cls._build(f"Header '{header}' with value '{value}'", value, allowed, "header", feature)

    @classmethod
    def from_property(
        cls, name: str, value: str | None, allowed: Iterable[str] = (), *, feature: str = "instance"
    ) -> UndefinedInstanceError:
        """The exchange property value does not name a defined instance."""
        return cls._build(f"Property '{name}' with value '{value}'", value, allowed, "property", feature)

    @classmethod
    def from_variable(
        cls, name: str, value: str | None, allowed: Iterable[str] = (), *, feature: str = "instance"
    ) -> UndefinedInstanceError:
        """The variable value does not name a defined instance."""
        return cls._build(f"Variable '{name}' with value '{value}'", value, allowed, "variable", feature)


class UnknownSelectorSourceError(ConfigurationError, ValueError):
    """The configured id source is not supported."""


class SelectorSourceNotFoundError(ForageError):
    """A strict selector could not find the value it reads from the request."""


class ProviderError(ForageError):
    """Provider integration errors.

    Raised when a plugin cannot be found or fails while it is created.
    """


class PluginNotFoundError(ProviderError, LookupError):
    """No plugin is registered under the requested name or class."""


class DependencyConstructionError(ProviderError):
    """A mandatory nested dependency of a provider could not be built.

    The original failure, if any, is chained as the cause.
    """


__all__ = (
    "ConfigurationError",
    "DependencyConstructionError",
    "ForageError",
    "MissingConfigError",
    "PluginNotFoundError",
    "ProviderError",
    "SelectorSourceNotFoundError",
    "UndefinedInstanceError",
    "UnknownSelectorSourceError",
)
