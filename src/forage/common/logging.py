# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Logging setup for the `forage` logger hierarchy.

Every module logs through `logging.getLogger(__name__)`; this module only
decides where the `forage` logger writes: a rich console handler, or the
root handlers configured by the host.
"""

from __future__ import annotations

import logging

from typing import TYPE_CHECKING, Any

from forage.core.lazy_import import lazy_import


if TYPE_CHECKING:
    from rich.console import Console
    from rich.logging import RichHandler

    from forage.config.settings import ForageSettings
    from forage.core.lazy_import import LazyImport
else:
    RichHandler: LazyImport[RichHandler] = lazy_import("rich.logging", "RichHandler")
    Console: LazyImport[Console] = lazy_import("rich.console", "Console")

ROOT_LOGGER = "forage"

_FORAGE_HANDLER = "_forage_handler"

REDACTED = "****"


def get_rich_handler(**kwargs: Any) -> RichHandler:
    """A `RichHandler` on a stderr console; setting values are never parsed as markup."""
    handler = RichHandler(console=Console(stderr=True, soft_wrap=True), markup=False, **kwargs)  # type: ignore
    setattr(handler, _FORAGE_HANDLER, True)
    return handler


def _as_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    return logging.getLevelNamesMapping().get(level.upper(), logging.WARNING)


def setup_logger(
    name: str = ROOT_LOGGER,
    *,
    level: int | str = logging.WARNING,
    rich: bool = True,
    rich_options: dict[str, Any] | None = None,
) -> logging.Logger:
    """Set the level of logger `name` and, with `rich`, give it a rich handler.

    Calling this again replaces the handler installed earlier; handlers added
    by the host are left alone.
    """
    logger = logging.getLogger(name)
    logger.setLevel(_as_level(level))
    for handler in [h for h in logger.handlers if getattr(h, _FORAGE_HANDLER, False)]:
        logger.removeHandler(handler)
    if rich:
        logger.addHandler(get_rich_handler(**(rich_options or {})))
    return logger


def setup_logger_from_settings(settings: ForageSettings) -> logging.Logger:
    """Configure the `forage` logger from library settings."""
    return setup_logger(ROOT_LOGGER, level=settings.log_level, rich=settings.rich_logging)


def redact(value: str | None, *, secret: bool) -> str | None:
    """Mask a value before it is logged when it belongs to a secret setting."""
    if value is None or not secret:
        return value
    return REDACTED


__all__ = (
    "REDACTED",
    "ROOT_LOGGER",
    "get_rich_handler",
    "redact",
    "setup_logger",
    "setup_logger_from_settings",
)
