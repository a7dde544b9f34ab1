# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Shared helpers: logging setup and secret redaction."""

from forage.common.logging import redact, setup_logger, setup_logger_from_settings


__all__ = ("redact", "setup_logger", "setup_logger_from_settings")
