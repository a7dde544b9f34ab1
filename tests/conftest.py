# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Global pytest configuration and fixtures for Forage tests."""

from __future__ import annotations

import os

from collections.abc import Callable, Iterator
from pathlib import Path
from textwrap import dedent

import pytest

from forage.config.settings import ForageSettings, reset_settings
from forage.context import ForageContext, reset_context


type PropertiesWriter = Callable[[str, str], Path]


@pytest.fixture(autouse=True)
def isolated_forage_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Run every test in an empty working directory with no FORAGE_* variables set.

    Also resets the global settings and default context so nothing leaks
    between tests.
    """
    for key in tuple(os.environ):
        if key.startswith("FORAGE_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    reset_settings()
    reset_context()
    yield
    reset_settings()
    reset_context()


@pytest.fixture
def settings(tmp_path: Path) -> ForageSettings:
    """Library settings rooted at the test's temporary directory."""
    return ForageSettings(working_dir=tmp_path, rich_logging=False, discover_entry_points=False)


@pytest.fixture
def context(settings: ForageSettings) -> ForageContext:
    """A fresh context with empty registries."""
    return ForageContext(settings)


@pytest.fixture
def write_properties(tmp_path: Path) -> PropertiesWriter:
    """Write `<resource_name>.properties` into the working directory."""

    def _write(resource_name: str, content: str) -> Path:
        path = tmp_path / f"{resource_name}.properties"
        path.write_text(dedent(content).strip() + "\n", encoding="utf-8")
        return path

    return _write
