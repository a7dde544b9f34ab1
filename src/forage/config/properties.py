# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Locating and parsing feature properties files.

Each feature ships at most one `<resource_name>.properties` file. It is
searched for, in order, in:

1. the working directory;
2. the directory named by the `forage.config.dir` system property, or else
   `FORAGE_CONFIG_DIR`;
3. the resource anchor package set on host activation;
4. the package that declares the feature.

The first file found wins. Files are re-read on every load so edits between
loads are picked up.
"""

from __future__ import annotations

import logging

from collections.abc import Iterable, Iterator
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from types import ModuleType


logger = logging.getLogger(__name__)

CONFIG_DIR_PROPERTY = "forage.config.dir"
"""System property naming an extra directory for properties files."""

PROPERTIES_SUFFIX = ".properties"

type ResourceAnchor = str | ModuleType


def parse_properties(lines: Iterable[str]) -> dict[str, str]:
    """Parse `key=value` / `key: value` lines.

    `#` and `!` start comment lines, blank lines are skipped and a trailing
    backslash joins the next line onto the current one.
    """
    entries: dict[str, str] = {}
    for logical in _logical_lines(lines):
        key, value = _split_entry(logical)
        if key:
            entries[key] = value
    return entries


def _logical_lines(lines: Iterable[str]) -> Iterator[str]:
    pending = ""
    for raw in lines:
        line = raw.strip()
        if not pending and (not line or line[0] in "#!"):
            continue
        if line.endswith("\\") and not line.endswith("\\\\"):
            pending += line[:-1]
            continue
        yield pending + line
        pending = ""
    if pending:
        yield pending


def _split_entry(line: str) -> tuple[str, str]:
    positions = [i for i in (line.find("="), line.find(":")) if i >= 0]
    if not positions:
        return line.strip(), ""
    cut = min(positions)
    return line[:cut].strip(), line[cut + 1 :].strip()


def read_properties_text(text: str) -> dict[str, str]:
    """Parse the content of a properties file."""
    return parse_properties(text.splitlines())


def _read(resource: Path | Traversable) -> dict[str, str]:
    logger.debug("Reading properties from %s", resource)
    return read_properties_text(resource.read_text(encoding="utf-8"))


def _anchor_resource(anchor: ResourceAnchor, filename: str) -> Traversable | None:
    try:
        candidate = resources.files(anchor).joinpath(filename)
    except (ModuleNotFoundError, TypeError) as e:
        logger.warning("Resource anchor %r cannot be searched for %s: %s", anchor, filename, e)
        return None
    return candidate if candidate.is_file() else None


def find_properties(
    resource_name: str,
    *,
    search_dirs: Iterable[Path] = (),
    anchor: ResourceAnchor | None = None,
    package: ResourceAnchor | None = None,
) -> Path | Traversable | None:
    """Return the first `<resource_name>.properties` found, or None."""
    filename = f"{resource_name}{PROPERTIES_SUFFIX}"
    for directory in search_dirs:
        candidate = Path(directory) / filename
        if candidate.is_file():
            return candidate
    for source in (anchor, package):
        if source is not None and (found := _anchor_resource(source, filename)):
            return found
    return None


def load_properties(
    resource_name: str,
    *,
    search_dirs: Iterable[Path] = (),
    anchor: ResourceAnchor | None = None,
    package: ResourceAnchor | None = None,
) -> dict[str, str]:
    """Find and parse a feature's properties file; empty when there is none."""
    found = find_properties(resource_name, search_dirs=search_dirs, anchor=anchor, package=package)
    if found is None:
        logger.debug("No %s%s found", resource_name, PROPERTIES_SUFFIX)
        return {}
    return _read(found)


def load_properties_file(path: Path) -> dict[str, str]:
    """Parse a single properties file; empty when it does not exist."""
    return _read(path) if path.is_file() else {}


__all__ = (
    "CONFIG_DIR_PROPERTY",
    "ResourceAnchor",
    "find_properties",
    "load_properties",
    "load_properties_file",
    "parse_properties",
    "read_properties_text",
)
