# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Process-wide system properties.

System properties are set programmatically (by a host, a launcher or a test)
and override properties files but not environment variables.
"""

from __future__ import annotations

import os
import threading

from collections.abc import Iterator, Mapping, MutableMapping


class SystemProperties(MutableMapping[str, str]):
    """A thread-safe string to string table of system properties."""

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def __getitem__(self, key: str) -> str:
        return self._values[key]

    def __setitem__(self, key: str, value: str) -> None:
        with self._lock:
            self._values[key] = str(value)

    def __delitem__(self, key: str) -> None:
        with self._lock:
            del self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(tuple(self._values))

    def __len__(self) -> int:
        return len(self._values)


def env_value(name: str, environ: Mapping[str, str] | None = None) -> str | None:
    """Read an environment variable, treating empty values as absent."""
    value = (os.environ if environ is None else environ).get(name)
    return value if value else None


__all__ = ("SystemProperties", "env_value")
