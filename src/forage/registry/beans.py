# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Named objects handed to the routing host, and the factories that produce them."""

from __future__ import annotations

import logging
import threading

from collections.abc import Iterator, MutableMapping
from typing import TYPE_CHECKING, Any, ClassVar, Protocol, runtime_checkable


if TYPE_CHECKING:
    from forage.context import ForageContext


logger = logging.getLogger(__name__)


class BeanRegistry(MutableMapping[str, Any]):
    """Thread-safe name to object binding, standing in for the host's registry."""

    def __init__(self) -> None:
        self._beans: dict[str, Any] = {}
        self._lock = threading.Lock()

    def bind(self, name: str, bean: Any) -> None:
        """Bind `bean` under `name`, replacing any previous binding."""
        with self._lock:
            if name in self._beans:
                logger.debug("Rebinding bean '%s'", name)
            self._beans[name] = bean

    def lookup[T](self, name: str, expected: type[T] | None = None) -> T | None:
        """The bean bound to `name`, or None; None as well when it is not an `expected`."""
        bean = self._beans.get(name)
        if expected is not None and bean is not None and not isinstance(bean, expected):
            return None
        return bean

    def __getitem__(self, name: str) -> Any:
        return self._beans[name]

    def __setitem__(self, name: str, bean: Any) -> None:
        self.bind(name, bean)

    def __delitem__(self, name: str) -> None:
        with self._lock:
            del self._beans[name]

    def __iter__(self) -> Iterator[str]:
        return iter(tuple(self._beans))

    def __len__(self) -> int:
        return len(self._beans)


@runtime_checkable
class BeanFactory(Protocol):
    """Binds the beans of one feature when the host activates Forage."""

    name: ClassVar[str]

    def configure(self, context: ForageContext, beans: BeanRegistry) -> None:
        """Create this feature's beans and bind them."""
        ...


__all__ = ("BeanFactory", "BeanRegistry")
