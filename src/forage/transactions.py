# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Transaction policy beans.

Features with transaction support (`forage.jdbc.transaction.enabled`,
`forage.jms.transaction.enabled`) bind one policy bean per propagation
behaviour. Routes refer to them by bean name, e.g. `PROPAGATION_REQUIRED`.
The host's transaction manager decides what a policy does; Forage only
publishes the names.
"""

from __future__ import annotations

import logging

from dataclasses import dataclass
from typing import TYPE_CHECKING

from forage.core.enum import BaseEnum


if TYPE_CHECKING:
    from forage.registry.beans import BeanRegistry


logger = logging.getLogger(__name__)


class Propagation(BaseEnum):
    """Transaction propagation behaviours, valued by their bean names."""

    REQUIRED = "PROPAGATION_REQUIRED"
    MANDATORY = "MANDATORY"
    NEVER = "NEVER"
    NOT_SUPPORTED = "NOT_SUPPORTED"
    REQUIRES_NEW = "REQUIRES_NEW"
    SUPPORTS = "SUPPORTS"

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS = {
    Propagation.REQUIRED: "Starts a new transaction if none exists, otherwise joins the existing one",
    Propagation.MANDATORY: "Requires an existing transaction, fails if none exists",
    Propagation.NEVER: "Must run without a transaction, fails if one exists",
    Propagation.NOT_SUPPORTED: "Suspends any existing transaction and runs without one",
    Propagation.REQUIRES_NEW: "Always starts a new transaction, suspending any existing one",
    Propagation.SUPPORTS: "Joins an existing transaction if present, otherwise runs without one",
}


@dataclass(frozen=True, slots=True)
class TransactionPolicy:
    """A named propagation behaviour for transacted routes."""

    propagation: Propagation
    feature: str
    """The feature that bound the policy."""

    @property
    def bean_name(self) -> str:
        return self.propagation.value


def bind_transaction_policies(beans: BeanRegistry, *, feature: str) -> tuple[str, ...]:
    """Bind a policy bean for every propagation behaviour not bound yet.

    Returns the names that were bound.
    """
    bound: list[str] = []
    for propagation in Propagation:
        if beans.lookup(propagation.value) is not None:
            continue
        policy = TransactionPolicy(propagation, feature)
        beans.bind(policy.bean_name, policy)
        bound.append(policy.bean_name)
    if bound:
        logger.info("Bound transaction policies for %s: %s", feature, ", ".join(bound))
    return tuple(bound)


__all__ = ("Propagation", "TransactionPolicy", "bind_transaction_policies")
