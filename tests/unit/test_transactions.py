# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Tests for transaction policy beans."""

from __future__ import annotations

import pytest

from forage.registry.beans import BeanRegistry
from forage.transactions import Propagation, TransactionPolicy, bind_transaction_policies


pytestmark = [pytest.mark.unit]


def test_binds_every_propagation():
    beans = BeanRegistry()

    bound = bind_transaction_policies(beans, feature="jdbc")

    assert bound == (
        "PROPAGATION_REQUIRED",
        "MANDATORY",
        "NEVER",
        "NOT_SUPPORTED",
        "REQUIRES_NEW",
        "SUPPORTS",
    )
    assert beans.lookup("NEVER", TransactionPolicy) == TransactionPolicy(Propagation.NEVER, "jdbc")


def test_existing_beans_are_kept():
    beans = BeanRegistry()
    beans.bind("PROPAGATION_REQUIRED", "host policy")
    bind_transaction_policies(beans, feature="jdbc")

    bound = bind_transaction_policies(beans, feature="jms")

    assert bound == ()
    assert beans["PROPAGATION_REQUIRED"] == "host policy"
    assert beans["SUPPORTS"].feature == "jdbc"


def test_binding_is_logged(caplog: pytest.LogCaptureFixture):
    caplog.set_level("INFO", logger="forage.transactions")

    bind_transaction_policies(BeanRegistry(), feature="jms")

    assert "Bound transaction policies for jms: PROPAGATION_REQUIRED" in caplog.text


@pytest.mark.parametrize("propagation", list(Propagation))
def test_every_propagation_is_described(propagation: Propagation):
    assert propagation.description
    assert TransactionPolicy(propagation, "jdbc").bean_name == propagation.value
