# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Tests for the flexible base enum."""

import pytest

from forage.core.enum import SelectorSource, SettingCategory, ValueType, supported_sources
from forage.registry.plugins import ProviderKind


pytestmark = [pytest.mark.unit]


class TestFromString:
    """Lenient member lookup."""

    @pytest.mark.parametrize("raw", ["bean-name", "BEAN_NAME", "bean_name", "BeanName", " beanName "])
    def test_spellings(self, raw: str):
        assert ValueType.from_string(raw) is ValueType.BEAN_NAME

    def test_constructor_falls_back_to_from_string(self):
        assert SelectorSource("HEADER") is SelectorSource.HEADER

    def test_unknown_value(self):
        with pytest.raises(ValueError, match="not a valid ValueType"):
            ValueType.from_string("matrix")

    def test_is_member(self):
        assert SettingCategory.is_member("Security")
        assert not SettingCategory.is_member("hidden")


class TestMembers:
    """Member helpers."""

    def test_str_is_value(self):
        assert str(ValueType.BEAN_NAME) == "bean-name"

    def test_only_passwords_are_secret(self):
        assert ValueType.PASSWORD.is_secret
        assert not any(t.is_secret for t in ValueType if t is not ValueType.PASSWORD)

    def test_supported_sources(self):
        assert supported_sources() == ("route", "header", "property", "variable")

    def test_title(self):
        assert ProviderKind.CHAT_MODEL.as_title == "Chat Model"


class TestAddMember:
    """Runtime extension for new plugin kinds."""

    def test_resolve_adds_unknown_kind(self):
        kind = ProviderKind.resolve("forage_test_embedding")

        assert kind.value == "forage_test_embedding"
        assert kind.name == "FORAGE_TEST_EMBEDDING"
        assert kind.entry_point_group == "forage.plugins.forage_test_embedding"
        assert ProviderKind.resolve("forage_test_embedding") is kind

    def test_resolve_known_kind(self):
        assert ProviderKind.resolve("chat-model") is ProviderKind.CHAT_MODEL
