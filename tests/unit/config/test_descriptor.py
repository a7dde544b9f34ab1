# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Tests for setting descriptors and their naming rules."""

import pytest

from forage.config.descriptor import SettingDescriptor, default_display_name, qualify, to_env_name
from forage.core.enum import SettingCategory, ValueType


pytestmark = [pytest.mark.unit]


@pytest.fixture
def api_key() -> SettingDescriptor:
    return SettingDescriptor.of("forage-anthropic", "forage.anthropic.api.key", "API key")


@pytest.fixture
def jdbc_url() -> SettingDescriptor:
    return SettingDescriptor.of("forage-jdbc", "forage.jdbc.url")


class TestNaming:
    """Property, environment and system property names."""

    def test_env_name_of_default_descriptor(self, api_key: SettingDescriptor):
        assert api_key.env_name == "FORAGE_ANTHROPIC_API_KEY"

    def test_system_property_name_is_full_name(self, api_key: SettingDescriptor):
        assert api_key.system_property_name == "forage.anthropic.api.key"

    def test_named_descriptor_inserts_prefix_after_namespace(self, jdbc_url: SettingDescriptor):
        named = jdbc_url.as_named("ds1")

        assert named.property_name == "forage.ds1.jdbc.url"
        assert named.env_name == "FORAGE_DS1_JDBC_URL"
        assert named.name == "forage.jdbc.url"
        assert named.prefix == "ds1"

    def test_name_outside_namespace_is_prefixed(self):
        descriptor = SettingDescriptor.of("custom", "model.name")

        assert descriptor.as_named("test").property_name == "test.model.name"

    def test_dashes_become_underscores(self):
        assert to_env_name("forage.my-agent.provider.class") == "FORAGE_MY_AGENT_PROVIDER_CLASS"

    def test_qualify_without_prefix(self):
        assert qualify("forage.jdbc.url", None) == "forage.jdbc.url"


class TestAsNamed:
    """Deriving descriptors for named instances."""

    def test_none_prefix_returns_same_descriptor(self, jdbc_url: SettingDescriptor):
        assert jdbc_url.as_named(None) is jdbc_url

    def test_as_named_is_idempotent(self, jdbc_url: SettingDescriptor):
        once = jdbc_url.as_named("ds1")

        assert once.as_named("ds1") == once
        assert once.as_named("ds1").property_name == "forage.ds1.jdbc.url"

    def test_renaming_replaces_prefix(self, jdbc_url: SettingDescriptor):
        renamed = jdbc_url.as_named("ds1").as_named("ds2")

        assert renamed.property_name == "forage.ds2.jdbc.url"

    def test_different_prefixes_give_different_descriptors(self, jdbc_url: SettingDescriptor):
        names = {jdbc_url.as_named(p).property_name for p in ("a", "b", "c")}

        assert len(names) == 3
        assert jdbc_url.as_named("a") != jdbc_url.as_named("b")

    def test_named_clone_keeps_metadata(self):
        descriptor = SettingDescriptor.of(
            "forage-jdbc",
            "forage.jdbc.password",
            "Database password",
            value_type="password",
            required=True,
            category=SettingCategory.SECURITY,
        )

        named = descriptor.as_named("ds1")

        assert named.value_type is ValueType.PASSWORD
        assert named.required
        assert named.category is SettingCategory.SECURITY
        assert named.description == "Database password"


class TestIdentity:
    """Equality and hashing."""

    def test_equal_by_owner_and_full_name(self):
        first = SettingDescriptor.of("forage-jdbc", "forage.jdbc.url", "one")
        second = SettingDescriptor.of("forage-jdbc", "forage.jdbc.url", "two")

        assert first == second
        assert hash(first) == hash(second)

    def test_different_owner_is_different(self):
        first = SettingDescriptor.of("forage-jdbc", "forage.jdbc.url")
        second = SettingDescriptor.of("forage-other", "forage.jdbc.url")

        assert first != second

    def test_usable_as_dict_key(self, jdbc_url: SettingDescriptor):
        values = {jdbc_url.as_named("ds1"): "x"}

        assert values[SettingDescriptor.of("forage-jdbc", "forage.jdbc.url").as_named("ds1")] == "x"

    def test_matches_full_name_only(self, jdbc_url: SettingDescriptor):
        named = jdbc_url.as_named("ds1")

        assert named.matches("forage.ds1.jdbc.url")
        assert not named.matches("forage.jdbc.url")


class TestMetadata:
    """Defaults and metadata conversions."""

    def test_boolean_default_is_stored_as_string(self):
        descriptor = SettingDescriptor.of("f", "forage.flag", default_value=False)  # type: ignore[arg-type]

        assert descriptor.default_value == "false"

    def test_value_type_from_loose_string(self):
        descriptor = SettingDescriptor.of("f", "forage.bean", value_type="BEAN_NAME")

        assert descriptor.value_type is ValueType.BEAN_NAME

    def test_display_name_defaults_to_last_segments(self):
        assert default_display_name("forage.jdbc.pool.max.size") == "Max Size"

    def test_descriptor_is_immutable(self, jdbc_url: SettingDescriptor):
        with pytest.raises(Exception):  # noqa: B017
            jdbc_url.prefix = "x"  # type: ignore[misc]
