# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Tests for lazy import functionality."""

import threading

from types import MappingProxyType

import pytest

from forage.core.lazy_import import LazyImport, create_lazy_getattr, lazy_import


pytestmark = [pytest.mark.unit]


class TestLazyImportBasics:
    """Test basic LazyImport functionality."""

    def test_lazy_import_function(self):
        """Test lazy importing a specific function."""
        join_lazy = lazy_import("os.path", "join")

        assert not join_lazy.is_resolved()
        assert "not resolved" in repr(join_lazy)

        assert join_lazy("a", "b", "c") == "a/b/c"
        assert join_lazy.is_resolved()
        assert "(resolved)" in repr(join_lazy)

    def test_lazy_import_class(self):
        """Test lazy importing and instantiating a class."""
        path_cls = lazy_import("pathlib", "Path")

        p = path_cls("/tmp")

        assert path_cls.is_resolved()
        assert str(p) == "/tmp"

    def test_attribute_access_resolves(self):
        """Test attribute access forwards to the resolved object."""
        decoder = lazy_import("json", "JSONDecoder")

        assert decoder.__name__ == "JSONDecoder"
        assert decoder.is_resolved()

    def test_nested_attributes(self):
        """Test resolving an attribute chain."""
        from collections.abc import Mapping

        lazy = lazy_import("collections", "abc", "Mapping")

        assert lazy.resolve() is Mapping


class TestFromPath:
    """Test building references from import paths."""

    def test_colon_path(self):
        """Test `module:attr` paths."""
        lazy = LazyImport.from_path("json.decoder:JSONDecoder")

        assert lazy.path == "json.decoder:JSONDecoder"
        assert lazy.qualified_name == "json.decoder.JSONDecoder"
        assert not lazy.is_resolved()

    def test_dotted_path(self):
        """Test dotted `module.Attr` paths."""
        import string

        lazy = LazyImport.from_path("string.Template")

        assert lazy.path == "string:Template"
        assert lazy.resolve() is string.Template

    def test_bare_module(self):
        """Test a path with no attribute."""
        import json

        assert LazyImport.from_path("json").resolve() is json


class TestLazyImportErrors:
    """Test error handling in LazyImport."""

    def test_module_not_found(self):
        """Test ImportError for non-existent module."""
        with pytest.raises(ImportError, match="Cannot import module"):
            lazy_import("nonexistent_module_xyz").resolve()

    def test_attribute_not_found(self):
        """Test AttributeError for non-existent attribute."""
        with pytest.raises(AttributeError, match="has no attribute path 'missing'"):
            lazy_import("os", "missing").resolve()


class TestThreadSafety:
    """Test concurrent resolution."""

    def test_concurrent_resolution_yields_one_object(self):
        """Test all threads see the same resolved object."""
        lazy = lazy_import("decimal", "Decimal")
        results: list[object] = []
        barrier = threading.Barrier(10)

        def resolve() -> None:
            barrier.wait()
            results.append(lazy.resolve())

        threads = [threading.Thread(target=resolve) for _ in range(10)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(results) == 10
        assert all(r is results[0] for r in results)


def test_create_lazy_getattr():
    """Test package-level lazy attribute loading."""
    module_globals: dict[str, object] = {}
    getter = create_lazy_getattr(
        MappingProxyType({"JSONDecoder": ("json", "decoder")}), module_globals, "pkg"
    )

    from json.decoder import JSONDecoder

    assert getter("JSONDecoder") is JSONDecoder  # type: ignore[operator]
    assert module_globals["JSONDecoder"] is JSONDecoder
    with pytest.raises(AttributeError, match="has no attribute 'missing'"):
        getter("missing")  # type: ignore[operator]
