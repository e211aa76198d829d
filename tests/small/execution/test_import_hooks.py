"""Tests for the import hooks that install program variants.

These tests verify that VariantFinder and VariantLoader intercept imports of
the module under repair and execute the variant instead of the file on disk.
"""

from __future__ import annotations

import ast
from importlib.abc import Loader, MetaPathFinder
from importlib.machinery import ModuleSpec
import importlib
import sys
import types
from typing import TYPE_CHECKING

import pytest

from pytest_mender.execution.import_hooks import (
    VariantFinder,
    VariantLoader,
    evict_modules,
    register_import_hooks,
    unregister_import_hooks,
)


if TYPE_CHECKING:
    from collections.abc import Generator


MODULE_NAME = '_mender_test_module'


@pytest.fixture
def clean_meta_path() -> Generator[None, None, None]:
    """Ensure sys.meta_path is cleaned up after tests."""
    original_meta_path = sys.meta_path.copy()
    yield
    sys.meta_path[:] = original_meta_path


@pytest.fixture
def clean_modules() -> Generator[None, None, None]:
    """Ensure test modules are removed from sys.modules."""
    yield
    sys.modules.pop(MODULE_NAME, None)


class TestVariantFinder:
    """Tests for VariantFinder - the import hook finder."""

    def test_implements_meta_path_finder_protocol(self):
        assert isinstance(VariantFinder(variants={}), MetaPathFinder)

    def test_find_spec_returns_none_for_other_modules(self):
        finder = VariantFinder(variants={})

        assert finder.find_spec('some_module', None) is None

    def test_find_spec_returns_module_spec_for_variant_module(self):
        finder = VariantFinder(variants={'people': ast.parse('x = 1')}, origins={'people': '/src/people.py'})

        result = finder.find_spec('people', None)

        assert isinstance(result, ModuleSpec)
        assert result.name == 'people'
        assert result.origin == '/src/people.py'

    def test_find_spec_ignores_submodules_of_variant_module(self):
        finder = VariantFinder(variants={'people': ast.parse('x = 1')})

        assert finder.find_spec('people.models', None) is None


class TestVariantLoader:
    """Tests for VariantLoader - the import hook loader."""

    def test_implements_loader_protocol(self):
        assert isinstance(VariantLoader(ast.parse('x = 1'), module_name='people'), Loader)

    def test_create_module_returns_none_to_use_default(self):
        loader = VariantLoader(ast.parse('x = 1'), module_name='people')

        assert loader.create_module(ModuleSpec('people', loader)) is None

    def test_exec_module_executes_variant_ast(self):
        loader = VariantLoader(ast.parse('result = 6 * 7'), module_name='people')
        module = types.ModuleType('people')

        loader.exec_module(module)

        assert module.result == 42  # type: ignore[attr-defined]

    def test_exec_module_sets_file_to_origin(self):
        """Variants see the original file path as __file__."""
        loader = VariantLoader(ast.parse('where = __file__'), module_name='people', origin='/src/people.py')
        module = types.ModuleType('people')

        loader.exec_module(module)

        assert module.where == '/src/people.py'  # type: ignore[attr-defined]


class TestImportHookRegistration:
    """Tests for registering and unregistering import hooks."""

    def test_register_hooks_adds_finder_to_meta_path(self, clean_meta_path):  # noqa: ARG002
        register_import_hooks({})

        assert isinstance(sys.meta_path[0], VariantFinder)

    def test_register_hooks_replaces_previous_finder(self, clean_meta_path):  # noqa: ARG002
        register_import_hooks({})
        register_import_hooks({})

        assert sum(isinstance(f, VariantFinder) for f in sys.meta_path) == 1

    def test_unregister_hooks_removes_finder_from_meta_path(self, clean_meta_path):  # noqa: ARG002
        register_import_hooks({})
        unregister_import_hooks()

        assert not any(isinstance(f, VariantFinder) for f in sys.meta_path)

    def test_unregister_hooks_is_safe_when_not_registered(self, clean_meta_path):  # noqa: ARG002
        unregister_import_hooks()


class TestImportHookIntegration:
    """Integration tests for import hooks with actual module imports."""

    def test_import_hook_intercepts_variant_module_import(
        self,
        clean_meta_path,  # noqa: ARG002
        clean_modules,  # noqa: ARG002
    ):
        register_import_hooks({MODULE_NAME: ast.parse('value = "variant"')})
        try:
            module = importlib.import_module(MODULE_NAME)

            assert module.value == 'variant'
        finally:
            unregister_import_hooks()

    def test_evicted_module_is_reimported_from_new_variant(
        self,
        clean_meta_path,  # noqa: ARG002
        clean_modules,  # noqa: ARG002
    ):
        register_import_hooks({MODULE_NAME: ast.parse('value = 1')})
        first = importlib.import_module(MODULE_NAME)

        register_import_hooks({MODULE_NAME: ast.parse('value = 2')})
        evict_modules([MODULE_NAME])
        second = importlib.import_module(MODULE_NAME)
        unregister_import_hooks()

        assert first.value == 1
        assert second.value == 2

    def test_evict_modules_ignores_unknown_names(self):
        evict_modules(['_mender_never_imported'])
