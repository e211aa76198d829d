"""Import hooks that install program variants.

This module provides the import hooks (sys.meta_path) that intercept the
import of the module under repair and execute a variant's AST instead of the
file on disk:

1. VariantFinder is registered on sys.meta_path
2. When Python imports a module, VariantFinder.find_spec() is called
3. If a variant is registered for the module, return a ModuleSpec with VariantLoader
4. VariantLoader.exec_module() compiles and executes the variant AST

Example:
    >>> import ast
    >>> import importlib
    >>> from pytest_mender.execution.import_hooks import (
    ...     register_import_hooks,
    ...     unregister_import_hooks,
    ... )
    >>> register_import_hooks({'_mender_doc_mod': ast.parse('answer = 42')})
    >>> importlib.import_module('_mender_doc_mod').answer
    42
    >>> unregister_import_hooks()
"""

from __future__ import annotations

from importlib.abc import Loader, MetaPathFinder
from importlib.machinery import ModuleSpec
import sys
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    import ast
    from collections.abc import Iterable, Sequence
    import types


class VariantLoader(Loader):
    """Loader that executes a variant AST in place of the module source."""

    def __init__(self, tree: ast.Module, module_name: str, origin: str | None = None) -> None:
        """Initialize the loader with a variant AST.

        Args:
            tree: The variant AST to execute.
            module_name: The name of the module being loaded.
            origin: Path of the original module file, if any.
        """
        self._tree = tree
        self._module_name = module_name
        self._origin = origin

    def create_module(self, spec: ModuleSpec) -> types.ModuleType | None:  # noqa: ARG002
        """Return None to use default module creation semantics."""
        return None

    def exec_module(self, module: types.ModuleType) -> None:
        """Execute the variant AST in the module's namespace.

        Args:
            module: The module to execute code in.
        """
        if self._origin is not None:
            module.__file__ = self._origin

        # The tree comes from our own rewriting of the program under repair.
        code = compile(self._tree, self._origin or self._module_name, 'exec')
        exec(code, module.__dict__)  # noqa: S102


class VariantFinder(MetaPathFinder):
    """Finder that intercepts imports of modules with a registered variant."""

    def __init__(self, variants: dict[str, ast.Module], origins: dict[str, str] | None = None) -> None:
        """Initialize the finder.

        Args:
            variants: Mapping of module names to their variant ASTs.
            origins: Mapping of module names to original file paths.
        """
        self._variants = variants
        self._origins = origins or {}

    def find_spec(
        self,
        fullname: str,
        path: Sequence[str] | None,  # noqa: ARG002
        target: types.ModuleType | None = None,  # noqa: ARG002
    ) -> ModuleSpec | None:
        """Return a spec with VariantLoader for modules with a variant, None otherwise."""
        if fullname not in self._variants:
            return None

        origin = self._origins.get(fullname)
        loader = VariantLoader(self._variants[fullname], fullname, origin)
        return ModuleSpec(fullname, loader, origin=origin)


_registered_finder: VariantFinder | None = None


def register_import_hooks(variants: dict[str, ast.Module], origins: dict[str, str] | None = None) -> None:
    """Register import hooks for program variants.

    Any previously registered variants are dropped first, so each call fully
    supersedes the last one. Modules that were already imported are not
    touched; use ``evict_modules`` to force a re-import.

    Args:
        variants: Mapping of module names to their variant ASTs.
        origins: Mapping of module names to original file paths.
    """
    global _registered_finder  # noqa: PLW0603
    unregister_import_hooks()

    _registered_finder = VariantFinder(variants, origins)
    sys.meta_path.insert(0, _registered_finder)


def unregister_import_hooks() -> None:
    """Unregister import hooks from sys.meta_path.

    Safe to call even if no hooks are registered.
    """
    global _registered_finder  # noqa: PLW0603

    if _registered_finder is not None and _registered_finder in sys.meta_path:
        sys.meta_path.remove(_registered_finder)

    _registered_finder = None
    sys.meta_path[:] = [f for f in sys.meta_path if not isinstance(f, VariantFinder)]


def evict_modules(names: Iterable[str]) -> None:
    """Forget imported modules so the next import executes them again."""
    for name in names:
        sys.modules.pop(name, None)
