"""In-process test executor.

Runs the suite inside the current interpreter. Loading a variant registers it
through the import hooks and re-imports the test module, so the tests bind to
the freshly executed variant. Tests are collected the simple way: module-level
``test*`` functions and ``Test*`` classes (plain classes and
``unittest.TestCase`` subclasses) with ``test*`` methods. Tests that need
pytest fixtures must use the pytest executor instead.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass
import importlib
import inspect
import logging
import sys
from typing import TYPE_CHECKING, Any, Self
import unittest

from pytest_mender.errors import OracleExecutionError
from pytest_mender.execution.import_hooks import evict_modules, register_import_hooks, unregister_import_hooks
from pytest_mender.execution.protocol import RunOutcome


if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    import types


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadedProgram:
    """Handle for a variant installed in this interpreter.

    Attributes:
        test_module: The test module imported against the variant.
        error: Exception raised while loading, if the variant failed to import.
    """

    test_module: types.ModuleType | None
    error: BaseException | None = None


class InProcessExecutor:
    """Executor that loads variants into the running interpreter.

    Only one variant is live at a time: every ``load`` replaces the import
    hook and drops both the module under repair and the test module from
    sys.modules before re-importing.
    """

    def __init__(
        self,
        module_name: str,
        test_module: str,
        search_paths: Sequence[str] = (),
        origin: str | None = None,
    ) -> None:
        """Initialize the executor.

        Args:
            module_name: Import name of the module under repair.
            test_module: Import name of the test module.
            search_paths: Directories to put on sys.path while the executor is open.
            origin: Path of the module file, exposed as ``__file__`` to variants.
        """
        self._module_name = module_name
        self._test_module = test_module
        self._search_paths = [p for p in search_paths if p not in sys.path]
        self._origin = origin
        self._test_ids: list[str] | None = None
        sys.path[:0] = self._search_paths

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Drop the installed variant and restore sys.path."""
        unregister_import_hooks()
        evict_modules((self._module_name, self._test_module))
        for path in self._search_paths:
            if path in sys.path:
                sys.path.remove(path)
        self._search_paths = []

    def test_ids(self) -> list[str]:
        """Return the tests of the test module, in definition order.

        Raises:
            OracleExecutionError: If the test module cannot be imported.
        """
        if self._test_ids is None:
            evict_modules((self._module_name, self._test_module))
            try:
                module = importlib.import_module(self._test_module)
            except Exception as exc:  # noqa: BLE001
                raise OracleExecutionError(f'cannot import test module {self._test_module}: {exc!r}') from exc
            self._test_ids = [test_id for test_id, _ in self._collect(module)]
        return list(self._test_ids)

    def load(self, source: str) -> LoadedProgram:
        """Install program text and re-import the test module against it.

        Variants that do not parse or fail to import are returned as a handle
        carrying the error; running a test against it raises
        OracleExecutionError.
        """
        evict_modules((self._module_name, self._test_module))
        try:
            tree = ast.parse(source, filename=self._origin or self._module_name)
            origins = {self._module_name: self._origin} if self._origin else None
            register_import_hooks({self._module_name: tree}, origins)
            importlib.invalidate_caches()
            module = importlib.import_module(self._test_module)
        except Exception as exc:  # noqa: BLE001
            logger.debug('Variant of %s failed to import: %r', self._module_name, exc)
            return LoadedProgram(test_module=None, error=exc)
        return LoadedProgram(test_module=module)

    def run(self, handle: object, test_id: str) -> RunOutcome:
        """Run one test against a loaded variant.

        Raises:
            OracleExecutionError: If the variant failed to import or the test
                cannot be found or called.
        """
        if not isinstance(handle, LoadedProgram):
            raise OracleExecutionError(f'not a handle from this executor: {handle!r}', test_id)
        if handle.test_module is None:
            raise OracleExecutionError(f'variant failed to load: {handle.error!r}', test_id)

        tests = dict(self._collect(handle.test_module))
        if test_id not in tests:
            raise OracleExecutionError('no such test', test_id)
        return tests[test_id]()

    def _collect(self, module: types.ModuleType) -> list[tuple[str, Callable[[], RunOutcome]]]:
        tests: list[tuple[str, Callable[[], RunOutcome]]] = []
        for name, value in vars(module).items():
            if name.startswith('test') and inspect.isfunction(value):
                tests.append((f'{self._test_module}::{name}', _function_runner(value)))
            elif name.startswith('Test') and inspect.isclass(value):
                for method in _test_method_names(value):
                    tests.append((f'{self._test_module}::{name}::{method}', _method_runner(value, method)))
        return tests


def _test_method_names(cls: type) -> list[str]:
    names: list[str] = []
    for klass in reversed(cls.__mro__):
        for name, value in vars(klass).items():
            if name.startswith('test') and callable(value) and name not in names:
                names.append(name)
    return names


def _function_runner(function: Callable[..., Any]) -> Callable[[], RunOutcome]:
    def run() -> RunOutcome:
        if inspect.signature(function).parameters:
            raise OracleExecutionError('test needs fixtures; use the pytest executor', function.__name__)
        return _outcome_of(function)

    return run


def _method_runner(cls: type, method: str) -> Callable[[], RunOutcome]:
    def run() -> RunOutcome:
        if issubclass(cls, unittest.TestCase):
            return _run_unittest(cls, method)
        try:
            instance = cls()
        except TypeError as exc:
            raise OracleExecutionError(f'cannot instantiate {cls.__name__}: {exc}', method) from exc
        bound = getattr(instance, method)
        outcome = _outcome_of(lambda: _call_hook(instance, 'setup_method', bound))
        if outcome is RunOutcome.PASSED:
            outcome = _outcome_of(bound)
        teardown = _outcome_of(lambda: _call_hook(instance, 'teardown_method', bound))
        return teardown if outcome is RunOutcome.PASSED else outcome

    return run


def _call_hook(instance: object, hook_name: str, method: Callable[..., Any]) -> None:
    hook = getattr(instance, hook_name, None)
    if hook is None:
        return
    if inspect.signature(hook).parameters:
        hook(method)
    else:
        hook()


def _outcome_of(test: Callable[[], Any]) -> RunOutcome:
    try:
        test()
    except AssertionError:
        return RunOutcome.FAILED
    except Exception:  # noqa: BLE001
        return RunOutcome.ERROR
    return RunOutcome.PASSED


def _run_unittest(cls: type[unittest.TestCase], method: str) -> RunOutcome:
    result = unittest.TestResult()
    cls(method).run(result)
    if result.errors:
        return RunOutcome.ERROR
    if result.failures or result.unexpectedSuccesses:
        return RunOutcome.FAILED
    return RunOutcome.PASSED
