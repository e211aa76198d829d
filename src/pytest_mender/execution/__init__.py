"""Test execution for pytest-mender.

This package provides the executors the search loop judges variants with.
A variant is installed as the active program through import hooks, either
in the running interpreter (InProcessExecutor) or in a pytest subprocess per
test run (PytestExecutor, via the pytest-mender plugin).
"""

from __future__ import annotations

from pytest_mender.execution.import_hooks import register_import_hooks, unregister_import_hooks
from pytest_mender.execution.inprocess import InProcessExecutor
from pytest_mender.execution.protocol import RunOutcome, SuiteExecutor
from pytest_mender.execution.pytest_runner import SOURCES_FILE_ENV_VAR, PytestExecutor


__all__ = [
    'SOURCES_FILE_ENV_VAR',
    'InProcessExecutor',
    'PytestExecutor',
    'RunOutcome',
    'SuiteExecutor',
    'register_import_hooks',
    'unregister_import_hooks',
]
