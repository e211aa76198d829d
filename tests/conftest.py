"""Shared pytest fixtures for pytest-mender tests."""

from __future__ import annotations

import ast
from typing import TYPE_CHECKING, Any

import pytest

from pytest_mender.execution.protocol import RunOutcome
from pytest_mender.hotspots import detect
from pytest_mender.source import parse_program


if TYPE_CHECKING:
    from collections.abc import Callable

    from pytest_mender.hotspots import Detection
    from pytest_mender.source import Program


class NamespaceExecutor:
    """Executor that exec()s each variant into a dict and runs tests over it.

    Records every load and every test run so tests can check what the search
    loop asked for and in which order.
    """

    def __init__(self, tests: dict[str, Callable[[dict[str, Any]], object]]) -> None:
        self.tests = tests
        self.loaded: list[str] = []
        self.runs: list[tuple[int, str]] = []

    def test_ids(self) -> list[str]:
        return list(self.tests)

    def load(self, source: str) -> dict[str, Any]:
        self.loaded.append(source)
        namespace: dict[str, Any] = {}
        exec(compile(source, '<variant>', 'exec'), namespace)  # noqa: S102
        return namespace

    def run(self, handle: object, test_id: str) -> RunOutcome:
        assert isinstance(handle, dict)
        self.runs.append((len(self.loaded), test_id))
        try:
            self.tests[test_id](handle)
        except AssertionError:
            return RunOutcome.FAILED
        except Exception:  # noqa: BLE001
            return RunOutcome.ERROR
        return RunOutcome.PASSED


@pytest.fixture
def namespace_executor() -> type[NamespaceExecutor]:
    """Return the NamespaceExecutor class for building fake suites."""
    return NamespaceExecutor


@pytest.fixture
def program() -> Callable[[str], Program]:
    """Factory fixture parsing source text into a Program."""

    def _program(source: str, filename: str = 'target.py') -> Program:
        return parse_program(source, filename)

    return _program


@pytest.fixture
def detection() -> Callable[[str], Detection]:
    """Factory fixture running hotspot detection over source text."""

    def _detection(source: str) -> Detection:
        return detect(ast.parse(source))

    return _detection
