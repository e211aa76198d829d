"""Protocol definition for test executors.

An executor is the search loop's window onto the test suite: it lists the
tests, installs a program variant as the active code, and reports whether a
single test passes under the installed variant.
"""

from __future__ import annotations

from enum import Enum
from typing import (
    Protocol,
    runtime_checkable,
)


class RunOutcome(Enum):
    """Outcome of running one test.

    Attributes:
        PASSED: The test passed.
        FAILED: An assertion in the test failed.
        ERROR: The test raised something other than an assertion error.
    """

    PASSED = 'passed'
    FAILED = 'failed'
    ERROR = 'error'


@runtime_checkable
class SuiteExecutor(Protocol):
    """Protocol for all test executors.

    Loading a variant must fully supersede the previously loaded one: at most
    one variant is live at a time and no state carries over between loads.
    """

    def test_ids(self) -> list[str]:
        """Return the identifiers of every test in the suite, in suite order."""
        ...

    def load(self, source: str) -> object:
        """Install program text as the active program.

        Args:
            source: Full source text of the program variant.

        Returns:
            Opaque handle to pass to ``run``.
        """
        ...

    def run(self, handle: object, test_id: str) -> RunOutcome:
        """Run one test against a loaded program.

        Args:
            handle: Handle returned by ``load``.
            test_id: Identifier from ``test_ids``.

        Returns:
            The outcome of the test.

        Raises:
            OracleExecutionError: If the test could not be run at all.
        """
        ...
