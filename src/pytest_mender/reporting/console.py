"""Console reporter for repair results.

Produces human-readable output for terminal display: the outcome, the tests
that were failing, the mutations applied and the diff of the fix.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, TextIO

from pytest_mender.reporting.diff import DiffReporter
from pytest_mender.reporting.results import RepairStatus


if TYPE_CHECKING:
    from pytest_mender.reporting.results import RepairResult


class ConsoleReporter:
    """Reporter that writes repair results to the console.

    Produces output in the following format:

        =================== pytest-mender repair report ====================

        Failing tests: 1
          test_people.py::test_retired

        Generated fix after 5 of 8 variants:
          people.py:12      <= to >          (comparison)

        --- original file
        +++ fixed file
        @@ -9,7 +9,7 @@
        ...
        =====================================================================

    Attributes:
        output: The file-like object to write to.
    """

    BORDER_CHAR = '='
    BORDER_WIDTH = 70

    def __init__(self, output: TextIO | None = None, diff_reporter: DiffReporter | None = None) -> None:
        """Initialize the console reporter.

        Args:
            output: File-like object to write to. Defaults to sys.stdout.
            diff_reporter: Renders the fix. Defaults to a 3-line context diff.
        """
        self.output = output or sys.stdout
        self.diff_reporter = diff_reporter or DiffReporter()

    def write_report(self, result: RepairResult) -> None:
        """Write the repair report to the output.

        Args:
            result: The outcome of the repair search.
        """
        self._write_header()
        self._write_blank_line()

        if result.status == RepairStatus.NO_FAILURES:
            self._write_line('All tests pass. Nothing to fix.')
        else:
            self._write_failing_tests(result)
            self._write_blank_line()
            if result.status == RepairStatus.FIXED:
                self._write_fix(result)
            else:
                self._write_exhausted(result)

        self._write_footer()

    def _write_header(self) -> None:
        title = ' pytest-mender repair report '
        border_len = (self.BORDER_WIDTH - len(title)) // 2
        self._write_line(f'{self.BORDER_CHAR * border_len}{title}{self.BORDER_CHAR * border_len}')

    def _write_footer(self) -> None:
        self._write_line(self.BORDER_CHAR * self.BORDER_WIDTH)

    def _write_failing_tests(self, result: RepairResult) -> None:
        self._write_line(f'Failing tests: {len(result.failing_tests)}')
        for test_id in result.failing_tests:
            self._write_line(f'  {test_id}')

    def _write_fix(self, result: RepairResult) -> None:
        self._write_line(
            f'Generated fix for failing tests after {result.variants_tried} of {result.search_space} variants:'
        )
        for change in result.changes:
            location = f'{change.file_path}:{change.line_number}'
            self._write_line(f'  {location:<24} {change.description:<16} ({change.kind})')
        self._write_blank_line()
        self.output.write(self.diff_reporter.render(result.original_source, result.fixed_source or ''))

    def _write_exhausted(self, result: RepairResult) -> None:
        self._write_line('No fixes found')
        if result.budget_exhausted:
            self._write_line(f'Stopped after {result.variants_tried} of {result.search_space} variants (max_variants).')
        else:
            self._write_line(f'Tried all {result.variants_tried} variants.')

    def _write_blank_line(self) -> None:
        self.output.write('\n')

    def _write_line(self, text: str) -> None:
        self.output.write(text + '\n')
