"""Exception hierarchy for pytest-mender.

Terminal search outcomes (nothing to fix, no fix found) are not exceptions;
they are reported through RepairStatus. The exceptions below cover malformed
input, invalid configuration and failures of the test execution environment.
"""

from __future__ import annotations


class MenderError(Exception):
    """Base class for all pytest-mender errors."""


class ParseError(MenderError):
    """The program source could not be parsed.

    Parse errors are fatal: no search is attempted.

    Attributes:
        filename: Name of the file that failed to parse.
        line_number: Line of the syntax error, if known.
    """

    def __init__(self, filename: str, message: str, line_number: int | None = None) -> None:
        self.filename = filename
        self.line_number = line_number
        location = filename if line_number is None else f'{filename}:{line_number}'
        super().__init__(f'{location}: {message}')


class ConfigError(MenderError):
    """A configuration value is invalid."""


class OracleExecutionError(MenderError):
    """Running a test errored instead of producing a pass/fail verdict.

    The search loop treats the affected test as failing for the variant
    being judged; it is never skipped.

    Attributes:
        test_id: Identifier of the test that could not be run, if known.
    """

    def __init__(self, message: str, test_id: str | None = None) -> None:
        self.test_id = test_id
        super().__init__(message if test_id is None else f'{test_id}: {message}')


class IncompleteAssignmentError(MenderError, KeyError):
    """An assignment has no choice for a hotspot that must be materialised."""

    def __init__(self, index: int) -> None:
        self.index = index
        super().__init__(f'No alternative chosen for hotspot #{index}')

    def __str__(self) -> str:
        return str(self.args[0])
