"""Subprocess test executor backed by pytest.

Each test runs in a fresh pytest subprocess, so no interpreter state carries
over between variants. The variant is handed to the pytest-mender plugin in
the subprocess through a JSON sources file named by the
PYTEST_MENDER_SOURCES_FILE environment variable; the plugin installs it with
the import hooks before collection.

Pytest exit codes map to outcomes as follows:
    0   -> passed
    1   -> failed (assertion failure or error inside the test)
    2+  -> the run itself broke (interrupted, internal error, usage error,
           nothing collected) and OracleExecutionError is raised
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
import shutil
import subprocess
import sys
import tempfile
from typing import TYPE_CHECKING, Self

from pytest_mender.errors import OracleExecutionError
from pytest_mender.execution.protocol import RunOutcome


if TYPE_CHECKING:
    from collections.abc import Sequence


logger = logging.getLogger(__name__)

SOURCES_FILE_ENV_VAR = 'PYTEST_MENDER_SOURCES_FILE'

PYTEST_OK = 0
PYTEST_TESTS_FAILED = 1


def write_sources_file(path: Path, module_name: str, source: str, origin: str | None = None) -> Path:
    """Write a sources file the plugin can install.

    Args:
        path: Where to write the JSON file.
        module_name: Import name of the module under repair.
        source: Variant source text.
        origin: Path of the original module file.

    Returns:
        The path written.
    """
    payload = {'modules': {module_name: {'source': source, 'origin': origin}}}
    path.write_text(json.dumps(payload), encoding='utf-8')
    return path


class PytestExecutor:
    """Executor that runs every test in its own pytest subprocess.

    Attributes:
        timeout: Timeout in seconds for a single test run.

    Example:
        >>> with PytestExecutor('people', ['tests/test_people.py'], rootdir='.') as executor:  # doctest: +SKIP
        ...     handle = executor.load(source)
        ...     executor.run(handle, 'tests/test_people.py::test_retired')
    """

    def __init__(
        self,
        module_name: str,
        test_paths: Sequence[str],
        rootdir: str,
        timeout: int = 30,
        origin: str | None = None,
        python: str | None = None,
    ) -> None:
        """Initialize the executor.

        Args:
            module_name: Import name of the module under repair.
            test_paths: Test files or directories to collect, relative to rootdir.
            rootdir: Directory pytest runs in.
            timeout: Timeout in seconds for one test run. Defaults to 30.
            origin: Path of the module file, exposed as ``__file__`` to variants.
            python: Interpreter to run pytest with. Defaults to the current one.
        """
        self._module_name = module_name
        self._test_paths = list(test_paths)
        self._rootdir = rootdir
        self._timeout = timeout
        self._origin = origin
        self._python = python or sys.executable
        self._workdir = Path(tempfile.mkdtemp(prefix='pytest-mender-'))
        self._loads = 0
        self._test_ids: list[str] | None = None

    @property
    def timeout(self) -> int:
        """Return the timeout in seconds."""
        return self._timeout

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
        """Remove the sources files written so far."""
        shutil.rmtree(self._workdir, ignore_errors=True)

    def test_ids(self) -> list[str]:
        """Collect node ids with ``pytest --collect-only``.

        Raises:
            OracleExecutionError: If collection fails.
        """
        if self._test_ids is None:
            result = self._pytest(['--collect-only', '-q', *self._test_paths], env=os.environ.copy())
            if result.returncode != PYTEST_OK:
                raise OracleExecutionError(f'collection failed with exit code {result.returncode}')
            self._test_ids = [line.strip() for line in result.stdout.splitlines() if '::' in line]
        return list(self._test_ids)

    def load(self, source: str) -> Path:
        """Write the variant to a new sources file and return its path."""
        self._loads += 1
        path = self._workdir / f'sources-{self._loads:05d}.json'
        return write_sources_file(path, self._module_name, source, self._origin)

    def run(self, handle: object, test_id: str) -> RunOutcome:
        """Run one test in a pytest subprocess with the variant installed.

        Raises:
            OracleExecutionError: On timeout or when pytest itself breaks.
        """
        if not isinstance(handle, Path):
            raise OracleExecutionError(f'not a handle from this executor: {handle!r}', test_id)

        env = os.environ.copy()
        env[SOURCES_FILE_ENV_VAR] = str(handle)
        try:
            result = self._pytest(['-q', test_id], env=env)
        except subprocess.TimeoutExpired as exc:
            raise OracleExecutionError(f'timed out after {self._timeout}s', test_id) from exc

        if result.returncode == PYTEST_OK:
            return RunOutcome.PASSED
        if result.returncode == PYTEST_TESTS_FAILED:
            return RunOutcome.FAILED
        logger.debug('pytest output for %s:\n%s%s', test_id, result.stdout, result.stderr)
        raise OracleExecutionError(f'pytest exited with code {result.returncode}', test_id)

    def _pytest(self, args: list[str], env: dict[str, str]) -> subprocess.CompletedProcess[str]:
        return subprocess.run(  # noqa: S603
            [self._python, '-m', 'pytest', '-p', 'no:cacheprovider', *args],
            cwd=self._rootdir,
            env=env,
            capture_output=True,
            text=True,
            timeout=self._timeout,
            check=False,
        )
