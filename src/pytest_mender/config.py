"""Configuration loading for pytest-mender.

This module reads configuration from pyproject.toml [tool.pytest-mender]
section and provides sensible defaults when configuration is absent.
"""

from __future__ import annotations

from dataclasses import dataclass
import tomllib
from typing import TYPE_CHECKING

from pytest_mender.errors import ConfigError


if TYPE_CHECKING:
    from pathlib import Path


EXECUTORS: frozenset[str] = frozenset(('inprocess', 'pytest'))
REPORTS: frozenset[str] = frozenset(('console', 'json'))


@dataclass(frozen=True)
class MenderConfig:
    """Configuration for pytest-mender.

    Attributes:
        kinds: Hotspot kind names to search. None means every kind.
        executor: How tests are run: 'inprocess' or 'pytest'.
        timeout: Timeout in seconds for one test run (pytest executor only).
        max_variants: Stop after judging this many variants. None means no limit.
        report: Report format: 'console' or 'json'.
    """

    kinds: list[str] | None = None
    executor: str = 'inprocess'
    timeout: int = 30
    max_variants: int | None = None
    report: str = 'console'

    def __post_init__(self) -> None:
        """Validate configuration values.

        Raises:
            ConfigError: If any configuration value is invalid.
        """
        if self.kinds is not None and (
            not isinstance(self.kinds, list) or not all(isinstance(kind, str) for kind in self.kinds)
        ):
            msg = f'kinds must be a list of kind names, got {self.kinds!r}'
            raise ConfigError(msg)

        if not _is_int(self.timeout):
            msg = f'timeout must be an integer, got {self.timeout!r}'
            raise ConfigError(msg)

        if self.max_variants is not None and not _is_int(self.max_variants):
            msg = f'max_variants must be an integer, got {self.max_variants!r}'
            raise ConfigError(msg)

        if not isinstance(self.executor, str) or self.executor not in EXECUTORS:
            msg = f'Invalid executor: {self.executor!r}. Valid executors are: {sorted(EXECUTORS)}'
            raise ConfigError(msg)

        if not isinstance(self.report, str) or self.report not in REPORTS:
            msg = f'Invalid report format: {self.report!r}. Valid formats are: {sorted(REPORTS)}'
            raise ConfigError(msg)

        if self.timeout <= 0:
            msg = f'timeout must be positive, got {self.timeout}'
            raise ConfigError(msg)

        if self.max_variants is not None and self.max_variants <= 0:
            msg = f'max_variants must be positive, got {self.max_variants}'
            raise ConfigError(msg)


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def load_config(rootdir: Path) -> MenderConfig:
    """Load configuration from pyproject.toml.

    Reads the [tool.pytest-mender] section from pyproject.toml in the given
    directory. Returns default configuration if the file or section does not
    exist.

    Args:
        rootdir: Directory containing pyproject.toml.

    Returns:
        MenderConfig with values from pyproject.toml or defaults.

    Raises:
        ConfigError: If a configured value is invalid.
    """
    pyproject_path = rootdir / 'pyproject.toml'

    if not pyproject_path.exists():
        return MenderConfig()

    with pyproject_path.open('rb') as f:
        data = tomllib.load(f)

    tool_config = data.get('tool', {}).get('pytest-mender', {})
    defaults = MenderConfig()

    return MenderConfig(
        kinds=tool_config.get('kinds'),
        executor=tool_config.get('executor', defaults.executor),
        timeout=tool_config.get('timeout', defaults.timeout),
        max_variants=tool_config.get('max_variants'),
        report=tool_config.get('report', defaults.report),
    )


def merge_configs(
    file_config: MenderConfig,
    cli_kinds: str | None = None,
    cli_executor: str | None = None,
    cli_timeout: int | None = None,
    cli_max_variants: int | None = None,
    cli_report: str | None = None,
) -> MenderConfig:
    """Merge CLI arguments with file configuration.

    CLI arguments take precedence over pyproject.toml configuration.
    Empty strings are treated as not provided.

    Args:
        file_config: Configuration loaded from pyproject.toml.
        cli_kinds: Comma-separated kind names from CLI (--kinds).
        cli_executor: Executor name from CLI (--executor).
        cli_timeout: Timeout from CLI (--timeout).
        cli_max_variants: Variant budget from CLI (--max-variants).
        cli_report: Report format from CLI (--report).

    Returns:
        MenderConfig with CLI values overriding file config where provided.
    """
    kinds: list[str] | None = file_config.kinds
    if cli_kinds and cli_kinds.strip():
        kinds = [kind.strip() for kind in cli_kinds.split(',')]

    return MenderConfig(
        kinds=kinds,
        executor=cli_executor.strip() if cli_executor and cli_executor.strip() else file_config.executor,
        timeout=cli_timeout if cli_timeout is not None else file_config.timeout,
        max_variants=cli_max_variants if cli_max_variants is not None else file_config.max_variants,
        report=cli_report.strip() if cli_report and cli_report.strip() else file_config.report,
    )
