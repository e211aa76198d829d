"""Command-line entry point for pytest-mender.

Usage:
    pytest-mender SOURCE TESTS [options]

Exit codes:
    0   a fix was found, or the tests already pass
    1   no fix was found
    2   the source could not be parsed, the configuration is invalid or the
        test suite could not be collected
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys
from typing import TYPE_CHECKING

from pytest_mender import __version__
from pytest_mender.config import load_config, merge_configs
from pytest_mender.errors import ConfigError, OracleExecutionError, ParseError
from pytest_mender.execution import InProcessExecutor, PytestExecutor
from pytest_mender.reporting import ConsoleReporter, JsonReporter, RepairStatus
from pytest_mender.search import RepairSearch
from pytest_mender.source import read_program


if TYPE_CHECKING:
    from collections.abc import Sequence

    from pytest_mender.config import MenderConfig
    from pytest_mender.source import Program


logger = logging.getLogger('pytest_mender')

EXIT_OK = 0
EXIT_NO_FIX = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog='pytest-mender',
        description='Search small mutations of a module for one that makes its failing tests pass.',
    )
    parser.add_argument('source', type=Path, help='Python module to repair')
    parser.add_argument('tests', type=Path, help='test module (or directory, with --executor=pytest)')
    parser.add_argument('--module', default=None, help='import name of SOURCE (default: its file stem)')
    parser.add_argument('--kinds', default=None, help='comma-separated hotspot kinds to search')
    parser.add_argument('--executor', default=None, help='how tests are run: inprocess or pytest')
    parser.add_argument('--timeout', type=int, default=None, help='seconds per test run (pytest executor)')
    parser.add_argument('--max-variants', type=int, default=None, help='give up after this many variants')
    parser.add_argument('--report', default=None, help='report format: console or json')
    parser.add_argument('--rootdir', type=Path, default=None, help='project root (default: current directory)')
    parser.add_argument('-v', '--verbose', action='count', default=0, help='log progress (-vv for every variant)')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def configure_logging(verbosity: int) -> None:
    """Configure root logging for the given -v count."""
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format='%(levelname)s %(name)s: %(message)s')


def make_executor(
    config: MenderConfig,
    program: Program,
    module_name: str,
    tests: Path,
    rootdir: Path,
) -> InProcessExecutor | PytestExecutor:
    """Create the executor selected by the configuration."""
    origin = str(Path(program.filename).resolve())
    if config.executor == 'pytest':
        return PytestExecutor(
            module_name,
            [str(tests)],
            rootdir=str(rootdir),
            timeout=config.timeout,
            origin=origin,
        )
    search_paths = dict.fromkeys([str(Path(program.filename).resolve().parent), str(tests.resolve().parent)])
    return InProcessExecutor(module_name, tests.stem, search_paths=list(search_paths), origin=origin)


def main(argv: Sequence[str] | None = None) -> int:
    """Run a repair search from the command line.

    Args:
        argv: Arguments without the program name. Defaults to sys.argv[1:].

    Returns:
        The process exit code.
    """
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    rootdir = (args.rootdir or Path.cwd()).resolve()

    try:
        config = merge_configs(
            load_config(rootdir),
            cli_kinds=args.kinds,
            cli_executor=args.executor,
            cli_timeout=args.timeout,
            cli_max_variants=args.max_variants,
            cli_report=args.report,
        )
        program = read_program(args.source)
    except (ConfigError, ParseError) as exc:
        print(f'pytest-mender: error: {exc}', file=sys.stderr)
        return EXIT_USAGE

    module_name = args.module or program.module_name
    logger.debug('Repairing %s (module %s) against %s', program.filename, module_name, args.tests)

    try:
        with make_executor(config, program, module_name, args.tests, rootdir) as executor:
            result = RepairSearch.from_config(program, executor, config).run()
    except OracleExecutionError as exc:
        print(f'pytest-mender: error: {exc}', file=sys.stderr)
        return EXIT_USAGE

    if config.report == 'json':
        sys.stdout.write(JsonReporter().to_json(result) + '\n')
    else:
        ConsoleReporter().write_report(result)

    return EXIT_NO_FIX if result.status == RepairStatus.EXHAUSTED else EXIT_OK


if __name__ == '__main__':
    sys.exit(main())
