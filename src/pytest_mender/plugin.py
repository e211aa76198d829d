"""pytest plugin for pytest-mender.

The plugin is the receiving end of the pytest executor: when a sources file
is named (by --mender-sources or the PYTEST_MENDER_SOURCES_FILE environment
variable) it installs the program variants it contains before any test
module is imported, so the run exercises the variant instead of the code on
disk.
"""

from __future__ import annotations

import ast
import json
import os
from pathlib import Path
from typing import TYPE_CHECKING

from pytest_mender.execution.import_hooks import evict_modules, register_import_hooks, unregister_import_hooks
from pytest_mender.execution.pytest_runner import SOURCES_FILE_ENV_VAR


if TYPE_CHECKING:
    import pytest


def pytest_addoption(parser: pytest.Parser) -> None:
    """Add command-line options for pytest-mender."""
    group = parser.getgroup('mender', 'automated repair with pytest-mender')
    group.addoption(
        '--mender-sources',
        action='store',
        default=None,
        dest='mender_sources',
        help=f'JSON file of module variants to run the tests against (default: ${SOURCES_FILE_ENV_VAR})',
    )


def load_sources_file(path: Path) -> tuple[dict[str, ast.Module], dict[str, str]]:
    """Parse a sources file into variant trees and module origins.

    Args:
        path: JSON file written by ``write_sources_file``.

    Returns:
        Tuple of (module name to AST, module name to original file path).
    """
    payload = json.loads(path.read_text(encoding='utf-8'))
    variants: dict[str, ast.Module] = {}
    origins: dict[str, str] = {}
    for name, entry in payload.get('modules', {}).items():
        origin = entry.get('origin')
        variants[name] = ast.parse(entry['source'], filename=origin or name)
        if origin:
            origins[name] = origin
    return variants, origins


def pytest_configure(config: pytest.Config) -> None:
    """Install the variants named by the sources file, if any."""
    sources = config.option.mender_sources or os.environ.get(SOURCES_FILE_ENV_VAR)
    if not sources:
        return

    variants, origins = load_sources_file(Path(sources))
    evict_modules(variants)
    register_import_hooks(variants, origins)


def pytest_unconfigure(config: pytest.Config) -> None:  # noqa: ARG001
    """Remove the import hooks installed at configure time."""
    unregister_import_hooks()
