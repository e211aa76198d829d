"""Parsing programs and rendering variants back to source text.

Variants are rendered by splicing: only the top-level hotspots whose final
node differs from the original are unparsed, and their text replaces the
original expression's exact source range. Everything else, comments and
formatting included, is kept byte for byte.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from pytest_mender.errors import ParseError


if TYPE_CHECKING:
    from pytest_mender.hotspots.detector import Detection
    from pytest_mender.search.builder import BuiltVariant


@dataclass(frozen=True)
class Program:
    """A parsed program under repair.

    Attributes:
        source: The original source text.
        filename: Path or display name of the source.
        tree: The parsed module.
    """

    source: str
    filename: str
    tree: ast.Module

    @property
    def module_name(self) -> str:
        """Return the import name derived from the file name."""
        return Path(self.filename).stem


def parse_program(source: str, filename: str = '<program>') -> Program:
    """Parse program text.

    Args:
        source: Python source code.
        filename: Name used in error messages and to derive the module name.

    Returns:
        The parsed Program.

    Raises:
        ParseError: If the source is not valid Python.
    """
    try:
        tree = ast.parse(source, filename=filename)
    except SyntaxError as exc:
        raise ParseError(filename, exc.msg, exc.lineno) from exc
    return Program(source=source, filename=filename, tree=tree)


def read_program(path: Path) -> Program:
    """Read and parse a program from disk."""
    return parse_program(path.read_text(encoding='utf-8'), str(path))


def _line_offsets(data: bytes) -> list[int]:
    offsets = [0]
    for line in data.splitlines(keepends=True):
        offsets.append(offsets[-1] + len(line))
    return offsets


def render_variant(program: Program, detection: Detection, variant: BuiltVariant) -> str:
    """Render a built variant as source text.

    Args:
        program: The original program.
        detection: Detection the variant was built from.
        variant: The materialised variant.

    Returns:
        The variant's source text, identical to the original outside the
        rewritten expressions.
    """
    data = program.source.encode('utf-8')
    offsets = _line_offsets(data)

    edits: list[tuple[int, int, bytes]] = []
    for hotspot in detection.forest:
        original = hotspot.source_node
        replacement = variant.resolved[hotspot.index]
        if ast.dump(replacement) == ast.dump(original):
            continue

        text = ast.unparse(replacement)
        if type(replacement) is not type(original):
            text = f'({text})'
        start = offsets[original.lineno - 1] + original.col_offset
        end = offsets[original.end_lineno - 1] + original.end_col_offset  # type: ignore[operator]
        edits.append((start, end, text.encode('utf-8')))

    for start, end, text in sorted(edits, reverse=True):
        data = data[:start] + text + data[end:]
    return data.decode('utf-8')
