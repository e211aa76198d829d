"""Hotspot detection.

The detector walks a copy of the program tree and replaces every node that
matches a hotspot kind with a HotspotMarker. Hotspots found while recursing
into a matched node become that hotspot's children, so the result is a forest:
top-level hotspots, each carrying its nested ones.

Example:
    >>> import ast
    >>> detection = detect(ast.parse('ok = x > 5'))
    >>> [hotspot.kind.value for hotspot in detection.forest]
    ['comparison']
"""

from __future__ import annotations

import ast
import copy
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pytest_mender.hotspots.hotspot import Hotspot, HotspotMarker
from pytest_mender.hotspots.kinds import HotspotKind, detect_kind


if TYPE_CHECKING:
    from collections.abc import Iterable


@dataclass(frozen=True)
class Detection:
    """Result of a detection pass.

    Attributes:
        template: Copy of the program tree with hotspots replaced by markers.
        hotspots: Arena of every hotspot, indexed by ``Hotspot.index``.
        forest: Top-level hotspots in source order.
    """

    template: ast.Module
    hotspots: tuple[Hotspot, ...]
    forest: tuple[Hotspot, ...]

    def __len__(self) -> int:
        return len(self.hotspots)


class HotspotDetector(ast.NodeTransformer):
    """AST transformer that captures hotspots bottom-up.

    Matching nodes have their own subtrees processed first; every hotspot
    pushed on the stack meanwhile is popped off again and becomes a child of
    the enclosing hotspot. Whatever remains on the stack at the end is the
    top-level forest.
    """

    def __init__(self, kinds: Iterable[HotspotKind] | None = None) -> None:
        self._kinds = tuple(HotspotKind) if kinds is None else tuple(kinds)
        self.hotspots: list[Hotspot] = []
        self._stack: list[Hotspot] = []

    @property
    def forest(self) -> tuple[Hotspot, ...]:
        """Return the hotspots found at the current top level."""
        return tuple(self._stack)

    def visit_Compare(self, node: ast.Compare) -> ast.AST:
        """Capture comparison and equality hotspots."""
        return self._visit_candidate(node)

    def visit_Call(self, node: ast.Call) -> ast.AST:
        """Capture predicate, filter and quantifier hotspots."""
        return self._visit_candidate(node)

    def _visit_candidate(self, node: ast.expr) -> ast.AST:
        kind = detect_kind(node, self._kinds)
        if kind is None:
            return self.generic_visit(node)

        source_node = copy.deepcopy(node)
        base = len(self._stack)
        rewritten = self.generic_visit(node)
        children = tuple(self._stack[base:])
        del self._stack[base:]

        hotspot = Hotspot(
            index=len(self.hotspots),
            kind=kind,
            node=rewritten,
            source_node=source_node,
            children=children,
        )
        self.hotspots.append(hotspot)
        self._stack.append(hotspot)
        return ast.copy_location(HotspotMarker(index=hotspot.index), node)


def detect(tree: ast.Module, kinds: Iterable[HotspotKind] | None = None) -> Detection:
    """Detect the hotspots of a program.

    The given tree is left untouched; detection works on a deep copy.

    Args:
        tree: The parsed program.
        kinds: Kinds to detect. Defaults to every kind.

    Returns:
        Detection with the template, the hotspot arena and the forest.
    """
    detector = HotspotDetector(kinds)
    template = detector.visit(copy.deepcopy(tree))
    if not isinstance(template, ast.Module):
        raise TypeError(f'Expected ast.Module, got {type(template).__name__}')
    return Detection(template=template, hotspots=tuple(detector.hotspots), forest=detector.forest)
