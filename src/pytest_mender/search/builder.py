"""Variant materialisation.

The builder turns the template and one assignment into a concrete program
tree. At each marker it first builds the hotspot's own children, substitutes
them into a copy of the captured node, and only then applies the hotspot's
chosen alternative, so an alternative never sees an unresolved marker.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass
from typing import TYPE_CHECKING, cast

from pytest_mender.hotspots.hotspot import HotspotMarker


if TYPE_CHECKING:
    from pytest_mender.hotspots.detector import Detection
    from pytest_mender.search.assignment import Assignment


@dataclass(frozen=True)
class BuiltVariant:
    """A materialised variant tree.

    Attributes:
        assignment: The assignment the tree was built from.
        tree: The concrete program tree (no markers left).
        resolved: Final node of every hotspot, keyed by arena index.
    """

    assignment: Assignment
    tree: ast.Module
    resolved: dict[int, ast.expr]


class VariantBuilder:
    """Rebuild the template for one assignment without touching it."""

    def __init__(self, detection: Detection, assignment: Assignment) -> None:
        self._detection = detection
        self._assignment = assignment
        self.resolved: dict[int, ast.expr] = {}

    def rebuild(self, node: ast.AST) -> ast.AST:
        """Return a fresh copy of a node with every marker resolved."""
        if isinstance(node, HotspotMarker):
            return self._resolve(node)

        fields = {}
        for name, value in ast.iter_fields(node):
            if isinstance(value, list):
                fields[name] = [self.rebuild(item) if isinstance(item, ast.AST) else item for item in value]
            elif isinstance(value, ast.AST):
                fields[name] = self.rebuild(value)
            else:
                fields[name] = value
        return ast.copy_location(type(node)(**fields), node)

    def _resolve(self, marker: HotspotMarker) -> ast.expr:
        hotspot = self._detection.hotspots[marker.index]
        alternative = self._assignment.choice_for(hotspot)

        resolved = cast('ast.expr', self.rebuild(hotspot.node))
        result = ast.copy_location(alternative.apply(resolved), hotspot.source_node)
        self.resolved[hotspot.index] = result
        return result


def build(detection: Detection, assignment: Assignment) -> BuiltVariant:
    """Materialise the variant selected by an assignment.

    Args:
        detection: Result of hotspot detection over the program.
        assignment: Total assignment over the detection's forest.

    Returns:
        BuiltVariant holding the concrete tree.

    Raises:
        IncompleteAssignmentError: If a hotspot has no chosen alternative.
    """
    builder = VariantBuilder(detection, assignment)
    tree = builder.rebuild(detection.template)
    if not isinstance(tree, ast.Module):
        raise TypeError(f'Expected ast.Module, got {type(tree).__name__}')
    return BuiltVariant(assignment=assignment, tree=ast.fix_missing_locations(tree), resolved=builder.resolved)
