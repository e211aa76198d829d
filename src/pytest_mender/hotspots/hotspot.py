"""Hotspot dataclass and its template marker.

A Hotspot is a detected mutation point. Hotspots live in an arena and are
identified by their arena index, never by structural equality: two identical
expressions on different lines are two distinct hotspots.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pytest_mender.hotspots.catalog import Alternative, alternatives_for, identity_choice


if TYPE_CHECKING:
    from collections.abc import Iterator

    from pytest_mender.hotspots.kinds import HotspotKind


class HotspotMarker(ast.expr):
    """Placeholder standing in for a hotspot inside the template tree.

    Attributes:
        index: Arena index of the hotspot this marker stands for.
    """

    _fields = ('index',)


@dataclass(frozen=True, eq=False)
class Hotspot:
    """A detected mutation point.

    Attributes:
        index: Stable arena index of this hotspot.
        kind: The kind the node was recognised as.
        node: The captured node, with nested hotspots replaced by markers.
        source_node: The untouched original subtree.
        children: Hotspots nested inside this one, in source order.
    """

    index: int
    kind: HotspotKind
    node: ast.expr
    source_node: ast.expr
    children: tuple[Hotspot, ...] = ()

    @property
    def alternatives(self) -> tuple[Alternative, ...]:
        """Return the candidate rewrites for this hotspot."""
        return alternatives_for(self.kind)

    @property
    def alternative_count(self) -> int:
        """Return the number of candidate rewrites."""
        return len(self.alternatives)

    @property
    def identity_choice(self) -> int:
        """Return the position of the alternative reproducing the original."""
        return identity_choice(self.kind, self.source_node)

    @property
    def line_number(self) -> int:
        """Return the line the hotspot starts on."""
        return getattr(self.source_node, 'lineno', 0)

    def descendants(self) -> Iterator[Hotspot]:
        """Yield every nested hotspot, depth first in source order."""
        for child in self.children:
            yield child
            yield from child.descendants()

    def describe(self, choice: int) -> str:
        """Describe the given alternative for reports (e.g. '<= to >')."""
        original = self.alternatives[self.identity_choice].name
        return f'{original} to {self.alternatives[choice].name}'
