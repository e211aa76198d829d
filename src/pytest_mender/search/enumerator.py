"""Lazy enumeration of assignments over a hotspot forest.

Every hotspot chooses independently of its children and of its siblings, so
the search space is the product of all alternative counts. The space is
exponential in the number of hotspots and the search loop usually stops
early, so assignments are generated on demand and never materialised.

Order is deterministic: the first tree of the forest varies slowest, and
within a hotspot its own choice varies slower than its children's, with
alternatives in catalog order.

Example:
    >>> import ast
    >>> from pytest_mender.hotspots import detect
    >>> detection = detect(ast.parse('a = x > 5; b = y == 1'))
    >>> count_assignments(detection.forest)
    8
    >>> [dict(a) for a in enumerate_assignments(detection.forest)][:3]
    [{0: 0, 1: 0}, {0: 0, 1: 1}, {0: 1, 1: 0}]
"""

from __future__ import annotations

from math import prod
from typing import TYPE_CHECKING

from pytest_mender.search.assignment import Assignment


if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from pytest_mender.hotspots.hotspot import Hotspot


def enumerate_assignments(forest: Sequence[Hotspot]) -> Iterator[Assignment]:
    """Yield every total assignment over a forest of hotspots.

    Args:
        forest: Top-level hotspots, each carrying its nested children.

    Yields:
        Assignments covering every hotspot of the forest and its descendants.
        An empty forest yields a single empty assignment.
    """
    if not forest:
        yield Assignment()
        return

    first, rest = forest[0], forest[1:]
    for head in _enumerate_tree(first):
        for tail in enumerate_assignments(rest):
            yield head.merge(tail)


def _enumerate_tree(hotspot: Hotspot) -> Iterator[Assignment]:
    for choice in range(hotspot.alternative_count):
        own = Assignment({hotspot.index: choice})
        for nested in enumerate_assignments(hotspot.children):
            yield own.merge(nested)


def count_assignments(forest: Sequence[Hotspot]) -> int:
    """Return the number of assignments the forest enumerates to."""
    return prod(hotspot.alternative_count * count_assignments(hotspot.children) for hotspot in forest)
