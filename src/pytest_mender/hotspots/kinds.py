"""Hotspot kinds and the static matcher table.

Each kind is recognised by one matcher: a plain predicate over an AST node.
Matchers are consulted in declaration order and the first match wins, so a
node is captured by at most one kind. Adding a kind means adding an enum
member, a matcher row here and an alternatives row in the catalog.
"""

from __future__ import annotations

import ast
from enum import Enum
import re
from typing import TYPE_CHECKING
import warnings


if TYPE_CHECKING:
    from collections.abc import Callable, Iterable


class HotspotKind(Enum):
    """The fixed set of mutation point kinds.

    Attributes:
        COMPARISON: Ordering comparison (>, >=, <, <=).
        EQUALITY: Equality comparison (==, !=).
        PREDICATE: Call of a predicate function or method (is_*, has_*, ...).
        FILTER: filter/filterfalse call with a lambda block.
        QUANTIFIER: all/any call over a comprehension block.
    """

    COMPARISON = 'comparison'
    EQUALITY = 'equality'
    PREDICATE = 'predicate'
    FILTER = 'filter'
    QUANTIFIER = 'quantifier'


COMPARISON_OPERATORS: tuple[type[ast.cmpop], ...] = (ast.Gt, ast.GtE, ast.Lt, ast.LtE)
EQUALITY_OPERATORS: tuple[type[ast.cmpop], ...] = (ast.Eq, ast.NotEq)

PREDICATE_PATTERN = re.compile(
    r'^(?:is|has)_\w+$'
    r'|^(?:isinstance|issubclass|hasattr|callable|startswith|endswith)$'
    r'|^is(?:alnum|alpha|ascii|decimal|digit|identifier|lower|numeric|printable|space|title|upper)$'
)

FILTER_CALLEES: frozenset[str] = frozenset(('filter', 'filterfalse'))
QUANTIFIER_CALLEES: frozenset[str] = frozenset(('all', 'any'))
BLOCK_NODES: tuple[type[ast.expr], ...] = (ast.GeneratorExp, ast.ListComp, ast.SetComp)


def callee_name(node: ast.Call) -> str | None:
    """Return the selector of a call: the function name or the method name.

    Args:
        node: The call node.

    Returns:
        The called name, or None for calls through arbitrary expressions.
    """
    if isinstance(node.func, ast.Name):
        return node.func.id
    if isinstance(node.func, ast.Attribute):
        return node.func.attr
    return None


def _single_operator(node: ast.AST) -> type[ast.cmpop] | None:
    if isinstance(node, ast.Compare) and len(node.ops) == 1:
        return type(node.ops[0])
    return None


def is_comparison(node: ast.AST) -> bool:
    return _single_operator(node) in COMPARISON_OPERATORS


def is_equality(node: ast.AST) -> bool:
    return _single_operator(node) in EQUALITY_OPERATORS


def is_predicate_call(node: ast.AST) -> bool:
    if not isinstance(node, ast.Call):
        return False
    name = callee_name(node)
    return name is not None and PREDICATE_PATTERN.match(name) is not None


def is_filter_block(node: ast.AST) -> bool:
    """Match ``filter(lambda ...: ..., items)`` and its filterfalse twin."""
    if not isinstance(node, ast.Call) or node.keywords or len(node.args) != 2:  # noqa: PLR2004
        return False
    return callee_name(node) in FILTER_CALLEES and isinstance(node.args[0], ast.Lambda)


def is_quantifier_block(node: ast.AST) -> bool:
    """Match ``all(<comprehension>)`` and ``any(<comprehension>)``."""
    if not isinstance(node, ast.Call) or node.keywords or len(node.args) != 1:
        return False
    if not isinstance(node.func, ast.Name) or node.func.id not in QUANTIFIER_CALLEES:
        return False
    return isinstance(node.args[0], BLOCK_NODES)


MATCHERS: dict[HotspotKind, Callable[[ast.AST], bool]] = {
    HotspotKind.COMPARISON: is_comparison,
    HotspotKind.EQUALITY: is_equality,
    HotspotKind.PREDICATE: is_predicate_call,
    HotspotKind.FILTER: is_filter_block,
    HotspotKind.QUANTIFIER: is_quantifier_block,
}


def detect_kind(node: ast.AST, kinds: Iterable[HotspotKind] | None = None) -> HotspotKind | None:
    """Return the first kind whose matcher accepts the node.

    Args:
        node: The AST node to classify.
        kinds: Kinds to consider. Defaults to every kind. Declaration order
            decides ties regardless of the order given here.

    Returns:
        The matching kind, or None if the node is not a hotspot.
    """
    enabled = set(HotspotKind) if kinds is None else set(kinds)
    for kind, matcher in MATCHERS.items():
        if kind in enabled and matcher(node):
            return kind
    return None


def select_kinds(names: Iterable[str] | None) -> tuple[HotspotKind, ...]:
    """Turn configured kind names into kinds.

    Args:
        names: Kind names (e.g. 'comparison'). None selects every kind.

    Returns:
        The selected kinds in declaration order.
    """
    if names is None:
        return tuple(HotspotKind)

    wanted: set[HotspotKind] = set()
    for name in names:
        try:
            wanted.add(HotspotKind(name.strip().lower()))
        except ValueError:
            warnings.warn(f"Unknown hotspot kind '{name}' requested, ignoring", UserWarning, stacklevel=2)
    return tuple(kind for kind in HotspotKind if kind in wanted)
