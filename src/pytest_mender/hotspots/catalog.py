"""Alternative catalog: the candidate rewrites for every hotspot kind.

An alternative is a pure function from an already-resolved node to its
replacement. Operator and method-name alternatives rewrite only the selector
and pass the receiver, arguments and block body through untouched. Every
family includes the member equal to the original, so the identity rewrite is
always one of the choices.

Rewrites by kind, in catalog order:

    comparison   x > y     ->  >, >=, <, <=
    equality     x == y    ->  ==, !=
    predicate    p(x)      ->  p(x), not p(x)
    filter       filter(f, xs) / filterfalse(f, xs)
                           ->  select (keep matches), reject (drop matches)
    quantifier   all(g) / any(g)
                           ->  all(g), not any(g), any(g), sum(map(bool, g)) == 1
"""

from __future__ import annotations

import ast
from dataclasses import dataclass
from functools import partial
from typing import TYPE_CHECKING, cast

from pytest_mender.hotspots.kinds import (
    COMPARISON_OPERATORS,
    EQUALITY_OPERATORS,
    HotspotKind,
    callee_name,
)


if TYPE_CHECKING:
    from collections.abc import Callable


@dataclass(frozen=True)
class Alternative:
    """One candidate rewrite at a hotspot.

    Attributes:
        name: Short label used in reports (e.g. '>=', 'negate', 'reject').
        transform: Pure function producing the replacement node.
    """

    name: str
    transform: Callable[[ast.expr], ast.expr]

    def apply(self, node: ast.expr) -> ast.expr:
        """Return the replacement for a resolved node."""
        return self.transform(node)


OPERATOR_SYMBOLS: dict[type[ast.cmpop], str] = {
    ast.Gt: '>',
    ast.GtE: '>=',
    ast.Lt: '<',
    ast.LtE: '<=',
    ast.Eq: '==',
    ast.NotEq: '!=',
}


def _identity(node: ast.expr) -> ast.expr:
    return node


def _negate(node: ast.expr) -> ast.expr:
    return ast.UnaryOp(op=ast.Not(), operand=node)


def _replace_operator(operator: type[ast.cmpop], node: ast.expr) -> ast.expr:
    compare = cast('ast.Compare', node)
    return ast.Compare(left=compare.left, ops=[operator()], comparators=list(compare.comparators))


def _load(name: str) -> ast.Name:
    return ast.Name(id=name, ctx=ast.Load())


def _is_reject(node: ast.Call) -> bool:
    return callee_name(node) == 'filterfalse'


def _select(node: ast.expr) -> ast.expr:
    """Keep the elements the block accepts."""
    call = cast('ast.Call', node)
    if not _is_reject(call):
        return call
    return ast.Call(func=_load('filter'), args=list(call.args), keywords=[])


def _reject(node: ast.expr) -> ast.expr:
    """Drop the elements the block accepts."""
    call = cast('ast.Call', node)
    if _is_reject(call):
        return call
    block = cast('ast.Lambda', call.args[0])
    items = call.args[1]
    negated = ast.Lambda(args=block.args, body=_negate(block.body))
    return ast.Call(func=call.func, args=[negated, items], keywords=[])


def _quantify(name: str, node: ast.expr) -> ast.expr:
    call = cast('ast.Call', node)
    if callee_name(call) == name:
        return call
    return ast.Call(func=_load(name), args=list(call.args), keywords=[])


def _none(node: ast.expr) -> ast.expr:
    return _negate(_quantify('any', node))


def _one(node: ast.expr) -> ast.expr:
    call = cast('ast.Call', node)
    truths = ast.Call(func=_load('map'), args=[_load('bool'), call.args[0]], keywords=[])
    count = ast.Call(func=_load('sum'), args=[truths], keywords=[])
    return ast.Compare(left=count, ops=[ast.Eq()], comparators=[ast.Constant(value=1)])


def _operator_family(operators: tuple[type[ast.cmpop], ...]) -> tuple[Alternative, ...]:
    return tuple(Alternative(OPERATOR_SYMBOLS[op], partial(_replace_operator, op)) for op in operators)


CATALOG: dict[HotspotKind, tuple[Alternative, ...]] = {
    HotspotKind.COMPARISON: _operator_family(COMPARISON_OPERATORS),
    HotspotKind.EQUALITY: _operator_family(EQUALITY_OPERATORS),
    HotspotKind.PREDICATE: (
        Alternative('keep', _identity),
        Alternative('negate', _negate),
    ),
    HotspotKind.FILTER: (
        Alternative('select', _select),
        Alternative('reject', _reject),
    ),
    HotspotKind.QUANTIFIER: (
        Alternative('all', partial(_quantify, 'all')),
        Alternative('none', _none),
        Alternative('any', partial(_quantify, 'any')),
        Alternative('one', _one),
    ),
}


def alternatives_for(kind: HotspotKind) -> tuple[Alternative, ...]:
    """Return the alternatives of a kind in catalog order."""
    return CATALOG[kind]


def identity_choice(kind: HotspotKind, node: ast.expr) -> int:
    """Return the position of the alternative that reproduces the node.

    Args:
        kind: The kind the node was detected as.
        node: The original (unmutated) node.

    Returns:
        Index into ``alternatives_for(kind)``.
    """
    if kind in (HotspotKind.COMPARISON, HotspotKind.EQUALITY):
        family = COMPARISON_OPERATORS if kind is HotspotKind.COMPARISON else EQUALITY_OPERATORS
        return family.index(type(cast('ast.Compare', node).ops[0]))
    if kind is HotspotKind.FILTER:
        return 1 if _is_reject(cast('ast.Call', node)) else 0
    if kind is HotspotKind.QUANTIFIER:
        return 2 if callee_name(cast('ast.Call', node)) == 'any' else 0
    return 0
