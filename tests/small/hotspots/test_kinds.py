"""Tests for hotspot kind matching."""

from __future__ import annotations

import ast

import pytest

from pytest_mender.hotspots.kinds import (
    HotspotKind,
    callee_name,
    detect_kind,
    select_kinds,
)


def expr(source: str) -> ast.expr:
    return ast.parse(source, mode='eval').body


class TestDetectKind:
    """Test which kind a node is recognised as."""

    @pytest.mark.parametrize('source', ['x > 5', 'x >= 5', 'x < 5', 'x <= 5'])
    def test_ordering_comparisons_are_comparison_hotspots(self, source):
        assert detect_kind(expr(source)) is HotspotKind.COMPARISON

    @pytest.mark.parametrize('source', ['x == 5', 'x != 5'])
    def test_equality_comparisons_are_equality_hotspots(self, source):
        assert detect_kind(expr(source)) is HotspotKind.EQUALITY

    @pytest.mark.parametrize('source', ['x is None', 'x in items', 'x is not y', 'x not in items'])
    def test_identity_and_membership_are_not_hotspots(self, source):
        assert detect_kind(expr(source)) is None

    def test_chained_comparison_is_not_a_hotspot(self):
        assert detect_kind(expr('0 < x < 10')) is None

    @pytest.mark.parametrize(
        'source',
        [
            'person.is_male()',
            'has_access(user)',
            'isinstance(x, int)',
            'hasattr(obj, "name")',
            'name.startswith("a")',
            'text.isdigit()',
        ],
    )
    def test_predicate_calls_are_predicate_hotspots(self, source):
        assert detect_kind(expr(source)) is HotspotKind.PREDICATE

    @pytest.mark.parametrize('source', ['issue(x)', 'person.name()', 'len(items)', 'island()'])
    def test_non_predicate_calls_are_not_hotspots(self, source):
        assert detect_kind(expr(source)) is None

    @pytest.mark.parametrize(
        'source',
        [
            'filter(lambda p: p.age > 5, people)',
            'filterfalse(lambda p: p.age > 5, people)',
            'itertools.filterfalse(lambda p: p.age > 5, people)',
        ],
    )
    def test_filter_with_lambda_block_is_filter_hotspot(self, source):
        assert detect_kind(expr(source)) is HotspotKind.FILTER

    def test_filter_without_lambda_block_is_not_a_hotspot(self):
        assert detect_kind(expr('filter(None, people)')) is None

    @pytest.mark.parametrize(
        'source',
        [
            'all(p.ok for p in people)',
            'any([p.ok for p in people])',
            'any({p.ok for p in people})',
        ],
    )
    def test_quantifier_over_comprehension_is_quantifier_hotspot(self, source):
        assert detect_kind(expr(source)) is HotspotKind.QUANTIFIER

    def test_quantifier_over_plain_iterable_is_not_a_hotspot(self):
        assert detect_kind(expr('all(flags)')) is None

    def test_disabled_kind_is_not_matched(self):
        assert detect_kind(expr('x > 5'), [HotspotKind.EQUALITY]) is None


class TestCalleeName:
    """Test extracting the selector of a call."""

    def test_function_call(self):
        assert callee_name(expr('filter(f, xs)')) == 'filter'

    def test_method_call(self):
        assert callee_name(expr('person.is_male()')) == 'is_male'

    def test_call_through_expression_has_no_name(self):
        assert callee_name(expr('handlers[0]()')) is None


class TestSelectKinds:
    """Test turning configured names into kinds."""

    def test_none_selects_every_kind(self):
        assert select_kinds(None) == tuple(HotspotKind)

    def test_names_are_returned_in_declaration_order(self):
        assert select_kinds(['quantifier', 'comparison']) == (HotspotKind.COMPARISON, HotspotKind.QUANTIFIER)

    def test_names_are_case_and_space_insensitive(self):
        assert select_kinds([' Equality ']) == (HotspotKind.EQUALITY,)

    def test_unknown_name_warns_and_is_ignored(self):
        with pytest.warns(UserWarning, match="Unknown hotspot kind 'bogus'"):
            kinds = select_kinds(['bogus', 'predicate'])

        assert kinds == (HotspotKind.PREDICATE,)
