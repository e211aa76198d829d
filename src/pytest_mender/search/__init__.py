"""Variant search for pytest-mender.

This package enumerates assignments over a hotspot forest, materialises the
variant each assignment selects, and drives the two-oracle search loop.
"""

from pytest_mender.search.assignment import Assignment
from pytest_mender.search.builder import BuiltVariant, VariantBuilder, build
from pytest_mender.search.enumerator import count_assignments, enumerate_assignments
from pytest_mender.search.loop import RepairSearch, SearchState, Variant


__all__ = [
    'Assignment',
    'BuiltVariant',
    'RepairSearch',
    'SearchState',
    'Variant',
    'VariantBuilder',
    'build',
    'count_assignments',
    'enumerate_assignments',
]
