"""Fixtures for reporter tests."""

from __future__ import annotations

import pytest

from pytest_mender.reporting.results import AppliedChange, RepairResult, RepairStatus


ORIGINAL = 'def retired(ages):\n    return [a for a in ages if a <= 65]\n'
FIXED = 'def retired(ages):\n    return [a for a in ages if a > 65]\n'


@pytest.fixture
def make_result():
    """Factory fixture for creating repair results."""

    def _make_result(status: RepairStatus = RepairStatus.FIXED, **overrides) -> RepairResult:
        fields = {
            'status': status,
            'file_path': 'people.py',
            'original_source': ORIGINAL,
            'failing_tests': ('test_people.py::test_retired',),
            'variants_tried': 1,
            'search_space': 4,
        }
        if status == RepairStatus.FIXED:
            fields['fixed_source'] = FIXED
            fields['changes'] = (AppliedChange('people.py', 2, 'comparison', '<= to >'),)
        elif status == RepairStatus.NO_FAILURES:
            fields['failing_tests'] = ()
            fields['variants_tried'] = 0
        fields.update(overrides)
        return RepairResult(**fields)

    return _make_result
