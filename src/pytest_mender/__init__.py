"""pytest-mender: automated program repair for pytest suites.

Find the small mutation that makes the failing tests pass.

pytest-mender searches a catalog of local syntactic rewrites (comparison and
equality operator swaps, predicate negation, filter and quantifier flips) for
a variant of a module that turns its currently-failing tests into passing
tests without breaking any currently-passing test.

Example:
    Repair a module against its test module::

        $ pytest-mender src/people.py tests/test_people.py

    Restrict the search to operator swaps::

        $ pytest-mender src/people.py tests/test_people.py --kinds=comparison,equality

    Run each test in a fresh pytest subprocess::

        $ pytest-mender src/people.py tests/test_people.py --executor=pytest
"""

from __future__ import annotations


__version__ = '0.3.0'
__all__ = ['__version__']
