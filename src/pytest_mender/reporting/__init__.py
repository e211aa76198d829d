"""Reporting module for pytest-mender repair results.

This module provides the result data structures and the reporters that
present them (console, JSON, unified diff).
"""

from pytest_mender.reporting.console import ConsoleReporter
from pytest_mender.reporting.diff import DiffReporter
from pytest_mender.reporting.json_reporter import JsonReporter
from pytest_mender.reporting.results import AppliedChange, RepairResult, RepairStatus


__all__ = [
    'AppliedChange',
    'ConsoleReporter',
    'DiffReporter',
    'JsonReporter',
    'RepairResult',
    'RepairStatus',
]
