"""JSON reporter for repair results.

Produces machine-readable JSON output for CI integration.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from pytest_mender.reporting.diff import DiffReporter


if TYPE_CHECKING:
    from pathlib import Path

    from pytest_mender.reporting.results import RepairResult


class JsonReporter:
    """Reporter that produces JSON output.

    JSON structure:
        {
            "status": "fixed",
            "file_path": "people.py",
            "failing_tests": ["test_people.py::test_retired"],
            "variants_tried": 5,
            "search_space": 8,
            "budget_exhausted": false,
            "changes": [
                {"line_number": 12, "kind": "comparison", "description": "<= to >"}
            ],
            "diff": "--- original file\\n+++ fixed file\\n..."
        }

    ``changes`` is empty and ``diff`` is null unless a fix was found.
    """

    def to_json(self, result: RepairResult) -> str:
        """Convert a repair result to a pretty-printed JSON string."""
        return json.dumps(self._build_report_data(result), indent=2)

    def write_report(self, result: RepairResult, output_path: Path) -> None:
        """Write the repair report to a JSON file."""
        output_path.write_text(self.to_json(result))

    def _build_report_data(self, result: RepairResult) -> dict[str, Any]:
        diff = None
        if result.fixed_source is not None:
            diff = DiffReporter().render(result.original_source, result.fixed_source)

        return {
            'status': result.status.value,
            'file_path': result.file_path,
            'failing_tests': list(result.failing_tests),
            'variants_tried': result.variants_tried,
            'search_space': result.search_space,
            'budget_exhausted': result.budget_exhausted,
            'changes': [
                {
                    'line_number': change.line_number,
                    'kind': change.kind,
                    'description': change.description,
                }
                for change in result.changes
            ],
            'diff': diff,
        }
