"""RepairResult dataclass describing the outcome of a repair search.

A search ends in exactly one terminal status: a fix was accepted, there was
nothing to fix, or every candidate variant was rejected.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class RepairStatus(Enum):
    """Terminal status of a repair search.

    Attributes:
        FIXED: A variant passed both oracles and was accepted.
        NO_FAILURES: The suite already passes; nothing to repair.
        EXHAUSTED: Every candidate variant was rejected (no fix found).
    """

    FIXED = 'fixed'
    NO_FAILURES = 'no_failures'
    EXHAUSTED = 'exhausted'


@dataclass(frozen=True)
class AppliedChange:
    """One mutation applied by the accepted variant.

    Attributes:
        file_path: Path of the repaired file.
        line_number: Line where the hotspot starts.
        kind: Hotspot kind name (e.g. 'comparison').
        description: Human-readable description (e.g. '<= to >').
    """

    file_path: str
    line_number: int
    kind: str
    description: str


@dataclass(frozen=True)
class RepairResult:
    """Outcome of a repair search.

    Attributes:
        status: Terminal status of the search.
        file_path: Path of the program under repair.
        original_source: Source text of the unmodified program.
        failing_tests: Tests failing against the original program.
        variants_tried: Number of variants judged by the oracles.
        search_space: Total number of candidate variants.
        fixed_source: Source text of the accepted variant (FIXED only).
        changes: Mutations applied by the accepted variant (FIXED only).
        budget_exhausted: True if the search stopped at max_variants.
    """

    status: RepairStatus
    file_path: str
    original_source: str
    failing_tests: tuple[str, ...] = ()
    variants_tried: int = 0
    search_space: int = 0
    fixed_source: str | None = None
    changes: tuple[AppliedChange, ...] = ()
    budget_exhausted: bool = False

    @property
    def is_fixed(self) -> bool:
        """Return True if a fix was accepted."""
        return self.status == RepairStatus.FIXED
