"""The repair search loop.

The loop walks the enumerated variants in order and judges each one with two
oracles:

- the bug oracle: every test that fails against the original program must
  pass under the variant;
- the regression oracle: every test of the suite must pass under the variant.

The first variant satisfying both is accepted and nothing after it is
materialised. The failing tests are captured once, against the original
program, before enumeration starts.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
from typing import TYPE_CHECKING

from pytest_mender.errors import OracleExecutionError
from pytest_mender.execution.protocol import RunOutcome
from pytest_mender.hotspots.detector import detect
from pytest_mender.hotspots.kinds import select_kinds
from pytest_mender.reporting.results import AppliedChange, RepairResult, RepairStatus
from pytest_mender.search.builder import build
from pytest_mender.search.enumerator import count_assignments, enumerate_assignments
from pytest_mender.source import render_variant


if TYPE_CHECKING:
    import ast
    from collections.abc import Iterable, Iterator, Sequence

    from pytest_mender.config import MenderConfig
    from pytest_mender.execution.protocol import SuiteExecutor
    from pytest_mender.hotspots.kinds import HotspotKind
    from pytest_mender.search.assignment import Assignment
    from pytest_mender.source import Program


logger = logging.getLogger(__name__)


class SearchState(Enum):
    """States of the search loop.

    READY until the failing tests are known, then EVALUATING and NEXT_VARIANT
    alternate until one of the terminal states ACCEPTED, EXHAUSTED or
    NO_FAILURES is reached.
    """

    READY = 'ready'
    EVALUATING = 'evaluating'
    NEXT_VARIANT = 'next_variant'
    ACCEPTED = 'accepted'
    EXHAUSTED = 'exhausted'
    NO_FAILURES = 'no_failures'


@dataclass(frozen=True)
class Variant:
    """A candidate program.

    Attributes:
        assignment: The choices the variant was built from.
        tree: The variant's program tree.
        source: The variant's source text.
    """

    assignment: Assignment
    tree: ast.Module
    source: str


class RepairSearch:
    """Search the variants of a program for one that fixes its failing tests.

    Attributes:
        program: The program under repair.
        executor: Runs the test suite against loaded variants.
        max_variants: Judge at most this many variants. None means no limit.
        state: Current SearchState.
        variants_tried: Number of variants judged so far.
    """

    def __init__(
        self,
        program: Program,
        executor: SuiteExecutor,
        kinds: Iterable[HotspotKind] | None = None,
        max_variants: int | None = None,
    ) -> None:
        """Initialize the search and detect the program's hotspots.

        Args:
            program: The parsed program under repair.
            executor: Test executor for the program's suite.
            kinds: Hotspot kinds to search. Defaults to every kind.
            max_variants: Optional budget on judged variants.
        """
        self.program = program
        self.executor = executor
        self.max_variants = max_variants
        self.detection = detect(program.tree, kinds)
        self.state = SearchState.READY
        self.variants_tried = 0
        self._suite: tuple[str, ...] | None = None
        self._failing_tests: tuple[str, ...] | None = None

    @classmethod
    def from_config(cls, program: Program, executor: SuiteExecutor, config: MenderConfig) -> RepairSearch:
        """Create a search configured by a MenderConfig."""
        return cls(program, executor, kinds=select_kinds(config.kinds), max_variants=config.max_variants)

    @property
    def search_space(self) -> int:
        """Return the total number of candidate variants."""
        return count_assignments(self.detection.forest)

    def suite(self) -> tuple[str, ...]:
        """Return the identifiers of every test in the suite."""
        if self._suite is None:
            self._suite = tuple(self.executor.test_ids())
        return self._suite

    def failing_tests(self) -> tuple[str, ...]:
        """Return the tests failing against the original program.

        Computed once, on first call, and never recomputed per variant.
        """
        if self._failing_tests is None:
            handle = self.executor.load(self.program.source)
            self._failing_tests = tuple(t for t in self.suite() if not self._passes(handle, t))
        return self._failing_tests

    def variants(self) -> Iterator[Variant]:
        """Yield the candidate variants lazily, in enumeration order."""
        for assignment in enumerate_assignments(self.detection.forest):
            built = build(self.detection, assignment)
            source = render_variant(self.program, self.detection, built)
            yield Variant(assignment=assignment, tree=built.tree, source=source)

    def run(self) -> RepairResult:
        """Search for a fix.

        Returns:
            RepairResult with status FIXED, NO_FAILURES or EXHAUSTED.
        """
        failing = self.failing_tests()
        if not failing:
            logger.info('All %d tests of %s pass; nothing to fix', len(self.suite()), self.program.filename)
            self.state = SearchState.NO_FAILURES
            return self._result(RepairStatus.NO_FAILURES)

        logger.info(
            'Searching %d variants of %s for a fix of %d failing tests: %s',
            self.search_space,
            self.program.filename,
            len(failing),
            ', '.join(failing),
        )

        variants = self.variants()
        while self.max_variants is None or self.variants_tried < self.max_variants:
            self.state = SearchState.NEXT_VARIANT
            variant = next(variants, None)
            if variant is None:
                self.state = SearchState.EXHAUSTED
                logger.info('No fix found after %d variants', self.variants_tried)
                return self._result(RepairStatus.EXHAUSTED)

            self.state = SearchState.EVALUATING
            self.variants_tried += 1
            logger.debug('Evaluating variant %d: %r', self.variants_tried, variant.assignment)
            if self._accepts(variant):
                self.state = SearchState.ACCEPTED
                logger.info('Accepted variant %d of %d', self.variants_tried, self.search_space)
                return self._result(RepairStatus.FIXED, variant)

        self.state = SearchState.EXHAUSTED
        budget_exhausted = self.variants_tried < self.search_space
        logger.info('Stopped after max_variants=%d without a fix', self.max_variants)
        return self._result(RepairStatus.EXHAUSTED, budget_exhausted=budget_exhausted)

    def _accepts(self, variant: Variant) -> bool:
        handle = self.executor.load(variant.source)
        if not self._all_pass(handle, self.failing_tests()):
            logger.debug('Variant %d rejected by the bug oracle', self.variants_tried)
            return False
        if not self._all_pass(handle, self.suite()):
            logger.debug('Variant %d rejected by the regression oracle', self.variants_tried)
            return False
        return True

    def _all_pass(self, handle: object, test_ids: Sequence[str]) -> bool:
        return all(self._passes(handle, test_id) for test_id in test_ids)

    def _passes(self, handle: object, test_id: str) -> bool:
        try:
            return self.executor.run(handle, test_id) is RunOutcome.PASSED
        except OracleExecutionError as exc:
            logger.warning('Could not run %s, counting it as failing: %s', test_id, exc)
            return False

    def _result(
        self,
        status: RepairStatus,
        variant: Variant | None = None,
        *,
        budget_exhausted: bool = False,
    ) -> RepairResult:
        changes: tuple[AppliedChange, ...] = ()
        if variant is not None:
            changes = tuple(
                AppliedChange(
                    file_path=self.program.filename,
                    line_number=hotspot.line_number,
                    kind=hotspot.kind.value,
                    description=hotspot.describe(choice),
                )
                for hotspot, choice in sorted(
                    variant.assignment.changes(self.detection.hotspots),
                    key=lambda change: (change[0].line_number, change[0].source_node.col_offset),
                )
            )

        return RepairResult(
            status=status,
            file_path=self.program.filename,
            original_source=self.program.source,
            failing_tests=self.failing_tests() if status != RepairStatus.NO_FAILURES else (),
            variants_tried=self.variants_tried,
            search_space=self.search_space,
            fixed_source=variant.source if variant is not None else None,
            changes=changes,
            budget_exhausted=budget_exhausted,
        )
