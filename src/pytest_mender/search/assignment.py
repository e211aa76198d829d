"""Assignment: one chosen alternative per hotspot.

Assignments map hotspot arena indices to positions in the hotspot's
alternative tuple. They are immutable; merging produces a new assignment.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

from pytest_mender.errors import IncompleteAssignmentError


if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from pytest_mender.hotspots.catalog import Alternative
    from pytest_mender.hotspots.hotspot import Hotspot


class Assignment(Mapping[int, int]):
    """Immutable mapping from hotspot index to chosen alternative position.

    Example:
        >>> assignment = Assignment({0: 1}).merge(Assignment({1: 3}))
        >>> dict(assignment)
        {0: 1, 1: 3}
    """

    __slots__ = ('_choices',)

    def __init__(self, choices: Mapping[int, int] | None = None) -> None:
        self._choices: dict[int, int] = dict(choices) if choices else {}

    def __getitem__(self, index: int) -> int:
        return self._choices[index]

    def __iter__(self) -> Iterator[int]:
        return iter(self._choices)

    def __len__(self) -> int:
        return len(self._choices)

    def __repr__(self) -> str:
        return f'Assignment({self._choices!r})'

    def merge(self, other: Mapping[int, int]) -> Assignment:
        """Return a new assignment holding the choices of both."""
        return Assignment({**self._choices, **other})

    def choice_for(self, hotspot: Hotspot) -> Alternative:
        """Return the alternative chosen for a hotspot.

        Raises:
            IncompleteAssignmentError: If the hotspot has no choice.
        """
        if hotspot.index not in self._choices:
            raise IncompleteAssignmentError(hotspot.index)
        return hotspot.alternatives[self._choices[hotspot.index]]

    def changes(self, hotspots: Iterable[Hotspot]) -> list[tuple[Hotspot, int]]:
        """Return the hotspots whose choice differs from the original code."""
        return [
            (hotspot, self._choices[hotspot.index])
            for hotspot in hotspots
            if hotspot.index in self._choices and self._choices[hotspot.index] != hotspot.identity_choice
        ]

    @classmethod
    def identity(cls, hotspots: Iterable[Hotspot]) -> Assignment:
        """Return the assignment that reproduces the original program."""
        return cls({hotspot.index: hotspot.identity_choice for hotspot in hotspots})
