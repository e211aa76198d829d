"""Unified diff of the original program against the accepted variant."""

from __future__ import annotations

import difflib


class DiffReporter:
    """Render a fix as a unified diff.

    Example:
        >>> print(DiffReporter(context=0).render('a = x <= 5\\n', 'a = x > 5\\n'), end='')
        --- original file
        +++ fixed file
        @@ -1 +1 @@
        -a = x <= 5
        +a = x > 5
    """

    ORIGINAL_LABEL = 'original file'
    FIXED_LABEL = 'fixed file'

    def __init__(self, context: int = 3) -> None:
        """Initialize the reporter.

        Args:
            context: Lines of context around each change. Defaults to 3.
        """
        self.context = context

    def render(self, original: str, fixed: str) -> str:
        """Return the unified diff of two program texts."""
        lines = difflib.unified_diff(
            original.splitlines(keepends=True),
            fixed.splitlines(keepends=True),
            fromfile=self.ORIGINAL_LABEL,
            tofile=self.FIXED_LABEL,
            n=self.context,
        )
        return ''.join(line if line.endswith('\n') else line + '\n' for line in lines)
