from __future__ import annotations

import bisect
import logging
from typing import Protocol, Sequence

from routenote.domain.models import DeleteLines, EditOperation, InsertLine

logger = logging.getLogger(__name__)


class Document(Protocol):
    """The slice of an editor buffer the annotator works through."""

    def text(self) -> str: ...

    def offset_to_line(self, offset: int) -> int: ...

    def line_text(self, index: int) -> str: ...

    def line_count(self) -> int: ...

    def apply_edits(self, operations: Sequence[EditOperation]) -> bool: ...

    def render(self) -> str: ...


def application_order(operations: Sequence[EditOperation]) -> list[EditOperation]:
    """
    Order a plan for application: all deletes, then all inserts, each from
    the highest line to the lowest. Inserts sharing a line go later-source
    first so the blocks end up in source order.
    """
    deletes = sorted(
        (op for op in operations if isinstance(op, DeleteLines)),
        key=lambda op: (op.start, op.end),
        reverse=True,
    )
    inserts = sorted(
        (op for op in operations if isinstance(op, InsertLine)),
        key=lambda op: (op.line, op.seq),
        reverse=True,
    )
    return [*deletes, *inserts]


class TextDocument:
    """
    In-memory document built from one text snapshot.

    Line numbers handed to ``apply_edits`` always refer to the snapshot the
    document was created from (pre-edit numbering).
    """

    def __init__(self, text: str):
        self._original = text
        self._lines = text.splitlines(keepends=True)
        self.eol = "\r\n" if "\r\n" in text else "\n"

        self._line_starts: list[int] = []
        pos = 0
        for line in self._lines:
            self._line_starts.append(pos)
            pos += len(line)

        self._applied = False

    def text(self) -> str:
        return self._original

    def offset_to_line(self, offset: int) -> int:
        if not self._line_starts:
            return 0
        return max(0, bisect.bisect_right(self._line_starts, offset) - 1)

    def line_text(self, index: int) -> str:
        return self._lines[index].rstrip("\r\n")

    def line_count(self) -> int:
        return len(self._lines)

    def lines(self) -> list[str]:
        return [self.line_text(i) for i in range(self.line_count())]

    def render(self) -> str:
        return "".join(self._lines)

    def apply_edits(self, operations: Sequence[EditOperation]) -> bool:
        """
        Apply one batch. Returns False, leaving the buffer untouched, when the
        batch is out of application order or addresses missing lines.
        """
        if self._applied:
            logger.warning("document already edited; batch rejected")
            return False
        if list(operations) != application_order(operations):
            logger.warning("edit batch is not in application order; rejected")
            return False

        n = len(self._lines)
        deleted: list[int] = []
        for op in operations:
            if isinstance(op, DeleteLines):
                if not (0 <= op.start <= op.end < n):
                    logger.warning("delete %d..%d outside document of %d lines", op.start, op.end, n)
                    return False
                deleted.extend(range(op.start, op.end + 1))
            elif op.line > n:
                logger.warning("insert at line %d outside document of %d lines", op.line, n)
                return False
        if len(set(deleted)) != len(deleted):
            logger.warning("overlapping deletes; rejected")
            return False

        lines = list(self._lines)
        if lines and not lines[-1].endswith(("\n", "\r")):
            lines[-1] += self.eol
            trailing_eol = False
        else:
            trailing_eol = True

        removed_below: list[int] = []
        for op in operations:
            if isinstance(op, DeleteLines):
                del lines[op.start : op.end + 1]
                removed_below.extend(range(op.start, op.end + 1))
                continue
            # map the pre-edit line through the deletions already applied
            removed_below.sort()
            shift = bisect.bisect_left(removed_below, op.line)
            lines.insert(op.line - shift, op.text + self.eol)

        if not trailing_eol and lines and lines[-1].endswith(self.eol):
            lines[-1] = lines[-1][: -len(self.eol)]

        self._lines = lines
        self._applied = True
        return True
