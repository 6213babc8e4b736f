"""Deferred range edits against an unmodified source buffer.

Rewrites never touch the parse tree. Each one is recorded as a
replacement of a byte range in the original source, and all of them
are applied in a single pass once the whole file has been visited, so
node offsets stay valid for the entire traversal.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

import logging
from dataclasses import dataclass

from tree_sitter import Node

from ..exceptions import TransformationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Edit:
    """Replace ``source[start:end]`` with ``text``. ``start == end`` inserts."""

    start: int
    end: int
    text: str

    def overlaps(self, other: "Edit") -> bool:
        # Two insertions at one offset, or an insertion at a range boundary, do not overlap.
        if self.start == self.end and other.start == other.end:
            return False
        return self.start < other.end and other.start < self.end

    def contains(self, start: int, end: int) -> bool:
        return self.start <= start and end <= self.end and self.start < self.end


class EditAccumulator:
    """Collects non-overlapping edits for one file and commits them together."""

    def __init__(self) -> None:
        self._edits: list[Edit] = []

    def __len__(self) -> int:
        return len(self._edits)

    @property
    def edits(self) -> list[Edit]:
        return list(self._edits)

    def covers(self, node: Node) -> bool:
        """True when ``node`` lies inside a range that is already being replaced."""
        return any(edit.contains(node.start_byte, node.end_byte) for edit in self._edits)

    def add_range(self, start: int, end: int, text: str) -> bool:
        """Queue a replacement; refuse it if it overlaps a queued edit.

        Returns:
            ``True`` when the edit was queued.
        """
        if start > end:
            raise TransformationError(f"Invalid edit range {start}..{end}")
        candidate = Edit(start, end, text)
        for existing in self._edits:
            if candidate.overlaps(existing):
                logger.debug(f"Refusing edit {start}..{end}: overlaps queued edit {existing.start}..{existing.end}")
                return False
        self._edits.append(candidate)
        return True

    def replace(self, node: Node, text: str) -> bool:
        return self.add_range(node.start_byte, node.end_byte, text)

    def insert_before(self, node: Node, text: str) -> bool:
        return self.add_range(node.start_byte, node.start_byte, text)

    def commit(self, source: bytes) -> str:
        """Apply every queued edit to ``source`` and decode the result."""
        ordered = sorted(enumerate(self._edits), key=lambda item: (item[1].start, item[1].end, item[0]))
        pieces: list[bytes] = []
        cursor = 0
        for _, edit in ordered:
            if edit.start < cursor:
                raise TransformationError(f"Overlapping edits at byte {edit.start}")
            pieces.append(source[cursor : edit.start])
            pieces.append(edit.text.encode("utf-8"))
            cursor = edit.end
        pieces.append(source[cursor:])
        return b"".join(pieces).decode("utf-8")
