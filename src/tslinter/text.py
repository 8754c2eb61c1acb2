# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Offset and position arithmetic over a fixed snapshot of document text.

Offsets reported by the linting library count UTF-16 code units, which is also
the default character unit of editor positions, so every conversion here works
in UTF-16 units rather than Python code points.
"""

from __future__ import annotations

from bisect import bisect_right

from lsprotocol.types import Position


def _utf16_width(char: str) -> int:
    return 2 if ord(char) > 0xFFFF else 1


class TextSnapshot:
    """Immutable view of the text that was linted."""

    def __init__(self, text: str) -> None:
        self.text = text
        line_starts = [0]
        line_ends: list[int] = []
        units = 0
        length = len(text)
        for index, char in enumerate(text):
            units += _utf16_width(char)
            if char == "\n":
                line_ends.append(units - (2 if index > 0 and text[index - 1] == "\r" else 1))
                line_starts.append(units)
            elif char == "\r" and (index + 1 >= length or text[index + 1] != "\n"):
                line_ends.append(units - 1)
                line_starts.append(units)
        line_ends.append(units)
        self._line_starts = line_starts
        self._line_ends = line_ends
        self._length = units

    @property
    def length(self) -> int:
        """Length of the text in UTF-16 code units."""
        return self._length

    @property
    def line_count(self) -> int:
        return len(self._line_starts)

    def position_at(self, offset: int) -> Position:
        """Return the line/character position of *offset*, clamped to the text bounds."""

        offset = max(0, min(offset, self._length))
        line = bisect_right(self._line_starts, offset) - 1
        return Position(line=line, character=offset - self._line_starts[line])

    def offset_at(self, position: Position) -> int:
        """Return the offset of *position*.

        Characters past the end of a line clamp to the end of that line, before
        its line break, as editors do.
        """

        if position.line >= len(self._line_starts):
            return self._length
        return min(self._line_starts[position.line] + position.character, self._line_ends[position.line])

    def slice(self, start: int, end: int) -> str:
        """Return the text between two UTF-16 offsets."""

        encoded = self.text.encode("utf-16-le")
        return encoded[2 * start : 2 * end].decode("utf-16-le")


__all__ = ["TextSnapshot"]
