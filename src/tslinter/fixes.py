# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Synthesize editor text edits from the fixes attached to lint failures."""

from __future__ import annotations

from collections.abc import Iterable

from lsprotocol.types import Range, TextEdit

from .models import FixResult, LintFailure, Replacement
from .text import TextSnapshot


def replacement_to_edit(replacement: Replacement, snapshot: TextSnapshot) -> TextEdit:
    """Convert one offset-based replacement into a position-based edit."""

    return TextEdit(
        range=Range(
            start=snapshot.position_at(replacement.start),
            end=snapshot.position_at(replacement.end),
        ),
        new_text=replacement.text,
    )


def to_text_edits(failures: Iterable[LintFailure], snapshot: TextSnapshot) -> list[TextEdit]:
    """Return the edits for every fixable failure in failure order.

    Positions are computed against *snapshot*, the text that was linted, not
    whatever the editor buffer holds now. Edits from different failures are
    concatenated without sorting; overlapping fixes are passed through as-is
    and may conflict when applied.

    Args:
        failures: Failures returned by a lint pass over *snapshot*.
        snapshot: The linted text.

    Returns:
        list[TextEdit]: Edits ready for the editor.
    """

    edits: list[TextEdit] = []
    for failure in failures:
        if not failure.fix:
            continue
        edits.extend(replacement_to_edit(replacement, snapshot) for replacement in failure.fix)
    return edits


def synthesize_fixes(
    failures: Iterable[LintFailure],
    snapshot: TextSnapshot,
    document_version: int,
    *,
    rule_id: str | None = None,
) -> FixResult:
    """Bundle the edits for *failures* with the version captured at request time.

    When *rule_id* is given only failures of that rule contribute edits. The
    version is reported unmodified so the editor can refuse stale edits.
    """

    selected = [failure for failure in failures if rule_id is None or failure.rule_name == rule_id]
    return FixResult(
        document_version=document_version,
        edits=to_text_edits(selected, snapshot),
        rule_id=rule_id,
    )


def apply_text_edits(snapshot: TextSnapshot, edits: Iterable[TextEdit]) -> str:
    """Return the text of *snapshot* with *edits* applied.

    Edits are positioned against the snapshot text and applied together, the
    way an editor applies one edit batch. Insertions at the same offset keep
    their order.

    Raises:
        ValueError: If two edits overlap.
    """

    spans = sorted(
        (
            (snapshot.offset_at(edit.range.start), snapshot.offset_at(edit.range.end), edit.new_text)
            for edit in edits
        ),
        key=lambda span: (span[0], span[1]),
    )
    pieces: list[str] = []
    cursor = 0
    for start, end, new_text in spans:
        if start < cursor:
            raise ValueError(f"overlapping edits at offset {start}")
        pieces.append(snapshot.slice(cursor, start))
        pieces.append(new_text)
        cursor = max(cursor, end)
    pieces.append(snapshot.slice(cursor, snapshot.length))
    return "".join(pieces)


__all__ = ["apply_text_edits", "replacement_to_edit", "synthesize_fixes", "to_text_edits"]
