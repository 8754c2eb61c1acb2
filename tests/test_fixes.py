# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for building and applying fix edits."""

from __future__ import annotations

import pytest
from lsprotocol.types import Position, Range, TextEdit

from tslinter.fixes import apply_text_edits, synthesize_fixes, to_text_edits
from tslinter.models import Replacement
from tslinter.text import TextSnapshot

from stubs import VAR_SOURCE, make_failure, var_failure


def test_var_fix_becomes_let_edit() -> None:
    result = synthesize_fixes([var_failure()], TextSnapshot(VAR_SOURCE), 3)

    assert result.document_version == 3
    assert result.edits == [
        TextEdit(range=Range(start=Position(line=0, character=0), end=Position(line=0, character=3)), new_text="let"),
    ]
    assert apply_text_edits(TextSnapshot(VAR_SOURCE), result.edits) == "let x = 1;"


def test_failures_without_fix_contribute_nothing() -> None:
    failures = [make_failure(0, 3), make_failure(9, 10, rule_name="semicolon", fix=())]

    assert to_text_edits(failures, TextSnapshot(VAR_SOURCE)) == []


def test_edits_follow_failure_then_replacement_order() -> None:
    text = "var a = 1\nvar b = 2"
    snapshot = TextSnapshot(text)
    failures = [
        make_failure(
            10,
            13,
            fix=(Replacement(start=10, end=13, text="let"), Replacement(start=19, end=19, text=";")),
            line=1,
        ),
        make_failure(0, 3, fix=(Replacement(start=0, end=3, text="const"),)),
    ]

    edits = to_text_edits(failures, snapshot)

    assert [edit.new_text for edit in edits] == ["let", ";", "const"]
    assert edits[1].range.start == Position(line=1, character=9)
    assert apply_text_edits(snapshot, edits) == "const a = 1\nlet b = 2;"


def test_overlapping_fixes_are_passed_through() -> None:
    failures = [
        make_failure(0, 3, fix=(Replacement(start=0, end=3, text="let"),)),
        make_failure(0, 5, rule_name="prefer-const", fix=(Replacement(start=0, end=5, text="const x"),)),
    ]
    edits = to_text_edits(failures, TextSnapshot(VAR_SOURCE))

    assert len(edits) == 2
    with pytest.raises(ValueError, match="overlapping"):
        apply_text_edits(TextSnapshot(VAR_SOURCE), edits)


def test_rule_filter_keeps_matching_failures_only() -> None:
    failures = [
        var_failure(),
        make_failure(9, 10, rule_name="semicolon", fix=(Replacement(start=9, end=10, text=""),)),
    ]

    result = synthesize_fixes(failures, TextSnapshot(VAR_SOURCE), 1, rule_id="semicolon")

    assert result.rule_id == "semicolon"
    assert [edit.new_text for edit in result.edits] == [""]


def test_edits_use_positions_of_linted_text() -> None:
    snapshot = TextSnapshot("// 😀\nvar x;")
    failure = make_failure(6, 9, fix=(Replacement(start=6, end=9, text="let"),), line=1)

    (edit,) = to_text_edits([failure], snapshot)

    assert edit.range.start == Position(line=1, character=0)
    assert apply_text_edits(snapshot, [edit]) == "// 😀\nlet x;"


def test_is_current_compares_versions() -> None:
    result = synthesize_fixes([var_failure()], TextSnapshot(VAR_SOURCE), 4)

    assert result.is_current(4)
    assert not result.is_current(5)
