# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Map lint failures onto editor diagnostics."""

from __future__ import annotations

from collections.abc import Iterable

from lsprotocol.types import Diagnostic, DiagnosticSeverity, Position, Range

from .models import LintFailure
from .settings import DEFAULT_SOURCE


def format_message(failure: LintFailure) -> str:
    """Return ``"<message> (<rule>)"`` or the bare message when the rule is unknown."""
    if failure.rule_name:
        return f"{failure.message} ({failure.rule_name})"
    return failure.message


def make_diagnostic(failure: LintFailure, *, source: str = DEFAULT_SOURCE) -> Diagnostic:
    # Every failure is reported as a warning.
    return Diagnostic(
        range=Range(
            start=Position(line=failure.start.line, character=failure.start.character),
            end=Position(line=failure.end.line, character=failure.end.character),
        ),
        message=format_message(failure),
        severity=DiagnosticSeverity.Warning,
        code=failure.rule_name,
        source=source,
    )


def to_diagnostics(failures: Iterable[LintFailure], *, source: str = DEFAULT_SOURCE) -> list[Diagnostic]:
    """Convert *failures* to diagnostics, one per failure, in the same order."""
    return [make_diagnostic(failure, source=source) for failure in failures]


__all__ = ["format_message", "make_diagnostic", "to_diagnostics"]
