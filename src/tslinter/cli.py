# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Command line entry point: serve the language server or lint files directly."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from lsprotocol.types import Diagnostic
from rich import box
from rich.table import Table

from .errors import LibraryExecutionError, SettingsError
from .fixes import apply_text_edits
from .logging import configure_logging, fail, get_console, info, ok, warn
from .service import DocumentSnapshot, LintService, uri_to_path
from .settings import load_settings
from .text import TextSnapshot

EXIT_FINDINGS = 1
EXIT_ERROR = 2

VERBOSE_OPTION = Annotated[bool, typer.Option("--verbose", "-v", help="Log resolution details to stderr.")]

app = typer.Typer(help="TSLint diagnostics and fixes for editors.", no_args_is_help=True)


class FileDocuments:
    """Document store reading files from disk; the version is the file's mtime in nanoseconds."""

    def get(self, uri: str) -> DocumentSnapshot | None:
        path = uri_to_path(uri)
        try:
            text = path.read_bytes().decode("utf-8")
            version = path.stat().st_mtime_ns
        except (OSError, UnicodeDecodeError):
            return None
        return DocumentSnapshot(uri=uri, text=text, version=version)


class _ErrorLog:
    def __init__(self) -> None:
        self.messages: list[str] = []

    def __call__(self, message: str) -> None:
        self.messages.append(message)
        fail(message)


def _build_service(errors: _ErrorLog, published: dict[str, list[Diagnostic]]) -> LintService:
    try:
        settings = load_settings()
    except SettingsError as exc:
        fail(str(exc))
        raise typer.Exit(code=EXIT_ERROR) from exc
    return LintService(
        FileDocuments(),
        published.__setitem__,
        settings=settings,
        report_error=errors,
    )


def _render(path: Path, diagnostics: list[Diagnostic]) -> Table:
    table = Table(title=str(path), box=box.SIMPLE)
    table.add_column("Line", justify="right")
    table.add_column("Col", justify="right")
    table.add_column("Rule")
    table.add_column("Message")
    for diagnostic in diagnostics:
        start = diagnostic.range.start
        table.add_row(str(start.line + 1), str(start.character + 1), str(diagnostic.code or ""), diagnostic.message)
    return table


@app.command("serve")
def serve(verbose: VERBOSE_OPTION = False) -> None:
    """Run the language server on stdio."""

    from .server import start

    configure_logging(verbose=verbose)
    start()


@app.command("check")
def check(
    paths: Annotated[list[Path], typer.Argument(help="Files to lint.", exists=True, dir_okay=False)],
    verbose: VERBOSE_OPTION = False,
) -> None:
    """Lint files and print their diagnostics."""

    configure_logging(verbose=verbose)
    errors = _ErrorLog()
    published: dict[str, list[Diagnostic]] = {}
    service = _build_service(errors, published)
    console = get_console()
    findings = 0
    for path in paths:
        uri = path.resolve().as_uri()
        try:
            service.run_lint(uri)
        except LibraryExecutionError as exc:
            if exc.stderr:
                fail(exc.stderr)
            continue
        diagnostics = published.get(uri, [])
        findings += len(diagnostics)
        if diagnostics:
            console.print(_render(path, diagnostics))
    if errors.messages:
        raise typer.Exit(code=EXIT_ERROR)
    if findings:
        warn(f"{findings} problem(s) found.")
        raise typer.Exit(code=EXIT_FINDINGS)
    ok("No problems found.")


@app.command("fix")
def fix(
    path: Annotated[Path, typer.Argument(help="File to fix.", exists=True, dir_okay=False)],
    write: Annotated[bool, typer.Option("--write", "-w", help="Apply the edits to the file.")] = False,
    rule: Annotated[str | None, typer.Option("--rule", help="Only apply fixes for this rule.")] = None,
    verbose: VERBOSE_OPTION = False,
) -> None:
    """Show or apply the fixes the linter suggests for a file."""

    configure_logging(verbose=verbose)
    errors = _ErrorLog()
    service = _build_service(errors, {})
    uri = path.resolve().as_uri()
    try:
        result = service.fix_lint(uri, rule_id=rule)
    except LibraryExecutionError:
        raise typer.Exit(code=EXIT_ERROR) from None
    if result is None or errors.messages:
        raise typer.Exit(code=EXIT_ERROR)
    if not result.edits:
        ok("No fixes available.")
        return
    if not write:
        for edit in result.edits:
            start, end = edit.range.start, edit.range.end
            info(f"{path}:{start.line + 1}:{start.character + 1}-{end.line + 1}:{end.character + 1} -> {edit.new_text!r}")
        return
    current = service.documents.get(uri)
    if current is None or not result.is_current(current.version):
        warn(f"Fixes for {path} are outdated and can't be applied.")
        raise typer.Exit(code=EXIT_FINDINGS)
    try:
        fixed = apply_text_edits(TextSnapshot(current.text), result.edits)
    except ValueError as exc:
        fail(f"Failed to apply fixes to {path}: {exc}")
        raise typer.Exit(code=EXIT_ERROR) from exc
    path.write_bytes(fixed.encode("utf-8"))
    ok(f"Applied {len(result.edits)} edit(s) to {path}.")


__all__ = ["FileDocuments", "app"]
