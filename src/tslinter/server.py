# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Language server exposing the run and fix requests over stdio."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Final

from lsprotocol import types
from lsprotocol.converters import get_converter
from pygls.lsp.server import LanguageServer

from . import __version__
from .errors import SettingsError
from .logging import PACKAGE_LOGGER
from .models import FixResult
from .service import DocumentSnapshot, LintService
from .settings import ServerSettings, load_settings

LOGGER = logging.getLogger(__name__)

SERVER_NAME: Final[str] = "tslinter"
RUN_LINT_REQUEST: Final[str] = "textDocument/typescript/runtslint"
FIX_LINT_REQUEST: Final[str] = "textDocument/tslint/fixtslint"

_CONVERTER = get_converter()

# Marks records already delivered to the client as an Error message.
_CLIENT_NOTIFIED: Final[str] = "tslinter_client_notified"


class WorkspaceDocuments:
    """Document store backed by the documents the editor has opened."""

    def __init__(self, server: LanguageServer) -> None:
        self._server = server

    def get(self, uri: str) -> DocumentSnapshot | None:
        document = self._server.workspace.text_documents.get(uri)
        if document is None:
            return None
        return DocumentSnapshot(uri=uri, text=document.source, version=document.version or 0)


class ClientLogHandler(logging.Handler):
    """Mirror package log records to the editor's output channel."""

    def __init__(self, server: LanguageServer) -> None:
        super().__init__(level=logging.DEBUG)
        self._server = server
        self.setFormatter(logging.Formatter("%(name)s: %(message)s"))

    def emit(self, record: logging.LogRecord) -> None:
        if getattr(record, _CLIENT_NOTIFIED, False):
            return
        try:
            message = self.format(record)
            self._server.window_log_message(types.LogMessageParams(type=types.MessageType.Log, message=message))
        except Exception:  # noqa: BLE001
            self.handleError(record)


class TslinterServer(LanguageServer):
    """Language server owning one :class:`LintService` per configuration."""

    def __init__(self) -> None:
        super().__init__(SERVER_NAME, __version__)
        self._trace_handler: ClientLogHandler | None = None
        self.service = self._build_service(ServerSettings())

    def configure(self, settings: ServerSettings) -> None:
        """Replace the lint service, and its caches, with one built from *settings*."""

        self.service = self._build_service(settings)
        package_logger = logging.getLogger(PACKAGE_LOGGER)
        if settings.trace and self._trace_handler is None:
            self._trace_handler = ClientLogHandler(self)
            package_logger.addHandler(self._trace_handler)
            package_logger.setLevel(logging.DEBUG)
        elif not settings.trace and self._trace_handler is not None:
            package_logger.removeHandler(self._trace_handler)
            self._trace_handler = None

    def publish(self, uri: str, diagnostics: list[types.Diagnostic]) -> None:
        self.text_document_publish_diagnostics(types.PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics))

    def report_error(self, message: str) -> None:
        LOGGER.error(message, extra={_CLIENT_NOTIFIED: True})
        self.window_log_message(types.LogMessageParams(type=types.MessageType.Error, message=message))

    def _build_service(self, settings: ServerSettings) -> LintService:
        return LintService(
            WorkspaceDocuments(self),
            self.publish,
            settings=settings,
            report_error=self.report_error,
        )


def _field(params: object, *names: str) -> object:
    for name in names:
        if isinstance(params, Mapping):
            if name in params:
                return params[name]
        elif hasattr(params, name):
            return getattr(params, name)
    return None


def request_uri(params: object) -> str | None:
    """Extract ``textDocument.uri`` from raw or converted request params."""

    document = _field(params, "textDocument", "text_document")
    uri = _field(document, "uri") if document is not None else None
    return uri if isinstance(uri, str) else None


def request_rule_id(params: object) -> str | None:
    rule_id = _field(params, "ruleId", "rule_id")
    return rule_id if isinstance(rule_id, str) and rule_id else None


def serialize_fix_result(result: FixResult) -> dict[str, object]:
    """Return the wire form ``{documentVersion, edits, ruleId?}`` of *result*."""

    payload: dict[str, object] = {
        "documentVersion": result.document_version,
        "edits": [_CONVERTER.unstructure(edit, types.TextEdit) for edit in result.edits],
    }
    if result.rule_id is not None:
        payload["ruleId"] = result.rule_id
    return payload


server = TslinterServer()


@server.feature(types.INITIALIZE)
def initialize(ls: TslinterServer, params: types.InitializeParams) -> None:
    options = params.initialization_options
    try:
        ls.configure(load_settings(options if isinstance(options, Mapping) else None))
    except SettingsError as exc:
        ls.report_error(str(exc))


@server.feature(types.SHUTDOWN)
def shutdown(ls: TslinterServer, _params: object = None) -> None:
    ls.service.shutdown()


@server.feature(types.WORKSPACE_DID_CHANGE_WATCHED_FILES)
def did_change_watched_files(ls: TslinterServer, params: types.DidChangeWatchedFilesParams) -> None:
    ls.service.configuration_changed(change.uri for change in params.changes)


@server.feature(types.TEXT_DOCUMENT_DID_CLOSE)
def did_close(ls: TslinterServer, params: types.DidCloseTextDocumentParams) -> None:
    ls.service.document_closed(params.text_document.uri)


@server.feature(RUN_LINT_REQUEST)
@server.thread()
def run_lint_request(ls: TslinterServer, params: object) -> None:
    uri = request_uri(params)
    if uri is None:
        ls.report_error(f"Failed to run {ls.service.settings.package_name}. Missing document URI.")
        return
    ls.service.run_lint(uri)


@server.feature(FIX_LINT_REQUEST)
@server.thread()
def fix_lint_request(ls: TslinterServer, params: object) -> dict[str, object] | None:
    uri = request_uri(params)
    if uri is None:
        ls.report_error(f"Failed to fix {ls.service.settings.package_name} errors. Missing document URI.")
        return None
    result = ls.service.fix_lint(uri, rule_id=request_rule_id(params))
    return serialize_fix_result(result) if result is not None else None


def start(start_fn: Callable[[], None] | None = None) -> None:
    """Serve the language server protocol on stdio."""
    (start_fn or server.start_io)()


__all__ = [
    "FIX_LINT_REQUEST",
    "RUN_LINT_REQUEST",
    "TslinterServer",
    "WorkspaceDocuments",
    "request_rule_id",
    "request_uri",
    "serialize_fix_result",
    "server",
    "start",
]
