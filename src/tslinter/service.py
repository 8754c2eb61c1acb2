# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Request handling shared by the language server and the command line.

:class:`LintService` validates document URIs, resolves the library and the
configuration through :class:`~tslinter.cache.LintCache`, runs the linter and
hands the failures to the diagnostic mapper or the fix synthesizer. Failures
are isolated to the request that produced them.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Protocol
from urllib.parse import urlparse
from urllib.request import url2pathname

from lsprotocol.types import Diagnostic

from .cache import LintCache
from .configuration import ConfigurationResolver
from .diagnostics import to_diagnostics
from .errors import DocumentNotFoundError, InvalidUriError, LibraryExecutionError, TslinterError
from .fixes import synthesize_fixes
from .library.adapter import adapter_for
from .library.resolver import LibraryResolver
from .models import FixResult, LintFailure
from .runner import run_lint
from .settings import ServerSettings
from .text import TextSnapshot

LOGGER = logging.getLogger(__name__)

FILE_SCHEME = "file"

DiagnosticsPublisher = Callable[[str, list[Diagnostic]], None]
ErrorReporter = Callable[[str], None]


@dataclass(frozen=True, slots=True)
class DocumentSnapshot:
    """Text and version of an open document at the moment it was read."""

    uri: str
    text: str
    version: int


class DocumentStore(Protocol):
    """Source of the current text and version of open documents."""

    def get(self, uri: str) -> DocumentSnapshot | None:
        """Return the document for *uri*, or ``None`` when it is not open."""


def uri_to_path(uri: str) -> Path:
    """Return the local filesystem path for a ``file`` URI.

    Raises:
        InvalidUriError: If *uri* uses any other scheme.
    """

    parsed = urlparse(uri)
    if parsed.scheme != FILE_SCHEME:
        raise InvalidUriError(uri)
    path = url2pathname(parsed.path)
    if parsed.netloc:
        path = f"//{parsed.netloc}{path}"
    return Path(path)


def _log_reporter(message: str) -> None:
    LOGGER.error(message)


class LintService:
    """Orchestrate lint runs and fix requests for documents."""

    def __init__(
        self,
        documents: DocumentStore,
        publish: DiagnosticsPublisher,
        *,
        settings: ServerSettings | None = None,
        cache: LintCache | None = None,
        report_error: ErrorReporter | None = None,
    ) -> None:
        self.settings = settings or ServerSettings()
        self.documents = documents
        self._publish = publish
        self._report_error = report_error or _log_reporter
        self.cache = cache or LintCache(
            LibraryResolver(self.settings),
            ConfigurationResolver(self.settings),
            adapter_factory=partial(adapter_for, settings=self.settings),
        )

    def lint_document(self, uri: str) -> tuple[DocumentSnapshot, list[LintFailure]]:
        """Lint the current text of *uri* and return the snapshot with its failures.

        Raises:
            InvalidUriError: If *uri* is not a ``file`` URI.
            DocumentNotFoundError: If the document is not open.
            LibraryNotFoundError: If the library cannot be located.
            ConfigurationNotFoundError: If no configuration file is reachable.
            LibraryExecutionError: If the library throws.
        """

        file_path = uri_to_path(uri)
        document = self.documents.get(uri)
        if document is None:
            raise DocumentNotFoundError(uri)
        adapter = self.cache.library_for(file_path)
        configuration = self.cache.configuration_for(file_path, adapter)
        return document, run_lint(file_path, document.text, adapter, configuration)

    def run_lint(self, uri: str) -> list[Diagnostic] | None:
        """Lint *uri* and publish its diagnostics.

        Resolution failures publish an empty list so no stale or partial
        diagnostics remain. A non-file URI publishes nothing. Library crashes
        are published as an empty list and then re-raised to fail the request.

        Returns:
            list[Diagnostic] | None: Published diagnostics, ``None`` when nothing was published.
        """

        try:
            _document, failures = self.lint_document(uri)
        except InvalidUriError as exc:
            self._report(f"Failed to run {self.settings.package_name}. {exc}")
            return None
        except LibraryExecutionError as exc:
            self._report(f"Failed to run {self.settings.package_name}. {exc}")
            self._publish(uri, [])
            raise
        except TslinterError as exc:
            self._report(f"Failed to run {self.settings.package_name}. {exc}")
            self._publish(uri, [])
            return []
        diagnostics = to_diagnostics(failures, source=self.settings.source)
        self._publish(uri, diagnostics)
        return diagnostics

    def fix_lint(self, uri: str, *, rule_id: str | None = None) -> FixResult | None:
        """Compute the fix edits for *uri* at its current version.

        Returns:
            FixResult | None: Edits tagged with the version read before linting;
            empty edits when the library or configuration cannot be resolved;
            ``None`` for a non-file URI or a document that is not open.

        Raises:
            LibraryExecutionError: If the library throws.
        """

        try:
            file_path = uri_to_path(uri)
        except InvalidUriError as exc:
            self._report(f"Failed to fix {self.settings.package_name} errors. {exc}")
            return None
        document = self.documents.get(uri)
        if document is None:
            self._report(f"Failed to fix {self.settings.package_name} errors. {DocumentNotFoundError(uri)}")
            return None
        try:
            adapter = self.cache.library_for(file_path)
            configuration = self.cache.configuration_for(file_path, adapter)
            failures = run_lint(file_path, document.text, adapter, configuration)
        except LibraryExecutionError as exc:
            self._report(f"Failed to fix {self.settings.package_name} errors. {exc}")
            raise
        except TslinterError as exc:
            self._report(f"Failed to fix {self.settings.package_name} errors. {exc}")
            return FixResult(document_version=document.version, rule_id=rule_id)
        return synthesize_fixes(failures, TextSnapshot(document.text), document.version, rule_id=rule_id)

    def configuration_changed(self, uris: Iterable[str]) -> None:
        """Forget every cached configuration after configuration files changed."""

        self.cache.clear_configurations()
        for uri in uris:
            LOGGER.info("Detect %s file change %s", self.settings.config_filename, uri)

    def document_closed(self, uri: str) -> None:
        """Clear the diagnostics shown for a closed document."""

        self._publish(uri, [])

    def shutdown(self) -> None:
        self.cache.clear()

    def _report(self, message: str) -> None:
        self._report_error(message)


__all__ = [
    "DiagnosticsPublisher",
    "DocumentSnapshot",
    "DocumentStore",
    "ErrorReporter",
    "LintService",
    "uri_to_path",
]
