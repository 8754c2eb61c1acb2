# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception taxonomy for lint orchestration failures.

Every error raised while servicing an editor request derives from
:class:`TslinterError` so request handlers can isolate failures to the request
that produced them.
"""

from __future__ import annotations

from pathlib import Path


class TslinterError(Exception):
    """Base class for errors surfaced to the editor as a failed lint request."""


class InvalidUriError(TslinterError):
    """Raised when a document URI does not use the ``file`` scheme."""

    def __init__(self, uri: str) -> None:
        super().__init__(f"The provided document URI {uri} is not a file.")
        self.uri = uri


class DocumentNotFoundError(TslinterError):
    """Raised when the document store has no open document for a URI."""

    def __init__(self, uri: str) -> None:
        super().__init__(f"Document {uri} is not open.")
        self.uri = uri


class LibraryNotFoundError(TslinterError):
    """Raised when no resolution strategy located the linting library."""

    def __init__(self, package_name: str, file_path: Path) -> None:
        super().__init__(f"Can't find {package_name} module for {file_path}.")
        self.package_name = package_name
        self.file_path = file_path


class ConfigurationNotFoundError(TslinterError):
    """Raised when the directory ascent reaches the root without a configuration file."""

    def __init__(self, config_filename: str, file_path: Path) -> None:
        super().__init__(f"No {config_filename} configuration file for {file_path}.")
        self.config_filename = config_filename
        self.file_path = file_path


class LibraryExecutionError(TslinterError):
    """Raised when the loaded linting library throws while linting or loading configuration."""

    def __init__(self, message: str, *, stderr: str | None = None) -> None:
        super().__init__(message)
        self.stderr = stderr


class BridgeProtocolError(LibraryExecutionError):
    """Raised when the node bridge produced output that is not a valid response."""


class SettingsError(TslinterError):
    """Raised when server settings cannot be parsed."""


__all__ = [
    "BridgeProtocolError",
    "ConfigurationNotFoundError",
    "DocumentNotFoundError",
    "InvalidUriError",
    "LibraryExecutionError",
    "LibraryNotFoundError",
    "SettingsError",
    "TslinterError",
]
