# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Discover the nearest configuration file by walking up the directory tree."""

from __future__ import annotations

import logging
from pathlib import Path

from .errors import ConfigurationNotFoundError
from .library.adapter import LibraryAdapter
from .library.resolver import iter_ancestors
from .models import Configuration
from .settings import ServerSettings

LOGGER = logging.getLogger(__name__)


class ConfigurationResolver:
    """Locate and load the configuration file that governs a source file."""

    def __init__(self, settings: ServerSettings | None = None) -> None:
        self._settings = settings or ServerSettings()

    def find(self, file_path: Path) -> Path | None:
        """Return the nearest configuration file at or above the file's directory.

        The walk stops at the filesystem root, at a directory already visited,
        or after ``max_ascent`` directories, whichever comes first.
        """

        filename = self._settings.config_filename
        for directory in iter_ancestors(file_path.parent, limit=self._settings.max_ascent):
            candidate = directory / filename
            if candidate.is_file():
                LOGGER.debug("using %s for %s", candidate, file_path)
                return candidate
        return None

    def resolve(self, file_path: Path, adapter: LibraryAdapter) -> Configuration:
        """Find the configuration for *file_path* and load it through *adapter*.

        Raises:
            ConfigurationNotFoundError: If no configuration file is reachable.
            LibraryExecutionError: If the library fails to load the file.
        """

        path = self.find(file_path)
        if path is None:
            raise ConfigurationNotFoundError(self._settings.config_filename, file_path)
        return adapter.load_configuration(path)


__all__ = ["ConfigurationResolver"]
