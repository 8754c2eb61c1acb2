# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Execute a diagnostics-only lint pass through a library adapter."""

from __future__ import annotations

import logging
from pathlib import Path

from .library.adapter import LibraryAdapter
from .models import Configuration, LintFailure

LOGGER = logging.getLogger(__name__)


def run_lint(
    file_path: Path,
    text: str,
    adapter: LibraryAdapter,
    configuration: Configuration,
) -> list[LintFailure]:
    """Lint *text* for *file_path* with fix mode disabled.

    Fixes are derived from the returned failures rather than by letting the
    library rewrite the file, so the same failure set feeds both diagnostics
    and edits.

    Args:
        file_path: Absolute path of the document.
        text: Snapshot of the document text.
        adapter: Adapter for the library resolved for the document.
        configuration: Configuration resolved for the document.

    Returns:
        list[LintFailure]: Failures exactly as the library reported them.

    Raises:
        LibraryExecutionError: If the library throws; never swallowed here.
    """

    failures = adapter.invoke(file_path, text, configuration, fix=False)
    LOGGER.debug("%s: %d failure(s) with %s", file_path, len(failures), configuration.path)
    return failures


__all__ = ["run_lint"]
