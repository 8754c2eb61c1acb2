# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Helpers for classifying linting library versions into API generations."""

from __future__ import annotations

import re
from typing import Final

from packaging.version import InvalidVersion, Version

from ..models import ApiGeneration

# Versions without a readable manifest predate the modern API.
FALLBACK_VERSION: Final[str] = "1.0.0"
LAST_LEGACY_MAJOR: Final[int] = 3


class VersionResolver:
    """Normalise library version strings and map them onto API generations."""

    VERSION_PATTERN = re.compile(r"(\d+(?:\.\d+)+)")

    def normalize(self, raw: str | None) -> str | None:
        """Return the dotted version embedded in *raw*, or ``None`` when absent or invalid."""

        if not raw:
            return None
        match = self.VERSION_PATTERN.search(raw)
        candidate = match.group(1) if match else raw.strip()
        try:
            Version(candidate)
        except InvalidVersion:
            return None
        return candidate

    def detect_generation(self, version: str | None) -> ApiGeneration:
        """Classify *version* as ``legacy`` (``<= 3.x``) or ``modern``.

        A missing version counts as a pre-modern release. A version that cannot
        be parsed never satisfies the ``<= 3.x`` range and is treated as modern.

        Args:
            version: Version string read from the library manifest.

        Returns:
            ApiGeneration: Generation whose adapter should drive the library.
        """

        candidate = version or FALLBACK_VERSION
        try:
            parsed = Version(candidate)
        except InvalidVersion:
            return ApiGeneration.MODERN
        if parsed.major <= LAST_LEGACY_MAJOR:
            return ApiGeneration.LEGACY
        return ApiGeneration.MODERN


__all__ = ["FALLBACK_VERSION", "VersionResolver"]
