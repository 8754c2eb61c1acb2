# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Locate, classify and drive the external linting library."""

from __future__ import annotations

from .adapter import ADAPTERS, LegacyAdapter, LibraryAdapter, ModernAdapter, adapter_for
from .payloads import normalize_fix, parse_failure, parse_failures, parse_replacement
from .resolver import LibraryResolver, iter_ancestors
from .versioning import VersionResolver

__all__ = [
    "ADAPTERS",
    "LegacyAdapter",
    "LibraryAdapter",
    "LibraryResolver",
    "ModernAdapter",
    "VersionResolver",
    "adapter_for",
    "iter_ancestors",
    "normalize_fix",
    "parse_failure",
    "parse_failures",
    "parse_replacement",
]
