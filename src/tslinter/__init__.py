# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""TSLint diagnostics and fixes for editors through the language server protocol."""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
