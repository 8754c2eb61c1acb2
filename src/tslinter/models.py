# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core data models shared across the tslinter package."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Literal

from lsprotocol.types import TextEdit
from pydantic import BaseModel, ConfigDict, Field, model_validator

LibrarySource = Literal["project", "npm", "yarn"]


class ApiGeneration(str, Enum):
    """API shape exposed by a loaded linting library."""

    LEGACY = "legacy"
    MODERN = "modern"


class LibraryHandle(BaseModel):
    """Loaded linting library tagged with the API generation detected at load time."""

    model_config = ConfigDict(frozen=True)

    path: Path
    entry_point: Path
    version: str | None = None
    source: LibrarySource
    generation: ApiGeneration


class Configuration(BaseModel):
    """Parsed rule set loaded from the nearest configuration file."""

    model_config = ConfigDict(frozen=True)

    path: Path
    directory: Path
    data: dict[str, Any] = Field(default_factory=dict)


class SourcePosition(BaseModel):
    """Offset into the linted text with the library-resolved line and character."""

    model_config = ConfigDict(frozen=True)

    offset: int = Field(ge=0)
    line: int = Field(ge=0)
    character: int = Field(ge=0)


class Replacement(BaseModel):
    """Contiguous ``[start, end)`` span of the original text and its substitute."""

    model_config = ConfigDict(frozen=True)

    start: int = Field(ge=0)
    end: int = Field(ge=0)
    text: str = ""

    @model_validator(mode="after")
    def _check_span(self) -> Replacement:
        """Reject spans whose end precedes their start."""
        if self.end < self.start:
            raise ValueError(f"replacement end {self.end} precedes start {self.start}")
        return self

    @property
    def length(self) -> int:
        return self.end - self.start


class LintFailure(BaseModel):
    """Single rule violation reported by the linting library.

    ``fix`` is ``None`` when the rule offers no fix; otherwise it holds the
    canonical, ordered replacement list regardless of the shape the library
    reported it in.
    """

    model_config = ConfigDict(frozen=True)

    message: str
    rule_name: str | None = None
    start: SourcePosition
    end: SourcePosition
    fix: tuple[Replacement, ...] | None = None


class FixResult(BaseModel):
    """Edits synthesized for one document at the version captured at request time."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    document_version: int
    edits: list[TextEdit] = Field(default_factory=list)
    rule_id: str | None = None

    def is_current(self, version: int) -> bool:
        """Return ``True`` when *version* still matches the version the edits were computed for."""
        return self.document_version == version


__all__ = [
    "ApiGeneration",
    "Configuration",
    "FixResult",
    "LibraryHandle",
    "LibrarySource",
    "LintFailure",
    "Replacement",
    "SourcePosition",
]
