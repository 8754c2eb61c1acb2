# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Server settings and helpers for loading them from the editor and environment."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import SettingsError

DEFAULT_PACKAGE_NAME: Final[str] = "tslint"
DEFAULT_CONFIG_FILENAME: Final[str] = "tslint.json"
DEFAULT_SOURCE: Final[str] = "tslinter"
DEFAULT_MAX_ASCENT: Final[int] = 256

ENV_OVERRIDES: Final[dict[str, str]] = {
    "TSLINTER_NODE": "node_path",
    "TSLINTER_PACKAGE": "package_name",
    "TSLINTER_CONFIG_FILE": "config_filename",
    "TSLINTER_LINT_TIMEOUT": "lint_timeout",
}

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


class ServerSettings(BaseModel):
    """Tunable behaviour of the lint orchestration service."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    node_path: str = "node"
    package_name: str = DEFAULT_PACKAGE_NAME
    config_filename: str = DEFAULT_CONFIG_FILENAME
    max_ascent: int = Field(default=DEFAULT_MAX_ASCENT, ge=1)
    lint_timeout: float | None = Field(default=None, gt=0)
    trace: bool = False
    source: str = DEFAULT_SOURCE


def _snake_case(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def load_settings(
    options: Mapping[str, object] | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> ServerSettings:
    """Build settings from environment overrides and editor initialization options.

    Editor options win over environment variables. Keys may be camelCase, as
    sent by the editor, or snake_case.

    Args:
        options: ``initializationOptions`` payload supplied by the editor.
        environ: Environment mapping; defaults to :data:`os.environ`.

    Returns:
        ServerSettings: Validated settings.

    Raises:
        SettingsError: If any supplied value fails validation.
    """

    env = os.environ if environ is None else environ
    merged: dict[str, object] = {}
    for variable, field_name in ENV_OVERRIDES.items():
        value = env.get(variable)
        if value:
            merged[field_name] = value
    for key, value in (options or {}).items():
        merged[_snake_case(str(key))] = value
    try:
        return ServerSettings.model_validate(merged)
    except ValidationError as exc:
        raise SettingsError(f"invalid tslinter settings: {exc}") from exc


__all__ = [
    "DEFAULT_CONFIG_FILENAME",
    "DEFAULT_PACKAGE_NAME",
    "ENV_OVERRIDES",
    "ServerSettings",
    "load_settings",
]
