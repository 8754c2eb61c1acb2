# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Uniform invocation contract over the two incompatible library API shapes.

The library is JavaScript, so each call runs a short node bridge script that
``require``s the resolved package, performs the generation-specific calls and
writes a JSON response to stdout. The request travels on stdin::

    {"library": "<package dir>", "action": "lint" | "loadConfiguration", ...}

The response is ``{"ok": true, "result": ...}`` or
``{"ok": false, "error": "<message>", "stack": "<stack>"}``.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import ClassVar, Final

from ..errors import BridgeProtocolError, LibraryExecutionError
from ..models import ApiGeneration, Configuration, LibraryHandle, LintFailure
from ..process_utils import SubprocessExecutionError, run_command
from ..settings import ServerSettings
from .payloads import parse_failures

LOGGER = logging.getLogger(__name__)

FORMATTER: Final[str] = "json"

_BRIDGE_PRELUDE: Final[str] = r"""
function plain(key, value) {
  if (value instanceof Map) {
    const out = {};
    value.forEach((v, k) => { out[k] = v; });
    return out;
  }
  if (value instanceof Set) {
    return Array.from(value);
  }
  return value;
}
function serializeFailure(failure) {
  const fix = typeof failure.getFix === "function" ? failure.getFix() : undefined;
  return {
    message: failure.getFailure(),
    ruleName: failure.getRuleName(),
    start: failure.getStartPosition().toJson(),
    end: failure.getEndPosition().toJson(),
    fix: fix && fix.innerReplacements
      ? { ruleName: fix.innerRuleName, replacements: fix.innerReplacements }
      : fix,
  };
}
const chunks = [];
process.stdin.on("data", (chunk) => chunks.push(chunk));
process.stdin.on("end", () => {
  let response;
  try {
    const request = JSON.parse(Buffer.concat(chunks).toString("utf8"));
    const library = require(request.library);
    response = { ok: true, result: actions[request.action](library, request) };
  } catch (error) {
    response = {
      ok: false,
      error: String((error && error.message) || error),
      stack: error && error.stack ? String(error.stack) : null,
    };
  }
  process.stdout.write(JSON.stringify(response, plain));
});
"""

_MODERN_ACTIONS: Final[str] = r"""
function loadConfiguration(library, path) {
  if (library.Configuration && library.Configuration.loadConfigurationFromPath) {
    return library.Configuration.loadConfigurationFromPath(path);
  }
  return library.Linter.loadConfigurationFromPath(path);
}
const actions = {
  loadConfiguration: (library, request) => loadConfiguration(library, request.configuration),
  lint: (library, request) => {
    const configuration = loadConfiguration(library, request.configuration);
    const linter = new library.Linter(request.options);
    linter.lint(request.filePath, request.text, configuration);
    return linter.getResult().failures.map(serializeFailure);
  },
};
"""

_LEGACY_ACTIONS: Final[str] = r"""
const actions = {
  loadConfiguration: (library, request) => library.loadConfigurationFromPath(request.configuration),
  lint: (library, request) => {
    const options = Object.assign({}, request.options, {
      configuration: library.loadConfigurationFromPath(request.options.configuration),
    });
    const linter = new library(request.filePath, request.text, options);
    return linter.lint().failures.map(serializeFailure);
  },
};
"""

CommandRunner = Callable[..., object]


class LibraryAdapter(ABC):
    """Strategy object driving one API generation of the linting library."""

    generation: ClassVar[ApiGeneration]
    actions_script: ClassVar[str]

    def __init__(
        self,
        handle: LibraryHandle,
        settings: ServerSettings | None = None,
        *,
        runner: CommandRunner = run_command,
    ) -> None:
        self.handle = handle
        self._settings = settings or ServerSettings()
        self._runner = runner

    @property
    def script(self) -> str:
        """Return the node bridge program for this generation."""
        return self.actions_script + _BRIDGE_PRELUDE

    def invoke(
        self,
        file_path: Path,
        text: str,
        configuration: Configuration,
        *,
        fix: bool = False,
    ) -> list[LintFailure]:
        """Lint *text* as the contents of *file_path* and return its failures.

        Args:
            file_path: Absolute path of the document being linted.
            text: Document text snapshot to lint.
            configuration: Configuration resolved for the document.
            fix: Library fix-mode flag; diagnostics-only callers pass ``False``.

        Returns:
            list[LintFailure]: Failures in the order the library reported them.

        Raises:
            LibraryExecutionError: If the library throws or the bridge misbehaves.
        """

        request = {
            "filePath": str(file_path),
            "text": text,
            **self._lint_request(configuration, fix=fix),
        }
        result = self._call("lint", request, cwd=file_path.parent)
        return parse_failures(result)

    def load_configuration(self, path: Path) -> Configuration:
        """Load the configuration file at *path* through the library's own loader."""

        result = self._call("loadConfiguration", {"configuration": str(path)}, cwd=path.parent)
        if result is None:
            result = {}
        if not isinstance(result, Mapping):
            raise BridgeProtocolError(f"configuration loader returned {type(result).__name__}")
        return Configuration(path=path, directory=path.parent, data=dict(result))

    @abstractmethod
    def _lint_request(self, configuration: Configuration, *, fix: bool) -> dict[str, object]:
        """Return the generation-specific part of a lint request."""

    def _call(self, action: str, request: Mapping[str, object], *, cwd: Path) -> object:
        payload = json.dumps({"library": str(self.handle.path), "action": action, **request})
        LOGGER.debug("bridge %s via %s (%s API)", action, self.handle.path, self.generation.value)
        try:
            completed = self._runner(
                [self._settings.node_path, "-e", self.script],
                cwd=cwd,
                input_text=payload,
                timeout=self._settings.lint_timeout,
            )
        except SubprocessExecutionError as exc:
            raise LibraryExecutionError(
                f"{self._settings.package_name} bridge exited with status {exc.returncode}",
                stderr=exc.stderr,
            ) from exc
        except (OSError, ValueError) as exc:
            raise LibraryExecutionError(f"unable to start node: {exc}") from exc
        stdout = getattr(completed, "stdout", "") or ""
        try:
            response = json.loads(stdout)
        except json.JSONDecodeError as exc:
            raise BridgeProtocolError(
                f"{self._settings.package_name} bridge returned invalid JSON",
                stderr=getattr(completed, "stderr", None),
            ) from exc
        if not isinstance(response, Mapping):
            raise BridgeProtocolError("bridge response must be an object")
        if not response.get("ok"):
            stack = response.get("stack")
            raise LibraryExecutionError(
                str(response.get("error") or f"{self._settings.package_name} failed"),
                stderr=str(stack) if stack else None,
            )
        return response.get("result")


class ModernAdapter(LibraryAdapter):
    """``Linter`` class API: construct with options, lint, then collect results."""

    generation = ApiGeneration.MODERN
    actions_script = _MODERN_ACTIONS

    def _lint_request(self, configuration: Configuration, *, fix: bool) -> dict[str, object]:
        return {
            "options": {"formatter": FORMATTER, "fix": fix},
            "configuration": str(configuration.path),
        }


class LegacyAdapter(LibraryAdapter):
    """Single-class API: configuration rides in the options record of the constructor."""

    generation = ApiGeneration.LEGACY
    actions_script = _LEGACY_ACTIONS

    def _lint_request(self, configuration: Configuration, *, fix: bool) -> dict[str, object]:
        return {
            "options": {"formatter": FORMATTER, "fix": fix, "configuration": str(configuration.path)},
        }


ADAPTERS: Final[dict[ApiGeneration, type[LibraryAdapter]]] = {
    ApiGeneration.LEGACY: LegacyAdapter,
    ApiGeneration.MODERN: ModernAdapter,
}


def adapter_for(
    handle: LibraryHandle,
    settings: ServerSettings | None = None,
    *,
    runner: CommandRunner = run_command,
) -> LibraryAdapter:
    """Return the adapter strategy matching the generation recorded on *handle*."""

    return ADAPTERS[handle.generation](handle, settings, runner=runner)


__all__ = [
    "ADAPTERS",
    "LegacyAdapter",
    "LibraryAdapter",
    "ModernAdapter",
    "adapter_for",
]
