# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Stubs standing in for the node bridge, the document store and the filesystem walk."""

from __future__ import annotations

import json
from pathlib import Path

from tslinter.cache import LintCache
from tslinter.configuration import ConfigurationResolver
from tslinter.library.adapter import LibraryAdapter
from tslinter.library.resolver import LibraryResolver
from tslinter.models import ApiGeneration, Configuration, LibraryHandle, LintFailure, Replacement, SourcePosition
from tslinter.service import DocumentSnapshot, LintService
from tslinter.settings import ServerSettings

VAR_SOURCE = "var x = 1;"


def make_handle(path: Path = Path("/libs/node_modules/tslint"), version: str | None = "5.20.1") -> LibraryHandle:
    return LibraryHandle(
        path=path,
        entry_point=path / "lib" / "index.js",
        version=version,
        source="project",
        generation=ApiGeneration.MODERN,
    )


def make_failure(
    start: int,
    end: int,
    *,
    message: str = "Forbidden 'var' keyword, use 'let' or 'const' instead",
    rule_name: str | None = "no-var-keyword",
    fix: tuple[Replacement, ...] | None = None,
    line: int = 0,
) -> LintFailure:
    return LintFailure(
        message=message,
        rule_name=rule_name,
        start=SourcePosition(offset=start, line=line, character=start),
        end=SourcePosition(offset=end, line=line, character=end),
        fix=fix,
    )


def var_failure() -> LintFailure:
    return make_failure(0, 3, fix=(Replacement(start=0, end=3, text="let"),))


def write_library(root: Path, version: str | None = "5.20.1") -> Path:
    package_dir = root / "node_modules" / "tslint"
    package_dir.mkdir(parents=True, exist_ok=True)
    manifest: dict[str, str] = {"name": "tslint", "main": "lib/index.js"}
    if version is not None:
        manifest["version"] = version
    (package_dir / "package.json").write_text(json.dumps(manifest), encoding="utf-8")
    return package_dir


def no_global_packages(args, **_kwargs):  # noqa: ANN001
    raise FileNotFoundError(f"Executable '{args[0]}' was not found on PATH")


class StubAdapter(LibraryAdapter):
    """Adapter returning canned failures instead of running node."""

    generation = ApiGeneration.MODERN
    actions_script = ""

    def __init__(
        self,
        handle: LibraryHandle | None = None,
        failures: list[LintFailure] | None = None,
        error: Exception | None = None,
    ) -> None:
        super().__init__(handle or make_handle())
        self.failures = list(failures or [])
        self.error = error
        self.lint_calls: list[tuple[Path, str, Configuration, bool]] = []
        self.loaded_configurations: list[Path] = []

    def _lint_request(self, configuration: Configuration, *, fix: bool) -> dict[str, object]:
        return {}

    def invoke(self, file_path: Path, text: str, configuration: Configuration, *, fix: bool = False) -> list[LintFailure]:
        self.lint_calls.append((file_path, text, configuration, fix))
        if self.error is not None:
            raise self.error
        return list(self.failures)

    def load_configuration(self, path: Path) -> Configuration:
        self.loaded_configurations.append(path)
        return Configuration(path=path, directory=path.parent, data={"rules": {"no-var-keyword": True}})


class CountingConfigurationResolver(ConfigurationResolver):
    """Configuration resolver recording every directory walk."""

    def __init__(self, settings: ServerSettings | None = None) -> None:
        super().__init__(settings)
        self.walks: list[Path] = []

    def find(self, file_path: Path) -> Path | None:
        self.walks.append(file_path)
        return super().find(file_path)


class MemoryDocuments:
    """Document store holding text and versions in memory."""

    def __init__(self) -> None:
        self._documents: dict[str, DocumentSnapshot] = {}

    def open(self, path: Path, text: str, version: int = 1) -> str:
        uri = path.as_uri()
        self._documents[uri] = DocumentSnapshot(uri=uri, text=text, version=version)
        return uri

    def edit(self, uri: str, text: str) -> None:
        current = self._documents[uri]
        self._documents[uri] = DocumentSnapshot(uri=uri, text=text, version=current.version + 1)

    def get(self, uri: str) -> DocumentSnapshot | None:
        return self._documents.get(uri)


class Harness:
    """Lint service wired to stubs, with everything it publishes and reports recorded."""

    def __init__(self, root: Path, adapter: StubAdapter) -> None:
        self.root = root
        self.adapter = adapter
        self.settings = ServerSettings()
        self.documents = MemoryDocuments()
        self.published: list[tuple[str, list]] = []
        self.errors: list[str] = []
        self.configurations = CountingConfigurationResolver(self.settings)
        self.cache = LintCache(
            LibraryResolver(self.settings, runner=no_global_packages),
            self.configurations,
            adapter_factory=lambda _handle: adapter,
        )
        self.service = LintService(
            self.documents,
            lambda uri, diagnostics: self.published.append((uri, diagnostics)),
            settings=self.settings,
            cache=self.cache,
            report_error=self.errors.append,
        )
