# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Locate the linting library on disk for a given source file."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Callable, Iterator, Mapping, MutableMapping
from pathlib import Path
from typing import Final

from ..errors import LibraryNotFoundError
from ..models import LibraryHandle, LibrarySource
from ..process_utils import SubprocessExecutionError, run_command
from ..settings import ServerSettings
from .versioning import VersionResolver

LOGGER = logging.getLogger(__name__)

NODE_MODULES: Final[str] = "node_modules"
PACKAGE_MANIFEST: Final[str] = "package.json"
DEFAULT_ENTRY_POINT: Final[str] = "index.js"

NODE_ENV_DEFAULTS: Final[dict[str, str]] = {
    "npm_config_fund": "false",
    "npm_config_audit": "false",
    "npm_config_progress": "false",
    "npm_config_update_notifier": "false",
}

CommandRunner = Callable[..., object]


def inject_node_defaults(env: MutableMapping[str, str] | None = None) -> None:
    """Apply quiet defaults for package-manager invocations."""
    env = env if env is not None else os.environ
    for key, value in NODE_ENV_DEFAULTS.items():
        env.setdefault(key, value)


def iter_ancestors(start: Path, *, limit: int | None = None) -> Iterator[Path]:
    """Yield *start* and each parent directory up to the filesystem root.

    Directories already visited end the walk, which guards against symlink
    cycles; *limit* caps the number of directories yielded.
    """

    seen: set[Path] = set()
    current = start
    while limit is None or len(seen) < limit:
        if current in seen:
            break
        seen.add(current)
        yield current
        if current.parent == current:
            break
        current = current.parent


class LibraryResolver:
    """Find the linting library for a file using three strategies in strict order.

    1. project-local ``node_modules`` directories from the file's directory upward;
    2. the global npm root;
    3. the global yarn directory.

    The first strategy that finds the package wins, even when a later strategy
    would have found a copy in a nearer directory.
    """

    def __init__(
        self,
        settings: ServerSettings | None = None,
        *,
        versions: VersionResolver | None = None,
        runner: CommandRunner = run_command,
    ) -> None:
        self._settings = settings or ServerSettings()
        self._versions = versions or VersionResolver()
        self._runner = runner
        self._global_roots: dict[LibrarySource, Path | None] = {}

    @property
    def package_name(self) -> str:
        return self._settings.package_name

    def resolve(self, file_path: Path) -> LibraryHandle:
        """Locate and load the library reachable from *file_path*."""

        package_dir, source = self.locate(file_path)
        return self.load(package_dir, source)

    def locate(self, file_path: Path) -> tuple[Path, LibrarySource]:
        """Return the package directory and the strategy that found it.

        Args:
            file_path: Absolute path of the file being linted.

        Returns:
            tuple[Path, LibrarySource]: Resolved package directory and its source label.

        Raises:
            LibraryNotFoundError: If every strategy is exhausted.
        """

        directory = file_path.parent
        strategies: tuple[tuple[LibrarySource, Callable[[Path], Path | None]], ...] = (
            ("project", self._find_project),
            ("npm", self._find_npm_global),
            ("yarn", self._find_yarn_global),
        )
        for source, finder in strategies:
            package_dir = finder(directory)
            if package_dir is not None:
                LOGGER.info("Found %s path: %s", self.package_name, package_dir)
                return package_dir, source
            LOGGER.debug("%s not found via %s resolution from %s", self.package_name, source, directory)
        raise LibraryNotFoundError(self.package_name, file_path)

    def load(self, package_dir: Path, source: LibrarySource) -> LibraryHandle:
        """Read the package manifest and classify the library's API generation once."""

        manifest = self._read_manifest(package_dir)
        raw_version = manifest.get("version")
        declared = raw_version.strip() if isinstance(raw_version, str) and raw_version.strip() else None
        version = self._versions.normalize(declared)
        main = manifest.get("main")
        entry_point = package_dir / (main if isinstance(main, str) and main else DEFAULT_ENTRY_POINT)
        # An unreadable version string is still a declared version, not a missing one.
        generation = self._versions.detect_generation(version if version is not None else declared)
        LOGGER.debug("Loaded %s %s from %s as %s API", self.package_name, version, package_dir, generation.value)
        return LibraryHandle(
            path=package_dir,
            entry_point=entry_point,
            version=version,
            source=source,
            generation=generation,
        )

    def _package_dir(self, modules_dir: Path) -> Path | None:
        candidate = modules_dir / self.package_name
        if (candidate / PACKAGE_MANIFEST).is_file():
            return candidate.resolve()
        return None

    def _find_project(self, directory: Path) -> Path | None:
        for ancestor in iter_ancestors(directory, limit=self._settings.max_ascent):
            if ancestor.name == NODE_MODULES:
                continue
            found = self._package_dir(ancestor / NODE_MODULES)
            if found is not None:
                return found
        return None

    def _find_npm_global(self, _directory: Path) -> Path | None:
        root = self._global_root("npm")
        return self._package_dir(root) if root is not None else None

    def _find_yarn_global(self, _directory: Path) -> Path | None:
        root = self._global_root("yarn")
        return self._package_dir(root) if root is not None else None

    def _global_root(self, source: LibrarySource) -> Path | None:
        if source not in self._global_roots:
            if source == "npm":
                self._global_roots[source] = self._query_npm_root()
            else:
                self._global_roots[source] = self._query_yarn_root()
        return self._global_roots[source]

    def _query_npm_root(self) -> Path | None:
        output = self._query(["npm", "root", "-g"])
        if output:
            return Path(output)
        prefix = self._query(["npm", "config", "get", "prefix"])
        if not prefix:
            return None
        if os.name == "nt":
            return Path(prefix) / NODE_MODULES
        return Path(prefix) / "lib" / NODE_MODULES

    def _query_yarn_root(self) -> Path | None:
        output = self._query(["yarn", "global", "dir"])
        return Path(output) / NODE_MODULES if output else None

    def _query(self, command: list[str]) -> str | None:
        env = os.environ.copy()
        inject_node_defaults(env)
        try:
            completed = self._runner(command, env=env)
        except (OSError, ValueError, SubprocessExecutionError) as exc:
            LOGGER.debug("%s unavailable: %s", command[0], exc)
            return None
        stdout = getattr(completed, "stdout", "") or ""
        lines = [line.strip() for line in stdout.splitlines() if line.strip()]
        return lines[-1] if lines else None

    @staticmethod
    def _read_manifest(package_dir: Path) -> Mapping[str, object]:
        try:
            payload = json.loads((package_dir / PACKAGE_MANIFEST).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            LOGGER.warning("unreadable manifest in %s: %s", package_dir, exc)
            return {}
        return payload if isinstance(payload, dict) else {}


__all__ = ["LibraryResolver", "inject_node_defaults", "iter_ancestors"]
