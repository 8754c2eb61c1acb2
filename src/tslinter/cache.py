# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Process-lifetime caches for resolved libraries and configurations.

Three maps are kept:

* file path to library adapter, so repeat requests skip resolution entirely;
* on-disk library path to library adapter, so files that resolve to the same
  package share one adapter and one generation check;
* directory to configuration, so sibling files reuse one directory ascent.

Configuration entries are cleared wholesale when any configuration file
changes. Library entries live until the process exits. Resolution happens
outside the lock; when two requests miss concurrently both resolve and the
last writer wins.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from threading import Lock

from .configuration import ConfigurationResolver
from .library.adapter import LibraryAdapter, adapter_for
from .library.resolver import LibraryResolver
from .models import Configuration, LibraryHandle

AdapterFactory = Callable[[LibraryHandle], LibraryAdapter]


@dataclass(frozen=True, slots=True)
class CacheInfo:
    """Snapshot of cache occupancy and hit counters.

    Attributes:
        libraries: Number of files with a cached library adapter.
        library_paths: Number of distinct on-disk libraries loaded.
        configurations: Number of directories with a cached configuration.
        library_hits: Library lookups answered from the per-file cache.
        configuration_hits: Configuration lookups answered from the cache.
    """

    libraries: int
    library_paths: int
    configurations: int
    library_hits: int
    configuration_hits: int


class LintCache:
    """Resolve-on-miss caches shared by every request handler."""

    def __init__(
        self,
        library_resolver: LibraryResolver,
        configuration_resolver: ConfigurationResolver,
        *,
        adapter_factory: AdapterFactory = adapter_for,
    ) -> None:
        self._library_resolver = library_resolver
        self._configuration_resolver = configuration_resolver
        self._adapter_factory = adapter_factory
        self._lock = Lock()
        self._file_libraries: dict[Path, LibraryAdapter] = {}
        self._path_libraries: dict[Path, LibraryAdapter] = {}
        self._configurations: dict[Path, Configuration] = {}
        self._library_hits = 0
        self._configuration_hits = 0

    def library_for(self, file_path: Path) -> LibraryAdapter:
        """Return the adapter for the library reachable from *file_path*.

        Raises:
            LibraryNotFoundError: If the library cannot be located.
        """

        with self._lock:
            cached = self._file_libraries.get(file_path)
            if cached is not None:
                self._library_hits += 1
                return cached
        package_dir, source = self._library_resolver.locate(file_path)
        with self._lock:
            adapter = self._path_libraries.get(package_dir)
        if adapter is None:
            adapter = self._adapter_factory(self._library_resolver.load(package_dir, source))
            with self._lock:
                self._path_libraries[package_dir] = adapter
        with self._lock:
            self._file_libraries[file_path] = adapter
        return adapter

    def configuration_for(self, file_path: Path, adapter: LibraryAdapter) -> Configuration:
        """Return the configuration governing *file_path*, walking the tree on a miss.

        Raises:
            ConfigurationNotFoundError: If no configuration file is reachable;
                nothing is cached in that case.
        """

        directory = file_path.parent
        with self._lock:
            cached = self._configurations.get(directory)
            if cached is not None:
                self._configuration_hits += 1
                return cached
        configuration = self._configuration_resolver.resolve(file_path, adapter)
        with self._lock:
            self._configurations[directory] = configuration
        return configuration

    def clear_configurations(self) -> None:
        """Drop every cached configuration; library entries are kept."""

        with self._lock:
            self._configurations.clear()

    def clear(self) -> None:
        """Drop every cached entry and reset hit counters."""

        with self._lock:
            self._file_libraries.clear()
            self._path_libraries.clear()
            self._configurations.clear()
            self._library_hits = 0
            self._configuration_hits = 0

    def cache_info(self) -> CacheInfo:
        with self._lock:
            return CacheInfo(
                libraries=len(self._file_libraries),
                library_paths=len(self._path_libraries),
                configurations=len(self._configurations),
                library_hits=self._library_hits,
                configuration_hits=self._configuration_hits,
            )


__all__ = ["CacheInfo", "LintCache"]
