# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the library and configuration caches."""

from __future__ import annotations

from pathlib import Path

import pytest

from tslinter.cache import LintCache
from tslinter.errors import ConfigurationNotFoundError, LibraryNotFoundError
from tslinter.library.resolver import LibraryResolver
from tslinter.models import LibraryHandle
from tslinter.settings import ServerSettings

from stubs import CountingConfigurationResolver, StubAdapter, no_global_packages, write_library


def _cache(factory_calls: list[LibraryHandle], max_ascent: int = 256) -> tuple[LintCache, CountingConfigurationResolver]:
    settings = ServerSettings(max_ascent=max_ascent)
    configurations = CountingConfigurationResolver(settings)

    def factory(handle: LibraryHandle) -> StubAdapter:
        factory_calls.append(handle)
        return StubAdapter(handle)

    cache = LintCache(
        LibraryResolver(settings, runner=no_global_packages),
        configurations,
        adapter_factory=factory,
    )
    return cache, configurations


def test_sibling_files_share_one_configuration_walk(project: Path) -> None:
    handles: list[LibraryHandle] = []
    cache, configurations = _cache(handles)
    first, second = project / "src" / "a.ts", project / "src" / "b.ts"

    adapter = cache.library_for(first)
    config_a = cache.configuration_for(first, adapter)
    config_b = cache.configuration_for(second, adapter)

    assert config_a is config_b
    assert configurations.walks == [first]
    assert cache.cache_info().configuration_hits == 1


def test_library_is_resolved_once_per_file(project: Path) -> None:
    handles: list[LibraryHandle] = []
    cache, _ = _cache(handles)
    source = project / "src" / "a.ts"

    assert cache.library_for(source) is cache.library_for(source)
    info = cache.cache_info()
    assert info.library_hits == 1
    assert len(handles) == 1


def test_files_resolving_to_same_library_share_an_adapter(project: Path) -> None:
    handles: list[LibraryHandle] = []
    cache, _ = _cache(handles)

    first = cache.library_for(project / "src" / "a.ts")
    second = cache.library_for(project / "test" / "b.ts")

    assert first is second
    assert len(handles) == 1
    info = cache.cache_info()
    assert (info.libraries, info.library_paths) == (2, 1)


def test_configuration_change_clears_configurations_only(project: Path) -> None:
    handles: list[LibraryHandle] = []
    cache, configurations = _cache(handles)
    source = project / "src" / "a.ts"
    adapter = cache.library_for(source)
    before = cache.configuration_for(source, adapter)

    cache.clear_configurations()

    after = cache.configuration_for(source, adapter)
    assert after is not before
    assert len(configurations.walks) == 2
    assert cache.library_for(source) is adapter
    assert len(handles) == 1


def test_missing_configuration_is_not_cached(tmp_path: Path) -> None:
    write_library(tmp_path)
    handles: list[LibraryHandle] = []
    cache, configurations = _cache(handles, max_ascent=2)
    source = tmp_path / "main.ts"
    adapter = cache.library_for(source)

    for _ in range(2):
        with pytest.raises(ConfigurationNotFoundError):
            cache.configuration_for(source, adapter)

    assert len(configurations.walks) == 2
    assert cache.cache_info().configurations == 0


def test_missing_library_is_not_cached(tmp_path: Path) -> None:
    cache, _ = _cache([], max_ascent=2)
    source = tmp_path / "main.ts"

    with pytest.raises(LibraryNotFoundError):
        cache.library_for(source)

    write_library(tmp_path)
    assert cache.library_for(source).handle.path == (tmp_path / "node_modules" / "tslint").resolve()


def test_clear_resets_everything(project: Path) -> None:
    cache, _ = _cache([])
    source = project / "src" / "a.ts"
    cache.configuration_for(source, cache.library_for(source))

    cache.clear()

    info = cache.cache_info()
    assert (info.libraries, info.library_paths, info.configurations) == (0, 0, 0)
