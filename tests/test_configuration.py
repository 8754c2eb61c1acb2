# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for configuration file discovery."""

from __future__ import annotations

from pathlib import Path

import pytest

from tslinter.configuration import ConfigurationResolver
from tslinter.errors import ConfigurationNotFoundError
from tslinter.settings import ServerSettings

from stubs import StubAdapter


def test_find_returns_nearest_configuration(tmp_path: Path) -> None:
    (tmp_path / "tslint.json").write_text("{}", encoding="utf-8")
    nested = tmp_path / "packages" / "app"
    nested.mkdir(parents=True)
    (nested / "tslint.json").write_text("{}", encoding="utf-8")
    source = nested / "src" / "main.ts"
    source.parent.mkdir()

    assert ConfigurationResolver().find(source) == nested / "tslint.json"


def test_find_checks_the_file_directory_first(tmp_path: Path) -> None:
    (tmp_path / "tslint.json").write_text("{}", encoding="utf-8")

    assert ConfigurationResolver().find(tmp_path / "main.ts") == tmp_path / "tslint.json"


def test_directory_named_like_configuration_is_ignored(tmp_path: Path) -> None:
    (tmp_path / "tslint.json").mkdir()

    resolver = ConfigurationResolver(ServerSettings(max_ascent=1))

    assert resolver.find(tmp_path / "main.ts") is None


def test_custom_configuration_filename(tmp_path: Path) -> None:
    (tmp_path / "tslint.yaml").write_text("rules: {}\n", encoding="utf-8")
    resolver = ConfigurationResolver(ServerSettings(config_filename="tslint.yaml"))

    assert resolver.find(tmp_path / "main.ts") == tmp_path / "tslint.yaml"


def test_ascent_stops_after_max_ascent(tmp_path: Path) -> None:
    (tmp_path / "tslint.json").write_text("{}", encoding="utf-8")
    deep = tmp_path / "a" / "b" / "c"
    deep.mkdir(parents=True)

    assert ConfigurationResolver(ServerSettings(max_ascent=3)).find(deep / "main.ts") is None
    assert ConfigurationResolver(ServerSettings(max_ascent=4)).find(deep / "main.ts") == tmp_path / "tslint.json"


def test_resolve_loads_through_adapter(tmp_path: Path) -> None:
    (tmp_path / "tslint.json").write_text("{}", encoding="utf-8")
    adapter = StubAdapter()

    configuration = ConfigurationResolver().resolve(tmp_path / "main.ts", adapter)

    assert adapter.loaded_configurations == [tmp_path / "tslint.json"]
    assert configuration.directory == tmp_path


def test_resolve_without_configuration_raises(tmp_path: Path) -> None:
    resolver = ConfigurationResolver(ServerSettings(max_ascent=1))

    with pytest.raises(ConfigurationNotFoundError, match="No tslint.json configuration file"):
        resolver.resolve(tmp_path / "main.ts", StubAdapter())
