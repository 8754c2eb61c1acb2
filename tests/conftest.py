# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest
from stubs import Harness, StubAdapter, var_failure, write_library


@pytest.fixture
def stub_adapter() -> StubAdapter:
    return StubAdapter(failures=[var_failure()])


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Project root holding the library and a configuration file."""
    root = tmp_path / "project"
    root.mkdir()
    write_library(root)
    (root / "tslint.json").write_text('{"rules": {"no-var-keyword": true}}', encoding="utf-8")
    return root


@pytest.fixture
def harness(project: Path, stub_adapter: StubAdapter) -> Harness:
    return Harness(project, stub_adapter)
