# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Subprocess wrapper for the node bridge and package-manager queries."""

from __future__ import annotations

import shutil
import subprocess  # nosec B404
from collections.abc import Mapping, Sequence
from pathlib import Path
from subprocess import CompletedProcess  # nosec B404

TIMEOUT_STATUS = 124


class SubprocessExecutionError(RuntimeError):
    """Raised when a child process exits with a non-zero status."""

    def __init__(self, command: Sequence[str], returncode: int, stdout: str, stderr: str | None) -> None:
        super().__init__(f"Command '{command[0]}' exited with status {returncode}. stderr: {stderr or '<none>'}")
        self.command = tuple(command)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


def _resolve_executable(args: Sequence[str]) -> list[str]:
    if not args:
        raise ValueError("subprocess command requires at least one argument")
    head, *rest = args
    if Path(head).is_absolute():
        return [head, *rest]
    resolved = shutil.which(head)
    if resolved is None:
        raise FileNotFoundError(f"Executable '{head}' was not found on PATH")
    return [resolved, *rest]


def _as_text(value: str | bytes | None) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else value.decode("utf-8", errors="replace")


def run_command(
    args: Sequence[str],
    *,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
    input_text: str | None = None,
    timeout: float | None = None,
) -> CompletedProcess[str]:
    """Run *args* with captured UTF-8 output and return the completed process.

    Args:
        args: Command and arguments; a relative executable is looked up on ``PATH``.
        cwd: Working directory of the child.
        env: Full environment of the child; inherits ours when ``None``.
        input_text: Text written to the child's stdin; stdin is closed when ``None``.
        timeout: Seconds before the child is killed; expiry counts as exit status 124.

    Raises:
        SubprocessExecutionError: If the child exits with a non-zero status or times out.
        FileNotFoundError: If the executable cannot be found.
    """

    command = _resolve_executable(args)
    try:
        completed = subprocess.run(  # nosec B603
            command,
            cwd=str(cwd) if cwd is not None else None,
            env=dict(env) if env is not None else None,
            check=False,
            capture_output=True,
            text=True,
            encoding="utf-8",
            timeout=timeout,
            input=input_text,
            stdin=subprocess.DEVNULL if input_text is None else None,
        )
    except subprocess.TimeoutExpired as exc:
        stderr = _as_text(exc.stderr)
        note = f"{command[0]} timed out after {timeout}s"
        raise SubprocessExecutionError(
            command,
            TIMEOUT_STATUS,
            _as_text(exc.stdout),
            f"{stderr}\n{note}" if stderr else note,
        ) from exc
    if completed.returncode != 0:
        raise SubprocessExecutionError(command, completed.returncode, completed.stdout, completed.stderr)
    return completed


__all__ = ["SubprocessExecutionError", "TIMEOUT_STATUS", "run_command"]
