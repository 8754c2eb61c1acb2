# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing console helpers and logger setup for the command line."""

from __future__ import annotations

import logging
import sys
from functools import cache

from rich.console import Console
from rich.text import Text

PACKAGE_LOGGER = "tslinter"
_VERBOSE_MARKER = "_tslinter_configured"


@cache
def get_console(*, stderr: bool = False) -> Console:
    """Return the shared rich console for stdout or stderr."""
    return Console(stderr=stderr, highlight=False)


def emoji(symbol: str, enable: bool) -> str:
    return symbol if enable else ""


def _print_line(msg: str, *, style: str | None, stderr: bool = False) -> None:
    console = get_console(stderr=stderr)
    text = Text(msg)
    if style and console.is_terminal:
        text.stylize(style)
    console.print(text)


def info(msg: str, *, use_emoji: bool = False) -> None:
    """Emit an informational message."""
    _print_line(f"{emoji('ℹ️ ', use_emoji)}{msg}", style="cyan")


def ok(msg: str, *, use_emoji: bool = False) -> None:
    """Emit a success message."""
    _print_line(f"{emoji('✅ ', use_emoji)}{msg}", style="green")


def warn(msg: str, *, use_emoji: bool = False) -> None:
    """Emit a warning message."""
    _print_line(f"{emoji('⚠️ ', use_emoji)}{msg}", style="yellow")


def fail(msg: str, *, use_emoji: bool = False) -> None:
    """Emit an error message on stderr."""
    _print_line(f"{emoji('❌ ', use_emoji)}{msg}", style="red", stderr=True)


def configure_logging(*, verbose: bool = False) -> logging.Logger:
    """Attach a stderr handler to the package logger.

    Stdout carries the language server protocol, so log records always go to
    stderr. Repeat calls only adjust the level.

    Args:
        verbose: Emit DEBUG records when ``True``; otherwise WARNING and above.

    Returns:
        logging.Logger: The configured package logger.
    """

    logger = logging.getLogger(PACKAGE_LOGGER)
    if not getattr(logger, _VERBOSE_MARKER, False):
        handler = logging.StreamHandler(stream=sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        logger.addHandler(handler)
        logger.propagate = False
        setattr(logger, _VERBOSE_MARKER, True)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    return logger


__all__ = ["configure_logging", "emoji", "fail", "get_console", "info", "ok", "warn"]
