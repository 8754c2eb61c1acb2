# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Normalise library lint results and fixes into the uniform failure model.

The library reports fixes in three shapes depending on its generation:

* a fix object carrying a ``replacements`` list (``Fix`` in the 4.x API);
* a single replacement;
* a list of replacements.

Each replacement carries the library's own ``innerStart``/``innerLength``/
``innerText`` fields. Everything is folded into an ordered tuple of
:class:`~tslinter.models.Replacement` here so later stages see one shape.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from pydantic import ValidationError

from ..errors import BridgeProtocolError
from ..models import LintFailure, Replacement, SourcePosition


def _coerce_int(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _coerce_str(value: object) -> str | None:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def _is_sequence(value: object) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def parse_replacement(raw: object) -> Replacement:
    """Return a :class:`Replacement` for any supported replacement mapping.

    Args:
        raw: Mapping using ``innerStart``/``innerLength``/``innerText``,
            ``start``/``end``/``text`` or ``start``/``length``/``text`` keys.

    Returns:
        Replacement: Canonical ``[start, end)`` replacement.

    Raises:
        BridgeProtocolError: If the mapping has no usable span.
    """

    if not isinstance(raw, Mapping):
        raise BridgeProtocolError(f"replacement must be an object, got {type(raw).__name__}")
    if "innerStart" in raw:
        start = _coerce_int(raw.get("innerStart"))
        length = _coerce_int(raw.get("innerLength"))
        text = raw.get("innerText")
    else:
        start = _coerce_int(raw.get("start"))
        end = _coerce_int(raw.get("end"))
        length = end - start if end is not None and start is not None else _coerce_int(raw.get("length"))
        text = raw.get("text")
    if start is None or length is None:
        raise BridgeProtocolError(f"replacement without a span: {dict(raw)!r}")
    try:
        return Replacement(start=start, end=start + length, text=_coerce_str(text) or "")
    except ValidationError as exc:
        raise BridgeProtocolError(f"invalid replacement {dict(raw)!r}: {exc}") from exc


def normalize_fix(raw: object) -> tuple[Replacement, ...] | None:
    """Fold any fix shape into an ordered replacement tuple; ``None`` means no fix."""

    if raw is None:
        return None
    if isinstance(raw, Mapping) and "replacements" in raw:
        items = raw.get("replacements") or []
    elif _is_sequence(raw):
        items = raw
    else:
        items = [raw]
    if not _is_sequence(items):
        raise BridgeProtocolError(f"fix replacements must be a list, got {type(items).__name__}")
    return tuple(parse_replacement(item) for item in items)


def _parse_position(raw: object, label: str) -> SourcePosition:
    if not isinstance(raw, Mapping):
        raise BridgeProtocolError(f"failure {label} position missing")
    offset = _coerce_int(raw.get("position"))
    line = _coerce_int(raw.get("line"))
    character = _coerce_int(raw.get("character"))
    if offset is None or line is None or character is None:
        raise BridgeProtocolError(f"failure {label} position incomplete: {dict(raw)!r}")
    return SourcePosition(offset=offset, line=line, character=character)


def parse_failure(raw: object) -> LintFailure:
    """Convert one serialized rule failure into a :class:`LintFailure`."""

    if not isinstance(raw, Mapping):
        raise BridgeProtocolError(f"failure must be an object, got {type(raw).__name__}")
    message = _coerce_str(raw.get("message", raw.get("failure"))) or ""
    rule_name = _coerce_str(raw.get("ruleName")) or None
    return LintFailure(
        message=message,
        rule_name=rule_name,
        start=_parse_position(raw.get("start", raw.get("startPosition")), "start"),
        end=_parse_position(raw.get("end", raw.get("endPosition")), "end"),
        fix=normalize_fix(raw.get("fix")),
    )


def parse_failures(payload: object) -> list[LintFailure]:
    """Parse the failure list returned by a lint invocation, preserving order."""

    if not _is_sequence(payload):
        raise BridgeProtocolError("lint result must be a list of failures")
    return [parse_failure(entry) for entry in payload]


__all__ = ["normalize_fix", "parse_failure", "parse_failures", "parse_replacement"]
