"""Canonical content hashing.

The notarizer and the verifier must compute the same digest from the same
semantic JSON content, independently. Content is therefore parsed and
re-serialized per RFC 8785 (JCS) before hashing:

1. Object keys are sorted by their UTF-16 code units.
2. Insignificant whitespace is dropped.
3. Numbers use ES6 formatting, so ``1``, ``1.0`` and ``1e0`` are identical.

Usage:
    from notary_verify.hashing import hash_content

    digest = hash_content('{"b": 2, "a": 1}')
"""
from __future__ import annotations

import hashlib
import json
import math
import re
from typing import Any, Union

import jcs  # type: ignore

from .errors import MalformedContent

# Type alias for JSON-compatible values
JsonType = Union[dict[str, Any], list[Any], str, int, float, bool, None]

# json.loads pairs valid surrogates, so any left in a str are unpaired
LONE_SURROGATE_RE = re.compile(r"[\ud800-\udfff]")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant {name}")


def _parse_number(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"number {text[:32]} out of range for a double")
    return value


def _escape_surrogate(match: "re.Match[str]") -> str:
    return f"\\u{ord(match.group()):04x}"


def parse_json(content: str) -> JsonType:
    """Parse strict JSON text.

    Numbers are read as doubles, the way a JavaScript notarizer sees them.
    ``NaN``/``Infinity`` and literals that overflow a double are refused.

    Raises:
        MalformedContent: If the text is not valid JSON.
    """
    try:
        return json.loads(
            content,
            parse_int=_parse_number,
            parse_float=_parse_number,
            parse_constant=_reject_constant,
        )
    except ValueError as exc:  # JSONDecodeError is a ValueError
        raise MalformedContent(f"Invalid JSON content: {exc}") from exc


def canonical_json_bytes(obj: JsonType) -> bytes:
    """Serialize a JSON-compatible value to RFC 8785 canonical bytes.

    Unpaired surrogates in strings are written as lowercase ``\\uXXXX``
    escapes, as ``JSON.stringify`` does, so the output is always valid UTF-8.
    """
    text = jcs.canonicalize(obj, utf8=False)
    return LONE_SURROGATE_RE.sub(_escape_surrogate, text).encode("utf-8")


def hash_object(obj: JsonType) -> str:
    """SHA-256 hex digest of the canonical form of ``obj``."""
    return hashlib.sha256(canonical_json_bytes(obj)).hexdigest()


def hash_content(content: str) -> str:
    """Compute the canonical content hash of a JSON document.

    Args:
        content: JSON text.

    Returns:
        Lowercase SHA-256 hex string (64 chars).

    Raises:
        MalformedContent: If ``content`` is not valid JSON or has no
            canonical form.
    """
    obj = parse_json(content)
    try:
        return hash_object(obj)
    except (TypeError, ValueError) as exc:
        raise MalformedContent(f"Cannot canonicalize JSON content: {exc}") from exc
