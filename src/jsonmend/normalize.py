"""Input normalization: unescaping, trimming and nested-JSON unwrapping."""

from __future__ import annotations

import json
import logging

from jsonmend._literal import repair_literals

_LOG = logging.getLogger(__name__)

_OPENERS = "{["
_CLOSERS = "}]"
_ESCAPE_HINTS = ("\\n", "\\t", '\\"')
_UNESCAPES = (
    ("\\n", "\n"),
    ("\\t", "\t"),
    ("\\r", "\r"),
    ('\\"', '"'),
    ("\\\\", "\\"),
)

DEFAULT_MAX_DEPTH = 64


def _parses(text: str) -> bool:
    try:
        json.loads(text)
    except (ValueError, RecursionError):
        return False
    return True


def resolve_wrapped_string(text: str) -> str:
    """Unwrap a document that arrived as a JSON string literal or escaped text.

    Returns *text* unchanged when neither interpretation yields JSON.
    """
    if text.startswith('"') and text.endswith('"'):
        try:
            decoded = json.loads(text)
        except (ValueError, RecursionError) as exc:
            _LOG.debug("quoted input is not a JSON string: %s", exc)
        else:
            if isinstance(decoded, str):
                return decoded

    if any(hint in text for hint in _ESCAPE_HINTS):
        unescaped = text
        for seq, repl in _UNESCAPES:
            unescaped = unescaped.replace(seq, repl)
        if len(unescaped) >= 2 and unescaped.startswith('"') and unescaped.endswith('"'):
            unescaped = unescaped[1:-1]
        if _parses(unescaped):
            return unescaped
        _LOG.debug("direct unescape did not produce JSON; keeping input")

    return text


def trim_boundaries(text: str) -> str:
    """Drop noise before the first and after the last structural delimiter."""
    if text[:1] not in _OPENERS:
        starts = [i for i in (text.find("{"), text.find("[")) if i != -1]
        if starts:
            text = text[min(starts):]
    if text[-1:] not in _CLOSERS:
        end = max(text.rfind("}"), text.rfind("]"))
        if end != -1:
            text = text[: end + 1]
    return text


def normalize_input(text: str) -> str:
    """Run resolver, literal repair and trimming over raw input."""
    text = text.strip()
    if not text:
        return text
    text = resolve_wrapped_string(text)
    text = repair_literals(text)
    return trim_boundaries(text)


def _looks_like_document(text: str) -> bool:
    s = text.strip()
    return (s.startswith("{") and s.endswith("}")) or (
        s.startswith("[") and s.endswith("]")
    )


def deep_unwrap(value: object, max_depth: int = DEFAULT_MAX_DEPTH) -> object:
    """Recursively replace string values that hold serialized JSON documents.

    *max_depth* bounds how many string-encoding levels are decoded along any
    path; strings past the bound are kept as they are.
    """
    if isinstance(value, str):
        if not _looks_like_document(value):
            return value
        if max_depth <= 0:
            _LOG.debug("unwrap depth bound reached; keeping string")
            return value
        try:
            parsed = json.loads(value)
        except (ValueError, RecursionError):
            return value
        return deep_unwrap(parsed, max_depth - 1)
    if isinstance(value, list):
        return [deep_unwrap(item, max_depth) for item in value]
    if isinstance(value, dict):
        return {key: deep_unwrap(item, max_depth) for key, item in value.items()}
    return value
