"""Python-literal to JSON repair (single quotes, True/False/None)."""

from __future__ import annotations

import json
import logging

_LOG = logging.getLogger(__name__)

_WORDS = {"True": "true", "False": "false", "None": "null"}


def _is_ident(ch: str) -> bool:
    return ch == "_" or (ch.isascii() and ch.isalnum())


def _bareword_at(text: str, i: int) -> str | None:
    """Return the bare Python word starting at *i*, if it stands alone."""
    for word in _WORDS:
        if not text.startswith(word, i):
            continue
        before = text[i - 1] if i > 0 else " "
        end = i + len(word)
        after = text[end] if end < len(text) else " "
        if not _is_ident(before) and not _is_ident(after):
            return word
    return None


def repair_literals(text: str) -> str:
    """Rewrite single-quoted strings and Python keywords as JSON.

    Only runs when the text contains an apostrophe and does not already
    parse.  The result is returned even when it is still invalid so the
    error locator can point at what is left.
    """
    if "'" not in text:
        return text
    try:
        json.loads(text)
        return text
    except (ValueError, RecursionError):
        pass

    out: list[str] = []
    quote = ""  # quote char of the open string, "" when outside
    n = len(text)
    i = 0
    while i < n:
        ch = text[i]
        nxt = text[i + 1] if i + 1 < n else ""

        if not quote:
            if ch in ("'", '"'):
                quote = ch
                out.append('"')
            else:
                word = _bareword_at(text, i) if ch in "TFN" else None
                if word:
                    out.append(_WORDS[word])
                    i += len(word)
                    continue
                out.append(ch)
            i += 1
            continue

        if ch == "\\":
            if nxt == quote:
                # the scan stays inside the string either way
                out.append('"' if quote == "'" else '\\"')
                i += 2
                continue
            if nxt == '"' and quote == "'":
                # literal backslash + quote: both need escaping once requoted
                out.append('\\\\\\"')
                i += 2
                continue
            if nxt == "\\":
                out.append("\\\\")
                i += 2
                continue
            out.append(ch)
        elif ch == quote:
            quote = ""
            out.append('"')
        elif ch == '"' and quote == "'":
            out.append('\\"')
        else:
            out.append(ch)
        i += 1

    result = "".join(out)
    try:
        json.loads(result)
    except (ValueError, RecursionError) as exc:
        _LOG.debug("literal repair left invalid JSON: %s", exc)
    return result
