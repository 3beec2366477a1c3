"""Error location: lay out invalid JSON and mark where parsing stopped."""

from __future__ import annotations

import json
import re

from jsonmend.errors import StructuralParseError
from jsonmend.render import RenderLine, Span, TokenKind, _gap_spans

_QUOTED_RE = re.compile(r""""(?:[^"\\\n]|\\.)*"|'(?:[^'\\\n]|\\.)*'""")
_COLON_AFTER_RE = re.compile(r"\s*:")
_WHITESPACE = " \n\r\t"


def parse_error_from(exc: json.JSONDecodeError) -> StructuralParseError:
    """Convert a decoder exception into a ``StructuralParseError``."""
    return StructuralParseError(exc.msg, exc.pos, exc.lineno, exc.colno)


def layout_invalid(
    text: str, offset: int | None, indent: int = 2
) -> tuple[str, str, str]:
    """Pretty-print *text* with a loose, quote-aware scan.

    Returns ``(before, error_char, tail)``.  ``error_char`` is the character
    at *offset* (a single space when *offset* is the end of the text) and
    ``tail`` is everything laid out after it.  Without an offset the whole
    layout is returned as ``before``.
    """
    pad = " " * indent
    parts: list[list[str]] = [[], []]
    target = parts[0]
    error_char = ""
    depth = 0
    quote = ""
    escaped = False
    last = ""

    def emit(s: str) -> None:
        nonlocal last
        target.append(s)
        last = s[-1]

    for i, ch in enumerate(text):
        if i == offset:
            error_char = ch
            target = parts[1]
            last = ch
            if quote:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == quote:
                    quote = ""
            elif ch in ("'", '"'):
                quote = ch
            continue

        if quote:
            emit(ch)
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == quote:
                quote = ""
            continue

        if ch in ("'", '"'):
            quote = ch
            emit(ch)
        elif ch in "{[":
            depth += 1
            emit(ch + "\n" + pad * depth)
        elif ch in "}]":
            depth = max(0, depth - 1)
            emit("\n" + pad * depth + ch)
        elif ch == ",":
            emit(ch + "\n" + pad * depth)
        elif ch == ":":
            emit(": ")
        elif ch not in _WHITESPACE:
            emit(ch)
        elif ch == " " and last and last not in " \n":
            emit(ch)

    if offset is not None and offset >= len(text):
        error_char = " "
    return "".join(parts[0]), error_char, "".join(parts[1])


def _classify_before(text: str) -> list[Span]:
    """Best-effort key/value recognition for the parseable prefix."""
    spans: list[Span] = []
    pos = 0
    for m in _QUOTED_RE.finditer(text):
        if m.start() > pos:
            spans.extend(_gap_spans(text[pos : m.start()]))
        single = m.group().startswith("'")
        if _COLON_AFTER_RE.match(text, m.end()):
            kind = TokenKind.KEY_INVALID if single else TokenKind.KEY
        elif text[: m.start()].rstrip().endswith(":"):
            kind = TokenKind.STRING_INVALID if single else TokenKind.STRING
        else:
            kind = TokenKind.PLAIN
        spans.append(Span(m.group(), kind))
        pos = m.end()
    if pos < len(text):
        spans.extend(_gap_spans(text[pos:]))
    return spans


def _split_lines(spans: list[Span]) -> list[list[Span]]:
    lines: list[list[Span]] = [[]]
    for span in spans:
        pieces = span.text.split("\n")
        for n, piece in enumerate(pieces):
            if n:
                lines.append([])
            if piece:
                lines[-1].append(Span(piece, span.kind))
    return lines


def render_invalid(
    text: str, offset: int | None, indent: int = 2
) -> list[RenderLine]:
    """Lay out invalid *text* as render lines with the error marked."""
    before, error_char, tail = layout_invalid(text, offset, indent)
    spans = _classify_before(before)
    if error_char:
        spans.append(Span(error_char, TokenKind.ERROR_CHAR))
    if tail:
        spans.append(Span(tail, TokenKind.ERROR_TAIL))

    lines: list[RenderLine] = []
    for i, line_spans in enumerate(_split_lines(spans)):
        line_text = "".join(s.text for s in line_spans)
        lead = len(line_text) - len(line_text.lstrip(" "))
        lines.append(
            RenderLine(
                index=i,
                text=line_text,
                depth=lead // indent if indent > 0 else 0,
                spans=line_spans,
            )
        )
    return lines
