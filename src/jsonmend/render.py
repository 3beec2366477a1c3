"""Line rendering: token classification and structural block indexing."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum, auto

from rich.text import Text


class TokenKind(Enum):
    PLAIN = auto()
    PUNCT = auto()
    KEY = auto()
    STRING = auto()
    NUMBER = auto()
    BOOLEAN = auto()
    NULL = auto()
    KEY_INVALID = auto()  # single-quoted key in broken input
    STRING_INVALID = auto()  # single-quoted value in broken input
    ERROR_CHAR = auto()
    ERROR_TAIL = auto()


class BlockRole(Enum):
    START = auto()
    END = auto()


# rich styles per token kind
DEFAULT_THEME: dict[TokenKind, str] = {
    TokenKind.PLAIN: "white",
    TokenKind.PUNCT: "bold white",
    TokenKind.KEY: "cyan",
    TokenKind.STRING: "green",
    TokenKind.NUMBER: "yellow",
    TokenKind.BOOLEAN: "magenta",
    TokenKind.NULL: "bright_magenta italic",
    TokenKind.KEY_INVALID: "cyan underline",
    TokenKind.STRING_INVALID: "green underline",
    TokenKind.ERROR_CHAR: "bold white on red",
    TokenKind.ERROR_TAIL: "red on #3c1616",
}


@dataclass(frozen=True)
class Span:
    text: str
    kind: TokenKind = TokenKind.PLAIN


@dataclass(frozen=True)
class BlockRef:
    block_id: int
    role: BlockRole


@dataclass(frozen=True)
class Block:
    """A closed structural span; ``end`` is inclusive."""

    block_id: int
    start: int
    end: int
    kind: str  # "object" | "array"

    def contains(self, other: Block) -> bool:
        """True if *other* is strictly nested inside this block."""
        return self.start < other.start and other.end < self.end

    @property
    def placeholder(self) -> str:
        return " {...}" if self.kind == "object" else " [...]"


@dataclass(frozen=True)
class Unclosed:
    """An opened block whose closing line never appeared."""

    block_id: int
    start: int
    kind: str


@dataclass
class RenderLine:
    index: int
    text: str
    depth: int = 0
    spans: list[Span] = field(default_factory=list)
    block_ref: BlockRef | None = None

    @property
    def plain(self) -> str:
        return self.text

    def to_text(self, theme: dict[TokenKind, str] | None = None) -> Text:
        """Build a rich ``Text`` for this line."""
        theme = theme or DEFAULT_THEME
        result = Text()
        for span in self.spans:
            result.append(span.text, style=theme.get(span.kind, ""))
        return result


# -- Token classification ---------------------------------------------------

_TOKEN_RE = re.compile(
    r'(?P<str>"(?:\\u[a-zA-Z0-9]{4}|\\[^u]|[^\\"])*")(?P<colon>\s*:)?'
    r"|\b(?P<kw>true|false|null)\b"
    r"|(?P<num>-?\d+(?:\.\d*)?(?:[eE][+\-]?\d+)?)"
)
_PUNCT_RE = re.compile(r"[{}\[\],:]+")


def _gap_spans(text: str) -> list[Span]:
    """Split unclassified text into punctuation and plain runs."""
    spans: list[Span] = []
    pos = 0
    for m in _PUNCT_RE.finditer(text):
        if m.start() > pos:
            spans.append(Span(text[pos : m.start()]))
        spans.append(Span(m.group(), TokenKind.PUNCT))
        pos = m.end()
    if pos < len(text):
        spans.append(Span(text[pos:]))
    return spans


def classify_line(line: str) -> list[Span]:
    """Classify *line* into spans whose texts concatenate back to *line*."""
    spans: list[Span] = []
    pos = 0
    for m in _TOKEN_RE.finditer(line):
        if m.start() > pos:
            spans.extend(_gap_spans(line[pos : m.start()]))
        if m.group("str") is not None:
            if m.group("colon") is not None:
                spans.append(Span(m.group("str"), TokenKind.KEY))
                spans.extend(_gap_spans(m.group("colon")))
            else:
                spans.append(Span(m.group("str"), TokenKind.STRING))
        elif m.group("kw") is not None:
            kw = m.group("kw")
            kind = TokenKind.NULL if kw == "null" else TokenKind.BOOLEAN
            spans.append(Span(kw, kind))
        else:
            spans.append(Span(m.group("num"), TokenKind.NUMBER))
        pos = m.end()
    if pos < len(line):
        spans.extend(_gap_spans(line[pos:]))
    return spans


# -- Block indexing ---------------------------------------------------------


def index_blocks(lines: list[str]) -> list[Block | Unclosed]:
    """Pair opening and closing lines into blocks, ordered by id.

    A trimmed line ending with ``{`` or ``[`` opens a block; one starting
    with ``}`` or ``]`` closes the innermost open block.  Closers with
    nothing open are ignored.
    """
    outcomes: dict[int, Block | Unclosed] = {}
    stack: list[Unclosed] = []
    next_id = 0
    for i, line in enumerate(lines):
        trimmed = line.strip()
        if not trimmed:
            continue
        if trimmed[-1] in "{[":
            kind = "object" if trimmed[-1] == "{" else "array"
            opened = Unclosed(next_id, i, kind)
            outcomes[next_id] = opened
            stack.append(opened)
            next_id += 1
        elif trimmed[0] in "}]":
            if not stack:
                continue
            top = stack.pop()
            outcomes[top.block_id] = Block(top.block_id, top.start, i, top.kind)
    return [outcomes[k] for k in sorted(outcomes)]


def closed_blocks(outcomes: list[Block | Unclosed]) -> list[Block]:
    return [b for b in outcomes if isinstance(b, Block)]


def render_lines(serialized: str, indent: int = 2) -> tuple[list[RenderLine], list[Block]]:
    """Turn serialized JSON into classified lines and the block index."""
    raw_lines = serialized.split("\n") if serialized else []
    blocks = closed_blocks(index_blocks(raw_lines))

    refs: dict[int, BlockRef] = {}
    for block in blocks:
        refs[block.start] = BlockRef(block.block_id, BlockRole.START)
        refs[block.end] = BlockRef(block.block_id, BlockRole.END)

    lines: list[RenderLine] = []
    for i, text in enumerate(raw_lines):
        lead = len(text) - len(text.lstrip(" "))
        lines.append(
            RenderLine(
                index=i,
                text=text,
                depth=lead // indent if indent > 0 else 0,
                spans=classify_line(text),
                block_ref=refs.get(i),
            )
        )
    return lines, blocks
