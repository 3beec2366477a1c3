"""Formatting pipeline: raw text in, rendered (or annotated invalid) lines out."""

from __future__ import annotations

import json
import logging
from enum import Enum

from jsonmend._fold import FoldMixin
from jsonmend._search import SearchMixin
from jsonmend.errors import StructuralParseError
from jsonmend.locate import parse_error_from, render_invalid
from jsonmend.normalize import DEFAULT_MAX_DEPTH, deep_unwrap, normalize_input
from jsonmend.render import Block, RenderLine, render_lines

_LOG = logging.getLogger(__name__)


class Mode(Enum):
    EXPANDED = "expanded"
    COMPACT = "compact"


class Rendering(FoldMixin, SearchMixin):
    """Rendered lines plus the collapse and search state that hang off them."""

    valid = True

    def __init__(self, lines: list[RenderLine], blocks: list[Block]) -> None:
        self.lines = lines
        self.blocks = blocks
        self._init_folds()
        self._init_search()

    @property
    def text(self) -> str:
        return "\n".join(line.text for line in self.lines)


class RenderedDocument(Rendering):
    """A successfully parsed and serialized document."""

    def __init__(
        self,
        value: object,
        serialized: str,
        lines: list[RenderLine],
        blocks: list[Block],
        mode: Mode = Mode.EXPANDED,
    ) -> None:
        super().__init__(lines, blocks)
        self.value = value
        self.serialized = serialized
        self.mode = mode


class InvalidRendering(Rendering):
    """Laid-out invalid input with the parse error marked."""

    valid = False

    def __init__(
        self, source: str, lines: list[RenderLine], error: StructuralParseError
    ) -> None:
        super().__init__(lines, [])
        self.source = source
        self.error = error


def serialize(value: object, mode: Mode = Mode.EXPANDED, indent: int = 2) -> str:
    if mode is Mode.COMPACT:
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return json.dumps(value, indent=indent, ensure_ascii=False)


def empty_document(mode: Mode = Mode.EXPANDED) -> RenderedDocument:
    return RenderedDocument(None, "", [], [], mode)


def format_text(
    text: str,
    mode: Mode = Mode.EXPANDED,
    *,
    indent: int = 2,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> RenderedDocument | InvalidRendering:
    """Normalize, parse, unwrap and render *text*.

    Returns an ``InvalidRendering`` carrying a ``StructuralParseError`` when
    the normalized text still does not parse, or nests deeper than the
    interpreter can follow.  Whitespace-only input gives an empty document.
    """
    if not text.strip():
        return empty_document(mode)
    normalized = normalize_input(text)

    try:
        value = json.loads(normalized)
        value = deep_unwrap(value, max_depth)
        serialized = serialize(value, mode, indent)
    except json.JSONDecodeError as exc:
        error = parse_error_from(exc)
        _LOG.debug("parse failed at %s: %s", error.offset, error.message)
        return _invalid(normalized, error, indent)
    except RecursionError:
        _LOG.debug("nesting too deep in %d characters of input", len(normalized))
        return _invalid(normalized, StructuralParseError("nesting too deep"), indent)

    lines, blocks = render_lines(serialized, indent)
    return RenderedDocument(value, serialized, lines, blocks, mode)


def _invalid(
    source: str, error: StructuralParseError, indent: int
) -> InvalidRendering:
    return InvalidRendering(source, render_invalid(source, error.offset, indent), error)
