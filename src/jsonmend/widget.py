"""Read-only Textual view over a rendering, with folding and search."""

from __future__ import annotations

from dataclasses import dataclass

from rich.text import Text
from textual import events
from textual.message import Message
from textual.widget import Widget

from jsonmend._search import MatchMark
from jsonmend.document import Rendering, empty_document
from jsonmend.render import DEFAULT_THEME, BlockRole, TokenKind


class JsonView(Widget, can_focus=True):
    """Scrollable, collapsible view of formatted JSON.

    Keys:
      j k / arrows  move        g G  top / bottom   PgUp PgDn
      Enter Space   toggle the block at (or around) the cursor
      M  collapse all   R  expand all   n N  next / previous match
    """

    DEFAULT_CSS = """
    JsonView {
        height: 1fr;
        background: $surface;
        padding: 0 1;
    }
    """

    _MARK_STYLE = {
        MatchMark.MATCH: "black on dark_goldenrod",
        MatchMark.CURRENT: "black on yellow",
    }

    # -- Messages ----------------------------------------------------------

    @dataclass
    class SearchMoved(Message):
        index: int
        status: str

    @dataclass
    class BlockToggled(Message):
        block_id: int
        collapsed: bool

    # -- Init --------------------------------------------------------------

    def __init__(
        self,
        *,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        super().__init__(name=name, id=id, classes=classes)
        self.rendering: Rendering = empty_document()
        self.theme_styles: dict[TokenKind, str] = dict(DEFAULT_THEME)
        self.cursor_row: int = 0
        self._scroll_top: int = 0

    # -- Public API --------------------------------------------------------

    def set_rendering(self, rendering: Rendering, *, keep_query: bool = True) -> None:
        """Replace the displayed rendering; re-runs the active search."""
        query = self.rendering.session.query if keep_query else ""
        self.rendering = rendering
        if query:
            rendering.search(query)
        self.cursor_row = 0
        self._scroll_top = 0
        self.refresh()

    def search(self, query: str) -> str:
        session = self.rendering.search(query)
        if session.matches:
            self._goto_current_match()
        self.refresh()
        return self.rendering.status()

    def next_match(self, direction: int = 1) -> int:
        index = self.rendering.navigate(direction)
        if index >= 0:
            self._goto_current_match()
        self.refresh()
        return index

    # -- Helpers -----------------------------------------------------------

    def _visible_rows(self) -> list[int]:
        visible = self.rendering.visible_lines()
        return [i for i in range(len(self.rendering.lines)) if i in visible]

    def _goto_current_match(self) -> None:
        match = self.rendering.current_match()
        if match is None:
            return
        self.rendering.reveal(match.line)
        self.cursor_row = match.line
        self._scroll_top = max(0, match.line - 3)

    def _clamp_cursor(self) -> None:
        rows = self._visible_rows()
        if not rows:
            self.cursor_row = 0
            return
        if self.cursor_row in rows:
            return
        # snap to the start line of the block hiding the cursor
        block = self.rendering.enclosing_block(self.cursor_row)
        while block is not None and not self.rendering.is_line_visible(block.start):
            block = self.rendering.enclosing_block(block.start)
        self.cursor_row = block.start if block is not None else rows[0]

    def _move(self, delta: int) -> None:
        rows = self._visible_rows()
        if not rows:
            return
        pos = rows.index(self.cursor_row) if self.cursor_row in rows else 0
        pos = max(0, min(len(rows) - 1, pos + delta))
        self.cursor_row = rows[pos]

    def _block_for_cursor(self):
        """Block starting on the cursor line, else the nearest enclosing one."""
        block = self.rendering.block_at(self.cursor_row)
        if block is None:
            block = self.rendering.enclosing_block(self.cursor_row)
        return block

    def _toggle_at_cursor(self) -> int | None:
        block = self._block_for_cursor()
        if block is None:
            return None
        self.rendering.toggle(block.block_id)
        self.cursor_row = block.start
        return block.block_id

    def _fold_marker(self, line_idx: int) -> str:
        ref = self.rendering.lines[line_idx].block_ref
        if ref is None or ref.role is not BlockRole.START:
            return "  "
        return "▸ " if self.rendering.is_collapsed(ref.block_id) else "▾ "

    def _line_text(self, line_idx: int) -> Text:
        """Styled text for one line: spans, search marks and fold placeholder."""
        result = Text()
        for span, mark in self.rendering.highlight(line_idx):
            style = self._MARK_STYLE.get(mark) or self.theme_styles.get(span.kind, "")
            result.append(span.text, style=style)
        placeholder = self.rendering.placeholder(line_idx)
        if placeholder:
            block = self.rendering.block_at(line_idx)
            hidden = self.rendering.hidden_count(block.block_id)
            result.append(placeholder, style="dim")
            result.append(f" ({hidden} lines)", style="dim italic")
        return result

    def _visible_height(self) -> int:
        return max(1, self.content_region.height)

    def _ensure_cursor_visible(self, rows: list[int]) -> None:
        if not rows:
            self._scroll_top = 0
            return
        vh = self._visible_height()
        top = rows.index(self._scroll_top) if self._scroll_top in rows else 0
        cur = rows.index(self.cursor_row) if self.cursor_row in rows else 0
        if cur < top:
            top = cur
        elif cur >= top + vh:
            top = cur - vh + 1
        self._scroll_top = rows[top]

    # =====================================================================
    # Rendering
    # =====================================================================

    def render(self) -> Text:
        width = self.content_region.width
        if width < 10:
            return Text("(too small)")
        lines = self.rendering.lines
        if not lines:
            return Text("")

        self._clamp_cursor()
        rows = self._visible_rows()
        self._ensure_cursor_visible(rows)

        ln_width = max(3, len(str(len(lines))))
        avail = max(1, width - ln_width - 3)
        start = rows.index(self._scroll_top) if self._scroll_top in rows else 0
        shown = rows[start : start + self._visible_height()]

        result = Text()
        for n, line_idx in enumerate(shown):
            if n:
                result.append("\n")
            result.append(f"{line_idx + 1:>{ln_width}} ", style="dim cyan")
            result.append(self._fold_marker(line_idx), style="bold")
            body = self._line_text(line_idx)
            body.truncate(avail, overflow="ellipsis")
            if line_idx == self.cursor_row and self.has_focus:
                body.stylize("on grey23")
            result.append_text(body)
        return result

    # =====================================================================
    # Key handling
    # =====================================================================

    def on_key(self, event: events.Key) -> None:
        handled, message = self._handle_key(event)
        if message is not None:
            self.post_message(message)
        if handled:
            event.prevent_default()
            event.stop()
            self.refresh()

    def _handle_key(self, event) -> tuple[bool, Message | None]:
        """Apply a key to the view. Returns (handled, message to post)."""
        key = event.key
        char = event.character or ""
        message: Message | None = None

        if key in ("down",) or char == "j":
            self._move(1)
        elif key in ("up",) or char == "k":
            self._move(-1)
        elif key == "pagedown":
            self._move(self._visible_height())
        elif key == "pageup":
            self._move(-self._visible_height())
        elif char == "g" or key == "home":
            self._move(-len(self.rendering.lines))
        elif char == "G" or key == "end":
            self._move(len(self.rendering.lines))
        elif key in ("enter", "space"):
            block_id = self._toggle_at_cursor()
            if block_id is not None:
                collapsed = self.rendering.is_collapsed(block_id)
                message = self.BlockToggled(block_id, collapsed)
        elif char == "M":
            self.rendering.collapse_all()
            self._clamp_cursor()
        elif char == "R":
            self.rendering.expand_all()
        elif char in ("n", "N"):
            index = self.next_match(1 if char == "n" else -1)
            message = self.SearchMoved(index, self.rendering.status())
        else:
            return False, None
        return True, message
