"""Terminal app: paste text on the left, browse formatted JSON on the right."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Footer, Header, Input, Static, TextArea

from jsonmend.config import Config, load_config, save_config
from jsonmend.document import InvalidRendering, Mode, format_text
from jsonmend.widget import JsonView

_LOG = logging.getLogger(__name__)

SPLIT_STEP = 5.0


class JsonMendApp(App):
    """TUI that formats whatever is typed or pasted into the input pane."""

    CSS_PATH = "app.tcss"
    TITLE = "jsonmend"
    ENABLE_COMMAND_PALETTE = False
    BINDINGS = [
        Binding("ctrl+k", "clear", "Clear", priority=True),
        Binding("ctrl+f", "focus_search", "Search", priority=True),
        Binding("ctrl+s", "format", "Format", priority=True),
        Binding("ctrl+o", "compact", "Compact", priority=True),
        Binding("ctrl+y", "copy", "Copy", priority=True),
        Binding("f3,ctrl+g", "next_match", "Next", priority=True),
        Binding("shift+f3", "prev_match", "Prev", show=False, priority=True),
        Binding("ctrl+left", "resize(-1)", "Narrow", show=False, priority=True),
        Binding("ctrl+right", "resize(1)", "Widen", show=False, priority=True),
    ]

    def __init__(
        self,
        initial_content: str = "",
        config: Config | None = None,
        config_path: Path | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.initial_content = initial_content
        self.config = config or Config()
        self.config_path = config_path
        self.mode = Mode.COMPACT if self.config.compact else Mode.EXPANDED
        self._last_serialized: str = ""

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="panes"):
            with Vertical(id="input-pane"):
                yield Static("[b]Input[/b]", classes="pane-title")
                yield TextArea(self.initial_content, id="input")
            with Vertical(id="output-pane"):
                with Horizontal(id="search-bar"):
                    yield Input(placeholder="Search...", id="search")
                    yield Static("", id="search-count")
                yield JsonView(id="output")
                yield Static("", id="error-bar")
        yield Footer()

    def on_mount(self) -> None:
        self._apply_split()
        self._reformat()
        self.query_one("#input", TextArea).focus()

    # -- Formatting --------------------------------------------------------

    def _reformat(self) -> None:
        text = self.query_one("#input", TextArea).text
        rendering = format_text(
            text,
            self.mode,
            indent=self.config.indent,
            max_depth=self.config.max_unwrap_depth,
        )
        view = self.query_one("#output", JsonView)
        view.set_rendering(rendering)
        error_bar = self.query_one("#error-bar", Static)
        if isinstance(rendering, InvalidRendering):
            error_bar.update(Text("❌ " + rendering.error.summary))
            error_bar.add_class("visible")
        else:
            self._last_serialized = rendering.serialized
            error_bar.update("")
            error_bar.remove_class("visible")
        self._update_search_count()

    def _update_search_count(self) -> None:
        status = self.query_one("#output", JsonView).rendering.status()
        self.query_one("#search-count", Static).update(status)

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        self._reformat()

    # -- Search ------------------------------------------------------------

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "search":
            self.query_one("#output", JsonView).search(event.value)
            self._update_search_count()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "search":
            self.action_next_match()

    def on_json_view_search_moved(self, event: JsonView.SearchMoved) -> None:
        self.query_one("#search-count", Static).update(event.status)

    def action_focus_search(self) -> None:
        self.query_one("#search", Input).focus()

    def action_next_match(self) -> None:
        self.query_one("#output", JsonView).next_match(1)
        self._update_search_count()

    def action_prev_match(self) -> None:
        self.query_one("#output", JsonView).next_match(-1)
        self._update_search_count()

    # -- Commands ----------------------------------------------------------

    def action_clear(self) -> None:
        self.query_one("#input", TextArea).clear()
        self._last_serialized = ""
        self._reformat()
        self.query_one("#input", TextArea).focus()

    def action_format(self) -> None:
        self.mode = Mode.EXPANDED
        self._reformat()

    def action_compact(self) -> None:
        self.mode = Mode.COMPACT
        self._reformat()

    def action_copy(self) -> None:
        if not self._last_serialized:
            self.notify("Nothing to copy", severity="warning")
            return
        self.copy_to_clipboard(self._last_serialized)
        self.notify("✓ Copied to clipboard", severity="information")

    def action_resize(self, direction: int) -> None:
        ratio = self.config.split_ratio + direction * SPLIT_STEP
        self.config = self.config.with_split(ratio)
        self._apply_split()
        _LOG.debug("split ratio set to %s", self.config.split_ratio)
        save_config(self.config, self.config_path)

    def _apply_split(self) -> None:
        ratio = self.config.split_ratio
        self.query_one("#input-pane").styles.width = f"{ratio:g}%"
        self.query_one("#output-pane").styles.width = f"{100 - ratio:g}%"


def print_rendering(text: str, config: Config, console: Console | None = None) -> int:
    """Render *text* once to the console. Returns a process exit status."""
    console = console or Console()
    mode = Mode.COMPACT if config.compact else Mode.EXPANDED
    rendering = format_text(
        text, mode, indent=config.indent, max_depth=config.max_unwrap_depth
    )
    for line in rendering.lines:
        console.print(line.to_text(), soft_wrap=True)
    if isinstance(rendering, InvalidRendering):
        console.print(
            rendering.error.summary, style="bold red", markup=False, highlight=False
        )
        return 1
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="jsonmend",
        description="Tolerant JSON formatter and viewer",
    )
    parser.add_argument(
        "file",
        nargs="?",
        default="",
        help="file to load (reads stdin when piped and no file is given)",
    )
    parser.add_argument(
        "--compact",
        action="store_true",
        default=None,
        help="start in compact mode",
    )
    parser.add_argument("--indent", type=int, default=None, help="indent width")
    parser.add_argument(
        "--print",
        dest="print_only",
        action="store_true",
        help="print the formatted result and exit",
    )
    parser.add_argument("--config", default="", help="config file path")
    parser.add_argument("--log-file", default="", help="write debug log here")
    args = parser.parse_args()

    if args.log_file:
        logging.basicConfig(
            filename=args.log_file,
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path)
    if args.compact is not None:
        config.compact = args.compact
    if args.indent is not None:
        config.indent = max(0, args.indent)

    content = ""
    if args.file:
        try:
            content = Path(args.file).read_text(encoding="utf-8")
        except OSError as exc:
            print(f"jsonmend: {exc}", file=sys.stderr)
            sys.exit(1)
    elif not sys.stdin.isatty():
        content = sys.stdin.read()

    if args.print_only:
        sys.exit(print_rendering(content, config))

    app = JsonMendApp(initial_content=content, config=config, config_path=config_path)
    app.run()


if __name__ == "__main__":
    main()
