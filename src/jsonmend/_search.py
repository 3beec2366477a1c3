"""Search mixin for rendered documents."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum, auto

from jsonmend.render import Span


class MatchMark(Enum):
    NONE = auto()
    MATCH = auto()
    CURRENT = auto()


@dataclass(frozen=True)
class SearchMatch:
    line: int
    start: int
    end: int


@dataclass
class SearchSession:
    query: str = ""
    matches: list[SearchMatch] = field(default_factory=list)
    current: int = -1
    navigated: bool = False

    @property
    def count(self) -> int:
        return len(self.matches)


class SearchMixin:
    """Case-insensitive substring search over rendered lines."""

    def _init_search(self) -> None:
        self._session = SearchSession()
        self._match_by_line: dict[int, list[tuple[int, int, int]]] = {}

    @property
    def session(self) -> SearchSession:
        return self._session

    def _build_search_line_index(self) -> None:
        """Build line-indexed lookup for search matches."""
        self._match_by_line = {}
        for mi, m in enumerate(self._session.matches):
            self._match_by_line.setdefault(m.line, []).append((m.start, m.end, mi))

    def search(self, query: str) -> SearchSession:
        """Find every match of *query*; an empty query clears the session."""
        query = query.strip()
        self._session = SearchSession(query=query)
        if not query:
            self._match_by_line = {}
            return self._session

        pattern = re.compile(re.escape(query), re.IGNORECASE)
        matches = [
            SearchMatch(line.index, m.start(), m.end())
            for line in self.lines
            for m in pattern.finditer(line.plain)
        ]
        self._session.matches = matches
        self._session.current = 0 if matches else -1
        self._build_search_line_index()
        return self._session

    def refresh_search(self) -> SearchSession:
        """Re-run the last query against the current lines."""
        return self.search(self._session.query)

    def navigate(self, direction: int) -> int:
        """Move the current match by *direction* (+1/-1) with wraparound."""
        count = self._session.count
        if not count:
            return -1
        index = (self._session.current + direction + count) % count
        self._session.current = index
        self._session.navigated = True
        self.reveal(self._session.matches[index].line)
        return index

    def current_match(self) -> SearchMatch | None:
        s = self._session
        if s.current < 0 or not s.matches:
            return None
        return s.matches[s.current]

    def status(self) -> str:
        """Count label for a search bar."""
        s = self._session
        if not s.query:
            return ""
        if not s.matches:
            return "No results"
        if s.navigated:
            return f"{s.current + 1} / {s.count}"
        return f"{s.count} results"

    def highlight(self, line_idx: int) -> list[tuple[Span, MatchMark]]:
        """Split a line's spans at match boundaries and mark each piece."""
        spans = self.lines[line_idx].spans
        ranges = self._match_by_line.get(line_idx)
        if not ranges:
            return [(span, MatchMark.NONE) for span in spans]

        result: list[tuple[Span, MatchMark]] = []
        pos = 0
        for span in spans:
            span_end = pos + len(span.text)
            cuts = {pos, span_end}
            for start, end, _mi in ranges:
                if pos < start < span_end:
                    cuts.add(start)
                if pos < end < span_end:
                    cuts.add(end)
            edges = sorted(cuts)
            for a, b in zip(edges, edges[1:]):
                mark = MatchMark.NONE
                for start, end, mi in ranges:
                    if start <= a and b <= end:
                        current = mi == self._session.current
                        mark = MatchMark.CURRENT if current else MatchMark.MATCH
                        break
                result.append((Span(span.text[a - pos : b - pos], span.kind), mark))
            pos = span_end
        return result
