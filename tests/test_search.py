"""Tests for substring search and match navigation."""

import json

from jsonmend._search import MatchMark, SearchMatch
from jsonmend.document import format_text

# 0 {
# 1   "name": "Alpha",
# 2   "items": [
# 3     "alpha",
# 4     "beta",
# 5     "ALPHA"
# 6   ]
# 7 }
SOURCE = json.dumps({"name": "Alpha", "items": ["alpha", "beta", "ALPHA"]})


def _doc():
    return format_text(SOURCE)


class TestSearch:
    def test_case_insensitive_matches_in_order(self):
        doc = _doc()
        session = doc.search("alpha")
        assert session.count == 3
        assert session.matches == [
            SearchMatch(1, 11, 16),
            SearchMatch(3, 5, 10),
            SearchMatch(5, 5, 10),
        ]
        assert session.current == 0

    def test_upper_case_query(self):
        assert _doc().search("ALPHA").count == 3

    def test_query_is_stripped(self):
        assert _doc().search("  beta ").count == 1

    def test_offsets_follow_line_when_lowercase_grows(self):
        """'İ' lowercases to two characters; offsets stay on the line text."""
        doc = format_text('["İx", "x"]')
        session = doc.search("x")
        assert session.matches == [SearchMatch(1, 4, 5), SearchMatch(2, 3, 4)]
        line = doc.lines[1].plain
        assert line[4:5] == "x"

    def test_empty_query_clears(self):
        doc = _doc()
        doc.search("alpha")
        session = doc.search("   ")
        assert session.count == 0
        assert session.current == -1
        assert doc.status() == ""
        assert doc.highlight(1)[0][1] is MatchMark.NONE

    def test_no_results(self):
        doc = _doc()
        session = doc.search("zzz")
        assert session.count == 0
        assert doc.status() == "No results"
        assert doc.navigate(1) == -1

    def test_non_overlapping(self):
        doc = format_text('["aaaa"]')
        matches = doc.search("aa").matches
        assert [(m.start, m.end) for m in matches] == [(3, 5), (5, 7)]

    def test_matches_hidden_lines(self):
        doc = _doc()
        doc.collapse(1)
        assert doc.search("beta").count == 1

    def test_refresh_search(self):
        doc = _doc()
        doc.search("alpha")
        assert doc.refresh_search().count == 3


class TestNavigate:
    def test_status_labels(self):
        doc = _doc()
        doc.search("alpha")
        assert doc.status() == "3 results"
        doc.navigate(1)
        assert doc.status() == "2 / 3"

    def test_forward_wraps_to_start(self):
        doc = _doc()
        doc.search("alpha")
        start = doc.session.current
        for _ in range(3):
            doc.navigate(1)
        assert doc.session.current == start

    def test_backward_from_first(self):
        doc = _doc()
        doc.search("alpha")
        assert doc.navigate(-1) == 2

    def test_navigate_reveals_collapsed_line(self):
        doc = _doc()
        doc.collapse(1)
        doc.search("beta")
        assert doc.navigate(1) == 0
        assert not doc.is_collapsed(1)
        assert doc.is_line_visible(4)

    def test_current_match(self):
        doc = _doc()
        assert doc.current_match() is None
        doc.search("alpha")
        doc.navigate(1)
        assert doc.current_match() == SearchMatch(3, 5, 10)


class TestHighlight:
    def test_marks_only_match_text(self):
        doc = _doc()
        doc.search("alpha")
        pieces = doc.highlight(1)
        assert "".join(span.text for span, _mark in pieces) == doc.lines[1].text
        marked = [(span.text, mark) for span, mark in pieces if mark is not MatchMark.NONE]
        assert marked == [("Alpha", MatchMark.CURRENT)]

    def test_other_matches_marked(self):
        doc = _doc()
        doc.search("alpha")
        marked = [mark for _span, mark in doc.highlight(3) if mark is not MatchMark.NONE]
        assert marked == [MatchMark.MATCH]

    def test_classification_kept(self):
        doc = _doc()
        doc.search("alpha")
        kinds = {span.kind for span, mark in doc.highlight(1) if mark is MatchMark.CURRENT}
        assert len(kinds) == 1

    def test_match_across_spans(self):
        doc = _doc()
        doc.search('name": "al')
        pieces = doc.highlight(1)
        marked = "".join(span.text for span, mark in pieces if mark is not MatchMark.NONE)
        assert marked == 'name": "Al'
