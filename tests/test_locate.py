"""Tests for invalid-input layout and error marking."""

from jsonmend.document import InvalidRendering, format_text
from jsonmend.locate import layout_invalid, render_invalid
from jsonmend.render import TokenKind


def _texts(rendering):
    return [line.text for line in rendering.lines]


class TestErrorOffset:
    def test_missing_value(self):
        result = format_text('{"a": 1, "b": }')
        assert isinstance(result, InvalidRendering)
        assert result.valid is False
        assert result.error.offset == 14
        assert result.error.message == "Expecting value"
        assert result.error.summary.startswith("JSON Parse Error: Expecting value")
        assert _texts(result) == ["{", '  "a": 1,', '  "b": }']

    def test_prefix_classified_and_char_marked(self):
        result = format_text('{"a": 1, "b": }')
        last = result.lines[-1].spans
        assert [s.kind for s in last] == [
            TokenKind.PLAIN,
            TokenKind.KEY,
            TokenKind.PUNCT,
            TokenKind.PLAIN,
            TokenKind.ERROR_CHAR,
        ]
        assert last[-1].text == "}"
        assert result.lines[1].spans[1].kind is TokenKind.KEY

    def test_tail_is_one_run(self):
        result = format_text('{"a": 1, "b": , "c": 2}')
        assert result.error.offset == 14
        assert _texts(result) == ["{", '  "a": 1,', '  "b": , "c": 2', "}"]
        spans = [s for line in result.lines for s in line.spans]
        kinds = [s.kind for s in spans]
        err = kinds.index(TokenKind.ERROR_CHAR)
        assert spans[err].text == ","
        assert all(k is TokenKind.ERROR_TAIL for k in kinds[err + 1 :])
        assert "".join(s.text for s in spans[err + 1 :]) == ' "c": 2}'

    def test_unexpected_end(self):
        result = format_text('{"a": 1')
        assert result.error.offset == 7
        last = result.lines[-1].spans[-1]
        assert last.kind is TokenKind.ERROR_CHAR
        assert last.text == " "

    def test_source_is_repaired_text(self):
        result = format_text("{'a': None, 'b': }")
        assert result.source == '{"a": null, "b": }'
        assert result.error.offset == 17

    def test_no_blocks_on_invalid(self):
        result = format_text('{"a": [1, }')
        assert result.blocks == []

    def test_search_over_invalid(self):
        result = format_text('{"a": 1, "b": }')
        assert result.search('"b"').count == 1


class TestLayoutInvalid:
    def test_no_offset(self):
        before, char, tail = layout_invalid('{"a":1}', None)
        assert before == '{\n  "a": 1\n}'
        assert char == ""
        assert tail == ""

    def test_braces_in_strings_ignored(self):
        before, _char, _tail = layout_invalid('{"a": "x\\"}"}', None)
        assert before == '{\n  "a": "x\\"}"\n}'

    def test_single_quotes_are_strings(self):
        before, _char, _tail = layout_invalid("{'a,b': 1}", None)
        assert before == "{\n  'a,b': 1\n}"

    def test_whitespace_collapsed(self):
        before, _char, _tail = layout_invalid('[1,\n\n   2  ]', None)
        assert before == "[\n  1,\n  2 \n]"

    def test_indent_width(self):
        before, _char, _tail = layout_invalid("[1]", None, indent=4)
        assert before == "[\n    1\n]"

    def test_depth_never_negative(self):
        before, _char, _tail = layout_invalid("]]1", None)
        assert before == "\n]\n]1"


class TestRenderInvalid:
    def test_single_quoted_kinds(self):
        lines = render_invalid("{'a': 'x'}", None)
        assert [line.text for line in lines] == ["{", "  'a': 'x'", "}"]
        kinds = [s.kind for s in lines[1].spans]
        assert TokenKind.KEY_INVALID in kinds
        assert TokenKind.STRING_INVALID in kinds

    def test_no_offset_has_no_marker(self):
        lines = render_invalid('{"a": 1}', None)
        kinds = {s.kind for line in lines for s in line.spans}
        assert TokenKind.ERROR_CHAR not in kinds
        assert TokenKind.ERROR_TAIL not in kinds

    def test_line_indices(self):
        lines = render_invalid("[1, 2]", 1)
        assert [line.index for line in lines] == list(range(len(lines)))
