"""Tests for collapse/expand over the block forest."""

import itertools
import json

import pytest

from jsonmend.document import format_text
from jsonmend.errors import UnknownBlockError

# 0 {
# 1   "a": {
# 2     "b": [
# 3       1,
# 4       2
# 5     ]
# 6   },
# 7   "c": []
# 8 }
SOURCE = json.dumps({"a": {"b": [1, 2]}, "c": []})


def _doc():
    return format_text(SOURCE)


class TestToggle:
    def test_all_visible_by_default(self):
        doc = _doc()
        assert doc.visible_lines() == frozenset(range(9))
        assert doc.collapsed == frozenset()

    def test_collapse_hides_interior_and_end(self):
        doc = _doc()
        visible = doc.toggle(1)
        assert visible == frozenset({0, 1, 7, 8})
        assert doc.is_collapsed(1)

    def test_placeholder_kind(self):
        doc = _doc()
        doc.toggle(1)
        doc.toggle(2)
        assert doc.placeholder(1) == " {...}"
        assert doc.placeholder(2) == " [...]"
        assert doc.placeholder(3) == ""

    def test_expand_removes_placeholder(self):
        doc = _doc()
        doc.toggle(1)
        doc.toggle(1)
        assert doc.placeholder(1) == ""
        assert doc.visible_lines() == frozenset(range(9))

    def test_expand_keeps_nested_collapsed(self):
        doc = _doc()
        doc.collapse(2)
        doc.collapse(1)
        visible = doc.expand(1)
        assert visible == frozenset({0, 1, 2, 6, 7, 8})

    def test_round_trip_any_configuration(self):
        for block_id in range(3):
            others = [b for b in range(3) if b != block_id]
            for n in range(len(others) + 1):
                for held in itertools.combinations(others, n):
                    doc = _doc()
                    for other in held:
                        doc.collapse(other)
                    before = doc.visible_lines()
                    doc.toggle(block_id)
                    assert doc.toggle(block_id) == before

    def test_unknown_block(self):
        doc = _doc()
        with pytest.raises(UnknownBlockError):
            doc.toggle(99)
        with pytest.raises(KeyError):
            doc.is_collapsed(99)

    def test_hidden_count(self):
        assert _doc().hidden_count(1) == 5


class TestQueries:
    def test_block_at(self):
        doc = _doc()
        assert doc.block_at(2).block_id == 2
        assert doc.block_at(3) is None

    def test_enclosing_block(self):
        doc = _doc()
        assert doc.enclosing_block(3).block_id == 2
        assert doc.enclosing_block(6).block_id == 1
        assert doc.enclosing_block(8).block_id == 0
        assert doc.enclosing_block(0) is None

    def test_visibility_from_ancestors(self):
        doc = _doc()
        doc.collapse(0)
        assert not doc.is_line_visible(3)
        assert doc.is_line_visible(0)


class TestBulk:
    def test_collapse_all_keeps_root_open(self):
        doc = _doc()
        visible = doc.collapse_all()
        assert doc.collapsed == frozenset({1, 2})
        assert visible == frozenset({0, 1, 7, 8})

    def test_expand_all(self):
        doc = _doc()
        doc.collapse_all()
        assert doc.expand_all() == frozenset(range(9))

    def test_reveal(self):
        doc = _doc()
        doc.collapse(2)
        doc.collapse(1)
        doc.reveal(3)
        assert doc.collapsed == frozenset()

    def test_reveal_leaves_unrelated_blocks(self):
        doc = format_text(json.dumps({"a": [1], "b": [2]}))
        doc.collapse(1)
        doc.collapse(2)
        doc.reveal(2)
        assert doc.collapsed == frozenset({2})
