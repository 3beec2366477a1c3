"""Collapse/expand mixin for rendered documents."""

from __future__ import annotations

from jsonmend.errors import UnknownBlockError
from jsonmend.render import Block


class FoldMixin:
    """Collapse state over the block forest of a rendering.

    Only the set of collapsed block ids is stored; line visibility is
    always derived from it.
    """

    def _init_folds(self) -> None:
        self._collapsed: set[int] = set()
        self._blocks_by_id: dict[int, Block] = {b.block_id: b for b in self.blocks}
        self._blocks_by_start: dict[int, Block] = {b.start: b for b in self.blocks}

    def _block(self, block_id: int) -> Block:
        try:
            return self._blocks_by_id[block_id]
        except KeyError:
            raise UnknownBlockError(block_id) from None

    # -- Queries -----------------------------------------------------------

    @property
    def collapsed(self) -> frozenset[int]:
        return frozenset(self._collapsed)

    def is_collapsed(self, block_id: int) -> bool:
        self._block(block_id)
        return block_id in self._collapsed

    def block_at(self, line_idx: int) -> Block | None:
        """Block whose start line is *line_idx*."""
        return self._blocks_by_start.get(line_idx)

    def enclosing_block(self, line_idx: int) -> Block | None:
        """Nearest block that strictly contains *line_idx* (start < line <= end)."""
        best: Block | None = None
        for block in self.blocks:
            if block.start < line_idx <= block.end:
                if best is None or block.start > best.start:
                    best = block
        return best

    def _hidden_by(self, line_idx: int) -> list[Block]:
        return [
            self._blocks_by_id[bid]
            for bid in self._collapsed
            if self._blocks_by_id[bid].start < line_idx <= self._blocks_by_id[bid].end
        ]

    def is_line_visible(self, line_idx: int) -> bool:
        return not self._hidden_by(line_idx)

    def visible_lines(self) -> frozenset[int]:
        if not self._collapsed:
            return frozenset(range(len(self.lines)))
        return frozenset(
            i for i in range(len(self.lines)) if self.is_line_visible(i)
        )

    def placeholder(self, line_idx: int) -> str:
        """Marker shown after a collapsed block's start line, or ""."""
        block = self._blocks_by_start.get(line_idx)
        if block is None or block.block_id not in self._collapsed:
            return ""
        return block.placeholder

    def hidden_count(self, block_id: int) -> int:
        block = self._block(block_id)
        return block.end - block.start

    # -- Mutations ---------------------------------------------------------

    def collapse(self, block_id: int) -> frozenset[int]:
        self._block(block_id)
        self._collapsed.add(block_id)
        return self.visible_lines()

    def expand(self, block_id: int) -> frozenset[int]:
        self._block(block_id)
        self._collapsed.discard(block_id)
        return self.visible_lines()

    def toggle(self, block_id: int) -> frozenset[int]:
        """Flip a block's collapse state and return the visible line set."""
        if block_id in self._collapsed or block_id not in self._blocks_by_id:
            return self.expand(block_id)
        return self.collapse(block_id)

    def collapse_all(self) -> frozenset[int]:
        """Collapse every block except a root that spans the whole document."""
        self._collapsed = {
            b.block_id
            for b in self.blocks
            if not (b.start == 0 and b.end == len(self.lines) - 1)
        }
        return self.visible_lines()

    def expand_all(self) -> frozenset[int]:
        self._collapsed.clear()
        return self.visible_lines()

    def reveal(self, line_idx: int) -> None:
        """Expand every collapsed block that hides *line_idx*."""
        for block in self._hidden_by(line_idx):
            self._collapsed.discard(block.block_id)
