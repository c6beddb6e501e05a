"""Shared fixtures: a geometry probe with explicit line heights."""

from typing import List, Optional, Sequence

import pytest

from sheetflow.geometry import BlockGeometry, GeometryProbe, GeometryUnavailable
from sheetflow.model import ContentNode


class StubProbe(GeometryProbe):
    """Blocks of fixed-width lines whose heights are given explicitly.

    Every line holds ``chars_per_line`` positions, so line ``i`` of a block
    starting at ``start`` begins at ``start + 1 + i * chars_per_line``.
    Explicit ``sizes`` can make the last line hold only the block's end.
    """

    def __init__(
        self,
        blocks: Sequence[Sequence[float]],
        margins: Optional[Sequence[tuple]] = None,
        chars_per_line: int = 10,
        sizes: Optional[Sequence[int]] = None,
    ):
        self.chars_per_line = chars_per_line
        self.line_heights: List[List[float]] = [list(b) for b in blocks]
        self.margins = list(margins) if margins else [(0, 0)] * len(self.line_heights)
        self.failing: set = set()
        # Blocks that can be measured but whose positions cannot be located
        self.unlocatable: set = set()
        self.nodes: List[ContentNode] = []
        self.tops: List[float] = []
        start = 0
        top = 0.0
        for i, lines in enumerate(self.line_heights):
            size = sizes[i] if sizes else len(lines) * chars_per_line + 2
            self.nodes.append(ContentNode(i, start, size))
            self.tops.append(top)
            margin_top, margin_bottom = self.margins[i]
            top += margin_top + sum(lines) + margin_bottom
            start += size

    def _node_at(self, pos: int) -> ContentNode:
        for node in self.nodes:
            if node.start <= pos < node.end:
                if node.index in self.failing or node.index in self.unlocatable:
                    raise GeometryUnavailable(f"block {node.index} not rendered")
                return node
        raise GeometryUnavailable(f"position {pos} outside document")

    def _line_box(self, pos: int) -> tuple:
        node = self._node_at(pos)
        lines = self.line_heights[node.index]
        line = min(max(0, pos - node.start - 1) // self.chars_per_line, len(lines) - 1)
        top = self.tops[node.index] + self.margins[node.index][0] + sum(lines[:line])
        return top, top + lines[line]

    def measure_block(self, node: ContentNode) -> BlockGeometry:
        if node.index in self.failing:
            raise GeometryUnavailable(f"block {node.index} not rendered")
        margin_top, margin_bottom = self.margins[node.index]
        return BlockGeometry(sum(self.line_heights[node.index]), margin_top, margin_bottom)

    def screen_top_of(self, pos: int) -> float:
        return self._line_box(pos)[0]

    def screen_bottom_of(self, pos: int) -> float:
        return self._line_box(pos)[1]

    def line_start(self, index: int, line: int) -> int:
        return self.nodes[index].start + 1 + line * self.chars_per_line


@pytest.fixture
def stub_probe():
    """Factory for StubProbe instances."""
    return StubProbe
