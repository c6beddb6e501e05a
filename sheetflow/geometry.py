"""Geometry probes: rendered block heights and screen coordinates of positions.

Coordinates are relative to the content surface's own top edge, so they are
stable under scrolling. A probe may refuse to measure content that is not
currently rendered by raising ``GeometryUnavailable``.
"""

from __future__ import annotations

import bisect
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional, Set, Tuple

from .constants import PaginationConstants
from .model import BlockKind, ContentNode, Document
from .text_layout import wrap_block

logger = logging.getLogger(__name__)


class GeometryUnavailable(Exception):
    """Raised when a node or position is not currently rendered."""


@dataclass(frozen=True)
class BlockGeometry:
    rendered_height: float
    margin_top: float = 0
    margin_bottom: float = 0

    @property
    def visual_height(self) -> float:
        return self.rendered_height + self.margin_top + self.margin_bottom


class GeometryProbe(ABC):
    """Read-only view of the render surface."""

    @abstractmethod
    def measure_block(self, node: ContentNode) -> BlockGeometry:
        """Return the rendered height and vertical margins of a block."""

    @abstractmethod
    def screen_top_of(self, pos: int) -> float:
        """Return the top of the line box containing ``pos``."""

    @abstractmethod
    def screen_bottom_of(self, pos: int) -> float:
        """Return the bottom of the line box containing ``pos``."""


@dataclass(frozen=True)
class BlockStyle:
    line_height: float
    margin_top: float = 0
    margin_bottom: float = 0


C = PaginationConstants

DEFAULT_STYLES: Dict[BlockKind, BlockStyle] = {
    BlockKind.PARAGRAPH: BlockStyle(C.LINE_HEIGHT, 0, C.PARAGRAPH_MARGIN),
    BlockKind.LIST_ITEM: BlockStyle(C.LINE_HEIGHT, 0, C.LIST_ITEM_MARGIN),
    BlockKind.HEADING1: BlockStyle(
        C.HEADING1_LINE_HEIGHT, C.HEADING1_MARGIN_TOP, C.HEADING1_MARGIN_BOTTOM
    ),
    BlockKind.HEADING2: BlockStyle(
        C.HEADING2_LINE_HEIGHT, C.HEADING2_MARGIN_TOP, C.HEADING2_MARGIN_BOTTOM
    ),
}


@dataclass
class _BlockLayout:
    node: ContentNode
    style: BlockStyle
    lines: List[str]
    counts: List[int]
    top: float

    @property
    def content_top(self) -> float:
        return self.top + self.style.margin_top

    @property
    def rendered_height(self) -> float:
        return len(self.lines) * self.style.line_height

    @property
    def bottom(self) -> float:
        return self.content_top + self.rendered_height + self.style.margin_bottom

    def line_index(self, char_index: int) -> int:
        return min(bisect.bisect_right(self.counts, char_index), len(self.lines) - 1)


class TextLayoutProbe(GeometryProbe):
    """Lays out a ``Document`` as wrapped fixed-pitch text.

    Each visual line is ``style.line_height`` tall; blocks stack without
    margin collapsing. The layout is rebuilt whenever the document version
    changes.
    """

    def __init__(
        self,
        document: Document,
        num_columns: int = PaginationConstants.DOCUMENT_COLUMNS,
        styles: Optional[Dict[BlockKind, BlockStyle]] = None,
    ):
        self.document = document
        self.num_columns = num_columns
        self.styles = dict(DEFAULT_STYLES)
        if styles:
            self.styles.update(styles)
        # Block indices that are virtualized out of the render surface
        self.unrendered: Set[int] = set()
        self._wrap_cache: Dict[str, Tuple[List[str], List[int]]] = {}
        self._layouts: List[_BlockLayout] = []
        self._starts: List[int] = []
        self._version: Optional[int] = None

    def mark_unrendered(self, index: int) -> None:
        self.unrendered.add(index)

    def mark_rendered(self, index: int) -> None:
        self.unrendered.discard(index)

    def _ensure_layout(self) -> None:
        if self._version == self.document.version:
            return
        layouts = []
        top = 0.0
        for node in self.document.blocks():
            lines, counts = self._wrap(node.text)
            layout = _BlockLayout(node, self.styles[node.kind], lines, counts, top)
            layouts.append(layout)
            top = layout.bottom
        self._layouts = layouts
        self._starts = [layout.node.start for layout in layouts]
        self._version = self.document.version

    def _wrap(self, text: str) -> Tuple[List[str], List[int]]:
        wrapped = self._wrap_cache.get(text)
        if wrapped is None:
            wrapped = wrap_block(text, self.num_columns)
            self._wrap_cache[text] = wrapped
        return wrapped

    def _layout_for_index(self, index: int) -> _BlockLayout:
        self._ensure_layout()
        if index in self.unrendered or not 0 <= index < len(self._layouts):
            raise GeometryUnavailable(f"Block {index} is not rendered")
        return self._layouts[index]

    def _layout_at(self, pos: int) -> _BlockLayout:
        self._ensure_layout()
        i = bisect.bisect_right(self._starts, pos) - 1
        if i < 0 or pos >= self._layouts[i].node.end:
            raise GeometryUnavailable(f"Position {pos} is outside the document")
        return self._layout_for_index(i)

    def _line_box(self, pos: int) -> Tuple[float, float]:
        layout = self._layout_at(pos)
        char_index = max(0, pos - layout.node.start - 1)
        line = layout.line_index(char_index)
        top = layout.content_top + line * layout.style.line_height
        return top, top + layout.style.line_height

    # --- GeometryProbe ---
    def measure_block(self, node: ContentNode) -> BlockGeometry:
        layout = self._layout_for_index(node.index)
        return BlockGeometry(
            layout.rendered_height, layout.style.margin_top, layout.style.margin_bottom
        )

    def screen_top_of(self, pos: int) -> float:
        return self._line_box(pos)[0]

    def screen_bottom_of(self, pos: int) -> float:
        return self._line_box(pos)[1]

    # --- Layout inspection ---
    def lines_of(self, node: ContentNode) -> List[str]:
        return list(self._layout_for_index(node.index).lines)

    def line_start_positions(self, node: ContentNode) -> List[int]:
        """Return the position at which each visual line of ``node`` begins."""
        layout = self._layout_for_index(node.index)
        first = node.start + 1
        return [first] + [first + count for count in layout.counts[:-1]]
