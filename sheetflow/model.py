"""Reference host document: top-level blocks, positions and change notification.

The pagination engine only needs a host that enumerates top-level blocks with
their position ranges and notifies listeners of changes. ``Document`` is that
host for plain-text documents where each line is one block.

Positions follow the rich-text tree convention: a block holding ``n``
characters spans ``n + 2`` positions (an opening and a closing token), and
position ``start + 1 + k`` sits before character ``k`` of the block.
"""

from __future__ import annotations

import bisect
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Tuple

from .text_layout import get_hanging_indent_width

logger = logging.getLogger(__name__)


class BlockKind(Enum):
    PARAGRAPH = "paragraph"
    HEADING1 = "heading1"
    HEADING2 = "heading2"
    LIST_ITEM = "list_item"


def block_kind(text: str) -> BlockKind:
    """Classify a block by its leading marker."""
    if text.startswith("# "):
        return BlockKind.HEADING1
    if text.startswith("## "):
        return BlockKind.HEADING2
    if get_hanging_indent_width(text) > 0:
        return BlockKind.LIST_ITEM
    return BlockKind.PARAGRAPH


# Leading marker written for each block format; ordered items are numbered
BLOCK_FORMATS = {
    "heading1": "# ",
    "heading2": "## ",
    "paragraph": "",
    "bullet": "- ",
    "ordered": "1. ",
}


def split_marker(text: str) -> Tuple[str, str]:
    """Split a block into its leading marker and its body."""
    if text.startswith("# ") or text.startswith("## "):
        width = text.index(" ") + 1
    else:
        width = get_hanging_indent_width(text)
    return text[:width], text[width:]


def block_format(text: str) -> str:
    marker = split_marker(text)[0].strip()
    if marker in ("#", "##"):
        return "heading1" if marker == "#" else "heading2"
    if not marker:
        return "paragraph"
    return "ordered" if marker[0].isdigit() else "bullet"


def _offset_position(text: str, offset: int) -> int:
    """Position of character ``offset`` of joined document text."""
    # Each newline stands for a closing and an opening token
    return 1 + offset + text.count("\n", 0, offset)


@dataclass(frozen=True)
class ContentNode:
    """Opaque handle for one top-level block."""

    index: int
    start: int
    size: int
    text: str = ""
    kind: BlockKind = BlockKind.PARAGRAPH
    is_block_level: bool = True

    @property
    def end(self) -> int:
        return self.start + self.size


@dataclass(frozen=True)
class MapResult:
    pos: int
    deleted: bool = False


class ChangeMapping:
    """Maps positions through a sequence of replaced ranges.

    Each range is ``(start, old_size, new_size)`` expressed in the coordinates
    left by the ranges before it.
    """

    def __init__(self, ranges: Optional[List[Tuple[int, int, int]]] = None):
        self.ranges: List[Tuple[int, int, int]] = list(ranges or [])

    @property
    def is_identity(self) -> bool:
        return all(old == 0 and new == 0 for _, old, new in self.ranges)

    def map(self, pos: int, assoc: int = 1) -> int:
        return self.map_result(pos, assoc).pos

    def map_result(self, pos: int, assoc: int = 1) -> MapResult:
        """Map ``pos``; ``assoc`` picks the side when an edit touches it.

        With ``assoc < 0`` the position stays left of content inserted at it
        and counts as deleted when the content before it is removed; with
        ``assoc > 0`` it moves right and counts as deleted when the content
        after it is removed.
        """
        deleted = False
        for start, old_size, new_size in self.ranges:
            end = start + old_size
            if pos < start:
                continue
            if pos > end:
                pos += new_size - old_size
                continue
            if not old_size:
                side = assoc
            elif pos == start:
                side = -1
            elif pos == end:
                side = 1
            else:
                side = assoc
            if pos != (start if assoc < 0 else end):
                deleted = True
            pos = start + (0 if side < 0 else new_size)
        return MapResult(pos, deleted)


@dataclass
class ChangeEvent:
    """Notification sent to host listeners after every update."""

    doc_changed: bool
    selection_changed: bool
    mapping: ChangeMapping = field(default_factory=ChangeMapping)


Listener = Callable[[ChangeEvent], None]


class Host(ABC):
    """What the pagination engine consumes from an editing surface."""

    @abstractmethod
    def blocks(self) -> List[ContentNode]:
        """Return the top-level blocks in document order."""

    @property
    @abstractmethod
    def is_destroyed(self) -> bool:
        """True once the surface has been torn down."""

    @abstractmethod
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener; returns an unsubscribe callable."""


class Document(Host):
    """A document of plain-text blocks, one per line."""

    def __init__(self, paragraphs: Optional[List[str]] = None):
        self.paragraphs: List[str] = list(paragraphs) if paragraphs else [""]
        self.selection: int = 1
        self.version: int = 0
        self._listeners: List[Listener] = []
        self._destroyed = False
        self._nodes: Optional[List[ContentNode]] = None

    @classmethod
    def from_text(cls, text: str) -> "Document":
        return cls(text.split("\n") if text else [""])

    def to_text(self) -> str:
        return "\n".join(self.paragraphs)

    # --- Host interface ---
    def blocks(self) -> List[ContentNode]:
        if self._nodes is None:
            nodes = []
            start = 0
            for i, text in enumerate(self.paragraphs):
                nodes.append(ContentNode(i, start, len(text) + 2, text, block_kind(text)))
                start += len(text) + 2
            self._nodes = nodes
        return self._nodes

    @property
    def is_destroyed(self) -> bool:
        return self._destroyed

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def destroy(self) -> None:
        self._destroyed = True
        self._listeners.clear()

    # --- Positions ---
    @property
    def size(self) -> int:
        return sum(len(p) + 2 for p in self.paragraphs)

    def node_at(self, pos: int) -> ContentNode:
        """Return the block whose range contains ``pos``."""
        nodes = self.blocks()
        starts = [n.start for n in nodes]
        i = bisect.bisect_right(starts, pos) - 1
        if i < 0 or pos >= nodes[i].end:
            raise IndexError(f"Position {pos} is outside the document")
        return nodes[i]

    def resolve(self, pos: int) -> Tuple[int, int]:
        """Return ``(paragraph_index, character_index)`` for a text position."""
        node = self.node_at(pos)
        char = pos - node.start - 1
        if not 0 <= char <= len(node.text):
            raise IndexError(f"Position {pos} is not inside block text")
        return node.index, char

    def text_position(self, paragraph_index: int, character_index: int = 0) -> int:
        node = self.blocks()[paragraph_index]
        return node.start + 1 + character_index

    # --- Editing ---
    def insert_text(self, pos: int, text: str) -> None:
        """Insert text at ``pos``; newlines split the block."""
        pi, ci = self.resolve(pos)
        current = self.paragraphs[pi]
        pieces = text.split("\n")
        pieces[0] = current[:ci] + pieces[0]
        pieces[-1] += current[ci:]
        self.paragraphs[pi:pi + 1] = pieces
        inserted = len(text) + text.count("\n")
        self.selection = pos + inserted
        self._changed(ChangeMapping([(pos, 0, inserted)]))

    def delete(self, from_pos: int, to_pos: int) -> None:
        """Delete the content between two text positions, joining blocks."""
        if to_pos <= from_pos:
            return
        pa, ca = self.resolve(from_pos)
        pb, cb = self.resolve(to_pos)
        joined = self.paragraphs[pa][:ca] + self.paragraphs[pb][cb:]
        self.paragraphs[pa:pb + 1] = [joined]
        self.selection = from_pos
        self._changed(ChangeMapping([(from_pos, to_pos - from_pos, 0)]))

    def append_block(self, text: str = "") -> None:
        end = self.size
        self.paragraphs.append(text)
        self._changed(ChangeMapping([(end, 0, len(text) + 2)]))

    def replace_content(self, paragraphs: List[str]) -> None:
        """Replace the whole document, e.g. when loading a template."""
        old_size = self.size
        self.paragraphs = list(paragraphs) if paragraphs else [""]
        self.selection = 1
        self._changed(ChangeMapping([(0, old_size, self.size)]))

    def clear(self) -> None:
        self.replace_content([""])

    def set_text(self, text: str) -> None:
        """Replace the document text, mapping only the characters that changed.

        The common prefix and suffix of the old and new text are left out of
        the mapped range, so a keystroke maps as a one-character insert and
        anchors at block boundaries around it survive.
        """
        old = self.to_text()
        if text == old:
            return
        limit = min(len(old), len(text))
        head = 0
        while head < limit and old[head] == text[head]:
            head += 1
        tail = 0
        while tail < limit - head and old[-1 - tail] == text[-1 - tail]:
            tail += 1
        start = _offset_position(old, head)
        old_end = _offset_position(old, len(old) - tail)
        new_end = _offset_position(text, len(text) - tail)
        self.paragraphs = text.split("\n")
        self.selection = min(self.selection, self.size - 1)
        self._changed(ChangeMapping([(start, old_end - start, new_end - start)]))

    def format_block(self, index: int, fmt: str) -> None:
        """Give block ``index`` the marker of ``fmt``; toggles back to a paragraph.

        ``fmt`` is one of ``BLOCK_FORMATS``. Ordered items are numbered one
        past a directly preceding ordered item.
        """
        if fmt not in BLOCK_FORMATS:
            raise ValueError(f"Unknown block format: {fmt}")
        text = self.paragraphs[index]
        marker, body = split_marker(text)
        if block_format(text) == fmt:
            fmt = "paragraph"
        if fmt == "ordered":
            number = 1
            if index > 0 and block_format(self.paragraphs[index - 1]) == "ordered":
                number = int(split_marker(self.paragraphs[index - 1])[0].strip()[:-1]) + 1
            new_marker = f"{number}. "
        else:
            new_marker = BLOCK_FORMATS[fmt]
        if new_marker == marker:
            return
        self.paragraphs[index] = new_marker + body
        start = self.blocks()[index].start + 1
        self._changed(ChangeMapping([(start, len(marker), len(new_marker))]))

    def set_selection(self, pos: int) -> None:
        if pos == self.selection:
            return
        self.selection = pos
        self._notify(ChangeEvent(doc_changed=False, selection_changed=True))

    def _changed(self, mapping: ChangeMapping) -> None:
        self._nodes = None
        self.version += 1
        self._notify(ChangeEvent(doc_changed=True, selection_changed=True, mapping=mapping))

    def _notify(self, event: ChangeEvent) -> None:
        if self._destroyed:
            logger.debug("Change on destroyed document ignored")
            return
        for listener in list(self._listeners):
            listener(event)
