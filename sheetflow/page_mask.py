"""Page mask: one decorative frame per sheet, kept in step with the page count."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import List

logger = logging.getLogger(__name__)


class MaskLayer(ABC):
    """Handle to the visual layer that draws sheet frames."""

    @property
    @abstractmethod
    def frame_count(self) -> int:
        """Number of frames currently drawn."""

    @abstractmethod
    def rebuild(self, count: int) -> None:
        """Replace all frames with exactly ``count`` new ones."""


class TextMaskLayer(MaskLayer):
    """Mask layer that keeps a text label per frame."""

    def __init__(self):
        self.frames: List[str] = []
        self.rebuilds = 0

    @property
    def frame_count(self) -> int:
        return len(self.frames)

    def rebuild(self, count: int) -> None:
        self.frames = [f"Sheet {i}" for i in range(1, count + 1)]
        self.rebuilds += 1


class PageMaskSynchronizer:
    def __init__(self, layer: MaskLayer):
        self.layer = layer

    def sync(self, page_count: int) -> bool:
        """Rebuild the mask when the page count changed; return whether it did."""
        page_count = max(1, page_count)
        if self.layer.frame_count == page_count:
            return False
        logger.debug(f"Page mask: {self.layer.frame_count} -> {page_count} frames")
        self.layer.rebuild(page_count)
        return True
