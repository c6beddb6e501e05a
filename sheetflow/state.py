"""Committed pagination state."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .decorations import EMPTY_DECORATIONS, DecorationSet
from .model import ChangeMapping

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaginationState:
    decorations: DecorationSet = EMPTY_DECORATIONS
    generation: int = 0

    @property
    def page_count(self) -> int:
        return len(self.decorations) + 1


class BreakStateStore:
    """Sole owner of the committed decoration set.

    State is immutable: ``commit`` swaps in a new set wholesale, ``remap``
    shifts the existing anchors through an edit without recomputing them.
    """

    def __init__(self):
        self._state = PaginationState()

    @property
    def state(self) -> PaginationState:
        return self._state

    @property
    def decorations(self) -> DecorationSet:
        return self._state.decorations

    @property
    def page_count(self) -> int:
        return self._state.page_count

    def commit(self, decorations: DecorationSet, generation: Optional[int] = None) -> bool:
        """Replace the decoration set.

        Args:
            decorations: The freshly rendered set.
            generation: Recompute generation that produced the set. A commit
                older than the committed generation is refused.

        Returns:
            True if the set was committed.
        """
        current = self._state.generation
        if generation is None:
            generation = current + 1
        elif generation < current:
            logger.debug(f"Refusing stale commit {generation} (have {current})")
            return False
        self._state = PaginationState(decorations, generation)
        return True

    def remap(self, mapping: ChangeMapping) -> PaginationState:
        """Map current anchors through an edit; dropped anchors disappear."""
        decorations = self._state.decorations.map(mapping)
        if decorations is not self._state.decorations:
            self._state = PaginationState(decorations, self._state.generation)
        return self._state
