"""Break planning: decide where page boundaries fall in flowing content.

The planner walks the top-level blocks in document order and keeps a running
height for the current page. When a block does not fit, it either splits the
block at the start of the first line that overflows, or pushes the whole block
to the next page. Every break carries a spacer tall enough to fill the rest of
the page plus both sheet margins and the gap between sheets, so that each
sheet has the same usable height wherever its break falls.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from .config import PageConfig
from .constants import PaginationConstants
from .geometry import BlockGeometry, GeometryProbe, GeometryUnavailable
from .model import ContentNode

logger = logging.getLogger(__name__)


class BinarySearchExhausted(Exception):
    """No interior position of a block can start the next page."""


class Side(Enum):
    BEFORE = "before"
    AFTER = "after"


@dataclass(frozen=True)
class BreakDescriptor:
    split_position: int
    spacer_height: float
    side: Side


@dataclass
class PaginationPlan:
    breaks: List[BreakDescriptor] = field(default_factory=list)
    page_count: int = 1
    # Position at which each page begins
    page_starts: List[int] = field(default_factory=list)
    # Indices of blocks skipped because their geometry was unavailable
    skipped: List[int] = field(default_factory=list)


class BreakPlanner:
    """Computes page breaks from block geometry."""

    def __init__(self, config: PageConfig, probe: GeometryProbe):
        self.config = config
        self.probe = probe

    def plan(self, blocks: Iterable[ContentNode]) -> PaginationPlan:
        """Run one full pass over ``blocks`` and return the resulting plan."""
        plan = PaginationPlan()
        running_height = 0.0
        for node in blocks:
            if not node.is_block_level:
                continue
            if not plan.page_starts:
                plan.page_starts.append(node.start)
            try:
                geometry = self.probe.measure_block(node)
            except GeometryUnavailable as e:
                logger.debug(f"Skipping block {node.index}: {e}")
                plan.skipped.append(node.index)
                continue

            visual_height = geometry.visual_height
            if self._fits(running_height + visual_height):
                running_height += visual_height
                continue

            try:
                descriptor, running_height = self._break_block(node, geometry, running_height)
            except GeometryUnavailable as e:
                # Treat the block as fitting and keep the rest of the pass
                logger.debug(f"Geometry lost while splitting block {node.index}: {e}")
                plan.skipped.append(node.index)
                running_height += visual_height
                continue
            if descriptor is not None:
                plan.breaks.append(descriptor)
                plan.page_starts.append(descriptor.split_position)

        plan.page_count = len(plan.breaks) + 1
        if not plan.page_starts:
            plan.page_starts.append(0)
        logger.debug(
            f"Planned {plan.page_count} page(s), {len(plan.skipped)} block(s) skipped"
        )
        return plan

    def _fits(self, height: float) -> bool:
        return height - self.config.usable_page_height < PaginationConstants.FIT_EPSILON

    def _break_block(
        self, node: ContentNode, geometry: BlockGeometry, running_height: float
    ) -> Tuple[Optional[BreakDescriptor], float]:
        """Break an overflowing block; return the break and the new running height."""
        usable = self.config.usable_page_height
        space_remaining = max(0.0, usable - running_height)
        try:
            split_position = self._find_split(node, geometry, space_remaining)
        except BinarySearchExhausted:
            return self._push_block(node, geometry, running_height, space_remaining)

        fitting_height = (
            self.probe.screen_bottom_of(split_position - 1)
            - self.probe.screen_top_of(node.start + 1)
        ) + geometry.margin_top
        empty_space = usable - (running_height + fitting_height)
        descriptor = BreakDescriptor(
            split_position, empty_space + self.config.break_overhead, Side.AFTER
        )
        return descriptor, geometry.visual_height - fitting_height

    def _push_block(
        self,
        node: ContentNode,
        geometry: BlockGeometry,
        running_height: float,
        space_remaining: float,
    ) -> Tuple[Optional[BreakDescriptor], float]:
        if running_height <= 0:
            # Already at the top of a sheet; a push would only add a blank one
            logger.debug(f"Block {node.index} overflows an empty page; not pushed")
            return None, running_height + geometry.visual_height
        descriptor = BreakDescriptor(
            node.start, space_remaining + self.config.break_overhead, Side.BEFORE
        )
        return descriptor, geometry.visual_height

    def _find_split(
        self, node: ContentNode, geometry: BlockGeometry, space_remaining: float
    ) -> int:
        """Return the first position of the first line that overflows the page.

        Screen Y is non-decreasing in position within a block, so a binary
        search finds the first overflowing position; walking back while the
        screen top stays on the same line lands on that line's start.
        """
        first = node.start + 1
        last = node.end - 1
        if last <= first:
            raise BinarySearchExhausted(f"Block {node.index} has no interior positions")

        origin = self.probe.screen_top_of(first)

        def overflows(pos: int) -> bool:
            line_bottom = self.probe.screen_bottom_of(pos) - origin + geometry.margin_top
            return line_bottom - space_remaining > PaginationConstants.OVERFLOW_EPSILON

        found = None
        lo, hi = first, last
        while lo <= hi:
            mid = (lo + hi) // 2
            if overflows(mid):
                found = mid
                hi = mid - 1
            else:
                lo = mid + 1
        if found is None:
            raise BinarySearchExhausted(f"Every line of block {node.index} fits")

        line_top = self.probe.screen_top_of(found)
        split_position = found
        while split_position > first and (
            abs(self.probe.screen_top_of(split_position - 1) - line_top)
            <= PaginationConstants.SAME_LINE_EPSILON
        ):
            split_position -= 1

        if split_position <= first or split_position >= last:
            raise BinarySearchExhausted(
                f"Split of block {node.index} collapsed to its edge at {split_position}"
            )
        return split_position
