"""Composition of the pagination pipeline around one editing surface.

change notification -> RecomputeScheduler -> BreakPlanner -> DecorationRenderer
-> BreakStateStore.commit (deferred) -> PageMaskSynchronizer.sync
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Tuple

from .config import PageConfig
from .decorations import DecorationRenderer, DecorationSet
from .geometry import GeometryProbe, TextLayoutProbe
from .model import Document, Host
from .page_mask import MaskLayer, PageMaskSynchronizer, TextMaskLayer
from .planner import BreakPlanner, PaginationPlan
from .scheduler import DeferredQueue, Defer, RecomputeScheduler
from .state import BreakStateStore, PaginationState

logger = logging.getLogger(__name__)


class Paginator:
    """Owns the probe, the mask handle and the pipeline for one host."""

    def __init__(
        self,
        host: Host,
        probe: GeometryProbe,
        config: Optional[PageConfig] = None,
        mask_layer: Optional[MaskLayer] = None,
        defer: Optional[Defer] = None,
    ):
        self.host = host
        self.probe = probe
        self.config = config or PageConfig()
        # Headless hosts drain this queue after each update
        self.queue: Optional[DeferredQueue] = None
        if defer is None:
            self.queue = DeferredQueue()
            defer = self.queue.defer
        self.store = BreakStateStore()
        self.renderer = DecorationRenderer()
        self.planner = BreakPlanner(self.config, probe)
        self.mask = PageMaskSynchronizer(mask_layer or TextMaskLayer())
        self.scheduler = RecomputeScheduler(
            host, self.planner, self.renderer, self.store, defer, on_commit=self._on_commit
        )
        self._listeners: List[Callable[[PaginationState], None]] = []

    def start(self) -> None:
        """Subscribe to the host and schedule the initial pass."""
        self.mask.sync(self.store.page_count)
        self.scheduler.attach()
        self.scheduler.recompute()

    def stop(self) -> None:
        self.scheduler.detach()

    def flush(self) -> int:
        """Run deferred commits; only meaningful with the built-in queue."""
        if self.queue is None:
            return 0
        return self.queue.run_pending()

    def add_listener(self, listener: Callable[[PaginationState], None]) -> None:
        self._listeners.append(listener)

    @property
    def page_count(self) -> int:
        return self.store.page_count

    @property
    def decorations(self) -> DecorationSet:
        return self.store.decorations

    @property
    def plan(self) -> Optional[PaginationPlan]:
        return self.scheduler.last_plan

    def _on_commit(self, state: PaginationState, plan: PaginationPlan) -> None:
        self.mask.sync(state.page_count)
        for listener in self._listeners:
            listener(state)


def paginate(
    document: Document,
    config: Optional[PageConfig] = None,
    num_columns: Optional[int] = None,
) -> Tuple[PaginationPlan, TextLayoutProbe]:
    """Plan breaks for a document once, without a live surface."""
    if num_columns is None:
        probe = TextLayoutProbe(document)
    else:
        probe = TextLayoutProbe(document, num_columns=num_columns)
    planner = BreakPlanner(config or PageConfig(), probe)
    return planner.plan(document.blocks()), probe
