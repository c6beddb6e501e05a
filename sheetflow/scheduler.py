"""Recompute scheduling with deferred commit.

Recomputation runs synchronously inside the host's change notification, but
the resulting commit must not run inside the host's own update phase. It is
handed to a deferral primitive and applied at the next scheduling boundary.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Deque, Optional

from .decorations import DecorationRenderer, DecorationSet
from .model import ChangeEvent, Host
from .planner import BreakPlanner, PaginationPlan
from .state import BreakStateStore, PaginationState

logger = logging.getLogger(__name__)

Task = Callable[[], None]
Defer = Callable[[Task], None]
CommitCallback = Callable[[PaginationState, PaginationPlan], None]


class HostTornDown(Exception):
    """The surface was destroyed between scheduling and commit."""


class DeferredQueue:
    """Tasks deferred until the host finishes its current update."""

    def __init__(self):
        self._tasks: Deque[Task] = deque()

    def defer(self, task: Task) -> None:
        self._tasks.append(task)

    @property
    def pending(self) -> bool:
        return bool(self._tasks)

    def run_pending(self) -> int:
        """Run the tasks queued so far; tasks they defer wait for the next call."""
        count = len(self._tasks)
        for _ in range(count):
            self._tasks.popleft()()
        return count


class RecomputeScheduler:
    """Replans on content changes and commits the result later."""

    def __init__(
        self,
        host: Host,
        planner: BreakPlanner,
        renderer: DecorationRenderer,
        store: BreakStateStore,
        defer: Defer,
        on_commit: Optional[CommitCallback] = None,
    ):
        self.host = host
        self.planner = planner
        self.renderer = renderer
        self.store = store
        self.defer = defer
        self.on_commit = on_commit
        self.generation = self.store.state.generation
        self.last_plan: Optional[PaginationPlan] = None
        self._unsubscribe: Optional[Callable[[], None]] = None

    def attach(self) -> None:
        if self._unsubscribe is None:
            self._unsubscribe = self.host.subscribe(self.handle_change)

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def handle_change(self, event: ChangeEvent) -> None:
        # Selection and cursor moves never affect layout
        if not event.doc_changed:
            return
        self.store.remap(event.mapping)
        self.recompute()

    def recompute(self) -> PaginationPlan:
        """Run a full pass now and schedule its commit."""
        self.generation += 1
        generation = self.generation
        plan = self.planner.plan(self.host.blocks())
        decorations = self.renderer.render(plan.breaks)
        self.last_plan = plan
        self.defer(lambda: self._deferred_commit(generation, decorations, plan))
        return plan

    def _deferred_commit(
        self, generation: int, decorations: DecorationSet, plan: PaginationPlan
    ) -> None:
        try:
            self._commit(generation, decorations, plan)
        except HostTornDown as e:
            logger.debug(f"Discarding commit {generation}: {e}")

    def _commit(self, generation: int, decorations: DecorationSet, plan: PaginationPlan) -> None:
        if self.host.is_destroyed:
            raise HostTornDown("surface destroyed before commit")
        if generation != self.generation:
            logger.debug(f"Commit {generation} superseded by {self.generation}")
            return
        if self.store.commit(decorations, generation) and self.on_commit is not None:
            self.on_commit(self.store.state, plan)
