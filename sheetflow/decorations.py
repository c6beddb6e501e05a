"""Spacer decorations rendered at page breaks."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Iterator, List, NamedTuple, Optional, Sequence

from .constants import PaginationConstants
from .model import ChangeMapping
from .planner import BreakDescriptor, Side


@dataclass(frozen=True)
class Decoration:
    """An inert, non-editable spacer anchored at a document position."""

    pos: int
    height: float
    side: Side
    page_number: int
    key: str

    @property
    def label(self) -> str:
        return PaginationConstants.PAGE_BREAK_LABEL.format(self.page_number)

    @property
    def summary(self) -> str:
        return f"{self.label}: {self.side.value} {self.pos}, {self.height:g}px"

    @property
    def assoc(self) -> int:
        # A spacer before a block follows that block; one after a split
        # line stays with the content above it.
        return 1 if self.side is Side.BEFORE else -1

    def map(self, mapping: ChangeMapping) -> Optional["Decoration"]:
        result = mapping.map_result(self.pos, self.assoc)
        if result.deleted:
            return None
        return replace(self, pos=result.pos)


class DecorationSet:
    """Immutable set of decorations ordered by position."""

    def __init__(self, decorations: Sequence[Decoration] = ()):
        self._decorations = tuple(sorted(decorations, key=lambda d: d.pos))

    def __iter__(self) -> Iterator[Decoration]:
        return iter(self._decorations)

    def __len__(self) -> int:
        return len(self._decorations)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DecorationSet):
            return NotImplemented
        return self._decorations == other._decorations

    def __hash__(self) -> int:
        return hash(self._decorations)

    def __repr__(self) -> str:
        return f"DecorationSet({list(self._decorations)!r})"

    @property
    def positions(self) -> List[int]:
        return [d.pos for d in self._decorations]

    def by_key(self) -> Dict[str, Decoration]:
        return {d.key: d for d in self._decorations}

    def map(self, mapping: ChangeMapping) -> "DecorationSet":
        if mapping.is_identity:
            return self
        mapped = (d.map(mapping) for d in self._decorations)
        return DecorationSet([d for d in mapped if d is not None])


EMPTY_DECORATIONS = DecorationSet()


class Reconciliation(NamedTuple):
    kept: List[str]
    added: List[str]
    removed: List[str]


def spacer_key(pos: int) -> str:
    return f"{PaginationConstants.PAGE_BREAK_KEY_PREFIX}{pos}"


class DecorationRenderer:
    """Turns break descriptors into keyed spacer decorations."""

    def render(self, breaks: Sequence[BreakDescriptor]) -> DecorationSet:
        return DecorationSet([
            Decoration(
                pos=descriptor.split_position,
                height=descriptor.spacer_height,
                side=descriptor.side,
                # The first break opens page 2
                page_number=i + 2,
                key=spacer_key(descriptor.split_position),
            )
            for i, descriptor in enumerate(breaks)
        ])

    @staticmethod
    def reconcile(old: DecorationSet, new: DecorationSet) -> Reconciliation:
        """Diff two sets by key so unmoved spacers can be left in place."""
        old_keys = old.by_key()
        new_keys = new.by_key()
        return Reconciliation(
            kept=[k for k in new_keys if k in old_keys],
            added=[k for k in new_keys if k not in old_keys],
            removed=[k for k in old_keys if k not in new_keys],
        )
