"""Tests for spacer decorations and the committed state store."""

from sheetflow.decorations import (
    EMPTY_DECORATIONS,
    Decoration,
    DecorationRenderer,
    DecorationSet,
)
from sheetflow.model import ChangeMapping
from sheetflow.planner import BreakDescriptor, Side
from sheetflow.state import BreakStateStore, PaginationState


BREAKS = [
    BreakDescriptor(24, 488, Side.BEFORE),
    BreakDescriptor(361, 224, Side.AFTER),
]


def test_render_keys_and_page_numbers():
    decorations = DecorationRenderer().render(BREAKS)

    assert [d.key for d in decorations] == ["page-break-24", "page-break-361"]
    assert [d.label for d in decorations] == ["PAGE 2", "PAGE 3"]
    assert [d.height for d in decorations] == [488, 224]


def test_render_is_deterministic():
    renderer = DecorationRenderer()
    assert renderer.render(BREAKS) == renderer.render(BREAKS)


def test_side_sets_binding_direction():
    before = Decoration(24, 100, Side.BEFORE, 2, "page-break-24")
    after = Decoration(24, 100, Side.AFTER, 2, "page-break-24")
    mapping = ChangeMapping([(24, 0, 5)])

    # A spacer before a block moves with the block
    assert before.map(mapping).pos == 29
    # A spacer after a split line stays with the text above it
    assert after.map(mapping).pos == 24


def test_map_drops_deleted_spacers():
    decorations = DecorationRenderer().render(BREAKS)
    mapped = decorations.map(ChangeMapping([(300, 100, 0)]))

    assert mapped.positions == [24]


def test_map_keeps_keys_stable():
    decorations = DecorationRenderer().render(BREAKS)
    mapped = decorations.map(ChangeMapping([(0, 0, 3)]))

    assert mapped.positions == [27, 364]
    assert [d.key for d in mapped] == ["page-break-24", "page-break-361"]


def test_identity_map_returns_same_set():
    decorations = DecorationRenderer().render(BREAKS)
    assert decorations.map(ChangeMapping()) is decorations


def test_reconcile_leaves_unmoved_spacers():
    renderer = DecorationRenderer()
    old = renderer.render(BREAKS)
    new = renderer.render([BREAKS[0], BreakDescriptor(400, 100, Side.AFTER)])

    result = renderer.reconcile(old, new)

    assert result.kept == ["page-break-24"]
    assert result.added == ["page-break-400"]
    assert result.removed == ["page-break-361"]


def test_summary():
    decorations = DecorationRenderer().render(BREAKS)
    assert [d.summary for d in decorations] == [
        "PAGE 2: before 24, 488px",
        "PAGE 3: after 361, 224px",
    ]


def test_sets_are_hashable():
    renderer = DecorationRenderer()
    assert hash(renderer.render(BREAKS)) == hash(renderer.render(BREAKS))
    assert hash(EMPTY_DECORATIONS) == hash(DecorationSet())


class TestBreakStateStore:
    def test_starts_empty(self):
        store = BreakStateStore()
        assert store.decorations == EMPTY_DECORATIONS
        assert store.page_count == 1
        assert store.state.generation == 0

    def test_default_state_is_one_empty_page(self):
        state = PaginationState()
        assert state.decorations == EMPTY_DECORATIONS
        assert state.page_count == 1
        assert state.generation == 0

    def test_commit_replaces_whole_set(self):
        store = BreakStateStore()
        renderer = DecorationRenderer()
        store.commit(renderer.render(BREAKS))
        store.commit(renderer.render(BREAKS[:1]))

        assert store.decorations.positions == [24]
        assert store.page_count == 2
        assert store.state.generation == 2

    def test_stale_commit_refused(self):
        store = BreakStateStore()
        decorations = DecorationRenderer().render(BREAKS)
        assert store.commit(decorations, generation=5)
        assert not store.commit(DecorationSet(), generation=4)
        assert store.decorations == decorations

    def test_remap_shifts_anchors_and_keeps_generation(self):
        store = BreakStateStore()
        store.commit(DecorationRenderer().render(BREAKS), generation=3)
        previous = store.state

        state = store.remap(ChangeMapping([(10, 0, 2)]))

        assert state.decorations.positions == [26, 363]
        assert state.generation == 3
        # States are immutable; the old one is untouched
        assert previous.decorations.positions == [24, 361]

    def test_remap_identity_keeps_state(self):
        store = BreakStateStore()
        store.commit(DecorationRenderer().render(BREAKS))
        state = store.state
        assert store.remap(ChangeMapping()) is state
