"""End-to-end tests: document edits driving pagination and the page mask."""

from sheetflow import Document, PageConfig, Paginator, TextLayoutProbe, TextMaskLayer, paginate
from sheetflow.planner import Side


def make_paginator(paragraphs, config=None):
    document = Document(paragraphs)
    layer = TextMaskLayer()
    paginator = Paginator(document, TextLayoutProbe(document), config=config, mask_layer=layer)
    paginator.start()
    paginator.flush()
    return document, paginator, layer


def test_short_document_is_one_page():
    document, paginator, layer = make_paginator(["# Title", "Hello"])

    assert paginator.page_count == 1
    assert len(paginator.decorations) == 0
    assert layer.frames == ["Sheet 1"]


def test_typing_past_the_page_adds_a_sheet():
    document, paginator, layer = make_paginator(["Line"] * 20)
    assert paginator.page_count == 1

    for _ in range(5):
        document.append_block("More text")
    paginator.flush()

    assert paginator.page_count == 2
    assert layer.frame_count == 2
    (decoration,) = paginator.decorations
    assert decoration.label == "PAGE 2"


def test_deleting_content_removes_the_sheet():
    document, paginator, layer = make_paginator(["Line"] * 30)
    assert paginator.page_count == 2

    document.delete(document.text_position(10, 0), document.text_position(29, 0))
    paginator.flush()

    assert paginator.page_count == 1
    assert layer.frames == ["Sheet 1"]


def test_spacers_follow_edits_above_them_before_the_commit():
    document, paginator, layer = make_paginator(["Line"] * 30)
    (before,) = paginator.decorations.positions

    document.insert_text(document.text_position(0, 0), "abc")

    # Remapped synchronously, recomputed result not yet committed
    assert paginator.decorations.positions == [before + 3]
    paginator.flush()
    assert paginator.decorations.positions == [before + 3]


def test_edit_in_long_paragraph_moves_split():
    words = " ".join(f"w{i:03d}" for i in range(900))
    document, paginator, layer = make_paginator([words])
    (first,) = paginator.plan.breaks
    assert first.side is Side.AFTER

    document.insert_text(document.text_position(0, 0), "prefix ")
    paginator.flush()

    (second,) = paginator.plan.breaks
    assert second.split_position != first.split_position
    assert paginator.page_count == 2


def test_custom_page_config():
    config = PageConfig(usable_page_height=200, margin=10, gap=5)
    document, paginator, layer = make_paginator(["Line"] * 30, config=config)

    assert paginator.page_count > 3
    for decoration in paginator.decorations:
        assert decoration.height >= 25


def test_listener_notified_on_commit():
    document, paginator, layer = make_paginator(["Line"])
    states = []
    paginator.add_listener(states.append)

    document.append_block("x")
    assert states == []
    paginator.flush()

    assert len(states) == 1
    assert states[0].page_count == 1


def test_stop_detaches_from_document():
    document, paginator, layer = make_paginator(["Line"] * 20)
    paginator.stop()

    for _ in range(10):
        document.append_block("More")
    paginator.flush()

    assert paginator.page_count == 1


def test_paginate_one_shot():
    plan, probe = paginate(Document(["Line"] * 30), num_columns=40)

    assert plan.page_count == 2
    assert probe.num_columns == 40


def test_typing_in_pushed_block_keeps_its_spacer_until_commit():
    document, paginator, layer = make_paginator(["Line"] * 30)
    (before,) = paginator.decorations.positions
    paragraphs = list(document.paragraphs)
    paragraphs[21] += "x"

    document.set_text("\n".join(paragraphs))

    assert paginator.decorations.positions == [before]
    assert paginator.page_count == 2
    paginator.flush()
    assert paginator.decorations.positions == [before]


def test_typing_above_split_moves_spacer_with_text():
    words = " ".join(f"w{i:03d}" for i in range(900))
    document, paginator, layer = make_paginator(["Intro", words])
    (before,) = paginator.decorations.positions

    document.set_text("Intro!\n" + words)

    assert paginator.decorations.positions == [before + 1]
