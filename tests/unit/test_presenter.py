"""Test rendering of session state."""

import dataclasses
import io

import pytest
from rich.console import Console

from glyphfind._presenter import CHROME_ROWS, CURSOR, HIGHLIGHT_SYMBOL, Presenter, display_glyph
from glyphfind._state import SessionState
from glyphfind._store import EntryStore
from glyphfind._ucd import Entry, GeneralCategory

HEIGHT = 20


@pytest.fixture
def console() -> Console:
    return Console(file=io.StringIO(), width=100, height=HEIGHT, color_system=None)


@pytest.fixture
def presenter(console: Console) -> Presenter:
    return Presenter(lambda renderable: None, console, title="glyphfind")


def render_text(console: Console, presenter: Presenter, state: SessionState) -> str:
    console.print(presenter.render(state))
    output = console.file.getvalue()
    console.file.truncate(0)
    console.file.seek(0)
    return output


def test_layout(console, presenter, sample_store: EntryStore):
    state = SessionState.for_store(sample_store)
    state.query = "ab"
    output = render_text(console, presenter, state)

    assert "glyphfind" in output
    assert "Search" in output
    assert "ab" + CURSOR in output
    for header in ("Char", "Code", "Name", "Unicode 1.0 Name"):
        assert header in output
    assert "U+1F980" in output
    assert "LINE FEED (LF)" in output


def test_selected_row_is_marked(console, presenter, sample_store: EntryStore):
    state = SessionState.for_store(sample_store)
    state.selection = 4
    output = render_text(console, presenter, state)

    marked = [line for line in output.splitlines() if HIGHLIGHT_SYMBOL in line]
    assert len(marked) == 1
    assert "EURO SIGN" in marked[0]


def test_empty_view(console, presenter):
    output = render_text(console, presenter, SessionState(query="zzz"))

    assert "zzz" + CURSOR in output
    assert HIGHLIGHT_SYMBOL not in output


def test_scrolls_to_keep_selection_visible(console, presenter):
    store = EntryStore(
        Entry(0xE000 + i, f"ITEM {i:02d}", GeneralCategory.OTHER_PRIVATE_USE) for i in range(30)
    )
    state = SessionState.for_store(store)
    rows = HEIGHT - CHROME_ROWS

    state.selection = 25
    output = render_text(console, presenter, state)
    assert "ITEM 25" in output
    assert f"ITEM {25 - rows + 1:02d}" in output
    assert f"ITEM {25 - rows:02d}" not in output

    # Moving up inside the window does not scroll.
    state.selection = 20
    output = render_text(console, presenter, state)
    assert f"ITEM {25 - rows + 1:02d}" in output

    state.selection = 0
    output = render_text(console, presenter, state)
    assert "ITEM 00" in output
    assert "ITEM 25" not in output


def test_render_does_not_mutate_state(console, presenter, sample_store: EntryStore):
    state = SessionState.for_store(sample_store)
    state.query = "a"
    state.selection = 3
    before = dataclasses.replace(state, view=list(state.view))

    render_text(console, presenter, state)

    assert state == before


def test_present_hands_renderable_to_target(console, sample_store: EntryStore):
    frames = []
    presenter = Presenter(frames.append, console)

    presenter.present(SessionState.for_store(sample_store))

    assert len(frames) == 1


def test_display_glyph_replaces_unprintable():
    assert display_glyph(Entry(0x0A, "<control>", GeneralCategory.OTHER_CONTROL)) == "\ufffd"
    assert display_glyph(Entry(0x2603, "SNOWMAN")) == "\u2603"
