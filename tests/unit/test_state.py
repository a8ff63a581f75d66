"""Test session state editing and navigation."""

import pytest

from glyphfind._state import SessionState
from glyphfind._store import EntryStore
from glyphfind._ucd import Entry


@pytest.fixture
def state(sample_store: EntryStore) -> SessionState:
    return SessionState.for_store(sample_store)


class TestQueryEditing:
    def test_type_appends(self, state: SessionState):
        state.type_char("s")
        state.type_char("n")
        assert state.query == "sn"

    def test_shift_appends_uppercase(self, state: SessionState):
        state.type_char("a", shift=True)
        assert state.query == "A"

    def test_delete_backward(self, state: SessionState):
        state.query = "abc"
        state.delete_backward()
        assert state.query == "ab"

    def test_delete_on_empty_query_is_noop(self, state: SessionState):
        state.delete_backward()
        assert state.query == ""


class TestNavigation:
    def test_initial_view_is_whole_store(self, state: SessionState, sample_store: EntryStore):
        assert state.view == list(sample_store)
        assert state.selection == 0

    def test_up_from_top_wraps_to_last(self, state: SessionState):
        state.move_up(1)
        assert state.selection == len(state.view) - 1

    def test_down_from_last_wraps_to_top(self, state: SessionState):
        state.jump_last()
        state.move_down(1)
        assert state.selection == 0

    def test_page_down_wraps_with_overflow(self, state: SessionState):
        # 7 entries: 5 + 10 = 15 -> 15 % 7 = 1
        state.selection = 5
        state.move_down(10)
        assert state.selection == 1

    def test_page_up_wraps_with_underflow(self, state: SessionState):
        state.selection = 2
        state.move_up(10)
        assert state.selection == 6

    def test_repeated_movement_stays_in_range(self, state: SessionState):
        for _ in range(50):
            state.move_down(3)
            assert 0 <= state.selection < len(state.view)
        for _ in range(50):
            state.move_up(10)
            assert 0 <= state.selection < len(state.view)

    def test_jump_first_and_last(self, state: SessionState):
        state.jump_last()
        assert state.selection == len(state.view) - 1
        state.jump_first()
        assert state.selection == 0

    def test_movement_on_empty_view_stays_at_zero(self):
        state = SessionState()
        state.move_down(1)
        state.move_up(10)
        state.jump_last()
        assert state.selection == 0


class TestConfirm:
    def test_confirm_sets_glyph(self, state: SessionState):
        state.selection = 1
        assert state.confirm() is True
        assert state.exit_choice == "A"

    def test_confirm_on_empty_view(self):
        state = SessionState()
        assert state.confirm() is False
        assert state.exit_choice is None

    def test_confirm_invalid_glyph_uses_replacement(self):
        state = SessionState(view=[Entry(0xDFFF, "<Low Surrogate, Last>")])
        state.confirm()
        assert state.exit_choice == "\ufffd"


def test_refresh_reranks_and_resets_selection(state: SessionState, sample_store: EntryStore):
    state.selection = 4
    state.query = "crab"
    state.refresh(sample_store)

    assert [e.name for e in state.view] == ["CRAB"]
    assert state.selection == 0
