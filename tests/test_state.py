"""Tests for the state module."""

import random

import pytest

from team_divider.assigner import TeamAssigner
from team_divider.reveal import RevealCursor
from team_divider.state import TournamentState
from team_divider.validators import InsufficientPlayers, InvalidTeamCount, UnknownSeed


PLAYERS = "An\nBinh\nCuong\nDung\nGiang"


def make_state(**kwargs) -> TournamentState:
    kwargs.setdefault('assigner', TeamAssigner(random.Random(7)))
    kwargs.setdefault('team_count', 2)
    return TournamentState(title='Summer Cup', **kwargs)


class TestGenerate:
    """Test cases for drawing teams into the state."""

    def test_generate_replaces_everything(self):
        state = make_state()
        teams = state.generate(PLAYERS, "An")

        assert state.teams is teams
        assert len(teams) == 2
        assert state.team_names == [None, None]
        assert state.cursor == RevealCursor(0, -1)
        assert state.generation == 1
        assert state.seeds == ['An']
        assert state.error is None

    def test_explicit_team_count_overrides_default(self):
        state = make_state()
        state.generate(PLAYERS, "", team_count=5)

        assert len(state.teams) == 5
        assert state.team_count == 5

    def test_regenerate_clears_names(self):
        state = make_state()
        state.generate(PLAYERS, "")
        state.set_team_name(0, 'Zesty Otters')

        state.generate(PLAYERS, "", team_count=3)

        assert state.team_names == [None, None, None]
        assert state.cursor == RevealCursor(0, -1)
        assert state.generation == 2

    def test_failure_keeps_previous_draw(self):
        """Test that a failed draw leaves the previous teams untouched."""
        state = make_state()
        state.generate(PLAYERS, "")
        state.set_team_name(1, 'Cheeky Yetis')
        state.advance_cursor()
        before = ([list(t) for t in state.teams], list(state.team_names), state.cursor, state.generation)

        with pytest.raises(InsufficientPlayers):
            state.generate("An", "")

        assert ([list(t) for t in state.teams], list(state.team_names), state.cursor, state.generation) == before
        assert "Not enough players" in state.error

    def test_failure_on_first_draw(self):
        state = make_state()

        with pytest.raises(InvalidTeamCount):
            state.generate(PLAYERS, "", team_count=0)

        assert state.teams == []
        assert state.cursor is None
        assert state.error

    def test_error_cleared_by_next_success(self):
        state = make_state()
        with pytest.raises(UnknownSeed):
            state.generate(PLAYERS, "Zed")

        state.generate(PLAYERS, "")
        assert state.error is None

    def test_listeners_notified(self):
        state = make_state()
        calls = []
        state.add_listener(calls.append)

        state.generate(PLAYERS, "")
        state.set_animation_delay(0.5)
        state.remove_listener(calls.append)
        state.generate(PLAYERS, "")

        assert calls == [state, state]

    def test_listeners_not_notified_on_failure(self):
        state = make_state()
        calls = []
        state.add_listener(calls.append)

        with pytest.raises(InsufficientPlayers):
            state.generate("An", "")

        assert calls == []

    @pytest.mark.parametrize("delay", [-0.1, "1", None, float("nan"), float("inf")])
    def test_invalid_delay(self, delay):
        with pytest.raises(ValueError):
            make_state().set_animation_delay(delay)


class TestVisibility:
    """Test cases for what the reveal cursor exposes."""

    def setup_state(self, cursor):
        state = make_state()
        state.teams = [['An', 'Binh'], ['Cuong', 'Dung'], ['Giang']]
        state.cursor = cursor
        return state

    def test_nothing_visible_before_generate(self):
        state = make_state()
        assert not state.is_team_visible(0)
        assert not state.is_revealed_complete

    def test_prefix_rules(self):
        state = self.setup_state(RevealCursor(1, 0))

        assert state.visible_players(0) == ['An', 'Binh']
        assert state.visible_players(1) == ['Cuong']
        assert state.visible_players(2) == []
        assert state.is_team_visible(1)
        assert not state.is_team_visible(2)

    def test_team_shown_without_players(self):
        state = self.setup_state(RevealCursor(2, -1))

        assert state.is_team_visible(2)
        assert state.visible_players(2) == []
        assert not state.is_revealed_complete

    def test_complete(self):
        state = self.setup_state(RevealCursor(2, 0))
        assert state.is_revealed_complete
        assert state.advance_cursor() is None
        assert state.cursor == RevealCursor(2, 0)


class TestTeamNames:
    """Test cases for index-scoped name updates."""

    def test_request_lifecycle(self):
        state = make_state()
        state.generate(PLAYERS, "")

        token = state.begin_name_request(1)
        assert token == state.generation
        assert state.loading == {1}

        assert state.set_team_name(1, 'Turbo Waffles', token)
        state.finish_name_request(1, token)

        assert state.team_names == [None, 'Turbo Waffles']
        assert state.loading == set()

    def test_one_request_per_team(self):
        state = make_state()
        state.generate(PLAYERS, "")

        assert state.begin_name_request(0) is not None
        assert state.begin_name_request(0) is None
        assert state.begin_name_request(1) is not None

    def test_out_of_range_team(self):
        state = make_state()
        state.generate(PLAYERS, "")

        assert state.begin_name_request(2) is None
        assert state.begin_name_request(-1) is None
        assert not state.set_team_name(5, 'Nobody')

    def test_stale_token_is_ignored(self):
        state = make_state()
        state.generate(PLAYERS, "")
        token = state.begin_name_request(0)

        state.generate(PLAYERS, "", team_count=3)
        assert not state.set_team_name(0, 'Old Name', token)
        state.finish_name_request(0, token)

        assert state.team_names == [None, None, None]

    def test_export_flag(self):
        state = make_state()

        assert state.begin_export()
        assert not state.begin_export()
        state.end_export("boom")
        assert not state.exporting
        assert state.error == "boom"
        assert state.begin_export()
        assert state.error is None
