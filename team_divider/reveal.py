"""Timed, forward-only reveal of generated team rosters."""

import asyncio
import logging
from typing import Callable, List, NamedTuple, Optional, Sequence

logger = logging.getLogger(__name__)


class RevealCursor(NamedTuple):
    """Most recently revealed slot, in row-major (team, player) order.

    A ``player_index`` of -1 means the team is shown with nobody in it yet.
    """

    team_index: int
    player_index: int


START_CURSOR = RevealCursor(0, -1)


def is_terminal(teams: Sequence[Sequence[str]], cursor: Optional[RevealCursor]) -> bool:
    if cursor is None or not teams:
        return True
    last_team = len(teams) - 1
    return cursor.team_index >= last_team and cursor.player_index >= len(teams[last_team]) - 1


def next_cursor(
    teams: Sequence[Sequence[str]],
    cursor: Optional[RevealCursor]
) -> Optional[RevealCursor]:
    """Return the cursor after one reveal step, or None once everything is shown."""
    if is_terminal(teams, cursor):
        return None

    team_index, player_index = cursor
    if player_index < len(teams[team_index]) - 1:
        return RevealCursor(team_index, player_index + 1)
    return RevealCursor(team_index + 1, -1)


def visible_prefix(
    teams: Sequence[Sequence[str]],
    cursor: Optional[RevealCursor],
    team_index: int
) -> List[str]:
    """Players of a team that the cursor has already revealed."""
    if cursor is None or team_index > cursor.team_index:
        return []
    team = teams[team_index]
    if team_index < cursor.team_index:
        return list(team)
    return list(team[:cursor.player_index + 1])


class RevealSequencer:
    """Advances a tournament's reveal cursor on a single-shot timer.

    At most one tick is pending at any time. Whenever the teams or the
    delay change, the pending tick is cancelled before a new one is armed.

    Args:
        state: Tournament state exposing ``teams``, ``cursor``,
            ``animation_delay``, ``advance_cursor()`` and ``add_listener()``
        schedule: ``schedule(delay, callback)`` returning a handle with
            ``cancel()``; defaults to the running event loop's ``call_later``
        on_reveal: Called with each new cursor
    """

    def __init__(
        self,
        state,
        schedule: Optional[Callable] = None,
        on_reveal: Optional[Callable[[RevealCursor], None]] = None,
    ):
        self.state = state
        self.on_reveal = on_reveal
        self._schedule = schedule
        self._handle = None
        self._waiters: List[asyncio.Future] = []
        self._started = False

    @property
    def pending(self) -> bool:
        return self._handle is not None

    @property
    def finished(self) -> bool:
        return is_terminal(self.state.teams, self.state.cursor)

    def start(self) -> None:
        """Follow state changes and arm the first tick."""
        if not self._started:
            self.state.add_listener(self._on_state_changed)
            self._started = True
        self.restart()

    def stop(self) -> None:
        self._cancel()
        if self._started:
            self.state.remove_listener(self._on_state_changed)
            self._started = False

    def restart(self) -> None:
        """Cancel any pending tick and arm a new one unless already finished."""
        self._cancel()
        self._arm()

    async def wait(self) -> None:
        """Wait until every player of every team has been revealed."""
        if self.finished:
            return
        future = asyncio.get_running_loop().create_future()
        self._waiters.append(future)
        await future

    def _on_state_changed(self, state) -> None:
        self.restart()

    def _cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _arm(self) -> None:
        if self.finished:
            self._release_waiters()
            return
        schedule = self._schedule or asyncio.get_running_loop().call_later
        self._handle = schedule(self.state.animation_delay, self._tick)

    def _tick(self) -> None:
        self._handle = None
        cursor = self.state.advance_cursor()
        if cursor is None:
            self._release_waiters()
            return

        if self.on_reveal is not None:
            try:
                self.on_reveal(cursor)
            except Exception:
                logger.exception("Reveal callback failed at %s", cursor)
        # The callback may have changed the state and re-armed already
        self.restart()

    def _release_waiters(self) -> None:
        waiters, self._waiters = self._waiters, []
        for future in waiters:
            if not future.done():
                future.set_result(None)
