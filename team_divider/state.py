"""Client-side tournament state shared by assignment, reveal, naming and export."""

import math
from typing import Callable, List, Optional, Set

from .assigner import TeamAssigner
from .reveal import START_CURSOR, RevealCursor, is_terminal, next_cursor, visible_prefix
from .validators import ValidationError, validate_inputs


class TournamentState:
    """Mutable record of one tournament draw.

    Teams, team names and the reveal cursor are replaced together by
    ``generate``. Name requests carry the ``generation`` they were started
    under so results for an older draw are dropped.
    """

    def __init__(
        self,
        title: str = '',
        team_count: int = 6,
        animation_delay: float = 0.1,
        assigner: Optional[TeamAssigner] = None,
    ):
        self.title = title
        self.team_count = team_count
        self.animation_delay = float(animation_delay)
        self.assigner = assigner if assigner is not None else TeamAssigner()

        self.teams: List[List[str]] = []
        self.seeds: List[str] = []
        self.team_names: List[Optional[str]] = []
        self.loading: Set[int] = set()
        self.cursor: Optional[RevealCursor] = None
        self.exporting: bool = False
        self.error: Optional[str] = None
        self.generation: int = 0

        self._listeners: List[Callable[['TournamentState'], None]] = []

    def add_listener(self, callback: Callable[['TournamentState'], None]) -> None:
        self._listeners.append(callback)

    def remove_listener(self, callback: Callable[['TournamentState'], None]) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _notify(self) -> None:
        for callback in list(self._listeners):
            callback(self)

    def generate(
        self,
        participants_text: str,
        seeds_text: str,
        team_count: Optional[int] = None
    ) -> List[List[str]]:
        """Draw new teams, replacing the previous draw.

        On a validation failure the error message is recorded and the
        previous teams, names and cursor are left as they were.

        Raises:
            ValidationError: If the inputs fail validation
        """
        count = self.team_count if team_count is None else team_count
        self.error = None
        try:
            participants, seeds = validate_inputs(participants_text, seeds_text, count)
        except ValidationError as e:
            self.error = str(e)
            raise

        self.teams = self.assigner.assign(participants, seeds, count)
        self.team_count = count
        self.seeds = seeds
        self.team_names = [None] * count
        self.loading = set()
        self.cursor = START_CURSOR
        self.generation += 1
        self._notify()
        return self.teams

    def set_animation_delay(self, seconds: float) -> None:
        if (isinstance(seconds, bool) or not isinstance(seconds, (int, float))
                or not math.isfinite(seconds) or seconds < 0):
            raise ValueError(f"Reveal delay must be a finite non-negative number, got {seconds!r}")
        self.animation_delay = float(seconds)
        self._notify()

    # Reveal cursor

    def advance_cursor(self) -> Optional[RevealCursor]:
        """Move the cursor one slot forward; None when nothing is left to show."""
        cursor = next_cursor(self.teams, self.cursor)
        if cursor is not None:
            self.cursor = cursor
        return cursor

    @property
    def is_revealed_complete(self) -> bool:
        return self.cursor is not None and is_terminal(self.teams, self.cursor)

    def is_team_visible(self, team_index: int) -> bool:
        return self.cursor is not None and team_index <= self.cursor.team_index

    def visible_players(self, team_index: int) -> List[str]:
        return visible_prefix(self.teams, self.cursor, team_index)

    # Team names

    def begin_name_request(self, team_index: int) -> Optional[int]:
        """Mark a team as waiting for a name.

        Returns:
            The generation token to hand back later, or None if the team
            doesn't exist or already has a request in flight
        """
        if not 0 <= team_index < len(self.teams) or team_index in self.loading:
            return None
        self.loading.add(team_index)
        return self.generation

    def finish_name_request(self, team_index: int, token: int) -> None:
        if token == self.generation:
            self.loading.discard(team_index)

    def set_team_name(self, team_index: int, name: str, token: Optional[int] = None) -> bool:
        """Store a generated name unless the draw it was made for is gone."""
        if token is not None and token != self.generation:
            return False
        if not 0 <= team_index < len(self.team_names):
            return False
        self.team_names[team_index] = name
        return True

    # Export

    def begin_export(self) -> bool:
        if self.exporting:
            return False
        self.exporting = True
        self.error = None
        return True

    def end_export(self, error: Optional[str] = None) -> None:
        self.exporting = False
        if error:
            self.error = error
