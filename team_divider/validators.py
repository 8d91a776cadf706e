"""Validation utilities for Team Divider."""

from pathlib import Path
from typing import Iterable, List, Sequence, Tuple

import pandas as pd


class ValidationError(ValueError):
    """Base class for input errors that stop a team generation attempt."""


class InvalidTeamCount(ValidationError):
    pass


class InsufficientPlayers(ValidationError):
    pass


class TooManySeeds(ValidationError):
    pass


class UnknownSeed(ValidationError):
    """Raised when seeds are missing from the participant list.

    The offending names are kept in ``seeds`` in input order.
    """

    def __init__(self, seeds: Sequence[str]):
        self.seeds = list(seeds)
        quoted = ', '.join(f'"{seed}"' for seed in self.seeds)
        super().__init__(f"Seed players {quoted} are not in the player list")


def parse_names(raw_text: str) -> List[str]:
    """Turn newline-separated text into a list of names.

    Lines are trimmed, blank lines dropped and repeated names kept once,
    at their first position.
    """
    names = []
    seen = set()
    for line in (raw_text or '').splitlines():
        name = line.strip()
        if not name or name in seen:
            continue
        seen.add(name)
        names.append(name)
    return names


def read_names_file(path: Path) -> str:
    """Read a names file and return it as newline-separated text.

    Plain files are returned as-is. CSV files are read with pandas and
    the ``name`` column (or the first column) is used.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If a CSV file has no columns
    """
    if not path.exists():
        raise FileNotFoundError(f"Names file not found: {path}")

    if path.suffix.lower() != '.csv':
        return path.read_text(encoding='utf-8')

    try:
        df = pd.read_csv(path, dtype=str)
    except pd.errors.EmptyDataError:
        raise ValueError(f"Names CSV file is empty: {path}")

    column = 'name' if 'name' in df.columns else df.columns[0]
    return '\n'.join(df[column].dropna().astype(str))


def validate_team_count(team_count) -> None:
    """Raise InvalidTeamCount unless team_count is a positive integer."""
    if isinstance(team_count, bool) or not isinstance(team_count, int) or team_count < 1:
        raise InvalidTeamCount(f"Number of teams must be a positive integer, got {team_count!r}")


def validate_enough_players(participants: Sequence[str], team_count: int) -> None:
    if len(participants) < team_count:
        raise InsufficientPlayers(
            f"Not enough players for {team_count} teams: only {len(participants)} given"
        )


def validate_seed_count(seeds: Sequence[str], team_count: int) -> None:
    if len(seeds) > team_count:
        raise TooManySeeds(
            f"Number of seed players ({len(seeds)}) cannot exceed number of teams ({team_count})"
        )


def validate_known_seeds(seeds: Iterable[str], participants: Iterable[str]) -> None:
    known = set(participants)
    missing = [seed for seed in seeds if seed not in known]
    if missing:
        raise UnknownSeed(missing)


def validate_inputs(
    participants_text: str,
    seeds_text: str,
    team_count,
) -> Tuple[List[str], List[str]]:
    """Parse and validate raw inputs for team generation.

    Checks run in a fixed order and the first failure is raised:
    team count, number of players, number of seeds, unknown seeds.

    Args:
        participants_text: Newline-separated player names
        seeds_text: Newline-separated seed player names
        team_count: Requested number of teams

    Returns:
        Tuple of (participants, seeds) as parsed name lists

    Raises:
        ValidationError: The first failing check
    """
    validate_team_count(team_count)

    participants = parse_names(participants_text)
    seeds = parse_names(seeds_text)

    validate_enough_players(participants, team_count)
    validate_seed_count(seeds, team_count)
    validate_known_seeds(seeds, participants)

    return participants, seeds
