"""Core team assignment logic for Team Divider."""

import random
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence

import pandas as pd
import yaml

from .validators import validate_inputs


class TeamAssigner:
    """Randomly splits players into a fixed number of balanced teams.

    Seed players are spread one per team before everyone else is dealt
    out to the smallest team.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        """Initialize the team assigner.

        Args:
            rng: Random source used for shuffling. Pass a seeded
                ``random.Random`` for reproducible draws.
        """
        self.rng = rng if rng is not None else random.SystemRandom()

    def assign_from_text(
        self,
        participants_text: str,
        seeds_text: str,
        team_count: int
    ) -> List[List[str]]:
        """Validate raw newline-separated input and assign teams.

        Raises:
            ValidationError: If any input check fails; nothing is shuffled
        """
        participants, seeds = validate_inputs(participants_text, seeds_text, team_count)
        return self.assign(participants, seeds, team_count)

    def assign(
        self,
        participants: Sequence[str],
        seeds: Sequence[str],
        team_count: int
    ) -> List[List[str]]:
        """Assign already validated players to teams.

        Args:
            participants: Distinct player names
            seeds: Player names to place one per team
            team_count: Number of teams to create

        Returns:
            List of teams, each a list of player names in insertion order
        """
        seed_set = set(seeds)
        shuffled_seeds = list(seeds)
        regulars = [p for p in participants if p not in seed_set]

        self.rng.shuffle(shuffled_seeds)
        self.rng.shuffle(regulars)

        teams: List[List[str]] = [[] for _ in range(team_count)]

        for index, seed in enumerate(shuffled_seeds):
            teams[index].append(seed)

        for player in regulars:
            self._smallest_team(teams).append(player)

        return teams

    @staticmethod
    def _smallest_team(teams: List[List[str]]) -> List[str]:
        """Return the team with the fewest members, lowest index on ties."""
        smallest = teams[0]
        for team in teams[1:]:
            if len(team) < len(smallest):
                smallest = team
        return smallest

    def save_roster_csv(
        self,
        teams: List[List[str]],
        team_names: Sequence[Optional[str]],
        output_path: Path,
        seeds: Iterable[str] = ()
    ) -> None:
        """Save the roster as CSV with one row per player.

        Args:
            teams: Team rosters
            team_names: Generated display names, ``None`` where unset
            output_path: Path where to save the CSV
            seeds: Seed player names, flagged in the ``seed`` column
        """
        seed_set = set(seeds)
        rows = []
        for index, team in enumerate(teams):
            name = team_names[index] if index < len(team_names) else None
            for player in team:
                rows.append({
                    'team': index + 1,
                    'team_name': name or '',
                    'player': player,
                    'seed': player in seed_set,
                })

        roster_df = pd.DataFrame(rows, columns=['team', 'team_name', 'player', 'seed'])
        roster_df.to_csv(output_path, index=False)

    def save_roster_yaml(
        self,
        teams: List[List[str]],
        team_names: Sequence[Optional[str]],
        output_path: Path,
        title: str = ''
    ) -> None:
        """Save the roster to YAML, keyed by team number."""
        yaml_data: Dict[str, Any] = {'tournament': title, 'team': {}}
        for index, team in enumerate(teams):
            name = team_names[index] if index < len(team_names) else None
            yaml_data['team'][index + 1] = {
                'name': name or '',
                'players': list(team),
            }

        with open(output_path, 'w', encoding='utf-8') as f:
            yaml.dump(yaml_data, f, default_flow_style=False, sort_keys=True, allow_unicode=True)

    def get_assignment_summary(
        self,
        teams: List[List[str]],
        seeds: Iterable[str] = ()
    ) -> Dict[str, Any]:
        """Get a summary of the assignment results.

        Returns:
            Dictionary with assignment statistics
        """
        if not teams:
            return {
                'total_people': 0,
                'team_sizes': {},
                'average_team_size': 0.0,
                'size_spread': 0,
                'seed_teams': {},
            }

        team_sizes = {index + 1: len(team) for index, team in enumerate(teams)}
        seed_set = set(seeds)
        seed_teams = {
            player: index + 1
            for index, team in enumerate(teams)
            for player in team
            if player in seed_set
        }
        total = sum(team_sizes.values())

        return {
            'total_people': total,
            'team_sizes': team_sizes,
            'average_team_size': round(total / len(teams), 2),
            'size_spread': max(team_sizes.values()) - min(team_sizes.values()),
            'seed_teams': seed_teams,
        }
