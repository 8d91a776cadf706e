"""Team Divider - draw balanced, seeded teams for a recreational tournament."""

__version__ = "0.1.0"

from .assigner import TeamAssigner
from .config import Config
from .state import TournamentState

__all__ = ["TeamAssigner", "Config", "TournamentState"]
