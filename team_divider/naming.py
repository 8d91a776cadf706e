"""Whimsical team-name generation."""

import asyncio
import logging
import random
from typing import List, Optional

import anthropic

from .config import Config

logger = logging.getLogger(__name__)

ADJECTIVES = [
    'Dinking', 'Spinning', 'Smashing', 'Sneaky', 'Bouncy', 'Mighty', 'Fuzzy',
    'Zesty', 'Wobbly', 'Turbo', 'Jolly', 'Sizzling', 'Cosmic', 'Giggling',
    'Rowdy', 'Sassy', 'Slippery', 'Thundering', 'Cheeky', 'Fearless',
]

NOUNS = [
    'Pickles', 'Paddles', 'Dinkers', 'Lobsters', 'Kitchen Kings', 'Volleys',
    'Meatballs', 'Noodles', 'Coconuts', 'Penguins', 'Dumplings', 'Rhinos',
    'Flamingos', 'Platypuses', 'Waffles', 'Cucumbers', 'Otters', 'Yetis',
]

PROMPT = (
    "Invent one short, funny and whimsical team name for a friendly pickleball "
    "tournament{context}. Reply with the team name only, at most four words, "
    "without quotes or explanation."
)


class LocalNameGenerator:
    """Builds names from word lists, no network needed."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng if rng is not None else random.Random()

    async def generate(self, context: str = '') -> str:
        return f"{self.rng.choice(ADJECTIVES)} {self.rng.choice(NOUNS)}"


class AnthropicNameGenerator:
    """Asks a Claude model for a team name.

    The API key is read from ``ANTHROPIC_API_KEY`` by the client.
    """

    def __init__(self, model: str, client: Optional[anthropic.AsyncAnthropic] = None):
        self.model = model
        self.client = client if client is not None else anthropic.AsyncAnthropic()

    async def generate(self, context: str = '') -> str:
        suffix = f' called "{context}"' if context else ''
        message = await self.client.messages.create(
            model=self.model,
            max_tokens=32,
            messages=[{"role": "user", "content": PROMPT.format(context=suffix)}],
        )
        text = ''.join(
            block.text for block in message.content if getattr(block, 'type', None) == 'text'
        )
        name = text.strip().strip('"\'').strip()
        if not name:
            raise ValueError("Model returned an empty team name")
        return name


def build_name_generator(config: Config):
    """Create the name generator selected by ``naming.provider``."""
    if config.naming_provider == 'anthropic':
        return AnthropicNameGenerator(config.naming_model)
    return LocalNameGenerator()


class TeamNamer:
    """Requests names for teams of a tournament and stores the results.

    Each team has at most one request in flight. Failures are logged and
    leave the name unset.
    """

    def __init__(self, state, generator):
        self.state = state
        self.generator = generator

    async def request(self, team_index: int) -> Optional[str]:
        """Generate and store a name for one team.

        Returns:
            The stored name, or None if nothing was stored
        """
        token = self.state.begin_name_request(team_index)
        if token is None:
            logger.debug("Skipping name request for team %d", team_index + 1)
            return None

        try:
            name = await self.generator.generate(self.state.title)
        except Exception:
            logger.exception("Could not generate a name for team %d", team_index + 1)
            return None
        finally:
            self.state.finish_name_request(team_index, token)

        if not self.state.set_team_name(team_index, name, token):
            logger.info("Discarding name %r for team %d from an earlier draw", name, team_index + 1)
            return None
        return name

    async def request_all(self) -> List[Optional[str]]:
        return await asyncio.gather(
            *(self.request(index) for index in range(len(self.state.teams)))
        )
