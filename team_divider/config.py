"""Configuration management for Team Divider."""

import math
from pathlib import Path
from typing import Optional

import yaml


NAMING_PROVIDERS = ('local', 'anthropic')


class Config:
    """Configuration class for tournament, export and naming settings."""

    def __init__(self):
        """Initialize configuration with default values."""
        self.title: str = 'Pickleball Tournament'
        self.team_count: int = 6
        self.animation_delay: float = 0.1

        self.columns: int = 2
        self.scale: int = 2
        self.filename: str = 'pickleball-teams.png'
        self.font: Optional[str] = None
        self.bold_font: Optional[str] = None

        self.naming_provider: str = 'local'
        self.naming_model: str = 'claude-haiku-4-5'

    def load_from_file(self, config_path: Path) -> None:
        """Load configuration from a YAML file.

        Args:
            config_path: Path to the YAML configuration file

        Raises:
            FileNotFoundError: If the config file doesn't exist
            yaml.YAMLError: If the YAML file is invalid
            ValueError: If the configuration structure is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f)

        if not isinstance(config_data, dict):
            raise ValueError("Configuration file must contain a YAML dictionary")

        tournament = self._section(config_data, 'tournament')
        export = self._section(config_data, 'export')
        naming = self._section(config_data, 'naming')

        if 'title' in tournament:
            self.title = str(tournament['title'] or '')

        if 'teams' in tournament:
            teams = tournament['teams']
            if isinstance(teams, bool) or not isinstance(teams, int) or teams < 1:
                raise ValueError("tournament.teams must be a positive integer")
            self.team_count = teams

        # Fractional seconds are allowed
        if 'delay' in tournament:
            delay = tournament['delay']
            if (isinstance(delay, bool) or not isinstance(delay, (int, float))
                    or not math.isfinite(delay) or delay < 0):
                raise ValueError("tournament.delay must be a finite non-negative number")
            self.animation_delay = float(delay)

        for key in ('columns', 'scale'):
            if key in export:
                value = export[key]
                if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                    raise ValueError(f"export.{key} must be a positive integer")
                setattr(self, key, value)

        if 'filename' in export:
            filename = export['filename']
            if not isinstance(filename, str) or not filename.strip():
                raise ValueError("export.filename must be a non-empty string")
            self.filename = filename

        for key in ('font', 'bold_font'):
            if key in export:
                value = export[key]
                if value is not None and not isinstance(value, str):
                    raise ValueError(f"export.{key} must be a font file path")
                setattr(self, key, value)

        if 'provider' in naming:
            provider = naming['provider']
            if provider not in NAMING_PROVIDERS:
                raise ValueError(
                    f"naming.provider must be one of {', '.join(NAMING_PROVIDERS)}"
                )
            self.naming_provider = provider

        if 'model' in naming:
            self.naming_model = str(naming['model'])

    @staticmethod
    def _section(config_data: dict, name: str) -> dict:
        section = config_data.get(name) or {}
        if not isinstance(section, dict):
            raise ValueError(f"{name} must be a YAML dictionary")
        return section

    def to_dict(self) -> dict:
        """Convert configuration to dictionary format.

        Returns:
            Dictionary representation of the configuration
        """
        return {
            'tournament': {
                'title': self.title,
                'teams': self.team_count,
                'delay': self.animation_delay,
            },
            'export': {
                'columns': self.columns,
                'scale': self.scale,
                'filename': self.filename,
                'font': self.font,
                'bold_font': self.bold_font,
            },
            'naming': {
                'provider': self.naming_provider,
                'model': self.naming_model,
            },
        }

    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to a YAML file.

        Args:
            config_path: Path where to save the configuration
        """
        config_dict = self.to_dict()

        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.dump(config_dict, f, default_flow_style=False, sort_keys=True, allow_unicode=True)
