"""Command line interface for Team Divider."""

import asyncio
import logging
import math
import random
import sys
from pathlib import Path
from typing import Optional

import click
import yaml

from team_divider.assigner import TeamAssigner
from team_divider.config import Config
from team_divider.naming import TeamNamer, build_name_generator
from team_divider.render import ExportFailed, FontSet, export_image, export_svg
from team_divider.reveal import RevealCursor, RevealSequencer
from team_divider.state import TournamentState
from team_divider.validators import ValidationError, read_names_file, validate_inputs


def load_config(config_file: Optional[Path]) -> Config:
  config = Config()
  if config_file is None:
    return config
  try:
    config.load_from_file(config_file)
  except (ValueError, yaml.YAMLError) as e:
    click.secho(f"Error: Invalid config file {config_file}: {e}", fg="red")
    sys.exit(1)
  return config

def read_names(path: Optional[Path]) -> str:
  if path is None:
    return ""
  try:
    return read_names_file(path)
  except ValueError as e:
    click.secho(f"Error: {e}", fg="red")
    sys.exit(1)

def show_reveal(state: TournamentState, cursor: RevealCursor) -> None:
  """Print the slot the reveal cursor just moved to."""
  if cursor.player_index == -1:
    click.secho(f"\nTeam {cursor.team_index + 1}", fg="blue", bold=True)
    return
  player = state.teams[cursor.team_index][cursor.player_index]
  if player in state.seeds:
    click.secho(f"  • {player} (seed)", fg="magenta")
  else:
    click.secho(f"  • {player}")

async def reveal_teams(state: TournamentState) -> None:
  show_reveal(state, state.cursor)
  sequencer = RevealSequencer(state, on_reveal=lambda cursor: show_reveal(state, cursor))
  sequencer.start()
  try:
    await sequencer.wait()
  finally:
    sequencer.stop()

async def run_session(
  state: TournamentState,
  config: Config,
  name_teams: bool,
  image_dir: Optional[Path],
) -> Optional[Path]:
  """Reveal the drawn teams, then name and export them as requested."""
  await reveal_teams(state)

  if name_teams:
    click.secho("\nGenerating team names...", fg="blue")
    namer = TeamNamer(state, build_name_generator(config))
    await namer.request_all()
    for index, name in enumerate(state.team_names):
      if name:
        click.secho(f"Team {index + 1}: {name}", fg="green")
      else:
        click.secho(f"Team {index + 1}: no name generated", fg="yellow")

  if image_dir is None:
    return None
  fonts = FontSet(config.font, config.bold_font)
  return await export_image(
    state, image_dir, filename=config.filename, scale=config.scale,
    columns=config.columns, fonts=fonts,
  )

@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def cli(verbose: bool):
  """Team Divider CLI for drawing balanced tournament teams."""
  logging.basicConfig(
    level=logging.DEBUG if verbose else logging.WARNING,
    format="%(levelname)s %(name)s: %(message)s",
  )

@cli.command()
@click.argument("config_file", type=click.Path(dir_okay=False, path_type=Path))
def config(config_file: Path):
  """Write a config file with the default settings."""
  if config_file.exists() and not click.confirm(f"{config_file} exists; overwrite?", default=False):
    click.secho(f"Skipping {config_file}", fg="yellow")
    return
  Config().save_to_file(config_file)
  click.secho(f"Wrote default config to {config_file}", fg="green")

@cli.command()
@click.argument("players_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--seeds", "seeds_file", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="Seed players, one per line")
@click.option("--teams", "team_count", type=int, default=None, help="Number of teams")
@click.option("--config", "config_file", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="YAML config file")
def validate(players_file: Path, seeds_file: Optional[Path], team_count: Optional[int],
             config_file: Optional[Path]):
  """Check the player and seed lists without drawing teams."""
  settings = load_config(config_file)
  team_count = settings.team_count if team_count is None else team_count

  try:
    participants, seeds = validate_inputs(read_names(players_file), read_names(seeds_file), team_count)
  except ValidationError as e:
    click.secho(f"❌ {e}", fg="red")
    sys.exit(1)

  click.secho(f"Players: {len(participants)}, seeds: {len(seeds)}, teams: {team_count}", fg="blue")
  click.secho("✅ Inputs are valid!", fg="green")

@cli.command()
@click.argument("players_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--seeds", "seeds_file", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="Seed players, one per line; at most one per team")
@click.option("--teams", "team_count", type=int, default=None, help="Number of teams")
@click.option("--title", default=None, help="Tournament title")
@click.option("--delay", type=float, default=None, help="Seconds between revealed players")
@click.option("--config", "config_file", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="YAML config file")
@click.option("--seed", "random_seed", type=int, default=None, help="Seed the shuffle for a repeatable draw")
@click.option("--name-teams", is_flag=True, help="Generate a fun name for every team")
@click.option("--image", "image_dir", type=click.Path(file_okay=False, path_type=Path),
              help="Directory to save the roster image in")
@click.option("--svg", "svg_file", type=click.Path(dir_okay=False, path_type=Path),
              help="Save the roster as SVG markup")
@click.option("--csv", "csv_file", type=click.Path(dir_okay=False, path_type=Path),
              help="Save the roster as CSV")
@click.option("--yaml", "yaml_file", type=click.Path(dir_okay=False, path_type=Path),
              help="Save the roster as YAML")
def generate(players_file: Path, seeds_file: Optional[Path], team_count: Optional[int],
             title: Optional[str], delay: Optional[float], config_file: Optional[Path],
             random_seed: Optional[int], name_teams: bool, image_dir: Optional[Path],
             svg_file: Optional[Path], csv_file: Optional[Path], yaml_file: Optional[Path]):
  """Draw teams and reveal them one player at a time."""
  settings = load_config(config_file)
  if delay is not None and (delay < 0 or not math.isfinite(delay)):
    click.secho("Error: --delay must be a finite non-negative number", fg="red")
    sys.exit(1)

  rng = random.Random(random_seed) if random_seed is not None else None
  state = TournamentState(
    title=settings.title if title is None else title,
    team_count=settings.team_count if team_count is None else team_count,
    animation_delay=settings.animation_delay if delay is None else delay,
    assigner=TeamAssigner(rng),
  )

  try:
    state.generate(read_names(players_file), read_names(seeds_file))
  except ValidationError as e:
    click.secho(f"Error: {e}", fg="red")
    sys.exit(1)

  if state.title:
    click.secho(state.title, fg="cyan", bold=True)

  if image_dir is not None:
    image_dir.mkdir(parents=True, exist_ok=True)

  try:
    image_path = asyncio.run(run_session(state, settings, name_teams, image_dir))
  except ExportFailed as e:
    click.secho(f"Error: {state.error} ({e})", fg="red")
    sys.exit(1)

  summary = state.assigner.get_assignment_summary(state.teams, state.seeds)
  click.secho(f"\nTeam sizes: {summary['team_sizes']}", fg="blue")
  click.secho(f"Drew {summary['total_people']} players into {len(state.teams)} teams", fg="green")

  if image_path is not None:
    click.secho(f"Saved roster image to {image_path}", fg="green")
  if svg_file is not None:
    export_svg(state, svg_file, columns=settings.columns)
    click.secho(f"Saved roster SVG to {svg_file}", fg="green")
  if csv_file is not None:
    state.assigner.save_roster_csv(state.teams, state.team_names, csv_file, state.seeds)
    click.secho(f"Saved roster CSV to {csv_file}", fg="green")
  if yaml_file is not None:
    state.assigner.save_roster_yaml(state.teams, state.team_names, yaml_file, state.title)
    click.secho(f"Saved roster YAML to {yaml_file}", fg="green")

if __name__ == "__main__":
  cli()
