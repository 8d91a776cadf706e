"""Roster image export.

The roster is first laid out as a flat scene of rectangles, lines and
text with absolute coordinates. The scene can be written as SVG markup or
drawn with Pillow onto a supersampled canvas and saved as PNG.
"""

import asyncio
import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

from PIL import Image, ImageDraw, ImageFont

logger = logging.getLogger(__name__)

CARD_WIDTH = 360
BASE_CARD_HEIGHT = 160
PLAYER_ROW_HEIGHT = 32
GAP = 24
PADDING = 24
TITLE_HEIGHT = 60
COLUMNS = 2
SCALE = 2
DEFAULT_FILENAME = 'pickleball-teams.png'

BACKGROUND = '#f0f9ff'
CARD_FILL = '#ffffff'
CARD_BORDER = '#e0f2fe'
HEADING = '#0369a1'
TEAM_NAME = '#075985'
PLAYER_FILL = '#f0f9ff'
PLAYER_TEXT = '#0c4a6e'
FONT_FAMILY = 'Inter, sans-serif'


class ExportFailed(RuntimeError):
    """Raised when the roster image could not be produced."""


@dataclass
class Rect:
    x: float
    y: float
    width: float
    height: float
    fill: str
    radius: float = 0
    stroke: Optional[str] = None
    stroke_width: float = 0


@dataclass
class Line:
    x1: float
    y1: float
    x2: float
    y2: float
    stroke: str
    width: float = 1


@dataclass
class Text:
    x: float
    y: float  # baseline
    text: str
    size: int
    fill: str
    weight: int = 400
    anchor: str = 'start'


Shape = Union[Rect, Line, Text]


@dataclass
class Scene:
    width: float
    height: float
    background: str = BACKGROUND
    items: List[Shape] = field(default_factory=list)


@dataclass
class Layout:
    width: float
    height: float
    cards: List[Tuple[float, float, float]]  # x, y, height per team
    row_heights: List[float]


def card_height(team: Sequence[str]) -> float:
    return BASE_CARD_HEIGHT + len(team) * PLAYER_ROW_HEIGHT


def compute_layout(teams: Sequence[Sequence[str]], columns: int = COLUMNS) -> Layout:
    """Place team cards in a grid of ``columns``.

    Each row is as tall as its tallest card.
    """
    heights = [card_height(team) for team in teams]
    row_heights = [
        max(heights[start:start + columns])
        for start in range(0, len(heights), columns)
    ]

    cards = []
    y = PADDING + TITLE_HEIGHT
    for row, row_height in enumerate(row_heights):
        for col in range(columns):
            index = row * columns + col
            if index >= len(heights):
                break
            x = PADDING + col * (CARD_WIDTH + GAP)
            cards.append((x, y, heights[index]))
        y += row_height + GAP

    cards_height = sum(row_heights) + max(len(row_heights) - 1, 0) * GAP
    width = columns * CARD_WIDTH + (columns - 1) * GAP + PADDING * 2
    height = cards_height + PADDING * 2 + TITLE_HEIGHT
    return Layout(width=width, height=height, cards=cards, row_heights=row_heights)


def escape_text(text: str) -> str:
    return text.replace('&', '&amp;').replace('<', '&lt;').replace('>', '&gt;')


def build_scene(
    teams: Sequence[Sequence[str]],
    team_names: Sequence[Optional[str]],
    title: str = '',
    columns: int = COLUMNS,
) -> Scene:
    """Describe the full roster image. Team data is only read."""
    layout = compute_layout(teams, columns)
    scene = Scene(width=layout.width, height=layout.height)
    items = scene.items

    items.append(Rect(0, 0, layout.width, layout.height, fill=BACKGROUND))
    if title:
        items.append(Text(layout.width / 2, PADDING + 30, title, size=28, fill=HEADING,
                          weight=700, anchor='middle'))

    for index, (team, (x, y, height)) in enumerate(zip(teams, layout.cards)):
        name = team_names[index] if index < len(team_names) else None

        items.append(Rect(x, y, CARD_WIDTH, height, fill=CARD_FILL, radius=16,
                          stroke=CARD_BORDER, stroke_width=1.5))
        items.append(Text(x + 24, y + 40, f"Team {index + 1}", size=18, fill=HEADING, weight=700))
        if name:
            items.append(Text(x + 24, y + 72, name, size=24, fill=TEAM_NAME, weight=700))
        items.append(Line(x + 24, y + 100, x + CARD_WIDTH - 24, y + 100, stroke=CARD_BORDER, width=1.5))
        items.append(Text(x + 24, y + 128, "Members", size=16, fill=HEADING, weight=600))

        for position, player in enumerate(team):
            row_y = y + 145 + position * PLAYER_ROW_HEIGHT
            items.append(Rect(x + 24, row_y, CARD_WIDTH - 48, 28, fill=PLAYER_FILL, radius=6))
            items.append(Text(x + 36, row_y + 19, player, size=14, fill=PLAYER_TEXT, weight=500))

    return scene


def _num(value: float) -> str:
    return f"{value:g}"


def scene_to_svg(scene: Scene) -> str:
    """Serialize a scene to SVG markup with all text escaped."""
    out = [
        f'<svg width="{_num(scene.width)}" height="{_num(scene.height)}" '
        f'xmlns="http://www.w3.org/2000/svg">'
    ]
    for item in scene.items:
        if isinstance(item, Rect):
            stroke = ''
            if item.stroke:
                stroke = f' stroke="{item.stroke}" stroke-width="{_num(item.stroke_width)}"'
            out.append(
                f'<rect x="{_num(item.x)}" y="{_num(item.y)}" width="{_num(item.width)}" '
                f'height="{_num(item.height)}" rx="{_num(item.radius)}" fill="{item.fill}"{stroke} />'
            )
        elif isinstance(item, Line):
            out.append(
                f'<line x1="{_num(item.x1)}" y1="{_num(item.y1)}" x2="{_num(item.x2)}" '
                f'y2="{_num(item.y2)}" stroke="{item.stroke}" stroke-width="{_num(item.width)}" />'
            )
        else:
            out.append(
                f'<text x="{_num(item.x)}" y="{_num(item.y)}" font-size="{item.size}px" '
                f'font-weight="{item.weight}" fill="{item.fill}" font-family="{FONT_FAMILY}" '
                f'text-anchor="{item.anchor}">{escape_text(item.text)}</text>'
            )
    out.append('</svg>')
    return '\n'.join(out)


class FontSet:
    """Loads and caches fonts by pixel size.

    Without font files Pillow's built-in scalable font is used, which
    needs a Pillow built with FreeType.
    """

    def __init__(self, regular: Optional[str] = None, bold: Optional[str] = None):
        self.regular = regular
        self.bold = bold or regular
        self._cache: Dict[Tuple[Optional[str], int], ImageFont.FreeTypeFont] = {}

    def get(self, size: int, bold: bool = False):
        path = self.bold if bold else self.regular
        key = (path, size)
        if key not in self._cache:
            if path:
                self._cache[key] = ImageFont.truetype(path, size)
            else:
                font = ImageFont.load_default(size=size)
                if not isinstance(font, ImageFont.FreeTypeFont):
                    raise ExportFailed(
                        "Pillow was built without FreeType support; "
                        "set export.font to a TrueType font path"
                    )
                self._cache[key] = font
        return self._cache[key]


def rasterize(scene: Scene, scale: int = SCALE, fonts: Optional[FontSet] = None) -> bytes:
    """Draw a scene ``scale`` times larger and return PNG bytes.

    Raises:
        ExportFailed: If a font can't be loaded or drawing fails
    """
    fonts = fonts or FontSet()
    size = (round(scene.width * scale), round(scene.height * scale))

    try:
        image = Image.new('RGB', size, scene.background)
        draw = ImageDraw.Draw(image)
        for item in scene.items:
            if isinstance(item, Rect):
                box = [round(item.x * scale), round(item.y * scale),
                       round((item.x + item.width) * scale), round((item.y + item.height) * scale)]
                outline_width = max(1, round(item.stroke_width * scale)) if item.stroke else 0
                draw.rounded_rectangle(box, radius=round(item.radius * scale), fill=item.fill,
                                       outline=item.stroke, width=outline_width)
            elif isinstance(item, Line):
                draw.line([item.x1 * scale, item.y1 * scale, item.x2 * scale, item.y2 * scale],
                          fill=item.stroke, width=max(1, round(item.width * scale)))
            else:
                font = fonts.get(item.size * scale, bold=item.weight >= 600)
                anchor = 'ms' if item.anchor == 'middle' else 'ls'
                draw.text((item.x * scale, item.y * scale), item.text, font=font,
                          fill=item.fill, anchor=anchor)

        buffer = io.BytesIO()
        image.save(buffer, format='PNG')
    except (OSError, ValueError) as e:
        raise ExportFailed(f"Could not draw the roster image: {e}") from e
    return buffer.getvalue()


def _write_file(path: Path, payload: bytes) -> None:
    """Write a file in one step so a failed write leaves nothing behind."""
    partial = path.with_name(path.name + '.part')
    try:
        partial.write_bytes(payload)
        partial.replace(path)
    finally:
        if partial.exists():
            partial.unlink()


def export_svg(state, output_path: Path, columns: int = COLUMNS) -> Path:
    scene = build_scene(state.teams, state.team_names, state.title, columns)
    output_path.write_text(scene_to_svg(scene), encoding='utf-8')
    return output_path


async def export_image(
    state,
    output_dir: Path,
    filename: str = DEFAULT_FILENAME,
    scale: int = SCALE,
    columns: int = COLUMNS,
    fonts: Optional[FontSet] = None,
) -> Optional[Path]:
    """Render the tournament's teams to a PNG file in ``output_dir``.

    Only one export runs at a time per tournament; a second call while one
    is running returns None without doing anything.

    Returns:
        Path of the written image, or None if an export was already running

    Raises:
        ExportFailed: If the image could not be built or written. No file
            is left behind in that case.
    """
    if not state.begin_export():
        logger.info("Export already in progress")
        return None

    try:
        if not state.teams:
            raise ExportFailed("There are no teams to export")
        scene = build_scene(state.teams, state.team_names, state.title, columns)
        loop = asyncio.get_running_loop()
        payload = await loop.run_in_executor(None, rasterize, scene, scale, fonts)
        path = Path(output_dir) / filename
        _write_file(path, payload)
    except Exception as e:
        logger.error("Image export failed: %s", e)
        state.end_export("Could not export the image. Please try again.")
        if isinstance(e, ExportFailed):
            raise
        raise ExportFailed(f"Could not export the image: {e}") from e

    state.end_export()
    logger.info("Exported roster image to %s", path)
    return path
