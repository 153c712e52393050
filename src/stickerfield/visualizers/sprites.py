"""
Sticker sprites.

Anything drawn for a particle implements the small ``Sprite`` interface:
a native width/height and ``draw`` at a position, rotation and box size.
Image files are the normal source; when none are configured or none can
be loaded, flat outlined shapes are generated from the palette instead.
"""

import abc
import logging
import math
from pathlib import Path
from typing import Dict, List, Sequence, Tuple

import pygame
from PIL import Image, ImageDraw

from stickerfield.config import FieldConfig, hex_to_rgb

logger = logging.getLogger(__name__)

SHAPE_KINDS = ("ellipse", "polygon", "star", "flower", "pill")

# Procedural stickers are drawn at this multiple, then downsampled
_SUPERSAMPLE = 3


def fit_size(width: float, height: float, target: float) -> Tuple[float, float]:
    """Scale (width, height) to fit a target x target box, keeping aspect ratio."""
    w = width or target
    h = height or target
    ratio = w / h
    if ratio >= 1:
        return target, target / ratio
    return target * ratio, target


class Sprite(abc.ABC):
    """Drawable sticker with a fixed native size."""

    def __init__(self):
        self._scaled: Dict[int, pygame.Surface] = {}

    @property
    @abc.abstractmethod
    def width(self) -> int:
        pass

    @property
    @abc.abstractmethod
    def height(self) -> int:
        pass

    @abc.abstractmethod
    def source(self) -> pygame.Surface:
        """Full-resolution surface with per-pixel alpha."""
        pass

    def scaled(self, size: int) -> pygame.Surface:
        """Surface fitted into a size x size box (cached per size)."""
        cached = self._scaled.get(size)
        if cached is None:
            w, h = fit_size(self.width, self.height, size)
            dims = (max(1, round(w)), max(1, round(h)))
            src = self.source()
            if src.get_bitsize() >= 24:
                cached = pygame.transform.smoothscale(src, dims)
            else:
                cached = pygame.transform.scale(src, dims)
            self._scaled[size] = cached
        return cached

    def draw(self, target: pygame.Surface, position: Tuple[float, float], rotation: float, size: int):
        """Blit centered at position, rotated by rotation radians (clockwise on screen)."""
        img = self.scaled(size)
        if rotation:
            img = pygame.transform.rotate(img, -math.degrees(rotation))
        rect = img.get_rect(center=(round(position[0]), round(position[1])))
        target.blit(img, rect)


class ImageSprite(Sprite):
    """Sticker backed by an image file."""

    def __init__(self, surface: pygame.Surface, path: Path | None = None):
        super().__init__()
        self.surface = surface
        self.path = path

    @classmethod
    def load(cls, path: Path) -> "ImageSprite":
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Sticker image not found: {path}")
        return cls(pygame.image.load(str(path)), path)

    @property
    def width(self) -> int:
        return self.surface.get_width()

    @property
    def height(self) -> int:
        return self.surface.get_height()

    def source(self) -> pygame.Surface:
        return self.surface

    def __repr__(self):
        return f"ImageSprite({self.path or '<surface>'}, {self.width}x{self.height})"


class ShapeSprite(Sprite):
    """Flat, outlined sticker shape generated from a palette colour."""

    def __init__(
        self,
        kind: str,
        color: Tuple[int, int, int],
        outline_px: int = 5,
        size: int = 80,
        ink: Tuple[int, int, int] = (17, 17, 17),
    ):
        super().__init__()
        if kind not in SHAPE_KINDS:
            raise ValueError(f"Unknown shape kind: {kind}")
        self.kind = kind
        self.color = tuple(color)
        self.outline_px = outline_px
        self.size = size
        self.ink = tuple(ink)
        self._surface: pygame.Surface | None = None

    @property
    def width(self) -> int:
        return self.size

    @property
    def height(self) -> int:
        return self.size // 2 if self.kind == "pill" else self.size

    def source(self) -> pygame.Surface:
        if self._surface is None:
            self._surface = self._render()
        return self._surface

    def _render(self) -> pygame.Surface:
        s = _SUPERSAMPLE
        w, h = self.width * s, self.height * s
        img = Image.new("RGBA", (w, h), (0, 0, 0, 0))
        draw = ImageDraw.Draw(img)

        stroke = max(1, self.outline_px * s)
        inset = stroke / 2 + 1
        fill = self.color + (255,)
        ink = self.ink + (255,)
        box = (inset, inset, w - inset, h - inset)
        cx, cy = w / 2, h / 2
        r = min(w, h) / 2 - inset

        if self.kind == "ellipse":
            draw.ellipse(box, fill=fill, outline=ink, width=stroke)
        elif self.kind == "polygon":
            draw.polygon(_regular_polygon((cx, cy), r, 6, -math.pi / 2), fill=fill, outline=ink, width=stroke)
        elif self.kind == "star":
            draw.polygon(_star((cx, cy), r, r * 0.5, 5), fill=fill, outline=ink, width=stroke)
        elif self.kind == "flower":
            petal = r * 0.42
            for i in range(6):
                angle = i * math.pi / 3
                px = cx + math.cos(angle) * (r - petal)
                py = cy + math.sin(angle) * (r - petal)
                draw.ellipse((px - petal, py - petal, px + petal, py + petal), fill=fill, outline=ink, width=stroke)
            core = r * 0.45
            draw.ellipse((cx - core, cy - core, cx + core, cy + core), fill=fill, outline=ink, width=stroke)
        else:  # pill
            draw.rounded_rectangle(box, radius=(h - 2 * inset) / 2, fill=fill, outline=ink, width=stroke)

        img = img.resize((self.width, self.height), Image.LANCZOS)
        data = img.tobytes()
        return pygame.image.frombuffer(data, img.size, "RGBA").copy()

    def __repr__(self):
        return f"ShapeSprite({self.kind}, {self.color})"


def _regular_polygon(center, radius, sides, rotation) -> List[Tuple[float, float]]:
    points = []
    for i in range(sides):
        angle = rotation + (2 * math.pi * i / sides)
        points.append((center[0] + radius * math.cos(angle), center[1] + radius * math.sin(angle)))
    return points


def _star(center, outer, inner, spikes) -> List[Tuple[float, float]]:
    points = []
    for i in range(spikes * 2):
        radius = outer if i % 2 == 0 else inner
        angle = -math.pi / 2 + math.pi * i / spikes
        points.append((center[0] + radius * math.cos(angle), center[1] + radius * math.sin(angle)))
    return points


def make_stickers(
    palette: Sequence[str],
    outline_px: int,
    size: int,
    ink: Tuple[int, int, int] = (17, 17, 17),
) -> List[ShapeSprite]:
    """One sticker per (palette colour, shape kind)."""
    return [
        ShapeSprite(kind, hex_to_rgb(color), outline_px, size, ink)
        for color in palette
        for kind in SHAPE_KINDS
    ]


def load_sprites(config: FieldConfig) -> List[Sprite]:
    """
    Load the configured sticker images, falling back to generated shapes.

    Unreadable files are skipped with a warning.
    """
    sprites: List[Sprite] = []
    if config.use_sticker_images:
        for path in config.sticker_paths:
            try:
                sprites.append(ImageSprite.load(Path(path)))
            except (FileNotFoundError, pygame.error) as exc:
                logger.warning("Skipping sticker %s: %s", path, exc)

    if not sprites:
        if config.use_sticker_images and config.sticker_paths:
            logger.warning("No sticker images could be loaded; using generated shapes")
        sprites = make_stickers(config.palette, config.outline_px, config.sticker_size, config.ink_color)
    return sprites
