"""
Flowfield sticker renderer.

Draws a ParticleField onto a pygame Surface:
- A translucent background wash each frame leaves short trails
- Every sticker is blitted at its position and rotation, untinted
- A reset paints a one-off flash colour before the forced frame
- An optional legend overlay lists the keyboard commands
"""

from typing import Callable, Iterator, Optional, Sequence

import numpy as np
import pygame

from stickerfield.config import FieldConfig
from stickerfield.core.lifecycle import LifecycleController
from stickerfield.core.particles import NO_POINTER, ParticleField, Pointer
from stickerfield.visualizers.sprites import Sprite, load_sprites


LEGEND_LINES = ("Legend:", "A = on/off", "R = reset")


class FlowfieldRenderer:
    """
    Renders the sticker flowfield frame by frame.

    The renderer owns one field and its lifecycle controller; hosts feed
    input into ``controller`` and call ``render_frame`` once per tick.
    """

    def __init__(
        self,
        config: FieldConfig | None = None,
        sprites: Optional[Sequence[Sprite]] = None,
        seed: int | None = None,
    ):
        """
        Initialize the renderer.

        Args:
            config: Field configuration. Uses defaults if None.
            sprites: Sticker sprites. Loaded from the config if None.
            seed: Seed for particle placement, jitter and noise.
        """
        self.config = config or FieldConfig()
        self.sprites = list(sprites) if sprites else load_sprites(self.config)

        self.field = ParticleField(self.config, self.sprites, seed)
        self.controller = LifecycleController(self.field)

        self.surface = pygame.Surface((self.config.width, self.config.height))
        self.surface.fill(self.config.background_color)
        self._wash: pygame.Surface | None = None
        self._font: pygame.font.Font | None = None

    @property
    def size(self) -> tuple[int, int]:
        return self.surface.get_size()

    def resize(self, width: int, height: int) -> int:
        """Resize the canvas, keeping the current picture, and adjust the particle count."""
        width, height = max(1, int(width)), max(1, int(height))
        if (width, height) != self.size:
            surface = pygame.Surface((width, height))
            surface.fill(self.config.background_color)
            surface.blit(self.surface, (0, 0))
            self.surface = surface
            self._wash = None
        return self.controller.resize(width, height)

    def _background_wash(self) -> pygame.Surface:
        if self._wash is None:
            self._wash = pygame.Surface(self.size)
            self._wash.fill(self.config.background_color)
            self._wash.set_alpha(self.config.trail_alpha)
        return self._wash

    def draw_particles(self, surface: pygame.Surface):
        size = self.config.sticker_size
        for pt in self.field.particles:
            if pt.sprite is not None:
                pt.sprite.draw(surface, (pt.x, pt.y), pt.rot, size)

    def render_frame(self, pointer: Pointer = NO_POINTER) -> bool:
        """
        Advance and draw one frame if the lifecycle allows it.

        While paused the surface is left untouched, so the last frame
        stays visible.

        Returns:
            True if a new frame was drawn.
        """
        if self.controller.consume_flash():
            self.surface.fill(self.config.reset_color)

        if not self.controller.tick(pointer):
            return False

        self.surface.blit(self._background_wash(), (0, 0))
        self.draw_particles(self.surface)
        return True

    def draw_legend(self, target: pygame.Surface):
        """Draw the key legend in the top-right corner of target."""
        cfg = self.config
        if self._font is None:
            if not pygame.font.get_init():
                pygame.font.init()
            self._font = pygame.font.Font(None, 24)

        lines = [self._font.render(text, True, cfg.ink_color) for text in LEGEND_LINES]
        pad_x, pad_y, margin = 16, 10, 16
        box_w = max(line.get_width() for line in lines) + 2 * pad_x
        box_h = sum(line.get_height() for line in lines) + 2 * pad_y
        box = pygame.Rect(target.get_width() - box_w - margin, margin, box_w, box_h)

        pygame.draw.rect(target, cfg.ink_color, box.move(4, 4), border_radius=6)
        pygame.draw.rect(target, cfg.accent_color, box, border_radius=6)
        pygame.draw.rect(target, cfg.ink_color, box, width=2, border_radius=6)

        y = box.top + pad_y
        for line in lines:
            target.blit(line, (box.left + pad_x, y))
            y += line.get_height()

    def present(self, target: pygame.Surface):
        """Copy the current frame (plus overlay) onto a display surface."""
        target.blit(self.surface, (0, 0))
        if self.config.show_legend:
            self.draw_legend(target)

    def render_frames(
        self,
        n_frames: int,
        pointer_at: Callable[[int], Pointer] | None = None,
        progress_callback: callable = None,
    ) -> Iterator[np.ndarray]:
        """
        Render frames off-screen.

        Args:
            n_frames: Number of frames to produce.
            pointer_at: Optional callback(frame_index) -> Pointer.
            progress_callback: Optional callback(current, total) for progress.

        Yields:
            (H, W, 3) uint8 arrays.
        """
        for i in range(n_frames):
            pointer = pointer_at(i) if pointer_at else NO_POINTER
            self.render_frame(pointer)
            yield self.surface_to_array(self.surface)

            if progress_callback:
                progress_callback(i + 1, n_frames)

    def surface_to_array(self, surface: pygame.Surface) -> np.ndarray:
        """Convert pygame surface to numpy array for video encoding."""
        # pygame uses (width, height) but numpy expects (height, width)
        arr = pygame.surfarray.array3d(surface)
        # Transpose from (width, height, 3) to (height, width, 3)
        return np.ascontiguousarray(np.transpose(arr, (1, 0, 2)))
