"""
Interactive pygame host for the sticker flowfield.

Translates window, mouse, touch and keyboard events into lifecycle
inputs, then renders one frame per display refresh.
"""

import logging

import pygame

from stickerfield.config import FieldConfig
from stickerfield.core.particles import Pointer
from stickerfield.visualizers.flowfield import FlowfieldRenderer

logger = logging.getLogger(__name__)


class FlowfieldApp:
    """Resizable window running a FlowfieldRenderer."""

    def __init__(self, config: FieldConfig | None = None, seed: int | None = None):
        self.config = config or FieldConfig()

        pygame.init()
        self.screen = pygame.display.set_mode(
            (self.config.width, self.config.height), pygame.RESIZABLE
        )
        pygame.display.set_caption("Sticker Flowfield")
        self.clock = pygame.time.Clock()

        self.renderer = FlowfieldRenderer(self.config, seed=seed)
        self.controller = self.renderer.controller

        # Last known pointer; None when the mouse is outside the window
        self.pointer_pos: tuple[float, float] | None = None
        self.touch_pos: tuple[float, float] | None = None

    def handle_event(self, event: pygame.event.Event) -> bool:
        """Apply one event. Returns False when the app should quit."""
        now = pygame.time.get_ticks()

        if event.type == pygame.QUIT:
            return False

        elif event.type == pygame.KEYDOWN:
            if event.key in (pygame.K_ESCAPE, pygame.K_q):
                return False
            elif event.key == pygame.K_a:
                self.controller.toggle_pause()
            elif event.key == pygame.K_r:
                self.controller.reset(now)

        elif event.type == pygame.MOUSEMOTION:
            self.pointer_pos = event.pos

        elif event.type == pygame.WINDOWLEAVE:
            self.pointer_pos = None

        elif event.type in (pygame.FINGERDOWN, pygame.FINGERMOTION):
            w, h = self.renderer.size
            self.touch_pos = (event.x * w, event.y * h)

        elif event.type == pygame.FINGERUP:
            self.touch_pos = None

        elif event.type == pygame.WINDOWMINIMIZED:
            self.controller.set_visibility(False)

        elif event.type == pygame.WINDOWRESTORED:
            self.controller.set_visibility(True)

        elif event.type == pygame.WINDOWHIDDEN:
            self.controller.set_intersection(False, 0.0)

        elif event.type == pygame.WINDOWSHOWN:
            self.controller.set_intersection(True, 1.0)

        elif event.type == pygame.WINDOWSIZECHANGED:
            self.renderer.resize(event.x, event.y)

        return True

    def current_pointer(self, now_ms: float) -> Pointer:
        # Touch wins over the mouse, as on a touch screen both may report
        pos = self.touch_pos or self.pointer_pos
        if pos is None:
            return self.controller.resolve_pointer(None, None, now_ms)
        return self.controller.resolve_pointer(pos[0], pos[1], now_ms)

    def run(self):
        """Main loop."""
        running = True
        while running:
            for event in pygame.event.get():
                if not self.handle_event(event):
                    running = False
                    break

            now = pygame.time.get_ticks()
            try:
                self.renderer.render_frame(self.current_pointer(now))
            except Exception:
                logger.exception("Frame failed; keeping previous state")

            self.renderer.present(self.screen)
            pygame.display.flip()
            self.clock.tick(self.config.fps)

        pygame.quit()
