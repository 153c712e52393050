"""
Run/pause lifecycle for a particle field.

The field only advances while three independent inputs all allow it:
the window is visible, the canvas is in view, and the user has not
paused it by hand. Reset and resize are commands that act regardless
of the run state.
"""

import logging
from enum import Enum
from typing import Optional

from stickerfield.core.particles import NO_POINTER, ParticleField, Pointer

logger = logging.getLogger(__name__)


class RunState(Enum):
    RUNNING = "running"
    PAUSED = "paused"


class LifecycleController:
    """
    Explicit Running/Paused state machine driving a ParticleField.

    Host events only set inputs here; the work happens in ``tick``.
    """

    def __init__(self, field: ParticleField):
        self.field = field
        self.cfg = field.cfg

        self.visible = True
        self.in_view = True
        self.manual_paused = False
        self.state = RunState.RUNNING

        self.pointer_cooldown_until = 0.0
        self.force_frame = False
        self.flash_pending = False
        self.frames_run = 0

    @property
    def should_run(self) -> bool:
        return self.visible and self.in_view and not self.manual_paused

    @property
    def running(self) -> bool:
        return self.state is RunState.RUNNING

    def _transition(self, reason: str):
        new_state = RunState.RUNNING if self.should_run else RunState.PAUSED
        if new_state is not self.state:
            logger.info("Flowfield %s (%s)", new_state.value, reason)
            self.state = new_state

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    def set_visibility(self, visible: bool):
        """Window/tab visibility changed."""
        self.visible = bool(visible)
        self._transition("visible" if self.visible else "hidden")

    def set_intersection(self, is_intersecting: bool, ratio: float = 1.0):
        """Canvas entered or left the viewport."""
        self.in_view = bool(is_intersecting) and ratio > self.cfg.intersection_threshold
        self._transition("in view" if self.in_view else "out of view")

    def toggle_pause(self) -> bool:
        """Flip the manual pause flag. Returns the new flag."""
        self.manual_paused = not self.manual_paused
        self._transition("manual pause" if self.manual_paused else "manual resume")
        return self.manual_paused

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def reset(self, now_ms: float, seed: Optional[int] = None):
        """
        Respawn the field and schedule exactly one frame, even while paused.

        Pointer attraction is suppressed for ``reset_cooldown_ms`` so the
        stickers don't snap to the cursor right away.
        """
        self.field.reset(seed)
        self.pointer_cooldown_until = now_ms + self.cfg.reset_cooldown_ms
        self.force_frame = True
        self.flash_pending = True
        logger.info("Flowfield reset (noise seed %d)", self.field.noise.seed)

    def resize(self, width: float, height: float) -> int:
        return self.field.adjust_count(width, height)

    # ------------------------------------------------------------------
    # Per-frame
    # ------------------------------------------------------------------

    def resolve_pointer(self, x: Optional[float], y: Optional[float], now_ms: float) -> Pointer:
        """Build the pointer for this tick; inactive outside the canvas or in cooldown."""
        if x is None or y is None:
            return NO_POINTER
        inside = 0 <= x <= self.field.width and 0 <= y <= self.field.height
        active = inside and now_ms >= self.pointer_cooldown_until
        return Pointer(float(x), float(y), active)

    def tick(self, pointer: Pointer = NO_POINTER) -> bool:
        """
        Run one update if the field is running or a frame was forced.

        Returns:
            True if the field was advanced and should be redrawn.
        """
        if not (self.running or self.force_frame):
            return False
        self.force_frame = False
        self.field.update(pointer)
        self.frames_run += 1
        return True

    def consume_flash(self) -> bool:
        """True once after each reset, for the renderer's reset flash."""
        flash = self.flash_pending
        self.flash_pending = False
        return flash
