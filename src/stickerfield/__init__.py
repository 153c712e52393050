"""Flowfield-driven sticker animation."""

from stickerfield.config import FieldConfig, FlowDirection
from stickerfield.core.lifecycle import LifecycleController, RunState
from stickerfield.core.particles import Particle, ParticleField, Pointer

__version__ = "0.1.0"
__all__ = [
    "FieldConfig",
    "FlowDirection",
    "LifecycleController",
    "Particle",
    "ParticleField",
    "Pointer",
    "RunState",
]
