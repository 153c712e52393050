"""Core simulation: flow noise, particles and the run/pause lifecycle."""

from stickerfield.core.lifecycle import LifecycleController, RunState
from stickerfield.core.noisefield import FlowNoise
from stickerfield.core.particles import NO_POINTER, Particle, ParticleField, Pointer

__all__ = ["FlowNoise", "LifecycleController", "NO_POINTER", "Particle", "ParticleField", "Pointer", "RunState"]
