"""
Flowfield particle simulation.

Each tick every sticker:
- Samples a 3D noise field for a flow angle (plus a directional bias)
- Blends that direction into its dragged velocity with a little jitter
- Is pulled toward the pointer when it is close enough
- Is pushed away from neighbours closer than the padding distance
- Has its speed clamped, moves, and wraps around the canvas edges
"""

import logging
import math
import random
from dataclasses import dataclass
from typing import Any, List, NamedTuple, Optional, Sequence

import numpy as np

from stickerfield.config import FieldConfig, FlowDirection
from stickerfield.core.noisefield import FlowNoise

logger = logging.getLogger(__name__)

# Squared distances below this count as coincident
_EPSILON_SQ = 1e-6


class Pointer(NamedTuple):
    """Pointer (mouse or touch) position in canvas space."""
    x: float
    y: float
    active: bool = True


NO_POINTER = Pointer(0.0, 0.0, False)


@dataclass
class Particle:
    """A single sticker drifting through the field."""
    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0
    rot: float = 0.0
    sprite: Any = None

    @property
    def speed(self) -> float:
        return math.hypot(self.vx, self.vy)


def attraction(dx: float, dy: float, radius: float, force: float, exponent: float):
    """
    Pointer pull for a particle offset (dx, dy) from the pointer.

    Returns the velocity delta; zero outside the radius or at the pointer.
    """
    d2 = dx * dx + dy * dy
    if d2 >= radius * radius or d2 <= _EPSILON_SQ:
        return 0.0, 0.0
    d = math.sqrt(d2)
    falloff = 1.0 - (d / radius) ** exponent
    return dx / d * force * falloff, dy / d * force * falloff


def repulsion(positions: np.ndarray, padding: float, strength: float) -> np.ndarray:
    """
    Soft pairwise spacing forces for a snapshot of positions.

    Args:
        positions: (N, 2) array of particle positions.
        padding: Distance at which the push fades to zero.
        strength: Push magnitude at zero distance.

    Returns:
        (N, 2) array of velocity deltas.
    """
    n = len(positions)
    if n < 2:
        return np.zeros((n, 2))

    # diff[i, j] = p_i - p_j
    diff = positions[:, None, :] - positions[None, :, :]
    dist2 = np.einsum("ijk,ijk->ij", diff, diff)
    mask = (dist2 < padding * padding) & (dist2 > _EPSILON_SQ)
    np.fill_diagonal(mask, False)

    dist = np.sqrt(np.where(mask, dist2, 1.0))
    magnitude = np.where(mask, strength * (1.0 - dist / padding), 0.0)
    return np.sum(diff / dist[:, :, None] * magnitude[:, :, None], axis=1)


def clamp_speed(vx: float, vy: float, max_vel: float):
    """Limit the velocity magnitude, keeping its direction."""
    speed = math.hypot(vx, vy)
    if speed <= max_vel or speed == 0.0:
        return vx, vy
    scale = max_vel / speed
    return vx * scale, vy * scale


def wrap(value: float, extent: float, margin: float) -> float:
    """Toroidal wrap into [-margin, extent + margin)."""
    period = extent + 2 * margin
    if period <= 0:
        return value
    if -margin <= value < extent + margin:
        return value
    wrapped = (value + margin) % period
    if wrapped >= period:
        wrapped = 0.0
    return wrapped - margin


class ParticleField:
    """
    Owns the sticker list and the noise time, and advances them one tick
    at a time. Drawing is left to the renderer.
    """

    def __init__(
        self,
        config: Optional[FieldConfig] = None,
        sprites: Optional[Sequence[Any]] = None,
        seed: Optional[int] = None,
    ):
        self.cfg = config or FieldConfig()
        self.width = float(self.cfg.width)
        self.height = float(self.cfg.height)
        self.sprites = list(sprites) if sprites else [None]

        self.rng = random.Random(seed)
        self.noise = FlowNoise(seed=self.rng.randrange(FlowNoise.MAX_SEED))
        self.time = 0.0

        self.particles: List[Particle] = []
        self.init_particles()

    # ------------------------------------------------------------------
    # Population
    # ------------------------------------------------------------------

    def target_count(self, width: float, height: float) -> int:
        """Particle count for a canvas of the given size. Halves round up."""
        cfg = self.cfg
        return max(
            cfg.min_particles,
            math.floor(width * height * cfg.base_density * cfg.density_scale + 0.5),
        )

    def make_particle(self) -> Particle:
        return Particle(
            x=self.rng.uniform(0, self.width),
            y=self.rng.uniform(0, self.height),
            rot=self.rng.uniform(0, 2 * math.pi),
            sprite=self.rng.choice(self.sprites),
        )

    def respawn(self, particle: Particle):
        particle.x = self.rng.uniform(0, self.width)
        particle.y = self.rng.uniform(0, self.height)
        particle.vx = 0.0
        particle.vy = 0.0
        particle.rot = self.rng.uniform(0, 2 * math.pi)
        particle.sprite = self.rng.choice(self.sprites)

    def init_particles(self):
        count = self.target_count(self.width, self.height)
        self.particles = [self.make_particle() for _ in range(count)]

    def adjust_count(self, width: float, height: float) -> int:
        """
        Resize the canvas and grow or truncate the particle list to match.

        Surviving particles keep their state.

        Returns:
            The new particle count.
        """
        self.width = float(width)
        self.height = float(height)
        target = self.target_count(self.width, self.height)
        diff = target - len(self.particles)
        if diff:
            logger.info(
                "Canvas %dx%d: particle count %d -> %d",
                width, height, len(self.particles), target,
            )
        if diff > 0:
            self.particles.extend(self.make_particle() for _ in range(diff))
        elif diff < 0:
            del self.particles[target:]
        return target

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    def reset(self, seed: Optional[int] = None):
        """Reseed the noise, zero the field time and respawn everything."""
        if seed is None:
            seed = self.rng.randrange(FlowNoise.MAX_SEED)
        self.noise.seed = seed
        self.time = 0.0
        for particle in self.particles:
            self.respawn(particle)

    def advance_time(self):
        self.time += self.cfg.time_step

    def flow_angle(self, index: int, particle: Particle) -> float:
        cfg = self.cfg
        n = self.noise.sample(
            particle.x * cfg.noise_scale,
            particle.y * cfg.noise_scale,
            self.time + index * 100,
        )
        return n * 2 * math.pi + cfg.flow_direction.bias

    def step(self, pointer: Pointer = NO_POINTER):
        """Advance every particle by one tick."""
        if not self.particles:
            return

        cfg = self.cfg
        snapshot = np.array([(p.x, p.y) for p in self.particles], dtype=np.float64)
        push = repulsion(snapshot, cfg.particle_padding, cfg.repulsion_strength)
        pull_active = cfg.mouse_enabled and pointer.active
        margin = cfg.wrap_margin

        for i, pt in enumerate(self.particles):
            a = self.flow_angle(i, pt)
            ax = math.cos(a)
            ay = math.sin(a)

            pt.vx = cfg.drag * pt.vx + cfg.accel * ax + self.rng.uniform(-cfg.jitter, cfg.jitter)
            pt.vy = cfg.drag * pt.vy + cfg.accel * ay + self.rng.uniform(-cfg.jitter, cfg.jitter)

            if pull_active:
                dvx, dvy = attraction(
                    pointer.x - float(snapshot[i, 0]),
                    pointer.y - float(snapshot[i, 1]),
                    cfg.mouse_radius, cfg.mouse_force, cfg.mouse_exp,
                )
                pt.vx += dvx
                pt.vy += dvy

            pt.vx += float(push[i, 0])
            pt.vy += float(push[i, 1])

            pt.vx, pt.vy = clamp_speed(pt.vx, pt.vy, cfg.max_vel)

            pt.x += pt.vx
            pt.y += pt.vy

            if cfg.flow_direction is FlowDirection.FLOWFIELD:
                pt.rot = a
            else:
                pt.rot = math.atan2(ay, ax)

            pt.x = wrap(pt.x, self.width, margin)
            pt.y = wrap(pt.y, self.height, margin)

    def update(self, pointer: Pointer = NO_POINTER):
        """One running tick: advance noise time, then step the particles."""
        self.advance_time()
        self.step(pointer)
