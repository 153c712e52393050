"""
Seeded 3D Perlin noise for the flow direction field.
"""

import random

import noise


class FlowNoise:
    """
    Coherent noise sampler returning values in [0, 1).

    Wraps ``noise.pnoise3``. The seed picks a random offset into the
    noise volume, so reseeding changes the whole field at once.
    """

    MAX_SEED = 2 ** 31

    def __init__(self, seed: int = 0, octaves: int = 4, persistence: float = 0.5):
        self.octaves = octaves
        self.persistence = persistence
        self.seed = seed

    @property
    def seed(self) -> int:
        return self._seed

    @seed.setter
    def seed(self, value: int):
        self._seed = int(value)
        rng = random.Random(self._seed)
        # Offsets stay well inside pnoise3's default 1024 repeat period
        self.offsets = tuple(rng.uniform(0, 256) for _ in range(3))

    def sample(self, x: float, y: float, z: float) -> float:
        ox, oy, oz = self.offsets
        value = noise.pnoise3(
            x + ox, y + oy, z + oz,
            octaves=self.octaves,
            persistence=self.persistence,
        )
        # pnoise3 is roughly [-1, 1]; fold to [0, 1)
        n = (value + 1.0) * 0.5
        if n < 0.0:
            return 0.0
        if n >= 1.0:
            return 1.0 - 1e-9
        return n
