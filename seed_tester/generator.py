"""Seed generation through an explicit NumPy generator handle.

Usage::

    from seed_tester.generator import SeedGenerator
    gen = SeedGenerator(seed=42)
    seeds = gen.generate(1000)   # uint64 array, reproducible for seed=42
"""

from __future__ import annotations

import numpy as np

from seed_tester.errors import InvalidConfigurationError

UINT64_MAX = int(np.iinfo(np.uint64).max)


class SeedGenerator:
    """Source of uniformly distributed unsigned 64-bit seeds.

    Parameters
    ----------
    seed : int or None
        Seed for the default ``PCG64`` bit generator. ``None`` draws fresh
        OS entropy, so runs are not reproducible.
    bit_generator : numpy.random.BitGenerator or None
        Use this bit generator instead of a new ``PCG64``.
    """

    def __init__(self, seed: int | None = None, bit_generator: np.random.BitGenerator | None = None):
        if bit_generator is None:
            bit_generator = np.random.PCG64(seed)
        self._seed = seed
        self._rng = np.random.Generator(bit_generator)
        self._generated = 0

    def generate(self, count: int) -> np.ndarray:
        """Return *count* seeds as a read-only ``uint64`` array."""
        if count < 0:
            raise InvalidConfigurationError(f"Cannot generate a negative number of seeds ({count})")
        seeds = self._rng.integers(0, UINT64_MAX, size=count, dtype=np.uint64, endpoint=True)
        self._generated += count
        seeds.flags.writeable = False
        return seeds

    @property
    def state(self) -> dict:
        return {
            "bit_generator": type(self._rng.bit_generator).__name__,
            "seed": self._seed,
            "generated": self._generated,
        }

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} seed={self._seed!r} generated={self._generated}>"


def generate_seeds(count: int, seed: int | None = None) -> np.ndarray:
    """Convenience wrapper: *count* seeds from a fresh :class:`SeedGenerator`."""
    return SeedGenerator(seed=seed).generate(count)
