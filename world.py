# world.py
"""
Describes the periodic domain the particles live in.

The World is a fixed-size rectangle whose opposite edges are identified,
so the plane behaves as if it were tiled infinitely. It also owns the
single random generator used to place particles.
"""
import logging
import numpy as np
from typing import Optional, Tuple

# --- Data Contracts ---
#
# class World:
#   - __init__(self, width: int, height: int, rng: Optional[np.random.Generator] = None, seed: Optional[int] = None):
#     - Inputs:
#       - width, height: positive ints, the domain is [0, width) x [0, height).
#       - rng: generator to draw from. Created from `seed` if not given.
#     - Side Effects: None.
#     - Invariants: width > 0, height > 0. Never mutated after construction.
#
#   - random_point(self) -> Tuple[float, float]
#   - random_scalar(self) -> float in [0, 1)

class World:
    """
    The toroidal simulation domain and its random source.
    """
    def __init__(
        self,
        width: int,
        height: int,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
    ):
        for name, value in (('width', width), ('height', height)):
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value <= 0:
                msg = f"World {name} must be a positive integer, got {value!r}."
                logging.error(msg)
                raise ValueError(msg)

        self._width = int(width)
        self._height = int(height)
        # A single generator owned by the world; there is no global seeding.
        self.rng = rng if rng is not None else np.random.default_rng(seed)

        logging.info(f"World initialized with size {self._width}x{self._height}.")

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def shape(self) -> Tuple[int, int]:
        """(rows, cols) of a grid covering the world."""
        return (self._height, self._width)

    def random_point(self) -> Tuple[float, float]:
        """Returns a point on the integer lattice of the domain, as floats."""
        x = self.rng.integers(0, self._width)
        y = self.rng.integers(0, self._height)
        return (float(x), float(y))

    def random_scalar(self) -> float:
        return float(self.rng.random())

    def __repr__(self) -> str:
        return f"World(width={self._width}, height={self._height})"
