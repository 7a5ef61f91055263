# particle.py
"""
Manages the state of all particles in the simulation.

This module defines the ParticleSystem class, which is responsible for
storing particle data (position, velocity, charge, mass) in parallel
NumPy arrays. Index i of every array describes the same particle.
"""
import logging
import numpy as np
from typing import Sequence, TYPE_CHECKING

from constants import PARTICLE_MASS

if TYPE_CHECKING:
    from world import World

# --- Data Contracts ---
#
# class ParticleSystem:
#   - __init__(self):
#     - Outputs: An empty system (N = 0).
#     - Invariants:
#       - self.positions is a NumPy array of shape (N, 2) of dtype float64.
#       - self.velocities is a NumPy array of shape (N, 2) of dtype float64.
#       - self.charges is a NumPy array of shape (N,) of dtype float64.
#       - self.masses is a NumPy array of shape (N,) of dtype float64, all > 0.
#
#   - add_particle(self, position, mass, charge) -> ParticleSystem:
#     - Appends one particle at rest. Returns self so calls can be chained.
#     - Raises ValueError if mass is not positive.
#
#   - populate(cls, world, count, charge) -> ParticleSystem:
#     - Places `count` particles at random lattice points of `world`.
#       Particles with index > count // 2 get +charge, the rest -charge.

class ParticleSystem:
    """
    A container for all particles, managing their state via NumPy arrays.
    """
    def __init__(self):
        self.positions = np.zeros((0, 2), dtype=np.float64)
        self.velocities = np.zeros((0, 2), dtype=np.float64)
        self.charges = np.zeros(0, dtype=np.float64)
        self.masses = np.zeros(0, dtype=np.float64)

    @property
    def particle_count(self) -> int:
        return self.positions.shape[0]

    def __len__(self) -> int:
        return self.particle_count

    def add_particle(self, position: Sequence[float], mass: float, charge: float) -> "ParticleSystem":
        """
        Appends a particle with zero initial velocity.

        Args:
            position (Sequence[float]): The (x, y) position.
            mass (float): Must be positive, since forces are divided by it.
            charge (float): Any real value, including zero.

        Returns:
            ParticleSystem: self, for chaining.
        """
        if not mass > 0:
            msg = f"Particle mass must be positive, got {mass}."
            logging.error(msg)
            raise ValueError(msg)

        point = np.asarray(position, dtype=np.float64).reshape(1, 2)
        self.positions = np.vstack((self.positions, point))
        self.velocities = np.vstack((self.velocities, np.zeros((1, 2), dtype=np.float64)))
        self.charges = np.append(self.charges, np.float64(charge))
        self.masses = np.append(self.masses, np.float64(mass))
        return self

    @classmethod
    def populate(cls, world: "World", count: int, charge: float) -> "ParticleSystem":
        """
        Builds a system of `count` unit-mass particles split into two
        opposite charge populations.
        """
        system = cls()
        half = count // 2
        for i in range(count):
            sign = 1.0 if i > half else -1.0
            system.add_particle(world.random_point(), PARTICLE_MASS, charge * sign)

        positive = int(np.count_nonzero(system.charges > 0))
        logging.info(
            f"ParticleSystem initialized with {system.particle_count} particles "
            f"({positive} positive, {system.particle_count - positive} negative, |q| = {charge})."
        )
        logging.debug(
            f"Particle data arrays created. "
            f"Positions shape: {system.positions.shape}, "
            f"Velocities shape: {system.velocities.shape}, "
            f"Charges shape: {system.charges.shape}, "
            f"Masses shape: {system.masses.shape}"
        )
        return system

    def kinetic_energy(self) -> float:
        """Total kinetic energy, used for throttled diagnostics."""
        speed_sq = np.sum(self.velocities ** 2, axis=1)
        return float(0.5 * np.sum(self.masses * speed_sq))
