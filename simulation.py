# simulation.py
"""
Handles the core simulation logic and physics calculations.

This module advances the particle system by one time step: it accumulates
the pairwise forces (direct pairs plus 8 periodic images), applies a
semi-implicit Euler update, and then wraps positions back into the domain
and damps velocities.
"""
import logging
import numpy as np
from typing import Dict, Any, Optional
from numba import jit

from constants import IMAGE_OFFSETS, DELTA_TIME, DAMPING
from forces import force_components
from particle import ParticleSystem
from world import World

# --- Data Contracts ---
#
# accumulate_forces(particles: ParticleSystem, world: World) -> np.ndarray
#   - Outputs: (N, 2) float64 array, the total force on each particle.
#   - Side Effects: None.
#
# step(particles: ParticleSystem, world: World, dt: float) -> None
#   - Side Effects: Updates velocities then positions in place.
#   - Invariants: Particle count remains constant.
#
# regularize(particles: ParticleSystem, world: World, damping: float) -> None
#   - Side Effects: Applies one wrap correction per axis and scales all
#     velocities by `damping`.
#
# class Simulation:
#   - __init__(self, particles: ParticleSystem, world: World, params: Dict[str, Any]):
#     - params: "delta_time": float, "damping": float
#   - step(self) -> None: one Integrator step followed by regularize.

@jit(nopython=True)
def _accumulate_forces_numba(positions, charges, world_width, world_height):
    """
    Numba-jitted brute-force force accumulation.

    Direct pairs are visited once and Newton's third law is applied
    explicitly. Image contributions go to particle i only; the image's
    owner never receives the reaction. Every particle's own images are
    included.
    """
    particle_count = positions.shape[0]
    total_force = np.zeros((particle_count, 2), dtype=np.float64)

    for i in range(particle_count):
        x_i = positions[i, 0]
        y_i = positions[i, 1]
        charge_i = charges[i]

        for j in range(i + 1, particle_count):
            fx, fy = force_components(
                x_i, y_i, charge_i, positions[j, 0], positions[j, 1], charges[j]
            )
            total_force[i, 0] += fx
            total_force[i, 1] += fy
            total_force[j, 0] -= fx
            total_force[j, 1] -= fy

        for k in range(IMAGE_OFFSETS.shape[0]):
            offset_x = IMAGE_OFFSETS[k, 0] * world_width
            offset_y = IMAGE_OFFSETS[k, 1] * world_height
            for j in range(particle_count):
                fx, fy = force_components(
                    x_i, y_i, charge_i,
                    positions[j, 0] + offset_x, positions[j, 1] + offset_y, charges[j]
                )
                total_force[i, 0] += fx
                total_force[i, 1] += fy

    return total_force


def accumulate_forces(particles: ParticleSystem, world: World) -> np.ndarray:
    """Returns the (N, 2) force acting on every particle."""
    return _accumulate_forces_numba(
        particles.positions, particles.charges,
        float(world.width), float(world.height)
    )


def step(particles: ParticleSystem, world: World, dt: float = DELTA_TIME) -> None:
    """
    Executes one semi-implicit Euler step.

    Velocities are updated from the forces first, then positions are moved
    with the new velocities.
    """
    total_force = accumulate_forces(particles, world)
    particles.velocities += total_force / particles.masses[:, np.newaxis] * dt
    particles.positions += particles.velocities * dt


def regularize(particles: ParticleSystem, world: World, damping: float = DAMPING) -> None:
    """
    Wraps positions back into the domain and damps velocities.

    The wrap is a single correction by (size - 1) per axis, not a modulo:
    a particle that travels further than one domain per step stays outside.
    """
    pos = particles.positions
    for axis, size in ((0, world.width), (1, world.height)):
        coord = pos[:, axis]
        span = size - 1
        coord[coord < 0.0] += span
        # Evaluated after the first correction, matching a sequential check.
        coord[coord > span] -= span

    particles.velocities *= damping


class Simulation:
    """
    Owns one particle system and one world and advances them frame by frame.
    """
    def __init__(self, particles: ParticleSystem, world: World, params: Optional[Dict[str, Any]] = None):
        """
        Initializes the simulation environment.

        Args:
            particles (ParticleSystem): The particle system to simulate.
            world (World): The periodic domain.
            params (Dict[str, Any]): Simulation parameters from config.
        """
        params = params or {}
        self.particles = particles
        self.world = world
        self.delta_time = float(params.get('delta_time', DELTA_TIME))
        self.damping = float(params.get('damping', DAMPING))
        self.step_count = 0

        if self.delta_time <= 0:
            msg = f"Configuration error: delta_time must be positive, got {self.delta_time}."
            logging.critical(msg)
            raise ValueError(msg)
        if not 0.0 <= self.damping <= 1.0:
            msg = f"Configuration error: damping must be within [0, 1], got {self.damping}."
            logging.critical(msg)
            raise ValueError(msg)

        logging.info("Simulation logic initialized and configuration validated.")
        logging.info(
            f"Brute-force forces with 8 periodic images: "
            f"{particles.particle_count} particles, dt={self.delta_time}, damping={self.damping}."
        )

    def step(self) -> None:
        """
        Executes one time step of the simulation.
        """
        # 1. Forces and semi-implicit Euler update (using Numba)
        step(self.particles, self.world, self.delta_time)

        # 2. Handle boundary conditions and damping
        regularize(self.particles, self.world, self.damping)

        self.step_count += 1
