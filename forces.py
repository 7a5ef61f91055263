# forces.py
"""
Pairwise force and potential laws.

Both laws are Numba-jitted scalar kernels so they can be called from the
jitted hot loops in `simulation.py` and `field.py` as well as from Python.
"""
import numpy as np
from numba import jit

from constants import EPS_FORCE, EPS_POTENTIAL, SOFT_CORE_RADIUS

# --- Data Contracts ---
#
# force_components(x_a, y_a, charge_a, x_b, y_b, charge_b) -> (fx, fy)
#   - Force on particle A due to particle B. The force on B is the
#     negation; callers apply it themselves.
#   - Invariants: finite for any input, (0, 0) for coincident points.
#
# potential_component(x_s, y_s, x_p, y_p, charge) -> float
#   - Potential at the sample point (x_s, y_s) due to a particle.
#
# pairwise_force(pos_a, charge_a, pos_b, charge_b) -> (fx, fy)
# pairwise_potential(sample_pos, particle_pos, charge) -> float
#   - Same laws, taking (x, y) pairs.

@jit(nopython=True)
def force_components(x_a, y_a, charge_a, x_b, y_b, charge_b):
    """
    Coulomb-like force with a soft core.

    The (dist - SOFT_CORE_RADIUS) factor reverses the charge-law direction
    inside the core: closer than SOFT_CORE_RADIUS, like charges attract and
    unlike charges repel. Further out the force follows the charge law.
    """
    dx = x_a - x_b
    dy = y_a - y_b
    dist2 = dx * dx + dy * dy + EPS_FORCE
    dist = np.sqrt(dist2)
    raw = charge_a * charge_b / dist2
    scale = (dist - SOFT_CORE_RADIUS) / dist2 * raw
    return dx * scale, dy * scale


@jit(nopython=True)
def potential_component(x_s, y_s, x_p, y_p, charge):
    """Unsoftened 1/r potential."""
    dx = x_p - x_s
    dy = y_p - y_s
    dist = np.sqrt(dx * dx + dy * dy) + EPS_POTENTIAL
    return charge / dist


def pairwise_force(pos_a, charge_a, pos_b, charge_b):
    """Force on a particle at `pos_a` due to one at `pos_b`."""
    return force_components(
        float(pos_a[0]), float(pos_a[1]), float(charge_a),
        float(pos_b[0]), float(pos_b[1]), float(charge_b),
    )


def pairwise_potential(sample_pos, particle_pos, charge):
    return potential_component(
        float(sample_pos[0]), float(sample_pos[1]),
        float(particle_pos[0]), float(particle_pos[1]), float(charge),
    )
