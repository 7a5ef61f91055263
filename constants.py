# constants.py
"""
Application-level constants.

These values are static and do not change between simulation runs.
They are fundamental to the application's framework, such as the force
law coefficients, the periodic image set, the cell symbols used by the
field renderer, and the defaults for every configurable parameter.
"""
import numpy as np

# --- Force Law ---
# Softening added to the squared distance in the force law.
EPS_FORCE = 1.0
# Below this separation the force points opposite to the charge law.
SOFT_CORE_RADIUS = 10.0
# Added to the distance in the potential law.
EPS_POTENTIAL = 1e-6

# The 8 neighbouring tiles of the periodic domain, in units of (width, height).
# This ring of replicas is the whole image set; it is not an Ewald sum.
IMAGE_OFFSETS = np.array([
    [1, 0], [1, 1], [0, 1], [-1, 1],
    [-1, 0], [-1, -1], [0, -1], [1, -1],
], dtype=np.float64)

# --- Simulation Defaults ---
DELTA_TIME = 0.1
DAMPING = 0.99
PARTICLE_MASS = 1.0

# --- Run Control Defaults ---
FRAME_DELAY = 0.01  # Seconds between frames
LOG_THROTTLE_STEPS = 100
LOG_MAX_BYTES = 1024 * 1024
LOG_BACKUP_COUNT = 5

# --- Cell Symbols ---
EMPTY_CELL = ord(' ')
BOUNDARY_CELL = ord('#')
PARTICLE_CELL = ord('@')

# --- Terminal Rendering ---
# Moves the cursor one line up and back to column 0.
CURSOR_UP = "\x1b[1A\r"

USAGE = (
    "please provide the info <canvas width(int), canvas height(int), "
    "number of particles(int), particles charge(float)>"
)

# --- Pygame Rendering ---
DEFAULT_CELL_SIZE = 8
BACKGROUND_COLOR = (24, 24, 24)  # Dark Gray
BOUNDARY_COLOR = (0, 255, 255)   # Cyan
PARTICLE_COLOR = (255, 0, 102)   # Hot Pink
FPS = 60
