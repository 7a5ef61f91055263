# visualization.py
"""
Handles the visualization of the potential field.

Two renderers consume the CellGrid produced by `field.sample_field`:
an ASCII renderer that redraws in place in the terminal, and a Pygame
renderer that paints each cell as a small square. Neither feeds anything
back into the simulation.
"""
import logging
import os
import sys
import numpy as np
from typing import Optional, TextIO, Tuple

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")
import pygame

from constants import (
    BACKGROUND_COLOR, BOUNDARY_COLOR, PARTICLE_COLOR, BOUNDARY_CELL,
    PARTICLE_CELL, CURSOR_UP, DEFAULT_CELL_SIZE, FPS
)
from world import World

# --- Data Contracts ---
#
# class TerminalRenderer:
#   - __init__(self, world: World, stream: Optional[TextIO] = None)
#   - draw(self, cells: np.ndarray) -> bool:
#     - Inputs: (height, width) uint8 CellGrid.
#     - Outputs: Always True.
#     - Side Effects: Moves the cursor back over the previous frame (if any)
#       and writes `height` lines of `width` characters.
#
# class PygameRenderer:
#   - __init__(self, world: World, cell_size: int, boundary_color, particle_color)
#   - draw(self, cells: np.ndarray) -> bool:
#     - Outputs: False if the user has closed the window, True otherwise.
#     - Side Effects: Handles Pygame events and repaints the window.


class TerminalRenderer:
    """
    Prints the cell grid as text and redraws it in place each frame.
    """
    def __init__(self, world: World, stream: Optional[TextIO] = None):
        self.width = world.width
        self.height = world.height
        self.stream = stream if stream is not None else sys.stdout
        self.frames_drawn = 0
        logging.info(f"Terminal renderer initialized ({self.width}x{self.height} characters).")

    def format_cells(self, cells: np.ndarray) -> str:
        rows = cells.reshape(self.height, self.width)
        return "".join(row.tobytes().decode('latin-1') + "\n" for row in rows)

    def clear(self) -> None:
        """Moves the cursor to the first line of the previous frame."""
        self.stream.write(CURSOR_UP * self.height)

    def draw(self, cells: np.ndarray) -> bool:
        if self.frames_drawn:
            self.clear()
        self.stream.write(self.format_cells(cells))
        self.stream.flush()
        self.frames_drawn += 1
        return True

    def close(self) -> None:
        self.stream.flush()


class PygameRenderer:
    """
    Paints the cell grid into a Pygame window.
    """
    def __init__(
        self,
        world: World,
        cell_size: int = DEFAULT_CELL_SIZE,
        boundary_color: Optional[Tuple[int, int, int]] = None,
        particle_color: Optional[Tuple[int, int, int]] = None,
    ):
        """
        Initializes Pygame and the display window.
        """
        pygame.init()

        self.width = world.width
        self.height = world.height
        self.cell_size = int(cell_size)
        self.screen = pygame.display.set_mode(
            (self.width * self.cell_size, self.height * self.cell_size)
        )
        pygame.display.set_caption("Charge Field")
        self.clock = pygame.time.Clock()

        self.boundary_color = self._parse_color(boundary_color, BOUNDARY_COLOR)
        self.particle_color = self._parse_color(particle_color, PARTICLE_COLOR)

        logging.info(
            f"Visualizer initialized with Pygame display "
            f"({self.width * self.cell_size}x{self.height * self.cell_size})."
        )

    @staticmethod
    def _parse_color(config_color, default) -> pygame.Color:
        if not config_color:
            return pygame.Color(default)
        try:
            return pygame.Color(config_color)
        except (ValueError, TypeError) as e:
            logging.error(f"Could not parse color {config_color!r} from config: {e}. Using default.")
            return pygame.Color(default)

    def draw(self, cells: np.ndarray) -> bool:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Window closed by user.")
                return False

        self.screen.fill(BACKGROUND_COLOR)
        size = self.cell_size
        for color, symbol in ((self.boundary_color, BOUNDARY_CELL), (self.particle_color, PARTICLE_CELL)):
            rows, cols = np.nonzero(cells == symbol)
            for row, col in zip(rows, cols):
                self.screen.fill(color, pygame.Rect(int(col) * size, int(row) * size, size, size))

        pygame.display.flip()
        self.clock.tick(FPS)
        return True

    def close(self):
        """Shuts down Pygame."""
        pygame.quit()
