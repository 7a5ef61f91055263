# main.py
"""
Main entry point for the charged particle field simulation.

This script orchestrates the entire simulation lifecycle:
1. Parses and validates the startup values from the command line.
2. Loads configuration from `config.json` and initializes logging.
3. Sets up the world and the two charge populations.
4. Runs the frame loop: step, regularize, sample the field, render.
5. Handles clean shutdown.
"""
import argparse
import logging
import sys
import time
import numpy as np
import cProfile
import pstats
import io
from typing import List, Optional, Tuple

from constants import USAGE, FRAME_DELAY, LOG_THROTTLE_STEPS, DEFAULT_CELL_SIZE
from utils import setup_logging, load_config, parse_positive_int, parse_positive_float


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Charged particles on a torus, rendered as the zero contour of their potential.",
        epilog=USAGE,
    )
    # Positionals are validated by hand so that bad input exits with status 1.
    parser.add_argument('width', nargs='?', help="canvas width in cells (int)")
    parser.add_argument('height', nargs='?', help="canvas height in cells (int)")
    parser.add_argument('particles', nargs='?', help="number of particles (int)")
    parser.add_argument('charge', nargs='?', help="charge magnitude of every particle (float)")
    parser.add_argument('--config', default='config.json', help="path to the JSON configuration file")
    parser.add_argument('--seed', type=int, default=None, help="seed for the random generator")
    parser.add_argument('--max-steps', type=int, default=None, help="stop after this many frames (0 = run forever)")
    parser.add_argument('--renderer', choices=('terminal', 'pygame'), default=None)
    return parser


def validate_startup(args: argparse.Namespace) -> Tuple[int, int, int, float]:
    """
    Returns (width, height, particle_count, charge).

    Raises:
        ValueError: If any value is missing or not positive.
    """
    if None in (args.width, args.height, args.particles, args.charge):
        raise ValueError("four startup values are required")
    return (
        parse_positive_int(args.width),
        parse_positive_int(args.height),
        parse_positive_int(args.particles),
        parse_positive_float(args.charge),
    )


def validate_run_control(log_throttle: int, frame_delay: float, max_steps: int) -> None:
    """
    Checks the run_control values used by the frame loop.

    Raises:
        ValueError: If a value is out of range.
    """
    problems = []
    if isinstance(log_throttle, bool) or not isinstance(log_throttle, int) or log_throttle <= 0:
        problems.append(f"log_throttle_steps must be a positive integer, got {log_throttle!r}")
    if not isinstance(frame_delay, (int, float)) or frame_delay < 0:
        problems.append(f"frame_delay must be a non-negative number, got {frame_delay!r}")
    if isinstance(max_steps, bool) or not isinstance(max_steps, int) or max_steps < 0:
        problems.append(f"max_steps must be a non-negative integer, got {max_steps!r}")
    if problems:
        msg = "Configuration error: " + "; ".join(problems) + "."
        logging.critical(msg)
        raise ValueError(msg)


def main(argv: Optional[List[str]] = None) -> int:
    """
    The main function to run the simulation. Returns the exit status.
    """
    # Trailing values after the four startup values are ignored.
    args, extra = build_parser().parse_known_args(argv)
    try:
        width, height, particle_count, charge = validate_startup(args)
    except ValueError:
        print(USAGE)
        return 1

    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"FATAL: Could not load {args.config}. Error: {e}")
        return 1

    setup_logging(config)

    logging.info("--- Charge Field Simulation Starting ---")
    if extra:
        logging.warning(f"Ignoring unrecognized arguments: {extra}")

    sim_params = dict(config.get('simulation_parameters', {}))
    run_params = config.get('run_control', {})
    vis_params = config.get('visualization', {})

    if args.seed is not None:
        sim_params['seed'] = args.seed
    max_steps = args.max_steps if args.max_steps is not None else run_params.get('max_steps', 0)
    renderer_name = args.renderer or vis_params.get('renderer', 'terminal')
    frame_delay = run_params.get('frame_delay', FRAME_DELAY)
    log_throttle = run_params.get('log_throttle_steps', LOG_THROTTLE_STEPS)
    mark_particles = vis_params.get('mark_particles', False)

    try:
        validate_run_control(log_throttle, frame_delay, max_steps)
    except ValueError as e:
        print(f"FATAL: {e}")
        return 1

    from world import World
    from particle import ParticleSystem
    from simulation import Simulation
    from field import sample_field
    from visualization import TerminalRenderer, PygameRenderer

    # --- Component Initialization ---
    try:
        world = World(width, height, seed=sim_params.get('seed'))
        print(f"{world.width} {world.height}")
        particles = ParticleSystem.populate(world, particle_count, charge)
        sim = Simulation(particles, world, sim_params)
    except ValueError as e:
        logging.critical(f"Initialization failed: {e}")
        print(f"FATAL: {e}")
        return 1

    if renderer_name == 'pygame':
        renderer = PygameRenderer(
            world,
            cell_size=vis_params.get('cell_size', DEFAULT_CELL_SIZE),
            boundary_color=vis_params.get('boundary_color'),
            particle_color=vis_params.get('particle_color'),
        )
    else:
        renderer = TerminalRenderer(world)

    # The cell buffer is reused for every frame.
    cells = np.empty(world.shape, dtype=np.uint8)

    profiler = cProfile.Profile() if run_params.get('profile', True) else None

    running = True
    if profiler:
        profiler.enable()
    try:
        while running:
            sim.step()
            sample_field(world, particles, out=cells, mark_particles=mark_particles)

            if not renderer.draw(cells):
                running = False

            step_num = sim.step_count
            # Hot loops must throttle logs
            if step_num % log_throttle == 0:
                logging.info(f"Simulation step {step_num}")
                avg_velocity = np.mean(np.linalg.norm(particles.velocities, axis=1))
                logging.debug(
                    f"Step {step_num} | Average Velocity: {avg_velocity:.4f} | "
                    f"Kinetic Energy: {particles.kinetic_energy():.4f}"
                )

            if max_steps and step_num >= max_steps:
                logging.info(f"Reached max_steps ({max_steps}). Stopping simulation.")
                running = False

            if running and frame_delay > 0:
                time.sleep(frame_delay)
    except KeyboardInterrupt:
        logging.info("Interrupted by user.")
    finally:
        if profiler:
            profiler.disable()
        renderer.close()

    logging.info("Simulation loop finished.")

    if profiler:
        logging.info("--- Performance Profile ---")
        s = io.StringIO()
        # Sort by cumulative time spent in the function
        stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
        stats.print_stats(20) # Print top 20 slowest functions
        logging.info(f"\n{s.getvalue()}")

    logging.info("--- Charge Field Simulation Shutting Down ---")
    return 0


if __name__ == "__main__":
    sys.exit(main())
