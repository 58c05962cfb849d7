# main.py
"""
Main entry point for the Nebula particle field.

This script orchestrates the entire lifecycle:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Opens the Pygame host and seeds the simulation.
4. Runs the render loop until the window is closed.
5. Handles clean shutdown.
"""
import logging
import sys
from utils import setup_logging, load_config
import cProfile
import pstats
import io

def main(config_path: str = 'config.json') -> int:
    """
    The main function to run the nebula.
    """
    # Load configuration from the JSON file first.
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config(config_path)
    except Exception as e:
        print(f"FATAL: Could not load {config_path}. Error: {e}")
        return 1

    setup_logging(config)

    logging.info("--- Nebula Starting ---")

    run_params = config.get('run_control', {})

    from simulation import Simulation, RenderLoop
    from visualization import PygameHost

    # --- Component Initialization ---
    # 1. The host opens the window, which determines the surface size.
    host = PygameHost()

    # 2. The simulation seeds its particles against that surface.
    #    A malformed palette fails here, before the first frame.
    try:
        simulation = Simulation(host.surface, seed=run_params.get('seed'))
    except ValueError:
        host.close()
        return 1
    host.attach(simulation)

    loop = RenderLoop(
        simulation,
        scheduler=host,
        log_throttle=run_params.get('log_throttle_frames', 300),
        max_frames=run_params.get('max_frames')
    )

    profiler = cProfile.Profile()
    profiler.enable()
    try:
        host.run(loop)
    finally:
        profiler.disable()
        host.close()
    logging.info("Render loop finished.")

    # --- Performance Profile Output ---
    logging.info("--- Performance Profile ---")
    s = io.StringIO()
    # Sort by cumulative time spent in the function
    stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
    stats.print_stats(20) # Print top 20 slowest functions
    logging.info(f"\n{s.getvalue()}")

    logging.info("--- Nebula Shutting Down ---")
    return 0


if __name__ == "__main__":
    sys.exit(main())
