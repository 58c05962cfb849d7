# simulation.py
"""
Handles the nebula simulation and its frame loop.

This module defines the Simulation class, which owns the particle field,
the pointer state and the drawing surface, and the RenderLoop class,
which paints the trail overlay and advances the field once per frame.
"""
import logging
import numpy as np
from typing import Any, Optional, Sequence

from constants import PARTICLE_COUNT, NEBULA_COLORS, TRAIL_OVERLAY_COLOR
from particle import ParticleField
from pointer import PointerState

# --- Data Contracts ---
#
# class Simulation:
#   - __init__(self, surface, seed: Optional[int] = None,
#              pointer: Optional[PointerState] = None, ...):
#     - Inputs:
#       - surface: Object exposing `width`, `height`, `fill_rect` and
#         `fill_circle`.
#       - seed: Master seed for the single random generator. None means
#         nondeterministic.
#     - Side Effects: Validates the palette and seeds the particle field.
#
#   - on_resize(self, width: int, height: int) -> None:
#     - Side Effects: Re-seeds the whole field against the new size.
#       Must run before the next tick.
#
# class RenderLoop:
#   - tick(self) -> None:
#     - Side Effects: Paints the trail overlay, updates and draws every
#       particle, then requests the next tick unless stopped.
#   - stop(self) -> None:
#     - Side Effects: No further tick is requested or executed.

# Anything that accepts a callback to run on the next display refresh.
Scheduler = Any


class Simulation:
    """
    Owns the particle field, the pointer state and the surface handle.
    """
    def __init__(
        self,
        surface: Any,
        seed: Optional[int] = None,
        pointer: Optional[PointerState] = None,
        palette: Sequence[str] = NEBULA_COLORS,
        particle_count: int = PARTICLE_COUNT
    ):
        """
        Initializes the simulation environment.

        Args:
            surface: The drawing surface particles are painted on.
            seed (Optional[int]): Master seed for all randomness.
            pointer (Optional[PointerState]): Pointer tracker, created if omitted.
            palette (Sequence[str]): "#RRGGBB" particle colors.
            particle_count (int): Number of particle slots.
        """
        self.surface = surface
        self.pointer = pointer if pointer is not None else PointerState()
        # All randomness is controlled by a single master seed.
        self.rng = np.random.default_rng(seed)
        self.field = ParticleField(surface, self.pointer, self.rng, palette, particle_count)
        logging.info(f"Simulation initialized (seed={seed}).")

    def on_pointer_move(self, x: float, y: float) -> None:
        self.pointer.on_move(x, y)

    def on_pointer_leave(self) -> None:
        self.pointer.on_leave()

    def on_resize(self, width: int, height: int) -> None:
        """Re-seeds the field for the new surface size."""
        logging.info(f"Surface resized to {width}x{height}. Re-seeding particle field.")
        self.field.init()

    def step(self) -> int:
        """Advances every particle by one tick. Returns the number of respawns."""
        return self.field.update()

    def paint_overlay(self) -> None:
        """Fades the previous frame toward black by painting a translucent rectangle."""
        width, height = self.field.size
        self.surface.fill_rect(0, 0, width, height, TRAIL_OVERLAY_COLOR)

    def draw(self) -> None:
        self.field.draw()


class RenderLoop:
    """
    Drives the simulation one frame at a time through a host scheduler.
    """
    def __init__(
        self,
        simulation: Simulation,
        scheduler: Scheduler,
        log_throttle: int = 300,
        max_frames: Optional[int] = None
    ):
        self.simulation = simulation
        self.scheduler = scheduler
        self.log_throttle = max(1, log_throttle)
        self.max_frames = max_frames
        self.frame = 0
        self.running = False
        self._resets_since_log = 0

    def start(self) -> None:
        logging.info("Render loop starting.")
        self.running = True
        self.scheduler.request_next_tick(self.tick)

    def stop(self) -> None:
        if self.running:
            logging.info(f"Render loop stopped after {self.frame} frames.")
        self.running = False

    def tick(self) -> None:
        """
        Runs one frame and re-requests itself.

        The overlay is painted first so the previous frame fades toward
        black; particles are then updated and drawn on top.
        """
        if not self.running:
            return

        sim = self.simulation
        sim.paint_overlay()
        if not sim.field.is_degenerate:
            self._resets_since_log += sim.step()
            sim.draw()

        self.frame += 1

        # Hot loops must throttle logs
        if self.frame % self.log_throttle == 0:
            logging.info(f"Frame {self.frame}")
            logging.debug(
                f"Frame {self.frame} | Respawns: {self._resets_since_log} | "
                f"Mean opacity: {np.mean(sim.field.opacities):.4f}"
            )
            self._resets_since_log = 0

        if self.max_frames is not None and self.frame >= self.max_frames:
            logging.info(f"Reached max_frames ({self.max_frames}). Stopping render loop.")
            self.stop()

        if self.running:
            self.scheduler.request_next_tick(self.tick)
