# particle.py
"""
Manages the state of all particles in the nebula.

This module defines the ParticleField class, which owns the fixed-size
particle collection as NumPy arrays, seeds it with a center-biased
placement and advances it one tick at a time. Individual particles are
exposed through lightweight Particle views over those arrays.
"""
import logging
import numpy as np
from numba import jit
from typing import Any, Iterator, Optional, Sequence, Tuple

from constants import (
    PARTICLE_COUNT, CENTRAL_BIAS_FACTOR, RESET_DISTANCE_FACTOR,
    OPACITY_RANGE, RADIUS_RANGE, SPEED_RANGE, FADE_SPEED_RANGE,
    DIRECTION_JITTER, POINTER_DEAD_ZONE, POINTER_PULL_STRENGTH,
    POINTER_PUSH_STRENGTH, FRICTION, NEBULA_COLORS
)
from pointer import PointerState
from utils import random_range, validate_palette

# --- Data Contracts ---
#
# sample_spawn(rng, count, width, height) -> (positions, velocities, radius_from_center):
#   - Outputs:
#     - positions: (count, 2) float64, within min(width, height) * 0.5 of
#       the surface center.
#     - velocities: (count, 2) float64, speed in [0.1, 0.5), heading within
#       pi/8 of the outward spawn angle.
#     - radius_from_center: (count,) float64, product of two uniforms times
#       the maximum spawn radius (biased toward the center).
#
# class ParticleField:
#   - __init__(self, surface, pointer: PointerState, rng: np.random.Generator,
#              palette: Sequence[str] = NEBULA_COLORS, count: int = PARTICLE_COUNT):
#     - Inputs:
#       - surface: Any object exposing `width`, `height` and `fill_circle`.
#       - pointer: The PointerState read on every update.
#       - rng: The single generator all randomness is drawn from.
#     - Raises: ValueError if a palette entry is malformed.
#
#   - init(self) -> None:
#     - Side Effects: Replaces every particle array with a fresh population.
#     - Invariants:
#       - self.positions, self.velocities are (count, 2) float64.
#       - self.opacities, self.radii, self.fade_speeds are (count,) float64.
#       - self.color_indices is (count,) int64.
#
#   - update(self, start: int = 0, stop: Optional[int] = None) -> int:
#     - Outputs: Number of particles reset during this update.
#     - Invariants: 0 <= opacity <= 1. Particle count never changes.


@jit(nopython=True)
def _update_particles_numba(
    positions, velocities, opacities, fade_speeds,
    origin_x, origin_y, max_distance,
    has_pointer, pointer_x, pointer_y, pointer_moving,
    dead_zone, pull_strength, push_strength, friction
):
    """
    Numba-jitted function that advances every particle by one tick.

    Applies the pointer force, friction, Euler integration and fading in
    place, and returns a mask of particles that must be respawned. The
    respawn itself needs the random generator, so it happens outside.
    """
    particle_count = positions.shape[0]
    dead = np.zeros(particle_count, dtype=np.bool_)

    for i in range(particle_count):
        if has_pointer:
            dx = pointer_x - positions[i, 0]
            dy = pointer_y - positions[i, 1]
            distance = np.sqrt(dx * dx + dy * dy)

            if distance > dead_zone:
                direction_x = dx / distance
                direction_y = dy / distance
                if pointer_moving:
                    velocities[i, 0] += direction_x * pull_strength
                    velocities[i, 1] += direction_y * pull_strength
                else:
                    velocities[i, 0] -= direction_x * push_strength
                    velocities[i, 1] -= direction_y * push_strength

        velocities[i, 0] *= friction
        velocities[i, 1] *= friction

        positions[i, 0] += velocities[i, 0]
        positions[i, 1] += velocities[i, 1]

        if opacities[i] > 0:
            opacities[i] -= fade_speeds[i]
            if opacities[i] < 0:
                opacities[i] = 0.0

        ox = positions[i, 0] - origin_x
        oy = positions[i, 1] - origin_y
        if opacities[i] <= 0 or np.sqrt(ox * ox + oy * oy) > max_distance:
            dead[i] = True

    return dead


def sample_spawn(
    rng: np.random.Generator, count: int, width: float, height: float
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Samples center-biased spawn positions and outward velocities.

    The spawn distance is the product of two uniforms scaled to the
    maximum radius, which packs particles into a dense core instead of
    spreading them evenly over the disk.
    """
    center = np.array([width / 2, height / 2], dtype=np.float64)
    max_radius = max(min(width, height), 0) * CENTRAL_BIAS_FACTOR

    angles = random_range(rng, 0.0, 2 * np.pi, count)
    radius_from_center = rng.random(count) * rng.random(count) * max_radius
    offsets = np.column_stack((np.cos(angles), np.sin(angles)))
    positions = center + offsets * radius_from_center[:, np.newaxis]

    speeds = random_range(rng, *SPEED_RANGE, count)
    directions = angles + random_range(rng, -DIRECTION_JITTER, DIRECTION_JITTER, count)
    velocities = np.column_stack((np.cos(directions), np.sin(directions))) * speeds[:, np.newaxis]

    return positions, velocities, radius_from_center


class Particle:
    """
    A view of one slot in a ParticleField.

    Reads and writes go straight to the field's arrays, so a Particle
    never holds state of its own and stays valid across respawns.
    """
    __slots__ = ("field", "index")

    def __init__(self, field: "ParticleField", index: int):
        self.field = field
        self.index = index

    def __repr__(self) -> str:
        x, y = self.position
        return f"Particle(index={self.index}, position=({x:.1f}, {y:.1f}), opacity={self.opacity:.3f})"

    @property
    def position(self) -> Tuple[float, float]:
        x, y = self.field.positions[self.index]
        return float(x), float(y)

    @position.setter
    def position(self, value: Tuple[float, float]) -> None:
        self.field.positions[self.index] = value

    @property
    def velocity(self) -> Tuple[float, float]:
        vx, vy = self.field.velocities[self.index]
        return float(vx), float(vy)

    @velocity.setter
    def velocity(self, value: Tuple[float, float]) -> None:
        self.field.velocities[self.index] = value

    @property
    def opacity(self) -> float:
        return float(self.field.opacities[self.index])

    @opacity.setter
    def opacity(self, value: float) -> None:
        self.field.opacities[self.index] = value

    @property
    def fade_speed(self) -> float:
        return float(self.field.fade_speeds[self.index])

    @fade_speed.setter
    def fade_speed(self, value: float) -> None:
        self.field.fade_speeds[self.index] = value

    @property
    def radius(self) -> float:
        return float(self.field.radii[self.index])

    @property
    def color(self) -> str:
        return self.field.palette[self.field.color_indices[self.index]]

    @property
    def origin(self) -> Tuple[float, float]:
        return self.field.origin

    def update(self) -> bool:
        """Advances this particle one tick. Returns True if it was reset."""
        return self.field.update(self.index, self.index + 1) > 0

    def draw(self) -> None:
        self.field.draw(self.index, self.index + 1)

    def reset(self) -> None:
        self.field.reset(np.array([self.index]))


class ParticleField:
    """
    A fixed-size container for all particles, managing their state via NumPy arrays.
    """
    def __init__(
        self,
        surface: Any,
        pointer: PointerState,
        rng: np.random.Generator,
        palette: Sequence[str] = NEBULA_COLORS,
        count: int = PARTICLE_COUNT
    ):
        """
        Validates the palette and seeds the initial population.

        Args:
            surface: The drawing surface; its size is read on every update.
            pointer (PointerState): Pointer read by every update.
            rng (np.random.Generator): Source of all randomness.
            palette (Sequence[str]): "#RRGGBB" colors particles are drawn in.
            count (int): Number of particle slots.
        """
        self.surface = surface
        self.pointer = pointer
        self.rng = rng
        self.count = count
        self.palette = list(palette)
        self.palette_rgb = validate_palette(self.palette)
        self.total_resets = 0
        self.init()

    @property
    def size(self) -> Tuple[float, float]:
        return self.surface.width, self.surface.height

    @property
    def is_degenerate(self) -> bool:
        width, height = self.size
        return min(width, height) <= 0

    def _center(self) -> Tuple[float, float]:
        width, height = self.size
        return width / 2, height / 2

    def __len__(self) -> int:
        return self.count

    def __getitem__(self, index: int) -> Particle:
        if not -self.count <= index < self.count:
            raise IndexError(f"Particle index {index} out of range.")
        return Particle(self, index % self.count)

    def __iter__(self) -> Iterator[Particle]:
        return (Particle(self, i) for i in range(self.count))

    def init(self) -> None:
        """Discards all particles and seeds a fresh population for the current surface size."""
        width, height = self.size
        self.origin = self._center()
        n = self.count

        # fade speed is drawn once per slot here and survives every reset
        self.fade_speeds = random_range(self.rng, *FADE_SPEED_RANGE, n)
        self.radii = random_range(self.rng, *RADIUS_RANGE, n)
        self.color_indices = self.rng.integers(0, len(self.palette), size=n, dtype=np.int64)

        if self.is_degenerate:
            logging.warning(
                f"Surface size {width}x{height} is degenerate. "
                f"Particles are kept invisible until the next resize."
            )
            self.positions = np.tile(np.array(self.origin, dtype=np.float64), (n, 1))
            self.velocities = np.zeros((n, 2), dtype=np.float64)
            self.opacities = np.zeros(n, dtype=np.float64)
        else:
            self.positions, self.velocities, _ = sample_spawn(self.rng, n, width, height)
            self.opacities = random_range(self.rng, *OPACITY_RANGE, n)

        logging.info(f"ParticleField initialized with {n} particles for a {width}x{height} surface.")
        logging.debug(
            f"Particle data arrays created. "
            f"Positions shape: {self.positions.shape}, "
            f"Velocities shape: {self.velocities.shape}, "
            f"Palette size: {len(self.palette)}"
        )

    def reset(self, indices: np.ndarray) -> None:
        """
        Respawns the given slots in place around the current center.

        Fade speeds are left untouched. On a degenerate surface nothing is
        placed and the slots stay invisible until the next resize.
        """
        k = len(indices)
        if k == 0 or self.is_degenerate:
            return
        width, height = self.size
        self.origin = self._center()

        positions, velocities, _ = sample_spawn(self.rng, k, width, height)
        self.positions[indices] = positions
        self.velocities[indices] = velocities
        self.opacities[indices] = random_range(self.rng, *OPACITY_RANGE, k)
        self.radii[indices] = random_range(self.rng, *RADIUS_RANGE, k)
        self.color_indices[indices] = self.rng.integers(0, len(self.palette), size=k)
        self.total_resets += k

    def update(self, start: int = 0, stop: Optional[int] = None) -> int:
        """
        Advances particles [start, stop) by one tick and respawns the dead ones.

        Returns:
            int: The number of particles that were reset.
        """
        if self.is_degenerate:
            return 0
        stop = self.count if stop is None else stop

        width, height = self.size
        self.origin = self._center()
        position, moving = self.pointer.snapshot()
        pointer_x, pointer_y = position if position is not None else (0.0, 0.0)

        dead = _update_particles_numba(
            self.positions[start:stop], self.velocities[start:stop],
            self.opacities[start:stop], self.fade_speeds[start:stop],
            float(self.origin[0]), float(self.origin[1]),
            float(max(width, height) * RESET_DISTANCE_FACTOR),
            position is not None, float(pointer_x), float(pointer_y), bool(moving),
            POINTER_DEAD_ZONE, POINTER_PULL_STRENGTH, POINTER_PUSH_STRENGTH, FRICTION
        )

        dead_indices = np.flatnonzero(dead) + start
        self.reset(dead_indices)
        return len(dead_indices)

    def draw(self, start: int = 0, stop: Optional[int] = None) -> None:
        """Paints particles [start, stop) onto the surface at their current opacity."""
        if self.is_degenerate:
            return
        stop = self.count if stop is None else stop
        for i in range(start, stop):
            r, g, b = self.palette_rgb[self.color_indices[i]]
            self.surface.fill_circle(
                float(self.positions[i, 0]),
                float(self.positions[i, 1]),
                float(self.radii[i]),
                (r, g, b, float(self.opacities[i]))
            )
