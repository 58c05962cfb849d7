# visualization.py
"""
Hosts the nebula in a Pygame window.

PygameSurface adapts a pygame.Surface to the small painting interface the
simulation draws through, and PygameHost owns the window, the frame clock
and the event pump that feeds pointer and resize events to the simulation.
"""
import logging
import math
import pygame
from typing import Callable, Dict, Optional, Sequence, Tuple

from constants import (
    FULLSCREEN, WINDOW_WIDTH, WINDOW_HEIGHT, FPS, WINDOW_TITLE, BACKGROUND_COLOR
)

# Forward reference for type hinting to avoid circular import
from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from simulation import Simulation, RenderLoop


# --- Data Contracts ---
#
# class PygameSurface:
#   - __init__(self, target: pygame.Surface)
#   - width, height: int, read live from the target surface.
#   - fill_rect(self, x, y, w, h, color) -> None
#   - fill_circle(self, x, y, r, color) -> None
#     - Inputs:
#       - color: (r, g, b, alpha) with channels in [0, 255] and alpha in [0, 1].
#     - Side Effects: Alpha-composites onto the target surface.
#
# class PygameHost:
#   - request_next_tick(self, callback: Callable[[], None]) -> None:
#     - Side Effects: Stores the callback; it runs once on the next frame.
#   - run(self, loop: RenderLoop) -> None:
#     - Side Effects: Pumps events and runs frames until the loop stops
#       or the user quits. Returns when no tick is pending.

# Circle stamps are cached per color and radius, quantized to this step.
RADIUS_QUANTUM = 0.25


def to_pygame_rgba(color: Sequence[float]) -> Tuple[int, int, int, int]:
    """Converts (r, g, b, alpha in [0, 1]) into a pygame RGBA tuple."""
    r, g, b, alpha = color
    a = int(round(min(max(alpha, 0.0), 1.0) * 255))
    return int(r), int(g), int(b), a


class PygameSurface:
    """
    Paints translucent rectangles and circles onto an opaque pygame surface.
    """
    def __init__(self, target: pygame.Surface):
        self.target = target
        self._overlay: Optional[pygame.Surface] = None
        self._overlay_key: Optional[tuple] = None
        self._stamps: Dict[tuple, pygame.Surface] = {}

    @property
    def width(self) -> int:
        return self.target.get_width()

    @property
    def height(self) -> int:
        return self.target.get_height()

    def fill_rect(self, x: float, y: float, w: float, h: float, color: Sequence[float]) -> None:
        w, h = int(round(w)), int(round(h))
        if w <= 0 or h <= 0:
            return
        rgba = to_pygame_rgba(color)

        # The overlay is the same every frame, so it is only rebuilt when
        # the size or color changes (e.g. after a resize).
        key = (w, h, rgba)
        if self._overlay_key != key:
            self._overlay = pygame.Surface((w, h), pygame.SRCALPHA)
            self._overlay.fill(rgba)
            self._overlay_key = key
            logging.debug(f"Overlay surface rebuilt at {w}x{h}.")
        self.target.blit(self._overlay, (int(round(x)), int(round(y))))

    def fill_circle(self, x: float, y: float, r: float, color: Sequence[float]) -> None:
        red, green, blue, alpha = to_pygame_rgba(color)
        if alpha == 0:
            return
        stamp = self._get_stamp((red, green, blue), r)
        # Per-pixel alpha of the stamp is combined with the surface alpha.
        stamp.set_alpha(alpha)
        half = stamp.get_width() / 2
        self.target.blit(stamp, (int(round(x - half)), int(round(y - half))))

    def _get_stamp(self, rgb: Tuple[int, int, int], radius: float) -> pygame.Surface:
        """Returns a cached, fully opaque circle of the given color and radius."""
        # Sub-pixel radii would draw nothing, so they still cover one pixel.
        radius = max(round(radius / RADIUS_QUANTUM) * RADIUS_QUANTUM, 1.0)
        key = (rgb, radius)
        stamp = self._stamps.get(key)
        if stamp is None:
            size = int(math.ceil(radius * 2)) + 2
            stamp = pygame.Surface((size, size), pygame.SRCALPHA)
            pygame.draw.circle(stamp, (*rgb, 255), (size / 2, size / 2), radius)
            self._stamps[key] = stamp
        return stamp


class PygameHost:
    """
    Owns the Pygame window and acts as the frame scheduler for a RenderLoop.
    """
    def __init__(self, fullscreen: bool = FULLSCREEN, fps: int = FPS):
        """
        Initializes Pygame and the display window.
        """
        pygame.init()

        if fullscreen:
            display_info = pygame.display.Info()
            width, height = display_info.current_w, display_info.current_h
            screen = pygame.display.set_mode((width, height), pygame.FULLSCREEN)
        else:
            width, height = WINDOW_WIDTH, WINDOW_HEIGHT
            screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)

        pygame.display.set_caption(WINDOW_TITLE)
        screen.fill(BACKGROUND_COLOR)

        self.surface = PygameSurface(screen)
        self.clock = pygame.time.Clock()
        self.fps = fps
        self.simulation: Optional["Simulation"] = None
        self._pending: Optional[Callable[[], None]] = None
        self._size = (width, height)

        logging.info(f"PygameHost initialized with Pygame display ({width}x{height}).")

    def request_next_tick(self, callback: Callable[[], None]) -> None:
        self._pending = callback

    def attach(self, simulation: "Simulation") -> None:
        """Routes pointer and resize events to the given simulation."""
        self.simulation = simulation

    def _handle_resize(self, width: int, height: int) -> None:
        if (width, height) == self._size:
            return
        self._size = (width, height)
        screen = pygame.display.get_surface()
        screen.fill(BACKGROUND_COLOR)
        self.surface.target = screen
        if self.simulation is not None:
            self.simulation.on_resize(width, height)

    def handle_events(self) -> bool:
        """
        Dispatches pending Pygame events.

        Returns:
            bool: False if the user asked to quit, True otherwise.
        """
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Shutting down host.")
                return False

            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                logging.info("ESC key pressed. Shutting down host.")
                return False

            if self.simulation is None:
                continue

            if event.type == pygame.MOUSEMOTION:
                self.simulation.on_pointer_move(*event.pos)
            elif event.type == pygame.WINDOWLEAVE:
                self.simulation.on_pointer_leave()
            elif event.type == pygame.VIDEORESIZE:
                self._handle_resize(event.w, event.h)
            elif event.type == pygame.WINDOWSIZECHANGED:
                self._handle_resize(event.x, event.y)
        return True

    def run(self, loop: "RenderLoop") -> None:
        """Runs frames until the loop stops requesting ticks or the user quits."""
        loop.start()
        while self._pending is not None:
            if not self.handle_events():
                loop.stop()
                break

            callback, self._pending = self._pending, None
            callback()

            pygame.display.flip()
            self.clock.tick(self.fps)

        self._pending = None
        logging.debug(f"Host loop exited at {self.clock.get_fps():.1f} fps.")

    def close(self) -> None:
        """Shuts down Pygame."""
        pygame.quit()
