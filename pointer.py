# pointer.py
"""
Tracks the pointer over the drawing surface.

The "moving" flag is debounced with a stored deadline instead of a host
timer: every move event pushes the deadline forward, and the flag reads
false once the clock reaches it without another move.
"""
import logging
import time
from typing import Callable, Optional, Tuple

from constants import POINTER_MOVE_DEBOUNCE

# --- Data Contracts ---
#
# class PointerState:
#   - __init__(self, debounce: float = POINTER_MOVE_DEBOUNCE,
#              clock: Callable[[], float] = time.monotonic):
#     - Inputs:
#       - debounce: Quiet window in seconds before the pointer is "stopped".
#       - clock: Monotonic time source, injectable for tests.
#
#   - on_move(self, x: float, y: float) -> None:
#     - Side Effects: Sets position, re-arms the debounce deadline.
#
#   - on_leave(self) -> None:
#     - Side Effects: Clears position and cancels the deadline.
#
#   - snapshot(self) -> Tuple[Optional[Tuple[float, float]], bool]:
#     - Outputs: (position, is_moving) read at a single instant.
#     - Invariants: is_moving is False whenever position is None.

Position = Tuple[float, float]


class PointerState:
    """
    Last known pointer position plus a debounced "is moving" flag.
    """
    def __init__(
        self,
        debounce: float = POINTER_MOVE_DEBOUNCE,
        clock: Callable[[], float] = time.monotonic
    ):
        self.debounce = debounce
        self._clock = clock
        self._position: Optional[Position] = None
        self._deadline: Optional[float] = None

    @property
    def position(self) -> Optional[Position]:
        return self._position

    @property
    def is_moving(self) -> bool:
        if self._position is None or self._deadline is None:
            return False
        return self._clock() < self._deadline

    def on_move(self, x: float, y: float) -> None:
        if self._position is None:
            logging.debug(f"Pointer entered surface at ({x:.0f}, {y:.0f}).")
        self._position = (x, y)
        self._deadline = self._clock() + self.debounce

    def on_leave(self) -> None:
        if self._position is not None:
            logging.debug("Pointer left surface.")
        self._position = None
        self._deadline = None

    def snapshot(self) -> Tuple[Optional[Position], bool]:
        """Reads position and moving flag together for one tick."""
        return self._position, self.is_moving
