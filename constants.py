# constants.py
"""
Application-level constants.

These values are static and do not change between simulation runs.
They define the look and feel of the nebula: particle counts, spawn
ranges, pointer forces, the trail overlay and the default window.
None of them are part of the run configuration in config.json.
"""
import math

# Visualization settings
# Set to True to run in borderless fullscreen mode.
# Set to False to run in a resizable window (WINDOW_WIDTH x WINDOW_HEIGHT).
FULLSCREEN = False
WINDOW_WIDTH = 1280
WINDOW_HEIGHT = 720
FPS = 60
WINDOW_TITLE = "Nebula"
BACKGROUND_COLOR = (0, 0, 5)

# --- Trail Effect ---
# Translucent near-black rectangle painted over the previous frame every tick.
# Old pixels fade toward black instead of being erased, leaving motion trails.
TRAIL_OVERLAY_COLOR = (0, 0, 5, 0.1)

# --- Particle Field ---
PARTICLE_COUNT = 500
# Scales min(width, height) to get the maximum spawn distance from the center.
CENTRAL_BIAS_FACTOR = 0.5
# A particle further than this fraction of max(width, height) from the center is respawned.
RESET_DISTANCE_FACTOR = 0.9

# Spawn ranges, sampled as [low, high)
OPACITY_RANGE = (0.5, 1.0)
RADIUS_RANGE = (0.5, 2.5)
SPEED_RANGE = (0.1, 0.5)
FADE_SPEED_RANGE = (0.002, 0.008)
# Velocity direction jitter around the outward spawn angle.
DIRECTION_JITTER = math.pi / 8

# --- Pointer Interaction ---
# No force is applied inside this radius around the pointer.
POINTER_DEAD_ZONE = 20.0
# Pull toward a moving pointer is stronger than the push away from a still one.
POINTER_PULL_STRENGTH = 0.1
POINTER_PUSH_STRENGTH = 0.05
# Seconds without a move event before the pointer counts as stationary.
POINTER_MOVE_DEBOUNCE = 0.150

FRICTION = 0.97

# Nebula color palette
NEBULA_COLORS = [
    "#FFFFFF",
    "#E0EFFF",
    "#C0DFFF",
    "#A0CFFF",
    "#80BFFF",
    "#60AFFF",
    "#409FFF",
    "#70DFFF",
    "#A0EFFF",
    "#D0D0FF",
]
