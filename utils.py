# utils.py
"""
Utility functions for the nebula application.

This module provides helpers that are used across different parts of the
application but do not belong to the simulation or rendering: logging
setup, configuration loading, random range sampling and palette parsing.
"""
import logging
import logging.handlers
import json
import os
import re
import numpy as np
from typing import Dict, Any, List, Optional, Sequence, Tuple, Union

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any]) -> None:
#   - Inputs:
#     - config: A dictionary containing a "logging" key with "level",
#       "format", and "log_file" sub-keys. A null "log_file" disables
#       the file handler.
#   - Outputs: None
#   - Side Effects: Configures the root Python logger. Creates a log
#     directory if it doesn't exist. Sets up a console handler and a
#     rotating file handler.
#
# random_range(rng, low, high, size=None) -> float | np.ndarray:
#   - Outputs: Uniform sample(s) in [low, high).
#
# parse_hex_color(value: str) -> Tuple[int, int, int]:
#   - Inputs: A "#RRGGBB" string.
#   - Outputs: The (r, g, b) channels as ints in [0, 255].
#   - Raises: ValueError if the string is not a well-formed color.

HEX_COLOR_PATTERN = re.compile(r"^#[0-9a-fA-F]{6}$")


def setup_logging(config: Dict[str, Any]) -> None:
    """
    Configures the logging system from a configuration dictionary.

    Sets up logging to the console and, unless disabled, a rotating file.
    """
    log_config = config.get('logging', {})
    log_level = log_config.get('level', 'INFO').upper()
    log_format = log_config.get('format', '%(asctime)s - %(levelname)s - %(message)s')
    log_file_path = log_config.get('log_file', 'logs/nebula.log')

    # Get the root logger
    logger = logging.getLogger()
    logger.setLevel(log_level)

    # Clear existing handlers to avoid duplication
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file_path:
        log_dir = os.path.dirname(log_file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        # Rotates when the log reaches 1MB, keeps 5 backup logs.
        file_handler = logging.handlers.RotatingFileHandler(
            log_file_path, maxBytes=1024*1024, backupCount=5
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logging.info("Logging system initialized.")
    logging.debug(f"Log level set to {log_level}.")
    logging.debug(f"Log file path: {log_file_path}")


def load_config(path: str) -> Dict[str, Any]:
    """Loads a JSON configuration file."""
    logging.info(f"Loading configuration from {path}...")
    try:
        with open(path, 'r') as f:
            config = json.load(f)
        logging.info("Configuration loaded successfully.")
        return config
    except FileNotFoundError:
        logging.error(f"Configuration file not found at {path}.")
        raise
    except json.JSONDecodeError:
        logging.error(f"Error decoding JSON from {path}.")
        raise


def random_range(
    rng: np.random.Generator,
    low: float,
    high: float,
    size: Optional[int] = None
) -> Union[float, np.ndarray]:
    """Uniform sample in [low, high). Returns an array when size is given."""
    return rng.uniform(low, high, size)


def parse_hex_color(value: str) -> Tuple[int, int, int]:
    """Decodes a "#RRGGBB" string into its RGB channels."""
    if not isinstance(value, str) or not HEX_COLOR_PATTERN.match(value):
        raise ValueError(f"Invalid color {value!r}: expected '#RRGGBB'.")
    return (int(value[1:3], 16), int(value[3:5], 16), int(value[5:7], 16))


def validate_palette(colors: Sequence[str]) -> List[Tuple[int, int, int]]:
    """
    Decodes every palette entry up front.

    A malformed entry is a configuration defect, so it is reported as
    critical and raised instead of surfacing later while drawing.
    """
    if not colors:
        msg = "Configuration error: the color palette is empty."
        logging.critical(msg)
        raise ValueError(msg)

    decoded = []
    for index, value in enumerate(colors):
        try:
            decoded.append(parse_hex_color(value))
        except ValueError as e:
            msg = f"Configuration error: palette entry {index} is malformed. {e}"
            logging.critical(msg)
            raise ValueError(msg) from e

    logging.debug(f"Palette validated with {len(decoded)} colors.")
    return decoded
