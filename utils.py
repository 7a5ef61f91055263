# utils.py
"""
Helpers shared by the driver: logging setup, config loading and parsing
of the startup values. Nothing here touches the physics or the renderers.
"""
import logging
import logging.handlers
import json
import os
from typing import Dict, Any

from constants import LOG_MAX_BYTES, LOG_BACKUP_COUNT

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any]) -> None:
#   - Inputs:
#     - config: the loaded configuration. Its optional "logging" section
#       may set "level", "format", "log_file", "console", "max_bytes"
#       and "backup_count".
#   - Side Effects: Replaces (and closes) every handler on the root
#     logger. Always attaches a rotating file handler; attaches a stderr
#     handler only when "console" is true. Creates the log directory.
#
# load_config(path: str) -> Dict[str, Any]:
#   - Raises FileNotFoundError / json.JSONDecodeError as json does, and
#     ValueError when the document is not a JSON object.

def setup_logging(config: Dict[str, Any]) -> None:
    """
    Routes the root logger to a rotating file and, optionally, the console.

    The console handler defaults to off: the terminal renderer redraws in
    place and interleaved log lines would tear the frame.
    """
    log_config = config.get('logging', {})
    log_level = log_config.get('level', 'INFO').upper()
    log_format = log_config.get('format', '%(asctime)s - %(levelname)s - %(message)s')
    log_file_path = log_config.get('log_file', 'logs/simulation.log')
    max_bytes = log_config.get('max_bytes', LOG_MAX_BYTES)
    backup_count = log_config.get('backup_count', LOG_BACKUP_COUNT)

    log_dir = os.path.dirname(log_file_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(log_level)
    for old in list(root.handlers):
        root.removeHandler(old)
        old.close()

    handlers = [
        logging.handlers.RotatingFileHandler(
            log_file_path, maxBytes=max_bytes, backupCount=backup_count
        )
    ]
    if log_config.get('console', False):
        handlers.append(logging.StreamHandler())

    formatter = logging.Formatter(log_format)
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    logging.info(f"Logging to {log_file_path} at level {log_level}.")
    logging.debug(
        f"Rotation: {max_bytes} bytes x {backup_count} backups; "
        f"console output {'on' if len(handlers) > 1 else 'off'}."
    )

def load_config(path: str) -> Dict[str, Any]:
    """Reads the JSON run configuration."""
    logging.info(f"Reading run configuration from {path}.")
    try:
        with open(path, 'r') as f:
            config = json.load(f)
    except FileNotFoundError:
        logging.error(f"No configuration file at {path}.")
        raise
    except json.JSONDecodeError as e:
        logging.error(f"Malformed JSON in {path}: {e}")
        raise
    if not isinstance(config, dict):
        msg = f"Configuration in {path} must be a JSON object, got {type(config).__name__}."
        logging.error(msg)
        raise ValueError(msg)
    return config

def parse_positive_int(text: str) -> int:
    """Parses a strictly positive integer, raising ValueError otherwise."""
    value = int(text)
    if value <= 0:
        raise ValueError(f"expected a positive integer, got {text!r}")
    return value

def parse_positive_float(text: str) -> float:
    """Parses a strictly positive, finite float, raising ValueError otherwise."""
    value = float(text)
    if not 0.0 < value < float('inf'):
        raise ValueError(f"expected a positive number, got {text!r}")
    return value
