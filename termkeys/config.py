"""Configuration loader and validator for termkeys.

Provides ``load_config(path)`` which reads a JSON config (with comment and
trailing-comma tolerant sanitizer), falling back to
``~/.config/termkeys/config.json``.

Also provides ``validate_config(conf)`` which normalizes and validates
config keys, raising ``ValueError`` on invalid values.
"""

from __future__ import annotations

import json
import logging
import os
import re

logger = logging.getLogger(__name__)

USER_CONFIG_PATH = '~/.config/termkeys/config.json'

# Single source of truth for default configuration
DEFAULT_CONFIG: dict = {
    'fps': 30,
    'read_size': 32,
    'poll_timeout': 0.05,
    'debug': False,
}


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------

def _sanitize_json_text(s: str) -> str:
    """Remove ``#``/``//`` comments and trailing commas from JSON-like text."""
    # Hash-style line comments
    s = re.sub(r"^[ \t]*#.*$", "", s, flags=re.MULTILINE)
    # C++-style line comments
    s = re.sub(r"//.*$", "", s, flags=re.MULTILINE)
    # Trailing commas before } or ]
    s = re.sub(r",[ \t\r\n]+(\}|\])", r"\1", s)
    return s


def _number_in_range(conf: dict, key: str, cast: type, low: float, high: float):
    raw = conf.get(key, DEFAULT_CONFIG[key])
    if isinstance(raw, bool):
        raise ValueError(f"Invalid '{key}': {raw}")
    try:
        value = cast(raw)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid '{key}': {raw}")
    if cast is int and value != raw and not isinstance(raw, str):
        raise ValueError(f"Invalid '{key}': {raw} (must be an integer)")
    if not (low <= value <= high):
        raise ValueError(f"Invalid '{key}': {raw} (must be between {low} and {high})")
    return value


# ------------------------------------------------------------------
# Validation
# ------------------------------------------------------------------

def validate_config(conf: dict | None) -> dict:
    """Validate and normalize configuration dictionary.

    Returns a normalized dict with all expected keys.
    Raises ``ValueError`` on invalid values.
    """
    if conf is None:
        conf = {}

    out = dict(DEFAULT_CONFIG)

    # fps: frames per second of the polling loop
    out['fps'] = _number_in_range(conf, 'fps', float, 1, 240)
    if out['fps'].is_integer():
        out['fps'] = int(out['fps'])

    # read_size: bytes per os.read() on the terminal
    out['read_size'] = _number_in_range(conf, 'read_size', int, 1, 4096)

    # poll_timeout: seconds a reader thread waits before rechecking its stop flag
    out['poll_timeout'] = _number_in_range(conf, 'poll_timeout', float, 0.001, 1.0)

    # debug: boolean
    dbg = conf.get('debug', DEFAULT_CONFIG['debug'])
    if not isinstance(dbg, bool):
        raise ValueError("Invalid 'debug' flag: must be boolean")
    out['debug'] = dbg

    return out


def _read_and_merge(path: str, target_config: dict, debug: bool = False) -> bool:
    """Read a JSON file, validate, and merge into *target_config*.

    Returns True on success, False on any error.
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            raw = f.read()
    except OSError as exc:
        if debug:
            logger.warning("Cannot read config %s: %s", path, exc)
        return False

    try:
        cfg = json.loads(raw)
    except json.JSONDecodeError:
        try:
            cfg = json.loads(_sanitize_json_text(raw))
        except json.JSONDecodeError as exc:
            if debug:
                logger.warning("JSON parse error in %s: %s", path, exc)
            return False

    if not isinstance(cfg, dict):
        if debug:
            logger.warning("Config %s must contain a JSON object", path)
        return False

    try:
        validated = validate_config(cfg)
    except ValueError as verr:
        if debug:
            logger.warning("Invalid config %s: %s", path, verr)
        return False

    # Only override keys explicitly present in source
    for k in cfg:
        if k in validated:
            target_config[k] = validated[k]
    return True


# ------------------------------------------------------------------
# Top-level loader
# ------------------------------------------------------------------

def load_config(config_path: str | None = None, debug: bool = False) -> dict:
    """Load and merge configuration.

    If *config_path* is given, uses only that file (returns defaults if
    the file does not exist). Otherwise falls back to
    ``~/.config/termkeys/config.json``.

    Returns the effective configuration dict (always has all default keys).
    """
    config = dict(DEFAULT_CONFIG)

    path = config_path if config_path is not None else os.path.expanduser(USER_CONFIG_PATH)
    if os.path.exists(path):
        if _read_and_merge(path, config, debug=debug):
            logger.debug("Config loaded from %s", path)
    elif config_path is not None:
        logger.debug("Config file %s not found, using defaults", path)

    return config
