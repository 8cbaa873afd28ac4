# ===== MODULE DOCSTRING ===== #
"""
typeassert Logging Configuration

Every typeassert module logs through the single ``typeassert`` logger set up
here. The matcher, the message builders and the assertion scopes emit
``TRACE``-prefixed debug lines describing each check as it runs; they stay
silent unless the level is lowered to DEBUG.

Defaults:
- Output: standard error (sys.stderr)
- Format: "%(levelname)s:%(name)s: %(message)s"
- Level: WARNING, or the level named by the TYPEASSERT_LOG_LEVEL
  environment variable when the package is first imported

Usage:
    from typeassert.logging import set_verbosity

    set_verbosity("DEBUG")   # or logging.DEBUG

    # from the shell, without touching test code:
    #   TYPEASSERT_LOG_LEVEL=debug pytest tests/
"""

# ===== IMPORTS ===== #

## ===== STANDARD LIBRARY ===== ##
from typing import Dict, Final, List, Optional, Union
import logging
import os
import sys

## ===== LOCAL ===== ##
from .config import LOG_LEVEL_ENV_VAR

# ===== GLOBALS ===== #

## ===== CONSTANTS ===== ##
LOG_FORMAT: Final[str] = '%(levelname)s:%(name)s: %(message)s'

DEFAULT_LEVEL: Final[int] = logging.WARNING

LEVEL_NAMES: Final[Dict[str, int]] = {
    'DEBUG': logging.DEBUG,
    'INFO': logging.INFO,
    'WARNING': logging.WARNING,
    'ERROR': logging.ERROR,
    'CRITICAL': logging.CRITICAL,
}

VALID_LEVELS: Final[List[int]] = list(LEVEL_NAMES.values())

## ===== EXPORTS ===== ##
__all__: Final[List[str]] = [
    'logger',
    'set_verbosity',
]

# ===== FUNCTIONS ===== #

def _resolve_level(level: Union[int, str]) -> int:
    """Turn a level constant or a case-insensitive level name into a constant."""
    if isinstance(level, str):
        resolved = LEVEL_NAMES.get(level.strip().upper())
    else:
        resolved = level if level in VALID_LEVELS else None
    if resolved is None:
        raise ValueError(
            f"Invalid logging level: {level!r}. "
            f"Use a logging module constant (e.g., logging.DEBUG) or its name. "
            f"Valid levels: {list(LEVEL_NAMES)}"
        )
    return resolved

def _level_from_environment() -> Optional[int]:
    value = os.environ.get(LOG_LEVEL_ENV_VAR)
    if not value:
        return None
    try:
        return _resolve_level(value)
    except ValueError:
        # A typo in the environment must not break importing the package
        sys.stderr.write(f"typeassert: ignoring {LOG_LEVEL_ENV_VAR}={value!r}, not a logging level\n")
        return None

## ===== LOGGER SETUP ===== ##
_log: Final[logging.Logger] = logging.getLogger('typeassert')

# Only configure once, even if the module is reloaded
if not _log.handlers:
    _handler = logging.StreamHandler(sys.stderr)
    _handler.setFormatter(logging.Formatter(LOG_FORMAT))
    _log.addHandler(_handler)
    _log.propagate = True
    _env_level = _level_from_environment()
    _log.setLevel(_env_level if _env_level is not None else DEFAULT_LEVEL)

## ===== PUBLIC API ALIAS ===== ##
logger = _log

def set_verbosity(level: Union[int, str]) -> None:
    """Set the logging verbosity level for the typeassert logger.

    Args:
        level: A logging level constant (e.g. logging.DEBUG) or its name,
            in any case (e.g. "debug").

    Raises:
        ValueError: If `level` is not one of the standard logging levels.
    """
    resolved = _resolve_level(level)
    _log.setLevel(resolved)
    if _log.isEnabledFor(logging.DEBUG):
        _log.debug(f"TRACE logging.set_verbosity: typeassert verbosity set to {logging.getLevelName(resolved)}")
