# ===== MODULE DOCSTRING ===== #
"""Configuration constants for the typeassert package."""

# ===== IMPORTS ===== #

## ===== STANDARD LIBRARY ===== ##
from typing import Final

# ===== MARKERS ===== #
# Attribute under which `decorate` stores the marker tuple on a class
_MARKERS_ATTR: Final[str] = '__typeassert_markers__'

# ===== MESSAGES ===== #
# Word a reason must start with; prepended when missing
REASON_KEYWORD: Final[str] = 'because'

# Placeholder token replaced by the sanitized reason inside a template
REASON_TOKEN: Final[str] = 'reason'

# Maximum length of a formatted value inside a failure message
MAX_VALUE_REPR_LENGTH: Final[int] = 200

# Rendering of a value that could not be read from a marker
MISSING_REPR: Final[str] = '<missing>'

# ===== TYPE IDENTITY ===== #
BUILTIN_ORIGIN: Final[str] = '<built-in>'
UNKNOWN_ORIGIN: Final[str] = '<unknown origin>'

# ===== LOGGING ===== #
# Environment variable naming the initial level of the typeassert logger
LOG_LEVEL_ENV_VAR: Final[str] = 'TYPEASSERT_LOG_LEVEL'
