# ===== MODULE DOCSTRING ===== #
"""Failure records and the exception raised when type assertions fail."""

# ===== IMPORTS ===== #

## ===== STANDARD LIBRARY ===== ##
from typing import Final, Iterable, List, Tuple
import dataclasses

# ===== GLOBALS ===== #

## ===== EXPORTS ===== ##
__all__: Final[List[str]] = [
    'Failure',
    'TypeAssertionError',
]

# ===== CLASSES ===== #

@dataclasses.dataclass(frozen=True)
class Failure:
    """Holds the details of one failed condition.

    Attributes:
        message (str): The fully rendered failure message.
        template (str): The template the message was rendered from.
        reason (str): The sanitized reason (already prefixed with 'because'),
            or an empty string when none was given.
    """
    message: str
    template: str
    reason: str = ''

    def __str__(self) -> str:
        return self.message

class TypeAssertionError(AssertionError):
    """Raised when the outermost assertion scope closes with failures."""
    def __init__(self, failures: Iterable[Failure]):
        self.failures: Tuple[Failure, ...] = tuple(failures)
        super().__init__("\n".join(f.message for f in self.failures))

    @property
    def messages(self) -> List[str]:
        return [f.message for f in self.failures]
