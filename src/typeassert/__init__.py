# ===== MODULE DOCSTRING ===== #
"""
typeassert: fluent assertions about types and the markers decorating them.

Usage:
    from typeassert import expect_type, Marker, MarkerConstraints

    @dataclasses.dataclass(frozen=True)
    class Table(Marker):
        name: str

    @Table(name='users')
    class User:
        pass

    expect_type(User).equals(User).and_.is_decorated_with(
        Table, constraints={'name': 'users'})
"""

# ===== IMPORTS ===== #

## ===== STANDARD LIBRARY ===== ##
from typing import Final, List

## ===== LOCAL ===== ##
from .error_utils import Failure, TypeAssertionError
from .execution import AssertionScope, Verification, verification
from .markers import (
    MISSING, ClassMarkerSource, Marker, MarkerConstraints,
    MarkerMatcher, MarkerSource, PropertyMatch, decorate, markers_of
)
from .type_assertions import AndConstraint, TypeAssertions, expect_type
from .logging import logger, set_verbosity

# ===== GLOBALS ===== #

__version__: Final[str] = '0.1.0'

## ===== EXPORTS ===== ##
__all__: Final[List[str]] = [
    'AndConstraint',
    'AssertionScope',
    'ClassMarkerSource',
    'Failure',
    'MISSING',
    'Marker',
    'MarkerConstraints',
    'MarkerMatcher',
    'MarkerSource',
    'PropertyMatch',
    'TypeAssertionError',
    'TypeAssertions',
    'Verification',
    'decorate',
    'expect_type',
    'logger',
    'markers_of',
    'set_verbosity',
    'verification',
]
