# ===== MODULE DOCSTRING ===== #
"""
Markers: metadata attached to classes, and the logic that inspects them.

A marker is any object attached to a class with `decorate` (or by applying a
`Marker` instance as a class decorator). Its kind is its class: asking for
markers of kind ``K`` yields every attached marker that is an instance of
``K``, in the order they were attached.

Usage:
    @dataclasses.dataclass(frozen=True)
    class Table(Marker):
        name: str
        schema: str = 'public'

    @Table(name='users')
    class User:
        pass

    matcher = MarkerMatcher()
    matcher.exists(User, Table)                            # True
    matcher.match_property(User, Table, 'name', 'users')   # PropertyMatch(True, 'users')
"""

# ===== IMPORTS ===== #

## ===== STANDARD LIBRARY ===== ##
from typing import (
    Any, Callable, Dict, Final, Iterator, List, Mapping, NamedTuple,
    Optional, Sequence, Tuple, TypeVar
)
import inspect
import logging
import types

## ===== THIRD PARTY ===== ##
from typing_extensions import Protocol, Self, runtime_checkable

## ===== LOCAL ===== ##
from .config import _MARKERS_ATTR, MISSING_REPR
from .logging import _log

# ===== GLOBALS ===== #

_T = TypeVar('_T', bound=type)

## ===== EXPORTS ===== ##
__all__: Final[List[str]] = [
    'MISSING',
    'ClassMarkerSource',
    'Marker',
    'MarkerConstraints',
    'MarkerMatcher',
    'MarkerSource',
    'PropertyMatch',
    'decorate',
    'markers_of',
]

# ===== SENTINELS ===== #

class _Missing:
    """Stands for a value that could not be read."""
    _instance: Optional['_Missing'] = None

    def __new__(cls) -> '_Missing':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return MISSING_REPR

    def __bool__(self) -> bool:
        return False

MISSING: Final[_Missing] = _Missing()

# ===== ATTACHING MARKERS ===== #

def markers_of(cls: type) -> Tuple[Any, ...]:
    """Markers attached directly to `cls` (inherited ones are not included)."""
    return cls.__dict__.get(_MARKERS_ATTR, ())

def decorate(*markers: Any) -> Callable[[_T], _T]:
    """Class decorator attaching `markers` to the decorated class.

    Stacked decorators are applied bottom-up by Python; markers are stored so
    that they read top-to-bottom as written in the source.
    """
    def _apply(cls: _T) -> _T:
        if not isinstance(cls, type):
            raise TypeError(f"Markers can only decorate classes, got {cls!r}")
        setattr(cls, _MARKERS_ATTR, tuple(markers) + markers_of(cls))
        if _log.isEnabledFor(logging.DEBUG):
            _log.debug(f"TRACE markers.decorate: {cls.__qualname__} now carries {markers_of(cls)!r}")
        return cls
    return _apply

class Marker:
    """Base class for markers that act as their own class decorator.

    Subclasses are usually frozen dataclasses; applying an instance to a
    class attaches it::

        @Table(name='users')
        class User: ...
    """

    def __call__(self, cls: _T) -> _T:
        return decorate(self)(cls)

# ===== INTROSPECTION ===== #

@runtime_checkable
class MarkerSource(Protocol):
    """Produces the markers of a kind attached to a type."""

    def get_markers(self, tp: Any, kind: type) -> Sequence[Any]:
        ...

    def get_property(self, marker: Any, name: str) -> Any:
        ...

class ClassMarkerSource:
    """Reads markers stored on classes by `decorate`.

    Args:
        inherit: Also collect markers attached to base classes, walking the
            MRO from the most derived class.
    """

    def __init__(self, inherit: bool = False):
        self.inherit = inherit

    def get_markers(self, tp: Any, kind: type) -> Sequence[Any]:
        if not isinstance(tp, type):
            return ()
        classes = inspect.getmro(tp) if self.inherit else (tp,)
        found = [m for cls in classes for m in markers_of(cls) if isinstance(m, kind)]
        if _log.isEnabledFor(logging.DEBUG):
            _log.debug(f"TRACE markers.ClassMarkerSource.get_markers: {len(found)} marker(s) of {kind!r} on {tp!r} (inherit={self.inherit})")
        return tuple(found)

    def get_property(self, marker: Any, name: str) -> Any:
        return getattr(marker, name, MISSING)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(inherit={self.inherit})"

# ===== CONSTRAINTS ===== #

class MarkerConstraints:
    """Immutable, ordered set of expected marker property values.

    Built fluently; every step returns a new instance::

        MarkerConstraints().with_property('name', 'users').with_property('schema', 'public')

    Registering the same property twice keeps its first position and the last
    value.
    """
    __slots__ = ('_expected',)

    def __init__(self, expected: Optional[Mapping[str, Any]] = None):
        self._expected: Dict[str, Any] = dict(expected or {})

    @classmethod
    def from_mapping(cls, expected: Mapping[str, Any]) -> 'MarkerConstraints':
        return cls(expected)

    def with_property(self, name: str, expected_value: Any) -> Self:
        expected = dict(self._expected)
        expected[name] = expected_value
        return type(self)(expected)

    @property
    def expected_properties(self) -> Mapping[str, Any]:
        return types.MappingProxyType(self._expected)

    def __iter__(self) -> Iterator[Tuple[str, Any]]:
        return iter(list(self._expected.items()))

    def __len__(self) -> int:
        return len(self._expected)

    def __bool__(self) -> bool:
        return bool(self._expected)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MarkerConstraints):
            return NotImplemented
        return list(self._expected.items()) == list(other._expected.items())

    def __repr__(self) -> str:
        pairs = ", ".join(f"{k}={v!r}" for k, v in self._expected.items())
        return f"{type(self).__name__}({pairs})"

# ===== MATCHING ===== #

class PropertyMatch(NamedTuple):
    matched: bool
    actual: Any

class MarkerMatcher:
    """Checks presence of markers on a type and the values of their properties."""

    def __init__(self, source: Optional[MarkerSource] = None):
        self.source: MarkerSource = source if source is not None else ClassMarkerSource()

    def exists(self, subject: Any, kind: type) -> bool:
        for _ in self.source.get_markers(subject, kind):
            return True
        return False

    def match_property(self, subject: Any, kind: type, name: str, expected_value: Any) -> PropertyMatch:
        """Find the first marker of `kind` whose `name` property equals `expected_value`.

        Returns:
            ``PropertyMatch(True, value)`` for the first matching marker, or
            ``PropertyMatch(False, value)`` carrying the value read from the
            last marker scanned (`MISSING` when there were no markers).
            An expected value of MISSING never matches, and neither does a
            property the marker does not have. None compares like any value.
        """
        actual: Any = MISSING
        for marker in self.source.get_markers(subject, kind):
            actual = self.source.get_property(marker, name)
            if _values_match(actual, expected_value):
                if _log.isEnabledFor(logging.DEBUG):
                    _log.debug(f"TRACE markers.MarkerMatcher.match_property: {name}={actual!r} matched on {marker!r}")
                return PropertyMatch(True, actual)
        if _log.isEnabledFor(logging.DEBUG):
            _log.debug(f"TRACE markers.MarkerMatcher.match_property: No {kind!r} on {subject!r} has {name}={expected_value!r}; last seen {actual!r}")
        return PropertyMatch(False, actual)

def _values_match(actual: Any, expected: Any) -> bool:
    if expected is MISSING or actual is MISSING:
        return False
    return bool(actual == expected)
