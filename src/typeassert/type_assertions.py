# ===== MODULE DOCSTRING ===== #
"""
Fluent assertions about a type.

Usage:
    from typeassert import expect_type, MarkerConstraints

    expect_type(User).equals(User)
    expect_type(User).not_equals(Account, "accounts are a separate model")
    expect_type(User).is_decorated_with(Table).and_.not_equals(Account)
    expect_type(User).is_decorated_with(
        Table, constraints=MarkerConstraints().with_property('name', 'users'))

Every operation checks its conditions inside its own `AssertionScope`. Used
on its own, a failing operation raises `TypeAssertionError` once all of its
checks have run. Inside an enclosing scope the failures are collected there
instead and the returned `AndConstraint` keeps the chain going.
"""

# ===== IMPORTS ===== #

## ===== STANDARD LIBRARY ===== ##
from typing import Any, Final, List, Mapping, Optional, Union
import logging

## ===== LOCAL ===== ##
from .execution import AssertionScope, verification
from .markers import MarkerConstraints, MarkerMatcher, MarkerSource
from .messages import TemplatedMessage, Verbatim, qualified_identity, type_difference_message
from .logging import _log

# ===== GLOBALS ===== #

## ===== EXPORTS ===== ##
__all__: Final[List[str]] = [
    'AndConstraint',
    'TypeAssertions',
    'expect_type',
]

# ===== CLASSES ===== #

class AndConstraint:
    """Continuation returned by every assertion; `and_` is the same verifier."""
    __slots__ = ('and_',)

    def __init__(self, parent: 'TypeAssertions'):
        self.and_ = parent

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.and_!r})"

class TypeAssertions:
    """Assertions that a type meets certain expectations.

    Each method takes an optional `reason` explaining why the assertion is
    needed, formatted with `*reason_args` through `str.format`. A reason not
    starting with "because" gets it prepended.

    Args:
        subject: The type being asserted on.
        matcher: Marker matcher used by `is_decorated_with`; defaults to one
            reading markers attached with `decorate`.
    """

    def __init__(self, subject: Any, matcher: Optional[MarkerMatcher] = None):
        self._subject = subject
        self.matcher = matcher if matcher is not None else MarkerMatcher()

    @property
    def subject(self) -> Any:
        return self._subject

    def equals(self, expected: Any, reason: str = '', *reason_args: Any) -> AndConstraint:
        """Assert that the subject is the `expected` type."""
        if _log.isEnabledFor(logging.DEBUG):
            _log.debug(f"TRACE type_assertions.equals: {self._subject!r} == {expected!r}?")
        with AssertionScope():
            verification() \
                .for_condition(self._subject == expected) \
                .because_of(reason, *reason_args) \
                .fail_with(lambda: type_difference_message(self._subject, expected))
        return AndConstraint(self)

    def not_equals(self, unexpected: Any, reason: str = '', *reason_args: Any) -> AndConstraint:
        """Assert that the subject is not the `unexpected` type."""
        if _log.isEnabledFor(logging.DEBUG):
            _log.debug(f"TRACE type_assertions.not_equals: {self._subject!r} != {unexpected!r}?")
        with AssertionScope():
            verification() \
                .for_condition(self._subject != unexpected) \
                .because_of(reason, *reason_args) \
                .fail_with(lambda: TemplatedMessage(
                    "Expected type not to be [{0}]{reason}.", (Verbatim(qualified_identity(unexpected)),)))
        return AndConstraint(self)

    def is_decorated_with(
        self,
        marker_kind: type,
        reason: str = '',
        *reason_args: Any,
        constraints: Union[MarkerConstraints, Mapping[str, Any], None] = None
    ) -> AndConstraint:
        """Assert that the subject carries a marker of `marker_kind`.

        Args:
            marker_kind: The marker class to look for.
            reason: Why the assertion is needed.
            *reason_args: Values for placeholders in `reason`.
            constraints: Expected property values. Checked only when a marker
                is present; every property that no marker of the kind
                satisfies is reported separately, in registration order.
        """
        if constraints is not None and not isinstance(constraints, MarkerConstraints):
            constraints = MarkerConstraints.from_mapping(constraints)

        with AssertionScope():
            present = verification() \
                .for_condition(self.matcher.exists(self._subject, marker_kind)) \
                .because_of(reason, *reason_args) \
                .fail_with(
                    "Expected type {0} to be decorated with {1}{reason}, but the marker was not found.",
                    self._subject, marker_kind)

            if present and constraints:
                self._verify_marker_constraints(marker_kind, constraints, reason, reason_args)
        return AndConstraint(self)

    def _verify_marker_constraints(self, marker_kind: type, constraints: MarkerConstraints, reason: str, reason_args: tuple) -> None:
        for name, expected_value in constraints:
            matched, actual_value = self.matcher.match_property(self._subject, marker_kind, name, expected_value)
            if _log.isEnabledFor(logging.DEBUG):
                _log.debug(f"TRACE type_assertions._verify_marker_constraints: {name}: expected={expected_value!r}, actual={actual_value!r}, matched={matched}")
            verification() \
                .for_condition(matched) \
                .because_of(reason, *reason_args) \
                .fail_with(
                    "Expected type {0} to be decorated with {1} ({2} = {3}){reason}, but found ({2} = {4}).",
                    self._subject, marker_kind, Verbatim(name), expected_value, actual_value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._subject!r})"

# ===== FUNCTIONS ===== #

def expect_type(subject: Any, source: Optional[MarkerSource] = None) -> TypeAssertions:
    """Start a chain of assertions about `subject`.

    Args:
        subject: The type under test.
        source: Where markers are read from; defaults to markers attached with
            `decorate`.
    """
    return TypeAssertions(subject, MarkerMatcher(source))
