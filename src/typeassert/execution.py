# ===== MODULE DOCSTRING ===== #
"""
Verification context for typeassert.

A `Verification` evaluates one condition. When the condition is false it
renders the failure message and hands the resulting `Failure` to the active
`AssertionScope`; it never raises itself. Scopes nest: an inner scope passes
its failures to its parent when it closes, and the outermost scope raises a
single `TypeAssertionError` listing every failure it collected.

Usage:
    with AssertionScope():
        expect_type(User).equals(Account)
        expect_type(User).is_decorated_with(Table)
    # -> TypeAssertionError reporting both mismatches

    with AssertionScope() as scope:
        expect_type(User).equals(Account)
        failures = scope.discard()  # inspect without raising
"""

# ===== IMPORTS ===== #

## ===== STANDARD LIBRARY ===== ##
from typing import Any, Callable, Final, List, Optional, Tuple, Union
import threading
import logging

## ===== LOCAL ===== ##
from .error_utils import Failure, TypeAssertionError
from .messages import TemplatedMessage, render, sanitize_reason
from .logging import _log

# ===== GLOBALS ===== #

## ===== SCOPE STACK ===== ##
# Per-thread stack of open scopes, innermost last
_SCOPES = threading.local()

## ===== EXPORTS ===== ##
__all__: Final[List[str]] = [
    'AssertionScope',
    'Verification',
    'verification',
]

MessageFactory = Callable[[], TemplatedMessage]

# ===== FUNCTIONS ===== #

def _scope_stack() -> List['AssertionScope']:
    stack = getattr(_SCOPES, 'stack', None)
    if stack is None:
        stack = _SCOPES.stack = []
    return stack

def verification() -> 'Verification':
    """Start verifying a condition against the active scope."""
    return Verification(AssertionScope.current())

# ===== CLASSES ===== #

class AssertionScope:
    """Collects failures until the scope closes."""

    def __init__(self):
        self._failures: List[Failure] = []
        self._parent: Optional['AssertionScope'] = None

    @staticmethod
    def current() -> Optional['AssertionScope']:
        stack = _scope_stack()
        return stack[-1] if stack else None

    @property
    def failures(self) -> Tuple[Failure, ...]:
        return tuple(self._failures)

    def add_failure(self, failure: Failure) -> None:
        if _log.isEnabledFor(logging.INFO):
            _log.info(f"Assertion failed: {failure.message}")
        self._failures.append(failure)

    def discard(self) -> List[Failure]:
        """Return the collected failures and forget them."""
        failures, self._failures = self._failures, []
        return failures

    def __enter__(self) -> 'AssertionScope':
        stack = _scope_stack()
        self._parent = stack[-1] if stack else None
        stack.append(self)
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        stack = _scope_stack()
        if stack and stack[-1] is self:
            stack.pop()
        else:
            _log.warning(f"AssertionScope closed out of order: {self!r}")
            if self in stack:
                stack.remove(self)

        parent, self._parent = self._parent, None
        if exc_type is not None:
            # Errors raised in the body win over collected failures
            return False

        failures = self.discard()
        if not failures:
            return False
        if parent is not None:
            if _log.isEnabledFor(logging.DEBUG):
                _log.debug(f"TRACE execution.AssertionScope.__exit__: Passing {len(failures)} failure(s) to parent scope.")
            for failure in failures:
                parent._failures.append(failure)
            return False
        raise TypeAssertionError(failures)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} failures={len(self._failures)}>"

class Verification:
    """Builder evaluating one condition: for_condition -> because_of -> fail_with."""

    def __init__(self, scope: Optional[AssertionScope] = None):
        self._scope = scope
        self._condition = True
        self._reason = ''
        self._reason_args: Tuple[Any, ...] = ()

    def for_condition(self, condition: bool) -> 'Verification':
        self._condition = bool(condition)
        return self

    def because_of(self, reason: str = '', *reason_args: Any) -> 'Verification':
        self._reason = reason or ''
        self._reason_args = reason_args
        return self

    def fail_with(self, template: Union[str, MessageFactory], *args: Any) -> bool:
        """Report a failure if the condition is false.

        Args:
            template: Message template with `{0}`-style placeholders and a
                `{reason}` token, or a callable returning a `TemplatedMessage`
                so that the message is only built on failure.
            *args: Values for the positional placeholders.

        Returns:
            The condition. Nothing is formatted when it is true.

        Raises:
            TypeAssertionError: Only when no scope is active.
        """
        if self._condition:
            return True

        if callable(template):
            template, args = template()
        reason = sanitize_reason(self._reason, *self._reason_args)
        failure = Failure(message=render(template, args, reason), template=template, reason=reason)

        if self._scope is None:
            raise TypeAssertionError([failure])
        self._scope.add_failure(failure)
        return False
