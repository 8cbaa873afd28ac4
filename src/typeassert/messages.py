# ===== MODULE DOCSTRING ===== #
"""
Failure message construction for typeassert.

This module turns the pieces of a failed assertion into readable text:
- display names and qualified identities of types
- value formatting for message arguments
- reason sanitizing ("because ..." prefixing)
- template rendering of positional `{0}` placeholders and the `{reason}` token
- the type difference message used by equality assertions

Display names are resolved so that two distinct types never print the same
way inside one message. When two types share a display name the message
falls back to qualified identities that include the defining module's file,
and, if even those coincide, the object id.
"""

# ===== IMPORTS ===== #

## ===== STANDARD LIBRARY ===== ##
from functools import lru_cache
import collections.abc
from typing import (
    Any, Final, ForwardRef, List, Literal, NamedTuple,
    Optional, Sequence, Tuple, TypeVar, Union
)
import logging
import re
import sys

try:
    from types import UnionType # >= 3.10
except ImportError:
    UnionType = None

## ===== THIRD PARTY ===== ##
# typing_extensions versions understand Annotated on every supported Python
from typing_extensions import Annotated, get_args, get_origin

## ===== LOCAL ===== ##
from .config import (
    REASON_KEYWORD, REASON_TOKEN, MAX_VALUE_REPR_LENGTH, MISSING_REPR,
    BUILTIN_ORIGIN, UNKNOWN_ORIGIN
)
from .markers import MISSING
from .logging import _log

# ===== GLOBALS ===== #

## ===== TYPE ALIASES ===== ##
NoneType: Final[type] = type(None)

## ===== PATTERNS ===== ##
_PLACEHOLDER: Final[re.Pattern] = re.compile(r'\{(' + re.escape(REASON_TOKEN) + r'|\d+)\}')

## ===== EXPORTS ===== ##
__all__: Final[List[str]] = [
    'TemplatedMessage',
    'Verbatim',
    'display_name',
    'format_type_for_display',
    'format_value',
    'qualified_identity',
    'render',
    'sanitize_reason',
    'type_difference_message',
    'type_origin',
]

# ===== CLASSES ===== #

class Verbatim(str):
    """Message argument inserted as-is, without value formatting."""
    __slots__ = ()

class TemplatedMessage(NamedTuple):
    """A template together with the positional arguments it refers to."""
    template: str
    args: Tuple[Any, ...] = ()

# ===== FUNCTIONS ===== #

## ===== TYPE NAMES ===== ##
def _is_plain_class(tp: Any) -> bool:
    # list[int] passes isinstance(..., type) before 3.11, Any is a class from 3.11
    return isinstance(tp, type) and tp is not Any and get_origin(tp) is None

def _is_union_origin(origin: Any) -> bool:
    return origin is Union or (UnionType is not None and origin is UnionType)

def display_name(tp: Any) -> str:
    """Namespace-qualified printable name of a type.

    Classes render as ``module.QualName`` (``builtins`` is left out), typing
    constructs through `format_type_for_display`.
    """
    if tp is NoneType:
        return "None"
    if _is_plain_class(tp):
        module = getattr(tp, '__module__', None)
        qualname = getattr(tp, '__qualname__', None) or tp.__name__
        if not module or module == 'builtins':
            return qualname
        return f"{module}.{qualname}"
    return format_type_for_display(tp)

def format_type_for_display(tp: Any) -> str:
    """Format a type annotation into a user-friendly string representation.

    Handles Optional, Union, Literal, Annotated, Callable and parameterized
    generics, formatting every nested class through `display_name`. Results
    are cached; constructs that cannot be hashed (e.g. `Annotated` with dict
    metadata) are formatted on every call.

    Args:
        tp: The type annotation.

    Returns:
        A string representation of the type.
    """
    try:
        hash(tp)
    except TypeError:
        if _log.isEnabledFor(logging.DEBUG):
            _log.debug(f"TRACE messages.format_type_for_display: {tp!r} is unhashable, formatting without cache.")
        return _format_type(tp)
    return _format_type_cached(tp)

def _format_type(tp: Any) -> str:
    if tp is Any: return "Any"
    if tp is None or tp is NoneType: return "None"
    if tp is Ellipsis: return "..."
    if isinstance(tp, TypeVar): return str(tp)
    if isinstance(tp, ForwardRef): return tp.__forward_arg__

    origin = get_origin(tp)
    args = get_args(tp)

    if origin is Annotated:
        metadata = ", ".join(repr(m) for m in args[1:])
        result = f"Annotated[{display_name(args[0])}, {metadata}]"
    elif _is_union_origin(origin):
        if len(args) == 2 and NoneType in args:
            inner = args[0] if args[1] is NoneType else args[1]
            result = f"Optional[{display_name(inner)}]"
        else:
            result = f"Union[{', '.join(display_name(a) for a in args)}]"
    elif origin is Literal:
        result = f"Literal[{', '.join(repr(a) for a in args)}]"
    elif origin is collections.abc.Callable:
        if len(args) == 2 and isinstance(args[0], list):
            params = ", ".join(display_name(a) for a in args[0])
            result = f"Callable[[{params}], {display_name(args[1])}]"
        else:
            result = "Callable"
    elif origin is not None:
        origin_name = getattr(origin, '__name__', str(origin))
        if args:
            result = f"{origin_name}[{', '.join(display_name(a) for a in args)}]"
        else:
            result = origin_name
    elif _is_plain_class(tp):
        result = display_name(tp)
    else:
        result = str(tp)

    if _log.isEnabledFor(logging.DEBUG):
        _log.debug(f"TRACE messages.format_type_for_display: Formatted {tp!r} -> '{result}'")
    return result

_format_type_cached = lru_cache(maxsize=512)(_format_type)

def _defining_file(cls: type) -> Optional[str]:
    """Source file of the first function defined in the class body, if any."""
    for member in vars(cls).values():
        if isinstance(member, property):
            member = member.fget
        func = getattr(member, "__func__", member)
        code = getattr(func, "__code__", None)
        # Generated methods (dataclasses, namedtuple) report "<string>"
        if code is not None and not code.co_filename.startswith("<"):
            return code.co_filename
    return None

def type_origin(tp: Any) -> str:
    """Where a type comes from: the file it was defined in, or a placeholder.

    A class with methods reports the file those methods were compiled from,
    so two same-named classes loaded from different files stay apart even
    after one module replaced the other in `sys.modules`. Otherwise the
    file of the module named by `__module__` is used.
    """
    if get_origin(tp) is Annotated:
        return type_origin(get_args(tp)[0])
    base = tp if _is_plain_class(tp) else (get_origin(tp) or tp)
    if _is_plain_class(base) and base.__module__ != "builtins":
        filename = _defining_file(base)
        if filename:
            return filename
    module_name = getattr(base, '__module__', None)
    if module_name == 'builtins':
        return BUILTIN_ORIGIN
    module = sys.modules.get(module_name) if module_name else None
    if module is None:
        return UNKNOWN_ORIGIN
    return getattr(module, '__file__', None) or module_name

def qualified_identity(tp: Any, disambiguate: bool = False) -> str:
    """Display name plus origin tag, optionally with the object id.

    Args:
        tp: The type to describe.
        disambiguate: Append ``id=0x...`` so that distinct objects sharing
            module, name and file still print differently.
    """
    identity = f"{display_name(tp)}, {type_origin(tp)}"
    if disambiguate:
        identity += f", id={id(tp):#x}"
    return identity

## ===== VALUES ===== ##
def format_value(value: Any) -> str:
    """Format a message argument for display."""
    if isinstance(value, Verbatim):
        return str(value)
    if value is MISSING:
        return MISSING_REPR
    if _is_plain_class(value) or get_origin(value) is not None:
        return display_name(value)
    value_repr = repr(value)
    if len(value_repr) > MAX_VALUE_REPR_LENGTH:
        value_repr = value_repr[:MAX_VALUE_REPR_LENGTH] + "..."
    return value_repr

## ===== REASONS ===== ##
def sanitize_reason(reason: str = '', *reason_args: Any) -> str:
    """Format a reason and make sure it starts with 'because'.

    Returns an empty string when no reason was given.
    """
    if not reason:
        return ''
    text = reason.format(*reason_args) if reason_args else reason
    text = text.strip()
    if not text:
        return ''
    if not text.lower().startswith(REASON_KEYWORD):
        text = f"{REASON_KEYWORD} {text}"
    return text

## ===== TEMPLATES ===== ##
def render(template: str, args: Sequence[Any] = (), reason: str = '') -> str:
    """Substitute positional placeholders and the reason token in one pass.

    The reason is inserted with a single leading space, or dropped entirely
    when empty. Substituted text is never scanned again, so braces inside
    values or reasons are left alone.
    """
    formatted = [format_value(a) for a in args]

    def _substitute(match: re.Match) -> str:
        key = match.group(1)
        if key == REASON_TOKEN:
            return f" {reason}" if reason else ''
        return formatted[int(key)]

    message = _PLACEHOLDER.sub(_substitute, template)
    if _log.isEnabledFor(logging.DEBUG):
        _log.debug(f"TRACE messages.render: Rendered message (length={len(message)}).")
    return message

## ===== TYPE DIFFERENCE ===== ##
def type_difference_message(actual: Any, expected: Any) -> TemplatedMessage:
    """Describe how `actual` differs from `expected`.

    Returns an empty template when both are the same type. When the two
    display names collide, both sides are shown as bracketed qualified
    identities instead.
    """
    if actual == expected:
        return TemplatedMessage('')

    expected_name = display_name(expected)
    actual_name = display_name(actual)

    if expected_name == actual_name:
        expected_identity = qualified_identity(expected)
        actual_identity = qualified_identity(actual)
        if expected_identity == actual_identity:
            expected_identity = qualified_identity(expected, disambiguate=True)
            actual_identity = qualified_identity(actual, disambiguate=True)
        expected_name = f"[{expected_identity}]"
        actual_name = f"[{actual_identity}]"
        if _log.isEnabledFor(logging.DEBUG):
            _log.debug(f"TRACE messages.type_difference_message: Display names collide, using {expected_name} and {actual_name}")

    return TemplatedMessage(
        "Expected type to be {0}{reason}, but found {1}.",
        (Verbatim(expected_name), Verbatim(actual_name))
    )
